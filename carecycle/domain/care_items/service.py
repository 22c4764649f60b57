"""Care item service - Business logic for the care item catalog"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import CARE_ITEM_TYPES, CareItem
from ...scheduling import format_interval_weeks
from .repository import CareItemRepository
from .schemas import CareItemCreate, CareItemResponse, CareItemUpdate

logger = logging.getLogger(__name__)

MAX_INTERVAL_WEEKS = 520  # 10 years


def validate_care_item_input(
    name: Optional[str], item_type: Optional[str], interval_weeks: Optional[int]
) -> tuple[bool, list[str]]:
    """Check care item values, collecting every problem found"""
    errors = []

    if not name or not name.strip():
        errors.append("항목 이름을 입력해주세요.")

    if item_type not in CARE_ITEM_TYPES:
        errors.append("유효한 항목 유형을 선택해주세요.")

    if not interval_weeks or interval_weeks <= 0:
        errors.append("주기는 1주 이상이어야 합니다.")
    elif interval_weeks > MAX_INTERVAL_WEEKS:
        errors.append("주기는 10년(520주) 이하여야 합니다.")

    return len(errors) == 0, errors


def to_response(care_item: CareItem, with_display: bool = False) -> CareItemResponse:
    response = CareItemResponse.model_validate(care_item)
    if with_display:
        response.interval_display = format_interval_weeks(care_item.interval_weeks)
    return response


class CareItemService:
    """Service layer for care item business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CareItemRepository()

    def _check_type_filter(self, item_type: Optional[str]) -> None:
        if item_type and item_type not in CARE_ITEM_TYPES:
            raise HTTPException(status_code=400, detail=f"Invalid care item type: {item_type}")

    def get_care_items(self, item_type: Optional[str] = None) -> list[CareItem]:
        self._check_type_filter(item_type)
        return self.repo.get_care_items(self.db, item_type)

    def get_care_items_with_display(self, item_type: Optional[str] = None) -> list[CareItemResponse]:
        return [to_response(c, with_display=True) for c in self.get_care_items(item_type)]

    def get_care_item(self, care_item_id: str) -> CareItem:
        care_item = self.repo.get_care_item_by_id(self.db, care_item_id)
        if not care_item:
            raise HTTPException(status_code=404, detail="Care item not found")
        return care_item

    def search_care_items(self, search_term: str, item_type: Optional[str] = None) -> list[CareItem]:
        self._check_type_filter(item_type)
        return self.repo.search_care_items(self.db, (search_term or "").strip(), item_type)

    def _ensure_unique(self, name: str, item_type: str, exclude_id: Optional[str] = None) -> None:
        existing = self.repo.find_by_name_and_type(self.db, name, item_type)
        if existing and existing.id != exclude_id:
            raise HTTPException(
                status_code=409, detail="A care item with this name and type already exists"
            )

    def create_care_item(self, data: CareItemCreate) -> CareItem:
        is_valid, errors = validate_care_item_input(data.name, data.type, data.interval_weeks)
        if not is_valid:
            raise HTTPException(status_code=400, detail={"errors": errors})

        self._ensure_unique(data.name, data.type)

        care_item = self.repo.create_care_item(
            self.db,
            name=data.name,
            type=data.type,
            interval_weeks=data.interval_weeks,
            description=data.description,
        )
        logger.info(f"Created care item {care_item.id} ({care_item.type}: {care_item.name})")
        return care_item

    def update_care_item(self, care_item_id: str, data: CareItemUpdate) -> CareItem:
        care_item = self.get_care_item(care_item_id)
        updates = data.model_dump(exclude_unset=True)

        # Validate the item as it will look after the update
        merged = {
            "name": updates.get("name", care_item.name),
            "type": updates.get("type", care_item.type),
            "interval_weeks": updates.get("interval_weeks", care_item.interval_weeks),
        }
        is_valid, errors = validate_care_item_input(
            merged["name"], merged["type"], merged["interval_weeks"]
        )
        if not is_valid:
            raise HTTPException(status_code=400, detail={"errors": errors})

        if merged["name"] != care_item.name or merged["type"] != care_item.type:
            self._ensure_unique(merged["name"], merged["type"], exclude_id=care_item.id)

        return self.repo.update_care_item(self.db, care_item, **updates)

    def delete_care_item(self, care_item_id: str) -> dict:
        """Soft delete: the item disappears from listings but history keeps it"""
        care_item = self.get_care_item(care_item_id)
        self.repo.update_care_item(self.db, care_item, is_active=False)
        logger.info(f"Deactivated care item {care_item_id}")
        return {"message": "Care item deleted"}
