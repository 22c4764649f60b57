"""Care item repository - Database operations for the care item catalog"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import CareItem


class CareItemRepository:
    """Repository for care item database operations"""

    @staticmethod
    def get_care_items(db: Session, item_type: Optional[str] = None) -> list[CareItem]:
        """Active care items, optionally of one type, ordered by name"""
        query = db.query(CareItem).filter(CareItem.is_active.is_(True))
        if item_type:
            query = query.filter(CareItem.type == item_type)
        return query.order_by(CareItem.name).all()

    @staticmethod
    def get_care_item_by_id(db: Session, care_item_id: str) -> Optional[CareItem]:
        return db.query(CareItem).filter(CareItem.id == care_item_id).first()

    @staticmethod
    def find_by_name_and_type(db: Session, name: str, item_type: str) -> Optional[CareItem]:
        return (
            db.query(CareItem)
            .filter(CareItem.name == name, CareItem.type == item_type)
            .first()
        )

    @staticmethod
    def search_care_items(
        db: Session, search_term: str, item_type: Optional[str] = None
    ) -> list[CareItem]:
        query = db.query(CareItem).filter(
            CareItem.is_active.is_(True),
            CareItem.name.ilike(f"%{search_term}%"),
        )
        if item_type:
            query = query.filter(CareItem.type == item_type)
        return query.order_by(CareItem.name).all()

    @staticmethod
    def create_care_item(db: Session, **data) -> CareItem:
        care_item = CareItem(**data)
        db.add(care_item)
        db.commit()
        db.refresh(care_item)
        return care_item

    @staticmethod
    def update_care_item(db: Session, care_item: CareItem, **updates) -> CareItem:
        """Update a care item with provided fields"""
        for key, value in updates.items():
            if hasattr(care_item, key):
                setattr(care_item, key, value)

        db.commit()
        db.refresh(care_item)
        return care_item
