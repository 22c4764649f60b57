"""Care item router - FastAPI endpoints for the care item catalog"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_api_token
from ...database import get_db
from .schemas import CareItemCreate, CareItemResponse, CareItemUpdate
from .service import CareItemService, to_response

router = APIRouter(
    prefix="/api/care-items", tags=["Care Items"], dependencies=[Depends(require_api_token)]
)


def get_care_item_service(db: Session = Depends(get_db)) -> CareItemService:
    """Dependency injection for CareItemService"""
    return CareItemService(db)


@router.get("", response_model=list[CareItemResponse])
async def get_care_items(
    type: Optional[str] = Query(None, description="procedure or medication"),
    display: bool = Query(False, description="Include a human readable interval"),
    service: CareItemService = Depends(get_care_item_service),
):
    """Get active care items"""
    if display:
        return service.get_care_items_with_display(type)
    return [to_response(c) for c in service.get_care_items(type)]


@router.get("/search", response_model=list[CareItemResponse])
async def search_care_items(
    q: str = Query("", description="Name contains"),
    type: Optional[str] = Query(None),
    service: CareItemService = Depends(get_care_item_service),
):
    """Search active care items by name"""
    return [to_response(c, with_display=True) for c in service.search_care_items(q, type)]


@router.get("/{care_item_id}", response_model=CareItemResponse)
async def get_care_item(
    care_item_id: str,
    service: CareItemService = Depends(get_care_item_service),
):
    return to_response(service.get_care_item(care_item_id), with_display=True)


@router.post("", response_model=CareItemResponse, status_code=201)
async def create_care_item(
    data: CareItemCreate,
    service: CareItemService = Depends(get_care_item_service),
):
    """Create a care item"""
    return to_response(service.create_care_item(data), with_display=True)


@router.patch("/{care_item_id}", response_model=CareItemResponse)
async def update_care_item(
    care_item_id: str,
    data: CareItemUpdate,
    service: CareItemService = Depends(get_care_item_service),
):
    return to_response(service.update_care_item(care_item_id, data), with_display=True)


@router.delete("/{care_item_id}")
async def delete_care_item(
    care_item_id: str,
    service: CareItemService = Depends(get_care_item_service),
):
    """Deactivate a care item"""
    return service.delete_care_item(care_item_id)
