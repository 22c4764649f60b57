"""Item router - FastAPI endpoints for schedulable items"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import require_api_token
from ...database import get_db
from .repository import ItemRepository
from .schemas import ItemResponse

router = APIRouter(prefix="/api/items", tags=["Items"], dependencies=[Depends(require_api_token)])


@router.get("", response_model=list[ItemResponse])
async def get_items(db: Session = Depends(get_db)):
    """Get all active items (tests and injections)"""
    return ItemRepository.get_active_items(db)
