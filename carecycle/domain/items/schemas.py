"""Item domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

ItemType = Literal["test", "injection"]
PeriodUnit = Literal["weeks", "months"]


class ItemResponse(BaseModel):
    """Schedulable item as stored"""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    type: ItemType
    period_value: int
    period_unit: PeriodUnit
    is_active: bool
    created_at: datetime
    updated_at: datetime
