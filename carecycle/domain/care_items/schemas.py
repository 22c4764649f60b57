"""Care item schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ...shared.validators import clean_text


class CareItemCreate(BaseModel):
    """Schema for creating a care item. Value rules are checked by the service."""

    name: str
    type: str
    interval_weeks: int
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        return clean_text(v, 200, "Name")

    @field_validator("description")
    @classmethod
    def strip_description(cls, v):
        return clean_text(v, 1000, "Description") or None


class CareItemUpdate(BaseModel):
    """Schema for a partial care item update"""

    name: Optional[str] = None
    type: Optional[str] = None
    interval_weeks: Optional[int] = None
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        return clean_text(v, 200, "Name")

    @field_validator("description")
    @classmethod
    def strip_description(cls, v):
        return clean_text(v, 1000, "Description")


class CareItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    type: str
    interval_weeks: int
    description: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
    interval_display: Optional[str] = None
