"""Patient domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_required_text


class ScheduleInput(BaseModel):
    """One item to schedule for a newly registered patient"""

    itemId: str
    firstDate: date
    # Optional override of the item's own period
    periodValue: Optional[int] = Field(None, gt=0)
    periodUnit: Optional[Literal["weeks", "months"]] = None


class PatientRegistration(BaseModel):
    """Schema for registering a patient together with their schedules"""

    patientNumber: str
    name: str
    schedules: list[ScheduleInput] = Field(..., min_length=1)

    @field_validator("patientNumber")
    @classmethod
    def validate_patient_number(cls, v):
        return validate_required_text(v, 50, "Patient number")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return validate_required_text(v, 100, "Patient name")


class PatientUpdate(BaseModel):
    """Only the name can change after registration"""

    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return validate_required_text(v, 100, "Patient name")


class RegistrationResponse(BaseModel):
    success: bool
    patient_id: str
    message: str


class ScheduleItemResponse(BaseModel):
    id: str
    name: str
    type: str
    periodValue: int
    periodUnit: str


class PatientScheduleResponse(BaseModel):
    id: str
    patientId: str
    itemId: str
    firstDate: date
    nextDueDate: date
    lastCompletedDate: Optional[date] = None
    isActive: bool
    createdAt: datetime
    item: Optional[ScheduleItemResponse] = None


class PatientResponse(BaseModel):
    id: str
    patientNumber: str
    name: str
    createdAt: datetime
    updatedAt: datetime
    patientSchedules: list[PatientScheduleResponse] = []
