"""Patient service - Business logic for patient registration and management"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import Patient, PatientSchedule
from ...scheduling import calculate_next_due_date
from ..items.repository import ItemRepository
from .repository import PatientRepository
from .schemas import (
    PatientRegistration,
    PatientResponse,
    PatientScheduleResponse,
    PatientUpdate,
    RegistrationResponse,
    ScheduleItemResponse,
)

logger = logging.getLogger(__name__)

DUPLICATE_PATIENT_MESSAGE = "Patient with this number already exists"


def schedule_to_response(schedule: PatientSchedule) -> PatientScheduleResponse:
    item = schedule.item
    return PatientScheduleResponse(
        id=schedule.id,
        patientId=schedule.patient_id,
        itemId=schedule.item_id,
        firstDate=schedule.first_date,
        nextDueDate=schedule.next_due_date,
        lastCompletedDate=schedule.last_completed_date,
        isActive=schedule.is_active,
        createdAt=schedule.created_at,
        item=ScheduleItemResponse(
            id=item.id,
            name=item.name,
            type=item.type,
            periodValue=item.period_value,
            periodUnit=item.period_unit,
        )
        if item
        else None,
    )


def patient_to_response(patient: Patient) -> PatientResponse:
    return PatientResponse(
        id=patient.id,
        patientNumber=patient.patient_number,
        name=patient.name,
        createdAt=patient.created_at,
        updatedAt=patient.updated_at,
        patientSchedules=[schedule_to_response(s) for s in patient.schedules],
    )


class PatientService:
    """Service layer for patient business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PatientRepository()
        self.item_repo = ItemRepository()

    def get_patients(self) -> list[PatientResponse]:
        return [patient_to_response(p) for p in self.repo.get_patients(self.db)]

    def get_patient(self, patient_id: str) -> Patient:
        patient = self.repo.get_patient_by_id(self.db, patient_id)
        if not patient:
            raise HTTPException(status_code=404, detail="Patient not found")
        return patient

    def search_patients(self, query: str) -> list[PatientResponse]:
        query = (query or "").strip()
        if not query:
            return []
        return [patient_to_response(p) for p in self.repo.search_patients(self.db, query)]

    def register_patient(self, data: PatientRegistration) -> RegistrationResponse:
        """
        Register a patient with one or more schedules.

        The patient, every schedule and the initial pending history rows are
        written in a single commit, so a failure leaves nothing behind.
        """
        item_ids = [s.itemId for s in data.schedules]
        if len(set(item_ids)) != len(item_ids):
            raise HTTPException(status_code=400, detail="Each item can only be scheduled once")

        if self.repo.get_patient_by_number(self.db, data.patientNumber):
            raise HTTPException(status_code=409, detail=DUPLICATE_PATIENT_MESSAGE)

        items = self.item_repo.get_items_by_ids(self.db, item_ids)

        schedules = []
        for entry in data.schedules:
            item = items.get(entry.itemId)
            if not item or not item.is_active:
                raise HTTPException(status_code=400, detail="Invalid item selected")

            # A period given in the request overrides the item's default
            if entry.periodValue and entry.periodUnit:
                period_value, period_unit = entry.periodValue, entry.periodUnit
            else:
                period_value, period_unit = item.period_value, item.period_unit

            try:
                next_due_date = calculate_next_due_date(entry.firstDate, period_value, period_unit)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

            schedules.append(
                {
                    "item_id": item.id,
                    "first_date": entry.firstDate,
                    "next_due_date": next_due_date,
                }
            )

        try:
            patient = self.repo.register_patient(
                self.db, data.patientNumber, data.name, schedules
            )
        except IntegrityError:
            # Lost a race with a concurrent registration of the same number
            self.db.rollback()
            raise HTTPException(status_code=409, detail=DUPLICATE_PATIENT_MESSAGE)

        logger.info(
            f"Registered patient {patient.id} ({patient.patient_number}) with {len(schedules)} schedule(s)"
        )
        return RegistrationResponse(
            success=True,
            patient_id=patient.id,
            message="Patient registered successfully",
        )

    def update_patient(self, patient_id: str, data: PatientUpdate) -> PatientResponse:
        patient = self.get_patient(patient_id)
        patient = self.repo.update_patient(self.db, patient, name=data.name)
        return patient_to_response(patient)

    def deactivate_patient(self, patient_id: str) -> dict:
        """Stop all of a patient's schedules. The patient and history stay."""
        patient = self.get_patient(patient_id)
        changed = self.repo.deactivate_schedules(self.db, patient)
        logger.info(f"Deactivated {changed} schedule(s) for patient {patient_id}")
        return {"success": True, "deactivatedSchedules": changed}
