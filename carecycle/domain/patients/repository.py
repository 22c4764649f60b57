"""Patient repository - Database operations for patients"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from ...models import Patient, PatientSchedule, ScheduleHistory

SEARCH_LIMIT = 20


def _with_schedules(query):
    return query.options(selectinload(Patient.schedules).selectinload(PatientSchedule.item))


class PatientRepository:
    """Repository for patient database operations"""

    @staticmethod
    def get_patients(db: Session) -> list[Patient]:
        """All patients with schedules, newest first"""
        return _with_schedules(db.query(Patient)).order_by(Patient.created_at.desc()).all()

    @staticmethod
    def get_patient_by_id(db: Session, patient_id: str) -> Optional[Patient]:
        return _with_schedules(db.query(Patient)).filter(Patient.id == patient_id).first()

    @staticmethod
    def get_patient_by_number(db: Session, patient_number: str) -> Optional[Patient]:
        return db.query(Patient).filter(Patient.patient_number == patient_number).first()

    @staticmethod
    def search_patients(db: Session, search: str) -> list[Patient]:
        """Name or patient number contains the search term (case-insensitive)"""
        search_term = f"%{search}%"
        return (
            _with_schedules(db.query(Patient))
            .filter(or_(Patient.name.ilike(search_term), Patient.patient_number.ilike(search_term)))
            .order_by(Patient.created_at.desc())
            .limit(SEARCH_LIMIT)
            .all()
        )

    @staticmethod
    def register_patient(
        db: Session, patient_number: str, name: str, schedules: list[dict]
    ) -> Patient:
        """
        Insert a patient, their schedules and an initial pending history
        entry per schedule in one transaction.

        Each schedule dict holds item_id, first_date and next_due_date.
        """
        patient = Patient(patient_number=patient_number, name=name)
        db.add(patient)

        for schedule_data in schedules:
            schedule = PatientSchedule(
                patient=patient,
                item_id=schedule_data["item_id"],
                first_date=schedule_data["first_date"],
                next_due_date=schedule_data["next_due_date"],
            )
            schedule.history.append(
                ScheduleHistory(scheduled_date=schedule_data["first_date"], status="pending")
            )
            db.add(schedule)

        db.commit()
        db.refresh(patient)
        return patient

    @staticmethod
    def update_patient(db: Session, patient: Patient, **updates) -> Patient:
        for key, value in updates.items():
            if value is not None and hasattr(patient, key):
                setattr(patient, key, value)

        db.commit()
        db.refresh(patient)
        return patient

    @staticmethod
    def deactivate_schedules(db: Session, patient: Patient) -> int:
        """Deactivate every active schedule of a patient. Returns how many changed."""
        changed = 0
        for schedule in patient.schedules:
            if schedule.is_active:
                schedule.is_active = False
                changed += 1
        db.commit()
        return changed
