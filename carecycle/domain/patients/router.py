"""Patient router - FastAPI endpoints for patients"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_api_token
from ...database import get_db
from .schemas import PatientRegistration, PatientResponse, PatientUpdate, RegistrationResponse
from .service import PatientService, patient_to_response

router = APIRouter(prefix="/api/patients", tags=["Patients"], dependencies=[Depends(require_api_token)])


def get_patient_service(db: Session = Depends(get_db)) -> PatientService:
    """Dependency injection for PatientService"""
    return PatientService(db)


@router.get("", response_model=list[PatientResponse])
async def get_patients(service: PatientService = Depends(get_patient_service)):
    """All patients with their schedules, newest first"""
    return service.get_patients()


@router.post("", response_model=RegistrationResponse, status_code=201)
async def register_patient(
    data: PatientRegistration,
    service: PatientService = Depends(get_patient_service),
):
    """Register a patient together with their schedules"""
    return service.register_patient(data)


@router.get("/search", response_model=list[PatientResponse])
async def search_patients(
    q: str = Query("", description="Name or patient number contains"),
    service: PatientService = Depends(get_patient_service),
):
    return service.search_patients(q)


@router.get("/{patient_id}", response_model=PatientResponse)
async def get_patient(patient_id: str, service: PatientService = Depends(get_patient_service)):
    return patient_to_response(service.get_patient(patient_id))


@router.patch("/{patient_id}", response_model=PatientResponse)
async def update_patient(
    patient_id: str,
    data: PatientUpdate,
    service: PatientService = Depends(get_patient_service),
):
    return service.update_patient(patient_id, data)


@router.post("/{patient_id}/deactivate")
async def deactivate_patient(patient_id: str, service: PatientService = Depends(get_patient_service)):
    """Deactivate all schedules of a patient"""
    return service.deactivate_patient(patient_id)
