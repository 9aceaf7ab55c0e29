# app/api/v1/patient_router.py
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from app.db.schemas import (
    PatientCreate,
    PatientUpdate,
    PatientResponse,
    MedicalRecordResponse,
)
from sqlalchemy.ext.asyncio import AsyncSession
from app.services.v1 import PatientService
from app.db import get_db
from common.api_error import NotFoundError

patient_router = APIRouter(
    prefix="/patients",
    tags=["Patients"],
)


@patient_router.get(
    "/",
    response_model=List[PatientResponse],
    summary="List patients",
    description="Newest registrations first.",
)
async def list_patients(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    return await PatientService(db).list_patients(limit=limit, offset=offset)


@patient_router.get(
    "/search",
    response_model=List[PatientResponse],
    summary="Search patients by name or phone",
    description="""
    Used by the booking form. Terms shorter than 2 characters return an
    empty list; `%` and `_` match literally.

    **Database Impact:** one ILIKE query, at most `limit` rows.
    """,
)
async def search_patients(
    q: str = Query(..., max_length=100),
    limit: int = Query(5, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
):
    return await PatientService(db).search_patients(q, limit=limit)


@patient_router.get(
    "/{patient_id}",
    response_model=PatientResponse,
    status_code=status.HTTP_200_OK,
    summary="Get patient details",
    description="""
    Fetches full profile for a specific patient.

    **Database Impact:** - Expected Query Count: 1
    """,
    responses={
        404: {"description": "Patient not found"},
        500: {"description": "Internal Database Error"},
    },
)
async def get_patient(patient_id: str, db: AsyncSession = Depends(get_db)):
    service = PatientService(db)

    patient = await service.get_patient_profile(patient_id)

    if not patient:
        raise NotFoundError("patient", patient_id)

    return patient


@patient_router.post(
    "/",
    response_model=PatientResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a patient",
)
async def create_patient(data: PatientCreate, db: AsyncSession = Depends(get_db)):
    return await PatientService(db).create_patient(data)


@patient_router.patch(
    "/{patient_id}",
    response_model=PatientResponse,
    summary="Update a patient",
    responses={404: {"description": "Patient not found"}},
)
async def update_patient(
    patient_id: str, data: PatientUpdate, db: AsyncSession = Depends(get_db)
):
    return await PatientService(db).update_patient(patient_id, data)


@patient_router.delete(
    "/{patient_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a patient with their appointments and records",
    responses={404: {"description": "Patient not found"}},
)
async def delete_patient(patient_id: str, db: AsyncSession = Depends(get_db)):
    await PatientService(db).delete_patient(patient_id)


@patient_router.get(
    "/{patient_id}/medical-records",
    response_model=List[MedicalRecordResponse],
    summary="Medical history of a patient",
    responses={404: {"description": "Patient not found"}},
)
async def list_patient_records(
    patient_id: str,
    limit: Optional[int] = Query(None, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
):
    return await PatientService(db).list_medical_records(patient_id, limit=limit)


__all__ = ["patient_router"]
