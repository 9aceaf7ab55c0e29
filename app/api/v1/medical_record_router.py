# app/api/v1/medical_record_router.py
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.db import get_db
from app.db.schemas import (
    MedicalRecordCreate,
    MedicalRecordUpdate,
    MedicalRecordResponse,
)
from app.services.v1 import MedicalRecordService

medical_record_router = APIRouter(
    prefix="/medical-records",
    tags=["Medical Records"],
)


@medical_record_router.get(
    "/",
    response_model=List[MedicalRecordResponse],
    summary="List medical records",
    description="Newest record date first. `q` matches patient name or phone, doctor name or diagnosis.",
)
async def list_records(
    q: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
):
    return await MedicalRecordService(db).list_records(search=q)


@medical_record_router.post(
    "/",
    response_model=MedicalRecordResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a medical record",
    responses={404: {"description": "Patient, doctor or appointment not found"}},
)
async def create_record(data: MedicalRecordCreate, db: AsyncSession = Depends(get_db)):
    return await MedicalRecordService(db).create_record(data)


@medical_record_router.patch(
    "/{record_id}",
    response_model=MedicalRecordResponse,
    summary="Update a medical record",
    responses={404: {"description": "Record not found"}},
)
async def update_record(
    record_id: str, data: MedicalRecordUpdate, db: AsyncSession = Depends(get_db)
):
    return await MedicalRecordService(db).update_record(record_id, data)


@medical_record_router.delete(
    "/{record_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a medical record",
    responses={404: {"description": "Record not found"}},
)
async def delete_record(record_id: str, db: AsyncSession = Depends(get_db)):
    await MedicalRecordService(db).delete_record(record_id)


__all__ = ["medical_record_router"]
