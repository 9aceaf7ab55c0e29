# app/api/v1/doctor_router.py
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.db import get_db
from app.db.schemas import (
    DoctorCreate,
    DoctorUpdate,
    DoctorFeePolicyUpdate,
    DoctorResponse,
)
from app.billing import DoctorFeePolicy
from app.services.v1 import DoctorService
from common.config import get_config

doctor_router = APIRouter(
    prefix="/doctors",
    tags=["Doctors"],
)


def get_doctor_service(db: AsyncSession = Depends(get_db)) -> DoctorService:
    return DoctorService(
        db, default_free_return_days=get_config().billing.default_free_return_days
    )


@doctor_router.get(
    "/",
    response_model=List[DoctorResponse],
    summary="List doctors",
    description="Newest first. `q` matches specialization or name, case-insensitive.",
)
async def list_doctors(
    q: Optional[str] = Query(None, max_length=100),
    available: bool = Query(False, description="Only doctors accepting appointments"),
    service: DoctorService = Depends(get_doctor_service),
):
    return await service.list_doctors(search=q, only_available=available)


@doctor_router.get(
    "/{doctor_id}",
    response_model=DoctorResponse,
    summary="Get doctor details",
    responses={404: {"description": "Doctor not found"}},
)
async def get_doctor(doctor_id: str, service: DoctorService = Depends(get_doctor_service)):
    return await service.get_doctor(doctor_id)


@doctor_router.post(
    "/",
    response_model=DoctorResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a doctor",
    description="When `free_return_days` is omitted the clinic default applies.",
    responses={409: {"description": "User already linked to a doctor"}},
)
async def create_doctor(
    data: DoctorCreate, service: DoctorService = Depends(get_doctor_service)
):
    return await service.create_doctor(data)


@doctor_router.patch(
    "/{doctor_id}",
    response_model=DoctorResponse,
    summary="Update doctor profile and schedule",
    responses={404: {"description": "Doctor not found"}},
)
async def update_doctor(
    doctor_id: str,
    data: DoctorUpdate,
    service: DoctorService = Depends(get_doctor_service),
):
    return await service.update_doctor(doctor_id, data)


@doctor_router.get(
    "/{doctor_id}/fee-policy",
    response_model=Optional[DoctorFeePolicy],
    summary="Fee policy used for revenue",
    description="`null` when the doctor has no fee set at all.",
    responses={404: {"description": "Doctor not found"}},
)
async def get_fee_policy(doctor_id: str, service: DoctorService = Depends(get_doctor_service)):
    return await service.get_fee_policy(doctor_id)


@doctor_router.put(
    "/{doctor_id}/fee-policy",
    response_model=DoctorResponse,
    summary="Replace the doctor's fee policy",
    description="""
    Sets consultation fee, return consultation fee and free-return window
    together. Omitted fields are cleared.
    """,
    responses={404: {"description": "Doctor not found"}},
)
async def update_fee_policy(
    doctor_id: str,
    policy: DoctorFeePolicyUpdate,
    service: DoctorService = Depends(get_doctor_service),
):
    return await service.update_fee_policy(doctor_id, policy)


@doctor_router.post(
    "/{doctor_id}/toggle-availability",
    response_model=DoctorResponse,
    summary="Flip whether the doctor accepts appointments",
    responses={404: {"description": "Doctor not found"}},
)
async def toggle_availability(
    doctor_id: str, service: DoctorService = Depends(get_doctor_service)
):
    return await service.toggle_availability(doctor_id)


@doctor_router.delete(
    "/{doctor_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a doctor",
    responses={
        404: {"description": "Doctor not found"},
        409: {"description": "Doctor has medical records"},
    },
)
async def delete_doctor(doctor_id: str, service: DoctorService = Depends(get_doctor_service)):
    await service.delete_doctor(doctor_id)


__all__ = ["doctor_router"]
