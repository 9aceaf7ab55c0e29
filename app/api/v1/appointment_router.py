# app/api/v1/appointment_router.py
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.db import get_db
from app.db.models import AppointmentStatus
from app.db.schemas import AppointmentCreate, AppointmentUpdate, AppointmentResponse
from app.services.v1 import AppointmentService

appointment_router = APIRouter(
    prefix="/appointments",
    tags=["Appointments"],
)


@appointment_router.get(
    "/",
    response_model=List[AppointmentResponse],
    summary="Appointments of one day",
    description="Ordered by time. `on` defaults to today's date on the server.",
)
async def list_appointments(
    on: Optional[date] = Query(None, description="YYYY-MM-DD"),
    doctor_id: Optional[str] = None,
    status_filter: Optional[AppointmentStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
):
    return await AppointmentService(db).list_for_date(
        on or date.today(), doctor_id=doctor_id, status=status_filter
    )


@appointment_router.get(
    "/{appointment_id}",
    response_model=AppointmentResponse,
    summary="Get an appointment",
    responses={404: {"description": "Appointment not found"}},
)
async def get_appointment(appointment_id: str, db: AsyncSession = Depends(get_db)):
    return await AppointmentService(db).get_appointment(appointment_id)


@appointment_router.post(
    "/",
    response_model=AppointmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Book an appointment",
    description="""
    Books for an existing patient (`patient_id`) or registers the patient
    on the fly (`new_patient`).
    """,
    responses={
        404: {"description": "Doctor or patient not found"},
        409: {"description": "Doctor not accepting appointments"},
    },
)
async def book_appointment(data: AppointmentCreate, db: AsyncSession = Depends(get_db)):
    return await AppointmentService(db).book_appointment(data)


@appointment_router.patch(
    "/{appointment_id}",
    response_model=AppointmentResponse,
    summary="Update status, schedule, cost or clinical notes",
    responses={404: {"description": "Appointment not found"}},
)
async def update_appointment(
    appointment_id: str, data: AppointmentUpdate, db: AsyncSession = Depends(get_db)
):
    return await AppointmentService(db).update_appointment(appointment_id, data)


@appointment_router.delete(
    "/{appointment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an appointment",
    responses={404: {"description": "Appointment not found"}},
)
async def delete_appointment(appointment_id: str, db: AsyncSession = Depends(get_db)):
    await AppointmentService(db).delete_appointment(appointment_id)


__all__ = ["appointment_router"]
