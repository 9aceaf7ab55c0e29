# app/services/v1/appointment_service.py
from datetime import date
from typing import Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy import select
from app.billing import BillableAppointment, PriorVisit
from app.db import DbManager
from app.db.models import Appointment, AppointmentStatus, Doctor, Patient
from app.db.schemas import AppointmentCreate, AppointmentUpdate
from common.api_error import NotFoundError, ConflictError
from common.logger import get_app_logger
from .doctor_service import fee_policy_of

logger = get_app_logger(__name__)


class AppointmentService:
    def __init__(self, db: AsyncSession):
        self.db = db

    def _with_parties(self):
        return select(Appointment).options(
            selectinload(Appointment.patient),
            selectinload(Appointment.doctor),
        )

    async def get_appointment(self, appointment_id: str) -> Appointment:
        query = (
            self._with_parties()
            .where(Appointment.appointment_id == appointment_id)
            .execution_options(
                logging_token="AppointmentService.get_appointment",
                populate_existing=True,
            )
        )
        result = await self.db.execute(query)
        appointment = result.scalar_one_or_none()
        if appointment is None:
            raise NotFoundError("appointment", appointment_id)
        return appointment

    async def list_for_date(
        self,
        day: date,
        doctor_id: Optional[str] = None,
        status: Optional[AppointmentStatus] = None,
    ) -> Sequence[Appointment]:
        """The day's schedule ordered by time."""
        query = self._with_parties().where(Appointment.appointment_date == day)
        if doctor_id:
            query = query.where(Appointment.doctor_id == doctor_id)
        if status:
            query = query.where(Appointment.status == status)

        result = await self.db.execute(
            query.order_by(Appointment.appointment_time).execution_options(
                logging_token="AppointmentService.list_for_date"
            )
        )
        return result.scalars().all()

    async def book_appointment(self, data: AppointmentCreate) -> Appointment:
        """
        Book a visit, registering the patient first when only
        ``new_patient`` details are given.
        """
        doctor = await self.db.get(Doctor, data.doctor_id)
        if doctor is None:
            raise NotFoundError("doctor", data.doctor_id)
        if not doctor.is_available:
            raise ConflictError(
                f"Doctor {data.doctor_id} is not accepting appointments",
                code="DOCTOR_UNAVAILABLE",
            )

        if data.new_patient is not None:
            patient = Patient(**data.new_patient.model_dump())
            self.db.add(patient)
            await self.db.flush()
            patient_id = patient.patient_id
            logger.info("Patient registered during booking", patient_id=patient_id)
        else:
            patient_id = data.patient_id
            if await self.db.get(Patient, patient_id) is None:
                raise NotFoundError("patient", patient_id)

        appointment = Appointment(
            patient_id=patient_id,
            doctor_id=data.doctor_id,
            appointment_date=data.appointment_date,
            appointment_time=data.appointment_time,
            notes=data.notes,
            cost=data.cost,
            is_return_visit=data.is_return_visit,
            created_by=data.created_by,
            status=AppointmentStatus.SCHEDULED,
        )
        self.db.add(appointment)
        await self.db.flush()

        logger.info(
            "Appointment booked",
            appointment_id=appointment.appointment_id,
            doctor_id=data.doctor_id,
            appointment_date=data.appointment_date.isoformat(),
            is_return_visit=data.is_return_visit,
        )
        return await self.get_appointment(appointment.appointment_id)

    async def update_appointment(
        self, appointment_id: str, data: AppointmentUpdate
    ) -> Appointment:
        appointment = await self.get_appointment(appointment_id)
        changes = data.model_dump(exclude_unset=True)

        new_status = changes.get("status")
        if new_status is not None and new_status != appointment.status:
            logger.info(
                "Appointment status changed",
                appointment_id=appointment_id,
                from_status=appointment.status.value,
                to_status=new_status.value,
            )

        for field, value in changes.items():
            setattr(appointment, field, value)

        await self.db.flush()
        return appointment

    async def delete_appointment(self, appointment_id: str) -> None:
        appointment = await self.get_appointment(appointment_id)
        await self.db.delete(appointment)
        await self.db.flush()

        logger.info("Appointment deleted", appointment_id=appointment_id)

    async def billable_appointments_for(self, day: date) -> list[BillableAppointment]:
        """Completed appointments of ``day`` with their doctor's fee policy."""
        query = (
            select(Appointment)
            .options(selectinload(Appointment.doctor))
            .where(
                Appointment.appointment_date == day,
                Appointment.status == AppointmentStatus.COMPLETED,
            )
            .order_by(Appointment.appointment_time)
            .execution_options(logging_token="AppointmentService.billable_appointments_for")
        )
        result = await self.db.execute(query)

        return [
            BillableAppointment(
                appointment_id=appt.appointment_id,
                patient_id=appt.patient_id,
                doctor_id=appt.doctor_id,
                appointment_date=appt.appointment_date,
                status=appt.status,
                cost=appt.cost,
                is_return_visit=appt.is_return_visit,
                fee_policy=fee_policy_of(appt.doctor),
            )
            for appt in result.scalars().all()
        ]


class SqlPriorVisitLookup:
    """
    PriorVisitLookup backed by the appointments table.

    Every call opens its own session, so lookups may run concurrently.
    """

    def __init__(self, db_manager: DbManager):
        self.db_manager = db_manager

    async def find_prior_visit(
        self,
        patient_id: str,
        doctor_id: str,
        excluding_appointment_id: str,
    ) -> Optional[PriorVisit]:
        query = select(Appointment.appointment_id, Appointment.appointment_date).where(
            Appointment.patient_id == patient_id,
            Appointment.doctor_id == doctor_id,
            Appointment.status == AppointmentStatus.COMPLETED,
            Appointment.appointment_id != excluding_appointment_id,
        )
        query = (
            query.order_by(
                Appointment.appointment_date.desc(),
                Appointment.appointment_time.desc(),
            )
            .limit(1)
            .execution_options(logging_token="SqlPriorVisitLookup.find_prior_visit")
        )

        async with self.db_manager.session() as session:
            row = (await session.execute(query)).first()

        if row is None:
            return None
        return PriorVisit(appointment_id=row.appointment_id, appointment_date=row.appointment_date)


__all__ = ["AppointmentService", "SqlPriorVisitLookup"]
