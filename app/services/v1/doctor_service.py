# app/services/v1/doctor_service.py
from typing import Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from app.billing import DoctorFeePolicy
from app.db.models import Doctor, MedicalRecord
from app.db.schemas import DoctorCreate, DoctorUpdate, DoctorFeePolicyUpdate
from common.api_error import NotFoundError, ConflictError
from common.config import DEFAULT_FREE_RETURN_DAYS
from common.logger import get_app_logger
from common.scripts import filter_records

logger = get_app_logger(__name__)

DOCTOR_SEARCH_FIELDS = ("specialization", "doctor_name")


def fee_policy_of(doctor: Doctor) -> Optional[DoctorFeePolicy]:
    """The doctor's fee policy, or None when no fee field is set at all."""
    if not doctor.has_fee_policy:
        return None
    return DoctorFeePolicy.model_validate(doctor)


class DoctorService:
    def __init__(
        self,
        db: AsyncSession,
        default_free_return_days: int = DEFAULT_FREE_RETURN_DAYS,
    ):
        self.db = db
        self.default_free_return_days = default_free_return_days

    async def get_doctor(self, doctor_id: str) -> Doctor:
        query = (
            select(Doctor)
            .where(Doctor.doctor_id == doctor_id)
            .execution_options(logging_token="DoctorService.get_doctor")
        )
        result = await self.db.execute(query)
        doctor = result.scalar_one_or_none()
        if doctor is None:
            raise NotFoundError("doctor", doctor_id)
        return doctor

    async def list_doctors(
        self,
        search: Optional[str] = None,
        only_available: bool = False,
    ) -> list[Doctor]:
        """Newest first, optionally filtered by specialization or name."""
        query = select(Doctor).order_by(Doctor.created_at.desc())
        if only_available:
            query = query.where(Doctor.is_available.is_(True))

        result = await self.db.execute(
            query.execution_options(logging_token="DoctorService.list_doctors")
        )
        return filter_records(result.scalars().all(), DOCTOR_SEARCH_FIELDS, search or "")

    async def create_doctor(self, data: DoctorCreate) -> Doctor:
        values = data.model_dump()
        # Omitted (not explicitly null) free window gets the clinic default
        if "free_return_days" not in data.model_fields_set:
            values["free_return_days"] = self.default_free_return_days

        if values.get("user_id"):
            existing = await self.db.execute(
                select(Doctor.doctor_id).where(Doctor.user_id == values["user_id"])
            )
            if existing.scalar_one_or_none() is not None:
                raise ConflictError(
                    f"User {values['user_id']} is already linked to a doctor",
                    code="DOCTOR_USER_CONFLICT",
                )

        doctor = Doctor(**values)
        self.db.add(doctor)
        await self.db.flush()
        await self.db.refresh(doctor)

        logger.info(
            "Doctor created",
            doctor_id=doctor.doctor_id,
            has_fee_policy=doctor.has_fee_policy,
        )
        return doctor

    async def update_doctor(self, doctor_id: str, data: DoctorUpdate) -> Doctor:
        doctor = await self.get_doctor(doctor_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(doctor, field, value)

        await self.db.flush()
        await self.db.refresh(doctor)
        return doctor

    async def update_fee_policy(
        self, doctor_id: str, policy: DoctorFeePolicyUpdate
    ) -> Doctor:
        """Replaces all three fee fields at once."""
        doctor = await self.get_doctor(doctor_id)

        for field, value in policy.model_dump().items():
            setattr(doctor, field, value)

        await self.db.flush()
        await self.db.refresh(doctor)

        logger.info("Doctor fee policy updated", doctor_id=doctor_id, **policy.model_dump(mode="json"))
        return doctor

    async def get_fee_policy(self, doctor_id: str) -> Optional[DoctorFeePolicy]:
        return fee_policy_of(await self.get_doctor(doctor_id))

    async def toggle_availability(self, doctor_id: str) -> Doctor:
        doctor = await self.get_doctor(doctor_id)
        doctor.is_available = not doctor.is_available

        await self.db.flush()
        await self.db.refresh(doctor)

        logger.info(
            "Doctor availability changed",
            doctor_id=doctor_id,
            is_available=doctor.is_available,
        )
        return doctor

    async def delete_doctor(self, doctor_id: str) -> None:
        """Deletes the doctor and their appointments; refused while records exist."""
        doctor = await self.get_doctor(doctor_id)

        records = await self.db.execute(
            select(func.count(MedicalRecord.record_id)).where(
                MedicalRecord.doctor_id == doctor_id
            )
        )
        if records.scalar_one():
            raise ConflictError(
                f"Doctor {doctor_id} has medical records and cannot be deleted",
                code="DOCTOR_HAS_RECORDS",
            )

        await self.db.delete(doctor)
        await self.db.flush()

        logger.info("Doctor deleted", doctor_id=doctor_id)

    async def count_available(self) -> int:
        result = await self.db.execute(
            select(func.count(Doctor.doctor_id)).where(Doctor.is_available.is_(True))
        )
        return int(result.scalar_one())


__all__ = ["DoctorService", "fee_policy_of"]
