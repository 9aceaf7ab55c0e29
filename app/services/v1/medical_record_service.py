# app/services/v1/medical_record_service.py
from datetime import date
from typing import Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy import select
from app.db.models import MedicalRecord, Patient, Doctor, Appointment
from app.db.schemas import MedicalRecordCreate, MedicalRecordUpdate
from common.api_error import NotFoundError
from common.logger import get_app_logger
from common.scripts import filter_records

logger = get_app_logger(__name__)

RECORD_SEARCH_FIELDS = (
    "patient.full_name",
    "patient.phone",
    "doctor.doctor_name",
    "diagnosis",
)


class MedicalRecordService:
    def __init__(self, db: AsyncSession):
        self.db = db

    def _with_parties(self):
        return (
            select(MedicalRecord)
            .options(
                selectinload(MedicalRecord.patient),
                selectinload(MedicalRecord.doctor),
            )
            .order_by(MedicalRecord.record_date.desc(), MedicalRecord.created_at.desc())
        )

    async def get_record(self, record_id: str) -> MedicalRecord:
        query = (
            self._with_parties()
            .where(MedicalRecord.record_id == record_id)
            .execution_options(
                logging_token="MedicalRecordService.get_record",
                populate_existing=True,
            )
        )
        record = (await self.db.execute(query)).scalar_one_or_none()
        if record is None:
            raise NotFoundError("medical_record", record_id)
        return record

    async def list_records(self, search: Optional[str] = None) -> list[MedicalRecord]:
        """Newest first; ``search`` matches patient, doctor or diagnosis."""
        result = await self.db.execute(
            self._with_parties().execution_options(
                logging_token="MedicalRecordService.list_records"
            )
        )
        return filter_records(result.scalars().all(), RECORD_SEARCH_FIELDS, search or "")

    async def list_for_patient(
        self, patient_id: str, limit: Optional[int] = None
    ) -> Sequence[MedicalRecord]:
        query = self._with_parties().where(MedicalRecord.patient_id == patient_id)
        if limit is not None:
            query = query.limit(limit)

        result = await self.db.execute(
            query.execution_options(logging_token="MedicalRecordService.list_for_patient")
        )
        return result.scalars().all()

    async def create_record(self, data: MedicalRecordCreate) -> MedicalRecord:
        if await self.db.get(Patient, data.patient_id) is None:
            raise NotFoundError("patient", data.patient_id)
        if await self.db.get(Doctor, data.doctor_id) is None:
            raise NotFoundError("doctor", data.doctor_id)
        if data.appointment_id and await self.db.get(Appointment, data.appointment_id) is None:
            raise NotFoundError("appointment", data.appointment_id)

        values = data.model_dump()
        values["record_date"] = data.record_date or date.today()

        record = MedicalRecord(**values)
        self.db.add(record)
        await self.db.flush()

        logger.info(
            "Medical record created",
            record_id=record.record_id,
            patient_id=data.patient_id,
            doctor_id=data.doctor_id,
        )
        return await self.get_record(record.record_id)

    async def update_record(self, record_id: str, data: MedicalRecordUpdate) -> MedicalRecord:
        record = await self.get_record(record_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(record, field, value)

        await self.db.flush()
        return record

    async def delete_record(self, record_id: str) -> None:
        record = await self.get_record(record_id)
        await self.db.delete(record)
        await self.db.flush()

        logger.info("Medical record deleted", record_id=record_id)


__all__ = ["MedicalRecordService"]
