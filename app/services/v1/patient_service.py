# app/services/v1/patient_service.py
from typing import Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from app.db.models import Patient, MedicalRecord
from app.db.schemas import PatientCreate, PatientUpdate
from common.api_error import NotFoundError
from common.logger import get_app_logger
from common.scripts import (
    LIKE_ESCAPE_CHAR,
    is_valid_search_term,
    sanitize_search_input,
)
from .medical_record_service import MedicalRecordService

logger = get_app_logger(__name__)


class PatientService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_patient_profile(self, patient_id: str) -> Optional[Patient]:
        """
        Fetches a patient.
        Note: We use 'select' explicitly to stay in control of
        what columns are loaded.
        """
        query = (
            select(Patient)
            .where(Patient.patient_id == patient_id)
            .execution_options(logging_token="PatientService.get_patient_profile")
        )

        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def _require(self, patient_id: str) -> Patient:
        patient = await self.get_patient_profile(patient_id)
        if patient is None:
            raise NotFoundError("patient", patient_id)
        return patient

    async def list_patients(self, limit: int = 100, offset: int = 0) -> Sequence[Patient]:
        """Newest registrations first."""
        query = (
            select(Patient)
            .order_by(Patient.created_at.desc())
            .limit(limit)
            .offset(offset)
            .execution_options(logging_token="PatientService.list_patients")
        )
        result = await self.db.execute(query)
        return result.scalars().all()

    async def search_patients(self, term: str, limit: int = 5) -> Sequence[Patient]:
        """
        Quick lookup by name or phone for the booking form.

        Terms outside 2..100 characters return nothing. LIKE wildcards in
        the term match literally.
        """
        if not is_valid_search_term(term):
            return []

        pattern = f"%{sanitize_search_input(term.strip())}%"
        query = (
            select(Patient)
            .where(
                or_(
                    Patient.full_name.ilike(pattern, escape=LIKE_ESCAPE_CHAR),
                    Patient.phone.ilike(pattern, escape=LIKE_ESCAPE_CHAR),
                )
            )
            .order_by(Patient.full_name)
            .limit(limit)
            .execution_options(logging_token="PatientService.search_patients")
        )
        result = await self.db.execute(query)
        return result.scalars().all()

    async def create_patient(self, data: PatientCreate) -> Patient:
        patient = Patient(**data.model_dump())
        self.db.add(patient)
        await self.db.flush()
        await self.db.refresh(patient)

        logger.info("Patient registered", patient_id=patient.patient_id)
        return patient

    async def update_patient(self, patient_id: str, data: PatientUpdate) -> Patient:
        patient = await self._require(patient_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(patient, field, value)

        await self.db.flush()
        await self.db.refresh(patient)
        return patient

    async def delete_patient(self, patient_id: str) -> None:
        """Deletes the patient together with appointments and records."""
        patient = await self._require(patient_id)
        await self.db.delete(patient)
        await self.db.flush()

        logger.info("Patient deleted", patient_id=patient_id)

    async def list_medical_records(
        self, patient_id: str, limit: Optional[int] = None
    ) -> Sequence[MedicalRecord]:
        await self._require(patient_id)

        return await MedicalRecordService(self.db).list_for_patient(patient_id, limit=limit)


__all__ = ["PatientService"]
