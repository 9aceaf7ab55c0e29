# app/db/schemas/medical_record_schemas.py
from pydantic import BaseModel, Field, ConfigDict
from datetime import date, datetime
from typing import Optional, List
from .patient_schema import PatientSummary
from .doctor_schema import DoctorSummary


class MedicalRecordBase(BaseModel):
    diagnosis: str = Field(..., min_length=1, max_length=2000)
    treatment: Optional[str] = Field(None, max_length=2000)
    prescription: Optional[str] = Field(None, max_length=2000)
    notes: Optional[str] = Field(None, max_length=2000)
    attachments: List[str] = Field(default_factory=list)


class MedicalRecordCreate(MedicalRecordBase):
    patient_id: str
    doctor_id: str
    appointment_id: Optional[str] = None
    record_date: Optional[date] = None


class MedicalRecordUpdate(BaseModel):
    diagnosis: Optional[str] = Field(None, min_length=1, max_length=2000)
    treatment: Optional[str] = None
    prescription: Optional[str] = None
    notes: Optional[str] = None
    attachments: Optional[List[str]] = None
    record_date: Optional[date] = None


class MedicalRecordResponse(MedicalRecordBase):
    model_config = ConfigDict(from_attributes=True)

    record_id: str
    patient_id: str
    doctor_id: str
    appointment_id: Optional[str] = None
    record_date: date
    created_at: datetime

    patient: PatientSummary
    doctor: DoctorSummary


__all__ = ["MedicalRecordCreate", "MedicalRecordUpdate", "MedicalRecordResponse"]
