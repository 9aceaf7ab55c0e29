# app/db/schemas/patient_schema.py
from pydantic import BaseModel, Field, ConfigDict
from datetime import date, datetime, timedelta
from typing import Optional, List
from ..models import Gender


class PatientBase(BaseModel):
    full_name: str = Field(..., min_length=2, max_length=100)
    phone: str = Field(..., min_length=3, max_length=30)
    email: Optional[str] = Field(None, max_length=200)
    date_of_birth: Optional[date] = None
    age: Optional[int] = Field(None, ge=0, le=150)
    gender: Optional[Gender] = None
    address: Optional[str] = Field(None, max_length=300)
    medical_history: Optional[str] = Field(None, max_length=2000)
    allergies: Optional[str] = Field(None, max_length=1000)
    blood_type: Optional[str] = Field(None, max_length=5)
    emergency_contact: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = Field(None, max_length=2000)


class PatientCreate(PatientBase):
    @classmethod
    def seed_records(
        cls,
        template: dict,
        records: int,
        start_index: int = 0,
        date_interval: int = 0,
        gender_cycle: tuple[Gender, ...] = (Gender.MALE, Gender.FEMALE),
    ) -> List["PatientCreate"]:
        result = []
        base_date = template.get("date_of_birth", date(1990, 1, 1))
        for i in range(start_index, start_index + records):
            record = cls(
                full_name=f"{template['full_name']} {i}",
                phone=f"{template['phone_prefix']}{i:07d}",
                date_of_birth=base_date - timedelta(days=(i * date_interval)),
                gender=gender_cycle[i % len(gender_cycle)],
                address=template.get("address"),
                medical_history=template.get("medical_history"),
            )
            result.append(record)
        return result


class QuickPatientCreate(BaseModel):
    """Minimal patient registered while booking."""

    full_name: str = Field(..., min_length=2, max_length=100)
    phone: str = Field(..., min_length=3, max_length=30)
    age: Optional[int] = Field(None, ge=0, le=150)
    gender: Optional[Gender] = None


class PatientUpdate(BaseModel):
    # All fields optional for PATCH
    full_name: Optional[str] = Field(None, min_length=2, max_length=100)
    phone: Optional[str] = Field(None, min_length=3, max_length=30)
    email: Optional[str] = None
    date_of_birth: Optional[date] = None
    age: Optional[int] = Field(None, ge=0, le=150)
    gender: Optional[Gender] = None
    address: Optional[str] = None
    medical_history: Optional[str] = None
    allergies: Optional[str] = None
    blood_type: Optional[str] = None
    emergency_contact: Optional[str] = None
    notes: Optional[str] = None


class PatientSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    patient_id: str
    full_name: str
    phone: str


class PatientResponse(PatientBase):
    model_config = ConfigDict(
        from_attributes=True
    )  # Tells Pydantic to read SQLAlchemy objects

    patient_id: str
    created_at: datetime
    updated_at: datetime


__all__ = [
    "PatientCreate",
    "QuickPatientCreate",
    "PatientUpdate",
    "PatientSummary",
    "PatientResponse",
]
