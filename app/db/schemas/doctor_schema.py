# app/db/schemas/doctor_schema.py
from pydantic import BaseModel, Field, ConfigDict, model_validator
from datetime import datetime, time
from decimal import Decimal
from typing import Optional, List

WEEK_DAYS = (
    "saturday",
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
)


class DoctorFeePolicyFields(BaseModel):
    consultation_fee: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    return_consultation_fee: Optional[Decimal] = Field(
        None, ge=0, max_digits=10, decimal_places=2
    )
    free_return_days: Optional[int] = Field(None, ge=0, le=365)


class DoctorFeePolicyUpdate(DoctorFeePolicyFields):
    """PUT body: replaces the whole policy, omitted fields become unset."""


class DoctorBase(BaseModel):
    doctor_name: Optional[str] = Field(None, min_length=2, max_length=100)
    specialization: str = Field(..., min_length=2, max_length=100)
    license_number: Optional[str] = Field(None, max_length=50)
    bio: Optional[str] = Field(None, max_length=2000)
    experience_years: int = Field(0, ge=0, le=80)
    is_available: bool = True
    working_days: List[str] = Field(
        default_factory=lambda: ["sunday", "monday", "tuesday", "wednesday", "thursday"]
    )
    working_hours_start: time = time(9, 0)
    working_hours_end: time = time(17, 0)

    @model_validator(mode="after")
    def validate_schedule(self):
        unknown = [d for d in self.working_days if d not in WEEK_DAYS]
        if unknown:
            raise ValueError(f"Unknown working days: {unknown}")
        if self.working_hours_end <= self.working_hours_start:
            raise ValueError("working_hours_end must be after working_hours_start")
        return self


class DoctorCreate(DoctorBase, DoctorFeePolicyFields):
    user_id: Optional[str] = Field(None, max_length=36)

    @classmethod
    def seed_records(
        cls,
        template: dict,
        records: int,
        start_index: int = 0,
    ) -> List["DoctorCreate"]:
        result = []
        specializations = template["specializations"]
        for i in range(start_index, start_index + records):
            fee = Decimal(template["base_fee"]) + Decimal(10 * (i % 5))
            record = cls(
                doctor_name=f"{template['doctor_name']} {i}",
                specialization=specializations[i % len(specializations)],
                experience_years=i % 30,
                consultation_fee=fee,
                return_consultation_fee=fee / 2,
                free_return_days=template.get("free_return_days"),
            )
            result.append(record)
        return result


class DoctorUpdate(BaseModel):
    # Profile and schedule only; fees go through the fee-policy endpoint
    doctor_name: Optional[str] = Field(None, min_length=2, max_length=100)
    specialization: Optional[str] = Field(None, min_length=2, max_length=100)
    license_number: Optional[str] = None
    bio: Optional[str] = None
    experience_years: Optional[int] = Field(None, ge=0, le=80)
    working_days: Optional[List[str]] = None
    working_hours_start: Optional[time] = None
    working_hours_end: Optional[time] = None


class DoctorSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    doctor_id: str
    doctor_name: Optional[str] = None
    specialization: str


class DoctorResponse(DoctorBase, DoctorFeePolicyFields):
    model_config = ConfigDict(from_attributes=True)

    doctor_id: str
    user_id: Optional[str] = None
    created_at: datetime


__all__ = [
    "WEEK_DAYS",
    "DoctorFeePolicyUpdate",
    "DoctorCreate",
    "DoctorUpdate",
    "DoctorSummary",
    "DoctorResponse",
]
