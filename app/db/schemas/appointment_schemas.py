# app/db/schemas/appointment_schemas.py
from pydantic import BaseModel, Field, ConfigDict, model_validator
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional
from ..models import AppointmentStatus
from .patient_schema import PatientSummary, QuickPatientCreate
from .doctor_schema import DoctorSummary


class AppointmentBase(BaseModel):
    appointment_date: date
    appointment_time: time
    notes: Optional[str] = Field(None, max_length=1000)


class AppointmentCreate(AppointmentBase):
    """
    Booking request.

    Either ``patient_id`` of an existing patient or ``new_patient`` for
    quick registration at the front desk.
    """

    patient_id: Optional[str] = Field(None, description="Existing patient")
    new_patient: Optional[QuickPatientCreate] = None
    doctor_id: str
    cost: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    is_return_visit: bool = False
    created_by: Optional[str] = Field(None, max_length=36)

    @model_validator(mode="after")
    def validate_patient_source(self):
        if (self.patient_id is None) == (self.new_patient is None):
            raise ValueError("Provide exactly one of patient_id or new_patient")
        return self


class AppointmentUpdate(BaseModel):
    # Rescheduling, status workflow and the doctor's clinical notes
    appointment_date: Optional[date] = None
    appointment_time: Optional[time] = None
    status: Optional[AppointmentStatus] = None
    notes: Optional[str] = None
    diagnosis: Optional[str] = None
    treatment: Optional[str] = None
    prescription: Optional[str] = None
    cost: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    is_return_visit: Optional[bool] = None
    follow_up_date: Optional[date] = None


class AppointmentResponse(AppointmentBase):
    model_config = ConfigDict(from_attributes=True)

    appointment_id: str
    status: AppointmentStatus
    patient_id: str
    doctor_id: str
    diagnosis: Optional[str] = None
    treatment: Optional[str] = None
    prescription: Optional[str] = None
    cost: Optional[Decimal] = None
    is_return_visit: bool
    follow_up_date: Optional[date] = None
    created_by: Optional[str] = None
    created_at: datetime

    patient: PatientSummary
    doctor: DoctorSummary


__all__ = ["AppointmentCreate", "AppointmentUpdate", "AppointmentResponse"]
