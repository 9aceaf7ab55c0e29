# app/db/models/patient_table.py
from __future__ import annotations
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, Optional
from sqlalchemy import String, Date, Integer, Text, Enum as sqlalchemy_Enum
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .db_base_model import DbBaseModel

if TYPE_CHECKING:
    from .appointment_table import Appointment
    from .medical_record_table import MedicalRecord


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class Patient(DbBaseModel):
    __tablename__ = "patients"

    patient_id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=DbBaseModel.generate_uuid,
    )

    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str] = mapped_column(String(30), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(200))

    date_of_birth: Mapped[Optional[date]] = mapped_column(Date)
    age: Mapped[Optional[int]] = mapped_column(Integer)
    gender: Mapped[Optional[Gender]] = mapped_column(
        sqlalchemy_Enum(Gender, name="patient_gender", values_callable=lambda e: [m.value for m in e]),
    )
    address: Mapped[Optional[str]] = mapped_column(String(300))

    # Clinical background
    medical_history: Mapped[Optional[str]] = mapped_column(Text)
    allergies: Mapped[Optional[str]] = mapped_column(Text)
    blood_type: Mapped[Optional[str]] = mapped_column(String(5))
    emergency_contact: Mapped[Optional[str]] = mapped_column(String(200))
    notes: Mapped[Optional[str]] = mapped_column(Text)

    appointments: Mapped[list["Appointment"]] = relationship(
        "Appointment", back_populates="patient", cascade="all, delete-orphan"
    )
    medical_records: Mapped[list["MedicalRecord"]] = relationship(
        "MedicalRecord", back_populates="patient", cascade="all, delete-orphan"
    )


__all__ = ["Patient", "Gender"]
