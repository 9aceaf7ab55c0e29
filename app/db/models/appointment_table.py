# app/db/models/appointment_table.py
from __future__ import annotations
from datetime import date, time
from decimal import Decimal
from typing import TYPE_CHECKING, Optional
from enum import Enum
from sqlalchemy import (
    String,
    Date,
    Time,
    Boolean,
    Numeric,
    ForeignKey,
    Text,
    Index,
    Enum as sqlalchemy_Enum,
)
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .db_base_model import DbBaseModel


class AppointmentStatus(str, Enum):
    SCHEDULED = "scheduled"  # Booked
    WAITING = "waiting"  # Patient arrived, in the waiting room
    COMPLETED = "completed"  # Seen by the doctor
    RETURN = "return"  # Follow-up expected
    CANCELLED = "cancelled"


OPEN_STATUSES = (AppointmentStatus.SCHEDULED, AppointmentStatus.WAITING)


if TYPE_CHECKING:
    from .patient_table import Patient
    from .doctor_table import Doctor


class Appointment(DbBaseModel):
    __tablename__ = "appointments"
    __table_args__ = (
        Index("ix_appointments_date", "appointment_date"),
        Index("ix_appointments_patient_doctor", "patient_id", "doctor_id"),
    )

    appointment_id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=DbBaseModel.generate_uuid,
    )

    patient_id: Mapped[str] = mapped_column(
        ForeignKey("patients.patient_id", ondelete="CASCADE"),
        nullable=False,
    )

    doctor_id: Mapped[str] = mapped_column(
        ForeignKey("doctors.doctor_id", ondelete="CASCADE"),
        nullable=False,
    )

    # Calendar date and wall-clock time are kept apart: billing works on dates only
    appointment_date: Mapped[date] = mapped_column(Date, nullable=False)
    appointment_time: Mapped[time] = mapped_column(Time, nullable=False)

    status: Mapped[AppointmentStatus] = mapped_column(
        sqlalchemy_Enum(
            AppointmentStatus,
            name="appointment_status",
            values_callable=lambda e: [m.value for m in e],
        ),
        default=AppointmentStatus.SCHEDULED,
        nullable=False,
    )

    notes: Mapped[Optional[str]] = mapped_column(Text)
    diagnosis: Mapped[Optional[str]] = mapped_column(Text)
    treatment: Mapped[Optional[str]] = mapped_column(Text)
    prescription: Mapped[Optional[str]] = mapped_column(Text)

    # None = not recorded; billing then falls back to the doctor's fees
    cost: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2))
    is_return_visit: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    follow_up_date: Mapped[Optional[date]] = mapped_column(Date)
    created_by: Mapped[Optional[str]] = mapped_column(String(36))

    patient: Mapped["Patient"] = relationship("Patient", back_populates="appointments")
    doctor: Mapped["Doctor"] = relationship("Doctor", back_populates="appointments")


__all__ = ["Appointment", "AppointmentStatus", "OPEN_STATUSES"]
