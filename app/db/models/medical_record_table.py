# app/db/models/medical_record_table.py
from __future__ import annotations
from datetime import date
from typing import TYPE_CHECKING, Optional
from sqlalchemy import String, Date, Text, JSON, ForeignKey
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .db_base_model import DbBaseModel

if TYPE_CHECKING:
    from .patient_table import Patient
    from .doctor_table import Doctor


class MedicalRecord(DbBaseModel):
    __tablename__ = "medical_records"

    record_id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=DbBaseModel.generate_uuid,
    )

    patient_id: Mapped[str] = mapped_column(
        ForeignKey("patients.patient_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    doctor_id: Mapped[str] = mapped_column(
        ForeignKey("doctors.doctor_id"),
        nullable=False,
    )
    appointment_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("appointments.appointment_id", ondelete="SET NULL"),
    )

    diagnosis: Mapped[str] = mapped_column(Text, nullable=False)
    treatment: Mapped[Optional[str]] = mapped_column(Text)
    prescription: Mapped[Optional[str]] = mapped_column(Text)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    attachments: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    record_date: Mapped[date] = mapped_column(Date, default=date.today, nullable=False)

    patient: Mapped["Patient"] = relationship("Patient", back_populates="medical_records")
    doctor: Mapped["Doctor"] = relationship("Doctor")

    @property
    def doctor_name(self) -> Optional[str]:
        return self.doctor.doctor_name if self.doctor else None


__all__ = ["MedicalRecord"]
