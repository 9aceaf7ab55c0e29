# app/db/models/doctor_table.py
from __future__ import annotations
from datetime import time
from decimal import Decimal
from typing import TYPE_CHECKING, Optional
from sqlalchemy import String, Text, Integer, Numeric, Boolean, Time, JSON
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .db_base_model import DbBaseModel

if TYPE_CHECKING:
    from .appointment_table import Appointment

DEFAULT_WORKING_DAYS = ["sunday", "monday", "tuesday", "wednesday", "thursday"]


class Doctor(DbBaseModel):
    __tablename__ = "doctors"

    doctor_id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=DbBaseModel.generate_uuid,
    )

    # Login account of the doctor, when one exists
    user_id: Mapped[Optional[str]] = mapped_column(String(36), unique=True)

    doctor_name: Mapped[Optional[str]] = mapped_column(String(100))
    specialization: Mapped[str] = mapped_column(String(100), nullable=False)
    license_number: Mapped[Optional[str]] = mapped_column(String(50))
    bio: Mapped[Optional[str]] = mapped_column(Text)
    experience_years: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Fee policy
    consultation_fee: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2))
    return_consultation_fee: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2))
    free_return_days: Mapped[Optional[int]] = mapped_column(Integer)

    is_available: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    working_days: Mapped[list[str]] = mapped_column(
        JSON, default=lambda: list(DEFAULT_WORKING_DAYS), nullable=False
    )
    working_hours_start: Mapped[time] = mapped_column(
        Time, default=time(9, 0), nullable=False
    )
    working_hours_end: Mapped[time] = mapped_column(
        Time, default=time(17, 0), nullable=False
    )

    appointments: Mapped[list["Appointment"]] = relationship(
        "Appointment", back_populates="doctor", cascade="all, delete-orphan"
    )

    @property
    def has_fee_policy(self) -> bool:
        return any(
            value is not None
            for value in (
                self.consultation_fee,
                self.return_consultation_fee,
                self.free_return_days,
            )
        )


__all__ = ["Doctor", "DEFAULT_WORKING_DAYS"]
