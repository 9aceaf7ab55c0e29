# app/db/models/center_settings_table.py
from datetime import time
from typing import Optional
from sqlalchemy import String, Time, JSON
from sqlalchemy.orm import Mapped, mapped_column
from .db_base_model import DbBaseModel
from .doctor_table import DEFAULT_WORKING_DAYS

# Row inserted when the clinic has never saved its settings
DEFAULT_CENTER_SETTINGS = {
    "center_name": "المركز الطبي",
    "center_name_en": "Medical Center",
    "working_hours_start": time(8, 0),
    "working_hours_end": time(17, 0),
    "currency_code": "SAR",
    "currency_symbol": "ر.س",
    "currency_name": "ريال سعودي",
}


class CenterSettings(DbBaseModel):
    """Single-row table holding clinic-wide settings."""

    __tablename__ = "center_settings"

    settings_id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=DbBaseModel.generate_uuid,
    )

    center_name: Mapped[str] = mapped_column(String(150), nullable=False)
    center_name_en: Mapped[Optional[str]] = mapped_column(String(150))
    address: Mapped[Optional[str]] = mapped_column(String(300))
    phone: Mapped[Optional[str]] = mapped_column(String(30))
    email: Mapped[Optional[str]] = mapped_column(String(200))
    logo_url: Mapped[Optional[str]] = mapped_column(String(500))

    working_hours_start: Mapped[time] = mapped_column(Time, default=time(8, 0), nullable=False)
    working_hours_end: Mapped[time] = mapped_column(Time, default=time(17, 0), nullable=False)
    working_days: Mapped[list[str]] = mapped_column(
        JSON, default=lambda: list(DEFAULT_WORKING_DAYS), nullable=False
    )

    currency_code: Mapped[str] = mapped_column(String(3), default="SAR", nullable=False)
    currency_symbol: Mapped[str] = mapped_column(String(10), default="ر.س", nullable=False)
    currency_name: Mapped[str] = mapped_column(String(50), default="ريال سعودي", nullable=False)


__all__ = ["CenterSettings", "DEFAULT_CENTER_SETTINGS"]
