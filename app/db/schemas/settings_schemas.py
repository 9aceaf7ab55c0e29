# app/db/schemas/settings_schemas.py
from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime, time
from typing import Optional, List


class SettingsUpdate(BaseModel):
    center_name: Optional[str] = Field(None, min_length=2, max_length=150)
    center_name_en: Optional[str] = Field(None, max_length=150)
    address: Optional[str] = Field(None, max_length=300)
    phone: Optional[str] = Field(None, max_length=30)
    email: Optional[str] = Field(None, max_length=200)
    logo_url: Optional[str] = Field(None, max_length=500)
    working_hours_start: Optional[time] = None
    working_hours_end: Optional[time] = None
    working_days: Optional[List[str]] = None
    currency_code: Optional[str] = Field(None, pattern=r"^[A-Z]{3}$")
    currency_symbol: Optional[str] = Field(None, max_length=10)
    currency_name: Optional[str] = Field(None, max_length=50)


class SettingsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    settings_id: str
    center_name: str
    center_name_en: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    logo_url: Optional[str] = None
    working_hours_start: time
    working_hours_end: time
    working_days: List[str]
    currency_code: str
    currency_symbol: str
    currency_name: str
    updated_at: datetime


__all__ = ["SettingsUpdate", "SettingsResponse"]
