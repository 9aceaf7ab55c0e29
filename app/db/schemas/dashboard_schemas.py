# app/db/schemas/dashboard_schemas.py
from pydantic import BaseModel, Field
from datetime import date
from decimal import Decimal
from typing import List
from app.billing import RevenueContribution


class DailyStatsResponse(BaseModel):
    day: date
    total_appointments: int
    completed_appointments: int
    waiting_appointments: int = Field(..., description="Scheduled or waiting")
    total_patients: int
    new_patients: int = Field(..., description="Registered on `day`")
    available_doctors: int

    revenue: Decimal
    average_revenue: Decimal = Field(
        ..., description="Revenue per completed appointment, 2 decimal places"
    )
    free_return_visits: int
    missing_fee_policies: int
    currency_code: str
    contributions: List[RevenueContribution] = Field(default_factory=list)


__all__ = ["DailyStatsResponse"]
