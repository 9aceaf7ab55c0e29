# app/billing/revenue_types.py
"""
Read models consumed by the revenue calculator.

These are deliberately decoupled from the ORM: services build them from
Appointment/Doctor rows, tests build them by hand.
"""

from __future__ import annotations
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Protocol
from pydantic import BaseModel, Field, ConfigDict
from app.db.models import AppointmentStatus

ZERO = Decimal("0")


class ContributionReason(str, Enum):
    """Which branch of the fee rules produced an amount."""

    NEW_VISIT = "new_visit"
    RETURN_NO_HISTORY = "return_no_history"
    RETURN_FREE = "return_free"
    RETURN_PAID = "return_paid"
    NOT_COMPLETED = "not_completed"


class DoctorFeePolicy(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    doctor_id: str
    consultation_fee: Optional[Decimal] = Field(None, ge=0)
    return_consultation_fee: Optional[Decimal] = Field(None, ge=0)
    # None means the doctor offers no free-return window
    free_return_days: Optional[int] = Field(None, ge=0)


class BillableAppointment(BaseModel):
    model_config = ConfigDict(frozen=True)

    appointment_id: str
    patient_id: str
    doctor_id: str
    appointment_date: date
    status: AppointmentStatus = AppointmentStatus.COMPLETED
    cost: Optional[Decimal] = Field(None, ge=0)
    is_return_visit: bool = False
    # None when the doctor has no fee-policy record at all
    fee_policy: Optional[DoctorFeePolicy] = None


class PriorVisit(BaseModel):
    model_config = ConfigDict(frozen=True)

    appointment_id: str
    appointment_date: date


class RevenueContribution(BaseModel):
    model_config = ConfigDict(frozen=True)

    appointment_id: str
    amount: Decimal = Field(..., ge=0)
    reason: ContributionReason
    days_since_prior_visit: Optional[int] = None
    missing_fee_policy: bool = False


class RevenueSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: Decimal
    contributions: list[RevenueContribution]
    free_return_visits: int = 0
    missing_fee_policies: int = 0


class PriorVisitLookup(Protocol):
    """
    Query capability for the most recent completed visit of a pair.

    Implementations return the latest completed appointment (by date) for
    ``(patient_id, doctor_id)`` other than ``excluding_appointment_id``, or
    None. There is no date cutoff.
    """

    async def find_prior_visit(
        self,
        patient_id: str,
        doctor_id: str,
        excluding_appointment_id: str,
    ) -> Optional[PriorVisit]: ...


__all__ = [
    "ZERO",
    "ContributionReason",
    "DoctorFeePolicy",
    "BillableAppointment",
    "PriorVisit",
    "RevenueContribution",
    "RevenueSummary",
    "PriorVisitLookup",
]
