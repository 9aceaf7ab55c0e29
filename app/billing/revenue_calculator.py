# app/billing/revenue_calculator.py
"""
Daily revenue with free return visits.

A return visit is free when the patient had a completed visit with the same
doctor no more than ``free_return_days`` calendar days earlier (inclusive).
Every other completed appointment is billed through the fee cascade:

    recorded cost -> return fee (return visits only) -> consultation fee -> 0

The functions here never read a clock and never touch the database. The
only suspending step is the injected PriorVisitLookup.
"""

import asyncio
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from app.db.models import AppointmentStatus
from common.logger import get_app_logger
from .revenue_types import (
    ZERO,
    BillableAppointment,
    ContributionReason,
    PriorVisit,
    PriorVisitLookup,
    RevenueContribution,
    RevenueSummary,
)

logger = get_app_logger(__name__)


def _first_present(*amounts: Optional[Decimal]) -> Decimal:
    for amount in amounts:
        if amount is not None:
            return amount
    return ZERO


def standard_fee(appointment: BillableAppointment) -> Decimal:
    """cost -> consultation_fee -> 0"""
    policy = appointment.fee_policy
    return _first_present(
        appointment.cost,
        policy.consultation_fee if policy else None,
    )


def return_fee(appointment: BillableAppointment) -> Decimal:
    """cost -> return_consultation_fee -> consultation_fee -> 0"""
    policy = appointment.fee_policy
    return _first_present(
        appointment.cost,
        policy.return_consultation_fee if policy else None,
        policy.consultation_fee if policy else None,
    )


def needs_prior_visit(appointment: BillableAppointment) -> bool:
    return (
        appointment.is_return_visit
        and appointment.status == AppointmentStatus.COMPLETED
    )


def contribution_for(
    appointment: BillableAppointment,
    prior_visit: Optional[PriorVisit] = None,
) -> RevenueContribution:
    """
    Amount one appointment adds to the day's revenue.

    ``prior_visit`` is ignored for non-return visits, and a prior visit
    dated after the appointment day is not a reference point. A visit
    earlier the same day counts as zero days ago.
    """
    missing_policy = appointment.fee_policy is None

    def _result(
        amount: Decimal, reason: ContributionReason, days: Optional[int] = None
    ) -> RevenueContribution:
        return RevenueContribution(
            appointment_id=appointment.appointment_id,
            amount=amount,
            reason=reason,
            days_since_prior_visit=days,
            missing_fee_policy=missing_policy,
        )

    if appointment.status != AppointmentStatus.COMPLETED:
        return _result(ZERO, ContributionReason.NOT_COMPLETED)

    if not appointment.is_return_visit:
        return _result(standard_fee(appointment), ContributionReason.NEW_VISIT)

    if prior_visit is None:
        return _result(return_fee(appointment), ContributionReason.RETURN_NO_HISTORY)

    days = (appointment.appointment_date - prior_visit.appointment_date).days
    if days < 0:
        return _result(return_fee(appointment), ContributionReason.RETURN_NO_HISTORY)

    window = appointment.fee_policy.free_return_days if appointment.fee_policy else None
    if window is not None and days <= window:
        return _result(ZERO, ContributionReason.RETURN_FREE, days)

    return _result(return_fee(appointment), ContributionReason.RETURN_PAID, days)


def sum_contributions(contributions: Iterable[RevenueContribution]) -> Decimal:
    """Exact Decimal sum; input order never changes the result."""
    return sum((c.amount for c in contributions), ZERO)


async def resolve_prior_visits(
    appointments: Sequence[BillableAppointment],
    lookup: PriorVisitLookup,
    *,
    concurrency: int = 1,
) -> list[Optional[PriorVisit]]:
    """
    Look up prior visits for the appointments that need one.

    Results line up with ``appointments`` by index; entries that need no
    lookup are None. With ``concurrency > 1`` at most that many lookups are
    in flight at once. Lookup errors propagate unchanged.
    """
    if concurrency < 1:
        raise ValueError("concurrency must be >= 1")

    async def _lookup(appointment: BillableAppointment) -> Optional[PriorVisit]:
        return await lookup.find_prior_visit(
            appointment.patient_id,
            appointment.doctor_id,
            appointment.appointment_id,
        )

    results: list[Optional[PriorVisit]] = [None] * len(appointments)
    pending = [i for i, appt in enumerate(appointments) if needs_prior_visit(appt)]

    if concurrency == 1:
        for i in pending:
            results[i] = await _lookup(appointments[i])
        return results

    semaphore = asyncio.Semaphore(concurrency)

    async def _bounded(i: int) -> None:
        async with semaphore:
            results[i] = await _lookup(appointments[i])

    await asyncio.gather(*(_bounded(i) for i in pending))
    return results


async def summarize_daily_revenue(
    appointments: Sequence[BillableAppointment],
    prior_visit_lookup: PriorVisitLookup,
    *,
    concurrency: int = 1,
) -> RevenueSummary:
    """Resolve prior visits, then price every appointment."""
    prior_visits = await resolve_prior_visits(
        appointments, prior_visit_lookup, concurrency=concurrency
    )
    contributions = [
        contribution_for(appointment, prior)
        for appointment, prior in zip(appointments, prior_visits)
    ]

    missing_doctors = sorted(
        {
            appt.doctor_id
            for appt, c in zip(appointments, contributions)
            if c.missing_fee_policy and c.reason != ContributionReason.NOT_COMPLETED
        }
    )
    if missing_doctors:
        logger.warning(
            "Completed appointments priced without a doctor fee policy",
            doctor_ids=missing_doctors,
        )

    return RevenueSummary(
        total=sum_contributions(contributions),
        contributions=contributions,
        free_return_visits=sum(
            1 for c in contributions if c.reason == ContributionReason.RETURN_FREE
        ),
        missing_fee_policies=sum(
            1
            for c in contributions
            if c.missing_fee_policy and c.reason != ContributionReason.NOT_COMPLETED
        ),
    )


async def compute_daily_revenue(
    appointments: Sequence[BillableAppointment],
    prior_visit_lookup: PriorVisitLookup,
    *,
    concurrency: int = 1,
) -> Decimal:
    """Total revenue of the given completed appointments."""
    summary = await summarize_daily_revenue(
        appointments, prior_visit_lookup, concurrency=concurrency
    )
    return summary.total


__all__ = [
    "standard_fee",
    "return_fee",
    "contribution_for",
    "sum_contributions",
    "resolve_prior_visits",
    "summarize_daily_revenue",
    "compute_daily_revenue",
]
