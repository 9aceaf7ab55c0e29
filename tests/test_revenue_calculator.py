import asyncio
import itertools
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

import pytest

from app.billing import (
    BillableAppointment,
    ContributionReason,
    DoctorFeePolicy,
    PriorVisit,
    compute_daily_revenue,
    contribution_for,
    resolve_prior_visits,
    return_fee,
    standard_fee,
    sum_contributions,
    summarize_daily_revenue,
)
from app.db.models import AppointmentStatus

DAY_0 = date(2025, 3, 1)


@dataclass
class Visit:
    appointment_id: str
    patient_id: str
    doctor_id: str
    appointment_date: date


class InMemoryLookup:
    def __init__(self, *visits: Visit, delay: float = 0):
        self.visits = list(visits)
        self.delay = delay
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def find_prior_visit(
        self,
        patient_id: str,
        doctor_id: str,
        excluding_appointment_id: str,
    ) -> Optional[PriorVisit]:
        self.calls.append(excluding_appointment_id)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1

        candidates = [
            v
            for v in self.visits
            if v.patient_id == patient_id
            and v.doctor_id == doctor_id
            and v.appointment_id != excluding_appointment_id
        ]
        if not candidates:
            return None
        latest = max(candidates, key=lambda v: v.appointment_date)
        return PriorVisit(
            appointment_id=latest.appointment_id,
            appointment_date=latest.appointment_date,
        )


class BrokenLookup:
    async def find_prior_visit(self, *args, **kwargs):
        raise ConnectionError("storage unreachable")


def policy(
    consultation_fee: Optional[str] = "50",
    return_consultation_fee: Optional[str] = "30",
    free_return_days: Optional[int] = 7,
) -> DoctorFeePolicy:
    return DoctorFeePolicy(
        doctor_id="doc-1",
        consultation_fee=None if consultation_fee is None else Decimal(consultation_fee),
        return_consultation_fee=(
            None if return_consultation_fee is None else Decimal(return_consultation_fee)
        ),
        free_return_days=free_return_days,
    )


def appointment(
    appointment_id: str = "appt-1",
    on: date = DAY_0,
    cost: Optional[str] = None,
    is_return_visit: bool = False,
    fee_policy: Optional[DoctorFeePolicy] = None,
    status: AppointmentStatus = AppointmentStatus.COMPLETED,
    patient_id: str = "pat-1",
) -> BillableAppointment:
    return BillableAppointment(
        appointment_id=appointment_id,
        patient_id=patient_id,
        doctor_id="doc-1",
        appointment_date=on,
        status=status,
        cost=None if cost is None else Decimal(cost),
        is_return_visit=is_return_visit,
        fee_policy=fee_policy,
    )


def prior(days_before: int, of: date = DAY_0) -> PriorVisit:
    return PriorVisit(appointment_id="prior", appointment_date=of - timedelta(days=days_before))


# Fee cascade


@pytest.mark.parametrize(
    "cost, fees, expected",
    [
        ("80", policy(), Decimal("80")),
        (None, policy(), Decimal("50")),
        (None, policy(consultation_fee=None), Decimal("0")),
        ("0", policy(), Decimal("0")),
    ],
)
def test_new_visit_uses_cost_then_consultation_fee(cost, fees, expected):
    appt = appointment(cost=cost, fee_policy=fees)
    assert standard_fee(appt) == expected
    assert contribution_for(appt).amount == expected


def test_new_visit_ignores_prior_visit():
    appt = appointment(cost=None, fee_policy=policy())
    result = contribution_for(appt, prior(1))
    assert result.amount == Decimal("50")
    assert result.reason == ContributionReason.NEW_VISIT


def test_return_fee_cascade():
    assert return_fee(appointment(cost="45", fee_policy=policy())) == Decimal("45")
    assert return_fee(appointment(fee_policy=policy())) == Decimal("30")
    assert return_fee(appointment(fee_policy=policy(return_consultation_fee=None))) == Decimal("50")
    assert (
        return_fee(
            appointment(fee_policy=policy(consultation_fee=None, return_consultation_fee=None))
        )
        == Decimal("0")
    )


# Free return window


def test_return_visit_on_window_boundary_is_free():
    appt = appointment(is_return_visit=True, fee_policy=policy(free_return_days=7))
    result = contribution_for(appt, prior(7))
    assert result.amount == Decimal("0")
    assert result.reason == ContributionReason.RETURN_FREE
    assert result.days_since_prior_visit == 7


def test_return_visit_one_day_past_window_is_paid():
    appt = appointment(is_return_visit=True, fee_policy=policy(free_return_days=7))
    result = contribution_for(appt, prior(8))
    assert result.amount == Decimal("30")
    assert result.reason == ContributionReason.RETURN_PAID
    assert result.days_since_prior_visit == 8


def test_return_visit_without_history_is_never_free():
    appt = appointment(is_return_visit=True, fee_policy=policy())
    result = contribution_for(appt, None)
    assert result.amount == Decimal("30")
    assert result.reason == ContributionReason.RETURN_NO_HISTORY


def test_unset_free_return_days_means_no_window():
    appt = appointment(is_return_visit=True, fee_policy=policy(free_return_days=None))
    result = contribution_for(appt, prior(1))
    assert result.amount == Decimal("30")
    assert result.reason == ContributionReason.RETURN_PAID


def test_zero_day_window_pays_for_next_day_return():
    appt = appointment(is_return_visit=True, fee_policy=policy(free_return_days=0))
    assert contribution_for(appt, prior(1)).amount == Decimal("30")


def test_prior_visit_earlier_the_same_day_makes_return_free():
    appt = appointment(is_return_visit=True, fee_policy=policy())
    result = contribution_for(appt, prior(0))
    assert result.amount == Decimal("0")
    assert result.reason == ContributionReason.RETURN_FREE
    assert result.days_since_prior_visit == 0


def test_same_day_prior_visit_is_free_even_with_zero_day_window():
    appt = appointment(is_return_visit=True, fee_policy=policy(free_return_days=0))
    assert contribution_for(appt, prior(0)).amount == Decimal("0")


def test_prior_visit_after_the_appointment_day_is_ignored():
    appt = appointment(is_return_visit=True, fee_policy=policy())
    result = contribution_for(appt, prior(-3))
    assert result.amount == Decimal("30")
    assert result.reason == ContributionReason.RETURN_NO_HISTORY


def test_explicit_zero_cost_is_a_present_value():
    appt = appointment(cost="0", is_return_visit=True, fee_policy=policy())
    assert contribution_for(appt, prior(30)).amount == Decimal("0")


def test_not_completed_appointments_contribute_nothing():
    appt = appointment(
        cost="100", fee_policy=policy(), status=AppointmentStatus.CANCELLED
    )
    result = contribution_for(appt)
    assert result.amount == Decimal("0")
    assert result.reason == ContributionReason.NOT_COMPLETED


def test_missing_fee_policy_is_flagged():
    result = contribution_for(appointment(fee_policy=None))
    assert result.amount == Decimal("0")
    assert result.missing_fee_policy is True

    with_cost = contribution_for(appointment(cost="70", fee_policy=None))
    assert with_cost.amount == Decimal("70")
    assert with_cost.missing_fee_policy is True


# Worked examples


@pytest.mark.parametrize(
    "return_day, return_consultation_fee, expected",
    [
        (7, "30", Decimal("0")),
        (8, "30", Decimal("30")),
        (8, None, Decimal("50")),
    ],
)
async def test_grace_window_example(return_day, return_consultation_fee, expected):
    fees = policy("50", return_consultation_fee, 7)
    lookup = InMemoryLookup(Visit("first", "pat-1", "doc-1", DAY_0))
    returning = appointment(
        appointment_id="again",
        on=DAY_0 + timedelta(days=return_day),
        is_return_visit=True,
        fee_policy=fees,
    )
    assert await compute_daily_revenue([returning], lookup) == expected


def _mixed_day():
    today = DAY_0 + timedelta(days=20)
    fees = policy("50", "30", 7)
    appointments = [
        appointment("new", on=today, cost="100", fee_policy=fees, patient_id="pat-a"),
        appointment("free", on=today, is_return_visit=True, fee_policy=fees, patient_id="pat-b"),
        appointment(
            "paid", on=today, cost="40", is_return_visit=True, fee_policy=fees, patient_id="pat-c"
        ),
    ]
    lookup = InMemoryLookup(
        Visit("b-first", "pat-b", "doc-1", today - timedelta(days=3)),
        Visit("c-first", "pat-c", "doc-1", today - timedelta(days=15)),
    )
    return appointments, lookup


async def test_total_is_independent_of_input_order():
    appointments, lookup = _mixed_day()
    for permutation in itertools.permutations(appointments):
        assert await compute_daily_revenue(list(permutation), lookup) == Decimal("140")


async def test_summary_counts_free_visits_and_keeps_input_order():
    appointments, lookup = _mixed_day()
    summary = await summarize_daily_revenue(appointments, lookup)

    assert summary.total == Decimal("140")
    assert summary.free_return_visits == 1
    assert summary.missing_fee_policies == 0
    assert [c.appointment_id for c in summary.contributions] == ["new", "free", "paid"]
    assert [c.amount for c in summary.contributions] == [
        Decimal("100"),
        Decimal("0"),
        Decimal("40"),
    ]


async def test_summary_counts_missing_fee_policies():
    appointments = [
        appointment("a", fee_policy=None),
        appointment("b", fee_policy=None, status=AppointmentStatus.WAITING),
        appointment("c", cost="20", fee_policy=policy()),
    ]
    summary = await summarize_daily_revenue(appointments, InMemoryLookup())
    assert summary.total == Decimal("20")
    assert summary.missing_fee_policies == 1


def test_sum_contributions_of_nothing_is_zero():
    assert sum_contributions([]) == Decimal("0")


# Prior-visit resolution


async def test_only_completed_return_visits_are_looked_up():
    fees = policy()
    appointments = [
        appointment("new", fee_policy=fees),
        appointment("ret", is_return_visit=True, fee_policy=fees),
        appointment(
            "ret-waiting",
            is_return_visit=True,
            fee_policy=fees,
            status=AppointmentStatus.WAITING,
        ),
    ]
    lookup = InMemoryLookup()
    results = await resolve_prior_visits(appointments, lookup)

    assert lookup.calls == ["ret"]
    assert results == [None, None, None]


async def test_concurrent_resolution_matches_sequential():
    fees = policy()
    appointments = [
        appointment(f"ret-{i}", is_return_visit=True, fee_policy=fees, patient_id=f"pat-{i}")
        for i in range(8)
    ]
    visits = [
        Visit(f"first-{i}", f"pat-{i}", "doc-1", DAY_0 - timedelta(days=i * 2))
        for i in range(8)
    ]

    sequential = InMemoryLookup(*visits, delay=0.001)
    concurrent = InMemoryLookup(*visits, delay=0.001)

    expected = await compute_daily_revenue(appointments, sequential)
    total = await compute_daily_revenue(appointments, concurrent, concurrency=3)

    assert total == expected
    assert sequential.max_in_flight == 1
    assert 1 < concurrent.max_in_flight <= 3


async def test_concurrency_must_be_positive():
    with pytest.raises(ValueError):
        await resolve_prior_visits([], InMemoryLookup(), concurrency=0)


async def test_lookup_failures_propagate():
    appt = appointment(is_return_visit=True, fee_policy=policy())
    with pytest.raises(ConnectionError):
        await compute_daily_revenue([appt], BrokenLookup())
