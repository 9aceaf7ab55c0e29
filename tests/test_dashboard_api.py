from datetime import datetime, time, timedelta, timezone
from decimal import Decimal

from app.db.models import AppointmentStatus

# Patients are stamped in UTC, so "today" must be the UTC date
TODAY = datetime.now(tz=timezone.utc).date()


async def test_daily_stats_counts_and_revenue(client, factory):
    doctor = await factory.doctor(
        consultation_fee="50", return_consultation_fee="30", free_return_days=7
    )
    no_policy = await factory.doctor(
        consultation_fee=None, return_consultation_fee=None, free_return_days=None
    )
    recent, new, lapsed, walk_in = [await factory.patient() for _ in range(4)]

    # History
    await factory.appointment(recent, doctor, TODAY - timedelta(days=3))
    await factory.appointment(lapsed, doctor, TODAY - timedelta(days=15))

    # Today
    await factory.appointment(recent, doctor, TODAY, is_return_visit=True)
    await factory.appointment(new, doctor, TODAY, cost="100")
    await factory.appointment(lapsed, doctor, TODAY, cost="40", is_return_visit=True)
    await factory.appointment(walk_in, no_policy, TODAY)
    await factory.appointment(walk_in, doctor, TODAY, status=AppointmentStatus.WAITING)
    await factory.appointment(new, doctor, TODAY, status=AppointmentStatus.SCHEDULED)
    await factory.appointment(recent, doctor, TODAY, status=AppointmentStatus.CANCELLED)

    response = await client.get("/dashboard/daily", params={"on": TODAY.isoformat()})

    assert response.status_code == 200
    body = response.json()
    assert body["day"] == TODAY.isoformat()
    assert body["total_appointments"] == 7
    assert body["completed_appointments"] == 4
    assert body["waiting_appointments"] == 2
    assert body["total_patients"] == 4
    assert body["new_patients"] == 4
    assert body["available_doctors"] == 2
    assert Decimal(body["revenue"]) == Decimal("140")
    assert Decimal(body["average_revenue"]) == Decimal("35.00")
    assert body["free_return_visits"] == 1
    assert body["missing_fee_policies"] == 1
    assert body["currency_code"] == "SAR"

    reasons = sorted(c["reason"] for c in body["contributions"])
    assert reasons == ["new_visit", "new_visit", "return_free", "return_paid"]


async def test_daily_stats_for_an_empty_day(client):
    response = await client.get("/dashboard/daily", params={"on": "2024-01-01"})

    assert response.status_code == 200
    body = response.json()
    assert body["total_appointments"] == 0
    assert Decimal(body["revenue"]) == Decimal("0")
    assert Decimal(body["average_revenue"]) == Decimal("0")
    assert body["contributions"] == []


async def test_return_after_a_visit_earlier_the_same_day_is_free(client, factory):
    doctor = await factory.doctor(
        consultation_fee="50", return_consultation_fee="30", free_return_days=7
    )
    patient = await factory.patient()
    await factory.appointment(patient, doctor, TODAY, at=time(9, 0))
    await factory.appointment(patient, doctor, TODAY, at=time(15, 0), is_return_visit=True)

    response = await client.get("/dashboard/daily", params={"on": TODAY.isoformat()})

    body = response.json()
    assert Decimal(body["revenue"]) == Decimal("50")
    assert body["free_return_visits"] == 1
    reasons = sorted(c["reason"] for c in body["contributions"])
    assert reasons == ["new_visit", "return_free"]


async def test_same_day_return_visits_count_each_other(client, factory):
    doctor = await factory.doctor(
        consultation_fee="50", return_consultation_fee="30", free_return_days=0
    )
    patient = await factory.patient()
    await factory.appointment(patient, doctor, TODAY, at=time(9, 0), is_return_visit=True)
    await factory.appointment(patient, doctor, TODAY, at=time(15, 0), is_return_visit=True)

    response = await client.get("/dashboard/daily", params={"on": TODAY.isoformat()})

    body = response.json()
    assert Decimal(body["revenue"]) == Decimal("0")
    assert body["free_return_visits"] == 2


async def test_daily_stats_rejects_bad_dates(client):
    response = await client.get("/dashboard/daily", params={"on": "yesterday"})
    assert response.status_code == 422
