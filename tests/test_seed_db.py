from datetime import date

from sqlalchemy import func, select

from app.db.models import Appointment, Doctor, Patient
from app.services.v1 import DashboardService
from scripts.db import DEFAULT_DATA_TEMPLATE, build_appointment_history, seed_db

TODAY = date(2025, 4, 30)


async def test_seed_db_inserts_doctors_patients_and_history(db_manager, tmp_path):
    results = await seed_db(
        db_manager,
        DEFAULT_DATA_TEMPLATE,
        records=8,
        today=TODAY,
        export_csv=True,
        csv_dir=str(tmp_path / "csv"),
    )

    assert len(results["doctors"]) == 8
    assert len(results["patients"]) == 8
    assert {p.full_name for p in results["patients"]} == {f"Patient {i}" for i in range(8)}
    assert all(d.free_return_days == 7 for d in results["doctors"])
    assert (tmp_path / "csv" / "appointments.csv").exists()

    async with db_manager.session() as session:
        for model, expected in (
            (Doctor, 8),
            (Patient, 8),
            (Appointment, len(results["appointments"])),
        ):
            count = await session.execute(select(func.count()).select_from(model))
            assert count.scalar_one() == expected


async def test_seeded_history_prices_on_the_dashboard(db_manager):
    await seed_db(db_manager, DEFAULT_DATA_TEMPLATE, records=12, today=TODAY)

    async with db_manager.session() as session:
        stats = await DashboardService(session, db_manager, lookup_concurrency=4).daily_stats(
            TODAY
        )

    assert stats.revenue >= 0
    assert stats.missing_fee_policies == 0
    assert len(stats.contributions) == stats.completed_appointments


def test_return_visits_follow_a_strictly_earlier_first_visit():
    doctors = [Doctor(doctor_id=f"doc-{i}", specialization="General") for i in range(2)]
    patients = [Patient(patient_id=f"pat-{i}", full_name="P", phone="050") for i in range(8)]

    history = build_appointment_history(
        patients, doctors, DEFAULT_DATA_TEMPLATE["appointments"], TODAY
    )

    first_visits = {
        (a.patient_id, a.doctor_id): a.appointment_date
        for a in history
        if not a.is_return_visit
    }
    returns = [a for a in history if a.is_return_visit]

    assert len(first_visits) == len(patients)
    assert returns
    for visit in returns:
        assert first_visits[(visit.patient_id, visit.doctor_id)] < visit.appointment_date
        assert visit.appointment_date <= TODAY


def test_no_history_without_doctors():
    assert build_appointment_history([], [], DEFAULT_DATA_TEMPLATE["appointments"], TODAY) == []
