from datetime import date, time, timedelta

from app.db.models import AppointmentStatus
from app.services.v1 import SqlPriorVisitLookup

TODAY = date(2025, 5, 20)


async def test_returns_latest_completed_visit_of_the_pair(db_manager, factory):
    doctor = await factory.doctor()
    other_doctor = await factory.doctor()
    patient = await factory.patient()

    await factory.appointment(patient, doctor, TODAY - timedelta(days=30))
    latest = await factory.appointment(patient, doctor, TODAY - timedelta(days=4))
    # Later but not completed, or with someone else
    await factory.appointment(
        patient, doctor, TODAY - timedelta(days=2), status=AppointmentStatus.CANCELLED
    )
    await factory.appointment(patient, other_doctor, TODAY - timedelta(days=1))
    current = await factory.appointment(patient, doctor, TODAY, is_return_visit=True)

    found = await SqlPriorVisitLookup(db_manager).find_prior_visit(
        patient.patient_id, doctor.doctor_id, current.appointment_id
    )

    assert found is not None
    assert found.appointment_id == latest.appointment_id
    assert found.appointment_date == TODAY - timedelta(days=4)


async def test_excludes_the_appointment_itself(db_manager, factory):
    doctor = await factory.doctor()
    patient = await factory.patient()
    only = await factory.appointment(patient, doctor, TODAY)

    lookup = SqlPriorVisitLookup(db_manager)
    assert await lookup.find_prior_visit(
        patient.patient_id, doctor.doctor_id, only.appointment_id
    ) is None


async def test_finds_a_visit_earlier_the_same_day(db_manager, factory):
    doctor = await factory.doctor()
    patient = await factory.patient()
    await factory.appointment(patient, doctor, TODAY - timedelta(days=3))
    morning = await factory.appointment(patient, doctor, TODAY, at=time(9, 0))
    current = await factory.appointment(
        patient, doctor, TODAY, at=time(11, 0), is_return_visit=True
    )

    found = await SqlPriorVisitLookup(db_manager).find_prior_visit(
        patient.patient_id, doctor.doctor_id, current.appointment_id
    )

    assert found.appointment_id == morning.appointment_id
    assert found.appointment_date == TODAY


async def test_has_no_date_cutoff(db_manager, factory):
    doctor = await factory.doctor()
    patient = await factory.patient()
    await factory.appointment(patient, doctor, TODAY - timedelta(days=3))
    later = await factory.appointment(patient, doctor, TODAY + timedelta(days=5))
    current = await factory.appointment(patient, doctor, TODAY, is_return_visit=True)

    found = await SqlPriorVisitLookup(db_manager).find_prior_visit(
        patient.patient_id, doctor.doctor_id, current.appointment_id
    )

    assert found.appointment_id == later.appointment_id
