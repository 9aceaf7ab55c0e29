from datetime import date
from decimal import Decimal

BOOKING_DAY = date(2025, 6, 1).isoformat()


async def test_health_reports_database(client):
    response = await client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "Healthy"
    assert body["database"]["healthy"] is True


async def test_missing_doctor_uses_error_envelope(client):
    response = await client.get("/doctors/no-such-doctor")
    assert response.status_code == 404
    body = response.json()
    assert body["error"] == "DOCTOR_NOT_FOUND"
    assert "no-such-doctor" in body["message"]
    assert "timestamp" in body


async def test_create_doctor_applies_default_free_window(client):
    response = await client.post(
        "/doctors/",
        json={"doctor_name": "Dr. Huda", "specialization": "Dermatology", "consultation_fee": "120"},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["free_return_days"] == 7
    assert Decimal(body["consultation_fee"]) == Decimal("120")

    explicit = await client.post(
        "/doctors/",
        json={"specialization": "Cardiology", "free_return_days": None},
    )
    assert explicit.json()["free_return_days"] is None


async def test_create_doctor_rejects_inverted_hours(client):
    response = await client.post(
        "/doctors/",
        json={
            "specialization": "Dermatology",
            "working_hours_start": "17:00:00",
            "working_hours_end": "09:00:00",
        },
    )
    assert response.status_code == 422


async def test_fee_policy_put_replaces_all_fields(client, factory):
    doctor = await factory.doctor(
        consultation_fee="100", return_consultation_fee="60", free_return_days=10
    )

    response = await client.put(
        f"/doctors/{doctor.doctor_id}/fee-policy", json={"consultation_fee": "80"}
    )

    assert response.status_code == 200
    body = response.json()
    assert Decimal(body["consultation_fee"]) == Decimal("80")
    assert body["return_consultation_fee"] is None
    assert body["free_return_days"] is None


async def test_fee_policy_is_null_without_any_fee(client, factory):
    priced = await factory.doctor(consultation_fee="90", free_return_days=5)
    unpriced = await factory.doctor(
        consultation_fee=None, return_consultation_fee=None, free_return_days=None
    )

    policy = (await client.get(f"/doctors/{priced.doctor_id}/fee-policy")).json()
    assert Decimal(policy["consultation_fee"]) == Decimal("90")
    assert policy["free_return_days"] == 5

    response = await client.get(f"/doctors/{unpriced.doctor_id}/fee-policy")
    assert response.status_code == 200
    assert response.json() is None


async def test_doctor_search_matches_specialization(client, factory):
    await factory.doctor(specialization="Pediatrics")
    await factory.doctor(specialization="Orthopedics")

    response = await client.get("/doctors/", params={"q": "pedia"})

    assert [d["specialization"] for d in response.json()] == ["Pediatrics"]


async def test_booking_registers_new_patient(client, factory):
    doctor = await factory.doctor()

    response = await client.post(
        "/appointments/",
        json={
            "doctor_id": doctor.doctor_id,
            "appointment_date": BOOKING_DAY,
            "appointment_time": "10:30:00",
            "new_patient": {"full_name": "Layla Hassan", "phone": "0507654321"},
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "scheduled"
    assert body["patient"]["full_name"] == "Layla Hassan"
    assert body["doctor"]["doctor_id"] == doctor.doctor_id

    found = await client.get("/patients/search", params={"q": "layla"})
    assert [p["patient_id"] for p in found.json()] == [body["patient_id"]]

    schedule = await client.get("/appointments/", params={"on": BOOKING_DAY})
    assert [a["appointment_id"] for a in schedule.json()] == [body["appointment_id"]]


async def test_booking_needs_exactly_one_patient_source(client, factory):
    doctor = await factory.doctor()
    patient = await factory.patient()

    response = await client.post(
        "/appointments/",
        json={
            "doctor_id": doctor.doctor_id,
            "patient_id": patient.patient_id,
            "new_patient": {"full_name": "Someone Else", "phone": "0500000000"},
            "appointment_date": BOOKING_DAY,
            "appointment_time": "09:00:00",
        },
    )
    assert response.status_code == 422


async def test_unavailable_doctor_cannot_be_booked(client, factory):
    doctor = await factory.doctor()
    patient = await factory.patient()

    toggled = await client.post(f"/doctors/{doctor.doctor_id}/toggle-availability")
    assert toggled.json()["is_available"] is False

    response = await client.post(
        "/appointments/",
        json={
            "doctor_id": doctor.doctor_id,
            "patient_id": patient.patient_id,
            "appointment_date": BOOKING_DAY,
            "appointment_time": "09:00:00",
        },
    )
    assert response.status_code == 409
    assert response.json()["error"] == "DOCTOR_UNAVAILABLE"


async def test_completing_an_appointment(client, factory):
    doctor = await factory.doctor()
    patient = await factory.patient()
    booked = await client.post(
        "/appointments/",
        json={
            "doctor_id": doctor.doctor_id,
            "patient_id": patient.patient_id,
            "appointment_date": BOOKING_DAY,
            "appointment_time": "11:00:00",
        },
    )
    appointment_id = booked.json()["appointment_id"]

    response = await client.patch(
        f"/appointments/{appointment_id}",
        json={"status": "completed", "diagnosis": "Seasonal flu", "cost": "75"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "completed"
    assert body["diagnosis"] == "Seasonal flu"
    assert Decimal(body["cost"]) == Decimal("75")

    completed = await client.get(
        "/appointments/", params={"on": BOOKING_DAY, "status": "completed"}
    )
    assert len(completed.json()) == 1


async def test_patient_search_treats_wildcards_literally(client, factory):
    await factory.patient(full_name="Noor 100% Ali")
    await factory.patient(full_name="Noor Ahmed")

    response = await client.get("/patients/search", params={"q": "100%"})

    assert [p["full_name"] for p in response.json()] == ["Noor 100% Ali"]


async def test_doctor_with_medical_records_cannot_be_deleted(client, factory):
    doctor = await factory.doctor()
    patient = await factory.patient()

    created = await client.post(
        "/medical-records/",
        json={
            "patient_id": patient.patient_id,
            "doctor_id": doctor.doctor_id,
            "diagnosis": "Hypertension",
        },
    )
    assert created.status_code == 201
    assert created.json()["doctor"]["doctor_name"] == doctor.doctor_name

    records = await client.get(f"/patients/{patient.patient_id}/medical-records")
    assert [r["diagnosis"] for r in records.json()] == ["Hypertension"]

    response = await client.delete(f"/doctors/{doctor.doctor_id}")
    assert response.status_code == 409
    assert response.json()["error"] == "DOCTOR_HAS_RECORDS"


async def test_role_permissions_endpoint(client):
    response = await client.get("/users/roles/receptionist/permissions")
    assert response.status_code == 200
    assert response.json()["permissions"]["manage_waiting_list"] is True

    updated = await client.put(
        "/users/roles/receptionist/permissions/manage_waiting_list",
        json={"is_allowed": False},
    )
    assert updated.json()["permissions"]["manage_waiting_list"] is False

    unknown = await client.put(
        "/users/roles/receptionist/permissions/fly", json={"is_allowed": True}
    )
    assert unknown.status_code == 422
    assert unknown.json()["error"] == "UNKNOWN_PERMISSION"


async def test_user_creation_and_role_assignment(client):
    created = await client.post(
        "/users/",
        json={"user_id": "user-1", "full_name": "Reem Khalid", "role": "receptionist"},
    )
    assert created.status_code == 201
    assert created.json()["roles"] == ["receptionist"]

    duplicate = await client.post(
        "/users/", json={"user_id": "user-1", "full_name": "Reem Khalid"}
    )
    assert duplicate.status_code == 409

    assigned = await client.put("/users/user-1/role", json={"role": "admin"})
    assert assigned.status_code == 200
    assert assigned.json()["roles"] == ["admin"]


async def test_settings_fall_back_to_defaults_then_update(client):
    response = await client.get("/settings/")
    assert response.status_code == 200
    assert response.json()["currency_code"] == "SAR"

    updated = await client.patch("/settings/", json={"center_name": "Al Noor Clinic"})
    assert updated.json()["center_name"] == "Al Noor Clinic"
