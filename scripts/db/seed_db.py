# scripts/db/seed_db.py
import csv
from datetime import date, time, timedelta
from pathlib import Path
from typing import Any, Optional, Sequence

from app.db import DbManager
from app.db.models import (
    Appointment,
    AppointmentStatus,
    DbBaseModel,
    Doctor,
    Patient,
)
from app.db.schemas import DoctorCreate, PatientCreate
from common.logger import get_app_logger

logger = get_app_logger(__name__)

SCHEMA_MAP = {
    "doctors": DoctorCreate,
    "patients": PatientCreate,
}

MODEL_MAP = {
    "doctors": Doctor,
    "patients": Patient,
}


def write_rows_to_csv(filename: str, rows: Sequence[dict[str, Any]]) -> None:
    """Write plain dict rows to CSV; dates/times/decimals as ISO strings."""
    if not rows:
        return

    path = Path(filename)
    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
        writer.writeheader()
        for row in rows:
            writer.writerow(
                {
                    key: value.isoformat() if isinstance(value, (date, time)) else value
                    for key, value in row.items()
                }
            )


def build_appointment_history(
    patients: Sequence[Patient],
    doctors: Sequence[Doctor],
    template: dict[str, Any],
    today: date,
    start_index: int = 0,
) -> list[Appointment]:
    """
    One completed first visit per patient, plus a completed return visit
    for most of them, so daily revenue has free and paid returns to show.
    """
    if not doctors:
        return []

    history_days: int = template["history_days"]
    return_after: list[Optional[int]] = template["return_after"]
    appointments: list[Appointment] = []

    for offset, patient in enumerate(patients):
        i = start_index + offset
        doctor = doctors[i % len(doctors)]
        first_visit = today - timedelta(days=(i % history_days) + 1)
        slot = time(9 + (i % 8), 30 if i % 2 else 0)

        appointments.append(
            Appointment(
                appointment_id=DbBaseModel.generate_uuid(),
                patient_id=patient.patient_id,
                doctor_id=doctor.doctor_id,
                appointment_date=first_visit,
                appointment_time=slot,
                status=AppointmentStatus.COMPLETED,
            )
        )

        gap = return_after[i % len(return_after)]
        if gap is None or first_visit + timedelta(days=gap) > today:
            continue

        appointments.append(
            Appointment(
                appointment_id=DbBaseModel.generate_uuid(),
                patient_id=patient.patient_id,
                doctor_id=doctor.doctor_id,
                appointment_date=first_visit + timedelta(days=gap),
                appointment_time=slot,
                status=AppointmentStatus.COMPLETED,
                is_return_visit=True,
            )
        )

    return appointments


async def seed_db(
    db_manager: DbManager,
    data_template: dict[str, dict],
    records: int,
    today: date,
    start_index: int = 0,
    export_csv: bool = False,
    csv_dir: str = "data/seed",
) -> dict[str, list[Any]]:
    """
    Seed database with generated records.

    Args:
        db_manager: Initialized DbManager instance
        data_template: Dict mapping table names to template dicts
        records: Number of doctors and patients to generate
        today: Reference date of the generated visit history
        start_index: Starting index for record generation
        export_csv: Whether to export generated records to CSV
        csv_dir: Directory to save CSV files

    Returns:
        Dict mapping table names to the inserted ORM objects
    """
    inserted: dict[str, list[Any]] = {}

    for table, template in data_template.items():
        if table == "appointments":
            objects: list[Any] = build_appointment_history(
                inserted.get("patients", []),
                inserted.get("doctors", []),
                template,
                today,
                start_index,
            )
            rows = [
                {
                    "appointment_id": a.appointment_id,
                    "patient_id": a.patient_id,
                    "doctor_id": a.doctor_id,
                    "appointment_date": a.appointment_date,
                    "appointment_time": a.appointment_time,
                    "is_return_visit": bool(a.is_return_visit),
                }
                for a in objects
            ]
        else:
            schema_cls = SCHEMA_MAP[table]
            model_cls = MODEL_MAP[table]
            id_field = "doctor_id" if table == "doctors" else "patient_id"

            schema_records = schema_cls.seed_records(template, records, start_index)  # type: ignore[attr-defined]
            rows = [
                {id_field: DbBaseModel.generate_uuid(), **record.model_dump()}
                for record in schema_records
            ]
            objects = [model_cls(**row) for row in rows]

        if export_csv:
            write_rows_to_csv(str(Path(csv_dir) / f"{table}.csv"), rows)

        async with db_manager.session() as session:
            session.add_all(objects)
            # Commit happens automatically on context exit

        inserted[table] = objects
        logger.info("Seeded table", table=table, records=len(objects))

    return inserted


__all__ = ["seed_db", "build_appointment_history", "write_rows_to_csv"]
