import os
import tempfile
from datetime import date, time
from decimal import Decimal
from typing import Optional

import httpx
import pytest

# Configuration is read at import time by main.py
os.environ.update(
    {
        "ENVIRONMENT": "development",
        "APP_TITLE": "Clinic Service (tests)",
        "APP_VERSION": "1.0.0",
        "LOG_LEVEL": "WARNING",
        "LOG_BACKEND": "file",
        "LOG_BACKENDS": "file",
        "LOG_FOLDER_PATH": tempfile.mkdtemp(prefix="clinic-logs-"),
    }
)
for _name in ("DB_HOST", "BILLING_LOOKUP_CONCURRENCY", "BILLING_DEFAULT_FREE_RETURN_DAYS"):
    os.environ.pop(_name, None)

from common.config import initialize_config  # noqa: E402

initialize_config()

from app.db import DbManager  # noqa: E402
from app.db.models import Appointment, AppointmentStatus, Doctor, Patient  # noqa: E402


class ClinicFactory:
    """Inserts rows through short-lived sessions, like an external writer would."""

    def __init__(self, db_manager: DbManager):
        self.db_manager = db_manager
        self._counter = 0

    async def _add(self, obj):
        async with self.db_manager.session() as session:
            session.add(obj)
        return obj

    async def doctor(
        self,
        consultation_fee: Optional[str] = "100",
        return_consultation_fee: Optional[str] = None,
        free_return_days: Optional[int] = 7,
        **fields,
    ) -> Doctor:
        self._counter += 1
        return await self._add(
            Doctor(
                doctor_name=fields.pop("doctor_name", f"Dr. Test {self._counter}"),
                specialization=fields.pop("specialization", "General"),
                consultation_fee=_money(consultation_fee),
                return_consultation_fee=_money(return_consultation_fee),
                free_return_days=free_return_days,
                **fields,
            )
        )

    async def patient(self, **fields) -> Patient:
        self._counter += 1
        return await self._add(
            Patient(
                full_name=fields.pop("full_name", f"Patient {self._counter}"),
                phone=fields.pop("phone", f"05000{self._counter:05d}"),
                **fields,
            )
        )

    async def appointment(
        self,
        patient: Patient,
        doctor: Doctor,
        on: date,
        status: AppointmentStatus = AppointmentStatus.COMPLETED,
        cost: Optional[str] = None,
        is_return_visit: bool = False,
        at: time = time(10, 0),
    ) -> Appointment:
        return await self._add(
            Appointment(
                patient_id=patient.patient_id,
                doctor_id=doctor.doctor_id,
                appointment_date=on,
                appointment_time=at,
                status=status,
                cost=_money(cost),
                is_return_visit=is_return_visit,
            )
        )


def _money(value: Optional[str]) -> Optional[Decimal]:
    return None if value is None else Decimal(value)


@pytest.fixture
async def db_manager(tmp_path):
    manager = DbManager(f"sqlite+aiosqlite:///{tmp_path / 'clinic.db'}")
    await manager.create_all()
    yield manager
    await manager.dispose()


@pytest.fixture
async def session(db_manager):
    async with db_manager.session() as s:
        yield s


@pytest.fixture
def factory(db_manager) -> ClinicFactory:
    return ClinicFactory(db_manager)


@pytest.fixture
async def client(db_manager):
    from server import app

    app.state.db_manager = db_manager
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.state.db_manager = None
