# scripts/db/data_template.py
"""
Easily extendible template file for data templates
- Add new templates
- Compose them into DEFAULT_DATA_TEMPLATE

    Example: Seed only patients
        await seed_db(db_manager, {"patients": PATIENT_DATA_TEMPLATE}, records=100, today=date.today())

    Example: Seed doctors, patients and their visit history
        await seed_db(db_manager, DEFAULT_DATA_TEMPLATE, records=1000, today=date.today())
"""

from datetime import date
from decimal import Decimal
from typing import Any

# Individual templates
PATIENT_DATA_TEMPLATE: dict[str, Any] = {
    "full_name": "Patient",
    "phone_prefix": "050",
    "date_of_birth": date(1990, 1, 1),
    "address": "Riyadh",
    "medical_history": "None",
}

DOCTOR_DATA_TEMPLATE: dict[str, Any] = {
    "doctor_name": "Dr. Ahmed",
    "specializations": ["General Practice", "Pediatrics", "Cardiology", "Dermatology"],
    "base_fee": Decimal("150"),
    "free_return_days": 7,
}

# Visits per patient: a first visit within `history_days` before the seed date,
# then an optional return visit `return_after` days later.
APPOINTMENT_DATA_TEMPLATE: dict[str, Any] = {
    "history_days": 30,
    "return_after": [3, 7, 10, None],
}

# Combined default template; insertion follows this order
DEFAULT_DATA_TEMPLATE: dict[str, dict[str, Any]] = {
    "doctors": DOCTOR_DATA_TEMPLATE,
    "patients": PATIENT_DATA_TEMPLATE,
    "appointments": APPOINTMENT_DATA_TEMPLATE,
}

__all__ = [
    "DEFAULT_DATA_TEMPLATE",
    "DOCTOR_DATA_TEMPLATE",
    "PATIENT_DATA_TEMPLATE",
    "APPOINTMENT_DATA_TEMPLATE",
]
