"""initial clinic schema

Revision ID: 0001
Revises:
Create Date: 2025-01-05 10:00:00

"""
from datetime import datetime, timezone
from typing import Sequence, Union
from uuid import uuid4

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from app.db.models import DEFAULT_CENTER_SETTINGS, DEFAULT_WORKING_DAYS
from app.services.v1.permission_service import DEFAULT_PERMISSIONS

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ROLE_VALUES = ("admin", "doctor", "receptionist", "patient")
STATUS_VALUES = ("scheduled", "waiting", "completed", "return", "cancelled")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "patients",
        sa.Column("patient_id", sa.String(36), primary_key=True),
        sa.Column("full_name", sa.String(100), nullable=False),
        sa.Column("phone", sa.String(30), nullable=False),
        sa.Column("email", sa.String(200)),
        sa.Column("date_of_birth", sa.Date()),
        sa.Column("age", sa.Integer()),
        sa.Column("gender", sa.Enum("male", "female", name="patient_gender")),
        sa.Column("address", sa.String(300)),
        sa.Column("medical_history", sa.Text()),
        sa.Column("allergies", sa.Text()),
        sa.Column("blood_type", sa.String(5)),
        sa.Column("emergency_contact", sa.String(200)),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
    )

    op.create_table(
        "doctors",
        sa.Column("doctor_id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), unique=True),
        sa.Column("doctor_name", sa.String(100)),
        sa.Column("specialization", sa.String(100), nullable=False),
        sa.Column("license_number", sa.String(50)),
        sa.Column("bio", sa.Text()),
        sa.Column("experience_years", sa.Integer(), nullable=False),
        sa.Column("consultation_fee", sa.Numeric(10, 2)),
        sa.Column("return_consultation_fee", sa.Numeric(10, 2)),
        sa.Column("free_return_days", sa.Integer()),
        sa.Column("is_available", sa.Boolean(), nullable=False),
        sa.Column("working_days", sa.JSON(), nullable=False),
        sa.Column("working_hours_start", sa.Time(), nullable=False),
        sa.Column("working_hours_end", sa.Time(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "appointments",
        sa.Column("appointment_id", sa.String(36), primary_key=True),
        sa.Column(
            "patient_id",
            sa.String(36),
            sa.ForeignKey("patients.patient_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "doctor_id",
            sa.String(36),
            sa.ForeignKey("doctors.doctor_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("appointment_date", sa.Date(), nullable=False),
        sa.Column("appointment_time", sa.Time(), nullable=False),
        sa.Column(
            "status", sa.Enum(*STATUS_VALUES, name="appointment_status"), nullable=False
        ),
        sa.Column("notes", sa.Text()),
        sa.Column("diagnosis", sa.Text()),
        sa.Column("treatment", sa.Text()),
        sa.Column("prescription", sa.Text()),
        sa.Column("cost", sa.Numeric(10, 2)),
        sa.Column("is_return_visit", sa.Boolean(), nullable=False),
        sa.Column("follow_up_date", sa.Date()),
        sa.Column("created_by", sa.String(36)),
        *_timestamps(),
    )
    op.create_index("ix_appointments_date", "appointments", ["appointment_date"])
    op.create_index(
        "ix_appointments_patient_doctor", "appointments", ["patient_id", "doctor_id"]
    )

    op.create_table(
        "medical_records",
        sa.Column("record_id", sa.String(36), primary_key=True),
        sa.Column(
            "patient_id",
            sa.String(36),
            sa.ForeignKey("patients.patient_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "doctor_id",
            sa.String(36),
            sa.ForeignKey("doctors.doctor_id"),
            nullable=False,
        ),
        sa.Column(
            "appointment_id",
            sa.String(36),
            sa.ForeignKey("appointments.appointment_id", ondelete="SET NULL"),
        ),
        sa.Column("diagnosis", sa.Text(), nullable=False),
        sa.Column("treatment", sa.Text()),
        sa.Column("prescription", sa.Text()),
        sa.Column("notes", sa.Text()),
        sa.Column("attachments", sa.JSON(), nullable=False),
        sa.Column("record_date", sa.Date(), nullable=False),
        *_timestamps(),
    )
    op.create_index(
        "ix_medical_records_patient_id", "medical_records", ["patient_id"]
    )

    settings_table = op.create_table(
        "center_settings",
        sa.Column("settings_id", sa.String(36), primary_key=True),
        sa.Column("center_name", sa.String(150), nullable=False),
        sa.Column("center_name_en", sa.String(150)),
        sa.Column("address", sa.String(300)),
        sa.Column("phone", sa.String(30)),
        sa.Column("email", sa.String(200)),
        sa.Column("logo_url", sa.String(500)),
        sa.Column("working_hours_start", sa.Time(), nullable=False),
        sa.Column("working_hours_end", sa.Time(), nullable=False),
        sa.Column("working_days", sa.JSON(), nullable=False),
        sa.Column("currency_code", sa.String(3), nullable=False),
        sa.Column("currency_symbol", sa.String(10), nullable=False),
        sa.Column("currency_name", sa.String(50), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "profiles",
        sa.Column("profile_id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), unique=True, nullable=False),
        sa.Column("full_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(200)),
        sa.Column("phone", sa.String(30)),
        sa.Column("avatar_url", sa.String(500)),
        *_timestamps(),
    )

    # Shared by two tables: create the postgres type once, up front
    role_enum = sa.Enum(*ROLE_VALUES, name="user_role").with_variant(
        postgresql.ENUM(*ROLE_VALUES, name="user_role", create_type=False),
        "postgresql",
    )
    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        postgresql.ENUM(*ROLE_VALUES, name="user_role").create(bind, checkfirst=True)

    op.create_table(
        "user_roles",
        sa.Column("role_id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("role", role_enum, nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),
    )
    op.create_index("ix_user_roles_user_id", "user_roles", ["user_id"])

    permissions_table = op.create_table(
        "role_permissions",
        sa.Column("permission_id", sa.String(36), primary_key=True),
        sa.Column("role", role_enum, nullable=False),
        sa.Column("permission_name", sa.String(60), nullable=False),
        sa.Column("is_allowed", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint(
            "role", "permission_name", name="uq_role_permissions_role_name"
        ),
    )

    now = datetime.now(tz=timezone.utc)

    op.bulk_insert(
        settings_table,
        [
            {
                "settings_id": str(uuid4()),
                **DEFAULT_CENTER_SETTINGS,
                "working_days": list(DEFAULT_WORKING_DAYS),
                "created_at": now,
                "updated_at": now,
            }
        ],
    )

    # Explicit rows make the defaults editable from the permissions screen
    op.bulk_insert(
        permissions_table,
        [
            {
                "permission_id": str(uuid4()),
                "role": role,
                "permission_name": name,
                "is_allowed": role in {r.value for r in roles},
                "created_at": now,
                "updated_at": now,
            }
            for name, roles in DEFAULT_PERMISSIONS.items()
            for role in ROLE_VALUES
        ],
    )


def downgrade() -> None:
    op.drop_table("role_permissions")
    op.drop_index("ix_user_roles_user_id", table_name="user_roles")
    op.drop_table("user_roles")
    op.drop_table("profiles")
    op.drop_table("center_settings")
    op.drop_index("ix_medical_records_patient_id", table_name="medical_records")
    op.drop_table("medical_records")
    op.drop_index("ix_appointments_patient_doctor", table_name="appointments")
    op.drop_index("ix_appointments_date", table_name="appointments")
    op.drop_table("appointments")
    op.drop_table("doctors")
    op.drop_table("patients")

    bind = op.get_bind()
    for enum_name in ("user_role", "appointment_status", "patient_gender"):
        sa.Enum(name=enum_name).drop(bind, checkfirst=True)
