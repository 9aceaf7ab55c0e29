# app/db/models/user_role_table.py
from enum import Enum
from sqlalchemy import String, Boolean, UniqueConstraint, Enum as sqlalchemy_Enum
from sqlalchemy.orm import Mapped, mapped_column
from .db_base_model import DbBaseModel


class RoleName(str, Enum):
    ADMIN = "admin"
    DOCTOR = "doctor"
    RECEPTIONIST = "receptionist"
    PATIENT = "patient"


STAFF_ROLES = (RoleName.ADMIN, RoleName.DOCTOR, RoleName.RECEPTIONIST)

_role_enum = sqlalchemy_Enum(
    RoleName, name="user_role", values_callable=lambda e: [m.value for m in e]
)


class UserRole(DbBaseModel):
    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),)

    role_id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=DbBaseModel.generate_uuid,
    )
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    role: Mapped[RoleName] = mapped_column(_role_enum, default=RoleName.PATIENT, nullable=False)


class RolePermission(DbBaseModel):
    """Per-role override of a named permission."""

    __tablename__ = "role_permissions"
    __table_args__ = (
        UniqueConstraint("role", "permission_name", name="uq_role_permissions_role_name"),
    )

    permission_id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=DbBaseModel.generate_uuid,
    )
    role: Mapped[RoleName] = mapped_column(_role_enum, nullable=False)
    permission_name: Mapped[str] = mapped_column(String(60), nullable=False)
    is_allowed: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


__all__ = ["UserRole", "RolePermission", "RoleName", "STAFF_ROLES"]
