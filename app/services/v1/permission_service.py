# app/services/v1/permission_service.py
"""
Role based permissions.

Every permission has a built-in default per role. Rows in
``role_permissions`` override the default for one (role, permission) pair.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.db.models import RolePermission, RoleName, STAFF_ROLES
from common.api_error import ValidationFailedError
from common.logger import get_app_logger

logger = get_app_logger(__name__)

_ALL = frozenset(RoleName)
_STAFF = frozenset(STAFF_ROLES)
_CLINICAL = frozenset({RoleName.ADMIN, RoleName.DOCTOR})
_FRONT_DESK = frozenset({RoleName.ADMIN, RoleName.RECEPTIONIST})
_ADMIN = frozenset({RoleName.ADMIN})

# permission name -> roles allowed by default
DEFAULT_PERMISSIONS: dict[str, frozenset[RoleName]] = {
    "view_dashboard": _ALL,
    "view_appointments": _ALL,
    "create_appointments": _STAFF,
    "edit_appointments": _STAFF,
    "delete_appointments": _ADMIN,
    "view_patients": _STAFF,
    "create_patients": _FRONT_DESK,
    "edit_patients": _STAFF,
    "delete_patients": _ADMIN,
    "view_doctors": _ALL,
    "manage_doctors": _ADMIN,
    "edit_doctors": _ADMIN,
    "delete_doctors": _ADMIN,
    "view_medical_records": _CLINICAL,
    "create_medical_records": _CLINICAL,
    "edit_medical_records": _CLINICAL,
    "delete_medical_records": _ADMIN,
    "view_reports": _CLINICAL,
    "export_reports": _ADMIN,
    "view_users": _ADMIN,
    "manage_users": _ADMIN,
    "manage_permissions": _ADMIN,
    "view_settings": _ALL,
    "manage_settings": _ADMIN,
    "view_notifications": _ALL,
    "send_notifications": _ADMIN,
    "manage_waiting_list": _FRONT_DESK,
}


def default_permissions_for(role: RoleName) -> dict[str, bool]:
    return {name: role in roles for name, roles in DEFAULT_PERMISSIONS.items()}


class PermissionService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def permissions_for_role(self, role: RoleName) -> dict[str, bool]:
        permissions = default_permissions_for(role)

        query = (
            select(RolePermission.permission_name, RolePermission.is_allowed)
            .where(RolePermission.role == role)
            .execution_options(logging_token="PermissionService.permissions_for_role")
        )
        for name, is_allowed in (await self.db.execute(query)).all():
            permissions[name] = is_allowed

        return permissions

    async def set_permission(
        self, role: RoleName, permission_name: str, is_allowed: bool
    ) -> dict[str, bool]:
        if permission_name not in DEFAULT_PERMISSIONS:
            raise ValidationFailedError(
                f"Unknown permission: {permission_name}", code="UNKNOWN_PERMISSION"
            )

        query = select(RolePermission).where(
            RolePermission.role == role,
            RolePermission.permission_name == permission_name,
        )
        row = (await self.db.execute(query)).scalar_one_or_none()
        if row is None:
            self.db.add(
                RolePermission(
                    role=role, permission_name=permission_name, is_allowed=is_allowed
                )
            )
        else:
            row.is_allowed = is_allowed
        await self.db.flush()

        logger.info(
            "Role permission changed",
            role=role.value,
            permission=permission_name,
            is_allowed=is_allowed,
        )
        return await self.permissions_for_role(role)


__all__ = ["PermissionService", "DEFAULT_PERMISSIONS", "default_permissions_for"]
