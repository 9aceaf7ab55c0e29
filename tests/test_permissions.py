import pytest

from app.db.models import RoleName
from app.services.v1 import DEFAULT_PERMISSIONS, PermissionService, default_permissions_for
from common.api_error import ValidationFailedError


def test_admin_is_allowed_everything_by_default():
    assert all(default_permissions_for(RoleName.ADMIN).values())


def test_patient_defaults_are_read_only():
    allowed = {name for name, ok in default_permissions_for(RoleName.PATIENT).items() if ok}
    assert allowed == {
        "view_dashboard",
        "view_appointments",
        "view_doctors",
        "view_settings",
        "view_notifications",
    }


def test_every_role_gets_every_permission_name():
    for role in RoleName:
        assert set(default_permissions_for(role)) == set(DEFAULT_PERMISSIONS)


async def test_stored_rows_override_defaults(session):
    service = PermissionService(session)
    assert (await service.permissions_for_role(RoleName.RECEPTIONIST))["view_reports"] is False

    updated = await service.set_permission(RoleName.RECEPTIONIST, "view_reports", True)
    assert updated["view_reports"] is True

    updated = await service.set_permission(RoleName.RECEPTIONIST, "view_reports", False)
    assert updated["view_reports"] is False
    # Other roles are untouched
    assert (await service.permissions_for_role(RoleName.DOCTOR))["view_reports"] is True


async def test_unknown_permission_is_rejected(session):
    with pytest.raises(ValidationFailedError) as exc_info:
        await PermissionService(session).set_permission(RoleName.ADMIN, "launch_rockets", True)
    assert exc_info.value.code == "UNKNOWN_PERMISSION"
