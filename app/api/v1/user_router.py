# app/api/v1/user_router.py
from typing import List
from fastapi import APIRouter, Depends, Body, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.db import get_db
from app.db.models import RoleName
from app.db.schemas import (
    UserCreate,
    UserUpdate,
    UserResponse,
    RoleAssignment,
    PermissionsResponse,
)
from app.services.v1 import UserService, PermissionService

user_router = APIRouter(
    prefix="/users",
    tags=["Users"],
)


@user_router.get("/", response_model=List[UserResponse], summary="List users with roles")
async def list_users(db: AsyncSession = Depends(get_db)):
    return await UserService(db).list_users()


@user_router.post(
    "/",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user profile with a role",
    responses={409: {"description": "User already exists"}},
)
async def create_user(data: UserCreate, db: AsyncSession = Depends(get_db)):
    return await UserService(db).create_user(data)


@user_router.get(
    "/roles/{role}/permissions",
    response_model=PermissionsResponse,
    summary="Effective permissions of a role",
)
async def get_role_permissions(role: RoleName, db: AsyncSession = Depends(get_db)):
    permissions = await PermissionService(db).permissions_for_role(role)
    return PermissionsResponse(role=role, permissions=permissions)


@user_router.put(
    "/roles/{role}/permissions/{permission_name}",
    response_model=PermissionsResponse,
    summary="Override one permission of a role",
    responses={422: {"description": "Unknown permission"}},
)
async def set_role_permission(
    role: RoleName,
    permission_name: str,
    is_allowed: bool = Body(..., embed=True),
    db: AsyncSession = Depends(get_db),
):
    permissions = await PermissionService(db).set_permission(role, permission_name, is_allowed)
    return PermissionsResponse(role=role, permissions=permissions)


@user_router.patch(
    "/{user_id}",
    response_model=UserResponse,
    summary="Update a user profile",
    responses={404: {"description": "User not found"}},
)
async def update_user(user_id: str, data: UserUpdate, db: AsyncSession = Depends(get_db)):
    return await UserService(db).update_user(user_id, data)


@user_router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a user and their roles",
    responses={404: {"description": "User not found"}},
)
async def delete_user(user_id: str, db: AsyncSession = Depends(get_db)):
    await UserService(db).delete_user(user_id)


@user_router.put(
    "/{user_id}/role",
    response_model=UserResponse,
    summary="Replace the user's role",
    responses={404: {"description": "User not found"}},
)
async def assign_role(
    user_id: str, data: RoleAssignment, db: AsyncSession = Depends(get_db)
):
    return await UserService(db).assign_role(user_id, data.role)


__all__ = ["user_router"]
