# app/api/v1/settings_router.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.db import get_db
from app.db.schemas import SettingsUpdate, SettingsResponse
from app.services.v1 import SettingsService

settings_router = APIRouter(
    prefix="/settings",
    tags=["Settings"],
)


@settings_router.get(
    "/",
    response_model=SettingsResponse,
    summary="Clinic settings",
    description="Creates the default settings row on first access.",
)
async def get_settings(db: AsyncSession = Depends(get_db)):
    return await SettingsService(db).get_or_create_settings()


@settings_router.patch("/", response_model=SettingsResponse, summary="Update clinic settings")
async def update_settings(data: SettingsUpdate, db: AsyncSession = Depends(get_db)):
    return await SettingsService(db).update_settings(data)


__all__ = ["settings_router"]
