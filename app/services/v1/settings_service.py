# app/services/v1/settings_service.py
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.db.models import CenterSettings, DEFAULT_CENTER_SETTINGS
from app.db.schemas import SettingsUpdate
from common.logger import get_app_logger

logger = get_app_logger(__name__)


class SettingsService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_settings(self) -> Optional[CenterSettings]:
        query = (
            select(CenterSettings)
            .order_by(CenterSettings.created_at)
            .limit(1)
            .execution_options(logging_token="SettingsService.get_settings")
        )
        return (await self.db.execute(query)).scalar_one_or_none()

    async def get_or_create_settings(self) -> CenterSettings:
        settings = await self.get_settings()
        if settings is not None:
            return settings

        settings = CenterSettings(**DEFAULT_CENTER_SETTINGS)
        self.db.add(settings)
        await self.db.flush()
        await self.db.refresh(settings)

        logger.info("Default center settings created", settings_id=settings.settings_id)
        return settings

    async def update_settings(self, data: SettingsUpdate) -> CenterSettings:
        settings = await self.get_or_create_settings()

        changes = data.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(settings, field, value)

        await self.db.flush()
        await self.db.refresh(settings)

        logger.info("Center settings updated", fields=sorted(changes))
        return settings

    async def currency_code(self) -> str:
        settings = await self.get_settings()
        return settings.currency_code if settings else DEFAULT_CENTER_SETTINGS["currency_code"]


__all__ = ["SettingsService"]
