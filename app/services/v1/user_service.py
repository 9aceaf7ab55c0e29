# app/services/v1/user_service.py
from typing import Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from app.db.models import DbBaseModel, UserProfile, UserRole, RoleName
from app.db.schemas import UserCreate, UserUpdate
from common.api_error import NotFoundError, ConflictError
from common.logger import get_app_logger

logger = get_app_logger(__name__)


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _require(self, user_id: str) -> UserProfile:
        query = (
            select(UserProfile)
            .where(UserProfile.user_id == user_id)
            .execution_options(logging_token="UserService.get_user")
        )
        profile = (await self.db.execute(query)).scalar_one_or_none()
        if profile is None:
            raise NotFoundError("user", user_id)
        return profile

    async def list_users(self) -> Sequence[UserProfile]:
        """Profiles with their roles, newest first."""
        query = (
            select(UserProfile)
            .order_by(UserProfile.created_at.desc())
            .execution_options(logging_token="UserService.list_users")
        )
        return (await self.db.execute(query)).scalars().all()

    async def create_user(self, data: UserCreate) -> UserProfile:
        user_id = data.user_id or DbBaseModel.generate_uuid()

        existing = await self.db.execute(
            select(UserProfile.profile_id).where(UserProfile.user_id == user_id)
        )
        if existing.scalar_one_or_none() is not None:
            raise ConflictError(f"User {user_id} already exists", code="USER_EXISTS")

        profile = UserProfile(
            user_id=user_id,
            **data.model_dump(exclude={"user_id", "role"}),
        )
        self.db.add(profile)
        self.db.add(UserRole(user_id=user_id, role=data.role))
        await self.db.flush()

        logger.info("User created", user_id=user_id, role=data.role.value)
        return await self._reload(profile)

    async def update_user(self, user_id: str, data: UserUpdate) -> UserProfile:
        profile = await self._require(user_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(profile, field, value)

        await self.db.flush()
        return await self._reload(profile)

    async def delete_user(self, user_id: str) -> None:
        profile = await self._require(user_id)

        await self.db.execute(delete(UserRole).where(UserRole.user_id == user_id))
        await self.db.delete(profile)
        await self.db.flush()

        logger.info("User deleted", user_id=user_id)

    async def assign_role(self, user_id: str, role: RoleName) -> UserProfile:
        """A user holds exactly one role; the previous one is replaced."""
        profile = await self._require(user_id)

        await self.db.execute(delete(UserRole).where(UserRole.user_id == user_id))
        self.db.add(UserRole(user_id=user_id, role=role))
        await self.db.flush()

        logger.info("User role assigned", user_id=user_id, role=role.value)
        return await self._reload(profile)

    async def _reload(self, profile: UserProfile) -> UserProfile:
        await self.db.refresh(profile, attribute_names=["roles", "updated_at"])
        return profile


__all__ = ["UserService"]
