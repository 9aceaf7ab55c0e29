# app/db/models/user_profile_table.py
from __future__ import annotations
from typing import TYPE_CHECKING, Optional
from sqlalchemy import String
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .db_base_model import DbBaseModel

if TYPE_CHECKING:
    from .user_role_table import UserRole


class UserProfile(DbBaseModel):
    """
    Staff or patient account profile.

    ``user_id`` is issued by the external identity provider.
    """

    __tablename__ = "profiles"

    profile_id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=DbBaseModel.generate_uuid,
    )
    user_id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False)
    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(200))
    phone: Mapped[Optional[str]] = mapped_column(String(30))
    avatar_url: Mapped[Optional[str]] = mapped_column(String(500))

    roles: Mapped[list["UserRole"]] = relationship(
        "UserRole",
        primaryjoin="UserProfile.user_id == foreign(UserRole.user_id)",
        viewonly=True,
        lazy="selectin",
    )


__all__ = ["UserProfile"]
