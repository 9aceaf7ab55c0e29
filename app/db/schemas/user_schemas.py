# app/db/schemas/user_schemas.py
from pydantic import BaseModel, Field, ConfigDict, field_validator
from datetime import datetime
from typing import Optional, Any, List
from ..models import RoleName


class UserBase(BaseModel):
    full_name: str = Field(..., min_length=2, max_length=100)
    email: Optional[str] = Field(None, max_length=200)
    phone: Optional[str] = Field(None, max_length=30)
    avatar_url: Optional[str] = Field(None, max_length=500)


class UserCreate(UserBase):
    # Issued by the identity provider; generated when omitted
    user_id: Optional[str] = Field(None, max_length=36)
    role: RoleName = RoleName.PATIENT


class UserUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None


class RoleAssignment(BaseModel):
    role: RoleName


class UserResponse(UserBase):
    model_config = ConfigDict(from_attributes=True)

    profile_id: str
    user_id: str
    created_at: datetime
    roles: List[RoleName] = Field(default_factory=list)

    @field_validator("roles", mode="before")
    @classmethod
    def flatten_roles(cls, value: Any) -> Any:
        # ORM rows arrive as UserRole objects
        return [getattr(item, "role", item) for item in value or []]


class PermissionsResponse(BaseModel):
    role: RoleName
    permissions: dict[str, bool]


__all__ = [
    "UserCreate",
    "UserUpdate",
    "RoleAssignment",
    "UserResponse",
    "PermissionsResponse",
]
