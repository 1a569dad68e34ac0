"""
Account and authentication models.

Part of HQ-9: Auth session context
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserRole(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class User(BaseModel):
    """The authenticated user's profile."""

    model_config = ConfigDict(extra="ignore")

    id: str
    email: EmailStr
    full_name: str
    organization_id: str
    organization_name: Optional[str] = None
    role: UserRole = UserRole.USER
    is_active: bool = True
    is_verified: bool = False
    profile_image_url: Optional[str] = None
    deletion_requested_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def deletion_pending(self) -> bool:
        return self.deletion_requested_at is not None


class AuthTokens(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"


class RegisterData(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    full_name: str = Field(min_length=2)
    organization_name: str = Field(min_length=1)


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=2)


class DeleteAccountResponse(BaseModel):
    """Scheduled deletion returned by the backend (grace period is server-side)."""

    model_config = ConfigDict(extra="ignore")

    deletion_date: datetime
    days_remaining: int
    message: Optional[str] = None


class StoredCredentials(BaseModel):
    """What the session context persists between runs."""

    tokens: AuthTokens
    user: Optional[User] = None
