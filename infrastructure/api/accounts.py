"""
Accounts resource client: login, registration and profile.

Part of HQ-9: Auth session context

Login posts form-encoded credentials (OAuth2 password flow, where the
email goes in `username`); everything else is JSON except the avatar
upload, which is multipart.
"""

from typing import Optional

from application.exceptions import AvatarValidationError
from domain.models.account import (
    AuthTokens,
    DeleteAccountResponse,
    ProfileUpdate,
    RegisterData,
    User,
)
from infrastructure.api.client import ApiClient

ALLOWED_AVATAR_TYPES = ("image/jpeg", "image/png", "image/gif")
MAX_AVATAR_BYTES = 2 * 1024 * 1024


def validate_avatar(content: bytes, content_type: Optional[str]) -> None:
    """
    Refuse avatar files the backend would reject.

    Raises:
        AvatarValidationError: wrong type or larger than 2MB
    """
    if content_type not in ALLOWED_AVATAR_TYPES:
        raise AvatarValidationError(
            "Please select a valid image file (JPG, PNG, or GIF)"
        )
    if len(content) > MAX_AVATAR_BYTES:
        raise AvatarValidationError("Image must be less than 2MB")


class AccountsClient:
    """Typed calls against /auth and /users/me."""

    def __init__(self, api: ApiClient):
        self._api = api

    async def login(self, username: str, password: str) -> AuthTokens:
        data = await self._api.post(
            "/auth/login",
            data={"username": username, "password": password},
            requires_auth=False,
        )
        return AuthTokens.model_validate(data)

    async def register(self, data: RegisterData) -> User:
        result = await self._api.post(
            "/auth/register", data.model_dump(mode="json"), requires_auth=False
        )
        return User.model_validate(result)

    async def get_current_user(self) -> User:
        return User.model_validate(await self._api.get("/users/me"))

    async def update_profile(self, data: ProfileUpdate) -> User:
        result = await self._api.put("/users/me", data.model_dump(exclude_none=True))
        return User.model_validate(result)

    async def upload_avatar(
        self, filename: str, content: bytes, content_type: str
    ) -> User:
        validate_avatar(content, content_type)
        result = await self._api.post(
            "/users/me/avatar",
            files={"file": (filename, content, content_type)},
        )
        return User.model_validate(result)

    async def delete_account(self) -> DeleteAccountResponse:
        """Request deletion; the backend schedules it after a grace period."""
        return DeleteAccountResponse.model_validate(
            await self._api.post("/users/me/delete")
        )

    async def cancel_deletion(self) -> User:
        return User.model_validate(await self._api.post("/users/me/cancel-deletion"))
