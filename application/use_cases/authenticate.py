"""
Authentication Use Case.

Part of HQ-9: Auth session context

Login, registration, logout and profile maintenance on top of the
AccountsClient and the injected SessionContext.
"""

import logging
from typing import Optional

from application.exceptions import (
    APIError,
    AvatarValidationError,
    ForbiddenError,
    UnauthorizedError,
    user_message,
)
from application.ports.notifier import Notifier
from application.session_context import SessionContext
from domain.models.account import DeleteAccountResponse, ProfileUpdate, RegisterData, User
from infrastructure.api.accounts import AccountsClient

logger = logging.getLogger(__name__)


def login_failure_message(exc: APIError) -> str:
    """Message for a failed login, by status."""
    if isinstance(exc, UnauthorizedError):
        return "Invalid credentials. The email or password you entered is incorrect."
    if isinstance(exc, ForbiddenError):
        return "Account disabled. Please contact support."
    if exc.status_code == 429:
        return "Too many attempts. Please wait a moment before trying again."
    if exc.status_code is not None and exc.status_code < 500 and exc.message:
        return f"Login failed: {exc.message}"
    return user_message(exc)


class AuthService:
    """
    Account flows bound to one SessionContext.

    Usage:
        >>> auth = AuthService(accounts=accounts_client, session=session, notifier=notifier)
        >>> user = await auth.login("lifter@example.com", "secret-password")
        >>> session.is_authenticated
        True
    """

    def __init__(
        self,
        accounts: AccountsClient,
        session: SessionContext,
        notifier: Notifier,
    ) -> None:
        self._accounts = accounts
        self._session = session
        self._notifier = notifier

    async def login(self, email: str, password: str) -> User:
        """
        Exchange credentials for tokens and load the profile.

        Returns the user so callers can route on `deletion_pending`.
        """
        try:
            tokens = await self._accounts.login(email, password)
        except APIError as e:
            self._notifier.error(login_failure_message(e))
            raise
        self._session.sign_in(tokens)
        try:
            user = await self.load_profile()
        except APIError:
            # Tokens that cannot load a profile are useless.
            self._session.sign_out()
            raise
        logger.info("Signed in as %s", user.email)
        return user

    async def register(self, data: RegisterData) -> User:
        """Create the account, then log straight in."""
        try:
            await self._accounts.register(data)
        except APIError as e:
            self._notifier.error(user_message(e))
            raise
        user = await self.login(data.email, data.password)
        self._notifier.success("Account created successfully!")
        return user

    def logout(self) -> None:
        self._session.sign_out()
        self._notifier.info("Logged out successfully")

    async def load_profile(self) -> User:
        user = await self._accounts.get_current_user()
        self._session.set_user(user)
        return user

    async def update_profile(self, full_name: str) -> User:
        return await self._profile_change(
            self._accounts.update_profile(ProfileUpdate(full_name=full_name)),
            "Profile updated successfully",
        )

    async def upload_avatar(self, filename: str, content: bytes, content_type: str) -> User:
        return await self._profile_change(
            self._accounts.upload_avatar(filename, content, content_type),
            "Avatar updated successfully",
        )

    async def request_deletion(self) -> DeleteAccountResponse:
        """Schedule account deletion, then sign out."""
        try:
            response = await self._accounts.delete_account()
        except APIError as e:
            self._notifier.error(user_message(e))
            raise
        self._notifier.success(
            f"Account deletion scheduled for {response.deletion_date:%B %d, %Y}. "
            f"You have {response.days_remaining} days to cancel."
        )
        self.logout()
        return response

    async def cancel_deletion(self) -> User:
        return await self._profile_change(
            self._accounts.cancel_deletion(),
            "Account deletion cancelled",
        )

    async def _profile_change(self, call, success_message: Optional[str]) -> User:
        try:
            user = await call
        except (APIError, AvatarValidationError) as e:
            self._notifier.error(user_message(e))
            raise
        self._session.set_user(user)
        if success_message:
            self._notifier.success(success_message)
        return user
