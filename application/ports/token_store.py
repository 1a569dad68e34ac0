"""
Credential persistence port (interface).

Part of HQ-9: Auth session context

The session context loads credentials once at start-up and saves them on
every change. Implementations decide the medium (file, keychain, memory).
"""

from typing import Optional, Protocol

from domain.models.account import StoredCredentials


class TokenStore(Protocol):
    """Load/save/clear boundary for persisted credentials."""

    def load(self) -> Optional[StoredCredentials]:
        """
        Read persisted credentials.

        Returns:
            The stored credentials, or None if nothing is stored or the
            stored data cannot be read.
        """
        ...

    def save(self, credentials: StoredCredentials) -> None:
        """Persist credentials, replacing anything stored before."""
        ...

    def clear(self) -> None:
        """Remove persisted credentials. Clearing an empty store is a no-op."""
        ...
