"""
Port interfaces (Protocols) for the HypertroQ client.

This package defines the interface contracts that the infrastructure
layer must implement. Using Protocols enables:
- Clean separation of concerns
- Easy testing with in-memory implementations
- Dependency inversion (depend on abstractions, not concretions)

Usage:
    from application.ports import TokenStore

    class SessionContext:
        def __init__(self, token_store: TokenStore):
            self._token_store = token_store
"""

from application.ports.notifier import Notifier
from application.ports.token_store import TokenStore

__all__ = [
    "Notifier",
    "TokenStore",
]
