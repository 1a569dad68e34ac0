"""
Infrastructure layer for the HypertroQ client.

Concrete adapters for the application ports and the backend REST API:
- api: httpx-based resource clients
- token_store: credential persistence (file, in-memory)
- notifier: logging-backed user notifications
"""

from infrastructure.api import (
    AccountsClient,
    ApiClient,
    ExercisesClient,
    ProgramsClient,
    normalize_list,
)
from infrastructure.notifier import LoggingNotifier
from infrastructure.token_store import FileTokenStore, InMemoryTokenStore

__all__ = [
    "AccountsClient",
    "ApiClient",
    "ExercisesClient",
    "ProgramsClient",
    "normalize_list",
    "LoggingNotifier",
    "FileTokenStore",
    "InMemoryTokenStore",
]
