"""
TokenStore adapters.

Part of HQ-9: Auth session context

FileTokenStore keeps credentials in a JSON file readable only by the
current user; InMemoryTokenStore keeps them for the life of the process.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from domain.models.account import StoredCredentials

logger = logging.getLogger(__name__)


class FileTokenStore:
    """Persist credentials as JSON at `path`."""

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[StoredCredentials]:
        if not self._path.exists():
            return None
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                return StoredCredentials.model_validate(json.load(f))
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable credentials file {self._path}: {e}")
            return None

    def save(self, credentials: StoredCredentials) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self._path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(credentials.model_dump_json(indent=2))

    def clear(self) -> None:
        try:
            self._path.unlink()
        except FileNotFoundError:
            pass


class InMemoryTokenStore:
    """Process-local credential storage."""

    def __init__(self, credentials: Optional[StoredCredentials] = None):
        self._credentials = credentials

    def load(self) -> Optional[StoredCredentials]:
        return self._credentials

    def save(self, credentials: StoredCredentials) -> None:
        self._credentials = credentials

    def clear(self) -> None:
        self._credentials = None
