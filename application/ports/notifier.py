"""
User notification port (interface).

Part of HQ-12: Typed API errors

Success and failure messages for mutations go through a Notifier so the
presentation (toast, terminal, log) stays swappable.
"""

from typing import Protocol


class Notifier(Protocol):
    def success(self, message: str) -> None:
        ...

    def info(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...
