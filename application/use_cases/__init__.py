"""
Application Use Cases for the HypertroQ client.

Use cases orchestrate domain state and the resource clients:
- AuthService: login, registration, logout and profile maintenance
- ProgramEditor: session drafts and their save/load state machine

Dependencies are injected via constructors for testability.

Usage:
    from application.use_cases import ProgramEditor

    editor = ProgramEditor("p-1", programs=program_queries, notifier=notifier)
    await editor.load()
    editor.add_exercise(bench_press)
    result = await editor.save_session()
"""

from application.use_cases.authenticate import AuthService, login_failure_message
from application.use_cases.edit_program import (
    LAST_SESSION_MESSAGE,
    ProgramEditor,
    SaveResult,
    SessionState,
)

__all__ = [
    # Authentication
    "AuthService",
    "login_failure_message",
    # Program editing
    "LAST_SESSION_MESSAGE",
    "ProgramEditor",
    "SaveResult",
    "SessionState",
]
