"""
Domain layer for the HypertroQ client.

This package contains pure domain models and state logic that are
independent of infrastructure concerns (HTTP transport, credential
storage, caching).
"""

from domain.models import (
    Exercise,
    Program,
    ProgramSession,
    SessionExercise,
    SessionExerciseWithDetails,
    User,
)

__all__ = [
    "Exercise",
    "Program",
    "ProgramSession",
    "SessionExercise",
    "SessionExerciseWithDetails",
    "User",
]
