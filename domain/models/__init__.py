"""
Domain models for the HypertroQ client.

These models mirror the backend's resources and are independent of
transport concerns (HTTP, caching, credential storage):
- Program / ProgramSession: a training program and its ordered sessions
- SessionExercise: the persisted shape of an exercise slot in a session
- SessionExerciseWithDetails: the editable client-side projection
- Exercise: a library exercise with its muscle volume contributions
- User / AuthTokens: the authenticated account

Usage:
    >>> from domain.models import Program, SessionExercise

    >>> slot = SessionExercise(exercise_id="ex-1", sets=3, order_in_session=1)
    >>> slot.to_payload()
    {'exercise_id': 'ex-1', 'sets': 3, 'order_in_session': 1, 'notes': None}
"""

from domain.models.account import (
    AuthTokens,
    DeleteAccountResponse,
    ProfileUpdate,
    RegisterData,
    StoredCredentials,
    User,
    UserRole,
)
from domain.models.exercise import (
    VOLUME_CONTRIBUTIONS,
    DifficultyLevel,
    Equipment,
    Exercise,
    ExerciseCreate,
    ExerciseFilters,
    ExerciseUpdate,
    ForceType,
    MuscleContribution,
    MuscleGroup,
)
from domain.models.program import (
    PERSISTED_EXERCISE_FIELDS,
    CyclicStructureConfig,
    DayOfWeek,
    Program,
    ProgramClone,
    ProgramCreate,
    ProgramFilters,
    ProgramListItem,
    ProgramSession,
    ProgramStats,
    ProgramUpdate,
    SessionCreate,
    SessionExercise,
    SessionExerciseWithDetails,
    SessionUpdate,
    SplitType,
    StructureType,
    WeeklyStructureConfig,
)

__all__ = [
    # Accounts
    "AuthTokens",
    "DeleteAccountResponse",
    "ProfileUpdate",
    "RegisterData",
    "StoredCredentials",
    "User",
    "UserRole",
    # Exercises
    "VOLUME_CONTRIBUTIONS",
    "DifficultyLevel",
    "Equipment",
    "Exercise",
    "ExerciseCreate",
    "ExerciseFilters",
    "ExerciseUpdate",
    "ForceType",
    "MuscleContribution",
    "MuscleGroup",
    # Programs
    "PERSISTED_EXERCISE_FIELDS",
    "CyclicStructureConfig",
    "DayOfWeek",
    "Program",
    "ProgramClone",
    "ProgramCreate",
    "ProgramFilters",
    "ProgramListItem",
    "ProgramSession",
    "ProgramStats",
    "ProgramUpdate",
    "SessionCreate",
    "SessionExercise",
    "SessionExerciseWithDetails",
    "SessionUpdate",
    "SplitType",
    "StructureType",
    "WeeklyStructureConfig",
]
