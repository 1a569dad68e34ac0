"""
Domain models for training programs and their sessions.

Part of HQ-21: Program editor client models

These mirror the HypertroQ backend's program resources. Session exercises
come in two shapes: the persisted server shape (SessionExercise) and the
client-only projection used while editing (SessionExerciseWithDetails).
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class SplitType(str, Enum):
    """Weekly muscle-group grouping strategy of a program."""

    UPPER_LOWER = "UPPER_LOWER"
    PUSH_PULL_LEGS = "PUSH_PULL_LEGS"
    FULL_BODY = "FULL_BODY"
    BRO_SPLIT = "BRO_SPLIT"
    ARNOLD_SPLIT = "ARNOLD_SPLIT"
    CUSTOM = "CUSTOM"

    @property
    def label(self) -> str:
        return SPLIT_TYPE_LABELS[self]


SPLIT_TYPE_LABELS = {
    SplitType.UPPER_LOWER: "Upper/Lower",
    SplitType.PUSH_PULL_LEGS: "Push/Pull/Legs",
    SplitType.FULL_BODY: "Full Body",
    SplitType.BRO_SPLIT: "Bro Split",
    SplitType.ARNOLD_SPLIT: "Arnold Split",
    SplitType.CUSTOM: "Custom",
}


class StructureType(str, Enum):
    """How a program's sessions are scheduled."""

    WEEKLY = "WEEKLY"
    CYCLIC = "CYCLIC"


class DayOfWeek(str, Enum):
    MON = "MON"
    TUE = "TUE"
    WED = "WED"
    THU = "THU"
    FRI = "FRI"
    SAT = "SAT"
    SUN = "SUN"


class WeeklyStructureConfig(BaseModel):
    """Training days for a weekly program."""

    days_per_week: int = Field(ge=1, le=7)
    selected_days: List[DayOfWeek] = []


class CyclicStructureConfig(BaseModel):
    """On/off rotation for a cyclic program."""

    days_on: int = Field(ge=1)
    days_off: int = Field(ge=0)


StructureConfig = Union[WeeklyStructureConfig, CyclicStructureConfig]

# Only these fields of a session exercise are sent to the backend.
PERSISTED_EXERCISE_FIELDS = ("exercise_id", "sets", "order_in_session", "notes")


class SessionExercise(BaseModel):
    """An exercise slot within a session, as stored by the backend."""

    model_config = ConfigDict(extra="ignore")

    exercise_id: str
    sets: int = Field(ge=1)
    order_in_session: int = Field(ge=1)
    notes: Optional[str] = None
    # Echoed by some backend versions for display, never sent back.
    exercise_name: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to the persisted request shape."""
        return self.model_dump(include=set(PERSISTED_EXERCISE_FIELDS))


class SessionExerciseWithDetails(SessionExercise):
    """
    Client-side projection of a session exercise used while editing.

    Adds a synthetic local id (stable only for the lifetime of a draft),
    denormalized exercise details for display, and two client-only
    prescription fields. `target_reps` and `rpe` are never persisted.
    """

    id: str
    exercise_name: str
    equipment: Optional[str] = None
    primary_muscles: List[str] = []
    target_reps: str = ""
    rpe: Optional[int] = Field(default=None, ge=1, le=10)

    def to_session_exercise(self) -> SessionExercise:
        return SessionExercise(**self.to_payload())


class ProgramSession(BaseModel):
    """One scheduled workout within a program."""

    model_config = ConfigDict(extra="ignore")

    id: str
    program_id: str
    name: str
    day_number: int = Field(ge=1)
    order_in_program: int = Field(ge=1)
    exercises: List[SessionExercise] = []
    total_sets: int = 0
    exercise_count: int = 0


class MuscleVolumeStats(BaseModel):
    muscle: str
    muscle_name: str
    sets_per_week: float
    status: str


class ProgramStats(BaseModel):
    """Volume statistics computed by the backend for a program."""

    total_sessions: int
    total_sets: int
    avg_sets_per_session: float
    weekly_volume: List[MuscleVolumeStats] = []
    training_frequency: float = 0


class Program(BaseModel):
    """A complete training program including its sessions."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    description: str = ""
    split_type: SplitType
    structure_type: StructureType
    structure_config: Optional[StructureConfig] = None
    is_template: bool = False
    duration_weeks: Optional[int] = None
    session_count: Optional[int] = None
    sessions: List[ProgramSession] = []
    stats: Optional[ProgramStats] = None
    organization_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def ordered_sessions(self) -> List[ProgramSession]:
        return sorted(self.sessions, key=lambda s: s.order_in_program)

    def find_session(self, session_id: str) -> Optional[ProgramSession]:
        for session in self.sessions:
            if session.id == session_id:
                return session
        return None


class ProgramListItem(BaseModel):
    """Lighter program projection returned by list endpoints."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    description: str = ""
    split_type: SplitType
    structure_type: StructureType
    is_template: bool = False
    duration_weeks: Optional[int] = None
    session_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProgramFilters(BaseModel):
    """Query filters for the program list."""

    search: Optional[str] = None
    split_type: Optional[SplitType] = None
    structure_type: Optional[StructureType] = None
    is_template: Optional[bool] = None
    skip: int = Field(default=0, ge=0)
    limit: int = Field(default=50, ge=1)

    def to_params(self) -> Dict[str, Any]:
        """Query parameters, omitting unset filters."""
        params: Dict[str, Any] = {"limit": self.limit, "skip": self.skip}
        if self.search:
            params["search"] = self.search
        if self.split_type:
            params["split_type"] = self.split_type.value
        if self.structure_type:
            params["structure_type"] = self.structure_type.value
        if self.is_template is not None:
            params["is_template"] = str(self.is_template).lower()
        return params


class ProgramCreate(BaseModel):
    """Request model for creating a program."""

    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    split_type: SplitType
    structure_type: StructureType
    structure_config: Optional[StructureConfig] = None
    duration_weeks: Optional[int] = Field(None, ge=1, le=52)


class ProgramUpdate(BaseModel):
    """Request model for partial program updates."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    duration_weeks: Optional[int] = Field(None, ge=1, le=52)


class ProgramClone(BaseModel):
    new_name: Optional[str] = None


class SessionCreate(BaseModel):
    """Request model for adding a session to a program."""

    name: str = Field(min_length=1)
    day_number: int = Field(ge=1)
    order_in_program: int = Field(ge=1)
    exercises: List[SessionExercise] = []

    def to_payload(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "day_number": self.day_number,
            "order_in_program": self.order_in_program,
            "exercises": [ex.to_payload() for ex in self.exercises],
        }


class SessionUpdate(BaseModel):
    """Request model for partial session updates (name and/or exercises)."""

    name: Optional[str] = Field(None, min_length=1)
    day_number: Optional[int] = Field(None, ge=1)
    order_in_program: Optional[int] = Field(None, ge=1)
    exercises: Optional[List[SessionExercise]] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = self.model_dump(
            exclude_none=True, exclude={"exercises"}
        )
        if self.exercises is not None:
            payload["exercises"] = [ex.to_payload() for ex in self.exercises]
        return payload
