"""
Exercise library models.

Part of HQ-14: Exercise library client

Each exercise credits training volume to one or more of the 17 tracked
muscle groups. Contributions are fractions in {0.25, 0.5, 0.75, 1.0} and
exactly one muscle (the primary) should carry 1.0.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MuscleGroup(str, Enum):
    """Muscle groups tracked for hypertrophy volume."""

    CHEST = "CHEST"
    FRONT_DELTS = "FRONT_DELTS"
    SIDE_DELTS = "SIDE_DELTS"
    REAR_DELTS = "REAR_DELTS"
    TRICEPS = "TRICEPS"
    LATS = "LATS"
    TRAPS_RHOMBOIDS = "TRAPS_RHOMBOIDS"
    ELBOW_FLEXORS = "ELBOW_FLEXORS"
    FOREARMS = "FOREARMS"
    SPINAL_ERECTORS = "SPINAL_ERECTORS"
    ABS = "ABS"
    OBLIQUES = "OBLIQUES"
    GLUTES = "GLUTES"
    QUADRICEPS = "QUADRICEPS"
    HAMSTRINGS = "HAMSTRINGS"
    ADDUCTORS = "ADDUCTORS"
    CALVES = "CALVES"


class Equipment(str, Enum):
    BARBELL = "BARBELL"
    DUMBBELL = "DUMBBELL"
    CABLE = "CABLE"
    MACHINE = "MACHINE"
    SMITH_MACHINE = "SMITH_MACHINE"
    BODYWEIGHT = "BODYWEIGHT"
    KETTLEBELL = "KETTLEBELL"
    RESISTANCE_BAND = "RESISTANCE_BAND"
    OTHER = "OTHER"


class DifficultyLevel(str, Enum):
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"


class ForceType(str, Enum):
    PUSH = "PUSH"
    PULL = "PULL"
    STATIC = "STATIC"


VOLUME_CONTRIBUTIONS = (0.25, 0.5, 0.75, 1.0)
PRIMARY_CONTRIBUTION = 1.0

VOLUME_CONTRIBUTION_LABELS = {
    0.25: "Minimal (25%)",
    0.5: "Moderate (50%)",
    0.75: "High (75%)",
    1.0: "Primary (100%)",
}


def validate_contributions(
    contributions: Dict[MuscleGroup, float],
) -> Dict[MuscleGroup, float]:
    """
    Check a muscle -> contribution mapping.

    Raises:
        ValueError: if a contribution is not an allowed fraction, or if the
            mapping does not name exactly one primary muscle.
    """
    for muscle, value in contributions.items():
        if value not in VOLUME_CONTRIBUTIONS:
            raise ValueError(
                f"Invalid contribution {value} for {muscle.value}. "
                f"Must be one of: {VOLUME_CONTRIBUTIONS}"
            )
    primaries = [m for m, v in contributions.items() if v == PRIMARY_CONTRIBUTION]
    if len(primaries) != 1:
        raise ValueError(
            f"Exactly one primary muscle (contribution 1.0) is required, "
            f"got {len(primaries)}"
        )
    return contributions


class MuscleContribution(BaseModel):
    """A muscle's share of an exercise's training volume."""

    model_config = ConfigDict(extra="ignore")

    muscle: MuscleGroup
    contribution: float
    muscle_name: Optional[str] = None
    contribution_percentage: Optional[float] = None
    contribution_label: Optional[str] = None

    @field_validator("contribution")
    @classmethod
    def validate_contribution(cls, v: float) -> float:
        if v not in VOLUME_CONTRIBUTIONS:
            raise ValueError(f"Contribution must be one of {VOLUME_CONTRIBUTIONS}")
        return v


class Exercise(BaseModel):
    """An exercise in the library."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    description: str = ""
    equipment: Equipment
    equipment_name: Optional[str] = None
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    difficulty_level: Optional[DifficultyLevel] = None
    force_type: Optional[ForceType] = None
    is_global: bool = False
    created_by_user_id: Optional[str] = None
    organization_id: Optional[str] = None
    muscle_contributions: List[MuscleContribution] = []
    primary_muscles: List[str] = []
    secondary_muscles: List[str] = []
    total_contribution: Optional[float] = None
    is_compound: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def primary_muscle(self) -> Optional[MuscleGroup]:
        """The muscle carrying full contribution, if exactly one does."""
        primaries = [
            c.muscle
            for c in self.muscle_contributions
            if c.contribution == PRIMARY_CONTRIBUTION
        ]
        return primaries[0] if len(primaries) == 1 else None


class ExerciseFilters(BaseModel):
    muscle_group: Optional[MuscleGroup] = None
    skip: int = Field(default=0, ge=0)
    limit: int = Field(default=100, ge=1)

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {"limit": self.limit, "skip": self.skip}
        if self.muscle_group:
            params["muscle_group"] = self.muscle_group.value
        return params


class ExerciseCreate(BaseModel):
    """Request model for creating a custom exercise."""

    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    equipment: Equipment
    muscle_contributions: Dict[MuscleGroup, float]
    image_url: Optional[str] = None

    @field_validator("muscle_contributions")
    @classmethod
    def check_contributions(
        cls, v: Dict[MuscleGroup, float]
    ) -> Dict[MuscleGroup, float]:
        return validate_contributions(v)


class ExerciseUpdate(BaseModel):
    """Request model for partial exercise updates."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    equipment: Optional[Equipment] = None
    muscle_contributions: Optional[Dict[MuscleGroup, float]] = None
    image_url: Optional[str] = None
    video_url: Optional[str] = None

    @field_validator("muscle_contributions")
    @classmethod
    def check_contributions(
        cls, v: Optional[Dict[MuscleGroup, float]]
    ) -> Optional[Dict[MuscleGroup, float]]:
        if v is None:
            return v
        return validate_contributions(v)
