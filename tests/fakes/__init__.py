"""
Fake implementations and builders for testing.

Part of HQ-31: Session editor local drafts

In-memory fakes for the resource clients and the notifier port, plus
builders for the domain models tests need most. No network required.

Usage:
    from tests.fakes import FakeProgramsClient, make_program

    client = FakeProgramsClient([make_program("p-1", sessions=2)])
"""
from typing import List, Optional

from domain.models.account import User
from domain.models.exercise import Equipment, Exercise, MuscleContribution, MuscleGroup
from domain.models.program import (
    Program,
    ProgramSession,
    SessionExercise,
    SplitType,
    StructureType,
)
from tests.fakes.accounts_client import FakeAccountsClient
from tests.fakes.exercises_client import FakeExercisesClient
from tests.fakes.notifier import RecordingNotifier
from tests.fakes.programs_client import FakeProgramsClient


# =============================================================================
# Builders
# =============================================================================


def make_exercise(
    exercise_id: str = "ex-bench",
    name: str = "Barbell Bench Press",
    equipment: Equipment = Equipment.BARBELL,
    primary: MuscleGroup = MuscleGroup.CHEST,
) -> Exercise:
    return Exercise(
        id=exercise_id,
        name=name,
        equipment=equipment,
        muscle_contributions=[MuscleContribution(muscle=primary, contribution=1.0)],
        primary_muscles=[primary.value],
    )


def make_session_exercises(*exercise_ids: str, sets: int = 3) -> List[SessionExercise]:
    return [
        SessionExercise(exercise_id=eid, sets=sets, order_in_session=i)
        for i, eid in enumerate(exercise_ids, start=1)
    ]


def make_session(
    session_id: str,
    program_id: str = "p-1",
    position: int = 1,
    exercises: Optional[List[SessionExercise]] = None,
) -> ProgramSession:
    return ProgramSession(
        id=session_id,
        program_id=program_id,
        name=f"Day {position}",
        day_number=position,
        order_in_program=position,
        exercises=exercises or [],
    )


def make_program(
    program_id: str = "p-1",
    sessions: int = 2,
    exercises_per_session: int = 2,
) -> Program:
    """A program with `sessions` sessions named s-1..s-N."""
    return Program(
        id=program_id,
        name="Upper/Lower Hypertrophy",
        split_type=SplitType.UPPER_LOWER,
        structure_type=StructureType.WEEKLY,
        sessions=[
            make_session(
                f"s-{n}",
                program_id,
                position=n,
                exercises=make_session_exercises(
                    *[f"ex-{n}-{i}" for i in range(1, exercises_per_session + 1)]
                ),
            )
            for n in range(1, sessions + 1)
        ],
    )


def make_user(email: str = "lifter@example.com", **overrides) -> User:
    data = {
        "id": "u-1",
        "email": email,
        "full_name": "Alex Lifter",
        "organization_id": "org-1",
        "organization_name": "Iron Temple",
    }
    data.update(overrides)
    return User(**data)


__all__ = [
    "FakeAccountsClient",
    "FakeExercisesClient",
    "FakeProgramsClient",
    "RecordingNotifier",
    "make_exercise",
    "make_program",
    "make_session",
    "make_session_exercises",
    "make_user",
]
