"""
Session draft overlay.

Part of HQ-31: Session editor local drafts

Holds unsaved exercise edits per program session on top of the server's
data. A session gets an overlay entry on its first local mutation and loses
it on commit (successful save) or discard (session deleted). Sessions
without an entry are presented straight from the server list.

Every list stored in the overlay is numbered 1..N by `order_in_session`;
every mutation renumbers immediately rather than at read time, so gaps in
the server's positions are closed on the first local edit.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence, Set
from uuid import uuid4

from domain.models.exercise import Exercise
from domain.models.program import SessionExercise, SessionExerciseWithDetails

logger = logging.getLogger(__name__)

DEFAULT_SETS = 3
DEFAULT_TARGET_REPS = "8-12"
DEFAULT_RPE = 8

ServerSource = Callable[[str], Sequence[SessionExercise]]
ExerciseLookup = Callable[[str], Optional[Exercise]]


def reorder(items: Sequence, from_index: int, to_index: int) -> list:
    """
    Move one item of a list to a new position.

    Returns a new list; `items` is left untouched. Negative indexes are not
    accepted.

    Raises:
        IndexError: if either index is outside the list.
    """
    size = len(items)
    if not 0 <= from_index < size or not 0 <= to_index < size:
        raise IndexError(
            f"Cannot move item {from_index} -> {to_index} in a list of {size}"
        )
    result = list(items)
    item = result.pop(from_index)
    result.insert(to_index, item)
    return result


def renumber(
    exercises: Sequence[SessionExerciseWithDetails],
) -> List[SessionExerciseWithDetails]:
    """Return copies of `exercises` with order_in_session set to 1..N."""
    return [
        ex if ex.order_in_session == index else ex.model_copy(
            update={"order_in_session": index}
        )
        for index, ex in enumerate(exercises, start=1)
    ]


class SessionDraftOverlay:
    """
    In-memory edit buffer for the exercise lists of a program's sessions.

    Reads fall through to `server_source` for sessions without local edits.
    The optional `exercise_lookup` fills display details (name, equipment,
    primary muscles) for server entries the backend did not annotate.

    Usage:
        >>> overlay = SessionDraftOverlay(server_source=lambda sid: [])
        >>> overlay.add_exercise("s-1", bench_press)
        >>> overlay.is_dirty("s-1")
        True
    """

    def __init__(
        self,
        server_source: ServerSource,
        exercise_lookup: Optional[ExerciseLookup] = None,
    ) -> None:
        self._server_source = server_source
        self._exercise_lookup = exercise_lookup
        self._drafts: Dict[str, List[SessionExerciseWithDetails]] = {}
        self._dirty: Set[str] = set()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def resolve(self, session_id: Optional[str]) -> List[SessionExerciseWithDetails]:
        """
        Current exercises for a session: the draft if one exists, otherwise
        the server list with synthetic ids "{exercise_id}-{index}".
        """
        if session_id is None:
            return []
        draft = self._drafts.get(session_id)
        if draft is not None:
            return list(draft)
        return [
            self._from_server(ex, index)
            for index, ex in enumerate(self._server_source(session_id) or [])
        ]

    def has_draft(self, session_id: str) -> bool:
        return session_id in self._drafts

    def is_dirty(self, session_id: Optional[str]) -> bool:
        return session_id is not None and session_id in self._dirty

    @property
    def dirty_sessions(self) -> Set[str]:
        return set(self._dirty)

    def to_payload(self, session_id: str) -> List[SessionExercise]:
        """The persisted shape of a session's current exercises."""
        return [ex.to_session_exercise() for ex in self.resolve(session_id)]

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_exercise(
        self, session_id: Optional[str], exercise: Exercise
    ) -> Optional[SessionExerciseWithDetails]:
        """Append a library exercise with default prescription."""
        if session_id is None:
            return None
        current = self.resolve(session_id)
        entry = SessionExerciseWithDetails(
            id=f"{exercise.id}-{uuid4().hex[:12]}",
            exercise_id=exercise.id,
            exercise_name=exercise.name,
            equipment=exercise.equipment.value,
            primary_muscles=list(exercise.primary_muscles),
            sets=DEFAULT_SETS,
            order_in_session=len(current) + 1,
            target_reps=DEFAULT_TARGET_REPS,
            rpe=DEFAULT_RPE,
            notes="",
        )
        # Server positions are unique but may have gaps.
        exercises = renumber(current + [entry])
        self._store(session_id, exercises)
        return exercises[-1]

    def update_exercise(
        self, session_id: Optional[str], local_id: str, **fields
    ) -> Optional[SessionExerciseWithDetails]:
        """
        Merge `fields` into one entry. Unknown ids change nothing.

        The local id and position are not editable here; positions change
        through reorder_exercises() and move_exercise().
        """
        if session_id is None:
            return None
        fields.pop("id", None)
        fields.pop("order_in_session", None)
        current = self.resolve(session_id)
        for index, ex in enumerate(current):
            if ex.id == local_id:
                # Validate the merged entry before storing it.
                updated = SessionExerciseWithDetails.model_validate(
                    {**ex.model_dump(), **fields}
                )
                current[index] = updated
                exercises = renumber(current)
                self._store(session_id, exercises)
                return exercises[index]
        logger.debug("No exercise %s in session %s to update", local_id, session_id)
        return None

    def remove_exercise(self, session_id: Optional[str], local_id: str) -> None:
        if session_id is None:
            return
        remaining = [ex for ex in self.resolve(session_id) if ex.id != local_id]
        self._store(session_id, renumber(remaining))

    def reorder_exercises(
        self,
        session_id: Optional[str],
        ordered: Sequence[SessionExerciseWithDetails],
    ) -> None:
        """Replace a session's list with `ordered`, renumbering it."""
        if session_id is None:
            return
        self._store(session_id, renumber(ordered))

    def move_exercise(
        self, session_id: Optional[str], from_index: int, to_index: int
    ) -> None:
        """Drag-and-drop move within a session's list."""
        if session_id is None:
            return
        self.reorder_exercises(
            session_id, reorder(self.resolve(session_id), from_index, to_index)
        )

    def commit(self, session_id: str) -> None:
        """Forget the draft once the backend has accepted it."""
        self._clear(session_id)

    def discard(self, session_id: str) -> None:
        """Forget the draft without saving it."""
        self._clear(session_id)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _store(
        self, session_id: str, exercises: List[SessionExerciseWithDetails]
    ) -> None:
        self._drafts[session_id] = exercises
        self._dirty.add(session_id)

    def _clear(self, session_id: str) -> None:
        self._drafts.pop(session_id, None)
        self._dirty.discard(session_id)

    def _from_server(
        self, exercise: SessionExercise, index: int
    ) -> SessionExerciseWithDetails:
        details = self._exercise_lookup(exercise.exercise_id) if self._exercise_lookup else None
        name = exercise.exercise_name or (details.name if details else None)
        return SessionExerciseWithDetails(
            id=f"{exercise.exercise_id}-{index}",
            exercise_id=exercise.exercise_id,
            sets=exercise.sets,
            order_in_session=exercise.order_in_session,
            notes=exercise.notes,
            exercise_name=name or f"Exercise {index + 1}",
            equipment=details.equipment.value if details else None,
            primary_muscles=list(details.primary_muscles) if details else [],
            target_reps="",
            rpe=None,
        )
