"""
ProgramEditor Use Case.

Part of HQ-31: Session editor local drafts

Drives editing of one program's sessions. Exercise edits go into a
SessionDraftOverlay and stay local until the session is saved; session
create/rename/delete go straight to the backend.

Each session moves through:

    CLEAN --edit--> EDITING --save--> SAVING --ok--> CLEAN
                       ^                 |
                       +-----failed------+

A failed save keeps the draft and its dirty flag so the user can retry.
Switching the selected session never drops another session's draft.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence, Set

from pydantic import ValidationError

from application.exceptions import APIError, user_message
from application.ports.notifier import Notifier
from application.queries import ProgramQueries
from domain.models.exercise import Exercise
from domain.models.program import (
    Program,
    ProgramSession,
    SessionCreate,
    SessionExercise,
    SessionExerciseWithDetails,
    SessionUpdate,
)
from domain.services.session_drafts import SessionDraftOverlay

logger = logging.getLogger(__name__)

LAST_SESSION_MESSAGE = "Cannot delete the last session"

# Failures a remote call can end with: a backend error, or a body that
# does not fit the models.
REQUEST_ERRORS = (APIError, ValidationError)


class SessionState(str, Enum):
    """Client-visible save state of a session."""

    CLEAN = "clean"
    EDITING = "editing"
    SAVING = "saving"


@dataclass
class SaveResult:
    """Result of saving one session's draft."""

    success: bool
    session_id: Optional[str] = None
    session: Optional[ProgramSession] = None
    error: Optional[str] = None
    skipped: bool = False


class ProgramEditor:
    """
    Editor state for one program.

    Dependencies are injected via constructor for testability.

    Usage:
        >>> editor = ProgramEditor("p-1", programs=program_queries, notifier=notifier)
        >>> await editor.load()
        >>> editor.add_exercise(bench_press)
        >>> result = await editor.save_session()
        >>> result.success
        True
    """

    def __init__(
        self,
        program_id: str,
        programs: ProgramQueries,
        notifier: Notifier,
        exercise_lookup: Optional[Callable[[str], Optional[Exercise]]] = None,
    ) -> None:
        """
        Initialize the editor.

        Args:
            program_id: Program being edited
            programs: Cached program reads and mutations
            notifier: Where user-facing messages go
            exercise_lookup: Optional catalog lookup used to fill display
                details of exercises loaded from the server
        """
        self.program_id = program_id
        self._programs = programs
        self._notifier = notifier
        self._overlay = SessionDraftOverlay(self._server_exercises, exercise_lookup)
        self._program: Optional[Program] = None
        self._selected: Optional[str] = None
        self._saving: Set[str] = set()
        self._closed = False

    # -------------------------------------------------------------------------
    # Loading and selection
    # -------------------------------------------------------------------------

    async def load(self, *, force: bool = False) -> Optional[Program]:
        """Fetch the program and select its first session if none is selected."""
        program = await self._programs.get_program(self.program_id, force=force)
        self._apply_program(program)
        return self._program

    @property
    def program(self) -> Optional[Program]:
        return self._program

    @property
    def sessions(self) -> List[ProgramSession]:
        return self._program.ordered_sessions() if self._program else []

    @property
    def selected_session_id(self) -> Optional[str]:
        return self._selected

    @property
    def selected_session(self) -> Optional[ProgramSession]:
        if self._program is None or self._selected is None:
            return None
        return self._program.find_session(self._selected)

    def select_session(self, session_id: str) -> None:
        if self._program is None or self._program.find_session(session_id) is None:
            raise KeyError(f"Session {session_id} is not part of program {self.program_id}")
        self._selected = session_id

    # -------------------------------------------------------------------------
    # Draft edits (selected session)
    # -------------------------------------------------------------------------

    def current_exercises(self) -> List[SessionExerciseWithDetails]:
        return self._overlay.resolve(self._selected)

    def exercises_for(self, session_id: str) -> List[SessionExerciseWithDetails]:
        return self._overlay.resolve(session_id)

    def added_exercise_ids(self) -> List[str]:
        """Library ids already in the selected session (for the exercise picker)."""
        return [ex.exercise_id for ex in self.current_exercises()]

    def add_exercise(self, exercise: Exercise) -> Optional[SessionExerciseWithDetails]:
        return self._overlay.add_exercise(self._selected, exercise)

    def update_exercise(
        self, local_id: str, **fields
    ) -> Optional[SessionExerciseWithDetails]:
        return self._overlay.update_exercise(self._selected, local_id, **fields)

    def remove_exercise(self, local_id: str) -> None:
        self._overlay.remove_exercise(self._selected, local_id)

    def reorder_exercises(self, ordered: Sequence[SessionExerciseWithDetails]) -> None:
        self._overlay.reorder_exercises(self._selected, ordered)

    def move_exercise(self, from_index: int, to_index: int) -> None:
        self._overlay.move_exercise(self._selected, from_index, to_index)

    def has_unsaved_changes(self, session_id: Optional[str] = None) -> bool:
        return self._overlay.is_dirty(session_id or self._selected)

    @property
    def unsaved_sessions(self) -> Set[str]:
        return self._overlay.dirty_sessions

    def state(self, session_id: Optional[str] = None) -> SessionState:
        sid = session_id or self._selected
        if sid in self._saving:
            return SessionState.SAVING
        if self._overlay.is_dirty(sid):
            return SessionState.EDITING
        return SessionState.CLEAN

    # -------------------------------------------------------------------------
    # Remote operations
    # -------------------------------------------------------------------------

    async def save_session(self, session_id: Optional[str] = None) -> SaveResult:
        """
        Persist a session's draft.

        Only exercise_id, sets, order_in_session and notes are sent. On
        success the draft is committed, unless it was edited again while
        the request was in flight. On failure the draft is left untouched.
        """
        sid = session_id or self._selected
        if sid is None or self._program is None:
            return SaveResult(success=False, error="No session selected", skipped=True)
        if sid in self._saving:
            logger.info("Save already in progress for session %s", sid)
            return SaveResult(
                success=False, session_id=sid, error="Save already in progress", skipped=True
            )
        if not self._overlay.is_dirty(sid):
            return SaveResult(success=True, session_id=sid, skipped=True)

        snapshot = self._overlay.resolve(sid)
        update = SessionUpdate(exercises=[ex.to_session_exercise() for ex in snapshot])

        self._saving.add(sid)
        try:
            saved = await self._programs.update_session(self.program_id, sid, update)
        except REQUEST_ERRORS as e:
            logger.warning("Saving session %s failed; keeping draft", sid)
            return SaveResult(success=False, session_id=sid, error=user_message(e))
        finally:
            if not self._closed:
                self._saving.discard(sid)

        if self._closed:
            return SaveResult(success=True, session_id=sid, session=saved)

        self._replace_session(saved)
        if self._overlay.resolve(sid) == snapshot:
            self._overlay.commit(sid)
        else:
            logger.info("Session %s changed during save; keeping newer draft", sid)
        await self._refresh_quietly()
        return SaveResult(success=True, session_id=sid, session=saved)

    async def add_session(self, name: str) -> Optional[ProgramSession]:
        """Append an empty session and select it."""
        if self._program is None:
            return None
        position = len(self._program.sessions) + 1
        data = SessionCreate(
            name=name, day_number=position, order_in_program=position, exercises=[]
        )
        try:
            created = await self._programs.create_session(self.program_id, data)
        except REQUEST_ERRORS:
            return None
        if self._closed:
            return created

        self._replace_session(created)
        self._selected = created.id
        await self._refresh_quietly()
        return created

    async def rename_session(self, session_id: str, name: str) -> bool:
        try:
            renamed = await self._programs.update_session(
                self.program_id, session_id, SessionUpdate(name=name)
            )
        except REQUEST_ERRORS:
            return False
        if not self._closed:
            self._replace_session(renamed)
            await self._refresh_quietly()
        return True

    async def delete_session(self, session_id: str) -> bool:
        """
        Delete a session after the backend confirms.

        A program keeps at least one session, so deleting the only one is
        refused without a request. Nothing changes locally on failure.
        """
        if self._program is None or len(self._program.sessions) <= 1:
            self._notifier.error(LAST_SESSION_MESSAGE)
            return False
        try:
            await self._programs.delete_session(self.program_id, session_id)
        except REQUEST_ERRORS:
            return False
        if self._closed:
            return True

        self._overlay.discard(session_id)
        remaining = [s for s in self._program.sessions if s.id != session_id]
        self._program = self._program.model_copy(update={"sessions": remaining})
        if self._selected == session_id:
            ordered = self._program.ordered_sessions()
            self._selected = ordered[0].id if ordered else None
        await self._refresh_quietly()
        return True

    def close(self) -> None:
        """Mark the view gone; late responses no longer touch editor state."""
        self._closed = True

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _server_exercises(self, session_id: str) -> List[SessionExercise]:
        if self._program is None:
            return []
        session = self._program.find_session(session_id)
        return list(session.exercises) if session else []

    def _apply_program(self, program: Program) -> None:
        if self._closed:
            return
        self._program = program
        if self._selected is None or program.find_session(self._selected) is None:
            ordered = program.ordered_sessions()
            self._selected = ordered[0].id if ordered else None

    def _replace_session(self, session: ProgramSession) -> None:
        if self._program is None:
            return
        sessions = list(self._program.sessions)
        for index, existing in enumerate(sessions):
            if existing.id == session.id:
                sessions[index] = session
                break
        else:
            sessions.append(session)
        self._program = self._program.model_copy(update={"sessions": sessions})

    async def _refresh_quietly(self) -> None:
        try:
            program = await self._programs.get_program(self.program_id)
        except REQUEST_ERRORS as e:
            logger.warning(f"Could not refresh program {self.program_id}: {e}")
            return
        self._apply_program(program)
