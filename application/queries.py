"""
Cached reads and invalidating mutations for programs and exercises.

Part of HQ-27: Query cache for resource reads

Reads go through the QueryCache. Mutations go through `_mutate`, which on
success applies the mutation's declared invalidation rule and announces the
result, and on failure reports a user-facing message before re-raising.
Nothing is removed or changed locally before the backend confirms.
"""

import logging
from typing import Any, Awaitable, Callable, List, Mapping, Optional, TypeVar

from application.exceptions import user_message
from application.ports.notifier import Notifier
from application.query_cache import QueryCache, exercise_keys, program_keys
from domain.models.exercise import (
    Exercise,
    ExerciseCreate,
    ExerciseFilters,
    ExerciseUpdate,
)
from domain.models.program import (
    Program,
    ProgramClone,
    ProgramCreate,
    ProgramFilters,
    ProgramListItem,
    ProgramSession,
    ProgramStats,
    ProgramUpdate,
    SessionCreate,
    SessionUpdate,
)
from infrastructure.api.exercises import ExercisesClient
from infrastructure.api.programs import ProgramsClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _Queries:
    def __init__(self, cache: QueryCache, notifier: Notifier):
        self._cache = cache
        self._notifier = notifier

    async def _mutate(
        self,
        mutation: str,
        variables: Mapping[str, Any],
        call: Callable[[], Awaitable[T]],
        success_message: Optional[str] = None,
    ) -> T:
        try:
            result = await call()
        except Exception as e:
            logger.warning(f"{mutation} failed: {e}")
            self._notifier.error(user_message(e))
            raise
        self._cache.apply_mutation(mutation, variables)
        if success_message:
            self._notifier.success(success_message)
        return result


class ProgramQueries(_Queries):
    """Programs and sessions through the cache."""

    def __init__(self, client: ProgramsClient, cache: QueryCache, notifier: Notifier):
        super().__init__(cache, notifier)
        self._client = client

    async def list_programs(
        self, filters: Optional[ProgramFilters] = None, *, force: bool = False
    ) -> List[ProgramListItem]:
        return await self._cache.fetch(
            program_keys.list(filters),
            lambda: self._client.list_programs(filters),
            force=force,
        )

    async def get_program(self, program_id: str, *, force: bool = False) -> Program:
        return await self._cache.fetch(
            program_keys.detail(program_id),
            lambda: self._client.get_program(program_id),
            force=force,
        )

    async def get_program_stats(self, program_id: str) -> ProgramStats:
        return await self._cache.fetch(
            program_keys.stats(program_id),
            lambda: self._client.get_program_stats(program_id),
        )

    async def create_program(self, data: ProgramCreate) -> Program:
        return await self._mutate(
            "create_program",
            {},
            lambda: self._client.create_program(data),
            "Program created successfully!",
        )

    async def update_program(self, program_id: str, data: ProgramUpdate) -> Program:
        return await self._mutate(
            "update_program",
            {"program_id": program_id},
            lambda: self._client.update_program(program_id, data),
            "Program updated successfully!",
        )

    async def delete_program(self, program_id: str) -> None:
        await self._mutate(
            "delete_program",
            {"program_id": program_id},
            lambda: self._client.delete_program(program_id),
            "Program deleted successfully!",
        )

    async def clone_program(
        self, template_id: str, data: Optional[ProgramClone] = None
    ) -> Program:
        return await self._mutate(
            "clone_program",
            {"program_id": template_id},
            lambda: self._client.clone_program(template_id, data),
            "Program cloned successfully!",
        )

    async def create_session(
        self, program_id: str, data: SessionCreate
    ) -> ProgramSession:
        return await self._mutate(
            "create_session",
            {"program_id": program_id},
            lambda: self._client.create_session(program_id, data),
            "Session added successfully!",
        )

    async def update_session(
        self, program_id: str, session_id: str, data: SessionUpdate
    ) -> ProgramSession:
        return await self._mutate(
            "update_session",
            {"program_id": program_id, "session_id": session_id},
            lambda: self._client.update_session(program_id, session_id, data),
            "Session updated successfully!",
        )

    async def delete_session(self, program_id: str, session_id: str) -> None:
        await self._mutate(
            "delete_session",
            {"program_id": program_id, "session_id": session_id},
            lambda: self._client.delete_session(program_id, session_id),
            "Session deleted successfully!",
        )


class ExerciseQueries(_Queries):
    """The exercise library through the cache."""

    def __init__(self, client: ExercisesClient, cache: QueryCache, notifier: Notifier):
        super().__init__(cache, notifier)
        self._client = client

    async def list_exercises(
        self, filters: Optional[ExerciseFilters] = None, *, force: bool = False
    ) -> List[Exercise]:
        return await self._cache.fetch(
            exercise_keys.list(filters),
            lambda: self._client.list_exercises(filters),
            force=force,
        )

    async def get_exercise(self, exercise_id: str) -> Exercise:
        return await self._cache.fetch(
            exercise_keys.detail(exercise_id),
            lambda: self._client.get_exercise(exercise_id),
        )

    def cached_exercise(self, exercise_id: str) -> Optional[Exercise]:
        """Look an exercise up in any cached list or detail, without a request."""
        detail = self._cache.peek(exercise_keys.detail(exercise_id))
        if detail is not None:
            return detail
        for key in self._cache.keys_under(exercise_keys.lists()):
            for exercise in self._cache.peek(key) or []:
                if exercise.id == exercise_id:
                    return exercise
        return None

    async def create_exercise(self, data: ExerciseCreate) -> Exercise:
        return await self._mutate(
            "create_exercise",
            {},
            lambda: self._client.create_exercise(data),
            "Exercise created successfully!",
        )

    async def update_exercise(self, exercise_id: str, data: ExerciseUpdate) -> Exercise:
        return await self._mutate(
            "update_exercise",
            {"exercise_id": exercise_id},
            lambda: self._client.update_exercise(exercise_id, data),
            "Exercise updated successfully!",
        )

    async def delete_exercise(self, exercise_id: str) -> None:
        await self._mutate(
            "delete_exercise",
            {"exercise_id": exercise_id},
            lambda: self._client.delete_exercise(exercise_id),
            "Exercise deleted successfully!",
        )
