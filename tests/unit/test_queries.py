"""
Unit tests for ProgramQueries and ExerciseQueries.

Part of HQ-27: Query cache for resource reads

Tests for:
- Reads served through the cache
- Mutations invalidating the declared keys
- Success and failure notifications
"""

import pytest

from application.exceptions import NotFoundError, SERVER_ERROR_MESSAGE, ServerError
from application.queries import ExerciseQueries, ProgramQueries
from application.query_cache import QueryCache, exercise_keys, program_keys
from domain.models.exercise import ExerciseUpdate
from domain.models.program import (
    ProgramClone,
    ProgramCreate,
    ProgramFilters,
    ProgramUpdate,
    SessionCreate,
    SessionUpdate,
    SplitType,
    StructureType,
)
from tests.fakes import (
    FakeExercisesClient,
    FakeProgramsClient,
    RecordingNotifier,
    make_exercise,
    make_program,
)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def cache():
    return QueryCache(stale_seconds=30)


@pytest.fixture
def programs_client():
    return FakeProgramsClient([make_program("p-1"), make_program("p-2")])


@pytest.fixture
def programs(programs_client, cache, notifier):
    return ProgramQueries(programs_client, cache, notifier)


@pytest.fixture
def exercises_client():
    return FakeExercisesClient([
        make_exercise("ex-bench", "Barbell Bench Press"),
        make_exercise("ex-row", "Cable Row"),
    ])


@pytest.fixture
def exercises(exercises_client, cache, notifier):
    return ExerciseQueries(exercises_client, cache, notifier)


# =============================================================================
# Program reads
# =============================================================================


@pytest.mark.unit
class TestProgramReads:
    @pytest.mark.asyncio
    async def test_get_program_cached(self, programs, programs_client):
        await programs.get_program("p-1")
        await programs.get_program("p-1")

        assert programs_client.call_count("get_program") == 1

    @pytest.mark.asyncio
    async def test_force_refetches(self, programs, programs_client):
        await programs.get_program("p-1")
        await programs.get_program("p-1", force=True)

        assert programs_client.call_count("get_program") == 2

    @pytest.mark.asyncio
    async def test_lists_cached_per_filters(self, programs, programs_client):
        await programs.list_programs()
        await programs.list_programs(ProgramFilters(is_template=True))
        await programs.list_programs()

        assert programs_client.call_count("list_programs") == 2

    @pytest.mark.asyncio
    async def test_stats(self, programs):
        stats = await programs.get_program_stats("p-1")

        assert stats.total_sessions == 2
        assert stats.total_sets == 12


# =============================================================================
# Program mutations
# =============================================================================


@pytest.mark.unit
class TestProgramMutations:
    @pytest.mark.asyncio
    async def test_create_program_invalidates_lists(self, programs, programs_client, notifier):
        await programs.list_programs()

        created = await programs.create_program(ProgramCreate(
            name="PPL",
            split_type=SplitType.PUSH_PULL_LEGS,
            structure_type=StructureType.CYCLIC,
        ))
        listed = await programs.list_programs()

        assert created.id in [p.id for p in listed]
        assert programs_client.call_count("list_programs") == 2
        assert notifier.of("success") == ["Program created successfully!"]

    @pytest.mark.asyncio
    async def test_update_program_invalidates_detail(self, programs, programs_client):
        await programs.get_program("p-1")

        await programs.update_program("p-1", ProgramUpdate(name="Renamed"))
        program = await programs.get_program("p-1")

        assert program.name == "Renamed"
        assert programs_client.call_count("get_program") == 2

    @pytest.mark.asyncio
    async def test_update_session_keeps_other_programs_cached(self, programs, programs_client, cache):
        await programs.get_program("p-1")
        await programs.get_program("p-2")

        await programs.update_session("p-1", "s-1", SessionUpdate(name="Heavy Upper"))

        assert program_keys.detail("p-1") not in cache
        assert program_keys.detail("p-2") in cache

    @pytest.mark.asyncio
    async def test_create_session_invalidates_lists(self, programs, cache):
        await programs.list_programs()

        await programs.create_session("p-1", SessionCreate(
            name="Arms", day_number=3, order_in_program=3,
        ))

        assert cache.keys_under(program_keys.lists()) == []

    @pytest.mark.asyncio
    async def test_clone_program(self, programs, notifier):
        clone = await programs.clone_program("p-1", ProgramClone(new_name="My Copy"))

        assert clone.name == "My Copy"
        assert notifier.of("success") == ["Program cloned successfully!"]

    @pytest.mark.asyncio
    async def test_failed_delete_leaves_cache_and_notifies(
        self, programs, programs_client, cache, notifier
    ):
        await programs.get_program("p-1")
        programs_client.fail_next("delete_program", ServerError("db down", 503))

        with pytest.raises(ServerError):
            await programs.delete_program("p-1")

        assert program_keys.detail("p-1") in cache
        assert notifier.of("error") == [SERVER_ERROR_MESSAGE]
        assert notifier.of("success") == []

    @pytest.mark.asyncio
    async def test_failed_mutation_shows_backend_message(self, programs, programs_client, notifier):
        programs_client.fail_next("delete_session", NotFoundError("Session not found", 404))

        with pytest.raises(NotFoundError):
            await programs.delete_session("p-1", "s-9")

        assert notifier.of("error") == ["Session not found"]


# =============================================================================
# Exercises
# =============================================================================


@pytest.mark.unit
class TestExerciseQueries:
    @pytest.mark.asyncio
    async def test_cached_exercise_found_in_list(self, exercises):
        assert exercises.cached_exercise("ex-row") is None

        await exercises.list_exercises()

        assert exercises.cached_exercise("ex-row").name == "Cable Row"
        assert exercises.cached_exercise("ex-missing") is None

    @pytest.mark.asyncio
    async def test_cached_exercise_prefers_detail(self, exercises, cache):
        await exercises.get_exercise("ex-bench")

        assert exercises.cached_exercise("ex-bench").id == "ex-bench"
        assert exercise_keys.detail("ex-bench") in cache

    @pytest.mark.asyncio
    async def test_update_exercise_invalidates_list_and_detail(
        self, exercises, exercises_client, cache
    ):
        await exercises.list_exercises()
        await exercises.get_exercise("ex-bench")

        await exercises.update_exercise("ex-bench", ExerciseUpdate(name="Paused Bench"))

        assert cache.keys_under(exercise_keys.all) == []
        refreshed = await exercises.get_exercise("ex-bench")
        assert refreshed.name == "Paused Bench"
        assert exercises_client.call_count("get_exercise") == 2

    @pytest.mark.asyncio
    async def test_delete_exercise(self, exercises, notifier):
        await exercises.delete_exercise("ex-row")

        assert notifier.of("success") == ["Exercise deleted successfully!"]
        assert [e.id for e in await exercises.list_exercises()] == ["ex-bench"]
