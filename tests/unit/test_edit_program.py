"""
Unit tests for ProgramEditor.

Part of HQ-31: Session editor local drafts

Tests for:
- Loading and session selection
- The clean -> editing -> saving -> clean state machine
- Failed saves keeping drafts
- Duplicate and concurrent saves
- Session add/rename/delete
- Late responses after the editor is closed
"""

import asyncio

import pytest
from pydantic import ValidationError

from application.exceptions import (
    INVALID_RESPONSE_MESSAGE,
    NotFoundError,
    SERVER_ERROR_MESSAGE,
    ServerError,
)
from application.queries import ProgramQueries
from application.query_cache import QueryCache
from application.use_cases.edit_program import (
    LAST_SESSION_MESSAGE,
    ProgramEditor,
    SessionState,
)
from domain.models.program import ProgramSession
from tests.fakes import FakeProgramsClient, RecordingNotifier, make_exercise, make_program


def malformed_session_error() -> ValidationError:
    """The error raised when a session body is missing required fields."""
    try:
        ProgramSession.model_validate({"id": "s-1"})
    except ValidationError as e:
        return e
    raise AssertionError("expected a ValidationError")


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client():
    return FakeProgramsClient([make_program("p-1", sessions=2)])


@pytest.fixture
def editor(client, notifier):
    queries = ProgramQueries(client, QueryCache(stale_seconds=30), notifier)
    return ProgramEditor("p-1", programs=queries, notifier=notifier)


def exercise_ids(exercises):
    return [ex.exercise_id for ex in exercises]


# =============================================================================
# Loading and selection
# =============================================================================


@pytest.mark.unit
class TestLoading:
    @pytest.mark.asyncio
    async def test_load_selects_first_session(self, editor):
        program = await editor.load()

        assert program.id == "p-1"
        assert editor.selected_session_id == "s-1"
        assert [s.id for s in editor.sessions] == ["s-1", "s-2"]
        assert editor.state() == SessionState.CLEAN

    @pytest.mark.asyncio
    async def test_current_exercises_from_server(self, editor):
        await editor.load()

        assert [ex.id for ex in editor.current_exercises()] == ["ex-1-1-0", "ex-1-2-1"]
        assert editor.added_exercise_ids() == ["ex-1-1", "ex-1-2"]

    @pytest.mark.asyncio
    async def test_select_unknown_session_raises(self, editor):
        await editor.load()

        with pytest.raises(KeyError):
            editor.select_session("s-404")

    @pytest.mark.asyncio
    async def test_switching_sessions_keeps_drafts(self, editor):
        await editor.load()
        editor.add_exercise(make_exercise("ex-x"))

        editor.select_session("s-2")
        editor.remove_exercise("ex-2-1-0")
        editor.select_session("s-1")

        assert editor.unsaved_sessions == {"s-1", "s-2"}
        assert exercise_ids(editor.current_exercises()) == ["ex-1-1", "ex-1-2", "ex-x"]
        assert exercise_ids(editor.exercises_for("s-2")) == ["ex-2-2"]

    def test_edits_without_selection_are_ignored(self, editor):
        assert editor.add_exercise(make_exercise()) is None
        assert editor.current_exercises() == []


# =============================================================================
# Saving
# =============================================================================


@pytest.mark.unit
class TestSaveSession:
    @pytest.mark.asyncio
    async def test_edit_moves_session_to_editing(self, editor):
        await editor.load()

        editor.add_exercise(make_exercise("ex-x"))

        assert editor.state() == SessionState.EDITING
        assert editor.has_unsaved_changes()

    @pytest.mark.asyncio
    async def test_successful_save_commits_and_refreshes(self, editor, client, notifier):
        await editor.load()
        editor.add_exercise(make_exercise("ex-x"))

        result = await editor.save_session()

        assert result.success
        assert result.session.exercise_count == 3
        assert editor.state() == SessionState.CLEAN
        assert not editor.has_unsaved_changes()
        # Now read from the refreshed server copy
        assert [ex.id for ex in editor.current_exercises()] == ["ex-1-1-0", "ex-1-2-1", "ex-x-2"]
        assert client.call_count("get_program") == 2
        assert notifier.of("success") == ["Session updated successfully!"]

    @pytest.mark.asyncio
    async def test_save_sends_only_persisted_fields(self, editor, client):
        await editor.load()
        entry = editor.add_exercise(make_exercise("ex-x"))
        editor.update_exercise(entry.id, sets=4, target_reps="6-8", rpe=9, notes="top set")

        await editor.save_session()

        _, program_id, session_id, update = client.calls[-2]
        assert (program_id, session_id) == ("p-1", "s-1")
        assert update.to_payload() == {
            "exercises": [
                {"exercise_id": "ex-1-1", "sets": 3, "order_in_session": 1, "notes": None},
                {"exercise_id": "ex-1-2", "sets": 3, "order_in_session": 2, "notes": None},
                {"exercise_id": "ex-x", "sets": 4, "order_in_session": 3, "notes": "top set"},
            ]
        }

    @pytest.mark.asyncio
    async def test_clean_session_save_is_skipped(self, editor, client):
        await editor.load()

        result = await editor.save_session()

        assert result.success and result.skipped
        assert client.call_count("update_session") == 0

    @pytest.mark.asyncio
    async def test_failed_save_keeps_draft(self, editor, client, notifier):
        await editor.load()
        editor.add_exercise(make_exercise("ex-x"))
        before = editor.current_exercises()
        client.fail_next("update_session", ServerError("Internal Server Error", 500))

        result = await editor.save_session()

        assert not result.success
        assert result.error == SERVER_ERROR_MESSAGE
        assert editor.has_unsaved_changes()
        assert editor.state() == SessionState.EDITING
        assert editor.current_exercises() == before
        assert notifier.of("error") == [SERVER_ERROR_MESSAGE]

    @pytest.mark.asyncio
    async def test_malformed_save_response_is_failed_result(self, editor, client, notifier):
        await editor.load()
        editor.add_exercise(make_exercise("ex-x"))
        before = editor.current_exercises()
        client.fail_next("update_session", malformed_session_error())

        result = await editor.save_session()

        assert not result.success
        assert result.error == INVALID_RESPONSE_MESSAGE
        assert editor.state() == SessionState.EDITING
        assert editor.current_exercises() == before
        assert notifier.of("error") == [INVALID_RESPONSE_MESSAGE]

    @pytest.mark.asyncio
    async def test_retry_after_failure(self, editor, client):
        await editor.load()
        editor.add_exercise(make_exercise("ex-x"))
        client.fail_next("update_session", ServerError("Bad Gateway", 502))
        await editor.save_session()

        result = await editor.save_session()

        assert result.success
        assert not editor.has_unsaved_changes()
        assert client.call_count("update_session") == 2

    @pytest.mark.asyncio
    async def test_duplicate_save_of_same_session_rejected(self, editor, client):
        await editor.load()
        editor.add_exercise(make_exercise("ex-x"))
        client.hold("update_session")

        first = asyncio.create_task(editor.save_session())
        await asyncio.sleep(0)
        assert editor.state() == SessionState.SAVING

        second = await editor.save_session()
        client.release("update_session")
        first_result = await first

        assert second.skipped and not second.success
        assert second.error == "Save already in progress"
        assert first_result.success
        assert client.call_count("update_session") == 1

    @pytest.mark.asyncio
    async def test_different_sessions_save_concurrently(self, editor, client):
        await editor.load()
        editor.add_exercise(make_exercise("ex-x"))
        editor.select_session("s-2")
        editor.add_exercise(make_exercise("ex-y"))
        client.hold("update_session")

        tasks = [
            asyncio.create_task(editor.save_session("s-1")),
            asyncio.create_task(editor.save_session("s-2")),
        ]
        await asyncio.sleep(0)
        assert client.call_count("update_session") == 2
        assert editor.state("s-1") == editor.state("s-2") == SessionState.SAVING

        client.release("update_session")
        results = await asyncio.gather(*tasks)

        assert all(r.success for r in results)
        assert editor.unsaved_sessions == set()

    @pytest.mark.asyncio
    async def test_edit_during_save_keeps_newer_draft(self, editor, client):
        await editor.load()
        editor.add_exercise(make_exercise("ex-x"))
        client.hold("update_session")

        task = asyncio.create_task(editor.save_session())
        await asyncio.sleep(0)
        editor.add_exercise(make_exercise("ex-y"))
        client.release("update_session")
        result = await task

        assert result.success
        assert editor.has_unsaved_changes()
        assert exercise_ids(editor.current_exercises()) == ["ex-1-1", "ex-1-2", "ex-x", "ex-y"]

    @pytest.mark.asyncio
    async def test_late_response_after_close_does_not_touch_state(self, editor, client):
        await editor.load()
        editor.add_exercise(make_exercise("ex-x"))
        client.hold("update_session")

        task = asyncio.create_task(editor.save_session())
        await asyncio.sleep(0)
        editor.close()
        client.release("update_session")
        result = await task

        assert result.success
        assert editor.has_unsaved_changes()
        assert editor.selected_session.exercise_count == 0
        assert client.call_count("get_program") == 1


# =============================================================================
# Session add / rename / delete
# =============================================================================


@pytest.mark.unit
class TestSessionOperations:
    @pytest.mark.asyncio
    async def test_add_session_appends_and_selects(self, editor, client):
        await editor.load()

        created = await editor.add_session("Arms")

        assert created.order_in_program == 3
        assert created.day_number == 3
        assert editor.selected_session_id == created.id
        assert [s.name for s in editor.sessions][-1] == "Arms"
        assert editor.current_exercises() == []

    @pytest.mark.asyncio
    async def test_rename_session(self, editor):
        await editor.load()

        assert await editor.rename_session("s-2", "Lower Power")
        assert editor.sessions[1].name == "Lower Power"

    @pytest.mark.asyncio
    async def test_rename_keeps_exercise_draft(self, editor):
        await editor.load()
        editor.add_exercise(make_exercise("ex-x"))

        await editor.rename_session("s-1", "Upper Power")

        assert editor.has_unsaved_changes()
        assert len(editor.current_exercises()) == 3

    @pytest.mark.asyncio
    async def test_delete_session_discards_draft_and_reselects(self, editor, client):
        await editor.load()
        editor.add_exercise(make_exercise("ex-x"))

        assert await editor.delete_session("s-1")

        assert editor.selected_session_id == "s-2"
        assert [s.id for s in editor.sessions] == ["s-2"]
        assert editor.unsaved_sessions == set()
        assert editor.exercises_for("s-1") == []

    @pytest.mark.asyncio
    async def test_failed_delete_changes_nothing(self, editor, client):
        await editor.load()
        editor.add_exercise(make_exercise("ex-x"))
        client.fail_next("delete_session", NotFoundError("Session not found", 404))

        assert not await editor.delete_session("s-1")

        assert [s.id for s in editor.sessions] == ["s-1", "s-2"]
        assert editor.has_unsaved_changes("s-1")
        assert editor.selected_session_id == "s-1"

    @pytest.mark.asyncio
    async def test_last_session_cannot_be_deleted(self, notifier):
        client = FakeProgramsClient([make_program("p-1", sessions=1)])
        queries = ProgramQueries(client, QueryCache(), notifier)
        editor = ProgramEditor("p-1", programs=queries, notifier=notifier)
        await editor.load()

        assert not await editor.delete_session("s-1")

        assert notifier.of("error") == [LAST_SESSION_MESSAGE]
        assert client.call_count("delete_session") == 0
        assert [s.id for s in editor.sessions] == ["s-1"]
