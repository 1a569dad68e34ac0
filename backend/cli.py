"""
Command-line client for the HypertroQ backend.

Part of HQ-40: Command-line client

    hypertroq login EMAIL [--password PASSWORD]
    hypertroq logout
    hypertroq whoami
    hypertroq programs list [--search TEXT] [--templates]
    hypertroq programs show PROGRAM_ID
    hypertroq exercises list [--muscle-group GROUP]

Credentials persist in the file named by TOKEN_STORE_PATH between runs.
"""

import argparse
import asyncio
import getpass
import logging
import sys
from dataclasses import dataclass
from typing import List, Optional

from application.exceptions import user_message
from application.queries import ExerciseQueries, ProgramQueries
from application.query_cache import QueryCache
from application.session_context import SessionContext
from application.use_cases.authenticate import AuthService
from application.use_cases.edit_program import REQUEST_ERRORS, ProgramEditor
from backend.settings import Settings, get_settings
from domain.models.exercise import ExerciseFilters, MuscleGroup
from domain.models.program import ProgramFilters
from infrastructure.api import AccountsClient, ApiClient, ExercisesClient, ProgramsClient
from infrastructure.notifier import LoggingNotifier
from infrastructure.token_store import FileTokenStore

logger = logging.getLogger(__name__)


@dataclass
class ClientContext:
    """Everything a command needs, wired from settings."""

    session: SessionContext
    auth: AuthService
    programs: ProgramQueries
    exercises: ExerciseQueries


def build_context(settings: Settings, transport=None) -> ClientContext:
    session = SessionContext(FileTokenStore(settings.token_store_path)).start()
    session.on_unauthorized(
        lambda: print("Session expired. Run `hypertroq login` again.", file=sys.stderr)
    )
    api = ApiClient(
        settings.api_base_url,
        session=session,
        timeout=settings.request_timeout_seconds,
        transport=transport,
    )
    notifier = LoggingNotifier()
    cache = QueryCache(stale_seconds=settings.query_stale_seconds)
    return ClientContext(
        session=session,
        auth=AuthService(AccountsClient(api), session, notifier),
        programs=ProgramQueries(ProgramsClient(api), cache, notifier),
        exercises=ExerciseQueries(ExercisesClient(api), cache, notifier),
    )


# =============================================================================
# Commands
# =============================================================================


async def cmd_login(ctx: ClientContext, args: argparse.Namespace) -> int:
    password = args.password or getpass.getpass("Password: ")
    user = await ctx.auth.login(args.email, password)
    print(f"Logged in as {user.full_name} <{user.email}>")
    if user.deletion_pending:
        print("Your account is scheduled for deletion.")
    return 0


async def cmd_logout(ctx: ClientContext, args: argparse.Namespace) -> int:
    ctx.auth.logout()
    print("Logged out")
    return 0


async def cmd_whoami(ctx: ClientContext, args: argparse.Namespace) -> int:
    if not ctx.session.is_authenticated:
        print("Not logged in", file=sys.stderr)
        return 1
    user = await ctx.auth.load_profile()
    print(f"{user.full_name} <{user.email}>")
    if user.organization_name:
        print(f"Organization: {user.organization_name}")
    print(f"Role: {user.role.value}")
    return 0


async def cmd_programs_list(ctx: ClientContext, args: argparse.Namespace) -> int:
    filters = ProgramFilters(
        search=args.search,
        is_template=True if args.templates else None,
    )
    programs = await ctx.programs.list_programs(filters)
    if not programs:
        print("No programs found")
        return 0
    for program in programs:
        template = " [template]" if program.is_template else ""
        print(
            f"{program.id}  {program.name}{template}  "
            f"{program.split_type.label}, {program.session_count} sessions"
        )
    return 0


async def cmd_programs_show(ctx: ClientContext, args: argparse.Namespace) -> int:
    editor = ProgramEditor(
        args.program_id,
        programs=ctx.programs,
        notifier=LoggingNotifier(),
        exercise_lookup=ctx.exercises.cached_exercise,
    )
    # Warm the catalog so session entries show exercise names.
    await ctx.exercises.list_exercises()
    program = await editor.load()
    print(f"{program.name} ({program.split_type.label}, {program.structure_type.value.lower()})")
    if program.description:
        print(program.description)
    for session in editor.sessions:
        print()
        print(f"Day {session.day_number}: {session.name}")
        for ex in editor.exercises_for(session.id):
            notes = f"  ({ex.notes})" if ex.notes else ""
            print(f"  {ex.order_in_session}. {ex.exercise_name}: {ex.sets} sets{notes}")
    return 0


async def cmd_exercises_list(ctx: ClientContext, args: argparse.Namespace) -> int:
    filters = ExerciseFilters(muscle_group=args.muscle_group)
    exercises = await ctx.exercises.list_exercises(filters)
    if not exercises:
        print("No exercises found")
        return 0
    for exercise in exercises:
        primary = exercise.primary_muscle.value if exercise.primary_muscle else "-"
        print(f"{exercise.id}  {exercise.name}  {exercise.equipment.value}  {primary}")
    return 0


# =============================================================================
# Entry point
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hypertroq", description="HypertroQ training client")
    commands = parser.add_subparsers(dest="command", required=True)

    login = commands.add_parser("login", help="Sign in and store credentials")
    login.add_argument("email")
    login.add_argument("--password", help="Password (prompted when omitted)")
    login.set_defaults(handler=cmd_login)

    commands.add_parser("logout", help="Forget stored credentials").set_defaults(
        handler=cmd_logout
    )
    commands.add_parser("whoami", help="Show the signed-in user").set_defaults(
        handler=cmd_whoami
    )

    programs = commands.add_parser("programs", help="Training programs")
    program_commands = programs.add_subparsers(dest="programs_command", required=True)
    program_list = program_commands.add_parser("list", help="List programs")
    program_list.add_argument("--search")
    program_list.add_argument("--templates", action="store_true", help="Only templates")
    program_list.set_defaults(handler=cmd_programs_list)
    program_show = program_commands.add_parser("show", help="Show a program's sessions")
    program_show.add_argument("program_id")
    program_show.set_defaults(handler=cmd_programs_show)

    exercises = commands.add_parser("exercises", help="Exercise library")
    exercise_commands = exercises.add_subparsers(dest="exercises_command", required=True)
    exercise_list = exercise_commands.add_parser("list", help="List exercises")
    exercise_list.add_argument(
        "--muscle-group",
        type=MuscleGroup,
        choices=list(MuscleGroup),
        metavar="GROUP",
    )
    exercise_list.set_defaults(handler=cmd_exercises_list)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    ctx = build_context(settings)
    try:
        return asyncio.run(args.handler(ctx, args))
    except REQUEST_ERRORS as e:
        print(f"Error: {user_message(e)}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
