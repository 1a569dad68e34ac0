"""
Query cache with in-flight de-duplication and declared invalidation rules.

Part of HQ-27: Query cache for resource reads

Reads are cached per query key. A key is a tuple that starts with the
resource name, so a prefix addresses a whole family of queries:

    ("programs",)                      everything about programs
    ("programs", "list")               every program list
    ("programs", "list", <filters>)    one filtered list
    ("programs", "detail", "p-1")      one program

Concurrent fetches of the same key share a single load. Mutations do not
touch the cache directly; each declares the key prefixes it invalidates in
INVALIDATION_RULES.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Hashable,
    List,
    Mapping,
    Optional,
    Tuple,
    TypeVar,
)

from pydantic import BaseModel

logger = logging.getLogger(__name__)

T = TypeVar("T")
QueryKey = Tuple[Hashable, ...]


def freeze(value: Any) -> Hashable:
    """Turn filters (dicts, lists, models, enums) into a hashable key part."""
    if isinstance(value, BaseModel):
        return freeze(value.model_dump(exclude_none=True))
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Mapping):
        return tuple(sorted((str(k), freeze(v)) for k, v in value.items()))
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(freeze(v) for v in value)
    return value


class _ResourceKeys:
    """Key factory for one resource."""

    def __init__(self, resource: str):
        self.all: QueryKey = (resource,)

    def lists(self) -> QueryKey:
        return self.all + ("list",)

    def list(self, filters: Any = None) -> QueryKey:
        return self.lists() + (freeze(filters or {}),)

    def details(self) -> QueryKey:
        return self.all + ("detail",)

    def detail(self, resource_id: str) -> QueryKey:
        return self.details() + (resource_id,)

    def stats(self, resource_id: str) -> QueryKey:
        return self.all + ("stats", resource_id)


program_keys = _ResourceKeys("programs")
exercise_keys = _ResourceKeys("exercises")


InvalidationRule = Callable[[Mapping[str, Any]], List[QueryKey]]


def _program_sessions_changed(v: Mapping[str, Any]) -> List[QueryKey]:
    return [program_keys.detail(v["program_id"]), program_keys.stats(v["program_id"])]


def _program_session_count_changed(v: Mapping[str, Any]) -> List[QueryKey]:
    return _program_sessions_changed(v) + [program_keys.lists()]


# Which cached queries each mutation makes stale.
INVALIDATION_RULES: Dict[str, InvalidationRule] = {
    "create_program": lambda v: [program_keys.lists()],
    "update_program": lambda v: [
        program_keys.lists(),
        program_keys.detail(v["program_id"]),
    ],
    "delete_program": lambda v: [
        program_keys.lists(),
        program_keys.detail(v["program_id"]),
        program_keys.stats(v["program_id"]),
    ],
    "clone_program": lambda v: [program_keys.lists()],
    "create_session": _program_session_count_changed,
    "update_session": _program_sessions_changed,
    "delete_session": _program_session_count_changed,
    "create_exercise": lambda v: [exercise_keys.lists()],
    "update_exercise": lambda v: [
        exercise_keys.lists(),
        exercise_keys.detail(v["exercise_id"]),
    ],
    "delete_exercise": lambda v: [
        exercise_keys.lists(),
        exercise_keys.detail(v["exercise_id"]),
    ],
}


@dataclass
class CacheEntry:
    """Cache entry with age tracking."""

    value: Any
    created_at: float


class QueryCache:
    """
    In-memory cache for resource reads.

    Entries younger than `stale_seconds` are served without a request.
    Older entries stay readable through peek() but the next fetch() reloads.
    """

    DEFAULT_STALE_SECONDS = 30.0

    def __init__(
        self,
        stale_seconds: float = DEFAULT_STALE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._stale_seconds = stale_seconds
        self._clock = clock
        self._entries: Dict[QueryKey, CacheEntry] = {}
        self._in_flight: Dict[QueryKey, "asyncio.Future[Any]"] = {}

    async def fetch(
        self,
        key: QueryKey,
        loader: Callable[[], Awaitable[T]],
        *,
        force: bool = False,
    ) -> T:
        """
        Return the cached value for `key`, loading it if missing or stale.

        A fetch for a key that is already loading waits for that load
        instead of starting another. Failed loads are not cached; the error
        reaches every caller waiting on the load.
        """
        if not force:
            entry = self._entries.get(key)
            if entry is not None and self._is_fresh(entry):
                return entry.value
            pending = self._in_flight.get(key)
            if pending is not None:
                logger.debug(f"Joining in-flight load for {key}")
                return await asyncio.shield(pending)

        future: "asyncio.Future[Any]" = asyncio.get_running_loop().create_future()
        self._in_flight[key] = future
        try:
            value = await loader()
        except asyncio.CancelledError:
            self._detach(key, future)
            future.cancel()
            raise
        except Exception as e:
            self._detach(key, future)
            future.set_exception(e)
            # Mark retrieved so an unwaited failure is not logged by asyncio.
            future.exception()
            raise

        # An invalidation during the load detaches it; its result is stale.
        if self._detach(key, future):
            self._entries[key] = CacheEntry(value=value, created_at=self._clock())
        future.set_result(value)
        return value

    def peek(self, key: QueryKey) -> Optional[Any]:
        """Cached value regardless of age, or None."""
        entry = self._entries.get(key)
        return entry.value if entry is not None else None

    def set(self, key: QueryKey, value: Any) -> None:
        self._entries[key] = CacheEntry(value=value, created_at=self._clock())

    def invalidate(self, prefix: QueryKey) -> int:
        """
        Drop every entry whose key starts with `prefix`.

        Loads in flight for matching keys are detached so their results are
        not stored. Returns the number of cached entries removed.
        """
        stale = self.keys_under(prefix)
        for key in stale:
            del self._entries[key]
        for key in [k for k in self._in_flight if k[: len(prefix)] == prefix]:
            del self._in_flight[key]
        if stale:
            logger.debug(f"Invalidated {len(stale)} entries under {prefix}")
        return len(stale)

    def apply_mutation(self, mutation: str, variables: Mapping[str, Any]) -> None:
        """Invalidate what INVALIDATION_RULES declares for `mutation`."""
        rule = INVALIDATION_RULES.get(mutation)
        if rule is None:
            raise KeyError(f"No invalidation rule declared for mutation '{mutation}'")
        for prefix in rule(variables):
            self.invalidate(prefix)

    def keys_under(self, prefix: QueryKey) -> List[QueryKey]:
        """Cached keys starting with `prefix`."""
        return [k for k in self._entries if k[: len(prefix)] == prefix]

    def clear(self) -> None:
        self._entries.clear()
        self._in_flight.clear()

    def __contains__(self, key: QueryKey) -> bool:
        return key in self._entries

    def _is_fresh(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.created_at <= self._stale_seconds

    def _detach(self, key: QueryKey, future: "asyncio.Future[Any]") -> bool:
        if self._in_flight.get(key) is future:
            del self._in_flight[key]
            return True
        return False
