"""
Client-side cache for server resources.

Results are stored per QueryKey (resource, scope, filter params). Keys with
different filters coexist, so going back to an earlier filter is instant.
Concurrent reads of the same key share one fetch. Successful mutations
invalidate the keys whose data they could have changed; failed ones leave
the cache untouched.

Streamlit reruns the page script on every interaction, so an entry is not
refetched on each read. It is refetched only when:
  - it was invalidated by a mutation,
  - the user navigated to another page (``refocus``) and the policy allows it,
  - its ``stale_time`` or ``refetch_interval`` has elapsed,
  - the previous fetch failed.

There is no callback registry: each rerun reads its keys again, so the
page being drawn is the only consumer that needs to see new data.
"""

import logging
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Optional

from pydantic import ValidationError

from core.api_client import ApiError

logger = logging.getLogger(__name__)

GENERIC_MUTATION_MESSAGE = "The request failed. Please try again."
UNEXPECTED_RESPONSE_MESSAGE = "The server returned an unexpected response."


def _normalize(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(sorted(_normalize(v) for v in value))
    return value


def _call_fetcher(key, fetcher):
    """Run a read or write; a payload that fails model validation becomes an ApiError."""
    try:
        return fetcher()
    except ValidationError as e:
        logger.warning("fetch %s returned a malformed payload: %s", key, e)
        raise ApiError(UNEXPECTED_RESPONSE_MESSAGE, payload=e.errors()) from e


@dataclass(frozen=True)
class QueryKey:
    resource: str
    scope: tuple = ()
    params: tuple = ()

    @classmethod
    def build(cls, resource: str, *scope, **params) -> "QueryKey":
        """Empty filter values are dropped so "no filter" has a single key."""
        cleaned = tuple(sorted(
            (name, _normalize(value))
            for name, value in params.items()
            if value not in (None, "")
        ))
        return cls(resource, tuple(scope), cleaned)

    def matches(self, other: "QueryKey") -> bool:
        """Prefix match, used by invalidation.

        ``QueryKey.build("appointments")`` matches every appointments key;
        a pattern with params only matches those exact params.
        """
        if self.resource != other.resource:
            return False
        if other.scope[: len(self.scope)] != self.scope:
            return False
        if self.params and self.params != other.params:
            return False
        return True


@dataclass(frozen=True)
class QueryPolicy:
    # None: fresh until invalidated or refocused
    stale_time: Optional[float] = None
    refetch_on_focus: bool = True
    # Polling boards; pages rerun on this interval
    refetch_interval: Optional[float] = None


DEFAULT_POLICY = QueryPolicy()
REFERENCE_POLICY = QueryPolicy(stale_time=10 * 60, refetch_on_focus=False)
TASK_BOARD_POLICY = QueryPolicy(refetch_interval=30)
SCHEDULE_BOARD_POLICY = QueryPolicy(refetch_interval=60)
STATS_POLICY = QueryPolicy(refetch_interval=5 * 60)


@dataclass
class CacheEntry:
    key: QueryKey
    policy: QueryPolicy = DEFAULT_POLICY
    data: Any = None
    error: Optional[ApiError] = None
    updated_at: Optional[float] = None
    invalidated: bool = False


@dataclass
class QueryResult:
    data: Any = None
    error: Optional[ApiError] = None
    from_cache: bool = False
    enabled: bool = True

    @property
    def ok(self) -> bool:
        return self.enabled and self.error is None

    @property
    def error_message(self) -> Optional[str]:
        return self.error.message if self.error else None


@dataclass
class MutationResult:
    ok: bool
    data: Any = None
    error: Optional[str] = None
    invalidated: list = field(default_factory=list)


class QueryCache:
    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self._entries: dict[QueryKey, CacheEntry] = {}
        self._inflight: dict[QueryKey, Future] = {}
        # keys invalidated while their fetch was in flight
        self._invalidated_inflight: set[QueryKey] = set()
        self._pending_mutations: set[str] = set()
        self._lock = threading.RLock()

    # -----------------------------
    # Reads
    # -----------------------------
    def entry(self, key: QueryKey) -> Optional[CacheEntry]:
        with self._lock:
            return self._entries.get(key)

    def peek(self, key: QueryKey):
        entry = self.entry(key)
        return entry.data if entry else None

    def keys(self) -> list[QueryKey]:
        with self._lock:
            return list(self._entries)

    def is_stale(self, entry: CacheEntry) -> bool:
        if entry.invalidated or entry.error is not None or entry.updated_at is None:
            return True
        age = self.clock() - entry.updated_at
        policy = entry.policy
        if policy.stale_time is not None and age >= policy.stale_time:
            return True
        if policy.refetch_interval is not None and age >= policy.refetch_interval:
            return True
        return False

    def fetch(self, key: QueryKey, fetcher: Callable[[], Any], policy: QueryPolicy = DEFAULT_POLICY,
              enabled: bool = True) -> QueryResult:
        """Return cached data for ``key`` or run ``fetcher`` and store its result.

        ``enabled=False`` never calls the server; it is how dependent queries
        wait for their parent to load.
        """
        if not enabled:
            return QueryResult(data=self.peek(key), enabled=False)

        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                entry.policy = policy
                if not self.is_stale(entry):
                    logger.debug("cache hit %s", key)
                    return QueryResult(data=entry.data, from_cache=True)

            future = self._inflight.get(key)
            owner = future is None
            if owner:
                future = Future()
                self._inflight[key] = future

        if not owner:
            logger.debug("joining in-flight fetch %s", key)
            return future.result()

        try:
            result = self._run_fetch(key, fetcher, policy)
        except BaseException as e:
            with self._lock:
                self._inflight.pop(key, None)
                self._invalidated_inflight.discard(key)
            future.set_exception(e)
            raise

        with self._lock:
            self._inflight.pop(key, None)
        future.set_result(result)
        return result

    def _run_fetch(self, key, fetcher, policy) -> QueryResult:
        logger.debug("fetching %s", key)
        try:
            data = _call_fetcher(key, fetcher)
        except ApiError as e:
            logger.info("fetch %s failed: %s", key, e.message)
            with self._lock:
                entry = self._entries.setdefault(key, CacheEntry(key=key, policy=policy))
                entry.error = e
                self._invalidated_inflight.discard(key)
            return QueryResult(data=entry.data, error=e)

        with self._lock:
            entry = self._entries.setdefault(key, CacheEntry(key=key, policy=policy))
            entry.policy = policy
            entry.data = data
            entry.error = None
            entry.updated_at = self.clock()
            # A late response for an invalidated key is kept, but stays stale
            entry.invalidated = key in self._invalidated_inflight
            self._invalidated_inflight.discard(key)
        return QueryResult(data=data)

    # -----------------------------
    # Invalidation
    # -----------------------------
    def invalidate(self, *patterns: QueryKey) -> list[QueryKey]:
        hit = []
        with self._lock:
            for pattern in patterns:
                for key, entry in self._entries.items():
                    if pattern.matches(key) and key not in hit:
                        entry.invalidated = True
                        hit.append(key)
                for key in self._inflight:
                    if pattern.matches(key):
                        self._invalidated_inflight.add(key)
        for key in hit:
            logger.debug("invalidated %s", key)
        return hit

    def refocus(self) -> list[QueryKey]:
        """Mark refocus-eligible entries stale (called on page navigation)."""
        hit = []
        with self._lock:
            for key, entry in self._entries.items():
                if entry.policy.refetch_on_focus:
                    entry.invalidated = True
                    hit.append(key)
        return hit

    def clear(self):
        with self._lock:
            self._entries.clear()
            self._invalidated_inflight.clear()

    # -----------------------------
    # Mutations
    # -----------------------------
    def is_mutating(self, name: str) -> bool:
        with self._lock:
            return name in self._pending_mutations

    def mutate(self, name: str, fn: Callable[[], Any], invalidate=(),
               fallback_message: str = GENERIC_MUTATION_MESSAGE) -> MutationResult:
        """Run a write and invalidate dependent keys on success.

        ``invalidate`` is a sequence of key patterns, or a callable taking the
        server response and returning one (for keys that depend on the
        created record). On failure nothing is invalidated and the error is
        the server's message verbatim, else ``fallback_message``.
        """
        with self._lock:
            if name in self._pending_mutations:
                return MutationResult(ok=False, error="This action is already in progress.")
            self._pending_mutations.add(name)

        try:
            try:
                data = _call_fetcher(name, fn)
            except ApiError as e:
                logger.warning("mutation %s failed: %s", name, e.message)
                return MutationResult(ok=False, error=e.server_message or fallback_message)

            patterns = invalidate(data) if callable(invalidate) else invalidate
            hit = self.invalidate(*patterns)
            logger.info("mutation %s succeeded; invalidated %d key(s)", name, len(hit))
            return MutationResult(ok=True, data=data, invalidated=hit)
        finally:
            with self._lock:
                self._pending_mutations.discard(name)
