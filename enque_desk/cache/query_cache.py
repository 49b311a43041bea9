"""
In-process query cache in front of the Enque REST API.

Keys are tuples such as ``("ticketHtml", workspace_id, ticket_id)``; operations
that take a prefix act on every key starting with it. An entry is *fresh*
until ``stale_time`` seconds after its last update and is dropped by
``collect_garbage`` once ``gc_time`` seconds have passed.
"""

import threading
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

QueryKey = tuple[Any, ...]

DEFAULT_STALE_TIME = 0.0
DEFAULT_GC_TIME = 300.0


@dataclass(slots=True)
class CacheEntry:
    value: Any
    updated_at: float
    stale_time: float
    gc_time: float
    invalidated: bool = False

    def is_fresh(self, now: float) -> bool:
        return not self.invalidated and now - self.updated_at < self.stale_time

    def is_expired(self, now: float) -> bool:
        return now - self.updated_at >= self.gc_time


@dataclass(slots=True)
class _InFlight:
    done: threading.Event = field(default_factory=threading.Event)
    value: Any = None
    error: BaseException | None = None
    invalidated: bool = False


def _matches(key: QueryKey, prefix: QueryKey) -> bool:
    return key[: len(prefix)] == prefix


class QueryCache:
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[QueryKey, CacheEntry] = {}
        self._in_flight: dict[QueryKey, _InFlight] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def keys(self, prefix: QueryKey = ()) -> list[QueryKey]:
        with self._lock:
            return [key for key in self._entries if _matches(key, prefix)]

    def get(self, key: QueryKey) -> Any:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._entries[key]
                return None
            return entry.value

    def has(self, key: QueryKey) -> bool:
        return self.get(key) is not None

    def is_fresh(self, key: QueryKey) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and entry.is_fresh(self._clock())

    def set(
        self,
        key: QueryKey,
        value: Any,
        *,
        stale_time: float = DEFAULT_STALE_TIME,
        gc_time: float = DEFAULT_GC_TIME,
    ) -> Any:
        """Store ``value``; a callable is applied to the current value (or ``None``)."""
        with self._lock:
            if callable(value):
                current = self._entries.get(key)
                value = value(current.value if current is not None else None)
            self._entries[key] = CacheEntry(
                value=value,
                updated_at=self._clock(),
                stale_time=stale_time,
                gc_time=max(gc_time, stale_time),
            )
            return value

    def fetch(
        self,
        key: QueryKey,
        fetcher: Callable[[], Any],
        *,
        stale_time: float = DEFAULT_STALE_TIME,
        gc_time: float = DEFAULT_GC_TIME,
    ) -> Any:
        """
        Return the cached value for ``key`` while it is fresh, otherwise call ``fetcher``.

        Concurrent callers for the same key wait for a single fetch. A failed
        fetch re-raises in every waiting caller and keeps the previous entry.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.is_fresh(self._clock()):
                return entry.value
            pending = self._in_flight.get(key)
            owner = pending is None
            if owner:
                pending = _InFlight()
                self._in_flight[key] = pending

        if not owner:
            pending.done.wait()
            if pending.error is not None:
                raise pending.error
            return pending.value

        try:
            value = fetcher()
        except BaseException as exc:
            pending.error = exc
            raise
        else:
            pending.value = value
            self.collect_garbage()
            with self._lock:
                self.set(key, value, stale_time=stale_time, gc_time=gc_time)
                if pending.invalidated:
                    self._entries[key].invalidated = True
            return value
        finally:
            with self._lock:
                self._in_flight.pop(key, None)
            pending.done.set()

    def invalidate(self, prefix: QueryKey) -> int:
        """
        Mark every entry under ``prefix`` stale so the next fetch goes upstream.

        Fetches in flight under ``prefix`` started before the change, so their
        results are stored already stale.
        """
        with self._lock:
            count = 0
            for key in self.keys(prefix):
                self._entries[key].invalidated = True
                count += 1
            for key, pending in self._in_flight.items():
                if _matches(key, prefix):
                    pending.invalidated = True
        if count:
            logger.debug("Cache invalidated", prefix=prefix, entries=count)
        return count

    def remove(self, prefix: QueryKey) -> int:
        with self._lock:
            doomed = self.keys(prefix)
            for key in doomed:
                del self._entries[key]
            return len(doomed)

    def collect_garbage(self) -> int:
        with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired:
                del self._entries[key]
            return len(expired)

    @contextmanager
    def optimistic_update(
        self,
        prefix: QueryKey,
        updater: Callable[[Any], Any],
    ) -> Iterator[list[QueryKey]]:
        """
        Apply ``updater`` to every cached value under ``prefix`` for the duration of the block.

        The previous values are restored if the block raises; the exception is re-raised.
        Yields the keys that were touched.
        """
        with self._lock:
            snapshot = {
                key: (entry.value, entry.updated_at, entry.invalidated)
                for key, entry in self._entries.items()
                if _matches(key, prefix)
            }
            for key in snapshot:
                self._entries[key].value = updater(self._entries[key].value)

        try:
            yield list(snapshot)
        except BaseException:
            with self._lock:
                for key, (value, updated_at, invalidated) in snapshot.items():
                    entry = self._entries.get(key)
                    if entry is None:
                        continue
                    entry.value = value
                    entry.updated_at = updated_at
                    entry.invalidated = invalidated
            logger.info("Optimistic update rolled back", prefix=prefix, entries=len(snapshot))
            raise
