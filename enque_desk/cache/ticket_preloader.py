"""
Background preloading of ticket conversations.

Agents usually open the newest tickets first, so their conversation HTML is
fetched ahead of time into the shared ``QueryCache``. The queue is best
effort: failures are counted and logged, never retried on their own.
"""

import threading
import time
from collections import OrderedDict
from collections.abc import Callable, Iterable, Mapping
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Any

import structlog

from enque_desk.cache.query_cache import QueryCache, QueryKey

logger = structlog.get_logger(__name__)

TicketFetcher = Callable[[int], Any]


@dataclass(slots=True, frozen=True)
class PreloadOptions:
    max_concurrent: int = 3
    delay_between: float = 0.5
    priority_threshold: int = 10
    enabled: bool = True


@dataclass(slots=True)
class PreloadStats:
    preloaded: int = 0
    failed: int = 0
    in_progress: int = 0
    queue_size: int = 0
    last_preload_time: datetime | None = None


def ticket_html_key(workspace_id: int, ticket_id: int) -> QueryKey:
    return ("ticketHtml", workspace_id, ticket_id)


def _created_at(ticket: Mapping[str, Any]) -> datetime:
    raw = ticket.get("created_at")
    if isinstance(raw, datetime):
        parsed = raw
    elif isinstance(raw, str) and raw:
        try:
            parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            return datetime.min.replace(tzinfo=UTC)
    else:
        return datetime.min.replace(tzinfo=UTC)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


class TicketPreloader:
    def __init__(
        self,
        cache: QueryCache,
        workspace_id: int,
        fetcher: TicketFetcher,
        *,
        options: PreloadOptions | None = None,
        stale_time: float = 300.0,
        gc_time: float = 900.0,
        autostart: bool = True,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.cache = cache
        self.workspace_id = workspace_id
        self.options = options or PreloadOptions()
        self.stale_time = stale_time
        self.gc_time = gc_time
        self.autostart = autostart
        self._fetcher = fetcher
        self._clock = clock
        self._sleep = sleep

        self._queue: OrderedDict[int, None] = OrderedDict()
        self._preloading: set[int] = set()
        self._stats = PreloadStats()
        self._last_activity: float | None = None
        self._started_at = clock()
        self._dispatching = False
        self._condition = threading.Condition()
        self._executor: ThreadPoolExecutor | None = None

    def bind(self, fetcher: TicketFetcher) -> None:
        """Swap the fetch function, e.g. when the agent's access token was refreshed."""
        with self._condition:
            self._fetcher = fetcher

    def key(self, ticket_id: int) -> QueryKey:
        return ticket_html_key(self.workspace_id, ticket_id)

    @property
    def queue_size(self) -> int:
        with self._condition:
            return len(self._queue)

    def stats(self) -> PreloadStats:
        with self._condition:
            return replace(self._stats, queue_size=len(self._queue))

    def status(self, ticket_id: int) -> dict[str, bool]:
        with self._condition:
            return {
                "cached": self.cache.has(self.key(ticket_id)),
                "preloading": ticket_id in self._preloading,
                "queued": ticket_id in self._queue,
            }

    def preload(self, ticket_ids: Iterable[int], priority: bool = False) -> int:
        """
        Queue tickets for preloading and return how many were newly queued.

        Tickets that are fresh in the cache, already loading or already queued
        are skipped. Priority tickets jump ahead of the current queue in the
        order given.
        """
        if not self.options.enabled:
            return 0

        with self._condition:
            new_ids = [
                ticket_id
                for ticket_id in dict.fromkeys(ticket_ids)
                if not self.cache.is_fresh(self.key(ticket_id))
                and ticket_id not in self._preloading
                and ticket_id not in self._queue
            ]
            if not new_ids:
                return 0

            if priority:
                waiting = list(self._queue)
                self._queue.clear()
                for ticket_id in [*new_ids, *waiting]:
                    self._queue[ticket_id] = None
            else:
                for ticket_id in new_ids:
                    self._queue[ticket_id] = None

            start_dispatcher = self.autostart and not self._dispatching
            if start_dispatcher:
                self._dispatching = True

        if start_dispatcher:
            threading.Thread(
                target=self.run_pending,
                name=f"ticket-preloader-{self.workspace_id}",
                daemon=True,
            ).start()
        return len(new_ids)

    def preload_one(self, ticket_id: int) -> int:
        return self.preload([ticket_id], priority=True)

    def preload_recent(self, tickets: Iterable[Mapping[str, Any]]) -> int:
        """Queue the newest tickets with priority and everything else behind them."""
        ordered = sorted(tickets, key=_created_at, reverse=True)
        ticket_ids = [int(ticket["id"]) for ticket in ordered if ticket.get("id") is not None]
        threshold = self.options.priority_threshold
        queued = self.preload(ticket_ids[:threshold], priority=True)
        queued += self.preload(ticket_ids[threshold:])
        return queued

    def invalidate(self, ticket_id: int) -> bool:
        """Mark a cached conversation stale and queue a priority refresh."""
        key = self.key(ticket_id)
        if not self.cache.has(key):
            return False
        self.cache.invalidate(key)
        self.preload_one(ticket_id)
        return True

    def run_pending(self) -> PreloadStats:
        """Process the queue until it is empty and every started preload has finished."""
        futures: list[Future[bool]] = []
        while True:
            with self._condition:
                while len(self._preloading) >= self.options.max_concurrent:
                    self._condition.wait()
                if not self._queue:
                    self._dispatching = False
                    break
                remaining = self._delay_remaining()
                ticket_id = None
                if remaining <= 0:
                    ticket_id = self._pop_next()
                    if ticket_id is not None:
                        self._preloading.add(ticket_id)
                        self._stats.in_progress += 1
                        self._last_activity = self._clock()

            if remaining > 0:
                self._sleep(remaining)
                continue
            if ticket_id is not None:
                futures.append(self._get_executor().submit(self._preload, ticket_id))

        wait(futures)
        self._release_idle_executor()
        return self.stats()

    def idle_for(self) -> float | None:
        """Seconds since the last preload finished, or ``None`` while work is queued or running."""
        with self._condition:
            if self._dispatching or self._queue or self._preloading:
                return None
            since = self._last_activity if self._last_activity is not None else self._started_at
            return self._clock() - since

    def shutdown(self) -> None:
        with self._condition:
            self._queue.clear()
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=False, cancel_futures=True)

    def _delay_remaining(self) -> float:
        if self._last_activity is None:
            return 0.0
        elapsed = self._clock() - self._last_activity
        return self.options.delay_between - elapsed

    def _pop_next(self) -> int | None:
        while self._queue:
            ticket_id, _ = self._queue.popitem(last=False)
            if not self.cache.is_fresh(self.key(ticket_id)):
                return ticket_id
        return None

    def _release_idle_executor(self) -> None:
        with self._condition:
            if self._dispatching or self._queue or self._preloading:
                return
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=False)

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._condition:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.options.max_concurrent,
                    thread_name_prefix=f"preload-{self.workspace_id}",
                )
            return self._executor

    def _preload(self, ticket_id: int) -> bool:
        fetcher = self._fetcher
        try:
            self.cache.fetch(
                self.key(ticket_id),
                lambda: fetcher(ticket_id),
                stale_time=self.stale_time,
                gc_time=self.gc_time,
            )
        except Exception as exc:
            logger.warning(
                "Ticket preload failed",
                workspace_id=self.workspace_id,
                ticket_id=ticket_id,
                error=str(exc),
            )
            with self._condition:
                self._stats.failed += 1
            return False
        else:
            with self._condition:
                self._stats.preloaded += 1
                self._stats.last_preload_time = datetime.now(UTC)
            return True
        finally:
            with self._condition:
                self._preloading.discard(ticket_id)
                self._stats.in_progress -= 1
                self._last_activity = self._clock()
                self._condition.notify_all()


class PreloaderRegistry:
    """
    One preloader per (workspace, agent), sharing a single cache.

    Preloaders that have been idle for ``idle_timeout`` seconds are shut down
    and dropped the next time another agent asks for one.
    """

    def __init__(
        self,
        cache: QueryCache,
        *,
        options: PreloadOptions | None = None,
        stale_time: float = 300.0,
        gc_time: float = 900.0,
        autostart: bool = True,
        idle_timeout: float = 1800.0,
    ) -> None:
        self.cache = cache
        self.options = options or PreloadOptions()
        self.stale_time = stale_time
        self.gc_time = gc_time
        self.autostart = autostart
        self.idle_timeout = idle_timeout
        self._preloaders: dict[tuple[int, int | str], TicketPreloader] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._preloaders)

    def get(self, workspace_id: int, agent_id: int | str, fetcher: TicketFetcher) -> TicketPreloader:
        key = (workspace_id, agent_id)
        with self._lock:
            evicted = self._evict_idle(keep=key)
            preloader = self._preloaders.get(key)
            if preloader is None:
                preloader = TicketPreloader(
                    self.cache,
                    workspace_id,
                    fetcher,
                    options=self.options,
                    stale_time=self.stale_time,
                    gc_time=self.gc_time,
                    autostart=self.autostart,
                )
                self._preloaders[key] = preloader
                logger.info(
                    "Ticket preloader created",
                    workspace_id=workspace_id,
                    agent_id=agent_id,
                    max_concurrent=self.options.max_concurrent,
                )
            else:
                preloader.bind(fetcher)

        for idle in evicted:
            idle.shutdown()
        return preloader

    def shutdown(self) -> None:
        with self._lock:
            preloaders = list(self._preloaders.values())
            self._preloaders.clear()
        for preloader in preloaders:
            preloader.shutdown()

    def _evict_idle(self, keep: tuple[int, int | str]) -> list[TicketPreloader]:
        idle_keys = []
        for key, preloader in self._preloaders.items():
            idle = preloader.idle_for()
            if key != keep and idle is not None and idle >= self.idle_timeout:
                idle_keys.append(key)
        if idle_keys:
            logger.debug("Idle ticket preloaders dropped", count=len(idle_keys))
        return [self._preloaders.pop(key) for key in idle_keys]
