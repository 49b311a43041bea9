import threading
import time
from typing import Any

from enque_desk.cache.query_cache import QueryCache
from enque_desk.cache.ticket_preloader import (
    PreloaderRegistry,
    PreloadOptions,
    TicketPreloader,
    ticket_html_key,
)

WORKSPACE_ID = 3


class _RecordingFetcher:
    def __init__(self, failing: set[int] | None = None) -> None:
        self.calls: list[int] = []
        self.failing = failing or set()

    def __call__(self, ticket_id: int) -> dict[str, Any]:
        self.calls.append(ticket_id)
        if ticket_id in self.failing:
            raise RuntimeError(f"ticket {ticket_id} unavailable")
        return {"contents": [{"id": ticket_id, "content": "<p>hi</p>"}]}


def _preloader(
    fetcher: _RecordingFetcher,
    cache: QueryCache | None = None,
    **options: Any,
) -> TicketPreloader:
    return TicketPreloader(
        cache if cache is not None else QueryCache(),
        WORKSPACE_ID,
        fetcher,
        options=PreloadOptions(**{"delay_between": 0.0, "max_concurrent": 1, **options}),
        autostart=False,
    )


def test_preload_fetches_into_shared_cache() -> None:
    cache = QueryCache()
    fetcher = _RecordingFetcher()
    preloader = _preloader(fetcher, cache)

    assert preloader.preload([10, 11]) == 2
    stats = preloader.run_pending()

    assert fetcher.calls == [10, 11]
    assert stats.preloaded == 2
    assert stats.failed == 0
    assert stats.in_progress == 0
    assert stats.queue_size == 0
    assert stats.last_preload_time is not None
    assert cache.get(ticket_html_key(WORKSPACE_ID, 10)) == {
        "contents": [{"id": 10, "content": "<p>hi</p>"}]
    }


def test_preload_skips_fresh_and_queued_tickets() -> None:
    cache = QueryCache()
    cache.set(ticket_html_key(WORKSPACE_ID, 1), {"contents": []}, stale_time=300)
    preloader = _preloader(_RecordingFetcher(), cache)

    assert preloader.preload([1, 2, 2, 3]) == 2
    assert preloader.preload([2, 3]) == 0
    assert preloader.queue_size == 2


def test_priority_tickets_jump_the_queue() -> None:
    fetcher = _RecordingFetcher()
    preloader = _preloader(fetcher)

    preloader.preload([1, 2])
    preloader.preload([3, 4], priority=True)
    preloader.run_pending()

    assert fetcher.calls == [3, 4, 1, 2]


def test_failures_are_counted_and_do_not_stop_the_queue() -> None:
    fetcher = _RecordingFetcher(failing={2})
    preloader = _preloader(fetcher)

    preloader.preload([1, 2, 3])
    stats = preloader.run_pending()

    assert fetcher.calls == [1, 2, 3]
    assert stats.preloaded == 2
    assert stats.failed == 1
    assert not preloader.status(2)["cached"]


def test_preload_recent_prioritises_newest_tickets() -> None:
    fetcher = _RecordingFetcher()
    preloader = _preloader(fetcher, priority_threshold=2)
    tickets = [
        {"id": 1, "created_at": "2025-01-01T10:00:00Z"},
        {"id": 2, "created_at": "2025-01-03T10:00:00Z"},
        {"id": 3, "created_at": "2025-01-02T10:00:00+00:00"},
        {"id": 4, "created_at": None},
    ]

    assert preloader.preload_recent(tickets) == 4
    preloader.run_pending()

    assert fetcher.calls == [2, 3, 1, 4]


def test_invalidate_requeues_only_cached_conversations() -> None:
    cache = QueryCache()
    fetcher = _RecordingFetcher()
    preloader = _preloader(fetcher, cache)
    preloader.preload([5])
    preloader.run_pending()

    assert preloader.invalidate(6) is False
    assert preloader.invalidate(5) is True
    assert preloader.status(5) == {"cached": True, "preloading": False, "queued": True}

    preloader.run_pending()
    assert fetcher.calls == [5, 5]
    assert cache.is_fresh(ticket_html_key(WORKSPACE_ID, 5))


def test_never_more_than_max_concurrent_fetches() -> None:
    lock = threading.Lock()
    active = [0]
    peak = [0]

    def fetcher(ticket_id: int) -> dict[str, Any]:
        with lock:
            active[0] += 1
            peak[0] = max(peak[0], active[0])
        time.sleep(0.02)
        with lock:
            active[0] -= 1
        return {"contents": [{"id": ticket_id}]}

    preloader = TicketPreloader(
        QueryCache(),
        WORKSPACE_ID,
        fetcher,
        options=PreloadOptions(delay_between=0.0, max_concurrent=2),
        autostart=False,
    )

    assert preloader.preload(range(1, 11)) == 10
    stats = preloader.run_pending()

    assert stats.preloaded == 10
    assert peak[0] == 2


def test_disabled_preloader_queues_nothing() -> None:
    preloader = _preloader(_RecordingFetcher(), enabled=False)

    assert preloader.preload([1, 2], priority=True) == 0
    assert preloader.queue_size == 0


def test_delay_between_preloads_uses_sleep() -> None:
    now = [0.0]
    sleeps: list[float] = []

    def sleep(seconds: float) -> None:
        sleeps.append(seconds)
        now[0] += seconds

    fetcher = _RecordingFetcher()
    preloader = TicketPreloader(
        QueryCache(),
        WORKSPACE_ID,
        fetcher,
        options=PreloadOptions(delay_between=0.5, max_concurrent=2),
        autostart=False,
        clock=lambda: now[0],
        sleep=sleep,
    )

    preloader.preload([1, 2])
    preloader.run_pending()

    assert sorted(fetcher.calls) == [1, 2]
    assert sleeps
    assert all(0 < seconds <= 0.5 for seconds in sleeps)


def test_autostart_dispatches_in_background() -> None:
    cache = QueryCache()
    preloader = TicketPreloader(
        cache,
        WORKSPACE_ID,
        _RecordingFetcher(),
        options=PreloadOptions(delay_between=0.0),
    )

    preloader.preload([8])
    deadline = time.monotonic() + 5
    while not cache.has(ticket_html_key(WORKSPACE_ID, 8)) and time.monotonic() < deadline:
        time.sleep(0.01)

    assert cache.has(ticket_html_key(WORKSPACE_ID, 8))
    preloader.shutdown()


def test_registry_reuses_preloader_per_agent() -> None:
    registry = PreloaderRegistry(QueryCache(), autostart=False)
    first = _RecordingFetcher()
    second = _RecordingFetcher()

    preloader = registry.get(WORKSPACE_ID, 7, first)
    again = registry.get(WORKSPACE_ID, 7, second)
    other = registry.get(WORKSPACE_ID, 8, first)

    assert preloader is again
    assert other is not preloader
    assert len(registry) == 2

    preloader.preload([1])
    preloader.run_pending()
    assert second.calls == [1]
    assert first.calls == []
    registry.shutdown()


def test_registry_drops_idle_preloaders() -> None:
    registry = PreloaderRegistry(QueryCache(), autostart=False, idle_timeout=0.0)

    first = registry.get(WORKSPACE_ID, 7, _RecordingFetcher())
    first.preload([1])
    second = registry.get(WORKSPACE_ID, 8, _RecordingFetcher())

    assert len(registry) == 2
    first.run_pending()
    again = registry.get(WORKSPACE_ID, 8, _RecordingFetcher())

    assert again is second
    assert len(registry) == 1
    assert registry.get(WORKSPACE_ID, 7, _RecordingFetcher()) is not first
    registry.shutdown()


def test_worker_threads_are_released_once_the_queue_drains() -> None:
    preloader = _preloader(_RecordingFetcher(), max_concurrent=2)

    preloader.preload([1, 2, 3])
    preloader.run_pending()

    assert preloader._executor is None
    assert preloader.idle_for() is not None
