import asyncio
import functools
import time
from collections import OrderedDict
from collections.abc import Awaitable, Callable, Hashable
from dataclasses import dataclass
from typing import Generic, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    value: V
    computed_at: float


class TimedCache(Generic[K, V]):
    """Memoizes a single-argument coroutine function for ``ttl_minutes``.

    Entries are checked for staleness lazily, on the next call for the same key.
    Concurrent calls for a key that is missing or stale share one upstream call.
    With ``max_entries`` set, the least recently used entry is evicted once the
    bound is exceeded; ``0`` leaves the cache unbounded.
    """

    def __init__(
        self,
        func: Callable[[K], Awaitable[V]],
        ttl_minutes: float,
        max_entries: int = 0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._func = func
        self._ttl_seconds = ttl_minutes * 60
        self._max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[K, CacheEntry[V]] = OrderedDict()
        self._inflight: dict[K, asyncio.Task[V]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def _fresh(self, entry: CacheEntry[V]) -> bool:
        return self._clock() - entry.computed_at < self._ttl_seconds

    async def __call__(self, key: K) -> V:
        entry = self._entries.get(key)
        if entry is not None and self._fresh(entry):
            self._entries.move_to_end(key)
            return entry.value

        task = self._inflight.get(key)
        if task is not None:
            return await asyncio.shield(task)

        task = asyncio.ensure_future(self._func(key))
        self._inflight[key] = task
        task.add_done_callback(functools.partial(self._settle, key))
        return await asyncio.shield(task)

    def _settle(self, key: K, task: asyncio.Task[V]) -> None:
        # Also fires when every waiting caller was cancelled.
        if self._inflight.get(key) is task:
            del self._inflight[key]
        if task.cancelled() or task.exception() is not None:
            return
        self._store(key, task.result())

    def _store(self, key: K, value: V) -> None:
        self._entries[key] = CacheEntry(value=value, computed_at=self._clock())
        self._entries.move_to_end(key)
        if self._max_entries:
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)

    def invalidate(self, key: K) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()
