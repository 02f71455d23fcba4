from __future__ import annotations

"""Deferred-callback schedulers with individually cancellable handles.

ManualScheduler runs on logical milliseconds advanced by the caller (tests,
offline rendering). ThreadingScheduler uses one threading.Timer per call and
serializes callbacks behind a lock so engine state is never mutated by two
callbacks at once.
"""

import heapq
import itertools
import threading
import time
from typing import Callable, List, Optional, Tuple


class TimerHandle:
    """A pending deferred call."""

    def __init__(self, due_ms: float, callback: Callable[[], None]) -> None:
        self.due_ms = due_ms
        self.callback = callback
        self._cancelled = False
        self._fired = False
        self._timer: Optional[threading.Timer] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def pending(self) -> bool:
        return not (self._cancelled or self._fired)

    def cancel(self) -> None:
        self._cancelled = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _run(self) -> None:
        if self._cancelled or self._fired:
            return
        self._fired = True
        self.callback()


class Scheduler:
    """Abstract-like scheduler interface.

    ``lock`` serializes timer callbacks with the session entry points that
    mutate the same state.
    """

    def __init__(self) -> None:
        self.lock = threading.RLock()

    def now(self) -> float:
        raise NotImplementedError

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        raise NotImplementedError

    def shutdown(self) -> None:
        pass


class ManualScheduler(Scheduler):
    def __init__(self) -> None:
        super().__init__()
        self._now = 0.0
        self._seq = itertools.count()
        self._queue: List[Tuple[float, int, TimerHandle]] = []

    def now(self) -> float:
        return self._now

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(self._now + max(0.0, float(delay_ms)), callback)
        heapq.heappush(self._queue, (handle.due_ms, next(self._seq), handle))
        return handle

    def advance(self, ms: float) -> int:
        """Move the clock forward, firing due callbacks in time order.

        Callbacks scheduled while advancing fire in the same call if they fall
        inside the window.

        Returns:
            Number of callbacks fired.
        """
        target = self._now + float(ms)
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            if not handle.pending:
                continue
            self._now = max(self._now, due)
            with self.lock:
                handle._run()
            fired += 1
        self._now = target
        return fired

    def run_until_idle(self, limit_ms: float = 3_600_000) -> int:
        """Advance until nothing is pending (bounded for periodic tasks)."""
        fired = 0
        end = self._now + limit_ms
        while self.pending_count() and self._now < end:
            next_due = min(h.due_ms for _, _, h in self._queue if h.pending)
            fired += self.advance(max(0.0, next_due - self._now))
        return fired

    def pending_count(self) -> int:
        return sum(1 for _, _, h in self._queue if h.pending)


class ThreadingScheduler(Scheduler):
    def __init__(self) -> None:
        super().__init__()
        self._handles: List[TimerHandle] = []

    def now(self) -> float:
        return time.monotonic() * 1000.0

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(self.now() + max(0.0, float(delay_ms)), callback)

        def fire() -> None:
            with self.lock:
                handle._run()

        timer = threading.Timer(max(0.0, float(delay_ms)) / 1000.0, fire)
        timer.daemon = True
        handle._timer = timer
        with self.lock:
            self._handles = [h for h in self._handles if h.pending]
            self._handles.append(handle)
        timer.start()
        return handle

    def shutdown(self) -> None:
        with self.lock:
            for h in self._handles:
                h.cancel()
            self._handles = []
