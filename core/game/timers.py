"""Cancellable deferred calls used for delayed match resolution."""

import asyncio
import heapq
import itertools
import threading
from abc import ABC, abstractmethod
from typing import Callable


class DeferredCall:
    """A callback scheduled to run once, unless cancelled first."""

    def __init__(self, callback: Callable[[], None]) -> None:
        self._callback = callback
        self._cancelled = False
        self._done = False
        self._on_cancel: Callable[[], None] | None = None

    def cancel(self) -> None:
        """Prevent the callback from running. Cancelling twice is harmless."""
        if self._cancelled or self._done:
            return
        self._cancelled = True
        if self._on_cancel is not None:
            self._on_cancel()

    def fire(self) -> None:
        """Run the callback if it is still live."""
        if self._cancelled or self._done:
            return
        self._done = True
        self._callback()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        return self._done

    @property
    def pending(self) -> bool:
        """Check if the call is still waiting to fire."""
        return not (self._cancelled or self._done)


class Scheduler(ABC):
    """Schedules deferred calls."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> DeferredCall:
        """Run callback after delay seconds; return a cancellable handle."""
        ...


class ManualScheduler(Scheduler):
    """
    Scheduler driven by an explicit clock.

    Nothing fires until advance() or run_pending() is called, which makes
    delayed resolution deterministic in tests and in the text adapter.
    """

    def __init__(self) -> None:
        self._now = 0.0
        self._queue: list[tuple[float, int, DeferredCall]] = []
        self._sequence = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> DeferredCall:
        # Purge cancelled calls before adding a new one
        if any(not entry[2].pending for entry in self._queue):
            self._queue = [entry for entry in self._queue if entry[2].pending]
            heapq.heapify(self._queue)

        call = DeferredCall(callback)
        heapq.heappush(self._queue, (self._now + delay, next(self._sequence), call))
        return call

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward and fire every call that came due.

        Returns:
            Number of callbacks that ran
        """
        self._now += seconds
        fired = 0
        while self._queue and self._queue[0][0] <= self._now:
            _, _, call = heapq.heappop(self._queue)
            if call.pending:
                call.fire()
                fired += 1
        return fired

    def run_pending(self) -> int:
        """Advance the clock to the last scheduled call and fire everything."""
        if not self._queue:
            return 0
        latest = max(due for due, _, _ in self._queue)
        return self.advance(max(0.0, latest - self._now))

    @property
    def now(self) -> float:
        """Return the current clock value in seconds."""
        return self._now

    @property
    def pending(self) -> int:
        """Return the number of live scheduled calls."""
        return sum(1 for _, _, call in self._queue if call.pending)


class ThreadingScheduler(Scheduler):
    """Scheduler backed by threading.Timer; callbacks run on timer threads."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> DeferredCall:
        call = DeferredCall(callback)
        timer = threading.Timer(delay, call.fire)
        timer.daemon = True
        call._on_cancel = timer.cancel
        timer.start()
        return call


class AsyncioScheduler(Scheduler):
    """Scheduler backed by an asyncio event loop; callbacks run on the loop thread."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> DeferredCall:
        loop = self._loop or asyncio.get_running_loop()
        call = DeferredCall(callback)
        handle = loop.call_later(delay, call.fire)
        call._on_cancel = handle.cancel
        return call
