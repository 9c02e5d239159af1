"""
Timers
======

Scheduling seam for every provider that polls or waits.

Providers never create threads or sleep directly; they ask a Scheduler
for repeating polls (clipboard, focus mode, battery level, ...) and
one-shot delays (voice recognition restart). Two implementations:

    ThreadScheduler - daemon threads, wall-clock monotonic time
    ManualScheduler - no threads; tests call advance(seconds)

Both share the same clock (`now()`), so cooldowns and debounces measured
by providers follow whichever scheduler is injected.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import threading
import time
from typing import Callable, List, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)


Callback = Callable[[], None]


class TimerHandle(Protocol):
    """Cancellable scheduled callback."""

    @property
    def cancelled(self) -> bool:
        """True once cancelled, or once a one-shot callback has fired."""
        ...

    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Protocol for provider timers."""

    def now(self) -> float:
        """Monotonic seconds."""
        ...

    def call_every(self, interval: float, fn: Callback) -> TimerHandle:
        ...

    def call_later(self, delay: float, fn: Callback) -> TimerHandle:
        ...

    def shutdown(self) -> None:
        ...


def _run_guarded(fn: Callback) -> None:
    try:
        fn()
    except Exception:
        logger.exception("Timer callback failed")


# =============================================================================
# Thread-backed scheduler
# =============================================================================

class _ThreadHandle:
    def __init__(self, interval: float, fn: Callback, repeat: bool):
        self.interval = interval
        self.fn = fn
        self.repeat = repeat
        self._stop = threading.Event()
        self.thread = threading.Thread(
            target=self._loop,
            daemon=True,
            name=f"GlitchedTimer-{id(self):x}",
        )

    @property
    def cancelled(self) -> bool:
        return self._stop.is_set()

    def cancel(self) -> None:
        self._stop.set()

    def _loop(self) -> None:
        while not self._stop.wait(self.interval):
            _run_guarded(self.fn)
            if not self.repeat:
                self._stop.set()


class ThreadScheduler:
    """
    Scheduler backed by one daemon thread per timer.

    Callbacks run on the timer thread; providers hand results to the
    event bus, which marshals them to the consumer thread.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._handles: List[_ThreadHandle] = []

    def now(self) -> float:
        return time.monotonic()

    def call_every(self, interval: float, fn: Callback) -> _ThreadHandle:
        return self._start(_ThreadHandle(interval, fn, repeat=True))

    def call_later(self, delay: float, fn: Callback) -> _ThreadHandle:
        return self._start(_ThreadHandle(delay, fn, repeat=False))

    def _start(self, handle: _ThreadHandle) -> _ThreadHandle:
        with self._lock:
            self._handles = [h for h in self._handles if not h.cancelled]
            self._handles.append(handle)
        handle.thread.start()
        return handle

    def shutdown(self, timeout: float = 1.0) -> None:
        """Cancel every timer and wait briefly for the threads to exit."""
        with self._lock:
            handles, self._handles = self._handles, []
        for handle in handles:
            handle.cancel()
        current = threading.current_thread()
        for handle in handles:
            if handle.thread is not current and handle.thread.is_alive():
                handle.thread.join(timeout=timeout)


# =============================================================================
# Manual scheduler (deterministic, for tests and the simulator)
# =============================================================================

class _ManualHandle:
    def __init__(self, interval: float, fn: Callback, repeat: bool):
        self.interval = interval
        self.fn = fn
        self.repeat = repeat
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class ManualScheduler:
    """
    Scheduler whose clock only moves when advance() is called.

    Usage:
        scheduler = ManualScheduler()
        provider = ClipboardProvider(..., scheduler=scheduler)
        provider.activate()
        scheduler.advance(0.5)   # runs one clipboard poll
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._lock = threading.RLock()
        self._queue: List[Tuple[float, int, _ManualHandle]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        with self._lock:
            return self._now

    def call_every(self, interval: float, fn: Callback) -> _ManualHandle:
        if interval <= 0:
            raise ValueError("interval must be positive")
        return self._push(_ManualHandle(interval, fn, repeat=True), interval)

    def call_later(self, delay: float, fn: Callback) -> _ManualHandle:
        return self._push(_ManualHandle(delay, fn, repeat=False), max(delay, 0.0))

    def _push(self, handle: _ManualHandle, delay: float) -> _ManualHandle:
        with self._lock:
            heapq.heappush(self._queue, (self._now + delay, next(self._seq), handle))
        return handle

    def pending(self) -> int:
        """Number of live scheduled callbacks."""
        with self._lock:
            return sum(1 for _, _, h in self._queue if not h.cancelled)

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward, firing due callbacks in time order.

        Returns the number of callbacks run.
        """
        with self._lock:
            target = self._now + seconds
        fired = 0

        while True:
            with self._lock:
                if not self._queue or self._queue[0][0] > target:
                    self._now = target
                    return fired
                due, _, handle = heapq.heappop(self._queue)
                self._now = max(self._now, due)
                if handle.cancelled:
                    continue
                if handle.repeat:
                    heapq.heappush(
                        self._queue, (due + handle.interval, next(self._seq), handle)
                    )
                else:
                    handle.cancel()

            _run_guarded(handle.fn)
            fired += 1

    def shutdown(self) -> None:
        with self._lock:
            for _, _, handle in self._queue:
                handle.cancel()
            self._queue.clear()


__all__ = [
    "Callback",
    "TimerHandle",
    "Scheduler",
    "ThreadScheduler",
    "ManualScheduler",
]
