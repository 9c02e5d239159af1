"""
Input Event Bus
===============

Single ordered relay between providers (and UI fallback controls) and
gameplay subscribers.

    post(event)   - from any thread, never blocks
    pump()        - on the consumer thread, delivers marshaled events
    subscribe()   - per-subscriber buffered stream, consumer thread only

Events posted on the consumer thread are delivered immediately. Events
posted from any other thread (sensor callbacks, timers, permission
completions) are queued and delivered by the next pump() on the consumer
thread. Either way delivery order equals acceptance order: a consumer-side
post first flushes whatever was already queued, and a post made from inside
a handler waits until the event being delivered has reached every
subscriber.

No filtering, no limits, no persistence. With no subscribers an event is
simply dropped.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Iterator, List, Optional

from .events import InputEvent

logger = logging.getLogger(__name__)


EventHandler = Callable[[InputEvent], None]


@dataclass
class BusStats:
    """Counters for diagnostics."""
    accepted: int = 0
    delivered: int = 0
    dropped: int = 0


class Subscription:
    """
    One subscriber's view of the stream.

    Iterating yields buffered events in post order and stops when the
    buffer is empty; iterating again later yields only newer events.
    Each subscription buffers independently, so a slow reader never holds
    back another subscriber.
    """

    def __init__(self, bus: "InputEventBus", handler: Optional[EventHandler] = None):
        self._bus = bus
        self._handler = handler
        self._buffer: Deque[InputEvent] = deque()
        self.closed = False

    def _deliver(self, event: InputEvent) -> None:
        if self._handler is not None:
            try:
                self._handler(event)
            except Exception:
                logger.exception(f"Subscriber handler failed on {event.kind.value}")
            return
        self._buffer.append(event)

    def __iter__(self) -> Iterator[InputEvent]:
        while self._buffer:
            yield self._buffer.popleft()

    def __len__(self) -> int:
        return len(self._buffer)

    def drain(self) -> List[InputEvent]:
        """Return and clear every buffered event."""
        return list(self)

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._bus._remove(self)
            self._buffer.clear()

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class InputEventBus:
    """
    Process-wide, thread-safe publish/subscribe channel.

    The consumer thread is the thread that constructs the bus unless one
    is given explicitly (the game's main loop thread).
    """

    def __init__(self, consumer_thread: Optional[threading.Thread] = None):
        self._consumer = consumer_thread or threading.current_thread()
        self._pending: "queue.SimpleQueue[InputEvent]" = queue.SimpleQueue()
        self._subscribers: List[Subscription] = []
        self._deliver_lock = threading.RLock()
        self._delivering = False
        self._stats = BusStats()
        self._stats_lock = threading.Lock()

    @property
    def consumer_thread(self) -> threading.Thread:
        return self._consumer

    def on_consumer_thread(self) -> bool:
        return threading.current_thread() is self._consumer

    # =========================================================================
    # Publishing
    # =========================================================================

    def post(self, event: InputEvent) -> None:
        """Accept an event from any thread. Never blocks the caller."""
        with self._stats_lock:
            self._stats.accepted += 1

        if not self.on_consumer_thread():
            self._pending.put(event)
            return

        with self._deliver_lock:
            if self._delivering:
                # Posted from a handler: queue behind the event in flight.
                self._pending.put(event)
                return
            self._delivering = True
            try:
                self._flush()
                self._deliver(event)
                self._flush()
            finally:
                self._delivering = False

    def pump(self, timeout: float = 0.0) -> int:
        """
        Deliver events marshaled from other threads.

        Waits up to `timeout` seconds for the first pending event, then
        delivers everything queued. Returns the number delivered.
        """
        if not self.on_consumer_thread():
            raise RuntimeError("pump() must run on the consumer thread")
        if self._delivering:
            # Called from a handler; the outer delivery drains the queue.
            return 0

        first = None
        if timeout > 0:
            try:
                first = self._pending.get(timeout=timeout)
            except queue.Empty:
                return 0

        with self._deliver_lock:
            self._delivering = True
            try:
                delivered = 0
                if first is not None:
                    self._deliver(first)
                    delivered = 1
                return delivered + self._flush()
            finally:
                self._delivering = False

    def _flush(self) -> int:
        count = 0
        while True:
            try:
                event = self._pending.get_nowait()
            except queue.Empty:
                return count
            self._deliver(event)
            count += 1

    def _deliver(self, event: InputEvent) -> None:
        subscribers = list(self._subscribers)
        with self._stats_lock:
            if subscribers:
                self._stats.delivered += 1
            else:
                self._stats.dropped += 1
        for sub in subscribers:
            sub._deliver(event)

    # =========================================================================
    # Subscribing
    # =========================================================================

    def subscribe(self, handler: Optional[EventHandler] = None) -> Subscription:
        """
        Attach a subscriber.

        Without a handler the subscription buffers events for iteration.
        With a handler, events are handed to it on the consumer thread.
        Only events accepted after this call are seen.
        """
        sub = Subscription(self, handler)
        with self._deliver_lock:
            # Events accepted before subscribing belong to earlier subscribers.
            if self.on_consumer_thread() and not self._delivering:
                self._flush()
            self._subscribers.append(sub)
        return sub

    def _remove(self, sub: Subscription) -> None:
        with self._deliver_lock:
            if sub in self._subscribers:
                self._subscribers.remove(sub)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def stats(self) -> dict:
        with self._stats_lock:
            return {
                "accepted": self._stats.accepted,
                "delivered": self._stats.delivered,
                "dropped": self._stats.dropped,
                "pending": self._pending.qsize(),
                "subscribers": len(self._subscribers),
            }


__all__ = [
    "BusStats",
    "EventHandler",
    "InputEventBus",
    "Subscription",
]
