"""Thread-safe broadcast channel delivering log events to subscribers.

Purpose
-------
Let any number of consumers follow the event feed without slowing down the
code that logs: publishing never blocks, and each subscriber owns a bounded
backlog that drops new events once full.

Contents
--------
* :class:`Subscription` – blocking pull subscription (``get`` / iteration).
* :class:`AsyncSubscription` – ``async for`` subscription bound to an event
  loop.
* :class:`EventStream` – implementation of :class:`BroadcastPort`.

System Role
-----------
Fed by the dispatcher right after an event is buffered; closed on shutdown or
reinitialisation, which ends every subscription once its backlog is drained.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections import deque
from typing import AsyncIterator, Deque, Iterator

from lib_log_hub.application.ports.stream import BroadcastPort
from lib_log_hub.domain.events import LogEvent


LOGGER = logging.getLogger(__name__)

DEFAULT_MAXSIZE = 1024


class StreamClosed(Exception):
    """Raised by :meth:`Subscription.get` once the stream ended and the backlog is empty."""


class Subscription:
    """Pull-style consumer of an :class:`EventStream`.

    Examples
    --------
    >>> from lib_log_hub.domain.levels import LogLevel
    >>> stream = EventStream()
    >>> subscription = stream.subscribe()
    >>> stream.publish(LogEvent.create(LogLevel.INFO, 'hello'))
    >>> stream.close()
    >>> [event.message for event in subscription]
    ['hello']
    """

    def __init__(self, stream: "EventStream", maxsize: int) -> None:
        if maxsize <= 0:
            raise ValueError("maxsize must be positive")
        self._stream = stream
        self._maxsize = maxsize
        self._backlog: Deque[LogEvent] = deque()
        self._condition = threading.Condition()
        self._closed = False
        self._dropped = 0

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def dropped(self) -> int:
        """Number of events discarded because the backlog was full."""
        return self._dropped

    def pending(self) -> int:
        """Return the number of events waiting to be consumed."""
        with self._condition:
            return len(self._backlog)

    def offer(self, event: LogEvent) -> bool:
        """Queue ``event`` without blocking; return ``False`` when it was dropped."""
        with self._condition:
            if self._closed:
                return False
            if len(self._backlog) >= self._maxsize:
                self._dropped += 1
                return False
            self._backlog.append(event)
            self._condition.notify()
            return True

    def get(self, timeout: float | None = None) -> LogEvent:
        """Return the next event, waiting up to ``timeout`` seconds.

        Raises
        ------
        StreamClosed
            When the subscription ended and no events remain.
        TimeoutError
            When ``timeout`` elapsed without a new event.
        """
        with self._condition:
            if not self._condition.wait_for(lambda: self._backlog or self._closed, timeout):
                raise TimeoutError("no log event arrived within the timeout")
            if self._backlog:
                return self._backlog.popleft()
            raise StreamClosed("log stream closed")

    def close(self) -> None:
        """End the subscription; events already queued can still be read."""
        with self._condition:
            self._closed = True
            self._condition.notify_all()

    def cancel(self) -> None:
        """Detach from the stream and end the subscription."""
        self._stream.unsubscribe(self)

    def __iter__(self) -> Iterator[LogEvent]:
        while True:
            try:
                yield self.get()
            except StreamClosed:
                return

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cancel()


class AsyncSubscription:
    """Consumer of an :class:`EventStream` living on an asyncio event loop.

    Events published from any thread are handed to the loop with
    :meth:`asyncio.AbstractEventLoop.call_soon_threadsafe`, so the producer
    never waits for the loop.
    """

    def __init__(self, stream: "EventStream", maxsize: int, loop: asyncio.AbstractEventLoop) -> None:
        if maxsize <= 0:
            raise ValueError("maxsize must be positive")
        self._stream = stream
        self._loop = loop
        self._queue: asyncio.Queue[LogEvent | None] = asyncio.Queue(maxsize=maxsize)
        self._closed = False
        self._finished = False
        self._dropped = 0

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def dropped(self) -> int:
        return self._dropped

    def offer(self, event: LogEvent) -> bool:
        if self._closed:
            return False
        try:
            self._loop.call_soon_threadsafe(self._enqueue, event)
        except RuntimeError:
            # the owning loop is gone; nobody is left to consume
            self._closed = True
            return False
        return True

    def _enqueue(self, event: LogEvent) -> None:
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            self._dropped += 1

    def _finish(self) -> None:
        self._finished = True
        if self._queue.empty():
            self._queue.put_nowait(None)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._loop.call_soon_threadsafe(self._finish)
        except RuntimeError:
            LOGGER.debug("Event loop already closed while ending an async log subscription")

    def cancel(self) -> None:
        self._stream.unsubscribe(self)

    async def get(self) -> LogEvent:
        """Return the next event; raise :class:`StreamClosed` once the stream ended."""
        while True:
            if self._finished and self._queue.empty():
                raise StreamClosed("log stream closed")
            item = await self._queue.get()
            if item is not None:
                return item

    def __aiter__(self) -> AsyncIterator[LogEvent]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[LogEvent]:
        while True:
            try:
                yield await self.get()
            except StreamClosed:
                return

    async def __aenter__(self) -> "AsyncSubscription":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.cancel()


class EventStream(BroadcastPort):
    """Broadcast log events to independent subscribers."""

    def __init__(self, *, maxsize: int = DEFAULT_MAXSIZE) -> None:
        if maxsize <= 0:
            raise ValueError("maxsize must be positive")
        self._maxsize = maxsize
        self._subscribers: tuple[Subscription | AsyncSubscription, ...] = ()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, maxsize: int | None = None) -> Subscription:
        """Return a new pull subscription; it receives events published from now on."""
        subscription = Subscription(self, self._maxsize if maxsize is None else maxsize)
        self._attach(subscription)
        return subscription

    def subscribe_async(self, maxsize: int | None = None) -> AsyncSubscription:
        """Return a subscription for the running event loop.

        Raises
        ------
        RuntimeError
            When called outside a running event loop.
        """
        loop = asyncio.get_running_loop()
        subscription = AsyncSubscription(self, self._maxsize if maxsize is None else maxsize, loop)
        self._attach(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription | AsyncSubscription) -> None:
        """Detach ``subscription`` and end it; unknown subscriptions are ignored."""
        with self._lock:
            self._subscribers = tuple(item for item in self._subscribers if item is not subscription)
        subscription.close()

    def publish(self, event: LogEvent) -> None:
        """Offer ``event`` to every subscriber; ignored once the stream is closed."""
        if self._closed:
            return
        for subscription in self._subscribers:
            subscription.offer(event)

    def close(self) -> None:
        """End every subscription; further publishes are ignored."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            subscribers, self._subscribers = self._subscribers, ()
        for subscription in subscribers:
            subscription.close()

    def _attach(self, subscription: Subscription | AsyncSubscription) -> None:
        with self._lock:
            if self._closed:
                subscription.close()
                return
            self._subscribers = self._subscribers + (subscription,)


__all__ = ["AsyncSubscription", "EventStream", "StreamClosed", "Subscription"]
