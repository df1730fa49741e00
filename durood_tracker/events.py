# durood_tracker/events.py
"""
In-process fan-out of "total changed" events to server-sent-event streams.

One TotalBroadcaster is created per application (see create_app) and closed
at shutdown. Subscribers are local to this process; other workers keep their
own broadcaster seeded from the shared counter row.
"""
import json
import logging
import queue
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

logger = logging.getLogger(__name__)

_CLOSED = object()

# Totals a stalled stream may fall behind by before the oldest are dropped.
SUBSCRIBER_BACKLOG = 100


class SubscriptionClosed(Exception):
    pass


class Subscription:
    """
    A single stream's mailbox. Holds at most `backlog` undelivered totals;
    when full, the oldest one is discarded so the newest always gets in.
    """

    def __init__(self, backlog: int = SUBSCRIBER_BACKLOG):
        self._queue = queue.Queue(maxsize=max(1, backlog))
        self._put_lock = threading.Lock()
        self._closed = False

    def _put(self, item) -> None:
        with self._put_lock:
            if self._closed:
                return
            if item is _CLOSED:
                self._closed = True
            while True:
                try:
                    self._queue.put_nowait(item)
                    return
                except queue.Full:
                    try:
                        self._queue.get_nowait()
                    except queue.Empty:
                        pass

    def deliver(self, total: int) -> None:
        self._put(int(total))

    def close(self) -> None:
        self._put(_CLOSED)

    def get(self, timeout: Optional[float] = None):
        """
        Next total, or None on timeout. Raises SubscriptionClosed once closed.
        """
        try:
            item = self._queue.get(timeout=timeout)
        except queue.Empty:
            return None
        if item is _CLOSED:
            raise SubscriptionClosed
        return item


class TotalBroadcaster:
    def __init__(self, backlog: int = SUBSCRIBER_BACKLOG):
        self._lock = threading.Lock()
        self._publish_lock = threading.RLock()
        self._subscribers = []
        self._closed = False
        self._backlog = backlog

    @contextmanager
    def publishing(self):
        """
        Commit a counter change and publish its total inside this block so
        subscribers see totals in the order the writes committed.
        """
        with self._publish_lock:
            yield self

    def subscribe(self) -> Subscription:
        sub = Subscription(self._backlog)
        with self._lock:
            if self._closed:
                sub.close()
            else:
                self._subscribers.append(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            try:
                self._subscribers.remove(sub)
            except ValueError:
                pass

    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def publish(self, total: int) -> int:
        """
        Push `total` to every subscriber in order. Returns how many got it.
        """
        with self._lock:
            targets = list(self._subscribers)

        delivered = 0
        for sub in targets:
            try:
                sub.deliver(total)
                delivered += 1
            except Exception:
                logger.exception("Failed to deliver total to a subscriber")
        return delivered

    def close(self) -> None:
        with self._lock:
            self._closed = True
            targets, self._subscribers = self._subscribers, []
        for sub in targets:
            sub.close()


def sse_frame(total: int) -> str:
    return f"data: {json.dumps({'total': int(total)})}\n\n"


def total_event_stream(
    broadcaster: TotalBroadcaster,
    snapshot: Callable[[], int],
    keepalive_seconds: float = 15.0,
    retry_ms: int = 2000,
) -> Iterator[str]:
    """
    SSE body: one snapshot frame (with the reconnect hint), then a frame per
    published total and a keep-alive comment after each quiet interval.

    The subscription is released however the generator ends, including
    close() from the WSGI server when the client disconnects.
    """
    sub = broadcaster.subscribe()
    try:
        yield f"retry: {int(retry_ms)}\n" + sse_frame(snapshot())
        while True:
            try:
                total = sub.get(timeout=keepalive_seconds)
            except SubscriptionClosed:
                return
            if total is None:
                yield ": keep-alive\n\n"
            else:
                yield sse_frame(total)
    finally:
        broadcaster.unsubscribe(sub)
