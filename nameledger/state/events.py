"""
nameledger.state.events — notification sinks and the post-commit bus.

The store hands committed notifications to an `EventBus`, which appends them
to every configured sink and then calls every subscriber. Delivery is
fire-and-forget from the ledger's perspective: a failing sink or subscriber is
logged and skipped, and never changes the outcome of the transaction that
produced the notification.

Backends
--------
- InMemoryEventSink: fast, test/dev friendly; keeps all notifications in RAM.
- JsonlEventSink: append-only JSONL file; durable and simple to operate.
- NullEventSink: drops everything.

Ordering: notifications carry a strictly increasing `seq` assigned inside the
transaction, so every sink sees them in commit order.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from typing import Callable, Iterable, List, Optional, Protocol, Sequence, runtime_checkable

from ..types.events import Notification

log = logging.getLogger(__name__)

Subscriber = Callable[[Notification], None]


# =============================================================================
# Sink interface
# =============================================================================


@runtime_checkable
class EventSink(Protocol):
    def append(self, notification: Notification) -> None:
        """Append a single committed notification."""

    def get_logs(
        self,
        *,
        name: Optional[str] = None,
        from_seq: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Iterable[Notification]:
        """Iterate matching notifications in ascending `seq` order."""

    def flush(self) -> None:
        """Force persistence, if applicable."""

    def close(self) -> None:
        """Release resources (files, buffers)."""


def _matches(n: Notification, name: Optional[str], from_seq: Optional[int]) -> bool:
    if name is not None and n.name != name:
        return False
    if from_seq is not None and n.seq < from_seq:
        return False
    return True


def _take(it: Iterable[Notification], limit: Optional[int]) -> Iterable[Notification]:
    if limit is None:
        yield from it
        return
    n = 0
    for rec in it:
        if n >= limit:
            break
        yield rec
        n += 1


# =============================================================================
# In-memory sink
# =============================================================================


class InMemoryEventSink:
    """
    A thread-safe in-memory sink. Keeps everything in RAM; meant for tests,
    the RPC dev server and the CLI.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._records: List[Notification] = []

    def append(self, notification: Notification) -> None:
        with self._lock:
            self._records.append(notification)

    def get_logs(
        self,
        *,
        name: Optional[str] = None,
        from_seq: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Iterable[Notification]:
        with self._lock:
            snapshot = list(self._records)
        return list(_take((n for n in snapshot if _matches(n, name, from_seq)), limit))

    @property
    def names(self) -> List[str]:
        with self._lock:
            return [n.name for n in self._records]

    def flush(self) -> None:
        return

    def close(self) -> None:
        with self._lock:
            self._records.clear()


# =============================================================================
# JSONL sink (durable)
# =============================================================================


class JsonlEventSink:
    """
    Append-only JSONL sink; one `Notification.to_dict()` object per line.

    The file is line-buffered; `flush()` fsyncs. One instance should be shared
    per path within a process.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = os.fspath(path)
        os.makedirs(os.path.dirname(self._path) or ".", exist_ok=True)
        self._fh = open(self._path, "a+", encoding="utf-8", buffering=1)
        self._lock = threading.RLock()

    def append(self, notification: Notification) -> None:
        line = json.dumps(notification.to_dict(), separators=(",", ":"), sort_keys=True)
        with self._lock:
            self._fh.write(line + "\n")

    def get_logs(
        self,
        *,
        name: Optional[str] = None,
        from_seq: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Iterable[Notification]:
        out: List[Notification] = []
        with self._lock:
            self._fh.flush()
            self._fh.seek(0)
            for line in self._fh:
                if not line.strip():
                    continue
                try:
                    n = Notification.from_dict(json.loads(line))
                except (ValueError, KeyError) as e:
                    log.warning("Skipping malformed notification line: %s (%r)", line[:120], e)
                    continue
                if _matches(n, name, from_seq):
                    out.append(n)
                    if limit is not None and len(out) >= limit:
                        break
        return out

    def flush(self) -> None:
        with self._lock:
            self._fh.flush()
            os.fsync(self._fh.fileno())

    def close(self) -> None:
        with self._lock:
            if not self._fh.closed:
                self._fh.flush()
                self._fh.close()


# =============================================================================
# Null sink
# =============================================================================


class NullEventSink:
    """A sink that drops everything."""

    def append(self, notification: Notification) -> None:
        return

    def get_logs(
        self,
        *,
        name: Optional[str] = None,
        from_seq: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Iterable[Notification]:
        return []

    def flush(self) -> None:
        return

    def close(self) -> None:
        return


# =============================================================================
# Bus
# =============================================================================


class EventBus:
    """
    Fan-out of committed notifications to sinks, then subscribers.
    """

    def __init__(self, sinks: Sequence[EventSink] = ()) -> None:
        self._sinks: List[EventSink] = list(sinks)
        self._subscribers: List[Subscriber] = []
        self._lock = threading.RLock()

    @property
    def sinks(self) -> List[EventSink]:
        return list(self._sinks)

    def add_sink(self, sink: EventSink) -> None:
        with self._lock:
            self._sinks.append(sink)

    def subscribe(self, fn: Subscriber) -> Callable[[], None]:
        """Register `fn`; returns a callable that unsubscribes it."""
        with self._lock:
            self._subscribers.append(fn)

        def _unsubscribe() -> None:
            with self._lock:
                if fn in self._subscribers:
                    self._subscribers.remove(fn)

        return _unsubscribe

    def publish(self, notifications: Iterable[Notification]) -> None:
        with self._lock:
            sinks = list(self._sinks)
            subscribers = list(self._subscribers)
        for n in notifications:
            for sink in sinks:
                try:
                    sink.append(n)
                except Exception:
                    log.exception("event sink failed", extra={"event": n.name, "seq": n.seq})
            for fn in subscribers:
                try:
                    fn(n)
                except Exception:
                    log.exception("event subscriber failed", extra={"event": n.name, "seq": n.seq})

    def close(self) -> None:
        for sink in self.sinks:
            sink.close()


__all__ = [
    "EventBus",
    "EventSink",
    "InMemoryEventSink",
    "JsonlEventSink",
    "NullEventSink",
    "Subscriber",
]
