from __future__ import annotations

import json
import logging
import queue
import threading
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from ..core.constants import DEFAULT_EVENT_QUEUE_SIZE

logger = logging.getLogger(__name__)


def company_channel(company_id: int) -> str:
    return f"company:{int(company_id)}"


def staff_channel(staff_id: int) -> str:
    return f"staff:{int(staff_id)}"


def tracking_channel(staff_id: int) -> str:
    """Live location feed of one staff member; admins opt in per staff."""
    return f"tracking:{int(staff_id)}"


@dataclass(frozen=True)
class Event:
    channel: str
    name: str
    data: dict[str, Any] = field(default_factory=dict)

    def to_sse(self) -> str:
        """Server-Sent Events wire format (one frame)."""
        payload = json.dumps(self.data, default=str, ensure_ascii=False)
        return f"event: {self.name}\ndata: {payload}\n\n"


_CLOSED = Event(channel="", name="closed")


class Subscription:
    """A consumer's bounded inbox on one or more channels.

    Closing wakes a consumer blocked in ``get`` so the stream can end.
    """

    def __init__(self, hub: "EventHub", channels: Iterable[str], maxsize: int, owner: Optional[int] = None):
        self._hub = hub
        self.channels = frozenset(channels)
        self.owner = owner
        self._queue: "queue.Queue[Event]" = queue.Queue(maxsize=maxsize)
        self.closed = False

    def offer(self, event: Event) -> bool:
        if self.closed:
            return False
        try:
            self._queue.put_nowait(event)
            return True
        except queue.Full:
            return False

    def get(self, timeout: Optional[float] = None) -> Optional[Event]:
        try:
            event = self._queue.get(timeout=timeout)
        except queue.Empty:
            return None
        return None if event is _CLOSED else event

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._hub.unsubscribe(self)
        try:
            self._queue.put_nowait(_CLOSED)
        except queue.Full:
            # Drop one pending event to make room for the wake-up.
            try:
                self._queue.get_nowait()
            except queue.Empty:
                pass
            self._queue.put_nowait(_CLOSED)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class EventHub:
    """In-process pub/sub fan-out keyed by channel name.

    Publishing never blocks: a subscriber whose inbox is full misses the
    event and a warning is logged. Subscriptions opened on behalf of a
    staff member can be closed together with ``close_staff`` (logout).
    """

    def __init__(self, *, queue_size: int = DEFAULT_EVENT_QUEUE_SIZE):
        self._queue_size = int(queue_size)
        self._lock = threading.Lock()
        self._subscribers: dict[str, set[Subscription]] = {}
        self._by_owner: dict[int, set[Subscription]] = {}

    def subscribe(self, channels: Iterable[str], *, owner: Optional[int] = None) -> Subscription:
        sub = Subscription(self, channels, self._queue_size, owner=owner)
        with self._lock:
            for channel in sub.channels:
                self._subscribers.setdefault(channel, set()).add(sub)
            if owner is not None:
                self._by_owner.setdefault(owner, set()).add(sub)
        logger.debug("subscribed to %s", sorted(sub.channels))
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            for channel in sub.channels:
                subs = self._subscribers.get(channel)
                if not subs:
                    continue
                subs.discard(sub)
                if not subs:
                    del self._subscribers[channel]
            owned = self._by_owner.get(sub.owner) if sub.owner is not None else None
            if owned is not None:
                owned.discard(sub)
                if not owned:
                    del self._by_owner[sub.owner]

    def close_staff(self, staff_id: int) -> int:
        """Close every subscription owned by ``staff_id``; returns how many."""

        with self._lock:
            subs = list(self._by_owner.get(int(staff_id), ()))
        for sub in subs:
            sub.close()
        if subs:
            logger.info("closed %d event stream(s)", len(subs), extra={"staff_id": staff_id})
        return len(subs)

    def publish(self, channel: str, name: str, data: dict[str, Any]) -> int:
        """Deliver to every subscriber of ``channel``; returns how many got it."""

        event = Event(channel=channel, name=name, data=data)
        with self._lock:
            targets = list(self._subscribers.get(channel, ()))

        delivered = 0
        for sub in targets:
            if sub.offer(event):
                delivered += 1
            else:
                logger.warning("subscriber queue full, dropping %s on %s", name, channel)
        return delivered

    def subscriber_count(self, channel: Optional[str] = None) -> int:
        with self._lock:
            if channel is not None:
                return len(self._subscribers.get(channel, ()))
            return len({sub for subs in self._subscribers.values() for sub in subs})
