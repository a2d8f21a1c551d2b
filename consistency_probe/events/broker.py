"""
In-process event broker connecting the write worker to its listeners.

Delivery is synchronous: ``notify`` runs every subscriber on the calling
thread and only returns once all of them have returned. The write worker
relies on this to guarantee that the read-back for object ``i`` finishes
before object ``i + 1`` is written.
"""

import threading
from collections.abc import Callable

import structlog

logger = structlog.get_logger()

WRITE_COMPLETED = "write-completed"
WRITE_FINISHED = "write-finished"

# Payload for events that do not carry an object identifier
NO_IDENTIFIER = -1

EventCallback = Callable[[int], None]


class EventBroker:
    """
    Thread-safe publish/subscribe registry keyed by event name.

    Each name holds an ordered list of callbacks; subscribing appends and
    never replaces earlier subscribers. A callback that raises is logged and
    counted but never propagated, so a failing listener cannot crash the
    notifier or starve the listeners registered after it.

    Usage:
        broker = EventBroker()
        broker.subscribe(WRITE_COMPLETED, reader.on_write_completed)
        broker.notify(WRITE_COMPLETED, 7)
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[EventCallback]] = {}
        self._lock = threading.Lock()
        self._stats = {
            "notifications": 0,
            "deliveries": 0,
            "handler_errors": 0,
        }

    def subscribe(self, event_name: str, callback: EventCallback) -> None:
        """Register callback for every future notify of event_name."""
        with self._lock:
            self._subscribers.setdefault(event_name, []).append(callback)
        logger.debug("event_subscribed", event_name=event_name)

    def notify(self, event_name: str, payload: int = NO_IDENTIFIER) -> int:
        """
        Deliver payload to every current subscriber of event_name, in order.

        Subscribers registered while a notify is in flight are not part of
        that delivery.

        Args:
            event_name: Event to publish
            payload: Object identifier, or NO_IDENTIFIER

        Returns:
            Number of callbacks that raised
        """
        with self._lock:
            callbacks = tuple(self._subscribers.get(event_name, ()))
            self._stats["notifications"] += 1

        failures = 0
        for callback in callbacks:
            try:
                callback(payload)
            except Exception as e:
                failures += 1
                logger.error(
                    "event_handler_failed",
                    event_name=event_name,
                    payload=payload,
                    handler=getattr(callback, "__qualname__", repr(callback)),
                    error=str(e),
                    exc_info=True,
                )

        with self._lock:
            self._stats["deliveries"] += len(callbacks)
            self._stats["handler_errors"] += failures

        return failures

    def subscriber_count(self, event_name: str) -> int:
        with self._lock:
            return len(self._subscribers.get(event_name, ()))

    @property
    def stats(self) -> dict[str, int]:
        """Return delivery statistics."""
        with self._lock:
            return dict(self._stats)
