"""
Auxiliary broker subscribers: progress logging and event capture.
"""

import threading

import structlog

from consistency_probe.events.broker import (
    NO_IDENTIFIER,
    WRITE_COMPLETED,
    WRITE_FINISHED,
    EventBroker,
)

logger = structlog.get_logger()


class ProgressListener:
    """
    Logs write progress via structlog.

    Emits a debug line per completed write and an info line every
    ``log_every`` completions, plus one line when the write stream ends.
    """

    def __init__(self, total: int, log_every: int = 10) -> None:
        self._total = total
        self._log_every = max(1, log_every)
        self._count = 0

    def attach(self, broker: EventBroker) -> None:
        broker.subscribe(WRITE_COMPLETED, self.on_write_completed)
        broker.subscribe(WRITE_FINISHED, self.on_write_finished)

    def on_write_completed(self, identifier: int) -> None:
        self._count += 1
        logger.debug("write_completed_received", identifier=identifier)
        if self._count % self._log_every == 0:
            pct = 100.0 * self._count / self._total if self._total else 100.0
            logger.info(
                "probe_progress",
                completed=self._count,
                total=self._total,
                progress_pct=f"{pct:.1f}%",
            )

    def on_write_finished(self, _: int) -> None:
        logger.info("write_stream_finished", completed=self._count, total=self._total)

    @property
    def completed(self) -> int:
        return self._count


class EventRecorder:
    """
    Captures every (event_name, payload) pair it is subscribed to.

    Thread-safe, so one recorder can observe several brokers or be read
    while a run is in progress.
    """

    def __init__(self) -> None:
        self._events: list[tuple[str, int]] = []
        self._lock = threading.Lock()

    def attach(self, broker: EventBroker, *event_names: str) -> None:
        """Subscribe to event_names (both probe events when none are given)."""
        for name in event_names or (WRITE_COMPLETED, WRITE_FINISHED):
            broker.subscribe(name, self._make_callback(name))

    def _make_callback(self, event_name: str):
        def record(payload: int = NO_IDENTIFIER) -> None:
            with self._lock:
                self._events.append((event_name, payload))

        record.__qualname__ = f"EventRecorder.record[{event_name}]"
        return record

    # ---- Inspection helpers ----

    @property
    def events(self) -> list[tuple[str, int]]:
        """All captured (event_name, payload) pairs in delivery order."""
        with self._lock:
            return list(self._events)

    def payloads_for(self, event_name: str) -> list[int]:
        with self._lock:
            return [p for name, p in self._events if name == event_name]

    def clear(self) -> None:
        with self._lock:
            self._events.clear()
