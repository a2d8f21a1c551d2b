"""
Outcome ledger shared by the write and read workers.
"""

import threading
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class RunRange:
    """Immutable half-open identifier range [start, start + count)."""

    start: int
    count: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.count < 0:
            raise ValueError(f"start and count must be non-negative, got {self.start}, {self.count}")

    @property
    def stop(self) -> int:
        return self.start + self.count

    def identifiers(self) -> Iterator[int]:
        return iter(range(self.start, self.stop))

    def __len__(self) -> int:
        return self.count


@dataclass(frozen=True)
class OutcomeRecord:
    """
    One failed write or read attempt.

    ``response`` holds whatever metadata the storage call returned before
    failing (often nothing); ``error`` is the failure message.
    """

    operation: str  # "write" or "read"
    identifier: int
    response: dict[str, Any] | None = None
    error: str | None = None
    error_type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "identifier": self.identifier,
            "response": self.response,
            "error": (
                {"type": self.error_type, "message": self.error}
                if self.error is not None
                else None
            ),
        }


def make_record(
    operation: str,
    identifier: int,
    response: dict[str, Any] | None,
    error: BaseException | str | None,
) -> OutcomeRecord:
    """Build an OutcomeRecord from an exception or a plain message."""
    if isinstance(error, BaseException):
        return OutcomeRecord(
            operation=operation,
            identifier=identifier,
            response=dict(response) if response else None,
            error=str(error) or repr(error),
            error_type=type(error).__name__,
        )
    return OutcomeRecord(
        operation=operation,
        identifier=identifier,
        response=dict(response) if response else None,
        error=error,
        error_type=None if error is None else "ProbeFailure",
    )


@dataclass
class _Log:
    """Append-only list of records guarded by its own lock."""

    records: list[OutcomeRecord] = field(default_factory=list)
    successes: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock)


class ResultLedger:
    """
    Thread-safe accumulator of write and read outcomes.

    Writes and reads go to two independent append-only logs, each with its
    own lock. Records are never mutated after being appended; readers get
    copies.
    """

    def __init__(self) -> None:
        self._writes = _Log()
        self._reads = _Log()

    # ---- Recording ----

    def record_write_failure(
        self,
        identifier: int,
        response: dict[str, Any] | None,
        error: BaseException | str,
    ) -> OutcomeRecord:
        record = make_record("write", identifier, response, error)
        with self._writes.lock:
            self._writes.records.append(record)
        return record

    def record_read_failure(
        self,
        identifier: int,
        response: dict[str, Any] | None,
        error: BaseException | str,
    ) -> OutcomeRecord:
        record = make_record("read", identifier, response, error)
        with self._reads.lock:
            self._reads.records.append(record)
        return record

    def record_write_success(self) -> None:
        with self._writes.lock:
            self._writes.successes += 1

    def record_read_success(self) -> None:
        with self._reads.lock:
            self._reads.successes += 1

    # ---- Inspection ----

    @property
    def write_failures(self) -> list[OutcomeRecord]:
        with self._writes.lock:
            return list(self._writes.records)

    @property
    def read_failures(self) -> list[OutcomeRecord]:
        with self._reads.lock:
            return list(self._reads.records)

    @property
    def writes_succeeded(self) -> int:
        with self._writes.lock:
            return self._writes.successes

    @property
    def reads_succeeded(self) -> int:
        with self._reads.lock:
            return self._reads.successes

    def counts(self) -> dict[str, int]:
        with self._writes.lock:
            write_failures = len(self._writes.records)
            writes_succeeded = self._writes.successes
        with self._reads.lock:
            read_failures = len(self._reads.records)
            reads_succeeded = self._reads.successes
        return {
            "write_failures": write_failures,
            "read_failures": read_failures,
            "writes_succeeded": writes_succeeded,
            "reads_succeeded": reads_succeeded,
        }
