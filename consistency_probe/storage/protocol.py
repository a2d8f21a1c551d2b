"""
Protocol definition for the object storage interface.

Defines the narrow contract the write and read workers need from a storage
client. Both S3StorageClient and InMemoryStorageClient satisfy it.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

HTTP_OK = 200


class StorageClientError(Exception):
    """Raised when a storage client cannot be constructed."""

    pass


@dataclass(frozen=True)
class PutResult:
    """Outcome of a single put. ``error`` is None on success."""

    metadata: dict[str, Any] | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class GetResult:
    """
    Outcome of a single get.

    A non-200 status is a failure even when no transport error occurred.
    """

    metadata: dict[str, Any] | None = None
    content: bytes | None = None
    status_code: int | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status_code == HTTP_OK


@runtime_checkable
class StorageClient(Protocol):
    """Protocol for object storage backends."""

    def put(self, bucket: str, key: str, local_path: Path) -> PutResult:
        """Upload the file at local_path under key."""
        ...

    def get(self, bucket: str, key: str) -> GetResult:
        """Download the object stored under key."""
        ...


def object_key(identifier: int, prefix: str = "") -> str:
    """Deterministic storage key for an identifier: its decimal string form."""
    key = str(identifier)
    if not prefix:
        return key
    return f"{prefix.rstrip('/')}/{key}"
