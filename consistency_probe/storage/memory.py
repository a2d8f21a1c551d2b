"""
In-memory storage client for dry runs and testing.
"""

import threading
from pathlib import Path

from consistency_probe.storage.protocol import HTTP_OK, GetResult, PutResult


class InMemoryStorageClient:
    """
    Dict-backed object store.

    Thread-safe, so it can be shared by the write and read workers.
    Missing keys come back as a 404 GetResult with a KeyError attached.
    """

    def __init__(self) -> None:
        self._objects: dict[tuple[str, str], bytes] = {}
        self._lock = threading.Lock()
        self._put_count = 0
        self._get_count = 0

    def put(self, bucket: str, key: str, local_path: Path) -> PutResult:
        try:
            data = Path(local_path).read_bytes()
        except OSError as e:
            return PutResult(error=e)

        with self._lock:
            self._objects[(bucket, key)] = data
            self._put_count += 1
        return PutResult(metadata={"http_status_code": HTTP_OK, "ContentLength": len(data)})

    def get(self, bucket: str, key: str) -> GetResult:
        with self._lock:
            self._get_count += 1
            data = self._objects.get((bucket, key))

        if data is None:
            return GetResult(
                metadata={"http_status_code": 404},
                status_code=404,
                error=KeyError(f"{bucket}/{key}"),
            )
        return GetResult(
            metadata={"http_status_code": HTTP_OK, "ContentLength": len(data)},
            content=data,
            status_code=HTTP_OK,
        )

    @property
    def stats(self) -> dict[str, int]:
        with self._lock:
            return {
                "put_count": self._put_count,
                "get_count": self._get_count,
                "objects": len(self._objects),
            }

    # ---- Test helpers ----

    def keys(self, bucket: str) -> list[str]:
        """All keys stored in a bucket."""
        with self._lock:
            return sorted(k for b, k in self._objects if b == bucket)

    def clear(self) -> None:
        with self._lock:
            self._objects.clear()
            self._put_count = 0
            self._get_count = 0
