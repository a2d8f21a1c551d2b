"""
Shared test fixtures for consistency probe tests.
"""

import threading
from pathlib import Path

import pytest

from consistency_probe.config.models import (
    FixtureConfig,
    ProbeConfig,
    RangeConfig,
    ReportConfig,
    StorageConfig,
)
from consistency_probe.core.fixtures import FixtureStore
from consistency_probe.core.ledger import ResultLedger
from consistency_probe.events.broker import EventBroker
from consistency_probe.storage.memory import InMemoryStorageClient
from consistency_probe.storage.protocol import GetResult, PutResult

BUCKET = "probe-test-bucket"


class RecordingStorage(InMemoryStorageClient):
    """
    In-memory storage that logs every call in global order and injects faults.

    Args:
        fail_put: identifiers whose put returns an error
        bad_status: identifiers whose get returns HTTP 503 without an error
        fail_get: identifiers whose get returns a transport error
        corrupt: identifiers whose get returns different content
    """

    def __init__(self, fail_put=(), bad_status=(), fail_get=(), corrupt=()) -> None:
        super().__init__()
        self.fail_put = set(fail_put)
        self.bad_status = set(bad_status)
        self.fail_get = set(fail_get)
        self.corrupt = set(corrupt)
        self.calls: list[tuple[str, int]] = []
        self.threads: list[tuple[str, str]] = []
        self._calls_lock = threading.Lock()

    def _log(self, op: str, key: str) -> int:
        identifier = int(key.rsplit("/", 1)[-1])
        with self._calls_lock:
            self.calls.append((op, identifier))
            self.threads.append((op, threading.current_thread().name))
        return identifier

    def put(self, bucket: str, key: str, local_path: Path) -> PutResult:
        identifier = self._log("put", key)
        if identifier in self.fail_put:
            return PutResult(
                metadata={"http_status_code": 500},
                error=RuntimeError(f"injected put failure for {identifier}"),
            )
        return super().put(bucket, key, local_path)

    def get(self, bucket: str, key: str) -> GetResult:
        identifier = self._log("get", key)
        if identifier in self.fail_get:
            return GetResult(error=ConnectionError(f"injected get failure for {identifier}"))
        if identifier in self.bad_status:
            return GetResult(metadata={"http_status_code": 503}, content=b"", status_code=503)
        result = super().get(bucket, key)
        if identifier in self.corrupt and result.content is not None:
            return GetResult(
                metadata=result.metadata,
                content=result.content[::-1] + b"!",
                status_code=result.status_code,
            )
        return result


# =============================================================================
# Component fixtures
# =============================================================================


@pytest.fixture
def fixtures(tmp_path: Path) -> FixtureStore:
    """Fixture store in a temporary directory, directories created."""
    store = FixtureStore(
        input_dir=tmp_path / "in",
        output_dir=tmp_path / "out",
        payload_size_bytes=256,
    )
    store.ensure_directories()
    return store


@pytest.fixture
def broker() -> EventBroker:
    return EventBroker()


@pytest.fixture
def ledger() -> ResultLedger:
    return ResultLedger()


@pytest.fixture
def memory_storage() -> InMemoryStorageClient:
    return InMemoryStorageClient()


@pytest.fixture
def make_storage():
    """Factory for fault-injecting recording storage."""
    return RecordingStorage


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def test_config(tmp_path: Path) -> ProbeConfig:
    """Memory-backed configuration writing into tmp_path."""
    return ProbeConfig(
        range=RangeConfig(start=0, count=5),
        storage=StorageConfig(backend="memory", bucket=BUCKET),
        fixtures=FixtureConfig(
            input_dir=tmp_path / "test-files-in",
            output_dir=tmp_path / "test-files-out",
            payload_size_bytes=512,
        ),
        report=ReportConfig(path=tmp_path / "stats.txt"),
    )


@pytest.fixture
def bucket() -> str:
    return BUCKET
