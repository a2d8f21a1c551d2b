"""
Read worker: reads back each object as soon as its write completes.
"""

import threading

from consistency_probe.core.fixtures import FixtureStore
from consistency_probe.core.ledger import ResultLedger
from consistency_probe.events.broker import WRITE_COMPLETED, WRITE_FINISHED, EventBroker
from consistency_probe.storage.protocol import StorageClient, object_key
from consistency_probe.utils.logging import ProbeLogger


class ReadWorker:
    """
    Reads, verifies and persists objects announced by the write worker.

    ``on_write_completed`` runs on the write worker's thread (the broker
    delivers synchronously) and never raises: transport errors, non-200
    statuses, content mismatches and persist failures all become read
    outcomes in the ledger.

    ``run`` blocks until ``write-finished`` has been observed. Because
    delivery is synchronous, every earlier ``write-completed`` handler has
    returned by then. There is no timeout: a hung storage read hangs the run.
    """

    def __init__(
        self,
        storage: StorageClient,
        fixtures: FixtureStore,
        ledger: ResultLedger,
        bucket: str,
        key_prefix: str = "",
        verify_content: bool = True,
    ):
        self.storage = storage
        self.fixtures = fixtures
        self.ledger = ledger
        self.bucket = bucket
        self.key_prefix = key_prefix
        self.verify_content = verify_content
        self.log = ProbeLogger(worker="read")
        self._finished = threading.Event()

    def attach(self, broker: EventBroker) -> None:
        """Subscribe to both probe events. Must happen before the first write."""
        broker.subscribe(WRITE_COMPLETED, self.on_write_completed)
        broker.subscribe(WRITE_FINISHED, self.on_write_finished)

    def run(self, timeout: float | None = None) -> bool:
        """
        Block until the write stream has finished.

        Returns:
            True if write-finished was observed, False on timeout
        """
        self.log.worker_started()
        finished = self._finished.wait(timeout)
        self.log.worker_ended(finished=finished)
        return finished

    @property
    def finished(self) -> bool:
        return self._finished.is_set()

    # ---- Event handlers ----

    def on_write_finished(self, _: int) -> None:
        self._finished.set()

    def on_write_completed(self, identifier: int) -> None:
        try:
            if self.read_one(identifier):
                self.ledger.record_read_success()
        except Exception as e:
            # Handler boundary: anything unexpected still becomes a read outcome
            self.ledger.record_read_failure(identifier, None, e)
            self.log.read_failed(identifier, str(e), stage="handler")

    def read_one(self, identifier: int) -> bool:
        """
        Read one object back and persist it.

        Returns:
            True on success; on failure a read outcome has been recorded
        """
        key = object_key(identifier, self.key_prefix)
        result = self.storage.get(self.bucket, key)

        if result.error is not None:
            return self._fail(identifier, result.metadata, result.error, "get")

        if not result.ok:
            return self._fail(
                identifier,
                result.metadata,
                f"Did not get OK response when reading object (status {result.status_code})",
                "status",
            )

        content = result.content or b""
        if self.verify_content and content != self.fixtures.payload:
            return self._fail(
                identifier,
                result.metadata,
                f"Content mismatch: expected {len(self.fixtures.payload)} bytes, got {len(content)}",
                "verify",
            )

        try:
            self.fixtures.write_output(identifier, content)
        except OSError as e:
            return self._fail(identifier, result.metadata, e, "persist")

        self.log.read_completed(identifier, key=key)
        return True

    def _fail(self, identifier, response, error, stage: str) -> bool:
        self.ledger.record_read_failure(identifier, response, error)
        self.log.read_failed(identifier, str(error), stage=stage)
        return False
