"""
Write worker: stores each object in the run range and announces completions.
"""

import threading

from consistency_probe.core.fixtures import FixtureStore
from consistency_probe.core.ledger import ResultLedger, RunRange
from consistency_probe.events.broker import WRITE_COMPLETED, WRITE_FINISHED, EventBroker
from consistency_probe.storage.protocol import StorageClient, object_key
from consistency_probe.utils.logging import ProbeLogger


class WriteWorker:
    """
    Writes objects for every identifier in the run range, strictly in order.

    For each identifier:
    1. Materialize the fixture file
    2. Put it under the identifier's key
    3. On success, publish ``write-completed`` synchronously, so every
       listener (the read worker) has handled it before the next write
    4. On failure, record one write outcome and move on

    ``write-finished`` is published after the last identifier, and also if
    the loop is cut short by an unexpected exception. If ``abort`` is set
    when readiness arrives, no identifier is written at all.
    """

    def __init__(
        self,
        run_range: RunRange,
        storage: StorageClient,
        fixtures: FixtureStore,
        broker: EventBroker,
        ledger: ResultLedger,
        bucket: str,
        key_prefix: str = "",
        ready: threading.Event | None = None,
        abort: threading.Event | None = None,
    ):
        """
        Initialize the write worker.

        Args:
            run_range: Identifiers to write
            storage: Storage client used for puts
            fixtures: Local fixture directories
            broker: Broker on which completions are published
            ledger: Ledger receiving write failures
            bucket: Target bucket
            key_prefix: Optional key prefix
            ready: Set by the orchestrator once every listener is subscribed;
                the first write waits for it
            abort: Set before readiness when listener setup failed; the worker
                then writes nothing and only publishes write-finished
        """
        self.run_range = run_range
        self.storage = storage
        self.fixtures = fixtures
        self.broker = broker
        self.ledger = ledger
        self.bucket = bucket
        self.key_prefix = key_prefix
        self.ready = ready
        self.abort = abort
        self.log = ProbeLogger(worker="write")

    def run(self) -> None:
        if self.ready is not None:
            self.ready.wait()

        self.log.worker_started(start=self.run_range.start, count=self.run_range.count)
        try:
            if self.abort is not None and self.abort.is_set():
                self.log.worker_aborted(reason="listener setup failed")
                return
            for identifier in self.run_range.identifiers():
                self.write_one(identifier)
        finally:
            self.broker.notify(WRITE_FINISHED)
            self.log.worker_ended(**self.ledger.counts())

    def write_one(self, identifier: int) -> bool:
        """
        Write a single object and, on success, publish its completion.

        Returns:
            True if the put succeeded
        """
        try:
            path = self.fixtures.create_input(identifier)
        except OSError as e:
            self.ledger.record_write_failure(identifier, None, e)
            self.log.write_failed(identifier, str(e), stage="fixture")
            return False

        key = object_key(identifier, self.key_prefix)
        try:
            result = self.storage.put(self.bucket, key, path)
        except Exception as e:
            self.ledger.record_write_failure(identifier, None, e)
            self.log.write_failed(identifier, str(e), stage="put")
            return False

        if not result.ok:
            self.ledger.record_write_failure(identifier, result.metadata, result.error)
            self.log.write_failed(identifier, str(result.error), stage="put")
            return False

        self.ledger.record_write_success()
        self.log.write_completed(identifier, key=key)
        self.broker.notify(WRITE_COMPLETED, identifier)
        return True
