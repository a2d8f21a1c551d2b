"""
Probe runner: wires the broker, ledger and both workers, and runs them.
"""

import threading
import time
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any, Protocol

import structlog

from consistency_probe.core.fixtures import FixtureStore
from consistency_probe.core.ledger import ResultLedger, RunRange
from consistency_probe.core.reader import ReadWorker
from consistency_probe.core.report import ProbeReport
from consistency_probe.core.writer import WriteWorker
from consistency_probe.events.broker import EventBroker
from consistency_probe.events.listeners import EventRecorder
from consistency_probe.storage.protocol import StorageClient
from consistency_probe.utils.logging import ProbeLogger

if TYPE_CHECKING:
    from consistency_probe.config.models import ProbeConfig

logger = structlog.get_logger()


class ProbeRunError(Exception):
    """Raised when a worker thread dies with an unexpected exception."""

    pass


class Listener(Protocol):
    def attach(self, broker: EventBroker) -> None: ...


class ProbeRunner:
    """
    Runs one read-after-write probe.

    Two threads share a single EventBroker and ResultLedger:
    - the read thread subscribes the ReadWorker (and any extra listeners),
      signals readiness, then blocks until ``write-finished``
    - the write thread waits for readiness, then writes every identifier

    Both threads are joined before the report is built. The readiness
    handshake guarantees no ``write-completed`` is published before the
    reader has subscribed.

    Usage:
        runner = ProbeRunner.from_config(config, storage)
        report = runner.run()
    """

    def __init__(
        self,
        run_range: RunRange,
        storage: StorageClient,
        fixtures: FixtureStore,
        bucket: str,
        key_prefix: str = "",
        verify_content: bool = True,
        listeners: Sequence[Listener] = (),
        record_events: bool = False,
    ):
        """
        Initialize the runner.

        Args:
            run_range: Identifiers to probe
            storage: Storage client shared by both workers
            fixtures: Local fixture directories
            bucket: Target bucket
            key_prefix: Optional key prefix
            verify_content: Compare read content with the written payload
            listeners: Extra broker subscribers, attached after the reader
            record_events: Capture the event sequence into the report
        """
        self.run_range = run_range
        self.storage = storage
        self.fixtures = fixtures
        self.bucket = bucket
        self.key_prefix = key_prefix
        self.verify_content = verify_content
        self.listeners = list(listeners)
        self.record_events = record_events

    @classmethod
    def from_config(
        cls,
        config: "ProbeConfig",
        storage: StorageClient,
        listeners: Sequence[Listener] = (),
        record_events: bool = False,
    ) -> "ProbeRunner":
        return cls(
            run_range=config.range.to_run_range(),
            storage=storage,
            fixtures=FixtureStore(
                input_dir=config.fixtures.input_dir,
                output_dir=config.fixtures.output_dir,
                payload_size_bytes=config.fixtures.payload_size_bytes,
            ),
            bucket=config.storage.bucket,
            key_prefix=config.storage.key_prefix,
            verify_content=config.fixtures.verify_content,
            listeners=listeners,
            record_events=record_events,
        )

    def run(self) -> ProbeReport:
        """
        Run both workers to completion and build the report.

        Raises:
            ProbeRunError: If either worker thread raised unexpectedly
        """
        self.fixtures.ensure_directories()

        broker = EventBroker()
        ledger = ResultLedger()
        ready = threading.Event()
        setup_failed = threading.Event()
        recorder = EventRecorder() if self.record_events else None

        reader = ReadWorker(
            storage=self.storage,
            fixtures=self.fixtures,
            ledger=ledger,
            bucket=self.bucket,
            key_prefix=self.key_prefix,
            verify_content=self.verify_content,
        )
        writer = WriteWorker(
            run_range=self.run_range,
            storage=self.storage,
            fixtures=self.fixtures,
            broker=broker,
            ledger=ledger,
            bucket=self.bucket,
            key_prefix=self.key_prefix,
            ready=ready,
            abort=setup_failed,
        )

        def read_main() -> None:
            try:
                reader.attach(broker)
                for listener in self.listeners:
                    listener.attach(broker)
                if recorder is not None:
                    recorder.attach(broker)
            except Exception:
                setup_failed.set()
                raise
            finally:
                # Writer is released either way; on setup failure it writes nothing
                ready.set()
            reader.run()

        errors: dict[str, BaseException] = {}
        threads = [
            threading.Thread(target=self._guard("read", read_main, errors), name="probe-read"),
            threading.Thread(target=self._guard("write", writer.run, errors), name="probe-write"),
        ]

        log = ProbeLogger(worker="runner")
        log.run_started(self.run_range.start, self.run_range.count, bucket=self.bucket)
        start_time = time.time()

        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        elapsed = time.time() - start_time

        if errors:
            worker, exc = next(iter(errors.items()))
            raise ProbeRunError(f"{worker} worker failed: {exc}") from exc

        report = ProbeReport.from_ledger(
            ledger,
            self.run_range,
            events=recorder.events if recorder is not None else None,
        )

        log.run_completed(
            report.write_failure_count,
            report.read_failure_count,
            elapsed,
            broker=broker.stats,
        )
        return report

    @staticmethod
    def _guard(
        name: str,
        target: Callable[[], Any],
        errors: dict[str, BaseException],
    ) -> Callable[[], None]:
        def run() -> None:
            try:
                target()
            except Exception as e:
                logger.exception("probe_worker_crashed", worker=name, error=str(e))
                errors[name] = e

        return run
