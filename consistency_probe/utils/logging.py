"""
Structured logging configuration for the consistency probe.

Uses structlog for structured, contextual logging.
"""

import logging
import sys
from typing import Any

import structlog


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    include_timestamp: bool = True,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: If True, output logs as JSON
        include_timestamp: If True, include timestamp in logs
    """
    # Logs go to stderr so stdout only carries the final counts
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper()),
        force=True,
    )

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class ProbeLogger:
    """
    Specialized logger for probe progress events.

    Provides convenience methods for the logging patterns shared by the
    write and read workers. Progress output is advisory; failure detail
    belongs in the report.

    Usage:
        logger = ProbeLogger(worker="write")
        logger.write_completed(identifier)
        logger.read_failed(identifier, error)
    """

    def __init__(self, worker: str = "probe"):
        """
        Initialize the probe logger.

        Args:
            worker: Name bound to every log line ("write", "read" or "runner")
        """
        self.worker = worker
        self._logger = structlog.get_logger().bind(worker=worker)

    # Run lifecycle events
    def run_started(self, start: int, count: int, **kwargs: Any) -> None:
        """Log run start."""
        self._logger.info("run_started", start=start, count=count, **kwargs)

    def worker_started(self, **kwargs: Any) -> None:
        self._logger.info("worker_started", **kwargs)

    def worker_ended(self, **kwargs: Any) -> None:
        self._logger.info("worker_ended", **kwargs)

    def worker_aborted(self, reason: str, **kwargs: Any) -> None:
        self._logger.warning("worker_aborted", reason=reason, **kwargs)

    def run_completed(
        self,
        write_failures: int,
        read_failures: int,
        elapsed_seconds: float,
        **kwargs: Any,
    ) -> None:
        """Log run completion."""
        self._logger.info(
            "run_completed",
            write_failures=write_failures,
            read_failures=read_failures,
            elapsed_seconds=f"{elapsed_seconds:.2f}",
            **kwargs,
        )

    # Per-object events
    def write_completed(self, identifier: int, **kwargs: Any) -> None:
        self._logger.debug("write_completed", identifier=identifier, **kwargs)

    def write_failed(self, identifier: int, error: str, **kwargs: Any) -> None:
        self._logger.debug("write_failed", identifier=identifier, error=error, **kwargs)

    def read_completed(self, identifier: int, **kwargs: Any) -> None:
        self._logger.debug("read_completed", identifier=identifier, **kwargs)

    def read_failed(self, identifier: int, error: str, **kwargs: Any) -> None:
        self._logger.debug("read_failed", identifier=identifier, error=error, **kwargs)
