"""
Core probe module.

Provides:
- Outcome ledger and run range
- Local fixture management
- Write and read workers
- Runner orchestrating both workers
- Final report
"""

from consistency_probe.core.fixtures import FixtureStore, build_payload
from consistency_probe.core.ledger import OutcomeRecord, ResultLedger, RunRange
from consistency_probe.core.reader import ReadWorker
from consistency_probe.core.report import ProbeReport, write_report
from consistency_probe.core.runner import ProbeRunError, ProbeRunner
from consistency_probe.core.writer import WriteWorker

__all__ = [
    "FixtureStore",
    "build_payload",
    "OutcomeRecord",
    "ResultLedger",
    "RunRange",
    "ReadWorker",
    "ProbeReport",
    "write_report",
    "ProbeRunError",
    "ProbeRunner",
    "WriteWorker",
]
