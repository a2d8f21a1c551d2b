"""
Final run report: failure counts plus per-failure detail.

Building and rendering are pure functions of the ledger state, so the same
ledger always yields byte-identical output.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from consistency_probe.core.ledger import OutcomeRecord, ResultLedger, RunRange

_SEPARATOR = "-" * 41


def _to_json(value: Any) -> str:
    return json.dumps(value, sort_keys=True, default=str)


@dataclass(frozen=True)
class ProbeReport:
    """Snapshot of a finished run."""

    run_range: RunRange
    write_failures: tuple[OutcomeRecord, ...] = ()
    read_failures: tuple[OutcomeRecord, ...] = ()
    writes_succeeded: int = 0
    reads_succeeded: int = 0
    events: tuple[tuple[str, int], ...] | None = None

    @classmethod
    def from_ledger(
        cls,
        ledger: ResultLedger,
        run_range: RunRange,
        events: list[tuple[str, int]] | None = None,
    ) -> "ProbeReport":
        return cls(
            run_range=run_range,
            write_failures=tuple(ledger.write_failures),
            read_failures=tuple(ledger.read_failures),
            writes_succeeded=ledger.writes_succeeded,
            reads_succeeded=ledger.reads_succeeded,
            events=tuple(events) if events is not None else None,
        )

    @property
    def write_failure_count(self) -> int:
        return len(self.write_failures)

    @property
    def read_failure_count(self) -> int:
        return len(self.read_failures)

    @property
    def failed_write_ids(self) -> list[int]:
        return [r.identifier for r in self.write_failures]

    @property
    def failed_read_ids(self) -> list[int]:
        return [r.identifier for r in self.read_failures]

    def summary_lines(self) -> list[str]:
        return [
            f"Write errors occured: {self.write_failure_count}",
            f"Read errors occured: {self.read_failure_count}",
        ]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "range": {"start": self.run_range.start, "count": self.run_range.count},
            "write_failure_count": self.write_failure_count,
            "read_failure_count": self.read_failure_count,
            "writes_succeeded": self.writes_succeeded,
            "reads_succeeded": self.reads_succeeded,
            "write_failures": [r.to_dict() for r in self.write_failures],
            "read_failures": [r.to_dict() for r in self.read_failures],
        }
        if self.events is not None:
            data["events"] = [{"event": name, "payload": p} for name, p in self.events]
        return data

    def render_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True, indent=2, default=str) + "\n"

    def render_text(self) -> str:
        lines = self.summary_lines()
        for title, records in (
            ("Write errors:", self.write_failures),
            ("Read errors:", self.read_failures),
        ):
            lines += [_SEPARATOR, title, _SEPARATOR]
            for record in records:
                entry = record.to_dict()
                lines += [
                    f"Identifier: {record.identifier}",
                    "Response: ",
                    _to_json(entry["response"]),
                    "Exception: ",
                    _to_json(entry["error"]),
                ]
        if self.events is not None:
            lines += [_SEPARATOR, "Events:", _SEPARATOR]
            lines += [f"{name} {payload}" for name, payload in self.events]
        return "\n".join(lines) + "\n"

    def render(self, fmt: str = "text") -> str:
        if fmt == "json":
            return self.render_json()
        if fmt == "text":
            return self.render_text()
        raise ValueError(f"Unknown report format: {fmt}")


def write_report(report: ProbeReport, path: Path, fmt: str = "text") -> Path:
    """Render report in fmt and write it to path, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(report.render(fmt), encoding="utf-8")
    return path
