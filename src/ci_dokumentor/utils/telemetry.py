"""Local run log: one JSON line per generate/migrate invocation.

Disable with ``CI_DOKUMENTOR_TELEMETRY=0``. Records never leave the machine.
"""

from __future__ import annotations

import json
import os
import time
from dataclasses import dataclass, field
from importlib import resources
from typing import Any, Dict, Iterable, Iterator, Optional

import jsonschema

from ci_dokumentor.settings import RuntimeSettings

_DISABLE_VALUES = {"0", "false", "no", "off"}

_RUN_VALIDATOR: Optional[jsonschema.Draft202012Validator] = None


def telemetry_enabled() -> bool:
    return os.getenv("CI_DOKUMENTOR_TELEMETRY", "1").lower() not in _DISABLE_VALUES


@dataclass(frozen=True)
class RunRecord:
    """Outcome of one command run against one destination."""

    command: str
    outcome: str
    destination: str
    duration_ms: float
    sections: int = 0
    details: Dict[str, Any] = field(default_factory=dict)
    error_code: Optional[str] = None
    ts: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {
            "ts": self.ts,
            "command": self.command,
            "outcome": self.outcome,
            "destination": self.destination,
            "durationMs": self.duration_ms,
            "sections": self.sections,
            "details": dict(self.details),
        }
        if self.error_code:
            record["errorCode"] = self.error_code
        return record


def record_run(settings: RuntimeSettings, run: RunRecord) -> None:
    """Append ``run`` to the log; invalid records raise ``jsonschema.ValidationError``."""

    if not telemetry_enabled():
        return
    record = run.to_dict()
    _run_validator().validate(record)
    log_path = settings.telemetry_log
    log_path.parent.mkdir(parents=True, exist_ok=True)
    with log_path.open("a", encoding="utf-8") as fh:
        fh.write(json.dumps(record, ensure_ascii=False) + "\n")


def iter_runs(settings: RuntimeSettings) -> Iterator[Dict[str, Any]]:
    log_path = settings.telemetry_log
    if not log_path.exists():
        return
    with log_path.open("r", encoding="utf-8") as fh:
        for line in fh:
            line = line.strip()
            if not line:
                continue
            try:
                yield json.loads(line)
            except json.JSONDecodeError:
                continue


def summarize(runs: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    total = 0
    by_command: Dict[str, int] = {}
    by_outcome: Dict[str, int] = {}
    failures: Dict[str, int] = {}
    sections_written = 0
    for run in runs:
        total += 1
        command = run.get("command", "unknown")
        by_command[command] = by_command.get(command, 0) + 1
        outcome = run.get("outcome", "unknown")
        by_outcome[outcome] = by_outcome.get(outcome, 0) + 1
        if outcome == "failed":
            code = run.get("errorCode", "unknown")
            failures[code] = failures.get(code, 0) + 1
        elif outcome == "written":
            sections_written += int(run.get("sections") or 0)
    return {
        "total": total,
        "by_command": by_command,
        "by_outcome": by_outcome,
        "failures_by_code": failures,
        "sections_written": sections_written,
    }


def clear(settings: RuntimeSettings) -> None:
    log_path = settings.telemetry_log
    if log_path.exists():
        log_path.unlink()


def _run_validator() -> jsonschema.Draft202012Validator:
    global _RUN_VALIDATOR
    if _RUN_VALIDATOR is None:
        schema_resource = resources.files("ci_dokumentor.resources") / "telemetry.schema.json"
        schema = json.loads(schema_resource.read_text(encoding="utf-8"))
        _RUN_VALIDATOR = jsonschema.Draft202012Validator(schema)
    return _RUN_VALIDATOR
