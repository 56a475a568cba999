"""Structured logging for directive evaluation.

Every record has the same keys (``level``, ``operation``, ``unit``, ``step``,
``tool``, ``message``) plus an optional ``extra`` payload, so the JSON-lines
dump can be filtered without knowing which stage wrote a record.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from cmakelink.errors import CmakeLinkError
from cmakelink.models import ProcessOutcome

STDOUT_EXCERPT = 2000


@dataclass(slots=True)
class StructuredLogger:
    records: list[dict[str, Any]] = field(default_factory=list)

    def log(
        self,
        *,
        operation: str,
        unit: str | None,
        message: str,
        step: str | None = None,
        tool: str | None = None,
        level: str = "info",
        extra: dict[str, Any] | None = None,
    ) -> None:
        record: dict[str, Any] = {
            "level": level,
            "operation": operation,
            "unit": unit,
            "step": step,
            "tool": tool,
            "message": message,
        }
        if extra is not None:
            record["extra"] = extra
        self.records.append(record)

    def log_outcome(self, outcome: ProcessOutcome, *, unit: str) -> None:
        """Record one tool invocation, graded by how it ended."""
        if outcome.failed_to_spawn:
            level, message = "error", "tool could not be started"
        elif outcome.stderr_text:
            level, message = "warning", "tool wrote to stderr"
        elif not outcome.stream_available:
            level, message = "warning", "stderr stream unavailable"
        else:
            level, message = "info", "tool finished"
        self.log(
            operation="invoke",
            unit=unit,
            step=outcome.step,
            tool=outcome.tool,
            message=message,
            level=level,
            extra={
                "command": list(outcome.command),
                "returncode": outcome.returncode,
                "stdout": outcome.stdout_text[:STDOUT_EXCERPT],
            },
        )

    def log_failure(self, error: CmakeLinkError, *, unit: str) -> None:
        self.log(
            operation="process",
            unit=unit,
            message="directive failed",
            level="error",
            extra=error.to_dict(),
        )

    def to_json_lines(self, path: str | Path) -> Path:
        return write_json_lines(path, self.records)


def write_json_lines(path: str | Path, records: list[dict[str, Any]]) -> Path:
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    lines = [json.dumps(record, sort_keys=True) for record in records]
    output_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return output_path
