"""Diagnostic collection and translation of tool outcomes into diagnostics."""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from pathlib import Path

from cmakelink.config import SuccessPolicy
from cmakelink.errors import StreamUnavailableWarning, ToolDiagnosticError, ToolSpawnError
from cmakelink.models import Diagnostic, ProcessOutcome, Span
from cmakelink.observability import write_json_lines


@dataclass(slots=True)
class DiagnosticSink:
    """Collects span-anchored diagnostics reported while expanding directives."""

    records: list[Diagnostic] = field(default_factory=list)

    def error(self, span: Span, message: str) -> None:
        self.records.append(Diagnostic(severity="error", message=message, span=span))

    def warning(self, span: Span, message: str) -> None:
        self.records.append(Diagnostic(severity="warning", message=message, span=span))

    @property
    def errors(self) -> list[Diagnostic]:
        return [record for record in self.records if record.severity == "error"]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [record for record in self.records if record.severity == "warning"]

    @property
    def has_errors(self) -> bool:
        return any(record.severity == "error" for record in self.records)

    def to_json_lines(self, path: str | Path) -> Path:
        return write_json_lines(
            path,
            [
                {"severity": record.severity, "message": record.message, "span": str(record.span)}
                for record in self.records
            ],
        )


def translate_outcome(
    outcome: ProcessOutcome,
    *,
    span: Span,
    sink: DiagnosticSink,
    policy: SuccessPolicy = "stderr",
) -> None:
    """Raise for a failed step; report non-fatal conditions to *sink*.

    Under the ``stderr`` policy any stderr output is fatal and the exit
    status is ignored. Under ``exit-status`` only a non-zero exit is fatal
    and stderr from a successful run becomes a warning.
    """
    context = {
        "step": outcome.step,
        "command": " ".join(outcome.command),
    }
    if outcome.failed_to_spawn:
        raise ToolSpawnError(outcome.stderr_text, context=context)

    if not outcome.stream_available:
        message = f"could not open stderr pipe to {outcome.tool}"
        warnings.warn(message, StreamUnavailableWarning, stacklevel=2)
        sink.warning(span, message)

    if policy == "exit-status":
        if outcome.returncode not in (None, 0):
            message = outcome.stderr_text or (
                f"`{outcome.tool}` exited with status {outcome.returncode}"
            )
            raise ToolDiagnosticError(
                message, context={**context, "returncode": str(outcome.returncode)}
            )
        if outcome.stderr_text:
            sink.warning(span, outcome.stderr_text)
        return

    if outcome.stderr_text:
        raise ToolDiagnosticError(outcome.stderr_text, context=context)
