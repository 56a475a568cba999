"""Typed error model with stable, machine-readable error codes."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum


class ErrorCode(StrEnum):
    """Stable error identifiers used across the directive pipeline."""

    MALFORMED_DIRECTIVE = "E_MALFORMED_DIRECTIVE"
    WORKSPACE = "E_WORKSPACE"
    TOOL_SPAWN = "E_TOOL_SPAWN"
    TOOL_DIAGNOSTIC = "E_TOOL_DIAGNOSTIC"
    CONFIG = "E_CONFIG"


class CmakeLinkError(Exception):
    """Base error class that carries code, optional hint, and context.

    ``message`` is the bare diagnostic body. ``str()`` appends the hint and
    context for human-facing output.
    """

    code: str
    message: str
    hint: str | None
    context: Mapping[str, str]

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code.value
        self.message = message
        self.hint = hint
        self.context = dict(context or {})

    def __str__(self) -> str:
        parts = [self.message]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        if self.context:
            for k, v in self.context.items():
                if v:
                    parts.append(f"  {k}: {v}")
        return "\n".join(parts)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "code": self.code,
            "message": self.message,
            "context": dict(self.context),
        }
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


class MalformedDirectiveError(CmakeLinkError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(
            message, code=ErrorCode.MALFORMED_DIRECTIVE, hint=hint, context=context
        )


class WorkspaceError(CmakeLinkError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.WORKSPACE, hint=hint, context=context)


class ToolSpawnError(CmakeLinkError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.TOOL_SPAWN, hint=hint, context=context)


class ToolDiagnosticError(CmakeLinkError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.TOOL_DIAGNOSTIC, hint=hint, context=context)


class ConfigError(CmakeLinkError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.CONFIG, hint=hint, context=context)


class StreamUnavailableWarning(UserWarning):
    """A tool's stderr stream could not be opened; the step is assumed to have succeeded."""


__all__ = [
    "CmakeLinkError",
    "ConfigError",
    "ErrorCode",
    "MalformedDirectiveError",
    "StreamUnavailableWarning",
    "ToolDiagnosticError",
    "ToolSpawnError",
    "WorkspaceError",
]
