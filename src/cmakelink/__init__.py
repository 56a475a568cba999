"""Build CMake projects from directives and emit the linkage for the result."""

from .config import ProcessorConfig
from .diagnostics import DiagnosticSink
from .directive import Token, parse_directive, parse_directive_text, tokenize_directive
from .errors import (
    CmakeLinkError,
    ConfigError,
    ErrorCode,
    MalformedDirectiveError,
    StreamUnavailableWarning,
    ToolDiagnosticError,
    ToolSpawnError,
    WorkspaceError,
)
from .models import (
    BuildDirective,
    BuildWorkspace,
    Diagnostic,
    LinkageDescriptor,
    ProcessOutcome,
    Span,
)
from .pipeline import DirectiveProcessor

__all__ = [
    "BuildDirective",
    "BuildWorkspace",
    "CmakeLinkError",
    "ConfigError",
    "Diagnostic",
    "DiagnosticSink",
    "DirectiveProcessor",
    "ErrorCode",
    "LinkageDescriptor",
    "MalformedDirectiveError",
    "ProcessOutcome",
    "ProcessorConfig",
    "Span",
    "StreamUnavailableWarning",
    "ToolDiagnosticError",
    "ToolSpawnError",
    "Token",
    "WorkspaceError",
    "parse_directive",
    "parse_directive_text",
    "tokenize_directive",
]
