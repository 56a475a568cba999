"""Core typed dataclasses passed between pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

Severity = Literal["error", "warning"]
Step = Literal["configure", "build"]


@dataclass(frozen=True, slots=True)
class Span:
    """Location of a directive occurrence in its host source."""

    source: str = "<directive>"
    line: int = 1
    column: int = 1

    def __str__(self) -> str:
        return f"{self.source}:{self.line}:{self.column}"

    @classmethod
    def parse(cls, text: str) -> Span:
        """Parse ``source[:line[:column]]``; the source part may itself contain colons."""
        parts = text.rsplit(":", 2)
        numbers: list[int] = []
        while len(parts) > 1 and parts[-1].isdigit():
            numbers.insert(0, int(parts.pop()))
        source = ":".join(parts)
        if len(numbers) == 2:
            return cls(source=source, line=numbers[0], column=numbers[1])
        if len(numbers) == 1:
            return cls(source=source, line=numbers[0])
        return cls(source=source)


@dataclass(frozen=True, slots=True)
class BuildDirective:
    source_path: Path
    library_name: str | None = None


@dataclass(frozen=True, slots=True)
class BuildWorkspace:
    build_dir: Path
    output_dir: Path


@dataclass(frozen=True, slots=True)
class ProcessOutcome:
    """Result of one external tool invocation."""

    step: Step
    command: tuple[str, ...]
    stderr_text: str = ""
    failed_to_spawn: bool = False
    stream_available: bool = True
    returncode: int | None = None
    stdout_text: str = ""

    @property
    def tool(self) -> str:
        return self.command[0] if self.command else ""


@dataclass(frozen=True, slots=True)
class LinkageDescriptor:
    """Where to find, and what to name, the built library.

    A descriptor without a library name is empty: it carries no search path
    either and splices to nothing.
    """

    search_path: Path | None = None
    library_name: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.library_name is None

    def link_args(self) -> tuple[str, ...]:
        if self.library_name is None or self.search_path is None:
            return ()
        return (f"-L{self.search_path}", f"-l{self.library_name}")

    def extension_kwargs(self) -> dict[str, list[str]]:
        """Keyword arguments for ``setuptools.Extension``."""
        if self.library_name is None or self.search_path is None:
            return {}
        return {
            "library_dirs": [self.search_path.as_posix()],
            "libraries": [self.library_name],
        }

    def to_dict(self) -> dict[str, object]:
        return {
            "search_path": str(self.search_path) if self.search_path is not None else None,
            "library_name": self.library_name,
            "link_args": list(self.link_args()),
        }


@dataclass(frozen=True, slots=True)
class Diagnostic:
    severity: Severity
    message: str
    span: Span

    def render(self) -> str:
        return f"{self.span}: {self.severity}: {self.message}"
