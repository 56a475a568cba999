"""Build workspace resolution.

Each directive gets a build directory next to its sources and an output
directory under the cache root keyed by the compilation unit. Both persist
between runs so the external toolchain can build incrementally.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from cmakelink.config import ProcessorConfig
from cmakelink.errors import WorkspaceError
from cmakelink.models import BuildDirective, BuildWorkspace

DIRECTORY_MODE = 0o700


@dataclass(slots=True)
class WorkspaceResolver:
    config: ProcessorConfig

    def absolute_source(self, directive: BuildDirective) -> BuildDirective:
        source_path = directive.source_path
        if not source_path.is_absolute():
            source_path = self.config.working_dir / source_path
        return BuildDirective(source_path=source_path, library_name=directive.library_name)

    def resolve(self, directive: BuildDirective, *, unit: str) -> BuildWorkspace:
        """Return the workspace for an absolute *directive*, creating directories as needed."""
        if not directive.source_path.is_absolute():
            directive = self.absolute_source(directive)
        try:
            source_exists = directive.source_path.is_dir()
        except OSError as exc:
            raise WorkspaceError(
                str(exc), context={"source_path": str(directive.source_path)}
            ) from exc
        if not source_exists:
            raise WorkspaceError(
                f"source directory `{directive.source_path}` does not exist",
                context={"source_path": str(directive.source_path)},
            )

        workspace = BuildWorkspace(
            build_dir=directive.source_path / self.config.build_subdir,
            output_dir=self.config.cache_root / _unit_component(unit),
        )
        ensure_directory(workspace.build_dir)
        ensure_directory(workspace.output_dir)
        return workspace


def ensure_directory(path: Path) -> Path:
    try:
        path.mkdir(mode=DIRECTORY_MODE, parents=True, exist_ok=True)
    except OSError as exc:
        raise WorkspaceError(str(exc), context={"path": str(path)}) from exc
    return path


def _unit_component(unit: str) -> str:
    if not unit or unit in {".", ".."} or "/" in unit or "\\" in unit or "\x00" in unit:
        raise WorkspaceError(
            f"invalid compilation unit identifier `{unit}`",
            hint="The unit identifier must be a single, non-empty path component.",
        )
    return unit
