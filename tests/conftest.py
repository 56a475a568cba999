"""Shared test fixtures."""

from __future__ import annotations

import shlex
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import pytest

from cmakelink.config import ProcessorConfig


@dataclass(frozen=True, slots=True)
class ToolStub:
    """An executable shell script standing in for cmake or make."""

    path: Path

    @property
    def invoked(self) -> bool:
        return self.path.with_suffix(".args").exists()

    def args(self) -> list[str]:
        return self.path.with_suffix(".args").read_text(encoding="utf-8").splitlines()

    def cwd(self) -> Path:
        return Path(self.path.with_suffix(".cwd").read_text(encoding="utf-8").strip())

    def env(self) -> str:
        return self.path.with_suffix(".env").read_text(encoding="utf-8")


MakeTool = Callable[..., ToolStub]


@pytest.fixture
def make_tool(tmp_path: Path) -> MakeTool:
    tools_dir = tmp_path / "tools"
    tools_dir.mkdir()

    def _make(name: str, *, stderr: str = "", stdout: str = "", exit_code: int = 0) -> ToolStub:
        path = tools_dir / name
        log = shlex.quote(str(path))
        path.write_text(
            "#!/bin/sh\n"
            f"pwd -P > {log}.cwd\n"
            f": > {log}.args\n"
            f'for arg in "$@"; do printf \'%s\\n\' "$arg" >> {log}.args; done\n'
            f"env > {log}.env\n"
            f"printf '%s' {shlex.quote(stdout)}\n"
            f"printf '%s' {shlex.quote(stderr)} >&2\n"
            f"exit {exit_code}\n",
            encoding="utf-8",
        )
        path.chmod(0o755)
        return ToolStub(path=path)

    return _make


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    path = tmp_path / "proj"
    path.mkdir()
    (path / "CMakeLists.txt").write_text("project(proj C)\n", encoding="utf-8")
    return path


@pytest.fixture
def cache_root(tmp_path: Path) -> Path:
    return tmp_path / "cache"


MakeConfig = Callable[..., ProcessorConfig]


@pytest.fixture
def make_config(tmp_path: Path, cache_root: Path) -> MakeConfig:
    def _make(configure: ToolStub, build: ToolStub, **overrides: object) -> ProcessorConfig:
        fields: dict[str, object] = {
            "cache_root": cache_root,
            "working_dir": tmp_path,
            "configure_command": (str(configure.path),),
            "build_command": (str(build.path),),
        }
        fields.update(overrides)
        return ProcessorConfig(**fields)  # type: ignore[arg-type]

    return _make
