"""Processor configuration.

Everything the pipeline would otherwise read from process-wide state (home
directory, working directory, tool names) is resolved here once and threaded
into the pipeline as a value.
"""

from __future__ import annotations

import os
import shlex
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, cast

from cmakelink.errors import ConfigError

SuccessPolicy = Literal["stderr", "exit-status"]

SUCCESS_POLICIES: tuple[SuccessPolicy, ...] = ("stderr", "exit-status")
DEFAULT_BUILD_SUBDIR = "cmake-build"
DEFAULT_CACHE_DIRNAME = ".cmakelink-builds"
DEFAULT_CONFIGURE_COMMAND = ("cmake",)
DEFAULT_BUILD_COMMAND = ("make",)

ENV_CACHE_ROOT = "CMAKELINK_CACHE_ROOT"
ENV_CONFIGURE_COMMAND = "CMAKELINK_CONFIGURE_COMMAND"
ENV_BUILD_COMMAND = "CMAKELINK_BUILD_COMMAND"
ENV_SUCCESS_POLICY = "CMAKELINK_SUCCESS_POLICY"


@dataclass(frozen=True, slots=True)
class ProcessorConfig:
    cache_root: Path
    working_dir: Path
    build_subdir: str = DEFAULT_BUILD_SUBDIR
    configure_command: tuple[str, ...] = DEFAULT_CONFIGURE_COMMAND
    build_command: tuple[str, ...] = DEFAULT_BUILD_COMMAND
    env: Mapping[str, str] = field(default_factory=dict)
    success_policy: SuccessPolicy = "stderr"

    def __post_init__(self) -> None:
        if not self.configure_command or not self.configure_command[0]:
            raise ConfigError("configure command must not be empty")
        if not self.build_command or not self.build_command[0]:
            raise ConfigError("build command must not be empty")
        if self.success_policy not in SUCCESS_POLICIES:
            raise ConfigError(
                f"unknown success policy `{self.success_policy}`",
                hint=f"Use one of: {', '.join(SUCCESS_POLICIES)}.",
            )
        if not self.build_subdir or Path(self.build_subdir).is_absolute():
            raise ConfigError(
                "build subdirectory must be a relative path",
                context={"build_subdir": self.build_subdir},
            )

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        working_dir: str | Path | None = None,
    ) -> ProcessorConfig:
        """Build a config from ``CMAKELINK_*`` variables, falling back to defaults."""
        environ = os.environ if environ is None else environ

        cache_root_value = environ.get(ENV_CACHE_ROOT)
        if cache_root_value:
            cache_root = Path(cache_root_value).expanduser()
        else:
            cache_root = default_cache_root()

        configure_command = _command_from_env(
            environ, ENV_CONFIGURE_COMMAND, DEFAULT_CONFIGURE_COMMAND
        )
        build_command = _command_from_env(environ, ENV_BUILD_COMMAND, DEFAULT_BUILD_COMMAND)
        success_policy = environ.get(ENV_SUCCESS_POLICY) or "stderr"

        return cls(
            cache_root=cache_root,
            working_dir=Path(working_dir) if working_dir is not None else current_working_dir(),
            configure_command=configure_command,
            build_command=build_command,
            success_policy=cast(SuccessPolicy, success_policy),
        )


def default_cache_root() -> Path:
    try:
        home = Path.home()
    except (KeyError, RuntimeError) as exc:
        raise ConfigError(
            "unable to get your home directory",
            hint=f"Set {ENV_CACHE_ROOT} to choose the output cache root explicitly.",
        ) from exc
    return home / DEFAULT_CACHE_DIRNAME


def current_working_dir() -> Path:
    try:
        return Path.cwd()
    except OSError as exc:
        raise ConfigError(
            "unable to determine the current working directory",
            hint="Pass an explicit working directory (--cwd).",
            context={"error": str(exc)},
        ) from exc


def _command_from_env(
    environ: Mapping[str, str],
    key: str,
    default: tuple[str, ...],
) -> tuple[str, ...]:
    raw = environ.get(key)
    if raw is None:
        return default
    try:
        command = tuple(shlex.split(raw))
    except ValueError as exc:
        raise ConfigError(
            f"{key} is not a valid command line",
            context={key: raw, "error": str(exc)},
        ) from exc
    if not command:
        raise ConfigError(f"{key} must not be empty")
    return command
