"""External configure/build tool invocation."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path

from cmakelink.config import ProcessorConfig
from cmakelink.models import BuildDirective, BuildWorkspace, ProcessOutcome, Step

LIBRARY_OUTPUT_FLAG = "-DCMAKE_LIBRARY_OUTPUT_DIRECTORY:PATH={}"
ARCHIVE_OUTPUT_FLAG = "-DCMAKE_ARCHIVE_OUTPUT_DIRECTORY:PATH={}"


@dataclass(slots=True)
class ExternalBuildInvoker:
    config: ProcessorConfig

    def configure_command(
        self, directive: BuildDirective, workspace: BuildWorkspace
    ) -> tuple[str, ...]:
        return (
            *self.config.configure_command,
            LIBRARY_OUTPUT_FLAG.format(workspace.output_dir),
            ARCHIVE_OUTPUT_FLAG.format(workspace.output_dir),
            str(directive.source_path),
        )

    def build_command(self, directive: BuildDirective) -> tuple[str, ...]:
        if directive.library_name is None:
            return tuple(self.config.build_command)
        return (*self.config.build_command, directive.library_name)

    def configure(self, directive: BuildDirective, workspace: BuildWorkspace) -> ProcessOutcome:
        return self.run(
            "configure",
            self.configure_command(directive, workspace),
            cwd=workspace.build_dir,
        )

    def build(self, directive: BuildDirective, workspace: BuildWorkspace) -> ProcessOutcome:
        return self.run("build", self.build_command(directive), cwd=workspace.build_dir)

    def run(self, step: Step, command: tuple[str, ...], *, cwd: Path) -> ProcessOutcome:
        """Spawn *command*, wait for it and drain both output streams."""
        env = dict(os.environ)
        env.update(self.config.env)

        try:
            process = subprocess.Popen(
                list(command),
                cwd=str(cwd),
                env=env,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as exc:
            return ProcessOutcome(
                step=step,
                command=command,
                stderr_text=str(exc),
                failed_to_spawn=True,
            )

        stream_available = process.stderr is not None
        stdout, stderr = process.communicate()
        return ProcessOutcome(
            step=step,
            command=command,
            stderr_text=_decode(stderr),
            stream_available=stream_available,
            returncode=process.returncode,
            stdout_text=_decode(stdout),
        )


def _decode(data: bytes | None) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")
