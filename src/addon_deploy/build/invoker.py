"""Invoke the external release build and surface its exit status."""

from __future__ import annotations

import logging
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Sequence

from addon_deploy.config import BuildConfig
from addon_deploy.errors import BuildFailed

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Terminal status of one external command."""

    returncode: int


class CommandExecutor(Protocol):
    """Runs a command to completion and reports how it ended."""

    def run(self, command: Sequence[str], cwd: Path) -> CommandResult: ...


class SubprocessExecutor:
    """Run commands with the console attached so build output streams live."""

    def run(self, command: Sequence[str], cwd: Path) -> CommandResult:
        completed = subprocess.run(list(command), cwd=cwd, check=False)
        return CommandResult(returncode=completed.returncode)


@dataclass(frozen=True, slots=True)
class BuildResult:
    """Outcome of a release build."""

    command: tuple[str, ...]
    returncode: int
    duration_seconds: float

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def run_build(
    config: BuildConfig,
    project_root: Path,
    executor: CommandExecutor | None = None,
    logger: logging.Logger | None = None,
) -> BuildResult:
    """Run the configured build command in the project root and wait for it.

    Raises ``BuildFailed`` when the tool cannot be started or exits non-zero.
    """

    effective_logger = logger or LOGGER
    effective_executor = executor or SubprocessExecutor()
    command = tuple(config.command)
    rendered = " ".join(command)

    effective_logger.info("build.start command=%s cwd=%s", rendered, project_root)
    started = time.perf_counter()
    try:
        result = effective_executor.run(command, project_root)
    except OSError as exc:
        effective_logger.error("build.launch_failed command=%s error=%s", rendered, exc)
        raise BuildFailed(
            f"Could not start build tool '{command[0]}': {exc}. Is it installed and on PATH?"
        ) from exc
    duration = time.perf_counter() - started

    build_result = BuildResult(command=command, returncode=result.returncode, duration_seconds=duration)
    if not build_result.ok:
        effective_logger.error(
            "build.failed command=%s returncode=%s duration_s=%.1f",
            rendered,
            result.returncode,
            duration,
        )
        raise BuildFailed(
            f"Build failed with exit code {result.returncode}. Check the build output above.",
            returncode=result.returncode,
        )

    effective_logger.info("build.succeeded command=%s duration_s=%.1f", rendered, duration)
    return build_result
