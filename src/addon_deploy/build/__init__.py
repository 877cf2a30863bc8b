"""Build stage helpers."""

from addon_deploy.build.invoker import (
    BuildResult,
    CommandExecutor,
    CommandResult,
    SubprocessExecutor,
    run_build,
)

__all__ = [
    "BuildResult",
    "CommandExecutor",
    "CommandResult",
    "SubprocessExecutor",
    "run_build",
]
