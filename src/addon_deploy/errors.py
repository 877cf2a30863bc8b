"""Terminal failure kinds raised by the deploy pipeline stages."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class PipelineError(RuntimeError):
    """Base class for failures that halt a pipeline run."""

    kind: str = "PipelineError"
    exit_code: int = 1


class BuildFailed(PipelineError):
    """The external build tool did not finish successfully."""

    kind = "BuildFailed"

    def __init__(self, message: str, *, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


class ArtifactMissing(PipelineError):
    """No file in the output directory matched the artifact pattern."""

    kind = "ArtifactMissing"

    def __init__(self, expected_name: str, output_dir: Path) -> None:
        super().__init__(
            f"No build artifact found in {output_dir}; expected {expected_name}. "
            "Check that the build produced a library."
        )
        self.expected_name = expected_name
        self.output_dir = output_dir


class AmbiguousArtifacts(PipelineError):
    """More than one file matched, so the artifact to deploy is unclear."""

    kind = "AmbiguousArtifacts"

    def __init__(self, names: Sequence[str], output_dir: Path) -> None:
        listed = "\n".join(f"  - {name}" for name in names)
        super().__init__(
            f"Found {len(names)} matching artifacts in {output_dir}:\n{listed}\n"
            "Remove the extra files manually and run again."
        )
        self.names = tuple(names)
        self.output_dir = output_dir


class DeployFailed(PipelineError):
    """The destination directory could not be prepared or written."""

    kind = "DeployFailed"

    def __init__(self, message: str, *, destination_dir: Path) -> None:
        super().__init__(
            f"{message}\nCheck that {destination_dir} exists and that you have write permission to it."
        )
        self.destination_dir = destination_dir
