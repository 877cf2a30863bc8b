"""Copy the validated artifact into the host application's addon folder."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from addon_deploy.artifacts.filesystem import Filesystem, LocalFilesystem
from addon_deploy.artifacts.locate import SelectedArtifact
from addon_deploy.errors import DeployFailed

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DeployResult:
    """Where the artifact ended up and what was written."""

    source_path: Path
    destination_path: Path
    size_bytes: int
    sha256: str
    created_destination_dir: bool
    replaced_existing: bool


def ensure_destination_dir(
    destination_dir: Path,
    fs: Filesystem | None = None,
    logger: logging.Logger | None = None,
) -> bool:
    """Create the destination directory if needed; return True when it was created."""

    effective_logger = logger or LOGGER
    effective_fs = fs or LocalFilesystem()
    if effective_fs.is_dir(destination_dir):
        return False
    try:
        effective_fs.make_dirs(destination_dir)
    except OSError as exc:
        effective_logger.error("deploy.mkdir_failed destination_dir=%s error=%s", destination_dir, exc)
        raise DeployFailed(
            f"Could not create destination directory {destination_dir}: {exc}",
            destination_dir=destination_dir,
        ) from exc
    effective_logger.info("deploy.created_destination_dir path=%s", destination_dir)
    return True


def deploy_artifact(
    artifact: SelectedArtifact,
    destination_dir: Path,
    fs: Filesystem | None = None,
    logger: logging.Logger | None = None,
) -> DeployResult:
    """Copy ``artifact`` into ``destination_dir`` under its own name and verify the copy.

    An existing file with the same name is overwritten. Nothing else in the
    destination directory is touched.
    """

    effective_logger = logger or LOGGER
    effective_fs = fs or LocalFilesystem()

    created = ensure_destination_dir(destination_dir, fs=effective_fs, logger=effective_logger)
    destination_path = destination_dir / artifact.name
    replaced = effective_fs.is_file(destination_path)

    try:
        effective_fs.copy_file(artifact.path, destination_path)
        source_digest = effective_fs.sha256(artifact.path)
        source_size = effective_fs.size(artifact.path)
        copied_digest = effective_fs.sha256(destination_path)
        copied_size = effective_fs.size(destination_path)
    except OSError as exc:
        effective_logger.error(
            "deploy.copy_failed source=%s destination=%s error=%s",
            artifact.path,
            destination_path,
            exc,
        )
        raise DeployFailed(
            f"Could not copy {artifact.name} to {destination_dir}: {exc}",
            destination_dir=destination_dir,
        ) from exc

    if copied_digest != source_digest or copied_size != source_size:
        effective_logger.error(
            "deploy.verify_failed destination=%s source_sha256=%s copied_sha256=%s",
            destination_path,
            source_digest,
            copied_digest,
        )
        raise DeployFailed(
            f"Copied file {destination_path} does not match the build artifact.",
            destination_dir=destination_dir,
        )

    effective_logger.info(
        "deploy.copied source=%s destination=%s bytes=%s replaced=%s",
        artifact.path,
        destination_path,
        source_size,
        replaced,
    )
    return DeployResult(
        source_path=artifact.path,
        destination_path=destination_path,
        size_bytes=source_size,
        sha256=source_digest,
        created_destination_dir=created,
        replaced_existing=replaced,
    )
