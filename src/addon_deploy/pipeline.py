"""Build, locate and deploy orchestration for one run."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from uuid import uuid4

from addon_deploy.artifacts.filesystem import Filesystem, LocalFilesystem
from addon_deploy.artifacts.locate import SelectedArtifact, locate_artifact
from addon_deploy.build.invoker import BuildResult, CommandExecutor, SubprocessExecutor, run_build
from addon_deploy.config import AppSettings
from addon_deploy.deploy.deployer import DeployResult, deploy_artifact
from addon_deploy.utils.paths import write_json_atomically
from addon_deploy.utils.time_utils import now_utc

LOGGER = logging.getLogger(__name__)

SUMMARY_FILE_NAME = "last_deploy.json"
STAGE_COUNT = 3


@dataclass(frozen=True, slots=True)
class DeployRunOptions:
    """Runtime switches for one pipeline run."""

    skip_build: bool = False
    dry_run: bool = False


@dataclass(frozen=True, slots=True)
class DeployRunResult:
    """Return object for a completed pipeline run."""

    run_id: str
    build: BuildResult | None
    artifact: SelectedArtifact
    deploy: DeployResult | None
    summary_path: Path | None


def _stage(logger: logging.Logger, number: int, message: str) -> None:
    logger.info("[%s/%s] %s", number, STAGE_COUNT, message)


def _build_summary(
    run_id: str,
    started_at: str,
    settings: AppSettings,
    build: BuildResult | None,
    artifact: SelectedArtifact,
    deploy: DeployResult,
) -> dict[str, Any]:
    return {
        "run_id": run_id,
        "started_at": started_at,
        "finished_at": now_utc().isoformat(),
        "project": settings.project.name,
        "build": {
            "command": list(build.command),
            "returncode": build.returncode,
            "duration_seconds": round(build.duration_seconds, 3),
        }
        if build is not None
        else None,
        "artifact": {
            "name": artifact.name,
            "source_path": str(artifact.path),
            "name_matches_expected": artifact.name_matches,
            "expected_name": settings.artifact.expected_name,
        },
        "deploy": {
            "destination_path": str(deploy.destination_path),
            "size_bytes": deploy.size_bytes,
            "sha256": deploy.sha256,
            "created_destination_dir": deploy.created_destination_dir,
            "replaced_existing": deploy.replaced_existing,
        },
    }


def run_deploy_pipeline(
    settings: AppSettings,
    *,
    options: DeployRunOptions | None = None,
    executor: CommandExecutor | None = None,
    fs: Filesystem | None = None,
    logger: logging.Logger | None = None,
) -> DeployRunResult:
    """Run build, locate and deploy in order, stopping at the first failure.

    Each stage raises a ``PipelineError`` subclass on failure and nothing after
    it runs. Effects of completed stages are left in place.
    """

    effective_options = options or DeployRunOptions()
    effective_logger = logger or LOGGER
    effective_fs = fs or LocalFilesystem()
    effective_executor = executor or SubprocessExecutor()

    run_id = f"deploy-{uuid4().hex[:12]}"
    started_at = now_utc().isoformat()
    effective_logger.info(
        "pipeline.start run_id=%s project_root=%s skip_build=%s dry_run=%s",
        run_id,
        settings.paths.project_root,
        effective_options.skip_build,
        effective_options.dry_run,
    )

    build_result: BuildResult | None = None
    if effective_options.skip_build:
        _stage(effective_logger, 1, "Skipping build (--skip-build)")
    else:
        _stage(effective_logger, 1, f"Building: {' '.join(settings.build.command)}")
        build_result = run_build(
            settings.build,
            settings.paths.project_root,
            executor=effective_executor,
            logger=effective_logger,
        )

    _stage(effective_logger, 2, f"Locating {settings.artifact.pattern} in {settings.output_dir}")
    artifact = locate_artifact(
        settings.artifact,
        settings.output_dir,
        fs=effective_fs,
        logger=effective_logger,
    )
    effective_logger.info("Found artifact: %s", artifact.name)

    if effective_options.dry_run:
        _stage(effective_logger, 3, f"Dry run: would copy {artifact.name} to {settings.deploy.destination_dir}")
        return DeployRunResult(
            run_id=run_id,
            build=build_result,
            artifact=artifact,
            deploy=None,
            summary_path=None,
        )

    _stage(effective_logger, 3, f"Deploying {artifact.name} to {settings.deploy.destination_dir}")
    deploy_result = deploy_artifact(
        artifact,
        settings.deploy.destination_dir,
        fs=effective_fs,
        logger=effective_logger,
    )

    summary = _build_summary(run_id, started_at, settings, build_result, artifact, deploy_result)
    summary_path: Path | None
    try:
        summary_path = write_json_atomically(summary, settings.paths.logs_root / SUMMARY_FILE_NAME)
    except OSError as exc:
        # The artifact is already deployed; a missing summary does not fail the run.
        effective_logger.warning(
            "pipeline.summary_write_failed run_id=%s logs_root=%s error=%s",
            run_id,
            settings.paths.logs_root,
            exc,
        )
        summary_path = None
    effective_logger.info("pipeline.complete run_id=%s summary_path=%s", run_id, summary_path)
    return DeployRunResult(
        run_id=run_id,
        build=build_result,
        artifact=artifact,
        deploy=deploy_result,
        summary_path=summary_path,
    )
