"""Typer CLI entrypoint for addon_deploy."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
import yaml

from addon_deploy.artifacts.locate import locate_artifact
from addon_deploy.config import AppSettings, load_settings
from addon_deploy.errors import PipelineError
from addon_deploy.logging_utils import LOG_FILE_NAME, configure_logging
from addon_deploy.pipeline import DeployRunOptions, run_deploy_pipeline

BANNER_WIDTH = 60

app = typer.Typer(
    add_completion=False,
    help="Build the addon library and copy it into the host application's addon folder.",
    no_args_is_help=False,
)


def _load_and_optionally_configure_logger(
    config_file: Path | None,
    configure: bool,
) -> tuple[AppSettings, logging.Logger]:
    settings = load_settings(config_file=config_file)
    if configure:
        logger = configure_logging(settings.paths.logs_root / LOG_FILE_NAME)
    else:
        logger = logging.getLogger("addon_deploy")
    return settings, logger


def _banner(title: str, *, err: bool = False) -> None:
    typer.echo("=" * BANNER_WIDTH, err=err)
    typer.echo(title, err=err)
    typer.echo("=" * BANNER_WIDTH, err=err)


def _fail(exc: PipelineError, title: str) -> typer.Exit:
    typer.echo("", err=True)
    _banner(f"{title} ({exc.kind})", err=True)
    typer.echo(str(exc), err=True)
    return typer.Exit(code=exc.exit_code)


def _run_deploy(config_file: Path | None, *, skip_build: bool, dry_run: bool) -> None:
    settings, logger = _load_and_optionally_configure_logger(config_file, configure=True)
    _banner(f"{settings.project.name} build and deploy")

    options = DeployRunOptions(skip_build=skip_build, dry_run=dry_run)
    try:
        result = run_deploy_pipeline(settings, options=options, logger=logger)
    except PipelineError as exc:
        raise _fail(exc, "DEPLOY FAILED") from exc

    typer.echo("")
    if result.deploy is None:
        _banner("DRY RUN COMPLETE")
        typer.echo(f"artifact: {result.artifact.path}")
        typer.echo(f"would_deploy_to: {settings.deploy.destination_dir / result.artifact.name}")
        return

    _banner("DEPLOY COMPLETE")
    typer.echo(f"run_id: {result.run_id}")
    typer.echo(f"artifact: {result.artifact.name}")
    typer.echo(f"deployed_to: {result.deploy.destination_path}")
    typer.echo(f"sha256: {result.deploy.sha256}")
    typer.echo(f"summary_path: {result.summary_path if result.summary_path else 'none'}")
    typer.echo("Restart the host application to load the new version.")


@app.callback(invoke_without_command=True)
def default(ctx: typer.Context) -> None:
    """Without a subcommand, build and deploy using the configured defaults."""

    if ctx.invoked_subcommand is None:
        _run_deploy(None, skip_build=False, dry_run=False)


@app.command("deploy")
def deploy_cmd(
    skip_build: bool = typer.Option(
        False,
        "--skip-build",
        help="Deploy the existing build output without rebuilding.",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Build and locate the artifact but do not copy it.",
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config-file",
        help="Optional settings YAML path.",
        exists=False,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
) -> None:
    """Build the release library, validate it and copy it to the addon folder."""

    _run_deploy(config_file, skip_build=skip_build, dry_run=dry_run)


@app.command("locate")
def locate_cmd(
    config_file: Path | None = typer.Option(
        None,
        "--config-file",
        help="Optional settings YAML path.",
        exists=False,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
) -> None:
    """Check the current build output without building or deploying."""

    settings, logger = _load_and_optionally_configure_logger(config_file, configure=True)
    try:
        artifact = locate_artifact(settings.artifact, settings.output_dir, logger=logger)
    except PipelineError as exc:
        raise _fail(exc, "LOCATE FAILED") from exc

    typer.echo(f"artifact: {artifact.name}")
    typer.echo(f"path: {artifact.path}")
    typer.echo(f"name_matches_expected: {artifact.name_matches}")


@app.command("show-config")
def show_config(
    config_file: Path | None = typer.Option(
        None,
        "--config-file",
        help="Optional settings YAML path.",
        exists=False,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
) -> None:
    """Print the effective configuration after env overrides."""

    settings, _ = _load_and_optionally_configure_logger(config_file, configure=False)
    rendered = yaml.safe_dump(settings.as_dict(), sort_keys=False)
    typer.echo(rendered)


def main() -> None:
    """CLI script entrypoint."""

    app()


if __name__ == "__main__":
    main()
