"""Configuration models and loading logic."""

from __future__ import annotations

import os
from pathlib import Path, PureWindowsPath
from typing import ClassVar

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_SETTINGS_FILE = Path("configs/settings.yaml")
SETTINGS_FILE_ENV = "ADDON_DEPLOY_SETTINGS_FILE"

DEFAULT_BUILD_COMMAND: tuple[str, ...] = ("cargo", "build", "--release")
DEFAULT_OUTPUT_DIR = Path("target/release")
DEFAULT_ARTIFACT_PATTERN = "*.dll"
DEFAULT_ARTIFACT_NAME = "event_timers.dll"
DEFAULT_DESTINATION_DIR = Path(r"C:\Program Files\Guild Wars 2\addons")


class ProjectConfig(BaseModel):
    """Project metadata settings."""

    name: str = "event_timers"


class PathsConfig(BaseModel):
    """Filesystem paths owned by the tool itself."""

    project_root: Path = Path(".")
    logs_root: Path = Path("./logs")

    def resolved(self, project_root: Path) -> "PathsConfig":
        """Return a copy with project-relative paths resolved to absolute paths."""

        root = self.project_root if self.project_root.is_absolute() else (project_root / self.project_root)
        root = root.resolve()
        logs_root = self.logs_root if self.logs_root.is_absolute() else (root / self.logs_root).resolve()
        return self.model_copy(update={"project_root": root, "logs_root": logs_root})


class BuildConfig(BaseModel):
    """External build tool invocation."""

    command: list[str] = Field(default_factory=lambda: list(DEFAULT_BUILD_COMMAND), min_length=1)

    @field_validator("command")
    @classmethod
    def _reject_blank_program(cls, value: list[str]) -> list[str]:
        if not value[0].strip():
            raise ValueError("build.command must start with a program name")
        return value


class ArtifactConfig(BaseModel):
    """Where the build tool leaves its output and what it is called."""

    output_dir: Path = DEFAULT_OUTPUT_DIR
    pattern: str = DEFAULT_ARTIFACT_PATTERN
    expected_name: str = DEFAULT_ARTIFACT_NAME

    def resolved_output_dir(self, project_root: Path) -> Path:
        """Return the output directory anchored at the project root."""

        if self.output_dir.is_absolute():
            return self.output_dir
        return (project_root / self.output_dir).resolve()


class DeployConfig(BaseModel):
    """Destination the host application loads addons from."""

    destination_dir: Path = DEFAULT_DESTINATION_DIR

    def resolved(self, project_root: Path) -> "DeployConfig":
        """Return a copy with a relative destination anchored at the project root."""

        destination = self.destination_dir
        # Drive-letter paths stay as given so the Windows default survives on other hosts.
        if destination.is_absolute() or PureWindowsPath(str(destination)).drive:
            return self
        return self.model_copy(update={"destination_dir": (project_root / destination).resolve()})


class AppSettings(BaseSettings):
    """Top-level application settings."""

    _yaml_file_override: ClassVar[Path | None] = None

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)
    artifact: ArtifactConfig = Field(default_factory=ArtifactConfig)
    deploy: DeployConfig = Field(default_factory=DeployConfig)

    model_config = SettingsConfigDict(
        env_prefix="ADDON_DEPLOY_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Use YAML defaults while allowing env vars to override values."""

        yaml_file = resolve_settings_file(cls._yaml_file_override)
        yaml_settings = YamlConfigSettingsSource(settings_cls, yaml_file=yaml_file)
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            yaml_settings,
            file_secret_settings,
        )

    @property
    def output_dir(self) -> Path:
        """Absolute build output directory."""

        return self.artifact.resolved_output_dir(self.paths.project_root)

    def as_dict(self) -> dict[str, object]:
        """Return settings as a standard nested dictionary."""

        return self.model_dump(mode="json")


def find_project_root(start: Path | None = None) -> Path:
    """Locate the project root by traversing upward for config markers."""

    current = (start or Path.cwd()).resolve()
    for candidate in (current, *current.parents):
        if (candidate / DEFAULT_SETTINGS_FILE).exists():
            return candidate
    return current


def resolve_settings_file(override: Path | None = None) -> Path:
    """Resolve settings file from explicit override, env var, or default."""

    chosen = override
    if chosen is None:
        env_value = os.getenv(SETTINGS_FILE_ENV)
        if env_value:
            chosen = Path(env_value)
    if chosen is None:
        chosen = DEFAULT_SETTINGS_FILE

    if not chosen.is_absolute():
        chosen = (find_project_root() / chosen).resolve()
    return chosen


def load_settings(config_file: Path | None = None) -> AppSettings:
    """Load settings with YAML defaults and environment variable overrides.

    A settings file that does not exist is treated as empty, so a bare checkout
    runs with the built-in defaults. Relative paths resolve against the
    directory that holds ``configs/`` (or the settings file itself when it
    lives elsewhere), or the working directory when no settings file is
    present.
    """

    settings_file = resolve_settings_file(config_file)
    if settings_file.exists() and settings_file.parent.name == DEFAULT_SETTINGS_FILE.parent.name:
        project_root = settings_file.parent.parent.resolve()
    elif settings_file.exists():
        project_root = settings_file.parent.resolve()
    else:
        project_root = Path.cwd().resolve()
    AppSettings._yaml_file_override = settings_file
    try:
        settings = AppSettings()
    finally:
        AppSettings._yaml_file_override = None
    resolved_paths = settings.paths.resolved(project_root=project_root)
    resolved_deploy = settings.deploy.resolved(resolved_paths.project_root)
    return settings.model_copy(update={"paths": resolved_paths, "deploy": resolved_deploy})
