from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence

import pytest

from addon_deploy.build.invoker import CommandResult
from addon_deploy.config import AppSettings, ArtifactConfig, BuildConfig, DeployConfig, PathsConfig

EXPECTED_NAME = "event_timers.dll"


@dataclass
class StubExecutor:
    """Records build invocations and returns a canned exit status."""

    returncode: int = 0
    side_effect: Callable[[Path], None] | None = None
    raises: OSError | None = None
    calls: list[tuple[tuple[str, ...], Path]] = field(default_factory=list)

    def run(self, command: Sequence[str], cwd: Path) -> CommandResult:
        self.calls.append((tuple(command), cwd))
        if self.raises is not None:
            raise self.raises
        if self.side_effect is not None:
            self.side_effect(cwd)
        return CommandResult(returncode=self.returncode)


class FakeFilesystem:
    """In-memory stand-in for ``LocalFilesystem``."""

    def __init__(self) -> None:
        self.files: dict[Path, bytes] = {}
        self.dirs: set[Path] = set()
        self.read_only: set[Path] = set()
        self.copies: list[tuple[Path, Path]] = []
        self.mkdirs: list[Path] = []

    def add_file(self, path: Path, content: bytes) -> Path:
        self._add_dir(path.parent)
        self.files[path] = content
        return path

    def _add_dir(self, path: Path) -> None:
        for candidate in (path, *path.parents):
            self.dirs.add(candidate)

    def list_files(self, directory: Path) -> list[Path]:
        return sorted(path for path in self.files if path.parent == directory)

    def is_dir(self, path: Path) -> bool:
        return path in self.dirs

    def is_file(self, path: Path) -> bool:
        return path in self.files

    def make_dirs(self, path: Path) -> None:
        if path in self.files:
            raise FileExistsError(f"File exists: '{path}'")
        if any(parent in self.read_only for parent in path.parents):
            raise PermissionError(f"Permission denied: '{path}'")
        self.mkdirs.append(path)
        self._add_dir(path)

    def copy_file(self, source: Path, destination: Path) -> None:
        if destination.parent in self.read_only:
            raise PermissionError(f"Permission denied: '{destination}'")
        if destination.parent not in self.dirs:
            raise FileNotFoundError(f"No such file or directory: '{destination}'")
        self.copies.append((source, destination))
        self.files[destination] = self.files[source]

    def size(self, path: Path) -> int:
        return len(self.files[path])

    def sha256(self, path: Path) -> str:
        return hashlib.sha256(self.files[path]).hexdigest()


@pytest.fixture(autouse=True)
def _restore_root_logging():
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    for handler in list(root_logger.handlers):
        if handler not in handlers:
            root_logger.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root_logger.handlers:
            root_logger.addHandler(handler)
    root_logger.setLevel(level)


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root.resolve()


@pytest.fixture
def output_dir(project_root: Path) -> Path:
    return project_root / "target" / "release"


@pytest.fixture
def destination_dir(tmp_path: Path) -> Path:
    return tmp_path / "Guild Wars 2" / "addons"


@pytest.fixture
def settings(project_root: Path, destination_dir: Path) -> AppSettings:
    return AppSettings(
        paths=PathsConfig(project_root=project_root, logs_root=project_root / "logs"),
        build=BuildConfig(command=["cargo", "build", "--release"]),
        artifact=ArtifactConfig(output_dir=Path("target/release"), pattern="*.dll", expected_name=EXPECTED_NAME),
        deploy=DeployConfig(destination_dir=destination_dir),
    )


@pytest.fixture
def fake_fs() -> FakeFilesystem:
    return FakeFilesystem()
