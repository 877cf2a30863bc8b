"""Filesystem access used by the locator and deployer stages."""

from __future__ import annotations

import hashlib
import shutil
from pathlib import Path
from typing import Protocol

HASH_CHUNK_BYTES = 1024 * 1024


class Filesystem(Protocol):
    """The handful of filesystem operations the pipeline needs."""

    def list_files(self, directory: Path) -> list[Path]:
        """Return regular files directly inside ``directory`` (empty when it is missing)."""
        ...

    def is_dir(self, path: Path) -> bool: ...

    def is_file(self, path: Path) -> bool: ...

    def make_dirs(self, path: Path) -> None:
        """Create ``path`` and missing parents; no-op when it already exists."""
        ...

    def copy_file(self, source: Path, destination: Path) -> None:
        """Copy file bytes, replacing ``destination`` if present."""
        ...

    def size(self, path: Path) -> int: ...

    def sha256(self, path: Path) -> str: ...


class LocalFilesystem:
    """``Filesystem`` backed by the real disk."""

    def list_files(self, directory: Path) -> list[Path]:
        if not directory.is_dir():
            return []
        return [path for path in directory.iterdir() if path.is_file()]

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def is_file(self, path: Path) -> bool:
        return path.is_file()

    def make_dirs(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def copy_file(self, source: Path, destination: Path) -> None:
        shutil.copyfile(source, destination)

    def size(self, path: Path) -> int:
        return path.stat().st_size

    def sha256(self, path: Path) -> str:
        digest = hashlib.sha256()
        with path.open("rb") as handle:
            for chunk in iter(lambda: handle.read(HASH_CHUNK_BYTES), b""):
                digest.update(chunk)
        return digest.hexdigest()
