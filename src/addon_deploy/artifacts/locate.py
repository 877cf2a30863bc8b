"""Find the single library artifact left behind by the build."""

from __future__ import annotations

import fnmatch
import logging
from dataclasses import dataclass
from pathlib import Path

from addon_deploy.artifacts.filesystem import Filesystem, LocalFilesystem
from addon_deploy.config import ArtifactConfig
from addon_deploy.errors import AmbiguousArtifacts, ArtifactMissing

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FoundArtifact:
    """One file in the output directory that matched the pattern."""

    name: str
    path: Path


@dataclass(frozen=True, slots=True)
class ArtifactSet:
    """All matches from one scan of the output directory, sorted by name."""

    output_dir: Path
    pattern: str
    items: tuple[FoundArtifact, ...]

    def __len__(self) -> int:
        return len(self.items)

    @property
    def names(self) -> list[str]:
        return [item.name for item in self.items]


@dataclass(frozen=True, slots=True)
class SelectedArtifact:
    """The validated artifact handed to the deployer."""

    name: str
    path: Path
    name_matches: bool


def matches_pattern(file_name: str, pattern: str) -> bool:
    """Case-insensitive glob match, so ``*.dll`` also finds ``ADDON.DLL``."""

    return fnmatch.fnmatchcase(file_name.lower(), pattern.lower())


def find_artifacts(output_dir: Path, pattern: str, fs: Filesystem | None = None) -> ArtifactSet:
    """Scan ``output_dir`` (not recursively) for files matching ``pattern``."""

    effective_fs = fs or LocalFilesystem()
    found = [
        FoundArtifact(name=path.name, path=path)
        for path in effective_fs.list_files(output_dir)
        if matches_pattern(path.name, pattern)
    ]
    found.sort(key=lambda item: item.name)
    return ArtifactSet(output_dir=output_dir, pattern=pattern, items=tuple(found))


def select_artifact(
    artifacts: ArtifactSet,
    expected_name: str,
    logger: logging.Logger | None = None,
) -> SelectedArtifact:
    """Require exactly one match; warn, without failing, on an unexpected name."""

    effective_logger = logger or LOGGER
    if len(artifacts) == 0:
        effective_logger.error(
            "locate.missing output_dir=%s pattern=%s expected=%s",
            artifacts.output_dir,
            artifacts.pattern,
            expected_name,
        )
        raise ArtifactMissing(expected_name, artifacts.output_dir)

    if len(artifacts) > 1:
        effective_logger.error(
            "locate.ambiguous output_dir=%s count=%s names=%s",
            artifacts.output_dir,
            len(artifacts),
            ",".join(artifacts.names),
        )
        raise AmbiguousArtifacts(artifacts.names, artifacts.output_dir)

    only = artifacts.items[0]
    name_matches = only.name.lower() == expected_name.lower()
    if not name_matches:
        effective_logger.warning(
            "locate.name_mismatch found=%s expected=%s; continuing with the found file",
            only.name,
            expected_name,
        )
    elif only.name != expected_name:
        # Windows treats these as the same file; other hosts may not.
        effective_logger.warning(
            "locate.name_case_mismatch found=%s expected=%s; continuing with the found file",
            only.name,
            expected_name,
        )
    effective_logger.info("locate.found name=%s path=%s", only.name, only.path)
    return SelectedArtifact(name=only.name, path=only.path, name_matches=name_matches)


def locate_artifact(
    config: ArtifactConfig,
    output_dir: Path,
    fs: Filesystem | None = None,
    logger: logging.Logger | None = None,
) -> SelectedArtifact:
    """Scan the build output directory and validate the result."""

    artifacts = find_artifacts(output_dir, config.pattern, fs=fs)
    return select_artifact(artifacts, config.expected_name, logger=logger)
