"""Artifact discovery and validation."""

from addon_deploy.artifacts.filesystem import Filesystem, LocalFilesystem
from addon_deploy.artifacts.locate import (
    ArtifactSet,
    FoundArtifact,
    SelectedArtifact,
    find_artifacts,
    locate_artifact,
    matches_pattern,
    select_artifact,
)

__all__ = [
    "Filesystem",
    "LocalFilesystem",
    "ArtifactSet",
    "FoundArtifact",
    "SelectedArtifact",
    "find_artifacts",
    "locate_artifact",
    "matches_pattern",
    "select_artifact",
]
