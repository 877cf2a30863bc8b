"""Shared utility helpers."""

from addon_deploy.utils.paths import atomic_temp_path, write_json_atomically
from addon_deploy.utils.time_utils import now_utc

__all__ = [
    "atomic_temp_path",
    "write_json_atomically",
    "now_utc",
]
