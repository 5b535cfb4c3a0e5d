# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Marker files that turn a plain directory into an external Bazel repository.

    <destination>/
    ├─ WORKSPACE             (empty; marks the repository root)
    ├─ BUILD                 (exports_files for the two binaries)
    ├─ firecracker<suffix>
    └─ jailer<suffix>

Both markers are rewritten on every run so repeated staging is idempotent.
"""

import logging
from pathlib import Path

from fcstage.logging.logger import get_logger
from fcstage.utils.filesystem import atomic_write

_logger: logging.Logger = get_logger(__name__)

WORKSPACE_FILENAME = "WORKSPACE"
BUILD_FILENAME = "BUILD"

# The names declared in BUILD. They are fixed regardless of the suffix.
EXPORTED_FILES: tuple[str, ...] = ("firecracker", "jailer")


def render_build_file() -> str:
    """Return the BUILD file body declaring the exported binaries."""
    names = ", ".join(f'"{name}"' for name in EXPORTED_FILES)
    return f"exports_files([{names}])\n"


def write_markers(destination: Path) -> tuple[Path, Path]:
    """
    Write WORKSPACE and BUILD into `destination`, replacing any existing copies.

    Args:
        destination: An existing directory.

    Returns:
        The (workspace, build) paths that were written.

    Raises:
        OSError: If either write fails.
    """
    workspace_path = destination / WORKSPACE_FILENAME
    build_path = destination / BUILD_FILENAME

    atomic_write(workspace_path, "")
    atomic_write(build_path, render_build_file())

    _logger.debug(
        "Wrote repository markers",
        extra={"workspace": str(workspace_path), "build": str(build_path)},
    )
    return workspace_path, build_path
