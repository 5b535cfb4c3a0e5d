# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Path utilities for fcstage.

The project root is the Firecracker checkout, i.e. the directory that holds
`tools/devtool`. It is resolved once per command and passed down; nothing
else in the package consults the working directory.
"""

from pathlib import Path
from typing import Optional

PROJECT_ROOT_MARKER = Path("tools") / "devtool"


def resolve_project_root(start: Optional[Path] = None) -> Path:
    """
    Walk up from `start` (the working directory by default) to the checkout root.

    Returns:
        Absolute path to the first ancestor (or `start` itself) holding tools/devtool.

    Raises:
        FileNotFoundError: If no ancestor holds the marker.
    """
    origin = (start or Path.cwd()).resolve()
    current = origin
    while True:
        if (current / PROJECT_ROOT_MARKER).is_file():
            return current
        if current == current.parent:
            break
        current = current.parent
    raise FileNotFoundError(
        f"Cannot find project root. No {PROJECT_ROOT_MARKER} found in {origin} "
        "or any of its parents. Run from a Firecracker checkout or pass --project-root."
    )


def ensure_directory(path: Path) -> Path:
    """Create a directory (and parents) if it doesn't exist. Returns the path for chaining."""
    path.mkdir(parents=True, exist_ok=True)
    return path
