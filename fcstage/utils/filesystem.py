# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Filesystem helpers for fcstage.

Marker files are rewritten on every run. Writing them through a temp file in
the same directory and renaming it over the target means a Bazel build reading
the repository concurrently sees either the old file or the new one, never a
truncated one.
"""

import os
import tempfile
from pathlib import Path


def _default_file_mode() -> int:
    """Mode a plain open(..., "w") would create, i.e. 0o666 minus the umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def atomic_write(target_path: Path, content: str, encoding: str = "utf-8") -> None:
    """
    Write content to a file atomically, replacing whatever was there.

    The temp file lives next to the target so the final rename stays on one
    filesystem. NamedTemporaryFile creates it 0600; before the rename it is
    given the mode a plain write would produce (0o666 minus the umask). On any
    failure the temp file is removed and the target is left as it was.

    Args:
        target_path: Where the final file should end up.
        content: The string content to write. May be empty.
        encoding: Text encoding to use.

    Raises:
        OSError: If the write or rename fails.
    """
    target_path.parent.mkdir(parents=True, exist_ok=True)

    temp_fd = tempfile.NamedTemporaryFile(
        mode="w",
        encoding=encoding,
        dir=str(target_path.parent),
        prefix=".fcstage_tmp_",
        suffix=".tmp",
        delete=False,
    )
    temp_path = Path(temp_fd.name)

    try:
        temp_fd.write(content)
        temp_fd.flush()
        temp_fd.close()
        os.chmod(temp_path, _default_file_mode())
        temp_path.replace(target_path)
    except BaseException:
        temp_fd.close()
        if temp_path.exists():
            temp_path.unlink()
        raise


def safe_read(file_path: Path, encoding: str = "utf-8") -> str:
    """
    Read a text file with proper error context.

    Raises:
        FileNotFoundError: If the path doesn't exist.
        IsADirectoryError: If the path is a directory.
        OSError: For other I/O errors.
    """
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")
    if not file_path.is_file():
        raise IsADirectoryError(f"Expected a file, got a directory: {file_path}")
    return file_path.read_text(encoding=encoding)
