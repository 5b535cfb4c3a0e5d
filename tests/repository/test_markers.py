# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for WORKSPACE / BUILD marker generation.
"""

import os
import stat
from pathlib import Path

from fcstage.repository.markers import EXPORTED_FILES, render_build_file, write_markers


def test_build_file_exports_exactly_both_binaries() -> None:
    assert render_build_file() == 'exports_files(["firecracker", "jailer"])\n'
    assert EXPORTED_FILES == ("firecracker", "jailer")


def test_write_markers_creates_both_files(tmp_path: Path) -> None:
    workspace, build = write_markers(tmp_path)

    assert workspace == tmp_path / "WORKSPACE"
    assert build == tmp_path / "BUILD"
    assert workspace.read_bytes() == b""
    assert build.read_text(encoding="utf-8") == render_build_file()


def test_write_markers_twice_is_stable(tmp_path: Path) -> None:
    write_markers(tmp_path)
    first = (tmp_path / "BUILD").read_bytes()
    write_markers(tmp_path)

    assert (tmp_path / "BUILD").read_bytes() == first
    assert sorted(p.name for p in tmp_path.iterdir()) == ["BUILD", "WORKSPACE"]


def test_markers_are_readable_by_others(tmp_path: Path) -> None:
    previous = os.umask(0o022)
    try:
        write_markers(tmp_path)
    finally:
        os.umask(previous)

    for name in ("WORKSPACE", "BUILD"):
        assert stat.S_IMODE((tmp_path / name).stat().st_mode) == 0o644
