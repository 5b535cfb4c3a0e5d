# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for fcstage tests.

The fake project tree mimics a Firecracker checkout after a successful
`tools/devtool build --release`: a devtool script that exits 0 and the two
release binaries under build/cargo_target/<target>/release.
"""

import subprocess
import textwrap
from pathlib import Path
from typing import Optional

import pytest

from fcstage.logging.logger import set_package_file

RELEASE_SUBDIR = Path("build") / "cargo_target" / "x86_64-unknown-linux-musl" / "release"
FIRECRACKER_BYTES = b"\x7fELF\x02\x01\x01firecracker-release"
JAILER_BYTES = b"\x7fELF\x02\x01\x01jailer-release"


class FakeRunner:
    """Stands in for subprocess.run in the build step and records every call."""

    def __init__(self, returncode: int = 0, error: Optional[OSError] = None) -> None:
        self.returncode = returncode
        self.error = error
        self.calls: list[tuple[list[str], Optional[str]]] = []

    def __call__(
        self, argv: list[str], cwd: Optional[str] = None, check: bool = False
    ) -> "subprocess.CompletedProcess[bytes]":
        self.calls.append((list(argv), cwd))
        if self.error is not None:
            raise self.error
        if check and self.returncode != 0:
            raise subprocess.CalledProcessError(self.returncode, argv)
        return subprocess.CompletedProcess(argv, self.returncode)


@pytest.fixture(autouse=True)
def _detach_package_log_file() -> None:
    """Close the shared log file handler a CLI run may have attached."""
    yield  # type: ignore[misc]
    set_package_file(None)


@pytest.fixture(autouse=True)
def _clean_override_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's own BAZEL_REPO_DIR / SUFFIX out of the tests."""
    monkeypatch.delenv("BAZEL_REPO_DIR", raising=False)
    monkeypatch.delenv("SUFFIX", raising=False)


@pytest.fixture()
def project_root(tmp_path: Path) -> Path:
    """A fake Firecracker checkout whose release build already succeeded."""
    root = tmp_path / "firecracker"
    tools_dir = root / "tools"
    tools_dir.mkdir(parents=True)
    devtool = tools_dir / "devtool"
    devtool.write_text("#!/bin/sh\nexit 0\n", encoding="utf-8")
    devtool.chmod(0o755)

    release_dir = root / RELEASE_SUBDIR
    release_dir.mkdir(parents=True)
    (release_dir / "firecracker").write_bytes(FIRECRACKER_BYTES)
    (release_dir / "jailer").write_bytes(JAILER_BYTES)
    return root


@pytest.fixture()
def failing_project_root(project_root: Path) -> Path:
    """Same checkout, but devtool exits with status 7."""
    devtool = project_root / "tools" / "devtool"
    devtool.write_text("#!/bin/sh\necho 'error: could not compile' >&2\nexit 7\n", encoding="utf-8")
    devtool.chmod(0o755)
    return project_root


@pytest.fixture()
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture()
def failing_runner() -> FakeRunner:
    return FakeRunner(returncode=101)


@pytest.fixture()
def tmp_config_file(tmp_path: Path) -> Path:
    """A config file overriding the stage defaults."""
    config_content = textwrap.dedent("""\
        global:
          config_version: "1.0.0"
          log_level: "DEBUG"
        stage:
          destination: "/srv/bazel/firecracker"
          suffix: "-v9.9.9"
          target: "aarch64-unknown-linux-musl"
    """)
    config_file = tmp_path / "fcstage.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def invalid_config_file(tmp_path: Path) -> Path:
    """Valid YAML that fails schema validation (unknown key)."""
    config_content = textwrap.dedent("""\
        stage:
          destination: "/tmp/out"
          destinaton_typo: "/tmp/other"
    """)
    config_file = tmp_path / "invalid.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def broken_yaml_file(tmp_path: Path) -> Path:
    """A file that isn't valid YAML at all."""
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("{{not: yaml: at: all:::", encoding="utf-8")
    return config_file


@pytest.fixture()
def missing_tool_runner() -> FakeRunner:
    """Behaves like subprocess.run when the build tool doesn't exist."""
    return FakeRunner(error=FileNotFoundError(2, "No such file or directory", "tools/devtool"))
