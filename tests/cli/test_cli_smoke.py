# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI smoke tests.

We run `python -m fcstage.cli.main` in a subprocess, the way a user would.
This catches broken imports and entrypoint wiring that in-process tests miss.
"""

import os
import subprocess
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]


def _run_cli(
    *args: str, env_extra: dict[str, str] | None = None, cwd: Path | None = None
) -> subprocess.CompletedProcess[str]:
    """Run `fcstage` with the given arguments and capture output."""
    env = {k: v for k, v in os.environ.items() if k not in ("BAZEL_REPO_DIR", "SUFFIX")}
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(REPO_ROOT), env.get("PYTHONPATH")]))
    env.update(env_extra or {})
    return subprocess.run(
        [sys.executable, "-m", "fcstage.cli.main", *args],
        capture_output=True,
        text=True,
        timeout=30,
        env=env,
        cwd=cwd,
    )


class TestHelpTexts:
    @pytest.mark.parametrize("subcommand", ["stage", "verify", "info"])
    def test_subcommand_help_exits_zero(self, subcommand: str) -> None:
        result = _run_cli(subcommand, "--help")
        assert result.returncode == 0
        assert "usage" in result.stdout.lower()

    def test_root_help_exits_zero(self) -> None:
        result = _run_cli("--help")
        assert result.returncode == 0
        assert "stage" in result.stdout


class TestStageEndToEnd:
    def test_scenario_env_overrides(self, tmp_path: Path, project_root: Path) -> None:
        destination = tmp_path / "out"
        result = _run_cli(
            "stage",
            "--project-root",
            str(project_root),
            env_extra={"BAZEL_REPO_DIR": str(destination), "SUFFIX": "-x"},
        )

        assert result.returncode == 0, result.stderr
        for name in ("WORKSPACE", "BUILD", "firecracker-x", "jailer-x"):
            assert (destination / name).is_file()
        assert "Run bazel with:" in result.stdout
        assert f"firecracker-x={destination}" in result.stdout

    def test_build_tool_output_is_not_swallowed(
        self, tmp_path: Path, failing_project_root: Path
    ) -> None:
        result = _run_cli(
            "stage",
            "--project-root",
            str(failing_project_root),
            "--destination",
            str(tmp_path / "out"),
        )

        assert result.returncode == 7
        assert "error: could not compile" in result.stderr
        assert "Done!" not in result.stdout

    def test_no_subcommand_runs_stage(self, project_root: Path) -> None:
        result = _run_cli("--destination", "out", "--suffix=-x", cwd=project_root / "tools")

        assert result.returncode == 0, result.stderr
        assert (project_root / "out" / "firecracker-x").is_file()
        assert "Done!" in result.stdout

    def test_no_subcommand_outside_a_checkout_is_user_error(self, tmp_path: Path) -> None:
        result = _run_cli(cwd=tmp_path)

        assert result.returncode == 1  # USER_ERROR
        assert "Project root not found" in result.stderr

    def test_info_runs_anywhere(self) -> None:
        result = _run_cli("info", "--log-level", "DEBUG")
        assert result.returncode == 0

    def test_nonexistent_config_returns_config_error(self) -> None:
        result = _run_cli("info", "--config", "/nonexistent/path.yaml")
        assert result.returncode == 2  # CONFIG_ERROR
