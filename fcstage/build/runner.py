# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Runs the external release build.

The build tool owns the terminal while it runs: its stdout and stderr are
inherited, not captured, so compiler errors reach the user unmodified. We only
look at the exit status.
"""

import logging
import subprocess
import time
from pathlib import Path
from typing import Callable, Sequence

from fcstage.logging.logger import get_logger
from fcstage.repository.exceptions import BuildFailedError

_logger: logging.Logger = get_logger(__name__)

# Signature of subprocess.run as used here; tests inject a fake.
CommandRunner = Callable[..., "subprocess.CompletedProcess[bytes]"]


def run_release_build(
    command: Sequence[str],
    project_root: Path,
    runner: CommandRunner = subprocess.run,
) -> None:
    """
    Run the release build command from the project root.

    Args:
        command: Argument vector, e.g. ["tools/devtool", "build", "--release"].
        project_root: Working directory for the build.
        runner: subprocess.run or a compatible callable.

    Raises:
        BuildFailedError: If the tool exits non-zero or cannot be launched.
    """
    argv = list(command)
    _logger.info(
        "Starting release build",
        extra={"command": " ".join(argv), "cwd": str(project_root)},
    )
    started = time.monotonic()

    try:
        runner(argv, cwd=str(project_root), check=True)
    except subprocess.CalledProcessError as err:
        raise BuildFailedError(
            argv,
            err.returncode,
            f"Release build failed with exit status {err.returncode}: {' '.join(argv)}",
        ) from err
    except OSError as err:
        raise BuildFailedError(
            argv,
            None,
            f"Cannot run release build {' '.join(argv)}: {err}",
        ) from err

    _logger.info(
        "Release build finished",
        extra={"elapsed_s": round(time.monotonic() - started, 2)},
    )
