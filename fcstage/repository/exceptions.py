# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Errors raised while staging the external repository.

Every step of the pipeline is fail-fast: the first error aborts the run and
propagates up to the CLI, which maps each class to its own exit code.
"""

from typing import Optional, Sequence


class PackagerError(Exception):
    """Base for all staging failures."""


class BuildFailedError(PackagerError):
    """
    The external release build exited non-zero or could not be started.

    `returncode` is None when the tool never ran (missing executable,
    permission denied).
    """

    def __init__(self, command: Sequence[str], returncode: Optional[int], message: str) -> None:
        super().__init__(message)
        self.command = list(command)
        self.returncode = returncode


class StagingIOError(PackagerError):
    """Creating the destination, writing a marker file, or copying a binary failed."""
