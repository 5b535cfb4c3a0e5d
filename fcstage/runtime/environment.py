# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Host information for `fcstage info`.

The release build targets a fixed triple, so knowing the host architecture
helps explain a missing artifact when someone builds on aarch64 but stages
with the default x86_64 target.
"""

import platform
import shutil
from typing import NamedTuple, Optional


class SystemInfo(NamedTuple):
    """Snapshot of the current system environment."""

    python_version: str
    platform: str
    architecture: str
    hostname: str
    bazel: Optional[str]


def get_system_info() -> SystemInfo:
    """Collect basic system information for logging and diagnostics."""
    return SystemInfo(
        python_version=platform.python_version(),
        platform=platform.system(),
        architecture=platform.machine(),
        hostname=platform.node(),
        bazel=shutil.which("bazel") or shutil.which("bazelisk"),
    )
