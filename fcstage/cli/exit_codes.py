# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI exit codes.

These are the codes fcstage chooses itself. A failed release build instead
exits with the build tool's own status (128 + signal when it was killed);
BUILD_ERROR is used only when the tool never ran. argparse usage errors exit
with 2 as well.
"""

SUCCESS: int = 0
USER_ERROR: int = 1
CONFIG_ERROR: int = 2
RUNTIME_ERROR: int = 3
VALIDATION_ERROR: int = 4
BUILD_ERROR: int = 5
