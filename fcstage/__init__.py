# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
fcstage stages Firecracker release binaries as an external Bazel repository.
"""

__version__ = "0.1.0"
