# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
External repository staging for fcstage.

Writes the marker files that make a directory importable with Bazel's
--override_repository, copies the release binaries next to them, and checks
a staged directory after the fact. No build logic lives here.
"""
