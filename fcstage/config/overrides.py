# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Run-time overrides for the destination directory and the filename suffix.

The environment is read exactly once, at the CLI edge, into a StageOverrides
value. Everything below the CLI receives that value as an argument and never
looks at os.environ itself.

An override that is unset or empty falls back to the configured default, the
same way `${VAR:=default}` behaves in a shell.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from fcstage.config.schema import StageConfig

DESTINATION_ENV_VAR = "BAZEL_REPO_DIR"
SUFFIX_ENV_VAR = "SUFFIX"


@dataclass(frozen=True)
class StageOverrides:
    """
    Optional replacements for StageConfig.destination and StageConfig.suffix.

    None and "" both mean "not overridden".
    """

    destination: Optional[str] = None
    suffix: Optional[str] = None

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "StageOverrides":
        """Read BAZEL_REPO_DIR and SUFFIX from the given mapping (os.environ by default)."""
        env = os.environ if environ is None else environ
        return cls(
            destination=env.get(DESTINATION_ENV_VAR),
            suffix=env.get(SUFFIX_ENV_VAR),
        )

    def merged_with(self, other: "StageOverrides") -> "StageOverrides":
        """
        Layer `other` on top of self: any non-empty field in `other` wins.

        The CLI uses this to put --destination / --suffix above the environment.
        """
        return StageOverrides(
            destination=other.destination or self.destination,
            suffix=other.suffix or self.suffix,
        )


def resolve_destination(overrides: StageOverrides, config: StageConfig) -> str:
    """Return the override destination when set and non-empty, else the configured default."""
    if overrides.destination:
        return overrides.destination
    return config.destination


def resolve_suffix(overrides: StageOverrides, config: StageConfig) -> str:
    """Return the override suffix when set and non-empty, else the configured default."""
    if overrides.suffix:
        return overrides.suffix
    return config.suffix
