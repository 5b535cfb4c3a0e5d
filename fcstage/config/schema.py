# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe configuration schemas for fcstage.

All models are frozen pydantic v2 models with:
  - frozen=True: immutability after construction
  - extra="forbid": unknown keys fail immediately (typos in a YAML file should
    not silently fall back to a default destination)
  - validate_default=True: even defaults get type-checked

The defaults here reproduce the layout of a Firecracker checkout built with
`tools/devtool build --release`. A YAML file only needs to mention what differs.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_DESTINATION = "/tmp/buildbuddy_firecracker"

# Tags the staged binaries with the Firecracker version they were built from.
# Bump it together with the checkout; it is plain configuration.
DEFAULT_SUFFIX = "-v1.4.0-20230720-cf5f56f"

DEFAULT_TARGET = "x86_64-unknown-linux-musl"
DEFAULT_BUILD_COMMAND = ("tools/devtool", "build", "--release")
DEFAULT_BUILD_OUTPUT_DIR = "build/cargo_target"
DEFAULT_REPOSITORY_NAME = "com_github_buildbuddy_io_firecracker_firecracker"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class GlobalConfig(BaseModel):
    """Cross-cutting settings: schema version and logging."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(
        default="1.0.0",
        description="Schema version for compatibility tracking, e.g. '1.0.0'",
    )
    log_level: LogLevel = Field(
        default="INFO",
        description="One of DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path for file-based log output, relative to the working directory",
    )


class StageConfig(BaseModel):
    """
    Where the binaries come from and where they go.

    `destination` and `suffix` are the defaults that BAZEL_REPO_DIR / SUFFIX
    (or --destination / --suffix) override at run time.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    destination: str = Field(
        default=DEFAULT_DESTINATION,
        min_length=1,
        description="Directory populated as the external Bazel repository",
    )
    suffix: str = Field(
        default=DEFAULT_SUFFIX,
        description="Appended verbatim to each staged binary's filename",
    )
    target: str = Field(
        default=DEFAULT_TARGET,
        min_length=1,
        description="Cargo target triple the release build writes under",
    )
    build_command: list[str] = Field(
        default_factory=lambda: list(DEFAULT_BUILD_COMMAND),
        min_length=1,
        description="Release build command, run from the project root",
    )
    build_output_dir: str = Field(
        default=DEFAULT_BUILD_OUTPUT_DIR,
        min_length=1,
        description="Cargo target directory, relative to the project root",
    )
    repository_name: str = Field(
        default=DEFAULT_REPOSITORY_NAME,
        min_length=1,
        description="Bazel repository name prefix used in the override flag",
    )


class FcstageConfig(BaseModel):
    """
    Top-level config container.

    Both sections are optional, so an empty mapping is a valid config that
    means "use every built-in default".
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        populate_by_name=True,
    )

    global_config: GlobalConfig = Field(default_factory=GlobalConfig, alias="global")
    stage: StageConfig = Field(default_factory=StageConfig)
