# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Stages Firecracker release binaries as an external Bazel repository.

The pipeline is strictly linear and stops at the first failure:

    Build -> ResolveConfig -> EnsureDir -> WriteMarkers -> CopyArtifacts -> ReportDone

A failed build never touches the destination. A failure after that point may
leave the destination partially populated; the next successful run overwrites
everything it writes, so there is nothing to clean up.

Binaries are read from

    <project_root>/<build_output_dir>/<target>/release/{firecracker,jailer}

and land in `<destination>/<name><suffix>`. The resulting directory is used as

    bazel build --override_repository=<repository_name><suffix>=<destination> ...
"""

import logging
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from fcstage.build.runner import CommandRunner, run_release_build
from fcstage.config.overrides import StageOverrides, resolve_destination, resolve_suffix
from fcstage.config.schema import StageConfig
from fcstage.logging.logger import get_logger
from fcstage.repository.exceptions import StagingIOError
from fcstage.repository.markers import EXPORTED_FILES, write_markers
from fcstage.utils.hashing import compute_sha256
from fcstage.utils.paths import ensure_directory

_logger: logging.Logger = get_logger(__name__)


@dataclass(frozen=True)
class StagePlan:
    """Every path a run would touch, computed without side effects."""

    project_root: Path
    destination: Path
    suffix: str
    build_command: list[str]
    sources: dict[str, Path] = field(default_factory=dict)
    targets: dict[str, Path] = field(default_factory=dict)
    override_flag: str = ""


@dataclass(frozen=True)
class StageResult:
    """Outcome of a successful staging run."""

    destination: str
    suffix: str
    override_flag: str
    build_skipped: bool
    staged_files: dict[str, str] = field(default_factory=dict)


def artifact_dir(project_root: Path, config: StageConfig) -> Path:
    """Directory the release build writes the binaries into."""
    return project_root / config.build_output_dir / config.target / "release"


def override_flag(repository_name: str, suffix: str, destination: Path) -> str:
    """The flag a downstream Bazel invocation needs to pick up the staged repository."""
    return f"--override_repository={repository_name}{suffix}={destination}"


def plan(
    project_root: Path,
    overrides: StageOverrides = StageOverrides(),
    config: StageConfig = StageConfig(),
) -> StagePlan:
    """
    Resolve the destination and suffix, and compute source and target paths.

    A relative destination is taken relative to the project root.
    """
    destination = Path(resolve_destination(overrides, config))
    if not destination.is_absolute():
        destination = project_root / destination
    suffix = resolve_suffix(overrides, config)

    source_dir = artifact_dir(project_root, config)
    sources = {name: source_dir / name for name in EXPORTED_FILES}
    targets = {name: destination / f"{name}{suffix}" for name in EXPORTED_FILES}

    return StagePlan(
        project_root=project_root,
        destination=destination,
        suffix=suffix,
        build_command=list(config.build_command),
        sources=sources,
        targets=targets,
        override_flag=override_flag(config.repository_name, suffix, destination),
    )


def _copy_artifact(name: str, source: Path, target: Path) -> str:
    """Copy one binary byte-for-byte, keeping its mode bits. Returns the SHA256 of the copy."""
    if not source.is_file():
        raise StagingIOError(
            f"Build artifact '{name}' not found at {source}. Did the release build complete?"
        )
    try:
        shutil.copy2(str(source), str(target))
        digest = compute_sha256(target)
    except OSError as err:
        raise StagingIOError(f"Cannot copy {source} to {target}: {err}") from err

    _logger.info(
        "Staged artifact",
        extra={"artifact": name, "target": str(target), "sha256": digest[:16] + "..."},
    )
    return digest


def run(
    project_root: Path,
    overrides: StageOverrides = StageOverrides(),
    config: StageConfig = StageConfig(),
    *,
    skip_build: bool = False,
    runner: CommandRunner = subprocess.run,
) -> StageResult:
    """
    Build, then stage the release binaries into the destination repository.

    Args:
        project_root: Firecracker checkout; the build runs here and every
            relative path is resolved against it.
        overrides: Destination and suffix overrides from the environment or CLI.
        config: Defaults and build layout.
        skip_build: Stage whatever the last release build left behind.
        runner: subprocess.run or a compatible callable for the build step.

    Returns:
        StageResult with the resolved destination, suffix, override flag and
        the SHA256 of every staged binary.

    Raises:
        BuildFailedError: The release build failed; nothing was written.
        StagingIOError: Creating the destination, writing a marker, or copying
            a binary failed.
    """
    if skip_build:
        _logger.info("Skipping release build", extra={"project_root": str(project_root)})
    else:
        run_release_build(config.build_command, project_root, runner=runner)

    stage_plan = plan(project_root, overrides, config)
    destination = stage_plan.destination
    _logger.info(
        "Staging repository",
        extra={"destination": str(destination), "suffix": stage_plan.suffix},
    )

    try:
        ensure_directory(destination)
    except OSError as err:
        raise StagingIOError(f"Cannot create destination {destination}: {err}") from err

    try:
        write_markers(destination)
    except OSError as err:
        raise StagingIOError(f"Cannot write repository markers in {destination}: {err}") from err

    staged: dict[str, str] = {}
    for name in EXPORTED_FILES:
        target = stage_plan.targets[name]
        staged[target.name] = _copy_artifact(name, stage_plan.sources[name], target)

    _logger.info(
        "Repository staged",
        extra={"destination": str(destination), "override_flag": stage_plan.override_flag},
    )

    return StageResult(
        destination=str(destination),
        suffix=stage_plan.suffix,
        override_flag=stage_plan.override_flag,
        build_skipped=skip_build,
        staged_files=staged,
    )


def completion_banner(result: StageResult) -> str:
    """Human-readable completion message printed on stdout."""
    return (
        "==========\n"
        "Done!\n"
        f"Staged into {result.destination}\n"
        "Run bazel with:\n"
        f"    {result.override_flag}\n"
    )
