# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Subcommand handlers for the fcstage CLI.

Each handler takes the parsed argparse namespace and returns an exit code.
This is the only layer that reads the process environment; it folds
BAZEL_REPO_DIR / SUFFIX and the CLI flags into a StageOverrides value and
passes that down explicitly.

Stdout carries only the completion banner. Everything else goes through the
structured logger on stderr.
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fcstage.cli.exit_codes import (
    BUILD_ERROR,
    CONFIG_ERROR,
    RUNTIME_ERROR,
    SUCCESS,
    USER_ERROR,
    VALIDATION_ERROR,
)
from fcstage.config.exceptions import ConfigError
from fcstage.config.loader import load_config
from fcstage.config.overrides import StageOverrides
from fcstage.config.schema import FcstageConfig
from fcstage.logging.logger import get_logger, set_package_file, set_package_level
from fcstage.repository.exceptions import BuildFailedError, StagingIOError
from fcstage.utils.paths import resolve_project_root


@dataclass(frozen=True)
class CommandContext:
    """Everything a handler needs once config and overrides are resolved."""

    config: FcstageConfig
    overrides: StageOverrides
    logger: logging.Logger


def _load_context(
    args: argparse.Namespace,
    command_name: str,
) -> tuple[int, Optional[CommandContext]]:
    """
    Shared setup: load config, settle the log level, collect overrides.

    Returns (exit_code, context). If exit_code is not SUCCESS the caller
    returns it immediately.
    """
    logger = get_logger(f"fcstage.cli.{command_name}", log_level=args.log_level or "INFO")

    try:
        config = load_config(Path(args.config) if args.config is not None else None)
    except ConfigError as err:
        logger.error(
            "Configuration error",
            extra={"command": command_name, "error": str(err)},
        )
        return CONFIG_ERROR, None

    log_level = args.log_level or config.global_config.log_level
    set_package_level(log_level)
    log_file = config.global_config.log_file
    set_package_file(Path(log_file) if log_file is not None else None)

    overrides = StageOverrides.from_environ().merged_with(
        StageOverrides(destination=args.destination, suffix=args.suffix)
    )
    logger.debug(
        "Resolved overrides",
        extra={
            "command": command_name,
            "destination_override": overrides.destination,
            "suffix_override": overrides.suffix,
        },
    )
    return SUCCESS, CommandContext(config=config, overrides=overrides, logger=logger)


def _project_root(args: argparse.Namespace) -> Path:
    """
    Resolve the checkout root once.

    An explicit --project-root is used as given; only the working directory
    is searched upwards for tools/devtool.
    """
    if args.project_root is not None:
        root = Path(args.project_root).resolve()
        if not root.is_dir():
            raise FileNotFoundError(f"Project root {root} is not a directory")
        return root
    return resolve_project_root()


def handle_stage(args: argparse.Namespace) -> int:
    """Run the release build and stage the binaries into the destination repository."""
    exit_code, ctx = _load_context(args, "stage")
    if exit_code != SUCCESS or ctx is None:
        return exit_code
    logger = ctx.logger

    try:
        project_root = _project_root(args)
    except FileNotFoundError as err:
        logger.error("Project root not found", extra={"error": str(err)})
        return USER_ERROR

    from fcstage.repository.stager import completion_banner, plan, run

    if args.dry_run:
        stage_plan = plan(project_root, ctx.overrides, ctx.config.stage)
        logger.info(
            "Dry run, would build and stage",
            extra={
                "build_command": " ".join(stage_plan.build_command),
                "skip_build": args.skip_build,
                "destination": str(stage_plan.destination),
                "sources": [str(path) for path in stage_plan.sources.values()],
                "targets": [str(path) for path in stage_plan.targets.values()],
                "override_flag": stage_plan.override_flag,
            },
        )
        return SUCCESS

    try:
        result = run(
            project_root,
            ctx.overrides,
            ctx.config.stage,
            skip_build=args.skip_build,
        )
    except BuildFailedError as err:
        logger.error(
            "Build failed",
            extra={"error": str(err), "returncode": err.returncode},
        )
        if err.returncode is not None and err.returncode < 0:
            # Killed by a signal: report it the way a shell would.
            return 128 - err.returncode
        return err.returncode or BUILD_ERROR
    except StagingIOError as err:
        logger.error("Staging failed", extra={"error": str(err)}, exc_info=True)
        return RUNTIME_ERROR
    except Exception as err:
        logger.error("Stage failed", extra={"error": str(err)}, exc_info=True)
        return RUNTIME_ERROR

    sys.stdout.write(completion_banner(result))
    sys.stdout.flush()
    return SUCCESS


def handle_verify(args: argparse.Namespace) -> int:
    """Check that the resolved destination holds a complete staged repository."""
    exit_code, ctx = _load_context(args, "verify")
    if exit_code != SUCCESS or ctx is None:
        return exit_code
    logger = ctx.logger

    from fcstage.repository.stager import plan
    from fcstage.repository.verifier import verify_repository

    try:
        project_root = _project_root(args)
    except FileNotFoundError:
        # Only needed to anchor a relative destination.
        project_root = Path.cwd()

    stage_plan = plan(project_root, ctx.overrides, ctx.config.stage)

    try:
        report = verify_repository(stage_plan.destination, stage_plan.suffix)
    except Exception as err:
        logger.error("Verification crashed", extra={"error": str(err)}, exc_info=True)
        return RUNTIME_ERROR

    if not report.is_valid:
        logger.error(
            "Repository verification failed",
            extra={
                "destination": report.destination,
                "checks_failed": report.checks_failed,
                "errors": report.errors,
            },
        )
        return VALIDATION_ERROR

    logger.info(
        "Repository verified",
        extra={"destination": report.destination, "checks_passed": report.checks_passed},
    )
    return SUCCESS


def handle_info(args: argparse.Namespace) -> int:
    """Display environment and resolved configuration."""
    exit_code, ctx = _load_context(args, "info")
    if exit_code != SUCCESS or ctx is None:
        return exit_code

    from fcstage import __version__
    from fcstage.config.overrides import resolve_destination, resolve_suffix
    from fcstage.runtime.environment import get_system_info

    system_info = get_system_info()
    try:
        project_root: Optional[str] = str(_project_root(args))
    except FileNotFoundError:
        project_root = None

    stage = ctx.config.stage
    ctx.logger.info(
        "System information",
        extra={
            "fcstage_version": __version__,
            "python_version": system_info.python_version,
            "platform": system_info.platform,
            "architecture": system_info.architecture,
            "hostname": system_info.hostname,
            "bazel": system_info.bazel,
            "project_root": project_root,
            "destination": resolve_destination(ctx.overrides, stage),
            "suffix": resolve_suffix(ctx.overrides, stage),
            "target": stage.target,
            "config": args.config,
        },
    )
    return SUCCESS
