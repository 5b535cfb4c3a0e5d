# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI entrypoint for fcstage.

Every operation is a subcommand of `fcstage`. The global options are inherited
by every subcommand through argparse's parent parser mechanism.

Usage:
    fcstage
    fcstage stage
    BAZEL_REPO_DIR=/tmp/out SUFFIX=-x fcstage stage
    fcstage stage --skip-build --destination /tmp/out --suffix=-x
    fcstage verify --destination /tmp/out --suffix=-x
    fcstage info --config fcstage.yaml
"""

import argparse
import sys
from typing import Optional, Sequence

from fcstage.cli.commands import handle_info, handle_stage, handle_verify


def _build_global_parser() -> argparse.ArgumentParser:
    """
    Build the parent parser with global options.

    add_help=False so the parent's -h doesn't collide with each subcommand's.
    """
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file.",
    )
    parent.add_argument(
        "--log-level",
        type=str,
        default=None,
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging verbosity level (overrides the config file).",
    )
    parent.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        dest="dry_run",
        help="Resolve and log what would happen without building or writing anything.",
    )
    parent.add_argument(
        "--project-root",
        type=str,
        default=None,
        dest="project_root",
        help="Firecracker checkout to build from, used as given (default: nearest parent of the working directory holding tools/devtool).",
    )
    parent.add_argument(
        "--destination",
        type=str,
        default=None,
        help="Repository directory to stage into (overrides BAZEL_REPO_DIR).",
    )
    parent.add_argument(
        "--suffix",
        type=str,
        default=None,
        help="Suffix appended to staged binary names (overrides SUFFIX). Use --suffix=-x for values starting with a dash.",
    )
    return parent


def _register_subcommands(
    subparsers: argparse._SubParsersAction,  # type: ignore[type-arg]
    parent: argparse.ArgumentParser,
) -> None:
    """Register all subcommands; each one sets its handler via set_defaults(func=...)."""
    commands = [
        ("stage", "Build release binaries and stage them as a Bazel repository.", handle_stage),
        ("verify", "Check a staged repository is complete.", handle_verify),
        ("info", "Display environment and resolved configuration.", handle_info),
    ]

    for name, help_text, handler in commands:
        parser = subparsers.add_parser(name, parents=[parent], help=help_text)
        parser.set_defaults(func=handler, skip_build=False)

    stage_parser = subparsers.choices["stage"]
    stage_parser.add_argument(
        "--skip-build",
        action="store_true",
        default=False,
        dest="skip_build",
        help="Stage the binaries left by a previous release build without rebuilding.",
    )


def build_parser() -> argparse.ArgumentParser:
    parent = _build_global_parser()
    root_parser = argparse.ArgumentParser(
        prog="fcstage",
        description="Stage Firecracker release binaries as an external Bazel repository.",
        parents=[parent],
    )
    subparsers = root_parser.add_subparsers(dest="command")
    _register_subcommands(subparsers, parent)
    return root_parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """
    Main CLI entrypoint, referenced by [project.scripts] in pyproject.toml.

    Parses the command line, runs the chosen handler and exits with its
    return code. With no subcommand it stages, like running the packaging
    script directly.
    """
    root_parser = build_parser()
    args = root_parser.parse_args(argv)

    if getattr(args, "func", None) is None:
        args.func = handle_stage
        args.skip_build = False

    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
