# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Checks that a staged directory is a usable external repository.

A staged repository is accepted only if:
  - WORKSPACE exists and is empty
  - BUILD exists and exports both binaries
  - firecracker<suffix> and jailer<suffix> exist and are non-empty

Problems are collected into a report rather than raised, so `fcstage verify`
can list every failed check at once.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from fcstage.logging.logger import get_logger
from fcstage.repository.markers import BUILD_FILENAME, EXPORTED_FILES, WORKSPACE_FILENAME
from fcstage.utils.filesystem import safe_read

_logger: logging.Logger = get_logger(__name__)


@dataclass(frozen=True)
class VerificationReport:
    """Complete outcome of a repository verification."""

    is_valid: bool
    destination: str
    checks_passed: list[str] = field(default_factory=list)
    checks_failed: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def _check_workspace(destination: Path) -> tuple[bool, list[str]]:
    workspace_path = destination / WORKSPACE_FILENAME
    if not workspace_path.is_file():
        return False, [f"{WORKSPACE_FILENAME} not found"]
    if workspace_path.stat().st_size != 0:
        return False, [f"{WORKSPACE_FILENAME} is not empty"]
    return True, []


def _check_build_file(destination: Path) -> tuple[bool, list[str]]:
    try:
        content = safe_read(destination / BUILD_FILENAME)
    except OSError as err:
        return False, [f"Cannot read {BUILD_FILENAME}: {err}"]

    if "exports_files" not in content:
        return False, [f"{BUILD_FILENAME} has no exports_files declaration"]

    missing = [name for name in EXPORTED_FILES if f'"{name}"' not in content]
    if missing:
        return False, [f"{BUILD_FILENAME} does not export: {', '.join(missing)}"]
    return True, []


def _check_binaries(destination: Path, suffix: str) -> tuple[bool, list[str]]:
    errors: list[str] = []
    for name in EXPORTED_FILES:
        binary = destination / f"{name}{suffix}"
        if not binary.is_file():
            errors.append(f"{binary.name} not found")
        elif binary.stat().st_size == 0:
            errors.append(f"{binary.name} is empty (0 bytes)")
    return len(errors) == 0, errors


def verify_repository(destination: Path, suffix: str) -> VerificationReport:
    """
    Run every check against a staged repository.

    Args:
        destination: The staged directory.
        suffix: The suffix the binaries were staged with.

    Returns:
        VerificationReport; is_valid is True only if every check passed.
    """
    if not destination.is_dir():
        _logger.error("Destination is not a directory", extra={"destination": str(destination)})
        return VerificationReport(
            is_valid=False,
            destination=str(destination),
            checks_failed=["destination"],
            errors=[f"Destination not found or not a directory: {destination}"],
        )

    checks = [
        ("workspace", _check_workspace(destination)),
        ("build_file", _check_build_file(destination)),
        ("binaries", _check_binaries(destination, suffix)),
    ]

    passed: list[str] = []
    failed: list[str] = []
    errors: list[str] = []
    for name, (ok, check_errors) in checks:
        if ok:
            passed.append(name)
        else:
            failed.append(name)
            errors.extend(check_errors)

    report = VerificationReport(
        is_valid=not failed,
        destination=str(destination),
        checks_passed=passed,
        checks_failed=failed,
        errors=errors,
    )

    _logger.info(
        "Verification complete",
        extra={
            "destination": str(destination),
            "valid": report.is_valid,
            "passed": len(passed),
            "failed": len(failed),
        },
    )
    return report
