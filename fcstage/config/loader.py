# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Config loader: reads YAML from disk and produces a validated, frozen FcstageConfig.

The pipeline is linear:
  1. Read the file
  2. Parse it as YAML into a plain dict
  3. Hand the dict to pydantic for schema validation
  4. Return the frozen config object

Any failure stops here with a ConfigLoadError or ConfigValidationError.
Running without a config file at all is fine and yields the built-in defaults.
"""

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from fcstage.config.exceptions import ConfigLoadError, ConfigValidationError
from fcstage.config.schema import FcstageConfig


def _read_yaml_file(config_path: Path) -> dict[str, Any]:
    """
    Read a YAML file and return the parsed mapping.

    An empty file parses to None, which we treat as an empty mapping.

    Raises:
        ConfigLoadError: If the file doesn't exist, isn't readable, isn't valid
            YAML, or doesn't hold a mapping at the top level.
    """
    if not config_path.exists():
        raise ConfigLoadError(f"Config file not found: {config_path}")

    if not config_path.is_file():
        raise ConfigLoadError(f"Config path is not a file: {config_path}")

    try:
        raw_text = config_path.read_text(encoding="utf-8")
    except OSError as err:
        raise ConfigLoadError(f"Cannot read config file {config_path}: {err}") from err

    try:
        parsed = yaml.safe_load(raw_text)
    except yaml.YAMLError as err:
        raise ConfigLoadError(f"Invalid YAML in {config_path}: {err}") from err

    if parsed is None:
        return {}

    if not isinstance(parsed, dict):
        raise ConfigLoadError(
            f"Config file must contain a YAML mapping (dict), got {type(parsed).__name__}"
        )

    return parsed


def load_config(config_path: Optional[Path] = None) -> FcstageConfig:
    """
    Load, validate, and freeze a config file into a FcstageConfig.

    Args:
        config_path: Path to a YAML config file, or None for the defaults.

    Returns:
        A fully validated, frozen FcstageConfig instance.

    Raises:
        ConfigLoadError: File I/O or YAML parse failures.
        ConfigValidationError: Schema violations (unknown keys, wrong types).
    """
    if config_path is None:
        return FcstageConfig()

    raw_data = _read_yaml_file(config_path)

    try:
        return FcstageConfig.model_validate(raw_data)
    except ValidationError as err:
        raise ConfigValidationError(
            f"Config validation failed for {config_path}:\n{err}"
        ) from err
