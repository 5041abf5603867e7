# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""
Configuration loading for runscript.

Config is a YAML mapping, looked up in order:
1. explicit path argument
2. $RUNSCRIPT_CONFIG
3. ~/.runscript/config.yml (optional)

Example:
    interpreter: /usr/local/bin/bash
    keep_scripts: false
    project_root: ~/src/my-tool
    staging: fresh
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from runscript.scripts.runner import (
    DEFAULT_BASE_DIR,
    DEFAULT_TOOL_NAME,
    STAGING_FRESH,
    STAGING_MODES,
    RunnerConfig,
)

DEFAULT_CONFIG_PATH = Path("~/.runscript/config.yml")

KNOWN_KEYS = {"interpreter", "keep_scripts", "project_root", "staging", "tool_name", "base_dir"}


class ConfigError(Exception):
    """Raised when the configuration file is invalid."""

    pass


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load the configuration mapping.

    Args:
        config_path: Explicit config file; must exist when given.

    Returns:
        Configuration dict (empty when no default config file exists).

    Raises:
        FileNotFoundError: If an explicitly requested file does not exist.
        ConfigError: If the file is not valid YAML or not a mapping.
    """
    explicit = config_path or os.environ.get("RUNSCRIPT_CONFIG")
    path = Path(explicit or DEFAULT_CONFIG_PATH).expanduser()

    if not path.exists():
        if explicit:
            raise FileNotFoundError(f"Config file not found: {path}")
        return {}

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a YAML mapping")
    return data


def runner_config_from_mapping(data: Dict[str, Any]) -> RunnerConfig:
    """Build a RunnerConfig from a config mapping plus environment overrides.

    $RUNSCRIPT_PROJECT_ROOT overrides project_root.

    Raises:
        ConfigError: On unknown keys or invalid values.
    """
    unknown = set(data) - KNOWN_KEYS
    if unknown:
        raise ConfigError(f"unknown config keys: {', '.join(sorted(unknown))}")

    staging = data.get("staging", STAGING_FRESH)
    if staging not in STAGING_MODES:
        raise ConfigError(
            f"staging must be one of {', '.join(STAGING_MODES)}, got: {staging}"
        )

    keep_scripts = data.get("keep_scripts", False)
    if not isinstance(keep_scripts, bool):
        raise ConfigError(f"keep_scripts must be true or false, got: {keep_scripts}")

    project_root = os.environ.get("RUNSCRIPT_PROJECT_ROOT") or data.get("project_root")

    return RunnerConfig(
        base_dir=str(data.get("base_dir", DEFAULT_BASE_DIR)),
        interpreter=data.get("interpreter"),
        clean_scripts=not keep_scripts,
        project_root=Path(project_root).expanduser() if project_root else None,
        tool_name=str(data.get("tool_name", DEFAULT_TOOL_NAME)),
        staging=staging,
    )
