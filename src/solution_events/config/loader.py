"""
Settings file loading utilities.

This module handles the low-level loading and parsing of the TOML settings
file and resolves where that file lives.
"""

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

from ..validation import ValidationError, handle_config_error, ErrorSeverity

logger = logging.getLogger(__name__)

SETTINGS_ENV_VAR = "SOLUTION_EVENTS_CONFIG"


def load_toml_file(file_path: Path, description: str = "settings file") -> Dict[str, Any]:
    """
    Load and parse a TOML file with error handling.

    Args:
        file_path: Path to the TOML file to load
        description: Human-readable description for error messages

    Returns:
        Parsed TOML data as a dictionary

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the file is malformed
    """
    logger.info(f"Loading {description} from: {file_path}")

    if not file_path.exists():
        raise FileNotFoundError(f"{description} not found: {file_path}")

    try:
        with open(file_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        handle_config_error(
            error=e,
            context=f"parsing {description}",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )


def load_hooks_section(settings_path: Path) -> Dict[str, Any]:
    """
    Load the ``[hooks]`` table from the settings file.

    A missing file is not an error: it yields an empty table so every
    setting takes its default.
    """
    try:
        data = load_toml_file(settings_path, "hooks settings file")
    except FileNotFoundError:
        logger.info(f"No settings file at {settings_path}, using defaults")
        return {}

    hooks = data.get("hooks", {})
    if not isinstance(hooks, dict):
        raise ValidationError(
            f"[hooks] in {settings_path} must be a table, got {type(hooks).__name__}",
            field_name="hooks",
            value=hooks,
        )
    return hooks


def default_settings_path(environ: Optional[Dict[str, str]] = None) -> Path:
    """
    Resolve the settings file path.

    ``SOLUTION_EVENTS_CONFIG`` wins when set; otherwise the file lives in
    the user's config directory.
    """
    env = os.environ if environ is None else environ
    override = env.get(SETTINGS_ENV_VAR)
    if override:
        return Path(override).expanduser()

    config_home = env.get("XDG_CONFIG_HOME")
    base = Path(config_home) if config_home else Path.home() / ".config"
    return base / "solution-events" / "config.toml"
