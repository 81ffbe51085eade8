"""
Settings management and singleton pattern.

This module provides the settings loading interface, implementing a
singleton pattern so the settings file is read only once per process.
"""

import logging
from pathlib import Path
from typing import Optional

from ..models.config import HookSettings
from ..validation import handle_config_error, ErrorSeverity
from .loader import default_settings_path, load_hooks_section
from .validators import validate_hook_settings

logger = logging.getLogger(__name__)

# --- Global Singleton for Settings ---

_CONFIG: Optional[HookSettings] = None

# None means "resolve from the environment on first load".
_CONFIG_FILE_PATH: Optional[Path] = None


def set_config_path(config_path: Path) -> None:
    """
    Set a custom settings file path.

    Clears any cached settings so the next ``get_config()`` reads the new file.

    Args:
        config_path: Path to the settings TOML file
    """
    global _CONFIG_FILE_PATH, _CONFIG
    _CONFIG_FILE_PATH = Path(config_path)
    _CONFIG = None
    logger.info(f"Settings path set to: {config_path}")


def clear_config_cache() -> None:
    """Clear the cached settings, forcing a reload on next access."""
    global _CONFIG
    _CONFIG = None
    logger.debug("Settings cache cleared")


def _current_path() -> Path:
    return _CONFIG_FILE_PATH if _CONFIG_FILE_PATH is not None else default_settings_path()


def _load_config(config_path: Path) -> HookSettings:
    """
    Load and validate the settings file.

    Raises:
        ValidationError: If a setting has an invalid value
        tomllib.TOMLDecodeError: If the file is malformed
    """
    try:
        hooks_data = load_hooks_section(config_path)
        settings = validate_hook_settings(hooks_data)
        logger.debug(f"Loaded hook settings: {settings}")
        return settings
    except Exception as e:
        handle_config_error(
            error=e,
            context="loading hook settings",
            severity=ErrorSeverity.ERROR,
            reraise=True,
            logger=logger
        )


def get_config() -> HookSettings:
    """
    Get the process-wide hook settings, loading them if necessary.

    Returns:
        The singleton HookSettings instance
    """
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = _load_config(_current_path())
    return _CONFIG


def is_config_loaded() -> bool:
    """Check if settings have been loaded and cached."""
    return _CONFIG is not None


def get_config_info() -> dict:
    """
    Get information about the current settings state.

    Returns:
        Dictionary with settings metadata
    """
    return {
        "config_loaded": is_config_loaded(),
        "config_path": str(_current_path()),
        "shell": _CONFIG.shell if _CONFIG else None,
        "channel": _CONFIG.channel if _CONFIG else None,
    }
