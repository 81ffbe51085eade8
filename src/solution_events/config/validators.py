"""
Settings validation utilities.

Turns the raw ``[hooks]`` table into a validated ``HookSettings``.
"""

import logging
from pathlib import Path
from typing import Any, Dict

from ..models.config import HookSettings, DEFAULT_CHANNEL, DEFAULT_CONFIG_FILENAME, default_shell
from ..validation import (
    ValidationError,
    validate_boolean,
    validate_encoding,
    validate_file_name,
    validate_non_empty_string,
    validate_optional_string,
)

logger = logging.getLogger(__name__)

KNOWN_KEYS = {
    "shell",
    "config_filename",
    "channel",
    "continue_on_failure",
    "editor",
    "log_dir",
    "encoding",
}


def validate_hook_settings(hooks_data: Dict[str, Any]) -> HookSettings:
    """
    Validate and create a HookSettings from raw configuration data.

    Args:
        hooks_data: Raw ``[hooks]`` table from TOML

    Returns:
        Validated HookSettings instance

    Raises:
        ValidationError: If validation fails
    """
    unknown = sorted(set(hooks_data) - KNOWN_KEYS)
    if unknown:
        logger.warning(f"Ignoring unknown keys in [hooks]: {', '.join(unknown)}")

    shell = validate_non_empty_string(
        hooks_data.get("shell", default_shell()), field_name="hooks.shell"
    )
    config_filename = validate_file_name(
        hooks_data.get("config_filename", DEFAULT_CONFIG_FILENAME),
        field_name="hooks.config_filename",
    )
    channel = validate_non_empty_string(
        hooks_data.get("channel", DEFAULT_CHANNEL), field_name="hooks.channel"
    )
    continue_on_failure = validate_boolean(
        hooks_data.get("continue_on_failure", True),
        field_name="hooks.continue_on_failure",
    )
    editor = validate_optional_string(hooks_data.get("editor"), field_name="hooks.editor")
    encoding = validate_encoding(
        hooks_data.get("encoding", "utf-8"), field_name="hooks.encoding"
    )

    log_dir_raw = validate_optional_string(hooks_data.get("log_dir"), field_name="hooks.log_dir")
    log_dir = Path(log_dir_raw).expanduser() if log_dir_raw else None
    if log_dir is not None and log_dir.exists() and not log_dir.is_dir():
        raise ValidationError(
            f"hooks.log_dir must be a directory: {log_dir}",
            field_name="hooks.log_dir",
            value=log_dir_raw,
        )

    return HookSettings(
        shell=shell,
        config_filename=config_filename,
        channel=channel,
        continue_on_failure=continue_on_failure,
        editor=editor,
        log_dir=log_dir,
        encoding=encoding,
    )
