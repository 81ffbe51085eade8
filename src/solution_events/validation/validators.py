"""
Validation functions for settings values and command documents.
"""

from pathlib import Path
from typing import Any, List, Optional

from .exceptions import ValidationError


def validate_non_empty_string(value: Any, field_name: str = "value") -> str:
    """
    Validate that a value is a non-blank string.

    Args:
        value: Value to validate
        field_name: Name of the field being validated

    Returns:
        The stripped string

    Raises:
        ValidationError: If validation fails
    """
    if not isinstance(value, str):
        raise ValidationError(
            f"{field_name} must be a string, got {type(value).__name__}",
            field_name=field_name,
            value=value
        )
    stripped = value.strip()
    if not stripped:
        raise ValidationError(
            f"{field_name} cannot be empty",
            field_name=field_name,
            value=value
        )
    return stripped


def validate_optional_string(value: Any, field_name: str = "value") -> Optional[str]:
    """Validate a string that may be omitted or left blank."""
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return validate_non_empty_string(value, field_name=field_name)


def validate_boolean(value: Any, field_name: str = "value") -> bool:
    """
    Validate that a value is a real boolean.

    TOML has native booleans, so strings such as "false" are rejected
    rather than coerced.
    """
    if not isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be true or false, got {value!r}",
            field_name=field_name,
            value=value
        )
    return value


def validate_file_name(value: Any, field_name: str = "file name") -> str:
    """
    Validate a bare file name (no directory components).

    Raises:
        ValidationError: If the name is empty or contains a path separator
    """
    name = validate_non_empty_string(value, field_name=field_name)
    if Path(name).name != name or name in (".", ".."):
        raise ValidationError(
            f"{field_name} must be a bare file name, got {value!r}",
            field_name=field_name,
            value=value
        )
    return name


def validate_encoding(value: Any, field_name: str = "encoding") -> str:
    """Validate that a value names a codec Python knows about."""
    import codecs

    name = validate_non_empty_string(value, field_name=field_name)
    try:
        codecs.lookup(name)
    except LookupError:
        raise ValidationError(
            f"{field_name} is not a known text encoding: {name}",
            field_name=field_name,
            value=value
        )
    return name


def validate_command_list(value: Any, field_name: str = "commands") -> List[str]:
    """
    Validate an ordered list of command-line strings.

    ``None`` is accepted and means an empty list.

    Raises:
        ValidationError: If the value is not a list of strings
    """
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError(
            f"{field_name} must be a list of strings, got {type(value).__name__}",
            field_name=field_name,
            value=value
        )
    for index, item in enumerate(value):
        if not isinstance(item, str):
            raise ValidationError(
                f"{field_name}[{index}] must be a string, got {type(item).__name__}",
                field_name=field_name,
                value=item
            )
    return list(value)
