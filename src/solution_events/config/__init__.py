"""
Configuration management for the solution_events package.

Two layers live here:
- extension settings, loaded once from a TOML file (``get_config``)
- per-solution command documents, read fresh on every event (``ConfigStore``)
"""

# Settings interface
from .manager import (
    clear_config_cache,
    get_config,
    get_config_info,
    is_config_loaded,
    set_config_path,
)

# Advanced usage - direct access to loaders and validators
from .loader import default_settings_path, load_hooks_section, load_toml_file
from .validators import validate_hook_settings

# Command documents
from .store import ConfigStore, parse_document

__all__ = [
    # Settings
    "get_config",
    "set_config_path",
    "clear_config_cache",
    "is_config_loaded",
    "get_config_info",
    "default_settings_path",
    "load_hooks_section",
    "load_toml_file",
    "validate_hook_settings",
    # Command documents
    "ConfigStore",
    "parse_document",
]
