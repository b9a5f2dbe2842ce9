# PATH: config/__init__.py
"""
Configuration loading for DEXARB.
"""

from config.settings import (
    CONFIG_DIR,
    DEFAULT_SETTINGS_PATH,
    Settings,
    load_settings,
    parse_settings,
)

__all__ = [
    "CONFIG_DIR",
    "DEFAULT_SETTINGS_PATH",
    "Settings",
    "load_settings",
    "parse_settings",
]
