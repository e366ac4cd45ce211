"""Settings file support for llvmconfigkit."""

from .parser import (
    SETTINGS_FILENAME,
    RequirementSettings,
    Settings,
    load_settings,
    parse_settings,
)
from .discovery import discover

__all__ = [
    "SETTINGS_FILENAME",
    "RequirementSettings",
    "Settings",
    "load_settings",
    "parse_settings",
    "discover",
]
