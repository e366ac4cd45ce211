"""
Core functionality for llvmconfigkit.

This package contains the foundational modules that other components depend on.
"""

from .platform import (
    PlatformInfo,
    detect_platform,
)

from .exceptions import (
    LLVMConfigKitError,
    LocatorError,
    ExecutableNotFoundError,
    CommandError,
    LaunchFailedError,
    NonZeroExitError,
    OutputDecodeError,
    ParseError,
    MalformedVersionError,
    MalformedFlagsError,
    ConfigError,
    ConfigUnavailableError,
    QueryNotAvailableError,
    QueryKindError,
    PartialConfigError,
    RequirementError,
    MissingComponentsError,
    VersionTooLowError,
    ComponentNotRequestedError,
    SettingsError,
)

__all__ = [
    "PlatformInfo",
    "detect_platform",
    "LLVMConfigKitError",
    "LocatorError",
    "ExecutableNotFoundError",
    "CommandError",
    "LaunchFailedError",
    "NonZeroExitError",
    "OutputDecodeError",
    "ParseError",
    "MalformedVersionError",
    "MalformedFlagsError",
    "ConfigError",
    "ConfigUnavailableError",
    "QueryNotAvailableError",
    "QueryKindError",
    "PartialConfigError",
    "RequirementError",
    "MissingComponentsError",
    "VersionTooLowError",
    "ComponentNotRequestedError",
    "SettingsError",
]
