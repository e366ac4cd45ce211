"""
Query layer for llvmconfigkit.

Locates llvm-config, runs it, parses its output into a typed Config and
validates caller requirements against that Config.
"""

from .locator import (
    DEFAULT_CANDIDATES,
    DEFAULT_ENV_VAR,
    ExecutableLocator,
    LocatorSession,
    locate,
)

from .runner import (
    CommandRunner,
    run,
)

from .parsers import (
    Version,
    parse_version,
    parse_flags,
    parse_components,
    parse_paths,
    parse_scalar,
)

from .kinds import (
    DEFAULT_QUERIES,
    QUERIES,
    FragmentShape,
    LinkMode,
    QueryKind,
    get_query,
    get_link_mode,
)

from .model import (
    Config,
    ConfigBuilder,
    build,
)

from .validator import (
    AcceptedConfig,
    Requirement,
    ValidationResult,
    validate,
)

__all__ = [
    "DEFAULT_CANDIDATES",
    "DEFAULT_ENV_VAR",
    "ExecutableLocator",
    "LocatorSession",
    "locate",
    "CommandRunner",
    "run",
    "Version",
    "parse_version",
    "parse_flags",
    "parse_components",
    "parse_paths",
    "parse_scalar",
    "DEFAULT_QUERIES",
    "QUERIES",
    "FragmentShape",
    "LinkMode",
    "QueryKind",
    "get_query",
    "get_link_mode",
    "Config",
    "ConfigBuilder",
    "build",
    "AcceptedConfig",
    "Requirement",
    "ValidationResult",
    "validate",
]
