"""
Centralized exception hierarchy for llvmconfigkit.

This module defines all custom exceptions raised while locating, invoking
and interpreting a toolchain's configuration-query executable, so callers
can catch one section base or the whole family with LLVMConfigKitError.
"""

from pathlib import Path
from typing import Iterable, Optional, Sequence


def _names(values: Iterable[str]) -> str:
    return ", ".join(sorted(values)) or "<none>"


# ============================================================================
# Base Exceptions
# ============================================================================


class LLVMConfigKitError(Exception):
    """Base exception for all llvmconfigkit errors."""

    pass


# ============================================================================
# Locator Exceptions
# ============================================================================


class LocatorError(LLVMConfigKitError):
    """Base exception for executable lookup errors."""

    pass


class ExecutableNotFoundError(LocatorError):
    """Raised when no configuration-query executable can be found."""

    def __init__(self, candidates: Sequence[str], env_var: Optional[str] = None):
        self.candidates = tuple(candidates)
        self.env_var = env_var
        msg = f"Could not find {' or '.join(self.candidates)} on PATH"
        if env_var:
            msg += f"; set {env_var} to the executable's location"
        super().__init__(msg)


# ============================================================================
# Command Exceptions
# ============================================================================


class CommandError(LLVMConfigKitError):
    """Base exception for process invocation errors."""

    def __init__(self, message: str, executable: Path, arguments: Sequence[str]):
        self.executable = executable
        self.arguments = tuple(arguments)
        super().__init__(message)

    @property
    def command_line(self) -> str:
        return " ".join([str(self.executable), *self.arguments])


class LaunchFailedError(CommandError):
    """Raised when the executable could not be spawned at all."""

    def __init__(self, executable: Path, arguments: Sequence[str], reason: Exception):
        self.reason = reason
        super().__init__(
            f"Unable to invoke {executable}: {reason}. "
            f"Is it installed and executable?",
            executable,
            arguments,
        )


class NonZeroExitError(CommandError):
    """Raised when the executable exits with a nonzero status."""

    def __init__(
        self, executable: Path, arguments: Sequence[str], code: int, stderr: str
    ):
        self.code = code
        self.stderr = stderr
        msg = f"{executable} {' '.join(arguments)} ran unsuccessfully with exit code {code}"
        if stderr.strip():
            msg += f": {stderr.strip()}"
        super().__init__(msg, executable, arguments)


class OutputDecodeError(CommandError):
    """Raised when the executable's output is not valid UTF-8."""

    def __init__(
        self,
        executable: Path,
        arguments: Sequence[str],
        reason: UnicodeDecodeError,
    ):
        self.reason = reason
        super().__init__(
            f"Output of {executable} {' '.join(arguments)} wasn't valid UTF-8",
            executable,
            arguments,
        )


# ============================================================================
# Parser Exceptions
# ============================================================================


class ParseError(LLVMConfigKitError):
    """Base exception for output parsing errors."""

    def __init__(self, message: str, raw: str):
        self.raw = raw
        super().__init__(message)


class MalformedVersionError(ParseError):
    """Raised when a version string cannot be parsed."""

    def __init__(self, raw: str, reason: str):
        self.reason = reason
        super().__init__(f"Malformed version {raw!r}: {reason}", raw)


class MalformedFlagsError(ParseError):
    """Raised when a flag string cannot be tokenized."""

    def __init__(self, raw: str, reason: str):
        self.reason = reason
        super().__init__(f"Malformed flags {raw!r}: {reason}", raw)


# ============================================================================
# Config Construction Exceptions
# ============================================================================


class ConfigError(LLVMConfigKitError):
    """Base exception for configuration model errors."""

    pass


class ConfigUnavailableError(ConfigError):
    """Raised when a query required to build a configuration failed."""

    def __init__(self, stage: str, cause: LLVMConfigKitError):
        self.stage = stage
        self.cause = cause
        super().__init__(f"Configuration unavailable: '{stage}' query failed: {cause}")


class QueryNotAvailableError(ConfigError, KeyError):
    """Raised when reading a fragment that was not queried or failed."""

    def __init__(self, kind: str, reason: str = "was not queried"):
        self.kind = kind
        self.reason = reason
        super().__init__(f"Query '{kind}' {reason}")

    def __str__(self) -> str:
        return str(self.args[0])


class QueryKindError(ConfigError, ValueError):
    """Raised for an unknown query name or a fragment read of the wrong shape."""

    pass


class PartialConfigError(ConfigError):
    """
    Raised (or carried by a Config) when optional queries failed.

    Attributes:
        failures: Mapping of query name to the error it raised
    """

    def __init__(self, failures: dict):
        self.failures = dict(failures)
        details = "; ".join(f"{kind}: {err}" for kind, err in self.failures.items())
        super().__init__(
            f"Partial configuration, {len(self.failures)} query(ies) failed: {details}"
        )


# ============================================================================
# Requirement Exceptions
# ============================================================================


class RequirementError(LLVMConfigKitError):
    """Base exception for unmet requirements."""

    pass


class MissingComponentsError(ConfigError, RequirementError):
    """Raised when requested components are not provided by the installation."""

    def __init__(self, requested: Iterable[str], available: Iterable[str]):
        self.requested = frozenset(requested)
        self.available = frozenset(available)
        self.missing = self.requested - self.available
        super().__init__(
            f"Missing components: {_names(self.missing)} "
            f"(requested: {_names(self.requested)}; "
            f"available: {_names(self.available)})"
        )


class VersionTooLowError(RequirementError):
    """Raised when the installed version is older than required."""

    def __init__(self, required, actual):
        self.required = required
        self.actual = actual
        super().__init__(f"Version {actual} is lower than the required {required}")


class ComponentNotRequestedError(RequirementError):
    """Raised when a requirement names components the configuration wasn't scoped to."""

    def __init__(self, components: Iterable[str], requested: Iterable[str]):
        self.components = frozenset(components)
        self.requested = frozenset(requested)
        super().__init__(
            f"Components {_names(self.components)} were not requested when the "
            f"configuration was built (built for: {_names(self.requested)})"
        )


# ============================================================================
# Settings Exceptions
# ============================================================================


class SettingsError(LLVMConfigKitError):
    """Settings file parsing or validation error."""

    pass
