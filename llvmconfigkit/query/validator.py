"""
Requirement validation against a built Config.

Checks run in order and stop at the first violation:
1. minimum version (numeric, component-wise)
2. components provided by the installation
3. components covered by the scope the Config was built with
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Iterable, Optional, Tuple, Union

from llvmconfigkit.core.exceptions import (
    ComponentNotRequestedError,
    MissingComponentsError,
    QueryNotAvailableError,
    RequirementError,
    VersionTooLowError,
)
from llvmconfigkit.query.kinds import get_query
from llvmconfigkit.query.model import Config
from llvmconfigkit.query.parsers import Version

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Requirement:
    """
    What a caller needs from an installation.

    Attributes:
        min_version: Lowest acceptable version, or None for any
        components: Components that must be present
    """

    min_version: Optional[Version] = None
    components: FrozenSet[str] = frozenset()

    def __post_init__(self):
        if self.min_version is not None:
            object.__setattr__(self, "min_version", Version.coerce(self.min_version))
        components = self.components
        if isinstance(components, str):
            components = [components]
        object.__setattr__(self, "components", frozenset(components))

    @classmethod
    def of(
        cls,
        min_version: Optional[Union[Version, str]] = None,
        components: Iterable[str] = (),
    ) -> "Requirement":
        return cls(min_version=min_version, components=frozenset(components))


@dataclass(frozen=True)
class AcceptedConfig:
    """
    The part of a Config relevant to one Requirement.

    Only the requested components are exposed. Component-scoped fragments
    (libs, libnames, libfiles) are readable only when the Config was built
    for exactly those components; otherwise they would name libraries the
    caller did not ask for. Other fragments are read through to the Config.
    """

    config: Config = field(repr=False)
    components: FrozenSet[str]

    @property
    def version(self) -> Version:
        return self.config.version

    @property
    def executable(self) -> Path:
        return self.config.executable

    @property
    def scoped_fragments_available(self) -> bool:
        """Whether libs, libnames and libfiles cover exactly these components."""
        requested = self.config.requested_components
        return bool(requested) and requested == self.components

    def flags(self, kind: str) -> Tuple[str, ...]:
        """
        Get a flag fragment.

        Raises:
            QueryNotAvailableError: If kind is component-scoped and the
                Config was built for other components, or kind was not
                queried or failed
        """
        if get_query(kind).scoped and not self.scoped_fragments_available:
            built_for = (
                ", ".join(sorted(self.config.requested_components)) or "all components"
            )
            raise QueryNotAvailableError(
                kind,
                f"was run for {built_for}, not for the requested "
                f"{', '.join(sorted(self.components)) or '<none>'}",
            )
        return self.config.flags(kind)

    def paths(self, kind: str) -> Tuple[Path, ...]:
        return self.config.paths(kind)

    def value(self, kind: str) -> str:
        return self.config.value(kind)


@dataclass
class ValidationResult:
    """Outcome of validate(): either an AcceptedConfig or the first violation."""

    valid: bool
    error: Optional[RequirementError] = None
    accepted: Optional[AcceptedConfig] = None

    def unwrap(self) -> AcceptedConfig:
        """
        Return the accepted configuration.

        Raises:
            RequirementError: The violation, if validation failed
        """
        if self.error is not None:
            raise self.error
        return self.accepted

    def __bool__(self) -> bool:
        return self.valid


def _check(config: Config, requirement: Requirement) -> Optional[RequirementError]:
    if requirement.min_version is not None and config.version < requirement.min_version:
        return VersionTooLowError(requirement.min_version, config.version)

    missing = requirement.components - config.components
    if missing:
        return MissingComponentsError(requirement.components, config.components)

    if config.requested_components:
        unscoped = requirement.components - config.requested_components
        if unscoped:
            return ComponentNotRequestedError(unscoped, config.requested_components)

    return None


def validate(config: Config, requirement: Requirement) -> ValidationResult:
    """
    Validate a Config against a Requirement.

    Args:
        config: Built configuration (not modified)
        requirement: Caller's requirement (not modified)

    Returns:
        ValidationResult carrying either the AcceptedConfig or the first
        violated constraint

    Example:
        >>> result = validate(config, Requirement.of("15.0", ["core"]))
        >>> if not result.valid:
        ...     print(result.error)
    """
    error = _check(config, requirement)
    if error is not None:
        logger.info(f"Requirement not met by {config}: {error}")
        return ValidationResult(valid=False, error=error)

    logger.debug(f"Requirement met by {config}")
    return ValidationResult(
        valid=True,
        accepted=AcceptedConfig(config=config, components=requirement.components),
    )
