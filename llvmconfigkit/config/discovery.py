"""
End-to-end discovery: locate llvm-config, build a Config and validate it.
"""

import logging
from typing import Mapping, Optional

from llvmconfigkit.config.parser import Settings
from llvmconfigkit.query.locator import LocatorSession
from llvmconfigkit.query.model import ConfigBuilder
from llvmconfigkit.query.kinds import get_link_mode
from llvmconfigkit.query.runner import CommandRunner
from llvmconfigkit.query.validator import AcceptedConfig, validate

logger = logging.getLogger(__name__)


def discover(
    settings: Optional[Settings] = None,
    session: Optional[LocatorSession] = None,
    runner: Optional[CommandRunner] = None,
    env: Optional[Mapping[str, str]] = None,
) -> AcceptedConfig:
    """
    Discover an llvm-config installation that satisfies the settings.

    Args:
        settings: Settings (default: Settings())
        session: Locator session to reuse across calls in one build
        runner: Runner for queries (default: CommandRunner())
        env: Environment for the lookup (default: os.environ)

    Returns:
        AcceptedConfig for the settings' requirement

    Raises:
        ExecutableNotFoundError: If llvm-config cannot be found
        ConfigUnavailableError: If a required query failed
        MissingComponentsError: If required components are absent
        VersionTooLowError: If the installation is too old

    Example:
        >>> from llvmconfigkit.config import discover, load_settings
        >>> accepted = discover(load_settings(Path("llvmconfigkit.yaml")))
        >>> accepted.flags("libs")
    """
    settings = settings or Settings()
    if session is None:
        session = LocatorSession(
            settings.make_locator(), explicit=settings.executable, env=env
        )

    executable = session.locate()
    requirement = settings.requirement.to_requirement()
    logger.info(f"Discovering configuration from {executable}")

    builder = ConfigBuilder(
        runner=runner,
        strict=settings.strict,
        queries=settings.queries,
        link_mode=get_link_mode(settings.link_mode),
    )
    config = builder.build(executable, requirement.components)
    return validate(config, requirement).unwrap()
