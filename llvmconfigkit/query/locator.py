"""
Executable lookup for llvm-config.

Finds the configuration-query executable from, in order of precedence:
- an explicit path supplied by the caller
- the LLVM_CONFIG_PATH environment variable
- a PATH search over one or more candidate names
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Mapping, Optional, Sequence, Union

from llvmconfigkit.core.exceptions import ExecutableNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_ENV_VAR = "LLVM_CONFIG_PATH"
DEFAULT_CANDIDATES = ("llvm-config",)


class ExecutableLocator:
    """
    Locate the configuration-query executable.

    The locator never runs or validates the binary; an explicit or
    environment-supplied path is returned as given and any problem with it
    surfaces when the runner tries to spawn it.
    """

    def __init__(
        self,
        candidates: Sequence[str] = DEFAULT_CANDIDATES,
        env_var: Optional[str] = DEFAULT_ENV_VAR,
    ):
        """
        Initialize locator.

        Args:
            candidates: Executable names to search for on PATH, in priority order
            env_var: Name of the override variable, or None to disable it
        """
        if not candidates:
            raise ValueError("At least one candidate executable name is required")
        self.candidates = tuple(candidates)
        self.env_var = env_var

    def locate(
        self,
        explicit: Optional[Union[str, Path]] = None,
        env: Optional[Mapping[str, str]] = None,
        search_path: Optional[str] = None,
    ) -> Path:
        """
        Produce exactly one candidate path.

        Args:
            explicit: Path supplied by the caller; wins over everything else
            env: Environment to read (default: os.environ)
            search_path: PATH string to search (default: the env's PATH)

        Returns:
            Path to the executable

        Raises:
            ExecutableNotFoundError: If no candidate exists on the search path
        """
        if explicit:
            logger.debug(f"Using explicit executable path: {explicit}")
            return Path(explicit)

        env = os.environ if env is None else env

        if self.env_var:
            override = env.get(self.env_var, "").strip()
            if override:
                logger.debug(f"Using {self.env_var}={override}")
                return Path(override)

        if search_path is None:
            search_path = env.get("PATH", os.defpath)

        for name in self.candidates:
            found = shutil.which(name, path=search_path)
            if found:
                logger.info(f"Found {name} in PATH: {found}")
                return Path(found)
            logger.debug(f"{name} not found in PATH")

        raise ExecutableNotFoundError(self.candidates, self.env_var)


class LocatorSession:
    """
    Remembers a located executable for the duration of one build session.

    Example:
        >>> session = LocatorSession()
        >>> path = session.locate()      # searches PATH
        >>> path = session.locate()      # cached
        >>> session.invalidate()         # next call searches again
    """

    def __init__(
        self,
        locator: Optional[ExecutableLocator] = None,
        explicit: Optional[Union[str, Path]] = None,
        env: Optional[Mapping[str, str]] = None,
        search_path: Optional[str] = None,
    ):
        self.locator = locator or ExecutableLocator()
        self.explicit = explicit
        self.env = env
        self.search_path = search_path
        self._cached: Optional[Path] = None

    @property
    def cached(self) -> Optional[Path]:
        return self._cached

    def locate(self) -> Path:
        if self._cached is None:
            self._cached = self.locator.locate(
                self.explicit, env=self.env, search_path=self.search_path
            )
        return self._cached

    def invalidate(self) -> None:
        """Forget the cached path."""
        self._cached = None


def locate(
    explicit: Optional[Union[str, Path]] = None,
    *,
    env: Optional[Mapping[str, str]] = None,
    search_path: Optional[str] = None,
    candidates: Optional[Sequence[str]] = None,
    env_var: Optional[str] = DEFAULT_ENV_VAR,
) -> Path:
    """
    Convenience function to locate llvm-config.

    Args:
        explicit: Explicit executable path
        env: Environment mapping (default: os.environ)
        search_path: PATH string to search
        candidates: Executable names (default: ['llvm-config'])
        env_var: Override variable name (default: LLVM_CONFIG_PATH)

    Returns:
        Path to the executable

    Raises:
        ExecutableNotFoundError: If nothing was found
    """
    locator = ExecutableLocator(candidates or DEFAULT_CANDIDATES, env_var)
    return locator.locate(explicit, env=env, search_path=search_path)
