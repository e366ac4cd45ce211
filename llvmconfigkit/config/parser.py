"""YAML settings parser for llvmconfigkit.

This module provides parsing and validation for llvmconfigkit.yaml files,
which let a project pin the llvm-config executable, the queries to run and
the requirement to validate without code changes.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional
import yaml

from llvmconfigkit.core.exceptions import (
    MalformedVersionError,
    QueryKindError,
    SettingsError,
)
from llvmconfigkit.query.kinds import DEFAULT_QUERIES, REQUIRED_QUERIES, get_link_mode, get_query
from llvmconfigkit.query.locator import (
    DEFAULT_CANDIDATES,
    DEFAULT_ENV_VAR,
    ExecutableLocator,
)
from llvmconfigkit.query.parsers import Version
from llvmconfigkit.query.validator import Requirement

SETTINGS_FILENAME = "llvmconfigkit.yaml"

_TOP_LEVEL_KEYS = {
    "version",
    "executable",
    "env_var",
    "candidates",
    "strict",
    "link_mode",
    "queries",
    "requirement",
}
_REQUIREMENT_KEYS = {"min_version", "components"}


@dataclass
class RequirementSettings:
    """Requirement section of the settings file."""

    min_version: Optional[str] = None
    components: List[str] = field(default_factory=list)

    def to_requirement(self) -> Requirement:
        return Requirement.of(self.min_version, self.components)


@dataclass
class Settings:
    """Complete llvmconfigkit settings."""

    version: int = 1
    executable: Optional[str] = None
    env_var: Optional[str] = DEFAULT_ENV_VAR
    candidates: List[str] = field(default_factory=lambda: list(DEFAULT_CANDIDATES))
    strict: bool = False
    link_mode: Optional[str] = None  # 'static', 'shared'
    queries: List[str] = field(default_factory=lambda: list(DEFAULT_QUERIES))
    requirement: RequirementSettings = field(default_factory=RequirementSettings)

    def make_locator(self) -> ExecutableLocator:
        return ExecutableLocator(self.candidates, self.env_var)


def load_settings(settings_path: Optional[Path] = None) -> Settings:
    """
    Parse llvmconfigkit.yaml settings file.

    Args:
        settings_path: Path to the settings file; None gives defaults

    Returns:
        Parsed and validated settings

    Raises:
        SettingsError: If the file is missing or invalid
    """
    if settings_path is None:
        return Settings()

    settings_path = Path(settings_path)
    if not settings_path.exists():
        raise SettingsError(f"Settings file not found: {settings_path}")

    try:
        with open(settings_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SettingsError(f"Invalid YAML syntax in {settings_path}: {e}") from e

    if data is None:
        raise SettingsError(f"Settings file is empty: {settings_path}")

    return parse_settings(data)


def parse_settings(data: Any) -> Settings:
    """Parse and validate settings data loaded from YAML."""
    if not isinstance(data, dict):
        raise SettingsError("Settings must be a mapping")

    _reject_unknown(data, _TOP_LEVEL_KEYS, "settings")

    if data.get("version", 1) != 1:
        raise SettingsError(f"Unsupported version: {data['version']} (expected 1)")

    settings = Settings()

    if "executable" in data:
        settings.executable = _optional_str(data["executable"], "executable")

    if "env_var" in data:
        settings.env_var = _optional_str(data["env_var"], "env_var")

    if "candidates" in data:
        settings.candidates = _str_list(data["candidates"], "candidates")
        if not settings.candidates:
            raise SettingsError("'candidates' must name at least one executable")

    if "strict" in data:
        if not isinstance(data["strict"], bool):
            raise SettingsError("'strict' must be true or false")
        settings.strict = data["strict"]

    if "link_mode" in data:
        settings.link_mode = _optional_str(data["link_mode"], "link_mode")
        try:
            get_link_mode(settings.link_mode)
        except QueryKindError as e:
            raise SettingsError(str(e)) from e

    if "queries" in data:
        settings.queries = _parse_queries(data["queries"])

    if "requirement" in data:
        settings.requirement = _parse_requirement(data["requirement"])

    return settings


def _parse_queries(value: Any) -> List[str]:
    names = _str_list(value, "queries")
    required = {query.name for query in REQUIRED_QUERIES}
    for name in names:
        try:
            get_query(name)
        except QueryKindError as e:
            raise SettingsError(str(e)) from e
        if name in required:
            raise SettingsError(f"'{name}' is always queried; remove it from 'queries'")
    return names


def _parse_requirement(value: Any) -> RequirementSettings:
    if value is None:
        return RequirementSettings()
    if not isinstance(value, dict):
        raise SettingsError("'requirement' must be a mapping")

    _reject_unknown(value, _REQUIREMENT_KEYS, "requirement")

    min_version = value.get("min_version")
    if min_version is not None:
        # YAML reads 15.0 as a float
        min_version = str(min_version)
        try:
            Version.parse(min_version)
        except MalformedVersionError as e:
            raise SettingsError(f"Invalid requirement.min_version: {e}") from e

    components = _str_list(value.get("components") or [], "requirement.components")
    return RequirementSettings(min_version=min_version, components=components)


def _reject_unknown(data: Dict[str, Any], known: set, section: str):
    unknown = set(data) - known
    if unknown:
        raise SettingsError(
            f"Unknown key(s) in {section}: {', '.join(sorted(map(str, unknown)))}"
        )


def _optional_str(value: Any, name: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise SettingsError(f"'{name}' must be a string")
    return value


def _str_list(value: Any, name: str) -> List[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise SettingsError(f"'{name}' must be a list of strings")
    return list(value)
