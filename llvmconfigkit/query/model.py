"""
Typed configuration of one llvm-config installation.

A Config is built once by running every required query against a single
resolved executable, and is read-only afterwards.

Example:
    >>> from llvmconfigkit.query import locate, build
    >>> config = build(locate(), {"core", "support"})
    >>> config.version
    Version(major=18, minor=1, patch=8, suffix='')
    >>> config.flags("libs")
    ('-lLLVMSupport', '-lLLVMCore', ...)
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, FrozenSet, Iterable, Mapping, Optional, Sequence, Tuple, Union

from llvmconfigkit.core.exceptions import (
    CommandError,
    ConfigUnavailableError,
    LLVMConfigKitError,
    MissingComponentsError,
    ParseError,
    PartialConfigError,
    QueryKindError,
    QueryNotAvailableError,
)
from llvmconfigkit.core.platform import PlatformInfo, detect_platform
from llvmconfigkit.query.kinds import (
    COMPONENTS,
    DEFAULT_QUERIES,
    REQUIRED_QUERIES,
    TARGETS_BUILT,
    VERSION,
    FragmentShape,
    LinkMode,
    QueryKind,
    get_link_mode,
    get_query,
)
from llvmconfigkit.query.parsers import (
    Version,
    parse_components,
    parse_flags,
    parse_paths,
    parse_scalar,
    parse_version,
)
from llvmconfigkit.query.runner import CommandRunner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Config:
    """
    Immutable aggregate of parsed llvm-config results.

    Attributes:
        executable: Path of the llvm-config the results came from
        version: Installed version
        components: Every component the installation provides
        requested_components: Components the scoped queries (libs, libnames,
            libfiles) were run for; empty means they were run unscoped
        fragments: Parsed optional query results keyed by query name
        failures: Optional queries that failed, keyed by query name
        link_mode: Link mode passed to scoped queries, if any
    """

    executable: Path
    version: Version
    components: FrozenSet[str]
    requested_components: FrozenSet[str] = frozenset()
    fragments: Mapping[str, Any] = field(default_factory=dict, hash=False)
    failures: Mapping[str, LLVMConfigKitError] = field(
        default_factory=dict, hash=False
    )
    link_mode: Optional[LinkMode] = None

    def __post_init__(self):
        object.__setattr__(self, "components", frozenset(self.components))
        object.__setattr__(
            self, "requested_components", frozenset(self.requested_components)
        )
        object.__setattr__(self, "fragments", MappingProxyType(dict(self.fragments)))
        object.__setattr__(self, "failures", MappingProxyType(dict(self.failures)))

    @property
    def queried(self) -> Tuple[str, ...]:
        """Names of the optional queries that succeeded."""
        return tuple(self.fragments)

    @property
    def is_partial(self) -> bool:
        return bool(self.failures)

    @property
    def partial_error(self) -> Optional[PartialConfigError]:
        """Combined error for failed optional queries, or None."""
        if not self.failures:
            return None
        return PartialConfigError(dict(self.failures))

    def require_complete(self) -> "Config":
        """
        Return self if every optional query succeeded.

        Raises:
            PartialConfigError: If any optional query failed
        """
        error = self.partial_error
        if error is not None:
            raise error
        return self

    def has_component(self, name: str) -> bool:
        return name in self.components

    def flags(self, kind: str) -> Tuple[str, ...]:
        """
        Get a flag fragment such as 'cflags', 'ldflags' or 'libs'.

        Raises:
            QueryKindError: If kind is unknown or not a flags query
            QueryNotAvailableError: If kind was not queried or failed
        """
        return self._fragment(kind, FragmentShape.FLAGS)

    def paths(self, kind: str) -> Tuple[Path, ...]:
        """
        Get a path fragment such as 'includedir' or 'libdir'.

        Raises:
            QueryKindError: If kind is unknown or not a paths query
            QueryNotAvailableError: If kind was not queried or failed
        """
        return self._fragment(kind, FragmentShape.PATHS)

    def value(self, kind: str) -> str:
        """Get a scalar fragment such as 'host-target' or 'build-mode'."""
        return self._fragment(kind, FragmentShape.SCALAR)

    @property
    def targets(self) -> FrozenSet[str]:
        """Targets the installation was built with ('targets-built' query)."""
        return self._fragment(TARGETS_BUILT.name, FragmentShape.COMPONENTS)

    def _fragment(self, kind: str, shape: FragmentShape) -> Any:
        query = get_query(kind)
        if query.shape is not shape:
            raise QueryKindError(
                f"'{kind}' is a {query.shape.value} query, not {shape.value}"
            )
        if kind in self.failures:
            raise QueryNotAvailableError(kind, f"failed: {self.failures[kind]}")
        if kind not in self.fragments:
            raise QueryNotAvailableError(kind)
        return self.fragments[kind]

    def __str__(self) -> str:
        return f"LLVM {self.version} at {self.executable}"


class ConfigBuilder:
    """
    Build Config instances by running queries against one executable.

    Version and component queries are required: any failure there is fatal.
    Optional queries are tolerated in lenient mode, where failures are
    recorded on the Config, and fatal in strict mode.
    """

    def __init__(
        self,
        runner: Optional[CommandRunner] = None,
        strict: bool = False,
        queries: Iterable[str] = DEFAULT_QUERIES,
        link_mode: Optional[LinkMode] = None,
        path_separator: Optional[str] = None,
        platform: Optional[PlatformInfo] = None,
    ):
        """
        Initialize builder.

        Args:
            runner: Runner used for every query (default: CommandRunner())
            strict: Make any optional query failure fatal
            queries: Names of optional queries to run, in order
            link_mode: Link mode passed to component-scoped queries
            path_separator: Separator for path-list output (default: the
                platform's separator)
            platform: Platform conventions (default: detect_platform())

        Raises:
            QueryKindError: If a query name is unknown or required
        """
        self.runner = runner or CommandRunner()
        self.strict = strict
        self.queries = self._resolve_queries(queries)
        self.link_mode = link_mode
        self.platform = platform or detect_platform()
        self.path_separator = path_separator or self.platform.path_separator

    @staticmethod
    def _resolve_queries(names: Iterable[str]) -> Tuple[QueryKind, ...]:
        if isinstance(names, str):
            names = [names]
        resolved = []
        for name in names:
            query = get_query(name)
            if query in REQUIRED_QUERIES:
                raise QueryKindError(f"'{name}' is always queried and is not optional")
            if query not in resolved:
                resolved.append(query)
        return tuple(resolved)

    def build(
        self,
        executable: Union[str, Path],
        required_components: Iterable[str] = (),
    ) -> Config:
        """
        Run all queries and assemble a Config.

        Args:
            executable: Resolved llvm-config path
            required_components: Components that must be present; scoped
                queries are run for exactly these

        Returns:
            Config, possibly partial in lenient mode

        Raises:
            ConfigUnavailableError: If a required query (or, in strict
                mode, any query) failed
            MissingComponentsError: If a required component is absent
        """
        executable = Path(executable)
        if isinstance(required_components, str):
            required_components = [required_components]
        required = frozenset(required_components)

        try:
            version = parse_version(self._run(executable, VERSION))
        except (CommandError, ParseError) as e:
            raise ConfigUnavailableError(VERSION.name, e) from e

        try:
            available = parse_components(self._run(executable, COMPONENTS))
        except CommandError as e:
            raise ConfigUnavailableError(COMPONENTS.name, e) from e

        if not required <= available:
            raise MissingComponentsError(required, available)

        fragments = {}
        failures = {}
        for query in self.queries:
            try:
                fragments[query.name] = self._parse(
                    query, self._run(executable, query, required)
                )
            except (CommandError, ParseError) as e:
                if self.strict:
                    raise ConfigUnavailableError(query.name, e) from e
                logger.warning(f"Query '{query.name}' failed: {e}")
                failures[query.name] = e

        config = Config(
            executable=executable,
            version=version,
            components=available,
            requested_components=required,
            fragments=fragments,
            failures=failures,
            link_mode=self.link_mode,
        )

        if failures:
            logger.warning(
                f"Partial configuration for {config}: "
                f"{len(failures)} of {len(self.queries)} queries failed "
                f"({', '.join(failures)})"
            )
        else:
            logger.info(f"Built configuration for {config}")
        return config

    def _run(
        self,
        executable: Path,
        query: QueryKind,
        components: Iterable[str] = (),
    ) -> str:
        return self.runner.run(executable, query.arguments(components, self.link_mode))

    def _parse(self, query: QueryKind, text: str) -> Any:
        if query.shape is FragmentShape.FLAGS:
            return parse_flags(text, posix_escapes=self.platform.shell_escapes)
        if query.shape is FragmentShape.PATHS:
            return parse_paths(text, self.path_separator)
        if query.shape is FragmentShape.SCALAR:
            return parse_scalar(text)
        if query.shape is FragmentShape.COMPONENTS:
            return parse_components(text)
        return parse_version(text)


def build(
    executable: Union[str, Path],
    required_components: Iterable[str] = (),
    *,
    strict: bool = False,
    queries: Sequence[str] = DEFAULT_QUERIES,
    link_mode: Optional[Union[LinkMode, str]] = None,
    runner: Optional[CommandRunner] = None,
    path_separator: Optional[str] = None,
    platform: Optional[PlatformInfo] = None,
) -> Config:
    """
    Convenience function to build a Config.

    Args:
        executable: Resolved llvm-config path
        required_components: Components that must be present
        strict: Make any optional query failure fatal
        queries: Optional queries to run (default: cflags, ldflags, libs,
            includedir, libdir)
        link_mode: 'static', 'shared' or a LinkMode
        runner: Runner to use (default: CommandRunner())
        path_separator: Separator for path-list output
        platform: Platform conventions (default: detect_platform())

    Returns:
        Config
    """
    if isinstance(link_mode, str):
        link_mode = get_link_mode(link_mode)

    builder = ConfigBuilder(
        runner=runner,
        strict=strict,
        queries=queries,
        link_mode=link_mode,
        path_separator=path_separator,
        platform=platform,
    )
    return builder.build(executable, required_components)
