"""
Catalogue of llvm-config queries.

Each query is identified by the name used as its key in a Config, and knows
the command-line switch that produces it and the shape of its output.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional, Tuple

from llvmconfigkit.core.exceptions import QueryKindError


class FragmentShape(Enum):
    """Shape of a query's output, which selects its parser."""

    VERSION = "version"
    COMPONENTS = "components"
    FLAGS = "flags"
    PATHS = "paths"
    SCALAR = "scalar"


class LinkMode(Enum):
    """Library linkage requested from component-scoped queries."""

    STATIC = "static"
    SHARED = "shared"

    @property
    def switch(self) -> str:
        return f"--link-{self.value}"


@dataclass(frozen=True)
class QueryKind:
    """
    One llvm-config query.

    Attributes:
        name: Key of the fragment in a Config (e.g. 'cflags')
        switch: Command-line switch (e.g. '--cflags')
        shape: Output shape
        scoped: Whether the query takes component names as extra arguments
    """

    name: str
    switch: str
    shape: FragmentShape
    scoped: bool = False

    def arguments(
        self, components: Iterable[str] = (), link_mode: Optional[LinkMode] = None
    ) -> Tuple[str, ...]:
        """
        Build the argument vector for this query.

        Example:
            >>> LIBS.arguments({'support', 'core'}, LinkMode.STATIC)
            ('--libs', '--link-static', 'core', 'support')
        """
        if not self.scoped:
            return (self.switch,)
        args = [self.switch]
        if link_mode is not None:
            args.append(link_mode.switch)
        args.extend(sorted(components))
        return tuple(args)


def _query(name: str, shape: FragmentShape, scoped: bool = False) -> QueryKind:
    return QueryKind(name=name, switch=f"--{name}", shape=shape, scoped=scoped)


VERSION = _query("version", FragmentShape.VERSION)
COMPONENTS = _query("components", FragmentShape.COMPONENTS)
TARGETS_BUILT = _query("targets-built", FragmentShape.COMPONENTS)

CPPFLAGS = _query("cppflags", FragmentShape.FLAGS)
CFLAGS = _query("cflags", FragmentShape.FLAGS)
CXXFLAGS = _query("cxxflags", FragmentShape.FLAGS)
LDFLAGS = _query("ldflags", FragmentShape.FLAGS)
SYSTEM_LIBS = _query("system-libs", FragmentShape.FLAGS)
LIBS = _query("libs", FragmentShape.FLAGS, scoped=True)
LIBNAMES = _query("libnames", FragmentShape.FLAGS, scoped=True)
LIBFILES = _query("libfiles", FragmentShape.FLAGS, scoped=True)

PREFIX = _query("prefix", FragmentShape.PATHS)
SRC_ROOT = _query("src-root", FragmentShape.PATHS)
OBJ_ROOT = _query("obj-root", FragmentShape.PATHS)
BINDIR = _query("bindir", FragmentShape.PATHS)
INCLUDEDIR = _query("includedir", FragmentShape.PATHS)
LIBDIR = _query("libdir", FragmentShape.PATHS)
CMAKEDIR = _query("cmakedir", FragmentShape.PATHS)

HOST_TARGET = _query("host-target", FragmentShape.SCALAR)
BUILD_MODE = _query("build-mode", FragmentShape.SCALAR)
SHARED_MODE = _query("shared-mode", FragmentShape.SCALAR)
ASSERTION_MODE = _query("assertion-mode", FragmentShape.SCALAR)

QUERIES: Dict[str, QueryKind] = {
    q.name: q
    for q in (
        VERSION,
        COMPONENTS,
        TARGETS_BUILT,
        CPPFLAGS,
        CFLAGS,
        CXXFLAGS,
        LDFLAGS,
        SYSTEM_LIBS,
        LIBS,
        LIBNAMES,
        LIBFILES,
        PREFIX,
        SRC_ROOT,
        OBJ_ROOT,
        BINDIR,
        INCLUDEDIR,
        LIBDIR,
        CMAKEDIR,
        HOST_TARGET,
        BUILD_MODE,
        SHARED_MODE,
        ASSERTION_MODE,
    )
}

# Queries that build() always runs itself and which cannot be listed as optional
REQUIRED_QUERIES = (VERSION, COMPONENTS)

DEFAULT_QUERIES: Tuple[str, ...] = ("cflags", "ldflags", "libs", "includedir", "libdir")


def get_query(name: str) -> QueryKind:
    """
    Look up a query by name.

    Raises:
        QueryKindError: If the name is unknown
    """
    try:
        return QUERIES[name]
    except KeyError:
        raise QueryKindError(
            f"Unknown query: {name!r} (known: {', '.join(sorted(QUERIES))})"
        ) from None


def get_link_mode(value: Optional[str]) -> Optional[LinkMode]:
    """Convert 'static'/'shared'/None to a LinkMode."""
    if value is None:
        return None
    try:
        return LinkMode(value)
    except ValueError:
        raise QueryKindError(
            f"Unknown link mode: {value!r} (expected 'static' or 'shared')"
        ) from None
