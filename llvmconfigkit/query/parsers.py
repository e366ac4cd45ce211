"""
Parsers for llvm-config output.

llvm-config's output is plain text with no formal grammar, so each query
shape gets its own small parser:

- version:    "18.1.8", "17.0.0git", "15.0"
- flags:      "-I/usr/include -DFOO='bar baz'"
- components: "aarch64 all all-targets analysis ..."
- paths:      "/usr/lib/llvm-18/lib" or "/a:/b" (platform path separator)
- scalar:     "x86_64-pc-linux-gnu", "Release", "shared"
"""

import logging
import os
import re
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Optional, Tuple, Union

from llvmconfigkit.core.exceptions import MalformedFlagsError, MalformedVersionError

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"[0-9]+")
_LEADING_DIGITS = re.compile(r"([0-9]+)(.*)", re.DOTALL)


@dataclass(frozen=True, order=True)
class Version:
    """
    Numeric (major, minor, patch) version.

    Ordering and equality use only the three numbers, so "10.0.0" sorts
    after "9.0.0" and "17.0.0git" equals "17.0.0".

    Attributes:
        major: Major version number
        minor: Minor version number
        patch: Patch version number (0 when the source had only two groups)
        suffix: Trailing non-numeric text, e.g. 'git' or 'rc1'
        raw: Text the version was parsed from
    """

    major: int
    minor: int
    patch: int = 0
    suffix: str = field(default="", compare=False)
    raw: str = field(default="", compare=False, repr=False)

    @classmethod
    def parse(cls, text: str) -> "Version":
        return parse_version(text)

    @classmethod
    def coerce(cls, value: Union["Version", str, Tuple[int, ...]]) -> "Version":
        """Build a Version from a Version, a dotted string or an int tuple."""
        if isinstance(value, Version):
            return value
        if isinstance(value, str):
            return parse_version(value)
        return parse_version(".".join(str(part) for part in value))

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def parse_version(text: str) -> Version:
    """
    Parse a dotted version string.

    The first three dot-separated groups are read as non-negative integers.
    The last group read may carry a non-numeric suffix ("0git", "1-rc2").
    Groups past the third are kept in the suffix and otherwise ignored.

    Args:
        text: Output of 'llvm-config --version'

    Returns:
        Parsed Version

    Raises:
        MalformedVersionError: If fewer than two numeric groups are present
            or a group is not a non-negative integer
    """
    lines = text.strip().splitlines()
    line = lines[0].strip() if lines else ""
    if not line:
        raise MalformedVersionError(text, "empty version string")

    groups = line.split(".")
    numeric = groups[:3]
    if len(numeric) < 2:
        raise MalformedVersionError(text, "expected at least major.minor")

    numbers = []
    for group in numeric[:-1]:
        if not _DIGITS.fullmatch(group):
            raise MalformedVersionError(text, f"{group!r} is not a non-negative integer")
        numbers.append(int(group))

    match = _LEADING_DIGITS.fullmatch(numeric[-1])
    if not match:
        raise MalformedVersionError(
            text, f"{numeric[-1]!r} is not a non-negative integer"
        )
    numbers.append(int(match.group(1)))
    suffix = ".".join([match.group(2), *groups[3:]]) if len(groups) > 3 else match.group(2)

    if len(numbers) == 2:
        numbers.append(0)

    version = Version(*numbers, suffix=suffix, raw=line)
    logger.debug(f"Parsed version {version} from {line!r}")
    return version


def parse_flags(text: str, posix_escapes: Optional[bool] = None) -> Tuple[str, ...]:
    """
    Split a flag string into tokens.

    Whitespace separates tokens unless quoted; a quoted section keeps its
    whitespace and loses its quotes, so "-DFOO='bar baz'" becomes the single
    token "-DFOO=bar baz".

    Args:
        text: Output of a flags query (e.g. 'llvm-config --cflags')
        posix_escapes: Whether backslash escapes the next character.
            Defaults to False on Windows so native paths survive.

    Returns:
        Tokens in their original order; empty input gives ()

    Raises:
        MalformedFlagsError: On an unterminated quote or trailing escape
    """
    if not text.strip():
        return ()

    if posix_escapes is None:
        posix_escapes = os.name != "nt"

    lexer = shlex.shlex(text, posix=True)
    lexer.whitespace_split = True
    lexer.commenters = ""
    if not posix_escapes:
        lexer.escape = ""

    try:
        tokens = tuple(lexer)
    except ValueError as e:
        raise MalformedFlagsError(text, str(e)) from e

    logger.debug(f"Parsed {len(tokens)} flag(s)")
    return tokens


def parse_components(text: str) -> FrozenSet[str]:
    """
    Parse a whitespace- or newline-separated component list.

    Tokens without any letter or digit are not component names and are
    dropped, so unexpected punctuation yields an empty set rather than an
    error. Duplicates collapse.

    Args:
        text: Output of 'llvm-config --components' or '--targets-built'

    Returns:
        Set of component names
    """
    return frozenset(
        token for token in text.split() if any(ch.isalnum() for ch in token)
    )


def parse_paths(text: str, separator: Optional[str] = None) -> Tuple[Path, ...]:
    """
    Parse a separator-delimited list of directories.

    Empty segments produced by adjacent separators are dropped. Order and
    duplicates are preserved. Line breaks also separate entries.

    Args:
        text: Output of a directory query (e.g. 'llvm-config --libdir')
        separator: Path-list separator (default: os.pathsep)

    Returns:
        Paths in their original order
    """
    separator = separator or os.pathsep
    paths = []
    for line in text.splitlines():
        for segment in line.split(separator):
            segment = segment.strip()
            if segment:
                paths.append(Path(segment))
    return tuple(paths)


def parse_scalar(text: str) -> str:
    """Parse a single-value query such as '--host-target' or '--build-mode'."""
    lines = text.strip().splitlines()
    return lines[0].strip() if lines else ""
