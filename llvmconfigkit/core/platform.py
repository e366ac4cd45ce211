"""
Host platform facts used when interpreting llvm-config output.

Usage:
    from llvmconfigkit.core.platform import detect_platform

    platform_info = detect_platform()
    print(platform_info.path_separator)
"""

import os
import platform
from dataclasses import dataclass


@dataclass(frozen=True)
class PlatformInfo:
    """
    Platform conventions that affect llvm-config output.

    Attributes:
        os: Operating system ('windows', 'linux', 'macos', or the raw system name)
        path_separator: Separator between entries of a path list (':' or ';')
    """

    os: str
    path_separator: str

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    @property
    def shell_escapes(self) -> bool:
        """Whether backslash escapes characters in flag strings."""
        return not self.is_windows

    def __str__(self) -> str:
        return f"{self.os} (path separator {self.path_separator!r})"


def detect_platform() -> PlatformInfo:
    """
    Detect the current platform.

    Returns:
        PlatformInfo for the running interpreter
    """
    system = platform.system().lower()
    if system == "darwin":
        system = "macos"
    return PlatformInfo(os=system, path_separator=os.pathsep)
