"""
Process boundary: run llvm-config once and capture its output.
"""

import logging
import subprocess
from pathlib import Path
from typing import Sequence, Union

from llvmconfigkit.core.exceptions import (
    LaunchFailedError,
    NonZeroExitError,
    OutputDecodeError,
)

logger = logging.getLogger(__name__)


def _trim_line_terminator(text: str) -> str:
    if text.endswith("\r\n"):
        return text[:-2]
    if text.endswith("\n"):
        return text[:-1]
    return text


class CommandRunner:
    """
    Stateless runner for the configuration-query executable.

    Each call spawns exactly one process and blocks until it exits. There are
    no retries: the tool is deterministic for a fixed installation.
    """

    def run(self, executable: Union[str, Path], arguments: Sequence[str]) -> str:
        """
        Run executable with arguments and return its standard output.

        Args:
            executable: Resolved path to the executable
            arguments: Argument vector, passed through verbatim

        Returns:
            Standard output with a single trailing line terminator removed

        Raises:
            LaunchFailedError: If the process could not be spawned
            NonZeroExitError: If the process exited with a nonzero status
            OutputDecodeError: If standard output is not valid UTF-8
        """
        executable = Path(executable)
        arguments = list(arguments)
        logger.debug(f"Running {executable} {' '.join(arguments)}")

        try:
            result = subprocess.run(
                [str(executable), *arguments],
                stdin=subprocess.DEVNULL,
                capture_output=True,
                check=False,
            )
        except (OSError, ValueError) as e:
            raise LaunchFailedError(executable, arguments, e) from e

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace")
            logger.debug(f"{executable} exited with code {result.returncode}")
            raise NonZeroExitError(executable, arguments, result.returncode, stderr)

        try:
            stdout = result.stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            raise OutputDecodeError(executable, arguments, e) from e

        return _trim_line_terminator(stdout)


def run(executable: Union[str, Path], arguments: Sequence[str]) -> str:
    """Run executable once. See CommandRunner.run."""
    return CommandRunner().run(executable, arguments)
