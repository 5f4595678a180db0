"""
external command execution for python-env.

adapters never spawn processes themselves; they go through a
`CommandRunner` so hosts and tests can substitute canned output.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, final, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class CommandRunner(Protocol):
    """
    capability for running an external command.

    implementations return the command's combined output with trailing
    whitespace removed, or none if the command could not be spawned or
    exited unsuccessfully.
    """

    def run(self, command: Sequence[str], cwd: str | Path | None = None) -> str | None: ...


@final
class SubprocessRunner:
    """
    command runner backed by `subprocess.run`.

    attributes:
        `timeout: float | None`
            seconds to wait before giving up on a command (default: wait forever)
    """

    timeout: float | None

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout

    def run(self, command: Sequence[str], cwd: str | Path | None = None) -> str | None:
        """
        run a command, merging standard error into standard output.

        arguments:
            `command: Sequence[str]`
                program and arguments
            `cwd: str | Path | None`
                working directory to run the command in

        returns: `str | None`
            output with trailing whitespace trimmed, or none on failure
        """
        invocation = shlex.join(command)
        if cwd is not None:
            invocation = f"cd {shlex.quote(str(cwd))} && {invocation}"
        logger.debug("executing: %s", invocation)

        try:
            result = subprocess.run(
                list(command),
                cwd=str(cwd) if cwd is not None else None,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            logger.error("command timed out: %s", invocation)
            logger.error("output: %s", _decode(exc.output))
            return None
        except OSError as exc:
            logger.error("failed to execute command: %s (%s)", invocation, exc)
            return None

        output = result.stdout or ""
        if result.returncode != 0:
            logger.error("command failed: %s", invocation)
            logger.error("output: %s", output)
            return None

        return output.rstrip()


def _decode(output: str | bytes | None) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode(errors="replace")
    return output
