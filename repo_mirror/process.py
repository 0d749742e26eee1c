"""
Process — Run external commands one at a time.

A thin wrapper over ``subprocess.run`` used for every git invocation.
Commands either stream their output to the console or, when ``silent``,
capture it for the caller. A non-zero exit is always an error.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Sequence

from .validation import MirrorError

logger = logging.getLogger(__name__)

MASK = "***"


@dataclass(frozen=True)
class ExecResult:
    """Outcome of a command that exited with status 0."""

    code: int
    stdout: str
    stderr: str


class CommandLaunchError(MirrorError):
    """Raised when a command cannot be started at all."""


class CommandError(MirrorError):
    """Raised when a command exits with a non-zero status."""

    def __init__(
        self,
        command: str,
        args: Sequence[str],
        returncode: int,
        stderr: str = "",
        secrets: Iterable[str] = (),
    ):
        self.command = command
        self.args_list = list(args)
        self.returncode = returncode
        self.stderr = stderr
        command_line = mask_secrets(" ".join([command, *self.args_list]), secrets)
        super().__init__(
            f'Command "{command_line}" failed with code {returncode}\n'
            f"{mask_secrets(stderr, secrets)}"
        )


def mask_secrets(text: str, secrets: Iterable[str]) -> str:
    """Replace every non-empty secret in text with ``***``."""
    for secret in secrets:
        if secret:
            text = text.replace(secret, MASK)
    return text


def run_command(
    command: str,
    args: Sequence[str] = (),
    *,
    silent: bool = False,
    env: Optional[Mapping[str, str]] = None,
    cwd: Optional[str] = None,
    secrets: Iterable[str] = (),
) -> ExecResult:
    """
    Run a command to completion.

    Args:
        command: Executable name or path
        args: Arguments, in order
        silent: Capture stdout/stderr instead of streaming them
        env: Complete environment for the child (default: inherit)
        cwd: Working directory for the child
        secrets: Values to mask in error messages and debug logs

    Returns:
        ExecResult with the exit code and any captured output

    Raises:
        CommandLaunchError: If the executable cannot be started
        CommandError: If the command exits non-zero
    """
    secrets = [s for s in secrets if s]
    logger.debug(
        f"Running: {mask_secrets(' '.join([command, *args]), secrets)}"
        + (f" (cwd={cwd})" if cwd else "")
    )

    try:
        result = subprocess.run(
            [command, *args],
            cwd=cwd,
            env=dict(env) if env is not None else None,
            capture_output=silent,
            text=True,
            check=False,
        )
    except OSError as e:
        raise CommandLaunchError(f"Failed to execute command: {e}") from e

    stdout = result.stdout or ""
    stderr = result.stderr or ""

    if result.returncode != 0:
        raise CommandError(command, args, result.returncode, stderr, secrets)

    return ExecResult(code=result.returncode, stdout=stdout, stderr=stderr)
