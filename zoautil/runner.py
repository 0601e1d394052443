"""
Command runner — the single boundary where zoautil launches external
utilities.  Everything above this module works on captured text and exit
codes, so tests substitute a fake runner instead of spawning processes.
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, Sequence

from .errors import ExternalFailure

if TYPE_CHECKING:
    from .config import Config

logger = logging.getLogger(__name__)

# Exit code used by listing, search and delete utilities for "nothing matched"
RC_NO_MATCH = 1


@dataclass(frozen=True)
class CommandResult:
    """Captured output (stdout and stderr combined) plus exit code."""
    output: str
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class Runner(Protocol):
    def run(self, program: str, args: Sequence[str]) -> CommandResult:
        ...


class CommandRunner:
    """Run utilities with ``subprocess`` and capture combined output."""

    def __init__(self, bin_dir: str | None = None,
                 env: dict[str, str] | None = None) -> None:
        self._bin_dir = bin_dir
        self._env = env

    @classmethod
    def from_config(cls, config: "Config") -> "CommandRunner":
        """Runner using the binaries under ``config.ZOAU_HOME``, if set."""
        env = None
        if config.ZOAU_HOME:
            env = dict(os.environ, ZOAU_HOME=config.ZOAU_HOME)
        return cls(bin_dir=config.bin_dir, env=env)

    def _resolve(self, program: str) -> str:
        if self._bin_dir:
            return os.path.join(self._bin_dir, program)
        return program

    def run(self, program: str, args: Sequence[str]) -> CommandResult:
        command = [self._resolve(program), *args]
        logger.debug("[Runner] %s", " ".join(command))
        try:
            process = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                env=self._env,
                check=False,
            )
        except OSError as exc:
            raise ExternalFailure(program, args, -1, str(exc)) from exc

        output = process.stdout.decode("utf-8", errors="replace") if process.stdout else ""
        if process.returncode != 0:
            logger.warning("[Runner] %s exited with rc=%d", program, process.returncode)
        return CommandResult(output=output, returncode=process.returncode)


def execute(
    runner: Runner,
    program: str,
    args: Sequence[str],
    *,
    empty_ok: bool = False,
) -> CommandResult:
    """Run *program* and raise :class:`ExternalFailure` on an error exit.

    With ``empty_ok`` the "nothing matched" exit code is returned to the
    caller instead of raised.
    """
    result = runner.run(program, list(args))
    if result.ok:
        return result
    if empty_ok and result.returncode == RC_NO_MATCH:
        return result
    raise ExternalFailure(program, args, result.returncode, result.output)


def execute_string(runner: Runner, program: str, args: Sequence[str] = ()) -> str:
    """Run *program* and return its output without the trailing newline."""
    return execute(runner, program, args).output.rstrip("\n")


def execute_lines(runner: Runner, program: str, args: Sequence[str] = ()) -> list[str]:
    """Run *program* and return its non-blank output lines."""
    output = execute(runner, program, args).output
    return [line for line in output.split("\n") if line.strip()]
