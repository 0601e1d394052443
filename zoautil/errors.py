"""
Error taxonomy shared by the compiler, the parsers and the job poller.
"""

from __future__ import annotations

from typing import Sequence


class ZoauError(Exception):
    """Base class for every error raised by zoautil."""


class InvalidRequest(ZoauError):
    """Raised when an edit directive is contradictory or incomplete."""


class MalformedRecord(ZoauError):
    """Raised when tabular output does not have the expected shape."""

    def __init__(self, message: str, line: str = "", line_number: int = 0):
        super().__init__(message)
        self.line = line
        self.line_number = line_number


class ExternalFailure(ZoauError):
    """Raised when an external command exits with an unexpected code."""

    def __init__(
        self,
        program: str,
        args: Sequence[str] = (),
        returncode: int = -1,
        output: str = "",
    ):
        self.program = program
        self.args_list = list(args)
        self.returncode = returncode
        self.output = output
        detail = output.strip() or "no output"
        super().__init__(f"{program} exited with rc={returncode}: {detail}")


class PollTimeout(ZoauError):
    """Raised by helpers that turn a timed-out poll into an exception."""

    def __init__(self, job_id: str, timeout: float):
        self.job_id = job_id
        self.timeout = timeout
        super().__init__(f"Job {job_id} not resolved within {timeout:.1f}s")
