"""Terminal outcomes of a job polling session."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from ..errors import PollTimeout
from ..listing.records import JobRecord


@dataclass(frozen=True)
class Resolved:
    """The poll reached its goal. ``record`` is None when a cancelled job
    was confirmed gone from the queue."""
    job_id: str
    record: Optional[JobRecord] = None


@dataclass(frozen=True)
class TimedOut:
    """The timeout elapsed before the poll reached its goal."""
    job_id: str
    timeout: float


@dataclass(frozen=True)
class Failed:
    """Submission, cancellation or a status query failed."""
    error: Exception
    job_id: Optional[str] = None


PollOutcome = Union[Resolved, TimedOut, Failed]


def unwrap(outcome: PollOutcome) -> Optional[JobRecord]:
    """Return the resolved record, raising for the other outcomes.

    ``Failed`` re-raises the captured error; ``TimedOut`` raises
    :class:`PollTimeout`.
    """
    if isinstance(outcome, Resolved):
        return outcome.record
    if isinstance(outcome, TimedOut):
        raise PollTimeout(outcome.job_id, outcome.timeout)
    raise outcome.error
