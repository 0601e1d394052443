"""Batch jobs — submission, cancellation and status polling."""

from .outcomes import Failed, PollOutcome, Resolved, TimedOut, unwrap
from .poller import DEFAULT_TIMEOUT, JobPoller, until_gone, until_resolved
from .service import JobService

__all__ = [
    "Failed", "PollOutcome", "Resolved", "TimedOut", "unwrap",
    "DEFAULT_TIMEOUT", "JobPoller", "until_gone", "until_resolved",
    "JobService",
]
