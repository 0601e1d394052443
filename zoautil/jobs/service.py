"""
Job commands — submit, cancel, list, and read the spool output of batch
jobs through the job utilities (``jsub``, ``jcan``, ``jls``, ``ddls``,
``pjdd``).
"""

from __future__ import annotations

import logging
from typing import Optional

from ..config import Config
from ..listing.parser import parse_job_dds, parse_job_listing
from ..listing.records import JobDDRecord, JobRecord
from ..runner import Runner, execute, execute_string
from .outcomes import PollOutcome
from .poller import JobPoller

logger = logging.getLogger(__name__)


def _owner_prefix_filter(owner: Optional[str], prefix: Optional[str]) -> Optional[str]:
    if owner is None and prefix is None:
        return None
    pattern = ""
    if owner is not None:
        pattern += "/" + owner
    if prefix is not None:
        pattern += "/" + prefix
    return pattern


class JobService:
    """Batch job operations bound to one command runner."""

    def __init__(self, runner: Runner, config: Config | None = None) -> None:
        self._runner = runner
        self._config = config or Config()
        self._poller = JobPoller(self.get_job, timeout=self._config.POLL_TIMEOUT)

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def list_jobs(
        self,
        job_id: Optional[str] = None,
        owner: Optional[str] = None,
    ) -> list[JobRecord]:
        """List jobs, filtered by id (preferred) or owner."""
        args: list[str] = []
        if job_id is not None:
            args.append("/" + job_id)
        elif owner is not None:
            args.append("/" + owner)
        result = execute(self._runner, "jls", args, empty_ok=True)
        if not result.ok:
            return []
        return parse_job_listing(result.output)

    def get_job(self, job_id: str) -> Optional[JobRecord]:
        """Return the listing entry for *job_id*, or None if not listed."""
        jobs = self.list_jobs(job_id=job_id)
        return jobs[0] if jobs else None

    def list_job_dds(
        self,
        job_id: str,
        owner: Optional[str] = None,
        prefix: Optional[str] = None,
    ) -> list[JobDDRecord]:
        """List the DDs in the spool output of *job_id*."""
        args = [job_id]
        pattern = _owner_prefix_filter(owner, prefix)
        if pattern is not None:
            args.append(pattern)
        output = execute(self._runner, "ddls", args).output
        return parse_job_dds(output)

    def read_job_output(
        self,
        job_id: str,
        step_name: str,
        dataset: str,
        proc_step: Optional[str] = None,
        owner: Optional[str] = None,
        prefix: Optional[str] = None,
    ) -> str:
        """Return the content of one DD of a job's spool output."""
        args = [job_id, step_name]
        if proc_step is not None:
            args.append(proc_step)
        args.append(dataset)
        pattern = _owner_prefix_filter(owner, prefix)
        if pattern is not None:
            args.append(pattern)
        return execute_string(self._runner, "pjdd", args)

    # ------------------------------------------------------------------
    # Submit / cancel
    # ------------------------------------------------------------------

    def submit_job(
        self,
        dataset: str,
        *,
        wait: bool = True,
        timeout: float | None = None,
    ) -> PollOutcome | None:
        """Submit the JCL in *dataset*.

        Returns None when ``wait`` is False, otherwise the polling outcome.
        """
        return self._poller.submit_and_wait(
            lambda: execute_string(self._runner, "jsub", [dataset]),
            wait=wait,
            timeout=timeout,
        )

    def cancel_job(
        self,
        job_id: str,
        *,
        purge: bool = False,
        job_name: Optional[str] = None,
        timeout: float | None = None,
    ) -> PollOutcome:
        """Cancel (or purge) *job_id* and wait for it to leave the queue."""
        args = ["P" if purge else "C", job_name or "*", job_id]

        def _cancel(target: str) -> None:
            execute(self._runner, "jcan", args)
            logger.info("[Jobs] %s requested for %s", "Purge" if purge else "Cancel", target)

        return self._poller.cancel_and_confirm(job_id, _cancel, timeout=timeout)
