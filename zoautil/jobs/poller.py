"""
Job poller — waits for a submitted or cancelled job to reach a terminal
state without blocking past a bounded timeout.

Each polling session runs two daemon threads:

* the poll loop, which queries the job status back-to-back (one query in
  flight at a time) until its goal is met or a query fails;
* the timer, which fires once the timeout elapses.

Both deliver into a single-slot handoff.  The first delivery wins and
becomes the session's outcome; later deliveries are discarded.  Once the
outcome is taken the stop event is set, which ends the timer immediately and
the poll loop after its in-flight query returns.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Callable, Optional

from ..listing.records import JobRecord
from .outcomes import Failed, PollOutcome, Resolved, TimedOut

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

StatusQuery = Callable[[str], Optional[JobRecord]]
# Returns the terminal outcome for a status, or None to keep polling
Goal = Callable[[str, Optional[JobRecord]], Optional[PollOutcome]]


def _offer(slot: "queue.Queue[PollOutcome]", outcome: PollOutcome) -> bool:
    """Deliver *outcome* unless another activity already did."""
    try:
        slot.put_nowait(outcome)
        return True
    except queue.Full:
        return False


def until_resolved(job_id: str, record: Optional[JobRecord]) -> Optional[PollOutcome]:
    if record is not None and record.is_resolved:
        return Resolved(job_id, record)
    return None


def until_gone(job_id: str, record: Optional[JobRecord]) -> Optional[PollOutcome]:
    if record is None or not record.is_resolved:
        return Resolved(job_id, None)
    return None


class JobPoller:
    """Race a status poll loop against a timeout."""

    def __init__(self, query: StatusQuery, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._query = query
        self._timeout = timeout

    def poll(self, job_id: str, goal: Goal, timeout: float | None = None) -> PollOutcome:
        """Poll *job_id* until *goal* yields an outcome or *timeout* elapses."""
        limit = self._timeout if timeout is None else timeout
        slot: "queue.Queue[PollOutcome]" = queue.Queue(maxsize=1)
        stop = threading.Event()

        def _poll_loop() -> None:
            attempts = 0
            while not stop.is_set():
                attempts += 1
                try:
                    record = self._query(job_id)
                except Exception as exc:
                    logger.warning("[Poller] Status query for %s failed: %s", job_id, exc)
                    _offer(slot, Failed(exc, job_id))
                    return
                outcome = goal(job_id, record)
                if outcome is not None:
                    if _offer(slot, outcome):
                        logger.debug("[Poller] %s reached goal after %d queries", job_id, attempts)
                    return

        def _timer() -> None:
            if not stop.wait(limit):
                _offer(slot, TimedOut(job_id, limit))

        poll_thread = threading.Thread(target=_poll_loop, daemon=True, name=f"poll-{job_id}")
        timer_thread = threading.Thread(target=_timer, daemon=True, name=f"poll-timer-{job_id}")
        poll_thread.start()
        timer_thread.start()

        outcome = slot.get()
        stop.set()
        timer_thread.join()

        if isinstance(outcome, TimedOut):
            logger.warning("[Poller] %s not settled within %.1fs", job_id, limit)
        return outcome

    def submit_and_wait(
        self,
        submit: Callable[[], str],
        *,
        wait: bool = True,
        timeout: float | None = None,
    ) -> PollOutcome | None:
        """Submit a job and wait for it to be listed with a status.

        Returns None when ``wait`` is False: the job was submitted and the
        caller chose not to wait for it.
        """
        try:
            job_id = submit()
        except Exception as exc:
            logger.warning("[Poller] Submission failed: %s", exc)
            return Failed(exc)

        logger.info("[Poller] Submitted %s", job_id)
        if not wait:
            return None
        return self.poll(job_id, until_resolved, timeout)

    def cancel_and_confirm(
        self,
        job_id: str,
        cancel: Callable[[str], None],
        *,
        timeout: float | None = None,
    ) -> PollOutcome:
        """Cancel *job_id* and wait until it has left the queue.

        ``TimedOut`` means the job was still listed when the timeout
        elapsed; queue removal is not guaranteed to be prompt, so callers
        treat it as a successful cancellation.
        """
        try:
            cancel(job_id)
        except Exception as exc:
            logger.warning("[Poller] Cancel of %s failed: %s", job_id, exc)
            return Failed(exc, job_id)
        return self.poll(job_id, until_gone, timeout)
