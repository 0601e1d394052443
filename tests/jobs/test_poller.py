"""
Unit tests for zoautil.jobs.poller

The status source is a plain callable, so each test scripts the sequence
of records the poll loop observes.
"""

from __future__ import annotations

import threading
import time

import pytest

from zoautil.errors import ExternalFailure, PollTimeout
from zoautil.jobs.outcomes import Failed, Resolved, TimedOut, unwrap
from zoautil.jobs.poller import JobPoller, until_gone, until_resolved
from zoautil.listing.records import JobRecord


RESOLVED = JobRecord("IBMUSER", "MYJOB", "JOB00001", "CC", "0000")
UNRESOLVED = JobRecord(None, None, "JOB00001", None, None)


class ScriptedStatus:
    """Return queued records in order, then repeat the last one."""

    def __init__(self, *records):
        self._records = list(records)
        self.calls = 0
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def __call__(self, job_id):
        with self._lock:
            self.calls += 1
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            idx = min(self.calls - 1, len(self._records) - 1)
            record = self._records[idx]
            if isinstance(record, Exception):
                raise record
            return record
        finally:
            with self._lock:
                self.in_flight -= 1


# ---------------------------------------------------------------------------
# Goals
# ---------------------------------------------------------------------------

class TestGoals:

    def test_until_resolved(self):
        assert until_resolved("J", None) is None
        assert until_resolved("J", UNRESOLVED) is None
        assert until_resolved("J", RESOLVED) == Resolved("J", RESOLVED)

    def test_until_gone(self):
        assert until_gone("J", None) == Resolved("J", None)
        assert until_gone("J", UNRESOLVED) == Resolved("J", None)
        assert until_gone("J", RESOLVED) is None


# ---------------------------------------------------------------------------
# submit-and-wait
# ---------------------------------------------------------------------------

class TestSubmitAndWait:

    def test_resolves_on_first_query(self):
        status = ScriptedStatus(RESOLVED)
        poller = JobPoller(status, timeout=5.0)

        start = time.monotonic()
        outcome = poller.submit_and_wait(lambda: "JOB00001")
        elapsed = time.monotonic() - start

        assert outcome == Resolved("JOB00001", RESOLVED)
        assert status.calls == 1
        assert elapsed < 1.0

    def test_unresolved_records_keep_polling(self):
        status = ScriptedStatus(None, UNRESOLVED, UNRESOLVED, RESOLVED)
        outcome = JobPoller(status, timeout=5.0).submit_and_wait(lambda: "JOB00001")

        assert isinstance(outcome, Resolved)
        assert outcome.record == RESOLVED
        assert status.calls == 4

    def test_times_out_after_configured_duration(self):
        status = ScriptedStatus(None)
        poller = JobPoller(status, timeout=0.3)

        start = time.monotonic()
        outcome = poller.submit_and_wait(lambda: "JOB00001")
        elapsed = time.monotonic() - start

        assert outcome == TimedOut("JOB00001", 0.3)
        assert elapsed >= 0.29
        assert elapsed < 1.3

    def test_caller_timeout_overrides_default(self):
        poller = JobPoller(ScriptedStatus(None), timeout=30.0)
        outcome = poller.submit_and_wait(lambda: "JOB00001", timeout=0.2)
        assert isinstance(outcome, TimedOut)
        assert outcome.timeout == 0.2

    def test_queries_are_sequential(self):
        status = ScriptedStatus(None)
        JobPoller(status, timeout=0.2).submit_and_wait(lambda: "JOB00001")
        assert status.calls > 1
        assert status.max_in_flight == 1

    def test_poll_loop_stops_after_outcome(self):
        status = ScriptedStatus(None)
        JobPoller(status, timeout=0.2).submit_and_wait(lambda: "JOB00001")
        time.sleep(0.1)
        calls = status.calls
        time.sleep(0.1)
        assert status.calls == calls

    def test_submission_failure_skips_polling(self):
        status = ScriptedStatus(RESOLVED)
        error = ExternalFailure("jsub", ["X"], 8, "JCL error")

        def _submit():
            raise error

        outcome = JobPoller(status).submit_and_wait(_submit)
        assert outcome == Failed(error)
        assert status.calls == 0

    def test_fire_and_forget(self):
        status = ScriptedStatus(RESOLVED)
        submitted = []
        outcome = JobPoller(status).submit_and_wait(
            lambda: submitted.append(1) or "JOB00001", wait=False,
        )
        assert outcome is None
        assert submitted == [1]
        assert status.calls == 0

    def test_query_failure(self):
        error = ExternalFailure("jls", [], 8, "boom")
        outcome = JobPoller(ScriptedStatus(error), timeout=5.0).submit_and_wait(
            lambda: "JOB00001",
        )
        assert isinstance(outcome, Failed)
        assert outcome.error is error
        assert outcome.job_id == "JOB00001"


# ---------------------------------------------------------------------------
# cancel-and-confirm
# ---------------------------------------------------------------------------

class TestCancelAndConfirm:

    def test_confirmed_when_job_leaves_queue(self):
        status = ScriptedStatus(RESOLVED, RESOLVED, None)
        cancelled = []
        outcome = JobPoller(status, timeout=5.0).cancel_and_confirm(
            "JOB00001", cancelled.append,
        )
        assert outcome == Resolved("JOB00001", None)
        assert cancelled == ["JOB00001"]
        assert status.calls == 3

    def test_still_listed_times_out(self):
        outcome = JobPoller(ScriptedStatus(RESOLVED), timeout=0.2).cancel_and_confirm(
            "JOB00001", lambda job_id: None,
        )
        assert isinstance(outcome, TimedOut)

    def test_cancel_failure(self):
        status = ScriptedStatus(RESOLVED)
        error = ExternalFailure("jcan", [], 4, "not authorized")

        def _cancel(job_id):
            raise error

        outcome = JobPoller(status).cancel_and_confirm("JOB00001", _cancel)
        assert outcome == Failed(error, "JOB00001")
        assert status.calls == 0


# ---------------------------------------------------------------------------
# unwrap
# ---------------------------------------------------------------------------

class TestUnwrap:

    def test_resolved(self):
        assert unwrap(Resolved("J", RESOLVED)) == RESOLVED

    def test_timed_out_raises(self):
        with pytest.raises(PollTimeout):
            unwrap(TimedOut("J", 1.0))

    def test_failed_reraises(self):
        error = ExternalFailure("jls", [], 8, "boom")
        with pytest.raises(ExternalFailure):
            unwrap(Failed(error, "J"))
