"""Tests for JobService against a scripted runner."""

from __future__ import annotations

import pytest

from zoautil.config import Config
from zoautil.errors import ExternalFailure
from zoautil.jobs.outcomes import Failed, Resolved, TimedOut
from zoautil.jobs.service import JobService
from zoautil.runner import CommandResult


class FakeRunner:
    """Replay scripted results per program; the last result repeats."""

    def __init__(self, **results):
        self._results = {name: list(v) if isinstance(v, list) else [v]
                         for name, v in results.items()}
        self.calls: list[tuple[str, list[str]]] = []

    def run(self, program, args):
        self.calls.append((program, list(args)))
        queue = self._results.get(program)
        if not queue:
            raise AssertionError(f"unexpected call to {program}")
        return queue.pop(0) if len(queue) > 1 else queue[0]

    def args_for(self, program):
        return [args for name, args in self.calls if name == program]


JOB_LINE = "IBMUSER  BUILD    JOB00042 CC      0000\n"


@pytest.fixture
def config():
    cfg = Config()
    cfg.POLL_TIMEOUT = 2.0
    return cfg


class TestListing:
    def test_list_by_id(self, config):
        runner = FakeRunner(jls=CommandResult(JOB_LINE, 0))
        jobs = JobService(runner, config).list_jobs(job_id="JOB00042")

        assert runner.calls == [("jls", ["/JOB00042"])]
        assert jobs[0].name == "BUILD"

    def test_list_by_owner(self, config):
        runner = FakeRunner(jls=CommandResult(JOB_LINE, 0))
        JobService(runner, config).list_jobs(owner="IBMUSER")
        assert runner.calls == [("jls", ["/IBMUSER"])]

    def test_no_match_is_empty(self, config):
        runner = FakeRunner(jls=CommandResult("", 1))
        service = JobService(runner, config)
        assert service.list_jobs(job_id="JOB1") == []
        assert service.get_job("JOB1") is None

    def test_error_exit_raises(self, config):
        runner = FakeRunner(jls=CommandResult("BGYSC5000E failure", 8))
        with pytest.raises(ExternalFailure) as excinfo:
            JobService(runner, config).list_jobs()
        assert excinfo.value.returncode == 8
        assert "BGYSC5000E" in excinfo.value.output

    def test_list_job_dds(self, config):
        runner = FakeRunner(ddls=CommandResult("JES2 JESMSGLG - FBA 133 20\n", 0))
        dds = JobService(runner, config).list_job_dds("JOB1", owner="IBMUSER", prefix="BU*")

        assert runner.calls == [("ddls", ["JOB1", "/IBMUSER/BU*"])]
        assert dds[0].dataset == "JESMSGLG"

    def test_read_job_output(self, config):
        runner = FakeRunner(pjdd=CommandResult("line 1\nline 2\n", 0))
        text = JobService(runner, config).read_job_output("JOB1", "STEP1", "SYSPRINT",
                                                          proc_step="PROC1")
        assert runner.calls == [("pjdd", ["JOB1", "STEP1", "PROC1", "SYSPRINT"])]
        assert text == "line 1\nline 2"


class TestSubmit:
    def test_submit_and_wait(self, config):
        runner = FakeRunner(
            jsub=CommandResult("JOB00042\n", 0),
            jls=[CommandResult("", 1), CommandResult("? ? JOB00042 ? ?\n", 0),
                 CommandResult(JOB_LINE, 0)],
        )
        outcome = JobService(runner, config).submit_job("USER.JCL(BUILD)")

        assert isinstance(outcome, Resolved)
        assert outcome.job_id == "JOB00042"
        assert outcome.record.status == "CC"
        assert runner.args_for("jsub") == [["USER.JCL(BUILD)"]]
        assert runner.args_for("jls") == [["/JOB00042"]] * 3

    def test_submit_without_wait(self, config):
        runner = FakeRunner(jsub=CommandResult("JOB00042\n", 0))
        assert JobService(runner, config).submit_job("USER.JCL(BUILD)", wait=False) is None
        assert runner.args_for("jls") == []

    def test_submit_failure(self, config):
        runner = FakeRunner(jsub=CommandResult("BGYSC1234E bad JCL", 8))
        outcome = JobService(runner, config).submit_job("USER.JCL(BAD)")

        assert isinstance(outcome, Failed)
        assert isinstance(outcome.error, ExternalFailure)
        assert runner.args_for("jls") == []

    def test_submit_timeout(self, config):
        runner = FakeRunner(jsub=CommandResult("JOB00042\n", 0),
                            jls=CommandResult("", 1))
        outcome = JobService(runner, config).submit_job("USER.JCL(BUILD)", timeout=0.2)
        assert outcome == TimedOut("JOB00042", 0.2)


class TestCancel:
    def test_cancel_confirmed(self, config):
        runner = FakeRunner(
            jcan=CommandResult("", 0),
            jls=[CommandResult(JOB_LINE, 0), CommandResult("", 1)],
        )
        outcome = JobService(runner, config).cancel_job("JOB00042")

        assert outcome == Resolved("JOB00042", None)
        assert runner.args_for("jcan") == [["C", "*", "JOB00042"]]

    def test_purge_with_job_name(self, config):
        runner = FakeRunner(jcan=CommandResult("", 0), jls=CommandResult("", 1))
        JobService(runner, config).cancel_job("JOB00042", purge=True, job_name="BUILD")
        assert runner.args_for("jcan") == [["P", "BUILD", "JOB00042"]]

    def test_cancel_not_confirmed_times_out(self, config):
        runner = FakeRunner(jcan=CommandResult("", 0), jls=CommandResult(JOB_LINE, 0))
        outcome = JobService(runner, config).cancel_job("JOB00042", timeout=0.2)
        assert isinstance(outcome, TimedOut)

    def test_cancel_failure(self, config):
        runner = FakeRunner(jcan=CommandResult("not authorized", 4))
        outcome = JobService(runner, config).cancel_job("JOB00042")
        assert isinstance(outcome, Failed)
        assert runner.args_for("jls") == []
