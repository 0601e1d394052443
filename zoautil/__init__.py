"""
zoautil — declarative data set edits, listings and batch job tracking on
top of the Z Open Automation Utilities command-line tools.

Public API for library usage::

    from zoautil import CommandRunner, Config, DatasetService, JobService, setup_logger

    config = Config.load()
    setup_logger(config)
    runner = CommandRunner.from_config(config)
    DatasetService(runner, config).line_in_file("USER.PROCLIB(MYPROC)", "//STEP1 EXEC PGM=IEFBR14",
                                        ins_aft="EOF")
    outcome = JobService(runner, config).submit_job("USER.JCL(BUILD)")
"""

from .config import Config
from .datasets import DatasetService
from .errors import ExternalFailure, InvalidRequest, MalformedRecord, PollTimeout, ZoauError
from .jobs import Failed, JobService, Resolved, TimedOut
from .logs import setup_logger
from .mvscmd import DatasetDefinition, DDStatement, FileDefinition, ValueDefinition, execute_program
from .runner import CommandResult, CommandRunner

__all__ = [
    "Config", "DatasetService", "JobService", "CommandResult", "CommandRunner",
    "setup_logger",
    "execute_program", "DDStatement", "DatasetDefinition", "FileDefinition", "ValueDefinition",
    "ZoauError", "ExternalFailure", "InvalidRequest", "MalformedRecord", "PollTimeout",
    "Failed", "Resolved", "TimedOut",
]
