"""
System operations — APF authorized library administration (``apfadm``),
system library lookups and console reads.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .errors import InvalidRequest
from .runner import Runner, execute, execute_lines, execute_string

logger = logging.getLogger(__name__)


class ApfOperation(Enum):
    ADD = "add"
    DELETE = "del"
    LIST = "list"
    CHECK_FORMAT = "check_format"
    SET_DYNAMIC = "set_dynamic"
    SET_STATIC = "set_static"


@dataclass
class ApfPersistent:
    """Record APF changes in a persistent data set, between marker lines."""
    add_dataset: Optional[str] = None
    delete_dataset: Optional[str] = None
    marker: Optional[str] = None

    def to_args(self) -> list[str]:
        if self.add_dataset is None and self.delete_dataset is None:
            raise InvalidRequest("add_dataset and/or delete_dataset is required for persistent APF")
        args: list[str] = []
        if self.marker is not None:
            args.extend(["-M", self.marker])
        if self.add_dataset is not None:
            args.extend(["-P", self.add_dataset])
        if self.delete_dataset is not None:
            args.extend(["-R", self.delete_dataset])
        return args


@dataclass
class ApfEntry:
    operation: ApfOperation
    dataset: str


@dataclass
class ApfRequest:
    """Either a single ``operation`` or a ``batch`` of add/delete entries."""
    operation: Optional[ApfOperation] = None
    dataset: Optional[str] = None
    volume: Optional[str] = None
    sms: bool = False
    force_dynamic: bool = False
    persistent: Optional[ApfPersistent] = None
    batch: list[ApfEntry] = field(default_factory=list)


def _qualify(dataset: str, request: ApfRequest) -> str:
    if request.sms:
        return dataset + ",sms"
    if request.volume is not None:
        return dataset + "," + request.volume
    return dataset


def _flag(operation: ApfOperation) -> str:
    return "-A" if operation is ApfOperation.ADD else "-D"


def build_apf_args(request: ApfRequest) -> list[str]:
    """Translate *request* into ``apfadm`` arguments."""
    persistent = request.persistent.to_args() if request.persistent else []
    op = request.operation

    if op is not None:
        if op in (ApfOperation.ADD, ApfOperation.DELETE):
            if request.dataset is None:
                raise InvalidRequest(f"dataset is required with the {op.value} operation")
            args = ["-f"] if request.force_dynamic else []
            args.append(_flag(op))
            return [*args, *persistent, _qualify(request.dataset, request)]
        if op is ApfOperation.CHECK_FORMAT:
            return ["-F"]
        if op is ApfOperation.SET_DYNAMIC:
            return ["-F", "DYNAMIC"]
        if op is ApfOperation.SET_STATIC:
            return ["-F", "STATIC"]
        return ["-lj"]

    if request.batch:
        args = ["-f"] if request.force_dynamic else []
        for entry in request.batch:
            if entry.operation not in (ApfOperation.ADD, ApfOperation.DELETE):
                raise InvalidRequest(f"Invalid batch operation: {entry.operation.value}")
            args.extend([_flag(entry.operation), _qualify(entry.dataset, request)])
        return [*args, *persistent]

    raise InvalidRequest("An APF request needs an operation or a batch")


def apf(runner: Runner, request: ApfRequest) -> str:
    """Run ``apfadm`` for *request* and return its output."""
    args = build_apf_args(request)
    logger.info("[System] apfadm %s", " ".join(args))
    return execute(runner, "apfadm", args).output


# ----------------------------------------------------------------------
# System libraries
# ----------------------------------------------------------------------

def find_link_list(runner: Runner, member: str) -> str:
    """Data set of the link list concatenation that holds *member*."""
    return execute_string(runner, "llwhence", [member])


def find_parm_lib(runner: Runner, member: str) -> str:
    """Data set of the parmlib concatenation that holds *member*."""
    return execute_string(runner, "parmwhence", [member])


def find_proc_lib(runner: Runner, member: str) -> str:
    """Data set of the proclib concatenation that holds *member*."""
    return execute_string(runner, "procwhence", [member])


def list_link_list(runner: Runner) -> list[str]:
    return execute_lines(runner, "pll")


def list_parm_lib(runner: Runner) -> list[str]:
    return execute_lines(runner, "pparm")


def list_proc_lib(runner: Runner) -> list[str]:
    return execute_lines(runner, "pproc")


def search_parm_lib(runner: Runner, find: str) -> str:
    return execute_string(runner, "parmgrep", [find])


def search_proc_lib(runner: Runner, find: str) -> str:
    return execute_string(runner, "procgrep", [find])


# ----------------------------------------------------------------------
# Console
# ----------------------------------------------------------------------

class ConsoleOption(Enum):
    """Which part of the system log ``pcon`` prints; the value is its flag."""
    RECENT = "r"
    SINCE_LAST = "l"
    LAST_HOUR = "h"
    LAST_DAY = "d"
    LAST_WEEK = "w"
    LAST_MONTH = "m"
    LAST_YEAR = "y"
    ALL = "a"


def read_console(runner: Runner, option: ConsoleOption = ConsoleOption.RECENT) -> str:
    """Return system log messages selected by *option*."""
    if not isinstance(option, ConsoleOption):
        raise InvalidRequest(f"Invalid console option: {option!r}")
    return execute_string(runner, "pcon", [f"-{option.value}"])
