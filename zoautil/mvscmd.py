"""
MVS program execution — runs a program through ``mvscmd`` (or
``mvscmdauth`` for APF authorized programs) with its DD statements given as
``--<ddname>=<definition>`` options.

The program's return code is part of the result rather than an error: a
non-zero code from a utility program is usually meaningful to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from .errors import InvalidRequest
from .runner import CommandResult, Runner

logger = logging.getLogger(__name__)


def _with_keywords(base: str, keywords: list[tuple[str, Optional[object]]]) -> str:
    parts = [base]
    for key, value in keywords:
        if value is not None:
            parts.append(f"{key}={value}")
    return ",".join(parts)


@dataclass(frozen=True)
class ValueDefinition:
    """A DD given as a raw value, e.g. ``*`` or ``DUMMY``."""
    value: str

    def to_arg(self) -> str:
        return self.value


@dataclass(frozen=True)
class FileDefinition:
    """A DD backed by a z/OS UNIX file."""
    path: str
    normal_disposition: Optional[str] = None
    abnormal_disposition: Optional[str] = None
    path_mode: Optional[str] = None
    status_group: Optional[str] = None
    file_data: Optional[str] = None
    record_length: Optional[int] = None
    block_size: Optional[int] = None
    record_format: Optional[str] = None

    def to_arg(self) -> str:
        return _with_keywords(self.path, [
            ("normdisp", self.normal_disposition),
            ("abnormdisp", self.abnormal_disposition),
            ("pathmode", self.path_mode),
            ("statusgroup", self.status_group),
            ("filedata", self.file_data),
            ("lrecl", self.record_length),
            ("blksize", self.block_size),
            ("recfm", self.record_format),
        ])


@dataclass(frozen=True)
class DatasetDefinition:
    """A DD backed by a data set, optionally allocated on the fly.

    ``primary_unit`` / ``secondary_unit`` (e.g. ``"CYL"``, ``"TRK"``) are
    appended to the space amounts.
    """
    dataset_name: str
    disposition: Optional[str] = None
    type: Optional[str] = None
    primary: Optional[int] = None
    primary_unit: str = ""
    secondary: Optional[int] = None
    secondary_unit: str = ""
    normal_disposition: Optional[str] = None
    abnormal_disposition: Optional[str] = None
    conditional_disposition: Optional[str] = None
    block_size: Optional[int] = None
    record_format: Optional[str] = None
    record_length: Optional[int] = None
    storage_class: Optional[str] = None
    data_class: Optional[str] = None
    management_class: Optional[str] = None
    key_length: Optional[int] = None
    key_offset: Optional[int] = None
    volumes: Optional[str] = None
    dataset_key_label: Optional[str] = None
    key_label1: Optional[str] = None
    key_encoding1: Optional[str] = None
    key_label2: Optional[str] = None
    key_encoding2: Optional[str] = None

    def to_arg(self) -> str:
        base = self.dataset_name
        if self.disposition is not None:
            base += "," + self.disposition
        primary = None if self.primary is None else f"{self.primary}{self.primary_unit}"
        secondary = None if self.secondary is None else f"{self.secondary}{self.secondary_unit}"
        return _with_keywords(base, [
            ("type", self.type),
            ("primary", primary),
            ("secondary", secondary),
            ("normdisp", self.normal_disposition),
            ("abnormdisp", self.abnormal_disposition),
            ("conddisp", self.conditional_disposition),
            ("blksize", self.block_size),
            ("recfm", self.record_format),
            ("lrecl", self.record_length),
            ("storclas", self.storage_class),
            ("dataclas", self.data_class),
            ("mgmtclas", self.management_class),
            ("keylen", self.key_length),
            ("keyoffset", self.key_offset),
            ("volumes", self.volumes),
            ("dskeylbl", self.dataset_key_label),
            ("keylab1", self.key_label1),
            ("keycd1", self.key_encoding1),
            ("keylab2", self.key_label2),
            ("keycd2", self.key_encoding2),
        ])


DataDefinition = Union[ValueDefinition, FileDefinition, DatasetDefinition]


@dataclass(frozen=True)
class DDStatement:
    name: str
    definition: DataDefinition

    def to_arg(self) -> str:
        if not self.name:
            raise InvalidRequest("A DD statement needs a name")
        return f"--{self.name}={self.definition.to_arg()}"


def build_mvscmd_args(
    program: str,
    dds: Sequence[DDStatement] = (),
    *,
    program_args: Optional[str] = None,
    verbose: bool = False,
    debug: bool = False,
) -> list[str]:
    """Translate a program run into ``mvscmd`` arguments."""
    if not program:
        raise InvalidRequest("A program name is required")
    args: list[str] = []
    if debug:
        args.append("-d")
    if verbose:
        args.append("-v")
    if program_args is not None:
        args.append("--args=" + program_args)
    args.append("--pgm=" + program)
    args.extend(dd.to_arg() for dd in dds)
    return args


def execute_program(
    runner: Runner,
    program: str,
    dds: Sequence[DDStatement] = (),
    *,
    program_args: Optional[str] = None,
    authorized: bool = False,
    verbose: bool = False,
    debug: bool = False,
) -> CommandResult:
    """Run *program* with *dds* allocated. Returns its output and return code.

    Parameters
    ----------
    runner : Runner
        Command runner used to launch ``mvscmd``.
    program : str
        Load module name, e.g. ``IEBCOPY``.
    dds : sequence of DDStatement
        DD allocations for the program step.
    program_args : str, optional
        Parameter string passed to the program.
    authorized : bool
        Run through ``mvscmdauth`` for programs that need APF authorization.

    Returns
    -------
    CommandResult
        The combined output and the program's return code.
    """
    tool = "mvscmdauth" if authorized else "mvscmd"
    args = build_mvscmd_args(program, dds, program_args=program_args,
                             verbose=verbose, debug=debug)
    result = runner.run(tool, args)
    if result.ok:
        logger.info("[MVS] %s completed", program)
    else:
        logger.warning("[MVS] %s ended with rc=%d", program, result.returncode)
    return result
