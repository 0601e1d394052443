"""
Data set operations — line and block edits, listings, searches and the
other data set utilities (``dsed``, ``dls``, ``dgrep``, ``ddiff``, ...).

Edits are compiled locally into editor scripts before anything is sent to
the utility, so an invalid request never reaches the remote system.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from .config import Config
from .editing.compiler import compile_request
from .editing.directives import EditRequest
from .editing.primitives import EditScript
from .errors import ExternalFailure, InvalidRequest
from .listing.parser import parse_listing, parse_names
from .listing.records import ListingRecord
from .runner import Runner, execute, execute_string

logger = logging.getLogger(__name__)

# dtouch return codes below this value are warnings
_CREATE_ERROR_RC = 8


class DatasetType(str, Enum):
    PDS = "PDS"
    PDSE = "PDSE"
    SEQ = "SEQ"
    LDS = "LDS"
    RRDS = "RRDS"
    ESDS = "ESDS"
    KSDS = "KSDS"
    LARGE = "LARGE"


class RecordFormat(str, Enum):
    FB = "FB"
    FBA = "FBA"
    FBS = "FBS"
    U = "U"
    VB = "VB"
    VBA = "VBA"
    VBS = "VBS"


class DatasetService:
    """Data set operations bound to one command runner."""

    def __init__(self, runner: Runner, config: Config | None = None) -> None:
        self._runner = runner
        self._config = config or Config()

    def _edit_options(
        self,
        lock: Optional[bool],
        force: bool,
        encoding: Optional[str],
    ) -> list[str]:
        options: list[str] = []
        use_lock = self._config.LOCK if lock is None else lock
        if use_lock:
            options.append("-l")
        if force:
            options.append("-f")
        encoding = encoding or self._config.ENCODING
        if encoding:
            options.extend(["-c", encoding])
        return options

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def apply_edit(
        self,
        dataset: str,
        request: EditRequest,
        *,
        lock: Optional[bool] = None,
        force: bool = False,
        encoding: Optional[str] = None,
    ) -> EditScript:
        """Compile *request* and apply it to *dataset*. Returns the script.

        Each chain of the script is one ``dsed`` invocation, run in order.
        Block markers are written by the script itself, so block edits go
        through ``dsed`` as well.
        """
        script = compile_request(request)
        options = self._edit_options(lock, force, encoding)
        invocations = script.invocations()

        logger.info("[Edit] %s %s: %d expression(s) in %d invocation(s)",
                    request.mode.value, dataset, len(script), len(invocations))
        for script_args in invocations:
            execute(self._runner, "dsed", [*options, *script_args, dataset])
        return script

    def line_in_file(
        self,
        dataset: str,
        line: str,
        *,
        regex: Optional[str] = None,
        ins_aft: Optional[str] = None,
        ins_bef: Optional[str] = None,
        state: bool = True,
        first_match: bool = False,
        lock: Optional[bool] = None,
        force: bool = False,
        encoding: Optional[str] = None,
    ) -> EditScript:
        """Ensure *line* is present (or absent, with ``state=False``)."""
        request = EditRequest.line(
            line,
            regex=regex,
            ins_aft=ins_aft,
            ins_bef=ins_bef,
            state=state,
            first_match=first_match,
        )
        return self.apply_edit(dataset, request, lock=lock, force=force, encoding=encoding)

    def block_in_file(
        self,
        dataset: str,
        block: str = "",
        *,
        marker: Optional[str] = None,
        ins_aft: Optional[str] = None,
        ins_bef: Optional[str] = None,
        state: bool = True,
        lock: Optional[bool] = None,
        force: bool = False,
        encoding: Optional[str] = None,
    ) -> EditScript:
        """Insert, replace or remove a marker-delimited block."""
        request = EditRequest.block(
            block,
            marker=marker,
            ins_aft=ins_aft,
            ins_bef=ins_bef,
            state=state,
        )
        return self.apply_edit(dataset, request, lock=lock, force=force, encoding=encoding)

    def find_replace(self, dataset: str, find: str, replace: str) -> None:
        """Replace every occurrence of *find* with *replace*."""
        execute(self._runner, "dsed", [f"s/{find}/{replace}/g", dataset])

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def listing(
        self,
        pattern: str,
        *,
        name_only: bool = False,
        migrated: bool = False,
        volume: Optional[str] = None,
    ) -> list[ListingRecord]:
        """List the data sets matching *pattern*."""
        if migrated and not name_only:
            raise InvalidRequest("Listing migrated data sets requires name_only")

        if migrated:
            options = ["-m"]
        elif name_only:
            options = []
        else:
            options = ["-l", "-u", "-s", "-b"]

        result = execute(self._runner, "dls", [*options, pattern], empty_ok=True)
        if not result.ok:
            return []

        records = parse_listing(result.output)
        if volume is not None:
            records = [r for r in records if r.volume == volume]
        return records

    def exists(self, dataset: str) -> bool:
        return len(self.listing(dataset)) > 0

    def list_members(self, pattern: str) -> list[str]:
        result = execute(self._runner, "mls", [pattern], empty_ok=True)
        if not result.ok:
            return []
        return parse_names(result.output)

    def search(
        self,
        dataset: str,
        value: str,
        *,
        display_lines: bool = False,
        ignore_case: bool = False,
        print_datasets: bool = False,
        context_lines: Optional[int] = None,
    ) -> str:
        """Search *dataset* for *value*. Returns "" when nothing matched."""
        options: list[str] = []
        if display_lines:
            options.append("-n")
        if ignore_case:
            options.append("-i")
        if print_datasets:
            options.append("-v")
        if context_lines is not None:
            options.extend(["-C", str(context_lines)])

        result = execute(self._runner, "dgrep", [*options, value, dataset], empty_ok=True)
        return result.output if result.ok else ""

    def count_matches(self, dataset: str, value: str, *, ignore_case: bool = False) -> int:
        """Number of lines in *dataset* that match *value*."""
        output = self.search(dataset, value, ignore_case=ignore_case)
        return output.count("\n")

    def compare(
        self,
        source: str,
        target: str,
        *,
        ignore_case: bool = False,
        columns: Optional[tuple[int, int]] = None,
        lines: Optional[tuple[int, int]] = None,
    ) -> Optional[str]:
        """Compare two data sets.

        Returns None when they are identical, otherwise the comparison
        report. ``columns`` and ``lines`` are inclusive ``(start, end)``
        ranges restricting the comparison.
        """
        options: list[str] = []
        if ignore_case:
            options.append("-i")
        if columns is not None:
            options.extend(["-c", f"{columns[0]}:{columns[1]}"])
        if lines is not None:
            options.extend(["-C", f"{lines[0]}:{lines[1]}"])

        result = execute(self._runner, "ddiff", [*options, source, target], empty_ok=True)
        return None if result.ok else result.output

    def find_member(self, member: str, concatenation: str) -> str:
        """First data set of *concatenation* that holds *member*."""
        return execute_string(self._runner, "dwhence", [member, concatenation])

    # ------------------------------------------------------------------
    # Create / delete
    # ------------------------------------------------------------------

    def create(
        self,
        name: str,
        *,
        type: Optional[DatasetType] = None,
        primary_space: Optional[str] = None,
        secondary_space: Optional[str] = None,
        directory_blocks: Optional[int] = None,
        block_size: Optional[int] = None,
        record_format: Optional[RecordFormat] = None,
        record_length: Optional[int] = None,
        storage_class: Optional[str] = None,
        data_class: Optional[str] = None,
        management_class: Optional[str] = None,
        keys: Optional[tuple[int, int]] = None,
        volumes: Optional[str] = None,
    ) -> ListingRecord:
        """Create a data set and return its listing entry.

        ``keys`` is ``(key_length, key_offset)`` and is required for KSDS.
        """
        options: list[str] = []
        if type is not None:
            options.extend(["-t", DatasetType(type).value])
        if primary_space is not None:
            options.extend(["-s", primary_space])
        if secondary_space is not None:
            options.extend(["-e", secondary_space])
        if directory_blocks is not None:
            options.extend(["-b", str(directory_blocks)])
        if block_size is not None:
            options.extend(["-B", str(block_size)])
        if record_format is not None:
            options.extend(["-r", RecordFormat(record_format).value])
        if record_length is not None:
            options.extend(["-l", str(record_length)])
        if storage_class is not None:
            options.extend(["-c", storage_class])
        if data_class is not None:
            options.extend(["-D", data_class])
        if management_class is not None:
            options.extend(["-m", management_class])
        if keys is not None:
            options.extend(["-k", f"{keys[0]}:{keys[1]}"])
        if volumes is not None:
            options.extend(["-V", volumes])

        args = [*options, name]
        result = self._runner.run("dtouch", args)
        if result.returncode >= _CREATE_ERROR_RC:
            raise ExternalFailure("dtouch", args, result.returncode, result.output)
        if result.returncode:
            logger.warning("[Datasets] dtouch %s returned warning rc=%d", name, result.returncode)

        records = self.listing(name)
        if not records:
            raise ExternalFailure("dls", [name], 1, f"{name} not listed after create")
        return records[0]

    def delete(self, *datasets: str) -> bool:
        """Delete data sets. Returns False if none matched."""
        result = execute(self._runner, "drm", list(datasets), empty_ok=True)
        return result.ok

    def delete_member(self, pattern: str) -> bool:
        """Delete members matching *pattern*. Returns False if none matched."""
        result = execute(self._runner, "mrm", [pattern], empty_ok=True)
        return result.ok

    # ------------------------------------------------------------------
    # Naming
    # ------------------------------------------------------------------

    def hlq(self) -> str:
        """High level qualifier of the current user."""
        return execute_string(self._runner, "hlq")

    def tmp_name(self, hlq: Optional[str] = None) -> str:
        """A unique temporary data set name, optionally under *hlq*."""
        return execute_string(self._runner, "mvstmp", [hlq] if hlq else [])
