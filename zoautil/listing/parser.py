"""
Tabular output parser — decodes the whitespace-delimited output of listing
utilities into typed records.

Listing output interleaves data lines with informational messages (for
example ``BGYSC2006I Unable to obtain dataset information ...``).  Lines are
classified purely by token count: conforming lines are decoded, anything
else is dropped.  A conforming line whose numeric columns do not parse
raises :class:`MalformedRecord` for the whole batch, since that usually
means the utility's output format changed.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..errors import MalformedRecord
from .records import JobDDRecord, JobRecord, ListingRecord

logger = logging.getLogger(__name__)

LISTING_FIELDS = 9
JOB_FIELDS = 5
JOB_DD_FIELDS = 6

# Sentinels used by the utilities for values they could not determine
_UNKNOWN_SPACE = "??"
_UNKNOWN_JOB_FIELD = "?"
_NO_PROC_STEP = "-"


def tokenize(line: str) -> list[str]:
    """Split *line* on runs of whitespace."""
    return line.split()


def _to_int(token: str, field_name: str, line: str, line_number: int) -> int:
    try:
        return int(token)
    except ValueError:
        raise MalformedRecord(
            f"Line {line_number}: {field_name} {token!r} is not an integer",
            line=line,
            line_number=line_number,
        ) from None


def parse_listing_fields(
    tokens: list[str],
    line: str = "",
    line_number: int = 0,
) -> ListingRecord:
    """Decode the nine columns of a detailed listing line."""
    if len(tokens) != LISTING_FIELDS:
        raise MalformedRecord(
            f"Line {line_number}: expected {LISTING_FIELDS} fields, got {len(tokens)}",
            line=line,
            line_number=line_number,
        )

    used_space: Optional[int]
    if tokens[7] == _UNKNOWN_SPACE:
        used_space = None
    else:
        used_space = _to_int(tokens[7], "used space", line, line_number)

    return ListingRecord(
        name=tokens[0],
        last_referenced=tokens[1],
        organization=tokens[2],
        record_format=tokens[3],
        record_length=_to_int(tokens[4], "record length", line, line_number),
        block_size=_to_int(tokens[5], "block size", line, line_number),
        volume=tokens[6],
        used_space=used_space,
        total_space=_to_int(tokens[8], "total space", line, line_number),
    )


def parse_listing(text: str) -> list[ListingRecord]:
    """Parse data set listing output into records, in input order."""
    records: list[ListingRecord] = []
    dropped = 0
    for line_number, line in enumerate(text.split("\n"), start=1):
        tokens = tokenize(line)
        if not tokens:
            continue
        if len(tokens) == 1:
            records.append(ListingRecord(name=tokens[0]))
        elif len(tokens) == LISTING_FIELDS:
            records.append(parse_listing_fields(tokens, line, line_number))
        else:
            dropped += 1
            logger.debug("[Parser] Dropped non-record line %d: %s", line_number, line.strip())

    if dropped:
        logger.info("[Parser] %d informational line(s) skipped in listing", dropped)
    return records


def _job_field(token: str) -> Optional[str]:
    return None if token == _UNKNOWN_JOB_FIELD else token


def parse_job_listing(text: str) -> list[JobRecord]:
    """Parse job listing output (owner, name, id, status, return code)."""
    jobs: list[JobRecord] = []
    for line in text.split("\n"):
        tokens = tokenize(line)
        if len(tokens) < JOB_FIELDS:
            if tokens:
                logger.debug("[Parser] Dropped non-job line: %s", line.strip())
            continue
        owner, name, job_id, status, rc = tokens[:JOB_FIELDS]
        jobs.append(JobRecord(
            owner=_job_field(owner),
            name=_job_field(name),
            id=_job_field(job_id),
            status=_job_field(status),
            return_code=_job_field(rc),
        ))
    return jobs


def parse_job_dds(text: str) -> list[JobDDRecord]:
    """Parse the DD listing of a job's spool output."""
    dds: list[JobDDRecord] = []
    for line_number, line in enumerate(text.split("\n"), start=1):
        tokens = tokenize(line)
        if len(tokens) != JOB_DD_FIELDS:
            if tokens:
                logger.debug("[Parser] Dropped non-DD line %d: %s", line_number, line.strip())
            continue
        step, dataset, proc_step, fmt, length, count = tokens
        dds.append(JobDDRecord(
            step_name=step,
            dataset=dataset,
            proc_step=None if proc_step == _NO_PROC_STEP else proc_step,
            format=fmt,
            length=_to_int(length, "record length", line, line_number),
            record_count=_to_int(count, "record count", line, line_number),
        ))
    return dds


def parse_names(text: str) -> list[str]:
    """Parse one-name-per-line output (member lists, library lists)."""
    return [line.strip() for line in text.split("\n") if line.strip()]
