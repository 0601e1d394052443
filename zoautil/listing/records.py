"""Typed records decoded from listing utilities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ListingRecord:
    """One data set from a listing. Only ``name`` is set in name-only mode."""
    name: str
    last_referenced: Optional[str] = None
    organization: Optional[str] = None
    record_format: Optional[str] = None
    record_length: Optional[int] = None
    block_size: Optional[int] = None
    volume: Optional[str] = None
    used_space: Optional[int] = None     # None when reported as unknown
    total_space: Optional[int] = None


@dataclass(frozen=True)
class JobRecord:
    """One job from the job listing. Unknown fields are None."""
    owner: Optional[str] = None
    name: Optional[str] = None
    id: Optional[str] = None
    status: Optional[str] = None
    return_code: Optional[str] = None

    @property
    def is_resolved(self) -> bool:
        return self.status is not None and self.owner is not None


@dataclass(frozen=True)
class JobDDRecord:
    """One DD of a job's output."""
    step_name: str
    dataset: str
    proc_step: Optional[str]
    format: str
    length: int
    record_count: int
