"""Tabular listing output — typed records and the parsers that build them."""

from .records import JobDDRecord, JobRecord, ListingRecord
from .parser import (
    parse_job_dds, parse_job_listing, parse_listing, parse_listing_fields,
    parse_names, tokenize,
)

__all__ = [
    "JobDDRecord", "JobRecord", "ListingRecord",
    "parse_job_dds", "parse_job_listing", "parse_listing",
    "parse_listing_fields", "parse_names", "tokenize",
]
