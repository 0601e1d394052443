"""
Edit directives — the caller-facing description of a line edit: where it
applies (anchors), which occurrence it targets, and what it does.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from ..errors import InvalidRequest

# Special anchor strings understood by the utilities
_BOF = "BOF"
_EOF = "EOF"

_DEFAULT_MARKER = "BEGIN\nEND\n# {mark} MANAGED BLOCK"


@dataclass(frozen=True)
class BeginningOfFile:
    """Anchor at the first line. Only valid as an insert-before target."""

    def __str__(self) -> str:
        return _BOF


@dataclass(frozen=True)
class EndOfFile:
    """Anchor after the last line. Only valid as an insert-after target."""

    def __str__(self) -> str:
        return _EOF


@dataclass(frozen=True)
class Pattern:
    """Regular-expression anchor matched against each line."""
    regex: str

    def __post_init__(self) -> None:
        if not self.regex:
            raise InvalidRequest("Pattern anchor needs a non-empty regex")

    def __str__(self) -> str:
        return self.regex


Anchor = Union[BeginningOfFile, EndOfFile, Pattern]

BOF = BeginningOfFile()
EOF = EndOfFile()


def anchor_from_string(value: Optional[str]) -> Optional[Anchor]:
    """Map ``"BOF"``/``"EOF"`` to their anchors; any other text is a regex."""
    if value is None:
        return None
    if value == _BOF:
        return BOF
    if value == _EOF:
        return EOF
    return Pattern(value)


class MatchPolicy(Enum):
    FIRST = "1"
    LAST = "$"


class EditMode(Enum):
    INSERT = "insert"
    REPLACE = "replace"
    DELETE = "delete"
    BLOCK = "block"


@dataclass(frozen=True)
class BlockMarker:
    """Three-part marker template used to delimit a managed block.

    ``template`` must contain ``{mark}``, which is substituted with
    ``begin`` and ``end`` to produce the two delimiter lines.
    """
    begin: str = "BEGIN"
    end: str = "END"
    template: str = "# {mark} MANAGED BLOCK"

    def __post_init__(self) -> None:
        if "{mark}" not in self.template:
            raise InvalidRequest(
                f"Marker template must contain '{{mark}}': {self.template!r}"
            )
        if self.begin == self.end:
            raise InvalidRequest("Begin and end markers must differ")

    @classmethod
    def parse(cls, text: str = _DEFAULT_MARKER) -> "BlockMarker":
        """Parse ``"<begin>\\n<end>\\n<template>"``."""
        parts = text.split("\n")
        if len(parts) != 3:
            raise InvalidRequest(
                f"Marker must have 3 newline-separated parts, got {len(parts)}"
            )
        return cls(begin=parts[0], end=parts[1], template=parts[2])

    @property
    def begin_line(self) -> str:
        return self.template.replace("{mark}", self.begin)

    @property
    def end_line(self) -> str:
        return self.template.replace("{mark}", self.end)

    def __str__(self) -> str:
        return f"{self.begin}\n{self.end}\n{self.template}"

    def wrap(self, content: str) -> str:
        """Return the delimited block text for *content*."""
        return "\n".join([self.begin_line, *content.split("\n"), self.end_line])


@dataclass(frozen=True)
class EditRequest:
    """A structured edit against one line-oriented document."""
    mode: EditMode
    content: str = ""
    insert_after: Optional[Anchor] = None
    insert_before: Optional[Anchor] = None
    replace_pattern: Optional[Pattern] = None
    first_match_only: bool = False
    marker: Optional[BlockMarker] = None
    present: bool = True

    @property
    def match_policy(self) -> MatchPolicy:
        return MatchPolicy.FIRST if self.first_match_only else MatchPolicy.LAST

    @property
    def block_marker(self) -> BlockMarker:
        return self.marker or BlockMarker()

    # ------------------------------------------------------------------
    # Convenience constructors
    # ------------------------------------------------------------------

    @classmethod
    def line(
        cls,
        line: str,
        *,
        regex: Optional[str] = None,
        ins_aft: Optional[str] = None,
        ins_bef: Optional[str] = None,
        state: bool = True,
        first_match: bool = False,
    ) -> "EditRequest":
        """Build a request from line-in-file style arguments.

        ``state=False`` deletes; a ``regex`` with ``state=True`` replaces the
        matching line and falls back to the insertion anchors.
        """
        pattern = Pattern(regex) if regex else None
        if not state:
            mode = EditMode.DELETE
        elif pattern is not None:
            mode = EditMode.REPLACE
        else:
            mode = EditMode.INSERT
        return cls(
            mode=mode,
            content=line,
            insert_after=anchor_from_string(ins_aft),
            insert_before=anchor_from_string(ins_bef),
            replace_pattern=pattern,
            first_match_only=first_match,
        )

    @classmethod
    def block(
        cls,
        block: str = "",
        *,
        marker: Optional[str] = None,
        ins_aft: Optional[str] = None,
        ins_bef: Optional[str] = None,
        state: bool = True,
    ) -> "EditRequest":
        """Build a marker-block request from block-in-file style arguments."""
        return cls(
            mode=EditMode.BLOCK,
            content=block,
            insert_after=anchor_from_string(ins_aft),
            insert_before=anchor_from_string(ins_bef),
            marker=BlockMarker.parse(marker) if marker else None,
            present=state,
        )
