"""
Script applier — executes an :class:`EditScript` against an in-memory list
of lines with the same semantics the remote utility applies.

Used for dry runs (previewing an edit before it is sent) and to verify
properties such as block idempotence locally.

Patterns are basic regular expressions, as the utility reads them, and are
translated to Python syntax before matching. Each chain of the script runs
until one of its primitives takes effect.
"""

from __future__ import annotations

import logging
import re

from .directives import MatchPolicy, Pattern
from .primitives import (
    AppendAtEnd,
    DeleteRange,
    EditorPrimitive,
    EditScript,
    InsertAtStart,
    MatchAndAppend,
    MatchAndChange,
    MatchAndDelete,
    MatchAndInsertBefore,
)

logger = logging.getLogger(__name__)


# Literal in a basic regular expression unless backslash-escaped; the
# reverse holds in Python's re syntax.
_BRE_ESCAPED_OPERATORS = set("+?(){}|")


def _bracket_end(regex: str, start: int) -> int | None:
    i = start + 1
    if i < len(regex) and regex[i] == "^":
        i += 1
    # A leading ']' is a member of the set
    if i < len(regex) and regex[i] == "]":
        i += 1
    while i < len(regex) and regex[i] != "]":
        i += 1
    return i if i < len(regex) else None


def bre_to_python(regex: str) -> str:
    """Translate a basic regular expression into Python ``re`` syntax."""
    out: list[str] = []
    i = 0
    while i < len(regex):
        ch = regex[i]
        if ch == "\\":
            if i + 1 == len(regex):
                out.append("\\\\")
                break
            nxt = regex[i + 1]
            out.append(nxt if nxt in _BRE_ESCAPED_OPERATORS else "\\" + nxt)
            i += 2
            continue
        if ch == "[":
            end = _bracket_end(regex, i)
            if end is None:
                out.append("\\[")
            else:
                body = regex[i + 1:end].replace("\\", "\\\\").replace("[", "\\[")
                out.append("[" + body + "]")
                i = end + 1
                continue
        elif ch in _BRE_ESCAPED_OPERATORS:
            out.append("\\" + ch)
        elif ch == "*" and (not out or out[-1] in ("^", "(")):
            # '*' with nothing to repeat is literal
            out.append("\\*")
        elif ch == "^" and out and out[-1] != "(":
            out.append("\\^")
        elif ch == "$" and i + 1 < len(regex) and regex[i + 1:i + 3] != "\\)":
            out.append("\\$")
        else:
            out.append(ch)
        i += 1
    return "".join(out)


def _compile(pattern: Pattern) -> "re.Pattern[str]":
    return re.compile(bre_to_python(pattern.regex))


def _matches(pattern: Pattern, lines: list[str]) -> list[int]:
    regex = _compile(pattern)
    return [i for i, line in enumerate(lines) if regex.search(line)]


def _select(indices: list[int], policy: MatchPolicy) -> int:
    return indices[0] if policy is MatchPolicy.FIRST else indices[-1]


def apply_primitive(primitive: EditorPrimitive, lines: list[str]) -> bool:
    """Apply one primitive to *lines* in place. Returns True if it took effect."""
    if isinstance(primitive, AppendAtEnd):
        lines.extend(primitive.text.split("\n"))
        return True

    if isinstance(primitive, InsertAtStart):
        lines[0:0] = primitive.text.split("\n")
        return True

    if isinstance(primitive, (MatchAndAppend, MatchAndInsertBefore, MatchAndChange)):
        hits = _matches(primitive.anchor, lines)
        if not hits:
            return False
        idx = _select(hits, primitive.policy)
        new_lines = primitive.text.split("\n")
        if isinstance(primitive, MatchAndAppend):
            lines[idx + 1:idx + 1] = new_lines
        elif isinstance(primitive, MatchAndInsertBefore):
            lines[idx:idx] = new_lines
        else:
            lines[idx:idx + 1] = new_lines
        return True

    if isinstance(primitive, MatchAndDelete):
        hits = set(_matches(primitive.anchor, lines))
        if not hits:
            return False
        lines[:] = [line for i, line in enumerate(lines) if i not in hits]
        return True

    if isinstance(primitive, DeleteRange):
        begin = _compile(primitive.begin)
        end = _compile(primitive.end)
        kept: list[str] = []
        in_range = False
        removed = False
        for line in lines:
            if not in_range and begin.search(line):
                in_range = True
                removed = True
                continue
            if in_range:
                if end.search(line):
                    in_range = False
                continue
            kept.append(line)
        lines[:] = kept
        return removed

    raise TypeError(f"Unknown primitive: {primitive!r}")


def apply_script(lines: list[str], script: EditScript) -> list[str]:
    """Return a new list of lines with *script* applied in order."""
    result = list(lines)
    for chain in script.chains():
        for primitive in chain:
            if apply_primitive(primitive, result):
                break
    logger.debug("[Applier] %d -> %d lines", len(lines), len(result))
    return result


def apply_to_text(text: str, script: EditScript) -> str:
    """Apply *script* to newline-separated *text*."""
    if not text:
        return "\n".join(apply_script([], script))
    trailing = text.endswith("\n")
    lines = text[:-1].split("\n") if trailing else text.split("\n")
    out = "\n".join(apply_script(lines, script))
    return out + "\n" if trailing else out
