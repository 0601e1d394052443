"""
Edit directive compiler — turns an :class:`EditRequest` into an ordered
:class:`EditScript` of positional primitives.

Compilation is pure: the same request always yields the same script, and the
request is fully validated before the first primitive is built.  Whether a
pattern anchor actually matches is only known when the script runs against
the live document, so pattern-anchored insertions always carry a fallback
primitive at the document boundary.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..errors import InvalidRequest
from .directives import (
    Anchor,
    BeginningOfFile,
    EditMode,
    EditRequest,
    EndOfFile,
    MatchPolicy,
    Pattern,
)
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
    literal_pattern,
)

logger = logging.getLogger(__name__)


class DirectiveCompiler:
    """Compile edit requests into editor scripts."""

    def compile(self, request: EditRequest) -> EditScript:
        self.validate(request)

        if request.mode is EditMode.INSERT:
            primitives = self._insert(request, request.content)
        elif request.mode is EditMode.REPLACE:
            primitives = self._replace(request)
        elif request.mode is EditMode.DELETE:
            primitives = self._delete(request)
        else:
            primitives = self._block(request)

        script = EditScript(tuple(primitives))
        logger.debug(
            "[Compiler] %s request compiled to %d primitive(s)",
            request.mode.value, len(script),
        )
        return script

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self, request: EditRequest) -> None:
        """Raise :class:`InvalidRequest` if *request* cannot be compiled."""
        after, before = request.insert_after, request.insert_before

        if after is not None and before is not None:
            raise InvalidRequest("insert_after and insert_before are mutually exclusive")
        if isinstance(after, BeginningOfFile):
            raise InvalidRequest("BOF is only valid as an insert_before anchor")
        if isinstance(before, EndOfFile):
            raise InvalidRequest("EOF is only valid as an insert_after anchor")

        mode = request.mode
        if mode is EditMode.INSERT:
            if after is None and before is None:
                raise InvalidRequest("insert mode needs insert_after or insert_before")
            if request.replace_pattern is not None:
                raise InvalidRequest("replace_pattern is not valid in insert mode")
        elif mode is EditMode.REPLACE:
            if request.replace_pattern is None:
                raise InvalidRequest("replace mode needs a replace_pattern")
        elif mode is EditMode.DELETE:
            if request.replace_pattern is None and not request.content:
                raise InvalidRequest("delete mode needs a pattern or literal content")
        elif mode is EditMode.BLOCK and request.present:
            if not request.content:
                raise InvalidRequest("block content is required when the block is present")
            if after is None and before is None:
                raise InvalidRequest("block mode needs insert_after or insert_before")

    # ------------------------------------------------------------------
    # Per-mode rules
    # ------------------------------------------------------------------

    def _insert(
        self,
        request: EditRequest,
        text: str,
        *,
        as_fallback: bool = False,
    ) -> list[EditorPrimitive]:
        """Insertion primitives for *text* at the request's anchor.

        With ``as_fallback`` every primitive only applies when an earlier
        primitive of the chain did not match.
        """
        policy = request.match_policy
        after: Optional[Anchor] = request.insert_after
        before: Optional[Anchor] = request.insert_before

        if isinstance(after, EndOfFile):
            return [AppendAtEnd(text, fallback=as_fallback)]
        if isinstance(before, BeginningOfFile):
            return [InsertAtStart(text, fallback=as_fallback)]
        if isinstance(after, Pattern):
            return [
                MatchAndAppend(after, text, policy, fallback=as_fallback),
                AppendAtEnd(text, fallback=True),
            ]
        if isinstance(before, Pattern):
            return [
                MatchAndInsertBefore(before, text, policy, fallback=as_fallback),
                InsertAtStart(text, fallback=True),
            ]
        return []

    def _replace(self, request: EditRequest) -> list[EditorPrimitive]:
        if request.replace_pattern is None:
            raise InvalidRequest("replace mode needs a replace_pattern")
        primitives: list[EditorPrimitive] = [
            MatchAndChange(request.replace_pattern, request.content, request.match_policy),
        ]
        primitives.extend(self._insert(request, request.content, as_fallback=True))
        return primitives

    def _delete(self, request: EditRequest) -> list[EditorPrimitive]:
        pattern = request.replace_pattern
        if pattern is None:
            return [MatchAndDelete(literal_pattern(request.content))]
        if request.content:
            return [
                MatchAndDelete(pattern),
                MatchAndDelete(literal_pattern(request.content)),
            ]
        return [MatchAndDelete(pattern)]

    def _block(self, request: EditRequest) -> list[EditorPrimitive]:
        marker = request.block_marker
        primitives: list[EditorPrimitive] = [
            DeleteRange(literal_pattern(marker.begin_line), literal_pattern(marker.end_line)),
        ]
        if request.present:
            primitives.extend(self._insert(request, marker.wrap(request.content)))
        return primitives


_compiler = DirectiveCompiler()


def compile_request(request: EditRequest) -> EditScript:
    """Compile *request* with the shared, stateless compiler."""
    return _compiler.compile(request)
