"""Line editing — directives, compiled editor scripts, and a local applier."""

from .directives import (
    BOF, EOF, Anchor, BeginningOfFile, BlockMarker, EditMode, EditRequest,
    EndOfFile, MatchPolicy, Pattern, anchor_from_string,
)
from .primitives import (
    AppendAtEnd, DeleteRange, EditorPrimitive, EditScript, InsertAtStart,
    MatchAndAppend, MatchAndChange, MatchAndDelete, MatchAndInsertBefore,
    literal_pattern,
)
from .compiler import DirectiveCompiler, compile_request
from .applier import apply_primitive, apply_script, apply_to_text, bre_to_python

__all__ = [
    "BOF", "EOF", "Anchor", "BeginningOfFile", "BlockMarker", "EditMode",
    "EditRequest", "EndOfFile", "MatchPolicy", "Pattern", "anchor_from_string",
    "AppendAtEnd", "DeleteRange", "EditorPrimitive", "EditScript",
    "InsertAtStart", "MatchAndAppend", "MatchAndChange", "MatchAndDelete",
    "MatchAndInsertBefore", "literal_pattern",
    "DirectiveCompiler", "compile_request",
    "apply_primitive", "apply_script", "apply_to_text", "bre_to_python",
]
