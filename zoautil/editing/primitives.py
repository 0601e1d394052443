"""
Editor primitives — the positional steps a compiled edit script is made of,
and their mapping onto stream-editor expressions.

A primitive flagged ``fallback`` only takes effect when no earlier primitive
of its chain matched; a non-fallback primitive starts a new chain.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..errors import InvalidRequest
from .directives import MatchPolicy, Pattern

# Characters with a special meaning in a basic regular expression, plus the
# expression delimiter.
_BRE_SPECIAL = set("\\.[]*^$/")


def literal_pattern(text: str) -> Pattern:
    """Return a pattern matching *text* literally."""
    return Pattern("".join("\\" + ch if ch in _BRE_SPECIAL else ch for ch in text))


def _escape_text(text: str) -> str:
    # Multi-line text is passed to the utility with escaped newlines
    return text.replace("\n", "\\n")


@dataclass(frozen=True)
class MatchAndAppend:
    anchor: Pattern
    text: str
    policy: MatchPolicy = MatchPolicy.LAST
    fallback: bool = False

    def to_expression(self) -> str:
        return f"/{self.anchor.regex}/a\\{_escape_text(self.text)}/{self.policy.value}"


@dataclass(frozen=True)
class MatchAndInsertBefore:
    anchor: Pattern
    text: str
    policy: MatchPolicy = MatchPolicy.LAST
    fallback: bool = False

    def to_expression(self) -> str:
        return f"/{self.anchor.regex}/i\\{_escape_text(self.text)}/{self.policy.value}"


@dataclass(frozen=True)
class MatchAndChange:
    anchor: Pattern
    text: str
    policy: MatchPolicy = MatchPolicy.LAST
    fallback: bool = False

    def to_expression(self) -> str:
        return f"/{self.anchor.regex}/c\\{_escape_text(self.text)}/{self.policy.value}"


@dataclass(frozen=True)
class MatchAndDelete:
    anchor: Pattern
    fallback: bool = False

    def to_expression(self) -> str:
        return f"/{self.anchor.regex}/d"


@dataclass(frozen=True)
class DeleteRange:
    """Delete every region from a *begin* match through an *end* match."""
    begin: Pattern
    end: Pattern
    fallback: bool = False

    def to_expression(self) -> str:
        return f"/{self.begin.regex}/,/{self.end.regex}/d"


@dataclass(frozen=True)
class AppendAtEnd:
    text: str
    fallback: bool = False

    def to_expression(self) -> str:
        return f"$ a\\{_escape_text(self.text)}"


@dataclass(frozen=True)
class InsertAtStart:
    text: str
    fallback: bool = False

    def to_expression(self) -> str:
        return f"1 i\\{_escape_text(self.text)}"


EditorPrimitive = Union[
    MatchAndAppend,
    MatchAndInsertBefore,
    MatchAndChange,
    MatchAndDelete,
    DeleteRange,
    AppendAtEnd,
    InsertAtStart,
]


def _chain_args(chain: tuple[EditorPrimitive, ...]) -> list[str]:
    if len(chain) == 1:
        return [chain[0].to_expression()]
    # -s: stop at the first expression that takes effect
    args = ["-s"]
    for primitive in chain:
        args.extend(["-e", primitive.to_expression()])
    return args


@dataclass(frozen=True)
class EditScript:
    """A non-empty, ordered sequence of primitives."""
    primitives: tuple[EditorPrimitive, ...]

    def __post_init__(self) -> None:
        if not self.primitives:
            raise InvalidRequest("An edit script needs at least one primitive")
        if self.primitives[0].fallback:
            raise InvalidRequest("An edit script cannot start with a fallback primitive")

    def __len__(self) -> int:
        return len(self.primitives)

    def __iter__(self):
        return iter(self.primitives)

    def chains(self) -> list[tuple[EditorPrimitive, ...]]:
        """Split the script into chains: a primitive plus its fallbacks."""
        chains: list[list[EditorPrimitive]] = []
        for primitive in self.primitives:
            if primitive.fallback:
                chains[-1].append(primitive)
            else:
                chains.append([primitive])
        return [tuple(chain) for chain in chains]

    def expressions(self) -> list[str]:
        """One expression per primitive, in compiled order."""
        return [p.to_expression() for p in self.primitives]

    def invocations(self) -> list[list[str]]:
        """Render the script as one utility argument list per chain.

        A chain of one primitive is passed as a positional expression. A
        longer chain is passed as repeated ``-e`` options behind ``-s``, so
        the utility stops at the first of them that takes effect. Chains are
        independent and must run as separate invocations, in order.
        """
        return [_chain_args(chain) for chain in self.chains()]
