"""
Lark grammar for match-arm patterns.

Arm heads are tiny, but they are where invalid input must be rejected
rather than passed through, so they are parsed against an explicit grammar
instead of being compared as strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from lark import Lark, Transformer, v_args


@dataclass(frozen=True)
class ArmPattern:
    """A parsed match-arm pattern."""

    tag: Optional[str]
    """Atom name for a ``:Tag`` pattern, None for the wildcard"""

    @property
    def is_wildcard(self) -> bool:
        return self.tag is None


def get_pattern_grammar() -> str:
    """
    Return the Lark grammar for match-arm patterns.

    Patterns:
    - ``_``: wildcard, matches any value
    - ``:Tag``: matches when the scrutinee is the atom ``Tag``

    Returns:
        str: The complete Lark grammar definition
    """
    return r"""
        ?start: pattern

        pattern: WILDCARD   -> wildcard
               | ATOM       -> tag

        WILDCARD: "_"
        ATOM: /:[A-Za-z_$][A-Za-z0-9_$]*/

        %import common.WS
        %ignore WS
        """


def create_pattern_transformer() -> Transformer:
    """Create the transformer lowering pattern parse trees to :class:`ArmPattern`."""

    @v_args(inline=True)
    class ToPattern(Transformer):
        """Lower a pattern parse tree."""

        def wildcard(self, _token):
            return ArmPattern(tag=None)

        def tag(self, token):
            return ArmPattern(tag=str(token)[1:])

    return ToPattern()


@lru_cache(maxsize=1)
def _pattern_parser() -> Lark:
    return Lark(get_pattern_grammar(), start="start", parser="lalr")


def parse_pattern(text: str) -> ArmPattern:
    """
    Parse the text of an arm head.

    Raises:
        lark.exceptions.LarkError: If ``text`` is not a valid pattern
    """
    tree = _pattern_parser().parse(text)
    return create_pattern_transformer().transform(tree)
