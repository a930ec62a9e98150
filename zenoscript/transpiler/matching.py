"""
Match expressions over atoms.

::

    match status {
      :ok => "Success"
      :error => "Failed"
      _ => "Unknown"
    }

becomes an immediately-invoked arrow function that evaluates the scrutinee
once and tests it against each tag in order::

    (() => {
      const __match_value = status;
      if (__match_value === Symbol.for("ok")) { return "Success"; }
      else if (__match_value === Symbol.for("error")) { return "Failed"; }
      else { return "Unknown"; }
    })()

Arms are separated by newlines, ``;`` or ``,``, or simply by the next
``pattern =>`` on the same line. Actions may contain further ``match``
expressions, which are lowered recursively.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from lark.exceptions import LarkError

from .atoms import atom_literal
from .zs_grammar import ArmPattern, parse_pattern
from .zs_scanner import RewriteStage, TokenStream
from .zs_tokens import TokenType

logger = logging.getLogger(__name__)

MATCH_VALUE = "__match_value"


@dataclass
class MatchArm:
    """One ``pattern => action`` arm, as token ranges of the source."""

    pattern: ArmPattern
    head: int
    """Index of the first pattern token"""
    arrow: int
    """Index of the `=>` token"""


class MatchRewriter(RewriteStage):
    """Lower match blocks into immediately-invoked functions."""

    triggers = ("match",)

    def apply(self, stream: TokenStream) -> str:
        return self._render(stream, 0, len(stream))

    def _render(self, stream: TokenStream, lo: int, hi: int) -> str:
        out: List[str] = []
        i = lo
        while i < hi:
            tok = stream[i]
            if tok.is_keyword("match"):
                header = self._header(stream, i)
                if header is not None:
                    scrutinee_lo, scrutinee_hi, brace = header
                    close = stream.partner(brace)
                    if close is None or close >= hi:
                        raise self.error(stream, "Unterminated match block", brace)
                    out.append(self._lower(stream, i, scrutinee_lo, scrutinee_hi, brace, close))
                    i = close + 1
                    continue
            out.append(tok.text)
            i += 1
        return "".join(out)

    def _header(self, stream: TokenStream, keyword: int) -> Optional[Tuple[int, int, int]]:
        """
        Recognise ``match <scrutinee> {``.

        The scrutinee is a parenthesised expression or a name followed by
        member accesses, calls and index lookups.

        Returns:
            (scrutinee start, scrutinee end, index of `{`), or None when the
            keyword does not start a match expression
        """
        start = stream.next_significant(keyword + 1, skip_newlines=False)
        if start >= len(stream):
            return None
        tok = stream[start]
        if tok.is_punct("("):
            close = stream.partner(start)
            if close is None:
                return None
            end = close + 1
        elif tok.is_word:
            end = start + 1
            while end < len(stream):
                nxt = stream[end]
                if nxt.is_punct(".", "?.") and end + 1 < len(stream) and stream[end + 1].is_word:
                    end += 2
                elif nxt.is_punct("(", "[") and stream.partner(end) is not None:
                    end = stream.partner(end) + 1
                else:
                    break
        else:
            return None

        brace = stream.next_significant(end, skip_newlines=False)
        if brace < len(stream) and stream[brace].is_punct("{"):
            return start, end, brace
        return None

    def _lower(
        self,
        stream: TokenStream,
        keyword: int,
        scrutinee_lo: int,
        scrutinee_hi: int,
        brace: int,
        close: int,
    ) -> str:
        arms = self._parse_arms(stream, brace, close)
        scrutinee = self._render(stream, scrutinee_lo, scrutinee_hi)
        indent = stream.line_indent(keyword)

        lines = ["(() => {", f"{indent}  const {MATCH_VALUE} = {scrutinee};"]
        for n, arm in enumerate(arms):
            action = self._action(stream, arms, n, close)
            if arm.pattern.is_wildcard:
                if n == 0:
                    lines.append(f"{indent}  return {action};")
                else:
                    lines.append(f"{indent}  else {{ return {action}; }}")
                if n + 1 < len(arms):
                    logger.warning(
                        "Unreachable match arm(s) after wildcard at line %d dropped",
                        stream.source.count("\n", 0, stream[arm.head].start) + 1,
                    )
                break
            keyword_text = "if" if n == 0 else "else if"
            test = f"{MATCH_VALUE} === {atom_literal(arm.pattern.tag)}"
            lines.append(f"{indent}  {keyword_text} ({test}) {{ return {action}; }}")
        lines.append(f"{indent}}})()")
        return "\n".join(lines)

    def _action(self, stream: TokenStream, arms: List[MatchArm], n: int, close: int) -> str:
        """Rendered action text of ``arms[n]``."""
        lo = arms[n].arrow + 1
        hi = arms[n + 1].head if n + 1 < len(arms) else close
        lo, hi = stream.trim(lo, hi)
        while hi > lo and stream[hi - 1].is_punct(",", ";"):
            lo, hi = stream.trim(lo, hi - 1)
        if lo >= hi:
            raise self.error(stream, "Match arm has no action", arms[n].arrow)
        return self._render(stream, lo, hi)

    def _parse_arms(self, stream: TokenStream, brace: int, close: int) -> List[MatchArm]:
        arms: List[MatchArm] = []
        at_arm_start = True
        i = brace + 1
        while i < close:
            tok = stream[i]
            if tok.is_trivia:
                i += 1
                continue
            if tok.type == TokenType.NEWLINE or tok.is_punct(";", ","):
                if stream.is_boundary(i, commas=True):
                    at_arm_start = True
                i += 1
                continue

            if at_arm_start:
                at_arm_start = False
                arrow = self._find_arrow(stream, i, close)
                if arrow is not None:
                    arms.append(MatchArm(self._pattern(stream, i, arrow), i, arrow))
                    i = arrow + 1
                    continue
                if not arms:
                    raise self.error(stream, "Expected a match arm ('pattern => action')", i)
                # Otherwise the line continues the previous action
            elif arms and self._is_head_token(tok):
                arrow = stream.next_significant(i + 1, skip_newlines=False)
                if arrow < close and stream[arrow].type == TokenType.ARROW:
                    arms.append(MatchArm(self._pattern(stream, i, arrow), i, arrow))
                    i = arrow + 1
                    continue

            if tok.is_opener and stream.partner(i) is not None:
                i = stream.partner(i) + 1
            else:
                i += 1

        if not arms:
            raise self.error(stream, "Match block has no arms", brace)
        return arms

    def _is_head_token(self, tok) -> bool:
        return tok.type == TokenType.ATOM or (tok.type == TokenType.IDENTIFIER and tok.text == "_")

    def _find_arrow(self, stream: TokenStream, index: int, close: int) -> Optional[int]:
        """First `=>` at this nesting level before the end of the arm line."""
        i = index
        while i < close:
            tok = stream[i]
            if tok.type == TokenType.ARROW:
                return i
            if tok.is_opener:
                end = stream.partner(i)
                if end is None:
                    return None
                i = end + 1
                continue
            if stream.is_boundary(i, commas=True):
                return None
            i += 1
        return None

    def _pattern(self, stream: TokenStream, lo: int, arrow: int) -> ArmPattern:
        text = stream.text(lo, arrow).strip()
        try:
            return parse_pattern(text)
        except LarkError as exc:
            raise self.error(
                stream, f"Invalid match pattern {text!r}: expected '_' or ':Tag'", lo
            ) from exc
