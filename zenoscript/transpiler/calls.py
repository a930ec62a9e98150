"""
Calls by juxtaposition: ``console.log message`` becomes ``console.log(message)``.

A call is recognised only where an expression may start (beginning of a
statement, after ``=``, ``=>``, ``return`` and friends, or right inside a
bracket) and only with a single primary argument on the same line. Anything
else is left as written.
"""

from __future__ import annotations

from typing import Optional

from .zs_keywords import EXPRESSION_PREFIX_KEYWORDS, LITERAL_WORDS, is_reserved
from .zs_scanner import RewriteStage, TokenEdits, TokenStream
from .zs_tokens import TokenType

# Tokens after which an expression may start
_EXPRESSION_STARTS = ("(", "[", "{", "}", ";", ",", "=", "?")

# Positions where a braced argument is an object literal rather than a body
_OBJECT_ARGUMENT_STARTS = ("(", "[", "{", "}", ";", "=")


class OptionalParensRewriter(RewriteStage):
    """Add the parentheses omitted around a single call argument."""

    def apply(self, stream: TokenStream) -> str:
        edits = TokenEdits(stream)
        for i, tok in enumerate(stream.tokens):
            if not tok.is_word or is_reserved(tok.text):
                continue
            if not self._call_position(stream, i):
                continue

            space = i + 1
            while space + 1 < len(stream) and stream[space].is_punct(".", "?.") and stream[space + 1].is_word:
                space += 2
            if space + 1 >= len(stream) or stream[space].type != TokenType.WHITESPACE:
                continue

            end = self._argument_end(stream, space + 1, self._object_allowed(stream, i))
            if end is None:
                continue
            edits.replace(space, space + 1, "(")
            edits.insert(end, ")")
        return edits.render()

    def _call_position(self, stream: TokenStream, index: int) -> bool:
        prev = stream.prev_significant(index - 1, skip_newlines=False)
        if prev < 0:
            return True
        tok = stream[prev]
        if tok.type in (TokenType.NEWLINE, TokenType.ARROW):
            return True
        return tok.is_punct(*_EXPRESSION_STARTS) or tok.is_keyword(*EXPRESSION_PREFIX_KEYWORDS, "else")

    def _object_allowed(self, stream: TokenStream, index: int) -> bool:
        prev = stream.prev_significant(index - 1, skip_newlines=False)
        if prev < 0:
            return True
        tok = stream[prev]
        if tok.type in (TokenType.NEWLINE, TokenType.ARROW):
            return True
        return tok.is_punct(*_OBJECT_ARGUMENT_STARTS) or tok.is_keyword("return")

    def _argument_end(self, stream: TokenStream, index: int, object_allowed: bool) -> Optional[int]:
        """Index just past the primary expression at ``index``, or None if there is none."""
        tok = stream[index]
        if tok.type in (TokenType.NUMBER, TokenType.STRING, TokenType.TEMPLATE):
            return index + 1
        if tok.is_punct("[") or (object_allowed and tok.is_punct("{")):
            close = stream.partner(index)
            return None if close is None else close + 1
        if not tok.is_word:
            return None
        if tok.type == TokenType.KEYWORD and tok.text not in LITERAL_WORDS:
            return None

        end = index + 1
        while end < len(stream):
            nxt = stream[end]
            if nxt.is_punct(".", "?.") and end + 1 < len(stream) and stream[end + 1].is_word:
                end += 2
            elif nxt.is_punct("(", "[") and stream.partner(end) is not None:
                end = stream.partner(end) + 1
            else:
                break
        return end
