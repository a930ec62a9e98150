"""
Parenthesis-free conditions: ``if cond {`` becomes ``if (cond) {``.
"""

from __future__ import annotations

from typing import Optional

from .zs_scanner import RewriteStage, TokenEdits, TokenStream


class SimplifiedIfRewriter(RewriteStage):
    """
    Wrap bare ``if`` conditions in parentheses.

    A condition that already is a single parenthesised group is left alone,
    while ``if (a) && (b) {`` is wrapped as a whole. ``else if`` is covered
    because its ``if`` is an ordinary ``if``. Only insertions are made, so
    conditions containing nested ``if`` statements (inside callbacks) are
    handled in the same pass.
    """

    triggers = ("if",)

    def apply(self, stream: TokenStream) -> str:
        edits = TokenEdits(stream)
        for i, tok in enumerate(stream.tokens):
            if not tok.is_keyword("if"):
                continue
            lo = stream.next_significant(i + 1, skip_newlines=False)
            if lo >= len(stream):
                continue
            brace = self._body_brace(stream, lo)
            if brace is None or brace == lo:
                continue
            hi = stream.prev_significant(brace - 1, skip_newlines=False) + 1
            if stream[lo].is_punct("(") and self._parenthesised(stream, lo, hi):
                continue
            edits.insert(lo, "(")
            edits.insert(hi, ")")
        return edits.render()

    def _parenthesised(self, stream: TokenStream, lo: int, hi: int) -> bool:
        """
        True when the condition starting at the `(` at ``lo`` needs no wrapping.

        Either the group spans the whole condition, or it is followed by a
        braceless body (``if (a) x = {...}``), whose brace belongs to the
        body rather than to the ``if``.
        """
        close = stream.partner(lo)
        if close is None or close == hi - 1:
            return True
        after = stream.next_significant(close + 1, skip_newlines=False)
        return after < len(stream) and (stream[after].is_word or stream[after].is_opener)

    def _body_brace(self, stream: TokenStream, index: int) -> Optional[int]:
        """Index of the `{` opening the body, or None if the condition is not followed by one."""
        i = index
        while i < len(stream):
            tok = stream[i]
            if tok.is_punct("{"):
                return i
            if tok.is_opener:
                close = stream.partner(i)
                if close is None:
                    return None
                i = close + 1
                continue
            if tok.is_closer or stream.is_boundary(i):
                return None
            i += 1
        return None
