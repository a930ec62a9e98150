"""
Immutable bindings: ``let`` becomes ``const``.

Only statement-level bindings are rewritten. A ``let`` in a ``for`` header
sits inside parentheses and is left alone, and so is a ``let`` without an
initializer, which cannot be a ``const``.
"""

from __future__ import annotations

from typing import Optional

from .zs_scanner import RewriteStage, TokenEdits, TokenStream


class LetRewriter(RewriteStage):
    """
    Rewrite ``let name = value`` into ``const name = value;``.

    The terminating semicolon is added only when the statement does not
    already end with one.
    """

    triggers = ("let",)

    def apply(self, stream: TokenStream) -> str:
        edits = TokenEdits(stream)
        for i, tok in enumerate(stream.tokens):
            if tok.is_keyword("let") and stream.at_statement_start(i):
                self._rewrite_binding(stream, edits, i)
        return edits.render()

    def _rewrite_binding(self, stream: TokenStream, edits: TokenEdits, keyword: int) -> None:
        target = stream.next_significant(keyword + 1, skip_newlines=False)
        if target >= len(stream):
            return
        tok = stream[target]
        if tok.is_word:
            after_target = target + 1
        elif tok.is_punct("{", "[") and stream.partner(target) is not None:
            # Destructuring pattern
            after_target = stream.partner(target) + 1
        else:
            return

        equals = self._initializer(stream, after_target)
        if equals is None:
            return

        end = stream.statement_end(equals + 1)
        last = stream.prev_significant(end - 1)
        if last <= equals:
            raise self.error(stream, "Missing value in let binding", equals)

        edits.replace(keyword, keyword + 1, "const")
        if end >= len(stream) or not stream[end].is_punct(";"):
            edits.insert(last + 1, ";")

    def _initializer(self, stream: TokenStream, index: int) -> Optional[int]:
        """Index of the `=` after the binding target, skipping a type annotation."""
        i = stream.next_significant(index, skip_newlines=False)
        if i < len(stream) and stream[i].is_punct(":"):
            i += 1
            while i < len(stream):
                tok = stream[i]
                if tok.is_punct("="):
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
        if i < len(stream) and stream[i].is_punct("="):
            return i
        return None
