"""
Implicit returns: the last expression statement of a function body is
returned.

Function bodies are the braces after ``=>``, after a parameter list of a
``function`` or method, and after a return-type annotation. Constructor
and setter bodies never return a value and are skipped, as are bodies whose
last statement is a declaration, a control statement or already returns.
"""

from __future__ import annotations

from typing import Optional

from .zs_keywords import CONTROL_KEYWORDS, NON_EXPRESSION_STATEMENTS, NON_RETURNING_METHODS
from .zs_scanner import RewriteStage, TokenEdits, TokenStream
from .zs_tokens import Token, TokenType

# Tokens a return-type annotation may end with before the body brace
_TYPE_ENDINGS = (">", "]", ")", "}")

# Keywords whose block is followed directly by a statement body
_BLOCK_KEYWORDS = ("else", "try", "finally")

# Keywords that continue the statement after a closing block brace
_BLOCK_CONTINUATIONS = ("else", "catch", "finally")


class OptionalReturnRewriter(RewriteStage):
    """Insert ``return`` before the final expression of function bodies."""

    triggers = ("{",)

    def apply(self, stream: TokenStream) -> str:
        edits = TokenEdits(stream)
        for i, tok in enumerate(stream.tokens):
            if not tok.is_punct("{"):
                continue
            close = stream.partner(i)
            if close is not None and self._is_function_body(stream, i):
                self._add_return(stream, edits, i, close)
        return edits.render()

    # Function bodies

    def _is_function_body(self, stream: TokenStream, brace: int) -> bool:
        prev = stream.prev_significant(brace - 1)
        if prev < 0:
            return False
        tok = stream[prev]
        if tok.type == TokenType.ARROW:
            return True
        params_close = prev if tok.is_punct(")") else self._annotated_params(stream, prev)
        if params_close is None:
            return False
        params_open = stream.partner(params_close)
        if params_open is None:
            return False
        return self._is_function_head(stream, params_open)

    def _annotated_params(self, stream: TokenStream, index: int) -> Optional[int]:
        """
        Walk back over a return-type annotation ending at ``index``.

        Returns:
            Index of the `)` closing the parameter list, or None when the
            tokens before the brace are not ``(...): Type``
        """
        tok = stream[index]
        if not (tok.is_word or tok.is_punct(*_TYPE_ENDINGS)):
            return None
        i = index
        while i >= 0:
            tok = stream[i]
            if tok.type == TokenType.NEWLINE:
                return None
            if tok.is_closer:
                opener = stream.partner(i)
                if opener is None:
                    return None
                i = opener - 1
                continue
            if tok.is_punct(":"):
                before = stream.prev_significant(i - 1)
                if before >= 0 and stream[before].is_punct(")"):
                    return before
                return None
            if tok.type == TokenType.ARROW or tok.is_punct(";", "{", "=", ","):
                return None
            i -= 1
        return None

    def _is_function_head(self, stream: TokenStream, params_open: int) -> bool:
        """True when the parameter list at ``params_open`` belongs to a function or method."""
        before = stream.prev_significant(params_open - 1)
        if before < 0:
            return False
        tok = stream[before]
        if tok.is_keyword("function"):
            return True
        if tok.is_punct(">"):
            # Generic parameters: `name<T>(...)`
            depth = 0
            i = before
            while i >= 0:
                if stream[i].is_punct(">"):
                    depth += 1
                elif stream[i].is_punct("<"):
                    depth -= 1
                    if depth == 0:
                        break
                elif stream[i].is_punct(";", "{", "}") or stream[i].type == TokenType.NEWLINE:
                    return False
                i -= 1
            before = stream.prev_significant(i - 1)
            if before < 0:
                return False
            tok = stream[before]
        if not tok.is_word:
            return False
        if tok.text in CONTROL_KEYWORDS or tok.text in NON_RETURNING_METHODS:
            return False

        head = stream.prev_significant(before - 1)
        if head >= 0 and stream[head].is_punct("*"):
            # Generators yield rather than return
            return False
        if head >= 0 and stream[head].is_keyword("set"):
            return False
        return True

    # Last statement

    def _add_return(self, stream: TokenStream, edits: TokenEdits, brace: int, close: int) -> None:
        start = stream.next_significant(brace + 1)
        if start >= close:
            return
        while True:
            end = self._statement_end(stream, start)
            if end >= close:
                end = close
                break
            nxt = stream.next_significant(end + 1)
            if nxt >= close:
                break
            start = nxt

        first = stream[start]
        if first.type == TokenType.KEYWORD and first.text in NON_EXPRESSION_STATEMENTS:
            return
        if first.is_punct("{") or self._has_return(stream, start, end):
            return
        edits.insert(start, "return ")

    def _statement_end(self, stream: TokenStream, start: int) -> int:
        """
        Like :meth:`TokenStream.statement_end`, but a block statement
        (``if (...) { }``, ``else { }``, ``try { }``, a nested block) ends at
        its closing brace when more code follows on the same line.
        """
        end = stream.statement_end(start)
        i = start
        while i < end:
            tok = stream[i]
            if not tok.is_opener:
                i += 1
                continue
            close = stream.partner(i)
            if close is None or close >= end:
                break
            if tok.text == "{" and self._is_block(stream, i):
                nxt = stream.next_significant(close + 1)
                if nxt < end and not self._continues_block(stream[nxt]):
                    return close
            i = close + 1
        return end

    def _is_block(self, stream: TokenStream, brace: int) -> bool:
        """True when the brace at ``brace`` opens a statement block."""
        if stream.at_statement_start(brace):
            return True
        prev = stream.prev_significant(brace - 1)
        tok = stream[prev]
        if tok.is_keyword(*_BLOCK_KEYWORDS):
            return True
        if tok.is_punct(")") and stream.partner(prev) is not None:
            head = stream.prev_significant(stream.partner(prev) - 1)
            return head >= 0 and stream[head].text in CONTROL_KEYWORDS
        return False

    def _continues_block(self, tok: Token) -> bool:
        return tok.is_keyword(*_BLOCK_CONTINUATIONS) or tok.is_punct(";") or tok.is_closer

    def _has_return(self, stream: TokenStream, lo: int, hi: int) -> bool:
        """True when ``[lo, hi)`` contains a ``return`` outside nested braces."""
        i = lo
        while i < hi:
            tok = stream[i]
            if tok.is_keyword("return"):
                return True
            if tok.is_punct("{") and stream.partner(i) is not None:
                i = stream.partner(i) + 1
                continue
            i += 1
        return False
