"""
Struct and trait declarations.

``struct`` becomes a type alias over an object type and ``trait`` becomes an
interface. Both are structural wrappers: the body is copied verbatim.
"""

from __future__ import annotations

from typing import Optional, Tuple

from .zs_scanner import RewriteStage, TokenEdits, TokenStream
from .zs_tokens import TokenType


def _declaration_head(stream: TokenStream, keyword: int) -> Optional[Tuple[str, str, int]]:
    """
    Read ``Name[<Generics>]`` after a declaration keyword.

    Returns:
        (name, generics, index after the head), or None when the keyword is
        not followed by a name
    """
    name_i = stream.next_significant(keyword + 1)
    if name_i >= len(stream) or stream[name_i].type != TokenType.IDENTIFIER:
        return None
    after = stream.next_significant(name_i + 1)
    generics = ""
    if after < len(stream) and stream[after].is_punct("<"):
        close = stream.angle_close(after)
        if close is None:
            return None
        generics = stream.text(after, close + 1)
        after = stream.next_significant(close + 1)
    return stream[name_i].text, generics, after


class StructRewriter(RewriteStage):
    """
    Rewrite struct declarations into object type aliases.

    Converts:
        struct User { name: string; }  -> type User = { name: string; };
        struct Box<T> { value: T; }    -> type Box<T> = { value: T; };
        struct Empty;                  -> type Empty = {};
    """

    triggers = ("struct",)

    def apply(self, stream: TokenStream) -> str:
        edits = TokenEdits(stream)
        i = 0
        while i < len(stream):
            if stream[i].is_keyword("struct") and stream.at_statement_start(i):
                end = self._rewrite_struct(stream, edits, i)
                if end is not None:
                    i = end
                    continue
            i += 1
        return edits.render()

    def _rewrite_struct(self, stream: TokenStream, edits: TokenEdits, keyword: int) -> Optional[int]:
        head = _declaration_head(stream, keyword)
        if head is None:
            return None
        name, generics, after = head
        if after >= len(stream):
            return None

        if stream[after].is_punct(";"):
            edits.replace(keyword, after + 1, f"type {name}{generics} = {{}};")
            return after + 1

        if not stream[after].is_punct("{"):
            return None
        close = stream.partner(after)
        if close is None:
            raise self.error(stream, f"Unterminated body of struct {name}", after)

        body = stream.text(after + 1, close)
        end = close + 1
        # Absorb a `;` already written after the closing brace
        k = end
        while k < len(stream) and stream[k].type == TokenType.WHITESPACE:
            k += 1
        if k < len(stream) and stream[k].is_punct(";"):
            end = k + 1
        edits.replace(keyword, end, f"type {name}{generics} = {{{body}}};")
        return end


class TraitRewriter(RewriteStage):
    """
    Rewrite trait headers into interface headers.

    Only the keyword changes; generics, an ``extends`` clause and the body
    are left as written.
    """

    triggers = ("trait",)

    def apply(self, stream: TokenStream) -> str:
        edits = TokenEdits(stream)
        for i, tok in enumerate(stream.tokens):
            if not (tok.is_keyword("trait") and stream.at_statement_start(i)):
                continue
            head = _declaration_head(stream, i)
            if head is None:
                continue
            after = head[2]
            if after < len(stream) and (stream[after].is_punct("{") or stream[after].is_keyword("extends")):
                edits.replace(i, i + 1, "interface")
        return edits.render()
