"""
Pipe chains: ``value |> f |> g`` becomes nested calls.

Each segment decides how the accumulated value is applied to it:

==========================  ===========================
segment                     result
==========================  ===========================
``console.log``             ``console.log(acc)``
``trim``                    ``(acc).trim()``
``slice(0, 2)``             ``(acc).slice(0, 2)``
``Math.max(0)``             ``Math.max(acc, 0)``
any other expression        ``(expr)(acc)``
==========================  ===========================

A chain starts after the nearest assignment, arrow, ``return``-like keyword,
comma or open bracket before its first ``|>`` and ends at the end of the
statement (or at a ternary ``?``/``:``). Chains inside bracket groups are
rewritten first, so a group always reaches its enclosing chain as text that
is already free of pipes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from .zs_keywords import PIPE_LEFT_BOUNDARY_KEYWORDS
from .zs_scanner import RewriteStage, TokenStream
from .zs_tokens import TokenType

logger = logging.getLogger(__name__)

ASSIGNMENT_OPERATORS = frozenset({
    "=", "+=", "-=", "*=", "/=", "%=", "**=", "&=", "|=", "^=", "&&=", "||=", "??=",
})


@dataclass
class _Piece:
    """A token, or a whole bracket group with its inside already rewritten."""

    index: int
    text: str
    group: bool = False


class PipeRewriter(RewriteStage):
    """Rewrite pipe chains into nested call expressions."""

    triggers = ("|>",)

    def apply(self, stream: TokenStream) -> str:
        return self._render(stream, 0, len(stream))

    def _render(self, stream: TokenStream, lo: int, hi: int) -> str:
        if not any(stream[i].type == TokenType.PIPE for i in range(lo, hi)):
            return stream.text(lo, hi)

        pieces: List[_Piece] = []
        i = lo
        while i < hi:
            tok = stream[i]
            close = stream.partner(i) if tok.is_opener else None
            if close is not None and close < hi:
                inner = self._render(stream, i + 1, close)
                pieces.append(_Piece(i, tok.text + inner + stream[close].text, group=True))
                i = close + 1
            else:
                pieces.append(_Piece(i, tok.text))
                i += 1

        out: List[str] = []
        run: List[_Piece] = []
        for piece in pieces:
            if not piece.group and stream.is_boundary(piece.index, commas=True):
                rendered = self._rewrite_run(stream, run)
                out.append(rendered)
                # A relocated line comment already ends the line
                if not (piece.text == "\n" and rendered.endswith("\n")):
                    out.append(piece.text)
                run = []
            else:
                run.append(piece)
        out.append(self._rewrite_run(stream, run))
        return "".join(out)

    # Runs

    def _is_pipe(self, stream: TokenStream, piece: _Piece) -> bool:
        return not piece.group and stream[piece.index].type == TokenType.PIPE

    def _is_layout(self, stream: TokenStream, piece: _Piece) -> bool:
        return not piece.group and stream[piece.index].type in (TokenType.WHITESPACE, TokenType.NEWLINE)

    def _is_comment(self, stream: TokenStream, piece: _Piece) -> bool:
        return not piece.group and stream[piece.index].type == TokenType.COMMENT

    def _starts_chain(self, stream: TokenStream, piece: _Piece) -> bool:
        """True when a chain may begin right after ``piece``."""
        if piece.group:
            return False
        tok = stream[piece.index]
        if tok.type == TokenType.ARROW:
            return True
        if tok.type == TokenType.OPERATOR and (tok.text in ASSIGNMENT_OPERATORS or tok.text in (":", "?")):
            return True
        return tok.is_keyword(*PIPE_LEFT_BOUNDARY_KEYWORDS)

    def _ends_chain(self, stream: TokenStream, run: List[_Piece], k: int) -> Optional[int]:
        """
        If the chain must stop before ``run[k]``, return where the remainder starts.

        A ternary `?` or `:` ends a chain, and so does a match-arm head on the
        same line (``:tag =>``), which starts before the arrow.
        """
        piece = run[k]
        if piece.group:
            return None
        tok = stream[piece.index]
        if tok.type == TokenType.OPERATOR and tok.text in (":", "?"):
            return k
        if tok.type == TokenType.ARROW:
            head = self._skip_back(stream, run, k - 1)
            before = self._skip_back(stream, run, head - 1)
            if before >= 0 and self._is_pipe(stream, run[before]):
                # An arrow function written directly as a segment
                return None
            return max(head, 0)
        return None

    def _skip_back(self, stream: TokenStream, run: List[_Piece], k: int) -> int:
        while k >= 0 and (self._is_layout(stream, run[k]) or self._is_comment(stream, run[k])):
            k -= 1
        return k

    def _rewrite_run(self, stream: TokenStream, run: List[_Piece]) -> str:
        first_pipe = next((k for k, p in enumerate(run) if self._is_pipe(stream, p)), None)
        if first_pipe is None:
            return "".join(p.text for p in run)

        start = 0
        for k in range(first_pipe - 1, -1, -1):
            if self._starts_chain(stream, run[k]):
                start = k + 1
                break

        stop = len(run)
        for k in range(first_pipe + 1, len(run)):
            cut = self._ends_chain(stream, run, k)
            if cut is not None:
                stop = max(cut, first_pipe + 1)
                break

        prefix = "".join(p.text for p in run[:start])
        suffix = self._rewrite_run(stream, run[stop:]) if stop < len(run) else ""
        return prefix + self._rewrite_chain(stream, run[start:stop]) + suffix

    # Chains

    def _rewrite_chain(self, stream: TokenStream, chain: List[_Piece]) -> str:
        lo, hi = 0, len(chain)
        while lo < hi and self._is_layout(stream, chain[lo]):
            lo += 1
        while hi > lo and (self._is_layout(stream, chain[hi - 1]) or self._is_comment(stream, chain[hi - 1])):
            hi -= 1
        leading = "".join(p.text for p in chain[:lo])
        trailing = "".join(p.text for p in chain[hi:])

        segments: List[List[_Piece]] = [[]]
        pipes: List[int] = []
        comments: List[str] = []
        for piece in chain[lo:hi]:
            if self._is_pipe(stream, piece):
                segments.append([])
                pipes.append(piece.index)
            elif self._is_comment(stream, piece):
                # Comments between segments are moved after the expression
                comments.append(piece.text)
            else:
                segments[-1].append(piece)

        texts = ["".join(p.text for p in seg).strip() for seg in segments]
        if not texts[0]:
            raise self.error(stream, "Pipe operator is missing its left operand", pipes[0])
        for n, text in enumerate(texts[1:]):
            if text:
                continue
            if n == len(pipes) - 1:
                raise self.error(stream, "Dangling pipe operator: missing right operand", pipes[n])
            raise self.error(stream, "Empty segment in pipe chain", pipes[n])

        acc = texts[0]
        for seg in segments[1:]:
            acc = self._apply_segment(stream, seg, acc)
        logger.debug("Lowered pipe chain of %d segment(s): %s", len(pipes), acc)

        moved = ""
        for comment in comments:
            if moved.endswith("\n"):
                moved += comment
            else:
                moved += " " + comment
            if comment.startswith("//"):
                moved += "\n"
        if trailing.startswith("\n"):
            moved = moved.rstrip("\n")
        return leading + acc + moved + trailing

    def _apply_segment(self, stream: TokenStream, segment: List[_Piece], acc: str) -> str:
        significant = [p for p in segment if not self._is_layout(stream, p)]
        text = "".join(p.text for p in segment).strip()

        path = self._path_length(stream, significant)
        if path == len(significant):
            if "." in text:
                return f"{text}({acc})"
            return f"({acc}).{text}()"

        call = significant[-1]
        if path > 0 and path == len(significant) - 1 and call.group and stream[call.index].text == "(":
            callee = "".join(p.text for p in significant[:-1])
            args = call.text[1:-1].strip()
            if "." in callee:
                return f"{callee}({acc}, {args})" if args else f"{callee}({acc})"
            return f"({acc}).{callee}({args})"

        if len(significant) == 1 and significant[0].group and text.startswith("("):
            return f"{text}({acc})"
        return f"({text})({acc})"

    def _path_length(self, stream: TokenStream, pieces: List[_Piece]) -> int:
        """Number of leading pieces forming ``name(.name)*``, or 0."""
        if not pieces or pieces[0].group or not stream[pieces[0].index].is_word:
            return 0
        n = 1
        while n + 1 < len(pieces):
            dot, name = pieces[n], pieces[n + 1]
            if dot.group or name.group:
                break
            if not (stream[dot.index].is_punct(".", "?.") and stream[name.index].is_word):
                break
            n += 2
        return n
