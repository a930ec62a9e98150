"""
Structural scanning over a token list.

:class:`TokenStream` pairs brackets once and answers the questions every
stage asks (where does this group close, where does this statement end, is
this newline a statement boundary). :class:`TokenEdits` collects the
replacements a stage wants to make and renders them, refusing overlapping
regions. :class:`RewriteStage` is the base class of every pipeline stage.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from ..core.errors import ZenoscriptSyntaxError
from .zs_lexer import tokenize
from .zs_tokens import OPENERS, Token, TokenType

logger = logging.getLogger(__name__)

# Operators after which a line break does not end the statement
_NO_CONTINUE_OPERATORS = frozenset({"++", "--", "!"})

# Operators that continue the previous line when they start the next one
_LEADING_CONTINUATIONS = frozenset({".", "?.", "&&", "||", "??"})


class TokenStream:
    """A tokenized source unit with bracket pairing."""

    def __init__(self, source: str, tokens: Optional[List[Token]] = None):
        self.source = source
        self.tokens = tokens if tokens is not None else tokenize(source)
        self._partners = self._pair_brackets()

    def __len__(self) -> int:
        return len(self.tokens)

    def __getitem__(self, index: int) -> Token:
        return self.tokens[index]

    def _pair_brackets(self) -> Dict[int, int]:
        """Pair every opener with its closer; mismatched brackets stay unpaired."""
        pairs: Dict[int, int] = {}
        stack: List[int] = []
        for i, tok in enumerate(self.tokens):
            if tok.is_opener:
                stack.append(i)
            elif tok.is_closer:
                if stack and OPENERS[self.tokens[stack[-1]].text] == tok.text:
                    j = stack.pop()
                    pairs[i] = j
                    pairs[j] = i
        return pairs

    def partner(self, index: int) -> Optional[int]:
        """Index of the bracket matching the one at ``index``."""
        return self._partners.get(index)

    def text(self, lo: int, hi: int) -> str:
        return "".join(tok.text for tok in self.tokens[lo:hi])

    def next_significant(self, index: int, skip_newlines: bool = True) -> int:
        """First index >= ``index`` holding code, or ``len(self)``."""
        i = index
        while i < len(self.tokens):
            tok = self.tokens[i]
            if not (tok.is_trivia or (skip_newlines and tok.type == TokenType.NEWLINE)):
                return i
            i += 1
        return len(self.tokens)

    def prev_significant(self, index: int, skip_newlines: bool = True) -> int:
        """Last index <= ``index`` holding code, or -1."""
        i = min(index, len(self.tokens) - 1)
        while i >= 0:
            tok = self.tokens[i]
            if not (tok.is_trivia or (skip_newlines and tok.type == TokenType.NEWLINE)):
                return i
            i -= 1
        return -1

    def is_continuation(self, index: int) -> bool:
        """True when the newline at ``index`` does not end a statement."""
        prev = self.prev_significant(index - 1)
        if prev >= 0:
            tok = self.tokens[prev]
            if tok.type in (TokenType.PIPE, TokenType.ARROW):
                return True
            if tok.type == TokenType.OPERATOR and tok.text not in _NO_CONTINUE_OPERATORS:
                return True
            if tok.is_punct(","):
                return True
        nxt = self.next_significant(index + 1)
        if nxt < len(self.tokens):
            tok = self.tokens[nxt]
            if tok.type == TokenType.PIPE:
                return True
            if tok.type == TokenType.OPERATOR and tok.text in _LEADING_CONTINUATIONS:
                return True
        return False

    def is_boundary(self, index: int, commas: bool = False) -> bool:
        """True when the token at ``index`` separates statements."""
        tok = self.tokens[index]
        if tok.is_punct(";") or (commas and tok.is_punct(",")):
            return True
        return tok.type == TokenType.NEWLINE and not self.is_continuation(index)

    def statement_end(self, index: int, commas: bool = False) -> int:
        """
        Find where the statement containing ``index`` ends.

        Returns the index of the terminating `;`, boundary newline or
        closing bracket of the enclosing group, or ``len(self)``. Bracket
        groups are skipped whole.
        """
        i = index
        while i < len(self.tokens):
            tok = self.tokens[i]
            if tok.is_opener:
                close = self.partner(i)
                if close is None:
                    return len(self.tokens)
                i = close + 1
                continue
            if tok.is_closer or self.is_boundary(i, commas):
                return i
            i += 1
        return len(self.tokens)

    def at_statement_start(self, index: int) -> bool:
        """True when the token at ``index`` begins a statement."""
        prev = self.prev_significant(index - 1, skip_newlines=False)
        if prev < 0:
            return True
        tok = self.tokens[prev]
        if tok.type == TokenType.NEWLINE:
            return True
        return tok.is_punct(";", "{", "}") or tok.is_keyword("export")

    def angle_close(self, index: int) -> Optional[int]:
        """
        Index of the `>` closing the type-parameter list opened at ``index``.

        Nested angle brackets are depth-tracked and bracket groups (object
        types, function types) are skipped whole.
        """
        depth = 0
        i = index
        while i < len(self.tokens):
            tok = self.tokens[i]
            if tok.is_opener:
                close = self.partner(i)
                if close is None:
                    return None
                i = close + 1
                continue
            if tok.is_closer or tok.is_punct(";"):
                return None
            if tok.is_punct("<"):
                depth += 1
            elif tok.is_punct(">"):
                depth -= 1
                if depth == 0:
                    return i
            i += 1
        return None

    def trim(self, lo: int, hi: int) -> Tuple[int, int]:
        """Shrink ``[lo, hi)`` so it starts and ends on code tokens."""
        while lo < hi and (self.tokens[lo].is_trivia or self.tokens[lo].type == TokenType.NEWLINE):
            lo += 1
        while hi > lo and (self.tokens[hi - 1].is_trivia or self.tokens[hi - 1].type == TokenType.NEWLINE):
            hi -= 1
        return lo, hi

    def line_indent(self, index: int) -> str:
        """Leading whitespace of the line holding the token at ``index``."""
        start = self.source.rfind("\n", 0, self.tokens[index].start) + 1
        end = start
        while end < len(self.source) and self.source[end] in " \t":
            end += 1
        return self.source[start:end]


class TokenEdits:
    """Non-overlapping replacements over a :class:`TokenStream`."""

    def __init__(self, stream: TokenStream):
        self.stream = stream
        self._replacements: Dict[int, Tuple[int, str]] = {}
        self._insertions: Dict[int, List[str]] = {}
        self._covered: set[int] = set()

    def __bool__(self) -> bool:
        return bool(self._replacements or self._insertions)

    def replace(self, lo: int, hi: int, text: str) -> None:
        """Replace tokens ``[lo, hi)`` with ``text``."""
        span = set(range(lo, hi))
        if span & self._covered:
            raise ValueError(f"Overlapping rewrite of tokens {lo}..{hi}")
        self._covered |= span
        self._replacements[lo] = (hi, text)

    def insert(self, index: int, text: str) -> None:
        """Insert ``text`` before the token at ``index``."""
        self._insertions.setdefault(index, []).append(text)

    def render(self, lo: int = 0, hi: Optional[int] = None) -> str:
        hi = len(self.stream) if hi is None else hi
        out: List[str] = []
        i = lo
        while i < hi:
            out.extend(self._insertions.get(i, ()))
            if i in self._replacements:
                end, text = self._replacements[i]
                out.append(text)
                i = end
                continue
            out.append(self.stream[i].text)
            i += 1
        out.extend(self._insertions.get(hi, ()))
        return "".join(out)


class RewriteStage(ABC):
    """
    One pure, ordered transformation step of the pipeline.

    Subclasses implement :meth:`apply` over a fresh :class:`TokenStream`.
    ``triggers`` lists substrings without which the stage cannot apply; a
    source containing none of them is returned untouched.
    """

    triggers: Tuple[str, ...] = ()

    @property
    def name(self) -> str:
        return type(self).__name__

    def rewrite(self, source: str) -> str:
        if self.triggers and not any(t in source for t in self.triggers):
            return source
        return self.apply(TokenStream(source))

    @abstractmethod
    def apply(self, stream: TokenStream) -> str:
        """Return the rewritten text of ``stream``."""

    def error(self, stream: TokenStream, message: str, index: int) -> ZenoscriptSyntaxError:
        """Build a syntax error pointing at the token at ``index``."""
        if index < len(stream):
            tok = stream[index]
            return ZenoscriptSyntaxError(message, stream.source, tok.start, self.name, tok.text)
        return ZenoscriptSyntaxError(message, stream.source, len(stream.source), self.name)
