"""
Token model shared by every rewrite stage.

Tokens keep their raw text and source span, so joining the text of a token
list always reproduces the source it was produced from.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

OPENERS = {"(": ")", "[": "]", "{": "}"}
CLOSERS = {")": "(", "]": "[", "}": "{"}


class TokenType(Enum):
    """Lexical classes of Zenoscript source."""

    # Words and literals
    IDENTIFIER = auto()
    KEYWORD = auto()
    NUMBER = auto()
    ATOM = auto()  # :name

    # Opaque leaves: never rewritten, never matched across
    STRING = auto()
    TEMPLATE = auto()  # `...${expr}...`
    REGEX = auto()  # /pattern/flags
    COMMENT = auto()

    # Layout
    WHITESPACE = auto()
    NEWLINE = auto()

    # Operators and punctuation
    PIPE = auto()  # |>
    ARROW = auto()  # =>
    OPERATOR = auto()
    PUNCTUATION = auto()

    # Anything the lexer does not recognise; passed through untouched
    OTHER = auto()


OPAQUE_TYPES = frozenset({
    TokenType.STRING, TokenType.TEMPLATE, TokenType.REGEX, TokenType.COMMENT,
})

TRIVIA_TYPES = frozenset({TokenType.WHITESPACE, TokenType.COMMENT})


@dataclass(frozen=True)
class Token:
    """
    Represents a single token of a source unit.

    Attributes:
        type: The token type
        text: Raw source text of the token
        start: Offset of the first character in the source
    """

    type: TokenType
    text: str
    start: int

    @property
    def end(self) -> int:
        return self.start + len(self.text)

    @property
    def is_opaque(self) -> bool:
        return self.type in OPAQUE_TYPES

    @property
    def is_trivia(self) -> bool:
        """Whitespace or comment on a single logical line."""
        return self.type in TRIVIA_TYPES

    @property
    def is_word(self) -> bool:
        return self.type in (TokenType.IDENTIFIER, TokenType.KEYWORD)

    @property
    def is_opener(self) -> bool:
        return self.type == TokenType.PUNCTUATION and self.text in OPENERS

    @property
    def is_closer(self) -> bool:
        return self.type == TokenType.PUNCTUATION and self.text in CLOSERS

    def is_keyword(self, *words: str) -> bool:
        return self.type == TokenType.KEYWORD and self.text in words

    def is_punct(self, *texts: str) -> bool:
        return self.type in (TokenType.PUNCTUATION, TokenType.OPERATOR) and self.text in texts

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.text!r}, pos={self.start})"
