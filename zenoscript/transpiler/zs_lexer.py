"""
Pygments lexer and tokenizer for Zenoscript source.

:class:`ZenoscriptLexer` is an ordinary Pygments lexer (usable for
highlighting through the ``pygments.lexers`` entry point), and
:func:`tokenize` turns its output into the :class:`~.zs_tokens.Token` list
every rewrite stage works on.

The lexer is the guard for the whole pipeline: strings, template strings,
regular-expression literals and comments come out as single opaque tokens,
so no stage can rewrite inside them or match across them. Concatenating the
token texts always reproduces the input exactly.
"""

from __future__ import annotations

from typing import Iterator, List, Optional

from pygments.lexer import ExtendedRegexLexer, words
from pygments.token import (
    Comment,
    Error,
    Keyword,
    Name,
    Number,
    Operator,
    Other,
    Punctuation,
    String,
    Whitespace,
)

from ..core.errors import LexError
from .zs_keywords import LITERAL_WORDS, RESERVED_WORDS
from .zs_tokens import Token, TokenType

# A `/` after one of these characters starts a regular expression
_REGEX_PRECEDERS = frozenset("(,=:[!&|?{};~+-*%<>^")

# ...and so does a `/` after one of these words
_REGEX_KEYWORDS = frozenset({
    "return", "typeof", "case", "do", "else", "in", "of", "new", "delete",
    "void", "throw", "yield", "await", "instanceof",
})


def _is_name_char(ch: str) -> bool:
    return ch.isalnum() or ch in "_$"


def _regex_allowed(text: str, pos: int) -> bool:
    """Decide whether the `/` at ``pos`` begins a regex or is division."""
    i = pos - 1
    while i >= 0 and text[i] in " \t\r\n":
        i -= 1
    if i < 0:
        return True
    if text[i] in _REGEX_PRECEDERS:
        return True
    if _is_name_char(text[i]):
        j = i
        while j >= 0 and _is_name_char(text[j]):
            j -= 1
        return text[j + 1:i + 1] in _REGEX_KEYWORDS
    return False


def _scan_regex(text: str, pos: int) -> Optional[int]:
    """Return the end of the regex literal at ``pos``, or None if there is none."""
    i = pos + 1
    in_class = False
    while i < len(text):
        ch = text[i]
        if ch == "\n":
            return None
        if ch == "\\":
            i += 2
            continue
        if ch == "[":
            in_class = True
        elif ch == "]":
            in_class = False
        elif ch == "/" and not in_class:
            i += 1
            while i < len(text) and text[i].isalpha():
                i += 1
            return i
        i += 1
    return None


def _scan_quoted(text: str, pos: int) -> Optional[int]:
    quote = text[pos]
    i = pos + 1
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
        elif ch == quote:
            return i + 1
        elif ch == "\n":
            return None
        else:
            i += 1
    return None


def _scan_interpolation(text: str, pos: int) -> Optional[int]:
    """Scan a `${ ... }` body starting after the brace; return the offset past `}`."""
    depth = 1
    i = pos
    while i < len(text):
        ch = text[i]
        if ch in "\"'":
            end = _scan_quoted(text, i)
            if end is None:
                return None
            i = end
        elif ch == "`":
            end = _scan_template(text, i)
            if end is None:
                return None
            i = end
        elif text.startswith("//", i):
            newline = text.find("\n", i)
            i = len(text) if newline < 0 else newline
        elif text.startswith("/*", i):
            close = text.find("*/", i + 2)
            if close < 0:
                return None
            i = close + 2
        elif ch == "{":
            depth += 1
            i += 1
        elif ch == "}":
            depth -= 1
            i += 1
            if depth == 0:
                return i
        else:
            i += 1
    return None


def _scan_template(text: str, pos: int) -> Optional[int]:
    """Return the offset just past the template string opened at ``pos``."""
    i = pos + 1
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
        elif ch == "`":
            return i + 1
        elif ch == "$" and text.startswith("{", i + 1):
            end = _scan_interpolation(text, i + 2)
            if end is None:
                return None
            i = end
        else:
            i += 1
    return None


class ZenoscriptLexer(ExtendedRegexLexer):
    """
    Lexer for Zenoscript, a sugar layer over TypeScript.

    Besides the TypeScript lexical grammar it knows the pipe operator
    ``|>`` and atoms (``:name``). Template strings and regex literals need
    context the regex table cannot express, so they are scanned by
    callbacks. Unterminated strings, templates and block comments are
    emitted as ``Error`` tokens; :func:`tokenize` turns those into a
    :class:`LexError`.
    """

    name = "Zenoscript"
    aliases = ["zenoscript", "zs"]
    filenames = ["*.zs"]
    mimetypes = ["text/x-zenoscript"]

    def template_callback(lexer, match, ctx):
        start = match.start()
        end = _scan_template(ctx.text, start)
        if end is None:
            yield start, Error, ctx.text[start:ctx.end]
            ctx.pos = ctx.end
            return
        yield start, String.Backtick, ctx.text[start:end]
        ctx.pos = end

    def slash_callback(lexer, match, ctx):
        start = match.start()
        if _regex_allowed(ctx.text, start):
            end = _scan_regex(ctx.text, start)
            if end is not None:
                yield start, String.Regex, ctx.text[start:end]
                ctx.pos = end
                return
        op = "/=" if ctx.text.startswith("/=", start) else "/"
        yield start, Operator, op
        ctx.pos = start + len(op)

    tokens = {
        "root": [
            (r"\n", Whitespace),
            (r"[^\S\n]+", Whitespace),
            (r"//[^\n]*", Comment.Single),
            (r"/\*[\s\S]*?\*/", Comment.Multiline),
            (r"/\*[\s\S]*", Error),
            (r'"(?:\\[\s\S]|[^"\\\n])*"', String.Double),
            (r"'(?:\\[\s\S]|[^'\\\n])*'", String.Single),
            # Only reached when the closing quote is missing on this line
            (r"[\"'][^\n]*", Error),
            (r"`", template_callback),
            (r"/", slash_callback),
            (r"(?<![\w$)\]}\"'`?]):(?:[^\W\d]|\$)[\w$]*", String.Symbol),
            (r"0[xX][0-9a-fA-F_]+n?|0[bB][01_]+n?|0[oO][0-7_]+n?", Number.Hex),
            (r"(?:\d[\d_]*(?:\.[\d_]*)?|\.\d[\d_]*)(?:[eE][+-]?\d+)?n?", Number),
            (words(sorted(RESERVED_WORDS), prefix=r"(?<![.\w$])", suffix=r"(?![\w$])"),
             Keyword),
            (r"(?:[^\W\d]|\$)[\w$]*", Name),
            (r"\|>", Operator),
            (r"=>", Operator),
            (r"===|!==|==|!=|<=|>=|&&=|\|\|=|\?\?=|&&|\|\||\?\?|\?\.(?!\d)"
             r"|\.\.\.|\*\*=?|\+\+|--|[-+*%&|^]=", Operator),
            (r"[-+*%&|^!~<>=?:.]", Operator),
            (r"[{}()\[\];,]", Punctuation),
            (r"[\s\S]", Other),
        ],
    }


_LEXER = ZenoscriptLexer()


def _unterminated_message(text: str) -> str:
    if text.startswith("/*"):
        return "Unterminated block comment"
    if text.startswith("`"):
        return "Unterminated template string"
    return "Unterminated string literal"


def _classify(ttype, text: str) -> TokenType:
    """Map a Pygments token type onto the transpiler's token types."""
    if ttype in Comment:
        return TokenType.COMMENT
    if ttype in String.Backtick:
        return TokenType.TEMPLATE
    if ttype in String.Regex:
        return TokenType.REGEX
    if ttype in String.Symbol:
        return TokenType.ATOM
    if ttype in String:
        return TokenType.STRING
    if ttype in Number:
        return TokenType.NUMBER
    if ttype in Keyword:
        return TokenType.KEYWORD
    if ttype in Name:
        return TokenType.IDENTIFIER
    if ttype in Whitespace:
        return TokenType.NEWLINE if text == "\n" else TokenType.WHITESPACE
    if ttype in Operator:
        if text == "|>":
            return TokenType.PIPE
        if text == "=>":
            return TokenType.ARROW
        return TokenType.OPERATOR
    if ttype in Punctuation:
        return TokenType.PUNCTUATION
    return TokenType.OTHER


_OPERAND_END_TYPES = frozenset({
    TokenType.IDENTIFIER, TokenType.NUMBER, TokenType.STRING,
    TokenType.TEMPLATE, TokenType.REGEX, TokenType.ATOM,
})


def _ends_operand(tok: Optional[Token]) -> bool:
    if tok is None:
        return False
    if tok.type in _OPERAND_END_TYPES or tok.is_closer:
        return True
    return tok.is_keyword(*LITERAL_WORDS)


def iter_tokens(text: str) -> Iterator[Token]:
    """
    Lazily tokenize ``text``.

    An atom written right after an operand inside an open conditional
    expression (``c ? a :b``) is the ternary's `:` followed by a name, and is
    split into those two tokens.

    Raises:
        LexError: On an unterminated string, template string or block comment
    """
    # Unclosed `?` operators, one counter per bracket depth
    pending = [0]
    last: Optional[Token] = None
    for pos, ttype, value in _LEXER.get_tokens_unprocessed(text):
        if ttype is Error:
            raise LexError(_unterminated_message(value), text, pos)
        tok = Token(_classify(ttype, value), value, pos)
        if tok.type == TokenType.ATOM and pending[-1] and _ends_operand(last):
            name = value[1:]
            name_type = TokenType.KEYWORD if name in RESERVED_WORDS else TokenType.IDENTIFIER
            pending[-1] -= 1
            yield Token(TokenType.OPERATOR, ":", pos)
            tok = Token(name_type, name, pos + 1)
        elif tok.is_opener:
            pending.append(0)
        elif tok.is_closer:
            if len(pending) > 1:
                pending.pop()
        elif tok.is_punct(";", ","):
            pending[-1] = 0
        elif tok.type == TokenType.OPERATOR and value == "?":
            pending[-1] += 1
        elif tok.type == TokenType.OPERATOR and value == ":" and pending[-1]:
            pending[-1] -= 1
        if not (tok.is_trivia or tok.type == TokenType.NEWLINE):
            last = tok
        yield tok


def tokenize(text: str) -> List[Token]:
    """
    Tokenize Zenoscript source.

    Args:
        text: Source text

    Returns:
        Tokens whose texts concatenate back to ``text``

    Raises:
        LexError: On an unterminated string, template string or block comment
    """
    return list(iter_tokens(text))
