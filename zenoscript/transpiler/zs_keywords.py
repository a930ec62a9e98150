"""
Reserved-word table shared by the lexer and the rewrite stages.

The lexer tags these words as keywords; the simplified-if, optional-parens
and optional-return stages consult the same sets so they cannot drift apart.
"""

from __future__ import annotations

# Words introduced by Zenoscript itself
ZENOSCRIPT_KEYWORDS = frozenset({
    "let", "match", "struct", "trait",
})

# TypeScript/JavaScript keywords, including contextual ones that start
# declarations or modify the following name
TYPESCRIPT_KEYWORDS = frozenset({
    "abstract", "as", "async", "await", "break", "case", "catch", "class",
    "const", "continue", "debugger", "declare", "default", "delete", "do",
    "else", "enum", "export", "extends", "false", "finally", "for", "from",
    "function", "get", "if", "implements", "import", "in", "infer",
    "instanceof", "interface", "is", "keyof", "module", "namespace", "new",
    "null", "of", "override", "private", "protected", "public", "readonly",
    "return", "satisfies", "set", "static", "super", "switch", "this",
    "throw", "true", "try", "type", "typeof", "undefined", "unique", "var",
    "void", "while", "with", "yield",
})

RESERVED_WORDS = ZENOSCRIPT_KEYWORDS | TYPESCRIPT_KEYWORDS

# Reserved words that are still values, so they may be a call argument
LITERAL_WORDS = frozenset({
    "true", "false", "null", "undefined", "this", "super",
})

# Keywords followed by a parenthesised header and a block; a `{` after
# their `)` is never a function body
CONTROL_KEYWORDS = frozenset({
    "if", "while", "for", "switch", "catch", "with",
})

# Final statements of a body that must not receive an implicit `return`
NON_EXPRESSION_STATEMENTS = frozenset({
    "return", "if", "else", "const", "let", "var", "for", "while", "do",
    "switch", "try", "throw", "break", "continue", "function", "class",
    "type", "interface", "enum", "import", "export", "debugger",
})

# Words after which an expression (and so a juxtaposition call) may begin
EXPRESSION_PREFIX_KEYWORDS = frozenset({
    "return", "await", "yield", "throw",
})

# Words that end the value of a pipe chain on its left
PIPE_LEFT_BOUNDARY_KEYWORDS = frozenset({
    "return", "throw", "yield", "else", "case",
})

# Names whose bodies never yield a value
NON_RETURNING_METHODS = frozenset({
    "constructor",
})


def is_reserved(word: str) -> bool:
    """Return True when ``word`` can never be a callee or argument name."""
    return word in RESERVED_WORDS
