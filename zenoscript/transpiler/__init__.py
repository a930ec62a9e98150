"""
Zenoscript to TypeScript transpiler.

Usage:
    from zenoscript.transpiler import transpile

    typescript = transpile('let greeting = "hi"\\nconsole.log greeting')
"""

from .atoms import atom_literal
from .pipeline import STAGES, ZenoscriptTranspiler, default_stages, transpile, transpile_file
from .zs_lexer import ZenoscriptLexer, tokenize
from .zs_scanner import RewriteStage, TokenEdits, TokenStream
from .zs_tokens import Token, TokenType

__all__ = [
    "transpile",
    "transpile_file",
    "ZenoscriptTranspiler",
    "STAGES",
    "default_stages",
    "RewriteStage",
    "TokenStream",
    "TokenEdits",
    "ZenoscriptLexer",
    "tokenize",
    "Token",
    "TokenType",
    "atom_literal",
]
