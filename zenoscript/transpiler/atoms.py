"""
Atoms: ``:name`` becomes a registered symbol.

``Symbol.for`` returns the same symbol for the same key everywhere, so two
occurrences of an atom compare equal with ``===``. Match lowering uses
:func:`atom_literal` as well, keeping the two encodings identical.
"""

from __future__ import annotations

from .zs_scanner import RewriteStage, TokenEdits, TokenStream
from .zs_tokens import TokenType

ATOM_CONSTRUCTOR = "Symbol.for"


def atom_literal(name: str) -> str:
    """TypeScript expression for the atom ``:name``."""
    return f'{ATOM_CONSTRUCTOR}("{name}")'


class AtomRewriter(RewriteStage):
    """Rewrite every atom token into its symbol expression."""

    triggers = (":",)

    def apply(self, stream: TokenStream) -> str:
        edits = TokenEdits(stream)
        for i, tok in enumerate(stream.tokens):
            if tok.type == TokenType.ATOM:
                edits.replace(i, i + 1, atom_literal(tok.text[1:]))
        return edits.render()
