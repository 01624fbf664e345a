#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Lexer, macro signatures and parser for LaTeX source.

The parser itself lives in :mod:`unlatex.parsers.latex`; it is not imported
here so that the options package can depend on the signature tables.
"""

from unlatex.parsers.lexer import TokenStream, position_at, tokenize
from unlatex.parsers.macros import (
    DEFAULT_MACRO_TABLE,
    ArgumentParsingMode,
    EnvironmentSignature,
    MacroSignature,
    MacroTable,
)
from unlatex.parsers.tokens import Position, Span, Token, TokenKind

__all__ = [
    "ArgumentParsingMode",
    "DEFAULT_MACRO_TABLE",
    "EnvironmentSignature",
    "MacroSignature",
    "MacroTable",
    "Position",
    "Span",
    "Token",
    "TokenKind",
    "TokenStream",
    "position_at",
    "tokenize",
]
