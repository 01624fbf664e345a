#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/unlatex/parsers/tokens.py
"""Token types and source positions produced by the LaTeX lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenKind(Enum):
    """Lexical category of a token."""

    CONTROL_WORD = auto()  # \section
    CONTROL_SYMBOL = auto()  # \\, \%, \[
    BEGIN_GROUP = auto()  # {
    END_GROUP = auto()  # }
    OPEN_BRACKET = auto()  # [
    CLOSE_BRACKET = auto()  # ]
    MATH_SHIFT = auto()  # $ or $$
    ALIGN_TAB = auto()  # &
    PARAMETER = auto()  # #1
    SUPERSCRIPT = auto()  # ^
    SUBSCRIPT = auto()  # _
    COMMENT = auto()  # % to end of line
    WHITESPACE = auto()
    TEXT = auto()


@dataclass(frozen=True)
class Position:
    """Source position: 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True)
class Span:
    """Source range from start (inclusive) to end (exclusive) position."""

    start: Position
    end: Position

    def contains(self, other: Span) -> bool:
        """Return True if ``other`` lies entirely within this span."""
        return self.start.offset <= other.start.offset and other.end.offset <= self.end.offset


@dataclass(frozen=True)
class Token:
    """A single lexer token.

    Parameters
    ----------
    kind : TokenKind
        Lexical category
    text : str
        Exact source text of the token, so ``end.offset - position.offset == len(text)``
    position : Position
        Position of the first character
    end : Position
        Position just past the last character

    """

    kind: TokenKind
    text: str
    position: Position
    end: Position

    @property
    def name(self) -> str:
        """Control sequence name without the leading backslash."""
        if self.kind in (TokenKind.CONTROL_WORD, TokenKind.CONTROL_SYMBOL):
            return self.text[1:]
        return self.text

    @property
    def newlines(self) -> int:
        """Number of line feeds contained in the token text."""
        return self.text.count("\n")

    @property
    def span(self) -> Span:
        return Span(self.position, self.end)

    def is_control(self, name: str) -> bool:
        """Return True if this token is the control sequence ``\\name``."""
        return self.kind in (TokenKind.CONTROL_WORD, TokenKind.CONTROL_SYMBOL) and self.text[1:] == name

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.text!r}, {self.position.line}:{self.position.column})"
