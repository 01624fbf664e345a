#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/unlatex/parsers/lexer.py
"""LaTeX lexer.

Converts raw source text into a lazy sequence of :class:`Token` objects.
Lexing is total: every character of the input belongs to exactly one token,
and anything that is not a recognised special character ends up in a TEXT
token. Concatenating the text of all tokens reproduces the source exactly.

Examples
--------
>>> [t.text for t in tokenize(r"\\emph{hi} there")]
['\\\\emph', '{', 'hi', '}', ' ', 'there']

"""

from __future__ import annotations

from typing import Iterator

from unlatex.constants import COMMENT_CHAR, ESCAPE_CHAR, SPECIAL_CHARS, WHITESPACE_CHARS
from unlatex.parsers.tokens import Position, Token, TokenKind

_SINGLE_CHAR_KINDS = {
    "{": TokenKind.BEGIN_GROUP,
    "}": TokenKind.END_GROUP,
    "[": TokenKind.OPEN_BRACKET,
    "]": TokenKind.CLOSE_BRACKET,
    "&": TokenKind.ALIGN_TAB,
    "^": TokenKind.SUPERSCRIPT,
    "_": TokenKind.SUBSCRIPT,
}

_TEXT_STOP_CHARS = SPECIAL_CHARS | WHITESPACE_CHARS | frozenset("[]")


def _is_letter(char: str) -> bool:
    return ("a" <= char <= "z") or ("A" <= char <= "Z")


def position_at(source: str, offset: int) -> Position:
    """Compute the line/column position of a character offset.

    Parameters
    ----------
    source : str
        Complete source text
    offset : int
        0-based character offset (may equal ``len(source)``)

    Returns
    -------
    Position
        Position with 1-based line and column

    """
    line = source.count("\n", 0, offset) + 1
    column = offset - source.rfind("\n", 0, offset)
    return Position(line=line, column=column, offset=offset)


def advance_position(position: Position, text: str) -> Position:
    """Return the position just past ``text`` when it starts at ``position``."""
    newlines = text.count("\n")
    if newlines == 0:
        return Position(position.line, position.column + len(text), position.offset + len(text))
    return Position(position.line + newlines, len(text) - text.rfind("\n"), position.offset + len(text))


def _scan_end(source: str, i: int) -> tuple[TokenKind, int]:
    """Return the kind of the token starting at ``i`` and its end offset."""
    n = len(source)
    char = source[i]

    if char == ESCAPE_CHAR:
        if i + 1 >= n:
            # A dangling backslash has nothing to escape
            return TokenKind.TEXT, n
        if _is_letter(source[i + 1]):
            j = i + 2
            while j < n and _is_letter(source[j]):
                j += 1
            return TokenKind.CONTROL_WORD, j
        return TokenKind.CONTROL_SYMBOL, i + 2

    kind = _SINGLE_CHAR_KINDS.get(char)
    if kind is not None:
        return kind, i + 1

    if char == "$":
        if i + 1 < n and source[i + 1] == "$":
            return TokenKind.MATH_SHIFT, i + 2
        return TokenKind.MATH_SHIFT, i + 1

    if char == "#":
        if i + 1 < n and source[i + 1].isdigit():
            return TokenKind.PARAMETER, i + 2
        return TokenKind.PARAMETER, i + 1

    if char == COMMENT_CHAR:
        j = i + 1
        while j < n and source[j] not in "\r\n":
            j += 1
        return TokenKind.COMMENT, j

    if char in WHITESPACE_CHARS:
        j = i + 1
        while j < n and source[j] in WHITESPACE_CHARS:
            j += 1
        return TokenKind.WHITESPACE, j

    j = i + 1
    while j < n and source[j] not in _TEXT_STOP_CHARS:
        j += 1
    return TokenKind.TEXT, j


class TokenStream:
    """Lazy, restartable sequence of tokens over a source string.

    Every call to ``iter()`` re-scans the source from ``start``, so a stream
    can be consumed any number of times. Nothing is scanned until iteration
    begins.

    Parameters
    ----------
    source : str
        Complete LaTeX source
    start : int, default 0
        Offset at which scanning begins. Positions are always reported
        relative to the full source.

    """

    def __init__(self, source: str, start: int = 0):
        self.source = source
        self.start = max(0, min(start, len(source)))

    def __iter__(self) -> Iterator[Token]:
        source = self.source
        n = len(source)
        i = self.start
        position = position_at(source, i)
        while i < n:
            kind, j = _scan_end(source, i)
            text = source[i:j]
            end = advance_position(position, text)
            yield Token(kind, text, position, end)
            position = end
            i = j

    @property
    def end_position(self) -> Position:
        """Position just past the last character of the source."""
        return position_at(self.source, len(self.source))

    def __repr__(self) -> str:
        return f"TokenStream(length={len(self.source)}, start={self.start})"


def tokenize(source: str, start: int = 0) -> TokenStream:
    """Convert LaTeX source into a lazy token sequence.

    Parameters
    ----------
    source : str
        LaTeX source text
    start : int, default 0
        Offset to start scanning from

    Returns
    -------
    TokenStream
        Restartable iterable of tokens

    """
    return TokenStream(source, start)
