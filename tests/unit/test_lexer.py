#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the LaTeX lexer."""
import pytest
from hypothesis import given
from hypothesis import strategies as st

from unlatex.parsers.lexer import advance_position, position_at, tokenize
from unlatex.parsers.tokens import Position, Span, TokenKind


def _kinds(source: str) -> list[TokenKind]:
    return [token.kind for token in tokenize(source)]


@pytest.mark.unit
class TestTokenKinds:
    """Test classification of source characters."""

    def test_control_word_and_group(self) -> None:
        """Test a macro with a braced argument."""
        texts = [token.text for token in tokenize(r"\emph{hi} there")]
        assert texts == ["\\emph", "{", "hi", "}", " ", "there"]

    def test_control_symbol(self) -> None:
        """Test that a backslash followed by a non-letter is a control symbol."""
        tokens = list(tokenize(r"\\\%"))
        assert [t.kind for t in tokens] == [TokenKind.CONTROL_SYMBOL, TokenKind.CONTROL_SYMBOL]
        assert [t.name for t in tokens] == ["\\", "%"]

    def test_control_word_stops_at_non_letter(self) -> None:
        """Test that digits end a control word."""
        tokens = list(tokenize(r"\foo12"))
        assert tokens[0].text == "\\foo"
        assert tokens[1].kind is TokenKind.TEXT
        assert tokens[1].text == "12"

    def test_math_shift(self) -> None:
        """Test single and double dollar signs."""
        tokens = list(tokenize("$$x$"))
        assert [(t.kind, t.text) for t in tokens] == [
            (TokenKind.MATH_SHIFT, "$$"),
            (TokenKind.TEXT, "x"),
            (TokenKind.MATH_SHIFT, "$"),
        ]

    def test_special_characters(self) -> None:
        """Test brackets, alignment tabs, scripts and parameters."""
        assert _kinds("[]&^_#1") == [
            TokenKind.OPEN_BRACKET,
            TokenKind.CLOSE_BRACKET,
            TokenKind.ALIGN_TAB,
            TokenKind.SUPERSCRIPT,
            TokenKind.SUBSCRIPT,
            TokenKind.PARAMETER,
        ]

    def test_comment_stops_at_line_end(self) -> None:
        """Test that a comment runs to the end of its line only."""
        tokens = list(tokenize("a % note\nb"))
        assert [t.kind for t in tokens] == [
            TokenKind.TEXT,
            TokenKind.WHITESPACE,
            TokenKind.COMMENT,
            TokenKind.WHITESPACE,
            TokenKind.TEXT,
        ]
        assert tokens[2].text == "% note"

    def test_whitespace_runs_are_one_token(self) -> None:
        """Test that consecutive blanks and newlines form a single token."""
        tokens = list(tokenize("a \n\n  b"))
        assert tokens[1].kind is TokenKind.WHITESPACE
        assert tokens[1].newlines == 2

    def test_dangling_backslash(self) -> None:
        """Test that a trailing backslash becomes text."""
        tokens = list(tokenize("a\\"))
        assert tokens[-1].kind is TokenKind.TEXT
        assert tokens[-1].text == "\\"

    def test_empty_source(self) -> None:
        """Test that empty input has no tokens."""
        assert list(tokenize("")) == []


@pytest.mark.unit
class TestPositions:
    """Test source position tracking."""

    def test_token_positions(self) -> None:
        """Test line, column and offset of tokens across a line break."""
        tokens = list(tokenize("a\nbc"))
        assert tokens[0].position == Position(1, 1, 0)
        assert tokens[1].position == Position(1, 2, 1)
        assert tokens[2].position == Position(2, 1, 2)
        assert tokens[2].end == Position(2, 3, 4)

    def test_position_at(self) -> None:
        """Test computing a position from an offset."""
        assert position_at("ab\ncd", 4) == Position(2, 2, 4)
        assert position_at("ab\ncd", 0) == Position(1, 1, 0)
        assert position_at("ab\ncd", 5) == Position(2, 3, 5)

    def test_advance_position(self) -> None:
        """Test moving a position past some text."""
        assert advance_position(Position(1, 1, 0), "ab") == Position(1, 3, 2)
        assert advance_position(Position(1, 1, 0), "ab\nc") == Position(2, 2, 4)

    def test_span_contains(self) -> None:
        """Test span containment."""
        outer = Span(Position(1, 1, 0), Position(1, 10, 9))
        inner = Span(Position(1, 3, 2), Position(1, 5, 4))
        assert outer.contains(inner)
        assert not inner.contains(outer)


@pytest.mark.unit
class TestTokenStream:
    """Test the lazy token stream."""

    def test_stream_is_restartable(self) -> None:
        """Test that iterating twice yields the same tokens."""
        stream = tokenize(r"\section{A} text")
        assert list(stream) == list(stream)

    def test_start_offset(self) -> None:
        """Test scanning from the middle of the source."""
        tokens = list(tokenize("abc def", start=4))
        assert tokens[0].text == "def"
        assert tokens[0].position == Position(1, 5, 4)

    def test_end_position(self) -> None:
        """Test the position just past the source."""
        assert tokenize("a\nb").end_position == Position(2, 2, 3)


@pytest.mark.unit
@pytest.mark.fuzzing
class TestLexerProperties:
    """Property-based tests for the lexer."""

    @given(st.text(max_size=200))
    def test_tokens_cover_source(self, source: str) -> None:
        """Test that token texts concatenate back to the source."""
        assert "".join(token.text for token in tokenize(source)) == source

    @given(st.text(max_size=200))
    def test_tokens_are_contiguous(self, source: str) -> None:
        """Test that each token starts where the previous one ended."""
        offset = 0
        for token in tokenize(source):
            assert token.position.offset == offset
            assert token.end.offset - token.position.offset == len(token.text)
            offset = token.end.offset
        assert offset == len(source)
