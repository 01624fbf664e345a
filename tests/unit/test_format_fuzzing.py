#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Property-based tests for the formatter.

Arbitrary text is used to check that formatting never fails; a small grammar
of well-formed snippets is used to check that formatting is a fixed point.
"""
import pytest
from hypothesis import given
from hypothesis import strategies as st

from unlatex import format, parse, serialize
from unlatex.ast import json_to_ast

PIECES = [
    "word",
    "longerword",
    "x,",
    r"\emph{word}",
    r"\textbf{two words}",
    "$x^2$",
    "$a_{i} + b$",
    "{group text}",
    r"\section{Title}",
    r"\label{sec:a}",
    "% note",
    "\\begin{center}\ntext here\n\\end{center}",
    r"\begin{itemize}\item one\item two words\end{itemize}",
    "\\begin{tabular}{ll}\na & b \\\\\ncc & d\n\\end{tabular}",
    "\\[ x = y \\]",
    r"\verb|a  b|",
    "$ $",
    "\\ ",
    "$",
    "\\begin{document}\ntext  here\n\\end{document}",
]

SEPARATORS = [" ", "  ", "\n", "\n\n", "\n\n\n"]

snippets = st.lists(
    st.tuples(st.sampled_from(PIECES), st.sampled_from(SEPARATORS)),
    min_size=1,
    max_size=12,
).map(lambda parts: "".join(piece + sep for piece, sep in parts))

words = st.lists(st.text(alphabet="abcdefg", min_size=1, max_size=8), min_size=1, max_size=40)


def _ends_in_control_space(line: str) -> bool:
    stripped = line[:-1]
    backslashes = len(stripped) - len(stripped.rstrip("\\"))
    return line.endswith(" ") and backslashes % 2 == 1


@pytest.mark.unit
@pytest.mark.fuzzing
class TestFormatProperties:
    """Properties that hold for every input."""

    @given(st.text(max_size=100))
    def test_format_never_raises(self, source: str) -> None:
        """Test that any text can be formatted."""
        assert isinstance(format(source), str)

    @given(st.text(alphabet=st.sampled_from("ab \n{}[]$\\%&^_"), max_size=60))
    def test_format_never_raises_on_special_characters(self, source: str) -> None:
        """Test inputs dense in unbalanced delimiters."""
        assert isinstance(format(source), str)

    @given(snippets, st.integers(min_value=1, max_value=80), st.booleans(), st.booleans())
    def test_idempotent(self, source: str, width: int, use_tabs: bool, document_only: bool) -> None:
        """Test that formatted output is a fixed point under any settings."""
        settings = {"print_width": width, "use_tabs": use_tabs, "document_only": document_only}
        once = format(source, **settings)
        assert format(once, **settings) == once

    @given(snippets)
    def test_no_trailing_blanks(self, source: str) -> None:
        """Test that no output line ends in spaces or tabs."""
        for line in format(source).split("\n"):
            assert line == line.rstrip(" \t") or _ends_in_control_space(line)

    @given(snippets)
    def test_no_double_blank_lines(self, source: str) -> None:
        """Test that paragraphs are separated by at most one blank line."""
        assert "\n\n\n" not in format(source)

    @given(words, st.integers(min_value=10, max_value=60))
    def test_lines_fit_width(self, word_list: list[str], width: int) -> None:
        """Test that filled words never exceed the print width."""
        result = format(" ".join(word_list), print_width=width)
        assert all(len(line) <= width for line in result.split("\n"))
        assert result.split() == word_list

    @given(st.text(max_size=100))
    def test_json_round_trip(self, source: str) -> None:
        """Test that every parse survives a JSON round trip."""
        assert json_to_ast(serialize(source)) == parse(source)
