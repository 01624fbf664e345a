#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/integration/test_format_document.py
"""Integration tests formatting complete documents.

These tests run the whole pipeline (lexer, parser, printer) on realistic
input and compare against known output.
"""

import pytest

from unlatex import check_formatted, format, parse, serialize
from unlatex.ast import Comment, VerbatimEnvironment, extract_nodes, json_to_ast, strip_positions

EXPECTED_SNIPPET = (
    "\\section*{Really Cool Math}\n"
    "Below you'll find some really cool math.\n"
    "\n"
    "Check it out!\n"
    "\\begin{enumerate}\n"
    "  \\item[(a)] Hi there\n"
    "  \\item $e^{2}$ is math mode!\n"
    "    \\[\n"
    "      \\begin{bmatrix}\n"
    "        12  & 3^{e} \\\\\n"
    "        \\pi & 0\n"
    "      \\end{bmatrix}\n"
    "    \\]\n"
    "\\end{enumerate}"
)

EXPECTED_DOCUMENT_BODY = r"""\begin{document}
\maketitle

\section{Introduction}
Let $f:\R\to\R$ be a function with $f(x)=x^{2}$. We study its behaviour near the
origin, where the quadratic term dominates every other contribution to the
expansion, and compare it with \emph{linear} maps.

% A comment on its own line
\begin{itemize}
  \item First point
  \item Second point, which is considerably longer than the first one and
    therefore needs to wrap
\end{itemize}

\begin{tabular}{lr}
  \hline
  Name  & Value \\
  alpha & 1     \\
  \hline
\end{tabular}

\begin{align}
  a & =b+c \\
  d & =e
\end{align}

\begin{verbatim}
   keep   this    spacing
\end{verbatim}

See \url{https://example.com/a_b%20c} and \verb|x  y|.
\end{document}
"""

EXPECTED_PREAMBLE = r"""\documentclass[11pt]{article}
\usepackage{amsmath} % math environments
\usepackage[margin=1in]{geometry}
\newcommand{\R}{\mathbb{R}}

\title{A Short Note}
\author{A. Author}

"""


@pytest.mark.integration
class TestSnippet:
    """Format a short mixed snippet."""

    def test_snippet_output(self, unformatted_snippet: str) -> None:
        """Test the exact layout of sections, items and nested math."""
        assert format(unformatted_snippet) == EXPECTED_SNIPPET

    def test_snippet_is_stable(self) -> None:
        """Test that the formatted snippet is already formatted."""
        assert check_formatted(EXPECTED_SNIPPET)


@pytest.mark.integration
class TestSampleDocument:
    """Format a complete article."""

    def test_full_document(self, sample_document: str) -> None:
        """Test the exact formatting of the whole document."""
        assert format(sample_document) == EXPECTED_PREAMBLE + EXPECTED_DOCUMENT_BODY

    def test_idempotent(self, sample_document: str) -> None:
        """Test that formatting the output again changes nothing."""
        once = format(sample_document)
        assert format(once) == once

    def test_document_only_keeps_preamble(self, sample_document: str) -> None:
        """Test that only the body is reformatted."""
        preamble = sample_document[: sample_document.index("\\begin{document}")]
        assert format(sample_document, document_only=True) == preamble + EXPECTED_DOCUMENT_BODY

    def test_narrow_width_keeps_meaning(self, sample_document: str) -> None:
        """Test that reflowing only changes whitespace outside verbatim content."""
        narrow = format(sample_document, print_width=30)
        assert strip_positions(parse(narrow)) == strip_positions(parse(format(sample_document)))
        assert "   keep   this    spacing" in narrow

    def test_tabs(self, sample_document: str) -> None:
        """Test tab indentation of nested bodies."""
        result = format(sample_document, use_tabs=True)
        assert "\n\t\\item First point\n" in result
        assert "\n\t\ttherefore needs to wrap\n" in result

    def test_comments_survive(self, sample_document: str) -> None:
        """Test that no comment is lost."""
        before = [c.content for c in extract_nodes(parse(sample_document), Comment)]
        after = [c.content for c in extract_nodes(parse(format(sample_document)), Comment)]
        assert before == after

    def test_verbatim_content_preserved(self, sample_document: str) -> None:
        """Test that verbatim bodies are byte-identical after formatting."""
        (before,) = extract_nodes(parse(sample_document), VerbatimEnvironment)
        (after,) = extract_nodes(parse(format(sample_document)), VerbatimEnvironment)
        assert before.content == after.content

    def test_json_dump_round_trip(self, sample_document: str) -> None:
        """Test that the JSON dump of a full document loads back."""
        assert json_to_ast(serialize(sample_document)) == parse(sample_document)
