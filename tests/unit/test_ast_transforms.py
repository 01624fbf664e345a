#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for AST query and rewrite utilities."""
import pytest

from unlatex.ast import (
    Argument,
    Comment,
    Group,
    InlineMath,
    Macro,
    NodeCollector,
    Root,
    Text,
    Whitespace,
    clone_node,
    extract_nodes,
    filter_nodes,
    iter_nodes,
    strip_comments,
    strip_positions,
    visit,
)
from unlatex.parsers.latex import parse_latex


@pytest.mark.unit
class TestQueries:
    """Test collecting and iterating nodes."""

    def test_iter_nodes_pre_order(self) -> None:
        """Test that iteration yields parents before children, arguments first."""
        root = Root([Macro("emph", [Argument("{", "}", [Text("a")])]), Text("b")])
        assert [type(node).__name__ for node in iter_nodes(root)] == ["Root", "Macro", "Argument", "Text", "Text"]

    def test_extract_nodes_by_type(self) -> None:
        """Test extracting every macro of a document."""
        root = parse_latex(r"\section{A} \emph{\textbf{b}}")
        assert [macro.content for macro in extract_nodes(root, Macro)] == ["section", "emph", "textbf"]

    def test_extract_all_nodes(self) -> None:
        """Test that no type means every node."""
        root = Root([Text("a")])
        assert extract_nodes(root) == [root, Text("a")]

    def test_node_collector(self) -> None:
        """Test collecting with a predicate."""
        collector = NodeCollector(lambda node: isinstance(node, InlineMath))
        visit(parse_latex("$a$ and $b$"), collector)
        assert len(collector.collected) == 2


@pytest.mark.unit
class TestRewrites:
    """Test tree rewrites."""

    def test_clone_is_deep(self) -> None:
        """Test that clones share no nodes with the original."""
        root = parse_latex(r"\emph{a}")
        cloned = clone_node(root)
        assert cloned == root
        assert cloned.content[0] is not root.content[0]

    def test_filter_nodes(self) -> None:
        """Test removing nodes by predicate without touching the input."""
        root = strip_positions(parse_latex(r"a \label{x} b"))
        filtered = filter_nodes(root, lambda n: not (isinstance(n, Macro) and n.content == "label"))
        assert filtered.content == [Text("a"), Whitespace(), Whitespace(), Text("b")]
        assert len(root.content) == 5

    def test_filter_keeps_root(self) -> None:
        """Test that the root survives a predicate rejecting everything."""
        assert filter_nodes(Root([Text("a")]), lambda n: False) == Root()

    def test_strip_comments(self) -> None:
        """Test that comments are dropped and separating whitespace kept."""
        root = strip_positions(parse_latex("a % note\nb\n% own line\nc"))
        stripped = strip_comments(root)
        assert not any(isinstance(node, Comment) for node in iter_nodes(stripped))
        assert stripped.content[:3] == [Text("a"), Whitespace(), Text("b")]

    def test_strip_positions(self) -> None:
        """Test that every position is cleared."""
        stripped = strip_positions(parse_latex(r"{\emph{a}}"))
        assert all(node.position is None for node in iter_nodes(stripped))
        assert stripped == Root([Group([Macro("emph", [Argument("{", "}", [Text("a")])])])])
