#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/unlatex/ast/transforms.py
r"""AST transformation and manipulation utilities.

This module provides visitors and helpers for querying and rewriting parsed
LaTeX trees: collecting nodes, cloning, filtering, and the two rewrites the
formatter and the tests need most often (dropping comments and dropping
source positions).

Examples
--------
Collect every macro name in a document:

    >>> from unlatex.ast import transforms
    >>> macros = transforms.extract_nodes(root, Macro)
    >>> [m.content for m in macros]
    ['section', 'emph']

Remove every inline math node:

    >>> cleaned = transforms.filter_nodes(root, lambda n: not isinstance(n, InlineMath))

"""

from __future__ import annotations

import copy
from typing import Callable, Iterator, Optional, Type

from unlatex.ast.nodes import Comment, Node, Root, Whitespace, get_node_children
from unlatex.ast.visitors import Action, EnterResult, Replace, TraversalVisitor, visit


class NodeCollector(TraversalVisitor):
    """Visitor that collects nodes matching a condition, in pre-order.

    Parameters
    ----------
    predicate : callable or None, default = None
        Function that takes a node and returns True to collect it

    """

    def __init__(self, predicate: Callable[[Node], bool] | None = None):
        """Initialize the collector with an optional predicate function."""
        self.predicate = predicate or (lambda n: True)
        self.collected: list[Node] = []

    def enter(self, node: Node) -> EnterResult:
        if self.predicate(node):
            self.collected.append(node)
        return Action.CONTINUE


class _FilterVisitor(TraversalVisitor):
    def __init__(self, predicate: Callable[[Node], bool]):
        self.predicate = predicate

    def enter(self, node: Node) -> EnterResult:
        if isinstance(node, Root) or self.predicate(node):
            return Action.CONTINUE
        return Action.REMOVE


class _CommentStripper(TraversalVisitor):
    def enter(self, node: Node) -> EnterResult:
        if not isinstance(node, Comment):
            return Action.CONTINUE
        # "a % note" still separates "a" from what follows
        if node.leading_whitespace:
            return Replace(Whitespace())
        return Action.REMOVE


class _PositionStripper(TraversalVisitor):
    def enter(self, node: Node) -> EnterResult:
        node.position = None
        return Action.CONTINUE


def iter_nodes(node: Node) -> Iterator[Node]:
    """Yield ``node`` and all of its descendants in pre-order.

    Arguments are yielded before content.
    """
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(get_node_children(current)))


def clone_node(node: Node) -> Node:
    """Create a deep copy of an AST node.

    Parameters
    ----------
    node : Node
        Node to clone

    Returns
    -------
    Node
        Deep copy of the node

    Examples
    --------
    >>> cloned = clone_node(root)
    >>> cloned is root
    False
    >>> cloned == root
    True

    """
    return copy.deepcopy(node)


def extract_nodes(root: Node, node_type: Optional[Type[Node]] = None) -> list[Node]:
    """Extract all nodes of a specific type from a tree.

    Parameters
    ----------
    root : Node
        Tree to search
    node_type : type or None, default = None
        Node type to extract (None for all nodes)

    Returns
    -------
    list of Node
        All matching nodes in document order

    """
    predicate = (lambda n: isinstance(n, node_type)) if node_type else (lambda n: True)
    return [node for node in iter_nodes(root) if predicate(node)]


def filter_nodes(root: Root, predicate: Callable[[Node], bool]) -> Root:
    r"""Filter nodes from a tree based on a condition.

    Parameters
    ----------
    root : Root
        Tree to filter; it is not modified
    predicate : callable
        Function that takes a node and returns True to keep it

    Returns
    -------
    Root
        New tree without the rejected nodes (and their descendants)

    Notes
    -----
    The Root node is always kept. Rejecting an Argument removes it from its
    macro, so printing the result drops the argument's braces too.

    Examples
    --------
    Remove every ``\label``:
        >>> filter_nodes(root, lambda n: not (isinstance(n, Macro) and n.content == "label"))

    """
    result = visit(clone_node(root), _FilterVisitor(predicate))
    assert isinstance(result, Root)
    return result


def strip_comments(root: Root) -> Root:
    """Return a copy of ``root`` without comments.

    A same-line comment that was separated from the preceding text by
    whitespace is replaced by a single Whitespace node.
    """
    result = visit(clone_node(root), _CommentStripper())
    assert isinstance(result, Root)
    return result


def strip_positions(root: Node) -> Node:
    """Return a copy of ``root`` with every ``position`` set to None.

    Useful for comparing trees parsed from differently laid-out sources.
    """
    return visit(clone_node(root), _PositionStripper())
