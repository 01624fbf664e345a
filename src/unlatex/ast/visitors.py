#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/unlatex/ast/visitors.py
"""Visitor pattern implementation for AST traversal.

Two styles of traversal are provided:

- :class:`NodeVisitor`, a double-dispatch visitor with one ``visit_*`` method
  per node type. Each node's ``accept`` calls the matching method and the
  visitor decides itself whether and how to descend. The printer is a
  NodeVisitor.
- :func:`visit` with a :class:`TraversalVisitor`, a depth-first walk that
  calls ``enter`` before and ``exit`` after each node's children. ``enter``
  may return an :class:`Action` or a :class:`Replace` to skip, remove or
  replace nodes while walking.

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional, Union

from unlatex.ast.nodes import (
    Argument,
    Comment,
    DisplayMath,
    Environment,
    Group,
    InlineMath,
    Macro,
    MathEnvironment,
    Node,
    Parbreak,
    Root,
    Text,
    Verb,
    VerbatimEnvironment,
    Whitespace,
    child_slots,
    get_node_children,
)
from unlatex.exceptions import TransformError

logger = logging.getLogger(__name__)


class NodeVisitor(ABC):
    """Abstract base class for AST node visitors.

    Subclasses implement a visit_* method for each node type. All visit
    methods accept a node and return Any (typically None for side-effect
    visitors, or a built value for rendering visitors).

    Examples
    --------
    Visitor that collects macro names:

        >>> class MacroNames(NodeVisitor):
        ...     def __init__(self):
        ...         self.names = []
        ...
        ...     def visit_macro(self, node):
        ...         self.names.append(node.content)
        ...         self.generic_visit(node)
        ...
        >>> visitor = MacroNames()
        >>> root.accept(visitor)

    """

    @abstractmethod
    def visit_root(self, node: Root) -> Any:
        """Visit a Root node.

        Parameters
        ----------
        node : Root
            The root node to visit

        Returns
        -------
        Any
            Result of processing this node

        """
        pass

    @abstractmethod
    def visit_group(self, node: Group) -> Any:
        """Visit a Group node."""
        pass

    @abstractmethod
    def visit_argument(self, node: Argument) -> Any:
        """Visit an Argument node."""
        pass

    @abstractmethod
    def visit_macro(self, node: Macro) -> Any:
        """Visit a Macro node.

        Parameters
        ----------
        node : Macro
            The macro node to visit; its arguments are in ``node.args``

        Returns
        -------
        Any
            Result of processing this node

        """
        pass

    @abstractmethod
    def visit_environment(self, node: Environment) -> Any:
        """Visit an Environment node."""
        pass

    @abstractmethod
    def visit_math_environment(self, node: MathEnvironment) -> Any:
        """Visit a MathEnvironment node."""
        pass

    @abstractmethod
    def visit_verbatim_environment(self, node: VerbatimEnvironment) -> Any:
        """Visit a VerbatimEnvironment node."""
        pass

    @abstractmethod
    def visit_inline_math(self, node: InlineMath) -> Any:
        """Visit an InlineMath node."""
        pass

    @abstractmethod
    def visit_display_math(self, node: DisplayMath) -> Any:
        """Visit a DisplayMath node."""
        pass

    @abstractmethod
    def visit_text(self, node: Text) -> Any:
        """Visit a Text node."""
        pass

    @abstractmethod
    def visit_whitespace(self, node: Whitespace) -> Any:
        """Visit a Whitespace node."""
        pass

    @abstractmethod
    def visit_parbreak(self, node: Parbreak) -> Any:
        """Visit a Parbreak node."""
        pass

    @abstractmethod
    def visit_comment(self, node: Comment) -> Any:
        """Visit a Comment node."""
        pass

    @abstractmethod
    def visit_verb(self, node: Verb) -> Any:
        """Visit a Verb node."""
        pass

    def generic_visit(self, node: Node) -> Any:
        """Visit every child of ``node`` in order.

        Parameters
        ----------
        node : Node
            The node whose children to visit

        Returns
        -------
        Any
            Always None

        """
        for child in get_node_children(node):
            child.accept(self)
        return None


class ValidationVisitor(NodeVisitor):
    """Visitor that checks the structural invariants of a tree.

    The checks are:

    - every slot in ``Macro.args`` and ``Environment.args`` holds an Argument
    - every descendant's position lies inside its parent's position
    - no node appears twice in the tree

    Parameters
    ----------
    strict : bool, default = True
        Raise on the first problem instead of collecting it in ``errors``

    Examples
    --------
        >>> validator = ValidationVisitor(strict=False)
        >>> root.accept(validator)
        >>> validator.errors
        []

    """

    def __init__(self, strict: bool = True):
        self.strict = strict
        self.errors: list[str] = []
        self._seen: set[int] = set()

    def _error(self, message: str) -> None:
        if self.strict:
            raise ValueError(message)
        self.errors.append(message)

    def _check(self, node: Node) -> None:
        if id(node) in self._seen:
            self._error(f"{type(node).__name__} node appears more than once in the tree")
            return
        self._seen.add(id(node))

        args = getattr(node, "args", None)
        if args is not None:
            for arg in args:
                if not isinstance(arg, Argument):
                    self._error(f"{type(node).__name__} argument slot holds {type(arg).__name__}")

        for child in get_node_children(node):
            if node.position is not None and child.position is not None and not node.position.contains(child.position):
                self._error(
                    f"{type(child).__name__} at offset {child.position.start.offset} "
                    f"lies outside its parent {type(node).__name__}"
                )
            child.accept(self)

    def visit_root(self, node: Root) -> None:
        self._check(node)

    def visit_group(self, node: Group) -> None:
        self._check(node)

    def visit_argument(self, node: Argument) -> None:
        self._check(node)

    def visit_macro(self, node: Macro) -> None:
        if not node.content:
            self._error("Macro has an empty name")
        self._check(node)

    def visit_environment(self, node: Environment) -> None:
        self._check(node)

    def visit_math_environment(self, node: MathEnvironment) -> None:
        self._check(node)

    def visit_verbatim_environment(self, node: VerbatimEnvironment) -> None:
        self._check(node)

    def visit_inline_math(self, node: InlineMath) -> None:
        self._check(node)

    def visit_display_math(self, node: DisplayMath) -> None:
        self._check(node)

    def visit_text(self, node: Text) -> None:
        self._check(node)

    def visit_whitespace(self, node: Whitespace) -> None:
        self._check(node)

    def visit_parbreak(self, node: Parbreak) -> None:
        self._check(node)

    def visit_comment(self, node: Comment) -> None:
        self._check(node)

    def visit_verb(self, node: Verb) -> None:
        self._check(node)


# ============================================================================
# Enter/exit traversal
# ============================================================================


class Action(Enum):
    """Instruction returned by :meth:`TraversalVisitor.enter`."""

    CONTINUE = "continue"
    SKIP_CHILDREN = "skip_children"
    REMOVE = "remove"


class Replace:
    """Replace the entered node with zero or more nodes.

    Parameters
    ----------
    *nodes : Node
        Replacement nodes, spliced into the parent in order

    """

    __slots__ = ("nodes",)

    def __init__(self, *nodes: Node):
        self.nodes: tuple[Node, ...] = nodes

    def __repr__(self) -> str:
        return f"Replace({', '.join(type(n).__name__ for n in self.nodes)})"


EnterResult = Optional[Union[Action, Replace]]


class TraversalVisitor:
    """Base class for visitors driven by :func:`visit`.

    Override ``enter`` and/or ``exit``. Returning None from ``enter`` is the
    same as returning ``Action.CONTINUE``.
    """

    def enter(self, node: Node) -> EnterResult:
        return Action.CONTINUE

    def exit(self, node: Node) -> None:
        return None


def visit(root: Node, visitor: TraversalVisitor) -> Node:
    """Walk a tree depth-first, applying the visitor's actions.

    ``enter`` runs before a node's children (arguments before content, left
    to right) and ``exit`` after them. Nodes removed with ``Action.REMOVE``
    get no ``exit`` call. Replacement nodes are not entered, but their
    children are walked and ``exit`` is called on each of them.

    Parameters
    ----------
    root : Node
        Tree to walk; it is modified in place
    visitor : TraversalVisitor
        Visitor supplying ``enter`` and ``exit``

    Returns
    -------
    Node
        The root, or its single replacement

    Raises
    ------
    TransformError
        If the root is removed or replaced by anything other than one node, or
        if a non-Argument node is placed in an argument slot

    """
    result = _walk(root, visitor)
    if len(result) != 1:
        raise TransformError(
            f"The root must be replaced by exactly one node, got {len(result)}",
            transform_name=type(visitor).__name__,
        )
    return result[0]


def _walk(node: Node, visitor: TraversalVisitor) -> list[Node]:
    outcome = visitor.enter(node)

    if outcome is None or outcome is Action.CONTINUE:
        _walk_children(node, visitor)
        visitor.exit(node)
        return [node]

    if outcome is Action.SKIP_CHILDREN:
        visitor.exit(node)
        return [node]

    if outcome is Action.REMOVE:
        logger.debug("Removed %s", type(node).__name__)
        return []

    if isinstance(outcome, Replace):
        for replacement in outcome.nodes:
            _walk_children(replacement, visitor)
            visitor.exit(replacement)
        return list(outcome.nodes)

    raise TransformError(
        f"enter() returned unsupported value {outcome!r}",
        transform_name=type(visitor).__name__,
    )


def _walk_children(node: Node, visitor: TraversalVisitor) -> None:
    for slot in child_slots(node):
        rebuilt: list[Node] = []
        for child in tuple(getattr(node, slot)):
            rebuilt.extend(_walk(child, visitor))
        if slot == "args":
            for arg in rebuilt:
                if not isinstance(arg, Argument):
                    raise TransformError(
                        f"Cannot place {type(arg).__name__} in the arguments of {type(node).__name__}",
                        transform_name=type(visitor).__name__,
                    )
        setattr(node, slot, rebuilt)
