#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/unlatex/ast/nodes.py
"""AST node classes for LaTeX documents.

This module defines the node hierarchy produced by the LaTeX parser. The tree
mirrors the source closely enough to be printed back: whitespace, paragraph
breaks and comments are nodes of their own, and every node records the source
span it was parsed from.

Node Hierarchy
--------------
All nodes inherit from the base Node class and support the visitor pattern.

Containers (own an ordered list of children):
    - Root, Group, Argument
    - Environment, MathEnvironment
    - InlineMath, DisplayMath
    - Macro (its children are Argument nodes)

Leaves:
    - Text, Whitespace, Parbreak, Comment
    - VerbatimEnvironment, Verb

The set of node classes is closed: visitors, the printer and the serializer
handle every class listed in :data:`NODE_TYPES`.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Any, Optional

from unlatex.constants import DEFAULT_ESCAPE_TOKEN
from unlatex.parsers.tokens import Position, Span

__all__ = [
    "Argument",
    "Comment",
    "DisplayMath",
    "Environment",
    "Group",
    "InlineMath",
    "Macro",
    "MathEnvironment",
    "NODE_TYPES",
    "Node",
    "Parbreak",
    "Position",
    "Root",
    "Span",
    "Text",
    "Verb",
    "VerbatimEnvironment",
    "Whitespace",
    "child_slots",
    "get_node_children",
    "replace_node_children",
]


class Node(ABC):
    """Base class for all AST nodes.

    Parameters
    ----------
    position : Span or None, default = None
        Source span the node was parsed from. Nodes built by hand or by a
        transformation may have no position.

    """

    position: Optional[Span]

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        pass


# ============================================================================
# Containers
# ============================================================================


@dataclass
class Root(Node):
    """Root node containing the whole parsed document.

    Parameters
    ----------
    content : list of Node, default = empty list
        Top-level nodes in source order
    position : Span or None, default = None
        Span of the complete source

    """

    content: list[Node] = field(default_factory=list)
    position: Optional[Span] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this root.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_root method

        Returns
        -------
        Any
            Result from visitor.visit_root(self)

        """
        return visitor.visit_root(self)


@dataclass
class Group(Node):
    """Brace-delimited group ``{...}`` that is not a macro argument.

    Parameters
    ----------
    content : list of Node, default = empty list
        Nodes inside the braces
    position : Span or None, default = None
        Span including both braces (or up to end of input when unclosed)

    """

    content: list[Node] = field(default_factory=list)
    position: Optional[Span] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this group."""
        return visitor.visit_group(self)


@dataclass
class Argument(Node):
    r"""Argument of a macro or environment.

    The marks record how the argument was written: ``{`` and ``}`` for
    mandatory arguments, ``[`` and ``]`` for optional ones, and empty marks for
    the star of ``\section*`` or a single-token script argument.

    Parameters
    ----------
    open_mark : str, default = "{"
        Opening delimiter
    close_mark : str, default = "}"
        Closing delimiter
    content : list of Node, default = empty list
        Nodes inside the delimiters
    position : Span or None, default = None
        Span including the delimiters

    """

    open_mark: str = "{"
    close_mark: str = "}"
    content: list[Node] = field(default_factory=list)
    position: Optional[Span] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this argument."""
        return visitor.visit_argument(self)

    @property
    def is_optional(self) -> bool:
        return self.open_mark == "["

    @property
    def is_star(self) -> bool:
        first = self.content[0] if len(self.content) == 1 else None
        return self.open_mark == "" and isinstance(first, Text) and first.content == "*"


@dataclass
class Macro(Node):
    r"""Macro invocation such as ``\section*[short]{Title}``.

    Parameters
    ----------
    content : str
        Macro name without the escape token (``section``, ``\\``, ``^``)
    args : list of Argument, default = empty list
        Arguments that were present in the source, in order
    escape_token : str, default = "\\"
        Text written before the name; empty for ``^`` and ``_`` in math
    position : Span or None, default = None
        Span from the escape token to the end of the last argument

    """

    content: str
    args: list[Argument] = field(default_factory=list)
    escape_token: str = DEFAULT_ESCAPE_TOKEN
    position: Optional[Span] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this macro."""
        return visitor.visit_macro(self)


@dataclass
class Environment(Node):
    r"""Environment ``\begin{env}...\end{env}``.

    Parameters
    ----------
    env : str
        Environment name
    args : list of Argument, default = empty list
        Arguments following ``\begin{env}``
    content : list of Node, default = empty list
        Body of the environment
    position : Span or None, default = None
        Span from ``\begin`` to the end of ``\end{env}`` (or end of input)

    """

    env: str
    args: list[Argument] = field(default_factory=list)
    content: list[Node] = field(default_factory=list)
    position: Optional[Span] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this environment."""
        return visitor.visit_environment(self)


@dataclass
class MathEnvironment(Node):
    """Math environment such as ``equation`` or ``align``; body is math mode.

    Parameters
    ----------
    env : str
        Environment name
    args : list of Argument, default = empty list
        Arguments following the begin marker
    content : list of Node, default = empty list
        Body, parsed in math mode
    position : Span or None, default = None
        Source span

    """

    env: str
    args: list[Argument] = field(default_factory=list)
    content: list[Node] = field(default_factory=list)
    position: Optional[Span] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this math environment."""
        return visitor.visit_math_environment(self)


@dataclass
class InlineMath(Node):
    r"""Inline math ``$...$`` or ``\(...\)``.

    Parameters
    ----------
    content : list of Node, default = empty list
        Math-mode nodes
    delimiter : str, default = "$"
        Opening delimiter, ``$`` or ``\(``
    position : Span or None, default = None
        Source span

    """

    content: list[Node] = field(default_factory=list)
    delimiter: str = "$"
    position: Optional[Span] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this inline math."""
        return visitor.visit_inline_math(self)


@dataclass
class DisplayMath(Node):
    r"""Display math ``$$...$$`` or ``\[...\]``.

    Parameters
    ----------
    content : list of Node, default = empty list
        Math-mode nodes
    delimiter : str, default = "$$"
        Opening delimiter, ``$$`` or ``\[``
    position : Span or None, default = None
        Source span

    """

    content: list[Node] = field(default_factory=list)
    delimiter: str = "$$"
    position: Optional[Span] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this display math."""
        return visitor.visit_display_math(self)


# ============================================================================
# Leaves
# ============================================================================


@dataclass
class Text(Node):
    """A run of ordinary characters without whitespace.

    Parameters
    ----------
    content : str
        The characters
    position : Span or None, default = None
        Source span

    """

    content: str
    position: Optional[Span] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this text."""
        return visitor.visit_text(self)


@dataclass
class Whitespace(Node):
    """Whitespace that does not contain a blank line."""

    position: Optional[Span] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this whitespace."""
        return visitor.visit_whitespace(self)


@dataclass
class Parbreak(Node):
    """Paragraph break: whitespace spanning two or more line breaks."""

    position: Optional[Span] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this paragraph break."""
        return visitor.visit_parbreak(self)


@dataclass
class Comment(Node):
    """A ``%`` comment running to the end of the line.

    Parameters
    ----------
    content : str
        Comment text after the ``%``
    sameline : bool, default = False
        True if non-blank source precedes the ``%`` on its line
    leading_whitespace : bool, default = False
        True if whitespace separated the comment from what precedes it
    suffix_parbreak : bool, default = False
        True if a blank line follows the comment
    position : Span or None, default = None
        Span of the ``%`` and the comment text

    """

    content: str
    sameline: bool = False
    leading_whitespace: bool = False
    suffix_parbreak: bool = False
    position: Optional[Span] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this comment."""
        return visitor.visit_comment(self)


@dataclass
class VerbatimEnvironment(Node):
    """Environment whose body is kept as raw text (``verbatim``, ``lstlisting``).

    Parameters
    ----------
    env : str
        Environment name
    content : str, default = ""
        Raw body, byte-for-byte
    args : list of Argument, default = empty list
        Arguments following the begin marker
    position : Span or None, default = None
        Source span

    """

    env: str
    content: str = ""
    args: list[Argument] = field(default_factory=list)
    position: Optional[Span] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this verbatim environment."""
        return visitor.visit_verbatim_environment(self)


@dataclass
class Verb(Node):
    r"""Inline verbatim ``\verb|...|``.

    Parameters
    ----------
    content : str
        Raw text between the delimiters
    escape : str, default = "|"
        Delimiter character
    env : str, default = "verb"
        ``verb`` or ``verb*``
    position : Span or None, default = None
        Source span

    """

    content: str
    escape: str = "|"
    env: str = "verb"
    position: Optional[Span] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this verb."""
        return visitor.visit_verb(self)


NODE_TYPES: tuple[type[Node], ...] = (
    Root,
    Group,
    Argument,
    Macro,
    Environment,
    MathEnvironment,
    InlineMath,
    DisplayMath,
    Text,
    Whitespace,
    Parbreak,
    Comment,
    VerbatimEnvironment,
    Verb,
)

_CHILD_SLOTS: dict[type[Node], tuple[str, ...]] = {
    Root: ("content",),
    Group: ("content",),
    Argument: ("content",),
    Macro: ("args",),
    Environment: ("args", "content"),
    MathEnvironment: ("args", "content"),
    VerbatimEnvironment: ("args",),
    InlineMath: ("content",),
    DisplayMath: ("content",),
}


def child_slots(node: Node) -> tuple[str, ...]:
    """Return the names of the attributes holding child nodes, in visiting order.

    Arguments always come before the body.
    """
    return _CHILD_SLOTS.get(type(node), ())


def get_node_children(node: Node) -> list[Node]:
    """Get all child nodes from a node.

    Parameters
    ----------
    node : Node
        The node to get children from

    Returns
    -------
    list of Node
        Arguments followed by content (empty list for leaf nodes)

    Examples
    --------
    >>> env = Environment("center", content=[Text("Hi")])
    >>> get_node_children(env)
    [Text(content='Hi', position=None)]

    """
    children: list[Node] = []
    for slot in child_slots(node):
        children.extend(getattr(node, slot))
    return children


def replace_node_children(node: Node, new_children: list[Node]) -> Node:
    """Create a copy of a node with replaced children.

    For nodes with both arguments and a body (environments), leading
    :class:`Argument` children become the arguments and the rest the body.

    Parameters
    ----------
    node : Node
        The node to copy
    new_children : list of Node
        New children

    Returns
    -------
    Node
        New node with replaced children; leaf nodes are returned unchanged

    Raises
    ------
    ValueError
        If a macro receives children that are not Argument nodes

    """
    slots = child_slots(node)
    if not slots:
        return node

    if slots == ("args",):
        if not all(isinstance(child, Argument) for child in new_children):
            raise ValueError(f"{type(node).__name__} children must be Argument instances")
        return replace(node, args=list(new_children))  # type: ignore[type-var]

    if slots == ("args", "content"):
        split = 0
        while split < len(new_children) and isinstance(new_children[split], Argument):
            split += 1
        return replace(node, args=list(new_children[:split]), content=list(new_children[split:]))  # type: ignore[type-var]

    return replace(node, content=list(new_children))  # type: ignore[type-var]

