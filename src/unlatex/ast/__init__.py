#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/unlatex/ast/__init__.py
"""Abstract syntax tree for LaTeX documents.

This package contains the node classes produced by the parser, the visitor
infrastructure used by the printer and by tree rewrites, tree utilities and
the JSON serializer.
"""

from unlatex.ast.nodes import (
    NODE_TYPES,
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
    Position,
    Root,
    Span,
    Text,
    Verb,
    VerbatimEnvironment,
    Whitespace,
    get_node_children,
    replace_node_children,
)
from unlatex.ast.serialization import ast_to_dict, ast_to_json, dict_to_ast, json_to_ast
from unlatex.ast.transforms import (
    NodeCollector,
    clone_node,
    extract_nodes,
    filter_nodes,
    iter_nodes,
    strip_comments,
    strip_positions,
)
from unlatex.ast.visitors import Action, NodeVisitor, Replace, TraversalVisitor, ValidationVisitor, visit

__all__ = [
    "Action",
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
    "NodeCollector",
    "NodeVisitor",
    "Parbreak",
    "Position",
    "Replace",
    "Root",
    "Span",
    "Text",
    "TraversalVisitor",
    "ValidationVisitor",
    "Verb",
    "VerbatimEnvironment",
    "Whitespace",
    "ast_to_dict",
    "ast_to_json",
    "clone_node",
    "dict_to_ast",
    "extract_nodes",
    "filter_nodes",
    "get_node_children",
    "iter_nodes",
    "json_to_ast",
    "replace_node_children",
    "strip_comments",
    "strip_positions",
    "visit",
]
