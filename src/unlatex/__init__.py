r"""unlatex - A LaTeX parser and pretty-printer.

unlatex reads LaTeX source into a syntax tree and prints it back in a
canonical layout: consistent indentation of environment bodies, paragraphs
filled to a configurable width, aligned tabular rows and normalized
sub/superscript braces. The same tree can be dumped as JSON for downstream
tooling.

Parsing never fails. Unbalanced braces, unterminated environments and unknown
macros are recovered from, so any string can be formatted.

Requirements
------------
- Python 3.10+
- Optional: ``rich`` for syntax-highlighted command-line output

Examples
--------
Format source:

    >>> from unlatex import format
    >>> format("$e^2$")
    '$e^{2}$'

Work with the syntax tree:

    >>> from unlatex import parse
    >>> from unlatex.ast import Macro, extract_nodes
    >>> root = parse(r"\section{Intro} See \cite{knuth}.")
    >>> [m.content for m in extract_nodes(root, Macro)]
    ['section', 'cite']

Dump the tree as JSON:

    >>> from unlatex import serialize
    >>> json_str = serialize(r"\emph{hi}", indent=2)

See Also
--------
unlatex.ast : Syntax tree nodes, visitors and serialization
unlatex.renderers : The pretty-printer

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "unlatex requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from unlatex.api import check_formatted, format, format_file, parse, serialize  # noqa: E402, A004
from unlatex.ast.nodes import Root  # noqa: E402
from unlatex.exceptions import (  # noqa: E402
    ConfigurationError,
    DependencyError,
    FileError,
    InvalidOptionsError,
    SerializationError,
    TransformError,
    UnlatexError,
    ValidationError,
)
from unlatex.options.latex import LatexFormatOptions, LatexParserOptions  # noqa: E402

__all__ = [
    "ConfigurationError",
    "DependencyError",
    "FileError",
    "InvalidOptionsError",
    "LatexFormatOptions",
    "LatexParserOptions",
    "Root",
    "SerializationError",
    "TransformError",
    "UnlatexError",
    "ValidationError",
    "__version__",
    "check_formatted",
    "format",
    "format_file",
    "parse",
    "serialize",
]
