#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Options for the LaTeX parser and formatter."""

from unlatex.options.base import BaseParserOptions, BaseRendererOptions, CloneFrozenMixin
from unlatex.options.latex import LatexFormatOptions, LatexParserOptions

__all__ = [
    "BaseParserOptions",
    "BaseRendererOptions",
    "CloneFrozenMixin",
    "LatexFormatOptions",
    "LatexParserOptions",
]
