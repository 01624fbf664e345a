#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/unlatex/renderers/__init__.py
"""Printing parsed LaTeX back to text.

- :mod:`unlatex.renderers.doc`: layout document primitives and the
  width-aware line breaker
- :mod:`unlatex.renderers.latex`: the LaTeX pretty-printer built on them

Examples
--------
    >>> from unlatex.parsers.latex import parse_latex
    >>> from unlatex.renderers import LatexPrinter, PrintContext
    >>> printer = LatexPrinter(PrintContext(print_width=40))
    >>> printer.print(parse_latex(r"\\textbf{bold}  text"))
    '\\\\textbf{bold} text'

"""

from unlatex.renderers.doc import DocPrinter, print_doc, print_flat
from unlatex.renderers.latex import LatexPrinter, PrintContext, print_ast

__all__ = [
    "DocPrinter",
    "LatexPrinter",
    "PrintContext",
    "print_ast",
    "print_doc",
    "print_flat",
]
