#  Copyright (c) 2025 Tom Villani, Ph.D.

# unlatex/options/latex.py
"""Configuration options for LaTeX parsing and formatting."""

from __future__ import annotations

from dataclasses import dataclass, field

from unlatex.constants import (
    DEFAULT_DOCUMENT_ONLY,
    DEFAULT_PRINT_WIDTH,
    DEFAULT_TAB_WIDTH,
    DEFAULT_USE_TABS,
)
from unlatex.exceptions import ConfigurationError
from unlatex.options.base import BaseParserOptions, BaseRendererOptions
from unlatex.parsers.macros import DEFAULT_MACRO_TABLE, MacroTable


@dataclass(frozen=True)
class LatexParserOptions(BaseParserOptions):
    r"""Configuration options for LaTeX-to-AST parsing.

    Parameters
    ----------
    macro_table : MacroTable, default DEFAULT_MACRO_TABLE
        Signatures of known macros and environments. Extend the default table
        to teach the parser about custom commands such as ``\todo[inline]{...}``.
    record_degradations : bool, default True
        Whether the parser keeps a list of the recoveries it made on malformed
        input (unclosed groups, unknown macros, ...). Recoveries are logged at
        DEBUG level either way.

    """

    macro_table: MacroTable = field(
        default=DEFAULT_MACRO_TABLE,
        metadata={"help": "Macro and environment signature table", "exclude_from_cli": True},
    )
    record_degradations: bool = field(
        default=True,
        metadata={"help": "Record parser recoveries on malformed input", "exclude_from_cli": True},
    )

    def __post_init__(self) -> None:
        """Validate the parser options.

        Raises
        ------
        ConfigurationError
            If ``macro_table`` is not a MacroTable.

        """
        super().__post_init__()
        if not isinstance(self.macro_table, MacroTable):
            raise ConfigurationError(
                f"macro_table must be a MacroTable, got {type(self.macro_table).__name__}",
                parameter_name="macro_table",
                parameter_value=self.macro_table,
            )


@dataclass(frozen=True)
class LatexFormatOptions(BaseRendererOptions):
    r"""Configuration options for pretty-printing LaTeX source.

    Parameters
    ----------
    print_width : int, default 80
        Target maximum line width. Lines may exceed it only where a single
        unbreakable unit (a long word, inline math) is wider.
    use_tabs : bool, default False
        Indent with one tab per level instead of spaces.
    tab_width : int, default 2
        Spaces per indentation level; also the width a tab counts for.
    document_only : bool, default False
        Only reformat from ``\begin{document}`` onwards, leaving the preamble
        byte-for-byte unchanged. Formats everything when the marker is absent.

    Examples
    --------
    >>> options = LatexFormatOptions(print_width=100)
    >>> options.create_updated(use_tabs=True).use_tabs
    True

    """

    print_width: int = field(
        default=DEFAULT_PRINT_WIDTH,
        metadata={"help": "Target maximum line width", "cli_name": "print-width", "type": int},
    )
    use_tabs: bool = field(
        default=DEFAULT_USE_TABS,
        metadata={"help": "Indent with tabs instead of spaces", "cli_name": "use-tabs"},
    )
    tab_width: int = field(
        default=DEFAULT_TAB_WIDTH,
        metadata={"help": "Number of spaces per indentation level", "cli_name": "tab-width", "type": int},
    )
    document_only: bool = field(
        default=DEFAULT_DOCUMENT_ONLY,
        metadata={
            "help": "Only format the document body, starting at \\begin{document}",
            "cli_name": "document-only",
            "short": "-d",
        },
    )

    def __post_init__(self) -> None:
        """Validate the formatting options.

        Raises
        ------
        ConfigurationError
            If a width is not a positive integer or a flag is not a bool.

        """
        super().__post_init__()
        for name in ("print_width", "tab_width"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigurationError(
                    f"{name} must be a positive integer, got {value!r}",
                    parameter_name=name,
                    parameter_value=value,
                )
        for name in ("use_tabs", "document_only"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ConfigurationError(
                    f"{name} must be a bool, got {value!r}",
                    parameter_name=name,
                    parameter_value=value,
                )
