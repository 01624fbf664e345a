#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/unlatex/parsers/macros.py
r"""Macro and environment signature tables.

The parser has no built-in knowledge of individual LaTeX commands. How many
arguments ``\section`` takes, that ``\url`` keeps its argument verbatim, or
that ``align`` is a math environment, all comes from a :class:`MacroTable`
handed to the parser. The table is an immutable value: build a new one with
:meth:`MacroTable.extend` to teach the parser about custom commands.

Argument specifiers use a subset of the ``xparse`` letters:

=====  ==========================================================
``s``  optional star immediately after the name (``\section*``)
``o``  optional argument in square brackets
``m``  mandatory argument in braces
``v``  mandatory argument in braces whose content is kept verbatim
=====  ==========================================================

Examples
--------
>>> table = DEFAULT_MACRO_TABLE.extend(macros={"todo": MacroSignature("o m")})
>>> table.macro("todo").num_args
2
>>> sorted(table.macro("todo").optional_arg_positions)
[0]

"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from unlatex.exceptions import ConfigurationError

_SPEC_LETTERS = frozenset("somv")


class ArgumentParsingMode(Enum):
    """How the contents of an argument or environment body are parsed."""

    STANDARD = "standard"  # inherit the surrounding text/math mode
    VERBATIM = "verbatim"  # raw text, no tokenization
    MATH = "math"  # force math mode
    TEXT = "text"  # force text mode, e.g. \text{...} inside math


@dataclass(frozen=True)
class ArgumentSpec:
    """Argument layout shared by macro and environment signatures.

    Parameters
    ----------
    spec : str, default ""
        Space-separated xparse-style argument letters, e.g. ``"s o m"``

    """

    spec: str = ""

    def __post_init__(self) -> None:
        """Validate the argument specifier.

        Raises
        ------
        ConfigurationError
            If the specifier contains an unsupported letter.

        """
        for letter in self.spec.split():
            if letter not in _SPEC_LETTERS:
                raise ConfigurationError(
                    f"Unsupported argument specifier {letter!r} in {self.spec!r}",
                    parameter_name="spec",
                    parameter_value=self.spec,
                )

    @property
    def arguments(self) -> tuple[str, ...]:
        """The argument letters in order, including the star."""
        return tuple(self.spec.split())

    @property
    def num_args(self) -> int:
        """Number of bracketed or braced arguments (the star is not counted)."""
        return sum(1 for letter in self.arguments if letter != "s")

    @property
    def optional_arg_positions(self) -> frozenset[int]:
        """Indices, among the non-star arguments, of the optional ones."""
        letters = [letter for letter in self.arguments if letter != "s"]
        return frozenset(i for i, letter in enumerate(letters) if letter == "o")

    @property
    def starred(self) -> bool:
        return "s" in self.arguments


@dataclass(frozen=True)
class MacroSignature(ArgumentSpec):
    r"""Signature of a macro.

    Parameters
    ----------
    spec : str, default ""
        Argument specifier
    parsing_mode : ArgumentParsingMode, default STANDARD
        How ``m``/``o`` argument contents are parsed
    break_around : bool, default False
        The macro sits on its own line (``\section``, ``\usepackage``)
    break_after : bool, default False
        The line ends after the macro (``\\``)
    hanging_indent : bool, default False
        The macro starts a block whose continuation lines are indented (``\item``)

    """

    parsing_mode: ArgumentParsingMode = ArgumentParsingMode.STANDARD
    break_around: bool = False
    break_after: bool = False
    hanging_indent: bool = False


@dataclass(frozen=True)
class EnvironmentSignature(ArgumentSpec):
    """Signature of an environment.

    Parameters
    ----------
    spec : str, default ""
        Specifier for the arguments following ``\\begin{name}``
    content_mode : ArgumentParsingMode, default STANDARD
        MATH for math environments, VERBATIM for raw environments
    align_content : bool, default False
        Align cells on ``&`` and rows on ``\\\\`` when printing
    indent_content : bool, default True
        Indent the body one level when printing

    """

    content_mode: ArgumentParsingMode = ArgumentParsingMode.STANDARD
    align_content: bool = False
    indent_content: bool = True


NO_ARGUMENTS = MacroSignature()
DEFAULT_ENVIRONMENT = EnvironmentSignature()


@dataclass(frozen=True)
class MacroTable:
    """Immutable lookup of macro and environment signatures.

    Parameters
    ----------
    macros : Mapping[str, MacroSignature]
        Signatures keyed by macro name (without backslash)
    environments : Mapping[str, EnvironmentSignature]
        Signatures keyed by environment name

    """

    macros: Mapping[str, MacroSignature] = field(default_factory=dict)
    environments: Mapping[str, EnvironmentSignature] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Freeze the mappings so a table can be shared safely."""
        object.__setattr__(self, "macros", MappingProxyType(dict(self.macros)))
        object.__setattr__(self, "environments", MappingProxyType(dict(self.environments)))

    def macro(self, name: str) -> Optional[MacroSignature]:
        """Return the signature of ``name`` or None when the macro is unknown."""
        return self.macros.get(name)

    def environment(self, name: str) -> Optional[EnvironmentSignature]:
        """Return the signature of environment ``name`` or None when unknown."""
        return self.environments.get(name)

    def extend(
        self,
        macros: Mapping[str, MacroSignature] | None = None,
        environments: Mapping[str, EnvironmentSignature] | None = None,
    ) -> MacroTable:
        """Return a new table with additional or overridden entries.

        Parameters
        ----------
        macros : Mapping[str, MacroSignature], optional
            Macro signatures to add
        environments : Mapping[str, EnvironmentSignature], optional
            Environment signatures to add

        Returns
        -------
        MacroTable
            New table; this table is left unchanged

        """
        return MacroTable(
            macros={**self.macros, **(macros or {})},
            environments={**self.environments, **(environments or {})},
        )

    def __hash__(self) -> int:
        return hash((tuple(sorted(self.macros)), tuple(sorted(self.environments))))


def _macros(spec: str, names: str, **kwargs: object) -> dict[str, MacroSignature]:
    signature = MacroSignature(spec, **kwargs)  # type: ignore[arg-type]
    return {name: signature for name in names.split()}


def _environments(spec: str, names: str, **kwargs: object) -> dict[str, EnvironmentSignature]:
    signature = EnvironmentSignature(spec, **kwargs)  # type: ignore[arg-type]
    return {name: signature for name in names.split()}


_MATH = ArgumentParsingMode.MATH
_TEXT = ArgumentParsingMode.TEXT
_VERBATIM = ArgumentParsingMode.VERBATIM

_DEFAULT_MACROS: dict[str, MacroSignature] = {
    # Document structure
    **_macros("s o m", "part chapter section subsection subsubsection paragraph subparagraph", break_around=True),
    **_macros("o m", "documentclass usepackage RequirePackage title author addbibresource", break_around=True),
    **_macros("m", "date input include includeonly bibliography bibliographystyle", break_around=True),
    **_macros("o", "printbibliography", break_around=True),
    **_macros(
        "",
        "maketitle tableofcontents listoffigures listoftables appendix clearpage cleardoublepage newpage "
        "frontmatter mainmatter backmatter",
        break_around=True,
    ),
    **_macros("s m o o m", "newcommand renewcommand providecommand", break_around=True),
    **_macros("s m o o m m", "newenvironment renewenvironment", break_around=True),
    **_macros("s m m", "DeclareMathOperator", break_around=True),
    **_macros("m o m o", "newtheorem", break_around=True),
    **_macros("m m", "setlength setcounter addtocounter", break_around=True),
    # Lists and line structure
    **_macros("o", "item", hanging_indent=True),
    **_macros("o m", "bibitem", hanging_indent=True),
    **_macros("s o", "\\", break_after=True),
    **_macros("", "newline hline toprule midrule bottomrule"),
    # Text formatting
    **_macros(
        "m",
        "emph textbf textit texttt textsc textsf textrm textup textsl textmd underline uppercase lowercase "
        "label ref eqref pageref nameref thanks phantom hphantom vphantom",
    ),
    **_macros("s m", "hspace vspace autoref cref Cref"),
    **_macros("o m", "footnote footnotetext caption hyperref color"),
    **_macros("o o m", "cite citep citet parencite textcite autocite"),
    **_macros("o m m", "textcolor colorbox"),
    **_macros("m m", "texorpdfstring"),
    **_macros("m m m", "multicolumn multirow"),
    **_macros("m", "cline"),
    **_macros("s o m", "includegraphics"),
    **_macros("m", "mbox text textnormal intertext", parsing_mode=_TEXT),
    **_macros("v", "url path"),
    **_macros("v m", "href"),
    # Math
    **_macros("m", "ensuremath", parsing_mode=_MATH),
    **_macros("m m", "frac dfrac tfrac cfrac binom dbinom tbinom stackrel overset underset"),
    **_macros("o m", "sqrt xrightarrow xleftarrow"),
    **_macros(
        "m",
        "mathrm mathbf mathit mathcal mathbb mathfrak mathsf mathtt boldsymbol bm overline "
        "overbrace underbrace hat bar vec tilde dot ddot widehat widetilde check breve acute grave "
        "substack boxed cancel",
    ),
    **_macros("s m", "operatorname"),
}

_DEFAULT_ENVIRONMENTS: dict[str, EnvironmentSignature] = {
    **_environments("", "document", indent_content=False),
    **_environments("o", "itemize enumerate description"),
    **_environments("m", "thebibliography"),
    **_environments("o", "figure figure* table table* theorem lemma proof definition corollary proposition remark example"),
    **_environments("", "center flushleft flushright quote quotation verse abstract"),
    **_environments("o o o m", "minipage"),
    **_environments("o m", "tabular array", align_content=True),
    **_environments("m o m", "tabular*", align_content=True),
    **_environments("m m", "tabularx", align_content=True),
    # Display math environments
    **_environments(
        "",
        "equation equation* gather gather* multline multline* displaymath math",
        content_mode=_MATH,
    ),
    **_environments(
        "",
        "align align* flalign flalign* eqnarray eqnarray*",
        content_mode=_MATH,
        align_content=True,
    ),
    **_environments("m", "alignat alignat*", content_mode=_MATH, align_content=True),
    # Environments used inside math
    **_environments(
        "",
        "matrix pmatrix bmatrix Bmatrix vmatrix Vmatrix smallmatrix cases aligned split",
        align_content=True,
    ),
    **_environments("", "gathered"),
    # Verbatim-like environments
    **_environments("", "verbatim verbatim* comment", content_mode=_VERBATIM),
    **_environments("o", "Verbatim lstlisting", content_mode=_VERBATIM),
    **_environments("o m", "minted", content_mode=_VERBATIM),
}

DEFAULT_MACRO_TABLE = MacroTable(macros=_DEFAULT_MACROS, environments=_DEFAULT_ENVIRONMENTS)
"""The signature table used when no custom table is configured."""
