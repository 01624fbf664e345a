#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/unlatex/renderers/latex.py
r"""LaTeX pretty-printer.

This module provides the :class:`LatexPrinter`, a visitor that turns a parsed
tree back into LaTeX source. It builds a layout document
(:mod:`unlatex.renderers.doc`) and lets the width-aware line breaker decide
where lines end.

Layout rules:

- bodies are split into paragraphs at blank lines; paragraphs are separated
  by exactly one blank line
- inside a paragraph, words are filled up to the print width; breaks happen
  only at whitespace between words
- environments, display math, sectioning-like macros and comments on their
  own line are blocks on lines of their own
- environment bodies are indented one level (except ``document``); ``\item``
  bodies hang one level deeper than the ``\item``
- rows of tabular and alignment environments are aligned on ``&``
- inline math and a macro's first mandatory argument are never broken

The result is a fixed point: printing the parse of printed output gives the
same text again.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Union

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
)
from unlatex.ast.visitors import NodeVisitor
from unlatex.constants import (
    DEFAULT_ESCAPE_TOKEN,
    DEFAULT_PRINT_WIDTH,
    DEFAULT_TAB_WIDTH,
    DEFAULT_USE_TABS,
    DOCUMENT_BEGIN_MARKER,
    ESCAPE_CHAR,
    MAX_PRINT_DEPTH,
)
from unlatex.exceptions import ConfigurationError, InvalidOptionsError
from unlatex.options.latex import LatexFormatOptions
from unlatex.parsers.macros import DEFAULT_ENVIRONMENT, DEFAULT_MACRO_TABLE, MacroSignature, MacroTable
from unlatex.renderers.doc import HARDLINE, LINE, Doc, Verbatim, fill, group, indent, join, print_doc, print_flat

logger = logging.getLogger(__name__)

_MATH_CLOSERS = {"$": "$", "\\(": "\\)", "$$": "$$", "\\[": "\\]"}

# Table rules printed on lines of their own inside aligned environments
_RULE_MACROS = frozenset({"hline", "toprule", "midrule", "bottomrule", "cline"})

_BLANK = (Whitespace, Parbreak)


@dataclass(frozen=True)
class PrintContext:
    """Configuration for a single print call.

    Parameters
    ----------
    print_width : int, default 80
        Target maximum line width
    use_tabs : bool, default False
        Indent with tabs
    tab_width : int, default 2
        Spaces per indentation level
    range_start : int, default 0
        Source offset where reformatting starts
    range_end : int or None, default None
        Source offset where reformatting ends; None means end of source

    Raises
    ------
    ConfigurationError
        If a width is not positive or the range is inverted

    """

    print_width: int = DEFAULT_PRINT_WIDTH
    use_tabs: bool = DEFAULT_USE_TABS
    tab_width: int = DEFAULT_TAB_WIDTH
    range_start: int = 0
    range_end: Optional[int] = None

    def __post_init__(self) -> None:
        for name in ("print_width", "tab_width"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigurationError(
                    f"{name} must be a positive integer, got {value!r}", parameter_name=name, parameter_value=value
                )
        if not isinstance(self.use_tabs, bool):
            raise ConfigurationError(
                f"use_tabs must be a bool, got {self.use_tabs!r}", parameter_name="use_tabs", parameter_value=self.use_tabs
            )
        if self.range_start < 0:
            raise ConfigurationError(
                f"range_start must not be negative, got {self.range_start}",
                parameter_name="range_start",
                parameter_value=self.range_start,
            )
        if self.range_end is not None and self.range_end < self.range_start:
            raise ConfigurationError(
                f"range_end ({self.range_end}) is before range_start ({self.range_start})",
                parameter_name="range_end",
                parameter_value=self.range_end,
            )

    @classmethod
    def from_options(cls, options: LatexFormatOptions, source: str) -> PrintContext:
        r"""Build the context for formatting ``source`` with ``options``.

        With ``document_only`` the range starts at ``\begin{document}``; when
        the marker is absent the whole source is formatted.
        """
        range_start = 0
        if options.document_only:
            marker = source.find(DOCUMENT_BEGIN_MARKER)
            if marker == -1:
                logger.debug("No %s in source; formatting the whole document", DOCUMENT_BEGIN_MARKER)
            else:
                range_start = marker
        return cls(
            print_width=options.print_width,
            use_tabs=options.use_tabs,
            tab_width=options.tab_width,
            range_start=range_start,
            range_end=len(source),
        )


def _strip_blank(nodes: Sequence[Node]) -> list[Node]:
    start, end = 0, len(nodes)
    while start < end and isinstance(nodes[start], _BLANK):
        start += 1
    while end > start and isinstance(nodes[end - 1], _BLANK):
        end -= 1
    return list(nodes[start:end])


def _ends_with_comment(nodes: Sequence[Node]) -> bool:
    for node in reversed(nodes):
        if not isinstance(node, _BLANK):
            return isinstance(node, Comment)
    return False


def _comment(node: Comment) -> str:
    return "%" + node.content.rstrip()


class LatexPrinter(NodeVisitor):
    r"""Print a LaTeX AST as formatted source.

    Parameters
    ----------
    context : PrintContext or None, default = None
        Width, indentation and range settings
    macro_table : MacroTable, default DEFAULT_MACRO_TABLE
        Signatures supplying the layout hints (``break_around``,
        ``hanging_indent``, ``align_content``...)

    Raises
    ------
    InvalidOptionsError
        If ``context`` is not a PrintContext instance

    Examples
    --------
    >>> from unlatex.parsers.latex import parse_latex
    >>> LatexPrinter().print(parse_latex("$e^2$"))
    '$e^{2}$'

    """

    def __init__(self, context: PrintContext | None = None, macro_table: MacroTable = DEFAULT_MACRO_TABLE):
        if context is not None and not isinstance(context, PrintContext):
            raise InvalidOptionsError(
                component_name="LatexPrinter",
                expected_type=PrintContext,
                received_type=type(context),
            )
        self.context = context or PrintContext()
        self.macro_table = macro_table
        self._flat = 0
        self._depth = 0
        self._source: Optional[str] = None

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def print(self, root: Root, source: Optional[str] = None) -> str:
        """Format a parsed document.

        Parameters
        ----------
        root : Root
            Parsed document
        source : str or None, default = None
            The text ``root`` was parsed from. Required for partial-range
            printing and for preserving the final newline.

        Returns
        -------
        str
            Formatted text

        Raises
        ------
        ConfigurationError
            If the context's range lies outside ``source``

        """
        context = self.context
        self._source = source
        if source is not None:
            range_end = len(source) if context.range_end is None else context.range_end
            if range_end > len(source) or context.range_start > len(source):
                raise ConfigurationError(
                    f"Print range {context.range_start}-{range_end} lies outside the source ({len(source)} characters)",
                    parameter_name="range_end",
                    parameter_value=range_end,
                )
            if context.range_start > 0 or range_end < len(source):
                return self._print_range(root, source, context.range_start, range_end)

        text = self._layout(root.accept(self))
        if source is not None and source.endswith("\n"):
            text += "\n"
        return text

    def _layout(self, doc: Doc) -> str:
        context = self.context
        return print_doc(doc, context.print_width, context.use_tabs, context.tab_width)

    def _print_range(self, root: Root, source: str, start: int, end: int) -> str:
        selected = _strip_blank(
            [
                node
                for node in root.content
                if node.position is not None and start <= node.position.start.offset and node.position.end.offset <= end
            ]
        )
        if not selected:
            logger.debug("No complete top-level node between offsets %d and %d", start, end)
            return source

        first = selected[0].position.start.offset  # type: ignore[union-attr]
        last = selected[-1].position.end.offset  # type: ignore[union-attr]
        logger.debug("Reformatting offsets %d-%d; keeping the rest verbatim", first, last)
        return source[:first] + self._layout(self._body(selected)) + source[last:]

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def _signature(self, node: Node) -> Optional[MacroSignature]:
        if isinstance(node, Macro) and node.escape_token == DEFAULT_ESCAPE_TOKEN:
            return self.macro_table.macro(node.content)
        return None

    def _is_block(self, node: Node) -> bool:
        if isinstance(node, (Environment, MathEnvironment, VerbatimEnvironment, DisplayMath)):
            return True
        if isinstance(node, Comment):
            return not node.sameline
        signature = self._signature(node)
        return signature is not None and signature.break_around

    def _is_hanging(self, node: Node) -> bool:
        signature = self._signature(node)
        return signature is not None and signature.hanging_indent

    def _breaks_after(self, node: Node) -> bool:
        signature = self._signature(node)
        return signature is not None and signature.break_after

    # ------------------------------------------------------------------
    # Bodies, paragraphs and words
    # ------------------------------------------------------------------

    def _body(self, nodes: Sequence[Node], edges: bool = False, closed: bool = False) -> Doc:
        """Lay out a sequence of siblings.

        Bodies nested more than ``MAX_PRINT_DEPTH`` levels deep are copied
        from the source text unchanged when it is available.

        Parameters
        ----------
        nodes : sequence of Node
            The siblings
        edges : bool, default False
            Keep a single space where the sequence starts or ends with
            whitespace (group and argument contents)
        closed : bool, default False
            Something follows on the same line, so a trailing comment needs a
            line break before it

        """
        if self._depth >= MAX_PRINT_DEPTH:
            raw = self._raw_body(nodes)
            if raw is not None:
                return raw
        self._depth += 1
        try:
            return self._siblings(nodes, edges, closed)
        finally:
            self._depth -= 1

    def _raw_body(self, nodes: Sequence[Node]) -> Optional[Doc]:
        if self._source is None or not nodes:
            return None
        first, last = nodes[0].position, nodes[-1].position
        if first is None or last is None:
            return None
        logger.debug("Nesting deeper than %d levels at line %d; keeping the source text", MAX_PRINT_DEPTH, first.start.line)
        raw = Verbatim(self._source[first.start.offset : last.end.offset])
        # A trailing comment's span stops before the line break it swallowed
        return [raw, HARDLINE] if isinstance(nodes[-1], Comment) else raw

    def _siblings(self, nodes: Sequence[Node], edges: bool, closed: bool) -> Doc:
        lead = trail = False
        if edges and nodes:
            first = nodes[0]
            lead = isinstance(first, _BLANK) or (
                isinstance(first, Comment) and first.sameline and first.leading_whitespace
            )
            trail = isinstance(nodes[-1], _BLANK)

        paragraphs: list[list[Node]] = [[]]
        for node in nodes:
            if isinstance(node, Parbreak):
                if paragraphs[-1]:
                    paragraphs.append([])
            else:
                paragraphs[-1].append(node)

        docs = [doc for doc in (self._paragraph(p) for p in paragraphs) if doc is not None]
        if not docs:
            return " " if lead or trail else ""

        result: list = [" " if lead else "", join([HARDLINE, HARDLINE], docs)]
        if closed and _ends_with_comment(nodes):
            result.append(HARDLINE)
        elif trail:
            result.append(" ")
        return result

    def _paragraph(self, nodes: list[Node]) -> Optional[Doc]:
        lines: list[Doc] = []
        item: Optional[Macro] = None
        item_lines: list[Doc] = []
        run: list[Node] = []
        last_is_block = False

        def target() -> list[Doc]:
            return item_lines if item is not None else lines

        def flush_run() -> None:
            nonlocal last_is_block
            words = _strip_blank(run)
            run.clear()
            if words:
                target().append(self._words(words))
                last_is_block = False

        def close_item() -> None:
            nonlocal item
            if item is None:
                return
            head = item.accept(self)
            if item_lines:
                lines.append([head, " ", indent(join(HARDLINE, item_lines))])
            else:
                lines.append(head)
            item = None
            item_lines.clear()

        for node in nodes:
            if self._is_hanging(node):
                flush_run()
                close_item()
                item = node  # type: ignore[assignment]
                last_is_block = False
            elif self._is_block(node):
                flush_run()
                target().append(node.accept(self))
                last_is_block = True
            elif isinstance(node, Comment) and last_is_block and not _strip_blank(run):
                # A comment after \end{...} or \section{...} stays on that line
                run.clear()
                current = target()
                current[-1] = [current[-1], " " if node.leading_whitespace else "", _comment(node)]
            else:
                run.append(node)

        flush_run()
        close_item()
        if not lines:
            return None
        return join(HARDLINE, lines)

    def _words(self, nodes: list[Node]) -> Doc:
        """Fill words separated by whitespace; comments and ``\\\\`` end the line."""
        space: Doc = " " if self._flat else LINE
        parts: list[Doc] = []
        current: list[Doc] = []
        separator: Optional[Doc] = None

        def end_word() -> None:
            nonlocal separator
            if current:
                if parts:
                    parts.append(separator if separator is not None else space)
                parts.append(list(current))
                current.clear()
                separator = None

        for node in nodes:
            if isinstance(node, _BLANK):
                end_word()
                if separator is None:
                    separator = space
                continue

            if isinstance(node, Comment):
                if current:
                    current.extend((" " if node.leading_whitespace else "", _comment(node)))
                    end_word()
                elif parts:
                    parts[-1] = [parts[-1], " " if node.leading_whitespace else "", _comment(node)]
                else:
                    current.append(_comment(node))
                    end_word()
                separator = HARDLINE
                continue

            current.append(node.accept(self))
            if self._breaks_after(node):
                end_word()
                separator = HARDLINE

        end_word()
        return fill(parts)

    # ------------------------------------------------------------------
    # Aligned environments
    # ------------------------------------------------------------------

    def _flat_string(self, doc: Doc) -> str:
        return print_flat(doc)

    def _aligned_rows(self, nodes: Sequence[Node]) -> Optional[list[Doc]]:
        """Lay out rows split at ``\\\\`` with cells padded to column widths.

        Returns None when a cell cannot be printed on one line.
        """
        if any(isinstance(node, (Parbreak, Comment)) or self._is_block(node) for node in nodes):
            return None

        raw_rows: list[tuple[list[list[Node]], Optional[Macro]]] = []
        cells: list[list[Node]] = [[]]
        for node in nodes:
            if isinstance(node, Macro) and node.content == "\\" and node.escape_token == DEFAULT_ESCAPE_TOKEN:
                raw_rows.append((cells, node))
                cells = [[]]
            elif isinstance(node, Text) and node.content == "&":
                cells.append([])
            else:
                cells[-1].append(node)
        raw_rows.append((cells, None))

        rows: list[tuple[list[str], list[str], Optional[str]]] = []
        self._flat += 1
        try:
            for row_cells, end in raw_rows:
                rules: list[str] = []
                first = _strip_blank(row_cells[0])
                while first and isinstance(first[0], Macro) and first[0].content in _RULE_MACROS:
                    rules.append(self._flat_string(first.pop(0).accept(self)))
                    first = _strip_blank(first)
                row_cells[0] = first

                texts = []
                for cell in row_cells:
                    words = _strip_blank(cell)
                    text = self._flat_string(self._words(words)) if words else ""
                    if "\n" in text:
                        return None
                    texts.append(text)
                end_text = self._flat_string(end.accept(self)) if end is not None else None
                rows.append((rules, texts, end_text))
        finally:
            self._flat -= 1

        widths: list[int] = []
        for _, texts, _ in rows:
            for j, text in enumerate(texts):
                if j == len(widths):
                    widths.append(0)
                widths[j] = max(widths[j], len(text))

        lines: list[Doc] = []
        for rules, texts, end_text in rows:
            lines.extend(rules)
            if end_text is None and not any(texts):
                continue
            padded = [
                text.ljust(widths[j]) if (j < len(texts) - 1 or end_text is not None) else text
                for j, text in enumerate(texts)
            ]
            line = " & ".join(padded)
            if end_text is not None:
                line = f"{line} {end_text}" if line.strip() else end_text
            lines.append(line)
        return lines

    # ------------------------------------------------------------------
    # Shared pieces
    # ------------------------------------------------------------------

    def _arguments(self, args: Sequence[Argument]) -> list[Doc]:
        first_mandatory = next((i for i, arg in enumerate(args) if arg.open_mark == "{"), None)
        docs: list[Doc] = []
        for i, arg in enumerate(args):
            if i == first_mandatory:
                self._flat += 1
                try:
                    docs.append(arg.accept(self))
                finally:
                    self._flat -= 1
            else:
                docs.append(group(arg.accept(self)))
        return docs

    def _environment(self, node: Union[Environment, MathEnvironment]) -> Doc:
        head: list[Doc] = ["\\begin{", node.env, "}", *self._arguments(node.args)]
        content = list(node.content)
        if content and isinstance(content[0], Comment) and content[0].sameline:
            comment = content.pop(0)
            head.extend((" " if comment.leading_whitespace else "", _comment(comment)))  # type: ignore[union-attr]
        end = ["\\end{", node.env, "}"]

        signature = self.macro_table.environment(node.env) or DEFAULT_ENVIRONMENT
        body: Doc = ""
        if signature.align_content:
            rows = self._aligned_rows(content)
            if rows is None:
                logger.debug("Cells of '%s' cannot be aligned; printing rows unaligned", node.env)
            elif rows:
                body = join(HARDLINE, rows)
        if body == "":
            body = self._body(content)

        if body == "":
            return [head, HARDLINE, end]
        inner = [HARDLINE, body]
        return [head, indent(inner) if signature.indent_content else inner, HARDLINE, end]

    # ------------------------------------------------------------------
    # Visitor methods
    # ------------------------------------------------------------------

    def visit_root(self, node: Root) -> Doc:
        return self._body(node.content)

    def visit_group(self, node: Group) -> Doc:
        return group(["{", self._body(node.content, edges=True, closed=True), "}"])

    def visit_argument(self, node: Argument) -> Doc:
        if not node.open_mark:
            return self._body(node.content)
        return [node.open_mark, self._body(node.content, edges=True, closed=True), node.close_mark]

    def visit_macro(self, node: Macro) -> Doc:
        if node.content == " " and node.escape_token == DEFAULT_ESCAPE_TOKEN:
            # Control space: its blank must survive at the end of a line
            return [Verbatim(ESCAPE_CHAR + " "), *self._arguments(node.args)]
        if node.escape_token:
            return [node.escape_token, node.content, *self._arguments(node.args)]
        # Sub- and superscripts always get braces: x^2 prints as x^{2}
        docs: list[Doc] = [node.content]
        for arg in node.args:
            if arg.open_mark:
                docs.append(arg.accept(self))
            else:
                docs.append(["{", self._body(arg.content), "}"])
        return docs

    def visit_environment(self, node: Environment) -> Doc:
        return self._environment(node)

    def visit_math_environment(self, node: MathEnvironment) -> Doc:
        return self._environment(node)

    def visit_verbatim_environment(self, node: VerbatimEnvironment) -> Doc:
        return [
            "\\begin{",
            node.env,
            "}",
            *self._arguments(node.args),
            Verbatim(node.content),
            "\\end{",
            node.env,
            "}",
        ]

    def visit_inline_math(self, node: InlineMath) -> Doc:
        self._flat += 1
        try:
            body = self._body(node.content, closed=True)
        finally:
            self._flat -= 1
        if body == "" and node.delimiter == "$":
            # "$$" would read back as display math
            return "$ $"
        return [node.delimiter, body, _MATH_CLOSERS[node.delimiter]]

    def visit_display_math(self, node: DisplayMath) -> Doc:
        closer = _MATH_CLOSERS[node.delimiter]
        body = self._body(node.content)
        if body == "":
            return [node.delimiter, HARDLINE, closer]
        return [node.delimiter, indent([HARDLINE, body]), HARDLINE, closer]

    def visit_text(self, node: Text) -> Doc:
        if node.content == ESCAPE_CHAR:
            # A dangling backslash becomes a control space rather than escaping
            # whatever is printed after it
            return Verbatim(ESCAPE_CHAR + " ")
        # Raw argument text (\url) can span lines
        return Verbatim(node.content) if "\n" in node.content else node.content

    def visit_whitespace(self, node: Whitespace) -> Doc:
        return " " if self._flat else LINE

    def visit_parbreak(self, node: Parbreak) -> Doc:
        return [HARDLINE, HARDLINE]

    def visit_comment(self, node: Comment) -> Doc:
        return _comment(node)

    def visit_verb(self, node: Verb) -> Doc:
        return f"\\{node.env}{node.escape}{node.content}{node.escape}"


def print_ast(root: Root, context: PrintContext | None = None, source: Optional[str] = None) -> str:
    """Format a parsed document with a fresh :class:`LatexPrinter`.

    Parameters
    ----------
    root : Root
        Parsed document
    context : PrintContext or None, default = None
        Print settings
    source : str or None, default = None
        Original text, for partial-range printing and the final newline

    Returns
    -------
    str
        Formatted LaTeX

    """
    return LatexPrinter(context).print(root, source)
