"""The major exported API functions for parsing and formatting LaTeX."""

#  Copyright (c) 2025 Tom Villani, Ph.D.
# src/unlatex/api.py
import logging
from pathlib import Path
from typing import Any, Optional, Union

from unlatex.ast.nodes import Root
from unlatex.ast.serialization import ast_to_json
from unlatex.exceptions import ConfigurationError, FileError, InvalidOptionsError
from unlatex.options.latex import LatexFormatOptions, LatexParserOptions
from unlatex.parsers.latex import LatexParser
from unlatex.renderers.latex import LatexPrinter, PrintContext

logger = logging.getLogger(__name__)


def _resolve_format_options(options: Optional[LatexFormatOptions], **overrides: Any) -> LatexFormatOptions:
    """Merge keyword overrides into the formatting options.

    Parameters
    ----------
    options : LatexFormatOptions or None
        Base options; defaults are used when None
    **overrides
        Individual option values that win over ``options``

    Raises
    ------
    InvalidOptionsError
        If ``options`` is not a LatexFormatOptions instance
    ConfigurationError
        If an override names an unknown option or has an invalid value

    """
    if options is not None and not isinstance(options, LatexFormatOptions):
        raise InvalidOptionsError(
            component_name="format",
            expected_type=LatexFormatOptions,
            received_type=type(options),
        )
    base = options or LatexFormatOptions()
    if not overrides:
        return base
    try:
        return base.create_updated(**overrides)
    except TypeError as e:
        raise ConfigurationError(f"Unknown formatting option: {e}", original_error=e) from e


def parse(source: str, options: Optional[LatexParserOptions] = None) -> Root:
    r"""Parse LaTeX source into an AST.

    Parsing never fails: malformed input (unbalanced braces, unterminated
    environments, unknown macros) is recovered from and the tree still covers
    the whole source.

    Parameters
    ----------
    source : str
        LaTeX source text
    options : LatexParserOptions, optional
        Parser configuration (macro table, degradation recording)

    Returns
    -------
    Root
        AST root spanning the complete source

    Examples
    --------
    Parse a fragment and inspect the tree:
        >>> from unlatex import parse
        >>> root = parse(r"\emph{hi}")
        >>> root.content[0].content
        'emph'

    Collect every macro name:
        >>> from unlatex.ast import Macro, extract_nodes
        >>> [m.content for m in extract_nodes(parse(r"\a \b"), Macro)]
        ['a', 'b']

    """
    return LatexParser(options).parse(source)


def serialize(source: str, options: Optional[LatexParserOptions] = None, indent: Optional[int] = None) -> str:
    """Parse LaTeX source and return its AST as JSON.

    Parameters
    ----------
    source : str
        LaTeX source text
    options : LatexParserOptions, optional
        Parser configuration
    indent : int, optional
        JSON indentation (None for compact output)

    Returns
    -------
    str
        JSON text; see :func:`unlatex.ast.serialization.ast_to_json`

    """
    return ast_to_json(parse(source, options), indent=indent)


def format(  # noqa: A001
    source: str,
    options: Optional[LatexFormatOptions] = None,
    *,
    parser_options: Optional[LatexParserOptions] = None,
    **kwargs: Any,
) -> str:
    r"""Format LaTeX source.

    Parameters
    ----------
    source : str
        LaTeX source text
    options : LatexFormatOptions, optional
        Formatting configuration
    parser_options : LatexParserOptions, optional
        Parser configuration; its macro table also drives the layout hints
    kwargs : Any
        Individual formatting options (``print_width``, ``use_tabs``,
        ``tab_width``, ``document_only``) that override ``options``

    Returns
    -------
    str
        Formatted source. Formatting is idempotent: formatting the result
        again returns it unchanged.

    Raises
    ------
    ConfigurationError
        If an option value is invalid
    InvalidOptionsError
        If ``options`` is not a LatexFormatOptions instance

    Examples
    --------
    Normalize spacing and braces:
        >>> from unlatex import format
        >>> format("$e^2$")
        '$e^{2}$'

    Wrap a long paragraph:
        >>> print(format("word " * 5, print_width=10))
        word word
        word word
        word

    """
    format_options = _resolve_format_options(options, **kwargs)
    parser = LatexParser(parser_options)
    root = parser.parse(source)
    if parser.degradations:
        logger.debug("Formatting input with %d parse degradation(s)", len(parser.degradations))

    context = PrintContext.from_options(format_options, source)
    return LatexPrinter(context, macro_table=parser.options.macro_table).print(root, source)


def check_formatted(source: str, options: Optional[LatexFormatOptions] = None, **kwargs: Any) -> bool:
    """Return True if ``source`` is already formatted.

    Parameters
    ----------
    source : str
        LaTeX source text
    options : LatexFormatOptions, optional
        Formatting configuration
    kwargs : Any
        Individual formatting option overrides

    """
    return format(source, options, **kwargs) == source


def format_file(
    path: Union[str, Path],
    options: Optional[LatexFormatOptions] = None,
    overwrite: bool = False,
    encoding: str = "utf-8",
    **kwargs: Any,
) -> str:
    """Format a LaTeX file.

    Parameters
    ----------
    path : str or Path
        File to format
    options : LatexFormatOptions, optional
        Formatting configuration
    overwrite : bool, default False
        Write the formatted text back to ``path`` (only when it changed)
    encoding : str, default "utf-8"
        Text encoding of the file
    kwargs : Any
        Individual formatting option overrides

    Returns
    -------
    str
        Formatted text

    Raises
    ------
    FileError
        If the file cannot be read or written

    """
    file_path = Path(path)
    try:
        source = file_path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise FileError(f"Could not read {file_path}: {e}", file_path=str(file_path), original_error=e) from e

    formatted = format(source, options, **kwargs)

    if overwrite:
        if formatted == source:
            logger.debug("%s is already formatted", file_path)
        else:
            try:
                file_path.write_text(formatted, encoding=encoding)
            except OSError as e:
                raise FileError(f"Could not write {file_path}: {e}", file_path=str(file_path), original_error=e) from e
            logger.info("Formatted %s", file_path)
    return formatted
