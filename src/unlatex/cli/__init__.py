#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/unlatex/cli/__init__.py
"""Command-line interface for unlatex.

Formats LaTeX files (or standard input) and writes the result to stdout, an
output file, or back to the inputs. Also dumps the parsed syntax tree as
JSON.

Examples
--------
Format a file to stdout::

    unlatex paper.tex

Format the document body only, in place, at 100 columns::

    unlatex -d -w --print-width 100 chapters/*.tex

Check formatting in CI::

    unlatex --check paper.tex

"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from unlatex.api import format as format_latex
from unlatex.api import serialize
from unlatex.cli.builder import (
    EXIT_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    build_format_options,
    create_parser,
    get_exit_code_for_exception,
)
from unlatex.cli.output import should_use_rich_output, write_output
from unlatex.exceptions import FileError, UnlatexError
from unlatex.logging_utils import configure_logging, logging_input
from unlatex.options.latex import LatexFormatOptions

logger = logging.getLogger(__name__)

STDIN_NAME = "<stdin>"


def _resolve_path(path: str, workdir: Optional[str]) -> Path:
    resolved = Path(path)
    if workdir and not resolved.is_absolute():
        resolved = Path(workdir) / resolved
    return resolved


def _read_source(path: Optional[Path]) -> str:
    if path is None:
        return sys.stdin.read()
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileError(f"Could not read {path}: {e}", file_path=str(path), original_error=e) from e


def _write_file(path: Path, text: str) -> None:
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise FileError(f"Could not write {path}: {e}", file_path=str(path), original_error=e) from e


def validate_arguments(args: argparse.Namespace) -> Optional[str]:
    """Return an error message for an invalid flag combination, else None."""
    if args.overwrite and not args.files:
        return "--overwrite requires at least one input file"
    if args.overwrite and args.output:
        return "--overwrite and --output cannot be used together"
    if args.output and len(args.files) > 1:
        return "--output accepts a single input file"
    if args.ast and (args.overwrite or args.check):
        return "--ast cannot be combined with --overwrite or --check"
    if args.indent is not None and args.indent < 0:
        return "--indent must not be negative"
    return None


def process_source(
    name: str,
    path: Optional[Path],
    args: argparse.Namespace,
    options: LatexFormatOptions,
    use_rich: bool,
) -> int:
    """Format (or dump) one input and deliver the result.

    Returns
    -------
    int
        EXIT_SUCCESS, or EXIT_ERROR when ``--check`` finds the input unformatted

    Raises
    ------
    UnlatexError
        If reading, formatting or writing fails

    """
    source = _read_source(path)

    if args.ast:
        write_output(serialize(source, indent=args.indent) + "\n", "json", use_rich)
        return EXIT_SUCCESS

    formatted = format_latex(source, options)

    if args.check:
        if formatted != source:
            print(f"Would reformat: {name}", file=sys.stderr)
            return EXIT_ERROR
        logger.info("%s is formatted", name)
        return EXIT_SUCCESS

    if args.overwrite and path is not None:
        if formatted == source:
            logger.info("Unchanged: %s", name)
        else:
            _write_file(path, formatted)
            logger.info("Formatted: %s", name)
        return EXIT_SUCCESS

    if args.output:
        output_path = _resolve_path(args.output, args.workdir)
        _write_file(output_path, formatted)
        logger.info("Wrote %s", output_path)
        return EXIT_SUCCESS

    write_output(formatted, "latex", use_rich)
    return EXIT_SUCCESS


def main(args: list[str] | None = None) -> int:
    """Execute the unlatex command.

    Parameters
    ----------
    args : list of str, optional
        Command-line arguments; defaults to ``sys.argv[1:]``

    Returns
    -------
    int
        Exit code: 0 success, 1 error or unformatted input under ``--check``,
        2 missing dependency, 3 invalid options, 4 file error

    """
    try:
        parser = create_parser()
    except UnlatexError as e:
        print(f"Error: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)

    parsed_args = parser.parse_args(args)

    if parsed_args.verbose:
        configure_logging(logging.DEBUG, log_file=parsed_args.log_file, trace_mode=True)
    else:
        configure_logging(parsed_args.log_level, log_file=parsed_args.log_file)

    error = validate_arguments(parsed_args)
    if error:
        print(f"Error: {error}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    try:
        options = build_format_options(parsed_args)
        use_rich = should_use_rich_output(parsed_args, raise_on_missing=True)
    except UnlatexError as e:
        print(f"Error: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)

    inputs: list[tuple[str, Optional[Path]]]
    if parsed_args.files:
        inputs = [(name, _resolve_path(name, parsed_args.workdir)) for name in parsed_args.files]
    else:
        inputs = [(STDIN_NAME, None)]

    exit_code = EXIT_SUCCESS
    for name, path in inputs:
        with logging_input(name):
            try:
                result = process_source(name, path, parsed_args, options, use_rich)
            except UnlatexError as e:
                print(f"Error: {e}", file=sys.stderr)
                logger.debug("Failed on %s", name, exc_info=True)
                result = get_exit_code_for_exception(e)
        if exit_code == EXIT_SUCCESS:
            exit_code = result

    return exit_code


__all__ = ["main"]
