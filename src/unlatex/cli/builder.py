#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/unlatex/cli/builder.py
"""Argument parser construction for the unlatex command-line interface.

Formatting flags are generated from the fields of
:class:`~unlatex.options.latex.LatexFormatOptions`: each field's metadata
supplies the flag name, help text and (optionally) a short flag. Defaults can
be supplied through ``UNLATEX_<FIELD>`` environment variables, e.g.
``UNLATEX_PRINT_WIDTH=100``; command-line flags always win.
"""

from __future__ import annotations

import argparse
import os
from dataclasses import MISSING, Field, fields
from typing import Any, Mapping, Optional

from unlatex.constants import ENV_PREFIX
from unlatex.exceptions import ConfigurationError, DependencyError, FileError, ValidationError
from unlatex.options.latex import LatexFormatOptions

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_DEPENDENCY_ERROR = 2
EXIT_VALIDATION_ERROR = 3
EXIT_FILE_ERROR = 4

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


def get_exit_code_for_exception(exception: Exception) -> int:
    """Map an exception to an appropriate CLI exit code.

    Parameters
    ----------
    exception : Exception
        The exception to map to an exit code

    Returns
    -------
    int
        The appropriate exit code for the exception type

    """
    if isinstance(exception, (DependencyError, ImportError)):
        return EXIT_DEPENDENCY_ERROR

    if isinstance(exception, ValidationError):
        return EXIT_VALIDATION_ERROR

    if isinstance(exception, FileError):
        return EXIT_FILE_ERROR

    return EXIT_ERROR


def env_var_name(field_name: str) -> str:
    """Return the environment variable consulted for an option field."""
    return f"{ENV_PREFIX}{field_name.upper()}"


def _env_default(options_field: Field, environ: Mapping[str, str]) -> Any:
    """Resolve a field default, letting the environment override it.

    Raises
    ------
    ConfigurationError
        If the environment variable cannot be converted to the field's type

    """
    default = options_field.default if options_field.default is not MISSING else None
    name = env_var_name(options_field.name)
    raw = environ.get(name)
    if raw is None:
        return default

    if isinstance(default, bool):
        value = raw.strip().lower()
        if value in _TRUE_VALUES:
            return True
        if value in _FALSE_VALUES:
            return False
        raise ConfigurationError(
            f"{name} must be a boolean (true/false), got {raw!r}", parameter_name=name, parameter_value=raw
        )

    converter = options_field.metadata.get("type", str)
    try:
        return converter(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"{name} must be of type {converter.__name__}, got {raw!r}",
            parameter_name=name,
            parameter_value=raw,
            original_error=e,
        ) from e


def add_format_options(parser: argparse.ArgumentParser, environ: Optional[Mapping[str, str]] = None) -> None:
    """Add one flag per LatexFormatOptions field.

    Parameters
    ----------
    parser : ArgumentParser
        Parser to add arguments to
    environ : Mapping, optional
        Environment used for defaults; defaults to ``os.environ``

    """
    env = os.environ if environ is None else environ
    group = parser.add_argument_group("Formatting options")

    for options_field in fields(LatexFormatOptions):
        metadata = options_field.metadata
        if metadata.get("exclude_from_cli", False):
            continue

        flags = [f"--{metadata.get('cli_name', options_field.name.replace('_', '-'))}"]
        if "short" in metadata:
            flags.insert(0, metadata["short"])

        default = _env_default(options_field, env)
        help_text = f"{metadata.get('help', '')} (env: {env_var_name(options_field.name)})"

        if isinstance(options_field.default, bool):
            group.add_argument(
                *flags,
                dest=options_field.name,
                action=argparse.BooleanOptionalAction,
                default=default,
                help=help_text,
            )
        else:
            group.add_argument(
                *flags,
                dest=options_field.name,
                type=metadata.get("type", str),
                default=default,
                metavar="N",
                help=f"{help_text} (default: %(default)s)",
            )


def build_format_options(args: argparse.Namespace) -> LatexFormatOptions:
    """Create LatexFormatOptions from parsed arguments.

    Raises
    ------
    ConfigurationError
        If a value is out of range (e.g. ``--print-width 0``)

    """
    values = {
        options_field.name: getattr(args, options_field.name)
        for options_field in fields(LatexFormatOptions)
        if hasattr(args, options_field.name)
    }
    return LatexFormatOptions(**values)


def create_parser(environ: Optional[Mapping[str, str]] = None) -> argparse.ArgumentParser:
    """Create the argument parser for the ``unlatex`` command.

    Parameters
    ----------
    environ : Mapping, optional
        Environment used for option defaults; defaults to ``os.environ``

    Returns
    -------
    ArgumentParser
        Configured parser

    Raises
    ------
    ConfigurationError
        If an ``UNLATEX_*`` environment variable holds an invalid value

    """
    from unlatex import __version__

    parser = argparse.ArgumentParser(
        prog="unlatex",
        description="Format LaTeX source, or dump its syntax tree as JSON.",
        epilog="Reads standard input when no files are given.",
    )
    parser.add_argument("files", nargs="*", metavar="FILE", help="LaTeX files to format")
    parser.add_argument("-o", "--output", metavar="PATH", help="Write the result to PATH instead of stdout")
    parser.add_argument(
        "-w", "--overwrite", action="store_true", help="Write the formatted text back to each input file"
    )
    parser.add_argument("--workdir", metavar="DIR", help="Resolve input and output paths relative to DIR")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Do not write anything; exit with status 1 if any input is not formatted",
    )

    add_format_options(parser, environ)

    ast_group = parser.add_argument_group("AST output")
    ast_group.add_argument("--ast", action="store_true", help="Print the JSON syntax tree instead of formatting")
    ast_group.add_argument("--indent", type=int, metavar="N", help="Indentation for the JSON syntax tree")

    display_group = parser.add_argument_group("Display and logging")
    display_group.add_argument(
        "--rich", action="store_true", help="Syntax-highlight output with Rich (requires unlatex[rich])"
    )
    display_group.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Logging level (default: %(default)s)",
    )
    display_group.add_argument("--log-file", metavar="PATH", help="Also write log messages to PATH")
    display_group.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging with timestamps and logger names"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser
