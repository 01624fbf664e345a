"""Utility functions for cli output."""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/unlatex/cli/output.py
import argparse
import sys
from typing import Optional, TextIO

from unlatex.exceptions import DependencyError


def check_rich_available() -> bool:
    """Check if Rich library is available.

    Returns
    -------
    bool
        True if Rich is available, False otherwise

    """
    try:
        import rich  # noqa: F401

        return True
    except ImportError:
        return False


def should_use_rich_output(args: argparse.Namespace, raise_on_missing: bool = False) -> bool:
    """Determine if Rich output should be used.

    Parameters
    ----------
    args : argparse.Namespace
        Parsed command line arguments
    raise_on_missing : bool, default False
        Raise DependencyError if rich is not installed

    Returns
    -------
    bool
        True if the --rich flag is set and Rich is installed

    Raises
    ------
    DependencyError
        If --rich is set, rich is missing and ``raise_on_missing`` is True

    """
    if not getattr(args, "rich", False):
        return False

    if not check_rich_available():
        if raise_on_missing:
            raise DependencyError(
                feature_name="rich-output",
                missing_packages=[("rich", "")],
                message="Rich output requires the optional 'rich' dependency. Install with: pip install unlatex[rich]",
            )
        return False
    return True


def write_output(text: str, language: str, use_rich: bool = False, stream: Optional[TextIO] = None) -> None:
    """Write formatted text (or a JSON dump) to a stream.

    Parameters
    ----------
    text : str
        Text to write
    language : str
        Pygments lexer name used for highlighting ("latex" or "json")
    use_rich : bool, default False
        Highlight through Rich instead of writing plain text
    stream : TextIO, optional
        Destination; defaults to sys.stdout

    """
    target = stream or sys.stdout
    if not use_rich:
        target.write(text)
        return

    from rich.console import Console
    from rich.syntax import Syntax

    console = Console(file=target)
    console.print(Syntax(text, language, word_wrap=False))
