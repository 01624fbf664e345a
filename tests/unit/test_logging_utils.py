#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the command's logging setup."""
import logging

import pytest

from unlatex.logging_utils import PACKAGE_LOGGER_NAME, configure_logging, logging_input
from unlatex.parsers.latex import parse_latex


@pytest.fixture(autouse=True)
def restore_logging():
    """Put the unlatex and root loggers back the way they were."""
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    root = logging.getLogger()
    saved = list(package_logger.handlers), package_logger.level, package_logger.propagate
    root_handlers = list(root.handlers)
    yield
    for handler in package_logger.handlers:
        if handler not in saved[0]:
            handler.close()
    package_logger.handlers[:] = saved[0]
    package_logger.setLevel(saved[1])
    package_logger.propagate = saved[2]
    root.handlers[:] = root_handlers


@pytest.mark.unit
class TestConfigureLogging:
    """Test handler installation on the package logger."""

    def test_root_logger_untouched(self) -> None:
        """Test that the root logger keeps its handlers."""
        root = logging.getLogger()
        sentinel = logging.NullHandler()
        root.addHandler(sentinel)
        before = list(root.handlers)
        configure_logging("INFO")
        assert root.handlers == before
        assert logging.getLogger(PACKAGE_LOGGER_NAME).propagate is False

    def test_reconfigure_replaces_handlers(self) -> None:
        """Test that a second call does not stack handlers."""
        package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
        configure_logging("INFO")
        count = len(package_logger.handlers)
        configure_logging("DEBUG", trace_mode=True)
        assert len(package_logger.handlers) == count
        assert package_logger.level == logging.DEBUG

    def test_unknown_level_name(self) -> None:
        """Test that an unknown level name falls back to INFO."""
        assert configure_logging("chatty").level == logging.INFO

    def test_unwritable_log_file(self, tmp_path, capsys) -> None:
        """Test that a log file that cannot be opened only produces a warning."""
        configure_logging("INFO", log_file=str(tmp_path / "missing" / "unlatex.log"))
        assert "Could not create log file" in capsys.readouterr().err


@pytest.mark.unit
class TestTraceFormat:
    """Test that degradations are attributed to their input."""

    def test_degradation_names_input(self, capsys) -> None:
        """Test that a parse degradation is logged with the input name."""
        configure_logging(logging.DEBUG, trace_mode=True)
        with logging_input("chapter.tex"):
            parse_latex("{a")
        err = capsys.readouterr().err
        line = next(line for line in err.splitlines() if "unclosed_group" in line)
        assert "[chapter.tex]" in line
        assert "[unlatex.parsers.latex]" in line
        assert "at 1:1" in line

    def test_outside_input_block(self, capsys) -> None:
        """Test that records outside an input block use a placeholder name."""
        configure_logging(logging.DEBUG, trace_mode=True)
        parse_latex("{a")
        assert "[-] unclosed_group" in capsys.readouterr().err

    def test_default_format_is_plain(self, capsys) -> None:
        """Test that the default format omits trace details."""
        configure_logging(logging.DEBUG)
        with logging_input("chapter.tex"):
            parse_latex("{a")
        err = capsys.readouterr().err
        assert "DEBUG: unclosed_group at 1:1" in err
        assert "chapter.tex" not in err
