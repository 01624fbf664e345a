"""Pytest configuration and shared fixtures for the unlatex test suite.

This module provides shared fixtures, test configuration, and utilities
that are used across the entire test suite.
"""

import os
from pathlib import Path

import pytest
from hypothesis import Phase, Verbosity, settings

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=200, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=50)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")
    config.addinivalue_line("markers", "fuzzing: Property-based tests driven by hypothesis")


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding the sample LaTeX documents."""
    return FIXTURES_DIR


@pytest.fixture
def sample_document() -> str:
    """Provide a small but complete LaTeX document.

    Returns
    -------
    str
        Document with a preamble, sections, a list, a table and math.

    """
    return (FIXTURES_DIR / "sample.tex").read_text(encoding="utf-8")


@pytest.fixture
def unformatted_snippet() -> str:
    """Provide the snippet the formatter is known to rewrite.

    Returns
    -------
    str
        Section, paragraphs and an enumerate with inline and display math.

    """
    return (
        "\\section*{Really Cool Math}Below you'll find some really cool math.\n"
        "\n"
        "Check it out!\\begin{enumerate}\n"
        "    \\item[(a)] Hi there\n"
        "\\item$e^2$ is math mode! \\[\\begin{bmatrix}12&3^e\\\\\\pi&0\\end{bmatrix}\\]\n"
        "\\end{enumerate}"
    )
