#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for unlatex.

This module centralizes the hardcoded values and default configuration
constants used across the package.

Constants are organized by category:
1. Formatting Defaults - Printer configuration defaults
2. Lexical Constants - Characters with special meaning in LaTeX source
3. Serialization Constants - JSON layout of the AST dump
4. CLI Constants - Environment variable naming
"""

# =============================================================================
# Formatting Defaults
# =============================================================================

DEFAULT_PRINT_WIDTH = 80
DEFAULT_USE_TABS = False
DEFAULT_TAB_WIDTH = 2
DEFAULT_DOCUMENT_ONLY = False

# Marker searched for when only the document body should be formatted
DOCUMENT_BEGIN_MARKER = "\\begin{document}"

# Bodies nested deeper than this are copied from the source unchanged
MAX_PRINT_DEPTH = 40

# =============================================================================
# Lexical Constants
# =============================================================================

ESCAPE_CHAR = "\\"
COMMENT_CHAR = "%"
WHITESPACE_CHARS = frozenset(" \t\r\n")

# Characters that terminate a plain text run
SPECIAL_CHARS = frozenset("\\{}[]$&%^_#")

# Default escape token for macros written as control sequences
DEFAULT_ESCAPE_TOKEN = "\\"

# =============================================================================
# Serialization Constants
# =============================================================================

NODE_TYPE_KEY = "node_type"
POSITION_KEY = "position"

# =============================================================================
# CLI Constants
# =============================================================================

ENV_PREFIX = "UNLATEX_"
