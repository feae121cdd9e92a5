#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for bbtransform.

This module centralizes the hardcoded values and default configuration
constants used across the library so that parser, renderer, CLI and
configuration code all agree on them.

Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. Parser Defaults - BBCode lexing and tree building
3. HTML Rendering Defaults - tag vocabulary and escaping
4. Security Constants - URL scheme screening
5. CLI and Configuration - exit codes, config file names, env vars
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

UnknownTagMode = Literal["preserve", "strip"]

# =============================================================================
# Parser Defaults
# =============================================================================

# Offset value meaning "not present / not applicable"
NOT_SET = -1

TAG_OPEN = "["
TAG_CLOSE = "]"
TAG_CLOSING_MARKER = "/"
ATTRIBUTE_ASSIGN = "="
ATTRIBUTE_QUOTES = frozenset({'"', "'"})


DEFAULT_BBCODE_STANDALONE_TAGS: frozenset[str] = frozenset()
DEFAULT_BBCODE_IMPLICITLY_CLOSED_TAGS: frozenset[str] = frozenset({"*"})
DEFAULT_BBCODE_PREFORMATTED_TAGS: frozenset[str] = frozenset({"code", "noparse"})
DEFAULT_BBCODE_MAX_NESTING_DEPTH = 100

# =============================================================================
# HTML Rendering Defaults
# =============================================================================

DEFAULT_HTML_ESCAPE_TEXT = True
DEFAULT_HTML_CONVERT_NEWLINES = False
DEFAULT_HTML_SANITIZE_OUTPUT = False
DEFAULT_HTML_UNKNOWN_TAG_MODE: UnknownTagMode = "preserve"

# Tags the HTML preset treats as body-less when parsing
HTML_STANDALONE_TAGS = frozenset({"hr", "br"})

# Size keywords accepted by [size=...] besides plain numbers
HTML_FONT_SIZE_KEYWORDS = frozenset(
    {"xx-small", "x-small", "small", "medium", "large", "x-large", "xx-large", "smaller", "larger"}
)
HTML_MAX_FONT_SIZE = 72

# Allowed HTML for the optional bleach post-pass
SANITIZE_ALLOWED_TAGS = frozenset(
    {
        "a",
        "blockquote",
        "br",
        "cite",
        "code",
        "del",
        "details",
        "div",
        "em",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "hr",
        "iframe",
        "img",
        "li",
        "ol",
        "p",
        "pre",
        "span",
        "strong",
        "sub",
        "summary",
        "sup",
        "table",
        "td",
        "th",
        "tr",
        "u",
        "ul",
    }
)
SANITIZE_ALLOWED_ATTRIBUTES = {
    "a": ["href", "title", "rel"],
    "img": ["src", "alt", "title", "width", "height"],
    "iframe": ["src", "width", "height", "allowfullscreen", "frameborder"],
    "ol": ["type", "start"],
    "*": ["class", "style"],
}
SANITIZE_ALLOWED_PROTOCOLS = frozenset({"http", "https", "mailto", "ftp"})
SANITIZE_ALLOWED_CSS_PROPERTIES = frozenset({"color", "font-size", "font-family", "text-align"})

# =============================================================================
# Security Constants
# =============================================================================

DANGEROUS_SCHEMES = {
    "javascript:",
    "vbscript:",
    "data:text/html",
    "data:text/javascript",
    "data:application/javascript",
    "data:application/x-javascript",
}

# =============================================================================
# CLI and Configuration
# =============================================================================

ENV_VAR_PREFIX = "BBTRANSFORM_"
CONFIG_ENV_VAR = "BBTRANSFORM_CONFIG"
CONFIG_FILENAMES = (".bbtransform.toml", ".bbtransform.yaml", ".bbtransform.yml", ".bbtransform.json")
PYPROJECT_TOOL_SECTION = "bbtransform"

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_VALIDATION_ERROR = 2
EXIT_FILE_ERROR = 3
