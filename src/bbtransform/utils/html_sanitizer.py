#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtransform/utils/html_sanitizer.py
"""HTML sanitization utilities for security.

The HTML tag vocabulary escapes everything it builds, so these helpers are a
second line of defence: URL screening for ``href``/``src`` values and an
optional bleach pass over the final HTML.
"""

from __future__ import annotations

import logging
import re

import bleach
from bleach.css_sanitizer import CSSSanitizer

from bbtransform.constants import (
    SANITIZE_ALLOWED_ATTRIBUTES,
    SANITIZE_ALLOWED_CSS_PROPERTIES,
    SANITIZE_ALLOWED_PROTOCOLS,
    SANITIZE_ALLOWED_TAGS,
)
from bbtransform.utils.security import is_url_scheme_dangerous

logger = logging.getLogger(__name__)

_CSS_URL_PATTERN = re.compile(r"url\s*\(\s*[\"']?\s*([^)\"']+)")


def _is_style_safe(style_value: str) -> bool:
    """Check if a CSS style attribute value is safe.

    Examples
    --------
        >>> _is_style_safe("color: red; font-size: 12px;")
        True
        >>> _is_style_safe("background: url(javascript:alert(1))")
        False
        >>> _is_style_safe("width: expression(alert(1))")
        False

    """
    if not style_value:
        return True

    style_lower = style_value.lower()

    if "expression(" in style_lower or "expression (" in style_lower:
        return False

    for match in _CSS_URL_PATTERN.finditer(style_lower):
        if not is_url_safe(match.group(1).strip()):
            return False

    return True


def _filter_attributes(tag: str, name: str, value: str) -> bool:
    allowed = SANITIZE_ALLOWED_ATTRIBUTES.get(tag, []) + SANITIZE_ALLOWED_ATTRIBUTES.get("*", [])
    if name not in allowed:
        return False
    if name == "style":
        return _is_style_safe(value)
    if name in ("href", "src"):
        return is_url_safe(value)
    return True


def sanitize_html_string(content: str) -> str:
    """Sanitize an HTML string with bleach.

    Disallowed elements are stripped (their text is kept), attributes are
    filtered per element, and only safe CSS properties and URL protocols
    survive.

    Parameters
    ----------
    content : str
        HTML content to sanitize

    Returns
    -------
    str
        Sanitized HTML

    """
    css_sanitizer = CSSSanitizer(allowed_css_properties=sorted(SANITIZE_ALLOWED_CSS_PROPERTIES))
    cleaned = bleach.clean(
        content,
        tags=SANITIZE_ALLOWED_TAGS,
        attributes=_filter_attributes,
        protocols=SANITIZE_ALLOWED_PROTOCOLS,
        css_sanitizer=css_sanitizer,
        strip=True,
    )
    if cleaned != content:
        logger.debug("Sanitizer modified rendered HTML (%d -> %d characters)", len(content), len(cleaned))
    return cleaned


def is_url_safe(url: str) -> bool:
    """Check if a URL is safe (no dangerous schemes).

    Examples
    --------
    >>> is_url_safe("https://example.com")
    True

    >>> is_url_safe("javascript:alert('xss')")
    False

    """
    if not url or not url.strip():
        return True
    return not is_url_scheme_dangerous(url)


def sanitize_url(url: str) -> str:
    """Sanitize a URL by removing dangerous schemes.

    Returns
    -------
    str
        The stripped URL, or empty string if the URL is dangerous

    Examples
    --------
    >>> sanitize_url(" https://example.com ")
    'https://example.com'

    >>> sanitize_url("javascript:alert('xss')")
    ''

    """
    if not is_url_safe(url):
        logger.debug("Dropped URL with dangerous scheme: %r", url[:50])
        return ""
    return url.strip()
