#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtransform/utils/security.py
"""URL scheme screening for links and images built from untrusted BBCode."""

from __future__ import annotations

from urllib.parse import urlparse

from bbtransform.constants import DANGEROUS_SCHEMES

_DANGEROUS_DATA_TYPES = (
    "data:text/html",
    "data:text/javascript",
    "data:application/javascript",
    "data:application/x-javascript",
)


def is_relative_url(url: str) -> bool:
    """Check whether a URL is relative (fragment, path or query only).

    Examples
    --------
    >>> is_relative_url("/forum/topic/1")
    True
    >>> is_relative_url("https://example.com")
    False

    """
    return url.strip().startswith(("#", "/", "./", "../", "?"))


def is_url_scheme_dangerous(url: str) -> bool:
    """Check if a URL uses a dangerous scheme.

    Dangerous schemes include javascript:, vbscript:, data:text/html and
    others that can be used for XSS through ``href``/``src`` attributes.
    Control characters and whitespace inside the scheme are ignored the way
    browsers ignore them, so ``java\\tscript:`` is caught as well.

    Parameters
    ----------
    url : str
        URL to check

    Returns
    -------
    bool
        True if URL uses a dangerous scheme, False otherwise

    Examples
    --------
    >>> is_url_scheme_dangerous("https://example.com")
    False
    >>> is_url_scheme_dangerous("javascript:alert('xss')")
    True
    >>> is_url_scheme_dangerous("/relative/path")
    False

    """
    if not url or not url.strip():
        return False

    url_lower = "".join(ch for ch in url.lower() if ch > " ")

    if is_relative_url(url_lower):
        return False

    for dangerous_scheme in DANGEROUS_SCHEMES:
        if url_lower.startswith(dangerous_scheme):
            return True

    try:
        parsed = urlparse(url_lower)
    except ValueError:
        return True

    if parsed.scheme in ("javascript", "vbscript", "about"):
        return True
    if parsed.scheme == "data" and url_lower.startswith(_DANGEROUS_DATA_TYPES):
        return True
    return False
