#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Option classes for the BBCode parser and renderers."""

from bbtransform.options.base import BaseParserOptions, BaseRendererOptions, CloneFrozenMixin
from bbtransform.options.bbcode import BBCodeParserOptions
from bbtransform.options.html import HtmlRendererOptions

__all__ = [
    "BBCodeParserOptions",
    "BaseParserOptions",
    "BaseRendererOptions",
    "CloneFrozenMixin",
    "HtmlRendererOptions",
]
