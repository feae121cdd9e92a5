#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtransform/renderers/__init__.py
"""Renderers turning parsed documents into output text."""

from bbtransform.renderers.base import BaseRenderer
from bbtransform.renderers.html import HtmlRenderer, TagRendererRegistry, default_html_renderers, html_parser_options
from bbtransform.renderers.transformer import (
    BBCodeTransformer,
    TagAttributes,
    TagRenderer,
    TextRenderer,
    TransformPredicate,
    transform,
)

__all__ = [
    "BBCodeTransformer",
    "BaseRenderer",
    "HtmlRenderer",
    "TagAttributes",
    "TagRenderer",
    "TagRendererRegistry",
    "TextRenderer",
    "TransformPredicate",
    "default_html_renderers",
    "html_parser_options",
    "transform",
]
