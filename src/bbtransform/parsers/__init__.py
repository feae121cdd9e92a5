#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtransform/parsers/__init__.py
"""Markup parsers producing offset-addressed documents."""

from bbtransform.parsers.base import BaseParser, ParserInput
from bbtransform.parsers.bbcode import BBCodeParser

__all__ = ["BaseParser", "BBCodeParser", "ParserInput"]
