#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtransform/ast/__init__.py
"""Offset-addressed document tree for BBCode markup.

The tree has two node variants, :class:`TextNode` and :class:`TagNode`,
rooted in a :class:`Document` that owns the source text. Nodes store
offsets only; the document materialises substrings.

"""

from bbtransform.ast.document import Document
from bbtransform.ast.nodes import NOT_SET, Node, TagNode, TextNode
from bbtransform.ast.visitors import NodeVisitor, OffsetValidator, validate_offsets

__all__ = [
    "NOT_SET",
    "Document",
    "Node",
    "NodeVisitor",
    "OffsetValidator",
    "TagNode",
    "TextNode",
    "validate_offsets",
]
