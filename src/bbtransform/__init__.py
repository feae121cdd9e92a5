"""bbtransform - BBCode parsing into offset-addressed trees, and rule-driven rendering.

bbtransform parses BBCode-style markup into a document tree whose nodes hold
nothing but offsets into the original text. The tree can then be rendered
through caller-supplied tag renderers, to HTML with the bundled vocabulary,
or back to the exact original markup.

Key Features
------------
- Total parser: malformed markup is recovered as text, never rejected
- Byte-for-byte round trip when no tag is transformed
- Per-tag control over which tags are rendered
- Standard BBCode to HTML vocabulary with URL screening and escaping
- Command line interface with config file support

Examples
--------
Render to HTML:

    >>> from bbtransform import to_html
    >>> to_html("[b]Hello[/b] [i]world[/i]")
    '<strong>Hello</strong> <em>world</em>'

Work with the tree directly:

    >>> from bbtransform import TagNode, parse, transform
    >>> doc = parse("Hello [size=\\"14\\"][b]World!![/b][/size] Yo.")
    >>> [doc.tag_name(tag) for tag in doc.tag_nodes()]
    ['size', 'b']
    >>> transform(doc, lambda node: False) == doc.source
    True

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "bbtransform requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from bbtransform.api import parse, to_bbcode, to_html, transform
from bbtransform.ast import NOT_SET, Document, Node, NodeVisitor, TagNode, TextNode
from bbtransform.exceptions import (
    BBTransformError,
    ConfigError,
    FileError,
    InvalidOptionsError,
    OffsetInvariantError,
    ValidationError,
)
from bbtransform.options import BBCodeParserOptions, HtmlRendererOptions
from bbtransform.parsers import BBCodeParser
from bbtransform.renderers import (
    BBCodeTransformer,
    HtmlRenderer,
    TagAttributes,
    TagRendererRegistry,
    default_html_renderers,
)

__all__ = [
    "__version__",
    "parse",
    "transform",
    "to_html",
    "to_bbcode",
    "NOT_SET",
    "Document",
    "Node",
    "NodeVisitor",
    "TagNode",
    "TextNode",
    "BBCodeParser",
    "BBCodeParserOptions",
    "BBCodeTransformer",
    "HtmlRenderer",
    "HtmlRendererOptions",
    "TagAttributes",
    "TagRendererRegistry",
    "default_html_renderers",
    "BBTransformError",
    "ConfigError",
    "FileError",
    "InvalidOptionsError",
    "OffsetInvariantError",
    "ValidationError",
]
