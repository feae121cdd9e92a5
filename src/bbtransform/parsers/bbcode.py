#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtransform/parsers/bbcode.py
"""BBCode to offset-addressed document tree.

This module turns BBCode (Bulletin Board Code) markup into a tree of
:class:`~bbtransform.ast.TextNode` and :class:`~bbtransform.ast.TagNode`
objects. The tree is built purely from index arithmetic over the original
text: nodes record offsets, never substrings, so the source can always be
reconstructed exactly.

Parsing is total. Malformed tag heads, closing sequences that match no open
tag and tags that are never closed are all recovered locally, either as
literal text or as tags without a closing sequence. Nothing here raises for
bad markup.

Supported tag head syntax:

- ``[name]``
- ``[name=value]`` / ``[name="quoted value"]`` (simple attribute)
- ``[name key="value" key2=value2]`` (complex attributes)
- ``[/name]`` (closing sequence)

Tag names are any run of characters other than brackets, ``=``, quotes and
whitespace, which admits list markers (``[*]``) and emoticons (``[:)]``).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from bbtransform.ast import NOT_SET, Document, Node, TagNode, TextNode
from bbtransform.constants import ATTRIBUTE_ASSIGN, ATTRIBUTE_QUOTES, TAG_CLOSE, TAG_CLOSING_MARKER, TAG_OPEN
from bbtransform.options.bbcode import BBCodeParserOptions
from bbtransform.parsers.base import BaseParser, ParserInput

logger = logging.getLogger(__name__)

_NAME_PATTERN = re.compile(r"[^\[\]=\"'\s]+")
_CLOSING_TAG_PATTERN = re.compile(r"\[/([^\[\]=\"'\s]+)\]")
_UNQUOTED_SIMPLE_VALUE = re.compile(r"[^\[\]\r\n]*")
_UNQUOTED_COMPLEX_VALUE = re.compile(r"[^\[\]\s\"']*")
_WHITESPACE = re.compile(r"\s*")
_INLINE_SPACE = re.compile(r"[ \t]*")


@dataclass
class _TagHead:
    """A successfully lexed opening tag head."""

    name_end: int
    end: int
    attributes_begin: int = NOT_SET
    attribute: Optional[str] = None
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass
class _OpenTag:
    """A tag on the parse stack waiting for its closing sequence."""

    node: TagNode
    name: str
    head_end: int


def _lex_value(source: str, begin: int, stop_at_space: bool) -> Optional[tuple[str, int, bool]]:
    """Lex an attribute value starting at ``begin``.

    Returns ``(value, end, quoted)`` or None for an unterminated quote.
    """
    if begin < len(source) and source[begin] in ATTRIBUTE_QUOTES:
        close = source.find(source[begin], begin + 1)
        if close == -1:
            return None
        return source[begin + 1 : close], close + 1, True

    pattern = _UNQUOTED_COMPLEX_VALUE if stop_at_space else _UNQUOTED_SIMPLE_VALUE
    match = pattern.match(source, begin)
    assert match is not None  # both patterns accept the empty string
    return match.group(), match.end(), False


def _lex_simple_attribute(source: str, name_end: int) -> Optional[_TagHead]:
    """Lex ``=value]`` following a tag name."""
    value_begin = name_end + 1
    lexed = _lex_value(source, value_begin, stop_at_space=False)
    if lexed is None:
        return None

    value, end, quoted = lexed
    if quoted:
        space = _INLINE_SPACE.match(source, end)
        assert space is not None
        end = space.end()

    if end >= len(source) or source[end] != TAG_CLOSE:
        return None
    return _TagHead(name_end=name_end, end=end + 1, attributes_begin=value_begin, attribute=value)


def _lex_complex_attributes(source: str, name_end: int) -> Optional[_TagHead]:
    """Lex `` key="value" key2=value2]`` following a tag name."""
    length = len(source)
    attributes: dict[str, str] = {}
    attributes_begin = NOT_SET
    pos = name_end

    while True:
        space = _WHITESPACE.match(source, pos)
        assert space is not None
        pos = space.end()
        if pos >= length:
            return None
        if source[pos] == TAG_CLOSE:
            break

        key = _NAME_PATTERN.match(source, pos)
        if key is None:
            return None
        if attributes_begin == NOT_SET:
            attributes_begin = pos

        key_end = key.end()
        if key_end >= length or source[key_end] != ATTRIBUTE_ASSIGN:
            return None

        lexed = _lex_value(source, key_end + 1, stop_at_space=True)
        if lexed is None:
            return None
        value, pos, _ = lexed
        if pos < length and source[pos] != TAG_CLOSE and not source[pos].isspace():
            return None
        attributes[key.group()] = value

    return _TagHead(name_end=name_end, end=pos + 1, attributes_begin=attributes_begin, attributes=attributes)


def lex_opening_tag(source: str, pos: int) -> Optional[_TagHead]:
    """Lex the opening tag head whose ``[`` is at ``pos``.

    Parameters
    ----------
    source : str
        Full source text
    pos : int
        Offset of the ``[`` character

    Returns
    -------
    _TagHead or None
        The lexed head, or None when the text at ``pos`` is not a valid
        opening tag (it is then ordinary text)

    """
    name = _NAME_PATTERN.match(source, pos + 1)
    if name is None or source[pos + 1] == TAG_CLOSING_MARKER:
        return None

    name_end = name.end()
    if name_end >= len(source):
        return None

    char = source[name_end]
    if char == TAG_CLOSE:
        return _TagHead(name_end=name_end, end=name_end + 1)
    if char == ATTRIBUTE_ASSIGN:
        return _lex_simple_attribute(source, name_end)
    if char.isspace():
        return _lex_complex_attributes(source, name_end)
    return None


class _TreeBuilder:
    """Single-use state for one parse: the stack, the roots and the text cursor."""

    def __init__(self, source: str, options: BBCodeParserOptions):
        self.source = source
        self.options = options
        self.roots: list[Node] = []
        self.stack: list[_OpenTag] = []
        self.text_start = 0

    def build(self) -> list[Node]:
        source = self.source
        length = len(source)

        pos = source.find(TAG_OPEN)
        while pos != -1:
            if source.startswith(TAG_CLOSING_MARKER, pos + 1):
                pos = self._consume_closing_tag(pos)
            else:
                pos = self._consume_opening_tag(pos)
            pos = source.find(TAG_OPEN, pos)

        self._flush_text(length)
        while self.stack:
            self._finalize_unclosed(self.stack.pop(), length)
        return self.roots

    def _container(self) -> list[Node]:
        if self.stack:
            return self.stack[-1].node.children
        return self.roots

    def _flush_text(self, end: int) -> None:
        if end > self.text_start:
            self._container().append(TextNode(self.text_start, end))
        self.text_start = end

    def _finalize_unclosed(self, open_tag: _OpenTag, end: int) -> None:
        """Finish a tag that has no closing sequence at offset ``end``."""
        node = open_tag.node
        if end > open_tag.head_end:
            node.body_begin = open_tag.head_end
            node.body_end = end
            node.tag_end = end
        else:
            node.tag_end = open_tag.head_end

    def _find_open(self, name: str) -> Optional[int]:
        for index in range(len(self.stack) - 1, -1, -1):
            if self.stack[index].name == name:
                return index
        return None

    def _consume_closing_tag(self, pos: int) -> int:
        match = _CLOSING_TAG_PATTERN.match(self.source, pos)
        if match is None:
            logger.debug("Malformed closing sequence at offset %d kept as text", pos)
            return pos + 1

        name = match.group(1)
        index = self._find_open(name)
        if index is None:
            logger.debug("Unmatched closing tag [/%s] at offset %d kept as text", name, pos)
            return match.end()

        self._flush_text(pos)
        while len(self.stack) - 1 > index:
            self._finalize_unclosed(self.stack.pop(), pos)

        open_tag = self.stack.pop()
        node = open_tag.node
        node.body_begin = open_tag.head_end
        node.body_end = pos
        node.tag_end = match.end()
        self.text_start = node.tag_end
        return node.tag_end

    def _consume_opening_tag(self, pos: int) -> int:
        source = self.source
        head = lex_opening_tag(source, pos)
        if head is None:
            logger.debug("Malformed tag head at offset %d kept as text", pos)
            return pos + 1

        name = source[pos + 1 : head.name_end]
        implicit_close = (
            name in self.options.implicitly_closed_tags and bool(self.stack) and self.stack[-1].name == name
        )
        depth = len(self.stack) - (1 if implicit_close else 0)
        if depth >= self.options.max_nesting_depth:
            logger.debug("Tag [%s] at offset %d exceeds nesting depth %d, kept as text", name, pos, depth)
            return head.end

        self._flush_text(pos)
        if implicit_close:
            logger.debug("Tag [%s] at offset %d implicitly closes the previous one", name, pos)
            self._finalize_unclosed(self.stack.pop(), pos)

        node = TagNode(
            tag_begin=pos,
            name_end=head.name_end,
            attributes_begin=head.attributes_begin,
            attribute=head.attribute,
            attributes=head.attributes,
        )
        self._container().append(node)
        self.text_start = head.end

        if name in self.options.standalone_tags:
            node.tag_end = head.end
            return head.end

        if name in self.options.preformatted_tags:
            close = source.find(f"{TAG_OPEN}{TAG_CLOSING_MARKER}{name}{TAG_CLOSE}", head.end)
            if close != -1:
                if close > head.end:
                    node.children.append(TextNode(head.end, close))
                node.body_begin = head.end
                node.body_end = close
                node.tag_end = close + len(name) + 3
                self.text_start = node.tag_end
                return node.tag_end
            logger.debug("Preformatted tag [%s] at offset %d has no closing tag, parsing body", name, pos)

        self.stack.append(_OpenTag(node=node, name=name, head_end=head.end))
        return head.end


class BBCodeParser(BaseParser):
    """Parse BBCode markup into an offset-addressed document tree.

    The parser keeps no state between calls, so one instance can be reused
    (and shared between threads).

    Parameters
    ----------
    options : BBCodeParserOptions or None, default = None
        Parser configuration options

    Examples
    --------
    Basic parsing:

        >>> parser = BBCodeParser()
        >>> doc = parser.parse("[b]Bold[/b] and [i]italic[/i] text")
        >>> [doc.tag_name(tag) for tag in doc.tag_nodes()]
        ['b', 'i']

    Emoticons without a body:

        >>> options = BBCodeParserOptions(standalone_tags={":)"})
        >>> doc = BBCodeParser(options).parse("Hi [:)] there")

    """

    def __init__(self, options: BBCodeParserOptions | None = None):
        """Initialize the BBCode parser with options."""
        BaseParser._validate_options_type(options, BBCodeParserOptions, "bbcode")
        options = options or BBCodeParserOptions()
        super().__init__(options)
        self.options: BBCodeParserOptions = options

    def parse(self, input_data: ParserInput) -> Document:
        """Parse BBCode input into a Document.

        Parameters
        ----------
        input_data : str, bytes, Path or file-like
            BBCode to parse. A ``str`` is always the markup itself; bytes and
            streams are decoded with encoding detection; a ``Path`` is read.

        Returns
        -------
        Document
            Document owning the source text and the parsed root nodes

        """
        source = self._load_text_content(input_data)
        roots = _TreeBuilder(source, self.options).build()
        logger.debug("Parsed %d characters into %d root nodes", len(source), len(roots))
        return Document(source, roots)
