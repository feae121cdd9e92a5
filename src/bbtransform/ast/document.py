#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtransform/ast/document.py
"""Document: the source buffer and root of a parsed node tree.

The document acts as an arena. It owns the immutable source text and the
root node sequence, and it is the only component that materialises
substrings; nodes refer to ranges of the source by offset only.

Examples
--------
    >>> from bbtransform import parse
    >>> from bbtransform.ast import TagNode
    >>> doc = parse("Hello [b]World[/b]")
    >>> [doc.tag_name(node) for node in doc.iter_nodes(TagNode)]
    ['b']
    >>> doc.walk(TagNode, lambda node: setattr(node, "transform", False))

"""

from __future__ import annotations

from typing import Any, Callable, Iterator, Optional, Sequence, Union, overload

from bbtransform.ast.nodes import NOT_SET, Node, TagNode, TextNode

NodeVisitorFunc = Callable[[Node], Any]


class Document:
    """Immutable source text plus the root sequence of parsed nodes.

    Parameters
    ----------
    source : str
        The complete markup text the offsets refer to
    children : sequence of Node, default empty
        Top-level nodes in document order

    """

    __slots__ = ("_source", "_children")

    def __init__(self, source: str, children: Sequence[Node] = ()):
        self._source = source
        self._children: tuple[Node, ...] = tuple(children)

    @property
    def source(self) -> str:
        """The original markup text."""
        return self._source

    @property
    def children(self) -> tuple[Node, ...]:
        """Top-level nodes in document order."""
        return self._children

    def __len__(self) -> int:
        return len(self._source)

    def __repr__(self) -> str:
        return f"Document(length={len(self._source)}, children={len(self._children)})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return self._source == other._source and self._children == other._children

    __hash__ = None  # type: ignore[assignment]

    # ------------------------------------------------------------------
    # Substring access
    # ------------------------------------------------------------------

    def substring(self, begin: int, end: int) -> str:
        """Return the exact source characters in ``[begin, end)``.

        Parameters
        ----------
        begin : int
            Offset of the first character
        end : int
            Offset one past the last character

        Returns
        -------
        str
            The source slice

        Raises
        ------
        ValueError
            If the range is not within ``0 <= begin <= end <= len(source)``.
            This catches accidental use of the ``-1`` sentinel offset.

        """
        if not 0 <= begin <= end <= len(self._source):
            raise ValueError(f"Invalid source range [{begin}, {end}) for a document of length {len(self._source)}")
        return self._source[begin:end]

    def text(self, node: TextNode) -> str:
        """Return the raw text of a text node."""
        return self.substring(node.tag_begin, node.tag_end)

    def tag_name(self, node: TagNode) -> Optional[str]:
        """Return the name of a tag node, or None when it has no name range."""
        if node.name_end > node.tag_begin + 1:
            return self.substring(node.tag_begin + 1, node.name_end)
        return None

    def opening_tag(self, node: TagNode) -> str:
        """Return the opening tag head exactly as written, brackets included."""
        return self.substring(node.tag_begin, node.head_end)

    def closing_tag(self, node: TagNode) -> str:
        """Return the closing sequence exactly as written, or an empty string."""
        if node.body_end == NOT_SET or not node.has_closing_tag:
            return ""
        return self.substring(node.body_end, node.tag_end)

    def body(self, node: TagNode) -> str:
        """Return the raw source of the tag's body, or an empty string."""
        if not node.has_body:
            return ""
        return self.substring(node.body_begin, node.body_end)

    def attribute_text(self, node: TagNode) -> str:
        """Return the attribute source of the opening head, without the closing ``]``.

        For ``[size="14"]`` this is ``"14"`` including the quotes; for a tag
        without attributes it is an empty string.
        """
        if node.attributes_begin == NOT_SET:
            return ""
        return self.substring(node.attributes_begin, node.head_end - 1)

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def iter_nodes(self, node_type: Optional[type[Node]] = None) -> Iterator[Node]:
        """Yield every node reachable from the roots in pre-order document order.

        Parameters
        ----------
        node_type : type, optional
            When given, only nodes of this variant are yielded

        """
        stack: list[Node] = list(reversed(self._children))
        while stack:
            node = stack.pop()
            if node_type is None or isinstance(node, node_type):
                yield node
            stack.extend(reversed(node.children))

    @overload
    def walk(self, visitor: NodeVisitorFunc, /) -> None: ...

    @overload
    def walk(self, node_type: type[Node], visitor: NodeVisitorFunc, /) -> None: ...

    def walk(
        self,
        node_type_or_visitor: Union[type[Node], NodeVisitorFunc],
        visitor: Optional[NodeVisitorFunc] = None,
        /,
    ) -> None:
        """Call a visitor for nodes of the tree in pre-order document order.

        ``walk(visitor)`` calls the visitor once for every node and leaves
        variant discrimination to it. ``walk(TagNode, visitor)`` calls it only
        for nodes of the given variant; other nodes are skipped without a
        call. Walks never rebuild or reorder the tree, so visitors may only
        mutate nodes in place (e.g. ``TagNode.transform``).

        Parameters
        ----------
        node_type_or_visitor : type or callable
            Either the node variant to filter on, or the visitor itself
        visitor : callable, optional
            The visitor, when a node variant was given first

        """
        if visitor is None:
            if isinstance(node_type_or_visitor, type):
                raise TypeError("walk() needs a visitor callable")
            node_type, callback = None, node_type_or_visitor
        else:
            if not (isinstance(node_type_or_visitor, type) and issubclass(node_type_or_visitor, Node)):
                raise TypeError(f"walk() node type must be a Node subclass, got {node_type_or_visitor!r}")
            node_type, callback = node_type_or_visitor, visitor

        for node in self.iter_nodes(node_type):
            callback(node)

    def tag_nodes(self) -> list[TagNode]:
        """Return every tag node in document order."""
        return [node for node in self.iter_nodes(TagNode) if isinstance(node, TagNode)]

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this document."""
        return visitor.visit_document(self)
