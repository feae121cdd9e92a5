#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtransform/ast/nodes.py
"""Node classes for the offset-addressed BBCode document tree.

Nodes never own text. Every node stores integer offsets into the single
immutable source buffer held by its :class:`~bbtransform.ast.document.Document`,
and the document is the only object that turns those offsets into strings.

Node Hierarchy
--------------
The node set is closed and has exactly two variants:

    - TextNode: a leaf covering one contiguous run of free text
    - TagNode: a branch covering one tag, its attributes and its body

The following BBCode shows how a TagNode's offsets line up with the source::

    [url=http://foo.com] http://foo.com [/url]
    ^    ^              ^               ^     ^
    1    2              3 <-- body -->  4     5

    1. tag_begin         (the opening "[")
    2. attributes_begin  (first character of the attribute text)
    3. body_begin        (one past the opening "]")
    4. body_end          (the "[" of the closing sequence)
    5. tag_end           (one past the closing "]")

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Sequence

from bbtransform.constants import NOT_SET

__all__ = ["NOT_SET", "Node", "TagNode", "TextNode"]


class Node(ABC):
    """Base class for the two node variants.

    Parameters
    ----------
    tag_begin : int
        Offset of the first character of the node in the source
    tag_end : int
        Offset one past the node's last character

    """

    tag_begin: int
    tag_end: int
    children: Sequence[Node]

    @property
    def span(self) -> tuple[int, int]:
        """The ``(tag_begin, tag_end)`` range covered by this node."""
        return self.tag_begin, self.tag_end

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with ``visit_text_node``/``visit_tag_node`` methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        pass


@dataclass(frozen=True)
class TextNode(Node):
    """Leaf node for a contiguous run of free text.

    Free text is always coalesced, so two TextNodes are never adjacent
    siblings in a parsed tree.

    Parameters
    ----------
    tag_begin : int
        Offset of the first character of the run
    tag_end : int
        Offset one past the last character of the run

    """

    tag_begin: int
    tag_end: int

    @property  # type: ignore[override]
    def children(self) -> tuple[Node, ...]:
        """Always empty; text nodes are leaves."""
        return ()

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this text node."""
        return visitor.visit_text_node(self)


@dataclass(eq=False)
class TagNode(Node):
    """Branch node for one parsed tag.

    The body of the tag lives in :attr:`children`; the TagNode itself only
    records where its head, body and closing sequence sit in the source.

    ``has_body`` and ``has_closing_tag`` describe what the parser found, not
    what a given tag requires, and are derived purely from offsets:

    1. Has closing tag and a body: ``[b]foo[/b]``
    2. Has closing tag and no body: ``[gameCard][/gameCard]``
    3. Has no closing tag and a body: ``[*]foo``
    4. Has no closing tag and no body: ``[:)]`` (emoticons)

    Parameters
    ----------
    tag_begin : int
        Offset of the opening ``[``
    tag_end : int, default NOT_SET
        Offset one past the last character of the tag (closing ``]`` when
        there is a closing sequence)
    name_end : int, default NOT_SET
        Offset one past the tag name
    attributes_begin : int, default NOT_SET
        Offset of the first attribute character, when attributes are present
    body_begin : int, default NOT_SET
        Offset of the first body character
    body_end : int, default NOT_SET
        Offset one past the last body character
    attribute : str or None, default None
        Simple attribute value, e.g. ``foo`` in ``[tag=foo]``
    attributes : dict of str to str, default empty dict
        Complex attributes, e.g. ``[tag width="100" height="200"]``; insertion
        ordered with unique keys
    children : list of Node, default empty list
        Body content in document order
    transform : bool, default True
        Caller-controlled flag marking the node as eligible for semantic
        rendering. The transformer itself never reads it; predicates may.

    """

    tag_begin: int
    tag_end: int = NOT_SET
    name_end: int = NOT_SET
    attributes_begin: int = NOT_SET
    body_begin: int = NOT_SET
    body_end: int = NOT_SET
    attribute: Optional[str] = None
    attributes: dict[str, str] = field(default_factory=dict)
    children: list[Node] = field(default_factory=list)  # type: ignore[assignment]
    transform: bool = field(default=True, compare=False)

    @property
    def has_body(self) -> bool:
        """Whether a non-empty body region was recorded."""
        return self.body_begin != NOT_SET and self.body_end != NOT_SET and self.body_begin != self.body_end

    @property
    def has_closing_tag(self) -> bool:
        """Whether the tag was terminated by a closing sequence."""
        if self.has_body:
            return self.body_end != self.tag_end
        return self.name_end + 1 != self.tag_end

    @property
    def head_end(self) -> int:
        """Offset one past the ``]`` of the opening tag head."""
        if self.body_begin != NOT_SET:
            return self.body_begin
        return self.tag_end

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this tag node."""
        return visitor.visit_tag_node(self)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, TagNode):
            return NotImplemented

        # Iterative: trees may nest deeper than the interpreter recursion limit
        pending: list[tuple[Node, Node]] = [(self, other)]
        while pending:
            left, right = pending.pop()
            if left is right:
                continue
            if isinstance(left, TagNode) and isinstance(right, TagNode):
                if left._key() != right._key() or len(left.children) != len(right.children):
                    return False
                pending.extend(zip(left.children, right.children))
            elif left != right:
                return False
        return True

    def __hash__(self) -> int:
        return hash(tuple(_structure_key(node) for node in _preorder(self)))

    def _key(self) -> tuple[Any, ...]:
        return (
            self.tag_begin,
            self.tag_end,
            self.name_end,
            self.attributes_begin,
            self.body_begin,
            self.body_end,
            self.attribute,
            tuple(self.attributes.items()),
            self.has_body,
            self.has_closing_tag,
        )


def _preorder(node: Node) -> Iterator[Node]:
    """Yield ``node`` and its descendants in document order, without recursion."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def _structure_key(node: Node) -> Any:
    if isinstance(node, TagNode):
        return node._key(), len(node.children)
    return node
