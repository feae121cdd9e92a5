#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtransform/ast/visitors.py
"""Visitor pattern implementation for document tree traversal.

Visitors separate algorithms (validation, tree dumps, statistics) from the
two node classes. Each node's ``accept`` dispatches to ``visit_text_node``
or ``visit_tag_node``; the document dispatches to ``visit_document``.

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Sequence

from bbtransform.ast.document import Document
from bbtransform.ast.nodes import NOT_SET, Node, TagNode, TextNode
from bbtransform.exceptions import OffsetInvariantError

logger = logging.getLogger(__name__)


class NodeVisitor(ABC):
    """Abstract base class for document tree visitors.

    Examples
    --------
    Counting tags:

        >>> class TagCounter(NodeVisitor):
        ...     def __init__(self):
        ...         self.count = 0
        ...
        ...     def visit_text_node(self, node):
        ...         pass
        ...
        ...     def visit_tag_node(self, node):
        ...         self.count += 1
        ...         self.visit_children(node)
        ...
        >>> counter = TagCounter()
        >>> document.accept(counter)

    """

    def visit_document(self, node: Document) -> Any:
        """Visit the document by visiting each root node in order."""
        for child in node.children:
            child.accept(self)

    @abstractmethod
    def visit_text_node(self, node: TextNode) -> Any:
        """Visit a text leaf."""
        pass

    @abstractmethod
    def visit_tag_node(self, node: TagNode) -> Any:
        """Visit a tag branch. Implementations decide whether to descend."""
        pass

    def visit_children(self, node: TagNode) -> None:
        """Visit every child of ``node`` in document order."""
        for child in node.children:
            child.accept(self)


class OffsetValidator(NodeVisitor):
    """Visitor that checks the offset invariants of a parsed tree.

    Checked invariants:

    - every node lies inside the source and ``tag_begin <= tag_end``
    - ``tag_begin <= name_end <= tag_end`` for named tags
    - ``name_end <= attributes_begin`` when attributes are present
    - ``attributes_begin (or name_end) <= body_begin <= body_end <= tag_end``
      when the tag has a body
    - siblings do not overlap and stay in document order
    - children lie inside their parent's body

    Parameters
    ----------
    strict : bool, default = True
        Raise :class:`OffsetInvariantError` on the first violation. When
        False, violations are collected in :attr:`errors` and logged.

    """

    def __init__(self, strict: bool = True):
        self.strict = strict
        self.errors: list[str] = []
        self._length = 0

    def validate(self, document: Document) -> list[str]:
        """Validate a document and return the collected error messages."""
        self.errors = []
        self._length = len(document)
        document.accept(self)
        return self.errors

    def visit_document(self, node: Document) -> None:
        self._check_siblings(node.children, 0, len(node))
        self._check_subtrees(node.children)

    def visit_text_node(self, node: TextNode) -> None:
        self._check_range(node)

    def visit_tag_node(self, node: TagNode) -> None:
        self._check_subtrees([node])

    def _check_subtrees(self, nodes: Sequence[Node]) -> None:
        """Check ``nodes`` and all their descendants from an explicit stack."""
        stack = list(reversed(nodes))
        while stack:
            node = stack.pop()
            if isinstance(node, TagNode):
                self._check_tag(node)
            else:
                self._check_range(node)
            stack.extend(reversed(node.children))

    def _check_tag(self, node: TagNode) -> None:
        self._check_range(node)

        if node.name_end != NOT_SET and not node.tag_begin <= node.name_end <= node.tag_end:
            self._report(node, f"name_end {node.name_end} outside tag [{node.tag_begin}, {node.tag_end})")

        if node.attributes_begin != NOT_SET and node.attributes_begin < node.name_end:
            self._report(node, f"attributes_begin {node.attributes_begin} precedes name_end {node.name_end}")

        if node.has_body:
            lower = node.attributes_begin if node.attributes_begin != NOT_SET else node.name_end
            if not lower <= node.body_begin <= node.body_end <= node.tag_end:
                self._report(
                    node,
                    f"body [{node.body_begin}, {node.body_end}) not ordered within "
                    f"[{lower}, {node.tag_end}]",
                )
            self._check_siblings(node.children, node.body_begin, node.body_end)
        elif node.children:
            self._report(node, "tag without a body has children")

    def _check_range(self, node: Node) -> None:
        if not 0 <= node.tag_begin <= node.tag_end <= self._length:
            self._report(node, f"range [{node.tag_begin}, {node.tag_end}) invalid for length {self._length}")

    def _check_siblings(self, siblings: Sequence[Node], lower: int, upper: int) -> None:
        position = lower
        for sibling in siblings:
            if sibling.tag_begin < position:
                self._report(sibling, f"node starting at {sibling.tag_begin} overlaps previous sibling or parent")
            position = max(position, sibling.tag_end)
        if siblings and position > upper:
            self._report(siblings[-1], f"children extend to {position}, past their container end {upper}")

    def _report(self, node: Node, message: str) -> None:
        if self.strict:
            raise OffsetInvariantError(message, node=node)
        logger.debug("Offset invariant violated: %s", message)
        self.errors.append(message)


def validate_offsets(document: Document, strict: bool = True) -> list[str]:
    """Check the offset invariants of ``document``.

    Parameters
    ----------
    document : Document
        Parsed document to check
    strict : bool, default = True
        Raise on the first violation instead of collecting messages

    Returns
    -------
    list of str
        Violation messages (always empty in strict mode)

    Raises
    ------
    OffsetInvariantError
        In strict mode, when an invariant is violated

    """
    return OffsetValidator(strict=strict).validate(document)
