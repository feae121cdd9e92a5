"""Utility functions for cli output."""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/bbtransform/cli/output.py
import argparse
import sys
from typing import IO, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from bbtransform.ast import Document, Node, NodeVisitor, TagNode, TextNode

_TEXT_PREVIEW_LENGTH = 40


def should_use_rich_output(args: argparse.Namespace, stream: Optional[IO[str]] = None) -> bool:
    """Determine if Rich output should be used based on TTY and args.

    Rich output is used when ``--rich`` is set and either ``--force-rich``
    is set or the target stream is a TTY.
    """
    if not args.rich:
        return False

    if getattr(args, "force_rich", False):
        return True

    target = stream or sys.stdout
    isatty = getattr(target, "isatty", None)
    return bool(callable(isatty) and isatty())


def describe_node(document: Document, node: Node) -> str:
    """Return a one-line description of a node with its offsets.

    Examples
    --------
        >>> describe_node(doc, doc.children[0])
        "Text [0, 6) 'Hello '"

    """
    if isinstance(node, TextNode):
        text = document.text(node)
        if len(text) > _TEXT_PREVIEW_LENGTH:
            text = text[:_TEXT_PREVIEW_LENGTH] + "..."
        return f"Text [{node.tag_begin}, {node.tag_end}) {text!r}"

    assert isinstance(node, TagNode)
    parts = [f"Tag {document.tag_name(node)!r} [{node.tag_begin}, {node.tag_end})"]
    if node.has_body:
        parts.append(f"body [{node.body_begin}, {node.body_end})")
    if node.attribute is not None:
        parts.append(f"attribute={node.attribute!r}")
    if node.attributes:
        parts.append(f"attributes={dict(node.attributes)!r}")
    if not node.has_closing_tag:
        parts.append("unclosed")
    if not node.transform:
        parts.append("literal")
    return " ".join(parts)


class TreeFormatter(NodeVisitor):
    """Visitor producing an indented plain-text outline of a document."""

    def __init__(self, document: Document, indent: str = "  "):
        self.document = document
        self.indent = indent
        self.lines: list[str] = []
        self._depth = 0

    def format(self) -> str:
        self.lines = [f"Document ({len(self.document)} characters)"]
        self._depth = 1
        self.document.accept(self)
        return "\n".join(self.lines)

    def visit_document(self, node: Document) -> None:
        self._outline(node.children)

    def visit_text_node(self, node: TextNode) -> None:
        self._outline([node])

    def visit_tag_node(self, node: TagNode) -> None:
        self._outline([node])

    def _outline(self, nodes: Sequence[Node]) -> None:
        stack = [(node, self._depth) for node in reversed(nodes)]
        while stack:
            node, depth = stack.pop()
            self.lines.append(self.indent * depth + describe_node(self.document, node))
            stack.extend((child, depth + 1) for child in reversed(node.children))


class RichTreeBuilder(NodeVisitor):
    """Visitor building a :class:`rich.tree.Tree` of a document."""

    def __init__(self, document: Document):
        self.document = document
        self.root = Tree(f"[bold]Document[/bold] ({len(document)} characters)")
        self._branch = self.root

    def build(self) -> Tree:
        self.document.accept(self)
        return self.root

    def visit_document(self, node: Document) -> None:
        self._grow(node.children)

    def visit_text_node(self, node: TextNode) -> None:
        self._grow([node])

    def visit_tag_node(self, node: TagNode) -> None:
        self._grow([node])

    def _grow(self, nodes: Sequence[Node]) -> None:
        stack = [(node, self._branch) for node in reversed(nodes)]
        while stack:
            node, parent = stack.pop()
            label = escape(describe_node(self.document, node))
            if isinstance(node, TagNode):
                branch = parent.add(f"[cyan]{label}[/cyan]")
                stack.extend((child, branch) for child in reversed(node.children))
            else:
                parent.add(f"[dim]{label}[/dim]")


def format_tree(document: Document) -> str:
    """Return a plain-text outline of the document tree."""
    return TreeFormatter(document).format()


def print_rich_tree(document: Document, stream: Optional[IO[str]] = None) -> None:
    """Print the document tree with Rich formatting."""
    console = Console(file=stream or sys.stdout)
    console.print(RichTreeBuilder(document).build())
