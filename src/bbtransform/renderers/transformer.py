#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtransform/renderers/transformer.py
"""Rule-driven transformation of a parsed document into output text.

The transformer walks a :class:`~bbtransform.ast.Document` in document order.
For every tag node a caller-supplied predicate decides whether the tag is
rendered through a tag renderer or reproduced literally. Literal
reconstruction copies the original opening head and closing sequence from
the source, so a predicate that always answers False reproduces the input
exactly:

    >>> doc = BBCodeParser().parse("[b]x[/b] [:)]")
    >>> transform(doc, lambda node: False) == doc.source
    True

Tag renderers receive the tag's :class:`TagAttributes` and the already
rendered children, and return the replacement text:

    >>> transform(doc, lambda node: True, {"b": lambda tag, body: f"<b>{body}</b>"})
    '<b>x</b> [:)]'

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Iterator, Mapping, Optional, Sequence

from bbtransform.ast import Document, Node, NodeVisitor, TagNode, TextNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TagAttributes:
    """Read-only view of one tag handed to a tag renderer.

    Parameters
    ----------
    name : str
        Tag name as written in the source
    attribute : str or None
        Simple attribute value from ``[name=value]``
    attributes : Mapping[str, str]
        Complex attributes from ``[name key="value"]``, in source order
    body : str
        Raw, unrendered source of the tag's body
    has_closing_tag : bool
        Whether the tag was closed by an explicit ``[/name]``
    opening_tag : str
        Opening head exactly as written
    closing_tag : str
        Closing sequence exactly as written, or an empty string

    """

    name: str
    attribute: Optional[str] = None
    attributes: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    body: str = ""
    has_closing_tag: bool = False
    opening_tag: str = ""
    closing_tag: str = ""

    @classmethod
    def from_node(cls, document: Document, node: TagNode) -> TagAttributes:
        """Build the attribute view of ``node`` using the source in ``document``."""
        name = document.tag_name(node)
        if name is None:
            raise ValueError(f"Tag node at offset {node.tag_begin} has no name")
        return cls(
            name=name,
            attribute=node.attribute,
            attributes=MappingProxyType(dict(node.attributes)),
            body=document.body(node),
            has_closing_tag=node.has_closing_tag,
            opening_tag=document.opening_tag(node),
            closing_tag=document.closing_tag(node),
        )

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Return a complex attribute value, or ``default`` when absent."""
        return self.attributes.get(key, default)


TagRenderer = Callable[[TagAttributes, str], str]
TextRenderer = Callable[[str], str]
TransformPredicate = Callable[[TagNode], bool]


class _TransformVisitor(NodeVisitor):
    """Visitor returning the rendered text of each node it visits.

    Tag bodies are rendered bottom-up from an explicit stack of open tags,
    so nesting depth is limited by memory rather than by the interpreter's
    recursion limit.
    """

    def __init__(
        self,
        document: Document,
        should_transform: TransformPredicate,
        tag_renderers: Mapping[str, TagRenderer],
        text_renderer: Optional[TextRenderer],
        literal_renderer: Optional[TextRenderer],
    ):
        self.document = document
        self.should_transform = should_transform
        self.tag_renderers = tag_renderers
        self.text_renderer = text_renderer
        self.literal_renderer = literal_renderer

    def visit_document(self, node: Document) -> str:
        return self._render_sequence(node.children)

    def visit_text_node(self, node: TextNode) -> str:
        text = self.document.text(node)
        if self.text_renderer is not None:
            return self.text_renderer(text)
        return text

    def visit_tag_node(self, node: TagNode) -> str:
        return self._render_tag(node, self._render_sequence(node.children))

    def _render_sequence(self, nodes: Sequence[Node]) -> str:
        """Render sibling ``nodes`` and everything below them, in document order."""
        output: list[str] = []
        # Each frame: the open tag (None for the outer sequence), its remaining children, rendered parts
        frames: list[tuple[Optional[TagNode], Iterator[Node], list[str]]] = [(None, iter(nodes), output)]
        while frames:
            tag, remaining, parts = frames[-1]
            child = next(remaining, None)
            if child is None:
                frames.pop()
                if tag is not None:
                    frames[-1][2].append(self._render_tag(tag, "".join(parts)))
            elif isinstance(child, TagNode):
                frames.append((child, iter(child.children), []))
            else:
                parts.append(child.accept(self))
        return "".join(output)

    def _render_tag(self, node: TagNode, content: str) -> str:
        if self.should_transform(node):
            name = self.document.tag_name(node)
            renderer = self.tag_renderers.get(name) if name is not None else None
            if renderer is not None:
                return renderer(TagAttributes.from_node(self.document, node), content)
            logger.debug("No renderer for tag %r at offset %d, keeping it literal", name, node.tag_begin)

        return self._literal(self.document.opening_tag(node)) + content + self._literal(self.document.closing_tag(node))

    def _literal(self, markup: str) -> str:
        if markup and self.literal_renderer is not None:
            return self.literal_renderer(markup)
        return markup


class BBCodeTransformer:
    """Render documents through caller-supplied tag and text renderers.

    The transformer keeps no per-call state; one instance may serve
    concurrent calls on read-only documents.

    Parameters
    ----------
    tag_renderers : Mapping[str, TagRenderer] or None, default = None
        Default tag renderers used when a call does not supply its own
    text_renderer : callable or None, default = None
        Default text renderer used when a call does not supply its own

    """

    def __init__(
        self,
        tag_renderers: Optional[Mapping[str, TagRenderer]] = None,
        text_renderer: Optional[TextRenderer] = None,
    ):
        self.tag_renderers: Mapping[str, TagRenderer] = tag_renderers if tag_renderers is not None else {}
        self.text_renderer = text_renderer

    def transform(
        self,
        document: Document,
        should_transform: TransformPredicate,
        tag_renderers: Optional[Mapping[str, TagRenderer]] = None,
        text_renderer: Optional[TextRenderer] = None,
        literal_renderer: Optional[TextRenderer] = None,
    ) -> str:
        """Transform a document into output text.

        Parameters
        ----------
        document : Document
            Parsed document; it is not modified
        should_transform : callable
            Predicate deciding, per tag node, whether the tag is rendered.
            The node's own ``transform`` flag is not consulted; predicates
            that want to honour it should read it themselves.
        tag_renderers : Mapping[str, TagRenderer], optional
            Tag name to renderer. A transformed tag without a renderer is
            reproduced literally.
        text_renderer : callable, optional
            Applied to the raw text of every text node
        literal_renderer : callable, optional
            Applied to the opening head and closing sequence of tags that are
            reproduced literally (e.g. to escape them inside HTML)

        Returns
        -------
        str
            The transformed text

        Raises
        ------
        Exception
            Whatever a tag or text renderer raises, unchanged

        """
        visitor = _TransformVisitor(
            document,
            should_transform,
            tag_renderers if tag_renderers is not None else self.tag_renderers,
            text_renderer if text_renderer is not None else self.text_renderer,
            literal_renderer,
        )
        return document.accept(visitor)


def transform(
    document: Document,
    should_transform: TransformPredicate,
    tag_renderers: Optional[Mapping[str, TagRenderer]] = None,
    text_renderer: Optional[TextRenderer] = None,
    literal_renderer: Optional[TextRenderer] = None,
) -> str:
    """Transform a document with a one-off :class:`BBCodeTransformer`.

    See :meth:`BBCodeTransformer.transform` for the parameters.
    """
    return BBCodeTransformer().transform(
        document,
        should_transform,
        tag_renderers=tag_renderers,
        text_renderer=text_renderer,
        literal_renderer=literal_renderer,
    )
