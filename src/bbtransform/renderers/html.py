#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtransform/renderers/html.py
"""HTML rendering of BBCode documents.

This module provides the common BBCode vocabulary as HTML tag renderers and
an :class:`HtmlRenderer` that combines them with the generic transformer.
Every value taken from the markup (text, attribute values, URLs) is escaped
before it reaches the output, and link or image targets with dangerous
schemes are dropped.

Renderers are plain callables taking the tag's
:class:`~bbtransform.renderers.transformer.TagAttributes` and its rendered
children, so custom vocabularies can be built by copying the default
registry and replacing entries:

    >>> registry = default_html_renderers()
    >>> registry["b"] = lambda tag, content: f"<b>{content}</b>"
    >>> HtmlRenderer(tag_renderers=registry).render_to_string(doc)

"""

from __future__ import annotations

import logging
import re
from collections.abc import MutableMapping
from html import escape
from typing import Callable, Iterator, Mapping, Optional

from bbtransform.ast import Document, TagNode
from bbtransform.constants import HTML_FONT_SIZE_KEYWORDS, HTML_MAX_FONT_SIZE, HTML_STANDALONE_TAGS
from bbtransform.options.bbcode import BBCodeParserOptions
from bbtransform.options.html import HtmlRendererOptions
from bbtransform.renderers.base import BaseRenderer
from bbtransform.renderers.transformer import BBCodeTransformer, TagAttributes, TagRenderer
from bbtransform.utils.html_sanitizer import sanitize_html_string, sanitize_url

logger = logging.getLogger(__name__)

_COLOR_PATTERN = re.compile(r"#(?:[0-9a-f]{3}|[0-9a-f]{6})|[a-z]{3,20}", re.IGNORECASE)
_SIZE_PATTERN = re.compile(r"(\d{1,3})(px|pt|%)?")
_FONT_PATTERN = re.compile(r"[a-z0-9 ,\-]{1,64}", re.IGNORECASE)
_DIMENSIONS_PATTERN = re.compile(r"(\d{1,4})x(\d{1,4})")
_EMAIL_PATTERN = re.compile(r"[^@\s<>\"']+@[^@\s<>\"']+\.[^@\s<>\"']+")
_YOUTUBE_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]{11}")
_YOUTUBE_URL_PATTERN = re.compile(r"(?:[?&]v=|youtu\.be/|/embed/|/shorts/)([A-Za-z0-9_-]{11})")

_ORDERED_LIST_TYPES = frozenset({"1", "a", "A", "i", "I"})


class TagRendererRegistry(MutableMapping):
    """Case-insensitive mapping of BBCode tag names to tag renderers.

    Lookups lower-case the tag name, so ``[B]`` and ``[b]`` share a renderer.

    Examples
    --------
        >>> registry = TagRendererRegistry()
        >>> @registry.register("spoiler")
        ... def render_spoiler(tag, content):
        ...     return f"<details>{content}</details>"
        >>> "SPOILER" in registry
        True

    """

    def __init__(self, renderers: Optional[Mapping[str, TagRenderer]] = None):
        self._renderers: dict[str, TagRenderer] = {}
        if renderers is not None:
            self.update(renderers)

    def __getitem__(self, name: str) -> TagRenderer:
        return self._renderers[name.lower()]

    def __setitem__(self, name: str, renderer: TagRenderer) -> None:
        if not callable(renderer):
            raise TypeError(f"Renderer for tag {name!r} must be callable")
        self._renderers[name.lower()] = renderer

    def __delitem__(self, name: str) -> None:
        del self._renderers[name.lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._renderers)

    def __len__(self) -> int:
        return len(self._renderers)

    def __repr__(self) -> str:
        return f"TagRendererRegistry({sorted(self._renderers)!r})"

    def register(self, *names: str) -> Callable[[TagRenderer], TagRenderer]:
        """Register the decorated function as the renderer for ``names``."""

        def decorator(renderer: TagRenderer) -> TagRenderer:
            for name in names:
                self[name] = renderer
            return renderer

        return decorator

    def copy(self) -> TagRendererRegistry:
        return TagRendererRegistry(self._renderers)


# ---------------------------------------------------------------------------
# Value validation
# ---------------------------------------------------------------------------


def css_font_size(value: Optional[str]) -> Optional[str]:
    """Return a CSS ``font-size`` for a ``[size]`` value, or None if invalid.

    Examples
    --------
        >>> css_font_size("14")
        '14px'
        >>> css_font_size("large")
        'large'
        >>> css_font_size("9000") is None
        True

    """
    if not value:
        return None
    value = value.strip().lower()
    if value in HTML_FONT_SIZE_KEYWORDS:
        return value

    match = _SIZE_PATTERN.fullmatch(value)
    if match is None:
        return None
    number, unit = int(match.group(1)), match.group(2) or "px"
    limit = 500 if unit == "%" else HTML_MAX_FONT_SIZE
    if not 1 <= number <= limit:
        return None
    return f"{number}{unit}"


def css_color(value: Optional[str]) -> Optional[str]:
    """Return a CSS colour for a ``[color]`` value, or None if invalid."""
    if value and _COLOR_PATTERN.fullmatch(value.strip()):
        return value.strip()
    return None


def youtube_video_id(value: str) -> Optional[str]:
    """Extract an 11 character video id from a bare id or a YouTube URL."""
    value = value.strip()
    if _YOUTUBE_ID_PATTERN.fullmatch(value):
        return value
    match = _YOUTUBE_URL_PATTERN.search(value)
    return match.group(1) if match else None


# ---------------------------------------------------------------------------
# Tag renderers
# ---------------------------------------------------------------------------


def _element(html_tag: str, attributes: str = "") -> TagRenderer:
    """Build a renderer wrapping the rendered children in one element."""

    def render(tag: TagAttributes, content: str) -> str:
        return f"<{html_tag}{attributes}>{content}</{html_tag}>"

    return render


def _render_size(tag: TagAttributes, content: str) -> str:
    size = css_font_size(tag.attribute)
    if size is None:
        return content
    return f'<span style="font-size: {size}">{content}</span>'


def _render_color(tag: TagAttributes, content: str) -> str:
    color = css_color(tag.attribute)
    if color is None:
        return content
    return f'<span style="color: {escape(color)}">{content}</span>'


def _render_font(tag: TagAttributes, content: str) -> str:
    family = (tag.attribute or "").strip()
    if not _FONT_PATTERN.fullmatch(family):
        return content
    return f'<span style="font-family: {escape(family)}">{content}</span>'


def _render_quote(tag: TagAttributes, content: str) -> str:
    author = tag.attribute or tag.get("author") or tag.get("name")
    if author:
        return f"<blockquote><cite>{escape(author)} wrote:</cite>{content}</blockquote>"
    return f"<blockquote>{content}</blockquote>"


def _render_code(tag: TagAttributes, content: str) -> str:
    language = tag.attribute or tag.get("lang")
    class_attr = f' class="language-{escape(language.strip())}"' if language and language.strip() else ""
    return f"<pre><code{class_attr}>{escape(tag.body, quote=False)}</code></pre>"


def _render_noparse(tag: TagAttributes, content: str) -> str:
    return escape(tag.body, quote=False)


def _render_url(tag: TagAttributes, content: str) -> str:
    target = tag.attribute or tag.get("href") or tag.body
    href = sanitize_url(target)
    if not href:
        return content
    return f'<a href="{escape(href)}" rel="nofollow">{content}</a>'


def _render_email(tag: TagAttributes, content: str) -> str:
    address = (tag.attribute or tag.body).strip()
    if not _EMAIL_PATTERN.fullmatch(address):
        return content
    return f'<a href="mailto:{escape(address)}">{content}</a>'


def _render_img(tag: TagAttributes, content: str) -> str:
    src = sanitize_url(tag.body)
    if not src:
        return content

    width, height = tag.get("width"), tag.get("height")
    dimensions = _DIMENSIONS_PATTERN.fullmatch(tag.attribute.strip()) if tag.attribute else None
    if dimensions:
        width, height = dimensions.groups()

    size_attrs = ""
    if width and width.isdigit():
        size_attrs += f' width="{width}"'
    if height and height.isdigit():
        size_attrs += f' height="{height}"'
    alt = escape(tag.get("alt", "") or "")
    return f'<img src="{escape(src)}" alt="{alt}"{size_attrs}>'


def _render_list(tag: TagAttributes, content: str) -> str:
    list_type = (tag.attribute or "").strip()
    if list_type in _ORDERED_LIST_TYPES:
        type_attr = "" if list_type == "1" else f' type="{list_type}"'
        return f"<ol{type_attr}>{content}</ol>"
    return f"<ul>{content}</ul>"


def _render_hr(tag: TagAttributes, content: str) -> str:
    return f"<hr>{content}"


def _render_br(tag: TagAttributes, content: str) -> str:
    return f"<br>{content}"


def _render_spoiler(tag: TagAttributes, content: str) -> str:
    summary = escape(tag.attribute) if tag.attribute else "Spoiler"
    return f'<details class="spoiler"><summary>{summary}</summary>{content}</details>'


def _render_youtube(tag: TagAttributes, content: str) -> str:
    video_id = youtube_video_id(tag.body)
    if video_id is None:
        return content
    return (
        f'<iframe src="https://www.youtube.com/embed/{video_id}" width="560" height="315" '
        'frameborder="0" allowfullscreen></iframe>'
    )


def _strip_tag(tag: TagAttributes, content: str) -> str:
    return content


def default_html_renderers() -> TagRendererRegistry:
    """Return a new registry holding the standard BBCode vocabulary.

    Returns
    -------
    TagRendererRegistry
        Renderers for ``b i u s sub sup size color font center left right
        justify quote code noparse url email img list * li hr br table tr td
        th h1..h6 spoiler youtube``

    """
    registry = TagRendererRegistry(
        {
            "b": _element("strong"),
            "i": _element("em"),
            "u": _element("u"),
            "s": _element("del"),
            "sub": _element("sub"),
            "sup": _element("sup"),
            "size": _render_size,
            "color": _render_color,
            "font": _render_font,
            "quote": _render_quote,
            "code": _render_code,
            "noparse": _render_noparse,
            "url": _render_url,
            "email": _render_email,
            "img": _render_img,
            "list": _render_list,
            "*": _element("li"),
            "li": _element("li"),
            "hr": _render_hr,
            "br": _render_br,
            "table": _element("table"),
            "tr": _element("tr"),
            "td": _element("td"),
            "th": _element("th"),
            "spoiler": _render_spoiler,
            "youtube": _render_youtube,
        }
    )
    for alignment in ("center", "left", "right", "justify"):
        registry[alignment] = _element("div", f' style="text-align: {alignment}"')
    for level in range(1, 7):
        registry[f"h{level}"] = _element(f"h{level}")
    return registry


def html_parser_options(options: Optional[BBCodeParserOptions] = None) -> BBCodeParserOptions:
    """Return parser options suited to the HTML vocabulary.

    ``[hr]`` and ``[br]`` are added to the standalone tags so they never
    swallow the text that follows them.
    """
    options = options or BBCodeParserOptions()
    return options.create_updated(standalone_tags=frozenset(options.standalone_tags) | HTML_STANDALONE_TAGS)


class HtmlRenderer(BaseRenderer):
    """Render parsed BBCode documents to HTML fragments.

    A tag is rendered when a renderer is registered for its name, its
    ``transform`` flag is set and it is not listed in ``keep_tags``. Every
    other tag is reproduced literally, escaped like free text, unless
    ``unknown_tag_mode`` is ``"strip"``.

    Parameters
    ----------
    options : HtmlRendererOptions or None, default = None
        HTML rendering options
    tag_renderers : Mapping[str, TagRenderer] or None, default = None
        Tag vocabulary; defaults to :func:`default_html_renderers`

    Examples
    --------
        >>> from bbtransform.parsers.bbcode import BBCodeParser
        >>> doc = BBCodeParser(html_parser_options()).parse("[b]Hi[/b] <you>")
        >>> HtmlRenderer().render_to_string(doc)
        '<strong>Hi</strong> &lt;you&gt;'

    """

    def __init__(
        self,
        options: HtmlRendererOptions | None = None,
        tag_renderers: Optional[Mapping[str, TagRenderer]] = None,
    ):
        """Initialize the HTML renderer with options."""
        BaseRenderer._validate_options_type(options, HtmlRendererOptions, "html")
        options = options or HtmlRendererOptions()
        super().__init__(options)
        self.options: HtmlRendererOptions = options
        self.tag_renderers = (
            TagRendererRegistry(tag_renderers) if tag_renderers is not None else default_html_renderers()
        )
        self._keep_tags = frozenset(name.lower() for name in options.keep_tags)
        self._transformer = BBCodeTransformer()

    def render_to_string(self, doc: Document) -> str:
        """Render a document to an HTML fragment.

        Parameters
        ----------
        doc : Document
            The parsed document to render

        Returns
        -------
        str
            HTML text

        """
        renderers = self._renderers_for(doc)

        def should_transform(node: TagNode) -> bool:
            if not node.transform:
                return False
            name = doc.tag_name(node)
            return name is not None and name.lower() not in self._keep_tags and name in renderers

        output = self._transformer.transform(
            doc,
            should_transform,
            tag_renderers=renderers,
            text_renderer=self._render_text,
            literal_renderer=self._render_literal,
        )

        if self.options.sanitize_output:
            output = sanitize_html_string(output)
        return output

    def _renderers_for(self, doc: Document) -> TagRendererRegistry:
        if self.options.unknown_tag_mode != "strip":
            return self.tag_renderers

        renderers = self.tag_renderers.copy()
        for node in doc.tag_nodes():
            name = doc.tag_name(node)
            if name is not None and name not in renderers:
                logger.debug("Stripping unknown tag %r", name)
                renderers[name] = _strip_tag
        return renderers

    def _render_text(self, text: str) -> str:
        if self.options.escape_text:
            text = escape(text, quote=False)
        if self.options.convert_newlines:
            text = text.replace("\r\n", "\n").replace("\n", "<br>\n")
        return text

    def _render_literal(self, markup: str) -> str:
        if self.options.escape_text:
            return escape(markup, quote=False)
        return markup
