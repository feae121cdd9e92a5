#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtransform/api.py
"""Public one-call API: parse BBCode, transform it, render it to HTML."""

import logging
from dataclasses import fields
from typing import Any, Mapping, Optional, TypeVar, Union

from bbtransform.ast import Document
from bbtransform.options.base import CloneFrozenMixin
from bbtransform.options.bbcode import BBCodeParserOptions
from bbtransform.options.html import HtmlRendererOptions
from bbtransform.parsers.base import ParserInput
from bbtransform.parsers.bbcode import BBCodeParser
from bbtransform.renderers.html import HtmlRenderer, html_parser_options
from bbtransform.renderers.transformer import BBCodeTransformer, TagRenderer, TextRenderer, TransformPredicate
from bbtransform.utils.decorators import debug_timer

logger = logging.getLogger(__name__)

OptionsT = TypeVar("OptionsT", bound=CloneFrozenMixin)


def _apply_option_kwargs(options: OptionsT, kwargs: dict[str, Any]) -> OptionsT:
    """Return ``options`` updated with the kwargs naming its fields; consumed keys are removed."""
    names = {field.name for field in fields(options)}  # type: ignore[arg-type]
    matched = {key: kwargs.pop(key) for key in list(kwargs) if key in names}
    return options.create_updated(**matched) if matched else options


def parse(source: ParserInput, options: Optional[BBCodeParserOptions] = None, **kwargs: Any) -> Document:
    """Parse BBCode into an offset-addressed document.

    Parameters
    ----------
    source : str, bytes, Path or file-like
        Markup to parse. A ``str`` is always the markup itself.
    options : BBCodeParserOptions, optional
        Parser options
    **kwargs
        Individual :class:`BBCodeParserOptions` fields overriding ``options``

    Returns
    -------
    Document
        The parsed document

    Examples
    --------
        >>> doc = parse("[b]Hi[/b]", standalone_tags={":)"})
        >>> doc.tag_name(doc.children[0])
        'b'

    """
    parser_options = _apply_option_kwargs(options or BBCodeParserOptions(), kwargs)
    if kwargs:
        logger.debug(f"Skipping unknown parser options: {sorted(kwargs)}")
    with debug_timer(logger, "Parsing (bbcode)"):
        return BBCodeParser(parser_options).parse(source)


def transform(
    document: Document,
    should_transform: TransformPredicate,
    tag_renderers: Optional[Mapping[str, TagRenderer]] = None,
    text_renderer: Optional[TextRenderer] = None,
) -> str:
    """Transform a parsed document with caller-supplied rules.

    Tags for which ``should_transform`` answers True are replaced by the
    output of their renderer in ``tag_renderers``; every other tag, and every
    tag without a renderer, is reproduced exactly as written.

    Examples
    --------
        >>> doc = parse("[b]Hi[/b] [x]y[/x]")
        >>> transform(doc, lambda node: True, {"b": lambda tag, body: f"<b>{body}</b>"})
        '<b>Hi</b> [x]y[/x]'

    """
    with debug_timer(logger, "Transforming"):
        return BBCodeTransformer().transform(
            document, should_transform, tag_renderers=tag_renderers, text_renderer=text_renderer
        )


def to_bbcode(document: Document) -> str:
    """Reproduce the markup of ``document`` without transforming any tag."""
    return BBCodeTransformer().transform(document, lambda node: False)


def to_html(
    source: Union[ParserInput, Document],
    parser_options: Optional[BBCodeParserOptions] = None,
    renderer_options: Optional[HtmlRendererOptions] = None,
    tag_renderers: Optional[Mapping[str, TagRenderer]] = None,
    **kwargs: Any,
) -> str:
    """Render BBCode to an HTML fragment.

    Parameters
    ----------
    source : str, bytes, Path, file-like or Document
        Markup to render, or an already parsed document
    parser_options : BBCodeParserOptions, optional
        Parser options. ``[hr]`` and ``[br]`` are always parsed as
        standalone tags.
    renderer_options : HtmlRendererOptions, optional
        HTML rendering options
    tag_renderers : Mapping[str, TagRenderer], optional
        Replacement tag vocabulary; defaults to the standard HTML renderers
    **kwargs
        Individual parser or renderer option fields

    Returns
    -------
    str
        HTML fragment

    Examples
    --------
        >>> to_html('[url=https://example.com]site[/url]')
        '<a href="https://example.com" rel="nofollow">site</a>'
        >>> to_html("[b]a\\nb[/b]", convert_newlines=True)
        '<strong>a<br>\\nb</strong>'

    """
    render_options = _apply_option_kwargs(renderer_options or HtmlRendererOptions(), kwargs)

    if isinstance(source, Document):
        if kwargs:
            logger.debug(f"Skipping parser options for an already parsed document: {sorted(kwargs)}")
        document = source
    else:
        parser_options = _apply_option_kwargs(parser_options or BBCodeParserOptions(), kwargs)
        document = parse(source, html_parser_options(parser_options), **kwargs)

    with debug_timer(logger, "Rendering (html)"):
        return HtmlRenderer(render_options, tag_renderers=tag_renderers).render_to_string(document)
