#  Copyright (c) 2025 Tom Villani, Ph.D.

# bbtransform/options/html.py
"""Configuration options for BBCode-to-HTML rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import AbstractSet

from bbtransform.constants import (
    DEFAULT_HTML_CONVERT_NEWLINES,
    DEFAULT_HTML_ESCAPE_TEXT,
    DEFAULT_HTML_SANITIZE_OUTPUT,
    DEFAULT_HTML_UNKNOWN_TAG_MODE,
    UnknownTagMode,
)
from bbtransform.options.base import BaseRendererOptions


@dataclass(frozen=True)
class HtmlRendererOptions(BaseRendererOptions):
    """Configuration options for :class:`~bbtransform.renderers.html.HtmlRenderer`.

    Parameters
    ----------
    escape_text : bool, default True
        HTML-escape free text. Only disable for trusted input.
    convert_newlines : bool, default False
        Turn newlines in free text into ``<br>`` elements.
    unknown_tag_mode : {"preserve", "strip"}, default "preserve"
        How to handle tags without an HTML renderer:
        - "preserve": keep the literal markup (escaped like free text)
        - "strip": drop the unknown tag's own markup, keep its rendered body
    keep_tags : set of str, default empty
        Tag names that are always left as literal markup.
    sanitize_output : bool, default False
        Run the rendered HTML through the bleach-based sanitizer as a final
        pass.

    """

    escape_text: bool = field(
        default=DEFAULT_HTML_ESCAPE_TEXT,
        metadata={"help": "HTML-escape free text", "cli_name": "no-escape", "importance": "security"},
    )
    convert_newlines: bool = field(
        default=DEFAULT_HTML_CONVERT_NEWLINES,
        metadata={"help": "Convert newlines in free text to <br>", "importance": "core"},
    )
    unknown_tag_mode: UnknownTagMode = field(
        default=DEFAULT_HTML_UNKNOWN_TAG_MODE,
        metadata={
            "help": "How to handle tags without an HTML renderer: preserve or strip",
            "choices": ["preserve", "strip"],
            "importance": "core",
        },
    )
    keep_tags: AbstractSet[str] = field(
        default=frozenset(),
        metadata={"help": "Tag names always left as literal markup", "importance": "core"},
    )
    sanitize_output: bool = field(
        default=DEFAULT_HTML_SANITIZE_OUTPUT,
        metadata={"help": "Sanitize the final HTML with bleach", "importance": "security"},
    )

    def __post_init__(self) -> None:
        """Validate the unknown tag mode and normalize ``keep_tags``.

        Raises
        ------
        ValueError
            If ``unknown_tag_mode`` is not one of the supported modes.

        """
        super().__post_init__()

        if self.unknown_tag_mode not in ("preserve", "strip"):
            raise ValueError(f"unknown_tag_mode must be 'preserve' or 'strip', got {self.unknown_tag_mode!r}")
        if isinstance(self.keep_tags, str):
            raise ValueError("keep_tags must be a collection of tag names, not a string")
        if not isinstance(self.keep_tags, frozenset):
            object.__setattr__(self, "keep_tags", frozenset(self.keep_tags))
