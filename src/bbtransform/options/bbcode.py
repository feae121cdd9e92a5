#  Copyright (c) 2025 Tom Villani, Ph.D.

# bbtransform/options/bbcode.py
"""Configuration options for BBCode parsing.

The parser's core geometry rules are fixed; these options only decide how a
handful of well-known tag names behave while the tree is being built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import AbstractSet

from bbtransform.constants import (
    DEFAULT_BBCODE_IMPLICITLY_CLOSED_TAGS,
    DEFAULT_BBCODE_MAX_NESTING_DEPTH,
    DEFAULT_BBCODE_PREFORMATTED_TAGS,
    DEFAULT_BBCODE_STANDALONE_TAGS,
)
from bbtransform.options.base import BaseParserOptions


@dataclass(frozen=True)
class BBCodeParserOptions(BaseParserOptions):
    """Configuration options for BBCode-to-tree parsing.

    Tag names are matched exactly (case-sensitive), like closing tags.

    Parameters
    ----------
    standalone_tags : set of str, default empty
        Tags that never open a body, such as emoticons (``[:)]``) or ``[hr]``.
        They are finalised immediately with no body and no closing tag.
    implicitly_closed_tags : set of str, default {"*"}
        Tags closed by the next opening of the same name while they are the
        innermost open tag, so ``[*]a[*]b`` yields two sibling items.
    preformatted_tags : set of str, default {"code", "noparse"}
        Tags whose body is kept as a single text node up to the first exact
        closing sequence, without looking for nested tags.
    max_nesting_depth : int, default 100
        Maximum number of simultaneously open tags. Deeper opening tags are
        kept as literal text.

    Examples
    --------
        >>> from bbtransform.parsers.bbcode import BBCodeParser
        >>> options = BBCodeParserOptions(standalone_tags={":)", "hr"})
        >>> doc = BBCodeParser(options).parse("Hi [:)] there")

    """

    standalone_tags: AbstractSet[str] = field(
        default=DEFAULT_BBCODE_STANDALONE_TAGS,
        metadata={"help": "Tags that never open a body (emoticons, hr)", "importance": "core"},
    )
    implicitly_closed_tags: AbstractSet[str] = field(
        default=DEFAULT_BBCODE_IMPLICITLY_CLOSED_TAGS,
        metadata={"help": "Tags closed by the next opening of the same name (list items)", "importance": "advanced"},
    )
    preformatted_tags: AbstractSet[str] = field(
        default=DEFAULT_BBCODE_PREFORMATTED_TAGS,
        metadata={"help": "Tags whose body is not parsed for nested tags", "importance": "advanced"},
    )
    max_nesting_depth: int = field(
        default=DEFAULT_BBCODE_MAX_NESTING_DEPTH,
        metadata={"help": "Maximum depth of open tags before tags are kept as text", "importance": "security"},
    )

    def __post_init__(self) -> None:
        """Normalize tag collections and validate the nesting limit.

        Raises
        ------
        ValueError
            If ``max_nesting_depth`` is not positive or a tag collection is a
            bare string.

        """
        super().__post_init__()

        for name in ("standalone_tags", "implicitly_closed_tags", "preformatted_tags"):
            value = getattr(self, name)
            if isinstance(value, str):
                raise ValueError(f"{name} must be a collection of tag names, not a string")
            if not isinstance(value, frozenset):
                object.__setattr__(self, name, frozenset(value))

        if self.max_nesting_depth <= 0:
            raise ValueError(f"max_nesting_depth must be positive, got {self.max_nesting_depth}")
