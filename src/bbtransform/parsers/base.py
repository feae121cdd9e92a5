#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtransform/parsers/base.py
"""Base class for markup parsers.

A parser turns a complete text buffer into a :class:`~bbtransform.ast.Document`.

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Union

from bbtransform.ast import Document
from bbtransform.exceptions import InvalidOptionsError
from bbtransform.options.base import BaseParserOptions
from bbtransform.utils.encoding import normalize_stream_to_text, read_text_with_encoding_detection

logger = logging.getLogger(__name__)

ParserInput = Union[str, bytes, Path, IO[bytes], IO[str]]


class BaseParser(ABC):
    """Abstract base class for markup parsers.

    Parameters
    ----------
    options : BaseParserOptions or None, default = None
        Format-specific parsing options

    """

    def __init__(self, options: BaseParserOptions | None = None):
        self.options = options

    @staticmethod
    def _validate_options_type(options: BaseParserOptions | None, expected_type: type, parser_name: str) -> None:
        """Validate that options are of the correct type for this parser.

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                converter_name=parser_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @abstractmethod
    def parse(self, input_data: ParserInput) -> Document:
        """Parse the input into a document tree.

        Parameters
        ----------
        input_data : str, bytes, Path or file-like
            Markup to parse. Strings are always treated as markup content.

        Returns
        -------
        Document
            The parsed document

        """
        pass

    @staticmethod
    def _load_text_content(input_data: ParserInput) -> str:
        """Load markup text from the supported input types.

        Unlike path-or-content heuristics, a ``str`` is never interpreted as
        a file name: user-supplied markup must not be able to read files.

        """
        if isinstance(input_data, str):
            return input_data
        if isinstance(input_data, bytes):
            return read_text_with_encoding_detection(input_data)
        if isinstance(input_data, Path):
            logger.debug("Reading markup from %s", input_data)
            return read_text_with_encoding_detection(input_data.read_bytes())
        if hasattr(input_data, "read"):
            return normalize_stream_to_text(input_data)
        raise TypeError(f"Cannot parse input of type {type(input_data).__name__}")
