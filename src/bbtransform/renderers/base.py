#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtransform/renderers/base.py
"""Base classes for document renderers.

A renderer turns a parsed :class:`~bbtransform.ast.Document` into output
text. Renderers never modify the document they are given.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Union

from bbtransform.ast import Document
from bbtransform.exceptions import InvalidOptionsError
from bbtransform.options.base import BaseRendererOptions


class BaseRenderer(ABC):
    """Abstract base class for all document renderers.

    Parameters
    ----------
    options : BaseRendererOptions or None, default = None
        Format-specific rendering options

    Examples
    --------
    Creating a custom renderer:

        >>> from bbtransform.renderers.base import BaseRenderer
        >>> from bbtransform.renderers.transformer import transform
        >>>
        >>> class UpperCaseRenderer(BaseRenderer):
        ...     def render_to_string(self, doc):
        ...         return transform(doc, lambda node: False, text_renderer=str.upper)

    """

    def __init__(self, options: BaseRendererOptions | None = None):
        self.options = options

    @abstractmethod
    def render_to_string(self, doc: Document) -> str:
        """Render the document to a string.

        Parameters
        ----------
        doc : Document
            Parsed document to render

        Returns
        -------
        str
            Rendered document

        """
        pass

    def render(self, doc: Document, output: Union[str, Path, IO[bytes], IO[str]]) -> None:
        """Render the document and write it to a file or stream.

        Parameters
        ----------
        doc : Document
            Parsed document to render
        output : str, Path, IO[bytes] or IO[str]
            Output destination. Strings and paths name a file written as UTF-8.

        """
        self.write_text_output(self.render_to_string(doc), output)

    @staticmethod
    def _validate_options_type(options: BaseRendererOptions | None, expected_type: type, renderer_name: str) -> None:
        """Validate that options are of the correct type for this renderer.

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                converter_name=renderer_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @staticmethod
    def write_text_output(text: str, output: Union[str, Path, IO[bytes], IO[str]]) -> None:
        """Write text output to a file path or IO stream.

        Raises
        ------
        TypeError
            If output type is not supported

        """
        if isinstance(output, (str, Path)):
            Path(output).write_text(text, encoding="utf-8")
        elif hasattr(output, "mode") and "b" in output.mode:
            output.write(text.encode("utf-8"))  # type: ignore[arg-type]
        elif hasattr(output, "write"):
            try:
                output.write(text)  # type: ignore[arg-type]
            except TypeError:
                output.write(text.encode("utf-8"))  # type: ignore[arg-type]
        else:
            raise TypeError(f"Unsupported output type: {type(output).__name__}")
