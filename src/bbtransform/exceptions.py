#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the bbtransform library.

Parsing and transforming are total over their input, so the core raises
very little: malformed tags, unmatched closing sequences and unknown tag
names are all recovered as literal text. The classes below cover the
remaining failure modes around the core (options, invariant checks,
configuration and CLI input).

Exception Hierarchy
-------------------
- BBTransformError (base exception)

  - ValidationError (parameter/option validation)
    - InvalidOptionsError (wrong options class for parser or renderer)
    - OffsetInvariantError (document tree violates offset invariants)

  - FileError (file access and I/O)
    - InputError (CLI input that cannot be read)

  - ConfigError (configuration file problems)

Failures raised by caller-supplied tag renderers are never wrapped; they
reach the caller of ``transform`` unchanged.

"""

from typing import Any


class BBTransformError(Exception):
    """Base exception class for all bbtransform-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(BBTransformError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class InvalidOptionsError(ValidationError):
    """Exception raised when an incorrect options class is provided.

    For example, passing ``HtmlRendererOptions`` to ``BBCodeParser``.

    Parameters
    ----------
    converter_name : str
        Name of the parser or renderer that received invalid options
    expected_type : type
        The expected options class type
    received_type : type
        The actual options class type that was received
    message : str, optional
        Custom error message. If not provided, generates a helpful message
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        converter_name: str,
        expected_type: type,
        received_type: type,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the invalid options error."""
        if message is None:
            message = (
                f"{converter_name} expected options of type '{expected_type.__name__}' "
                f"but received '{received_type.__name__}'."
            )
        super().__init__(
            message, parameter_name="options", parameter_value=received_type, original_error=original_error
        )
        self.converter_name = converter_name
        self.expected_type = expected_type
        self.received_type = received_type


class OffsetInvariantError(ValidationError):
    """Exception raised when a node's offsets break the tree invariants.

    Parameters
    ----------
    message : str
        Description of the violated invariant
    node : any, optional
        The offending node
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, node: Any = None, original_error: Exception | None = None):
        """Initialize the invariant error with the offending node."""
        super().__init__(message, parameter_name="node", parameter_value=node, original_error=original_error)
        self.node = node


class FileError(BBTransformError):
    """Base exception for file access and I/O errors.

    Parameters
    ----------
    message : str
        Description of the file error
    file_path : str, optional
        Path to the file that caused the error
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, file_path: str | None = None, original_error: Exception | None = None):
        """Initialize the file error with path information."""
        super().__init__(message, original_error=original_error)
        self.file_path = file_path


class InputError(FileError):
    """Exception raised when command-line input cannot be read."""


class ConfigError(BBTransformError):
    """Exception raised for unreadable or malformed configuration files.

    Parameters
    ----------
    message : str
        Description of the configuration problem
    config_path : str, optional
        Path to the offending configuration file
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, config_path: str | None = None, original_error: Exception | None = None):
        """Initialize the configuration error with the file path."""
        super().__init__(message, original_error=original_error)
        self.config_path = config_path
