#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtransform/utils/decorators.py
"""Timing helpers for the public API."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Generator


@contextmanager
def debug_timer(logger: logging.Logger, operation: str) -> Generator[None, None, None]:
    """Time the enclosed block and log the duration at DEBUG level.

    Nothing is measured unless the logger has DEBUG enabled.

    Examples
    --------
        >>> logger = logging.getLogger(__name__)
        >>> with debug_timer(logger, "Parsing (bbcode)"):
        ...     document = parser.parse(markup)

    """
    if logger.isEnabledFor(logging.DEBUG):
        start_time = time.perf_counter()
        yield
        elapsed = time.perf_counter() - start_time
        logger.debug(f"{operation} completed in {elapsed:.4f}s")
    else:
        yield
