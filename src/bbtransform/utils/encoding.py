#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtransform/utils/encoding.py
"""Character encoding detection for BBCode input that arrives as bytes.

Forum exports and pasted files are frequently not UTF-8. Bytes are decoded
with chardet's guess first and a fixed list of fallback encodings after it.
"""

from __future__ import annotations

import logging
from typing import IO

import chardet

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_ENCODINGS = ("utf-8", "utf-8-sig", "latin-1")


def detect_encoding(
    data: bytes,
    sample_size: int = 8192,
    confidence_threshold: float = 0.7,
) -> str | None:
    """Detect character encoding of binary data using chardet.

    Parameters
    ----------
    data : bytes
        Binary data to analyze
    sample_size : int, default 8192
        Number of bytes to sample for detection (uses first N bytes)
    confidence_threshold : float, default 0.7
        Minimum confidence level (0.0-1.0) required to trust detection

    Returns
    -------
    str | None
        Detected encoding name, or None if detection fails or confidence is
        below the threshold

    """
    sample = data[:sample_size]
    result = chardet.detect(sample)

    encoding = result.get("encoding") if result else None
    if not encoding:
        logger.debug("chardet: No encoding detected")
        return None

    confidence = result.get("confidence") or 0.0
    logger.debug("chardet detected encoding: %s (confidence: %.2f)", encoding, confidence)

    if confidence >= confidence_threshold:
        return encoding
    logger.debug("chardet confidence %.2f below threshold %s", confidence, confidence_threshold)
    return None


def read_text_with_encoding_detection(
    data: bytes,
    fallback_encodings: tuple[str, ...] | list[str] | None = None,
    use_chardet: bool = True,
) -> str:
    """Decode binary data as text with automatic encoding detection.

    Parameters
    ----------
    data : bytes
        Binary data to decode
    fallback_encodings : sequence of str, optional
        Encodings to try in order after detection, defaults to
        ``('utf-8', 'utf-8-sig', 'latin-1')``
    use_chardet : bool, default True
        Whether to attempt chardet-based detection first

    Returns
    -------
    str
        Decoded text content

    Examples
    --------
    >>> read_text_with_encoding_detection(b"[b]Hello[/b]")
    '[b]Hello[/b]'

    """
    if data.startswith(b"\xef\xbb\xbf"):
        return data.decode("utf-8-sig")

    if use_chardet and data:
        detected = detect_encoding(data)
        if detected:
            try:
                return data.decode(detected)
            except (UnicodeDecodeError, LookupError) as e:
                logger.debug("Failed to decode with chardet-detected encoding %s: %s", detected, e)

    for encoding in fallback_encodings or DEFAULT_FALLBACK_ENCODINGS:
        try:
            return data.decode(encoding)
        except (UnicodeDecodeError, LookupError) as e:
            logger.debug("Failed to decode with %s: %s", encoding, e)

    logger.warning("All encoding attempts failed, using utf-8 with error replacement")
    return data.decode("utf-8", errors="replace")


def normalize_stream_to_text(stream: IO[bytes] | IO[str]) -> str:
    """Read a binary or text file-like object and return its text.

    Raises
    ------
    TypeError
        If ``stream.read()`` returns something other than bytes or str

    """
    content = stream.read()

    if isinstance(content, bytes):
        return read_text_with_encoding_detection(content)
    if isinstance(content, str):
        return content
    raise TypeError(f"Stream read() returned unexpected type {type(content).__name__}. Expected bytes or str.")
