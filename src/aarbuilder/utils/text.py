"""Text helpers for naval letter formatting.

Sentences in correspondence are followed by two spaces.  Outline labels use a
positional letter sequence (``a`` .. ``z``, then ``aa``, ``ab`` ...).
"""

from __future__ import annotations

import re
import string

__all__ = [
    "ensure_double_spaces",
    "line_height",
    "letter_for_index",
    "sanitize_filename_part",
    "format_phone_number",
]

_RX_SENTENCE_GAP = re.compile(r"\.[^\S\r\n](?=\S)")
_RX_FILENAME_UNSAFE = re.compile(r"[^A-Za-z0-9]")
_RX_NON_DIGIT = re.compile(r"\D")

LINE_HEIGHT_FACTOR = 1.17


def ensure_double_spaces(text: str) -> str:
    """Rewrite a period followed by one blank into ``".  "``.

    A period at the end of the string or of a line, or already followed by two
    spaces, is left alone.
    """

    if not text:
        return ""
    return _RX_SENTENCE_GAP.sub(".  ", text)


def line_height(font_size: float, factor: float = LINE_HEIGHT_FACTOR) -> int:
    """Return the rounded line height for ``font_size`` points."""

    return round(font_size * factor)


def letter_for_index(index: int) -> str:
    """Return the outline letter for zero-based ``index``.

    ``0 -> "a"``, ``25 -> "z"``, ``26 -> "aa"``, ``27 -> "ab"`` and so on in
    bijective base 26.
    """

    if index < 0:
        raise ValueError("index must be non-negative")
    letters = string.ascii_lowercase
    out = ""
    n = index + 1
    while n > 0:
        n, rem = divmod(n - 1, 26)
        out = letters[rem] + out
    return out


def sanitize_filename_part(text: str, max_length: int = 30) -> str:
    """Replace non-alphanumerics with ``_`` and truncate to ``max_length``."""

    return _RX_FILENAME_UNSAFE.sub("_", text)[:max_length]


def format_phone_number(raw: str) -> str:
    """Progressively format digits in ``raw`` as ``(XXX) XXX-XXXX``.

    Extra digits beyond ten are dropped; partial input yields a partial
    pattern, e.g. ``"55512"`` becomes ``"(555) 12"``.
    """

    digits = _RX_NON_DIGIT.sub("", raw)[:10]
    if len(digits) >= 6:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    if len(digits) >= 3:
        return f"({digits[:3]}) {digits[3:]}"
    if digits:
        return f"({digits}"
    return ""
