"""Military date styles used in correspondence headers and filenames."""

from __future__ import annotations

import calendar
from datetime import date, datetime

__all__ = [
    "parse_date",
    "format_military_short",
    "format_military_full",
    "format_subject_line",
    "format_numeric",
    "validate_date_range",
]

DateLike = date | str | None

_MONTHS_SHORT: tuple[str, ...] = tuple(calendar.month_abbr)[1:]
_MONTHS_FULL: tuple[str, ...] = tuple(calendar.month_name)[1:]


def parse_date(value: DateLike) -> date | None:
    """Coerce ``value`` to a :class:`date`.

    Accepts ``date``/``datetime`` objects and ISO ``YYYY-MM-DD`` strings.
    Empty or unparsable values yield ``None``.
    """

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = value.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def format_military_short(value: DateLike) -> str:
    """``DD Mon YY``, e.g. ``15 Dec 24``; empty string when unparsable."""

    d = parse_date(value)
    if d is None:
        return ""
    return f"{d.day:02d} {_MONTHS_SHORT[d.month - 1]} {d.year % 100:02d}"


def format_military_full(value: DateLike) -> str:
    """``DD Month YYYY``, e.g. ``15 December 2024``."""

    d = parse_date(value)
    if d is None:
        return ""
    return f"{d.day:02d} {_MONTHS_FULL[d.month - 1]} {d.year:04d}"


def format_subject_line(value: DateLike) -> str:
    """Upper-cased full form used in subject lines, e.g. ``15 DECEMBER 2024``."""

    return format_military_full(value).upper()


def format_numeric(value: DateLike) -> str:
    """``YYYYMMDD`` as used in export filenames."""

    d = parse_date(value)
    if d is None:
        return ""
    return f"{d.year:04d}{d.month:02d}{d.day:02d}"


def validate_date_range(start: DateLike, end: DateLike) -> bool:
    """Return ``True`` when both dates parse and ``end`` is not before ``start``."""

    s = parse_date(start)
    e = parse_date(end)
    if s is None or e is None:
        return False
    return e >= s
