"""Advisory validation of a :class:`~aarbuilder.model.record.ReportRecord`.

:func:`validate` collects every problem it finds instead of stopping at the
first one and never mutates the record.  The caller decides what to do with
the result; the exporter uses it to block document formats but never the
plain-text preview.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from .model.record import ReportRecord, Topic
from .utils.datefmt import validate_date_range

__all__ = ["PHONE_RX", "EMAIL_RX", "ValidationResult", "validate"]

PHONE_RX: re.Pattern[str] = re.compile(r"^\(\d{3}\) \d{3}-\d{4}$")
EMAIL_RX: re.Pattern[str] = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

DEFAULT_TOPIC_TITLE_MAX = 60

_REQUIRED_TEXT: tuple[tuple[str, str], ...] = (
    ("unit_name", "Unit Name"),
    ("from_rank", "From Rank"),
    ("from_name", "From Name"),
    ("from_billet", "From Billet"),
    ("to_title", "To field"),
    ("event_name", "Event Name"),
    ("poc_rank", "POC Rank"),
    ("poc_name", "POC Name"),
    ("poc_phone", "POC Phone"),
    ("poc_email", "POC Email"),
    ("signature_name", "Signature Name"),
)

_REQUIRED_DATES: tuple[tuple[str, str], ...] = (
    ("document_date", "Document Date"),
    ("event_start_date", "Event Start Date"),
    ("event_end_date", "Event End Date"),
)


@dataclass(slots=True, frozen=True)
class ValidationResult:
    errors: tuple[str, ...] = ()

    @property
    def valid(self) -> bool:
        return not self.errors


def _topic_errors(section: str, topics: Sequence[Topic], title_max: int) -> list[str]:
    if not topics:
        return [f"At least one {section} topic is required"]
    errors: list[str] = []
    for i, topic in enumerate(topics, start=1):
        prefix = f"{section} Topic {i}"
        if not topic.title.strip():
            errors.append(f"{prefix}: Topic is required")
        elif len(topic.title.strip()) > title_max:
            errors.append(f"{prefix}: Topic must be {title_max} characters or fewer")
        if not topic.discussion.strip():
            errors.append(f"{prefix}: Discussion is required")
        if not topic.recommendation.strip():
            errors.append(f"{prefix}: Recommendation is required")
    return errors


def validate(record: ReportRecord, *, topic_title_max: int = DEFAULT_TOPIC_TITLE_MAX) -> ValidationResult:
    """Check ``record`` and return every error found."""

    errors: list[str] = []
    for attr, name in _REQUIRED_TEXT:
        if not getattr(record, attr).strip():
            errors.append(f"{name} is required")
    for attr, name in _REQUIRED_DATES:
        if getattr(record, attr) is None:
            errors.append(f"{name} is required")

    if record.event_start_date is not None and record.event_end_date is not None:
        if not validate_date_range(record.event_start_date, record.event_end_date):
            errors.append("End Date must be on or after Start Date")

    phone = record.poc_phone.strip()
    if phone and not PHONE_RX.match(phone):
        errors.append("Phone should be in format (XXX) XXX-XXXX")

    email = record.poc_email.strip()
    if email and not EMAIL_RX.match(email):
        errors.append("Invalid email format")

    errors.extend(_topic_errors("IMPROVE", record.improve_topics, topic_title_max))
    errors.extend(_topic_errors("SUSTAIN", record.sustain_topics, topic_title_max))
    return ValidationResult(tuple(errors))
