from __future__ import annotations

from datetime import date
from typing import Callable

import pytest

from aarbuilder.model.record import ReportRecord, Topic
from aarbuilder.validate import ValidationResult, validate

RecordFactory = Callable[..., ReportRecord]


def test_complete_record_is_valid(record: ReportRecord) -> None:
    result = validate(record)
    assert result == ValidationResult(())
    assert result.valid


def test_empty_record_collects_every_error() -> None:
    result = validate(ReportRecord())
    assert not result.valid
    assert "Unit Name is required" in result.errors
    assert "Document Date is required" in result.errors
    assert "Signature Name is required" in result.errors
    assert "At least one IMPROVE topic is required" in result.errors
    assert "At least one SUSTAIN topic is required" in result.errors
    assert len(result.errors) >= 16


def test_end_before_start(record_factory: RecordFactory) -> None:
    rec = record_factory(event_start_date=date(2024, 12, 10), event_end_date=date(2024, 12, 1))
    assert validate(rec).errors == ("End Date must be on or after Start Date",)


def test_same_day_event_is_valid(record_factory: RecordFactory) -> None:
    rec = record_factory(event_start_date=date(2024, 12, 1), event_end_date=date(2024, 12, 1))
    assert validate(rec).valid


@pytest.mark.parametrize("phone", ["555-1234", "5551234567", "(555)123-4567"])
def test_bad_phone(record_factory: RecordFactory, phone: str) -> None:
    assert validate(record_factory(poc_phone=phone)).errors == (
        "Phone should be in format (XXX) XXX-XXXX",
    )


@pytest.mark.parametrize("email", ["jane.doe", "jane@usmc", "jane doe@usmc.mil"])
def test_bad_email(record_factory: RecordFactory, email: str) -> None:
    assert validate(record_factory(poc_email=email)).errors == ("Invalid email format",)


def test_empty_improve_list(record_factory: RecordFactory) -> None:
    result = validate(record_factory(improve_topics=[]))
    assert result.errors == ("At least one IMPROVE topic is required",)


def test_topic_fields_are_numbered(record_factory: RecordFactory) -> None:
    topics = [
        Topic(title="Comms", discussion="d", recommendation="r"),
        Topic(title="", discussion="", recommendation="r"),
    ]
    result = validate(record_factory(sustain_topics=topics))
    assert result.errors == (
        "SUSTAIN Topic 2: Topic is required",
        "SUSTAIN Topic 2: Discussion is required",
    )


def test_topic_title_limit(record_factory: RecordFactory) -> None:
    at_limit = Topic(title="x" * 60, discussion="d", recommendation="r")
    over = Topic(title="x" * 61, discussion="d", recommendation="r")
    assert validate(record_factory(improve_topics=[at_limit])).valid
    result = validate(record_factory(improve_topics=[over]))
    assert result.errors == ("IMPROVE Topic 1: Topic must be 60 characters or fewer",)
    assert validate(record_factory(improve_topics=[over]), topic_title_max=80).valid


def test_validate_does_not_mutate(record: ReportRecord) -> None:
    before = record.model_dump()
    validate(record)
    assert record.model_dump() == before
