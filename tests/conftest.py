from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Iterator

import pytest

from aarbuilder.model.record import ReportRecord, Topic


class FixedMeasurer:
    """Every character is 6pt wide regardless of weight."""

    def width(self, text: str, bold: bool = False) -> float:
        return 6.0 * len(text)


def make_topic(n: int = 1, **overrides: Any) -> Topic:
    values: dict[str, Any] = {
        "title": f"Topic number {n}",
        "discussion": f"Discussion for topic {n}. Radios failed during phase two.",
        "recommendation": f"Recommendation for topic {n}. Issue spare batteries.",
    }
    values.update(overrides)
    return Topic(**values)


def make_record(**overrides: Any) -> ReportRecord:
    values: dict[str, Any] = {
        "unit_name": "1st Marine Division",
        "unit_address1": "Box 555380",
        "unit_address2": "Camp Pendleton, CA 92055",
        "ssic": "3504",
        "office_code": "G-3",
        "document_date": date(2024, 12, 15),
        "from_rank": "Capt",
        "from_name": "John Smith",
        "from_billet": "Company Commander",
        "to_title": "Operations Officer",
        "event_name": "Exercise Steel Knight",
        "event_start_date": date(2024, 12, 1),
        "event_end_date": date(2024, 12, 10),
        "improve_topics": [make_topic(1)],
        "sustain_topics": [make_topic(2)],
        "poc_rank": "SSgt",
        "poc_name": "Jane Doe",
        "poc_phone": "(555) 123-4567",
        "poc_email": "jane.doe@usmc.mil",
        "signature_name": "J. Smith",
    }
    values.update(overrides)
    return ReportRecord(**values)


@pytest.fixture
def record() -> ReportRecord:
    return make_record()


@pytest.fixture
def record_factory() -> Callable[..., ReportRecord]:
    return make_record


@pytest.fixture
def measurer() -> FixedMeasurer:
    return FixedMeasurer()


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    logger = logging.getLogger("aarbuilder")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
