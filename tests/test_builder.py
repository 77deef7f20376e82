from __future__ import annotations

import re
from typing import Callable

import pytest

from aarbuilder.builder import build, build_from_line, build_poc_line, build_subject_line, service_name
from aarbuilder.io.writers.txt_writer import render_text
from aarbuilder.model.blocks import (
    LabeledField,
    LetteredTopic,
    LetterheadLine,
    NumberedParagraph,
    RightAlignedLine,
    Signature,
)
from aarbuilder.model.record import ReportRecord, Topic
from aarbuilder.utils.text import letter_for_index

RecordFactory = Callable[..., ReportRecord]


def test_subject_line_example(record: ReportRecord) -> None:
    assert build_subject_line(record) == (
        "AFTER ACTION REPORT FOR EXERCISE STEEL KNIGHT CONDUCTED FROM "
        "01 DECEMBER 2024 TO 10 DECEMBER 2024"
    )


def test_subject_line_placeholders(record_factory: RecordFactory) -> None:
    rec = record_factory(event_name="", event_start_date=None, event_end_date=None)
    assert build_subject_line(rec) == (
        "AFTER ACTION REPORT FOR [EVENT] CONDUCTED FROM [START DATE] TO [END DATE]"
    )


@pytest.mark.parametrize(
    "rank,name,billet,expected",
    [
        ("Capt", "John Smith", "Company Commander", "Capt John Smith, Company Commander"),
        ("", "", "Company Commander", "Company Commander"),
        ("Capt", "John Smith", "", "Capt John Smith"),
        ("", "", "", "[FROM]"),
    ],
)
def test_from_line(
    record_factory: RecordFactory, rank: str, name: str, billet: str, expected: str
) -> None:
    rec = record_factory(from_rank=rank, from_name=name, from_billet=billet)
    assert build_from_line(rec) == expected


def test_poc_line(record: ReportRecord, record_factory: RecordFactory) -> None:
    assert build_poc_line(record) == (
        "The point of contact regarding this report is SSgt Jane Doe at "
        "(555) 123-4567 or jane.doe@usmc.mil."
    )
    empty = record_factory(poc_rank="", poc_name="", poc_phone="", poc_email="")
    assert build_poc_line(empty) == (
        "The point of contact regarding this report is [POC NAME] at "
        "(XXX) XXX-XXXX or email@usmc.mil."
    )


def test_service_names() -> None:
    assert service_name("USMC") == "UNITED STATES MARINE CORPS"
    assert service_name("usn") == "UNITED STATES NAVY"
    assert service_name("") == "UNITED STATES MARINE CORPS"
    assert service_name("uscg") == "USCG"


def test_block_order(record: ReportRecord) -> None:
    blocks = build(record)
    assert [type(b) for b in blocks[:4]] == [LetterheadLine] * 4
    fields = [b.label for b in blocks if isinstance(b, LabeledField)]
    assert fields == ["From:", "To:", "Subj:", "Ref:"]
    paragraphs = [(b.number, b.title) for b in blocks if isinstance(b, NumberedParagraph)]
    assert paragraphs == [(1, "IMPROVE"), (2, "SUSTAIN"), (3, None)]
    assert isinstance(blocks[-1], Signature)
    assert blocks[-1].name == "J. SMITH"


def test_letterhead_omits_missing_address(record_factory: RecordFactory) -> None:
    blocks = build(record_factory(unit_address1="", unit_address2=""))
    letterhead = [b.text for b in blocks if isinstance(b, LetterheadLine)]
    assert letterhead == ["UNITED STATES MARINE CORPS", "1ST MARINE DIVISION"]


def test_sender_block_defaults(record_factory: RecordFactory) -> None:
    blocks = build(record_factory(ssic="", office_code="", document_date=None))
    sender = [b.text for b in blocks if isinstance(b, RightAlignedLine)]
    assert sender == ["IN REPLY REFER TO:", "3504", "[DATE]"]


def test_sender_block_with_office_code(record: ReportRecord) -> None:
    sender = [b.text for b in build(record) if isinstance(b, RightAlignedLine)]
    assert sender == ["IN REPLY REFER TO:", "3504", "G-3", "15 Dec 24"]


def test_placeholders_for_empty_record() -> None:
    text = render_text(build(ReportRecord()))
    for placeholder in ("[UNIT NAME]", "[DATE]", "[FROM]", "[SIGNATURE]", "Operations Officer"):
        assert placeholder in text
    assert text.count("None identified.") == 2


def test_topic_placeholders(record_factory: RecordFactory) -> None:
    rec = record_factory(improve_topics=[Topic()])
    topic = next(b for b in build(rec) if isinstance(b, LetteredTopic))
    assert topic.topic == "[Topic description]"
    assert topic.discussion == "[Discussion text]"
    assert topic.recommendation == "[Recommendation text]"


def test_builder_is_idempotent(record: ReportRecord) -> None:
    assert build(record) == build(record)


@pytest.mark.parametrize("n", [1, 2, 26, 27, 30])
def test_topic_letters_in_text(record_factory: RecordFactory, n: int) -> None:
    topics = [Topic(title=f"T{i}", discussion="D.", recommendation="R.") for i in range(n)]
    rec = record_factory(improve_topics=topics, sustain_topics=topics)
    text = render_text(build(rec))
    letters = re.findall(r"^    ([a-z]+)\.  T\d+$", text, flags=re.MULTILINE)
    expected = [letter_for_index(i) for i in range(n)]
    assert letters == expected + expected
    if n > 26:
        assert "aa" in letters


def test_plain_text_shape(record: ReportRecord) -> None:
    lines = render_text(build(record)).splitlines()
    assert lines[0] == "UNITED STATES MARINE CORPS"
    assert lines[1] == "1ST MARINE DIVISION"
    assert "From:  Capt John Smith, Company Commander" in lines
    assert "To:    Operations Officer" in lines
    assert any(line.startswith("Subj:  AFTER ACTION REPORT FOR EXERCISE STEEL KNIGHT") for line in lines)
    assert any(line.startswith("1.  IMPROVE.  This paragraph") for line in lines)
    assert "        (1) Discussion.  Discussion for topic 1.  Radios failed during phase two." in lines
    assert lines[-1].strip() == "J. SMITH"
