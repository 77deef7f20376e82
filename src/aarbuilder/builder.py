"""Document content builder.

:func:`build` turns a :class:`~aarbuilder.model.record.ReportRecord` into the
fixed outline of an after action report:

1. centered letterhead (service, unit, address lines)
2. sender block (``IN REPLY REFER TO:``, SSIC, office code, date)
3. ``From:``, ``To:``, ``Subj:`` and ``Ref:`` fields
4. paragraph ``1. IMPROVE`` with one lettered topic per entry
5. paragraph ``2. SUSTAIN`` likewise
6. paragraph ``3.`` naming the point of contact
7. signature

The builder is pure and total: missing values are replaced by bracketed
placeholders so that a preview can always be rendered from a partially filled
record.  Topic letters are derived from list position only.
"""

from __future__ import annotations

from collections.abc import Sequence

from .model.blocks import (
    BlankLine,
    Block,
    LabeledField,
    LetteredTopic,
    LetterheadLine,
    LetterheadRole,
    NumberedParagraph,
    RightAlignedLine,
    Signature,
)
from .model.record import ReportRecord, Topic
from .utils import datefmt
from .utils.text import letter_for_index

__all__ = [
    "SERVICE_NAMES",
    "DEFAULT_SSIC",
    "DEFAULT_TO_TITLE",
    "REFERENCE_LINES",
    "IMPROVE_INTRO",
    "SUSTAIN_INTRO",
    "build",
    "service_name",
    "build_from_line",
    "build_subject_line",
    "build_poc_line",
]

SERVICE_NAMES: dict[str, str] = {
    "USMC": "UNITED STATES MARINE CORPS",
    "USN": "UNITED STATES NAVY",
    "DOD": "DEPARTMENT OF DEFENSE",
    "DON": "DEPARTMENT OF THE NAVY",
}

DEFAULT_SSIC = "3504"
DEFAULT_TO_TITLE = "Operations Officer"
REPLY_CAPTION = "IN REPLY REFER TO:"
NONE_IDENTIFIED = "None identified."

REFERENCE_LINES: tuple[str, str] = (
    "(a) MCO 3504.1 Marine Corps Lessons Learned Program (MCLLP) and the",
    "Marine Corps Center for Lessons Learned (MCCLL)",
)

IMPROVE_INTRO = (
    "This paragraph is used to discuss areas of the event that occurred "
    "during any of the phases that needs to be improved."
)
SUSTAIN_INTRO = (
    "This paragraph is used to discuss areas of the event that occurred "
    "during any of the phases that should be sustained because they were effective."
)


def service_name(code: str) -> str:
    """Map a service code such as ``USMC`` to its letterhead title."""

    key = code.strip().upper()
    if not key:
        return SERVICE_NAMES["USMC"]
    return SERVICE_NAMES.get(key, key)


def build_from_line(record: ReportRecord) -> str:
    """Return ``rank name, billet`` using whichever parts are present."""

    parts = [p for p in (record.from_rank.strip(), record.from_name.strip()) if p]
    billet = record.from_billet.strip()
    if billet:
        if parts:
            return f"{' '.join(parts)}, {billet}"
        return billet
    return " ".join(parts) or "[FROM]"


def build_subject_line(record: ReportRecord) -> str:
    """Return the upper-case subject line naming the event and its dates."""

    event = (record.event_name.strip() or "[EVENT]").upper()
    start = datefmt.format_subject_line(record.event_start_date) or "[START DATE]"
    end = datefmt.format_subject_line(record.event_end_date) or "[END DATE]"
    return f"AFTER ACTION REPORT FOR {event} CONDUCTED FROM {start} TO {end}"


def build_poc_line(record: ReportRecord) -> str:
    parts = [p for p in (record.poc_rank.strip(), record.poc_name.strip()) if p]
    name = " ".join(parts) or "[POC NAME]"
    phone = record.poc_phone.strip() or "(XXX) XXX-XXXX"
    email = record.poc_email.strip() or "email@usmc.mil"
    return f"The point of contact regarding this report is {name} at {phone} or {email}."


def _letterhead(record: ReportRecord) -> list[Block]:
    blocks: list[Block] = [
        LetterheadLine(service_name(record.service), LetterheadRole.SERVICE),
        LetterheadLine((record.unit_name.strip() or "[UNIT NAME]").upper(), LetterheadRole.UNIT),
    ]
    for address in (record.unit_address1, record.unit_address2):
        if address.strip():
            blocks.append(LetterheadLine(address.strip().upper(), LetterheadRole.ADDRESS))
    return blocks


def _sender_block(record: ReportRecord) -> list[Block]:
    blocks: list[Block] = [
        RightAlignedLine(REPLY_CAPTION, caption=True),
        RightAlignedLine(record.ssic.strip() or DEFAULT_SSIC),
    ]
    if record.office_code.strip():
        blocks.append(RightAlignedLine(record.office_code.strip()))
    blocks.append(
        RightAlignedLine(datefmt.format_military_short(record.document_date) or "[DATE]")
    )
    return blocks


def _topics(topics: Sequence[Topic]) -> list[Block]:
    if not topics:
        return [BlankLine(), LetteredTopic("a", NONE_IDENTIFIED)]
    blocks: list[Block] = []
    for index, topic in enumerate(topics):
        blocks.append(BlankLine())
        blocks.append(
            LetteredTopic(
                letter=letter_for_index(index),
                topic=topic.title.strip() or "[Topic description]",
                discussion=topic.discussion.strip() or "[Discussion text]",
                recommendation=topic.recommendation.strip() or "[Recommendation text]",
            )
        )
    return blocks


def build(record: ReportRecord) -> tuple[Block, ...]:
    """Return the ordered block sequence describing ``record``."""

    blocks: list[Block] = []
    blocks.extend(_letterhead(record))
    blocks.append(BlankLine())
    blocks.extend(_sender_block(record))
    blocks.append(BlankLine())

    blocks.append(LabeledField("From:", build_from_line(record)))
    blocks.append(LabeledField("To:", record.to_title.strip() or DEFAULT_TO_TITLE))
    blocks.append(BlankLine())
    blocks.append(LabeledField("Subj:", build_subject_line(record)))
    blocks.append(BlankLine())
    blocks.append(LabeledField("Ref:", REFERENCE_LINES[0], REFERENCE_LINES[1:]))
    blocks.append(BlankLine())

    blocks.append(NumberedParagraph(1, "IMPROVE", IMPROVE_INTRO))
    blocks.extend(_topics(record.improve_topics))
    blocks.append(BlankLine())
    blocks.append(NumberedParagraph(2, "SUSTAIN", SUSTAIN_INTRO))
    blocks.extend(_topics(record.sustain_topics))
    blocks.append(BlankLine())
    blocks.append(NumberedParagraph(3, None, build_poc_line(record)))

    blocks.append(Signature((record.signature_name.strip() or "[SIGNATURE]").upper()))
    return tuple(blocks)
