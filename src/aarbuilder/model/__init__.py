"""Input record and layout block types."""

from .blocks import (
    Block,
    BlankLine,
    LabeledField,
    LetteredTopic,
    LetterheadLine,
    NumberedParagraph,
    RightAlignedLine,
    Signature,
)
from .record import ReportRecord, Topic, load_record

__all__ = [
    "Block",
    "BlankLine",
    "LabeledField",
    "LetteredTopic",
    "LetterheadLine",
    "NumberedParagraph",
    "RightAlignedLine",
    "Signature",
    "ReportRecord",
    "Topic",
    "load_record",
]
