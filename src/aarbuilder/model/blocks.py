"""Semantic layout blocks.

A report is described as an ordered tuple of blocks produced by
:func:`aarbuilder.builder.build`.  Blocks carry content only; positions, fonts
and wrapping are decided by the consumers (the plain-text renderer, the
pagination engine and the DOCX writer).  All blocks are immutable.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

__all__ = [
    "LetterheadRole",
    "LetterheadLine",
    "RightAlignedLine",
    "LabeledField",
    "NumberedParagraph",
    "LetteredTopic",
    "BlankLine",
    "Signature",
    "Block",
    "DISCUSSION_LABEL",
    "RECOMMENDATION_LABEL",
    "SIGNATURE_GAP_LINES",
]

DISCUSSION_LABEL = "Discussion."
RECOMMENDATION_LABEL = "Recommendation."

# Blank lines between the last paragraph and the signature name.
SIGNATURE_GAP_LINES = 3


class LetterheadRole(Enum):
    """Position of a line within the centered letterhead."""

    SERVICE = "service"
    UNIT = "unit"
    ADDRESS = "address"


@dataclass(slots=True, frozen=True)
class LetterheadLine:
    text: str
    role: LetterheadRole


@dataclass(slots=True, frozen=True)
class RightAlignedLine:
    """A line of the sender block; ``caption`` marks ``IN REPLY REFER TO:``."""

    text: str
    caption: bool = False


@dataclass(slots=True, frozen=True)
class LabeledField:
    """``From:``/``To:``/``Subj:``/``Ref:`` header field.

    ``continuation`` holds hard line breaks of fixed boilerplate; free-flowing
    consumers join them onto ``text`` with a space.
    """

    label: str
    text: str
    continuation: tuple[str, ...] = ()

    @property
    def full_text(self) -> str:
        return " ".join((self.text, *self.continuation))


@dataclass(slots=True, frozen=True)
class NumberedParagraph:
    """Top level paragraph such as ``1.  IMPROVE.  <intro>``.

    ``title`` is ``None`` for untitled paragraphs (the POC paragraph).
    """

    number: int
    title: str | None
    intro: str

    @property
    def label(self) -> str:
        return f"{self.number}."

    @property
    def caption(self) -> str | None:
        return f"{self.title}." if self.title else None


@dataclass(slots=True, frozen=True)
class LetteredTopic:
    """Sub-paragraph ``a.`` with its ``(1) Discussion`` and ``(2) Recommendation``.

    ``discussion`` and ``recommendation`` are ``None`` for the single
    ``None identified.`` entry of an empty list.
    """

    letter: str
    topic: str
    discussion: str | None = None
    recommendation: str | None = None

    @property
    def label(self) -> str:
        return f"{self.letter}."


@dataclass(slots=True, frozen=True)
class BlankLine:
    pass


@dataclass(slots=True, frozen=True)
class Signature:
    name: str


Block = Union[
    LetterheadLine,
    RightAlignedLine,
    LabeledField,
    NumberedParagraph,
    LetteredTopic,
    BlankLine,
    Signature,
]
