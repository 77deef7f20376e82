"""Pagination and layout engine.

The engine walks the block sequence produced by
:func:`aarbuilder.builder.build` and emits :class:`PositionedText` items with
absolute page coordinates.  Coordinates are in points with ``y`` measured
downward from the top edge to the text baseline; writers convert to their own
origin.

Pagination rules
----------------
* The cursor starts in the letterhead region.  The first block after the
  letterhead moves the cursor down to the header block top.
* Every text block is wrapped before it is placed.  When the whole block does
  not fit above the bottom margin it is moved to a new page; a block that does
  not fit on a fresh page either flows line by line and breaks wherever a line
  would cross the margin.
* Each new page begins with a continuation header: the subject line labelled
  ``Subj:`` followed by one blank line.
* Page numbers are stamped, centered, on every page except the first.

Labelled text (``From:``, ``1.``, ``a.``, ``(1)``) starts after the label plus
a fixed gap; wrapped continuation lines return to the left margin.  All free
text is normalized to two spaces between sentences before it is measured.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

from ..model.blocks import (
    DISCUSSION_LABEL,
    RECOMMENDATION_LABEL,
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
from ..utils.logging import get_logger
from ..utils.text import ensure_double_spaces
from .geometry import FontMeasurer, PageGeometry, TextMeasurer
from .wrap import WrappedLine, wrap_text

__all__ = ["TextRole", "PositionedText", "LayoutResult", "LayoutEngine", "layout"]

log = get_logger(__name__)

SUBJECT_LABEL = "Subj:"


class TextRole(Enum):
    """What a positioned item belongs to."""

    BODY = "body"
    CONTINUATION_HEADER = "continuation_header"
    PAGE_NUMBER = "page_number"


@dataclass(slots=True, frozen=True)
class PositionedText:
    """A single draw instruction.

    ``x`` is the left edge for ``align="left"`` and the center for
    ``align="center"``.
    """

    page: int
    x: float
    y: float
    text: str
    bold: bool = False
    size: float = 12
    align: Literal["left", "center"] = "left"
    role: TextRole = TextRole.BODY


@dataclass(slots=True, frozen=True)
class LayoutResult:
    items: tuple[PositionedText, ...]
    page_count: int
    geometry: PageGeometry

    def page_items(self, page: int) -> list[PositionedText]:
        return [item for item in self.items if item.page == page]

    def body_text(self) -> list[str]:
        """Text of body items in emission order."""

        return [item.text for item in self.items if item.role is TextRole.BODY]


@dataclass(slots=True)
class LayoutCursor:
    """Mutable per-run state of the engine."""

    page: int = 1
    y: float = 0.0
    letterhead_open: bool = True
    body_on_page: bool = False
    items: list[PositionedText] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class _Line:
    """A wrapped line anchored at ``x``, plus an optional label drawn at ``label_x``."""

    x: float
    line: WrappedLine
    label: str | None = None
    label_x: float = 0.0


# ``None`` entries in a block's line list are blank lines.
_BlockLines = list[_Line | None]


class LayoutEngine:
    """Lay out one block sequence on pages described by ``geometry``.

    The engine is stateless between calls to :meth:`layout`; a fresh
    :class:`LayoutCursor` is created for every run.
    """

    def __init__(self, geometry: PageGeometry, measurer: TextMeasurer | None = None) -> None:
        geometry.check()
        self.geometry = geometry
        self.measure = measurer if measurer is not None else FontMeasurer.for_geometry(geometry)

    # ------------------------------------------------------------------
    # Wrapping helpers
    # ------------------------------------------------------------------

    def _segments(self, text: str) -> list[str]:
        """Normalize ``text`` and split it at hard line breaks."""

        return ensure_double_spaces(text).replace("\r\n", "\n").split("\n")

    def _tail(self, segments: list[str]) -> list[_Line]:
        g = self.geometry
        lines: list[_Line] = []
        for segment in segments:
            for w in wrap_text(segment, g.content_width, g.content_width, self.measure):
                lines.append(_Line(g.margin_left, w))
        return lines

    def _labelled(self, label: str, label_x: float, text: str, *, bold_prefix: int = 0) -> list[_Line]:
        g = self.geometry
        text_x = label_x + self.measure.width(label) + g.label_gap
        head, *rest = self._segments(text)
        wrapped = wrap_text(
            head,
            g.content_right - text_x,
            g.content_width,
            self.measure,
            bold_prefix=bold_prefix,
        )
        lines = [_Line(text_x, wrapped[0], label, label_x)]
        lines.extend(_Line(g.margin_left, w) for w in wrapped[1:])
        lines.extend(self._tail(rest))
        return lines

    def _plain(self, x: float, text: str, *, bold_prefix: int = 0) -> list[_Line]:
        g = self.geometry
        head, *rest = self._segments(text)
        wrapped = wrap_text(
            head,
            g.content_right - x,
            g.content_width,
            self.measure,
            bold_prefix=bold_prefix,
        )
        lines = [_Line(x, wrapped[0])]
        lines.extend(_Line(g.margin_left, w) for w in wrapped[1:])
        lines.extend(self._tail(rest))
        return lines

    def _field_lines(self, block: LabeledField) -> _BlockLines:
        return list(self._labelled(block.label, self.geometry.margin_left, block.full_text))

    def _paragraph_lines(self, block: NumberedParagraph) -> _BlockLines:
        g = self.geometry
        label_x = g.margin_left + g.indent_paragraph
        caption = block.caption
        if caption is None:
            return list(self._labelled(block.label, label_x, block.intro))
        if g.intro_style == "block":
            lines: _BlockLines = list(
                self._labelled(block.label, label_x, caption, bold_prefix=len(caption))
            )
            lines.extend(self._plain(g.margin_left, block.intro))
            return lines
        text = f"{caption}  {block.intro}"
        return list(self._labelled(block.label, label_x, text, bold_prefix=len(caption)))

    def _topic_lines(self, block: LetteredTopic) -> _BlockLines:
        g = self.geometry
        lines: _BlockLines = list(
            self._labelled(block.label, g.margin_left + g.indent_subparagraph, block.topic)
        )
        sub_x = g.margin_left + g.indent_subsubparagraph
        if block.discussion is not None:
            text = f"{DISCUSSION_LABEL}  {block.discussion}"
            lines.extend(self._labelled("(1)", sub_x, text, bold_prefix=len(DISCUSSION_LABEL)))
        if block.recommendation is not None:
            text = f"{RECOMMENDATION_LABEL}  {block.recommendation}"
            lines.append(None)
            lines.extend(self._labelled("(2)", sub_x, text, bold_prefix=len(RECOMMENDATION_LABEL)))
        return lines

    # ------------------------------------------------------------------
    # Emission
    # ------------------------------------------------------------------

    def _emit(self, cur: LayoutCursor, item: _Line, role: TextRole = TextRole.BODY) -> None:
        size = self.geometry.font_size
        if item.label is not None:
            cur.items.append(
                PositionedText(cur.page, item.label_x, cur.y, item.label, size=size, role=role)
            )
        for frag in item.line.fragments:
            text = frag.text.lstrip(" ")
            if not text:
                continue
            x = item.x + frag.offset + self.measure.width(" ") * (len(frag.text) - len(text))
            cur.items.append(PositionedText(cur.page, x, cur.y, text, frag.bold, size, role=role))

    def _page_break(self, cur: LayoutCursor, subject_lines: list[_Line]) -> None:
        g = self.geometry
        cur.page += 1
        cur.y = g.margin_top
        cur.body_on_page = False
        log.debug("page break -> page %d", cur.page)
        for line in subject_lines:
            self._emit(cur, line, TextRole.CONTINUATION_HEADER)
            cur.y += g.line_height
        cur.y += g.line_height

    def _fits(self, cur: LayoutCursor, height: float) -> bool:
        return cur.y + height <= self.geometry.bottom_limit

    def _place(self, cur: LayoutCursor, lines: _BlockLines, subject_lines: list[_Line]) -> None:
        lh = self.geometry.line_height
        if not self._fits(cur, len(lines) * lh) and cur.body_on_page:
            self._page_break(cur, subject_lines)
        for line in lines:
            if line is not None:
                if not self._fits(cur, lh) and cur.body_on_page:
                    self._page_break(cur, subject_lines)
                self._emit(cur, line)
                cur.body_on_page = True
            cur.y += lh

    def _close_letterhead(self, cur: LayoutCursor) -> None:
        if cur.letterhead_open:
            cur.letterhead_open = False
            cur.y = max(cur.y, self.geometry.header_top)

    def _letterhead(self, cur: LayoutCursor, block: LetterheadLine) -> None:
        g = self.geometry
        size, step, bold = {
            LetterheadRole.SERVICE: (g.service_size, g.service_step, True),
            LetterheadRole.UNIT: (g.unit_size, g.unit_step, True),
            LetterheadRole.ADDRESS: (g.address_size, g.address_step, False),
        }[block.role]
        cur.items.append(
            PositionedText(cur.page, g.width / 2, cur.y, block.text, bold, size, "center")
        )
        cur.y += step

    def _sender(self, cur: LayoutCursor, block: RightAlignedLine, subject_lines: list[_Line]) -> None:
        g = self.geometry
        if block.caption:
            cur.items.append(
                PositionedText(cur.page, g.sender_x, cur.y - g.caption_rise, block.text, size=g.caption_size)
            )
            return
        if not self._fits(cur, g.line_height) and cur.body_on_page:
            self._page_break(cur, subject_lines)
        cur.items.append(PositionedText(cur.page, g.sender_x, cur.y, block.text, size=g.font_size))
        cur.body_on_page = True
        cur.y += g.line_height

    def _signature(self, cur: LayoutCursor, block: Signature, subject_lines: list[_Line]) -> None:
        g = self.geometry
        gap = g.signature_gap_lines * g.line_height
        if not self._fits(cur, gap + g.line_height) and cur.body_on_page:
            self._page_break(cur, subject_lines)
        cur.y += gap
        if g.signature_position == "center":
            item = PositionedText(cur.page, g.width / 2, cur.y, block.name, size=g.font_size, align="center")
        else:
            item = PositionedText(cur.page, g.margin_left + g.signature_indent, cur.y, block.name, size=g.font_size)
        cur.items.append(item)
        cur.body_on_page = True
        cur.y += g.line_height

    def _stamp_page_numbers(self, cur: LayoutCursor) -> None:
        g = self.geometry
        y = g.height - g.page_number_offset
        for page in range(2, cur.page + 1):
            cur.items.append(
                PositionedText(
                    page, g.width / 2, y, str(page), size=g.font_size, align="center",
                    role=TextRole.PAGE_NUMBER,
                )
            )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def layout(self, blocks: Sequence[Block], subject: str | None = None) -> LayoutResult:
        """Position every block and return the draw instructions.

        ``subject`` overrides the continuation header text; by default the
        text of the ``Subj:`` field in ``blocks`` is used.
        """

        g = self.geometry
        if subject is None:
            subject = next(
                (b.full_text for b in blocks if isinstance(b, LabeledField) and b.label == SUBJECT_LABEL),
                "",
            )
        subject_lines = self._labelled(SUBJECT_LABEL, g.margin_left, subject)

        cur = LayoutCursor(y=g.letterhead_top)
        for block in blocks:
            if isinstance(block, LetterheadLine):
                self._letterhead(cur, block)
                continue
            if isinstance(block, BlankLine):
                if not cur.letterhead_open:
                    cur.y += g.line_height
                continue
            self._close_letterhead(cur)
            if isinstance(block, RightAlignedLine):
                self._sender(cur, block, subject_lines)
            elif isinstance(block, LabeledField):
                self._place(cur, self._field_lines(block), subject_lines)
            elif isinstance(block, NumberedParagraph):
                self._place(cur, self._paragraph_lines(block), subject_lines)
            elif isinstance(block, LetteredTopic):
                self._place(cur, self._topic_lines(block), subject_lines)
            elif isinstance(block, Signature):
                self._signature(cur, block, subject_lines)
            else:  # pragma: no cover - exhaustive over Block
                raise TypeError(f"unsupported block: {block!r}")

        self._stamp_page_numbers(cur)
        log.debug("laid out %d items on %d page(s)", len(cur.items), cur.page)
        return LayoutResult(tuple(cur.items), cur.page, g)


def layout(
    blocks: Sequence[Block],
    geometry: PageGeometry | None = None,
    measurer: TextMeasurer | None = None,
) -> LayoutResult:
    """Convenience wrapper around :class:`LayoutEngine`."""

    return LayoutEngine(geometry or PageGeometry(), measurer).layout(blocks)
