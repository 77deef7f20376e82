"""DOCX rendering with native paragraphs and runs.

Each block becomes one or more Word paragraphs, one per line of the plain-text
rendering, so that paragraph text and order match the canonical text.  Word
does its own wrapping; outline indents, the header tab stop and bold captions
are carried as paragraph and run formatting.  Page size and margins follow the
page geometry.
"""

from __future__ import annotations

import io
from collections.abc import Sequence

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH, WD_TAB_ALIGNMENT
from docx.shared import Inches, Pt
from docx.text.paragraph import Paragraph

from ...layout.geometry import PageGeometry
from ...model.blocks import (
    DISCUSSION_LABEL,
    RECOMMENDATION_LABEL,
    SIGNATURE_GAP_LINES,
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
from ...utils.text import ensure_double_spaces

__all__ = ["DOCX_FONT", "HEADER_TAB", "render_docx"]

DOCX_FONT = "Times New Roman"
HEADER_TAB = Inches(0.625)
LINE_SPACING = 1.15


class _DocxBuilder:
    def __init__(self, geometry: PageGeometry) -> None:
        self.g = geometry
        self.doc = Document()
        section = self.doc.sections[0]
        section.page_width = Pt(geometry.width)
        section.page_height = Pt(geometry.height)
        section.top_margin = Pt(geometry.margin_top)
        section.right_margin = Pt(geometry.margin_right)
        section.bottom_margin = Pt(geometry.margin_bottom)
        section.left_margin = Pt(geometry.margin_left)
        normal = self.doc.styles["Normal"]
        normal.font.name = DOCX_FONT
        normal.font.size = Pt(geometry.font_size)

    def para(self, text: str = "", *, bold: bool = False) -> Paragraph:
        p = self.doc.add_paragraph()
        pf = p.paragraph_format
        pf.space_before = Pt(0)
        pf.space_after = Pt(0)
        pf.line_spacing = LINE_SPACING
        if text:
            p.add_run(text).bold = bold
        return p

    def text_runs(self, p: Paragraph, text: str) -> None:
        """Append ``text`` to ``p``; each hard line break starts a new paragraph."""

        head, *rest = ensure_double_spaces(text).replace("\r\n", "\n").split("\n")
        if head:
            p.add_run(head)
        for line in rest:
            self.para(line)

    def letterhead(self, block: LetterheadLine) -> None:
        size = {
            LetterheadRole.SERVICE: self.g.service_size,
            LetterheadRole.UNIT: self.g.unit_size,
            LetterheadRole.ADDRESS: self.g.address_size,
        }[block.role]
        p = self.para()
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER
        run = p.add_run(block.text)
        run.bold = block.role is not LetterheadRole.ADDRESS
        run.font.size = Pt(size)

    def sender(self, block: RightAlignedLine) -> None:
        p = self.para()
        p.alignment = WD_ALIGN_PARAGRAPH.RIGHT
        run = p.add_run(block.text)
        if block.caption:
            run.font.size = Pt(self.g.caption_size)

    def field(self, block: LabeledField) -> None:
        p = self.para()
        p.paragraph_format.tab_stops.add_tab_stop(HEADER_TAB, WD_TAB_ALIGNMENT.LEFT)
        p.add_run(block.label)
        p.add_run("\t")
        self.text_runs(p, block.text)
        for extra in block.continuation:
            cont = self.para(extra)
            cont.paragraph_format.left_indent = HEADER_TAB

    def paragraph(self, block: NumberedParagraph) -> None:
        p = self.para(f"{block.label}  ")
        p.paragraph_format.left_indent = Pt(self.g.indent_paragraph)
        if block.caption is not None:
            p.add_run(block.caption).bold = True
            p.add_run("  ")
        self.text_runs(p, block.intro)

    def topic(self, block: LetteredTopic) -> None:
        p = self.para(f"{block.label}  ")
        p.paragraph_format.left_indent = Pt(self.g.indent_subparagraph)
        self.text_runs(p, block.topic)
        if block.discussion is not None:
            self._sub("(1)", DISCUSSION_LABEL, block.discussion)
        if block.recommendation is not None:
            self.para()
            self._sub("(2)", RECOMMENDATION_LABEL, block.recommendation)

    def _sub(self, label: str, caption: str, text: str) -> None:
        p = self.para(f"{label} ")
        p.paragraph_format.left_indent = Pt(self.g.indent_subsubparagraph)
        p.add_run(caption).bold = True
        p.add_run("  ")
        self.text_runs(p, text)

    def signature(self, block: Signature) -> None:
        for _ in range(SIGNATURE_GAP_LINES):
            self.para()
        p = self.para(block.name)
        if self.g.signature_position == "center":
            p.alignment = WD_ALIGN_PARAGRAPH.CENTER
        else:
            p.paragraph_format.left_indent = Pt(self.g.signature_indent)

    def add(self, block: Block) -> None:
        if isinstance(block, LetterheadLine):
            self.letterhead(block)
        elif isinstance(block, BlankLine):
            self.para()
        elif isinstance(block, RightAlignedLine):
            self.sender(block)
        elif isinstance(block, LabeledField):
            self.field(block)
        elif isinstance(block, NumberedParagraph):
            self.paragraph(block)
        elif isinstance(block, LetteredTopic):
            self.topic(block)
        elif isinstance(block, Signature):
            self.signature(block)
        else:
            raise TypeError(f"unsupported block: {block!r}")


def render_docx(
    blocks: Sequence[Block],
    geometry: PageGeometry | None = None,
    *,
    title: str = "After Action Report",
) -> bytes:
    """Return DOCX bytes for ``blocks``."""

    builder = _DocxBuilder(geometry or PageGeometry())
    builder.doc.core_properties.title = title
    builder.doc.core_properties.author = "aarbuilder"
    for block in blocks:
        builder.add(block)
    buf = io.BytesIO()
    builder.doc.save(buf)
    return buf.getvalue()
