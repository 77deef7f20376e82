"""Page geometry and text measurement.

:class:`PageGeometry` is a flat, immutable snapshot of the layout settings in
:class:`~aarbuilder.config.ConfigModel`.  Its defaults describe a US Letter
page with one inch margins and 12pt Times.  :meth:`PageGeometry.check` rejects
geometry that cannot hold a single line of text; the engine calls it before
producing any output.

Text widths come from a :class:`TextMeasurer`.  :class:`FontMeasurer` uses the
reportlab metrics of the PDF standard fonts so that wrapping matches what the
PDF writer draws.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol, runtime_checkable

from reportlab.pdfbase import pdfmetrics

from ..config import ConfigModel
from ..utils.errors import ConfigurationError
from ..utils.text import line_height

__all__ = ["PageGeometry", "TextMeasurer", "FontMeasurer", "geometry_from_config"]


@dataclass(slots=True, frozen=True)
class PageGeometry:
    width: float = 612
    height: float = 792
    margin_top: float = 72
    margin_right: float = 72
    margin_bottom: float = 72
    margin_left: float = 72
    font_regular: str = "Times-Roman"
    font_bold: str = "Times-Bold"
    font_size: float = 12
    line_height_factor: float = 1.17
    indent_paragraph: float = 0
    indent_subparagraph: float = 15
    indent_subsubparagraph: float = 31
    label_gap: float = 4
    letterhead_top: float = 54
    header_top: float = 130
    service_size: float = 10
    unit_size: float = 8
    address_size: float = 8
    service_step: float = 12
    unit_step: float = 10
    address_step: float = 10
    sender_width: float = 72
    caption_size: float = 6
    caption_rise: float = 11
    intro_style: Literal["inline", "block"] = "inline"
    signature_gap_lines: int = 4
    signature_position: Literal["indent", "center"] = "indent"
    signature_indent: float = 234
    page_number_offset: float = 36

    @property
    def content_width(self) -> float:
        return self.width - self.margin_left - self.margin_right

    @property
    def content_right(self) -> float:
        return self.width - self.margin_right

    @property
    def line_height(self) -> int:
        return line_height(self.font_size, self.line_height_factor)

    @property
    def bottom_limit(self) -> float:
        """Lowest baseline allowed for body text, measured from the top."""

        return self.height - self.margin_bottom

    @property
    def sender_x(self) -> float:
        return self.width - self.margin_right - self.sender_width

    def check(self) -> None:
        """Raise :class:`ConfigurationError` when no text can be laid out."""

        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError("page width and height must be positive")
        if self.content_width <= 0:
            raise ConfigurationError(
                f"content width must be positive (page {self.width}pt, "
                f"margins {self.margin_left}+{self.margin_right}pt)"
            )
        if self.font_size <= 0 or self.line_height <= 0:
            raise ConfigurationError("font size must yield a positive line height")
        usable = self.bottom_limit - self.margin_top
        if usable < 3 * self.line_height:
            raise ConfigurationError(
                f"usable page height {usable}pt cannot hold a continuation header and body text"
            )
        deepest = max(self.indent_paragraph, self.indent_subparagraph, self.indent_subsubparagraph)
        if deepest >= self.content_width:
            raise ConfigurationError("outline indents exceed the content width")


def geometry_from_config(cfg: ConfigModel) -> PageGeometry:
    """Flatten ``cfg`` into a :class:`PageGeometry`."""

    return PageGeometry(
        width=cfg.page.width,
        height=cfg.page.height,
        margin_top=cfg.page.margin_top,
        margin_right=cfg.page.margin_right,
        margin_bottom=cfg.page.margin_bottom,
        margin_left=cfg.page.margin_left,
        font_regular=cfg.font.regular,
        font_bold=cfg.font.bold,
        font_size=cfg.font.size,
        line_height_factor=cfg.font.line_height_factor,
        indent_paragraph=cfg.indent.paragraph,
        indent_subparagraph=cfg.indent.subparagraph,
        indent_subsubparagraph=cfg.indent.subsubparagraph,
        label_gap=cfg.indent.label_gap,
        letterhead_top=cfg.letterhead.top,
        header_top=cfg.letterhead.header_top,
        service_size=cfg.letterhead.service_size,
        unit_size=cfg.letterhead.unit_size,
        address_size=cfg.letterhead.address_size,
        service_step=cfg.letterhead.service_step,
        unit_step=cfg.letterhead.unit_step,
        address_step=cfg.letterhead.address_step,
        sender_width=cfg.sender_block.width,
        caption_size=cfg.sender_block.caption_size,
        caption_rise=cfg.sender_block.caption_rise,
        intro_style=cfg.paragraph.intro_style,
        signature_gap_lines=cfg.signature.gap_lines,
        signature_position=cfg.signature.position,
        signature_indent=cfg.signature.indent,
        page_number_offset=cfg.page_number.offset,
    )


@runtime_checkable
class TextMeasurer(Protocol):
    """Return the rendered width of ``text`` in points."""

    def width(self, text: str, bold: bool = False) -> float:
        ...


class FontMeasurer:
    """Measure text with reportlab font metrics at a fixed size."""

    def __init__(self, regular: str, bold: str, size: float) -> None:
        for name in (regular, bold):
            try:
                pdfmetrics.getFont(name)
            except Exception as exc:
                raise ConfigurationError(f"unknown font: {name}") from exc
        self.regular = regular
        self.bold = bold
        self.size = size

    @classmethod
    def for_geometry(cls, geometry: PageGeometry) -> "FontMeasurer":
        return cls(geometry.font_regular, geometry.font_bold, geometry.font_size)

    def width(self, text: str, bold: bool = False) -> float:
        font = self.bold if bold else self.regular
        return pdfmetrics.stringWidth(text, font, self.size)
