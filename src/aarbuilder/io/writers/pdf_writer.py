"""PDF rendering of a laid-out report.

The writer draws every :class:`~aarbuilder.layout.engine.PositionedText` of a
:class:`~aarbuilder.layout.engine.LayoutResult` onto a reportlab canvas.
Layout coordinates are measured from the top edge; reportlab measures from the
bottom, so ``y`` is flipped against the page height.
"""

from __future__ import annotations

import io

from reportlab.pdfgen import canvas

from ...layout.engine import LayoutResult

__all__ = ["render_pdf"]


def render_pdf(result: LayoutResult, *, title: str = "After Action Report") -> bytes:
    """Return the PDF bytes for ``result``."""

    g = result.geometry
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=(g.width, g.height))
    c.setAuthor("aarbuilder")
    c.setTitle(title)

    for page in range(1, result.page_count + 1):
        for item in result.page_items(page):
            c.setFont(g.font_bold if item.bold else g.font_regular, item.size)
            y = g.height - item.y
            if item.align == "center":
                c.drawCentredString(item.x, y, item.text)
            else:
                c.drawString(item.x, y, item.text)
        c.showPage()

    c.save()
    return buf.getvalue()
