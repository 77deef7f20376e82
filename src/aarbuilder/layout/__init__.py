"""Pagination and layout engine producing absolutely positioned text."""

from .engine import LayoutEngine, LayoutResult, PositionedText, TextRole, layout
from .geometry import FontMeasurer, PageGeometry, TextMeasurer, geometry_from_config
from .wrap import Fragment, WrappedLine, wrap_text

__all__ = [
    "LayoutEngine",
    "LayoutResult",
    "PositionedText",
    "TextRole",
    "layout",
    "FontMeasurer",
    "PageGeometry",
    "TextMeasurer",
    "geometry_from_config",
    "Fragment",
    "WrappedLine",
    "wrap_text",
]
