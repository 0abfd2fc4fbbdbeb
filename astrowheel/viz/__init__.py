"""SVG output for wheel charts."""

from .glyphs import DEFAULT_GLYPHS, SIGN_GLYPHS, Glyph, GlyphCatalog, default_catalog
from .renderer import ChartRenderer, SvgChartRenderer, SymbolFactory, WheelGeometry
from .svg import SVG_NS, SvgDocument, SvgElement

__all__ = [
    "ChartRenderer",
    "DEFAULT_GLYPHS",
    "Glyph",
    "GlyphCatalog",
    "SIGN_GLYPHS",
    "SVG_NS",
    "SvgChartRenderer",
    "SvgDocument",
    "SvgElement",
    "SymbolFactory",
    "WheelGeometry",
    "default_catalog",
]
