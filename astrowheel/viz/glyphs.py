"""Text glyphs for bodies, points of interest and zodiac signs."""
from __future__ import annotations

from collections.abc import Iterable, MutableMapping
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class Glyph:
    """A symbol drawn as a text run."""

    name: str
    symbol: str


class GlyphCatalog:
    """Case-insensitive lookup of glyphs by name."""

    def __init__(self, glyphs: Iterable[Glyph] | None = None) -> None:
        self._glyphs: MutableMapping[str, Glyph] = {}
        if glyphs:
            for glyph in glyphs:
                self.register(glyph)

    def register(self, glyph: Glyph) -> None:
        key = glyph.name.lower()
        if key in self._glyphs:
            raise ValueError(f"Glyph '{glyph.name}' already registered")
        self._glyphs[key] = glyph

    def replace(self, glyph: Glyph) -> None:
        self._glyphs[glyph.name.lower()] = glyph

    def get(self, name: str) -> Glyph:
        try:
            return self._glyphs[name.lower()]
        except KeyError as exc:
            raise KeyError(f"Unknown glyph '{name}'") from exc

    def symbol_for(self, name: str) -> str:
        """Glyph symbol for ``name``; unknown names render as their initials."""

        glyph = self._glyphs.get(name.lower())
        return glyph.symbol if glyph is not None else name[:2]


DEFAULT_GLYPHS = (
    Glyph("Sun", "☉"),
    Glyph("Moon", "☽"),
    Glyph("Mercury", "☿"),
    Glyph("Venus", "♀"),
    Glyph("Mars", "♂"),
    Glyph("Jupiter", "♃"),
    Glyph("Saturn", "♄"),
    Glyph("Uranus", "♅"),
    Glyph("Neptune", "♆"),
    Glyph("Pluto", "♇"),
    Glyph("Chiron", "⚷"),
    Glyph("Lilith", "⚸"),
    Glyph("NNode", "☊"),
    Glyph("SNode", "☋"),
    Glyph("Fortune", "⊗"),
    Glyph("As", "As"),
    Glyph("Ds", "Ds"),
    Glyph("Mc", "Mc"),
    Glyph("Ic", "Ic"),
)

SIGN_GLYPHS = (
    "♈",
    "♉",
    "♊",
    "♋",
    "♌",
    "♍",
    "♎",
    "♏",
    "♐",
    "♑",
    "♒",
    "♓",
)


@lru_cache(maxsize=1)
def default_catalog() -> GlyphCatalog:
    return GlyphCatalog(DEFAULT_GLYPHS)
