"""SVG rendering of the radix and transit rings of a wheel chart.

The renderer draws into named layers (``<g id=...>``) of a shared
:class:`~astrowheel.viz.svg.SvgDocument`.  Each layer is cleared before
it is redrawn, so animation frames and static draws reuse the same
document.  Collision layout is not done here: callers hand in located
points (see :func:`astrowheel.layout.collision.assemble`) or raw
positions, which are projected as they are.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Protocol, Sequence

from ..aspects import AspectMatch
from ..config.settings import Settings, default_settings
from ..core.angles import (
    dashed_line_segments,
    description_positions,
    normalize_degrees,
    point_on_circle,
    ruler_positions,
)
from ..layout.collision import LocatedPoint
from ..zodiac import PlanetPoint, Zodiac
from .glyphs import SIGN_GLYPHS, GlyphCatalog, default_catalog
from .svg import SvgDocument, SvgElement

__all__ = [
    "ChartRenderer",
    "SvgChartRenderer",
    "SymbolFactory",
    "WheelGeometry",
]

LOG = logging.getLogger(__name__)

SymbolFactory = Callable[[str, float, float], Optional[SvgElement]]

RADIX = "radix"
TRANSIT = "transit"


class ChartRenderer(Protocol):
    """Drawing surface driven by charts and the animator."""

    def draw_points(self, positions: Mapping[str, Sequence[float]]) -> None:
        ...

    def draw_aspects(self, matches: Sequence[AspectMatch]) -> None:
        ...

    def rotate_cusps(self, rotation: float) -> None:
        ...

    def snap_cusps(self, cusps: Sequence[float]) -> None:
        ...


@dataclass(frozen=True)
class WheelGeometry:
    """Radii of the wheel bands, derived from the outer radius."""

    cx: float
    cy: float
    radius: float
    signs_inner: float
    ruler_inner: float
    indoor: float
    radix_points: float
    transit_ruler_outer: float
    transit_points: float

    @classmethod
    def from_settings(cls, cx: float, cy: float, radius: float, settings: Settings) -> "WheelGeometry":
        layout = settings.layout
        band = radius / layout.inner_circle_radius_ratio
        ruler = band * 2.0 / layout.ruler_radius
        signs_inner = radius - band
        ruler_inner = signs_inner - ruler
        offset = layout.padding * layout.symbol_scale
        return cls(
            cx=cx,
            cy=cy,
            radius=radius,
            signs_inner=signs_inner,
            ruler_inner=ruler_inner,
            indoor=radius / layout.indoor_circle_radius_ratio,
            radix_points=ruler_inner - offset,
            transit_ruler_outer=radius + ruler,
            transit_points=radius + ruler + offset,
        )


class SvgChartRenderer:
    """Draw one ring (radix or transit) of a chart into an SVG document."""

    def __init__(
        self,
        document: SvgDocument,
        geometry: WheelGeometry,
        settings: Optional[Settings] = None,
        *,
        ring: str = RADIX,
        shift: float = 0.0,
        zodiac: Optional[Zodiac] = None,
        symbol_factory: Optional[SymbolFactory] = None,
        glyphs: Optional[GlyphCatalog] = None,
        id_prefix: str = "astrowheel",
    ) -> None:
        if ring not in (RADIX, TRANSIT):
            raise ValueError(f"Unknown ring {ring!r}")
        self.document = document
        self.geometry = geometry
        self.settings = settings or default_settings()
        self.ring = ring
        self.shift = shift
        self.zodiac = zodiac
        self.symbol_factory = symbol_factory
        self.glyphs = glyphs or default_catalog()
        self.id_prefix = id_prefix
        self.root = document.group(id_prefix)
        self.located: List[LocatedPoint] = []

    # Layers ------------------------------------------------------------
    def layer_id(self, name: str) -> str:
        if name == "aspects":
            return f"{self.id_prefix}-aspects"
        return f"{self.id_prefix}-{self.ring}-{name}"

    def layer(self, name: str) -> SvgElement:
        wrapper = self.document.group(self.layer_id(name), parent=self.root)
        wrapper.clear()
        return wrapper

    @property
    def points_radius(self) -> float:
        if self.ring == TRANSIT:
            return self.geometry.transit_points
        return self.geometry.radix_points

    def _xy(self, radius: float, angle: float) -> tuple:
        return point_on_circle(self.geometry.cx, self.geometry.cy, radius, angle, self.shift)

    # Static parts ------------------------------------------------------
    def draw_universe(self) -> None:
        """Twelve sign segments followed by their glyphs."""

        rendering = self.settings.rendering
        geo = self.geometry
        wrapper = self.layer("signs")
        for idx in range(12):
            start = idx * 30.0
            end = start + 30.0
            ox1, oy1 = self._xy(geo.radius, start)
            ox2, oy2 = self._xy(geo.radius, end)
            ix1, iy1 = self._xy(geo.signs_inner, end)
            ix2, iy2 = self._xy(geo.signs_inner, start)
            d = (
                f"M {ox1} {oy1} "
                f"A {geo.radius} {geo.radius} 0 0 0 {ox2} {oy2} "
                f"L {ix1} {iy1} "
                f"A {geo.signs_inner} {geo.signs_inner} 0 0 1 {ix2} {iy2} Z"
            )
            if rendering.stroke_only:
                self.document.path(
                    d,
                    parent=wrapper,
                    fill="none",
                    stroke=rendering.circle_color,
                    stroke_width=rendering.cusps_stroke,
                )
            else:
                self.document.path(d, parent=wrapper, fill=rendering.colors_signs[idx])
        middle = geo.signs_inner + (geo.radius - geo.signs_inner) / 2.0
        for idx, symbol in enumerate(SIGN_GLYPHS):
            x, y = self._xy(middle, idx * 30.0 + 15.0)
            self.document.text(
                x,
                y,
                symbol,
                parent=wrapper,
                font_size=rendering.points_text_size * self.settings.layout.symbol_scale,
                fill=rendering.points_color,
                text_anchor="middle",
            )

    def draw_ruler(self) -> None:
        """72 ticks every 5° plus the circle they stand on."""

        rendering = self.settings.rendering
        geo = self.geometry
        if self.ring == TRANSIT:
            start, end = geo.radius, geo.transit_ruler_outer
            base = end
        else:
            start, end = geo.ruler_inner, geo.signs_inner
            base = start
        wrapper = self.layer("ruler")
        for segment in ruler_positions(geo.cx, geo.cy, start, end, self.shift):
            self.document.line(
                segment.start_x,
                segment.start_y,
                segment.end_x,
                segment.end_y,
                parent=wrapper,
                stroke=rendering.circle_color,
                stroke_width=rendering.cusps_stroke,
            )
        self.document.circle(
            geo.cx,
            geo.cy,
            base,
            parent=wrapper,
            fill="none",
            stroke=rendering.circle_color,
            stroke_width=rendering.cusps_stroke,
        )

    def draw_circles(self) -> None:
        """Outer, sign and indoor circles of the radix."""

        rendering = self.settings.rendering
        geo = self.geometry
        wrapper = self.layer("circles")
        for radius in (geo.radius, geo.signs_inner, geo.indoor):
            self.document.circle(
                geo.cx,
                geo.cy,
                radius,
                parent=wrapper,
                fill="none",
                stroke=rendering.circle_color,
                stroke_width=rendering.circle_strong,
            )

    def draw_cusps(self, cusps: Optional[Sequence[float]]) -> None:
        """House cusp lines, broken around symbols, with house numbers."""

        wrapper = self.layer("cusps")
        wrapper.remove_attribute("transform")
        if not cusps:
            return
        rendering = self.settings.rendering
        geo = self.geometry
        if self.ring == TRANSIT:
            start, end = geo.radius, geo.transit_points + self.settings.layout.padding
            numbers_radius = geo.transit_ruler_outer + (geo.transit_points - geo.transit_ruler_outer) / 2.0
        else:
            start, end = geo.indoor, geo.ruler_inner
            numbers_radius = geo.indoor + self.settings.layout.padding
        tolerance = self.settings.layout.collision_tolerance()
        for idx, cusp in enumerate(cusps):
            segments = dashed_line_segments(
                geo.cx, geo.cy, cusp, start, end, self.located, tolerance, self.shift
            )
            for segment in segments:
                self.document.line(
                    segment.start_x,
                    segment.start_y,
                    segment.end_x,
                    segment.end_y,
                    parent=wrapper,
                    stroke=rendering.line_color,
                    stroke_width=rendering.cusps_stroke,
                )
            following = cusps[(idx + 1) % len(cusps)]
            span = normalize_degrees(following - cusp)
            x, y = self._xy(numbers_radius, cusp + span / 2.0)
            self.document.text(
                x,
                y,
                str(idx + 1),
                parent=wrapper,
                fill=rendering.cusps_font_color,
                font_size=rendering.points_text_size * self.settings.layout.symbol_scale,
                text_anchor="middle",
            )

    def draw_axis(self, cusps: Optional[Sequence[float]]) -> None:
        """Ascendant, descendant, midheaven and imum coeli markers."""

        wrapper = self.layer("axis")
        if not cusps:
            return
        rendering = self.settings.rendering
        geo = self.geometry
        padding = self.settings.layout.padding
        for label, idx in (("As", 0), ("Ic", 3), ("Ds", 6), ("Mc", 9)):
            angle = cusps[idx]
            x1, y1 = self._xy(geo.radius, angle)
            x2, y2 = self._xy(geo.radius + padding, angle)
            self.document.line(
                x1, y1, x2, y2, parent=wrapper, stroke=rendering.line_color, stroke_width=rendering.circle_strong
            )
            tx, ty = self._xy(geo.radius + padding * 1.5, angle)
            self.document.text(tx, ty, label, parent=wrapper, fill=rendering.points_color, text_anchor="middle")

    def clear_axis(self) -> None:
        self.layer("axis")

    # Points ------------------------------------------------------------
    def draw_points(self, positions: Mapping[str, Sequence[float]]) -> None:
        """Project ``positions`` onto the ring without collision layout."""

        radius = self.points_radius
        located = []
        for name, values in positions.items():
            if not values:
                continue
            angle = normalize_degrees(values[0])
            x, y = self._xy(radius, angle)
            located.append(LocatedPoint(name=name, angle=angle, x=x, y=y, radius=radius))
        self.draw_located(located, positions)

    def draw_located(
        self,
        points: Sequence[LocatedPoint],
        positions: Mapping[str, Sequence[float]],
    ) -> None:
        """Draw symbols at their located positions with their descriptions."""

        self.located = list(points)
        rendering = self.settings.rendering
        scale = self.settings.layout.symbol_scale
        wrapper = self.layer("points")
        for point in self.located:
            values = positions.get(point.name) or [point.reference_angle]
            longitude = values[0]
            group = self.document.group(parent=wrapper, class_="planet", data_name=point.name)
            if rendering.add_click_area:
                self.document.circle(
                    point.x,
                    point.y,
                    rendering.points_text_size * scale,
                    parent=group,
                    fill="transparent",
                    id=f"{self.layer_id('points')}-{point.name}",
                )
            group.add(self.symbol(point.name, point.x, point.y))

            texts = self.description(point.name, values)
            for anchor in description_positions(point.x, point.y, texts, rendering.points_text_size * scale):
                self.document.text(
                    anchor.x,
                    anchor.y,
                    anchor.text,
                    parent=group,
                    font_size=rendering.points_text_size * scale * 0.8,
                    fill=rendering.points_color,
                )

            if point.displaced and not rendering.stroke_only:
                self._draw_pointer(group, point, longitude)

    def description(self, name: str, values: Sequence[float]) -> List[str]:
        """Degree in sign, retrograde marker and dignity markers."""

        longitude = normalize_degrees(values[0])
        texts = [str(int(longitude % 30.0))]
        if len(values) > 1 and values[1] < 0:
            texts.append("R")
        if self.zodiac is not None and self.settings.rendering.show_dignities_text:
            dignities = self.zodiac.get_dignities(PlanetPoint(name, longitude))
            if dignities:
                texts.append(",".join(dignities))
        return texts

    def symbol(self, name: str, x: float, y: float) -> SvgElement:
        """Custom symbol from the factory, else the default glyph."""

        if self.symbol_factory is not None:
            custom = self.symbol_factory(name, x, y)
            if custom is not None:
                return custom
        rendering = self.settings.rendering
        return SvgElement("text", text=self.glyphs.symbol_for(name)).set(
            x=x,
            y=y,
            font_size=rendering.points_text_size * 2 * self.settings.layout.symbol_scale,
            fill=rendering.points_color,
            stroke_width=rendering.points_stroke,
            text_anchor="middle",
            dominant_baseline="central",
        )

    def _draw_pointer(self, parent: SvgElement, point: LocatedPoint, longitude: float) -> None:
        geo = self.geometry
        padding = self.settings.layout.padding * self.settings.layout.symbol_scale
        if self.ring == TRANSIT:
            start_radius = geo.transit_ruler_outer
            end_radius = point.radius - padding / 2.0
        else:
            start_radius = geo.ruler_inner
            end_radius = point.radius + padding / 2.0
        x1, y1 = self._xy(start_radius, longitude)
        x2, y2 = self._xy(end_radius, point.angle)
        self.document.line(
            x1,
            y1,
            x2,
            y2,
            parent=parent,
            stroke=self.settings.rendering.line_color,
            stroke_width=self.settings.rendering.cusps_stroke / 2.0,
        )

    # Aspects -----------------------------------------------------------
    def draw_aspects(self, matches: Sequence[AspectMatch]) -> None:
        """Chords across the indoor circle, one per match."""

        rendering = self.settings.rendering
        radius = self.geometry.indoor
        wrapper = self.layer("aspects")
        for match in matches:
            x1, y1 = self._xy(radius, match.point.position)
            x2, y2 = self._xy(radius, match.to_point.position)
            color = rendering.line_color if rendering.stroke_only else match.aspect.color
            attrs: Dict[str, object] = {
                "stroke": color,
                "stroke-width": rendering.cusps_stroke,
                "data-name": match.aspect.name,
                "data-degree": match.aspect.degree,
                "data-point": match.point.name,
                "data-toPoint": match.to_point.name,
                "data-precision": match.precision,
            }
            line = self.document.line(x1, y1, x2, y2, parent=wrapper)
            line.set(**attrs)
        LOG.debug("drew %d aspect lines", len(matches))

    # Animation ---------------------------------------------------------
    def rotate_cusps(self, rotation: float) -> None:
        """Turn the cusp layer by ``rotation`` degrees of longitude."""

        wrapper = self.document.group(self.layer_id("cusps"), parent=self.root)
        geo = self.geometry
        wrapper.set(transform=f"rotate({rotation} {geo.cx} {geo.cy})")

    def snap_cusps(self, cusps: Sequence[float]) -> None:
        """Drop the rotation transform and redraw the cusps where they belong."""

        self.draw_cusps(cusps)
