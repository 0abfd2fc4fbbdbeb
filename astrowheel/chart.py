"""Chart façade: a radix wheel with an optional transit ring around it."""

from __future__ import annotations

import logging
from copy import deepcopy
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from .animation.animator import Animator
from .animation.timer import Timer
from .aspects import AspectCalculator, AspectMatch
from .config.settings import Settings, default_settings
from .core.angles import normalize_degrees, point_on_circle
from .layout.collision import LocatedPoint, Universe, assemble
from .validation import ensure_valid
from .viz.renderer import RADIX, TRANSIT, SvgChartRenderer, SymbolFactory, WheelGeometry
from .viz.svg import SvgDocument
from .zodiac import Zodiac

__all__ = ["Chart", "Radix", "Transit", "locate_points"]

LOG = logging.getLogger(__name__)

ChartData = Mapping[str, Any]


def _fmt(value: float) -> str:
    return f"{value + 0.0:g}"


def _copy_planets(data: ChartData) -> Dict[str, List[float]]:
    planets = data.get("planets") or {}
    return {name: list(values) for name, values in planets.items()}


def _zodiac_for(cusps: Optional[Sequence[float]], settings: Settings) -> Optional[Zodiac]:
    return Zodiac(cusps, settings) if cusps else None


def locate_points(
    planets: Mapping[str, Sequence[float]],
    universe: Universe,
    tolerance: float,
) -> List[LocatedPoint]:
    """Place every body on ``universe`` without symbol overlap.

    Each point keeps its true longitude as ``pointer``.
    """

    located: List[LocatedPoint] = []
    for name, values in planets.items():
        if not values:
            continue
        angle = normalize_degrees(values[0])
        x, y = point_on_circle(universe.cx, universe.cy, universe.radius, angle, universe.shift)
        point = LocatedPoint(name=name, angle=angle, x=x, y=y, radius=universe.radius, pointer=angle)
        located = assemble(located, point, universe, tolerance)
    if located:
        LOG.debug("located %d symbols on r=%.2f", len(located), universe.radius)
    return located


class Chart:
    """An SVG document holding one radix chart and its transits."""

    def __init__(
        self,
        width: float,
        height: float,
        settings: Optional[Settings] = None,
        *,
        renderer_factory: Callable[..., SvgChartRenderer] = SvgChartRenderer,
        timer_factory: Callable[..., Any] = Timer,
        symbol_factory: Optional[SymbolFactory] = None,
        id_prefix: str = "astrowheel",
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("Chart width and height must be positive")
        self.settings = settings or default_settings()
        self.width = width
        self.height = height
        self.cx = width / 2.0
        self.cy = height / 2.0
        self.radius = min(self.cx, self.cy) - self.settings.layout.margin
        if self.radius <= 0:
            raise ValueError("Chart margin leaves no room for the wheel")
        self.renderer_factory = renderer_factory
        self.timer_factory = timer_factory
        self.symbol_factory = symbol_factory
        self.id_prefix = id_prefix
        self.document = SvgDocument(width, height, background=self.settings.rendering.background_color)
        self.paper = self.document.group(id_prefix)
        self.geometry = WheelGeometry.from_settings(self.cx, self.cy, self.radius, self.settings)

    def make_renderer(self, ring: str, shift: float, zodiac: Optional[Zodiac]) -> SvgChartRenderer:
        return self.renderer_factory(
            self.document,
            self.geometry,
            self.settings,
            ring=ring,
            shift=shift,
            zodiac=zodiac,
            symbol_factory=self.symbol_factory,
            id_prefix=self.id_prefix,
        )

    def radix(self, data: ChartData) -> "Radix":
        """Validate ``data`` and draw it as the radix wheel."""

        radix = Radix(self, data)
        radix.draw()
        return radix

    def scale(self, factor: float) -> "Chart":
        """Scale the wheel around its centre."""

        tx = self.cx - self.cx * factor
        ty = self.cy - self.cy * factor
        self.paper.set(transform=f"translate({_fmt(tx)},{_fmt(ty)}) scale({_fmt(factor)})")
        return self

    def calibrate(self) -> "Chart":
        """Overlay centre cross-hairs and guide circles for checking alignment."""

        color = self.settings.rendering.line_color
        wrapper = self.document.group(f"{self.id_prefix}-calibration", parent=self.paper)
        wrapper.clear()
        self.document.line(self.cx, 0.0, self.cx, float(self.height), parent=wrapper, stroke=color)
        self.document.line(0.0, self.cy, float(self.width), self.cy, parent=wrapper, stroke=color)
        for radius in (self.radius, self.geometry.indoor):
            self.document.circle(self.cx, self.cy, radius, parent=wrapper, fill="none", stroke=color)
        return self

    def to_svg(self, pretty: bool = True) -> str:
        return self.document.to_string(pretty=pretty)


class Radix:
    """The natal wheel: signs, ruler, bodies, houses, axis and aspects."""

    def __init__(self, chart: Chart, data: ChartData) -> None:
        ensure_valid(data)
        self.chart = chart
        self.settings = chart.settings
        self.data: Dict[str, Any] = deepcopy(dict(data))
        self.to_points: Dict[str, List[float]] = _copy_planets(data)
        cusps = self.data.get("cusps")
        self.shift = normalize_degrees(360.0 - cusps[0]) if cusps else 0.0
        self.zodiac = _zodiac_for(cusps, self.settings)
        self.renderer = chart.make_renderer(RADIX, self.shift, self.zodiac)
        self.located_points: List[LocatedPoint] = []

    @property
    def universe(self) -> Universe:
        geo = self.chart.geometry
        return Universe(geo.cx, geo.cy, geo.radix_points, self.shift)

    def draw(self) -> "Radix":
        self.renderer.draw_universe()
        self.renderer.draw_ruler()
        self.draw_points()
        self.renderer.draw_cusps(self.data.get("cusps"))
        self.renderer.draw_axis(self.data.get("cusps"))
        self.renderer.draw_circles()
        return self

    def draw_points(self) -> "Radix":
        planets = self.data.get("planets") or {}
        tolerance = self.settings.layout.collision_tolerance()
        self.located_points = locate_points(planets, self.universe, tolerance)
        self.renderer.draw_located(self.located_points, planets)
        return self

    def aspects(self, matches: Optional[Sequence[AspectMatch]] = None) -> "Radix":
        """Draw ``matches``, or the aspects among the radix bodies when omitted."""

        if matches is None:
            calculator = AspectCalculator(self.to_points, self.settings)
            matches = calculator.radix(self.data.get("planets"))
        self.renderer.draw_aspects(matches)
        return self

    def add_points_of_interest(self, points: Mapping[str, Sequence[float]]) -> "Radix":
        """Add extra points (for example ``As`` or ``Mc``) to the aspect reference set."""

        for name, values in points.items():
            self.to_points[name] = list(values)
        return self

    def transit(self, data: ChartData) -> "Transit":
        """Draw ``data`` as a transit ring around this radix."""

        transit = Transit(self, data)
        self.renderer.clear_axis()
        transit.draw()
        return transit


class Transit:
    """A ring of transiting bodies compared against its radix."""

    def __init__(self, radix: Radix, data: ChartData) -> None:
        ensure_valid(data)
        self.radix = radix
        self.chart = radix.chart
        self.settings = radix.settings
        self.data: Dict[str, Any] = deepcopy(dict(data))
        self.shift = radix.shift
        self.zodiac = _zodiac_for(self.data.get("cusps"), self.settings)
        self.renderer = self.chart.make_renderer(TRANSIT, self.shift, self.zodiac)
        self.located_points: List[LocatedPoint] = []
        self._animator: Optional[Animator] = None

    @property
    def universe(self) -> Universe:
        geo = self.chart.geometry
        return Universe(geo.cx, geo.cy, geo.transit_points, self.shift)

    def draw(self) -> "Transit":
        self.renderer.draw_ruler()
        self.draw_points()
        self.renderer.draw_cusps(self.data.get("cusps"))
        return self

    def draw_points(self) -> "Transit":
        planets = self.data.get("planets") or {}
        tolerance = self.settings.layout.collision_tolerance()
        self.located_points = locate_points(planets, self.universe, tolerance)
        self.renderer.draw_located(self.located_points, planets)
        return self

    def aspects(self, matches: Optional[Sequence[AspectMatch]] = None) -> "Transit":
        """Draw ``matches``, or the transit-to-radix aspects when omitted."""

        if matches is None:
            calculator = AspectCalculator(self.radix.to_points, self.settings)
            matches = calculator.transit(self.data.get("planets"))
        self.renderer.draw_aspects(matches)
        return self

    def animate(
        self,
        data: ChartData,
        duration: float,
        reverse: bool = False,
        callback: Optional[Callable[[], Any]] = None,
    ) -> "Transit":
        """Move the transit ring to ``data`` over ``duration`` seconds.

        Must be called while an asyncio event loop is running; ticks are
        scheduled on it.  On completion the ring is redrawn with collision
        layout, its aspects are refreshed and ``callback`` runs.
        """

        ensure_valid(data)
        target = deepcopy(dict(data))

        def _done() -> None:
            self.data = target
            self.zodiac = _zodiac_for(target.get("cusps"), self.settings)
            self.renderer.zodiac = self.zodiac
            self.draw()
            self.aspects()
            if callable(callback):
                callback()

        if self._animator is None:
            self._animator = Animator(
                self.data,
                self.renderer,
                self.settings,
                timer_factory=self.chart.timer_factory,
            )
        elif self._animator.is_running():
            # continue from where the interrupted run left the bodies
            source = dict(self.data)
            source["planets"] = self._animator.positions()
            self._animator.source = source
        else:
            self._animator.source = self.data
        self._animator.animate(target, duration, reverse, _done)
        return self

    def stop(self) -> None:
        if self._animator is not None:
            self._animator.stop()
