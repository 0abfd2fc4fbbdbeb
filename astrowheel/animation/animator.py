"""Tick-driven interpolation between two chart states.

The animator owns a working copy of the body positions for the duration
of a run.  Every tick it advances each body by the share of its remaining
travel that the tick represents, hands the renderer a copy of the
buffer, and turns the cusp wheel by the same share.  When the configured
duration has elapsed the bodies sit exactly on their targets, the tick
source is stopped and the completion callback fires once.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from ..config.settings import Settings, default_settings
from ..core.angles import normalize_degrees, signed_delta
from .timer import Timer

__all__ = ["Animator", "travel_arc", "cusps_rotation_target"]

LOG = logging.getLogger(__name__)

ChartData = Mapping[str, Any]
TimerFactory = Callable[..., Any]


def travel_arc(current: float, target: float, retrograde: bool = False, reverse: bool = False) -> float:
    """Signed degrees a body travels from ``current`` to ``target``.

    Direct bodies take the shorter arc and retrograde bodies always move
    backwards.  A reversed animation takes the complement of either.
    """

    if retrograde:
        arc = -normalize_degrees(current - target)
    else:
        arc = signed_delta(target - current)
    if not reverse or arc == 0:
        return arc
    return arc - 360.0 if arc > 0 else arc + 360.0


def cusps_rotation_target(
    source_cusps: Optional[Sequence[float]],
    target_cusps: Optional[Sequence[float]],
    extra_turns: int = 0,
    reverse: bool = False,
) -> float:
    """Total rotation of the cusp wheel over one run, in degrees.

    The result is deliberately left unwrapped so the transform can turn
    through the 0°/360° seam.
    """

    if not source_cusps or not target_cusps:
        return 0.0
    base = normalize_degrees(source_cusps[0] - target_cusps[0])
    if reverse:
        back = base - 360.0 if base > 0 else base
        return back - 360.0 * extra_turns
    return base + 360.0 * extra_turns


def _planets(data: Optional[ChartData]) -> Dict[str, List[float]]:
    planets = (data or {}).get("planets") or {}
    return {name: [float(v) for v in values if v is not None] for name, values in planets.items()}


class Animator:
    """Animate the bodies and cusp wheel of a chart towards a new state."""

    def __init__(
        self,
        source: ChartData,
        renderer: Any,
        settings: Optional[Settings] = None,
        *,
        timer_factory: TimerFactory = Timer,
    ) -> None:
        self.source = source
        self.renderer = renderer
        self.settings = settings or default_settings()
        self._timer_factory = timer_factory
        self._timer: Optional[Any] = None

        self.target: Optional[ChartData] = None
        self.duration = 0.0
        self.elapsed = 0.0
        self.reverse = False
        self.rotation = 0.0
        self._rotation_target = 0.0
        self._callback: Optional[Callable[[], Any]] = None
        self._running = False
        self._working: Dict[str, List[float]] = {}
        self._remaining: Dict[str, float] = {}

    def is_running(self) -> bool:
        return self._running

    def animate(
        self,
        target: ChartData,
        duration_seconds: float,
        reverse: bool = False,
        callback: Optional[Callable[[], Any]] = None,
    ) -> None:
        """Start moving from the current state to ``target``.

        A run already in progress is stopped first, without its callback.
        """

        self.stop()
        self.target = target
        self.duration = float(duration_seconds) * 1000.0
        self.elapsed = 0.0
        self.reverse = bool(reverse)
        self.rotation = 0.0
        self._callback = callback

        self._working = _planets(self.source)
        self._remaining = {}
        for name, values in _planets(target).items():
            if not values:
                continue
            current = self._working.get(name)
            if not current:
                self._working[name] = list(values)
                self._remaining[name] = 0.0
                continue
            retrograde = len(values) > 1 and values[1] < 0
            self._remaining[name] = travel_arc(current[0], values[0], retrograde, self.reverse)
            self._working[name] = [current[0]] + values[1:]

        self._rotation_target = cusps_rotation_target(
            (self.source or {}).get("cusps"),
            target.get("cusps"),
            self.settings.animation.cusps_rotation_speed,
            self.reverse,
        )
        self._running = True
        LOG.debug(
            "animation started: %d bodies over %.0f ms (reverse=%s)",
            len(self._remaining),
            self.duration,
            self.reverse,
        )
        self._timer = self._timer_factory(
            self.update,
            self.settings.animation.debug,
            interval=self.settings.animation.frame_interval,
        )
        self._timer.start()

    def update(self, delta_ms: float = 1.0) -> None:
        """Advance the run by ``delta_ms`` milliseconds."""

        if not self._running:
            return
        remaining_time = self.duration - self.elapsed
        self.elapsed += delta_ms
        if self.elapsed >= self.duration:
            self._finish()
            return
        fraction = min(1.0, delta_ms / remaining_time) if remaining_time > 0 else 1.0

        for name, remaining in self._remaining.items():
            step = remaining * fraction
            self._remaining[name] = remaining - step
            position = self._working[name]
            position[0] = normalize_degrees(position[0] + step)

        self.rotation += (self._rotation_target - self.rotation) * fraction
        self.renderer.draw_points(self.positions())
        self.renderer.rotate_cusps(self.rotation)

    def stop(self) -> None:
        """Halt the run without calling back; a no-op when idle."""

        if self._timer is not None:
            self._timer.stop()
        if self._running:
            LOG.debug("animation stopped after %.0f ms", self.elapsed)
        self._running = False

    def positions(self) -> Dict[str, List[float]]:
        """Copy of the working buffer, safe to hand out."""

        return {name: list(values) for name, values in self._working.items()}

    def _finish(self) -> None:
        target = self.target or {}
        for name, values in _planets(target).items():
            if values:
                self._working[name] = list(values)
        self._remaining = {name: 0.0 for name in self._remaining}
        self.rotation = self._rotation_target

        self.renderer.draw_points(self.positions())
        target_cusps = target.get("cusps")
        if target_cusps:
            self.renderer.snap_cusps(list(target_cusps))
        else:
            self.renderer.rotate_cusps(self.rotation)

        if self._timer is not None:
            self._timer.stop()
        self._running = False
        self.source = target
        LOG.debug("animation finished after %.0f ms", self.elapsed)

        callback = self._callback
        self._callback = None
        if callable(callback):
            callback()
