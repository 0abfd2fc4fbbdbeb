"""Angular utilities shared by layout, aspect and animation code.

Chart positions are ecliptic longitudes that routinely cross the
0°/360° seam.  Comparing them with raw subtraction invites subtle bugs,
so every consumer normalises at read time through the helpers defined
here.  The wheel convention places 0° at nine o'clock with longitudes
increasing counter-clockwise; ``shift`` rotates the whole wheel so the
first house cusp can sit on the horizon.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Final, List, Sequence, Tuple

__all__ = [
    "DescriptionPosition",
    "LineSegment",
    "angular_gap",
    "dashed_line_segments",
    "degree_to_radians",
    "description_positions",
    "normalize_degrees",
    "point_on_circle",
    "radians_to_degree",
    "ruler_positions",
    "signed_delta",
]


EPSILON_DEG: Final[float] = 1e-9
RULER_STEP_DEG: Final[float] = 5.0


@dataclass(frozen=True)
class LineSegment:
    """Straight segment expressed in canvas coordinates."""

    start_x: float
    start_y: float
    end_x: float
    end_y: float


@dataclass(frozen=True)
class DescriptionPosition:
    """Anchor for one line of text stacked beside a symbol."""

    text: str
    x: float
    y: float


def degree_to_radians(degrees: float) -> float:
    return degrees * math.pi / 180.0


def radians_to_degree(radians: float) -> float:
    return radians * 180.0 / math.pi


def normalize_degrees(angle: float) -> float:
    """Return ``angle`` normalised to the ``[0, 360)`` interval.

    Values within ``1e-9`` of ``360`` are coerced to ``0`` so callers can
    rely on a consistent wrap-around contract.  The operation is
    idempotent.
    """

    wrapped = float(angle) % 360.0
    if wrapped >= 360.0 - EPSILON_DEG:
        wrapped = 0.0
    return wrapped if wrapped >= 0.0 else wrapped + 360.0


def signed_delta(angle: float) -> float:
    """Return ``angle`` wrapped to the ``[-180, 180)`` interval."""

    wrapped = normalize_degrees(angle)
    if wrapped >= 180.0:
        return wrapped - 360.0
    return wrapped


def angular_gap(a: float, b: float) -> float:
    """Unsigned shortest distance between two longitudes, in ``[0, 180]``.

    ``angular_gap(358, 2) == 4`` rather than ``356``.
    """

    d = abs(normalize_degrees(a) - normalize_degrees(b))
    return min(d, 360.0 - d)


def point_on_circle(
    cx: float, cy: float, radius: float, angle: float, shift: float = 0.0
) -> Tuple[float, float]:
    """Project ``angle`` onto the circle centred at ``(cx, cy)``.

    The angle accepts any real value (negative or beyond 360); a zero
    radius always yields the centre.
    """

    if radius == 0:
        return float(cx), float(cy)
    theta = degree_to_radians(normalize_degrees(angle + shift) + 180.0)
    return cx + radius * math.cos(theta), cy - radius * math.sin(theta)


def ruler_positions(
    cx: float,
    cy: float,
    start_radius: float,
    end_radius: float,
    shift: float = 0.0,
) -> List[LineSegment]:
    """Return the 72 tick marks of the degree ruler (one every 5°).

    Even ticks span the full band, odd ticks only half of it.  A reversed
    band (``start_radius > end_radius``) is accepted.
    """

    inner, outer = sorted((start_radius, end_radius))
    half = inner + (outer - inner) / 2.0
    segments: List[LineSegment] = []
    count = int(360.0 / RULER_STEP_DEG)
    for idx in range(count):
        angle = idx * RULER_STEP_DEG
        tip = outer if idx % 2 == 0 else half
        sx, sy = point_on_circle(cx, cy, inner, angle, shift)
        ex, ey = point_on_circle(cx, cy, tip, angle, shift)
        segments.append(LineSegment(sx, sy, ex, ey))
    return segments


def description_positions(
    x: float,
    y: float,
    texts: Sequence[str],
    font_size: float = 10.0,
    spacing: float = 1.1,
) -> List[DescriptionPosition]:
    """Stack ``texts`` vertically beside the symbol anchored at ``(x, y)``.

    The first line sits above the anchor; each following line is one
    line-height lower.
    """

    line_height = font_size * spacing
    top = y - line_height
    return [
        DescriptionPosition(text=text, x=x + font_size, y=top + idx * line_height)
        for idx, text in enumerate(texts)
    ]


def dashed_line_segments(
    cx: float,
    cy: float,
    angle: float,
    start_radius: float,
    end_radius: float,
    obstacles: Sequence[Any],
    collision_radius: float,
    shift: float = 0.0,
) -> List[LineSegment]:
    """Return the pieces of a radial line that avoid located symbols.

    ``obstacles`` are objects exposing ``angle`` and ``radius``.  When a
    symbol sits on the line (within ``collision_radius`` degrees and
    inside the band) the line is split in two around it.
    """

    inner, outer = sorted((start_radius, end_radius))
    blocking = [
        ob
        for ob in obstacles
        if angular_gap(ob.angle, angle) < collision_radius
        and inner <= ob.radius <= outer
    ]
    if not blocking:
        sx, sy = point_on_circle(cx, cy, start_radius, angle, shift)
        ex, ey = point_on_circle(cx, cy, end_radius, angle, shift)
        return [LineSegment(sx, sy, ex, ey)]

    gap = (outer - inner) * 0.1
    pieces: List[LineSegment] = []
    cursor = inner
    for ob in sorted(blocking, key=lambda item: item.radius):
        stop = ob.radius - gap
        if stop > cursor:
            sx, sy = point_on_circle(cx, cy, cursor, angle, shift)
            ex, ey = point_on_circle(cx, cy, stop, angle, shift)
            pieces.append(LineSegment(sx, sy, ex, ey))
        cursor = max(cursor, ob.radius + gap)
    if cursor < outer:
        sx, sy = point_on_circle(cx, cy, cursor, angle, shift)
        ex, ey = point_on_circle(cx, cy, outer, angle, shift)
        pieces.append(LineSegment(sx, sy, ex, ey))
    return pieces
