"""Collision-aware placement of body symbols around the wheel.

Symbols are placed one at a time.  When a new symbol lands within the
angular collision radius of one already placed, the offending pair is
pushed apart one step at a time in opposite directions until the
working set is clear.  Each point remembers the longitude it was asked
to represent (``pointer``) so the push direction always follows the
true ordering of the bodies rather than wherever earlier pushes left
them.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Final, List, Optional, Sequence, Tuple

from ..core.angles import angular_gap, normalize_degrees, point_on_circle

__all__ = [
    "LocatedPoint",
    "Universe",
    "UnresolvedCollisionError",
    "MAX_ATTEMPTS_PER_POINT",
    "assemble",
    "is_in_collision",
    "place_points_in_collision",
]

LOG = logging.getLogger(__name__)

# Nudges allowed per body in the working set.
MAX_ATTEMPTS_PER_POINT: Final[int] = 180


class UnresolvedCollisionError(RuntimeError):
    """Raised when a symbol cannot be placed without overlapping another."""

    def __init__(self, name: str, attempts: int, bodies: int) -> None:
        super().__init__(
            "Unresolved planet collision. Try change symbol_scale or paper size."
        )
        self.name = name
        self.attempts = attempts
        self.bodies = bodies


@dataclass(frozen=True)
class Universe:
    """Circle the symbols are laid out on."""

    cx: float
    cy: float
    radius: float
    shift: float = 0.0


@dataclass
class LocatedPoint:
    """A body symbol placed in chart space."""

    name: str
    angle: float
    x: float = 0.0
    y: float = 0.0
    radius: float = 0.0
    pointer: Optional[float] = None

    @property
    def reference_angle(self) -> float:
        """Longitude the symbol stands for: ``pointer`` if set, else ``angle``."""

        return self.angle if self.pointer is None else self.pointer

    @property
    def displaced(self) -> bool:
        return self.pointer is not None and angular_gap(self.pointer, self.angle) > 1e-9


def _comparable_ring(a: float, b: float) -> bool:
    return math.isclose(a, b, rel_tol=1e-6, abs_tol=1e-6)


def is_in_collision(
    angle: float,
    points: Sequence[LocatedPoint],
    tolerance: float,
    *,
    radius: Optional[float] = None,
) -> bool:
    """Return ``True`` when ``angle`` falls within ``tolerance`` of any point.

    ``tolerance`` is expressed in degrees.  With ``radius`` set, only
    points drawn on the same ring are considered.
    """

    for point in points:
        if radius is not None and not _comparable_ring(point.radius, radius):
            continue
        if angular_gap(angle, point.angle) < tolerance:
            return True
    return False


def _precedes(a: float, b: float) -> bool:
    """``a`` sits at or before ``b`` on the shorter arc between them."""

    # zero crossing: compare on the opposite half of the circle
    if abs(a - b) > 180.0:
        a = (a + 180.0) % 360.0
        b = (b + 180.0) % 360.0
    return a <= b


def place_points_in_collision(
    p1: LocatedPoint, p2: LocatedPoint, step: float = 1.0
) -> None:
    """Push two colliding points one ``step`` apart, in place.

    The lower of the two reference angles moves down and the higher one
    up.  Identical references fall back to the current angles, so a pair
    that started on the same longitude keeps separating whichever order
    it is passed in.  Only when both tie does ``p1`` move down.
    """

    ref1 = normalize_degrees(p1.reference_angle)
    ref2 = normalize_degrees(p2.reference_angle)
    if ref1 == ref2:
        p1_lower = _precedes(normalize_degrees(p1.angle), normalize_degrees(p2.angle))
    else:
        p1_lower = _precedes(ref1, ref2)

    if p1_lower:
        p1.angle -= step
        p2.angle += step
    else:
        p1.angle += step
        p2.angle -= step

    p1.angle = normalize_degrees(p1.angle)
    p2.angle = normalize_degrees(p2.angle)


def _first_colliding_pair(
    points: Sequence[LocatedPoint], tolerance: float
) -> Optional[Tuple[LocatedPoint, LocatedPoint]]:
    for idx, first in enumerate(points):
        for second in points[idx + 1 :]:
            if not _comparable_ring(first.radius, second.radius):
                continue
            if angular_gap(first.angle, second.angle) < tolerance:
                return first, second
    return None


def assemble(
    points: Sequence[LocatedPoint],
    new_point: LocatedPoint,
    universe: Universe,
    tolerance: float,
    *,
    step: float = 1.0,
) -> List[LocatedPoint]:
    """Add ``new_point`` to ``points`` without leaving any symbol overlap.

    The caller's points are not modified; a new list sorted by angle is
    returned.  When the new point collides with nothing it is appended
    untouched.  Raises :class:`UnresolvedCollisionError` when the layout
    is infeasible or the nudge budget (``MAX_ATTEMPTS_PER_POINT`` per
    body) runs out.
    """

    working = [replace(point) for point in points]
    candidate = replace(new_point)
    if not is_in_collision(candidate.angle, working, tolerance, radius=candidate.radius):
        working.append(candidate)
        working.sort(key=lambda item: item.angle)
        return working

    working.append(candidate)
    count = len(working)
    if count * tolerance > 360.0:
        LOG.warning(
            "Cannot fit %d symbols with a %.2f° collision radius on r=%.2f",
            count,
            tolerance,
            universe.radius,
        )
        raise UnresolvedCollisionError(candidate.name, 0, count)

    budget = MAX_ATTEMPTS_PER_POINT * count
    moved: set[int] = set()
    attempts = 0
    while True:
        working.sort(key=lambda item: item.angle)
        pair = _first_colliding_pair(working, tolerance)
        if pair is None:
            break
        if attempts >= budget:
            LOG.warning(
                "Gave up placing %s after %d nudges (%d symbols)",
                candidate.name,
                attempts,
                count,
            )
            raise UnresolvedCollisionError(candidate.name, attempts, count)
        first, second = pair
        place_points_in_collision(first, second, step)
        moved.update((id(first), id(second)))
        attempts += 1

    if attempts:
        LOG.debug("Placed %s after %d nudges", candidate.name, attempts)
    for point in working:
        if id(point) in moved:
            point.x, point.y = point_on_circle(
                universe.cx, universe.cy, universe.radius, point.angle, universe.shift
            )
    return working
