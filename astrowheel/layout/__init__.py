"""Symbol layout around the chart wheel."""

from .collision import (
    MAX_ATTEMPTS_PER_POINT,
    LocatedPoint,
    UnresolvedCollisionError,
    Universe,
    assemble,
    is_in_collision,
    place_points_in_collision,
)

__all__ = [
    "MAX_ATTEMPTS_PER_POINT",
    "LocatedPoint",
    "UnresolvedCollisionError",
    "Universe",
    "assemble",
    "is_in_collision",
    "place_points_in_collision",
]
