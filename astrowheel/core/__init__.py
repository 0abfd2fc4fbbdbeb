"""Pure geometry shared by the layout, aspect and animation engines."""

from .angles import (
    DescriptionPosition,
    LineSegment,
    angular_gap,
    dashed_line_segments,
    degree_to_radians,
    description_positions,
    normalize_degrees,
    point_on_circle,
    radians_to_degree,
    ruler_positions,
    signed_delta,
)

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
