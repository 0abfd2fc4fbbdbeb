"""Aspect detection between named chart positions.

Two comparison modes are supported:

``radix``
    A body set compared against the held reference set (normally the
    same bodies).  A body is never paired with itself.
``transit``
    A moving body set compared against the held natal set.  A transiting
    body may aspect its own natal position.

Every match carries a precision string with four decimals.  In transit
mode its sign encodes the motion of the transiting body: negative while
it applies to the exact aspect, positive once it separates, with the
sign flipped for retrograde bodies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .config.settings import Settings, default_settings
from .core.angles import angular_gap, normalize_degrees

__all__ = [
    "AspectCalculator",
    "AspectDefinition",
    "AspectMatch",
    "AspectPoint",
    "PositionEntry",
    "aspect_definitions",
    "coerce_positions",
    "deduplicate_matches",
]

LOG = logging.getLogger(__name__)

PositionInput = Union["PositionEntry", Sequence[float]]


@dataclass(frozen=True)
class PositionEntry:
    """Longitude of a body with its optional daily speed."""

    longitude: float
    speed: Optional[float] = None

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> "PositionEntry":
        speed = float(values[1]) if len(values) > 1 and values[1] is not None else None
        return cls(longitude=float(values[0]), speed=speed)

    @property
    def is_retrograde(self) -> bool:
        return self.speed is not None and self.speed < 0


@dataclass(frozen=True)
class AspectDefinition:
    name: str
    degree: float
    orbit: float
    color: str = "transparent"


@dataclass(frozen=True)
class AspectPoint:
    name: str
    position: float


@dataclass(frozen=True)
class AspectMatch:
    """A detected aspect between two named points."""

    point: AspectPoint
    to_point: AspectPoint
    aspect: AspectDefinition
    precision: str

    @property
    def orb(self) -> float:
        """Absolute deviation from the exact aspect, in degrees."""

        return abs(float(self.precision))

    def pair_key(self) -> Tuple[str, frozenset]:
        return self.aspect.name, frozenset((self.point.name, self.to_point.name))

    def as_dict(self) -> Dict[str, Any]:
        return {
            "aspect": {
                "name": self.aspect.name,
                "degree": self.aspect.degree,
                "orbit": self.aspect.orbit,
                "color": self.aspect.color,
            },
            "point": {"name": self.point.name, "position": self.point.position},
            "toPoint": {"name": self.to_point.name, "position": self.to_point.position},
            "precision": self.precision,
        }


def aspect_definitions(settings: Settings) -> Tuple[AspectDefinition, ...]:
    """Return the configured aspects as :class:`AspectDefinition` records."""

    return tuple(
        AspectDefinition(name=name, degree=cfg.degree, orbit=cfg.orbit, color=cfg.color)
        for name, cfg in settings.aspects.items()
    )


def coerce_positions(
    points: Optional[Mapping[str, PositionInput]],
) -> Dict[str, PositionEntry]:
    """Turn ``{name: [lon]}`` / ``{name: [lon, speed]}`` into entries."""

    if not points:
        return {}
    coerced: Dict[str, PositionEntry] = {}
    for name, value in points.items():
        if isinstance(value, PositionEntry):
            coerced[name] = value
        else:
            coerced[name] = PositionEntry.from_sequence(value)
    return coerced


def _format_precision(value: float) -> str:
    rounded = round(value, 4)
    if rounded == 0:
        rounded = 0.0
    return f"{rounded:.4f}"


def _is_applying(moving: float, reference: float, degree: float) -> bool:
    """True when a direct body at ``moving`` is closing on the exact aspect."""

    forward = normalize_degrees(moving - reference)
    gap = angular_gap(moving, reference)
    if forward <= 180.0:
        return gap < degree
    return gap > degree


def deduplicate_matches(matches: Sequence[AspectMatch]) -> List[AspectMatch]:
    """Keep one match per aspect and unordered pair of names, in order."""

    seen: set = set()
    unique: List[AspectMatch] = []
    for match in matches:
        key = match.pair_key()
        if key in seen:
            continue
        seen.add(key)
        unique.append(match)
    return unique


def _sorted_unique(matches: List[AspectMatch]) -> List[AspectMatch]:
    return sorted(deduplicate_matches(matches), key=lambda match: match.orb)


class AspectCalculator:
    """Find aspects between a body set and the held reference set."""

    def __init__(
        self,
        to_points: Mapping[str, PositionInput],
        settings: Optional[Settings] = None,
    ) -> None:
        if to_points is None:
            raise ValueError("Param 'to_points' must not be empty.")
        self._to_points = to_points
        self._reference = coerce_positions(to_points)
        self.settings = settings or default_settings()
        self.definitions = aspect_definitions(self.settings)

    def get_to_points(self) -> Mapping[str, PositionInput]:
        return self._to_points

    def has_aspect(self, point: float, to_point: float, aspect: AspectDefinition) -> bool:
        """``orbit`` is the full width of the window centred on the exact degree."""

        gap = angular_gap(point, to_point)
        return abs(gap - aspect.degree) <= aspect.orbit / 2.0

    def radix(self, points: Optional[Mapping[str, PositionInput]]) -> List[AspectMatch]:
        """Aspects of ``points`` against the reference set, skipping self pairs."""

        if not points:
            return []
        moving = coerce_positions(points)
        matches: List[AspectMatch] = []
        for name, entry in moving.items():
            for to_name, to_entry in self._reference.items():
                if name == to_name:
                    continue
                for aspect in self.definitions:
                    if not self.has_aspect(entry.longitude, to_entry.longitude, aspect):
                        continue
                    gap = angular_gap(entry.longitude, to_entry.longitude)
                    matches.append(
                        AspectMatch(
                            point=AspectPoint(name, entry.longitude),
                            to_point=AspectPoint(to_name, to_entry.longitude),
                            aspect=aspect,
                            precision=_format_precision(gap - aspect.degree),
                        )
                    )
        result = _sorted_unique(matches)
        LOG.debug("radix: %d aspects among %d bodies", len(result), len(moving))
        return result

    def transit(self, points: Optional[Mapping[str, PositionInput]]) -> List[AspectMatch]:
        """Aspects of transiting ``points`` to the reference set.

        Negative precision: applying.  Positive: separating.  Retrograde
        transiting bodies flip the sign.
        """

        if not points:
            return []
        moving = coerce_positions(points)
        matches: List[AspectMatch] = []
        for name, entry in moving.items():
            for to_name, to_entry in self._reference.items():
                for aspect in self.definitions:
                    if not self.has_aspect(entry.longitude, to_entry.longitude, aspect):
                        continue
                    gap = angular_gap(entry.longitude, to_entry.longitude)
                    precision = abs(gap - aspect.degree)
                    if _is_applying(entry.longitude, to_entry.longitude, aspect.degree):
                        precision = -precision
                    if entry.is_retrograde:
                        precision = -precision
                    matches.append(
                        AspectMatch(
                            point=AspectPoint(name, entry.longitude),
                            to_point=AspectPoint(to_name, to_entry.longitude),
                            aspect=aspect,
                            precision=_format_precision(precision),
                        )
                    )
        result = _sorted_unique(matches)
        LOG.debug("transit: %d aspects for %d moving bodies", len(result), len(moving))
        return result
