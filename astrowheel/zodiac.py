"""Zodiac helpers: signs, houses, retrograde flag, DMS and dignities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .config.settings import ExactExaltationCfg, Settings, default_settings
from .core.angles import angular_gap, normalize_degrees

__all__ = ["DignityRule", "PlanetPoint", "Zodiac", "DIGNITY_RULES"]


@dataclass(frozen=True)
class PlanetPoint:
    name: str
    position: float


@dataclass(frozen=True)
class DignityRule:
    """Signs (1 = Aries … 12 = Pisces) of each essential dignity."""

    rulership: Tuple[int, ...]
    detriment: Tuple[int, ...]
    exaltation: Tuple[int, ...]
    fall: Tuple[int, ...]


DIGNITY_RULES: Dict[str, DignityRule] = {
    "Sun": DignityRule((5,), (11,), (1,), (7,)),
    "Moon": DignityRule((4,), (10,), (2,), (8,)),
    "Mercury": DignityRule((3, 6), (9, 12), (6,), (12,)),
    "Venus": DignityRule((2, 7), (1, 8), (12,), (6,)),
    "Mars": DignityRule((1, 8), (2, 7), (10,), (4,)),
    "Jupiter": DignityRule((9, 12), (3, 6), (4,), (10,)),
    "Saturn": DignityRule((10, 11), (4, 5), (7,), (1,)),
    "Uranus": DignityRule((11,), (5,), (8,), (2,)),
    "Neptune": DignityRule((12,), (6,), (5,), (11,)),
    "Pluto": DignityRule((8,), (2,), (1,), (7,)),
}


class Zodiac:
    """House and sign lookups for a chart with twelve house cusps."""

    def __init__(self, cusps: Sequence[float], settings: Optional[Settings] = None) -> None:
        if cusps is None:
            raise ValueError("Param 'cusps' must not be empty.")
        if len(cusps) != 12:
            raise ValueError("Param 'cusps' is not 12 length Array.")
        self.cusps = list(cusps)
        self.settings = settings or default_settings()

    def get_sign(self, angle: float) -> int:
        """Sign number, 1 (Aries) to 12 (Pisces)."""

        return int(normalize_degrees(angle) // 30.0) + 1

    def is_retrograde(self, speed: float) -> bool:
        return speed < 0

    def get_house_number(self, angle: float) -> int:
        """House number 1..12; a house may straddle 0° Aries."""

        position = normalize_degrees(angle)
        for idx, start in enumerate(self.cusps):
            start = normalize_degrees(start)
            end = normalize_degrees(self.cusps[(idx + 1) % 12])
            if start <= end:
                if start <= position < end:
                    return idx + 1
            elif position >= start or position < end:
                return idx + 1
        raise ValueError(f"Cannot find house for angle {angle!r}")

    def to_dms(self, angle: float) -> str:
        """Format ``angle`` as ``"266° 7' 24"`` (seconds truncated)."""

        value = angle + 0.5 / 3600.0 / 10000.0
        degrees = int(value)
        minutes_raw = (value - degrees) * 60.0
        minutes = int(minutes_raw)
        seconds = int((minutes_raw - minutes) * 60.0)
        return f"{degrees}° {minutes}' {seconds}"

    def has_conjunction(self, angle: float, point_angle: float, orbit: float) -> bool:
        """``angle`` lies within the ``orbit``-wide window around ``point_angle``."""

        return angular_gap(angle, point_angle) <= orbit / 2.0

    def get_dignities(
        self,
        planet: Optional[PlanetPoint],
        exact_exaltation: Optional[Sequence[ExactExaltationCfg]] = None,
    ) -> List[str]:
        """Dignity markers for ``planet``.

        ``exact_exaltation`` defaults to the configured table; pass an
        empty list to skip the exact-exaltation check.
        """

        if planet is None or not planet.name:
            return []
        rule = DIGNITY_RULES.get(planet.name)
        if rule is None:
            return []
        cfg = self.settings.dignities
        sign = self.get_sign(planet.position)
        result: List[str] = []
        if sign in rule.rulership:
            result.append(cfg.rulership)
        if sign in rule.detriment:
            result.append(cfg.detriment)
        if sign in rule.exaltation:
            result.append(cfg.exaltation)
        if sign in rule.fall:
            result.append(cfg.fall)

        table = cfg.exact_exaltation_points if exact_exaltation is None else exact_exaltation
        for point in table:
            if point.name != planet.name:
                continue
            if self.has_conjunction(planet.position, point.position, point.orbit):
                result.append(cfg.exact_exaltation)
        return result
