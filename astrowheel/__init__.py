"""astrowheel: layout, aspects and animation for astrological wheel charts."""

from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError, version as _get_version

from .aspects import AspectCalculator, AspectDefinition, AspectMatch, AspectPoint, PositionEntry
from .chart import Chart, Radix, Transit
from .config import Settings, default_settings, load_settings
from .layout import LocatedPoint, Universe, UnresolvedCollisionError, assemble
from .validation import ChartDataError, ValidationStatus, ensure_valid, validate
from .zodiac import Zodiac

LOG = logging.getLogger(__name__)

try:
    __version__ = _get_version("astrowheel")
except PackageNotFoundError:  # pragma: no cover - running from a source checkout
    __version__ = "0.0.0"

__all__ = [
    "AspectCalculator",
    "AspectDefinition",
    "AspectMatch",
    "AspectPoint",
    "Chart",
    "ChartDataError",
    "LocatedPoint",
    "PositionEntry",
    "Radix",
    "Settings",
    "Transit",
    "Universe",
    "UnresolvedCollisionError",
    "ValidationStatus",
    "Zodiac",
    "__version__",
    "assemble",
    "default_settings",
    "ensure_valid",
    "load_settings",
    "validate",
]
