"""Configuration models and helpers for astrowheel settings."""

from __future__ import annotations

import os
from copy import deepcopy
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


CURRENT_SETTINGS_SCHEMA_VERSION = 1
CONFIG_ENV_VAR = "ASTROWHEEL_CONFIG"

# -------------------- Settings Schema --------------------


class _FrozenCfg(BaseModel):
    """Settings are read-only once built; overrides go through ``model_copy``."""

    model_config = ConfigDict(frozen=True)


class AspectCfg(_FrozenCfg):
    """A recognised angular relationship and its tolerance."""

    degree: float
    orbit: float
    color: str = "transparent"

    @field_validator("degree", mode="before")
    @classmethod
    def _cap_degree(cls, value: float) -> float:
        numeric = float(value)
        return max(0.0, min(180.0, numeric))

    @field_validator("orbit", mode="before")
    @classmethod
    def _cap_orbit(cls, value: float) -> float:
        numeric = abs(float(value))
        return min(30.0, numeric)


def _default_aspects() -> Dict[str, AspectCfg]:
    return {
        "conjunction": AspectCfg(degree=0, orbit=10, color="transparent"),
        "square": AspectCfg(degree=90, orbit=8, color="#FF4500"),
        "trine": AspectCfg(degree=120, orbit=8, color="#27AE60"),
        "opposition": AspectCfg(degree=180, orbit=10, color="#27AE60"),
    }


class LayoutCfg(_FrozenCfg):
    """Wheel proportions and the symbol collision radius."""

    margin: float = 50.0
    padding: float = 18.0
    symbol_scale: float = 1.0
    collision_radius: float = 10.0
    inner_circle_radius_ratio: float = 8.0
    indoor_circle_radius_ratio: float = 2.0
    ruler_radius: float = 4.0

    @field_validator("symbol_scale", mode="before")
    @classmethod
    def _cap_symbol_scale(cls, value: float) -> float:
        numeric = float(value)
        return max(0.1, min(10.0, numeric))

    @field_validator("collision_radius", mode="before")
    @classmethod
    def _cap_collision_radius(cls, value: float) -> float:
        numeric = float(value)
        return max(0.0, min(360.0, numeric))

    def collision_tolerance(self) -> float:
        """Angular collision radius in degrees, scaled with the symbols."""

        return self.collision_radius * self.symbol_scale / 2.0


class AnimationCfg(_FrozenCfg):
    """Tick source and cusp-wheel rotation behaviour."""

    cusps_rotation_speed: int = 0
    frame_interval: float = 1.0 / 60.0
    debug: bool = False

    @field_validator("cusps_rotation_speed", mode="before")
    @classmethod
    def _cap_rotation_speed(cls, value: int) -> int:
        return max(0, min(10, int(value)))

    @field_validator("frame_interval", mode="before")
    @classmethod
    def _cap_frame_interval(cls, value: float) -> float:
        numeric = float(value)
        return max(0.001, min(1.0, numeric))


class RenderingCfg(_FrozenCfg):
    """Colours, strokes and text toggles for the SVG renderer."""

    stroke_only: bool = False
    line_color: str = "#333333"
    points_color: str = "#000000"
    background_color: str = "none"
    points_text_size: float = 8.0
    points_stroke: float = 1.8
    cusps_stroke: float = 1.0
    circle_strong: float = 2.0
    circle_color: str = "#333333"
    cusps_font_color: str = "#000000"
    show_dignities_text: bool = True
    add_click_area: bool = False
    colors_signs: Tuple[str, ...] = (
        "#FF4500",
        "#8B4513",
        "#87CEEB",
        "#27AE60",
        "#FF4500",
        "#8B4513",
        "#87CEEB",
        "#27AE60",
        "#FF4500",
        "#8B4513",
        "#87CEEB",
        "#27AE60",
    )

    @field_validator("colors_signs", mode="before")
    @classmethod
    def _require_twelve_colors(cls, value: object) -> object:
        if isinstance(value, (list, tuple)) and len(value) != 12:
            raise ValueError("colors_signs must list exactly 12 colours")
        return value


class ExactExaltationCfg(_FrozenCfg):
    """Degree at which a body is exactly exalted."""

    name: str
    position: float
    orbit: float = 2.0


def _default_exact_exaltations() -> List[ExactExaltationCfg]:
    table = (
        ("Sun", 19.0),
        ("Moon", 33.0),
        ("Mercury", 155.0),
        ("Venus", 357.0),
        ("Mars", 298.0),
        ("Jupiter", 105.0),
        ("Saturn", 201.0),
        ("NNode", 63.0),
        ("SNode", 243.0),
    )
    return [ExactExaltationCfg(name=name, position=pos) for name, pos in table]


class DignitiesCfg(_FrozenCfg):
    """Markers used when annotating essential dignities."""

    rulership: str = "r"
    detriment: str = "d"
    exaltation: str = "e"
    exact_exaltation: str = "E"
    fall: str = "f"
    exact_exaltation_points: List[ExactExaltationCfg] = Field(
        default_factory=_default_exact_exaltations
    )


class Settings(_FrozenCfg):
    """Top-level settings model."""

    schema_version: int = Field(
        default=CURRENT_SETTINGS_SCHEMA_VERSION,
        ge=1,
        description="Version marker for configuration payloads.",
    )
    aspects: Dict[str, AspectCfg] = Field(default_factory=_default_aspects)
    layout: LayoutCfg = Field(default_factory=LayoutCfg)
    animation: AnimationCfg = Field(default_factory=AnimationCfg)
    rendering: RenderingCfg = Field(default_factory=RenderingCfg)
    dignities: DignitiesCfg = Field(default_factory=DignitiesCfg)


# -------------------- I/O Helpers --------------------


def default_settings() -> Settings:
    """Instantiate a Settings object populated with defaults."""

    return Settings()


def config_path() -> Optional[Path]:
    """Return the configuration file named by ``ASTROWHEEL_CONFIG``, if any."""

    raw = os.environ.get(CONFIG_ENV_VAR, "").strip()
    return Path(raw) if raw else None


def _merge_overlay(base: dict, overlay: dict) -> dict:
    merged = deepcopy(base)
    for key, value in overlay.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict) and key != "aspects":
            merged[key] = _merge_overlay(current, value)
        else:
            merged[key] = value
    return merged


def settings_from_mapping(data: dict) -> Settings:
    """Build settings from a partial mapping layered over the defaults.

    ``aspects`` is replaced wholesale rather than merged so a caller can
    restrict the recognised set.
    """

    base = default_settings().model_dump()
    return Settings(**_merge_overlay(base, data))


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load settings from a YAML file, falling back to defaults when absent."""

    source_path = Path(path) if path else config_path()
    if source_path is None or not source_path.exists():
        return default_settings()
    with source_path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Settings file {source_path} must contain a mapping")
    return settings_from_mapping(raw)
