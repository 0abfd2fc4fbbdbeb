"""Configuration helpers exposed at :mod:`astrowheel.config`."""

from __future__ import annotations

from .settings import (
    AnimationCfg,
    AspectCfg,
    DignitiesCfg,
    ExactExaltationCfg,
    LayoutCfg,
    RenderingCfg,
    Settings,
    config_path,
    default_settings,
    load_settings,
    settings_from_mapping,
)

__all__ = [
    "Settings",
    "AspectCfg",
    "LayoutCfg",
    "AnimationCfg",
    "RenderingCfg",
    "DignitiesCfg",
    "ExactExaltationCfg",
    "config_path",
    "default_settings",
    "load_settings",
    "settings_from_mapping",
]
