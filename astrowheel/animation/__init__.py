"""Animation of chart transitions."""

from .animator import Animator, cusps_rotation_target, travel_arc
from .timer import DEFAULT_FRAME_INTERVAL, Timer

__all__ = ["Animator", "DEFAULT_FRAME_INTERVAL", "Timer", "cusps_rotation_target", "travel_arc"]
