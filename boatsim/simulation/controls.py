"""
Control Input
=============

Normalized per-frame control snapshot produced by the input collaborator
and consumed read-only by the watercraft and camera rig.
"""

import math
from dataclasses import dataclass
from typing import Tuple


def _clamp_axis(value: float) -> float:
    return max(-1.0, min(1.0, float(value)))


@dataclass(frozen=True)
class ControlInput:
    """
    One frame of control input.

    Axis values are in [-1, 1]. ``boost`` and ``reset_requested`` are
    momentary: true only while asserted.
    """
    move_x: float = 0.0       # Turn axis (positive = starboard stick)
    move_y: float = 0.0       # Throttle axis (positive = forward)
    look_x: float = 0.0       # Camera orbit axis
    look_y: float = 0.0       # Camera height axis
    boost: bool = False
    reset_requested: bool = False

    @classmethod
    def neutral(cls) -> 'ControlInput':
        """No stick deflection, no buttons."""
        return cls()

    @classmethod
    def clamped(cls, move_x: float = 0.0, move_y: float = 0.0,
                look_x: float = 0.0, look_y: float = 0.0,
                boost: bool = False, reset_requested: bool = False) -> 'ControlInput':
        """Build an input record with every axis clamped to [-1, 1]."""
        return cls(
            move_x=_clamp_axis(move_x),
            move_y=_clamp_axis(move_y),
            look_x=_clamp_axis(look_x),
            look_y=_clamp_axis(look_y),
            boost=bool(boost),
            reset_requested=bool(reset_requested),
        )


def joystick_axes(dx: float, dy: float, max_distance: float = 40.0,
                  invert_y: bool = True) -> Tuple[float, float]:
    """
    Convert an on-screen thumb-stick displacement into normalized axes.

    Displacements beyond ``max_distance`` are projected onto the unit
    circle, so a stick pushed to the rim always reads magnitude 1.

    Args:
        dx: Horizontal displacement from the stick centre (pixels)
        dy: Vertical displacement from the stick centre (pixels, screen-down positive)
        max_distance: Stick travel radius (pixels)
        invert_y: Flip screen-y so pushing up reads positive (movement stick)

    Returns:
        Tuple of (axis_x, axis_y)
    """
    distance = math.hypot(dx, dy)

    if distance > max_distance:
        angle = math.atan2(dy, dx)
        axis_x = math.cos(angle)
        axis_y = math.sin(angle)
    else:
        axis_x = dx / max_distance
        axis_y = dy / max_distance

    if invert_y:
        axis_y = -axis_y
    return axis_x, axis_y
