"""Projectile pitch solving with a simple air-drag model."""

from __future__ import annotations

import math

DRAG_COEFFICIENT = 0.019
DEFAULT_SPEED = 24.0
GRAVITY = 9.78

_MAX_ITERATIONS = 20
_TOLERANCE = 0.001


def bullet_model(depth: float, speed: float, pitch: float) -> tuple[float, float]:
    """Return (height, flight time) of a shot at ``depth`` metres for a pitch in radians."""
    fly_time = (math.exp(DRAG_COEFFICIENT * depth) - 1) / (
        DRAG_COEFFICIENT * speed * math.cos(pitch)
    )
    height = speed * math.sin(pitch) * fly_time - GRAVITY * fly_time * fly_time / 2
    return height, fly_time


def get_pitch(depth: float, height: float, speed: float) -> tuple[float, float]:
    """Iteratively find the pitch (radians) that hits ``height`` at ``depth``.

    Returns the pitch and the flight time of the last evaluated shot.
    """
    aim_height = height
    pitch = 0.0
    fly_time = 0.0
    for _ in range(_MAX_ITERATIONS):
        pitch = math.atan2(aim_height, depth)
        reached, fly_time = bullet_model(depth, speed, pitch)
        dy = height - reached
        aim_height += dy
        if abs(dy) < _TOLERANCE:
            break
    return pitch, fly_time


def transform(
    depth: float, height: float, speed: float = DEFAULT_SPEED
) -> tuple[float, float]:
    """Solve the pitch for a target given in millimetres (camera frame, y down).

    Returns the negated pitch in radians and the flight time in seconds.
    """
    pitch, fly_time = get_pitch(depth / 1000, -height / 1000, speed)
    return -pitch, fly_time


def adjust_pitch(distance: float, pitch: float, speed: float = DEFAULT_SPEED) -> float:
    """Return the launch angle in degrees that hits a target seen at ``pitch`` degrees.

    ``distance`` is the line-of-sight distance in millimetres; drag is ignored.
    Raises ValueError when the target cannot be reached.
    """
    radians = math.radians(pitch)
    dy = distance * math.sin(radians) / 1000
    dx = distance * math.cos(radians) / 1000
    drop = GRAVITY * dx * dx / (2 * speed * speed)
    if drop == 0:
        raise ValueError("target distance must be non-zero")
    discriminant = dx * dx - 4 * drop * (drop + dy)
    if discriminant < 0:
        raise ValueError("target is out of range for the given speed")
    tan_phi = (dx - math.sqrt(discriminant)) / (2 * drop)
    return math.degrees(math.atan(tan_phi))