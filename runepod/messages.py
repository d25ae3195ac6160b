"""Debug drawing on images and simple timing helpers."""

from __future__ import annotations

import math
import time as _clock

from PIL import Image, ImageDraw

TEXT_COLOR = (255, 155, 165)
YELLOW = (255, 255, 0)
GREEN = (0, 255, 0)
RED = (255, 0, 0)


def put_text(image: Image.Image, info: str, point: tuple[float, float]) -> Image.Image:
    """Draw ``info`` with its baseline-left corner at ``point``."""
    draw = ImageDraw.Draw(image)
    bottom = draw.textbbox((0, 0), info)[3]
    x, y = point
    draw.text((x, y - bottom), info, fill=TEXT_COLOR)
    return image


def line(
    image: Image.Image, point1: tuple[float, float], point2: tuple[float, float]
) -> Image.Image:
    """Draw a yellow line between two points."""
    ImageDraw.Draw(image).line([tuple(point1), tuple(point2)], fill=YELLOW, width=2)
    return image


def circle(
    image: Image.Image, point: tuple[float, float], color: int | None = None
) -> Image.Image:
    """Mark ``point``: a filled dot without ``color``, otherwise a ring.

    Ring colour: 1 is green, 2 is red, anything else yellow.
    """
    draw = ImageDraw.Draw(image)
    x, y = point
    if color is None:
        draw.ellipse((x - 5, y - 5, x + 5, y + 5), fill=YELLOW)
        return image
    ring = {1: GREEN, 2: RED}.get(color, YELLOW)
    draw.ellipse((x - 8, y - 8, x + 8, y + 8), outline=ring, width=3)
    return image


def time_point() -> float:
    """Return a monotonic time stamp in seconds."""
    return _clock.monotonic()


def time_between(start: float, end: float) -> float:
    """Seconds elapsed from ``start`` to ``end``."""
    return end - start


def time_since(start: float) -> float:
    """Seconds elapsed since ``start``."""
    return time_between(start, time_point())


def fps_from_time(time: float) -> float:
    """Frames per second for a frame that took ``time`` seconds."""
    if time == 0:
        return math.inf
    return 1.0 / time


def fps_since(start: float) -> float:
    """Frames per second for a frame started at ``start``."""
    return fps_from_time(time_since(start))