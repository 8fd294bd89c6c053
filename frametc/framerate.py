"""
Frame rates

Timecodes carry their frame rate as a plain float. Fractional broadcast
rates such as NTSC's 30000/1001 cannot be represented exactly, so two rates
are treated as the same rate when they differ by no more than
ALLOWED_FPS_DELTA.

Standard rates:
- 23.976 fps (24 * 1000/1001)
- 24, 25, 30, 48, 50, 60 fps
- 29.97 fps (30 * 1000/1001), non-drop only
- 59.94 fps (60 * 1000/1001), non-drop only
"""

import re
from enum import IntEnum
from fractions import Fraction
from typing import Union

from frametc.errors import NonPositiveFps

DEFAULT_FPS = 25.0
NTSC_FPS = 30.0 * 1000 / 1001

# Maximum absolute difference between two rates that still counts as equal
ALLOWED_FPS_DELTA = 0.001

_FPS_RE = re.compile(r'^\s*(\d+(?:\.\d+)?)\s*(?:[/:]\s*(\d+(?:\.\d+)?))?\s*$')


class FrameRate(IntEnum):
    """Standard SMPTE frame rates."""
    FPS_23_976 = 0  # 24 * 1000/1001
    FPS_24 = 1
    FPS_25 = 2
    FPS_29_97 = 3  # 30 * 1000/1001, non-drop
    FPS_30 = 4
    FPS_48 = 5
    FPS_50 = 6
    FPS_59_94 = 7  # 60 * 1000/1001, non-drop
    FPS_60 = 8

    @property
    def fps(self) -> float:
        """Get actual frame rate as float."""
        return _FPS_VALUES[self]

    @classmethod
    def from_fps(cls, fps: float) -> 'FrameRate':
        """
        Find the standard rate matching a float rate.

        Args:
            fps: Frame rate in frames per second

        Returns:
            The matching FrameRate member

        Raises:
            ValueError: if no standard rate is within ALLOWED_FPS_DELTA
        """
        for member in cls:
            if framerate_in_delta(member.fps, fps):
                return member
        raise ValueError(f"{fps} is not a standard frame rate")


_FPS_VALUES = {
    FrameRate.FPS_23_976: 24.0 * 1000 / 1001,
    FrameRate.FPS_24: 24.0,
    FrameRate.FPS_25: 25.0,
    FrameRate.FPS_29_97: NTSC_FPS,
    FrameRate.FPS_30: 30.0,
    FrameRate.FPS_48: 48.0,
    FrameRate.FPS_50: 50.0,
    FrameRate.FPS_59_94: 60.0 * 1000 / 1001,
    FrameRate.FPS_60: 60.0,
}


def framerate_in_delta(one: float, two: float) -> bool:
    """Check that two rates are within ALLOWED_FPS_DELTA of each other."""
    return abs(float(one) - float(two)) <= ALLOWED_FPS_DELTA


def coerce_fps(fps: Union[float, Fraction, FrameRate]) -> float:
    """
    Normalize a frame rate to a positive float.

    FrameRate members are IntEnums, so they are resolved through their fps
    property rather than their integer value.

    Raises:
        NonPositiveFps: if the rate is zero or negative
    """
    if isinstance(fps, FrameRate):
        value = fps.fps
    else:
        value = float(fps)
    if not value > 0:
        raise NonPositiveFps(f"FPS must be positive (got {fps})")
    return value


def parse_fps(text: str) -> float:
    """
    Parse a textual frame rate.

    Formats:
    - "25" or "29.97" -> plain rate
    - "30000/1001" -> rational rate
    - "24/1.001" -> rational rate with a fractional denominator

    Returns:
        Frame rate as float

    Raises:
        ValueError: if the text is not a rate
        NonPositiveFps: if the rate is zero or negative
    """
    match = _FPS_RE.match(text)
    if not match:
        raise ValueError(f"Invalid frame rate: {text}")

    num = Fraction(match.group(1))
    den = Fraction(match.group(2)) if match.group(2) else 1
    if den == 0:
        raise NonPositiveFps(f"Frame rate denominator cannot be zero: {text}")
    return coerce_fps(Fraction(num, den))
