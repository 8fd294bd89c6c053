"""
Canonical timecode fields

A timecode is stored as a total frame count and a frame rate. The
hours/minutes/seconds/frames fields are derived from those two values, and
any total that would produce an out-of-range field is rejected rather than
wrapped.
"""

import math
from typing import Tuple

from frametc.errors import RangeError

MAX_HOURS = 99
MAX_MINUTES = 59
MAX_SECONDS = 59

# Decimal places kept from a computed total before rounding up
TOTAL_PRECISION = 6

Fields = Tuple[int, int, int, int]


def canonicalize(total_frames: int, fps: float) -> Fields:
    """
    Derive (hours, minutes, seconds, frames) from a frame count.

    Args:
        total_frames: Non-negative frame count
        fps: Positive frame rate

    Returns:
        tuple: (hours, minutes, seconds, frames)

    Raises:
        RangeError: if any derived field is out of range
    """
    secs = math.floor(total_frames / fps)
    frames = total_frames - secs * fps
    mins = secs // 60
    secs -= mins * 60
    hrs = mins // 60
    mins -= hrs * 60

    if hrs > MAX_HOURS:
        raise RangeError(f"Timecode cannot be longer than {MAX_HOURS} hours (got {hrs})")
    if mins > MAX_MINUTES:
        raise RangeError(f"More than {MAX_MINUTES} minutes (got {mins})")
    if secs > MAX_SECONDS:
        raise RangeError(f"More than {MAX_SECONDS} seconds (got {secs})")
    # Catches rounding overshoot right at the frame rate boundary
    if frames >= fps:
        raise RangeError(f"More than {fps} frames ({frames}) in the last second")

    return (hrs, mins, secs, int(frames))


def validate_fields(hours: int, minutes: int, seconds: int, frames: int, fps: float) -> None:
    """
    Check that timecode fields are within range for the frame rate.

    Raises:
        RangeError: on the first field that is out of range
    """
    for name, value in (("hours", hours), ("minutes", minutes),
                        ("seconds", seconds), ("frames", frames)):
        if value < 0:
            raise RangeError(f"{name.capitalize()} cannot be negative (got {value})")

    if hours > MAX_HOURS:
        raise RangeError(f"There can be no more than {MAX_HOURS} hours, got {hours}")
    if minutes > MAX_MINUTES:
        raise RangeError(f"There can be no more than {MAX_MINUTES} minutes, got {minutes}")
    if seconds > MAX_SECONDS:
        raise RangeError(f"There can be no more than {MAX_SECONDS} seconds, got {seconds}")
    if frames >= fps:
        raise RangeError(f"There can be no more than {math.ceil(fps) - 1} frames @{fps}, got {frames}")


def fields_to_total(hours: int, minutes: int, seconds: int, frames: int, fps: float) -> int:
    """
    Convert validated fields to a frame count.

    Rounds up, after dropping float noise below TOTAL_PRECISION. At a
    fractional rate a second can start part way into a frame, and its first
    whole frame is the one after.
    """
    total = hours * 3600 * fps + minutes * 60 * fps + seconds * fps + frames
    return int(math.ceil(round(total, TOTAL_PRECISION)))
