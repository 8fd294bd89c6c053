"""
Timecode sequences

Runs of consecutive timecodes, for stepping through a span frame by frame or
for feeding the LTC encoder.
"""

from typing import Iterator, List, Union

from frametc.errors import WrongFramerate
from frametc.framerate import framerate_in_delta
from frametc.timecode import Timecode


def timecode_range(start: Timecode, stop: Union[Timecode, int], step: int = 1) -> Iterator[Timecode]:
    """
    Yield timecodes from start up to, but not including, stop.

    Args:
        start: First timecode
        stop: End of the range, as a timecode or a total frame count
        step: Number of frames between timecodes

    Raises:
        WrongFramerate: if stop is a timecode at a different frame rate
        ValueError: if step is not positive
    """
    if step <= 0:
        raise ValueError(f"Step must be positive (got {step})")

    # Comparing checks the frame rates before anything is yielded
    if start >= stop:
        return

    current = start
    while current < stop:
        yield current
        current = current + step


def generate_countup(start: Timecode, duration: Union[Timecode, int]) -> List[Timecode]:
    """
    Generate a sequence of timecodes counting up.

    Args:
        start: Starting timecode
        duration: Length of the run, as a timecode or a frame count

    Returns:
        List of timecodes from start to start + duration, inclusive
    """
    end = start + duration
    result = list(timecode_range(start, end))
    result.append(end)
    return result


def generate_countdown(start: Timecode, duration: Union[Timecode, int]) -> List[Timecode]:
    """
    Generate a sequence of timecodes counting down.

    The run stops at 00:00:00:00 if the duration is longer than the start.

    Args:
        start: Starting timecode
        duration: Length of the run, as a timecode or a frame count

    Returns:
        List of timecodes from start down to start - duration, inclusive
    """
    if isinstance(duration, Timecode) and not framerate_in_delta(start.fps, duration.fps):
        raise WrongFramerate(f"Duration is at {duration.fps} fps, start is at {start.fps} fps")
    duration_frames = int(duration)

    result = []
    for i in range(duration_frames + 1):
        remaining = start.total_frames - i
        if remaining < 0:
            break
        result.append(type(start)(remaining, start.fps))
    return result
