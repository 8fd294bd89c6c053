"""
SMPTE Timecode value object

A timecode stores exactly two values: the total number of frames and the
frame rate. Hours, minutes, seconds and frames are derived from those, so
arithmetic never accumulates rounding error and an out-of-range timecode
(like 100 hours) can never exist.

Timecodes are immutable. Every operation that "changes" a timecode returns a
new one of the same class as the receiver, so subclasses survive arithmetic.

Two frame rates are the same rate when they are within ALLOWED_FPS_DELTA of
each other. Combining or comparing timecodes with different rates raises
WrongFramerate; nothing is converted behind the caller's back.
"""

import math
import numbers
from dataclasses import dataclass, field
from typing import Union

from frametc import packed, parser
from frametc.canonical import Fields, canonicalize, fields_to_total, validate_fields
from frametc.errors import RangeError, WrongFramerate
from frametc.framerate import DEFAULT_FPS, FrameRate, coerce_fps, framerate_in_delta

WITH_FRAMES = "%02d:%02d:%02d:%02d"
WITH_FRACTIONS_OF_SECOND = "%02d:%02d:%02d.%02d"


@dataclass(frozen=True, eq=False)
class Timecode:
    """
    SMPTE timecode as a frame count at a frame rate.

    Can be built from a frame count, a string, seconds or a packed integer:

        Timecode(250, 25)                    # 00:00:10:00
        Timecode.parse("1h 4f", 25)          # 01:00:00:04
        Timecode.at(5, 34, 42, 5, 25)        # 05:34:42:05
        Timecode.from_seconds(7.5, 10)       # 00:00:07:05
        Timecode.from_uint(87310853, 25)     # 05:34:42:05

    Timecodes hash by their total frame count. Equality between incompatible
    rates raises WrongFramerate, and so does a set or dict lookup that meets
    a timecode at another rate with the same total.
    """
    total_frames: int = 0
    fps: float = DEFAULT_FPS

    # Canonical (hours, minutes, seconds, frames), computed once
    _fields: Fields = field(init=False, repr=False)

    def __post_init__(self):
        """Validate, normalize and canonicalize."""
        if self.total_frames < 0:
            raise RangeError(f"Timecode cannot be negative (got {self.total_frames})")

        fps = coerce_fps(self.fps)
        total = int(self.total_frames)

        object.__setattr__(self, 'total_frames', total)
        object.__setattr__(self, 'fps', fps)
        object.__setattr__(self, '_fields', canonicalize(total, fps))

    # Construction

    @classmethod
    def at(cls, hours: int, minutes: int, seconds: int, frames: int,
           fps: Union[float, FrameRate] = DEFAULT_FPS) -> 'Timecode':
        """
        Create a timecode at a specific HH:MM:SS:FF.

        Raises:
            RangeError: if a field is out of range for the frame rate
        """
        fps = coerce_fps(fps)
        validate_fields(hours, minutes, seconds, frames, fps)
        return cls(fields_to_total(hours, minutes, seconds, frames, fps), fps)

    @classmethod
    def parse(cls, text: str, fps: Union[float, FrameRate] = DEFAULT_FPS) -> 'Timecode':
        """Parse a timecode string (see frametc.parser for the formats)."""
        return parser.parse(cls, text, fps)

    @classmethod
    def soft_parse(cls, text: str, fps: Union[float, FrameRate] = DEFAULT_FPS) -> 'Timecode':
        """Parse a timecode string, or return zero if it cannot be parsed."""
        return parser.soft_parse(cls, text, fps)

    @classmethod
    def parse_with_fractional_seconds(cls, text: str,
                                      fps: Union[float, FrameRate] = DEFAULT_FPS) -> 'Timecode':
        """Parse HH:MM:SS.fraction, the way ffmpeg reports timecode."""
        return parser.parse_with_fractional_seconds(cls, text, fps)

    @classmethod
    def from_seconds(cls, seconds: float, fps: Union[float, FrameRate] = DEFAULT_FPS) -> 'Timecode':
        """
        Create a timecode from a number of seconds.

        This is how QuickTime and other systems with non-frame-based
        timescales report time. Partial frames are rounded up, so 7.01
        seconds at 10 fps is frame 71, not frame 70.
        """
        fps = coerce_fps(fps)
        return cls(math.ceil(seconds * fps), fps)

    @classmethod
    def from_uint(cls, uint: int, fps: Union[float, FrameRate] = DEFAULT_FPS) -> 'Timecode':
        """Unpack a BCD bit-packed unsigned 32-bit integer (DPX, SGI)."""
        return packed.from_uint(cls, uint, fps)

    # Derived fields

    @property
    def hours(self) -> int:
        return self._fields[0]

    @property
    def minutes(self) -> int:
        return self._fields[1]

    @property
    def seconds(self) -> int:
        return self._fields[2]

    @property
    def frames(self) -> int:
        return self._fields[3]

    @property
    def fields(self) -> Fields:
        """(hours, minutes, seconds, frames)"""
        return self._fields

    @property
    def frame_rate(self) -> float:
        return self.fps

    @property
    def frame_interval(self) -> float:
        """Duration of one frame in seconds."""
        return 1.0 / self.fps

    @property
    def is_zero(self) -> bool:
        """Check if the timecode is at 00:00:00:00."""
        return self.total_frames == 0

    # Conversion

    def to_uint(self) -> int:
        """Get the timecode as a BCD bit-packed unsigned 32-bit integer."""
        return packed.to_uint(self)

    def convert(self, new_fps: Union[float, FrameRate]) -> 'Timecode':
        """
        Reinterpret the same frame count at a different frame rate.

        The duration is not preserved: 1 second of PAL (25 frames) becomes
        25 frames of film. This is what PAL to film transfers need.

        Raises:
            NonPositiveFps: if the new rate is zero or negative
        """
        return type(self)(self.total_frames, new_fps)

    def with_frames_as_fraction(self) -> str:
        """
        Format with a fraction of a second in place of the frames field.

        The result can be fed to ffmpeg directly:
        Timecode.parse("00:00:10:24", 25).with_frames_as_fraction() -> "00:00:10.96"
        """
        hrs, mins, secs, frames = self._fields
        return WITH_FRACTIONS_OF_SECOND % (hrs, mins, secs, int(frames * (100.0 / self.fps)))

    with_fractional_seconds = with_frames_as_fraction

    def succ(self) -> 'Timecode':
        """Get the next frame."""
        return type(self)(self.total_frames + 1, self.fps)

    def __str__(self) -> str:
        """Format timecode as HH:MM:SS:FF."""
        return WITH_FRAMES % self._fields

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self} ({self.total_frames}F@{self.fps:.2f})>"

    def __int__(self) -> int:
        return self.total_frames

    def __float__(self) -> float:
        return float(self.total_frames)

    def __hash__(self) -> int:
        # Equal timecodes share a total, and compare equal to that integer
        return hash(self.total_frames)

    # Arithmetic

    def _compatible_total(self, other: 'Timecode') -> int:
        """Get the total of another timecode, checking the frame rates match."""
        if not framerate_in_delta(self.fps, other.fps):
            raise WrongFramerate(
                f"You are calculating timecodes with different framerates "
                f"({self.fps} and {other.fps})"
            )
        return other.total_frames

    def __add__(self, other):
        """Add a number of frames or another timecode."""
        if isinstance(other, Timecode):
            return type(self)(self.total_frames + self._compatible_total(other), self.fps)
        if isinstance(other, numbers.Real):
            return type(self)(self.total_frames + other, self.fps)
        return NotImplemented

    __radd__ = __add__

    def __sub__(self, other):
        """Subtract a number of frames or another timecode."""
        if isinstance(other, Timecode):
            return type(self)(self.total_frames - self._compatible_total(other), self.fps)
        if isinstance(other, numbers.Real):
            return type(self)(self.total_frames - other, self.fps)
        return NotImplemented

    def __mul__(self, other):
        """Multiply the timecode by a number."""
        if not isinstance(other, numbers.Real):
            return NotImplemented
        if other < 0:
            raise RangeError(f"Timecode multiplier cannot be negative (got {other})")
        return type(self)(self.total_frames * other, self.fps)

    __rmul__ = __mul__

    def __truediv__(self, other):
        """
        Divide by a timecode or a number.

        By a timecode: how many times it fits into this one, as a float.
        By a number: the timecode that, multiplied by the number, gives this one
        (rounded down to a whole frame).
        """
        if isinstance(other, Timecode):
            return self.total_frames / self._compatible_total(other)
        if isinstance(other, numbers.Real):
            return type(self)(self.total_frames // other, self.fps)
        return NotImplemented

    def __floordiv__(self, other):
        if isinstance(other, Timecode):
            return self.total_frames // self._compatible_total(other)
        if isinstance(other, numbers.Real):
            return type(self)(self.total_frames // other, self.fps)
        return NotImplemented

    # Comparison

    def _comparable_total(self, other):
        if isinstance(other, Timecode):
            return self._compatible_total(other)
        if isinstance(other, numbers.Real):
            return other
        return NotImplemented

    def __eq__(self, other):
        other_total = self._comparable_total(other)
        if other_total is NotImplemented:
            return NotImplemented
        return self.total_frames == other_total

    def __lt__(self, other):
        other_total = self._comparable_total(other)
        if other_total is NotImplemented:
            return NotImplemented
        return self.total_frames < other_total

    def __le__(self, other):
        other_total = self._comparable_total(other)
        if other_total is NotImplemented:
            return NotImplemented
        return self.total_frames <= other_total

    def __gt__(self, other):
        other_total = self._comparable_total(other)
        if other_total is NotImplemented:
            return NotImplemented
        return self.total_frames > other_total

    def __ge__(self, other):
        other_total = self._comparable_total(other)
        if other_total is NotImplemented:
            return NotImplemented
        return self.total_frames >= other_total
