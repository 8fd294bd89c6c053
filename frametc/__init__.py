"""
FrameTC - SMPTE Timecode Values
Immutable SMPTE timecodes stored as a frame count and a frame rate, with
parsing, arithmetic, packed-integer and LTC conversion.
"""

__version__ = "0.1.0"

from .errors import (
    TimecodeError,
    RangeError,
    NonPositiveFps,
    WrongFramerate,
    CannotParse,
    DropFrameUnsupported,
)
from .framerate import (
    ALLOWED_FPS_DELTA,
    DEFAULT_FPS,
    NTSC_FPS,
    FrameRate,
    framerate_in_delta,
    parse_fps,
)
from .timecode import Timecode
from .sequence import timecode_range, generate_countdown, generate_countup
from .calculator import Calculator

# Module-level entry points
parse = Timecode.parse
soft_parse = Timecode.soft_parse

__all__ = [
    "Timecode",
    "FrameRate",
    "Calculator",
    "parse",
    "soft_parse",
    "parse_fps",
    "framerate_in_delta",
    "timecode_range",
    "generate_countdown",
    "generate_countup",
    "ALLOWED_FPS_DELTA",
    "DEFAULT_FPS",
    "NTSC_FPS",
    "TimecodeError",
    "RangeError",
    "NonPositiveFps",
    "WrongFramerate",
    "CannotParse",
    "DropFrameUnsupported",
]
