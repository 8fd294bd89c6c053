"""
Timecode string parser

Formats, tried in this order (the first match wins):
- "00:10:34:10"   -> HH:MM:SS:FF
- "00:00:07.16"   -> HH:MM:SS.fraction (how ffmpeg reports timecode)
- "1h 4f"         -> whitespace-separated terms, summed in any order
- "10s", "3m", "1h", "60f" -> a number with a unit suffix
- "210"           -> digits read from the right as FF, SS, MM, HH (00:00:02:10)

Drop-frame timecode ("00:00:00;00") is rejected.

The parser never builds timecodes itself: it is handed the class to
construct, so subclasses of Timecode get instances of the subclass back.
"""

import logging
import math
import re

from frametc.errors import CannotParse, DropFrameUnsupported, TimecodeError
from frametc.framerate import DEFAULT_FPS, coerce_fps

# Module-level logger
_logger = logging.getLogger(__name__)

COMPLETE_TC_RE = re.compile(r'([0-9]{2}):([0-9]{2}):([0-9]{2}):([0-9]{2})')
FRACTIONAL_TC_RE = re.compile(r'([0-9]{2}):([0-9]{2}):([0-9]{2})\.([0-9]{1,8})')
DIGITS_RE = re.compile(r'[0-9]+')
WHITESPACE_RE = re.compile(r'\s')

SECONDS_RE = re.compile(r'([0-9]+)s')
MINUTES_RE = re.compile(r'([0-9]+)m', re.IGNORECASE)
HOURS_RE = re.compile(r'([0-9]+)h', re.IGNORECASE)
FRAMES_RE = re.compile(r'([0-9]+)f', re.IGNORECASE)


def parse(cls, text: str, fps: float = DEFAULT_FPS):
    """
    Parse a timecode entered by the user.

    Args:
        cls: Timecode class to construct
        text: Timecode string in one of the supported formats
        fps: Frame rate of the result

    Returns:
        Instance of cls

    Raises:
        DropFrameUnsupported: if the text uses drop-frame notation
        CannotParse: if no format matches
        RangeError: if a field is out of range for the frame rate
    """
    if not isinstance(text, str):
        raise CannotParse(f"Cannot parse {text!r} into timecode, not a string")
    fps = coerce_fps(fps)

    # Drop frame goodbye
    if ';' in text:
        raise DropFrameUnsupported(f"Drop-frame timecode is not supported: {text}")

    match = COMPLETE_TC_RE.fullmatch(text)
    if match:
        hours, minutes, seconds, frames = (int(g) for g in match.groups())
        return cls.at(hours, minutes, seconds, frames, fps)

    if FRACTIONAL_TC_RE.fullmatch(text):
        return parse_with_fractional_seconds(cls, text, fps)

    if WHITESPACE_RE.search(text):
        return _parse_composite(cls, text, fps)

    match = SECONDS_RE.fullmatch(text)
    if match:
        return cls(int(match.group(1)) * fps, fps)

    match = HOURS_RE.fullmatch(text)
    if match:
        return cls(int(match.group(1)) * 60 * 60 * fps, fps)

    match = MINUTES_RE.fullmatch(text)
    if match:
        return cls(int(match.group(1)) * 60 * fps, fps)

    match = FRAMES_RE.fullmatch(text)
    if match:
        return cls(int(match.group(1)), fps)

    if DIGITS_RE.fullmatch(text):
        # Right-align into HHMMSSFF, anything beyond eight digits is dropped
        digits = text[-8:].rjust(8, '0')
        return cls.at(int(digits[0:2]), int(digits[2:4]),
                      int(digits[4:6]), int(digits[6:8]), fps)

    raise CannotParse(f"Cannot parse {text!r} into timecode, no match")


def _parse_composite(cls, text: str, fps: float):
    """Parse "10h 20m 10s 1f" style input as a sum of its terms."""
    terms = text.split()
    if not terms:
        raise CannotParse(f"Cannot parse {text!r} into timecode, no terms found")

    result = parse(cls, terms[0], fps)
    for term in terms[1:]:
        result = result + parse(cls, term, fps)
    return result


def parse_with_fractional_seconds(cls, text: str, fps: float = DEFAULT_FPS):
    """
    Parse a timecode with fractional seconds instead of frames.

    The fraction is converted to the index of the frame it falls in:
    "00:00:07.16" at 12.5 fps is frame 2 of second 7.

    Raises:
        CannotParse: if the text is not HH:MM:SS.fraction
        RangeError: if a field is out of range for the frame rate
    """
    match = FRACTIONAL_TC_RE.fullmatch(text) if isinstance(text, str) else None
    if not match:
        raise CannotParse(f"Cannot parse {text!r} as timecode with fractional seconds")

    fps = coerce_fps(fps)
    hours, minutes, seconds = (int(g) for g in match.groups()[:3])
    fraction = float('0.' + match.group(4))

    seconds_per_frame = 1.0 / fps
    frame_idx = math.floor(fraction / seconds_per_frame)

    return cls.at(hours, minutes, seconds, frame_idx, fps)


def soft_parse(cls, text: str, fps: float = DEFAULT_FPS):
    """
    Parse a timecode, returning a zero timecode if the text is not valid.

    Only failures raised while parsing are absorbed. A bad frame rate still
    raises, since the zero timecode cannot be built with it either.
    """
    try:
        return parse(cls, text, fps)
    except TimecodeError as e:
        _logger.debug(f"soft_parse falling back to zero for {text!r}: {e}")
        return cls(0, fps)
