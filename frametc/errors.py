"""
Timecode errors

Every error derives from TimecodeError, which is a ValueError so callers
that already guard timecode input with ``except ValueError`` keep working.
"""


class TimecodeError(ValueError):
    """Base class for all FrameTC errors."""


class RangeError(TimecodeError):
    """A field or total is out of range (like 100 hours, or a negative total)."""


class NonPositiveFps(RangeError):
    """A frame rate is zero or negative."""


class WrongFramerate(TimecodeError):
    """Two timecodes with different frame rates were combined or compared."""


class CannotParse(TimecodeError):
    """Text does not match any supported timecode format."""


class DropFrameUnsupported(TimecodeError):
    """Drop-frame timecode was encountered."""
