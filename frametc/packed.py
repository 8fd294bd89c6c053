"""
Bit-packed unsigned integer timecode

Some systems (SGI, the DPX file format) store timecode as an unsigned 32-bit
integer with one BCD digit per nibble:

- Bits 28-31: Hours tens
- Bits 24-27: Hours units
- Bits 20-23: Minutes tens
- Bits 16-19: Minutes units
- Bits 12-15: Seconds tens
- Bits 8-11: Seconds units
- Bits 4-7: Frames tens
- Bits 0-3: Frames units

So 05:34:42:05 packs to 0x05344205 (87310853).
"""

from frametc.errors import RangeError
from frametc.framerate import DEFAULT_FPS

MAX_UINT = 0xFFFFFFFF
DIGITS = 8


def to_uint(tc) -> int:
    """
    Pack a timecode into an unsigned 32-bit integer.

    Args:
        tc: Timecode to pack

    Returns:
        int: BCD-packed HHMMSSFF
    """
    digits = f"{tc.hours:02d}{tc.minutes:02d}{tc.seconds:02d}{tc.frames:02d}"

    uint = 0
    # Least significant digit (frame units) goes into bits 0-3
    for i, digit in enumerate(reversed(digits)):
        uint |= int(digit) << (4 * i)
    return uint


def unpack_uint(uint: int) -> tuple:
    """
    Unpack a BCD-packed integer into (hours, minutes, seconds, frames).

    Raises:
        RangeError: if the value does not fit 32 bits or a nibble is not a decimal digit
    """
    if uint < 0 or uint > MAX_UINT:
        raise RangeError(f"Packed timecode must fit in 32 bits (got {uint})")

    nibbles = []
    for i in reversed(range(DIGITS)):
        nibble = (uint >> (4 * i)) & 0x0F
        if nibble > 9:
            raise RangeError(f"Nibble {i} of {uint:#010x} is not a BCD digit ({nibble})")
        nibbles.append(nibble)

    return tuple(nibbles[i] * 10 + nibbles[i + 1] for i in range(0, DIGITS, 2))


def from_uint(cls, uint: int, fps: float = DEFAULT_FPS):
    """
    Build a timecode from a BCD-packed unsigned integer.

    Args:
        cls: Timecode class to construct
        uint: Packed value
        fps: Frame rate of the result

    Returns:
        Instance of cls
    """
    hours, minutes, seconds, frames = unpack_uint(uint)
    return cls.at(hours, minutes, seconds, frames, fps)
