"""
SMPTE/LTC frame word

Linear timecode carries one 80-bit word per frame (per SMPTE 12M):
- Bits 0-3: Frame units (BCD, 0-9)
- Bits 4-7: User bits field 1
- Bits 8-9: Frame tens (BCD, 0-2)
- Bit 10: Drop frame flag (always 0, drop frame is not supported)
- Bit 11: Color frame flag
- Bits 12-15: User bits field 2
- Bits 16-19: Seconds units (BCD, 0-9)
- Bits 20-23: User bits field 3
- Bits 24-26: Seconds tens (BCD, 0-5)
- Bit 27: Polarity correction
- Bits 28-31: User bits field 4
- Bits 32-35: Minutes units (BCD, 0-9)
- Bits 36-39: User bits field 5
- Bits 40-42: Minutes tens (BCD, 0-5)
- Bit 43: Binary group flag 0
- Bits 44-47: User bits field 6
- Bits 48-51: Hours units (BCD, 0-9)
- Bits 52-55: Hours tens, upper bits (user bits field 7 in plain SMPTE)
- Bits 56-57: Hours tens, lower bits (BCD, 0-3)
- Bit 58: Binary group flag 1
- Bit 59: Binary group flag 2
- Bits 60-63: User bits field 8
- Bits 64-79: Sync word (0011 1111 1111 1101)

Hours 0-39 stay readable by any SMPTE decoder (bits 52-55 are 0000). Hours
40-99 need the tens digit's upper bits, which are kept in field 7.

The frame tens digit only counts to 3, so words carry rates up to 30 fps.

Words are numpy uint8 arrays of 0/1, bit 0 first, which is also the order
they go out on the wire.
"""

from typing import List, Optional, Sequence, Type

import numpy as np

from frametc.errors import DropFrameUnsupported, RangeError
from frametc.framerate import ALLOWED_FPS_DELTA, DEFAULT_FPS, coerce_fps
from frametc.timecode import Timecode

FRAME_BITS = 80
FRAME_BYTES = FRAME_BITS // 8

SYNC_WORD = np.array([0, 0, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 0, 1], dtype=np.uint8)

DROP_FRAME_BIT = 10
POLARITY_BIT = 27

# Start bit of each 4-bit user field, field 7 (52) is taken by the hours
USER_FIELD_STARTS = (4, 12, 20, 28, 36, 44, 52, 60)
HOURS_FIELD = 6

# The frame tens digit has 2 bits, so frame numbers stop at 39
MAX_FPS = 30.0


def check_fps(fps: float):
    """
    Check that a frame rate fits the LTC frame word.

    Raises:
        RangeError: if the rate is above MAX_FPS
    """
    if fps > MAX_FPS + ALLOWED_FPS_DELTA:
        raise RangeError(f"LTC frame words carry at most {MAX_FPS:g} fps (got {fps})")


def _put(bits: np.ndarray, start: int, width: int, value: int):
    """Write value into bits[start:start + width], LSB first."""
    for i in range(width):
        bits[start + i] = (value >> i) & 1


def _get(bits: np.ndarray, start: int, width: int) -> int:
    """Read bits[start:start + width] as an integer, LSB first."""
    return sum(int(bits[start + i]) << i for i in range(width))


def encode_frame(tc: Timecode, user_bits: Optional[Sequence[int]] = None) -> np.ndarray:
    """
    Encode a timecode as an 80-bit LTC frame word.

    Args:
        tc: Timecode to encode
        user_bits: Optional 8 user fields of 4 bits each; field 7 is ignored
            because it carries the upper bits of the hours tens digit

    Returns:
        numpy uint8 array of 80 bits

    Raises:
        RangeError: if the timecode rate is above MAX_FPS
    """
    check_fps(tc.fps)
    if user_bits is None:
        user_bits = [0] * 8
    if len(user_bits) != 8:
        raise ValueError(f"Expected 8 user bit fields (got {len(user_bits)})")

    bits = np.zeros(FRAME_BITS, dtype=np.uint8)

    for field_idx, start in enumerate(USER_FIELD_STARTS):
        if field_idx != HOURS_FIELD:
            _put(bits, start, 4, user_bits[field_idx] & 0x0F)

    _put(bits, 0, 4, tc.frames % 10)
    _put(bits, 8, 2, tc.frames // 10)
    _put(bits, 16, 4, tc.seconds % 10)
    _put(bits, 24, 3, tc.seconds // 10)
    _put(bits, 32, 4, tc.minutes % 10)
    _put(bits, 40, 3, tc.minutes // 10)

    hour_tens = tc.hours // 10
    _put(bits, 48, 4, tc.hours % 10)
    _put(bits, 56, 2, hour_tens & 0b11)
    _put(bits, 52, 4, hour_tens >> 2)

    bits[64:80] = SYNC_WORD

    # Even number of 0 bits in the whole frame keeps every frame starting
    # on the same edge. Counted with the polarity bit still 0.
    zero_count = FRAME_BITS - int(bits.sum())
    bits[POLARITY_BIT] = zero_count % 2
    return bits


def decode_frame(bits: Sequence[int], fps: float = DEFAULT_FPS,
                 cls: Type[Timecode] = Timecode) -> Optional[Timecode]:
    """
    Decode an 80-bit LTC frame word.

    Args:
        bits: 80 bits (0 or 1), bit 0 first
        fps: Frame rate of the result (LTC words do not carry it)
        cls: Class used to build the result

    Returns:
        Timecode, or None if the length or sync word is wrong

    Raises:
        DropFrameUnsupported: if the drop frame flag is set
        RangeError: if a field is out of range for the frame rate, or the
            rate is above MAX_FPS
    """
    fps = coerce_fps(fps)
    check_fps(fps)
    bits = np.asarray(bits, dtype=np.uint8)
    if bits.shape != (FRAME_BITS,):
        return None
    if not np.array_equal(bits[64:80], SYNC_WORD):
        return None
    if bits[DROP_FRAME_BIT]:
        raise DropFrameUnsupported("LTC frame has the drop frame flag set")

    frames = _get(bits, 8, 2) * 10 + _get(bits, 0, 4)
    seconds = _get(bits, 24, 3) * 10 + _get(bits, 16, 4)
    minutes = _get(bits, 40, 3) * 10 + _get(bits, 32, 4)
    hour_tens = (_get(bits, 52, 4) << 2) | _get(bits, 56, 2)
    hours = hour_tens * 10 + _get(bits, 48, 4)

    return cls.at(hours, minutes, seconds, frames, fps)


def user_bits_of(bits: Sequence[int]) -> List[int]:
    """Extract the 8 user bit fields of a frame word (field 7 reads as 0)."""
    bits = np.asarray(bits, dtype=np.uint8)
    return [0 if field_idx == HOURS_FIELD else _get(bits, start, 4)
            for field_idx, start in enumerate(USER_FIELD_STARTS)]


def frame_to_bytes(bits: np.ndarray) -> bytes:
    """Pack an 80-bit frame word into 10 bytes, bit 0 first."""
    return np.packbits(np.asarray(bits, dtype=np.uint8), bitorder='little').tobytes()


def frame_from_bytes(data: bytes) -> np.ndarray:
    """Unpack 10 bytes into an 80-bit frame word."""
    if len(data) != FRAME_BYTES:
        raise ValueError(f"LTC frame is {FRAME_BYTES} bytes (got {len(data)})")
    return np.unpackbits(np.frombuffer(data, dtype=np.uint8), bitorder='little')
