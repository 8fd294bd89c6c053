"""
LTC Frame Word Tests
====================
"""

import numpy as np
import pytest

from frametc import NTSC_FPS, DropFrameUnsupported, FrameRate, RangeError, Timecode
from frametc import ltc


class TestEncodeFrame:

    def test_shape(self):
        bits = ltc.encode_frame(Timecode.at(1, 2, 3, 4, 25))
        assert bits.shape == (80,)
        assert bits.dtype == np.uint8

    def test_sync_word(self):
        bits = ltc.encode_frame(Timecode(0))
        assert list(bits[64:80]) == [0, 0, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 0, 1]

    def test_bcd_fields(self):
        bits = ltc.encode_frame(Timecode.at(12, 34, 56, 17, 25))
        assert list(bits[0:4]) == [1, 1, 1, 0]     # frame units 7
        assert list(bits[8:10]) == [1, 0]          # frame tens 1
        assert list(bits[16:20]) == [0, 1, 1, 0]   # seconds units 6
        assert list(bits[24:27]) == [1, 0, 1]      # seconds tens 5
        assert list(bits[32:36]) == [0, 0, 1, 0]   # minutes units 4
        assert list(bits[40:43]) == [1, 1, 0]      # minutes tens 3
        assert list(bits[48:52]) == [0, 1, 0, 0]   # hours units 2
        assert list(bits[56:58]) == [1, 0]         # hours tens 1

    def test_standard_hours_leave_field_7_clear(self):
        bits = ltc.encode_frame(Timecode.at(39, 0, 0, 0, 25))
        assert not bits[52:56].any()

    @pytest.mark.parametrize("total", [0, 1, 1234, 3600 * 25, 8999999])
    def test_even_number_of_zeros(self, total):
        bits = ltc.encode_frame(Timecode(total, 25))
        assert (80 - int(bits.sum())) % 2 == 0

    def test_drop_frame_flag_is_clear(self):
        assert ltc.encode_frame(Timecode(100)).tolist()[10] == 0

    def test_user_bits(self):
        bits = ltc.encode_frame(Timecode(100), user_bits=[1, 2, 3, 4, 5, 6, 7, 8])
        assert ltc.user_bits_of(bits) == [1, 2, 3, 4, 5, 6, 0, 8]

    def test_wrong_number_of_user_fields(self):
        with pytest.raises(ValueError):
            ltc.encode_frame(Timecode(100), user_bits=[1, 2])


class TestDecodeFrame:

    @pytest.mark.parametrize("fields", [
        (0, 0, 0, 0),
        (1, 2, 3, 4),
        (45, 30, 15, 20),
        (99, 59, 59, 24),
    ])
    def test_round_trip(self, fields):
        tc = Timecode.at(*fields, 25)
        assert ltc.decode_frame(ltc.encode_frame(tc), 25) == tc

    def test_round_trip_with_user_bits(self):
        tc = Timecode.at(10, 0, 0, 12, 25)
        bits = ltc.encode_frame(tc, user_bits=[15] * 8)
        assert ltc.decode_frame(bits, 25) == tc

    def test_accepts_lists(self):
        tc = Timecode.at(1, 0, 0, 0, 30)
        assert ltc.decode_frame(ltc.encode_frame(tc).tolist(), 30) == tc

    def test_wrong_length(self):
        assert ltc.decode_frame([0] * 79) is None

    def test_bad_sync_word(self):
        bits = ltc.encode_frame(Timecode(0))
        bits[79] = 0
        assert ltc.decode_frame(bits) is None

    def test_drop_frame_flag(self):
        bits = ltc.encode_frame(Timecode(0))
        bits[10] = 1
        with pytest.raises(DropFrameUnsupported):
            ltc.decode_frame(bits)


class TestFrameBytes:

    def test_round_trip(self):
        bits = ltc.encode_frame(Timecode.at(5, 34, 42, 5, 25))
        data = ltc.frame_to_bytes(bits)
        assert len(data) == 10
        assert np.array_equal(ltc.frame_from_bytes(data), bits)

    def test_bit_zero_first(self):
        data = ltc.frame_to_bytes(ltc.encode_frame(Timecode.at(0, 0, 0, 1, 25)))
        assert data[0] & 0x0F == 1
        # Sync word 0011 1111 1111 1101 read bit 64 first
        assert data[8:10] == bytes([0xFC, 0xBF])

    def test_wrong_length(self):
        with pytest.raises(ValueError):
            ltc.frame_from_bytes(b"123")


class TestFrameRateLimit:
    """The frame tens digit has 2 bits, so frames above 39 do not fit."""

    def test_encode_above_30_fps(self):
        with pytest.raises(RangeError):
            ltc.encode_frame(Timecode.at(0, 0, 1, 45, 50))

    def test_decode_above_30_fps(self):
        bits = ltc.encode_frame(Timecode.at(0, 0, 1, 5, 25))
        with pytest.raises(RangeError):
            ltc.decode_frame(bits, 50)
        with pytest.raises(RangeError):
            ltc.decode_frame(bits, FrameRate.FPS_60)

    def test_highest_frame_at_30_fps(self):
        tc = Timecode.at(0, 0, 1, 29, 30)
        assert ltc.decode_frame(ltc.encode_frame(tc), 30) == tc

    def test_highest_frame_at_ntsc(self):
        tc = Timecode.at(1, 0, 0, 29, NTSC_FPS)
        assert ltc.decode_frame(ltc.encode_frame(tc), NTSC_FPS) == tc


class TestDecodeClass:

    def test_decodes_into_subclass(self):
        class TakeTimecode(Timecode):
            pass

        bits = ltc.encode_frame(Timecode.at(1, 2, 3, 4, 25))
        tc = ltc.decode_frame(bits, 25, cls=TakeTimecode)
        assert type(tc) is TakeTimecode
        assert str(tc) == "01:02:03:04"
