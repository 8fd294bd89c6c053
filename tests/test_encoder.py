"""
LTC Audio Encoder Tests
=======================
"""

import numpy as np
import pytest
import soundfile as sf

from frametc import NTSC_FPS, RangeError, Timecode, WrongFramerate
from frametc import ltc
from frametc.encoder import Encoder, default_output_name, main


@pytest.fixture
def square_encoder():
    """48 kHz at 25 fps gives exactly 24 samples per bit."""
    return Encoder(sample_rate=48000, fps=25, amplitude=1.0, waveform="square")


class TestEncoderSetup:

    def test_samples_per_bit(self, square_encoder):
        assert square_encoder.samples_per_bit == 24

    def test_unknown_waveform(self):
        with pytest.raises(ValueError):
            Encoder(waveform="triangle")

    @pytest.mark.parametrize("amplitude", [-0.1, 1.5])
    def test_amplitude_out_of_range(self, amplitude):
        with pytest.raises(ValueError):
            Encoder(amplitude=amplitude)

    def test_sample_rate_too_low(self):
        with pytest.raises(ValueError):
            Encoder(sample_rate=3000, fps=25)

    @pytest.mark.parametrize("fps", [48, 50, 60])
    def test_frame_rate_above_30(self, fps):
        with pytest.raises(RangeError):
            Encoder(fps=fps)


class TestBiphaseMark:

    def test_zero_then_one(self, square_encoder):
        samples = square_encoder.biphase_mark([0, 1])
        expected = [1.0] * 24 + [-1.0] * 12 + [1.0] * 12
        assert samples.tolist() == expected

    def test_one_frame_length(self, square_encoder):
        samples = square_encoder.biphase_mark(ltc.encode_frame(Timecode(0)))
        assert len(samples) == 1920
        assert samples.dtype == np.float32

    def test_transition_count(self, square_encoder):
        bits = ltc.encode_frame(Timecode.at(1, 23, 45, 12, 25))
        samples = square_encoder.biphase_mark(bits)
        ones = int(bits.sum())
        # One transition at every bit boundary plus one mid-bit per 1 bit,
        # less the leading edge of the first bit
        assert np.count_nonzero(np.diff(samples)) == ltc.FRAME_BITS + ones - 1

    def test_empty(self, square_encoder):
        assert len(square_encoder.biphase_mark([])) == 0


class TestGenerate:

    def test_one_second(self, square_encoder):
        # 24 frames counting up includes both ends, 25 words
        samples = square_encoder.generate(Timecode(0, 25), 24)
        assert len(samples) == 48000

    def test_amplitude(self):
        encoder = Encoder(fps=25, amplitude=0.5, waveform="square")
        samples = encoder.generate(Timecode(0, 25), 1)
        assert np.max(np.abs(samples)) == pytest.approx(0.5)

    def test_sine_stays_in_range(self):
        encoder = Encoder(fps=25, amplitude=1.0, waveform="sine")
        samples = encoder.generate(Timecode.at(10, 0, 0, 0, 25), 10)
        assert samples.dtype == np.float32
        assert np.all(np.abs(samples) <= 1.0)

    def test_start_at_another_rate(self):
        encoder = Encoder(fps=30, waveform="square")
        with pytest.raises(WrongFramerate):
            encoder.generate(Timecode(0, 25), 29)

    def test_start_at_encoder_rate(self):
        encoder = Encoder(fps=30, waveform="square")
        samples = encoder.generate(Timecode(0, 30), 29)
        assert len(samples) == 30 * 1600

    def test_nothing_to_render(self, square_encoder):
        assert len(square_encoder.render([])) == 0

    def test_generate_to_file(self, square_encoder, tmp_path):
        path = tmp_path / "ltc.wav"
        square_encoder.generate_to_file(path, Timecode(0, 25), 24)
        data, sample_rate = sf.read(str(path))
        assert sample_rate == 48000
        assert len(data) == 48000


class TestDefaultOutputName:

    def test_hours(self):
        name = default_output_name(25.0, Timecode.at(10, 0, 0, 0, 25), Timecode.parse("1h 30m"))
        assert name == "ltc_25fps_10000000_1h30m.wav"

    def test_minutes(self):
        name = default_output_name(25.0, Timecode(0), Timecode.parse("90s"))
        assert name == "ltc_25fps_00000000_1m30s.wav"

    def test_seconds_and_frames(self):
        assert default_output_name(25.0, Timecode(0), Timecode.parse("5s")).endswith("_5s.wav")
        assert default_output_name(25.0, Timecode(0), Timecode.parse("10f")).endswith("_10f.wav")

    def test_ntsc_rate(self):
        name = default_output_name(NTSC_FPS, Timecode(0, NTSC_FPS), Timecode(30, NTSC_FPS))
        assert name.startswith("ltc_2997fps_")


class TestMain:

    def test_writes_wav(self, tmp_path):
        path = tmp_path / "out"
        main(["1s", "-o", str(path), "--square"])
        data, sample_rate = sf.read(str(tmp_path / "out.wav"))
        assert sample_rate == 48000
        # 00:00:00:00 through 00:00:01:00
        assert len(data) == 26 * 1920

    def test_bad_duration_exits(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["nonsense"])
        assert exc.value.code == 1
        assert "nonsense" in capsys.readouterr().err

    def test_bad_framerate_exits(self):
        with pytest.raises(SystemExit) as exc:
            main(["1s", "-r", "0"])
        assert exc.value.code == 1

    def test_framerate_above_30_exits(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            main(["1s", "-r", "50", "-o", str(tmp_path / "high.wav")])
        assert exc.value.code == 1
        assert not (tmp_path / "high.wav").exists()
