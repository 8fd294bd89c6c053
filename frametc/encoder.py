"""
SMPTE/LTC Audio Encoder

Renders runs of timecodes as linear timecode audio and writes them to WAV
files. Each frame word is sent bit 0 first with biphase-mark coding:
- every bit starts with a level transition
- a 1 bit has a second transition in the middle of the bit

The "sine" waveform band-limits the edges to roughly the 25us rise time
SMPTE 12M asks for; "square" leaves them hard.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, Literal, Union

import numpy as np
import soundfile as sf
from scipy import signal

from frametc import ltc
from frametc.errors import TimecodeError, WrongFramerate
from frametc.framerate import DEFAULT_FPS, FrameRate, coerce_fps, framerate_in_delta, parse_fps
from frametc.sequence import generate_countup
from frametc.timecode import Timecode

# Module-level logger
_logger = logging.getLogger(__name__)

WaveformType = Literal["sine", "square"]

RISE_TIME = 25e-6
FILTER_ORDER = 2


class Encoder:
    """
    SMPTE/LTC encoder.

    Generates audio readable by standard SMPTE/LTC decoders.
    """

    def __init__(
        self,
        sample_rate: int = 48000,
        fps: Union[float, FrameRate] = DEFAULT_FPS,
        amplitude: float = 0.7,
        waveform: WaveformType = "sine",
    ):
        """
        Initialize encoder.

        Args:
            sample_rate: Audio sample rate (Hz)
            fps: Frame rate of the timecode, up to 30 fps
            amplitude: Output amplitude (0.0 to 1.0)
            waveform: "sine" (band-limited edges, default) or "square"
        """
        if waveform not in ("sine", "square"):
            raise ValueError(f"Unknown waveform: {waveform}")
        if not 0.0 <= amplitude <= 1.0:
            raise ValueError(f"Amplitude must be between 0.0 and 1.0 (got {amplitude})")

        self.sample_rate = sample_rate
        self.fps = coerce_fps(fps)
        ltc.check_fps(self.fps)
        self.amplitude = amplitude
        self.waveform = waveform

        self.samples_per_bit = sample_rate / (self.fps * ltc.FRAME_BITS)
        if self.samples_per_bit < 2:
            raise ValueError(
                f"Sample rate {sample_rate} Hz is too low for LTC at {self.fps} fps"
            )

        self._sos = None
        if waveform == "sine":
            cutoff = min(0.35 / RISE_TIME, 0.45 * sample_rate)
            self._sos = signal.butter(FILTER_ORDER, cutoff, btype='low', fs=sample_rate, output='sos')

        _logger.debug(f"Encoder initialized: sample_rate={sample_rate}, fps={self.fps}, "
                      f"samples_per_bit={self.samples_per_bit:.2f}, waveform={waveform}")

    def biphase_mark(self, bits: np.ndarray) -> np.ndarray:
        """
        Biphase-mark encode a bit stream into a square wave of +/-1.0.

        Args:
            bits: Bits to send, in order

        Returns:
            float32 array of samples
        """
        bits = np.asarray(bits, dtype=np.int64)
        num_samples = int(round(bits.size * self.samples_per_bit))
        if num_samples == 0:
            return np.zeros(0, dtype=np.float32)

        # Two half-bit cells per bit. The first cell of every bit toggles the
        # level, the second toggles it again only for a 1.
        toggles = np.empty(bits.size * 2, dtype=np.int64)
        toggles[0::2] = 1
        toggles[1::2] = bits
        levels = np.where(np.cumsum(toggles) % 2 == 1, 1.0, -1.0)

        cells = np.arange(num_samples) * (2 * bits.size) // num_samples
        return levels[cells].astype(np.float32)

    def render(self, timecodes: Iterable[Timecode]) -> np.ndarray:
        """
        Render timecodes as LTC audio, one frame word per timecode.

        Returns:
            float32 array of samples scaled to the amplitude
        """
        words = [ltc.encode_frame(tc) for tc in timecodes]
        if not words:
            return np.zeros(0, dtype=np.float32)

        samples = self.biphase_mark(np.concatenate(words))
        if self._sos is not None:
            samples = signal.sosfilt(self._sos, samples)

        _logger.debug(f"Rendered {len(words)} frames into {len(samples)} samples")
        return np.clip(samples * self.amplitude, -1.0, 1.0).astype(np.float32)

    def generate(self, start: Timecode, duration: Union[Timecode, int]) -> np.ndarray:
        """
        Generate count-up audio.

        Args:
            start: First timecode
            duration: Length as a timecode or a frame count

        Returns:
            Array of audio samples

        Raises:
            WrongFramerate: if start is not at the encoder frame rate
        """
        if not framerate_in_delta(start.fps, self.fps):
            raise WrongFramerate(f"Start is at {start.fps} fps, encoder runs at {self.fps} fps")
        return self.render(generate_countup(start, duration))

    def generate_to_file(self, output_path: Union[str, Path], start: Timecode,
                         duration: Union[Timecode, int]):
        """
        Generate and save to a 16-bit PCM WAV file.

        Args:
            output_path: Output WAV file path
            start: First timecode
            duration: Length as a timecode or a frame count
        """
        samples = self.generate(start, duration)
        sf.write(str(output_path), samples, self.sample_rate, subtype='PCM_16')
        _logger.info(f"Wrote {len(samples)} samples to {output_path}")

    def play(self, samples: np.ndarray):
        """Play samples on the default output device and wait until done."""
        # sounddevice needs PortAudio at import time, so only load it here
        import sounddevice as sd
        sd.play(samples, self.sample_rate)
        sd.wait()


def default_output_name(fps: float, start: Timecode, duration: Timecode) -> str:
    """Build a file name like ltc_25fps_10000000_1h30m.wav."""
    rate_str = f"{fps:.2f}".rstrip('0').rstrip('.').replace('.', '')

    if duration.hours > 0:
        duration_str = f"{duration.hours}h{duration.minutes}m"
    elif duration.minutes > 0:
        duration_str = f"{duration.minutes}m{duration.seconds}s"
    elif duration.seconds > 0:
        duration_str = f"{duration.seconds}s"
    else:
        duration_str = f"{duration.frames}f"

    start_str = f"{start.hours:02d}{start.minutes:02d}{start.seconds:02d}{start.frames:02d}"
    return f"ltc_{rate_str}fps_{start_str}_{duration_str}.wav"


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Generate SMPTE/LTC timecode audio.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s 1m -o one_minute.wav               # 1 minute from 00:00:00:00
  %(prog)s "1h 30m" --start 10:00:00:00       # 90 minutes from 10 hours
  %(prog)s 215 -r 30000/1001 --square         # 00:00:02:15 at 29.97 fps

Duration and start formats:
  01:30:00:00 = 1 hour 30 minutes
  00:00:07.5  = 7.5 seconds
  1h 4f       = 1 hour 4 frames
  30s, 5m, 1h, 60f
  210         = 00:00:02:10
        """,
    )
    parser.add_argument(
        "duration",
        type=str,
        help="Duration (e.g., '1m', '00:01:30:00', '1h 4f')",
    )
    parser.add_argument(
        "--start",
        type=str,
        default="00:00:00:00",
        help="Starting timecode (default: 00:00:00:00)",
    )
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output WAV file path (default: auto-generated based on parameters)",
    )
    parser.add_argument(
        "-r", "--fps",
        type=str,
        default=str(DEFAULT_FPS),
        help=f"Frame rate, e.g. 25, 29.97 or 30000/1001 (default: {DEFAULT_FPS})",
    )
    parser.add_argument(
        "-s", "--sample-rate",
        type=int,
        default=48000,
        help="Sample rate in Hz (default: 48000)",
    )
    parser.add_argument(
        "-a", "--amplitude",
        type=float,
        default=0.7,
        help="Amplitude 0.0-1.0 (default: 0.7)",
    )
    parser.add_argument(
        "--square",
        action="store_true",
        help="Use square waveform instead of band-limited edges",
    )
    parser.add_argument(
        "--play",
        action="store_true",
        help="Play the audio instead of writing a file (needs sounddevice)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    try:
        fps = parse_fps(args.fps)
        duration = Timecode.parse(args.duration, fps)
        start = Timecode.parse(args.start, fps)
    except ValueError as e:
        print(f"Error parsing arguments: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        encoder = Encoder(
            sample_rate=args.sample_rate,
            fps=fps,
            amplitude=args.amplitude,
            waveform="square" if args.square else "sine",
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.verbose:
        print("Generating timecode:")
        print(f"  Start: {start}")
        print(f"  Duration: {duration} ({duration.total_frames} frames)")
        print(f"  Frame rate: {fps} fps")
        print(f"  Sample rate: {args.sample_rate} Hz")

    try:
        if args.play:
            encoder.play(encoder.generate(start, duration))
            return

        output_path = args.output or default_output_name(fps, start, duration)
        if not output_path.lower().endswith('.wav'):
            output_path = output_path + '.wav'

        encoder.generate_to_file(output_path, start, duration)
        print(f"Generated {output_path}")
    except TimecodeError as e:
        print(f"Error generating timecode: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
