"""Audio sample formats and PCM frame conversion.

Frames are numpy arrays of shape (frame_count, channels), int16 for 16-bit
audio and float32 for 32-bit audio.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass

import numpy as np

S16_MIN = -32768
S16_MAX = 32767


class AudioBits(enum.Enum):
    """Sample bit width: 16-bit signed integers or 32-bit floats."""

    BITS_16 = 16
    BITS_32 = 32

    @property
    def byte_size(self) -> int:
        return 2 if self is AudioBits.BITS_16 else 4

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(np.int16) if self is AudioBits.BITS_16 else np.dtype(np.float32)


@dataclass(frozen=True)
class AudioFormat:
    """Bit width, channel count and sample rate of a PCM stream."""

    bit_width: AudioBits
    channels: int
    sample_rate: int

    def __post_init__(self) -> None:
        if self.channels < 1:
            raise ValueError("channels must be at least 1")
        if self.sample_rate <= 0:
            raise ValueError("sample_rate must be positive")

    @property
    def frame_size(self) -> int:
        return self.bit_width.byte_size * self.channels

    def with_sample_rate(self, sample_rate: int) -> "AudioFormat":
        return AudioFormat(self.bit_width, self.channels, sample_rate)


def _c_round(x: float) -> int:
    """Round half away from zero."""
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


def _c_round_array(x: np.ndarray) -> np.ndarray:
    return np.sign(x) * np.floor(np.abs(x) + 0.5)


def empty_frames(format: AudioFormat, count: int) -> np.ndarray:
    """Return count frames of silence in the given format."""
    if count < 0:
        raise ValueError("count must not be negative")
    return np.zeros((count, format.channels), dtype=format.bit_width.dtype)


def _check_frames(frames, format: AudioFormat, name: str = "frames") -> np.ndarray:
    arr = np.asarray(frames)
    if arr.ndim != 2 or arr.shape[1] != format.channels:
        raise ValueError(
            f"{name} must have shape (n, {format.channels}), got {arr.shape}"
        )
    return arr.astype(format.bit_width.dtype, copy=False)


def _convert_array(values, dst_bits: AudioBits, src_bits: AudioBits) -> np.ndarray:
    values = np.asarray(values).astype(src_bits.dtype, copy=False)
    if dst_bits is src_bits:
        return values.copy()
    if dst_bits is AudioBits.BITS_32:
        return (values.astype(np.float64) * (1.0 / 32768.0)).astype(np.float32)
    scaled = np.trunc(values.astype(np.float32) * np.float32(32768.0))
    return np.clip(scaled, S16_MIN, S16_MAX).astype(np.int16)


def convert_component(value, dst_bits: AudioBits, src_bits: AudioBits):
    """Convert one sample between bit widths (16-bit int <-> 32-bit float)."""
    result = _convert_array(np.array([value]), dst_bits, src_bits)[0]
    return float(result) if dst_bits is AudioBits.BITS_32 else int(result)


def resample_frames(src, src_format: AudioFormat, dst_format: AudioFormat) -> np.ndarray:
    """Linearly resample frames to dst_format's sample rate."""
    if src_format.channels != dst_format.channels:
        raise ValueError("Channel count must be the same for sample rate conversion")
    if src_format.bit_width is not dst_format.bit_width:
        raise ValueError("Types must be the same for sample rate conversion")
    frames = _check_frames(src, src_format, "src")
    src_count = len(frames)
    ratio = src_format.sample_rate / dst_format.sample_rate
    dst_count = _c_round(src_count / ratio)
    if dst_count == 0 or src_count == 0:
        return empty_frames(dst_format, 0)

    position = (np.arange(dst_count, dtype=np.float64) * ratio).astype(np.float32)
    index_1 = np.minimum(position.astype(np.int64), src_count - 1)
    index_2 = np.minimum(index_1 + 1, src_count - 1)
    lerp = (position - index_1.astype(np.float32))[:, None]

    sample_1 = frames[index_1].astype(np.float32)
    sample_2 = frames[index_2].astype(np.float32)
    mixed = sample_1 + lerp * (sample_2 - sample_1)
    if dst_format.bit_width is AudioBits.BITS_32:
        return mixed.astype(np.float32)
    return np.clip(np.trunc(mixed), S16_MIN, S16_MAX).astype(np.int16)


def _convert_channels(frames: np.ndarray, src_format: AudioFormat, dst_format: AudioFormat) -> np.ndarray:
    dst_bits = dst_format.bit_width
    converted = _convert_array(frames, dst_bits, src_format.bit_width)
    src_ch, dst_ch = src_format.channels, dst_format.channels
    out = np.empty((len(converted), dst_ch), dtype=dst_bits.dtype)

    avg = None
    if src_ch > dst_ch or src_ch > 1:
        mean = converted.astype(np.float32).sum(axis=1, dtype=np.float32) / np.float32(src_ch)
        if dst_bits is AudioBits.BITS_32:
            avg = mean.astype(np.float32)
        else:
            avg = np.clip(_c_round_array(mean), S16_MIN, S16_MAX).astype(np.int16)

    if src_ch > dst_ch:
        # Down-mixing: every output channel gets the average of all inputs.
        out[:] = avg[:, None]
    elif src_ch == 1:
        out[:] = converted[:, :1]
    elif dst_ch > src_ch:
        out[:, :src_ch] = converted
        out[:, src_ch:] = avg[:, None]
    else:
        out[:] = converted
    return out


def convert_frames(src, src_format: AudioFormat, dst_format: AudioFormat, output_frame_count: int) -> np.ndarray:
    """Convert frames to dst_format, producing output_frame_count frames."""
    if output_frame_count < 0:
        raise ValueError("output_frame_count must not be negative")
    frames = _check_frames(src, src_format, "src")

    src_frame_count = output_frame_count
    if dst_format.sample_rate != src_format.sample_rate:
        ratio = src_format.sample_rate / dst_format.sample_rate
        src_frame_count = _c_round(output_frame_count * ratio)
    if len(frames) < src_frame_count:
        raise ValueError(
            f"need {src_frame_count} source frames, got {len(frames)}"
        )
    frames = frames[:src_frame_count]

    if dst_format == src_format:
        return frames.copy()

    need_sample_conversion = (
        dst_format.channels != src_format.channels
        or dst_format.bit_width is not src_format.bit_width
    )
    if need_sample_conversion:
        frames = _convert_channels(frames, src_format, dst_format)
        intermediate_format = dst_format.with_sample_rate(src_format.sample_rate)
    else:
        frames = frames.copy()
        intermediate_format = src_format

    if dst_format.sample_rate == src_format.sample_rate:
        return frames

    resampled = resample_frames(frames, intermediate_format, dst_format)
    if len(resampled) >= output_frame_count:
        return resampled[:output_frame_count]
    padded = empty_frames(dst_format, output_frame_count)
    padded[: len(resampled)] = resampled
    return padded


def mix_frames(dst, src, format: AudioFormat) -> np.ndarray:
    """Add src into dst in place (16-bit sums saturate) and return dst."""
    if not isinstance(dst, np.ndarray) or dst.dtype != format.bit_width.dtype:
        raise TypeError("dst must be a numpy array of the format's sample type")
    _check_frames(dst, format, "dst")
    source = _check_frames(src, format, "src")
    if source.shape != dst.shape:
        raise ValueError("src and dst must hold the same number of frames")
    if format.bit_width is AudioBits.BITS_32:
        dst += source
    else:
        total = dst.astype(np.int32) + source.astype(np.int32)
        dst[:] = np.clip(total, S16_MIN, S16_MAX).astype(np.int16)
    return dst