"""Reading PCM frames from RIFF/WAVE files."""

from __future__ import annotations

import io
import logging
import struct
from dataclasses import dataclass, field
from typing import BinaryIO, Optional

import numpy as np

from ogbengine.audio_format import (
    S16_MAX,
    S16_MIN,
    AudioBits,
    AudioFormat,
    _c_round,
    convert_frames,
    empty_frames,
)

log = logging.getLogger(__name__)

WAV_FORMAT_PCM = 0x0001
WAV_FORMAT_IEEE_FLOAT = 0x0003
WAV_FORMAT_EXTENSIBLE = 0xFFFE

_GUID_TAIL = bytes((0x80, 0x00, 0x00, 0xAA, 0x00, 0x38, 0x9B, 0x71))
WAV_SUBTYPE_PCM = struct.pack("<IHH", 0x00000001, 0x0000, 0x0010) + _GUID_TAIL
WAV_SUBTYPE_IEEE_FLOAT = struct.pack("<IHH", 0x00000003, 0x0000, 0x0010) + _GUID_TAIL

_IGNORED_CHUNKS = frozenset({b"bext", b"fact", b"junk"})
_NON_DATA_CHUNK_MAX_SIZE = 40


class WavFormatError(ValueError):
    """The file is not a WAVE file this reader supports."""


def is_wav_header(data: bytes) -> bool:
    """Whether data starts like a RIFF/WAVE file."""
    return bytes(data).startswith(b"RIFF")


def is_ogg_header(data: bytes) -> bool:
    """Whether data starts like an Ogg file."""
    return bytes(data).startswith(b"OggS")


@dataclass
class WavStream:
    """An open WAVE file positioned inside its PCM data."""

    file: BinaryIO = field(repr=False)
    path: str = ""
    channels: int = 0
    sample_rate: int = 0
    format: int = 0
    bits_per_sample: int = 0
    valid_bits_per_sample: int = 0
    number_of_frames: int = 0
    pcm_start: int = 0
    sub_format: bytes = bytes(16)
    output_frame_count: int = 0

    @classmethod
    def open(cls, path, sample_rate: int) -> "WavStream":
        """Open path and parse its header.

        output_frame_count is the frame count once resampled to sample_rate.
        """
        handle = io.open(path, "rb")
        stream = cls(file=handle, path=str(path))
        try:
            stream._parse(sample_rate)
        except BaseException:
            handle.close()
            raise
        return stream

    def _fail(self, message: str) -> WavFormatError:
        return WavFormatError(f"{message} (wave file @ {self.path})")

    def _parse(self, sample_rate: int) -> None:
        f = self.file
        header = f.read(12)
        if len(header) != 12:
            raise self._fail("Truncated header")
        if header[:4] != b"RIFF":
            raise self._fail("Missing RIFF header")
        if header[8:12] != b"WAVE":
            raise self._fail("Invalid header")

        sub_chunk_bytes = struct.unpack_from("<I", header, 4)[0] - 4
        have_fmt = False
        have_data = False
        pos = 4
        while pos < sub_chunk_bytes:
            chunk_header = f.read(8)
            if len(chunk_header) != 8:
                raise self._fail("Truncated chunk header")
            pos += 8
            chunk_id = chunk_header[:4]
            chunk_size = struct.unpack_from("<I", chunk_header, 4)[0]
            pos += chunk_size

            if chunk_id in _IGNORED_CHUNKS:
                f.seek(chunk_size, io.SEEK_CUR)
                continue

            chunk = b""
            if chunk_id != b"data" and chunk_size <= _NON_DATA_CHUNK_MAX_SIZE:
                chunk = f.read(chunk_size)
                if len(chunk) != chunk_size:
                    raise self._fail("Truncated chunk")

            if chunk_id == b"fmt ":
                if chunk_size not in (16, 18, 40):
                    raise self._fail(f"Invalid wav fmt chunk, bad size {chunk_size}")
                (
                    self.format,
                    self.channels,
                    self.sample_rate,
                    _avg_bytes_per_sec,
                    _block_align,
                    self.bits_per_sample,
                ) = struct.unpack_from("<HHIIHH", chunk, 0)
                self.valid_bits_per_sample = self.bits_per_sample
                if chunk_size == 40:
                    self.valid_bits_per_sample = struct.unpack_from("<H", chunk, 18)[0]
                    self.sub_format = chunk[24:40]
                have_fmt = True
            elif chunk_id == b"data":
                if not have_fmt or self.channels == 0 or self.bits_per_sample < 8:
                    raise self._fail("Data chunk without a valid fmt chunk")
                number_of_bytes = chunk_size - (chunk_size % 2)
                number_of_samples = number_of_bytes // (self.bits_per_sample // 8)
                self.pcm_start = f.tell()
                self.number_of_frames = number_of_samples // self.channels
                have_data = True
                f.seek(chunk_size, io.SEEK_CUR)
            else:
                log.warning("Unhandled chunk id %r in wave file @ %s", chunk_id, self.path)
                if chunk_size > _NON_DATA_CHUNK_MAX_SIZE:
                    f.seek(chunk_size, io.SEEK_CUR)

        if not have_fmt:
            raise self._fail("Missing fmt chunk")
        if not have_data:
            raise self._fail("Missing data chunk")

        if self.format == WAV_FORMAT_EXTENSIBLE:
            if self.sub_format == WAV_SUBTYPE_PCM:
                self.format = WAV_FORMAT_PCM
            elif self.sub_format == WAV_SUBTYPE_IEEE_FLOAT:
                self.format = WAV_FORMAT_IEEE_FLOAT
            else:
                raise self._fail("Unsupported extensible sub-format")

        if self.format not in (WAV_FORMAT_PCM, WAV_FORMAT_IEEE_FLOAT) or (
            self.format == WAV_FORMAT_IEEE_FLOAT and self.valid_bits_per_sample != 32
        ):
            raise self._fail(
                f"Format 0x{self.format:x} ({self.valid_bits_per_sample} bits) is not supported"
            )
        if self.bits_per_sample % 8 or self.bits_per_sample < self.valid_bits_per_sample:
            raise self._fail("Inconsistent sample bit widths")
        if self.sample_rate <= 0:
            raise self._fail("Invalid sample rate")

        if self.valid_bits_per_sample == 24:
            log.warning(
                "The current support for 24-bit wave audio is hit-or-miss. If the audio "
                "sounds weird, convert it to another bit width."
            )

        self.output_frame_count = self.number_of_frames
        if self.sample_rate != sample_rate:
            ratio = sample_rate / self.sample_rate
            self.output_frame_count = _c_round(self.number_of_frames * ratio)

        f.seek(self.pcm_start)

    @property
    def frame_size(self) -> int:
        return self.channels * (self.bits_per_sample // 8)

    def close(self) -> None:
        """Close the underlying file."""
        self.file.close()

    def set_frame_pos(self, output_sample_rate: int, frame_index: int) -> None:
        """Seek to frame_index, counted at output_sample_rate."""
        ratio = self.sample_rate / output_sample_rate
        index = _c_round(ratio * frame_index)
        self.file.seek(self.pcm_start + index * self.frame_size)

    def read_frames(self, format: AudioFormat, number_of_frames: int) -> np.ndarray:
        """Read up to number_of_frames frames converted to format.

        Returns fewer frames at the end of the data, and none if the read
        comes up short.
        """
        if number_of_frames < 0:
            raise ValueError("number_of_frames must not be negative")
        pos = self.file.tell()
        if pos < self.pcm_start:
            return empty_frames(format, 0)

        frame_size = self.frame_size
        end = self.pcm_start + frame_size * self.number_of_frames
        remaining = max(end - pos, 0) // frame_size
        ratio = self.sample_rate / format.sample_rate

        frames_to_output = min(_c_round(remaining / ratio), number_of_frames)
        frames_to_read = frames_to_output
        if self.sample_rate != format.sample_rate:
            frames_to_read = _c_round(ratio * frames_to_output)

        wanted = frames_to_read * frame_size
        raw = self.file.read(wanted)
        if len(raw) != wanted:
            self.file.seek(pos)
            return empty_frames(format, 0)

        decoded = self._decode(raw, frames_to_read, format.bit_width)
        source_format = AudioFormat(format.bit_width, self.channels, self.sample_rate)
        return convert_frames(decoded, source_format, format, frames_to_output)

    def _decode_ints(self, data: np.ndarray, count: int) -> Optional[np.ndarray]:
        valid = self.valid_bits_per_sample
        if valid == 32:
            return np.ascontiguousarray(data[..., :4]).view("<i4").reshape(count, self.channels)
        if valid == 16:
            return np.ascontiguousarray(data[..., :2]).view("<i2").reshape(count, self.channels)
        if valid == 24:
            b = data[..., :3].astype(np.int32)
            value = b[..., 0] | (b[..., 1] << 8) | (b[..., 2] << 16)
            return np.where(value & 0x800000, value - (1 << 24), value)
        return None

    def _decode(self, raw: bytes, count: int, bits: AudioBits) -> np.ndarray:
        comp_size = self.bits_per_sample // 8
        data = np.frombuffer(raw, dtype=np.uint8).reshape(count, self.channels, comp_size)

        if self.format == WAV_FORMAT_IEEE_FLOAT:
            floats = np.ascontiguousarray(data[..., :4]).view("<f4").reshape(count, self.channels)
            if bits is AudioBits.BITS_32:
                return floats.astype(np.float32)
            scaled = np.trunc(floats.astype(np.float32) * np.float32(32768.0))
            return np.clip(scaled, S16_MIN, S16_MAX).astype(np.int16)

        ints = self._decode_ints(data, count)
        if ints is None:
            # Integer widths other than 16, 24 and 32 bits decode to silence.
            return np.zeros((count, self.channels), dtype=bits.dtype)
        if bits is AudioBits.BITS_16 and self.valid_bits_per_sample == 16:
            return ints.astype(np.int16)

        maximum = (1 << (self.valid_bits_per_sample - 1)) - 1
        if bits is AudioBits.BITS_32:
            return (ints.astype(np.float64) / maximum).astype(np.float32)
        factor = (ints.astype(np.float64) * (1.0 / maximum)).astype(np.float32)
        scaled = np.trunc(factor * np.float32(32768.0))
        return np.clip(scaled, S16_MIN, S16_MAX).astype(np.int16)

    def __enter__(self) -> "WavStream":
        return self

    def __exit__(self, *args) -> None:
        self.close()


def load_wav(path, format: AudioFormat) -> np.ndarray:
    """Read a whole WAVE file into frames of the given format."""
    with WavStream.open(path, format.sample_rate) as wav:
        frames = wav.read_frames(format, wav.output_frame_count)
        expected = wav.output_frame_count
    if len(frames) != expected:
        raise WavFormatError(f"Could not read all frames from wave file @ {path}")
    return frames