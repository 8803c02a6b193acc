import numpy as np
import pytest

from ogbengine.audio_format import (
    S16_MAX,
    S16_MIN,
    AudioBits,
    AudioFormat,
    convert_component,
    convert_frames,
    empty_frames,
    mix_frames,
    resample_frames,
)

F32_STEREO = AudioFormat(AudioBits.BITS_32, 2, 48000)
F32_MONO = AudioFormat(AudioBits.BITS_32, 1, 48000)
S16_STEREO = AudioFormat(AudioBits.BITS_16, 2, 48000)


def test_bit_sizes():
    assert AudioBits.BITS_16.byte_size == 2
    assert AudioBits.BITS_32.byte_size == 4
    assert F32_STEREO.frame_size == 8


def test_invalid_format():
    with pytest.raises(ValueError):
        AudioFormat(AudioBits.BITS_16, 0, 44100)
    with pytest.raises(ValueError):
        AudioFormat(AudioBits.BITS_16, 2, 0)


def test_empty_frames_shape_and_silence():
    frames = empty_frames(S16_STEREO, 10)
    assert frames.shape == (10, 2)
    assert frames.dtype == np.int16
    assert not frames.any()


def test_convert_component_s16_min_is_minus_one():
    assert convert_component(S16_MIN, AudioBits.BITS_32, AudioBits.BITS_16) == -1.0


@pytest.mark.parametrize("value", [S16_MIN, -1000, -1, 0, 1, 1234, S16_MAX])
def test_convert_component_round_trip(value):
    as_float = convert_component(value, AudioBits.BITS_32, AudioBits.BITS_16)
    assert -1.0 <= as_float < 1.0
    assert convert_component(as_float, AudioBits.BITS_16, AudioBits.BITS_32) == value


def test_convert_component_same_bits_identity():
    assert convert_component(-42, AudioBits.BITS_16, AudioBits.BITS_16) == -42
    assert convert_component(0.5, AudioBits.BITS_32, AudioBits.BITS_32) == 0.5


def test_convert_frames_identical_format_copies():
    src = np.random.default_rng(1).uniform(-1, 1, (16, 2)).astype(np.float32)
    out = convert_frames(src, F32_STEREO, F32_STEREO, 16)
    assert np.array_equal(out, src)
    assert out is not src


def test_convert_frames_mono_to_stereo_duplicates():
    src = np.linspace(-0.5, 0.5, 8, dtype=np.float32)[:, None]
    out = convert_frames(src, F32_MONO, F32_STEREO, 8)
    assert out.shape == (8, 2)
    assert np.array_equal(out[:, 0], src[:, 0])
    assert np.array_equal(out[:, 1], src[:, 0])


def test_convert_frames_stereo_to_mono_same_channels_gives_same_value():
    column = np.linspace(-0.5, 0.5, 8, dtype=np.float32)
    src = np.stack([column, column], axis=1)
    out = convert_frames(src, F32_STEREO, F32_MONO, 8)
    assert out.shape == (8, 1)
    assert np.allclose(out[:, 0], column)


def test_convert_frames_bit_width_round_trip():
    src = np.array([[S16_MIN, S16_MAX], [0, -7], [100, 200]], dtype=np.int16)
    as_float = convert_frames(src, S16_STEREO, F32_STEREO, 3)
    assert as_float.dtype == np.float32
    back = convert_frames(as_float, F32_STEREO, S16_STEREO, 3)
    assert np.array_equal(back, src)


def test_convert_frames_resample_length_and_constant():
    src_format = AudioFormat(AudioBits.BITS_32, 2, 44100)
    src = np.full((200, 2), 0.25, dtype=np.float32)
    out = convert_frames(src, src_format, F32_STEREO, 150)
    assert out.shape == (150, 2)
    assert np.allclose(out, 0.25)


def test_convert_frames_not_enough_source():
    with pytest.raises(ValueError):
        convert_frames(empty_frames(F32_STEREO, 3), F32_STEREO, F32_STEREO, 10)


def test_resample_same_rate_identity():
    src = np.arange(20, dtype=np.int16).reshape(10, 2)
    out = resample_frames(src, S16_STEREO, S16_STEREO)
    assert np.array_equal(out, src)


def test_resample_downsample_keeps_ramp_monotonic():
    src_format = AudioFormat(AudioBits.BITS_32, 1, 96000)
    src = np.linspace(0, 1, 100, dtype=np.float32)[:, None]
    out = resample_frames(src, src_format, F32_MONO)
    assert len(out) == 50
    assert np.all(np.diff(out[:, 0]) > 0)
    assert out[0, 0] == src[0, 0]


def test_resample_rejects_mismatched_formats():
    with pytest.raises(ValueError):
        resample_frames(empty_frames(F32_STEREO, 4), F32_STEREO, F32_MONO)
    with pytest.raises(ValueError):
        resample_frames(empty_frames(F32_STEREO, 4), F32_STEREO, S16_STEREO)


def test_mix_frames_s16_saturates():
    dst = np.full((4, 2), 30000, dtype=np.int16)
    src = np.full((4, 2), 30000, dtype=np.int16)
    mixed = mix_frames(dst, src, S16_STEREO)
    assert mixed is dst
    assert np.all(dst == S16_MAX)
    neg = np.full((4, 2), -30000, dtype=np.int16)
    mix_frames(neg, neg.copy(), S16_STEREO)
    assert np.all(neg == S16_MIN)


def test_mix_frames_float_adds():
    dst = np.random.default_rng(2).uniform(-1, 1, (5, 2)).astype(np.float32)
    original = dst.copy()
    src = np.random.default_rng(3).uniform(-1, 1, (5, 2)).astype(np.float32)
    mix_frames(dst, src, F32_STEREO)
    assert np.allclose(dst - src, original, atol=1e-6)


def test_mix_frames_shape_mismatch():
    with pytest.raises(ValueError):
        mix_frames(empty_frames(F32_STEREO, 4), empty_frames(F32_STEREO, 3), F32_STEREO)