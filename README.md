# ogbengine

The core of a small 2D game engine in pure Python with numpy. It has:

- **Audio formats** (`ogbengine.audio_format`): `AudioBits`, `AudioFormat`,
  and conversion of PCM frames between bit widths (16-bit integers and 32-bit
  floats), channel counts and sample rates, plus saturating mixing.
- **WAV reading** (`ogbengine.wav`): parsing RIFF/WAVE headers and reading
  16-, 24- and 32-bit integer or 32-bit float PCM, converted on the fly to an
  `AudioFormat`.
- **Transforms** (`ogbengine.transform`): 4×4 matrices for column vectors.
- **Quads and drawing** (`ogbengine.quad`, `ogbengine.drawing`): a
  `DrawFrame` that projects quads into normalised device space, culls those
  outside it, applies z layers and scissors, and snaps corners to the pixel
  grid.
- **Colour** (`ogbengine.color`): `hex_to_rgba`.
- **Map scene** (`ogbengine.game`): a camera and crosshair moving over points
  of interest, with a prompt to travel to one.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Audio frames

Frames are numpy arrays of shape `(frame_count, channels)`, `int16` for
`AudioBits.BITS_16` and `float32` for `AudioBits.BITS_32`.

```python
from ogbengine.audio_format import AudioBits, AudioFormat, convert_frames, mix_frames
from ogbengine.wav import load_wav

out_format = AudioFormat(AudioBits.BITS_32, channels=2, sample_rate=48000)

# Whole file, converted to out_format. Raises WavFormatError for files
# that are not supported WAVE data.
frames = load_wav("jump.wav", out_format)

mono = AudioFormat(AudioBits.BITS_16, channels=1, sample_rate=44100)
```

`convert_frames(src, src_format, dst_format, output_frame_count)` returns
`output_frame_count` frames in `dst_format`. `resample_frames` changes only the
sample rate, by linear interpolation. `mix_frames(dst, src, format)` adds `src`
into `dst` in place; 16-bit sums are clamped.

To stream a file in pieces, open a `WavStream`:

```python
from ogbengine.wav import WavStream

with WavStream.open("music.wav", out_format.sample_rate) as wav:
    total = wav.output_frame_count
    wav.set_frame_pos(out_format.sample_rate, 0)
    chunk = wav.read_frames(out_format, 512)
```

`is_wav_header` and `is_ogg_header` check the first bytes of a file.

## Drawing

```python
from ogbengine.drawing import DrawFrame
from ogbengine.color import hex_to_rgba

frame = DrawFrame(window_width=1280, window_height=720)
frame.push_z_layer(5)
quad = frame.draw_rect((0, 0), (100, 50), hex_to_rgba(0xF6D9A7FF))
frame.draw_line((0, 0), (200, 200), 4, (1.0, 0.0, 0.0, 1.0))
frame.pop_z_layer()
print(len(frame.quads))
```

Each `draw_*` method returns the submitted `DrawQuad`, or `None` if the quad
was culled. `reset()` clears the quads and stacks and restores the default
orthographic projection and identity `camera_xform`. Popping an empty stack
raises `IndexError`; `bind_image` raises `IndexError` for a slot outside
0–15.

## Map scene

```python
import random
from ogbengine.drawing import DrawFrame
from ogbengine.game import MapScene, InputState, KEY_SPACEBAR

scene = MapScene(rng=random.Random(1))
frame = DrawFrame(1280, 720)

scene.update(InputState(keys_down=frozenset({"D"})), delta=1 / 60)
quads = scene.draw(frame)
for label in scene.labels:
    print(label.text, label.position, label.scale)
```

`W`, `A`, `S` and `D` move the camera and crosshair. Over a point of interest
the scene lists its name and description in `labels`; `KEY_SPACEBAR` opens a
prompt, `A`/`D` choose yes or no, and confirming moves the scene to
`Level.STRUCTURE` via `Level.LEVEL_SWITCH`. `KEY_ESCAPE` sets
`should_close`. `check_collision` and `generate_points_of_interest` are
available on their own.

## What this package does not do

- It opens no window and renders nothing: `DrawFrame` only collects quads,
  and the map scene reports text as `Label` values rather than drawing glyphs.
- It has no game loop and no command to run; the caller supplies input and
  frame timing.
- It plays no sound: there is no audio device output, player or mixer, only
  frame conversion and WAV reading.
- It does not decode Ogg Vorbis; `is_ogg_header` only recognises the data.