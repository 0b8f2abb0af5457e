# chickenrun

Support code for a small arcade game, covering the parts that need neither a
window nor a GPU:

- `chickenrun.sound` – a software mixer for mono 48 kHz samples. It supports
  2D panning, 3D positional panning relative to a listener, and smooth ramps
  for volume, pan and position.
- `chickenrun.wav` – loads WAV files (8/16/24/32-bit PCM, 32/64-bit float,
  plain or extensible format) as 48 kHz mono `float32` arrays. Multi-channel
  audio is averaged to mono. Other sample rates are resampled by linear
  interpolation.
- `chickenrun.png_io` – loads and saves 8-bit RGBA PNG images, with the
  first row at the top (`Origin.UPPER_LEFT`) or at the bottom
  (`Origin.LOWER_LEFT`).
- `chickenrun.vecmath` – vector, quaternion `(w, x, y, z)` and matrix
  helpers: `normalize`, `quat_to_mat3`, `quat_inverse`, `quat_multiply`,
  `quat_rotate`, `angle_axis`, `infinite_perspective` and `pad_to_mat4`.
- `chickenrun.events` – plain input-event records (`KeyDown`, `KeyUp`,
  `MouseButtonDown`, `MouseMotion`, `MouseWheel`) with the `Key` and
  `MouseButton` enums.
- `chickenrun.paths` – `data_path(suffix)` joins a file name onto the
  directory of the running program, which `executable_dir()` finds and caches.

## Installing

Install the package with your usual Python package installer. The test suite
needs the `test` extra.

## Mixing audio

The mixer produces one block at a time. Each call to `Mixer.mix()` returns a
`(1024, 2)` `float32` array of stereo frames. You can send that array to
whatever audio output you use.

```python
import numpy as np
from chickenrun.sound import Mixer, Sample

mixer = Mixer()
tone = Sample(np.sin(np.arange(48000) * 2 * np.pi * 440 / 48000))

playing = mixer.play(tone, 1.0, -0.5)     # volume 1, panned to the left
block = mixer.mix()                       # next 1024 stereo frames
playing.set_volume(0.5)                   # ramps over 1/60 s by default
playing.stop()                            # fades out, then is dropped
```

For 3D samples, panning and distance attenuation follow the listener:

```python
mixer.listener.set_position_right((0.0, 0.0, 0.0), (1.0, 0.0, 0.0))
footsteps = mixer.loop_3d(tone, 1.0, (2.0, 0.0, 0.0), 5.0)
footsteps.set_position((-2.0, 0.0, 0.0), 0.5)
block = mixer.mix()
```

To load a sample from disk, use `Sample.from_file("hit.wav")`. Only `.wav`
files are accepted. Any other extension raises `ValueError`.

## Images

```python
import numpy as np
from chickenrun.png_io import Origin, load_png, save_png

pixels = np.array([[[255, 0, 0, 255], [0, 0, 255, 255]]], dtype=np.uint8)
save_png("out.png", (2, 1), pixels, Origin.UPPER_LEFT)
(width, height), loaded = load_png("out.png", Origin.LOWER_LEFT)
```

`load_png` returns the pixels with shape `(height, width, 4)`. A file that is
not a readable PNG raises `ValueError`.

## What this package does not do

The package opens no window and draws nothing. It has no game loop or
playable game mode. It also has no scene-file loader, mesh viewer or
scene viewer, and no command to run.

Sound is only mixed into arrays. Nothing is played through an audio device.
Opus files cannot be loaded.