"""Software audio mixing of mono samples into a stereo 48kHz stream.

Samples play either in "2D" mode, with an explicit pan, or in "3D" mode,
where panning and attenuation follow the listener's position.
"""

from __future__ import annotations

import math
import os
import threading
from dataclasses import dataclass, field
from typing import Optional, Union

import numpy as np

from .vecmath import normalize
from .wav import load_wav

PathLike = Union[str, "os.PathLike[str]"]

AUDIO_RATE = 48000
MIX_SAMPLES = 1024
RAMP_STEP = MIX_SAMPLES / AUDIO_RATE
DEFAULT_RAMP = 1.0 / 60.0

_PI = 3.1415926


def _copy_value(value):
    if isinstance(value, (int, float, np.integer, np.floating)):
        return float(value)
    return np.array(value, dtype=float)


class Ramp:
    """A value that moves smoothly toward ``target`` over ``ramp`` seconds."""

    def __init__(self, value) -> None:
        self.value = _copy_value(value)
        self.target = _copy_value(value)
        self.ramp = 0.0

    def set(self, value, ramp: float) -> None:
        """Aim at ``value`` over ``ramp`` seconds; jump there if ``ramp <= 0``."""
        if ramp <= 0.0:
            self.value = _copy_value(value)
            self.target = _copy_value(value)
            self.ramp = 0.0
        else:
            self.target = _copy_value(value)
            self.ramp = float(ramp)

    def __repr__(self) -> str:
        return f"Ramp(value={self.value!r}, target={self.target!r}, ramp={self.ramp!r})"


@dataclass
class Sample:
    """Mono 48kHz floating-point audio."""

    data: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.float32))

    def __post_init__(self) -> None:
        self.data = np.asarray(self.data, dtype=np.float32).reshape(-1)

    @classmethod
    def from_file(cls, path: PathLike) -> "Sample":
        """Load a sample from a ``.wav`` file."""
        filename = os.fspath(path)
        if filename.endswith(".wav"):
            return cls(load_wav(path))
        raise ValueError(f"Sample '{filename}' doesn't end in \".wav\" -- unsure how to load.")


class PlayingSample:
    """Book-keeping for a sample that is currently playing.

    Passing ``position`` plays in 3D mode (``pan`` is then NaN); otherwise the
    sample plays in 2D mode with the given ``pan`` (position is NaN).
    """

    def __init__(
        self,
        sample: Sample,
        volume: float = 1.0,
        pan: float = 0.0,
        *,
        position=None,
        half_volume_radius: float = math.inf,
        loop: bool = False,
        lock: Optional[threading.RLock] = None,
    ) -> None:
        self.data = sample.data
        self.i = 0
        self.loop = loop
        self.stopping = False
        self.stopped = False
        self.volume = Ramp(volume)
        self._lock = threading.RLock() if lock is None else lock
        if position is None:
            self.pan = Ramp(pan)
            self.position = Ramp(np.full(3, math.nan))
            self.half_volume_radius = Ramp(math.nan)
        else:
            self.pan = Ramp(math.nan)
            self.position = Ramp(position)
            self.half_volume_radius = Ramp(half_volume_radius)

    @property
    def is_3d(self) -> bool:
        """True if panning follows the listener rather than ``pan``."""
        return math.isnan(self.pan.value)

    def set_volume(self, new_volume: float, ramp: float = DEFAULT_RAMP) -> None:
        """Change volume over ``ramp`` seconds; ignored once stopping."""
        with self._lock:
            if not self.stopping:
                self.volume.set(new_volume, ramp)

    def set_pan(self, new_pan: float, ramp: float = DEFAULT_RAMP) -> None:
        """Change the pan of a 2D sample; no effect on 3D samples."""
        if self.is_3d:
            return
        with self._lock:
            self.pan.set(new_pan, ramp)

    def set_position(self, new_position, ramp: float = DEFAULT_RAMP) -> None:
        """Move a 3D sample; no effect on 2D samples."""
        if not self.is_3d:
            return
        with self._lock:
            self.position.set(new_position, ramp)

    def set_half_volume_radius(self, new_radius: float, ramp: float = DEFAULT_RAMP) -> None:
        """Change the half-volume radius of a 3D sample; no effect on 2D samples."""
        if not self.is_3d:
            return
        with self._lock:
            self.half_volume_radius.set(new_radius, ramp)

    def stop(self, ramp: float = DEFAULT_RAMP) -> None:
        """Fade out over ``ramp`` seconds, after which the sample is removed."""
        with self._lock:
            if not (self.stopping or self.stopped):
                self.stopping = True
                self.volume.target = 0.0
                self.volume.ramp = ramp
            else:
                self.volume.ramp = min(self.volume.ramp, ramp)


class Listener:
    """Position and right-hand direction used to pan 3D samples."""

    def __init__(self, lock: Optional[threading.RLock] = None) -> None:
        self._lock = threading.RLock() if lock is None else lock
        self.position = Ramp(np.zeros(3))
        self.right = Ramp(np.array([1.0, 0.0, 0.0]))

    def set_position_right(self, new_position, new_right, ramp: float = DEFAULT_RAMP) -> None:
        """Move the listener; ``new_right`` is normalized (zero means +x)."""
        right = np.asarray(new_right, dtype=float)
        with self._lock:
            self.position.set(new_position, ramp)
            if not right.any():
                self.right.set(np.array([1.0, 0.0, 0.0]), ramp)
            else:
                self.right.set(normalize(right), ramp)


def compute_pan_weights(pan: float) -> tuple[float, float]:
    """Return equal-power ``(left, right)`` weights for a pan in [-1, 1]."""
    pan = max(-1.0, min(1.0, pan))
    ang = 0.5 * _PI * (0.5 * (pan + 1.0))
    return math.cos(ang), math.sin(ang)


def compute_pan_from_listener_and_position(
    listener_position, listener_right, source_position, source_half_radius: float
) -> tuple[float, float]:
    """Return ``(left, right)`` weights for a source heard by the listener."""
    to = np.asarray(source_position, dtype=float) - np.asarray(listener_position, dtype=float)
    distance = float(np.linalg.norm(to))
    if distance == 0.0:
        both = math.sqrt(2.0)
        return both, both
    amt = float(np.dot(listener_right, to)) / distance
    ang = 0.5 * _PI * (0.5 * (amt + 1.0))
    att = 1.0 / (1.0 + (distance / source_half_radius))
    return math.cos(ang) * att, math.sin(ang) * att


def step_value_ramp(ramp: Ramp) -> None:
    """Advance a scalar ramp by one mix period."""
    if ramp.ramp < RAMP_STEP:
        ramp.value = ramp.target
        ramp.ramp = 0.0
    else:
        ramp.value += (RAMP_STEP / ramp.ramp) * (ramp.target - ramp.value)
        ramp.ramp -= RAMP_STEP


def step_position_ramp(ramp: Ramp) -> None:
    """Advance a position ramp by one mix period, moving in a straight line."""
    if ramp.ramp < RAMP_STEP:
        ramp.value = np.array(ramp.target, dtype=float)
        ramp.ramp = 0.0
    else:
        t = RAMP_STEP / ramp.ramp
        ramp.value = ramp.value * (1.0 - t) + ramp.target * t
        ramp.ramp -= RAMP_STEP


def step_direction_ramp(ramp: Ramp) -> None:
    """Advance a unit-direction ramp by one mix period, rotating toward the target."""
    if ramp.ramp < RAMP_STEP:
        ramp.value = np.array(ramp.target, dtype=float)
        ramp.ramp = 0.0
        return
    target = np.asarray(ramp.target, dtype=float)
    value = np.asarray(ramp.value, dtype=float)
    norm = np.cross(value, target)
    if not norm.any():
        if target[0] <= target[1] and target[0] <= target[2]:
            norm = np.array([1.0, 0.0, 0.0])
        elif target[1] <= target[2]:
            norm = np.array([0.0, 1.0, 0.0])
        else:
            norm = np.array([0.0, 0.0, 1.0])
        norm = norm - target * float(np.dot(target, norm))
    norm = normalize(norm)
    perp = np.cross(norm, target)
    angle = math.acos(max(-1.0, min(1.0, float(np.dot(value, target)))))
    angle *= (ramp.ramp - RAMP_STEP) / ramp.ramp
    ramp.value = target * math.cos(angle) + perp * math.sin(angle)
    ramp.ramp -= RAMP_STEP


class Mixer:
    """Holds the playing samples, global volume and listener, and mixes them."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self.volume = Ramp(1.0)
        self.listener = Listener(self._lock)
        self.playing_samples: list[PlayingSample] = []

    def _start(self, playing: PlayingSample) -> PlayingSample:
        with self._lock:
            self.playing_samples.append(playing)
        return playing

    def play(self, sample: Sample, volume: float = 1.0, pan: float = 0.0) -> PlayingSample:
        """Play ``sample`` once with a fixed pan (-1 hard left, 1 hard right)."""
        return self._start(PlayingSample(sample, volume, pan, lock=self._lock))

    def play_3d(
        self, sample: Sample, volume: float, position, half_volume_radius: float = math.inf
    ) -> PlayingSample:
        """Play ``sample`` once, panned according to the listener."""
        return self._start(
            PlayingSample(
                sample, volume, position=position,
                half_volume_radius=half_volume_radius, lock=self._lock,
            )
        )

    def loop(self, sample: Sample, volume: float = 1.0, pan: float = 0.0) -> PlayingSample:
        """Play ``sample`` repeatedly until stopped."""
        return self._start(PlayingSample(sample, volume, pan, loop=True, lock=self._lock))

    def loop_3d(
        self, sample: Sample, volume: float, position, half_volume_radius: float = math.inf
    ) -> PlayingSample:
        """Loop ``sample`` in 3D mode until stopped."""
        return self._start(
            PlayingSample(
                sample, volume, position=position,
                half_volume_radius=half_volume_radius, loop=True, lock=self._lock,
            )
        )

    def stop_all_samples(self) -> None:
        """Fade out every playing sample."""
        with self._lock:
            for playing in self.playing_samples:
                playing.stop()

    def set_volume(self, new_volume: float, ramp: float = DEFAULT_RAMP) -> None:
        """Change the global volume over ``ramp`` seconds."""
        with self._lock:
            self.volume.set(new_volume, ramp)

    @staticmethod
    def _pan(playing: PlayingSample, listener_position, listener_right) -> tuple[float, float]:
        if playing.is_3d:
            return compute_pan_from_listener_and_position(
                listener_position, listener_right,
                playing.position.value, playing.half_volume_radius.value,
            )
        return compute_pan_weights(playing.pan.value)

    def mix(self) -> np.ndarray:
        """Mix the next ``MIX_SAMPLES`` frames; returns a ``(MIX_SAMPLES, 2)`` float32 array."""
        buffer = np.zeros((MIX_SAMPLES, 2), dtype=np.float32)
        steps = np.arange(MIX_SAMPLES, dtype=np.float64)
        with self._lock:
            start_volume = self.volume.value
            start_position = np.array(self.listener.position.value)
            start_right = np.array(self.listener.right.value)

            step_value_ramp(self.volume)
            step_position_ramp(self.listener.position)
            step_direction_ramp(self.listener.right)

            end_volume = self.volume.value
            end_position = np.array(self.listener.position.value)
            end_right = np.array(self.listener.right.value)

            still_playing = []
            for playing in self.playing_samples:
                start_l, start_r = self._pan(playing, start_position, start_right)
                if playing.is_3d:
                    step_position_ramp(playing.position)
                    step_value_ramp(playing.half_volume_radius)
                else:
                    step_value_ramp(playing.pan)
                gain = start_volume * playing.volume.value
                start_l, start_r = start_l * gain, start_r * gain

                step_value_ramp(playing.volume)

                end_l, end_r = self._pan(playing, end_position, end_right)
                gain = end_volume * playing.volume.value
                end_l, end_r = end_l * gain, end_r * gain

                size = len(playing.data)
                if size and playing.i < size:
                    if playing.loop:
                        count = MIX_SAMPLES
                        indices = (playing.i + steps.astype(np.int64)) % size
                        next_i = (playing.i + MIX_SAMPLES) % size
                    else:
                        count = min(MIX_SAMPLES, size - playing.i)
                        indices = playing.i + np.arange(count)
                        next_i = playing.i + count
                    values = playing.data[indices].astype(np.float64)
                    k = steps[:count]
                    buffer[:count, 0] += (start_l + k * ((end_l - start_l) / MIX_SAMPLES)) * values
                    buffer[:count, 1] += (start_r + k * ((end_r - start_r) / MIX_SAMPLES)) * values
                    playing.i = next_i

                if playing.i >= size or (playing.stopping and playing.volume.value == 0.0):
                    playing.stopped = True
                else:
                    still_playing.append(playing)
            self.playing_samples[:] = still_playing
        return buffer