"""Loading WAV files as 48kHz floating-point mono audio."""

from __future__ import annotations

import logging
import os
import struct
from dataclasses import dataclass
from typing import Union

import numpy as np

log = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]

AUDIO_RATE = 48000

_FORMAT_PCM = 1
_FORMAT_FLOAT = 3
_FORMAT_EXTENSIBLE = 0xFFFE

_CHUNK_HEADER = struct.Struct("<4sI")
_FMT_BASE = struct.Struct("<HHIIHH")


@dataclass(frozen=True)
class _Format:
    tag: int
    channels: int
    rate: int
    block_align: int
    bits: int

    @property
    def width(self) -> int:
        return (self.bits + 7) // 8


def _read_chunks(raw: bytes) -> tuple[bytes, bytes]:
    if len(raw) < 12 or raw[0:4] != b"RIFF" or raw[8:12] != b"WAVE":
        raise ValueError("not a RIFF/WAVE file")
    fmt = data = None
    offset = 12
    while offset + _CHUNK_HEADER.size <= len(raw):
        chunk_id, size = _CHUNK_HEADER.unpack_from(raw, offset)
        body = raw[offset + _CHUNK_HEADER.size: offset + _CHUNK_HEADER.size + size]
        if chunk_id == b"fmt " and fmt is None:
            fmt = body
        elif chunk_id == b"data" and data is None:
            data = body
        offset += _CHUNK_HEADER.size + size + (size & 1)
    if fmt is None:
        raise ValueError("missing 'fmt ' chunk")
    if data is None:
        raise ValueError("missing 'data' chunk")
    return fmt, data


def _parse_format(fmt: bytes) -> _Format:
    if len(fmt) < _FMT_BASE.size:
        raise ValueError("'fmt ' chunk is too short")
    tag, channels, rate, _byte_rate, block_align, bits = _FMT_BASE.unpack_from(fmt)
    if tag == _FORMAT_EXTENSIBLE:
        if len(fmt) < 26:
            raise ValueError("extensible 'fmt ' chunk is too short")
        (tag,) = struct.unpack_from("<H", fmt, 24)
    result = _Format(tag, channels, rate, block_align, bits)
    if channels == 0 or rate == 0 or block_align == 0 or bits == 0:
        raise ValueError("invalid format description")
    if result.width * channels > block_align:
        raise ValueError("block alignment too small for sample size")
    return result


def _decode(fmt: _Format, raw: bytes) -> np.ndarray:
    frames = len(raw) // fmt.block_align
    blocks = np.frombuffer(raw, dtype=np.uint8, count=frames * fmt.block_align)
    samples = blocks.reshape(frames, fmt.block_align)[:, : fmt.width * fmt.channels]
    samples = np.ascontiguousarray(samples).reshape(-1)
    key = (fmt.tag, fmt.width)
    if key == (_FORMAT_PCM, 1):
        values = (samples.astype(np.float64) - 128.0) / 128.0
    elif key == (_FORMAT_PCM, 2):
        values = samples.view("<i2").astype(np.float64) / 32768.0
    elif key == (_FORMAT_PCM, 3):
        triples = samples.reshape(-1, 3).astype(np.int32)
        ints = triples[:, 0] | (triples[:, 1] << 8) | (triples[:, 2] << 16)
        ints = np.where(ints >= 1 << 23, ints - (1 << 24), ints)
        values = ints.astype(np.float64) / float(1 << 23)
    elif key == (_FORMAT_PCM, 4):
        values = samples.view("<i4").astype(np.float64) / float(1 << 31)
    elif key == (_FORMAT_FLOAT, 4):
        values = samples.view("<f4").astype(np.float64)
    elif key == (_FORMAT_FLOAT, 8):
        values = samples.view("<f8").astype(np.float64)
    else:
        raise ValueError(f"unsupported sample format (tag {fmt.tag}, {fmt.bits} bits)")
    return values.reshape(frames, fmt.channels)


def _resample(mono: np.ndarray, rate: int) -> np.ndarray:
    if rate == AUDIO_RATE or len(mono) == 0:
        return mono
    out_len = (len(mono) * AUDIO_RATE) // rate
    positions = np.arange(out_len) * (rate / AUDIO_RATE)
    return np.interp(positions, np.arange(len(mono)), mono)


def load_wav(path: PathLike) -> np.ndarray:
    """Load a WAV file as 48kHz mono float32 samples.

    Multi-channel audio is averaged down to mono and other sample rates are
    resampled. Raises ``ValueError`` if the file is not a readable WAV.
    """
    filename = os.fspath(path)
    with open(path, "rb") as handle:
        raw = handle.read()
    try:
        fmt_body, data_body = _read_chunks(raw)
        fmt = _parse_format(fmt_body)
        frames = _decode(fmt, data_body)
    except ValueError as exc:
        raise ValueError(f"Failed to load WAV file '{filename}'; {exc}") from None

    if not (fmt.tag == _FORMAT_FLOAT and fmt.bits == 32 and fmt.channels == 1 and fmt.rate == AUDIO_RATE):
        log.info(
            "WAV file '%s' didn't load as %d Hz, float32, mono; converting.",
            filename,
            AUDIO_RATE,
        )
    mono = frames.mean(axis=1) if frames.shape[0] else np.zeros(0)
    data = _resample(mono, fmt.rate).astype(np.float32)

    low = min(0.0, float(data.min())) if len(data) else 0.0
    high = max(0.0, float(data.max())) if len(data) else 0.0
    log.info("Range: %s, %s", low, high)
    return data