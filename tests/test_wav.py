import struct
import wave

import numpy as np
import pytest

from chickenrun.wav import AUDIO_RATE, load_wav


def write_pcm16(path, frames, channels=1, rate=AUDIO_RATE):
    with wave.open(str(path), "wb") as w:
        w.setnchannels(channels)
        w.setsampwidth(2)
        w.setframerate(rate)
        w.writeframes(struct.pack(f"<{len(frames)}h", *frames))


def write_float32(path, samples, rate=AUDIO_RATE):
    data = struct.pack(f"<{len(samples)}f", *samples)
    fmt = struct.pack("<HHIIHH", 3, 1, rate, rate * 4, 4, 32)
    body = b"WAVE" + b"fmt " + struct.pack("<I", len(fmt)) + fmt
    body += b"data" + struct.pack("<I", len(data)) + data
    path.write_bytes(b"RIFF" + struct.pack("<I", len(body)) + body)


def test_pcm16_mono_values(tmp_path):
    path = tmp_path / "a.wav"
    write_pcm16(path, [0, 16384, -32768, 8192])
    data = load_wav(path)
    assert data.dtype == np.float32
    np.testing.assert_allclose(data, [0.0, 0.5, -1.0, 0.25])


def test_float32_mono_round_trip(tmp_path):
    path = tmp_path / "f.wav"
    samples = [0.125, -0.75, 0.5, 1.0]
    write_float32(path, samples)
    np.testing.assert_allclose(load_wav(path), samples)


def test_stereo_is_averaged(tmp_path):
    path = tmp_path / "s.wav"
    write_pcm16(path, [16384, 0, -16384, -16384], channels=2)
    np.testing.assert_allclose(load_wav(path), [0.25, -0.5])


def test_resampling_doubles_length_and_keeps_constant(tmp_path):
    path = tmp_path / "r.wav"
    write_pcm16(path, [8192] * 100, rate=AUDIO_RATE // 2)
    data = load_wav(path)
    assert len(data) == 200
    np.testing.assert_allclose(data, 0.25)


def test_not_a_wav_raises(tmp_path):
    path = tmp_path / "bad.wav"
    path.write_bytes(b"this is not audio at all")
    with pytest.raises(ValueError, match="Failed to load WAV file"):
        load_wav(path)


def test_missing_data_chunk_raises(tmp_path):
    path = tmp_path / "nodata.wav"
    fmt = struct.pack("<HHIIHH", 1, 1, AUDIO_RATE, AUDIO_RATE * 2, 2, 16)
    body = b"WAVE" + b"fmt " + struct.pack("<I", len(fmt)) + fmt
    path.write_bytes(b"RIFF" + struct.pack("<I", len(body)) + body)
    with pytest.raises(ValueError, match="data"):
        load_wav(path)


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_wav(tmp_path / "absent.wav")