"""Loading and saving RGBA PNG images."""

from __future__ import annotations

import enum
import os
from typing import Tuple, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

PathLike = Union[str, "os.PathLike[str]"]


class Origin(enum.Enum):
    """Which corner the first row of pixel data describes."""

    LOWER_LEFT = "lower_left"
    UPPER_LEFT = "upper_left"


def _to_rgba(image: Image.Image) -> np.ndarray:
    if image.mode in ("I", "I;16", "I;16B", "I;16L"):
        gray = (np.asarray(image, dtype=np.uint32) >> 8).astype(np.uint8)
        rgba = np.empty(gray.shape + (4,), dtype=np.uint8)
        rgba[..., :3] = gray[..., None]
        rgba[..., 3] = 0xFF
        return rgba
    return np.asarray(image.convert("RGBA"), dtype=np.uint8).copy()


def load_png(path: PathLike, origin: Origin) -> Tuple[Tuple[int, int], np.ndarray]:
    """Load a PNG as 8-bit RGBA.

    Returns ``((width, height), pixels)`` where ``pixels`` has shape
    ``(height, width, 4)`` and row 0 is the top row for ``Origin.UPPER_LEFT``
    or the bottom row for ``Origin.LOWER_LEFT``.
    """
    try:
        handle = open(path, "rb")
    except OSError as exc:
        raise OSError(f"Failed to open PNG image file '{os.fspath(path)}'.") from exc
    with handle:
        try:
            with Image.open(handle) as image:
                if image.format != "PNG":
                    raise ValueError(f"Failed to read PNG image from '{os.fspath(path)}'.")
                image.load()
                pixels = _to_rgba(image)
        except (UnidentifiedImageError, OSError, SyntaxError) as exc:
            raise ValueError(f"Failed to read PNG image from '{os.fspath(path)}'.") from exc
    if origin is Origin.LOWER_LEFT:
        pixels = pixels[::-1].copy()
    height, width = pixels.shape[:2]
    return (width, height), pixels


def save_png(path: PathLike, size: Tuple[int, int], pixels, origin: Origin) -> None:
    """Save RGBA pixels as a PNG.

    ``pixels`` holds ``width * height`` RGBA values, either flat or shaped
    ``(height, width, 4)``; row order follows ``origin``.
    """
    width, height = size
    data = np.asarray(pixels, dtype=np.uint8)
    if data.size != width * height * 4:
        raise ValueError(
            f"expected {width * height} RGBA pixels for a {width}x{height} image, "
            f"got {data.size // 4 if data.size % 4 == 0 else data.size / 4}"
        )
    rows = data.reshape(height, width, 4)
    if origin is Origin.LOWER_LEFT:
        rows = rows[::-1]
    Image.fromarray(np.ascontiguousarray(rows)).save(path, format="PNG")