import numpy as np
import pytest
from PIL import Image

from chickenrun.png_io import Origin, load_png, save_png


def _gradient(width, height):
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    for row in range(height):
        pixels[row, :, 0] = row * 10
        pixels[row, :, 1] = np.arange(width) * 20
        pixels[row, :, 2] = 7
        pixels[row, :, 3] = 200
    return pixels


@pytest.mark.parametrize("origin", [Origin.LOWER_LEFT, Origin.UPPER_LEFT])
def test_round_trip_same_origin(tmp_path, origin):
    path = tmp_path / "img.png"
    pixels = _gradient(5, 3)
    save_png(path, (5, 3), pixels, origin)
    size, loaded = load_png(path, origin)
    assert size == (5, 3)
    assert np.array_equal(loaded, pixels)


def test_origins_flip_rows(tmp_path):
    path = tmp_path / "img.png"
    pixels = _gradient(4, 6)
    save_png(path, (4, 6), pixels, Origin.UPPER_LEFT)
    _, lower = load_png(path, Origin.LOWER_LEFT)
    assert np.array_equal(lower, pixels[::-1])


def test_lower_left_save_puts_first_row_at_bottom(tmp_path):
    path = tmp_path / "img.png"
    pixels = _gradient(2, 3)
    save_png(path, (2, 3), pixels, Origin.LOWER_LEFT)
    with Image.open(path) as image:
        stored = np.asarray(image.convert("RGBA"))
    assert np.array_equal(stored[-1], pixels[0])


def test_flat_pixel_list_accepted(tmp_path):
    path = tmp_path / "img.png"
    pixels = _gradient(3, 2)
    save_png(path, (3, 2), pixels.reshape(-1, 4).tolist(), Origin.UPPER_LEFT)
    _, loaded = load_png(path, Origin.UPPER_LEFT)
    assert np.array_equal(loaded, pixels)


def test_rgb_image_gets_opaque_alpha(tmp_path):
    path = tmp_path / "rgb.png"
    Image.new("RGB", (2, 2), (10, 20, 30)).save(path)
    size, loaded = load_png(path, Origin.UPPER_LEFT)
    assert size == (2, 2)
    assert np.all(loaded[..., 3] == 0xFF)
    assert np.all(loaded[..., :3] == [10, 20, 30])


def test_gray_image_expands_to_rgb(tmp_path):
    path = tmp_path / "gray.png"
    Image.new("L", (3, 1), 99).save(path)
    size, loaded = load_png(path, Origin.UPPER_LEFT)
    assert size == (3, 1)
    assert np.asarray(loaded).tolist() == [[[99, 99, 99, 255]] * 3]


def test_palette_image_expands(tmp_path):
    path = tmp_path / "pal.png"
    image = Image.new("P", (2, 1))
    image.putpalette([255, 0, 0, 0, 255, 0] + [0] * (256 * 3 - 6))
    image.putpixel((1, 0), 1)
    image.save(path)
    _, loaded = load_png(path, Origin.UPPER_LEFT)
    assert loaded[0, 0].tolist() == [255, 0, 0, 255]
    assert loaded[0, 1].tolist() == [0, 255, 0, 255]


def test_missing_file_raises(tmp_path):
    with pytest.raises(OSError, match="Failed to open"):
        load_png(tmp_path / "missing.png", Origin.UPPER_LEFT)


def test_not_a_png_raises(tmp_path):
    path = tmp_path / "junk.png"
    path.write_bytes(b"this is not an image")
    with pytest.raises(ValueError, match="Failed to read"):
        load_png(path, Origin.UPPER_LEFT)


def test_other_format_rejected(tmp_path):
    path = tmp_path / "img.bmp"
    Image.new("RGB", (1, 1)).save(path, format="BMP")
    with pytest.raises(ValueError):
        load_png(path, Origin.UPPER_LEFT)


def test_size_mismatch_raises(tmp_path):
    with pytest.raises(ValueError):
        save_png(tmp_path / "x.png", (4, 4), _gradient(2, 2), Origin.UPPER_LEFT)