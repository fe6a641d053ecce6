"""Tests for PNG output."""

import numpy as np
import pytest

from pathtracer.renderer.image_io import load_png, save_png


def test_save_png_preserves_pixels(tmp_path):
    pixels = np.zeros((4, 6, 3), dtype=np.uint8)
    pixels[0, :] = (255, 0, 0)      # top row red
    pixels[:, 5] = (0, 0, 255)      # right column blue
    pixels[3, 0] = (12, 34, 56)

    path = save_png(pixels, tmp_path / "nested" / "out.png")

    assert path.exists()
    loaded = load_png(path)
    assert loaded.shape == (4, 6, 3)
    np.testing.assert_array_equal(loaded, pixels)


@pytest.mark.parametrize("pixels", [
    np.zeros((4, 6), dtype=np.uint8),
    np.zeros((4, 6, 4), dtype=np.uint8),
    np.zeros((4, 6, 3), dtype=np.float64),
])
def test_save_png_rejects_bad_buffers(tmp_path, pixels):
    with pytest.raises(ValueError):
        save_png(pixels, tmp_path / "bad.png")


def test_load_missing_png(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_png(tmp_path / "missing.png")
