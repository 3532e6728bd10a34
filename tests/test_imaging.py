import numpy as np
import pytest
from PIL import Image

from uw_color_correct.imaging import (
    ImageLoadError,
    export_filename,
    load_image,
    rgba8_to_pil,
    save_png,
)


def test_load_missing_file(tmp_path):
    with pytest.raises(ImageLoadError):
        load_image(tmp_path / "nope.jpg")


def test_load_garbage_file(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"definitely not an image")
    with pytest.raises(ImageLoadError) as exc:
        load_image(path)
    assert isinstance(exc.value, OSError)


def test_load_oversized_image(tmp_path, monkeypatch):
    path = tmp_path / "huge.png"
    Image.new("RGB", (100, 100)).save(path)
    # Pillow refuses anything over twice this limit outright.
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
    with pytest.raises(ImageLoadError):
        load_image(path)


def test_load_builds_rgba_and_preview(tmp_path):
    path = tmp_path / "reef.jpg"
    Image.new("RGB", (100, 50), (10, 80, 160)).save(path)

    loaded = load_image(path, preview_max_side=64)
    assert loaded.size == (100, 50)
    assert loaded.original_rgba8.shape == (50, 100, 4)
    assert loaded.original_rgba8.dtype == np.uint8
    assert loaded.preview_rgba8.shape == (32, 64, 4)
    assert np.all(loaded.original_rgba8[..., 3] == 255)


def test_save_png_round_trip(tmp_path):
    rng = np.random.default_rng(1)
    rgba = rng.integers(0, 256, size=(9, 7, 4), dtype=np.uint8)

    out = save_png(rgba, tmp_path / "export.jpg")
    assert out.suffix == ".png"
    assert np.array_equal(load_image(out).original_rgba8, rgba)


def test_rgba8_to_pil_rejects_rgb():
    with pytest.raises(ValueError):
        rgba8_to_pil(np.zeros((2, 2, 3), dtype=np.uint8))


def test_export_filename():
    assert export_filename() == "corrected-underwater-photo.png"
    assert export_filename("Reef Dive 03") == "corrected-reef-dive-03.png"
    assert export_filename("???") == "corrected-underwater-photo.png"
