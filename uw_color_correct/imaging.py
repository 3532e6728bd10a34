from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from .config import APP_CONFIG
from .log import get_logger


logger = get_logger(__name__)


class ImageLoadError(OSError):
    pass


@dataclass
class LoadedImage:
    path: Path
    original_rgba8: np.ndarray
    preview_rgba8: np.ndarray

    @property
    def size(self) -> tuple[int, int]:
        h, w = self.original_rgba8.shape[:2]
        return w, h


def pil_to_rgba8(pil_img: Image.Image) -> np.ndarray:
    img = pil_img.convert("RGBA")
    return np.array(img, dtype=np.uint8)


def rgba8_to_pil(rgba8: np.ndarray) -> Image.Image:
    if rgba8.ndim != 3 or rgba8.shape[2] != 4 or rgba8.dtype != np.uint8:
        raise ValueError("Expected HxWx4 uint8 RGBA array")
    return Image.fromarray(rgba8)


def load_image(path: str | Path, preview_max_side: int | None = None) -> LoadedImage:
    """Decode *path* fully and build a downscaled preview buffer alongside it.

    Raises ImageLoadError when the file is missing or not a decodable image;
    no partial buffer is ever returned.
    """
    path = Path(path)
    max_side = preview_max_side or APP_CONFIG.preview_max_side
    try:
        with Image.open(path) as pil_img:
            pil_img.load()
            original = pil_to_rgba8(pil_img)
            preview_pil = pil_img.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        logger.warning("Failed to decode %s: %s", path, e)
        raise ImageLoadError(f"Could not load image {path.name}: {e}") from e

    # Keep full-res original; cap the preview for interactive speed.
    preview_pil.thumbnail((max_side, max_side), Image.Resampling.LANCZOS)
    preview = pil_to_rgba8(preview_pil)

    h, w = original.shape[:2]
    logger.info("Loaded %s (%dx%d, preview %dx%d)", path.name, w, h, preview.shape[1], preview.shape[0])
    return LoadedImage(path=path, original_rgba8=original, preview_rgba8=preview)


def _slug(text: str) -> str:
    slug = re.sub(r"[^A-Za-z0-9]+", "-", text).strip("-").lower()
    return slug or APP_CONFIG.export_subject


def export_filename(subject: str | None = None) -> str:
    return f"corrected-{_slug(subject) if subject else APP_CONFIG.export_subject}.png"


def save_png(rgba8: np.ndarray, path: str | Path) -> Path:
    path = Path(path)
    if path.suffix.lower() != ".png":
        path = path.with_suffix(".png")
    rgba8_to_pil(rgba8).save(path, format="PNG")
    logger.info("Exported %s", path)
    return path
