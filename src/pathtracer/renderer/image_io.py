# renderer/image_io.py
import logging
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)


def save_png(pixels: np.ndarray, path: Union[str, Path]) -> Path:
    """
    Encode a rendered (height, width, 3) uint8 buffer as a PNG file.

    Args:
        pixels: Row-major RGB buffer, top row first
        path: Destination file; missing parent directories are created

    Returns:
        The path written

    Raises:
        ValueError: If the buffer does not have the expected shape or type
    """
    pixels = np.asarray(pixels)
    if pixels.ndim != 3 or pixels.shape[2] != 3:
        raise ValueError(f"Expected an (height, width, 3) buffer, got shape {pixels.shape}")
    if pixels.dtype != np.uint8:
        raise ValueError(f"Expected a uint8 buffer, got {pixels.dtype}")

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(pixels).save(path, format="PNG")
    logger.info("Wrote %dx%d image to %s", pixels.shape[1], pixels.shape[0], path)
    return path


def load_png(path: Union[str, Path]) -> np.ndarray:
    """
    Read an image back as an (height, width, 3) uint8 array.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Image file not found: {path}")
    with Image.open(path) as img:
        if img.mode != 'RGB':
            img = img.convert('RGB')
        return np.array(img)
