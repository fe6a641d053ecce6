# renderer/tone_mapping.py
import math
from typing import Tuple

from pathtracer.core.vector import Vector3


def gamma_to_byte(value: float) -> int:
    """
    Gamma-correct one linear channel (gamma 2, i.e. a square root), clamp it
    to [0, 1] and quantize it to 0..255. Negative or NaN input maps to 0.
    """
    if not value > 0.0:
        return 0
    return min(int(256.0 * math.sqrt(value)), 255)


def color_to_rgb8(color: Vector3, samples: int = 1) -> Tuple[int, int, int]:
    """
    Convert the sum of ``samples`` linear radiance estimates to a display
    ready 8-bit RGB triple.
    """
    scale = 1.0 / samples
    return (gamma_to_byte(color.x * scale),
            gamma_to_byte(color.y * scale),
            gamma_to_byte(color.z * scale))
