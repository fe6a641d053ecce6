# materials/presets.py
from typing import Dict, Tuple

from pathtracer.core.vector import Vector3
from pathtracer.materials.material import Material
from pathtracer.materials.metal import Metal
from pathtracer.materials.lambertian import Lambertian
from pathtracer.materials.dielectric import Dielectric

# name -> (albedo, fuzz)
METALS: Dict[str, Tuple[Tuple[float, float, float], float]] = {
    "gold": ((1.0, 0.78, 0.34), 0.1),
    "silver": ((0.95, 0.93, 0.88), 0.05),
    "copper": ((0.95, 0.64, 0.54), 0.1),
    "aluminum": ((0.91, 0.92, 0.92), 0.08),
    "chrome": ((0.9, 0.9, 0.9), 0.0),
    "brushed_metal": ((0.8, 0.8, 0.8), 0.3),
}

# name -> index of refraction
DIELECTRICS: Dict[str, float] = {
    "glass": 1.5,
    "water": 1.33,
    "diamond": 2.42,
    "ice": 1.31,
    "sapphire": 1.77,
}

# name -> matte albedo
COLORS: Dict[str, Vector3] = {
    "red": Vector3(0.9, 0.2, 0.2),
    "orange": Vector3(0.9, 0.6, 0.1),
    "yellow": Vector3(0.9, 0.9, 0.1),
    "blue": Vector3(0.2, 0.3, 0.9),
    "green": Vector3(0.2, 0.8, 0.2),
    "purple": Vector3(0.6, 0.2, 0.8),
    "white": Vector3(0.9, 0.9, 0.9),
    "gray": Vector3(0.5, 0.5, 0.5),
    "black": Vector3(0.1, 0.1, 0.1),
}

PRESETS = sorted([*METALS, *DIELECTRICS, *COLORS])


def matte(name: str) -> Lambertian:
    """Diffuse material in one of the named COLORS."""
    return Lambertian(COLORS[name])


def get_preset(name: str) -> Material:
    """
    Build a fresh material from its preset name.

    Raises:
        KeyError: If no preset with that name exists
    """
    if name in METALS:
        albedo, fuzz = METALS[name]
        return Metal(Vector3(*albedo), fuzz=fuzz)
    if name in DIELECTRICS:
        return Dielectric(DIELECTRICS[name])
    if name in COLORS:
        return matte(name)
    raise KeyError(f"Unknown material preset {name!r}; available: {', '.join(PRESETS)}")
