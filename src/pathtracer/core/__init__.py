from .vector import Vector3, BLACK, WHITE
from .ray import Ray
from .utils import (
    random_in_hemisphere,
    random_in_unit_disk,
    random_in_unit_sphere,
    random_unit_vector,
    reflect,
    refract,
    schlick,
)

__all__ = [
    "Vector3",
    "BLACK",
    "WHITE",
    "Ray",
    "random_in_hemisphere",
    "random_in_unit_disk",
    "random_in_unit_sphere",
    "random_unit_vector",
    "reflect",
    "refract",
    "schlick",
]
