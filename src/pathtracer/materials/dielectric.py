# materials/dielectric.py
import math
from typing import Tuple

from pathtracer.core.ray import Ray
from pathtracer.core.vector import Vector3, WHITE
from pathtracer.core.utils import reflect, refract, schlick
from pathtracer.geometry.hittable import HitRecord
from pathtracer.materials.material import Material


class Dielectric(Material):
    """
    Clear refractive material (glass, water, ...) described by its index of
    refraction. Chooses between reflection and refraction per ray using
    Schlick's approximation.
    """
    def __init__(self, ref_idx: float):
        if ref_idx <= 0:
            raise ValueError(f"Index of refraction must be positive, got {ref_idx}")
        self.ref_idx = ref_idx

    def scatter(self, ray_in: Ray, rec: HitRecord, rng) -> Tuple[Ray, Vector3]:
        attenuation = WHITE  # Glass doesn't absorb light

        # Determine if we're entering or exiting the material
        ni_over_nt = 1.0 / self.ref_idx if rec.front_face else self.ref_idx

        unit_direction = ray_in.direction.normalize()

        cos_theta = min(-unit_direction.dot(rec.normal), 1.0)
        sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))

        cannot_refract = ni_over_nt * sin_theta > 1.0
        if cannot_refract or rng.random() < schlick(cos_theta, ni_over_nt):
            direction = reflect(unit_direction, rec.normal)
        else:
            direction = refract(unit_direction, rec.normal, ni_over_nt)
            if direction is None:
                # Rounding can still leave no transmitted root; reflect instead.
                direction = reflect(unit_direction, rec.normal)

        return Ray(rec.p, direction, ray_in.time), attenuation

    def __repr__(self) -> str:
        return f"Dielectric({self.ref_idx})"
