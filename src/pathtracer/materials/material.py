# materials/material.py
from typing import Optional, Tuple

from pathtracer.core.ray import Ray
from pathtracer.core.vector import Vector3
from pathtracer.geometry.hittable import HitRecord


class Material:
    """
    Abstract material class. Subclasses must implement scatter().

    Materials are immutable once built and are shared by reference between
    any number of objects (and render workers).
    """

    def scatter(self, ray_in: Ray, rec: HitRecord, rng) -> Optional[Tuple[Ray, Vector3]]:
        """
        Computes the scattered ray and attenuation.
        Returns a tuple (scattered_ray, attenuation) or None if the ray is absorbed.
        """
        raise NotImplementedError("scatter() must be implemented by subclasses.")
