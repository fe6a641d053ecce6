# materials/lambertian.py
from typing import Tuple

from pathtracer.core.ray import Ray
from pathtracer.core.vector import Vector3
from pathtracer.core.utils import random_in_hemisphere, random_in_unit_sphere, random_unit_vector
from pathtracer.geometry.hittable import HitRecord
from pathtracer.materials.material import Material

# How the random offset added to the normal is drawn:
#   lambertian    - a point on the unit sphere (true cosine distribution)
#   spherical     - a point inside the unit sphere (biased towards the normal)
#   hemispherical - a point inside the unit sphere, flipped to the normal's side
DIFFUSE_METHODS = ("lambertian", "spherical", "hemispherical")


class Lambertian(Material):
    """
    Diffuse material. ``method`` picks one of DIFFUSE_METHODS; the default
    is the physically correct Lambertian distribution, the others reproduce
    the older approximations.
    """

    def __init__(self, albedo: Vector3, method: str = "lambertian"):
        if method not in DIFFUSE_METHODS:
            raise ValueError(f"Unknown diffuse method {method!r}; "
                             f"choose from {', '.join(DIFFUSE_METHODS)}")
        self.albedo = albedo
        self.method = method

    def _offset(self, rec: HitRecord, rng) -> Vector3:
        if self.method == "spherical":
            return random_in_unit_sphere(rng)
        if self.method == "hemispherical":
            return random_in_hemisphere(rec.normal, rng)
        return random_unit_vector(rng)

    def scatter(self, ray_in: Ray, rec: HitRecord, rng) -> Tuple[Ray, Vector3]:
        """
        Scatter a ray according to the diffuse model.
        Returns (scattered_ray, attenuation).
        """
        scatter_direction = rec.normal + self._offset(rec, rng)

        # The sample can land opposite the normal and cancel it out.
        if scatter_direction.near_zero():
            scatter_direction = rec.normal

        scattered = Ray(rec.p, scatter_direction, ray_in.time)
        return scattered, self.albedo

    def __repr__(self) -> str:
        if self.method == "lambertian":
            return f"Lambertian({self.albedo!r})"
        return f"Lambertian({self.albedo!r}, method={self.method!r})"
