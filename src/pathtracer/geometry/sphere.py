# geometry/sphere.py
import math
from typing import Optional

from pathtracer.core.vector import Vector3
from pathtracer.core.ray import Ray
from pathtracer.geometry.hittable import Hittable, HitRecord


class Sphere(Hittable):
    """
    Represents a sphere defined by its center, radius, and material.
    """
    def __init__(self, center: Vector3, radius: float, material):
        if not 0 < radius < math.inf:
            raise ValueError(f"Sphere radius must be positive and finite, got {radius}")
        self.center = center
        self.radius = radius
        self.material = material

    def center_at(self, time: float) -> Vector3:
        return self.center

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        center = self.center_at(ray.time)
        oc = ray.origin - center
        a = ray.direction.dot(ray.direction)
        half_b = oc.dot(ray.direction)
        c = oc.dot(oc) - self.radius * self.radius
        discriminant = half_b * half_b - a * c

        if discriminant < 0 or a == 0:
            return None

        sqrt_disc = math.sqrt(discriminant)
        # Find the nearest root that lies in the open interval (t_min, t_max)
        root = (-half_b - sqrt_disc) / a
        if root <= t_min or root >= t_max:
            root = (-half_b + sqrt_disc) / a
            if root <= t_min or root >= t_max:
                return None

        rec = HitRecord()
        rec.t = root
        rec.p = ray.at(rec.t)
        outward_normal = (rec.p - center) / self.radius
        rec.set_face_normal(ray, outward_normal)
        rec.material = self.material
        return rec

    def __repr__(self) -> str:
        return f"Sphere({self.center!r}, {self.radius}, {self.material!r})"


class MovingSphere(Sphere):
    """
    A sphere whose center travels linearly from center0 at time0 to
    center1 at time1. Rays sample it at their own time, which produces
    motion blur when the camera shutter is open over an interval.
    """
    def __init__(self, center0: Vector3, center1: Vector3, time0: float, time1: float,
                 radius: float, material):
        if time1 == time0:
            raise ValueError("MovingSphere needs a non-empty time interval")
        super().__init__(center0, radius, material)
        self.center1 = center1
        self.time0 = time0
        self.time1 = time1

    def center_at(self, time: float) -> Vector3:
        f = (time - self.time0) / (self.time1 - self.time0)
        return self.center + (self.center1 - self.center) * f

    def __repr__(self) -> str:
        return (f"MovingSphere({self.center!r}, {self.center1!r}, "
                f"{self.time0}, {self.time1}, {self.radius}, {self.material!r})")
