from .hittable import HitRecord, Hittable
from .sphere import MovingSphere, Sphere
from .world import HittableList

__all__ = ["HitRecord", "Hittable", "MovingSphere", "Sphere", "HittableList"]
