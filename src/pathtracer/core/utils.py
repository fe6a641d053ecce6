# core/utils.py
import math
import random
from typing import Optional

from pathtracer.core.vector import Vector3

# Every sampler takes the generator explicitly so that each render worker can
# draw from its own stream. The ``random`` module satisfies the same protocol.


def random_in_unit_sphere(rng=random) -> Vector3:
    """
    Returns a random point inside a unit sphere.
    """
    while True:
        p = Vector3(rng.uniform(-1, 1),
                    rng.uniform(-1, 1),
                    rng.uniform(-1, 1))
        if p.dot(p) < 1.0:
            return p


def random_unit_vector(rng=random) -> Vector3:
    """
    Returns a random unit vector (uniformly distributed over the sphere).

    Uses the inverse transform: z is uniform on [-1, 1] and the azimuth is
    uniform on [0, 2*pi), which is exactly isotropic by Archimedes' theorem.
    """
    z = rng.uniform(-1.0, 1.0)
    a = rng.uniform(0.0, 2.0 * math.pi)
    r = math.sqrt(max(0.0, 1.0 - z * z))
    return Vector3(r * math.cos(a), r * math.sin(a), z)


def random_in_unit_disk(rng=random) -> Vector3:
    """
    Returns a random point inside the unit disk on the z = 0 plane.
    """
    while True:
        p = Vector3(rng.uniform(-1, 1),
                    rng.uniform(-1, 1),
                    0)
        if p.dot(p) < 1.0:
            return p


def reflect(v: Vector3, n: Vector3) -> Vector3:
    """
    Reflects vector v about the normal n.
    """
    return v - n * 2 * v.dot(n)


def refract(uv: Vector3, n: Vector3, etai_over_etat: float) -> Optional[Vector3]:
    """
    Refracts the unit vector uv through a surface with unit normal n.

    Returns None on total internal reflection, when no transmitted
    direction satisfies Snell's law.
    """
    cos_theta = min(-uv.dot(n), 1.0)
    r_out_perp = (uv + n * cos_theta) * etai_over_etat
    k = 1.0 - r_out_perp.length_squared()
    if k < 0.0:
        return None
    r_out_parallel = n * -math.sqrt(k)
    return r_out_perp + r_out_parallel


def schlick(cosine: float, ref_idx: float) -> float:
    """
    Schlick's approximation of the Fresnel reflectance.
    """
    r0 = (1.0 - ref_idx) / (1.0 + ref_idx)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * math.pow((1.0 - cosine), 5)


def lerp(a: Vector3, b: Vector3, t: float) -> Vector3:
    return a * (1.0 - t) + b * t


def random_in_hemisphere(normal: Vector3, rng=random) -> Vector3:
    """
    Returns a random point inside the unit sphere, mirrored onto the side
    of the sphere that ``normal`` points to.
    """
    p = random_in_unit_sphere(rng)
    return p if p.dot(normal) >= 0.0 else -p
