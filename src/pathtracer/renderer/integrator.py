# renderer/integrator.py
import math
import random
from typing import Callable

from pathtracer.core.ray import Ray
from pathtracer.core.vector import Vector3, BLACK, WHITE
from pathtracer.core.utils import lerp
from pathtracer.geometry.hittable import Hittable

# Offsets the start of secondary rays so they do not re-hit their own surface.
T_MIN = 0.001
T_MAX = math.inf

SKY_ZENITH = Vector3(0.5, 0.7, 1.0)
SKY_HORIZON = WHITE

Background = Callable[[Ray], Vector3]


def sky_background(ray: Ray) -> Vector3:
    """
    Vertical gradient from white (looking straight down) to light blue
    (looking straight up), driven by the y component of the unit direction.
    """
    unit_direction = ray.direction.normalize()
    t = 0.5 * (unit_direction.y + 1.0)
    return lerp(SKY_HORIZON, SKY_ZENITH, t)


class SolidBackground:
    """
    Background that returns the same color in every direction. A class
    rather than a closure so it can be shipped to worker processes.
    """
    def __init__(self, color: Vector3):
        self.color = color

    def __call__(self, ray: Ray) -> Vector3:
        return self.color

    def __repr__(self) -> str:
        return f"SolidBackground({self.color!r})"


def ray_color(ray: Ray, world: Hittable, depth: int, rng=random,
              background: Background = sky_background,
              t_min: float = T_MIN, t_max: float = T_MAX) -> Vector3:
    """
    Monte Carlo estimate of the radiance carried back along ``ray``.

    Recursion stops at ``depth`` bounces, at the background, or when a
    material absorbs the ray; the last two contribute the background color
    and black respectively.
    """
    if depth <= 0:
        return BLACK

    rec = world.hit(ray, t_min, t_max)
    if rec is None:
        return background(ray)

    scatter = rec.material.scatter(ray, rec, rng)
    if scatter is None:
        return BLACK

    scattered, attenuation = scatter
    return attenuation * ray_color(scattered, world, depth - 1, rng,
                                   background, t_min, t_max)
