# camera/camera.py
import math
import random

from pathtracer.core.vector import Vector3
from pathtracer.core.ray import Ray
from pathtracer.core.utils import random_in_unit_disk


class Camera:
    """
    Thin-lens camera positioned at look_from and aimed at look_at.

    Parameters:
        look_from: Eye position
        look_at: Point the camera looks towards
        vup: World up direction, used to orient the image plane
        vfov: Vertical field of view in degrees
        aspect_ratio: Viewport width over height
        aperture: Lens diameter; 0 gives a pinhole camera
        focus_dist: Distance from the eye to the plane in perfect focus
        roll: Clockwise rotation of the viewport about the viewing axis, in degrees
        time0, time1: Shutter open and close times (for motion blur)
    """
    def __init__(self, look_from: Vector3, look_at: Vector3, vup: Vector3 = Vector3(0, 1, 0),
                 vfov: float = 90.0, aspect_ratio: float = 16.0 / 9.0,
                 aperture: float = 0.0, focus_dist: float = 1.0,
                 time0: float = 0.0, time1: float = 0.0, roll: float = 0.0):
        if not 0.0 < vfov < 180.0:
            raise ValueError(f"vfov must be in (0, 180) degrees, got {vfov}")
        if aspect_ratio <= 0:
            raise ValueError(f"aspect_ratio must be positive, got {aspect_ratio}")
        if aperture < 0:
            raise ValueError(f"aperture must be non-negative, got {aperture}")
        if focus_dist <= 0:
            raise ValueError(f"focus_dist must be positive, got {focus_dist}")
        if time1 < time0:
            raise ValueError(f"Shutter closes ({time1}) before it opens ({time0})")

        self.origin = look_from
        self.look_at = look_at
        self.vfov = vfov
        self.aspect_ratio = aspect_ratio
        self.aperture = aperture
        self.focus_dist = focus_dist
        self.lens_radius = aperture / 2.0
        self.time0 = time0
        self.time1 = time1
        self.roll = roll

        view = look_from - look_at
        if view.near_zero():
            raise ValueError("look_from and look_at must be distinct points")
        side = vup.cross(view)
        if side.near_zero():
            raise ValueError("vup must not be parallel to the viewing direction")

        # Orthonormal basis: w points backwards, u right, v up
        self.w = view.normalize()
        u = side.normalize()
        v = self.w.cross(u)

        # Roll turns the viewport clockwise: u tips towards -v
        phi = math.radians(roll)
        self.u = u * math.cos(phi) - v * math.sin(phi)
        self.v = self.w.cross(self.u)

        # Compute viewport dimensions based on fov
        viewport_height = 2.0 * math.tan(math.radians(vfov) / 2)
        viewport_width = aspect_ratio * viewport_height

        # Scale by focus distance so the image plane is the focus plane
        self.horizontal = self.u * viewport_width * focus_dist
        self.vertical = self.v * viewport_height * focus_dist

        self.lower_left_corner = (self.origin -
                                  self.horizontal * 0.5 -
                                  self.vertical * 0.5 -
                                  self.w * focus_dist)

    def get_ray(self, s: float, t: float, rng=random) -> Ray:
        """
        Generates a ray through normalized screen coordinates (s, t), where
        (0, 0) is the lower-left corner of the viewport, jittering the origin
        across the lens and the time across the shutter interval.
        """
        origin = self.origin
        if self.lens_radius > 0:
            rd = random_in_unit_disk(rng) * self.lens_radius
            origin = origin + self.u * rd.x + self.v * rd.y

        direction = (self.lower_left_corner +
                     self.horizontal * s +
                     self.vertical * t -
                     origin)

        if self.time1 > self.time0:
            time = rng.uniform(self.time0, self.time1)
        else:
            time = self.time0

        return Ray(origin, direction, time)

    def __repr__(self) -> str:
        return (f"Camera(look_from={self.origin!r}, look_at={self.look_at!r}, "
                f"vfov={self.vfov}, aspect_ratio={self.aspect_ratio}, "
                f"aperture={self.aperture}, focus_dist={self.focus_dist}, roll={self.roll})")
