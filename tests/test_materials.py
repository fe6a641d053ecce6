"""Unit tests for the material models.

Tests cover:
- Lambertian scattering, its sampling methods and the degenerate-direction fallback
- Metal reflection, fuzz clamping and absorption
- Dielectric reflection/refraction choice and total internal reflection
- Material presets
"""

import math

import pytest

from pathtracer.core.ray import Ray
from pathtracer.core.vector import Vector3, WHITE
from pathtracer.geometry.hittable import HitRecord
from pathtracer.materials.dielectric import Dielectric
from pathtracer.materials.lambertian import Lambertian
from pathtracer.materials.metal import Metal
from pathtracer.materials.presets import PRESETS, get_preset


def make_record(normal=Vector3(0, 0, 1), front_face=True, material=None):
    return HitRecord(p=Vector3(0, 0, 0), normal=normal, t=1.0,
                     front_face=front_face, material=material)


class TestLambertian:
    """Tests for diffuse scattering."""

    def test_always_scatters_above_surface(self, rng):
        albedo = Vector3(0.2, 0.4, 0.6)
        material = Lambertian(albedo)
        rec = make_record()
        ray_in = Ray(Vector3(0, 0, 5), Vector3(0, 0, -1))

        for _ in range(500):
            result = material.scatter(ray_in, rec, rng)
            assert result is not None
            scattered, attenuation = result
            assert attenuation == albedo
            assert scattered.origin == rec.p
            # normal + unit vector never points below the tangent plane
            assert scattered.direction.dot(rec.normal) >= 0

    def test_degenerate_direction_uses_normal(self, scripted_rng):
        """A unit sample exactly opposite the normal is replaced by the normal."""
        material = Lambertian(Vector3(0.5, 0.5, 0.5))
        rec = make_record(normal=Vector3(0, 0, 1))
        # random_unit_vector draws z, then the azimuth: z = -1 gives (0, 0, -1)
        rng = scripted_rng(-1.0, 0.0)

        scattered, _ = material.scatter(Ray(Vector3(0, 0, 5), Vector3(0, 0, -1)), rec, rng)

        assert scattered.direction == Vector3(0, 0, 1)

    def test_spherical_method_adds_point_inside_ball(self, scripted_rng):
        material = Lambertian(Vector3(0.5, 0.5, 0.5), method="spherical")
        scattered, _ = material.scatter(Ray(Vector3(0, 0, 5), Vector3(0, 0, -1)),
                                        make_record(), scripted_rng(0.5, 0.0, 0.0))
        assert scattered.direction == Vector3(0.5, 0, 1)

    def test_hemispherical_method_flips_sample_to_normal_side(self, scripted_rng):
        material = Lambertian(Vector3(0.5, 0.5, 0.5), method="hemispherical")
        scattered, _ = material.scatter(Ray(Vector3(0, 0, 5), Vector3(0, 0, -1)),
                                        make_record(), scripted_rng(0.0, 0.0, -0.5))
        assert scattered.direction == Vector3(0, 0, 1.5)

    @pytest.mark.parametrize("method", ["spherical", "hemispherical"])
    def test_alternate_methods_stay_above_surface(self, rng, method):
        material = Lambertian(Vector3(0.5, 0.5, 0.5), method=method)
        rec = make_record()
        for _ in range(500):
            scattered, _ = material.scatter(Ray(Vector3(0, 0, 5), Vector3(0, 0, -1)), rec, rng)
            assert scattered.direction.dot(rec.normal) > 0

    def test_unknown_method_rejected(self):
        with pytest.raises(ValueError):
            Lambertian(Vector3(0.5, 0.5, 0.5), method="oren-nayar")

    def test_keeps_ray_time(self, rng):
        material = Lambertian(Vector3(0.5, 0.5, 0.5))
        scattered, _ = material.scatter(Ray(Vector3(0, 0, 5), Vector3(0, 0, -1), time=0.7),
                                        make_record(), rng)
        assert scattered.time == 0.7


class TestMetal:
    """Tests for reflective scattering."""

    def test_mirror_reflection(self, rng):
        material = Metal(Vector3(0.8, 0.8, 0.8), fuzz=0.0)
        ray_in = Ray(Vector3(-1, 0, 1), Vector3(1, 0, -1))

        scattered, attenuation = material.scatter(ray_in, make_record(), rng)

        d = scattered.direction
        assert d.x == pytest.approx(1 / math.sqrt(2))
        assert d.z == pytest.approx(1 / math.sqrt(2))
        assert attenuation == Vector3(0.8, 0.8, 0.8)

    def test_fuzz_is_clamped(self):
        assert Metal(Vector3(1, 1, 1), fuzz=3.0).fuzz == 1.0
        assert Metal(Vector3(1, 1, 1), fuzz=-1.0).fuzz == 0.0

    def test_absorbs_when_fuzz_points_into_surface(self, scripted_rng):
        """A grazing reflection pushed below the surface is absorbed."""
        material = Metal(Vector3(1, 1, 1), fuzz=1.0)
        ray_in = Ray(Vector3(-1, 0, 0.01), Vector3(1, 0, -0.01))
        # random_in_unit_sphere accepts (0, 0, -0.99) on the first try
        rng = scripted_rng(0.0, 0.0, -0.99)

        assert material.scatter(ray_in, make_record(), rng) is None

    def test_fuzzy_reflections_stay_near_mirror(self, rng):
        material = Metal(Vector3(1, 1, 1), fuzz=0.1)
        ray_in = Ray(Vector3(0, 0, 1), Vector3(0, 0, -1))
        for _ in range(200):
            result = material.scatter(ray_in, make_record(), rng)
            assert result is not None
            assert result[0].direction.normalize().z > 0.9


class TestDielectric:
    """Tests for refractive scattering."""

    def test_attenuation_is_white(self, rng):
        material = Dielectric(1.5)
        _, attenuation = material.scatter(Ray(Vector3(0, 0, 1), Vector3(0, 0, -1)),
                                          make_record(), rng)
        assert attenuation == WHITE

    def test_refracts_at_normal_incidence_when_draw_is_high(self, scripted_rng):
        """Reflectance at normal incidence is 4%, so a 0.99 draw refracts."""
        material = Dielectric(1.5)
        scattered, _ = material.scatter(Ray(Vector3(0, 0, 1), Vector3(0, 0, -1)),
                                        make_record(), scripted_rng(0.99))
        assert scattered.direction.z == pytest.approx(-1.0)

    def test_reflects_when_draw_is_under_reflectance(self, scripted_rng):
        material = Dielectric(1.5)
        scattered, _ = material.scatter(Ray(Vector3(0, 0, 1), Vector3(0, 0, -1)),
                                        make_record(), scripted_rng(0.0))
        assert scattered.direction.z == pytest.approx(1.0)

    def test_total_internal_reflection(self, scripted_rng):
        """Exiting glass at 60 degrees always reflects, whatever the draw."""
        material = Dielectric(1.5)
        incident = Vector3(math.sin(math.radians(60)), 0, -math.cos(math.radians(60)))
        # Back face: the normal already faces the incoming ray
        rec = make_record(normal=Vector3(0, 0, 1), front_face=False)

        scattered, _ = material.scatter(Ray(Vector3(0, 0, 1), incident), rec, scripted_rng(0.99))

        assert scattered.direction.z > 0
        assert scattered.direction.x == pytest.approx(incident.x)

    def test_refraction_bends_towards_normal_entering(self, scripted_rng):
        material = Dielectric(1.5)
        incident = Vector3(math.sin(math.radians(45)), 0, -math.cos(math.radians(45)))
        scattered, _ = material.scatter(Ray(Vector3(0, 0, 1), incident), make_record(),
                                        scripted_rng(0.99))
        d = scattered.direction.normalize()
        assert d.z < 0
        assert d.x == pytest.approx(math.sin(math.radians(45)) / 1.5)

    def test_invalid_index_rejected(self):
        with pytest.raises(ValueError):
            Dielectric(0.0)


class TestPresets:
    """Tests for named material presets."""

    def test_every_preset_builds(self):
        for name in PRESETS:
            assert get_preset(name) is not None

    def test_glass_index(self):
        assert get_preset("glass").ref_idx == pytest.approx(1.5)

    def test_unknown_preset(self):
        with pytest.raises(KeyError):
            get_preset("unobtainium")
