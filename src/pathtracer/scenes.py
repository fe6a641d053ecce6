"""Scene construction: built-in scenes and the JSON scene-file loader.

Every scene factory takes the image aspect ratio and a random generator
(used by procedurally placed objects) and returns ``(world, camera)``.

Scene files are JSON documents of the form::

    {
      "camera": {"look_from": [13, 2, 3], "look_at": [0, 0, 0],
                 "vup": [0, 1, 0], "vfov": 20, "aperture": 0.1,
                 "focus_dist": 10, "time0": 0, "time1": 1, "roll": 0},
      "materials": {"glass": {"type": "dielectric", "ior": 1.5}},
      "objects": [
        {"type": "sphere", "center": [0, -1000, 0], "radius": 1000,
         "material": {"type": "lambertian", "albedo": [0.5, 0.5, 0.5]}},
        {"type": "sphere", "center": [0, 1, 0], "radius": 1,
         "material": "glass"}
      ]
    }

An object's ``material`` is either an inline material or the name of an
entry in ``materials``; named materials are shared between objects.
Lambertian materials take an optional ``method`` (see
``pathtracer.materials.lambertian.DIFFUSE_METHODS``) and the camera an
optional ``roll`` in degrees.
"""

import json
import logging
import math
import random
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Tuple, Union

from pathtracer.camera.camera import Camera
from pathtracer.core.vector import Vector3
from pathtracer.geometry.sphere import MovingSphere, Sphere
from pathtracer.geometry.world import HittableList
from pathtracer.materials.dielectric import Dielectric
from pathtracer.materials.lambertian import Lambertian
from pathtracer.materials.material import Material
from pathtracer.materials.metal import Metal
from pathtracer.materials.presets import get_preset, matte

logger = logging.getLogger(__name__)

SceneFactory = Callable[[float, random.Random], Tuple[HittableList, Camera]]


class SceneFormatError(ValueError):
    """Raised when a scene file is malformed."""


def random_color(rng, low: float = 0.0, high: float = 1.0) -> Vector3:
    return Vector3(rng.uniform(low, high), rng.uniform(low, high), rng.uniform(low, high))


def cover_scene(aspect_ratio: float, rng=random) -> Tuple[HittableList, Camera]:
    """
    The classic cover image: a field of small random spheres around three
    large ones. Small diffuse spheres bounce upwards while the shutter is
    open.
    """
    world = HittableList()

    # The globe
    world.add(Sphere(Vector3(0, -1000, 0), 1000, Lambertian(Vector3(0.5, 0.5, 0.5))))

    glass = Dielectric(1.5)
    for a in range(-11, 11):
        for b in range(-11, 11):
            choose_mat = rng.random()
            center = Vector3(a + 0.9 * rng.random(), 0.2, b + 0.9 * rng.random())

            if (center - Vector3(4, 0.2, 0)).length() <= 0.9:
                continue

            if choose_mat < 0.8:
                albedo = random_color(rng) * random_color(rng)
                center1 = center + Vector3(0, rng.uniform(0, 0.5), 0)
                world.add(MovingSphere(center, center1, 0.0, 1.0, 0.2, Lambertian(albedo)))
            elif choose_mat < 0.95:
                albedo = random_color(rng, 0.5, 1.0)
                world.add(Sphere(center, 0.2, Metal(albedo, rng.uniform(0, 0.5))))
            else:
                world.add(Sphere(center, 0.2, glass))

    world.add(Sphere(Vector3(0, 1, 0), 1.0, glass))
    world.add(Sphere(Vector3(-4, 1, 0), 1.0, Lambertian(Vector3(0.4, 0.2, 0.1))))
    world.add(Sphere(Vector3(4, 1, 0), 1.0, Metal(Vector3(0.7, 0.6, 0.5), 0.0)))

    camera = Camera(
        look_from=Vector3(13, 2, 3),
        look_at=Vector3(0, 0, 0),
        vup=Vector3(0, 1, 0),
        vfov=20.0,
        aspect_ratio=aspect_ratio,
        aperture=0.1,
        focus_dist=10.0,
        time0=0.0,
        time1=1.0,
    )
    return world, camera


def wide_angle_scene(aspect_ratio: float, rng=random) -> Tuple[HittableList, Camera]:
    """
    A blue and a red sphere that touch each other and, with a 90 degree
    field of view, the edges of the screen.
    """
    radius = math.cos(math.pi / 4)
    world = HittableList([
        Sphere(Vector3(-radius, 0, -1), radius, Lambertian(Vector3(0, 0, 1))),
        Sphere(Vector3(radius, 0, -1), radius, Lambertian(Vector3(1, 0, 0))),
    ])
    camera = Camera(Vector3(0, 0, 0), Vector3(0, 0, -1), vfov=90.0, aspect_ratio=aspect_ratio)
    return world, camera


def three_spheres_scene(aspect_ratio: float, rng=random) -> Tuple[HittableList, Camera]:
    """
    Diffuse, glass and metal spheres side by side on a large ground sphere.
    """
    world = HittableList([
        Sphere(Vector3(0, -100.5, -1), 100, Lambertian(Vector3(0.8, 0.8, 0.0))),
        Sphere(Vector3(0, 0, -1), 0.5, Lambertian(Vector3(0.1, 0.2, 0.5))),
        Sphere(Vector3(-1, 0, -1), 0.5, Dielectric(1.5)),
        Sphere(Vector3(1, 0, -1), 0.5, Metal(Vector3(0.8, 0.6, 0.2), 0.0)),
    ])
    look_from = Vector3(3, 3, 2)
    look_at = Vector3(0, 0, -1)
    camera = Camera(look_from, look_at, Vector3(0, 1, 0), vfov=20.0, aspect_ratio=aspect_ratio,
                    aperture=0.1, focus_dist=(look_from - look_at).length())
    return world, camera


def single_sphere_scene(aspect_ratio: float, rng=random) -> Tuple[HittableList, Camera]:
    """
    One gray diffuse sphere lit only by the sky gradient. Used as the
    regression scene.
    """
    world = HittableList([Sphere(Vector3(0, 0, -1), 0.5, matte("gray"))])
    camera = Camera(Vector3(0, 0, 0), Vector3(0, 0, -1), vfov=90.0, aspect_ratio=aspect_ratio)
    return world, camera


SCENES: Dict[str, SceneFactory] = {
    "cover": cover_scene,
    "wide-angle": wide_angle_scene,
    "three-spheres": three_spheres_scene,
    "single-sphere": single_sphere_scene,
}


def build_scene(name: str, aspect_ratio: float, rng=random) -> Tuple[HittableList, Camera]:
    try:
        factory = SCENES[name]
    except KeyError:
        raise ValueError(f"Unknown scene {name!r}; choose from {', '.join(SCENES)}") from None
    world, camera = factory(aspect_ratio, rng)
    logger.debug("Built scene %r with %d objects", name, len(world))
    return world, camera


###############################################################################
# Scene files
###############################################################################
def _vector(data: Mapping[str, Any], key: str, default=None) -> Vector3:
    value = data.get(key, default)
    if value is None:
        raise SceneFormatError(f"Missing required vector {key!r}")
    try:
        return Vector3.from_sequence(float(v) for v in value)
    except (TypeError, ValueError) as e:
        raise SceneFormatError(f"Invalid vector {key!r}: {value!r} ({e})") from e


def _number(data: Mapping[str, Any], key: str, default=None) -> float:
    value = data.get(key, default)
    if value is None:
        raise SceneFormatError(f"Missing required number {key!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise SceneFormatError(f"Invalid number {key!r}: {value!r}") from e


def parse_material(data: Mapping[str, Any]) -> Material:
    """
    Build a material from its JSON description.
    """
    if not isinstance(data, Mapping):
        raise SceneFormatError(f"Material must be an object, got {data!r}")
    kind = data.get("type")
    try:
        if kind == "lambertian":
            return Lambertian(_vector(data, "albedo"), data.get("method", "lambertian"))
        if kind == "metal":
            return Metal(_vector(data, "albedo"), _number(data, "fuzz", 0.0))
        if kind == "dielectric":
            return Dielectric(_number(data, "ior"))
        if kind == "preset":
            return get_preset(data.get("name"))
    except SceneFormatError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise SceneFormatError(f"Invalid {kind} material: {e}") from e
    raise SceneFormatError(f"Unknown material type {kind!r}")


def parse_camera(data: Mapping[str, Any], aspect_ratio: float) -> Camera:
    if not isinstance(data, Mapping):
        raise SceneFormatError("Scene file needs a 'camera' object")
    look_from = _vector(data, "look_from")
    look_at = _vector(data, "look_at")
    try:
        return Camera(
            look_from=look_from,
            look_at=look_at,
            vup=_vector(data, "vup", [0, 1, 0]),
            vfov=_number(data, "vfov", 90.0),
            aspect_ratio=aspect_ratio,
            aperture=_number(data, "aperture", 0.0),
            focus_dist=_number(data, "focus_dist", (look_from - look_at).length()),
            time0=_number(data, "time0", 0.0),
            time1=_number(data, "time1", 0.0),
            roll=_number(data, "roll", 0.0),
        )
    except SceneFormatError:
        raise
    except ValueError as e:
        raise SceneFormatError(f"Invalid camera: {e}") from e


def parse_scene(document: Mapping[str, Any], aspect_ratio: float) -> Tuple[HittableList, Camera]:
    """
    Build ``(world, camera)`` from an already decoded scene document.
    """
    if not isinstance(document, Mapping):
        raise SceneFormatError("Scene document must be a JSON object")

    materials = document.get("materials", {})
    if not isinstance(materials, Mapping):
        raise SceneFormatError("'materials' must be a JSON object mapping names to materials")
    objects = document.get("objects", [])
    if not isinstance(objects, list):
        raise SceneFormatError("'objects' must be a JSON array")

    named = {name: parse_material(spec) for name, spec in materials.items()}

    world = HittableList()
    for index, obj in enumerate(objects):
        if not isinstance(obj, Mapping):
            raise SceneFormatError(f"Object {index} must be a JSON object")
        material_spec = obj.get("material")
        if isinstance(material_spec, str):
            if material_spec not in named:
                raise SceneFormatError(f"Object {index} uses undefined material {material_spec!r}")
            material = named[material_spec]
        else:
            material = parse_material(material_spec)

        kind = obj.get("type", "sphere")
        try:
            if kind == "sphere":
                world.add(Sphere(_vector(obj, "center"), _number(obj, "radius"), material))
            elif kind == "moving_sphere":
                world.add(MovingSphere(_vector(obj, "center0"), _vector(obj, "center1"),
                                       _number(obj, "time0", 0.0), _number(obj, "time1", 1.0),
                                       _number(obj, "radius"), material))
            else:
                raise SceneFormatError(f"Object {index} has unknown type {kind!r}")
        except SceneFormatError:
            raise
        except ValueError as e:
            raise SceneFormatError(f"Object {index}: {e}") from e

    camera = parse_camera(document.get("camera"), aspect_ratio)
    logger.debug("Parsed scene with %d objects and %d named materials", len(world), len(named))
    return world, camera


def load_scene_file(path: Union[str, Path], aspect_ratio: float) -> Tuple[HittableList, Camera]:
    """
    Load a JSON scene file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        SceneFormatError: If the file is not a valid scene
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Scene file not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as fh:
            document = json.load(fh)
    except json.JSONDecodeError as e:
        raise SceneFormatError(f"{path}: invalid JSON ({e})") from e
    logger.info("Loading scene from %s", path)
    return parse_scene(document, aspect_ratio)
