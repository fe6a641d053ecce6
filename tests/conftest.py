"""Pytest configuration for pathtracer tests.

Shared fixtures: seeded random generators, tiny render settings and the
single-sphere regression scene.
"""

import random
from pathlib import Path

import numpy as np
import pytest

from pathtracer.config import RenderSettings
from pathtracer.scenes import single_sphere_scene


class ScriptedRng:
    """Generator stand-in that replays fixed values.

    ``uniform(a, b)`` and ``random()`` both pop the next scripted value, so
    tests can force a sampler into an exact corner case.
    """

    def __init__(self, *values):
        self.values = list(values)

    def random(self):
        return self.values.pop(0)

    def uniform(self, a, b):
        return self.values.pop(0)


@pytest.fixture
def rng():
    """A seeded generator so statistical tests are repeatable."""
    return random.Random(1234)


@pytest.fixture
def scripted_rng():
    """Factory for ScriptedRng instances."""
    return ScriptedRng


@pytest.fixture
def tiny_settings():
    """An 8x4 thread-pool render that finishes in well under a second."""
    return RenderSettings(
        width=8,
        aspect_ratio=2.0,
        samples_per_pixel=2,
        max_depth=4,
        workers=2,
        executor="thread",
        seed=42,
    )


@pytest.fixture
def single_sphere():
    """(world, camera) for the 2:1 single diffuse sphere scene."""
    return single_sphere_scene(2.0)


REFERENCE_DIR = Path(__file__).parent / "data"


def pytest_addoption(parser):
    parser.addoption("--update-reference", action="store_true", default=False,
                     help="Rewrite the regression reference buffers under tests/data")


@pytest.fixture
def reference_buffer(request):
    """
    Loader for checked-in regression images.

    ``reference_buffer(name, image)`` returns the stored array for ``name``.
    With ``--update-reference`` it first overwrites the stored array with
    ``image``. A missing reference skips the test with instructions.
    """
    update = request.config.getoption("--update-reference")

    def load(name, image):
        path = REFERENCE_DIR / f"{name}.npy"
        if update:
            REFERENCE_DIR.mkdir(parents=True, exist_ok=True)
            np.save(path, image)
        if not path.exists():
            pytest.skip(f"No reference buffer at {path}; run pytest --update-reference once")
        return np.load(path)

    return load
