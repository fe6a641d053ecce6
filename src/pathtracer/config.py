"""Render configuration.

``RenderSettings`` collects the image parameters and the worker pool setup
for one render; ``QUALITY_LEVELS`` holds named sample/bounce budgets.
"""

import math
import os
from dataclasses import dataclass, field, replace
from typing import Callable, Optional

from pathtracer.core.ray import Ray
from pathtracer.core.vector import Vector3
from pathtracer.renderer.integrator import T_MAX, T_MIN, sky_background

EXECUTORS = ("process", "thread")

QUALITY_LEVELS = {
    "preview": {"samples": 4, "bounces": 8},
    "balanced": {"samples": 32, "bounces": 25},
    "final": {"samples": 100, "bounces": 50},
}


def default_workers() -> int:
    return os.cpu_count() or 1


@dataclass(frozen=True)
class RenderSettings:
    """Image and scheduling parameters for a single render."""

    width: int = 400
    aspect_ratio: float = 16.0 / 9.0
    samples_per_pixel: int = 32
    max_depth: int = 25
    workers: int = field(default_factory=default_workers)
    executor: str = "process"
    seed: Optional[int] = None
    t_min: float = T_MIN
    t_max: float = T_MAX
    background: Callable[[Ray], Vector3] = sky_background

    @property
    def height(self) -> int:
        return max(1, int(self.width / self.aspect_ratio))

    @property
    def total_pixels(self) -> int:
        return self.width * self.height

    @classmethod
    def from_quality(cls, quality: str, **overrides) -> "RenderSettings":
        """Build settings from a named entry of QUALITY_LEVELS."""
        try:
            level = QUALITY_LEVELS[quality]
        except KeyError:
            raise ValueError(f"Unknown quality level {quality!r}; "
                             f"choose from {', '.join(QUALITY_LEVELS)}") from None
        params = {"samples_per_pixel": level["samples"], "max_depth": level["bounces"]}
        params.update(overrides)
        return cls(**params)

    def with_overrides(self, **changes) -> "RenderSettings":
        """Copy of these settings with the non-None ``changes`` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def validate(self) -> "RenderSettings":
        if self.width <= 0:
            raise ValueError(f"width must be positive, got {self.width}")
        if not self.aspect_ratio > 0 or math.isinf(self.aspect_ratio):
            raise ValueError(f"aspect_ratio must be a positive number, got {self.aspect_ratio}")
        if self.samples_per_pixel <= 0:
            raise ValueError(f"samples_per_pixel must be positive, got {self.samples_per_pixel}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")
        if self.workers <= 0:
            raise ValueError(f"workers must be positive, got {self.workers}")
        if self.executor not in EXECUTORS:
            raise ValueError(f"executor must be one of {EXECUTORS}, got {self.executor!r}")
        if not 0 <= self.t_min < self.t_max:
            raise ValueError(f"Invalid hit interval ({self.t_min}, {self.t_max})")
        return self
