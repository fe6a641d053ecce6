# renderer/raytracer.py
import logging
import multiprocessing
import random
from concurrent.futures import FIRST_EXCEPTION, ProcessPoolExecutor, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Callable, List

import numpy as np

from pathtracer.camera.camera import Camera
from pathtracer.config import RenderSettings
from pathtracer.core.ray import Ray
from pathtracer.core.vector import Vector3
from pathtracer.geometry.hittable import Hittable
from pathtracer.renderer.integrator import ray_color
from pathtracer.renderer.progress import ProgressCounter
from pathtracer.renderer.tone_mapping import color_to_rgb8

logger = logging.getLogger(__name__)

CHANNELS = 3


class RenderError(RuntimeError):
    """A render worker failed; the partially written image is discarded."""


@dataclass(frozen=True)
class RenderJob:
    """
    Everything a worker needs to shade pixels. Read-only for the duration
    of a render and shared by every worker.
    """
    world: Hittable
    camera: Camera
    width: int
    height: int
    samples_per_pixel: int
    max_depth: int
    t_min: float
    t_max: float
    background: Callable[[Ray], Vector3]
    entropy: int


def partition_rows(height: int, parts: int) -> List[range]:
    """
    Split rows 0..height-1 into at most ``parts`` disjoint interleaved sets.

    Row k goes to partition k % parts, which spreads cheap (sky) and
    expensive rows evenly across workers.
    """
    if height < 0:
        raise ValueError(f"height must be non-negative, got {height}")
    if parts <= 0:
        raise ValueError(f"parts must be positive, got {parts}")
    parts = min(parts, height)
    return [range(k, height, parts) for k in range(parts)]


def row_rng(entropy: int, row: int) -> random.Random:
    """
    Independent random stream for one image row, derived from the render's
    root entropy. Identical for a given (entropy, row) whichever worker
    renders the row.
    """
    state = np.random.SeedSequence(entropy, spawn_key=(row,)).generate_state(2, dtype=np.uint64)
    return random.Random((int(state[0]) << 64) | int(state[1]))


def sample_pixel(job: RenderJob, i: int, j: int, rng) -> Vector3:
    """
    Sum of ``samples_per_pixel`` radiance estimates for pixel (i, j), where
    row j = 0 is the top of the image.
    """
    total = Vector3(0.0, 0.0, 0.0)
    row_from_bottom = job.height - 1 - j
    for _ in range(job.samples_per_pixel):
        s = (i + rng.random()) / job.width
        t = (row_from_bottom + rng.random()) / job.height
        ray = job.camera.get_ray(s, t, rng)
        total = total + ray_color(ray, job.world, job.max_depth, rng,
                                  job.background, job.t_min, job.t_max)
    return total


def render_rows(job: RenderJob, rows: range, pixels: np.ndarray, progress: ProgressCounter) -> int:
    """
    Shade every pixel of ``rows`` into ``pixels``. Returns the number of
    pixels written, which is short of the full count if the render was
    aborted meanwhile.
    """
    written = 0
    for j in rows:
        rng = row_rng(job.entropy, j)
        for i in range(job.width):
            if progress.aborted:
                return written
            color = sample_pixel(job, i, j, rng)
            pixels[j, i] = color_to_rgb8(color, job.samples_per_pixel)
            progress.increment()
            written += 1
    return written


# Per-process worker state, installed once by the pool initializer.
_worker_state = None


def _init_process_worker(job: RenderJob, shared_pixels, progress: ProgressCounter):
    global _worker_state
    pixels = np.frombuffer(shared_pixels, dtype=np.uint8).reshape(job.height, job.width, CHANNELS)
    _worker_state = (job, pixels, progress)


def _render_partition(rows: range) -> int:
    job, pixels, progress = _worker_state
    return render_rows(job, rows, pixels, progress)


class Renderer:
    """
    Multi-worker CPU path tracer.

    The image is split into static row partitions, one task per partition,
    run on a fixed pool of ``settings.workers`` processes (or threads).
    Workers write straight into disjoint rows of a shared pixel buffer and
    bump a shared progress counter after every pixel.
    """
    def __init__(self, settings: RenderSettings, mp_context=None):
        self.settings = settings.validate()
        # fork is unsafe while a progress monitor thread is running
        self.mp_context = mp_context or multiprocessing.get_context("spawn")
        self.progress = ProgressCounter(settings.total_pixels, ctx=self.mp_context)

    @property
    def width(self) -> int:
        return self.settings.width

    @property
    def height(self) -> int:
        return self.settings.height

    def make_job(self, camera: Camera, world: Hittable) -> RenderJob:
        seed_sequence = np.random.SeedSequence(self.settings.seed)
        return RenderJob(
            world=world,
            camera=camera,
            width=self.width,
            height=self.height,
            samples_per_pixel=self.settings.samples_per_pixel,
            max_depth=self.settings.max_depth,
            t_min=self.settings.t_min,
            t_max=self.settings.t_max,
            background=self.settings.background,
            entropy=seed_sequence.entropy,
        )

    def render(self, camera: Camera, world: Hittable) -> np.ndarray:
        """
        Render ``world`` as seen by ``camera``.

        Returns:
            np.ndarray: (height, width, 3) uint8 RGB image, top row first.

        Raises:
            RenderError: If any worker fails.
        """
        settings = self.settings
        job = self.make_job(camera, world)
        partitions = partition_rows(self.height, settings.workers)

        logger.info("Rendering %dx%d, %d samples/pixel, depth %d, %d %s worker(s), %d object(s)",
                    self.width, self.height, settings.samples_per_pixel, settings.max_depth,
                    len(partitions), settings.executor, len(world) if hasattr(world, "__len__") else 1)
        logger.debug("Root seed entropy: %d", job.entropy)

        self.progress.start()
        try:
            if settings.executor == "process":
                image = self._render_with_processes(job, partitions)
            else:
                image = self._render_with_threads(job, partitions)
        finally:
            self.progress.finish()

        logger.info("Rendered %d pixels in %.2fs", self.progress.completed, self.progress.elapsed)
        return image

    def _render_with_threads(self, job: RenderJob, partitions: List[range]) -> np.ndarray:
        pixels = np.zeros((job.height, job.width, CHANNELS), dtype=np.uint8)
        with ThreadPoolExecutor(max_workers=len(partitions),
                                thread_name_prefix="render") as pool:
            futures = [pool.submit(render_rows, job, rows, pixels, self.progress)
                       for rows in partitions]
            self._wait(pool, futures)
        return pixels

    def _render_with_processes(self, job: RenderJob, partitions: List[range]) -> np.ndarray:
        shared_pixels = self.mp_context.RawArray("B", job.height * job.width * CHANNELS)
        with ProcessPoolExecutor(max_workers=len(partitions),
                                 mp_context=self.mp_context,
                                 initializer=_init_process_worker,
                                 initargs=(job, shared_pixels, self.progress)) as pool:
            futures = [pool.submit(_render_partition, rows) for rows in partitions]
            self._wait(pool, futures)
        pixels = np.frombuffer(shared_pixels, dtype=np.uint8)
        return pixels.reshape(job.height, job.width, CHANNELS).copy()

    def _wait(self, pool, futures):
        """
        Block until every partition is done. On the first failure, drop the
        partitions that have not started and tell the running ones to stop
        at their next pixel, so the pool shuts down promptly.
        """
        done, _ = wait(futures, return_when=FIRST_EXCEPTION)
        for future in done:
            exc = future.exception()
            if exc is not None:
                self.progress.abort()
                pool.shutdown(wait=False, cancel_futures=True)
                logger.error("Render worker failed: %s", exc)
                raise RenderError(f"Render aborted: {exc}") from exc
