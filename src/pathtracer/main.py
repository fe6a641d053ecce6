# main.py
"""Command-line entry point: render a scene to a PNG file.

Example:
    pathtracer --scene cover --width 400 --quality balanced --output cover.png
"""
import argparse
import logging
import random
import sys
from typing import List, Optional

from pathtracer.config import EXECUTORS, QUALITY_LEVELS, RenderSettings
from pathtracer.logconfig import setup_logging
from pathtracer.renderer.image_io import save_png
from pathtracer.renderer.progress import ProgressMonitor
from pathtracer.renderer.raytracer import Renderer, RenderError
from pathtracer.scenes import SCENES, SceneFormatError, build_scene, load_scene_file

logger = logging.getLogger("pathtracer.main")

DEFAULT_SCENE = "cover"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pathtracer",
        description="Render a scene of spheres with Monte Carlo path tracing.",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--scene", choices=sorted(SCENES), default=None,
                        help="Built-in scene to render (default: cover)")
    source.add_argument("--scene-file", type=str, default=None,
                        help="JSON scene description to render instead of a built-in scene")
    parser.add_argument("--width", type=int, default=400,
                        help="Image width in pixels (default: 400)")
    parser.add_argument("--aspect-ratio", type=float, default=16.0 / 9.0,
                        help="Width over height; the height is derived (default: 16/9)")
    parser.add_argument("--quality", choices=list(QUALITY_LEVELS), default="balanced",
                        help="Sample and bounce budget (default: balanced)")
    parser.add_argument("--samples", type=int, default=None,
                        help="Samples per pixel, overrides --quality")
    parser.add_argument("--max-depth", type=int, default=None,
                        help="Maximum bounces per path, overrides --quality")
    parser.add_argument("--workers", type=int, default=None,
                        help="Worker pool size (default: number of CPUs)")
    parser.add_argument("--executor", choices=EXECUTORS, default="process",
                        help="Run workers as processes or threads (default: process)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for a reproducible render")
    parser.add_argument("--output", type=str, default="output.png",
                        help="Output PNG path (default: output.png)")
    parser.add_argument("--quiet", action="store_true",
                        help="Hide the progress bar")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging verbosity (default: INFO)")
    parser.add_argument("--log-file", type=str, default=None,
                        help="Also write log messages to this file")
    return parser.parse_args(argv)


def settings_from_args(args: argparse.Namespace) -> RenderSettings:
    settings = RenderSettings.from_quality(
        args.quality,
        width=args.width,
        aspect_ratio=args.aspect_ratio,
        executor=args.executor,
        seed=args.seed if args.seed is not None else random.SystemRandom().randrange(2 ** 32),
    )
    return settings.with_overrides(
        samples_per_pixel=args.samples,
        max_depth=args.max_depth,
        workers=args.workers,
    ).validate()


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging("pathtracer", level=getattr(logging, args.log_level), log_file=args.log_file)

    try:
        settings = settings_from_args(args)
        if args.scene_file:
            world, camera = load_scene_file(args.scene_file, settings.aspect_ratio)
        else:
            world, camera = build_scene(args.scene or DEFAULT_SCENE, settings.aspect_ratio,
                                        random.Random(settings.seed))

        renderer = Renderer(settings)
        with ProgressMonitor(renderer.progress, disable=args.quiet):
            pixels = renderer.render(camera, world)
        save_png(pixels, args.output)
    except (RenderError, SceneFormatError, FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        return 1

    if args.seed is None:
        logger.info("Reproduce with --seed %d", settings.seed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
