#!/usr/bin/env python3
"""Render the random sphere field scene.

Builds the "one weekend" cover scene (a ground sphere, a grid of small
randomly coloured diffuse, metal and glass spheres, and three large
showcase spheres), renders a single frame on one CPU thread, and saves
and/or displays it.

Usage:
    python -m examples.render_random_scene [options]

Options:
    --width WIDTH           Image width in pixels (default: 1280)
    --height HEIGHT         Image height in pixels (default: 720)
    --samples SAMPLES       Samples per pixel (default: 100)
    --max-depth DEPTH       Maximum bounces per path (default: 50)
    --seed SEED             Seed for the scene layout (default: random)
    --output OUTPUT         Output PNG path (default: random_scene.png)
    --no-save               Render without writing the PNG
    --show                  Display the frame in a window after rendering
    --verbose / --quiet     More or less log output

Example:
    python -m examples.render_random_scene --width 400 --height 225 --samples 20
"""

import argparse
import logging
import sys
from pathlib import Path

import taichi as ti

logger = logging.getLogger("render_random_scene")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the random sphere field scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=1280,
        help="Image width in pixels (default: 1280)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=720,
        help="Image height in pixels (default: 720)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=100,
        help="Samples per pixel (default: 100)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=50,
        help="Maximum bounces per path (default: 50)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the scene layout (default: random)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="random_scene.png",
        help="Output PNG path (default: random_scene.png)",
    )
    parser.add_argument(
        "--no-save",
        action="store_true",
        help="Do not write the output file",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Display the frame in a window after rendering",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    verbosity.add_argument(
        "--quiet",
        action="store_true",
        help="Only log warnings and errors",
    )
    return parser.parse_args(argv)


def configure_logging(verbose: bool, quiet: bool) -> None:
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def render_random_scene(
    width: int = 1280,
    height: int = 720,
    samples_per_pixel: int = 100,
    max_depth: int = 50,
    seed: int | None = None,
    output_path: str | None = "random_scene.png",
    show: bool = False,
) -> Path | None:
    """Render the random scene and save and/or show it.

    Taichi must be initialized before calling this.

    Returns:
        Path to the saved image, or None when output_path is None.
    """
    # Lazy imports to allow Taichi initialization first
    from weekend_raytracer.core.renderer import RayTracer
    from weekend_raytracer.preview.display import show_frame
    from weekend_raytracer.preview.export import save_png

    tracer = RayTracer(width, height, samples_per_pixel, max_depth, seed=seed)
    frame = tracer.render()

    output_file = None
    if output_path is not None:
        output_file = Path(output_path)
        save_png(frame, width, height, output_file)

    if show:
        show_frame(frame, width, height)

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    configure_logging(args.verbose, args.quiet)

    # One serialized CPU thread; the renderer is single-threaded
    ti.init(arch=ti.cpu, cpu_max_num_threads=1)

    try:
        render_random_scene(
            width=args.width,
            height=args.height,
            samples_per_pixel=args.samples,
            max_depth=args.max_depth,
            seed=args.seed,
            output_path=None if args.no_save else args.output,
            show=args.show,
        )
        return 0
    except Exception:
        logger.exception("Rendering failed")
        return 1


if __name__ == "__main__":
    sys.exit(main())
