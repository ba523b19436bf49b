# main.py
"""Render a scene of spheres to an image file.

Usage:
    python main.py [OUTPUT] [options]

Options:
    --scene FILE        JSON scene file (default: built-in scene)
    --width WIDTH       Image width in pixels
    --height HEIGHT     Image height in pixels
    --samples SAMPLES   Samples per pixel
    --max-depth DEPTH   Maximum number of bounces per ray
    --seed SEED         Seed for the random source
    --preview           Show the result in a window after saving
    --quiet             Suppress progress output

The output format follows the extension: .png or .bmp.
"""
import argparse
import random
import sys
import time
from typing import List, Optional

from geometry.scene_loader import build_world, default_scene_descriptors, load_scene_file
from renderer.config import RenderConfig
from renderer.image_io import save_image
from renderer.raytracer import Renderer


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a scene of spheres with a Monte Carlo ray tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "output",
        nargs="?",
        default="image.png",
        help="Output file path, .png or .bmp (default: image.png)",
    )
    parser.add_argument("--scene", type=str, default=None, help="JSON scene file")
    parser.add_argument("--width", type=int, default=None, help="Image width in pixels (default: 200)")
    parser.add_argument("--height", type=int, default=None, help="Image height in pixels (default: 100)")
    parser.add_argument("--samples", type=int, default=None, help="Samples per pixel (default: 100)")
    parser.add_argument("--max-depth", type=int, default=None, help="Maximum bounces per ray (default: 50)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible renders")
    parser.add_argument("--preview", action="store_true", help="Show the image in a window when done")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace, render_section=None, camera_section=None) -> RenderConfig:
    """Defaults, then the scene file sections, then command-line flags."""
    config = RenderConfig.from_dict(render_section, camera_section)
    return config.with_overrides(
        image_width=args.width,
        image_height=args.height,
        samples_per_pixel=args.samples,
        max_bounce_depth=args.max_depth,
        seed=args.seed,
    )


def run(args: argparse.Namespace) -> None:
    verbose = not args.quiet

    if args.scene:
        descriptors, render_section, camera_section = load_scene_file(args.scene)
    else:
        descriptors, render_section, camera_section = default_scene_descriptors(), {}, {}

    config = build_config(args, render_section, camera_section)
    world = build_world(descriptors)
    camera = config.make_camera()
    seed = config.seed if config.seed is not None else random.randrange(2**32)
    rng = random.Random(seed)

    if verbose:
        print("=== Rendering ===")
        print(f"Scene: {args.scene or 'built-in'} ({len(world)} spheres)")
        print(f"Resolution: {config.image_width}x{config.image_height}")
        print(f"Samples per pixel: {config.samples_per_pixel}")
        print(f"Max bounces: {config.max_bounce_depth}")
        print(f"Seed: {seed}")

    renderer = Renderer(
        config.image_width,
        config.image_height,
        samples_per_pixel=config.samples_per_pixel,
        max_depth=config.max_bounce_depth,
        verbose=verbose,
    )
    start_time = time.perf_counter()
    pixels = renderer.render(camera, world, rng)
    total_time = time.perf_counter() - start_time

    save_image(pixels, args.output)
    if verbose:
        print(f"Saved to: {args.output}")
        print(f"Total time: {total_time:.2f}s")

    if args.preview:
        from renderer.preview import show_preview
        show_preview(pixels)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit status."""
    args = parse_args(argv)
    try:
        run(args)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
