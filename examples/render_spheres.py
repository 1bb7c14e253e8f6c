#!/usr/bin/env python3
"""Render the random-spheres scene.

This script renders one frame of the procedural random-spheres scene into
the in-memory render target and reports timing and the average pixel
color. No image file is written.

Usage:
    python -m examples.render_spheres [options]

Options:
    --width WIDTH       Image width in pixels (default: 512)
    --height HEIGHT     Image height in pixels (default: 512)
    --spheres COUNT     Number of random spheres (default: 40)
    --seed SEED         Random seed for sphere placement (default: 43)
    --max-depth DEPTH   Bounce depth cap (default: 8)
    --cpu               Force the CPU backend
    --quiet             Suppress progress output

Example:
    python -m examples.render_spheres --width 256 --height 256 --max-depth 4
"""

from __future__ import annotations

import argparse
import sys
import time

import taichi as ti


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the random-spheres scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=512,
        help="Image width in pixels (default: 512)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=512,
        help="Image height in pixels (default: 512)",
    )
    parser.add_argument(
        "--spheres",
        type=int,
        default=40,
        help="Number of random spheres (default: 40)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=43,
        help="Random seed for sphere placement (default: 43)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=8,
        help="Bounce depth cap (default: 8)",
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the CPU backend",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args()


def render_spheres(
    width: int = 512,
    height: int = 512,
    num_spheres: int = 40,
    seed: int = 43,
    max_depth: int = 8,
    quiet: bool = False,
):
    """Render the random-spheres scene.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        num_spheres: Number of random spheres.
        seed: Random seed for sphere placement.
        max_depth: Bounce depth cap.
        quiet: If True, suppress progress output.

    Returns:
        The rendered image as a (height, width, 3) uint8 array.
    """
    # Lazy imports to allow Taichi initialization first
    from src.softrt.core.config import ShadingConfig
    from src.softrt.core.integrator import get_image_rgb8, render_image, setup_render_target
    from src.softrt.scene.random_spheres import RandomSpheresParams, create_random_spheres_scene

    if not quiet:
        print(f"Creating random-spheres scene ({num_spheres} spheres, seed {seed})...")

    scene, camera = create_random_spheres_scene(
        RandomSpheresParams(num_spheres=num_spheres, seed=seed)
    )
    config = ShadingConfig(max_depth=max_depth)

    setup_render_target(width, height)

    if not quiet:
        print(f"Rendering {width}x{height}...")

    start_time = time.time()
    render_image(scene, camera, config)
    image = get_image_rgb8()
    total_time = time.time() - start_time

    if not quiet:
        mean = image.reshape(-1, 3).mean(axis=0)
        print(f"Mean color: ({mean[0]:.1f}, {mean[1]:.1f}, {mean[2]:.1f})")
        print(f"Total time: {total_time:.2f}s")

    return image


def main() -> int:
    """Main entry point."""
    args = parse_args()

    # Initialize Taichi
    # Use GPU if available, fall back to CPU
    if args.cpu:
        ti.init(arch=ti.cpu)
    else:
        try:
            ti.init(arch=ti.gpu)
            if not args.quiet:
                print("Using GPU backend")
        except Exception:
            ti.init(arch=ti.cpu)
            if not args.quiet:
                print("Using CPU backend")

    try:
        render_spheres(
            width=args.width,
            height=args.height,
            num_spheres=args.spheres,
            seed=args.seed,
            max_depth=args.max_depth,
            quiet=args.quiet,
        )
        return 0
    except (ValueError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
