#!/usr/bin/env python3
"""Render the demo scene.

This script renders the demo scene (four balls and a distant light over a
checkerboard floor) end to end: it builds the scene, sets up the camera,
renders one ray per pixel, and saves a PNG.

Usage:
    python -m examples.render_demo_scene [options]

Options:
    --width WIDTH       Image width in pixels (default: 512)
    --height HEIGHT     Image height in pixels (default: 512)
    --fov DEGREES       Vertical field of view in degrees (default: 60)
    --output OUTPUT     Output file path (default: demo_scene.png)
    --show              Open a Matplotlib preview after rendering
    --cpu               Force the CPU backend
    --verbose           Enable debug logging

Example:
    python -m examples.render_demo_scene --width 256 --height 256 --show
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the demo scene.",
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
        "--fov",
        type=float,
        default=60.0,
        help="Vertical field of view in degrees (default: 60)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="demo_scene.png",
        help="Output file path (default: demo_scene.png)",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Open a Matplotlib preview after rendering",
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the CPU backend",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def render_demo_scene(
    width: int = 512,
    height: int = 512,
    vfov: float = 60.0,
    output_path: str = "demo_scene.png",
    show: bool = False,
) -> Path:
    """Render the demo scene and save to file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        vfov: Vertical field of view in degrees.
        output_path: Output file path (PNG).
        show: If True, open a Matplotlib preview after saving.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from src.raycaster.camera.pinhole import setup_camera
    from src.raycaster.core.renderer import Renderer
    from src.raycaster.preview.display import show_image
    from src.raycaster.preview.export import save_png
    from src.raycaster.scene.demo import create_demo_scene

    print(f"Creating demo scene ({width}x{height}, fov {vfov:g})...")
    scene, camera = create_demo_scene(width=width, height=height, vfov=vfov)
    setup_camera(camera)

    renderer = Renderer(width, height)

    print(f"Rendering {scene.get_object_count()} objects...")

    def report(elapsed: float) -> None:
        pixels_per_sec = (width * height) / elapsed if elapsed > 0 else 0
        print(f"  Rendered in {elapsed:.2f}s ({pixels_per_sec / 1e6:.2f} Mpixel/s)")

    renderer.render(callback=report)

    output_file = Path(output_path)
    save_png(renderer, str(output_file))
    print(f"Saved to: {output_file.absolute()}")

    if show:
        show_image(renderer, title=f"Demo scene - {width}x{height}")

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    # Use GPU if available, fall back to CPU
    if args.cpu:
        ti.init(arch=ti.cpu)
        print("Using CPU backend")
    else:
        try:
            ti.init(arch=ti.gpu)
            print("Using GPU backend")
        except Exception:
            ti.init(arch=ti.cpu)
            print("Using CPU backend")

    start_time = time.time()
    try:
        render_demo_scene(
            width=args.width,
            height=args.height,
            vfov=args.fov,
            output_path=args.output,
            show=args.show,
        )
    except (ValueError, RuntimeError, OSError) as e:
        logger.debug("Render failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Total time: {time.time() - start_time:.2f}s")
    return 0


if __name__ == "__main__":
    sys.exit(main())
