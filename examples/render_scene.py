#!/usr/bin/env python3
"""Render one frame of the scene headless and save it as PNG.

The frame shows the tessellated sphere at the origin and the ray-marched
sphere lattice clipped to its transformed bounding box.

Usage:
    python -m examples.render_scene [options]

Options:
    --width WIDTH            Image width in pixels (default: 640)
    --height HEIGHT          Image height in pixels (default: 480)
    --output OUTPUT          Output file path (default: sdfview.png)
    --translate X Y Z        Translation of the lattice box (default: 0 0 0)
    --rotate X Y Z           Euler angles in degrees (default: 0 0 0)
    --scale X Y Z            Half extent of the lattice box (default: 50 50 50)
    --cpu                    Force the CPU backend
    --verbose                Enable debug logging

Example:
    python -m examples.render_scene --rotate 0 45 0 --scale 40 60 40
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

# Ensure the src directory is in the Python path for direct execution
_src_root = Path(__file__).parent.parent / "src"
if str(_src_root) not in sys.path:
    sys.path.insert(0, str(_src_root))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the sphere and the ray-marched lattice to PNG.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=640,
        help="Image width in pixels (default: 640)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=480,
        help="Image height in pixels (default: 480)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="sdfview.png",
        help="Output file path (default: sdfview.png)",
    )
    parser.add_argument(
        "--translate",
        type=float,
        nargs=3,
        metavar=("X", "Y", "Z"),
        default=(0.0, 0.0, 0.0),
        help="Translation of the lattice box (default: 0 0 0)",
    )
    parser.add_argument(
        "--rotate",
        type=float,
        nargs=3,
        metavar=("X", "Y", "Z"),
        default=(0.0, 0.0, 0.0),
        help="Rotation in degrees, applied X then Y then Z (default: 0 0 0)",
    )
    parser.add_argument(
        "--scale",
        type=float,
        nargs=3,
        metavar=("X", "Y", "Z"),
        default=(50.0, 50.0, 50.0),
        help="Half extent of the lattice box (default: 50 50 50)",
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


def render_scene(
    width: int = 640,
    height: int = 480,
    output_path: str = "sdfview.png",
    translation: tuple[float, float, float] = (0.0, 0.0, 0.0),
    rotation: tuple[float, float, float] = (0.0, 0.0, 0.0),
    scale: tuple[float, float, float] = (50.0, 50.0, 50.0),
) -> Path:
    """Render one frame and save it to file.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from sdfview.config import SceneConfig
    from sdfview.preview.export import save_png
    from sdfview.render.context import RenderContext
    from sdfview.scene.composer import SceneComposer
    from sdfview.scene.params import TransformParams

    config = SceneConfig()
    params = TransformParams(
        translation=tuple(translation),
        rotation=tuple(rotation),
        scale=tuple(scale),
    ).clamped()

    print(f"Compiling programs ({width}x{height})...")
    start_time = time.time()
    context = RenderContext(width, height, clear_color=config.clear_color)
    composer = SceneComposer(context, config)

    print("Rendering frame...")
    composer.render_frame(params)

    output_file = Path(output_path)
    save_png(context, str(output_file))

    print(f"Saved to: {output_file.absolute()}")
    print(f"Total time: {time.time() - start_time:.2f}s")
    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    from sdfview.config import init_taichi
    from sdfview.logging_config import setup_logging

    if args.verbose:
        setup_logging(logging.DEBUG)

    backend = init_taichi(prefer_gpu=not args.cpu)
    print(f"Taichi backend: {backend}")

    try:
        render_scene(
            width=args.width,
            height=args.height,
            output_path=args.output,
            translation=args.translate,
            rotation=args.rotate,
            scale=args.scale,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
