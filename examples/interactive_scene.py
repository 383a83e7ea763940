#!/usr/bin/env python3
"""Interactive viewer with real-time transform controls.

Opens a window showing the tessellated sphere and the ray-marched sphere
lattice, with a panel to move, rotate and scale the lattice's bounding box.

Usage:
    python -m examples.interactive_scene [--width W] [--height H] [--cpu] [--verbose]

Controls:
    - Translate X/Y/Z: Offset of the lattice box (-100 to 100)
    - Rotate X/Y/Z: Euler angles in degrees (-180 to 180)
    - Scale X/Y/Z: Half extent of the lattice box (0 to 100)
    - Export PNG: Save the current frame with a timestamp
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Ensure the src directory is in the Python path for direct execution
_src_root = Path(__file__).parent.parent / "src"
if str(_src_root) not in sys.path:
    sys.path.insert(0, str(_src_root))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Interactive sdfview window.")
    parser.add_argument("--width", type=int, default=800, help="Window width (default: 800)")
    parser.add_argument("--height", type=int, default=600, help="Window height (default: 600)")
    parser.add_argument("--cpu", action="store_true", help="Force the CPU backend")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the interactive viewer.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    args = parse_args(argv)

    from sdfview.config import init_taichi
    from sdfview.logging_config import setup_logging

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    # Initialize Taichi first (before any field is allocated)
    backend = init_taichi(prefer_gpu=not args.cpu)
    print(f"Taichi backend: {backend}")

    from sdfview.preview.interactive import InteractivePreview

    if not InteractivePreview.is_display_available():
        print("Error: No display available. Cannot run interactive preview.")
        print("This script requires a graphical display environment.")
        return 1

    print(f"Creating preview window ({args.width}x{args.height})...")
    try:
        preview = InteractivePreview(args.width, args.height)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("Starting interactive rendering...")
    print("  - Adjust sliders to move, rotate and scale the lattice")
    print("  - Click 'Export PNG' to save the current frame")
    print("  - Close window to exit")
    print()

    try:
        preview.run()
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
    finally:
        preview.close()
        print("Preview window closed.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
