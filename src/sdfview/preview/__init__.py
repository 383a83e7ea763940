"""Preview module for output and visualization.

Components:
    export: PNG export via Pillow
    interactive: Taichi GGUI viewer window with the parameter panel

Example:
    >>> from sdfview.preview import InteractivePreview, save_png
    >>> preview = InteractivePreview(800, 600)
    >>> preview.run()
"""

from sdfview.preview.export import (
    compute_rmse,
    image_to_uint8,
    save_png,
    save_png_from_array,
)
from sdfview.preview.interactive import (
    FrameTimer,
    InteractivePreview,
    ResizeHandler,
    fit_context_to_window,
)

__all__ = [
    # Interactive preview
    "InteractivePreview",
    "FrameTimer",
    "ResizeHandler",
    "fit_context_to_window",
    # Export functions
    "save_png",
    "save_png_from_array",
    "image_to_uint8",
    "compute_rmse",
]
