"""Image export utilities for rendered frames.

Supported formats:
    - PNG (8-bit RGB via Pillow)

The color buffer already holds display values in [0, 1] (normals mapped to
colors), so export only clamps and quantizes; no tone mapping is applied.

Example:
    >>> from sdfview.preview.export import save_png
    >>> composer.render_frame(params)
    >>> save_png(context, "frame.png")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from sdfview.render.context import RenderContext

logger = logging.getLogger(__name__)


def image_to_uint8(image: npt.NDArray[np.float32]) -> npt.NDArray[np.uint8]:
    """Convert a float image in [0, 1] to uint8, rounding to nearest.

    Args:
        image: Image array of shape (H, W, 3).

    Returns:
        8-bit image array of shape (H, W, 3).
    """
    clipped = np.clip(image, 0.0, 1.0)
    return np.round(clipped * 255.0).astype(np.uint8)


def save_png_from_array(image: npt.NDArray[np.float32], filepath: str) -> None:
    """Save an (H, W, 3) float image, top row first, as PNG.

    Raises:
        ValueError: If the array is not an RGB image.
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image.shape}")

    pil_image = PILImage.fromarray(image_to_uint8(image))
    pil_image.save(filepath)
    logger.info("Saved %dx%d PNG to %s", image.shape[1], image.shape[0], filepath)


def save_png(context: RenderContext, filepath: str) -> None:
    """Save the active color region of a render context as PNG."""
    save_png_from_array(context.read_color(), filepath)


def compute_rmse(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
) -> float:
    """Compute root mean squared error between two images.

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
