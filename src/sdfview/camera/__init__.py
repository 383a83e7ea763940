"""Camera module.

Components:
    perspective: Look-at camera with a GL-style perspective projection

The camera is fixed for the lifetime of the viewer; only the projection
depends on the render target's aspect ratio.
"""

from .perspective import PerspectiveCamera

__all__ = [
    "PerspectiveCamera",
]
