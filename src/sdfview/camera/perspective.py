"""Look-at perspective camera producing view and projection matrices.

The camera is described by where it sits (lookfrom), what it looks at
(lookat), an up vector, a vertical field of view and the clip planes. From
these it builds the orthonormal basis (u, v, w):
- w: points from lookat toward lookfrom (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

and the matrices the rasterizer needs. The aspect ratio is not stored: it
comes from the render target every frame, so resizing never goes stale.

Example:
    >>> from sdfview.camera.perspective import PerspectiveCamera
    >>>
    >>> camera = PerspectiveCamera(
    ...     lookfrom=(150.0, 150.0, 150.0),
    ...     lookat=(0.0, 0.0, 0.0),
    ...     vup=(0.0, 1.0, 0.0),
    ...     vfov=60.0,
    ... )
    >>> vp = camera.projection_matrix(16.0 / 9.0) @ camera.view_matrix()
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from sdfview.core.transforms import Matrix4, look_at, perspective


@dataclass(frozen=True)
class PerspectiveCamera:
    """Configuration for a perspective camera.

    Attributes:
        lookfrom: Camera position in world space (x, y, z).
        lookat: Point the camera is looking at in world space (x, y, z).
        vup: Up direction vector for camera orientation (typically (0, 1, 0)).
        vfov: Vertical field of view in degrees.
        near: Distance to the near clip plane.
        far: Distance to the far clip plane.
    """

    lookfrom: tuple[float, float, float] = (150.0, 150.0, 150.0)
    lookat: tuple[float, float, float] = (0.0, 0.0, 0.0)
    vup: tuple[float, float, float] = (0.0, 1.0, 0.0)
    vfov: float = 60.0
    near: float = 0.01
    far: float = 1000.0

    @property
    def position(self) -> npt.NDArray[np.float32]:
        """Camera position as a float32 array."""
        return np.array(self.lookfrom, dtype=np.float32)

    def view_matrix(self) -> Matrix4:
        """World-to-camera transform."""
        return look_at(self.lookfrom, self.lookat, self.vup)

    def projection_matrix(self, aspect_ratio: float) -> Matrix4:
        """Camera-to-clip transform for the given width/height ratio."""
        return perspective(aspect_ratio, self.vfov, self.near, self.far)

    def view_projection(self, aspect_ratio: float) -> Matrix4:
        """Projection applied after view: ``P @ V``."""
        return self.projection_matrix(aspect_ratio) @ self.view_matrix()

    def get_basis(self) -> dict[str, tuple[float, float, float]]:
        """Return the camera basis vectors for debugging.

        Returns:
            Dictionary with origin, u, v, w.
        """
        view = self.view_matrix()
        return {
            "origin": tuple(float(c) for c in self.lookfrom),
            "u": tuple(float(c) for c in view[0, :3]),
            "v": tuple(float(c) for c in view[1, :3]),
            "w": tuple(float(c) for c in view[2, :3]),
        }
