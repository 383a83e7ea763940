"""Scene defaults and Taichi runtime initialization."""

from __future__ import annotations

import logging
import platform
from dataclasses import dataclass, field

import taichi as ti

from sdfview.camera.perspective import PerspectiveCamera
from sdfview.scene.params import TransformParams

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SceneConfig:
    """Fixed configuration of the visualized scene.

    Attributes:
        sphere_radius: Radius of the tessellated sphere.
        theta_segments: Latitude bands of the sphere.
        phi_segments: Longitude steps of the sphere.
        camera: Camera placement and clip planes.
        clear_color: Background RGB.
        initial_params: Transform parameters shown when the app starts.
    """

    sphere_radius: float = 30.0
    theta_segments: int = 16
    phi_segments: int = 32
    camera: PerspectiveCamera = field(default_factory=PerspectiveCamera)
    clear_color: tuple[float, float, float] = (0.3, 0.3, 0.3)
    initial_params: TransformParams = field(default_factory=TransformParams)


def init_taichi(prefer_gpu: bool = True) -> str:
    """Initialize Taichi with the best available backend.

    On macOS, prefers Metal. Falls back to CPU if no GPU backend starts.
    Fast math stays off: the slab test relies on IEEE infinities.

    Returns:
        Name of the backend being used.
    """
    if prefer_gpu:
        if platform.system() == "Darwin":
            try:
                ti.init(arch=ti.metal, fast_math=False)
                return "Metal (GPU)"
            except Exception:
                logger.debug("Metal backend unavailable", exc_info=True)

        try:
            ti.init(arch=ti.gpu, fast_math=False)
            return "GPU"
        except Exception:
            logger.debug("GPU backend unavailable", exc_info=True)

    ti.init(arch=ti.cpu, fast_math=False)
    return "CPU"
