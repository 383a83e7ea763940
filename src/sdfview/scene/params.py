"""Adjustable transform parameters of the implicit object.

TransformParams is frozen: the parameter panel replaces the whole value when
a slider moves, and the composer reads one value per frame. A frame can
therefore never observe a half-updated set of parameters.

Example:
    >>> params = TransformParams()
    >>> params.scale
    (50.0, 50.0, 50.0)
    >>> moved = params.with_translation(10.0, 0.0, 0.0)
"""

from __future__ import annotations

from dataclasses import dataclass, replace

Vector3 = tuple[float, float, float]

# Slider ranges exposed by the parameter panel
TRANSLATION_RANGE = (-100.0, 100.0)
ROTATION_RANGE = (-180.0, 180.0)
SCALE_RANGE = (0.0, 100.0)


def _clamp3(values: Vector3, bounds: tuple[float, float]) -> Vector3:
    low, high = bounds
    return (
        min(max(values[0], low), high),
        min(max(values[1], low), high),
        min(max(values[2], low), high),
    )


@dataclass(frozen=True)
class TransformParams:
    """Transform of the implicit object.

    Attributes:
        translation: Offset along x, y, z.
        rotation: Euler angles in degrees about x, y, z (applied X, Y, Z).
        scale: Object-space half extent of the bounding box per axis.
    """

    translation: Vector3 = (0.0, 0.0, 0.0)
    rotation: Vector3 = (0.0, 0.0, 0.0)
    scale: Vector3 = (50.0, 50.0, 50.0)

    def clamped(self) -> TransformParams:
        """Return a copy with every component inside its slider range."""
        return TransformParams(
            translation=_clamp3(self.translation, TRANSLATION_RANGE),
            rotation=_clamp3(self.rotation, ROTATION_RANGE),
            scale=_clamp3(self.scale, SCALE_RANGE),
        )

    def with_translation(self, x: float, y: float, z: float) -> TransformParams:
        return replace(self, translation=(x, y, z))

    def with_rotation(self, x: float, y: float, z: float) -> TransformParams:
        return replace(self, rotation=(x, y, z))

    def with_scale(self, x: float, y: float, z: float) -> TransformParams:
        return replace(self, scale=(x, y, z))
