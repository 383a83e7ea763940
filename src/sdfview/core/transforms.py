"""4x4 matrix helpers for building model, view and projection transforms.

Matrices are NumPy float32 arrays in column-vector convention: a point ``p``
is transformed as ``M @ [p, 1]`` and ``A @ B`` applies ``B`` first. The same
layout is uploaded unchanged into Taichi ``mat4`` uniforms, so ``m @ v``
inside a kernel agrees with NumPy on the host.

Example:
    >>> from sdfview.core.transforms import rotate_xyz, translate
    >>> model = translate(10.0, 0.0, 0.0) @ rotate_xyz(0.0, 0.5, 0.0)
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np
import numpy.typing as npt

Matrix4 = npt.NDArray[np.float32]


def identity() -> Matrix4:
    """Return the 4x4 identity matrix."""
    return np.eye(4, dtype=np.float32)


def translate(x: float, y: float, z: float) -> Matrix4:
    """Return a translation matrix."""
    m = identity()
    m[0, 3] = x
    m[1, 3] = y
    m[2, 3] = z
    return m


def scale(x: float, y: float, z: float) -> Matrix4:
    """Return a non-uniform scale matrix."""
    return np.diag(np.array([x, y, z, 1.0], dtype=np.float32))


def rotate_x(angle: float) -> Matrix4:
    """Return a rotation about the X axis (radians, counter-clockwise)."""
    c, s = math.cos(angle), math.sin(angle)
    m = identity()
    m[1, 1], m[1, 2] = c, -s
    m[2, 1], m[2, 2] = s, c
    return m


def rotate_y(angle: float) -> Matrix4:
    """Return a rotation about the Y axis (radians, counter-clockwise)."""
    c, s = math.cos(angle), math.sin(angle)
    m = identity()
    m[0, 0], m[0, 2] = c, s
    m[2, 0], m[2, 2] = -s, c
    return m


def rotate_z(angle: float) -> Matrix4:
    """Return a rotation about the Z axis (radians, counter-clockwise)."""
    c, s = math.cos(angle), math.sin(angle)
    m = identity()
    m[0, 0], m[0, 1] = c, -s
    m[1, 0], m[1, 1] = s, c
    return m


def rotate_xyz(x: float, y: float, z: float) -> Matrix4:
    """Return the Euler rotation that applies X first, then Y, then Z.

    Args:
        x: Rotation about the X axis in radians.
        y: Rotation about the Y axis in radians.
        z: Rotation about the Z axis in radians.

    Returns:
        ``rotate_z(z) @ rotate_y(y) @ rotate_x(x)``.
    """
    return rotate_z(z) @ rotate_y(y) @ rotate_x(x)


def perspective(aspect: float, fovy: float, near: float, far: float) -> Matrix4:
    """Return an OpenGL-style perspective projection.

    Eye space looks down -Z; depth maps to NDC z in [-1, 1].

    Args:
        aspect: Viewport width divided by height.
        fovy: Vertical field of view in degrees.
        near: Distance to the near clip plane (positive).
        far: Distance to the far clip plane (positive, > near).
    """
    f = 1.0 / math.tan(math.radians(fovy) / 2.0)
    m = np.zeros((4, 4), dtype=np.float32)
    m[0, 0] = f / aspect
    m[1, 1] = f
    m[2, 2] = -(far + near) / (far - near)
    m[2, 3] = -2.0 * far * near / (far - near)
    m[3, 2] = -1.0
    return m


def look_at(
    eye: Sequence[float],
    target: Sequence[float],
    up: Sequence[float],
) -> Matrix4:
    """Return the world-to-camera (view) matrix for a look-at camera.

    Builds the orthonormal basis (u, v, w) with w pointing from the target
    back toward the eye, u to the right and v up.
    """
    eye_v = np.asarray(eye, dtype=np.float32)
    target_v = np.asarray(target, dtype=np.float32)
    up_v = np.asarray(up, dtype=np.float32)

    w = eye_v - target_v
    w = w / np.linalg.norm(w)
    u = np.cross(up_v, w)
    u = u / np.linalg.norm(u)
    v = np.cross(w, u)

    m = identity()
    m[0, :3] = u
    m[1, :3] = v
    m[2, :3] = w
    m[0, 3] = -np.dot(u, eye_v)
    m[1, 3] = -np.dot(v, eye_v)
    m[2, 3] = -np.dot(w, eye_v)
    return m


def inverse(m: Matrix4) -> Matrix4:
    """Return the inverse of a 4x4 matrix."""
    return np.linalg.inv(m.astype(np.float64)).astype(np.float32)


def apply_point(m: Matrix4, p: Sequence[float]) -> npt.NDArray[np.float32]:
    """Transform a 3D point on the host, dividing by w."""
    h = m @ np.array([p[0], p[1], p[2], 1.0], dtype=np.float32)
    return (h[:3] / h[3]).astype(np.float32)
