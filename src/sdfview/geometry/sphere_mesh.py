"""UV-sphere tessellation with pole fans and quad bands.

The sphere is built from a south pole vertex, ``theta_segments - 1`` rings of
``phi_segments`` vertices each, and a north pole vertex. Indices form a
triangle fan at each pole and two triangles per quad in every band between
adjacent rings. All triangles wind counter-clockwise when viewed from outside
so the mesh survives back-face culling.

Counts for ``n = phi_segments`` and ``m = theta_segments``:
    vertices = 2 + (m - 1) * n
    indices  = 6 * n + 6 * n * (m - 2)

Example:
    >>> from sdfview.geometry.sphere_mesh import generate_sphere
    >>> mesh = generate_sphere(30.0, 16, 32)
    >>> mesh.vertex_count, mesh.index_count
    (482, 2880)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import NamedTuple

import numpy as np
import numpy.typing as npt


class Vertex(NamedTuple):
    """A single mesh vertex."""

    position: tuple[float, float, float]
    normal: tuple[float, float, float]


@dataclass
class Mesh:
    """Indexed triangle mesh with per-vertex normals.

    Attributes:
        positions: Vertex positions, shape (N, 3), float32.
        normals: Unit vertex normals, shape (N, 3), float32.
        indices: Triangle list indices, shape (M,), uint16. Every index is
            below N and M is a multiple of 3.
    """

    positions: npt.NDArray[np.float32]
    normals: npt.NDArray[np.float32]
    indices: npt.NDArray[np.uint16]

    @property
    def vertex_count(self) -> int:
        return int(self.positions.shape[0])

    @property
    def index_count(self) -> int:
        return int(self.indices.shape[0])

    def vertex(self, i: int) -> Vertex:
        """Return vertex ``i`` as a (position, normal) pair."""
        p = self.positions[i]
        n = self.normals[i]
        return Vertex(
            (float(p[0]), float(p[1]), float(p[2])),
            (float(n[0]), float(n[1]), float(n[2])),
        )

    def triangles(self) -> npt.NDArray[np.uint16]:
        """Return the index buffer reshaped to (M / 3, 3)."""
        return self.indices.reshape(-1, 3)


def _add_triangle(indices: npt.NDArray[np.uint16], i: int, v0: int, v1: int, v2: int) -> int:
    indices[i] = v0
    indices[i + 1] = v1
    indices[i + 2] = v2
    return i + 3


def _add_quad(
    indices: npt.NDArray[np.uint16], i: int, v00: int, v10: int, v01: int, v11: int
) -> int:
    """Write a quad as triangles (v00, v10, v01) and (v11, v01, v10)."""
    i = _add_triangle(indices, i, v00, v10, v01)
    return _add_triangle(indices, i, v11, v01, v10)


def generate_sphere(radius: float, theta_segments: int, phi_segments: int) -> Mesh:
    """Tessellate a sphere centered at the origin.

    Preconditions (not checked): ``radius > 0``, ``theta_segments >= 2``,
    ``phi_segments >= 3`` and a vertex count that fits in uint16.

    Args:
        radius: Sphere radius.
        theta_segments: Number of latitude bands from pole to pole.
        phi_segments: Number of longitude steps around each ring.

    Returns:
        The sphere mesh. With ``theta_segments == 2`` there is a single ring
        and the mesh consists of the two pole fans only.
    """
    n = phi_segments
    vertex_count = 2 + (theta_segments - 1) * n
    index_count = 6 * n + 6 * n * (theta_segments - 2)

    positions = np.zeros((vertex_count, 3), dtype=np.float32)
    normals = np.zeros((vertex_count, 3), dtype=np.float32)
    indices = np.zeros(index_count, dtype=np.uint16)

    theta_step = math.pi / theta_segments
    phi_step = 2.0 * math.pi / n

    positions[0] = (0.0, -radius, 0.0)
    normals[0] = (0.0, -1.0, 0.0)

    # Rings from just above the south pole up to just below the north pole.
    # Longitude runs clockwise seen from +y, which makes the index order CCW.
    hi = np.arange(1, theta_segments, dtype=np.float64)
    pi = np.arange(n, dtype=np.float64)
    theta = (math.pi - hi * theta_step)[:, None]
    phi = (pi * phi_step)[None, :]
    ring = np.stack(
        np.broadcast_arrays(
            radius * np.sin(theta) * np.cos(-phi),
            radius * np.cos(theta),
            radius * np.sin(theta) * np.sin(-phi),
        ),
        axis=-1,
    ).reshape(-1, 3)
    positions[1:-1] = ring
    normals[1:-1] = ring / np.linalg.norm(ring, axis=1, keepdims=True)

    positions[-1] = (0.0, radius, 0.0)
    normals[-1] = (0.0, 1.0, 0.0)

    i = 0
    for p in range(n):
        i = _add_triangle(indices, i, 0, p + 2 if p != n - 1 else 1, p + 1)

    for h in range(theta_segments - 2):
        lower = h * n + 1
        upper = (h + 1) * n + 1
        for p in range(n):
            q = p + 1 if p != n - 1 else 0
            i = _add_quad(indices, i, lower + p, lower + q, upper + p, upper + q)

    last = (theta_segments - 2) * n + 1
    for p in range(n):
        q = p + 1 if p != n - 1 else 0
        i = _add_triangle(indices, i, vertex_count - 1, last + p, last + q)

    return Mesh(positions=positions, normals=normals, indices=indices)
