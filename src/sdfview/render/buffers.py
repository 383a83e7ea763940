"""Vertex and index buffers resident in Taichi fields."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
import taichi as ti

if TYPE_CHECKING:
    from sdfview.geometry.sphere_mesh import Mesh

logger = logging.getLogger(__name__)


class VertexArray:
    """Positions, normals and indices of one mesh, uploaded once.

    Indices are stored as 32-bit integers on the device; the host-side mesh
    keeps its uint16 index buffer.

    Attributes:
        positions: Vector field of vertex positions.
        normals: Vector field of vertex normals.
        indices: Scalar field of triangle indices.
        vertex_count: Number of vertices.
        index_count: Number of indices (3 per triangle).
    """

    def __init__(
        self,
        positions: np.ndarray,
        normals: np.ndarray,
        indices: np.ndarray,
    ) -> None:
        self.vertex_count = int(positions.shape[0])
        self.index_count = int(indices.shape[0])

        self.positions = ti.Vector.field(3, dtype=ti.f32, shape=self.vertex_count)
        self.normals = ti.Vector.field(3, dtype=ti.f32, shape=self.vertex_count)
        self.indices = ti.field(dtype=ti.i32, shape=self.index_count)

        self.positions.from_numpy(np.ascontiguousarray(positions, dtype=np.float32))
        self.normals.from_numpy(np.ascontiguousarray(normals, dtype=np.float32))
        self.indices.from_numpy(np.ascontiguousarray(indices, dtype=np.int32))

        logger.debug(
            "Uploaded vertex array: %d vertices, %d indices",
            self.vertex_count,
            self.index_count,
        )

    @classmethod
    def from_mesh(cls, mesh: Mesh) -> VertexArray:
        """Upload a generated mesh."""
        return cls(mesh.positions, mesh.normals, mesh.indices)

    def __repr__(self) -> str:
        return f"VertexArray(vertices={self.vertex_count}, indices={self.index_count})"
