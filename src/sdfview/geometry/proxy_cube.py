"""Vertex-free unit cube used as the bounding proxy of the implicit object.

The cube is drawn with 36 vertex invocations and no vertex buffer. Each
invocation index ``vid`` selects a corner through ``CUBE_INDICES`` and a face
normal through ``vid // 6``. Faces are listed in the same order as
``CUBE_NORMALS`` (+z, +x, -z, -x, +y, -y) and every triangle winds
counter-clockwise seen from outside.

The tables are plain constants. Inside kernels they are read through
statically unrolled selects, so nothing is uploaded or rebuilt per draw.
"""

import numpy as np
import taichi as ti
import taichi.math as tm

vec3 = tm.vec3

CUBE_VERTEX_COUNT = 36

CUBE_POSITIONS = (
    (-1.0, -1.0, 1.0),
    (1.0, -1.0, 1.0),
    (1.0, -1.0, -1.0),
    (-1.0, -1.0, -1.0),
    (-1.0, 1.0, 1.0),
    (1.0, 1.0, 1.0),
    (1.0, 1.0, -1.0),
    (-1.0, 1.0, -1.0),
)

CUBE_NORMALS = (
    (0.0, 0.0, 1.0),
    (1.0, 0.0, 0.0),
    (0.0, 0.0, -1.0),
    (-1.0, 0.0, 0.0),
    (0.0, 1.0, 0.0),
    (0.0, -1.0, 0.0),
)

# fmt: off
CUBE_INDICES = (
    0, 5, 4, 0, 1, 5,
    1, 6, 5, 1, 2, 6,
    2, 7, 6, 2, 3, 7,
    3, 4, 7, 3, 0, 4,
    4, 6, 7, 4, 5, 6,
    3, 1, 0, 3, 2, 1,
)
# fmt: on


def cube_vertices_numpy() -> tuple[np.ndarray, np.ndarray]:
    """Return the expanded (36, 3) position and normal arrays on the host."""
    positions = np.array([CUBE_POSITIONS[i] for i in CUBE_INDICES], dtype=np.float32)
    normals = np.repeat(np.array(CUBE_NORMALS, dtype=np.float32), 6, axis=0)
    return positions, normals


@ti.func
def cube_corner(corner: ti.i32) -> vec3:
    """Position of one of the 8 cube corners."""
    p = vec3(0.0, 0.0, 0.0)
    for c in ti.static(range(8)):
        if corner == c:
            p = vec3(CUBE_POSITIONS[c][0], CUBE_POSITIONS[c][1], CUBE_POSITIONS[c][2])
    return p


@ti.func
def cube_position(vid: ti.i32) -> vec3:
    """Corner position for vertex invocation vid (0-35)."""
    face = vid // 6
    slot = vid % 6
    corner = 0
    for f in ti.static(range(6)):
        if face == f:
            for s in ti.static(range(6)):
                if slot == s:
                    corner = CUBE_INDICES[6 * f + s]
    return cube_corner(corner)


@ti.func
def cube_normal(vid: ti.i32) -> vec3:
    """Face normal for vertex invocation vid (0-35)."""
    face = vid // 6
    n = vec3(0.0, 0.0, 0.0)
    for f in ti.static(range(6)):
        if face == f:
            n = vec3(CUBE_NORMALS[f][0], CUBE_NORMALS[f][1], CUBE_NORMALS[f][2])
    return n
