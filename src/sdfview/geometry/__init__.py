"""Geometry module.

Components:
    sphere_mesh: Latitude/longitude sphere tessellation (NumPy, host side)
    distance_field: Signed distance field of the sphere lattice
    proxy_cube: The 36-vertex unit cube bounding the ray-marched object

Mesh generation runs once on the host. The distance field and the cube
tables are Taichi functions evaluated inside kernels.
"""

from .distance_field import (
    LATTICE_PERIOD,
    LATTICE_SPHERE_RADIUS,
    NORMAL_EPSILON,
    estimate_normal,
    lattice_spheres,
    sd_sphere,
)
from .proxy_cube import (
    CUBE_INDICES,
    CUBE_NORMALS,
    CUBE_POSITIONS,
    CUBE_VERTEX_COUNT,
    cube_normal,
    cube_position,
    cube_vertices_numpy,
)
from .sphere_mesh import Mesh, Vertex, generate_sphere

__all__ = [
    "Mesh",
    "Vertex",
    "generate_sphere",
    "sd_sphere",
    "lattice_spheres",
    "estimate_normal",
    "LATTICE_PERIOD",
    "LATTICE_SPHERE_RADIUS",
    "NORMAL_EPSILON",
    "CUBE_VERTEX_COUNT",
    "CUBE_POSITIONS",
    "CUBE_NORMALS",
    "CUBE_INDICES",
    "cube_position",
    "cube_normal",
    "cube_vertices_numpy",
]
