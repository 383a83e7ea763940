"""Taichi viewer for a rasterized sphere and a ray-marched distance field.

Every frame draws two things into one color/depth target:
- A tessellated sphere, rasterized and colored by its normals
- An infinite lattice of spheres, defined by a signed distance field and
  ray-marched inside a user-transformed bounding box

Subpackages:
    core: Ray structure, matrix helpers and the ray-march engine
    geometry: Sphere tessellation, distance field and the proxy cube
    render: Software rasterizer with programs, buffers and draw calls
    camera: Perspective camera producing view and projection matrices
    scene: Transform parameters, shading programs and per-frame composition
    preview: GGUI window and PNG export
"""

__version__ = "0.1.0"
