"""Ray data structure and homogeneous transform helpers.

This module provides the Ray dataclass shared by the ray-march procedure and
small helpers for moving points and directions between coordinate spaces with
4x4 matrices. All operations are designed to run inside Taichi kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, -50.0)
    >>> direction = ti.math.vec3(0.0, 0.0, 1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

# Type aliases using Taichi's math module
vec3 = tm.vec3
vec4 = tm.vec4
mat4 = tm.mat4


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3). Whether it is in world
            or object space depends on where the ray is used.
        direction: The direction vector of the ray (vec3). Must be unit length
            when passed to the bounding and marching routines.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction inside a Taichi kernel."""
    return Ray(origin=origin, direction=direction)


@ti.func
def transform_point(m: mat4, p: vec3) -> vec3:
    """Transform a point by a 4x4 matrix (w = 1, translation applies).

    The result is not divided by w; affine matrices leave w at 1.
    """
    return (m @ vec4(p, 1.0)).xyz


@ti.func
def transform_vector(m: mat4, v: vec3) -> vec3:
    """Transform a direction by a 4x4 matrix (w = 0, translation ignored)."""
    return (m @ vec4(v, 0.0)).xyz


@ti.func
def project_point(m: mat4, p: vec3) -> vec4:
    """Transform a point into homogeneous clip coordinates."""
    return m @ vec4(p, 1.0)
