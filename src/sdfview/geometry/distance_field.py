"""Signed distance field of an infinite lattice of spheres.

Space is tiled into cubic cells of side ``LATTICE_PERIOD``; each cell holds a
sphere of radius ``LATTICE_SPHERE_RADIUS`` at its center. Sphere centers sit
at ``5 + 10 * k`` on every axis.

All functions are Taichi functions (@ti.func) evaluated per ray-march step.
"""

import taichi as ti
import taichi.math as tm

vec3 = tm.vec3

LATTICE_PERIOD = 10.0
LATTICE_SPHERE_RADIUS = 3.0

# Offset used for central-difference gradients
NORMAL_EPSILON = 0.01


@ti.func
def sd_sphere(p: vec3, radius: ti.f32) -> ti.f32:
    """Signed distance from p to a sphere of the given radius at the origin."""
    return tm.length(p) - radius


@ti.func
def lattice_spheres(p: vec3) -> ti.f32:
    """Signed distance to the nearest sphere of the repeating lattice.

    The point is folded into its cell with a floor-based modulo (the result
    is always in [0, period)) and shifted so the cell center is the origin.
    """
    q = tm.mod(p, LATTICE_PERIOD) - 0.5 * LATTICE_PERIOD
    return sd_sphere(q, LATTICE_SPHERE_RADIUS)


@ti.func
def estimate_normal(p: vec3) -> vec3:
    """Estimate the surface normal at p by central differences.

    Args:
        p: A point on (or near) the surface.

    Returns:
        The normalized gradient of the distance field at p.
    """
    e = NORMAL_EPSILON
    return tm.normalize(
        vec3(
            lattice_spheres(p + vec3(e, 0.0, 0.0)) - lattice_spheres(p - vec3(e, 0.0, 0.0)),
            lattice_spheres(p + vec3(0.0, e, 0.0)) - lattice_spheres(p - vec3(0.0, e, 0.0)),
            lattice_spheres(p + vec3(0.0, 0.0, e)) - lattice_spheres(p - vec3(0.0, 0.0, e)),
        )
    )
