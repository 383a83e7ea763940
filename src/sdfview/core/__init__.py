"""Core module.

Components:
    ray: Ray structure and homogeneous transform helpers (Taichi functions)
    transforms: 4x4 matrix construction on the host (NumPy)
    raymarch: Slab test, sphere tracing and the per-pixel ray-march engine

The ray-march engine is a Taichi function; it is inlined into the fragment
stage of the raymarch program and runs once per covered pixel.
"""

from .ray import (
    Ray,
    make_ray,
    mat4,
    project_point,
    ray_at,
    transform_point,
    transform_vector,
    vec3,
    vec4,
)
from .raymarch import (
    HIT_THRESHOLD,
    MAX_MARCH_STEPS,
    MarchResult,
    RaymarchInput,
    RaymarchOutput,
    make_raymarch_engine,
    march,
    raymarch_engine,
    shade_normal,
    slab_interval,
    to_object_space,
)

__all__ = [
    # Ray module
    "Ray",
    "ray_at",
    "make_ray",
    "transform_point",
    "transform_vector",
    "project_point",
    "vec3",
    "vec4",
    "mat4",
    # Raymarch module
    "MarchResult",
    "RaymarchInput",
    "RaymarchOutput",
    "MAX_MARCH_STEPS",
    "HIT_THRESHOLD",
    "to_object_space",
    "slab_interval",
    "march",
    "shade_normal",
    "make_raymarch_engine",
    "raymarch_engine",
]
