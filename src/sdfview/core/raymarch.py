"""Per-sample ray marching of the implicit lattice object.

This module implements the procedure executed once for every pixel covered
by the bounding proxy cube:

1. Transform the world ray into object space (inverse model matrix) and
   renormalize its direction.
2. Clip it against the object's box ``[-scale, +scale]`` with a slab test.
3. Sphere-trace the distance field inside that interval.
4. Estimate the surface normal on a hit.
5. Reproject the hit point through the model-view-projection matrix to get a
   depth value comparable with rasterized geometry.

Everything here is a pure Taichi function. Nothing persists between calls,
so identical inputs always give bit-identical outputs.

Example:
    >>> @ti.kernel
    ... def sample() -> ti.i32:
    ...     inp = RaymarchInput(origin=..., direction=..., model=..., ...)
    ...     return raymarch_engine(inp).hit
"""

import taichi as ti
import taichi.math as tm

from sdfview.core.ray import Ray, make_ray, project_point, ray_at, transform_point, transform_vector
from sdfview.geometry.distance_field import estimate_normal, lattice_spheres

vec2 = tm.vec2
vec3 = tm.vec3
mat4 = tm.mat4

# =============================================================================
# March Constants
# =============================================================================

MAX_MARCH_STEPS = 32

# Distance below which the march reports a hit
HIT_THRESHOLD = 0.01


@ti.dataclass
class MarchResult:
    """Outcome of marching one ray through the distance field.

    Attributes:
        hit: 1 if the surface was reached inside the interval, 0 otherwise.
        t: Distance along the ray of the hit. Only valid if hit == 1.
        point: Object-space hit point. Only valid if hit == 1.
        normal: Estimated object-space unit normal. Only valid if hit == 1.
        steps: Number of distance-field evaluations performed.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    steps: ti.i32


@ti.dataclass
class RaymarchInput:
    """Everything one ray-march invocation reads.

    Attributes:
        origin: World-space ray origin (the camera position).
        direction: World-space unit ray direction.
        model: Object-to-world transform.
        inv_model: World-to-object transform.
        mvp: Object-to-clip transform.
        scale: Object-space half extent of the bounding box per axis.
        face_normal: World-space normal of the proxy face the ray entered.
    """

    origin: vec3
    direction: vec3
    model: mat4
    inv_model: mat4
    mvp: mat4
    scale: vec3
    face_normal: vec3


@ti.dataclass
class RaymarchOutput:
    """Result of one ray-march invocation.

    Attributes:
        hit: 1 for a surface hit, 0 for no contribution.
        t: Object-space distance along the ray to the hit.
        tmin: Entry distance of the bounding interval.
        tmax: Exit distance of the bounding interval.
        point: Object-space hit point.
        normal: World-space surface normal used for shading.
        color: Shaded RGB color. Only valid if hit == 1.
        depth: Window depth in [0, 1] (for a depth range of 0 to 1).
            Only valid if hit == 1.
        steps: Number of march steps executed.
    """

    hit: ti.i32
    t: ti.f32
    tmin: ti.f32
    tmax: ti.f32
    point: vec3
    normal: vec3
    color: vec3
    depth: ti.f32
    steps: ti.i32


@ti.func
def to_object_space(ray: Ray, inv_model: mat4) -> Ray:
    """Move a world-space ray into object space.

    The direction is renormalized because a scaling model transform would
    otherwise change its length.
    """
    origin = transform_point(inv_model, ray.origin)
    direction = tm.normalize(transform_vector(inv_model, ray.direction))
    return make_ray(origin, direction)


@ti.func
def slab_interval(ray: Ray, half_extent: vec3) -> vec2:
    """Clip a ray against the box [-half_extent, +half_extent].

    A zero direction component divides to +/-inf, which the min/max
    tightening absorbs without any branch.

    Returns:
        vec2(tmin, tmax). The interval is empty when tmin > tmax.
    """
    tmin = 0.0
    tmax = tm.inf
    for i in ti.static(range(3)):
        t1 = (half_extent[i] - ray.origin[i]) / ray.direction[i]
        t2 = (-half_extent[i] - ray.origin[i]) / ray.direction[i]
        tmin = ti.max(tmin, ti.min(t1, t2))
        tmax = ti.min(tmax, ti.max(t1, t2))
    return vec2(tmin, tmax)


@ti.func
def march(ray: Ray, tmin: ti.f32, tmax: ti.f32) -> MarchResult:
    """Sphere-trace the lattice distance field between tmin and tmax.

    The march starts at tmin and advances by the (non-negative) distance at
    the current point. It stops with a miss as soon as t passes tmax, and
    with a hit once the distance drops below HIT_THRESHOLD. Running out of
    steps is a miss. An empty interval is a miss without any step.
    """
    hit = 0
    steps = 0
    t = tmin
    done = 0
    if tmin > tmax:
        done = 1
    # while loops stay serial even when inlined at kernel top level
    while done == 0 and steps < MAX_MARCH_STEPS:
        d = ti.max(0.0, lattice_spheres(ray_at(ray, t)))
        t += d
        steps += 1
        if t > tmax:
            done = 1
        elif d < HIT_THRESHOLD:
            hit = 1
            done = 1

    point = ray_at(ray, t)
    normal = vec3(0.0, 0.0, 0.0)
    if hit:
        normal = estimate_normal(point)

    return MarchResult(hit=hit, t=t, point=point, normal=normal, steps=steps)


@ti.func
def shade_normal(position: vec3, normal: vec3) -> vec3:
    """Placeholder shading: map the normal from [-1, 1] to an RGB color."""
    return normal * 0.5 + 0.5


def make_raymarch_engine(shade=shade_normal):
    """Build a ray-march engine that colors hits with ``shade``.

    Args:
        shade: A Taichi function ``(world_position, world_normal) -> vec3``.

    Returns:
        A Taichi function ``(RaymarchInput) -> RaymarchOutput``.
    """

    @ti.func
    def engine(inp: RaymarchInput) -> RaymarchOutput:
        ray = to_object_space(make_ray(inp.origin, inp.direction), inp.inv_model)
        interval = slab_interval(ray, inp.scale)
        tmin = interval[0]
        tmax = interval[1]
        result = march(ray, tmin, tmax)

        normal = vec3(0.0, 0.0, 0.0)
        color = vec3(0.0, 0.0, 0.0)
        depth = 1.0
        if result.hit:
            # Central differences are unreliable where the surface meets the
            # box face, so the proxy's own face normal is used there.
            if result.t == tmin:
                normal = tm.normalize(inp.face_normal)
            else:
                normal = transform_vector(inp.model, result.normal)
            color = shade(transform_point(inp.model, result.point), normal)
            clip = project_point(inp.mvp, result.point)
            depth = (clip.z / clip.w) * 0.5 + 0.5

        return RaymarchOutput(
            hit=result.hit,
            t=result.t,
            tmin=tmin,
            tmax=tmax,
            point=result.point,
            normal=normal,
            color=color,
            depth=depth,
            steps=result.steps,
        )

    return engine


raymarch_engine = make_raymarch_engine()
