"""Data passed between the vertex stage, the rasterizer and the fragment stage.

A vertex stage is a Taichi function
``(vid, position, normal, uniforms) -> VertexOutput`` and a fragment stage is
``(FragmentInput, uniforms) -> FragmentOutput``. Both varyings (``position``
and ``normal``) are interpolated perspective-correctly across each triangle.
"""

import taichi as ti
import taichi.math as tm

vec3 = tm.vec3
vec4 = tm.vec4


@ti.dataclass
class VertexOutput:
    """Result of one vertex invocation.

    Attributes:
        clip: Clip-space position.
        position: First varying, conventionally a world-space position.
        normal: Second varying, conventionally a world-space normal.
    """

    clip: vec4
    position: vec3
    normal: vec3


@ti.dataclass
class FragmentInput:
    """Interpolated inputs of one fragment.

    Attributes:
        position: Interpolated first varying.
        normal: Interpolated second varying (not renormalized).
        depth: Window depth of the rasterized triangle at this pixel.
    """

    position: vec3
    normal: vec3
    depth: ti.f32


@ti.dataclass
class FragmentOutput:
    """What a fragment writes.

    Attributes:
        color: RGB color.
        depth: Window depth used for the depth test and stored on success.
        discard: 1 to drop the fragment (no color, no depth).
    """

    color: vec3
    depth: ti.f32
    discard: ti.i32


@ti.func
def edge_function(a: tm.vec2, b: tm.vec2, p: tm.vec2) -> ti.f32:
    """Twice the signed area of (a, b, p); positive when counter-clockwise."""
    return (b.x - a.x) * (p.y - a.y) - (b.y - a.y) * (p.x - a.x)
