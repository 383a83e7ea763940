"""The two shading programs of the scene.

- The mesh program draws the tessellated sphere, coloring each pixel by its
  interpolated normal.
- The raymarch program draws the 36-vertex proxy cube and runs the ray-march
  engine for every covered pixel. A miss discards the fragment; a hit writes
  the shaded color and the reprojected depth.
"""

from typing import TYPE_CHECKING

import taichi as ti
import taichi.math as tm

from sdfview.core.ray import transform_point, transform_vector
from sdfview.core.raymarch import RaymarchInput, make_raymarch_engine, shade_normal
from sdfview.geometry.proxy_cube import cube_normal, cube_position
from sdfview.render.stages import FragmentInput, FragmentOutput, VertexOutput

if TYPE_CHECKING:
    from sdfview.render.context import RenderContext
    from sdfview.render.program import ShaderProgram

vec3 = tm.vec3
vec4 = tm.vec4
mat4 = tm.mat4

# =============================================================================
# Mesh Program
# =============================================================================


@ti.dataclass
class MeshUniforms:
    """Uniform block of the mesh program."""

    mvp: mat4
    normal_matrix: mat4


@ti.func
def mesh_vertex(vid: ti.i32, position: vec3, normal: vec3, u: MeshUniforms) -> VertexOutput:
    return VertexOutput(
        clip=u.mvp @ vec4(position, 1.0),
        position=position,
        normal=transform_vector(u.normal_matrix, normal),
    )


@ti.func
def mesh_fragment(frag: FragmentInput, u: MeshUniforms) -> FragmentOutput:
    return FragmentOutput(color=frag.normal * 0.5 + 0.5, depth=frag.depth, discard=0)


# =============================================================================
# Raymarch Program
# =============================================================================


@ti.dataclass
class RaymarchUniforms:
    """Uniform block of the raymarch program.

    Attributes:
        mvp: Object-to-clip transform.
        model: Object-to-world transform.
        inv_model: World-to-object transform.
        scale: Half extent of the proxy cube (and of the march box).
        camera_position: World-space camera position.
    """

    mvp: mat4
    model: mat4
    inv_model: mat4
    scale: vec3
    camera_position: vec3


@ti.func
def proxy_vertex(vid: ti.i32, position: vec3, normal: vec3, u: RaymarchUniforms) -> VertexOutput:
    """Place one of the 36 proxy cube vertices; the attributes are unused."""
    local = u.scale * cube_position(vid)
    return VertexOutput(
        clip=u.mvp @ vec4(local, 1.0),
        position=transform_point(u.model, local),
        normal=transform_vector(u.model, cube_normal(vid)),
    )


def make_raymarch_fragment(shade=shade_normal):
    """Build the raymarch fragment stage around a shading strategy."""
    engine = make_raymarch_engine(shade)

    @ti.func
    def raymarch_fragment(frag: FragmentInput, u: RaymarchUniforms) -> FragmentOutput:
        direction = tm.normalize(frag.position - u.camera_position)
        result = engine(
            RaymarchInput(
                origin=u.camera_position,
                direction=direction,
                model=u.model,
                inv_model=u.inv_model,
                mvp=u.mvp,
                scale=u.scale,
                face_normal=frag.normal,
            )
        )
        return FragmentOutput(color=result.color, depth=result.depth, discard=1 - result.hit)

    return raymarch_fragment


raymarch_fragment = make_raymarch_fragment()


def create_mesh_program(context: "RenderContext") -> "ShaderProgram":
    """Compile the normal-colored mesh program."""
    return context.create_program(mesh_vertex, mesh_fragment, MeshUniforms, name="mesh")


def create_raymarch_program(context: "RenderContext", shade=None) -> "ShaderProgram":
    """Compile the proxy cube + raymarch program.

    Args:
        context: Render context to compile against.
        shade: Optional shading strategy ``(position, normal) -> vec3``
            replacing the default normal-to-color mapping.
    """
    fragment = raymarch_fragment if shade is None else make_raymarch_fragment(shade)
    return context.create_program(proxy_vertex, fragment, RaymarchUniforms, name="raymarch")
