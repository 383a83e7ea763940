"""Shading programs: a vertex stage and a fragment stage joined by kernels.

Each program owns two Taichi kernels built around its stages:

- the vertex pass runs the vertex stage once per vertex invocation and stores
  window coordinates plus the two varyings;
- the raster pass walks every pixel of the active render region, tests it
  against each triangle in submission order, runs the fragment stage on
  covered pixels and resolves the depth test.

Running the raster pass pixel-parallel with a serial triangle loop keeps the
result independent of thread scheduling.

Programs are compiled eagerly when created, so a broken stage fails at
startup with the compiler's diagnostic and the stage's source.
"""

import inspect
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import numpy as np
import taichi as ti
import taichi.math as tm
from taichi.lang.struct import StructType

from sdfview.render.errors import ProgramLinkError, ShaderCompileError
from sdfview.render.stages import FragmentInput, edge_function

if TYPE_CHECKING:
    from sdfview.render.buffers import VertexArray
    from sdfview.render.context import RenderContext

logger = logging.getLogger(__name__)

vec2 = tm.vec2
vec3 = tm.vec3
vec4 = tm.vec4

# Clip-space w at or below this is treated as behind the eye
W_EPSILON = 1e-6


def _build_vertex_pass(vertex_stage: Callable[..., Any]) -> Any:
    @ti.kernel
    def vertex_pass(
        uniforms: ti.template(),
        positions: ti.template(),
        normals: ti.template(),
        indices: ti.template(),
        count: ti.i32,
        indexed: ti.i32,
        width: ti.i32,
        height: ti.i32,
        window: ti.template(),
        var_position: ti.template(),
        var_normal: ti.template(),
    ):
        for k in range(count):
            vid = k
            position = vec3(0.0, 0.0, 0.0)
            normal = vec3(0.0, 0.0, 0.0)
            if indexed:
                vid = indices[k]
                position = positions[vid]
                normal = normals[vid]

            out = vertex_stage(vid, position, normal, uniforms[None])

            clip = out.clip
            inv_w = 0.0
            if clip.w > W_EPSILON:
                inv_w = 1.0 / clip.w
            ndc = clip.xyz * inv_w
            window[k] = vec4(
                (ndc.x * 0.5 + 0.5) * width,
                (ndc.y * 0.5 + 0.5) * height,
                ndc.z * 0.5 + 0.5,
                inv_w,
            )
            var_position[k] = out.position
            var_normal[k] = out.normal

    return vertex_pass


def _build_raster_pass(fragment_stage: Callable[..., Any]) -> Any:
    @ti.kernel
    def raster_pass(
        uniforms: ti.template(),
        window: ti.template(),
        var_position: ti.template(),
        var_normal: ti.template(),
        count: ti.i32,
        width: ti.i32,
        height: ti.i32,
        cull_back: ti.i32,
        depth_test: ti.i32,
        color: ti.template(),
        depth: ti.template(),
    ):
        for i, j in ti.ndrange(width, height):
            p = vec2(i + 0.5, j + 0.5)
            current_depth = depth[i, j]
            current_color = color[i, j]
            written = 0

            for tri in range(count // 3):
                k0 = 3 * tri
                a = window[k0]
                b = window[k0 + 1]
                c = window[k0 + 2]

                # w (stored as 1/w) must be positive for all three vertices
                if a.w > 0.0 and b.w > 0.0 and c.w > 0.0:
                    min_x = ti.min(ti.min(a.x, b.x), c.x)
                    max_x = ti.max(ti.max(a.x, b.x), c.x)
                    min_y = ti.min(ti.min(a.y, b.y), c.y)
                    max_y = ti.max(ti.max(a.y, b.y), c.y)
                    inside_box = p.x >= min_x and p.x <= max_x and p.y >= min_y and p.y <= max_y

                    area = edge_function(a.xy, b.xy, c.xy)
                    front = 1 if area > 0.0 else 0
                    if inside_box and area != 0.0 and (front or not cull_back):
                        w0 = edge_function(b.xy, c.xy, p) / area
                        w1 = edge_function(c.xy, a.xy, p) / area
                        w2 = edge_function(a.xy, b.xy, p) / area
                        if w0 >= 0.0 and w1 >= 0.0 and w2 >= 0.0:
                            z = w0 * a.z + w1 * b.z + w2 * c.z

                            # Perspective-correct weights
                            pw0 = w0 * a.w
                            pw1 = w1 * b.w
                            pw2 = w2 * c.w
                            norm = 1.0 / (pw0 + pw1 + pw2)
                            frag = FragmentInput(
                                position=(
                                    pw0 * var_position[k0]
                                    + pw1 * var_position[k0 + 1]
                                    + pw2 * var_position[k0 + 2]
                                )
                                * norm,
                                normal=(
                                    pw0 * var_normal[k0]
                                    + pw1 * var_normal[k0 + 1]
                                    + pw2 * var_normal[k0 + 2]
                                )
                                * norm,
                                depth=z,
                            )

                            out = fragment_stage(frag, uniforms[None])
                            if out.discard == 0:
                                d = tm.clamp(out.depth, 0.0, 1.0)
                                if depth_test == 0 or d < current_depth:
                                    current_depth = d
                                    current_color = out.color
                                    written = 1

            if written:
                color[i, j] = current_color
                depth[i, j] = current_depth

    return raster_pass


def _stage_source(stage: Callable[..., Any]) -> str:
    try:
        return inspect.getsource(inspect.unwrap(stage))
    except (OSError, TypeError):
        return repr(stage)


class ShaderProgram:
    """A compiled vertex/fragment stage pair with a named uniform block.

    Attributes:
        name: Program name used in diagnostics.
        uniform_names: Names accepted by set_uniform().
    """

    def __init__(
        self,
        context: "RenderContext",
        vertex_stage: Callable[..., Any],
        fragment_stage: Callable[..., Any],
        uniform_type: Any,
        *,
        name: str = "program",
    ) -> None:
        if not isinstance(uniform_type, StructType):
            raise ProgramLinkError(
                f"Program '{name}': uniform block must be a Taichi struct type, "
                f"got {uniform_type!r}"
            )

        self.name = name
        self._vertex_stage = vertex_stage
        self._fragment_stage = fragment_stage
        self._uniforms = uniform_type.field(shape=())
        self.uniform_names: list[str] = list(self._uniforms.keys)

        self._vertex_pass = _build_vertex_pass(vertex_stage)
        self._raster_pass = _build_raster_pass(fragment_stage)
        self._compile(context)

    def _compile(self, context: "RenderContext") -> None:
        """Force both kernels to compile by running them over nothing."""
        try:
            self._run_vertex_pass(context, None, 0)
        except ti.TaichiCompilationError as e:
            raise ShaderCompileError(
                self.name, "vertex", str(e), _stage_source(self._vertex_stage)
            ) from e

        try:
            self._run_raster_pass(context, 0, 0, 0)
        except ti.TaichiCompilationError as e:
            raise ShaderCompileError(
                self.name, "fragment", str(e), _stage_source(self._fragment_stage)
            ) from e

        logger.debug("Compiled program '%s' (uniforms: %s)", self.name, self.uniform_names)

    def _run_vertex_pass(
        self, context: "RenderContext", vertex_array: "VertexArray | None", count: int
    ) -> None:
        if vertex_array is None:
            positions, normals, indices = context.empty_buffers()
            indexed = 0
        else:
            positions = vertex_array.positions
            normals = vertex_array.normals
            indices = vertex_array.indices
            indexed = 1
        self._vertex_pass(
            self._uniforms,
            positions,
            normals,
            indices,
            count,
            indexed,
            context.width,
            context.height,
            context.window_coords,
            context.var_position,
            context.var_normal,
        )

    def _run_raster_pass(self, context: "RenderContext", count: int, width: int, height: int) -> None:
        self._raster_pass(
            self._uniforms,
            context.window_coords,
            context.var_position,
            context.var_normal,
            count,
            width,
            height,
            int(context.cull_back_faces),
            int(context.depth_test),
            context.color,
            context.depth,
        )

    def execute(
        self, context: "RenderContext", vertex_array: "VertexArray | None", count: int
    ) -> None:
        """Run ``count`` vertex invocations and rasterize the triangles.

        Args:
            context: Render target and pipeline state.
            vertex_array: Buffers for an indexed draw, or None for a draw
                whose vertex stage derives everything from the vertex index.
            count: Number of vertex invocations (3 per triangle).
        """
        self._run_vertex_pass(context, vertex_array, count)
        self._run_raster_pass(context, count, context.width, context.height)

    def set_uniform(self, name: str, value: Any) -> None:
        """Bind a uniform by name.

        Args:
            name: Member name of the uniform block.
            value: A scalar, a 3-vector or a 4x4 matrix (NumPy array or
                nested sequence).

        Raises:
            KeyError: If the program has no uniform with that name.
        """
        if name not in self.uniform_names:
            raise KeyError(f"Program '{self.name}' has no uniform '{name}'")
        member = self._uniforms.get_member_field(name)
        if isinstance(value, np.ndarray):
            value = value.astype(np.float32).tolist()
        elif isinstance(value, tuple):
            value = list(value)
        member[None] = value

    def set_uniforms(self, **values: Any) -> None:
        """Bind several uniforms at once."""
        for name, value in values.items():
            self.set_uniform(name, value)

    def get_uniform(self, name: str) -> np.ndarray:
        """Read a uniform back as a NumPy array."""
        if name not in self.uniform_names:
            raise KeyError(f"Program '{self.name}' has no uniform '{name}'")
        return np.asarray(self._uniforms.get_member_field(name).to_numpy())

    def __repr__(self) -> str:
        return f"ShaderProgram(name={self.name!r}, uniforms={self.uniform_names})"
