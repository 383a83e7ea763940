"""Render target, pipeline state and draw calls.

RenderContext is the explicit handle through which the scene talks to the
rasterizer. It owns the color and depth buffers, the per-draw vertex output
buffers and the depth-test / back-face-culling toggles, and it creates
vertex arrays and programs.

Buffers use Taichi's (x, y) indexing with y = 0 at the bottom row, matching
OpenGL window coordinates. read_color() and read_depth() return images with
the top row first.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> from sdfview.render.context import RenderContext
    >>>
    >>> context = RenderContext(640, 480)
    >>> context.clear()
    >>> context.draw_arrays(program, 36)
    >>> image = context.read_color()  # (480, 640, 3)
"""

import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from sdfview.render.buffers import VertexArray
from sdfview.render.program import ShaderProgram

if TYPE_CHECKING:
    from sdfview.geometry.sphere_mesh import Mesh

logger = logging.getLogger(__name__)

# Largest supported render target edge in pixels
MAX_RESOLUTION = 2048

# Vertex invocations per draw are bounded by the uint16 index range
MAX_VERTEX_INVOCATIONS = 1 << 16

_INITIAL_VERTEX_CAPACITY = 1024


@ti.kernel
def _clear_target(
    color: ti.template(),
    depth: ti.template(),
    width: ti.i32,
    height: ti.i32,
    r: ti.f32,
    g: ti.f32,
    b: ti.f32,
):
    for i, j in ti.ndrange(width, height):
        color[i, j] = tm.vec3(r, g, b)
        depth[i, j] = 1.0


def _validate_size(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise ValueError(f"Render target size must be positive, got {width}x{height}")
    if width > MAX_RESOLUTION or height > MAX_RESOLUTION:
        raise ValueError(
            f"Render target size {width}x{height} exceeds maximum "
            f"{MAX_RESOLUTION}x{MAX_RESOLUTION}"
        )


class RenderContext:
    """Color/depth target plus the state the rasterizer reads.

    Attributes:
        width: Active render width in pixels.
        height: Active render height in pixels.
        clear_color: RGB written by clear().
        depth_test: If True, fragments must be strictly nearer than the stored
            depth to be written.
        cull_back_faces: If True, clockwise (back-facing) triangles are
            skipped.
        color: Vector field (capacity_w, capacity_h) of RGB colors.
        depth: Scalar field (capacity_w, capacity_h) of window depths.
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        clear_color: Sequence[float] = (0.3, 0.3, 0.3),
    ) -> None:
        """Allocate the render target.

        Args:
            width: Render width in pixels (max MAX_RESOLUTION).
            height: Render height in pixels (max MAX_RESOLUTION).
            clear_color: RGB clear color.

        Raises:
            ValueError: If the size is not positive or exceeds the maximum.
        """
        _validate_size(width, height)
        self.width = width
        self.height = height
        self.clear_color = tuple(float(c) for c in clear_color)
        self.depth_test = True
        self.cull_back_faces = True

        self._capacity = (0, 0)
        self._allocate_target(width, height)

        self._vertex_capacity = 0
        self._ensure_vertex_capacity(_INITIAL_VERTEX_CAPACITY)

        # Stand-ins bound for non-indexed draws, never read
        self._empty_positions = ti.Vector.field(3, dtype=ti.f32, shape=1)
        self._empty_normals = ti.Vector.field(3, dtype=ti.f32, shape=1)
        self._empty_indices = ti.field(dtype=ti.i32, shape=1)

        self.clear()

    # =========================================================================
    # Render target
    # =========================================================================

    def _allocate_target(self, width: int, height: int) -> None:
        self.color = ti.Vector.field(3, dtype=ti.f32, shape=(width, height))
        self.depth = ti.field(dtype=ti.f32, shape=(width, height))
        self._capacity = (width, height)
        logger.debug("Allocated %dx%d render target", width, height)

    @property
    def aspect(self) -> float:
        """Width divided by height of the active region."""
        return self.width / self.height

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def resize(self, width: int, height: int) -> None:
        """Change the active render size.

        Buffers are only reallocated when the new size does not fit in the
        current allocation. The target is cleared afterwards.

        Raises:
            ValueError: If the size is not positive or exceeds the maximum.
        """
        _validate_size(width, height)
        if width > self._capacity[0] or height > self._capacity[1]:
            self._allocate_target(
                max(width, self._capacity[0]), max(height, self._capacity[1])
            )
        self.width = width
        self.height = height
        logger.debug("Resized render context to %dx%d", width, height)
        self.clear()

    def clear(self) -> None:
        """Fill the active region with the clear color and depth 1.0."""
        r, g, b = self.clear_color
        _clear_target(self.color, self.depth, self.width, self.height, r, g, b)

    def read_color(self) -> npt.NDArray[np.float32]:
        """Return the active color region as (height, width, 3), top row first."""
        image = self.color.to_numpy()[: self.width, : self.height]
        return np.ascontiguousarray(np.flipud(np.transpose(image, (1, 0, 2))))

    def read_depth(self) -> npt.NDArray[np.float32]:
        """Return the active depth region as (height, width), top row first."""
        depth = self.depth.to_numpy()[: self.width, : self.height]
        return np.ascontiguousarray(np.flipud(depth.T))

    # =========================================================================
    # Vertex processing buffers
    # =========================================================================

    def _ensure_vertex_capacity(self, count: int) -> None:
        if count > MAX_VERTEX_INVOCATIONS:
            raise ValueError(
                f"Draw of {count} vertices exceeds maximum of {MAX_VERTEX_INVOCATIONS}"
            )
        if count <= self._vertex_capacity:
            return
        capacity = max(_INITIAL_VERTEX_CAPACITY, self._vertex_capacity)
        while capacity < count:
            capacity *= 2
        capacity = min(capacity, MAX_VERTEX_INVOCATIONS)

        self.window_coords = ti.Vector.field(4, dtype=ti.f32, shape=capacity)
        self.var_position = ti.Vector.field(3, dtype=ti.f32, shape=capacity)
        self.var_normal = ti.Vector.field(3, dtype=ti.f32, shape=capacity)
        self._vertex_capacity = capacity
        logger.debug("Allocated vertex output buffers for %d invocations", capacity)

    def empty_buffers(self) -> tuple[Any, Any, Any]:
        """Placeholder attribute buffers for draws without a vertex array."""
        return self._empty_positions, self._empty_normals, self._empty_indices

    # =========================================================================
    # Resource creation
    # =========================================================================

    def create_vertex_array(self, mesh: "Mesh") -> VertexArray:
        """Upload a mesh's positions, normals and indices."""
        return VertexArray.from_mesh(mesh)

    def create_program(
        self,
        vertex_stage: Callable[..., Any],
        fragment_stage: Callable[..., Any],
        uniform_type: Any,
        *,
        name: str = "program",
    ) -> ShaderProgram:
        """Build and compile a program from a vertex and a fragment stage.

        Raises:
            ShaderCompileError: If either stage fails to compile.
            ProgramLinkError: If the uniform block is not a Taichi struct.
        """
        return ShaderProgram(self, vertex_stage, fragment_stage, uniform_type, name=name)

    # =========================================================================
    # Draw calls
    # =========================================================================

    def draw_elements(
        self,
        program: ShaderProgram,
        vertex_array: VertexArray,
        count: int | None = None,
    ) -> None:
        """Draw indexed triangles from a vertex array.

        Args:
            program: The program to shade with.
            vertex_array: Attribute and index buffers.
            count: Number of indices to draw (default: all).
        """
        if count is None:
            count = vertex_array.index_count
        self._ensure_vertex_capacity(count)
        program.execute(self, vertex_array, count)

    def draw_arrays(self, program: ShaderProgram, count: int) -> None:
        """Draw ``count`` vertex invocations without any vertex buffer.

        The vertex stage receives only the invocation index.
        """
        self._ensure_vertex_capacity(count)
        program.execute(self, None, count)

    def __repr__(self) -> str:
        return (
            f"RenderContext(width={self.width}, height={self.height}, "
            f"depth_test={self.depth_test}, cull_back_faces={self.cull_back_faces})"
        )
