"""Tests for the rasterization pipeline.

Tests cover:
- Render target allocation, clearing, resizing and size limits
- Triangle coverage and the top-row-first readback
- Back-face culling on and off
- Depth test independent of draw order
- Fragment discard
- Triangles behind the eye
- Program compile and link errors
- Uniform binding by name
"""

import numpy as np
import pytest
import taichi as ti
import taichi.math as tm

from sdfview.render.stages import FragmentInput, FragmentOutput, VertexOutput

CLEAR = (0.3, 0.3, 0.3)


@ti.dataclass
class TriangleUniforms:
    z: ti.f32
    w: ti.f32
    flip: ti.i32
    discard: ti.i32
    color: tm.vec3


@ti.func
def triangle_vertex(vid: ti.i32, position: tm.vec3, normal: tm.vec3, u: TriangleUniforms) -> VertexOutput:
    """Full-height triangle (-1,-1), (1,-1), (0,1) in NDC; reversed if flip."""
    k = vid % 3
    if u.flip and k != 0:
        k = 3 - k
    x = -1.0
    y = -1.0
    if k == 1:
        x = 1.0
    elif k == 2:
        x = 0.0
        y = 1.0
    return VertexOutput(
        clip=tm.vec4(x * u.w, y * u.w, u.z * u.w, u.w),
        position=tm.vec3(x, y, u.z),
        normal=tm.vec3(0.0, 0.0, 1.0),
    )


@ti.func
def flat_fragment(frag: FragmentInput, u: TriangleUniforms) -> FragmentOutput:
    return FragmentOutput(color=u.color, depth=frag.depth, discard=u.discard)


def _triangle_program(context):
    program = context.create_program(
        triangle_vertex, flat_fragment, TriangleUniforms, name="triangle"
    )
    program.set_uniforms(z=0.0, w=1.0, flip=0, discard=0, color=(1.0, 0.0, 0.0))
    return program


class TestRenderTarget:
    """Tests for allocation, clearing and resizing."""

    def test_clear_fills_color_and_depth(self, render_context):
        """Test a fresh context holds the clear color and depth 1.0."""
        color = render_context.read_color()
        depth = render_context.read_depth()
        assert color.shape == (16, 16, 3)
        assert depth.shape == (16, 16)
        assert np.allclose(color, CLEAR)
        assert np.allclose(depth, 1.0)

    def test_custom_clear_color(self):
        """Test the clear color is configurable."""
        from sdfview.render.context import RenderContext

        context = RenderContext(4, 3, clear_color=(0.0, 0.5, 1.0))
        assert context.read_color().shape == (3, 4, 3)
        assert np.allclose(context.read_color(), (0.0, 0.5, 1.0))
        assert context.aspect == pytest.approx(4.0 / 3.0)

    @pytest.mark.parametrize("width,height", [(0, 10), (10, -1), (4096, 10), (10, 2049)])
    def test_invalid_sizes_rejected(self, width, height):
        """Test non-positive and oversized targets raise ValueError."""
        from sdfview.render.context import RenderContext

        with pytest.raises(ValueError):
            RenderContext(width, height)

    def test_resize_grow_and_shrink(self, render_context):
        """Test resizing changes the readback size and clears the target."""
        render_context.resize(32, 8)
        assert render_context.size == (32, 8)
        assert render_context.read_color().shape == (8, 32, 3)
        assert np.allclose(render_context.read_depth(), 1.0)

        render_context.resize(5, 7)
        assert render_context.size == (5, 7)
        assert render_context.read_color().shape == (7, 5, 3)
        assert render_context.aspect == pytest.approx(5.0 / 7.0)

    def test_resize_over_maximum(self, render_context):
        """Test resizing beyond MAX_RESOLUTION raises and keeps the old size."""
        from sdfview.render.context import MAX_RESOLUTION

        with pytest.raises(ValueError, match="exceeds maximum"):
            render_context.resize(MAX_RESOLUTION + 1, 16)
        assert render_context.size == (16, 16)

    def test_too_many_vertices(self, render_context):
        """Test draws beyond the uint16 index range are rejected."""
        from sdfview.render.context import MAX_VERTEX_INVOCATIONS

        program = _triangle_program(render_context)
        with pytest.raises(ValueError):
            render_context.draw_arrays(program, MAX_VERTEX_INVOCATIONS + 3)


class TestRasterization:
    """Tests for coverage, culling, depth and discard."""

    def test_triangle_coverage(self):
        """Test the triangle covers the center and leaves the top corners clear."""
        from sdfview.render.context import RenderContext

        context = RenderContext(8, 8)
        program = _triangle_program(context)
        context.draw_arrays(program, 3)

        color = context.read_color()
        depth = context.read_depth()
        assert np.allclose(color[4, 4], (1.0, 0.0, 0.0))
        assert np.allclose(color[7, 4], (1.0, 0.0, 0.0))
        # Top row is first: the apex is at the top, its corners stay clear
        assert np.allclose(color[0, 0], CLEAR)
        assert np.allclose(color[0, 7], CLEAR)
        assert depth[4, 4] == pytest.approx(0.5)
        assert depth[0, 0] == pytest.approx(1.0)

    def test_back_faces_culled(self):
        """Test clockwise triangles are skipped while culling is enabled."""
        from sdfview.render.context import RenderContext

        context = RenderContext(8, 8)
        program = _triangle_program(context)
        program.set_uniform("flip", 1)
        context.draw_arrays(program, 3)
        assert np.allclose(context.read_color(), CLEAR)

        context.cull_back_faces = False
        context.draw_arrays(program, 3)
        assert np.allclose(context.read_color()[4, 4], (1.0, 0.0, 0.0))

    @pytest.mark.parametrize("near_first", [True, False])
    def test_depth_test_independent_of_order(self, near_first):
        """Test the nearer triangle wins whichever is drawn first."""
        from sdfview.render.context import RenderContext

        context = RenderContext(8, 8)
        program = _triangle_program(context)
        near = {"z": -0.5, "color": (0.0, 1.0, 0.0)}
        far = {"z": 0.5, "color": (0.0, 0.0, 1.0)}
        for draw in (near, far) if near_first else (far, near):
            program.set_uniforms(**draw)
            context.draw_arrays(program, 3)

        assert np.allclose(context.read_color()[4, 4], (0.0, 1.0, 0.0))
        assert context.read_depth()[4, 4] == pytest.approx(0.25)

    def test_depth_test_disabled(self):
        """Test the last draw wins without depth testing."""
        from sdfview.render.context import RenderContext

        context = RenderContext(8, 8)
        context.depth_test = False
        program = _triangle_program(context)
        program.set_uniforms(z=-0.5, color=(0.0, 1.0, 0.0))
        context.draw_arrays(program, 3)
        program.set_uniforms(z=0.5, color=(0.0, 0.0, 1.0))
        context.draw_arrays(program, 3)
        assert np.allclose(context.read_color()[4, 4], (0.0, 0.0, 1.0))

    def test_discard_writes_nothing(self):
        """Test discarded fragments leave color and depth untouched."""
        from sdfview.render.context import RenderContext

        context = RenderContext(8, 8)
        program = _triangle_program(context)
        program.set_uniform("discard", 1)
        context.draw_arrays(program, 3)
        assert np.allclose(context.read_color(), CLEAR)
        assert np.allclose(context.read_depth(), 1.0)

    def test_triangle_behind_eye_dropped(self):
        """Test triangles with a non-positive clip w are not rasterized."""
        from sdfview.render.context import RenderContext

        context = RenderContext(8, 8)
        program = _triangle_program(context)
        program.set_uniform("w", -1.0)
        context.cull_back_faces = False
        context.draw_arrays(program, 3)
        assert np.allclose(context.read_color(), CLEAR)

    def test_draw_elements_with_vertex_array(self):
        """Test an indexed draw of the sphere mesh through the mesh program."""
        from sdfview.geometry.sphere_mesh import generate_sphere
        from sdfview.render.context import RenderContext
        from sdfview.scene.programs import create_mesh_program

        context = RenderContext(16, 16)
        mesh = generate_sphere(0.5, 8, 12)
        vertex_array = context.create_vertex_array(mesh)
        assert vertex_array.index_count == mesh.index_count

        program = create_mesh_program(context)
        program.set_uniforms(mvp=np.eye(4), normal_matrix=np.eye(4))
        context.draw_elements(program, vertex_array)

        color = context.read_color()
        depth = context.read_depth()
        # With an identity transform the counter-clockwise side on screen is the
        # hemisphere whose normals point to +z, so it survives culling
        assert np.allclose(color[8, 8], (0.5, 0.5, 1.0), atol=0.1)
        assert depth[8, 8] == pytest.approx(0.75, abs=0.05)
        assert np.allclose(color[0, 0], CLEAR)


class TestPrograms:
    """Tests for program creation errors and uniforms."""

    def test_fragment_input_members(self):
        """Test fragments receive the two varyings and the window depth only."""
        assert list(FragmentInput.members) == ["position", "normal", "depth"]

    def test_compile_error_reports_source(self, render_context):
        """Test a broken stage raises ShaderCompileError with its source."""
        from sdfview.render.errors import ProgramError, ShaderCompileError

        @ti.func
        def broken_fragment(frag: FragmentInput, u: TriangleUniforms) -> FragmentOutput:
            return FragmentOutput(color=undefined_shade_color, depth=frag.depth, discard=0)  # noqa: F821

        with pytest.raises(ShaderCompileError) as excinfo:
            render_context.create_program(
                triangle_vertex, broken_fragment, TriangleUniforms, name="broken"
            )

        error = excinfo.value
        assert isinstance(error, ProgramError)
        assert error.stage == "fragment"
        assert "undefined_shade_color" in error.source
        assert "broken_fragment" in str(error)
        assert "broken" in str(error)

    def test_uniform_block_must_be_struct(self, render_context):
        """Test a non-struct uniform block raises ProgramLinkError."""
        from sdfview.render.errors import ProgramLinkError

        with pytest.raises(ProgramLinkError):
            render_context.create_program(triangle_vertex, flat_fragment, dict)

    def test_unknown_uniform(self, render_context):
        """Test binding an undeclared uniform raises KeyError."""
        program = _triangle_program(render_context)
        assert set(program.uniform_names) == {"z", "w", "flip", "discard", "color"}
        with pytest.raises(KeyError):
            program.set_uniform("brightness", 1.0)

    def test_uniform_roundtrip(self, render_context):
        """Test scalars, vectors and matrices are bound by name."""
        from sdfview.scene.programs import create_raymarch_program

        program = create_raymarch_program(render_context)
        matrix = np.arange(16, dtype=np.float32).reshape(4, 4)
        program.set_uniform("mvp", matrix)
        program.set_uniform("scale", (1.0, 2.0, 3.0))
        assert np.allclose(program.get_uniform("mvp"), matrix)
        assert np.allclose(program.get_uniform("scale"), (1.0, 2.0, 3.0))
