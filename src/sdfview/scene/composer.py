"""Per-frame orchestration of the mesh and the ray-marched object.

SceneComposer owns everything that is created once (the sphere mesh, its
vertex array, both programs) and, for every frame, turns one snapshot of the
transform parameters into matrices, binds them and issues the two draws.
Both draws go through the same depth buffer, so the ray-marched surface and
the sphere occlude each other correctly whichever is drawn first.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> from sdfview.render.context import RenderContext
    >>> from sdfview.scene.composer import SceneComposer
    >>> from sdfview.scene.params import TransformParams
    >>>
    >>> context = RenderContext(320, 240)
    >>> composer = SceneComposer(context)
    >>> composer.render_frame(TransformParams(rotation=(0.0, 45.0, 0.0)))
    >>> image = context.read_color()
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from sdfview.config import SceneConfig
from sdfview.core.transforms import Matrix4, identity, inverse, rotate_xyz, translate
from sdfview.geometry.proxy_cube import CUBE_VERTEX_COUNT
from sdfview.geometry.sphere_mesh import generate_sphere
from sdfview.render.context import RenderContext
from sdfview.scene.params import TransformParams
from sdfview.scene.programs import create_mesh_program, create_raymarch_program

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameMatrices:
    """Matrices derived from one parameter snapshot.

    Attributes:
        rotation: Euler rotation (X, then Y, then Z).
        model: Object-to-world; rotates, then translates.
        inv_model: World-to-object.
        view: World-to-camera.
        projection: Camera-to-clip.
        view_projection: ``projection @ view``.
        mvp: ``projection @ view @ model``.
    """

    rotation: Matrix4
    model: Matrix4
    inv_model: Matrix4
    view: Matrix4
    projection: Matrix4
    view_projection: Matrix4
    mvp: Matrix4


class SceneComposer:
    """Draws the sphere mesh and the ray-marched lattice into a context.

    Attributes:
        context: The render context drawn into.
        config: Scene configuration.
        mesh: The generated sphere mesh.
    """

    def __init__(
        self,
        context: RenderContext,
        config: SceneConfig | None = None,
        *,
        shade=None,
    ) -> None:
        """Generate the mesh, upload it and compile both programs.

        Args:
            context: Render context to draw into.
            config: Scene configuration (default: SceneConfig()).
            shade: Optional shading strategy for the ray-marched surface.

        Raises:
            ShaderCompileError: If a program fails to compile.
        """
        self.context = context
        self.config = config if config is not None else SceneConfig()

        self.mesh = generate_sphere(
            self.config.sphere_radius,
            self.config.theta_segments,
            self.config.phi_segments,
        )
        self._mesh_vertex_array = context.create_vertex_array(self.mesh)

        self._mesh_program = create_mesh_program(context)
        self._raymarch_program = create_raymarch_program(context, shade)

        self._camera_position = self.config.camera.position
        self._view = self.config.camera.view_matrix()

        logger.info(
            "Scene ready: sphere with %d vertices / %d indices, %dx%d target",
            self.mesh.vertex_count,
            self.mesh.index_count,
            context.width,
            context.height,
        )

    @property
    def mesh_program(self):
        return self._mesh_program

    @property
    def raymarch_program(self):
        return self._raymarch_program

    def frame_matrices(self, params: TransformParams, aspect_ratio: float) -> FrameMatrices:
        """Derive every matrix of a frame from one parameter snapshot."""
        rx, ry, rz = (math.radians(a) for a in params.rotation)
        rotation = rotate_xyz(rx, ry, rz)
        model = translate(*params.translation) @ rotation
        inv_model = inverse(model)
        projection = self.config.camera.projection_matrix(aspect_ratio)
        view_projection = projection @ self._view
        return FrameMatrices(
            rotation=rotation,
            model=model,
            inv_model=inv_model,
            view=self._view,
            projection=projection,
            view_projection=view_projection,
            mvp=view_projection @ model,
        )

    def draw_mesh(self, matrices: FrameMatrices) -> None:
        """Draw the sphere; it is not transformed, so its model is identity."""
        self._mesh_program.set_uniforms(
            mvp=matrices.view_projection,
            normal_matrix=identity(),
        )
        self.context.draw_elements(self._mesh_program, self._mesh_vertex_array)

    def draw_implicit(self, matrices: FrameMatrices, params: TransformParams) -> None:
        """Draw the proxy cube, ray-marching the lattice in every covered pixel."""
        self._raymarch_program.set_uniforms(
            mvp=matrices.mvp,
            model=matrices.model,
            inv_model=matrices.inv_model,
            scale=np.array(params.scale, dtype=np.float32),
            camera_position=self._camera_position,
        )
        self.context.draw_arrays(self._raymarch_program, CUBE_VERTEX_COUNT)

    def render_frame(self, params: TransformParams | None = None) -> FrameMatrices:
        """Compose one frame.

        Args:
            params: Snapshot of the transform parameters. It is used as is;
                range checking belongs to whoever produced it.

        Returns:
            The matrices used for the frame.
        """
        if params is None:
            params = self.config.initial_params

        matrices = self.frame_matrices(params, self.context.aspect)
        self.context.clear()
        self.draw_mesh(matrices)
        self.draw_implicit(matrices, params)
        return matrices

    def __repr__(self) -> str:
        return f"SceneComposer(context={self.context!r})"
