"""Scene module.

Components:
    params: Transform parameters of the ray-marched object
    programs: Mesh and raymarch shading programs
    composer: Per-frame matrix derivation and draw orchestration
"""

from .params import (
    ROTATION_RANGE,
    SCALE_RANGE,
    TRANSLATION_RANGE,
    TransformParams,
)
from .programs import (
    MeshUniforms,
    RaymarchUniforms,
    create_mesh_program,
    create_raymarch_program,
    make_raymarch_fragment,
    mesh_fragment,
    mesh_vertex,
    proxy_vertex,
    raymarch_fragment,
)

# Note: composer is NOT imported here to avoid circular imports with
# sdfview.config. Import it directly:
#   from sdfview.scene.composer import SceneComposer

__all__ = [
    # Params module
    "TransformParams",
    "TRANSLATION_RANGE",
    "ROTATION_RANGE",
    "SCALE_RANGE",
    # Programs module
    "MeshUniforms",
    "RaymarchUniforms",
    "mesh_vertex",
    "mesh_fragment",
    "proxy_vertex",
    "make_raymarch_fragment",
    "raymarch_fragment",
    "create_mesh_program",
    "create_raymarch_program",
]
