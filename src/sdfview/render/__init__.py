"""Rendering backend: a small rasterization pipeline on Taichi.

Components:
    context: Render target, depth/cull state and draw calls
    program: Vertex and fragment stages compiled into Taichi kernels
    buffers: Vertex arrays uploaded to Taichi fields
    stages: Structures passed between the pipeline stages
    errors: Program compile and link errors

A draw runs two kernels. The vertex pass transforms every vertex invocation
to window coordinates. The raster pass walks the pixels in parallel and, per
pixel, visits the triangles in submission order, so depth testing needs no
atomics and the result is independent of thread scheduling.
"""

from .buffers import VertexArray
from .context import MAX_RESOLUTION, MAX_VERTEX_INVOCATIONS, RenderContext
from .errors import ProgramError, ProgramLinkError, ShaderCompileError
from .program import ShaderProgram
from .stages import FragmentInput, FragmentOutput, VertexOutput

__all__ = [
    "RenderContext",
    "MAX_RESOLUTION",
    "MAX_VERTEX_INVOCATIONS",
    "ShaderProgram",
    "VertexArray",
    "VertexOutput",
    "FragmentInput",
    "FragmentOutput",
    "ProgramError",
    "ShaderCompileError",
    "ProgramLinkError",
]
