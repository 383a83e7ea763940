"""Interactive preview window using Taichi GGUI.

This module hosts the frame loop of the viewer: every window refresh it reads
the parameter panel, composes one frame into the render context and shows the
color buffer on the canvas.

Features:
    - Taichi GGUI window with a parameter panel (translation, rotation, scale)
    - FPS readout
    - Export PNG button writing a timestamped file
    - Resize handling through a replaceable ResizeHandler

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> from sdfview.preview.interactive import InteractivePreview
    >>>
    >>> preview = InteractivePreview(800, 600)
    >>> preview.run()  # Blocks until the window is closed
"""

import logging
import os
import time
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING, Any

import taichi as ti

from sdfview.config import SceneConfig
from sdfview.render.context import MAX_RESOLUTION, RenderContext
from sdfview.scene.params import (
    ROTATION_RANGE,
    SCALE_RANGE,
    TRANSLATION_RANGE,
    TransformParams,
)

if TYPE_CHECKING:
    from sdfview.scene.composer import SceneComposer

logger = logging.getLogger(__name__)

# Called with the context and the new window size; returns the size rendered at
ResizeHandler = Callable[[RenderContext, tuple[int, int]], tuple[int, int]]


def fit_context_to_window(context: RenderContext, size: tuple[int, int]) -> tuple[int, int]:
    """Resize the context to the window, clamped to the supported range."""
    width = min(max(int(size[0]), 1), MAX_RESOLUTION)
    height = min(max(int(size[1]), 1), MAX_RESOLUTION)
    if (width, height) != context.size:
        context.resize(width, height)
    return width, height


# Lazy kernel holder - kernel is created on first use after Taichi is initialized
_copy_region_kernel: Any = None


def _get_copy_region_kernel() -> Any:
    """Get or create the kernel copying the active color region for display."""
    global _copy_region_kernel
    if _copy_region_kernel is None:

        @ti.kernel
        def _kernel(src: ti.template(), dst: ti.template(), width: ti.i32, height: ti.i32):
            for i, j in ti.ndrange(width, height):
                dst[i, j] = src[i, j]

        _copy_region_kernel = _kernel
    return _copy_region_kernel


class FrameTimer:
    """Smoothed frames-per-second estimate."""

    def __init__(self, smoothing: float = 0.9) -> None:
        self.smoothing = smoothing
        self.fps = 0.0
        self._last: float | None = None

    def tick(self, now: float | None = None) -> float:
        """Record a frame boundary and return the updated estimate."""
        if now is None:
            now = time.perf_counter()
        if self._last is not None:
            elapsed = now - self._last
            if elapsed > 0.0:
                instant = 1.0 / elapsed
                if self.fps == 0.0:
                    self.fps = instant
                else:
                    self.fps = self.smoothing * self.fps + (1.0 - self.smoothing) * instant
        self._last = now
        return self.fps


class InteractivePreview:
    """Viewer window showing the sphere and the ray-marched lattice.

    Attributes:
        width: Current render width in pixels.
        height: Current render height in pixels.
        context: Render context frames are composed into.
        params: Transform parameters of the current frame.
        display_image: Taichi field handed to the canvas.
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        config: SceneConfig | None = None,
        title: str = "sdfview",
        resize_handler: ResizeHandler = fit_context_to_window,
    ) -> None:
        """Create the render context and the scene.

        The window itself is created lazily on first use.

        Args:
            width: Initial window width in pixels.
            height: Initial window height in pixels.
            config: Scene configuration (default: SceneConfig()).
            title: Window title.
            resize_handler: Called when the window size changes.
        """
        from sdfview.scene.composer import SceneComposer

        self.config = config if config is not None else SceneConfig()
        self.width = width
        self.height = height
        self._title = title
        self._resize_handler = resize_handler
        self._is_initialized = False

        self._window: "ti.ui.Window | None" = None
        self._canvas: "ti.ui.Canvas | None" = None

        self.context = RenderContext(width, height, clear_color=self.config.clear_color)
        self.composer: "SceneComposer" = SceneComposer(self.context, self.config)
        self.params = self.config.initial_params.clamped()
        self.timer = FrameTimer()

        self._display_shape = (0, 0)
        self._ensure_display_image()

    def _initialize_window(self) -> None:
        if self._is_initialized:
            return

        self._window = ti.ui.Window(
            name=self._title,
            res=(self.width, self.height),
            vsync=True,
        )
        self._canvas = self._window.get_canvas()
        self._is_initialized = True

    @property
    def window(self) -> "ti.ui.Window":
        """Get the Taichi GGUI window, initializing if needed."""
        if self._window is None:
            self._initialize_window()
        assert self._window is not None
        return self._window

    @property
    def canvas(self) -> "ti.ui.Canvas":
        if self._canvas is None:
            self._initialize_window()
        assert self._canvas is not None
        return self._canvas

    def _ensure_display_image(self) -> None:
        shape = (self.width, self.height)
        if shape == self._display_shape:
            return
        self.display_image = ti.Vector.field(3, dtype=ti.f32, shape=shape)
        self._display_shape = shape

    def is_running(self) -> bool:
        return self.window.running

    # =========================================================================
    # Frame loop
    # =========================================================================

    def handle_resize(self, size: tuple[int, int]) -> bool:
        """Apply a window size through the resize handler.

        Returns:
            True if the render size changed.
        """
        new_size = self._resize_handler(self.context, size)
        if new_size == (self.width, self.height):
            return False
        self.width, self.height = new_size
        self._ensure_display_image()
        logger.info("Render size changed to %dx%d", self.width, self.height)
        return True

    def set_params(self, params: TransformParams) -> None:
        """Replace the transform parameters, clamped to the panel ranges."""
        self.params = params.clamped()

    def render_frame(self) -> None:
        """Compose one frame and copy it into the display image."""
        self.composer.render_frame(self.params)
        kernel = _get_copy_region_kernel()
        kernel(self.context.color, self.display_image, self.width, self.height)

    def show_frame(self) -> None:
        self.canvas.set_image(self.display_image)
        self.window.show()

    def run(self) -> None:
        """Run the frame loop until the window is closed.

        Each iteration polls the window size, draws the parameter panel,
        composes a frame and presents it.
        """
        self._initialize_window()

        while self.is_running():
            self.handle_resize(self.window.get_window_shape())
            self._draw_gui_panel()
            self.render_frame()
            self.timer.tick()
            self.show_frame()

    def close(self) -> None:
        if self._window is not None:
            self._window.running = False

    @staticmethod
    def is_display_available() -> bool:
        """Check if a display is available for GUI rendering.

        Returns:
            True if a display is available, False for headless environments.
        """
        display = os.environ.get("DISPLAY")
        wayland = os.environ.get("WAYLAND_DISPLAY")

        if os.name == "nt":
            return True

        if os.uname().sysname == "Darwin":
            # SSH without X forwarding has no display
            ssh_connection = os.environ.get("SSH_CONNECTION")
            return not (ssh_connection and not display)

        return bool(display or wayland)

    # =========================================================================
    # Parameter panel
    # =========================================================================

    def _draw_gui_panel(self) -> None:
        """Draw the parameter panel, FPS readout and export button."""
        t, r, s = self.params.translation, self.params.rotation, self.params.scale

        with self.window.GUI.sub_window("Transform", 0.02, 0.02, 0.3, 0.5) as gui:
            gui.text(f"FPS: {self.timer.fps:.1f}")
            new_t = (
                gui.slider_float("Translate X", t[0], *TRANSLATION_RANGE),
                gui.slider_float("Translate Y", t[1], *TRANSLATION_RANGE),
                gui.slider_float("Translate Z", t[2], *TRANSLATION_RANGE),
            )
            new_r = (
                gui.slider_float("Rotate X", r[0], *ROTATION_RANGE),
                gui.slider_float("Rotate Y", r[1], *ROTATION_RANGE),
                gui.slider_float("Rotate Z", r[2], *ROTATION_RANGE),
            )
            new_s = (
                gui.slider_float("Scale X", s[0], *SCALE_RANGE),
                gui.slider_float("Scale Y", s[1], *SCALE_RANGE),
                gui.slider_float("Scale Z", s[2], *SCALE_RANGE),
            )
            if gui.button("Export PNG"):
                self.export_png()

        if (new_t, new_r, new_s) != (t, r, s):
            self.set_params(TransformParams(translation=new_t, rotation=new_r, scale=new_s))

    def export_png(self, filename: str | None = None) -> str:
        """Save the current frame as PNG.

        Args:
            filename: Output path (default: sdfview_YYYYMMDD_HHMMSS.png).

        Returns:
            The path written.
        """
        from sdfview.preview.export import save_png

        if filename is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filename = f"sdfview_{timestamp}.png"

        save_png(self.context, filename)
        print(f"Exported: {filename} ({self.width}x{self.height})")
        return filename
