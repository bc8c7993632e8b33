"""Renderer wrapper around the render target and render driver.

The Renderer class owns the image dimensions and delegates to the global
integrator buffers (which are Taichi fields). A render is a single pass:
every pixel gets exactly one primary ray, so calling render() again on an
unchanged scene produces the same image.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from src.raycaster.core.renderer import Renderer
    >>> from src.raycaster.scene.demo import create_demo_scene
    >>> from src.raycaster.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_demo_scene()
    >>> setup_camera(camera)
    >>>
    >>> renderer = Renderer(camera.width, camera.height)
    >>> renderer.render()
    >>> renderer.save_image("demo.png")
"""

import time
from collections.abc import Callable

import numpy as np
import numpy.typing as npt

from src.raycaster.core.integrator import (
    PixelConsumer,
    clear_render_target,
    emit_pixels,
    get_image_numpy,
    render_image,
    setup_render_target,
)

# Callback receives the elapsed wall-clock seconds of the finished pass
RenderCallback = Callable[[float], None]


class Renderer:
    """Single-pass renderer bound to an image size.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
    """

    def __init__(self, width: int, height: int) -> None:
        """Initialize the renderer and its render target.

        Args:
            width: Image width in pixels (max 2048).
            height: Image height in pixels (max 2048).

        Raises:
            ValueError: If dimensions are not positive or exceed the maximum.
        """
        setup_render_target(width, height)
        self._width = width
        self._height = height

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    def reset(self) -> None:
        """Clear the image to black without changing its dimensions."""
        clear_render_target()

    def resize(self, width: int, height: int) -> None:
        """Resize the render target and clear it.

        The camera must be set up again for the new size before rendering.

        Raises:
            ValueError: If dimensions are not positive or exceed the maximum.
        """
        setup_render_target(width, height)
        self._width = width
        self._height = height

    def render(self, callback: RenderCallback | None = None) -> float:
        """Render the scene through the current camera.

        Args:
            callback: Optional callback called once the pass completes.
                Receives the elapsed time in seconds.

        Returns:
            The elapsed time in seconds.

        Raises:
            RuntimeError: If the camera has not been set up.
            ValueError: If the camera was set up for a different image size.
        """
        start_time = time.perf_counter()
        render_image()
        elapsed = time.perf_counter() - start_time

        if callback is not None:
            callback(elapsed)
        return elapsed

    def get_image_numpy(self) -> npt.NDArray[np.uint8]:
        """Get the rendered image as a (height, width, 3) uint8 array."""
        return get_image_numpy()

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Alias for get_image_numpy(); the buffer is already 8-bit."""
        return self.get_image_numpy()

    def get_image_float(self) -> npt.NDArray[np.float32]:
        """Get the rendered image scaled to [0, 1] as float32."""
        return self.get_image_numpy().astype(np.float32) / 255.0

    def emit_pixels(self, consumer: PixelConsumer) -> None:
        """Hand every pixel to a consumer in row-major order.

        Args:
            consumer: Callable receiving (x, y, (r, g, b)).
        """
        emit_pixels(consumer)

    def save_image(self, filepath: str) -> None:
        """Save the rendered image to a file.

        Args:
            filepath: Path to save the image (e.g., "output.png").
        """
        from PIL import Image as PILImage

        pil_image = PILImage.fromarray(self.get_image_uint8(), mode="RGB")
        pil_image.save(filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return f"Renderer(width={self.width}, height={self.height})"
