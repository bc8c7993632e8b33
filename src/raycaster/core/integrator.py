"""Render driver and 8-bit render target.

This module owns the output image buffer and the kernel that fills it. For
every pixel (x, y) the driver:

1. builds a camera ray through the pixel center (x + 0.5, y + 0.5),
2. shades it with trace_ray() at depth 0,
3. scales the color by 255, clamps each channel to [0, 255], and
   truncates to an unsigned 8-bit integer,
4. stores the result at (x, y).

Pixels are independent, so the kernel is a parallel loop over the image.
The scene, materials, and camera must be fully set up beforehand and are
only read while rendering.

The buffer is exposed as a NumPy array (row 0 at the top) and through
emit_pixels(), which hands every pixel to a consumer callback in row-major
order.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.raycaster.camera.pinhole import setup_camera
    >>> from src.raycaster.core.integrator import (
    ...     render_image, setup_render_target, get_image_numpy
    ... )
    >>> from src.raycaster.scene.demo import create_demo_scene
    >>>
    >>> scene, camera = create_demo_scene()
    >>> setup_camera(camera)
    >>> setup_render_target(camera.width, camera.height)
    >>> render_image()
    >>> image = get_image_numpy()  # (512, 512, 3) uint8
"""

import logging
import time
from collections.abc import Callable

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.raycaster.camera.pinhole import (
    get_camera_origin,
    get_image_size,
    get_world_ray,
    is_camera_initialized,
)
from src.raycaster.core.ray import clamp_color
from src.raycaster.core.shader import trace_ray
from src.raycaster.scene.intersection import find_first_intersector

# Type alias for 3D vectors
vec3 = tm.vec3

logger = logging.getLogger(__name__)

# Consumer of rendered pixels: receives (x, y, (r, g, b)) with 8-bit channels
PixelConsumer = Callable[[int, int, tuple[int, int, int]], None]

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# 8-bit RGB pixel buffer indexed by (x, y), preallocated to max size
_pixel_buffer = ti.Vector.field(3, dtype=ti.u8, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffer.

    Sets the active image dimensions and clears the buffer to black.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


@ti.kernel
def _fill_buffer(width: ti.i32, height: ti.i32, r: ti.i32, g: ti.i32, b: ti.i32):
    for x, y in ti.ndrange(width, height):
        _pixel_buffer[x, y] = ti.cast(ti.Vector([r, g, b]), ti.u8)


def clear_render_target(color: tuple[int, int, int] = (0, 0, 0)) -> None:
    """Fill the active region of the render target with one color.

    Args:
        color: 8-bit (R, G, B) fill color.

    Raises:
        ValueError: If a channel is outside [0, 255].
    """
    for channel in color:
        if channel < 0 or channel > 255:
            raise ValueError(f"Color channel {channel} is outside [0, 255]")
    width, height = get_image_dimensions()
    _fill_buffer(width, height, color[0], color[1], color[2])


def reset_render_target() -> None:
    """Mark the render target as not set up."""
    _render_target_initialized[None] = 0


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions.

    Returns:
        Tuple of (width, height).
    """
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def _check_camera_matches_target() -> None:
    """Check that the camera is set up for the render target's size."""
    if not is_camera_initialized():
        raise RuntimeError("Camera not set up. Call setup_camera() first.")
    if get_image_size() != get_image_dimensions():
        raise ValueError(
            f"Camera image size {get_image_size()} does not match "
            f"render target {get_image_dimensions()}"
        )


# =============================================================================
# Render Driver
# =============================================================================


@ti.func
def to_rgb8(color: vec3):
    """Convert a linear color to an 8-bit RGB vector.

    Scales by 255, clamps each channel to [0, 255], and truncates.
    """
    return ti.cast(clamp_color(color * 255.0, 0.0, 255.0), ti.u8)


@ti.func
def shade_pixel(x: ti.i32, y: ti.i32) -> vec3:
    """Shade the ray through the center of pixel (x, y)."""
    direction = get_world_ray(ti.cast(x, ti.f32) + 0.5, ti.cast(y, ti.f32) + 0.5)
    return trace_ray(get_camera_origin(), direction, 0)


@ti.kernel
def _render_kernel(width: ti.i32, height: ti.i32):
    """Shade every pixel and store the 8-bit result."""
    for y, x in ti.ndrange(height, width):
        _pixel_buffer[x, y] = to_rgb8(shade_pixel(x, y))


@ti.kernel
def _render_single_pixel(x: ti.i32, y: ti.i32) -> vec3:
    return shade_pixel(x, y)


@ti.kernel
def _pick_single_pixel(x: ti.i32, y: ti.i32) -> ti.i32:
    direction = get_world_ray(ti.cast(x, ti.f32) + 0.5, ti.cast(y, ti.f32) + 0.5)
    return find_first_intersector(get_camera_origin(), direction).object_id


@ti.kernel
def _trace_single_ray(origin: vec3, direction: vec3) -> vec3:
    return trace_ray(origin, direction, 0)


def render_image() -> None:
    """Render every pixel of the image into the render target.

    Raises:
        RuntimeError: If the render target or the camera has not been set up.
        ValueError: If the camera was set up for a different image size.
    """
    _check_render_target_initialized()
    _check_camera_matches_target()

    width, height = get_image_dimensions()
    start_time = time.perf_counter()

    _render_kernel(width, height)
    ti.sync()

    logger.info(
        "Rendered %dx%d image in %.3fs",
        width,
        height,
        time.perf_counter() - start_time,
    )


def render_pixel(x: int, y: int) -> tuple[float, float, float]:
    """Shade a single pixel without writing to the render target.

    Useful for testing and debugging. The color is returned unclamped.

    Args:
        x: Pixel column (0 = left).
        y: Pixel row (0 = top).

    Returns:
        Tuple of (R, G, B) color values.

    Raises:
        RuntimeError: If the camera has not been set up.
    """
    if not is_camera_initialized():
        raise RuntimeError("Camera not set up. Call setup_camera() first.")
    color = _render_single_pixel(x, y)
    return (float(color[0]), float(color[1]), float(color[2]))


def pick_object(x: int, y: int) -> int:
    """Get the id of the object seen through a pixel.

    Args:
        x: Pixel column (0 = left).
        y: Pixel row (0 = top).

    Returns:
        The object id of the nearest hit, or -1 if the ray hits nothing.

    Raises:
        RuntimeError: If the camera has not been set up.
    """
    if not is_camera_initialized():
        raise RuntimeError("Camera not set up. Call setup_camera() first.")
    return int(_pick_single_pixel(x, y))


def trace(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> tuple[float, float, float]:
    """Shade an arbitrary ray. Python-callable wrapper around trace_ray().

    Args:
        origin: Ray origin as (x, y, z).
        direction: Ray direction as (x, y, z); need not be normalized.

    Returns:
        Tuple of (R, G, B) color values, unclamped.
    """
    color = _trace_single_ray(
        vec3(origin[0], origin[1], origin[2]),
        vec3(direction[0], direction[1], direction[2]),
    )
    return (float(color[0]), float(color[1]), float(color[2]))


# =============================================================================
# Image Output
# =============================================================================


def get_image_numpy() -> npt.NDArray[np.uint8]:
    """Get the rendered image as a NumPy array.

    The array shape is (height, width, 3) with dtype uint8; row 0 is the
    top of the image.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    # Full buffer is (MAX_W, MAX_H, 3) indexed by (x, y)
    full_image = _pixel_buffer.to_numpy()
    image = full_image[:width, :height, :]

    # Transpose from (width, height, 3) to (height, width, 3)
    return np.ascontiguousarray(np.transpose(image, (1, 0, 2))).astype(np.uint8)


def emit_pixels(consumer: PixelConsumer) -> None:
    """Hand every pixel of the render target to a consumer.

    Pixels are delivered in row-major order: all of row 0 left to right,
    then row 1, and so on.

    Args:
        consumer: Callable receiving (x, y, (r, g, b)).

    Raises:
        RuntimeError: If render target has not been set up.
    """
    image = get_image_numpy()
    height, width, _ = image.shape
    for y in range(height):
        for x in range(width):
            r, g, b = image[y, x]
            consumer(x, y, (int(r), int(g), int(b)))
