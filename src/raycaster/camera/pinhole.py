"""Pinhole camera model for per-pixel ray generation.

This module implements the camera that maps a pixel coordinate to a
world-space ray direction. The camera supports:
- Look-at positioning (position, target, world up)
- Vertical field of view specification
- Arbitrary image sizes (aspect ratio derived from width / height)

The camera builds an orthonormal basis from the view parameters:
- forward: points from the position toward the target
- right: points right in the image plane
- up: points up in the image plane

together with the half extents of a view plane at unit distance in front
of the camera. A pixel is mapped to normalized device coordinates centered
on the image and the ray direction is the linear combination

    forward + ndc.x * half_width * right + ndc.y * half_height * up

Pixel row 0 is the top of the image, so increasing pixel y moves down.
Ray directions are not normalized; every consumer normalizes before use.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.raycaster.camera.pinhole import Camera, setup_camera, get_world_ray
    >>>
    >>> camera = Camera.looking_along(
    ...     position=(0.0, 6.0, 8.0),
    ...     direction=(0.0, -0.8, -1.0),
    ...     vfov=60.0,
    ...     width=512,
    ...     height=512,
    ... )
    >>> setup_camera(camera)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_world_ray(256.5, 256.5)  # Ray through image center
"""

import logging
import math
from dataclasses import dataclass

import numpy as np
import taichi as ti

from src.raycaster.core.ray import vec3

logger = logging.getLogger(__name__)

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class Camera:
    """Configuration for a pinhole (perspective) camera.

    Attributes:
        position: Camera position in world space (x, y, z).
        target: Point the camera is looking at in world space (x, y, z).
        vfov: Vertical field of view in degrees, in (0, 180).
        width: Image width in pixels.
        height: Image height in pixels.
        world_up: World up direction used to orient the camera.
    """

    position: tuple[float, float, float]
    target: tuple[float, float, float]
    vfov: float
    width: int
    height: int
    world_up: tuple[float, float, float] = (0.0, 1.0, 0.0)

    @classmethod
    def looking_along(
        cls,
        position: tuple[float, float, float],
        direction: tuple[float, float, float],
        vfov: float,
        width: int,
        height: int,
        world_up: tuple[float, float, float] = (0.0, 1.0, 0.0),
    ) -> "Camera":
        """Create a camera looking along a direction instead of at a point.

        The target is position + direction.
        """
        target = (
            position[0] + direction[0],
            position[1] + direction[1],
            position[2] + direction[2],
        )
        return cls(
            position=position,
            target=target,
            vfov=vfov,
            width=width,
            height=height,
            world_up=world_up,
        )

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height of the output image."""
        return self.width / self.height


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

# Camera origin (position)
_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())

# Orthonormal basis vectors
_camera_forward = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_right = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_up = ti.Vector.field(3, dtype=ti.f32, shape=())

# View plane half extents at unit distance
_half_width = ti.field(dtype=ti.f32, shape=())
_half_height = ti.field(dtype=ti.f32, shape=())

# Image size in pixels
_image_width = ti.field(dtype=ti.f32, shape=())
_image_height = ti.field(dtype=ti.f32, shape=())

_camera_initialized = ti.field(dtype=ti.i32, shape=())


# =============================================================================
# Camera Setup (Python-side, called once per camera configuration)
# =============================================================================


def setup_camera(camera: Camera) -> None:
    """Initialize camera state from configuration.

    Computes the camera's orthonormal basis and view plane extents from the
    provided parameters. This must be called before rendering, and the
    camera state is read-only afterwards.

    Args:
        camera: Camera configuration with position, orientation, and FOV.

    Raises:
        ValueError: If the image size is not positive, the field of view is
            outside (0, 180) degrees, the position equals the target, or the
            view direction is parallel to the world up vector.
    """
    if camera.width <= 0 or camera.height <= 0:
        raise ValueError(f"Image size must be positive, got {camera.width}x{camera.height}")
    if not 0.0 < camera.vfov < 180.0:
        raise ValueError(f"Field of view must be in (0, 180) degrees, got {camera.vfov}")

    position = np.array(camera.position, dtype=np.float64)
    target = np.array(camera.target, dtype=np.float64)
    world_up = np.array(camera.world_up, dtype=np.float64)

    forward = target - position
    forward_len = np.linalg.norm(forward)
    if forward_len < 1e-12:
        raise ValueError("Camera position and target must differ")
    forward = forward / forward_len

    right = np.cross(forward, world_up)
    right_len = np.linalg.norm(right)
    if right_len < 1e-12:
        raise ValueError("Camera view direction must not be parallel to world_up")
    right = right / right_len

    up = np.cross(right, forward)

    half_height = math.tan(math.radians(camera.vfov) / 2.0)
    half_width = half_height * camera.aspect_ratio

    _camera_origin[None] = position.tolist()
    _camera_forward[None] = forward.tolist()
    _camera_right[None] = right.tolist()
    _camera_up[None] = up.tolist()
    _half_width[None] = half_width
    _half_height[None] = half_height
    _image_width[None] = float(camera.width)
    _image_height[None] = float(camera.height)
    _camera_initialized[None] = 1

    logger.debug(
        "Camera set up: position=%s forward=%s half_extents=(%.4f, %.4f)",
        camera.position,
        forward.tolist(),
        half_width,
        half_height,
    )


def reset_camera() -> None:
    """Mark the camera as not set up. Field data is overwritten by the next setup."""
    _camera_initialized[None] = 0


def is_camera_initialized() -> bool:
    """Check whether setup_camera() has been called."""
    return bool(_camera_initialized[None])


def get_image_size() -> tuple[int, int]:
    """Get the image size the camera was configured for.

    Returns:
        Tuple of (width, height) in pixels.

    Raises:
        RuntimeError: If the camera has not been set up.
    """
    if not is_camera_initialized():
        raise RuntimeError("Camera not set up. Call setup_camera() first.")
    return int(_image_width[None]), int(_image_height[None])


# =============================================================================
# Ray Generation (Taichi-compatible)
# =============================================================================


@ti.func
def get_world_ray(pixel_x: ti.f32, pixel_y: ti.f32) -> vec3:
    """Generate the world-space ray direction through a pixel coordinate.

    The pixel coordinate is continuous: (x + 0.5, y + 0.5) is the center
    of pixel (x, y). x grows to the right and y grows downward.

    Args:
        pixel_x: Horizontal pixel coordinate in [0, width].
        pixel_y: Vertical pixel coordinate in [0, height].

    Returns:
        The ray direction. Not normalized.
    """
    ndc_x = 2.0 * pixel_x / _image_width[None] - 1.0
    ndc_y = 1.0 - 2.0 * pixel_y / _image_height[None]

    return (
        _camera_forward[None]
        + ndc_x * _half_width[None] * _camera_right[None]
        + ndc_y * _half_height[None] * _camera_up[None]
    )


@ti.func
def get_camera_origin() -> vec3:
    """Get the camera origin (position) in world space."""
    return _camera_origin[None]


@ti.func
def get_camera_basis():
    """Get the camera's orthonormal basis vectors.

    Returns:
        A tuple (forward, right, up) of world-space unit vectors.
    """
    return _camera_forward[None], _camera_right[None], _camera_up[None]


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, ...]]:
    """Get current camera state for debugging.

    Returns a dictionary with camera vectors that can be inspected
    from Python. Useful for verifying camera setup.

    Returns:
        Dictionary with origin, forward, right, up, and half_extents.
    """
    origin_vec = _camera_origin[None]
    forward_vec = _camera_forward[None]
    right_vec = _camera_right[None]
    up_vec = _camera_up[None]

    return {
        "origin": (float(origin_vec[0]), float(origin_vec[1]), float(origin_vec[2])),
        "forward": (float(forward_vec[0]), float(forward_vec[1]), float(forward_vec[2])),
        "right": (float(right_vec[0]), float(right_vec[1]), float(right_vec[2])),
        "up": (float(up_vec[0]), float(up_vec[1]), float(up_vec[2])),
        "half_extents": (float(_half_width[None]), float(_half_height[None])),
    }


@ti.kernel
def _world_ray_kernel(pixel_x: ti.f32, pixel_y: ti.f32) -> vec3:
    return get_world_ray(pixel_x, pixel_y)


def world_ray(pixel_x: float, pixel_y: float) -> tuple[float, float, float]:
    """Python-callable wrapper around get_world_ray().

    Args:
        pixel_x: Horizontal pixel coordinate.
        pixel_y: Vertical pixel coordinate.

    Returns:
        The (unnormalized) ray direction as a tuple.

    Raises:
        RuntimeError: If the camera has not been set up.
    """
    if not is_camera_initialized():
        raise RuntimeError("Camera not set up. Call setup_camera() first.")
    d = _world_ray_kernel(pixel_x, pixel_y)
    return (float(d[0]), float(d[1]), float(d[2]))
