"""Camera module for view and ray generation.

This module provides the camera model used to generate primary rays:

Components:
    pinhole: Pinhole (perspective) camera with look-at positioning

Camera responsibilities:
    - Build an orthonormal (forward, right, up) basis from position and target
    - Derive view plane half extents from field of view and aspect ratio
    - Map a pixel coordinate to a world-space ray direction

There is no depth of field, lens distortion, or jitter: each pixel gets
exactly one ray through its center.
"""

from .pinhole import (
    Camera,
    get_camera_basis,
    get_camera_info,
    get_camera_origin,
    get_image_size,
    get_world_ray,
    is_camera_initialized,
    reset_camera,
    setup_camera,
    world_ray,
)

__all__ = [
    "Camera",
    "setup_camera",
    "get_world_ray",
    "world_ray",
    "get_camera_origin",
    "get_camera_basis",
    "get_camera_info",
    "get_image_size",
    "is_camera_initialized",
    "reset_camera",
]
