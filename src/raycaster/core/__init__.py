"""Core rendering module.

This module contains the fundamental building blocks for ray casting:

Components:
    ray: Ray data structure and vector utilities
    shader: Direct lighting with shadow rays (trace_ray)
    integrator: Render target and the per-pixel render driver
    renderer: Convenience wrapper around the render target

Each pixel is shaded independently: one primary ray finds the nearest
surface, then every scene object is probed as a potential light with a
single shadow ray. There is no recursion and no sampling noise, so a
single pass produces the final image.

All compute-intensive operations use Taichi kernels.
"""

from .ray import (
    Ray,
    build_onb_from_normal,
    clamp_color,
    cross,
    dot,
    length,
    length_squared,
    make_ray,
    normalize,
    ray_at,
    reflect,
    safe_normalize,
    vec3,
)

# Note: shader, integrator and renderer are NOT imported here to avoid
# circular imports. Import directly from src.raycaster.core.integrator or
# src.raycaster.core.renderer when needed.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "safe_normalize",
    "dot",
    "cross",
    "reflect",
    "clamp_color",
    "build_onb_from_normal",
]
