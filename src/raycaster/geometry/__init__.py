"""Geometry module for shape primitives.

This module provides geometric primitives and their closed-form
intersection algorithms:

Components:
    sphere: Sphere primitive with ray-sphere intersection
    plane: Infinite tiled (checkerboard) plane with ray-plane intersection

All intersection routines are implemented as Taichi functions (@ti.func).
Each primitive answers the same capability set, which the scene module
dispatches on:
    hit_<shape>(origin, direction, shape) -> HitRecord(hit, t)
    <shape>_normal(shape, point)
    <shape>_light_direction(shape, point)

Directions are normalized inside every intersection routine, and only
strictly positive distances count as hits.
"""

from .plane import (
    TiledPlane,
    hit_plane,
    make_plane,
    plane_light_direction,
    plane_normal,
    plane_tile_coords,
    plane_tile_parity,
)
from .sphere import (
    HitRecord,
    Sphere,
    hit_sphere,
    make_sphere,
    sphere_light_direction,
    sphere_normal,
)

__all__ = [
    "HitRecord",
    "Sphere",
    "hit_sphere",
    "make_sphere",
    "sphere_normal",
    "sphere_light_direction",
    "TiledPlane",
    "hit_plane",
    "make_plane",
    "plane_normal",
    "plane_tile_coords",
    "plane_tile_parity",
    "plane_light_direction",
]
