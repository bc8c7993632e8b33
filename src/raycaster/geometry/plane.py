"""Infinite plane primitive with a checkerboard tile pattern.

A tiled plane is defined by:
- point: any point on the plane (also the origin of the tile grid)
- normal: unit normal vector
- tile_size: edge length of one square tile

The tile grid is laid out along the two tangent axes produced by
build_onb_from_normal(normal). A surface point is projected onto those axes,
each coordinate is floor-divided by the tile size, and the parity of the sum
of the two integer indices selects one of the plane's two materials.

Ray-plane intersection uses the standard formula:
    t = dot(point - origin, normal) / dot(direction, normal)

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.raycaster.geometry.plane import TiledPlane, hit_plane
    >>> # Ground plane at y=0 with 1x1 tiles
    >>> plane = TiledPlane(
    ...     point=ti.math.vec3(0, 0, 0),
    ...     normal=ti.math.vec3(0, 1, 0),
    ...     tile_size=1.0,
    ... )
    >>> # Use hit_plane within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from src.raycaster.core.ray import build_onb_from_normal, safe_normalize

from .sphere import HitRecord

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Rays whose direction is this close to perpendicular to the normal are parallel
PARALLEL_EPSILON = 1e-8


@ti.dataclass
class TiledPlane:
    """An infinite plane with a checkerboard pattern.

    Attributes:
        point: A point on the plane; the tile grid is anchored here (vec3).
        normal: The unit normal of the plane (vec3).
        tile_size: Edge length of one tile (positive float).
    """

    point: vec3
    normal: vec3
    tile_size: ti.f32


@ti.func
def hit_plane(ray_origin: vec3, ray_direction: vec3, plane: TiledPlane) -> HitRecord:
    """Test for ray-plane intersection.

    The direction is normalized before use. A ray parallel to the plane
    (including a zero direction) misses, as does a plane behind the origin.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be normalized).
        plane: The plane to test intersection against.

    Returns:
        A HitRecord. Check the hit field to determine if intersection occurred.
    """
    direction = safe_normalize(ray_direction)
    denom = tm.dot(direction, plane.normal)

    did_hit = 0
    hit_t = 0.0

    if ti.abs(denom) > PARALLEL_EPSILON:
        t = tm.dot(plane.point - ray_origin, plane.normal) / denom
        if t > 0.0:
            did_hit = 1
            hit_t = t

    return HitRecord(hit=did_hit, t=hit_t)


@ti.func
def plane_normal(plane: TiledPlane, point: vec3) -> vec3:
    """Unit normal of the plane; identical at every point."""
    return plane.normal


@ti.func
def plane_tile_coords(plane: TiledPlane, point: vec3):
    """Integer tile indices of a point along the plane's two tangent axes.

    Args:
        plane: The plane defining the tile grid.
        point: A point on (or near) the plane.

    Returns:
        A tuple (i, j) of tile indices. Indices floor toward negative
        infinity, so tiles keep their size across the grid origin.
    """
    tangent, bitangent, _ = build_onb_from_normal(plane.normal)
    offset = point - plane.point
    i = ti.cast(ti.floor(tm.dot(offset, tangent) / plane.tile_size), ti.i32)
    j = ti.cast(ti.floor(tm.dot(offset, bitangent) / plane.tile_size), ti.i32)
    return i, j


@ti.func
def plane_tile_parity(plane: TiledPlane, point: vec3) -> ti.i32:
    """Checkerboard parity (0 or 1) of the tile containing a point."""
    i, j = plane_tile_coords(plane, point)
    # Bitwise and keeps the parity correct for negative indices
    return (i + j) & 1


@ti.func
def plane_light_direction(plane: TiledPlane, point: vec3) -> vec3:
    """Direction from a point toward the plane along its normal.

    Points on or above the plane look down (-normal); points below look up.
    """
    result = -plane.normal
    if tm.dot(point - plane.point, plane.normal) < 0.0:
        result = plane.normal
    return result


@ti.func
def make_plane(point: vec3, normal: vec3, tile_size: ti.f32) -> TiledPlane:
    """Create a tiled plane, normalizing the normal vector."""
    return TiledPlane(point=point, normal=safe_normalize(normal), tile_size=tile_size)
