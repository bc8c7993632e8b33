"""Scene object storage and nearest-hit scene queries.

Scene objects live in an arena of Taichi fields and are identified by their
index in insertion order. Each object records its kind (sphere or tiled
plane), the index of its geometry in the kind-specific arrays, and its
material ids. The object id doubles as the object's identity: the shader
compares ids to decide whether a shadow ray reached the light it aimed at.

Every object answers the same capability set, dispatched on kind:
    intersect_object(id, origin, direction) -> HitRecord
    object_normal(id, point)
    object_material(id, point) -> Material
    object_light_direction(id, point)

find_first_intersector() scans all objects linearly and keeps the nearest
hit. Ties keep the earlier object (strict < comparison).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.raycaster.materials.surface import add_material
    >>> from src.raycaster.scene.intersection import (
    ...     add_sphere, add_tiled_plane, clear_scene
    ... )
    >>> clear_scene()
    >>> red = add_material(albedo=(0.7, 0.1, 0.1))
    >>> white = add_material(albedo=(0.9, 0.9, 0.9))
    >>> black = add_material(albedo=(0.1, 0.1, 0.1))
    >>> add_sphere((0.0, 2.0, 0.0), 2.0, material_id=red)
    0
    >>> add_tiled_plane((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), white, black)
    1
    >>> # Use find_first_intersector within a Taichi kernel
"""

import logging
import math

import taichi as ti
import taichi.math as tm

from src.raycaster.core.ray import safe_normalize
from src.raycaster.geometry.plane import (
    TiledPlane,
    hit_plane,
    plane_light_direction,
    plane_normal,
    plane_tile_parity,
)
from src.raycaster.geometry.sphere import (
    HitRecord,
    Sphere,
    hit_sphere,
    sphere_light_direction,
    sphere_normal,
)
from src.raycaster.materials.surface import Material, get_material

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

logger = logging.getLogger(__name__)

# Object kinds
OBJECT_SPHERE = 0
OBJECT_TILED_PLANE = 1

# Distance reported for a miss
T_MAX = 1e30


@ti.dataclass
class SceneHitRecord:
    """Result of a nearest-hit query against the whole scene.

    Attributes:
        hit: Whether the ray intersected any object (1 if hit, 0 if miss).
        t: Distance along the normalized ray direction to the nearest hit.
            T_MAX on a miss.
        object_id: Id of the nearest object, or -1 on a miss.
    """

    hit: ti.i32
    t: ti.f32
    object_id: ti.i32


# Maximum number of objects supported in the scene
MAX_OBJECTS = 256

# Object arena: kind, kind-local index, and material ids per object
object_kinds = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
object_indices = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
object_material_ids = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
# Second checkerboard material for tiled planes (-1 for spheres)
object_alt_material_ids = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
num_objects = ti.field(dtype=ti.i32, shape=())

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_OBJECTS)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_OBJECTS)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Tiled plane storage: Structure of Arrays layout
plane_points = ti.Vector.field(3, dtype=ti.f32, shape=MAX_OBJECTS)
plane_normals = ti.Vector.field(3, dtype=ti.f32, shape=MAX_OBJECTS)
plane_tile_sizes = ti.field(dtype=ti.f32, shape=MAX_OBJECTS)
num_planes = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all objects from the scene.

    Resets the object counts to zero. The actual field data is not
    cleared but will be overwritten when new objects are added.
    """
    num_objects[None] = 0
    num_spheres[None] = 0
    num_planes[None] = 0


def _register_object(kind: int, index: int, material_id: int, alt_material_id: int) -> int:
    """Append an object to the arena and return its id."""
    object_id = num_objects[None]
    if object_id >= MAX_OBJECTS:
        raise RuntimeError(f"Maximum number of objects ({MAX_OBJECTS}) exceeded")
    object_kinds[object_id] = kind
    object_indices[object_id] = index
    object_material_ids[object_id] = material_id
    object_alt_material_ids[object_id] = alt_material_id
    num_objects[None] = object_id + 1
    return object_id


def add_sphere(
    center: tuple[float, float, float],
    radius: float,
    material_id: int = 0,
) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere as (x, y, z).
        radius: The radius of the sphere (must be positive).
        material_id: The material id to associate with this sphere.

    Returns:
        The object id of the added sphere.

    Raises:
        RuntimeError: If the maximum number of objects is exceeded.
        ValueError: If the radius is not positive.
    """
    if radius <= 0.0:
        raise ValueError(f"Sphere radius must be positive, got {radius}")
    if num_objects[None] >= MAX_OBJECTS:
        raise RuntimeError(f"Maximum number of objects ({MAX_OBJECTS}) exceeded")

    idx = num_spheres[None]
    sphere_centers[idx] = [center[0], center[1], center[2]]
    sphere_radii[idx] = radius
    num_spheres[None] = idx + 1

    object_id = _register_object(OBJECT_SPHERE, idx, material_id, -1)
    logger.debug("Added sphere %d: center=%s radius=%s", object_id, center, radius)
    return object_id


def add_tiled_plane(
    point: tuple[float, float, float],
    normal: tuple[float, float, float],
    material_id: int = 0,
    alt_material_id: int = 0,
    tile_size: float = 1.0,
) -> int:
    """Add an infinite checkerboard plane to the scene.

    Args:
        point: A point on the plane, also the origin of the tile grid.
        normal: The plane normal. Normalized before storage.
        material_id: Material of tiles with even parity.
        alt_material_id: Material of tiles with odd parity.
        tile_size: Edge length of one tile (must be positive).

    Returns:
        The object id of the added plane.

    Raises:
        RuntimeError: If the maximum number of objects is exceeded.
        ValueError: If the normal is zero-length or tile_size is not positive.
    """
    norm = math.sqrt(normal[0] ** 2 + normal[1] ** 2 + normal[2] ** 2)
    if norm < 1e-12:
        raise ValueError("Plane normal must be non-zero")
    if tile_size <= 0.0:
        raise ValueError(f"Tile size must be positive, got {tile_size}")
    if num_objects[None] >= MAX_OBJECTS:
        raise RuntimeError(f"Maximum number of objects ({MAX_OBJECTS}) exceeded")

    idx = num_planes[None]
    plane_points[idx] = [point[0], point[1], point[2]]
    plane_normals[idx] = [normal[0] / norm, normal[1] / norm, normal[2] / norm]
    plane_tile_sizes[idx] = tile_size
    num_planes[None] = idx + 1

    object_id = _register_object(OBJECT_TILED_PLANE, idx, material_id, alt_material_id)
    logger.debug(
        "Added tiled plane %d: point=%s normal=%s tile_size=%s",
        object_id,
        point,
        normal,
        tile_size,
    )
    return object_id


def get_object_count() -> int:
    """Get the number of objects in the scene."""
    return int(num_objects[None])


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


def get_plane_count() -> int:
    """Get the number of tiled planes in the scene."""
    return int(num_planes[None])


# =============================================================================
# Capability Dispatch
# =============================================================================


@ti.func
def _get_sphere(index: ti.i32) -> Sphere:
    return Sphere(center=sphere_centers[index], radius=sphere_radii[index])


@ti.func
def _get_plane(index: ti.i32) -> TiledPlane:
    return TiledPlane(
        point=plane_points[index],
        normal=plane_normals[index],
        tile_size=plane_tile_sizes[index],
    )


@ti.func
def intersect_object(object_id: ti.i32, ray_origin: vec3, ray_direction: vec3) -> HitRecord:
    """Intersect a ray with one scene object.

    Args:
        object_id: Id of the object to test.
        ray_origin: The starting point of the ray.
        ray_direction: The ray direction (normalized internally).

    Returns:
        The object's HitRecord.
    """
    rec = HitRecord(hit=0, t=0.0)
    kind = object_kinds[object_id]
    index = object_indices[object_id]
    if kind == OBJECT_SPHERE:
        rec = hit_sphere(ray_origin, ray_direction, _get_sphere(index))
    elif kind == OBJECT_TILED_PLANE:
        rec = hit_plane(ray_origin, ray_direction, _get_plane(index))
    return rec


@ti.func
def object_normal(object_id: ti.i32, point: vec3) -> vec3:
    """Surface normal of an object at a point on its surface."""
    normal = vec3(0.0, 0.0, 0.0)
    kind = object_kinds[object_id]
    index = object_indices[object_id]
    if kind == OBJECT_SPHERE:
        normal = sphere_normal(_get_sphere(index), point)
    elif kind == OBJECT_TILED_PLANE:
        normal = plane_normal(_get_plane(index), point)
    return normal


@ti.func
def object_material(object_id: ti.i32, point: vec3) -> Material:
    """Material of an object at a point on its surface.

    Spheres carry a single material. Tiled planes pick their primary
    material on even tiles and their alternate material on odd tiles.
    """
    material_id = object_material_ids[object_id]
    if object_kinds[object_id] == OBJECT_TILED_PLANE:
        plane = _get_plane(object_indices[object_id])
        if plane_tile_parity(plane, point) == 1:
            material_id = object_alt_material_ids[object_id]
    return get_material(material_id)


@ti.func
def object_light_direction(object_id: ti.i32, point: vec3) -> vec3:
    """Direction from a point toward an object treated as a light (not normalized)."""
    direction = vec3(0.0, 0.0, 0.0)
    kind = object_kinds[object_id]
    index = object_indices[object_id]
    if kind == OBJECT_SPHERE:
        direction = sphere_light_direction(_get_sphere(index), point)
    elif kind == OBJECT_TILED_PLANE:
        direction = plane_light_direction(_get_plane(index), point)
    return direction


# =============================================================================
# Scene Queries
# =============================================================================


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(hit=0, t=T_MAX, object_id=-1)


@ti.func
def find_first_intersector(ray_origin: vec3, ray_direction: vec3) -> SceneHitRecord:
    """Find the nearest object hit by a ray.

    Tests every object in insertion order and keeps the smallest distance.
    An object at exactly the current minimum distance does not replace the
    current winner, so ties resolve to the earliest inserted object.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The ray direction (need not be normalized). A zero
            vector hits nothing.

    Returns:
        A SceneHitRecord for the nearest hit, or a miss record.
    """
    direction = safe_normalize(ray_direction)
    result = _make_miss_record()

    for i in range(num_objects[None]):
        rec = intersect_object(i, ray_origin, direction)
        if rec.hit == 1 and rec.t < result.t:
            result = SceneHitRecord(hit=1, t=rec.t, object_id=i)

    return result
