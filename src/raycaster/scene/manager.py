"""Scene manager for coordinating objects and materials.

This module provides a high-level scene building API on top of the material
registry and the object arena. It validates material references before an
object is inserted, remembers the parameters every material and object was
created with, and converts the scene to and from a JSON-friendly
configuration.

The SceneManager maintains:
- The material id space shared by all objects
- The object list in insertion order (object id == list index)
- Scene serialization/configuration support

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.raycaster.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> red = scene.add_material(albedo=(0.7, 0.1, 0.1), specular=(0.9, 0.1, 0.1))
    >>> scene.add_sphere(center=(0, 2, 0), radius=2.0, material_id=red)
    0
    >>> scene.to_dict()["objects"][0]["type"]
    'sphere'
"""

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

from src.raycaster.materials.surface import (
    MAX_MATERIALS,
    add_material,
    clear_materials,
    get_material_count,
)
from src.raycaster.scene.intersection import (
    MAX_OBJECTS,
    OBJECT_SPHERE,
    OBJECT_TILED_PLANE,
    add_sphere,
    add_tiled_plane,
    clear_scene,
    get_object_count,
    get_plane_count,
    get_sphere_count,
)

logger = logging.getLogger(__name__)


class ObjectKind(IntEnum):
    """Enumeration of supported scene object kinds.

    Values match the kind codes stored in the object arena.
    """

    SPHERE = OBJECT_SPHERE
    TILED_PLANE = OBJECT_TILED_PLANE


@dataclass
class MaterialInfo:
    """Information about a registered material.

    Attributes:
        material_id: The material id.
        params: The material parameters as provided during creation.
    """

    material_id: int
    params: dict[str, Any]


@dataclass
class ObjectInfo:
    """Information about an object in the scene.

    Attributes:
        object_id: The object id (its index in insertion order).
        kind: The object kind.
        params: The geometry and material parameters of the object.
    """

    object_id: int
    kind: ObjectKind
    params: dict[str, Any]


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        materials: List of material configurations, in id order.
        objects: List of object configurations, in insertion order. Each
            entry carries a "type" key ("sphere" or "tiled_plane").
    """

    materials: list[dict[str, Any]] = field(default_factory=list)
    objects: list[dict[str, Any]] = field(default_factory=list)


def _as_vec3(values: Any, default: tuple[float, float, float]) -> tuple[float, float, float]:
    """Convert a list from a configuration into a 3-tuple of floats."""
    if values is None:
        return default
    if len(values) != 3:
        raise ValueError(f"Expected 3 components, got {len(values)}")
    return (float(values[0]), float(values[1]), float(values[2]))


class SceneManager:
    """Scene manager coordinating objects and materials.

    Creating a SceneManager clears the global material registry and object
    arena, so only one scene is live at a time.

    Attributes:
        materials: List of MaterialInfo for all registered materials.
        objects: List of ObjectInfo for all objects, in insertion order.

    Example:
        >>> scene = SceneManager()
        >>> white = scene.add_material(albedo=(0.9, 0.9, 0.9))
        >>> black = scene.add_material(albedo=(0.2, 0.2, 0.2))
        >>> scene.add_tiled_plane((0, 0, 0), (0, 1, 0), white, black)
        0
        >>> scene.add_sphere_with_new_material((0, 2, 0), 0.5, albedo=(1, 1, 1),
        ...                                    emissive=(1, 1, 1))
        (1, 2)
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.materials: list[MaterialInfo] = []
        self.objects: list[ObjectInfo] = []
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        clear_scene()
        clear_materials()
        self.materials.clear()
        self.objects.clear()

    def clear(self) -> None:
        """Clear the entire scene (objects and materials).

        Resets all Taichi fields and internal tracking structures.
        """
        self._clear_all()

    def _check_material_id(self, material_id: int) -> None:
        if material_id < 0 or material_id >= get_material_count():
            raise ValueError(f"Invalid material_id: {material_id}")

    # =========================================================================
    # Material Management
    # =========================================================================

    def add_material(
        self,
        albedo: tuple[float, float, float],
        specular: tuple[float, float, float] = (0.0, 0.0, 0.0),
        emissive: tuple[float, float, float] = (0.0, 0.0, 0.0),
        reflectance: float = 0.0,
    ) -> int:
        """Add a material to the scene.

        Args:
            albedo: Diffuse reflectance color, components in [0, 1].
            specular: Specular reflectance color, components in [0, 1].
            emissive: Emitted color, components non-negative.
            reflectance: Mirror reflectance in [0, 1].

        Returns:
            The material id.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If any parameter is out of range.
        """
        material_id = add_material(albedo, specular, emissive, reflectance)
        self.materials.append(
            MaterialInfo(
                material_id=material_id,
                params={
                    "albedo": tuple(albedo),
                    "specular": tuple(specular),
                    "emissive": tuple(emissive),
                    "reflectance": reflectance,
                },
            )
        )
        return material_id

    def get_material_count(self) -> int:
        """Get the total number of materials in the scene."""
        return get_material_count()

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Get information about a material by id.

        Returns:
            MaterialInfo for the material, or None if not found.
        """
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    # =========================================================================
    # Object Management
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material_id: int,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere (must be positive).
            material_id: The material id to assign to the sphere.

        Returns:
            The object id of the sphere.

        Raises:
            RuntimeError: If the maximum number of objects is exceeded.
            ValueError: If material_id is invalid or the radius is not positive.
        """
        self._check_material_id(material_id)
        object_id = add_sphere(center, radius, material_id)
        self.objects.append(
            ObjectInfo(
                object_id=object_id,
                kind=ObjectKind.SPHERE,
                params={
                    "center": tuple(center),
                    "radius": radius,
                    "material_id": material_id,
                },
            )
        )
        return object_id

    def add_tiled_plane(
        self,
        point: tuple[float, float, float],
        normal: tuple[float, float, float],
        material_id: int,
        alt_material_id: int,
        tile_size: float = 1.0,
    ) -> int:
        """Add an infinite checkerboard plane to the scene.

        Args:
            point: A point on the plane, also the origin of the tile grid.
            normal: The plane normal (normalized on insert).
            material_id: Material of even tiles.
            alt_material_id: Material of odd tiles.
            tile_size: Edge length of one tile.

        Returns:
            The object id of the plane.

        Raises:
            RuntimeError: If the maximum number of objects is exceeded.
            ValueError: If a material id is invalid, the normal is zero, or
                tile_size is not positive.
        """
        self._check_material_id(material_id)
        self._check_material_id(alt_material_id)
        object_id = add_tiled_plane(point, normal, material_id, alt_material_id, tile_size)
        self.objects.append(
            ObjectInfo(
                object_id=object_id,
                kind=ObjectKind.TILED_PLANE,
                params={
                    "point": tuple(point),
                    "normal": tuple(normal),
                    "material_id": material_id,
                    "alt_material_id": alt_material_id,
                    "tile_size": tile_size,
                },
            )
        )
        return object_id

    def add_sphere_with_new_material(
        self,
        center: tuple[float, float, float],
        radius: float,
        albedo: tuple[float, float, float],
        specular: tuple[float, float, float] = (0.0, 0.0, 0.0),
        emissive: tuple[float, float, float] = (0.0, 0.0, 0.0),
        reflectance: float = 0.0,
    ) -> tuple[int, int]:
        """Add a sphere with a new material.

        Convenience method that creates a material and sphere in one call.

        Returns:
            Tuple of (object_id, material_id).
        """
        material_id = self.add_material(albedo, specular, emissive, reflectance)
        object_id = self.add_sphere(center, radius, material_id)
        return object_id, material_id

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_object_count(self) -> int:
        """Get the total number of objects in the scene."""
        return get_object_count()

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return get_sphere_count()

    def get_plane_count(self) -> int:
        """Get the number of tiled planes in the scene."""
        return get_plane_count()

    def get_object_info(self, object_id: int) -> ObjectInfo | None:
        """Get information about an object by id.

        Returns:
            ObjectInfo for the object, or None if not found.
        """
        if 0 <= object_id < len(self.objects):
            return self.objects[object_id]
        return None

    def get_light_ids(self) -> list[int]:
        """Get the ids of objects whose material emits light.

        A tiled plane counts as a light if either of its materials emits.
        """
        lights = []
        for obj in self.objects:
            material_ids = [obj.params["material_id"]]
            if obj.kind == ObjectKind.TILED_PLANE:
                material_ids.append(obj.params["alt_material_id"])
            if any(any(self.materials[m].params["emissive"]) for m in material_ids):
                lights.append(obj.object_id)
        return lights

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object.

        Returns:
            A SceneConfig containing all materials and objects.
        """
        config = SceneConfig()

        for mat in self.materials:
            mat_config: dict[str, Any] = {}
            for key, value in mat.params.items():
                mat_config[key] = list(value) if isinstance(value, tuple) else value
            config.materials.append(mat_config)

        for obj in self.objects:
            obj_config: dict[str, Any] = {"type": obj.kind.name.lower()}
            for key, value in obj.params.items():
                obj_config[key] = list(value) if isinstance(value, tuple) else value
            config.objects.append(obj_config)

        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Clears the current scene and loads the configuration. Objects are
        inserted in list order, so object ids are preserved.

        Args:
            config: The scene configuration to load.

        Raises:
            ValueError: If the configuration contains invalid data.
        """
        self.clear()

        # Materials first (objects reference them)
        for mat_config in config.materials:
            self.add_material(
                albedo=_as_vec3(mat_config.get("albedo"), (0.5, 0.5, 0.5)),
                specular=_as_vec3(mat_config.get("specular"), (0.0, 0.0, 0.0)),
                emissive=_as_vec3(mat_config.get("emissive"), (0.0, 0.0, 0.0)),
                reflectance=float(mat_config.get("reflectance", 0.0)),
            )

        for obj_config in config.objects:
            obj_type = str(obj_config.get("type", "")).lower()
            if obj_type == "sphere":
                self.add_sphere(
                    center=_as_vec3(obj_config.get("center"), (0.0, 0.0, 0.0)),
                    radius=float(obj_config.get("radius", 1.0)),
                    material_id=int(obj_config.get("material_id", 0)),
                )
            elif obj_type == "tiled_plane":
                self.add_tiled_plane(
                    point=_as_vec3(obj_config.get("point"), (0.0, 0.0, 0.0)),
                    normal=_as_vec3(obj_config.get("normal"), (0.0, 1.0, 0.0)),
                    material_id=int(obj_config.get("material_id", 0)),
                    alt_material_id=int(obj_config.get("alt_material_id", 0)),
                    tile_size=float(obj_config.get("tile_size", 1.0)),
                )
            else:
                raise ValueError(f"Unknown object type: {obj_type}")

        logger.debug(
            "Loaded scene: %d materials, %d objects",
            len(self.materials),
            len(self.objects),
        )

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        config = self.to_config()
        return {
            "materials": config.materials,
            "objects": config.objects,
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary.

        Args:
            data: Dictionary with 'materials' and 'objects' keys.
        """
        config = SceneConfig(
            materials=data.get("materials", []),
            objects=data.get("objects", []),
        )
        self.from_config(config)

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_objects() -> int:
        """Get the maximum number of objects supported."""
        return MAX_OBJECTS

    @staticmethod
    def get_max_materials() -> int:
        """Get the maximum number of materials supported."""
        return MAX_MATERIALS
