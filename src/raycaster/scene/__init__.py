"""Scene module for object storage, scene queries, and scene building.

Components:
    intersection: Object arena in Taichi fields and the nearest-hit query
    manager: Scene manager coordinating objects and materials
    demo: The demo scene (four balls, a distant light, a checkerboard floor)

Scene data is organized for GPU access:
    - Structure-of-Arrays layout for geometric data
    - Object id equals insertion index and doubles as object identity
"""

from .demo import DemoSceneParams, create_demo_scene
from .intersection import (
    MAX_OBJECTS,
    OBJECT_SPHERE,
    OBJECT_TILED_PLANE,
    T_MAX,
    SceneHitRecord,
    add_sphere,
    add_tiled_plane,
    clear_scene,
    find_first_intersector,
    get_object_count,
    get_plane_count,
    get_sphere_count,
    intersect_object,
    object_light_direction,
    object_material,
    object_normal,
)
from .manager import (
    MaterialInfo,
    ObjectInfo,
    ObjectKind,
    SceneConfig,
    SceneManager,
)

__all__ = [
    # Intersection module
    "SceneHitRecord",
    "add_sphere",
    "add_tiled_plane",
    "clear_scene",
    "get_object_count",
    "get_sphere_count",
    "get_plane_count",
    "find_first_intersector",
    "intersect_object",
    "object_normal",
    "object_material",
    "object_light_direction",
    "MAX_OBJECTS",
    "OBJECT_SPHERE",
    "OBJECT_TILED_PLANE",
    "T_MAX",
    # Manager module
    "SceneManager",
    "ObjectKind",
    "MaterialInfo",
    "ObjectInfo",
    "SceneConfig",
    # Demo module
    "DemoSceneParams",
    "create_demo_scene",
]
