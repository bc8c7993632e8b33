"""Surface material model for direct lighting.

A material bundles the reflectance properties of a surface point:

    albedo:      diffuse reflectance color, scaled by each light's emission
    specular:    specular reflectance color
    emissive:    self-emitted color; a non-zero value makes the object a light
    reflectance: mirror reflectance, stored for a future recursive variant
                 and not consumed by the current shading model

Materials live in a registry of Taichi fields and are referenced by integer
id. Scene objects resolve a material per surface point, so one object can
carry more than one material (the tiled plane alternates two).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.raycaster.materials.surface import add_material
    >>> red = add_material(albedo=(0.7, 0.1, 0.1), specular=(0.9, 0.1, 0.1))
    >>> lamp = add_material(albedo=(1.0, 1.0, 1.0), emissive=(1.0, 1.0, 0.2))
"""

import logging

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3

logger = logging.getLogger(__name__)


@ti.dataclass
class Material:
    """Reflectance properties of a surface point.

    Attributes:
        albedo: Diffuse reflectance color (RGB, each component in [0, 1]).
        specular: Specular reflectance color (RGB, each component in [0, 1]).
        emissive: Emitted light color (RGB, non-negative, may exceed 1).
        reflectance: Mirror reflectance in [0, 1]. Reserved; unused by shading.
    """

    albedo: vec3
    specular: vec3
    emissive: vec3
    reflectance: ti.f32


# =============================================================================
# Material Field Storage
# =============================================================================

# Maximum number of materials in the scene
MAX_MATERIALS = 256

# Structure of Arrays storage for material properties
material_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_speculars = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_emissives = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_reflectances = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def _validate_unit_color(name: str, color: tuple[float, float, float]) -> None:
    """Check that a reflectance color has three components in [0, 1]."""
    if len(color) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(color)}")
    for i, component in enumerate(color):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"{name} component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )


def clear_materials() -> None:
    """Clear all materials.

    Resets the material count to zero. Existing data in the fields will be
    overwritten when new materials are added.
    """
    num_materials[None] = 0


def add_material(
    albedo: tuple[float, float, float],
    specular: tuple[float, float, float] = (0.0, 0.0, 0.0),
    emissive: tuple[float, float, float] = (0.0, 0.0, 0.0),
    reflectance: float = 0.0,
) -> int:
    """Add a material to the registry.

    Args:
        albedo: The diffuse reflectance color as (R, G, B), each in [0, 1].
        specular: The specular reflectance color as (R, G, B), each in [0, 1].
        emissive: The emitted color as (R, G, B). Components must be
            non-negative; values above 1 are allowed.
        reflectance: Mirror reflectance in [0, 1].

    Returns:
        The id of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any property is out of range.
    """
    _validate_unit_color("Albedo", albedo)
    _validate_unit_color("Specular", specular)

    if len(emissive) != 3:
        raise ValueError(f"Emissive must have 3 components, got {len(emissive)}")
    for i, component in enumerate(emissive):
        if component < 0.0:
            raise ValueError(f"Emissive component {i} = {component} must be non-negative")

    if reflectance < 0.0 or reflectance > 1.0:
        raise ValueError(f"Reflectance {reflectance} is outside [0, 1]")

    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_albedos[idx] = [albedo[0], albedo[1], albedo[2]]
    material_speculars[idx] = [specular[0], specular[1], specular[2]]
    material_emissives[idx] = [emissive[0], emissive[1], emissive[2]]
    material_reflectances[idx] = reflectance
    num_materials[None] = idx + 1

    logger.debug(
        "Added material %d: albedo=%s specular=%s emissive=%s reflectance=%s",
        idx,
        albedo,
        specular,
        emissive,
        reflectance,
    )
    return idx


def get_material_count() -> int:
    """Get the number of materials in the registry."""
    return int(num_materials[None])


def is_valid_material(material_id: int) -> bool:
    """Check whether a material id refers to a registered material."""
    return 0 <= material_id < num_materials[None]


@ti.func
def get_material(material_id: ti.i32) -> Material:
    """Get a material by id.

    Args:
        material_id: The index of the material in the registry.

    Returns:
        The Material record for that id.
    """
    return Material(
        albedo=material_albedos[material_id],
        specular=material_speculars[material_id],
        emissive=material_emissives[material_id],
        reflectance=material_reflectances[material_id],
    )

