"""Materials module for surface reflectance.

This module implements the material model used by the direct-lighting shader:

Components:
    surface: Material dataclass and the material registry

Each material provides:
    - albedo: diffuse reflectance, lit by each visible emitter
    - specular: specular reflectance color
    - emissive: self-emission; any non-zero value makes the owner a light
    - reflectance: reserved for recursive mirror reflection (unused)

Material lookups are Taichi functions so the shader can resolve them
inside the render kernel.
"""

from .surface import (
    MAX_MATERIALS,
    Material,
    add_material,
    clear_materials,
    get_material,
    get_material_count,
    is_valid_material,
)

__all__ = [
    "Material",
    "MAX_MATERIALS",
    "add_material",
    "clear_materials",
    "get_material",
    "get_material_count",
    "is_valid_material",
]
