"""Direct-lighting shader with hard shadows.

trace_ray() shades the nearest surface hit by a ray:

1. Find the nearest object along the ray. A miss returns BACKGROUND_COLOR.
2. Compute the hit point, the surface normal, and the material there.
3. Start from the material's emissive color, so light sources are seen at
   full emission.
4. Treat every scene object as a candidate light. Cast one shadow ray from
   the hit point (offset by SHADOW_EPSILON) toward it. The light is visible
   only if the nearest object along the shadow ray IS that light; the test
   compares object identity, not distances.
5. For each visible light add
       diffuse  = max(dot(normal, l), 0) * albedo * light_emissive
       specular = dot(reflect(incident, normal), l)^2 * specular
   The specular dot product is squared without clamping, so reflections
   pointing away from the light still contribute.

Objects without emission still take part in step 4. They contribute
nothing, but their shadow rays are always cast.

The returned color is not clamped; the render driver maps it to 8 bits.
The depth argument is threaded through for a future recursive variant that
would use each material's reflectance; no bounce is traced.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.raycaster.core.shader import trace_ray
    >>> @ti.kernel
    ... def shade() -> ti.math.vec3:
    ...     return trace_ray(ti.math.vec3(0, 5, 0), ti.math.vec3(0, -1, 0), 0)
"""

import taichi as ti
import taichi.math as tm

from src.raycaster.core.ray import make_ray, ray_at, reflect, safe_normalize
from src.raycaster.materials.surface import Material
from src.raycaster.scene.intersection import (
    find_first_intersector,
    num_objects,
    object_light_direction,
    object_material,
    object_normal,
)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Shading Constants
# =============================================================================

# Offset of shadow ray origins along the light direction
SHADOW_EPSILON = 0.001

# Maximum recursion depth reserved for reflective bounces (not traced)
MAX_DEPTH = 3

# Color returned when the primary ray hits nothing
BACKGROUND_COLOR = vec3(0.0, 0.0, 0.0)


@ti.func
def is_light_visible(light_id: ti.i32, point: vec3, to_light: vec3):
    """Cast a shadow ray from a surface point toward a candidate light.

    Args:
        light_id: Object id of the candidate light.
        point: The surface point being shaded.
        to_light: Unit direction from the point toward the light.

    Returns:
        A tuple (visible, light_point): visible is 1 when the nearest object
        along the shadow ray is the light itself, and light_point is where
        the shadow ray reached it.
    """
    shadow_origin = point + to_light * SHADOW_EPSILON
    occluder = find_first_intersector(shadow_origin, to_light)

    visible = 0
    light_point = shadow_origin
    if occluder.object_id == light_id:
        visible = 1
        light_point = shadow_origin + to_light * occluder.t
    return visible, light_point


@ti.func
def light_contribution(
    light_id: ti.i32,
    point: vec3,
    normal: vec3,
    incident: vec3,
    material: Material,
) -> vec3:
    """Diffuse plus specular light from one candidate light.

    Args:
        light_id: Object id of the candidate light.
        point: The surface point being shaded.
        normal: Unit surface normal at the point.
        incident: The incoming ray direction, as passed to trace_ray().
        material: Material of the surface at the point.

    Returns:
        The added color, zero if the light is occluded.
    """
    contribution = vec3(0.0, 0.0, 0.0)
    to_light = safe_normalize(object_light_direction(light_id, point))

    visible, light_point = is_light_visible(light_id, point, to_light)
    if visible == 1:
        emissive = object_material(light_id, light_point).emissive

        intensity = ti.max(tm.dot(normal, to_light), 0.0)
        contribution += material.albedo * emissive * intensity

        specular_intensity = tm.dot(reflect(incident, normal), to_light)
        contribution += material.specular * (specular_intensity * specular_intensity)

    return contribution


@ti.func
def trace_ray(ray_origin: vec3, ray_direction: vec3, depth: ti.i32) -> vec3:
    """Trace a ray into the scene and return the accumulated light.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The ray direction (need not be normalized).
        depth: Recursion depth. Currently unused beyond being passed along.

    Returns:
        The unclamped RGB color seen along the ray.
    """
    color = BACKGROUND_COLOR

    hit = find_first_intersector(ray_origin, ray_direction)
    if hit.hit == 1:
        point = ray_at(make_ray(ray_origin, safe_normalize(ray_direction)), hit.t)
        normal = object_normal(hit.object_id, point)
        material = object_material(hit.object_id, point)

        color = material.emissive
        for light_id in range(num_objects[None]):
            color += light_contribution(light_id, point, normal, ray_direction, material)

    return color
