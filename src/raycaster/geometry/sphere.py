"""Sphere primitive with closed-form ray-sphere intersection.

This module provides the Sphere dataclass, the shared HitRecord returned by
every primitive, and the sphere's capability functions (intersection, surface
normal, direction toward the sphere as a light).

Intersection substitutes the parametric ray into the implicit sphere
equation and keeps only the nearer root. A ray whose origin lies inside or
past the sphere reports a miss: the caster is forward-facing and never
returns negative distances.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.raycaster.geometry.sphere import Sphere, HitRecord, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -1), radius=0.5)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from src.raycaster.core.ray import safe_normalize

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Quadratic coefficient below which the ray is considered directionless
_MIN_QUADRATIC_A = 1e-12


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Result of a ray-primitive intersection test.

    Attributes:
        hit: Whether the ray intersected the primitive (1 if hit, 0 if miss).
        t: Distance to the intersection measured along the normalized ray
            direction. Strictly positive when hit == 1, meaningless otherwise.
    """

    hit: ti.i32
    t: ti.f32


@ti.func
def hit_sphere(ray_origin: vec3, ray_direction: vec3, sphere: Sphere) -> HitRecord:
    """Test for ray-sphere intersection.

    The direction is normalized before use, so the returned distance is in
    world units regardless of the input direction's length.

    The ray-sphere intersection is found by solving:
        |ray_origin + t * direction - center|^2 = radius^2

    which expands to a*t^2 + b*t + c = 0 with:
        oc = ray_origin - center
        a = dot(direction, direction)
        b = 2 * dot(oc, direction)
        c = dot(oc, oc) - radius^2

    Only the smaller root t = (-b - sqrt(b^2 - 4ac)) / 2a is considered.
    If it is not strictly positive the origin is inside the sphere or the
    sphere is behind the ray, and the result is a miss.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be normalized).
            A zero vector never hits anything.
        sphere: The sphere to test intersection against.

    Returns:
        A HitRecord. Check the hit field to determine if intersection occurred.
    """
    direction = safe_normalize(ray_direction)
    oc = ray_origin - sphere.center

    a = tm.dot(direction, direction)
    b = 2.0 * tm.dot(oc, direction)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius

    did_hit = 0
    hit_t = 0.0

    if a > _MIN_QUADRATIC_A:
        discriminant = b * b - 4.0 * a * c
        if discriminant >= 0.0:
            t = (-b - ti.sqrt(discriminant)) / (2.0 * a)
            if t > 0.0:
                did_hit = 1
                hit_t = t

    return HitRecord(hit=did_hit, t=hit_t)


@ti.func
def sphere_normal(sphere: Sphere, point: vec3) -> vec3:
    """Outward unit normal of a sphere at a surface point."""
    return tm.normalize(point - sphere.center)


@ti.func
def sphere_light_direction(sphere: Sphere, point: vec3) -> vec3:
    """Direction from a point toward the sphere's center (not normalized)."""
    return sphere.center - point


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius.

    This is a convenience function for creating spheres within Taichi kernels.
    """
    return Sphere(center=center, radius=radius)
