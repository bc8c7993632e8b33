"""Ray data structure and vector utilities for the ray caster.

This module provides the Ray dataclass and the small set of vector helpers
needed for closed-form intersection and direct lighting. Points, directions
and colors all share the vec3 type. All helpers are Taichi functions so they
can be called from inside kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Vectors shorter than this are treated as having no direction
ZERO_LENGTH_EPSILON = 1e-12


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Not required to be
            normalized; intersection routines normalize internally.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    The input must not be zero-length. Use safe_normalize() for vectors
    that may be degenerate.
    """
    return tm.normalize(v)


@ti.func
def safe_normalize(v: vec3) -> vec3:
    """Normalize a vector, returning the zero vector for degenerate input.

    A zero (or nearly zero) vector has no direction. Instead of dividing by
    zero this returns vec3(0, 0, 0), which every intersection routine treats
    as "no direction" and reports as a miss.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the direction of v, or the zero vector.
    """
    result = vec3(0.0, 0.0, 0.0)
    len_sq = tm.dot(v, v)
    if len_sq > ZERO_LENGTH_EPSILON * ZERO_LENGTH_EPSILON:
        result = v / ti.sqrt(len_sq)
    return result


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product of two vectors."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product of two vectors."""
    return tm.cross(a, b)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    The normal should be unit length. The incident vector is used as given,
    so its length carries over to the reflected vector.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def clamp_color(color: vec3, lo: ti.f32, hi: ti.f32) -> vec3:
    """Clamp every component of a color to [lo, hi]."""
    return tm.clamp(color, lo, hi)


@ti.func
def build_onb_from_normal(normal: vec3):
    """Build an orthonormal basis from a normal vector.

    Creates a local coordinate frame where the normal is the z-axis. The
    tiled plane uses the tangent and bitangent as its checkerboard axes.

    Args:
        normal: The surface normal (should be normalized).

    Returns:
        A tuple (tangent, bitangent, normal) forming an orthonormal basis.
    """
    # Choose a vector not parallel to normal
    a = vec3(1.0, 0.0, 0.0)
    if ti.abs(normal.x) > 0.9:
        a = vec3(0.0, 1.0, 0.0)
    tangent = normalize(cross(a, normal))
    bitangent = cross(normal, tangent)
    return tangent, bitangent, normal
