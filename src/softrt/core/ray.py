"""Ray data structure and vector utilities for sphere ray tracing.

This module provides the Ray dataclass and the small vector toolkit the
intersection and shading code is written against. Everything except
RayInfo is usable inside Taichi kernels.

Vector arithmetic (+, -, component-wise *, scalar *) is native to
``taichi.math.vec3``; the helpers here add the named operations.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, -2.0)
    >>> direction = ti.math.vec3(0.0, 0.0, 1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 1.0)  # (0, 0, -1)
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Not required to be
            unit length; the sphere intersection divides by direction.direction.
    """

    origin: vec3
    direction: vec3


@dataclass
class RayInfo:
    """Python-side description of a ray, used by the host-callable API.

    Attributes:
        origin: Ray origin as (x, y, z).
        direction: Ray direction as (x, y, z). Need not be normalized.
    """

    origin: tuple[float, float, float]
    direction: tuple[float, float, float]


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
    """Create a ray from origin and direction inside a Taichi kernel."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product a . b."""
    return a.x * b.x + a.y * b.y + a.z * b.z


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return dot(v, v)


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length sqrt(v . v)."""
    return ti.sqrt(dot(v, v))


@ti.func
def normalize(v: vec3) -> vec3:
    """Scale a vector to unit length.

    Computed as v * (1 / length(v)). A zero-length input yields NaN/Inf
    components; callers must guarantee a non-zero vector.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v.
    """
    return v * (1.0 / length(v))


@ti.func
def distance(a: vec3, b: vec3) -> ti.f32:
    """Compute the Euclidean distance between two points."""
    return length(a - b)


@ti.func
def lerp(a: vec3, b: vec3, t: ti.f32) -> vec3:
    """Linearly interpolate from a toward b.

    The parameter is not clamped, so t outside [0, 1] extrapolates.

    Args:
        a: Value at t = 0.
        b: Value at t = 1.
        t: Interpolation parameter.

    Returns:
        a + (b - a) * t
    """
    return a + (b - a) * t


@ti.func
def saturate(x: ti.f32) -> ti.f32:
    """Clamp a scalar to [0, 1]."""
    return tm.clamp(x, 0.0, 1.0)


@ti.func
def saturate_color(c: vec3) -> vec3:
    """Clamp each color channel to [0, 1]. Used only for final output."""
    return vec3(saturate(c.x), saturate(c.y), saturate(c.z))
