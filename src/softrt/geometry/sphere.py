"""Sphere primitive and ray-sphere intersection.

The intersection solves the quadratic

    a*t^2 + b*t + c = 0

where, with oc = ray_origin - center:

    a = dot(direction, direction)
    b = 2 * dot(direction, oc)
    c = dot(oc, oc) - radius^2

Both roots are turned into world-space points. Roots behind the ray origin
(t < 0) are discarded, the second root is only reported when the
discriminant exceeds a small epsilon (a grazing ray yields one point), and
the surviving points are ordered nearest first.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.softrt.core.ray import RayInfo
    >>> from src.softrt.geometry.sphere import SphereInfo, intersect
    >>> ray = RayInfo(origin=(0.0, 0.0, -5.0), direction=(0.0, 0.0, 1.0))
    >>> intersect(ray, SphereInfo(center=(0.0, 0.0, 0.0), radius=1.0))
    [(0.0, 0.0, -1.0), (0.0, 0.0, 1.0)]
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from src.softrt.core.config import DEFAULT_INTERSECTION_EPSILON
from src.softrt.core.ray import RayInfo, dot, length_squared, make_ray, ray_at

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (non-negative float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class SphereHits:
    """Intersection points of a ray with one sphere.

    Attributes:
        count: Number of valid points (0, 1 or 2).
        near: The nearest point along the ray. Only valid if count >= 1.
        far: The farther point. Only valid if count == 2.
    """

    count: ti.i32
    near: vec3
    far: vec3


@dataclass
class SphereInfo:
    """Python-side description of a sphere for the host-callable API.

    Attributes:
        center: Sphere center as (x, y, z).
        radius: Sphere radius.
        material_id: Index into the scene's materials collection.
        sphere_index: The index in the scene's sphere storage, or -1 when the
            sphere is not part of a scene.
    """

    center: tuple[float, float, float]
    radius: float
    material_id: int = 0
    sphere_index: int = -1


@ti.func
def intersect_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: Sphere,
    epsilon: ti.f32,
) -> SphereHits:
    """Intersect a ray with a sphere.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be normalized).
        sphere: The sphere to test.
        epsilon: The second root is only considered when the discriminant
            is greater than this value.

    Returns:
        A SphereHits with up to two points ordered nearest first.
    """
    ray = make_ray(ray_origin, ray_direction)
    oc = ray_origin - sphere.center

    a = length_squared(ray_direction)
    b = 2.0 * dot(ray_direction, oc)
    c = length_squared(oc) - sphere.radius * sphere.radius
    discriminant = b * b - 4.0 * a * c

    # Initialize result fields (Taichi requires outer-scope declaration)
    count = 0
    near = vec3(0.0, 0.0, 0.0)
    far = vec3(0.0, 0.0, 0.0)

    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)

        t0 = (-b + sqrt_d) / (2.0 * a)
        if t0 >= 0.0:
            near = ray_at(ray, t0)
            count = 1

        if discriminant > epsilon:
            t1 = (-b - sqrt_d) / (2.0 * a)
            if t1 >= 0.0:
                point = ray_at(ray, t1)
                if count == 0:
                    near = point
                    count = 1
                elif t1 < t0:
                    far = near
                    near = point
                    count = 2
                else:
                    far = point
                    count = 2

    return SphereHits(count=count, near=near, far=far)


# =============================================================================
# Host-callable Query
# =============================================================================

_query_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_query_direction = ti.Vector.field(3, dtype=ti.f32, shape=())
_query_center = ti.Vector.field(3, dtype=ti.f32, shape=())
_query_radius = ti.field(dtype=ti.f32, shape=())
_result_count = ti.field(dtype=ti.i32, shape=())
_result_points = ti.Vector.field(3, dtype=ti.f32, shape=2)


@ti.kernel
def _intersect_kernel(epsilon: ti.f32):
    """Intersect the staged ray with the staged sphere."""
    sphere = Sphere(center=_query_center[None], radius=_query_radius[None])
    hits = intersect_sphere(_query_origin[None], _query_direction[None], sphere, epsilon)
    _result_count[None] = hits.count
    _result_points[0] = hits.near
    _result_points[1] = hits.far


def intersect(
    ray: RayInfo,
    sphere: SphereInfo,
    epsilon: float = DEFAULT_INTERSECTION_EPSILON,
) -> list[tuple[float, float, float]]:
    """Intersect a ray with a sphere from Python.

    Args:
        ray: The ray to cast.
        sphere: The sphere to test.
        epsilon: Discriminant threshold for reporting a second point.

    Returns:
        A list of zero, one or two points, nearest first. Points behind the
        ray origin are never included.
    """
    _query_origin[None] = [float(x) for x in ray.origin]
    _query_direction[None] = [float(x) for x in ray.direction]
    _query_center[None] = [float(x) for x in sphere.center]
    _query_radius[None] = float(sphere.radius)

    _intersect_kernel(epsilon)

    points = []
    for k in range(int(_result_count[None])):
        p = _result_points[k]
        points.append((float(p[0]), float(p[1]), float(p[2])))
    return points
