"""Scene-level sphere storage, occlusion test and nearest-hit search.

Spheres live in Taichi fields (Structure of Arrays layout) with a material
index per sphere. Two scene queries are built on the per-sphere
intersection:

    is_occluded_any: does the ray hit any sphere at all (shadow rays)
    nearest_hit: the hit closest to the camera, with normal and material

Both scan the spheres in insertion order with no acceleration structure.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.softrt.core.ray import RayInfo
    >>> from src.softrt.scene.intersection import is_occluded
    >>> from src.softrt.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> mat = scene.add_material(color=(1.0, 1.0, 1.0), roughness=1.0)
    >>> scene.add_sphere((0.0, 0.0, 0.0), 1.0, mat)
    >>> is_occluded(RayInfo((0.0, 0.0, -5.0), (0.0, 0.0, 1.0)), scene)
    True
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from src.softrt.core.config import (
    ShadingConfig,
    apply_shading_config,
    get_intersection_epsilon,
)
from src.softrt.core.ray import RayInfo, distance, normalize
from src.softrt.geometry.sphere import Sphere, intersect_sphere
from src.softrt.materials.surface import get_surface_material

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Largest finite f32, the "no hit yet" distance
FLOAT_MAX = 3.402823e38


@ti.dataclass
class SceneHitRecord:
    """Record of the nearest ray-scene intersection.

    Attributes:
        hit: Whether the ray intersected any sphere (1 if hit, 0 if miss).
        point: The nearest intersection point of the winning sphere.
        normal: Unit normal at the point, pointing away from the sphere center.
        eye: Unit direction from the camera position to the point.
        distance: Distance from the camera position to the point.
        sphere_index: Index of the hit sphere, -1 on a miss.
        color: Color of the hit sphere's material.
        roughness: Roughness of the hit sphere's material.
    """

    hit: ti.i32
    point: vec3
    normal: vec3
    eye: vec3
    distance: ti.f32
    sphere_index: ti.i32
    color: vec3
    roughness: ti.f32


@dataclass
class NearestHitInfo:
    """Python-side copy of a SceneHitRecord for a ray that hit the scene.

    Attributes:
        point: The intersection point.
        normal: The unit surface normal.
        distance: Distance from the camera position to the point.
        sphere_index: Index of the hit sphere.
        material_id: Material index of the hit sphere.
    """

    point: tuple[float, float, float]
    normal: tuple[float, float, float]
    distance: float
    sphere_index: int
    material_id: int


# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout for GPU efficiency
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Token of the scene whose data currently occupies the fields (-1 = none)
_loaded_scene_token = -1


def clear_scene() -> None:
    """Clear all spheres from the scene.

    Resets the sphere count to zero. The actual field data is not cleared
    but will be overwritten when new spheres are added.
    """
    global _loaded_scene_token
    num_spheres[None] = 0
    _loaded_scene_token = -1


def add_sphere(center: tuple[float, float, float], radius: float, material_id: int = 0) -> int:
    """Add a sphere to the scene fields.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere.
        material_id: The material index associated with this sphere.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = vec3(center[0], center[1], center[2])
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    set_loaded_scene_token(-1)
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


def get_loaded_scene_token() -> int:
    """Get the token of the scene currently held in the fields."""
    return _loaded_scene_token


def set_loaded_scene_token(token: int) -> None:
    """Record which scene's data now occupies the fields."""
    global _loaded_scene_token
    _loaded_scene_token = token


@ti.func
def _get_sphere(i: ti.i32) -> Sphere:
    return Sphere(center=sphere_centers[i], radius=sphere_radii[i])


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(
        hit=0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 1.0, 0.0),
        eye=vec3(0.0, 0.0, 0.0),
        distance=FLOAT_MAX,
        sphere_index=-1,
        color=vec3(0.0, 0.0, 0.0),
        roughness=0.0,
    )


@ti.func
def is_occluded_any(ray_origin: vec3, ray_direction: vec3, epsilon: ti.f32) -> ti.i32:
    """Test if a ray hits any sphere in the scene (shadow ray query).

    Returns early on the first sphere with a non-empty intersection list;
    there is no need to find the nearest one.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        epsilon: Discriminant threshold passed to the sphere intersection.

    Returns:
        1 if any sphere was hit, 0 otherwise.
    """
    hit_any = 0

    n_spheres = num_spheres[None]
    for i in range(n_spheres):
        hits = intersect_sphere(ray_origin, ray_direction, _get_sphere(i), epsilon)
        if hits.count > 0:
            hit_any = 1
            break

    return hit_any


@ti.func
def nearest_hit(
    ray_origin: vec3,
    ray_direction: vec3,
    camera_position: vec3,
    epsilon: ti.f32,
) -> SceneHitRecord:
    """Find the sphere hit closest to the camera.

    Each sphere contributes the first (nearest along the ray) point of its
    intersection list. The winner minimises the distance from that point to
    camera_position, which is the original camera position even for bounce
    rays. Ties keep the earlier sphere (strict less-than).

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        camera_position: The position distances are measured from.
        epsilon: Discriminant threshold passed to the sphere intersection.

    Returns:
        A SceneHitRecord for the winning sphere, or a miss record.
    """
    result = _make_miss_record()
    closest_dist = FLOAT_MAX

    n_spheres = num_spheres[None]
    for i in range(n_spheres):
        sphere = _get_sphere(i)
        hits = intersect_sphere(ray_origin, ray_direction, sphere, epsilon)
        if hits.count > 0:
            eye_vec = hits.near - camera_position
            dist = distance(hits.near, camera_position)
            if dist < closest_dist:
                closest_dist = dist
                material = get_surface_material(sphere_material_ids[i])
                result = SceneHitRecord(
                    hit=1,
                    point=hits.near,
                    normal=normalize(hits.near - sphere.center),
                    eye=normalize(eye_vec),
                    distance=dist,
                    sphere_index=i,
                    color=material.color,
                    roughness=material.roughness,
                )

    return result


# =============================================================================
# Host-callable Queries
# =============================================================================

_query_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_query_direction = ti.Vector.field(3, dtype=ti.f32, shape=())
_query_camera = ti.Vector.field(3, dtype=ti.f32, shape=())
_occluded_result = ti.field(dtype=ti.i32, shape=())
_hit_result = SceneHitRecord.field(shape=())


@ti.kernel
def _occlusion_kernel():
    # Single-iteration outer loop keeps the scene scan serial
    for _ in range(1):
        _occluded_result[None] = is_occluded_any(
            _query_origin[None], _query_direction[None], get_intersection_epsilon()
        )


@ti.kernel
def _nearest_hit_kernel():
    for _ in range(1):
        _hit_result[None] = nearest_hit(
            _query_origin[None],
            _query_direction[None],
            _query_camera[None],
            get_intersection_epsilon(),
        )


def _stage_ray(ray: RayInfo) -> None:
    _query_origin[None] = [float(x) for x in ray.origin]
    _query_direction[None] = [float(x) for x in ray.direction]


def is_occluded(ray: RayInfo, scene, config: ShadingConfig | None = None) -> bool:
    """Report whether a ray hits any sphere of a scene.

    Args:
        ray: The ray to test. Only intersections in front of the origin count.
        scene: The SceneManager holding the spheres.
        config: Shading configuration supplying the intersection epsilon.
            None selects the defaults.

    Returns:
        True if at least one sphere yields an intersection.
    """
    apply_shading_config(config)
    scene.activate()
    _stage_ray(ray)
    _occlusion_kernel()
    return bool(_occluded_result[None])


def find_nearest_hit(
    ray: RayInfo,
    scene,
    camera_position: tuple[float, float, float],
    config: ShadingConfig | None = None,
) -> NearestHitInfo | None:
    """Find the hit closest to camera_position along a ray.

    Args:
        ray: The ray to trace.
        scene: The SceneManager holding the spheres.
        camera_position: The position distances are measured from.
        config: Shading configuration supplying the intersection epsilon.

    Returns:
        A NearestHitInfo, or None if the ray misses every sphere.
    """
    apply_shading_config(config)
    scene.activate()
    _stage_ray(ray)
    _query_camera[None] = [float(x) for x in camera_position]
    _nearest_hit_kernel()

    if _hit_result.hit[None] == 0:
        return None

    point = _hit_result.point[None]
    normal = _hit_result.normal[None]
    index = int(_hit_result.sphere_index[None])
    return NearestHitInfo(
        point=(float(point[0]), float(point[1]), float(point[2])),
        normal=(float(normal[0]), float(normal[1]), float(normal[2])),
        distance=float(_hit_result.distance[None]),
        sphere_index=index,
        material_id=int(sphere_material_ids[index]),
    )
