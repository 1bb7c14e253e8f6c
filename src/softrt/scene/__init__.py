"""Scene module for scene management and scene-level queries.

Components:
    intersection: Sphere fields, occlusion test and nearest-hit search
    manager: SceneManager holding spheres and their materials
    random_spheres: Procedural demo scene

Scene data is organized for efficient GPU access:
    - Structure-of-Arrays layout for sphere data
    - Integer material indices into a shared materials collection
"""

from .intersection import (
    MAX_SPHERES,
    NearestHitInfo,
    SceneHitRecord,
    add_sphere,
    clear_scene,
    find_nearest_hit,
    get_sphere_count,
    is_occluded,
    is_occluded_any,
    nearest_hit,
)
from .manager import MaterialInfo, SceneManager
from .random_spheres import (
    MATERIAL_PALETTE,
    RandomSpheresParams,
    create_random_spheres_scene,
)

__all__ = [
    # Intersection module
    "SceneHitRecord",
    "NearestHitInfo",
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "is_occluded",
    "is_occluded_any",
    "find_nearest_hit",
    "nearest_hit",
    "MAX_SPHERES",
    # Manager module
    "SceneManager",
    "MaterialInfo",
    # Random spheres module
    "create_random_spheres_scene",
    "RandomSpheresParams",
    "MATERIAL_PALETTE",
]
