"""Scene manager coordinating spheres and materials.

The SceneManager is the scene model consumed by the shading core: an
ordered list of spheres, each referring by index to an entry of a
materials collection. It is built on the Python side and uploaded into
the Taichi fields on demand, so several scenes can coexist and whichever
one is passed to a query is the one the kernels see.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.softrt.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> red = scene.add_material(color=(1.0, 0.0, 0.0), roughness=0.9)
    >>> scene.add_sphere(center=(0.0, 0.0, 3.0), radius=1.0, material_id=red)
    0
"""

import itertools
from dataclasses import dataclass

from src.softrt.geometry.sphere import SphereInfo
from src.softrt.materials.surface import (
    MAX_MATERIALS,
    add_surface_material,
    clear_surface_materials,
)
from src.softrt.scene.intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_loaded_scene_token,
    set_loaded_scene_token,
)

# Every scene mutation draws a fresh token, so uploaded data is never stale
_scene_tokens = itertools.count()


@dataclass
class MaterialInfo:
    """Information about a registered material.

    Attributes:
        material_id: Index of the material in the scene's collection.
        color: The material color as (R, G, B).
        roughness: The roughness in [0, 1].
    """

    material_id: int
    color: tuple[float, float, float]
    roughness: float


class SceneManager:
    """Ordered collection of spheres bound to shared materials.

    Attributes:
        materials: MaterialInfo for all registered materials, by index.
        spheres: SphereInfo for all spheres, in scan order.

    Example:
        >>> scene = SceneManager()
        >>> ground = scene.add_material(color=(0.75, 1.0, 0.75), roughness=0.975)
        >>> scene.add_sphere((0.0, -1000.0, 5.0), 999.0, ground)
        0
        >>> scene.add_sphere((0.0, 0.5, 3.0), 0.5, ground)
        1
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.materials: list[MaterialInfo] = []
        self.spheres: list[SphereInfo] = []
        self._token = next(_scene_tokens)

    def _touch(self) -> None:
        self._token = next(_scene_tokens)

    def clear(self) -> None:
        """Remove all spheres and materials."""
        self.materials.clear()
        self.spheres.clear()
        self._touch()

    # =========================================================================
    # Material Management
    # =========================================================================

    def add_material(
        self,
        color: tuple[float, float, float],
        roughness: float,
    ) -> int:
        """Add a material to the scene.

        Args:
            color: The material color as (R, G, B). Not clamped.
            roughness: The roughness in [0, 1].

        Returns:
            The material index, used when adding spheres.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If roughness is outside [0, 1].
        """
        if roughness < 0.0 or roughness > 1.0:
            raise ValueError(f"Roughness = {roughness} is outside [0, 1].")
        if len(self.materials) >= MAX_MATERIALS:
            raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

        material_id = len(self.materials)
        self.materials.append(
            MaterialInfo(
                material_id=material_id,
                color=(float(color[0]), float(color[1]), float(color[2])),
                roughness=float(roughness),
            )
        )
        self._touch()
        return material_id

    def get_material_count(self) -> int:
        """Get the number of materials in the scene."""
        return len(self.materials)

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Get information about a material by index.

        Returns:
            MaterialInfo for the material, or None if not found.
        """
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    # =========================================================================
    # Primitive Management
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material_id: int,
    ) -> int:
        """Add a sphere to the end of the scan order.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere (non-negative; 0 is allowed).
            material_id: The material index to assign to the sphere.

        Returns:
            The index of the added sphere.

        Raises:
            RuntimeError: If the maximum number of spheres is exceeded.
            ValueError: If the radius is negative or material_id is invalid.
        """
        if radius < 0.0:
            raise ValueError(f"Sphere radius must be non-negative, got {radius}")
        if material_id < 0 or material_id >= len(self.materials):
            raise ValueError(f"Invalid material_id: {material_id}")
        if len(self.spheres) >= MAX_SPHERES:
            raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")

        sphere_index = len(self.spheres)
        self.spheres.append(
            SphereInfo(
                center=(float(center[0]), float(center[1]), float(center[2])),
                radius=float(radius),
                material_id=material_id,
                sphere_index=sphere_index,
            )
        )
        self._touch()
        return sphere_index

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return len(self.spheres)

    # =========================================================================
    # Upload
    # =========================================================================

    def is_active(self) -> bool:
        """Check whether this scene's current data occupies the Taichi fields."""
        return get_loaded_scene_token() == self._token

    def activate(self) -> None:
        """Upload the scene into the Taichi fields unless already loaded."""
        if self.is_active():
            return

        clear_scene()
        clear_surface_materials()
        for material in self.materials:
            add_surface_material(material.color, material.roughness)
        for sphere in self.spheres:
            add_sphere(sphere.center, sphere.radius, sphere.material_id)
        set_loaded_scene_token(self._token)
