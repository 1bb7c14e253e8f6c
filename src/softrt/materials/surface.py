"""Surface material storage.

A surface material is a color plus a roughness that blends local shading
with the bounce contribution:

    roughness = 0: the bounce color dominates (mirror-like)
    roughness = 1: local diffuse shading dominates

Spheres refer to materials by index, so many spheres can share one
material and the materials outlive every traced ray.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.softrt.materials.surface import add_surface_material
    >>> idx = add_surface_material(color=(1.0, 0.25, 0.25), roughness=0.95)
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.dataclass
class SurfaceMaterial:
    """Surface material properties.

    Attributes:
        color: RGB reflectance. Conceptually in [0, 1] but not clamped.
        roughness: Blend factor in [0, 1] between bounce (0) and local
            shading (1).
    """

    color: vec3
    roughness: ti.f32


# =============================================================================
# Material Field Storage
# =============================================================================

# Maximum number of materials in the scene
MAX_MATERIALS = 256

material_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_roughnesses = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def _invalidate_loaded_scene() -> None:
    # Imported here to avoid circular imports (intersection imports this module)
    from src.softrt.scene.intersection import set_loaded_scene_token

    set_loaded_scene_token(-1)


def clear_surface_materials() -> None:
    """Clear all materials.

    Resets the material count to zero. Existing data in the fields will be
    overwritten when new materials are added.
    """
    num_materials[None] = 0
    _invalidate_loaded_scene()


def add_surface_material(
    color: tuple[float, float, float],
    roughness: float,
) -> int:
    """Add a material to the material registry.

    Args:
        color: The material color as (R, G, B).
        roughness: The roughness in [0, 1].

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If roughness is outside [0, 1].
    """
    if roughness < 0.0 or roughness > 1.0:
        raise ValueError(
            f"Roughness = {roughness} is outside [0, 1]. "
            "Roughness must be between 0 (bounce only) and 1 (local shading only)."
        )

    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_colors[idx] = vec3(color[0], color[1], color[2])
    material_roughnesses[idx] = roughness
    num_materials[None] = idx + 1
    _invalidate_loaded_scene()
    return idx


def get_surface_material_count() -> int:
    """Get the number of materials in the registry."""
    return int(num_materials[None])


@ti.func
def get_surface_material(material_idx: ti.i32) -> SurfaceMaterial:
    """Get the full material record for a material by index."""
    return SurfaceMaterial(
        color=material_colors[material_idx],
        roughness=material_roughnesses[material_idx],
    )
