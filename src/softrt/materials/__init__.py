"""Materials module.

Components:
    surface: Color + roughness materials referenced by index from spheres
"""

from .surface import (
    MAX_MATERIALS,
    SurfaceMaterial,
    add_surface_material,
    clear_surface_materials,
    get_surface_material,
    get_surface_material_count,
)

__all__ = [
    "SurfaceMaterial",
    "add_surface_material",
    "clear_surface_materials",
    "get_surface_material",
    "get_surface_material_count",
    "MAX_MATERIALS",
]
