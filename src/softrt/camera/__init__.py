"""Camera module for primary ray generation.

Components:
    view_plane: Camera looking through an axis-aligned view plane

Ray generation maps integer pixel coordinates affinely onto the view
plane, with pixel row 0 at the top of the image.
"""

from .view_plane import (
    ViewPlaneCamera,
    get_camera_info,
    get_camera_origin,
    get_ray,
    setup_camera,
)

__all__ = [
    "ViewPlaneCamera",
    "setup_camera",
    "get_ray",
    "get_camera_origin",
    "get_camera_info",
]
