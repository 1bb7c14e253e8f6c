"""View-plane camera for primary ray generation.

The camera sits at a fixed position and looks through a rectangular view
plane perpendicular to the z axis. Pixel (i, j) of a width x height image
maps affinely onto the plane:

    x = center_x - half_width  + i * (2 * half_width  / width)
    y = center_y + half_height - j * (2 * half_height / height)

so j = 0 is the top row. The ray direction is the vector from the camera
to that plane point and is deliberately not normalized.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.softrt.camera.view_plane import ViewPlaneCamera, setup_camera, get_ray
    >>> setup_camera(ViewPlaneCamera())
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(0, 0, 512, 512)  # Ray through the top-left corner
"""

from dataclasses import dataclass

import numpy as np
import taichi as ti

from src.softrt.core.ray import Ray, make_ray, vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class ViewPlaneCamera:
    """Configuration for the view-plane camera.

    Attributes:
        position: Camera position in world space (x, y, z).
        plane_center: Center of the view plane in world space.
        half_width: Half the horizontal extent of the view plane.
        half_height: Half the vertical extent of the view plane.
    """

    position: tuple[float, float, float] = (0.0, 0.0, -2.0)
    plane_center: tuple[float, float, float] = (0.0, 0.0, 0.0)
    half_width: float = 1.0
    half_height: float = 1.0


# =============================================================================
# Taichi Fields for Camera State (GPU-accessible)
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())

# Top-left corner of the view plane and its full extents
_upper_left_corner = ti.Vector.field(3, dtype=ti.f32, shape=())
_plane_width = ti.field(dtype=ti.f32, shape=())
_plane_height = ti.field(dtype=ti.f32, shape=())


def setup_camera(camera: ViewPlaneCamera) -> None:
    """Initialize camera state from configuration.

    Args:
        camera: Camera configuration.

    Raises:
        ValueError: If the view plane has a non-positive extent.
    """
    if camera.half_width <= 0.0 or camera.half_height <= 0.0:
        raise ValueError(
            f"View plane extents must be positive, got "
            f"({camera.half_width}, {camera.half_height})"
        )

    center = np.array(camera.plane_center, dtype=np.float32)
    upper_left = center + np.array([-camera.half_width, camera.half_height, 0.0], dtype=np.float32)

    _camera_origin[None] = [float(x) for x in camera.position]
    _upper_left_corner[None] = upper_left.tolist()
    _plane_width[None] = 2.0 * camera.half_width
    _plane_height[None] = 2.0 * camera.half_height


# =============================================================================
# Ray Generation (Taichi-compatible, GPU-callable)
# =============================================================================


@ti.func
def get_ray(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the primary ray for a pixel.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A Ray from the camera position toward the pixel's view-plane point.
    """
    dx = _plane_width[None] / ti.cast(width, ti.f32)
    dy = _plane_height[None] / ti.cast(height, ti.f32)

    corner = _upper_left_corner[None]
    plane_point = vec3(
        corner.x + dx * ti.cast(pixel_i, ti.f32),
        corner.y - dy * ti.cast(pixel_j, ti.f32),
        corner.z,
    )

    origin = _camera_origin[None]
    return make_ray(origin, plane_point - origin)


@ti.func
def get_camera_origin() -> vec3:
    """Get the camera position in world space."""
    return _camera_origin[None]


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with origin, upper_left and extent (width, height, 0).
    """
    origin_vec = _camera_origin[None]
    corner_vec = _upper_left_corner[None]
    return {
        "origin": (float(origin_vec[0]), float(origin_vec[1]), float(origin_vec[2])),
        "upper_left": (float(corner_vec[0]), float(corner_vec[1]), float(corner_vec[2])),
        "extent": (float(_plane_width[None]), float(_plane_height[None]), 0.0),
    }
