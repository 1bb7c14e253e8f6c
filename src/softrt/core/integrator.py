"""Recursive shading integrator for the sphere ray tracer.

Each shading level finds the sphere nearest to the camera, shades it
locally (diffuse, Blinn-Phong specular, shadow ray, ambient floor) and,
below the depth cap, continues along a bounce ray that leaves the surface
along its normal. The levels combine as

    result_d = lerp(diffuse_color * roughness + result_{d+1} * (1 - roughness),
                    white, specular)

and a hit at the depth cap returns lerp(diffuse_color, white, specular).
A miss returns the sky color.

Taichi functions cannot call themselves, so shade_ray evaluates the
recursion front to back. Each level's result is affine in the next level's
result, so a running weight (the product of (1 - roughness) * (1 - specular)
over the levels so far) carries the deeper contributions:

    color += weight * (diffuse_color * roughness * (1 - specular) + white * specular)
    weight *= (1 - roughness) * (1 - specular)

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.softrt.core.integrator import shade
    >>> from src.softrt.core.ray import RayInfo
    >>> from src.softrt.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> shade(RayInfo((0.0, 0.0, -2.0), (0.0, 0.0, 1.0)), scene, (0.0, 0.0, -2.0))
    (0.75, 0.75, 1.0)
"""

import taichi as ti

from src.softrt.camera.view_plane import (
    ViewPlaneCamera,
    get_camera_origin,
    get_ray,
    setup_camera,
)
from src.softrt.core.config import (
    ShadingConfig,
    apply_shading_config,
    get_ambient,
    get_intersection_epsilon,
    get_light_direction,
    get_max_depth,
    get_shadow_bias,
    get_sky_color,
    get_specular_exponent,
)
from src.softrt.core.ray import RayInfo, dot, normalize, saturate_color, vec3
from src.softrt.scene.intersection import is_occluded_any, nearest_hit

WHITE = vec3(1.0, 1.0, 1.0)

# =============================================================================
# Shading Core
# =============================================================================


@ti.func
def shade_ray(ray_origin: vec3, ray_direction: vec3, camera_position: vec3, depth: ti.i32):
    """Shade a ray starting at the given recursion depth.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction of the ray (need not be normalized).
        camera_position: The original camera position. Nearest-hit distances
            are measured from here on every level.
        depth: The recursion depth of this ray (0 for camera rays).

    Returns:
        A tuple (color, levels) where levels is the number of shading levels
        evaluated: 1 for a terminal first level, at most
        max(max_depth - depth, 0) + 1.
    """
    light_dir = get_light_direction()
    ambient = get_ambient()
    exponent = get_specular_exponent()
    max_depth = get_max_depth()
    bias = get_shadow_bias()
    epsilon = get_intersection_epsilon()

    color = vec3(0.0, 0.0, 0.0)
    weight = 1.0
    origin = ray_origin
    direction = ray_direction
    level_depth = depth
    levels = 0

    # Active flag for continuation (bounded by the depth cap)
    active = 1
    for _ in range(ti.max(max_depth - depth, 0) + 1):
        if active == 1:
            levels += 1
            rec = nearest_hit(origin, direction, camera_position, epsilon)

            if rec.hit == 0:
                color += weight * get_sky_color()
                active = 0
            else:
                normal = rec.normal

                diffuse = ti.max(dot(normal, light_dir), 0.0)

                half = normalize(-rec.eye + light_dir)
                specular = ti.max(dot(normal, half), 0.0) ** exponent

                # Secondary rays start just above the surface
                offset_origin = rec.point + normal * bias
                if is_occluded_any(offset_origin, light_dir, epsilon) == 1:
                    diffuse = 0.0
                    specular = 0.0

                diffuse_color = rec.color * ti.max(diffuse, ambient)

                if level_depth < max_depth:
                    color += weight * (
                        diffuse_color * rec.roughness * (1.0 - specular) + WHITE * specular
                    )
                    weight *= (1.0 - rec.roughness) * (1.0 - specular)
                    origin = offset_origin
                    direction = normal
                    level_depth += 1
                else:
                    color += weight * (diffuse_color * (1.0 - specular) + WHITE * specular)
                    active = 0

    return color, levels


# =============================================================================
# Host-callable Shading
# =============================================================================

_query_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_query_direction = ti.Vector.field(3, dtype=ti.f32, shape=())
_query_camera = ti.Vector.field(3, dtype=ti.f32, shape=())
_shade_color = ti.Vector.field(3, dtype=ti.f32, shape=())
_shade_levels = ti.field(dtype=ti.i32, shape=())


@ti.kernel
def _shade_kernel(depth: ti.i32):
    # Single-iteration outer loop keeps the scene scans serial
    for _ in range(1):
        color, levels = shade_ray(
            _query_origin[None], _query_direction[None], _query_camera[None], depth
        )
        _shade_color[None] = color
        _shade_levels[None] = levels


def shade_with_stats(
    ray: RayInfo,
    scene,
    camera_position: tuple[float, float, float],
    depth: int = 0,
    config: ShadingConfig | None = None,
) -> tuple[tuple[float, float, float], int]:
    """Shade a ray and report how many shading levels were evaluated.

    Args:
        ray: The ray to shade.
        scene: The SceneManager to trace against.
        camera_position: The original camera position.
        depth: The recursion depth of the ray (0 for camera rays).
        config: Shading configuration. None selects the defaults.

    Returns:
        A tuple (color, levels). levels counts the top-level call plus every
        recursive bounce and never exceeds max(max_depth - depth, 0) + 1.
    """
    apply_shading_config(config)
    scene.activate()

    _query_origin[None] = [float(x) for x in ray.origin]
    _query_direction[None] = [float(x) for x in ray.direction]
    _query_camera[None] = [float(x) for x in camera_position]
    _shade_kernel(depth)

    color = _shade_color[None]
    return (float(color[0]), float(color[1]), float(color[2])), int(_shade_levels[None])


def shade(
    ray: RayInfo,
    scene,
    camera_position: tuple[float, float, float],
    depth: int = 0,
    config: ShadingConfig | None = None,
) -> tuple[float, float, float]:
    """Shade a ray against a scene.

    This is the per-pixel entry point; drivers call it with depth=0.

    Args:
        ray: The ray to shade.
        scene: The SceneManager to trace against.
        camera_position: The original camera position.
        depth: The recursion depth of the ray.
        config: Shading configuration. None selects the defaults.

    Returns:
        The unclamped (R, G, B) color.
    """
    color, _ = shade_with_stats(ray, scene, camera_position, depth, config)
    return color


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Saturated color buffer indexed [i, j] with j = 0 the top row (preallocated to max size)
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffer.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum size.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions ({width}x{height}) must be positive")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the render target buffer to zero."""
    _color_buffer.fill(0.0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


@ti.kernel
def _render_frame(width: ti.i32, height: ti.i32):
    """Shade one camera ray per pixel into the color buffer."""
    for i, j in ti.ndrange(width, height):
        ray = get_ray(i, j, width, height)
        color, _ = shade_ray(ray.origin, ray.direction, get_camera_origin(), 0)
        _color_buffer[i, j] = saturate_color(color)


def render_image(
    scene,
    camera: ViewPlaneCamera | None = None,
    config: ShadingConfig | None = None,
) -> None:
    """Render one frame of a scene into the render target.

    Args:
        scene: The SceneManager to render.
        camera: The camera generating per-pixel rays. None selects the
            default camera.
        config: Shading configuration. None selects the defaults.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    apply_shading_config(config)
    setup_camera(camera if camera is not None else ViewPlaneCamera())
    scene.activate()

    width, height = get_image_dimensions()
    _render_frame(width, height)


def get_image_numpy():
    """Get the rendered image as a saturated NumPy array.

    The array shape is (height, width, 3) with dtype float32, row 0 at the
    top of the image and every channel clamped to [0, 1].

    Raises:
        RuntimeError: If render target has not been set up.
    """
    import numpy as np

    _check_render_target_initialized()

    width, height = get_image_dimensions()
    image = _color_buffer.to_numpy()[:width, :height, :]

    # Transpose from (width, height, 3) to (height, width, 3)
    return np.transpose(image, (1, 0, 2)).astype(np.float32)


def get_image_rgb8():
    """Get the rendered image as 8-bit RGB.

    Channels are saturate(c) * 255 truncated toward zero.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    import numpy as np

    return (get_image_numpy() * 255.0).astype(np.uint8)

