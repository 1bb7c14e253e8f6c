"""Core rendering module.

Components:
    ray: Ray data structure and vector utilities
    config: Shading configuration (light, sky, tuning constants)
    integrator: Recursive shading and the frame rendering kernel

All compute-intensive operations use Taichi kernels.
"""

from .config import (
    DEFAULT_AMBIENT,
    DEFAULT_INTERSECTION_EPSILON,
    DEFAULT_LIGHT_DIRECTION,
    DEFAULT_MAX_DEPTH,
    DEFAULT_SHADOW_BIAS,
    DEFAULT_SKY_COLOR,
    DEFAULT_SPECULAR_EXPONENT,
    ShadingConfig,
    apply_shading_config,
)
from .ray import (
    Ray,
    RayInfo,
    distance,
    dot,
    length,
    length_squared,
    lerp,
    make_ray,
    normalize,
    ray_at,
    saturate,
    saturate_color,
    vec3,
)

# Note: integrator is NOT imported here to avoid circular imports.
# Import directly from src.softrt.core.integrator when needed.

__all__ = [
    "Ray",
    "RayInfo",
    "ray_at",
    "make_ray",
    "vec3",
    "dot",
    "length",
    "length_squared",
    "normalize",
    "distance",
    "lerp",
    "saturate",
    "saturate_color",
    "ShadingConfig",
    "apply_shading_config",
    "DEFAULT_LIGHT_DIRECTION",
    "DEFAULT_SKY_COLOR",
    "DEFAULT_AMBIENT",
    "DEFAULT_SPECULAR_EXPONENT",
    "DEFAULT_MAX_DEPTH",
    "DEFAULT_SHADOW_BIAS",
    "DEFAULT_INTERSECTION_EPSILON",
]
