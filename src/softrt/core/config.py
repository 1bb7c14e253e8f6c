"""Shading configuration shared by the intersection and shading kernels.

The light direction, sky color and tuning constants of the shading model
are collected in a ShadingConfig value. Host-side API calls take an
optional config and upload it into Taichi fields before launching a
kernel, so tests can vary lighting deterministically.

Example:
    >>> config = ShadingConfig(light_direction=(0.0, 1.0, 0.0), max_depth=4)
    >>> apply_shading_config(config)
"""

from dataclasses import dataclass

import numpy as np
import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Default Shading Constants
# =============================================================================

# Directional light, pointing from the surface toward the light
DEFAULT_LIGHT_DIRECTION = (1.0, 1.0, -1.0)

# Color returned by rays that escape the scene
DEFAULT_SKY_COLOR = (0.75, 0.75, 1.0)

# Minimum diffuse intensity so unlit surfaces are never fully black
DEFAULT_AMBIENT = 0.15

# Exponent of the Blinn-Phong highlight
DEFAULT_SPECULAR_EXPONENT = 128.0

# Deepest bounce level that still recurses
DEFAULT_MAX_DEPTH = 8

# Offset along the normal for shadow and bounce ray origins
DEFAULT_SHADOW_BIAS = 0.001

# Discriminant threshold below which a second root is not reported
DEFAULT_INTERSECTION_EPSILON = 0.00001


@dataclass
class ShadingConfig:
    """Lighting and tuning parameters for the shading integrator.

    Attributes:
        light_direction: Direction toward the directional light. Normalized
            when uploaded; must not be the zero vector.
        sky_color: RGB color returned for rays that hit nothing.
        ambient: Floor applied to the diffuse intensity.
        specular_exponent: Exponent applied to the half-vector term.
        max_depth: Bounce levels below this value recurse; a hit at this
            depth is shaded without a further bounce.
        shadow_bias: Distance secondary rays are pushed along the normal.
        intersection_epsilon: Discriminant threshold for reporting the second
            intersection point of a ray/sphere pair.
    """

    light_direction: tuple[float, float, float] = DEFAULT_LIGHT_DIRECTION
    sky_color: tuple[float, float, float] = DEFAULT_SKY_COLOR
    ambient: float = DEFAULT_AMBIENT
    specular_exponent: float = DEFAULT_SPECULAR_EXPONENT
    max_depth: int = DEFAULT_MAX_DEPTH
    shadow_bias: float = DEFAULT_SHADOW_BIAS
    intersection_epsilon: float = DEFAULT_INTERSECTION_EPSILON

    def normalized_light_direction(self) -> tuple[float, float, float]:
        """Return the light direction scaled to unit length.

        Raises:
            ValueError: If the light direction has zero length.
        """
        light = np.array(self.light_direction, dtype=np.float64)
        norm = np.linalg.norm(light)
        if norm == 0.0:
            raise ValueError("light_direction must not be the zero vector")
        light = light / norm
        return (float(light[0]), float(light[1]), float(light[2]))

    def validate(self) -> None:
        """Check parameter ranges.

        Raises:
            ValueError: If any parameter is out of range.
        """
        self.normalized_light_direction()
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")
        if self.specular_exponent < 0.0:
            raise ValueError(
                f"specular_exponent must be non-negative, got {self.specular_exponent}"
            )
        if self.shadow_bias < 0.0:
            raise ValueError(f"shadow_bias must be non-negative, got {self.shadow_bias}")
        if self.intersection_epsilon < 0.0:
            raise ValueError(
                f"intersection_epsilon must be non-negative, got {self.intersection_epsilon}"
            )


# =============================================================================
# Taichi Fields for Shading State (GPU-accessible)
# =============================================================================

_light_direction = ti.Vector.field(3, dtype=ti.f32, shape=())
_sky_color = ti.Vector.field(3, dtype=ti.f32, shape=())
_ambient = ti.field(dtype=ti.f32, shape=())
_specular_exponent = ti.field(dtype=ti.f32, shape=())
_max_depth = ti.field(dtype=ti.i32, shape=())
_shadow_bias = ti.field(dtype=ti.f32, shape=())
_intersection_epsilon = ti.field(dtype=ti.f32, shape=())


def apply_shading_config(config: ShadingConfig | None = None) -> ShadingConfig:
    """Upload a shading configuration into the Taichi fields.

    Args:
        config: The configuration to use. None selects the defaults.

    Returns:
        The configuration that was applied.

    Raises:
        ValueError: If the configuration fails validation.
    """
    if config is None:
        config = ShadingConfig()
    config.validate()

    _light_direction[None] = list(config.normalized_light_direction())
    _sky_color[None] = [float(c) for c in config.sky_color]
    _ambient[None] = config.ambient
    _specular_exponent[None] = config.specular_exponent
    _max_depth[None] = config.max_depth
    _shadow_bias[None] = config.shadow_bias
    _intersection_epsilon[None] = config.intersection_epsilon
    return config


@ti.func
def get_light_direction() -> vec3:
    """Get the normalized light direction."""
    return _light_direction[None]


@ti.func
def get_sky_color() -> vec3:
    """Get the color returned for escaped rays."""
    return _sky_color[None]


@ti.func
def get_ambient() -> ti.f32:
    return _ambient[None]


@ti.func
def get_specular_exponent() -> ti.f32:
    return _specular_exponent[None]


@ti.func
def get_max_depth() -> ti.i32:
    return _max_depth[None]


@ti.func
def get_shadow_bias() -> ti.f32:
    return _shadow_bias[None]


@ti.func
def get_intersection_epsilon() -> ti.f32:
    return _intersection_epsilon[None]
