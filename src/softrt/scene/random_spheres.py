"""Procedural random-spheres scene.

Builds the demo scene: a palette of fourteen materials, a field of
randomly placed spheres above a huge ground sphere, and the default
view-plane camera looking down +z.

Sphere i uses material i % len(palette); the ground sphere is appended
last and uses material 0. Positions and radii come from a seeded NumPy
generator, so a given seed always yields the same scene.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.softrt.scene.random_spheres import create_random_spheres_scene
    >>> scene, camera = create_random_spheres_scene()
    >>> scene.get_sphere_count()
    41
"""

from dataclasses import dataclass

import numpy as np

from src.softrt.camera.view_plane import ViewPlaneCamera
from src.softrt.scene.manager import SceneManager

# =============================================================================
# Scene Constants
# =============================================================================

# (color, roughness) pairs; the first entry also colors the ground
MATERIAL_PALETTE = (
    ((0.75, 1.0, 0.75), 0.975),
    ((0.0, 0.0, 1.0), 0.9),
    ((1.0, 0.0, 0.0), 0.9),
    ((0.0, 1.0, 0.0), 1.0),
    ((1.0, 1.0, 0.0), 0.985),
    ((0.0, 1.0, 1.0), 0.985),
    ((1.0, 0.0, 1.0), 0.985),
    ((1.0, 1.0, 1.0), 0.95),
    ((0.25, 0.25, 1.0), 0.95),
    ((1.0, 0.25, 0.25), 0.95),
    ((0.5, 1.0, 0.25), 0.95),
    ((1.0, 1.0, 0.25), 0.9),
    ((0.25, 1.0, 1.0), 0.9),
    ((1.0, 0.25, 1.0), 0.9),
)

GROUND_CENTER = (0.0, -1000.0, 5.0)
GROUND_RADIUS = 999.0


@dataclass
class RandomSpheresParams:
    """Parameters for the random-spheres scene.

    Values are drawn as integers in [0, n) and scaled onto the range: a
    500-step grid for y and a 1000-step grid for everything else.

    Attributes:
        num_spheres: Number of random spheres (excluding the ground).
        seed: Seed for the NumPy random generator.
        x_range: (low, high) for sphere center x.
        y_range: (low, high) for sphere center y.
        z_range: (low, high) for sphere center z.
        max_radius: Radii are drawn from [0, max_radius).
        include_ground: Whether to append the ground sphere.
    """

    num_spheres: int = 40
    seed: int = 43
    x_range: tuple[float, float] = (-5.0, 5.0)
    y_range: tuple[float, float] = (0.0, 5.0)
    z_range: tuple[float, float] = (0.0, 10.0)
    max_radius: float = 1.25
    include_ground: bool = True


def _draw(rng: np.random.Generator, low: float, high: float, steps: int) -> float:
    """Draw from [low, high) on a grid of the given number of steps."""
    return low + float(rng.integers(0, steps)) * (high - low) / steps


def create_random_spheres_scene(
    params: RandomSpheresParams | None = None,
) -> tuple[SceneManager, ViewPlaneCamera]:
    """Create the random-spheres scene.

    Args:
        params: Scene parameters. None selects the defaults.

    Returns:
        Tuple of (scene, camera).

    Raises:
        ValueError: If num_spheres is negative.
    """
    if params is None:
        params = RandomSpheresParams()
    if params.num_spheres < 0:
        raise ValueError(f"num_spheres must be non-negative, got {params.num_spheres}")

    scene = SceneManager()
    material_ids = [scene.add_material(color, roughness) for color, roughness in MATERIAL_PALETTE]

    rng = np.random.default_rng(params.seed)
    for i in range(params.num_spheres):
        center = (
            _draw(rng, params.x_range[0], params.x_range[1], 1000),
            _draw(rng, params.y_range[0], params.y_range[1], 500),
            _draw(rng, params.z_range[0], params.z_range[1], 1000),
        )
        radius = _draw(rng, 0.0, params.max_radius, 1000)
        scene.add_sphere(center, radius, material_ids[i % len(material_ids)])

    if params.include_ground:
        scene.add_sphere(GROUND_CENTER, GROUND_RADIUS, material_ids[0])

    return scene, ViewPlaneCamera()
