"""Pytest configuration for sphere ray tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene fields and restore the default shading config around each test."""
    # Import here to avoid circular imports and ensure Taichi is initialized
    from src.softrt.core.config import apply_shading_config
    from src.softrt.materials.surface import clear_surface_materials
    from src.softrt.scene.intersection import clear_scene

    def _clear_all():
        clear_scene()
        clear_surface_materials()
        apply_shading_config()

    _clear_all()

    yield

    _clear_all()


@pytest.fixture
def unit_sphere_scene():
    """A single unit sphere at the origin with a fully rough material."""
    from src.softrt.scene.manager import SceneManager

    scene = SceneManager()
    material = scene.add_material(color=(0.5, 0.25, 1.0), roughness=1.0)
    scene.add_sphere((0.0, 0.0, 0.0), 1.0, material)
    return scene
