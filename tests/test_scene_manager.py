"""Tests for the SceneManager, material storage and the random-spheres scene.

Tests cover:
- Material registration and validation
- Sphere registration and validation
- Uploading scenes into the Taichi fields
- The procedural random-spheres scene
"""

import pytest


class TestMaterials:
    """Tests for material registration."""

    def test_add_material_returns_sequential_ids(self):
        from src.softrt.scene.manager import SceneManager

        scene = SceneManager()
        assert scene.add_material((1.0, 0.0, 0.0), 0.9) == 0
        assert scene.add_material((0.0, 1.0, 0.0), 1.0) == 1
        assert scene.get_material_count() == 2

    def test_material_info(self):
        from src.softrt.scene.manager import SceneManager

        scene = SceneManager()
        mat = scene.add_material((0.25, 0.5, 2.0), 0.0)
        info = scene.get_material_info(mat)

        assert info.material_id == mat
        # Colors are not clamped at storage time
        assert info.color == (0.25, 0.5, 2.0)
        assert info.roughness == 0.0
        assert scene.get_material_info(5) is None

    @pytest.mark.parametrize("roughness", [-0.1, 1.5])
    def test_roughness_out_of_range(self, roughness):
        from src.softrt.scene.manager import SceneManager

        with pytest.raises(ValueError, match="Roughness"):
            SceneManager().add_material((1.0, 1.0, 1.0), roughness)

    def test_surface_registry_validates_roughness(self):
        from src.softrt.materials.surface import add_surface_material

        with pytest.raises(ValueError):
            add_surface_material((1.0, 1.0, 1.0), 2.0)

    def test_surface_registry_capacity(self):
        from src.softrt.materials.surface import (
            MAX_MATERIALS,
            add_surface_material,
            num_materials,
        )

        num_materials[None] = MAX_MATERIALS
        with pytest.raises(RuntimeError, match="Maximum number of materials"):
            add_surface_material((1.0, 1.0, 1.0), 0.5)


class TestSpheres:
    """Tests for sphere registration."""

    def test_add_sphere(self):
        from src.softrt.scene.manager import SceneManager

        scene = SceneManager()
        mat = scene.add_material((1.0, 1.0, 1.0), 1.0)
        assert scene.add_sphere((0.0, 1.0, 2.0), 0.5, mat) == 0
        assert scene.add_sphere((0.0, 1.0, 4.0), 0.0, mat) == 1

        assert scene.get_sphere_count() == 2
        assert scene.spheres[0].center == (0.0, 1.0, 2.0)
        assert scene.spheres[1].radius == 0.0
        assert scene.spheres[1].sphere_index == 1

    def test_negative_radius_rejected(self):
        from src.softrt.scene.manager import SceneManager

        scene = SceneManager()
        mat = scene.add_material((1.0, 1.0, 1.0), 1.0)
        with pytest.raises(ValueError, match="radius"):
            scene.add_sphere((0.0, 0.0, 0.0), -1.0, mat)

    def test_invalid_material_rejected(self):
        from src.softrt.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError, match="Invalid material_id"):
            scene.add_sphere((0.0, 0.0, 0.0), 1.0, 0)

    def test_clear(self):
        from src.softrt.scene.manager import SceneManager

        scene = SceneManager()
        mat = scene.add_material((1.0, 1.0, 1.0), 1.0)
        scene.add_sphere((0.0, 0.0, 0.0), 1.0, mat)
        scene.clear()

        assert scene.get_sphere_count() == 0
        assert scene.get_material_count() == 0


class TestActivation:
    """Tests for uploading scenes into the Taichi fields."""

    def test_activate_uploads_spheres_and_materials(self):
        from src.softrt.materials.surface import get_surface_material_count, material_colors
        from src.softrt.scene.intersection import get_sphere_count, sphere_radii
        from src.softrt.scene.manager import SceneManager

        scene = SceneManager()
        mat = scene.add_material((0.2, 0.4, 0.6), 0.5)
        scene.add_sphere((0.0, 0.0, 0.0), 1.5, mat)
        scene.activate()

        assert scene.is_active()
        assert get_sphere_count() == 1
        assert get_surface_material_count() == 1
        assert abs(sphere_radii[0] - 1.5) < 1e-6
        assert abs(material_colors[0][1] - 0.4) < 1e-6

    def test_switching_scenes_reuploads(self):
        from src.softrt.scene.intersection import get_sphere_count
        from src.softrt.scene.manager import SceneManager

        first = SceneManager()
        mat = first.add_material((1.0, 1.0, 1.0), 1.0)
        first.add_sphere((0.0, 0.0, 0.0), 1.0, mat)

        second = SceneManager()
        mat = second.add_material((1.0, 1.0, 1.0), 1.0)
        second.add_sphere((0.0, 0.0, 0.0), 1.0, mat)
        second.add_sphere((0.0, 0.0, 3.0), 1.0, mat)

        first.activate()
        assert get_sphere_count() == 1
        second.activate()
        assert get_sphere_count() == 2
        assert not first.is_active()
        first.activate()
        assert get_sphere_count() == 1

    def test_mutation_after_activation_reuploads(self):
        from src.softrt.scene.intersection import get_sphere_count
        from src.softrt.scene.manager import SceneManager

        scene = SceneManager()
        mat = scene.add_material((1.0, 1.0, 1.0), 1.0)
        scene.add_sphere((0.0, 0.0, 0.0), 1.0, mat)
        scene.activate()

        scene.add_sphere((0.0, 0.0, 5.0), 1.0, mat)
        assert not scene.is_active()
        scene.activate()
        assert get_sphere_count() == 2

    def test_direct_sphere_field_edit_forces_reupload(self):
        from src.softrt.scene.intersection import add_sphere, get_sphere_count
        from src.softrt.scene.manager import SceneManager

        scene = SceneManager()
        mat = scene.add_material((1.0, 1.0, 1.0), 1.0)
        scene.add_sphere((0.0, 0.0, 0.0), 1.0, mat)
        scene.activate()

        add_sphere((0.0, 0.0, 9.0), 1.0, mat)
        assert get_sphere_count() == 2
        assert not scene.is_active()

        scene.activate()
        assert get_sphere_count() == 1

    def test_direct_material_field_edit_forces_reupload(self):
        from src.softrt.materials.surface import (
            add_surface_material,
            clear_surface_materials,
            get_surface_material_count,
        )
        from src.softrt.scene.manager import SceneManager

        scene = SceneManager()
        mat = scene.add_material((1.0, 1.0, 1.0), 1.0)
        scene.add_sphere((0.0, 0.0, 0.0), 1.0, mat)
        scene.activate()

        clear_surface_materials()
        assert not scene.is_active()
        scene.activate()
        assert get_surface_material_count() == 1

        add_surface_material((0.0, 0.0, 0.0), 0.5)
        assert not scene.is_active()
        scene.activate()
        assert get_surface_material_count() == 1


class TestRandomSpheresScene:
    """Tests for the procedural random-spheres scene."""

    def test_default_scene_layout(self):
        from src.softrt.scene.random_spheres import (
            GROUND_CENTER,
            GROUND_RADIUS,
            MATERIAL_PALETTE,
            create_random_spheres_scene,
        )

        scene, camera = create_random_spheres_scene()

        assert scene.get_material_count() == len(MATERIAL_PALETTE) == 14
        assert scene.get_sphere_count() == 41
        ground = scene.spheres[-1]
        assert ground.center == GROUND_CENTER
        assert ground.radius == GROUND_RADIUS
        assert ground.material_id == 0
        assert camera.position == (0.0, 0.0, -2.0)

    def test_spheres_cycle_through_palette(self):
        from src.softrt.scene.random_spheres import create_random_spheres_scene

        scene, _ = create_random_spheres_scene()
        for i, sphere in enumerate(scene.spheres[:-1]):
            assert sphere.material_id == i % 14

    def test_positions_within_ranges(self):
        from src.softrt.scene.random_spheres import create_random_spheres_scene

        scene, _ = create_random_spheres_scene()
        for sphere in scene.spheres[:-1]:
            x, y, z = sphere.center
            assert -5.0 <= x < 5.0
            assert 0.0 <= y < 5.0
            assert 0.0 <= z < 10.0
            assert 0.0 <= sphere.radius < 1.25

    def test_same_seed_same_scene(self):
        from src.softrt.scene.random_spheres import (
            RandomSpheresParams,
            create_random_spheres_scene,
        )

        a, _ = create_random_spheres_scene(RandomSpheresParams(seed=7))
        b, _ = create_random_spheres_scene(RandomSpheresParams(seed=7))
        c, _ = create_random_spheres_scene(RandomSpheresParams(seed=8))

        assert [s.center for s in a.spheres] == [s.center for s in b.spheres]
        assert [s.center for s in a.spheres] != [s.center for s in c.spheres]

    def test_without_ground(self):
        from src.softrt.scene.random_spheres import (
            RandomSpheresParams,
            create_random_spheres_scene,
        )

        scene, _ = create_random_spheres_scene(
            RandomSpheresParams(num_spheres=5, include_ground=False)
        )
        assert scene.get_sphere_count() == 5

    def test_negative_count_rejected(self):
        from src.softrt.scene.random_spheres import (
            RandomSpheresParams,
            create_random_spheres_scene,
        )

        with pytest.raises(ValueError):
            create_random_spheres_scene(RandomSpheresParams(num_spheres=-1))
