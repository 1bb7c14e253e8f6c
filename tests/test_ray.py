"""Unit tests for the ray module.

Tests cover:
- Ray dataclass and ray_at function
- Vector utility functions (dot, length, normalize, distance)
- lerp and saturate
"""

import pytest
import taichi as ti


def _vec(v):
    return [v[0], v[1], v[2]]


class TestRayBasics:
    """Tests for Ray dataclass and basic operations."""

    def test_ray_at_origin(self):
        """Test ray_at returns origin when t=0."""
        from src.softrt.core.ray import Ray, ray_at, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(1.0, 2.0, 3.0), direction=vec3(0.0, 0.0, -1.0))
            result[None] = ray_at(ray, 0.0)

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-6
        assert abs(r[1] - 2.0) < 1e-6
        assert abs(r[2] - 3.0) < 1e-6

    def test_ray_at_non_unit_direction(self):
        """Test ray_at scales by the unnormalized direction."""
        from src.softrt.core.ray import make_ray, ray_at, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, -2.0), vec3(0.0, 0.0, 2.0))
            result[None] = ray_at(ray, 0.5)

        test_kernel()
        r = result[None]
        assert abs(r[0]) < 1e-6
        assert abs(r[1]) < 1e-6
        assert abs(r[2] - (-1.0)) < 1e-6

    def test_ray_info_holds_tuples(self):
        """Test the Python-side ray description."""
        from src.softrt.core.ray import RayInfo

        ray = RayInfo(origin=(0.0, 0.0, -2.0), direction=(0.0, 0.0, 1.0))
        assert ray.origin == (0.0, 0.0, -2.0)
        assert ray.direction == (0.0, 0.0, 1.0)


class TestVectorUtilities:
    """Tests for dot, length, normalize and distance."""

    def test_dot(self):
        from src.softrt.core.ray import dot, vec3

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = dot(vec3(1.0, 2.0, 3.0), vec3(4.0, -5.0, 6.0))

        test_kernel()
        assert abs(result[None] - 12.0) < 1e-6

    def test_length_and_length_squared(self):
        from src.softrt.core.ray import length, length_squared, vec3

        len_result = ti.field(dtype=ti.f32, shape=())
        len_sq_result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            v = vec3(2.0, 3.0, 6.0)
            len_result[None] = length(v)
            len_sq_result[None] = length_squared(v)

        test_kernel()
        assert abs(len_result[None] - 7.0) < 1e-6
        assert abs(len_sq_result[None] - 49.0) < 1e-5

    @pytest.mark.parametrize(
        "v",
        [
            (3.0, 4.0, 0.0),
            (1.0, 1.0, -1.0),
            (0.001, 0.0, 0.0),
            (-250.0, 17.5, 990.0),
        ],
    )
    def test_normalize_has_unit_length(self, v):
        """Test normalize(v) has length 1 for any non-zero v."""
        from src.softrt.core.ray import length, normalize, vec3

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel(x: ti.f32, y: ti.f32, z: ti.f32):
            result[None] = length(normalize(vec3(x, y, z)))

        test_kernel(*v)
        assert abs(result[None] - 1.0) < 1e-5

    def test_normalize_preserves_direction(self):
        from src.softrt.core.ray import normalize, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = normalize(vec3(0.0, 0.0, -5.0))

        test_kernel()
        r = result[None]
        assert abs(r[0]) < 1e-6
        assert abs(r[1]) < 1e-6
        assert abs(r[2] - (-1.0)) < 1e-6

    def test_distance(self):
        from src.softrt.core.ray import distance, vec3

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = distance(vec3(1.0, 1.0, 1.0), vec3(1.0, 4.0, 5.0))

        test_kernel()
        assert abs(result[None] - 5.0) < 1e-6


class TestLerpAndSaturate:
    """Tests for interpolation and clamping."""

    def test_lerp_endpoints_and_midpoint(self):
        from src.softrt.core.ray import lerp, vec3

        result = ti.Vector.field(3, dtype=ti.f32, shape=3)

        @ti.kernel
        def test_kernel():
            a = vec3(0.0, 1.0, 2.0)
            b = vec3(1.0, 1.0, 0.0)
            result[0] = lerp(a, b, 0.0)
            result[1] = lerp(a, b, 1.0)
            result[2] = lerp(a, b, 0.5)

        test_kernel()
        assert _vec(result[0]) == pytest.approx([0.0, 1.0, 2.0])
        assert _vec(result[1]) == pytest.approx([1.0, 1.0, 0.0])
        assert _vec(result[2]) == pytest.approx([0.5, 1.0, 1.0])

    def test_lerp_extrapolates(self):
        """Test t outside [0, 1] is not clamped."""
        from src.softrt.core.ray import lerp, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = lerp(vec3(0.0, 0.0, 0.0), vec3(1.0, 2.0, 3.0), 2.0)

        test_kernel()
        assert _vec(result[None]) == pytest.approx([2.0, 4.0, 6.0])

    def test_saturate(self):
        from src.softrt.core.ray import saturate

        result = ti.field(dtype=ti.f32, shape=3)

        @ti.kernel
        def test_kernel():
            result[0] = saturate(-0.5)
            result[1] = saturate(0.25)
            result[2] = saturate(3.0)

        test_kernel()
        assert result[0] == 0.0
        assert result[1] == pytest.approx(0.25)
        assert result[2] == 1.0

    def test_saturate_color(self):
        from src.softrt.core.ray import saturate_color, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = saturate_color(vec3(-1.0, 0.5, 1.5))

        test_kernel()
        assert _vec(result[None]) == pytest.approx([0.0, 0.5, 1.0])
