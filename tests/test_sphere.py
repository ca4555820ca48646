"""Tests for ray-sphere intersection."""

import math

import pytest
import taichi as ti
import taichi.math as tm


class TestRaySphereIntersection:
    """Test the geometric ray-sphere test."""

    def test_hit_from_outside(self):
        """Distance is |origin - center| - radius for a ray aimed at the center."""
        from whitted.geometry.sphere import ray_intersect_sphere

        hit, t = ray_intersect_sphere((-3.0, 0.0, -16.0), 2.0, (0.0, 0.0, 0.0), _unit(-3.0, 0.0, -16.0))

        assert hit
        assert abs(t - (math.sqrt(9.0 + 256.0) - 2.0)) < 1e-4

    def test_miss(self):
        from whitted.geometry.sphere import ray_intersect_sphere

        hit, _ = ray_intersect_sphere((0.0, 0.0, -5.0), 1.0, (0.0, 0.0, 0.0), (0.0, 1.0, 0.0))

        assert not hit

    def test_near_miss_beside_sphere(self):
        from whitted.geometry.sphere import ray_intersect_sphere

        hit, _ = ray_intersect_sphere((1.01, 0.0, -5.0), 1.0, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert not hit

    def test_origin_inside_uses_far_root(self):
        from whitted.geometry.sphere import ray_intersect_sphere

        hit, t = ray_intersect_sphere((0.0, 0.0, 0.0), 2.0, (0.0, 0.0, 0.0), (1.0, 0.0, 0.0))

        assert hit
        assert abs(t - 2.0) < 1e-5

    def test_sphere_behind_origin(self):
        from whitted.geometry.sphere import ray_intersect_sphere

        hit, _ = ray_intersect_sphere((0.0, 0.0, 5.0), 1.0, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert not hit

    def test_offset_hit_distance(self):
        """A ray off the center axis hits at tca - thc."""
        from whitted.geometry.sphere import ray_intersect_sphere

        hit, t = ray_intersect_sphere((0.0, 0.0, -10.0), 2.0, (1.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert hit
        assert abs(t - (10.0 - math.sqrt(3.0))) < 1e-4


class TestSphereFunc:
    """Test ray_intersect inside a kernel."""

    def test_struct_result(self):
        from whitted.geometry.sphere import Sphere, ray_intersect

        hit = ti.field(dtype=ti.i32, shape=())
        t_val = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def compute():
            sphere = Sphere(center=tm.vec3(0.0, 0.0, -4.0), radius=1.0)
            rec = ray_intersect(tm.vec3(0.0, 0.0, 0.0), tm.vec3(0.0, 0.0, -1.0), sphere)
            hit[None] = rec.hit
            t_val[None] = rec.t

        compute()
        assert hit[None] == 1
        assert abs(t_val[None] - 3.0) < 1e-5


def _unit(x, y, z):
    length = math.sqrt(x * x + y * y + z * z)
    return (x / length, y / length, z / length)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
