"""Geometry module for the primitives of the scene.

This module provides geometric primitives and intersection algorithms:

Components:
    sphere: Sphere primitive with analytic ray-sphere intersection
    checkerboard: Bounded horizontal floor plane with procedural checker color

All intersection routines are implemented as Taichi functions (@ti.func).
Each test reports a hit flag and a distance rather than raising, so grazing
and degenerate rays are handled by numeric policy.

Ray-object intersection follows the pattern:
    rec = ray_intersect(ray_origin, ray_direction, shape)
"""

from .checkerboard import (
    PARALLEL_EPSILON,
    FloorConfig,
    FloorHit,
    checker_color,
    checker_color_at,
    checker_parity,
    disable_floor,
    hit_floor,
    is_floor_enabled,
    setup_floor,
)
from .sphere import Sphere, SphereHit, ray_intersect, ray_intersect_sphere

__all__ = [
    "Sphere",
    "SphereHit",
    "ray_intersect",
    "ray_intersect_sphere",
    "FloorConfig",
    "FloorHit",
    "PARALLEL_EPSILON",
    "checker_color",
    "checker_color_at",
    "checker_parity",
    "hit_floor",
    "setup_floor",
    "disable_floor",
    "is_floor_enabled",
]
