"""Checkerboard floor: a bounded horizontal plane with procedural color.

The floor is not a scene primitive with a stored material. It is a fixed
procedure of the scene intersector: a plane at constant height, clipped to a
rectangular field of tiles, whose diffuse color alternates by the parity of

    floor(0.5 + x + 1000) + floor(0.5 * z)

evaluated at the hit point. A fresh purely diffuse material is built for every
hit from that color.

Rays nearly parallel to the plane (|dir.y| <= 1e-3) never hit it.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.geometry.checkerboard import FloorConfig, setup_floor
    >>> setup_floor(FloorConfig())
"""

import math
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from whitted.core.vector import add, scale

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Rays with |dir.y| at or below this are treated as parallel to the floor
PARALLEL_EPSILON = 1e-3


@dataclass(frozen=True)
class FloorConfig:
    """Geometry and colors of the checkerboard floor.

    Attributes:
        enabled: Whether the floor takes part in intersection.
        height: The y coordinate of the plane.
        x_min: Smallest accepted hit x (inclusive).
        x_max: Largest accepted hit x (inclusive).
        z_near: Upper z bound of the tile field (exclusive).
        z_far: Lower z bound of the tile field (exclusive).
        odd_color: Base color of tiles with odd parity.
        even_color: Base color of tiles with even parity.
        dimming: Factor applied to both tile colors.
    """

    enabled: bool = True
    height: float = -4.0
    x_min: float = -10.0
    x_max: float = 10.0
    z_near: float = -10.0
    z_far: float = -30.0
    odd_color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    even_color: tuple[float, float, float] = (1.0, 0.7, 0.3)
    dimming: float = 0.3

    def __post_init__(self) -> None:
        if self.x_min >= self.x_max:
            raise ValueError(f"x_min ({self.x_min}) must be less than x_max ({self.x_max})")
        if self.z_far >= self.z_near:
            raise ValueError(f"z_far ({self.z_far}) must be less than z_near ({self.z_near})")
        if self.dimming < 0.0:
            raise ValueError(f"dimming must be non-negative, got {self.dimming}")


@ti.dataclass
class FloorHit:
    """Result of a ray-floor test.

    Attributes:
        hit: 1 if the ray hits the tile field closer than the given limit.
        t: Distance along the ray. Only valid if hit == 1.
        point: The hit point. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3


# Floor parameters (configured by setup_floor)
_floor_enabled = ti.field(dtype=ti.i32, shape=())
_floor_height = ti.field(dtype=ti.f32, shape=())
_floor_x_bounds = ti.Vector.field(2, dtype=ti.f32, shape=())
_floor_z_bounds = ti.Vector.field(2, dtype=ti.f32, shape=())
_floor_odd_color = ti.Vector.field(3, dtype=ti.f32, shape=())
_floor_even_color = ti.Vector.field(3, dtype=ti.f32, shape=())
_floor_dimming = ti.field(dtype=ti.f32, shape=())


def setup_floor(config: FloorConfig) -> None:
    """Configure the checkerboard floor.

    Args:
        config: Floor geometry and colors.
    """
    _floor_enabled[None] = 1 if config.enabled else 0
    _floor_height[None] = config.height
    _floor_x_bounds[None] = [config.x_min, config.x_max]
    _floor_z_bounds[None] = [config.z_far, config.z_near]
    _floor_odd_color[None] = list(config.odd_color)
    _floor_even_color[None] = list(config.even_color)
    _floor_dimming[None] = config.dimming


def disable_floor() -> None:
    """Remove the floor from intersection tests."""
    _floor_enabled[None] = 0


def is_floor_enabled() -> bool:
    """Check if the floor is enabled."""
    return bool(_floor_enabled[None])


def checker_parity(x: float, z: float) -> int:
    """Parity (0 or 1) of the checker tile containing (x, z)."""
    return (math.floor(0.5 + x + 1000.0) + math.floor(0.5 * z)) & 1


@ti.func
def checker_color(point: vec3) -> vec3:
    """Diffuse color of the floor at a hit point.

    Args:
        point: A point on the floor.

    Returns:
        The dimmed odd or even tile color.
    """
    parity = ti.cast(ti.floor(0.5 + point.x + 1000.0) + ti.floor(0.5 * point.z), ti.i32) & 1
    color = _floor_even_color[None]
    if parity == 1:
        color = _floor_odd_color[None]
    return scale(color, _floor_dimming[None])


@ti.func
def hit_floor(ray_origin: vec3, ray_direction: vec3, t_max: ti.f32) -> FloorHit:
    """Test a ray against the floor's tile field.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The normalized ray direction.
        t_max: Only hits strictly closer than this are accepted.

    Returns:
        A FloorHit record.
    """
    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)

    if _floor_enabled[None] == 1 and ti.abs(ray_direction.y) > PARALLEL_EPSILON:
        d = -(ray_origin.y - _floor_height[None]) / ray_direction.y
        pt = add(ray_origin, scale(ray_direction, d))
        x_bounds = _floor_x_bounds[None]
        z_bounds = _floor_z_bounds[None]
        if (
            d > 0.0
            and pt.x >= x_bounds[0]
            and pt.x <= x_bounds[1]
            and pt.z > z_bounds[0]
            and pt.z < z_bounds[1]
            and d < t_max
        ):
            did_hit = 1
            hit_t = d
            hit_point = pt

    return FloorHit(hit=did_hit, t=hit_t, point=hit_point)


@ti.kernel
def _checker_color_kernel(x: ti.f32, z: ti.f32) -> vec3:
    return checker_color(vec3(x, _floor_height[None], z))


def checker_color_at(x: float, z: float) -> tuple[float, float, float]:
    """Evaluate the floor color at (x, z) from Python.

    Uses the currently configured floor colors and dimming.
    """
    color = _checker_color_kernel(x, z)
    return (float(color[0]), float(color[1]), float(color[2]))
