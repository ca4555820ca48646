"""Sphere primitive with analytic ray-sphere intersection.

The intersection uses the geometric formulation: project the vector from the
ray origin to the sphere center onto the ray, compare the squared distance of
the center from the ray against the squared radius, and step back by the
half-chord length.

    L   = center - origin
    tca = dot(L, dir)
    d2  = dot(L, L) - tca^2          (miss if d2 > r^2)
    thc = sqrt(r^2 - d2)
    t0  = tca - thc, t1 = tca + thc

The nearer root is used unless it lies behind the origin, in which case the
far root is used (the origin is inside the sphere). If both are negative the
sphere is entirely behind the ray.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.geometry.sphere import ray_intersect_sphere
    >>> ray_intersect_sphere((0, 0, -5), 1.0, (0, 0, 0), (0, 0, -1))
    (True, 4.0)
"""

import taichi as ti
import taichi.math as tm

from whitted.core.vector import dot, sub

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class SphereHit:
    """Result of a ray-sphere test.

    Attributes:
        hit: 1 if the ray intersects the sphere in front of its origin.
        t: Distance along the (normalized) ray to the intersection.
            Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32


@ti.func
def ray_intersect(ray_origin: vec3, ray_direction: vec3, sphere: Sphere) -> SphereHit:
    """Test a ray against a sphere.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The normalized ray direction.
        sphere: The sphere to test.

    Returns:
        A SphereHit; t is the distance to the first intersection in front of
        the origin.
    """
    to_center = sub(sphere.center, ray_origin)
    tca = dot(to_center, ray_direction)
    d2 = dot(to_center, to_center) - tca * tca
    r2 = sphere.radius * sphere.radius

    did_hit = 0
    t = 0.0
    if d2 <= r2:
        thc = ti.sqrt(r2 - d2)
        t = tca - thc
        t1 = tca + thc
        if t < 0.0:
            t = t1
        if t >= 0.0:
            did_hit = 1

    return SphereHit(hit=did_hit, t=t)


@ti.kernel
def _ray_intersect_kernel(center: vec3, radius: ti.f32, origin: vec3, direction: vec3) -> tm.vec2:
    rec = ray_intersect(origin, direction, Sphere(center=center, radius=radius))
    return tm.vec2(ti.cast(rec.hit, ti.f32), rec.t)


def ray_intersect_sphere(
    center: tuple[float, float, float],
    radius: float,
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> tuple[bool, float]:
    """Test a single ray against a single sphere from Python.

    Args:
        center: Sphere center (x, y, z).
        radius: Sphere radius.
        origin: Ray origin (x, y, z).
        direction: Normalized ray direction (x, y, z).

    Returns:
        Tuple of (hit, distance). distance is meaningless when hit is False.
    """
    result = _ray_intersect_kernel(vec3(*center), radius, vec3(*origin), vec3(*direction))
    return result[0] > 0.5, float(result[1])
