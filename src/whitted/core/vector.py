"""Vector utilities for the Whitted ray caster.

This module provides the small set of 3-component vector operations the
shader and intersector are built on. All operations are Taichi functions and
return new values; nothing is modified in place.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.core.vector import normalize, reflect, vec3
    >>> # Use within a Taichi kernel:
    >>> # r = reflect(normalize(vec3(1.0, -1.0, 0.0)), vec3(0.0, 1.0, 0.0))
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Direction returned by refract() on total internal reflection (host-side copy)
TIR_DIRECTION = (1.0, 0.0, 0.0)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product of two vectors.

    Args:
        a: First vector.
        b: Second vector.

    Returns:
        The dot product a . b.
    """
    return a.x * b.x + a.y * b.y + a.z * b.z


@ti.func
def scale(v: vec3, k: ti.f32) -> vec3:
    """Multiply a vector by a scalar."""
    return vec3(v.x * k, v.y * k, v.z * k)


@ti.func
def add(a: vec3, b: vec3) -> vec3:
    """Component-wise sum of two vectors."""
    return vec3(a.x + b.x, a.y + b.y, a.z + b.z)


@ti.func
def sub(a: vec3, b: vec3) -> vec3:
    """Component-wise difference a - b."""
    return vec3(a.x - b.x, a.y - b.y, a.z - b.z)


@ti.func
def norm(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return ti.sqrt(dot(v, v))


@ti.func
def normalize(v: vec3) -> vec3:
    """Scale a vector to unit length.

    Zero vectors are not guarded: the result is non-finite. No ray direction
    produced by the pinhole camera is ever zero.

    Args:
        v: The input vector.

    Returns:
        v / norm(v).
    """
    return scale(v, 1.0 / norm(v))


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        incident - 2 * dot(incident, normal) * normal
    """
    return sub(incident, scale(normal, 2.0 * dot(incident, normal)))


@ti.func
def _refract_oriented(incident: vec3, normal: vec3, cosi: ti.f32, eta: ti.f32) -> vec3:
    """Snell's law for a normal already facing the incident side."""
    k = 1.0 - eta * eta * (1.0 - cosi * cosi)
    result = vec3(1.0, 0.0, 0.0)
    if k >= 0.0:
        result = add(scale(incident, eta), scale(normal, eta * cosi - ti.sqrt(k)))
    return result


@ti.func
def refract(
    incident: vec3,
    normal: vec3,
    refractive_index: ti.f32,
    incident_index: ti.f32,
) -> vec3:
    """Refract an incident vector through a surface using Snell's law.

    The same function handles rays entering and leaving a medium. The cosine
    of incidence is measured against the outward normal; when it is negative
    the ray is on the inner side, so the normal is flipped and the two
    indices are swapped.

    Total internal reflection returns the sentinel direction (1, 0, 0), which
    callers trace like any other refraction ray.

    Args:
        incident: The incoming direction vector (should be normalized).
        normal: The outward surface normal (should be normalized).
        refractive_index: Index of refraction of the material behind the surface.
        incident_index: Index of refraction of the medium the ray travels in.

    Returns:
        The refracted direction (not normalized).
    """
    cosi = -tm.clamp(dot(incident, normal), -1.0, 1.0)
    n = normal
    eta = incident_index / refractive_index
    if cosi < 0.0:
        cosi = -cosi
        n = scale(normal, -1.0)
        eta = refractive_index / incident_index
    return _refract_oriented(incident, n, cosi, eta)


@ti.func
def offset_origin(point: vec3, normal: vec3, direction: vec3, epsilon: ti.f32) -> vec3:
    """Offset a secondary ray origin to avoid self-intersection.

    Pushes the point along the normal toward the side the new ray leaves
    toward (outside for reflection and shadow rays, inside for refraction).

    Args:
        point: The intersection point.
        normal: The surface normal.
        direction: The secondary ray direction.
        epsilon: The offset distance.

    Returns:
        The offset origin point.
    """
    offset = scale(normal, epsilon)
    result = add(point, offset)
    if dot(direction, normal) < 0.0:
        result = sub(point, offset)
    return result
