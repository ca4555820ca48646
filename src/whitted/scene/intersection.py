"""Scene-level intersection testing.

This module stores the spheres and point lights of the scene in Taichi fields
and resolves the nearest surface hit along a ray, together with the surface
normal and the material to shade with.

The scene consists of the stored spheres plus the checkerboard floor, which is
tested after the spheres and wins only if strictly closer than the nearest
sphere. A hit is reported only when the winning distance is below
MAX_DISTANCE.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.intersection import add_light, add_sphere, clear_scene
    >>> clear_scene()
    >>> add_sphere((-3.0, 0.0, -16.0), 2.0, material_id=0)
    >>> add_light((-20.0, 20.0, 20.0), 1.5)
    >>> # Use scene_intersect within a Taichi kernel
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from whitted.core.vector import add, normalize, scale, sub
from whitted.geometry.checkerboard import checker_color, hit_floor
from whitted.geometry.sphere import Sphere, ray_intersect
from whitted.materials.phong import PhongMaterial, get_material, make_diffuse_material

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Hits at or beyond this distance are reported as misses
MAX_DISTANCE = 1000.0

# Initial "nearest so far" distance
_FAR = 1e30


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection with the material to shade with.

    Attributes:
        hit: Whether the ray hit anything closer than MAX_DISTANCE.
        t: Distance along the ray. Only valid if hit == 1.
        point: The hit point. Only valid if hit == 1.
        normal: Outward unit normal at the hit point. Only valid if hit == 1.
        material: The material at the hit point. For the floor this is a
            value built for this hit alone. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    material: PhongMaterial


# Maximum number of primitives and lights supported in the scene
MAX_SPHERES = 1024
MAX_LIGHTS = 64

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Point light storage
light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_intensities = ti.field(dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all spheres and lights from the scene.

    Resets the counts to zero. The actual field data is not cleared but will
    be overwritten when new entries are added.
    """
    num_spheres[None] = 0
    num_lights[None] = 0


def add_sphere(center: tuple[float, float, float], radius: float, material_id: int = 0) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (should be positive).
        material_id: The material registry index for this sphere.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = list(center)
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def add_light(position: tuple[float, float, float], intensity: float) -> int:
    """Add a point light to the scene.

    Args:
        position: The light position.
        intensity: The light intensity (non-negative).

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
    """
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    light_positions[idx] = list(position)
    light_intensities[idx] = intensity
    num_lights[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])


@ti.func
def scene_intersect(ray_origin: vec3, ray_direction: vec3) -> SceneHitRecord:
    """Find the nearest surface along a ray.

    Spheres are tested in scene order and the strictly nearest distance wins
    (exact ties keep the first sphere seen). The floor is then tested and
    replaces the sphere hit only if strictly closer.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The normalized ray direction.

    Returns:
        A SceneHitRecord; hit == 0 if nothing is closer than MAX_DISTANCE.
    """
    closest_t = _FAR
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)
    material = make_diffuse_material(vec3(0.0, 0.0, 0.0))

    for i in range(num_spheres[None]):
        sphere = Sphere(center=sphere_centers[i], radius=sphere_radii[i])
        rec = ray_intersect(ray_origin, ray_direction, sphere)
        if rec.hit == 1 and rec.t < closest_t:
            closest_t = rec.t
            hit_point = add(ray_origin, scale(ray_direction, rec.t))
            hit_normal = normalize(sub(hit_point, sphere.center))
            material = get_material(sphere_material_ids[i])

    floor_rec = hit_floor(ray_origin, ray_direction, closest_t)
    if floor_rec.hit == 1:
        closest_t = floor_rec.t
        hit_point = floor_rec.point
        hit_normal = vec3(0.0, 1.0, 0.0)
        material = make_diffuse_material(checker_color(floor_rec.point))

    did_hit = 0
    if closest_t < MAX_DISTANCE:
        did_hit = 1

    return SceneHitRecord(
        hit=did_hit,
        t=closest_t,
        point=hit_point,
        normal=hit_normal,
        material=material,
    )


# =============================================================================
# Host-side queries
# =============================================================================


@dataclass(frozen=True)
class SceneHit:
    """Python-side copy of a SceneHitRecord.

    Attributes:
        distance: Distance along the ray.
        point: The hit point.
        normal: Outward unit normal.
        diffuse_color: Diffuse color of the material at the hit.
        specular_exponent: Specular exponent of the material at the hit.
        albedo: Blend weights of the material at the hit.
        refractive_index: Refractive index of the material at the hit.
    """

    distance: float
    point: tuple[float, float, float]
    normal: tuple[float, float, float]
    diffuse_color: tuple[float, float, float]
    specular_exponent: float
    albedo: tuple[float, float, float, float]
    refractive_index: float


# Output slots for intersect()
_query_hit = ti.field(dtype=ti.i32, shape=())
_query_t = ti.field(dtype=ti.f32, shape=())
_query_point = ti.Vector.field(3, dtype=ti.f32, shape=())
_query_normal = ti.Vector.field(3, dtype=ti.f32, shape=())
_query_diffuse = ti.Vector.field(3, dtype=ti.f32, shape=())
_query_exponent = ti.field(dtype=ti.f32, shape=())
_query_albedo = ti.Vector.field(4, dtype=ti.f32, shape=())
_query_ior = ti.field(dtype=ti.f32, shape=())


@ti.kernel
def _intersect_kernel(origin: vec3, direction: vec3):
    rec = scene_intersect(origin, direction)
    _query_hit[None] = rec.hit
    _query_t[None] = rec.t
    _query_point[None] = rec.point
    _query_normal[None] = rec.normal
    _query_diffuse[None] = rec.material.diffuse_color
    _query_exponent[None] = rec.material.specular_exponent
    _query_albedo[None] = rec.material.albedo
    _query_ior[None] = rec.material.refractive_index


def _to_tuple(v) -> tuple:
    return tuple(float(c) for c in v)


def intersect(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> SceneHit | None:
    """Intersect a single ray with the loaded scene from Python.

    Args:
        origin: Ray origin.
        direction: Normalized ray direction.

    Returns:
        A SceneHit, or None if the ray hits nothing closer than MAX_DISTANCE.
    """
    _intersect_kernel(vec3(*origin), vec3(*direction))
    if _query_hit[None] == 0:
        return None
    return SceneHit(
        distance=float(_query_t[None]),
        point=_to_tuple(_query_point[None]),
        normal=_to_tuple(_query_normal[None]),
        diffuse_color=_to_tuple(_query_diffuse[None]),
        specular_exponent=float(_query_exponent[None]),
        albedo=_to_tuple(_query_albedo[None]),
        refractive_index=float(_query_ior[None]),
    )
