"""Whitted-style shading integrator.

This module implements the shader and the per-pixel render kernels. At every
hit the shader evaluates local Phong lighting from each point light (with a
hard shadow test), and traces one mirror-reflection ray and one refraction
ray. The four contributions are blended with the material's albedo weights:

    color = diffuse_color * diffuse_light * albedo[0]
          + specular_light * albedo[1]
          + cast_ray(reflected, depth + 1) * albedo[2]
          + cast_ray(refracted, depth + 1) * albedo[3]

Rays deeper than MAX_DEPTH, and rays that escape the scene, return the
background color. Results are not clamped.

Taichi functions cannot recurse at runtime, so the recursion is evaluated
with an explicit stack. Each entry carries the product of blend weights along
its path from the primary ray; since the composite is linear in the child
colors, the pixel color is the weighted sum of every node's local lighting
and of the background color of every terminal node.

Key features:
    - Hard shadows from point lights
    - Mirror reflection and dielectric refraction (Snell's law)
    - Epsilon-offset secondary ray origins to avoid self-intersection
    - One primary ray per pixel, pixels rendered in parallel

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.core.integrator import render_rows, setup_render_target
    >>> from whitted.camera.pinhole import PinholeCamera, setup_camera
    >>> from whitted.scene.manager import SceneManager
    >>> from whitted.scene.presets import create_reference_scene
    >>>
    >>> SceneManager().load(create_reference_scene())
    >>> setup_camera(PinholeCamera(width=320, height=240))
    >>> setup_render_target(320, 240)
    >>> render_rows(0, 240)
"""

import taichi as ti
import taichi.math as tm

from whitted.camera.pinhole import get_camera_origin, get_primary_direction
from whitted.core.vector import (
    dot,
    norm,
    normalize,
    offset_origin,
    reflect,
    refract,
    scale,
    sub,
)
from whitted.materials.phong import PhongMaterial
from whitted.scene.intersection import (
    light_intensities,
    light_positions,
    num_lights,
    scene_intersect,
)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Depths 0..MAX_DEPTH are shaded; deeper rays return the background color
MAX_DEPTH = 4

# Offset of secondary ray origins along the surface normal
RAY_EPSILON = 1e-3

# Refractive index of the medium the camera sits in
AMBIENT_REFRACTIVE_INDEX = 1.0

# Sky color returned for escaped rays
BACKGROUND_RGB = (55.0 / 255.0, 176.0 / 255.0, 202.0 / 255.0)

# Pending rays per pixel; a depth-first walk of the binary ray tree never
# holds more than MAX_DEPTH + 2 entries
STACK_SIZE = 2 * (MAX_DEPTH + 2)

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Linear color buffer indexed [column, row], row 0 at the top
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffer.

    Sets the active image dimensions and clears the buffer. The buffer is
    preallocated to MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions exceed maximum supported size.
    """
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the render target buffer to zero."""
    _color_buffer.fill(0.0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions.

    Returns:
        Tuple of (width, height).
    """
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Shading
# =============================================================================


@ti.func
def background_color() -> vec3:
    """Sky color returned for escaped and over-deep rays."""
    return vec3(ti.static(BACKGROUND_RGB[0]), ti.static(BACKGROUND_RGB[1]), ti.static(BACKGROUND_RGB[2]))


@ti.func
def direct_lighting(point: vec3, normal: vec3, direction: vec3, material: PhongMaterial) -> vec3:
    """Local Phong lighting with hard shadows.

    A light contributes only if the shadow ray toward it hits nothing
    strictly closer than the light itself.

    Args:
        point: The hit point.
        normal: Outward unit normal at the hit point.
        direction: Direction of the ray that produced the hit.
        material: Material at the hit point.

    Returns:
        The weighted diffuse plus specular terms.
    """
    diffuse_light = 0.0
    specular_light = 0.0

    for k in range(num_lights[None]):
        to_light = sub(light_positions[k], point)
        light_dir = normalize(to_light)
        light_distance = norm(to_light)

        shadow_origin = offset_origin(point, normal, light_dir, RAY_EPSILON)
        shadow = scene_intersect(shadow_origin, light_dir)
        visible = 1
        if shadow.hit == 1:
            if norm(sub(shadow.point, shadow_origin)) < light_distance:
                visible = 0

        if visible == 1:
            intensity = light_intensities[k]
            diffuse_light += intensity * tm.max(0.0, dot(light_dir, normal))
            highlight = tm.max(0.0, dot(scale(reflect(scale(light_dir, -1.0), normal), -1.0), direction))
            specular_light += ti.pow(highlight, material.specular_exponent) * intensity

    albedo = material.albedo
    return scale(material.diffuse_color, diffuse_light * albedo[0]) + scale(
        vec3(1.0, 1.0, 1.0), specular_light * albedo[1]
    )


@ti.func
def trace(ray_origin: vec3, ray_direction: vec3, start_depth: ti.i32) -> vec3:
    """Evaluate the Whitted ray tree rooted at a ray.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The normalized ray direction.
        start_depth: Recursion depth of the root ray (0 for primary rays).

    Returns:
        The linear, unclamped color seen along the ray.
    """
    color = vec3(0.0, 0.0, 0.0)

    stack_origin = ti.Matrix.zero(ti.f32, STACK_SIZE, 3)
    stack_direction = ti.Matrix.zero(ti.f32, STACK_SIZE, 3)
    stack_depth = ti.Vector.zero(ti.i32, STACK_SIZE)
    stack_weight = ti.Vector.zero(ti.f32, STACK_SIZE)

    for c in ti.static(range(3)):
        stack_origin[0, c] = ray_origin[c]
        stack_direction[0, c] = ray_direction[c]
    stack_depth[0] = start_depth
    stack_weight[0] = 1.0
    top = 1

    while top > 0:
        top -= 1
        origin = vec3(stack_origin[top, 0], stack_origin[top, 1], stack_origin[top, 2])
        direction = vec3(stack_direction[top, 0], stack_direction[top, 1], stack_direction[top, 2])
        depth = stack_depth[top]
        weight = stack_weight[top]

        if depth > MAX_DEPTH:
            color += scale(background_color(), weight)
        else:
            rec = scene_intersect(origin, direction)
            if rec.hit == 0:
                color += scale(background_color(), weight)
            else:
                material = rec.material
                point = rec.point
                normal = rec.normal

                reflect_dir = normalize(reflect(direction, normal))
                refract_dir = normalize(
                    refract(direction, normal, material.refractive_index, AMBIENT_REFRACTIVE_INDEX)
                )
                reflect_origin = offset_origin(point, normal, reflect_dir, RAY_EPSILON)
                refract_origin = offset_origin(point, normal, refract_dir, RAY_EPSILON)

                color += scale(direct_lighting(point, normal, direction, material), weight)

                # Refraction is pushed first so reflection is walked first
                for c in ti.static(range(3)):
                    stack_origin[top, c] = refract_origin[c]
                    stack_direction[top, c] = refract_dir[c]
                stack_depth[top] = depth + 1
                stack_weight[top] = weight * material.albedo[3]
                top += 1

                for c in ti.static(range(3)):
                    stack_origin[top, c] = reflect_origin[c]
                    stack_direction[top, c] = reflect_dir[c]
                stack_depth[top] = depth + 1
                stack_weight[top] = weight * material.albedo[2]
                top += 1

    return color


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_rows_kernel(row_start: ti.i32, row_end: ti.i32, width: ti.i32):
    """Render every pixel of rows [row_start, row_end)."""
    for i, j in ti.ndrange(width, (row_start, row_end)):
        _color_buffer[i, j] = trace(get_camera_origin(), get_primary_direction(i, j), 0)


@ti.kernel
def _cast_ray_kernel(origin: vec3, direction: vec3, depth: ti.i32) -> vec3:
    return trace(origin, direction, depth)


@ti.kernel
def _render_single_pixel(pixel_i: ti.i32, pixel_j: ti.i32) -> vec3:
    return trace(get_camera_origin(), get_primary_direction(pixel_i, pixel_j), 0)


# =============================================================================
# Public Rendering API
# =============================================================================


def cast_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth: int = 0,
) -> tuple[float, float, float]:
    """Shade a single ray against the loaded scene.

    Args:
        origin: Ray origin.
        direction: Normalized ray direction.
        depth: Recursion depth to start at. Depths above MAX_DEPTH return the
            background color without touching the scene.

    Returns:
        Tuple of (R, G, B), linear and unclamped.
    """
    color = _cast_ray_kernel(vec3(*origin), vec3(*direction), depth)
    return (float(color[0]), float(color[1]), float(color[2]))


def render_pixel(pixel_i: int, pixel_j: int) -> tuple[float, float, float]:
    """Render a single pixel with the loaded scene and camera.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).

    Returns:
        Tuple of (R, G, B) color values.
    """
    color = _render_single_pixel(pixel_i, pixel_j)
    return (float(color[0]), float(color[1]), float(color[2]))


def render_rows(row_start: int, row_end: int) -> None:
    """Render a band of rows into the render target.

    Args:
        row_start: First row to render (0 = top).
        row_end: One past the last row to render.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    row_start = max(0, row_start)
    row_end = min(height, row_end)
    if row_start < row_end:
        _render_rows_kernel(row_start, row_end, width)


def get_image_numpy():
    """Get the rendered image as a NumPy array.

    Values are linear and unclamped. The array shape is (height, width, 3)
    with dtype float32, row 0 at the top.

    Returns:
        NumPy array of shape (height, width, 3).

    Raises:
        RuntimeError: If render target has not been set up.
    """
    import numpy as np

    _check_render_target_initialized()

    width, height = get_image_dimensions()

    full_image = _color_buffer.to_numpy()
    image = full_image[:width, :height, :]

    # Transpose from (width, height, 3) to (height, width, 3)
    image = np.transpose(image, (1, 0, 2))

    return np.ascontiguousarray(image, dtype=np.float32)
