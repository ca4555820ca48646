"""Pinhole camera model for primary ray generation.

The camera sits at a fixed origin looking down the negative z axis with +y up.
The image plane is at unit distance; its half-height is tan(fov / 2), where fov
is the vertical field of view in radians, and its half-width follows from the
image aspect ratio.

For pixel (i, j), with j = 0 at the top row, the primary direction is:

    x =  (2 * (i + 0.5) / width  - 1) * tan(fov / 2) * width / height
    y = -(2 * (j + 0.5) / height - 1) * tan(fov / 2)
    direction = normalize(x, y, -1)

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.camera.pinhole import PinholeCamera, setup_camera
    >>>
    >>> camera = PinholeCamera(width=1024, height=768, fov=1.0)
    >>> setup_camera(camera)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     direction = get_primary_direction(0, 0)  # Top-left pixel
"""

import math
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from whitted.core.vector import normalize

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class PinholeCamera:
    """Configuration for a pinhole (perspective) camera.

    Attributes:
        width: Output image width in pixels.
        height: Output image height in pixels.
        fov: Vertical field of view in radians.
        origin: Camera position in world space (x, y, z).
    """

    width: int = 1024
    height: int = 768
    fov: float = 1.0
    origin: tuple[float, float, float] = (0.0, 0.0, 0.0)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {self.width}x{self.height}")
        if not 0.0 < self.fov < math.pi:
            raise ValueError(f"fov must be in (0, pi) radians, got {self.fov}")

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        return self.width / self.height


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_width = ti.field(dtype=ti.i32, shape=())
_camera_height = ti.field(dtype=ti.i32, shape=())
# tan(fov / 2): half-height of the image plane at unit distance
_camera_half_height = ti.field(dtype=ti.f32, shape=())


def setup_camera(camera: PinholeCamera) -> None:
    """Initialize camera state from configuration.

    Args:
        camera: Camera configuration with image size, FOV and position.

    Note:
        This function writes to Taichi fields and should be called from
        Python (not from within a Taichi kernel).
    """
    _camera_origin[None] = list(camera.origin)
    _camera_width[None] = camera.width
    _camera_height[None] = camera.height
    _camera_half_height[None] = math.tan(camera.fov / 2.0)


# =============================================================================
# Ray Generation (Taichi-compatible)
# =============================================================================


@ti.func
def get_primary_direction(pixel_i: ti.i32, pixel_j: ti.i32) -> vec3:
    """Generate the normalized direction through the center of a pixel.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).

    Returns:
        The unit direction from the camera origin through the pixel center.
    """
    width = ti.cast(_camera_width[None], ti.f32)
    height = ti.cast(_camera_height[None], ti.f32)
    half_height = _camera_half_height[None]

    x = (2.0 * (ti.cast(pixel_i, ti.f32) + 0.5) / width - 1.0) * half_height * width / height
    y = -(2.0 * (ti.cast(pixel_j, ti.f32) + 0.5) / height - 1.0) * half_height
    return normalize(vec3(x, y, -1.0))


@ti.func
def get_camera_origin() -> vec3:
    """Get the camera origin (position) in world space."""
    return _camera_origin[None]


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, ...] | int | float]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with origin, width, height and half_height.
    """
    origin_vec = _camera_origin[None]
    return {
        "origin": (float(origin_vec[0]), float(origin_vec[1]), float(origin_vec[2])),
        "width": int(_camera_width[None]),
        "height": int(_camera_height[None]),
        "half_height": float(_camera_half_height[None]),
    }


@ti.kernel
def _primary_direction_kernel(pixel_i: ti.i32, pixel_j: ti.i32) -> vec3:
    return get_primary_direction(pixel_i, pixel_j)


def primary_direction(pixel_i: int, pixel_j: int) -> tuple[float, float, float]:
    """Compute the primary ray direction for a pixel from Python.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).

    Returns:
        The unit direction (x, y, z).
    """
    d = _primary_direction_kernel(pixel_i, pixel_j)
    return (float(d[0]), float(d[1]), float(d[2]))
