"""Render entry point.

This module wraps the integrator kernels in a single call that takes a scene
and a camera and returns the finished image:

    target = render(scene, camera)

Rendering is one deterministic pass with one primary ray per pixel. Rows can
be rendered in batches with a progress callback, which does not change the
result.

The scene and camera are uploaded into the module-level Taichi storage for
the duration of the call, so renders in one process run one after another.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.camera.pinhole import PinholeCamera
    >>> from whitted.core.renderer import render
    >>> from whitted.scene.presets import create_reference_scene
    >>>
    >>> target = render(create_reference_scene(), PinholeCamera(1024, 768, fov=1.0))
    >>> target.pixels.shape
    (768, 1024, 3)
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from whitted.camera.pinhole import PinholeCamera, setup_camera
from whitted.core.integrator import get_image_numpy, render_rows, setup_render_target
from whitted.scene.manager import Scene, SceneManager

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class RenderTarget:
    """A finished image of linear RGB values.

    Values are unclamped; clamping and quantization belong to the image sink.

    Attributes:
        pixels: Array of shape (height, width, 3), dtype float32, row 0 at the top.
    """

    pixels: npt.NDArray[np.float32]

    @property
    def width(self) -> int:
        """Image width in pixels."""
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        """Image height in pixels."""
        return int(self.pixels.shape[0])

    def pixel(self, i: int, j: int) -> tuple[float, float, float]:
        """Color of the pixel at column i, row j (row 0 at the top)."""
        r, g, b = self.pixels[j, i]
        return (float(r), float(g), float(b))


def render(
    scene: Scene,
    camera: PinholeCamera,
    *,
    rows_per_batch: int | None = None,
    callback: ProgressCallback | None = None,
) -> RenderTarget:
    """Render a scene through a camera.

    Args:
        scene: The scene to render.
        camera: Image size, field of view and camera position.
        rows_per_batch: Rows rendered per kernel launch. Default renders the
            whole image in one launch.
        callback: Optional function called after each batch with
            (rows_done, total_rows).

    Returns:
        The rendered RenderTarget.

    Raises:
        ValueError: If the image is larger than the preallocated buffer or
            rows_per_batch is not positive.
    """
    if rows_per_batch is not None and rows_per_batch <= 0:
        raise ValueError(f"rows_per_batch must be positive, got {rows_per_batch}")

    setup_render_target(camera.width, camera.height)
    SceneManager().load(scene)
    setup_camera(camera)

    logger.info(
        "Rendering %dx%d (fov=%.3f): %d spheres, %d lights",
        camera.width,
        camera.height,
        camera.fov,
        len(scene.spheres),
        len(scene.lights),
    )
    start_time = time.perf_counter()

    batch = rows_per_batch or camera.height
    for row_start in range(0, camera.height, batch):
        row_end = min(row_start + batch, camera.height)
        render_rows(row_start, row_end)
        if callback is not None:
            callback(row_end, camera.height)

    pixels = get_image_numpy()
    logger.info("Render finished in %.2fs", time.perf_counter() - start_time)

    return RenderTarget(pixels=pixels)
