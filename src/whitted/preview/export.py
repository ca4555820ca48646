"""Image export utilities for rendered images.

This module is the image sink of the renderer: it clamps linear colors,
quantizes them to 8-bit channels with round(clamp(c, 0, 1) * 255) and writes
lossless PNG files.

The PNG is encoded completely in memory before the file is opened, so an
encoding failure never leaves a truncated file behind. Filesystem and
encoding errors propagate to the caller.

Example:
    >>> from whitted.preview.export import save_png
    >>> from whitted.core.renderer import render
    >>>
    >>> target = render(scene, camera)
    >>> save_png(target, "out.png")
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from whitted.preview.display import ToneMapMethod, process_image_for_display

if TYPE_CHECKING:
    from whitted.core.renderer import RenderTarget

logger = logging.getLogger(__name__)


def image_to_uint8(
    image: npt.NDArray[np.float32],
    *,
    tone_map: ToneMapMethod = "clamp",
) -> npt.NDArray[np.uint8]:
    """Convert a linear float image to 8-bit channels.

    Args:
        image: Linear image array of shape (H, W, 3).
        tone_map: Tone mapping method ("clamp" or "normalize").

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    processed = process_image_for_display(image, tone_map=tone_map)
    return np.round(processed.astype(np.float64) * 255.0).astype(np.uint8)


def encode_png(
    image: RenderTarget | npt.NDArray[np.float32],
    *,
    tone_map: ToneMapMethod = "clamp",
) -> bytes:
    """Encode a rendered image as PNG bytes.

    Args:
        image: The RenderTarget or linear image array of shape (H, W, 3).
        tone_map: Tone mapping method ("clamp" or "normalize").

    Returns:
        The PNG file contents.
    """
    pixels = getattr(image, "pixels", image)
    image_uint8 = image_to_uint8(pixels, tone_map=tone_map)

    buffer = io.BytesIO()
    PILImage.fromarray(image_uint8).save(buffer, format="PNG")
    return buffer.getvalue()


def save_png(
    image: RenderTarget | npt.NDArray[np.float32],
    filepath: str | Path,
    *,
    tone_map: ToneMapMethod = "clamp",
) -> Path:
    """Save a rendered image as an 8-bit PNG file.

    Args:
        image: The RenderTarget or linear image array of shape (H, W, 3).
        filepath: Output file path.
        tone_map: Tone mapping method ("clamp" or "normalize").

    Returns:
        The path written.

    Raises:
        OSError: If the file cannot be created or written.
    """
    data = encode_png(image, tone_map=tone_map)

    path = Path(filepath)
    path.write_bytes(data)
    logger.info("Wrote %s (%d bytes)", path, len(data))
    return path


def load_png(filepath: str | Path) -> npt.NDArray[np.float32]:
    """Load a PNG file as a float image in [0, 1].

    Args:
        filepath: Path of the image.

    Returns:
        Array of shape (H, W, 3), dtype float32.

    Raises:
        OSError: If the file cannot be read or decoded.
    """
    with PILImage.open(filepath) as img:
        data = np.asarray(img.convert("RGB"), dtype=np.float32)
    return data / 255.0


def compute_rmse(
    image_a: npt.NDArray[np.floating[npt.NBitBase]],
    image_b: npt.NDArray[np.floating[npt.NBitBase]],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(
            f"Image shapes must match: {image_a.shape} vs {image_b.shape}"
        )

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))


def max_channel_difference(
    image_a: npt.NDArray[np.uint8],
    image_b: npt.NDArray[np.uint8],
) -> int:
    """Largest absolute per-channel difference between two 8-bit images.

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(
            f"Image shapes must match: {image_a.shape} vs {image_b.shape}"
        )

    diff = np.abs(image_a.astype(np.int16) - image_b.astype(np.int16))
    return int(diff.max()) if diff.size else 0
