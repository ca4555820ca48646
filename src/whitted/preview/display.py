"""Matplotlib-based preview display for rendered images.

This module provides the tone mapping applied before quantization and
functions for displaying rendered images using Matplotlib.

Features:
    - Per-channel clamping to [0, 1] (the default)
    - Overflow normalization: a pixel whose brightest channel exceeds 1 is
      divided by that channel, preserving its hue
    - Static preview window and side-by-side comparison with RMSE

Example:
    >>> from whitted.preview.display import show_preview
    >>> from whitted.core.renderer import render
    >>>
    >>> target = render(scene, camera)
    >>> show_preview(target)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from whitted.core.renderer import RenderTarget


# Type alias for tone mapping options
ToneMapMethod = Literal["clamp", "normalize"]


def tone_map_clamp(
    image: npt.NDArray[np.float32],
) -> npt.NDArray[np.float32]:
    """Clamp every channel to [0, 1].

    Args:
        image: Linear image array of shape (H, W, 3).

    Returns:
        Clamped image.
    """
    return np.clip(image, 0.0, 1.0).astype(np.float32)


def tone_map_normalize(
    image: npt.NDArray[np.float32],
) -> npt.NDArray[np.float32]:
    """Divide each over-bright pixel by its largest channel.

    Pixels whose largest channel is at most 1 are unchanged. Negative values
    are clamped to 0.

    Args:
        image: Linear image array of shape (H, W, 3).

    Returns:
        Image in [0, 1] range.
    """
    image = np.maximum(image, 0.0)
    peak = np.max(image, axis=-1, keepdims=True)
    result = np.where(peak > 1.0, image / np.maximum(peak, 1.0), image)
    return np.clip(result, 0.0, 1.0).astype(np.float32)


def process_image_for_display(
    image: npt.NDArray[np.float32],
    tone_map: ToneMapMethod = "clamp",
) -> npt.NDArray[np.float32]:
    """Map a linear image into [0, 1] for display or quantization.

    Args:
        image: Linear image array of shape (H, W, 3).
        tone_map: Tone mapping method ("clamp" or "normalize").

    Returns:
        Processed image in [0, 1] range.

    Raises:
        ValueError: If tone_map is not a known method.
    """
    if tone_map == "clamp":
        return tone_map_clamp(image)
    if tone_map == "normalize":
        return tone_map_normalize(image)
    raise ValueError(f"Unknown tone mapping method: {tone_map}")


def _as_array(image: RenderTarget | npt.NDArray[np.float32]) -> npt.NDArray[np.float32]:
    return getattr(image, "pixels", image)


def show_preview(
    image: RenderTarget | npt.NDArray[np.float32],
    *,
    tone_map: ToneMapMethod = "clamp",
    title: str | None = None,
    figsize: tuple[float, float] = (10, 7.5),
    block: bool = True,
) -> None:
    """Display a rendered image as a Matplotlib figure.

    Args:
        image: The RenderTarget or linear image array to display.
        tone_map: Tone mapping method ("clamp" or "normalize").
        title: Custom title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    pixels = _as_array(image)
    display_image = process_image_for_display(pixels, tone_map=tone_map)

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        height, width = pixels.shape[:2]
        title = f"Render Preview - {width}x{height}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)


def show_comparison(
    image_a: npt.NDArray[np.float32],
    image_b: npt.NDArray[np.float32],
    *,
    labels: tuple[str, str] = ("A", "B"),
    tone_map: ToneMapMethod = "clamp",
    diff_scale: float = 10.0,
    figsize: tuple[float, float] = (16, 6),
    block: bool = True,
) -> float:
    """Display side-by-side comparison of two images with difference view.

    Args:
        image_a: First image array (H, W, 3) in linear space.
        image_b: Second image array (H, W, 3) in linear space.
        labels: Labels for the two images.
        tone_map: Tone mapping method to apply.
        diff_scale: Scale factor for difference amplification.
        figsize: Figure size in inches.
        block: Whether to block execution until figure is closed.

    Returns:
        RMSE (root mean squared error) between the two images.
    """
    import matplotlib.pyplot as plt

    display_a = process_image_for_display(image_a, tone_map=tone_map)
    display_b = process_image_for_display(image_b, tone_map=tone_map)

    # Compute RMSE in display space
    diff = display_a.astype(np.float64) - display_b.astype(np.float64)
    rmse = float(np.sqrt(np.mean(diff**2)))

    diff_amplified = np.clip(np.abs(diff) * diff_scale, 0.0, 1.0)

    fig, axes = plt.subplots(1, 3, figsize=figsize)

    axes[0].imshow(display_a)
    axes[0].set_title(labels[0])
    axes[0].axis("off")

    axes[1].imshow(display_b)
    axes[1].set_title(labels[1])
    axes[1].axis("off")

    axes[2].imshow(diff_amplified)
    axes[2].set_title(f"Difference ({diff_scale}x) - RMSE: {rmse:.6f}")
    axes[2].axis("off")

    plt.tight_layout()
    plt.show(block=block)

    return rmse
