"""Preview module for output and visualization.

This module is the image sink of the renderer:

Components:
    display: Tone mapping and Matplotlib-based preview display
    export: 8-bit quantization, PNG export/import and image comparison

Features:
    - Per-channel clamping (default) or overflow normalization
    - Rounded 8-bit quantization: round(clamp(c, 0, 1) * 255)
    - PNG export encoded in memory before writing
    - RMSE and max channel difference against a golden image

Example:
    >>> from whitted.preview import save_png, show_preview
    >>> from whitted.core.renderer import render
    >>>
    >>> target = render(scene, camera)
    >>> show_preview(target)
    >>> save_png(target, "output.png")
"""

from whitted.preview.display import (
    ToneMapMethod,
    process_image_for_display,
    show_comparison,
    show_preview,
    tone_map_clamp,
    tone_map_normalize,
)
from whitted.preview.export import (
    compute_rmse,
    encode_png,
    image_to_uint8,
    load_png,
    max_channel_difference,
    save_png,
)

__all__ = [
    # Display functions
    "show_preview",
    "show_comparison",
    # Tone mapping
    "tone_map_clamp",
    "tone_map_normalize",
    "process_image_for_display",
    "ToneMapMethod",
    # Export functions
    "save_png",
    "encode_png",
    "load_png",
    "image_to_uint8",
    "compute_rmse",
    "max_channel_difference",
]
