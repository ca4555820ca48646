"""Camera module for primary ray generation.

This module provides the camera model for generating primary rays:

Components:
    pinhole: Pinhole (perspective) camera at a fixed origin looking down -z

Camera responsibilities:
    - Map pixel (i, j) to a world-space direction through the pixel center
    - Derive the image plane extent from the vertical field of view and the
      image aspect ratio

One ray is cast per pixel; there is no jitter or sub-pixel sampling.
"""

from .pinhole import (
    PinholeCamera,
    get_camera_info,
    get_camera_origin,
    get_primary_direction,
    primary_direction,
    setup_camera,
)

__all__ = [
    "PinholeCamera",
    "setup_camera",
    "get_primary_direction",
    "get_camera_origin",
    "get_camera_info",
    "primary_direction",
]
