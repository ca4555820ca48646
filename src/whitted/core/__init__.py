"""Core rendering module.

This module contains the fundamental building blocks of the ray caster:

Components:
    vector: 3-component vector operations (dot, normalize, reflect, refract)
    integrator: Whitted-style shader and the per-pixel render kernels
    renderer: Host-side render entry point and RenderTarget

The shader evaluates local Phong lighting with hard shadows and recursively
traces one reflection and one refraction ray per hit up to a fixed depth.

All compute-intensive operations use Taichi kernels.
"""

from .vector import (
    TIR_DIRECTION,
    add,
    dot,
    norm,
    normalize,
    offset_origin,
    reflect,
    refract,
    scale,
    sub,
    vec3,
)

# Note: integrator and renderer are NOT imported here because they declare
# Taichi fields. Import them directly from whitted.core.integrator or
# whitted.core.renderer after ti.init().

__all__ = [
    "vec3",
    "dot",
    "scale",
    "add",
    "sub",
    "norm",
    "normalize",
    "reflect",
    "refract",
    "offset_origin",
    "TIR_DIRECTION",
]
