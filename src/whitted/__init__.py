"""Taichi-based Whitted-style ray caster.

This package renders a static scene of spheres over a checkerboard floor by
casting one ray per pixel through a pinhole camera, with support for:
- Local Phong lighting from point lights with hard shadows
- Mirror reflection and dielectric refraction up to a fixed depth
- JSON scene configuration
- 8-bit PNG output

Subpackages:
    core: Vector utilities, the shader, and the render entry point
    geometry: Sphere and checkerboard floor intersection
    materials: Phong materials with four blend weights
    scene: Scene model, device storage and nearest-hit queries
    camera: Pinhole camera primary ray generation
    preview: Tone mapping, PNG export and preview display
"""

__version__ = "0.1.0"
