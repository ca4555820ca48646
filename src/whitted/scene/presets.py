"""Built-in scenes.

The reference scene is the classic four-sphere arrangement over a
checkerboard floor:

- Ivory sphere at (-3, 0, -16), radius 2
- Glass sphere (refractive index 1.5) at (-1, -1.5, -12), radius 2
- Red rubber sphere at (1.5, -0.5, -18), radius 3
- Mirror sphere at (7, 5, -18), radius 4
- Three point lights of intensity 1.5, 1.8 and 1.7

It is rendered at 1024x768 with a vertical field of view of 1 radian.

The single-sphere scene is a minimal test scene: one ivory sphere with no
lights and no floor. Without lights the sphere has no diffuse or specular
term, so it shows only its 0.1 mirror reflection of the sky.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.presets import create_reference_scene, reference_camera
    >>> from whitted.core.renderer import render
    >>> target = render(create_reference_scene(), reference_camera())
"""

from whitted.camera.pinhole import PinholeCamera
from whitted.geometry.checkerboard import FloorConfig
from whitted.materials.phong import GLASS, IVORY, MIRROR, RED_RUBBER
from whitted.scene.manager import Light, Scene, Sphere

REFERENCE_WIDTH = 1024
REFERENCE_HEIGHT = 768
REFERENCE_FOV = 1.0


def create_reference_scene() -> Scene:
    """Create the four-sphere reference scene with three lights and a floor."""
    spheres = (
        Sphere(center=(-3.0, 0.0, -16.0), radius=2.0, material=IVORY),
        Sphere(center=(-1.0, -1.5, -12.0), radius=2.0, material=GLASS),
        Sphere(center=(1.5, -0.5, -18.0), radius=3.0, material=RED_RUBBER),
        Sphere(center=(7.0, 5.0, -18.0), radius=4.0, material=MIRROR),
    )
    lights = (
        Light(position=(-20.0, 20.0, 20.0), intensity=1.5),
        Light(position=(30.0, 50.0, -25.0), intensity=1.8),
        Light(position=(30.0, 20.0, 30.0), intensity=1.7),
    )
    return Scene(spheres=spheres, lights=lights, floor=FloorConfig())


def create_single_sphere_scene() -> Scene:
    """Create the single ivory sphere scene (no lights, no floor).

    The sphere renders as 0.1 times the sky color, its reflect weight.
    """
    return Scene(
        spheres=(Sphere(center=(-3.0, 0.0, -16.0), radius=2.0, material=IVORY),),
        lights=(),
        floor=FloorConfig(enabled=False),
    )


def reference_camera(
    width: int = REFERENCE_WIDTH,
    height: int = REFERENCE_HEIGHT,
) -> PinholeCamera:
    """Camera of the reference renders (vertical FOV of 1 radian)."""
    return PinholeCamera(width=width, height=height, fov=REFERENCE_FOV)


PRESETS = {
    "reference": create_reference_scene,
    "single_sphere": create_single_sphere_scene,
}
