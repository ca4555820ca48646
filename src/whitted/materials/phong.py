"""Phong material with four-way blend weights.

A material describes how the shader combines four contributions at a hit:

    color = diffuse_color * diffuse_light * albedo[0]
          + (1, 1, 1)     * specular_light * albedo[1]
          + reflect_color * albedo[2]
          + refract_color * albedo[3]

The albedo weights are blend weights, not a reflectance distribution: they
need not sum to 1 and are not normalized (the mirror preset uses a specular
weight of 10).

Materials are immutable and shared. Spheres reference a registry slot; the
checkerboard floor builds a fresh PhongMaterial value per hit instead of
modifying a shared one.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.materials.phong import IVORY, add_material
    >>> material_id = add_material(IVORY)
"""

import math
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

# Type aliases for vectors
vec3 = tm.vec3
vec4 = tm.vec4


@dataclass(frozen=True)
class Material:
    """Host-side description of a Phong material.

    Attributes:
        diffuse_color: Base RGB color of the surface.
        specular_exponent: Phong exponent of the highlight (>= 0).
        albedo: Blend weights (diffuse, specular, reflect, refract), each >= 0.
        refractive_index: Index of refraction (> 0).
    """

    diffuse_color: tuple[float, float, float] = (0.0, 0.0, 0.0)
    specular_exponent: float = 0.0
    albedo: tuple[float, float, float, float] = (1.0, 0.0, 0.0, 0.0)
    refractive_index: float = 1.0

    def __post_init__(self) -> None:
        if len(self.diffuse_color) != 3:
            raise ValueError(f"diffuse_color must have 3 components, got {len(self.diffuse_color)}")
        if len(self.albedo) != 4:
            raise ValueError(f"albedo must have 4 components, got {len(self.albedo)}")
        values = (*self.diffuse_color, self.specular_exponent, *self.albedo, self.refractive_index)
        if not all(math.isfinite(v) for v in values):
            raise ValueError(f"Material values must be finite, got {self}")
        if self.specular_exponent < 0.0:
            raise ValueError(f"specular_exponent must be non-negative, got {self.specular_exponent}")
        for i, weight in enumerate(self.albedo):
            if weight < 0.0:
                raise ValueError(f"Albedo weight {i} = {weight} is negative")
        if self.refractive_index <= 0.0:
            raise ValueError(f"refractive_index must be positive, got {self.refractive_index}")


# Materials of the reference scene
IVORY = Material(
    diffuse_color=(0.4, 0.4, 0.3),
    specular_exponent=50.0,
    albedo=(0.6, 0.3, 0.1, 0.0),
    refractive_index=1.0,
)
GLASS = Material(
    diffuse_color=(0.6, 0.7, 0.8),
    specular_exponent=125.0,
    albedo=(0.0, 0.5, 0.1, 0.8),
    refractive_index=1.5,
)
RED_RUBBER = Material(
    diffuse_color=(0.3, 0.1, 0.1),
    specular_exponent=10.0,
    albedo=(0.9, 0.1, 0.0, 0.0),
    refractive_index=1.0,
)
MIRROR = Material(
    diffuse_color=(1.0, 1.0, 1.0),
    specular_exponent=1425.0,
    albedo=(0.0, 10.0, 0.8, 0.0),
    refractive_index=1.0,
)

# Purely diffuse, non-reflective, non-refractive defaults (used by the floor)
DEFAULT_SPECULAR_EXPONENT = 0.0
DEFAULT_ALBEDO = (1.0, 0.0, 0.0, 0.0)
DEFAULT_REFRACTIVE_INDEX = 1.0


@ti.dataclass
class PhongMaterial:
    """Device-side material value used during shading.

    Attributes:
        diffuse_color: Base RGB color.
        specular_exponent: Phong exponent.
        albedo: Blend weights (diffuse, specular, reflect, refract).
        refractive_index: Index of refraction.
    """

    diffuse_color: vec3
    specular_exponent: ti.f32
    albedo: vec4
    refractive_index: ti.f32


@ti.func
def make_diffuse_material(diffuse_color: vec3) -> PhongMaterial:
    """Build a purely diffuse material value with the default parameters."""
    return PhongMaterial(
        diffuse_color=diffuse_color,
        specular_exponent=DEFAULT_SPECULAR_EXPONENT,
        albedo=vec4(1.0, 0.0, 0.0, 0.0),
        refractive_index=DEFAULT_REFRACTIVE_INDEX,
    )


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of materials in the scene
MAX_MATERIALS = 256

# Structure of Arrays storage for material properties
material_diffuse_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_specular_exponents = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_albedos = ti.Vector.field(4, dtype=ti.f32, shape=MAX_MATERIALS)
material_refractive_indices = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_materials() -> None:
    """Clear all materials.

    Resets the material count to zero. Existing data in the fields will be
    overwritten when new materials are added.
    """
    num_materials[None] = 0


def add_material(material: Material) -> int:
    """Add a material to the material registry.

    Args:
        material: The material to register.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_diffuse_colors[idx] = vec3(*material.diffuse_color)
    material_specular_exponents[idx] = material.specular_exponent
    material_albedos[idx] = vec4(*material.albedo)
    material_refractive_indices[idx] = material.refractive_index
    num_materials[None] = idx + 1
    return idx


def get_material_count() -> int:
    """Get the number of materials in the registry."""
    return int(num_materials[None])


@ti.func
def get_material(material_idx: ti.i32) -> PhongMaterial:
    """Get a registered material by index.

    Args:
        material_idx: The index of the material in the registry.

    Returns:
        The material value.
    """
    return PhongMaterial(
        diffuse_color=material_diffuse_colors[material_idx],
        specular_exponent=material_specular_exponents[material_idx],
        albedo=material_albedos[material_idx],
        refractive_index=material_refractive_indices[material_idx],
    )
