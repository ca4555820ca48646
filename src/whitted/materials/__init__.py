"""Materials module for Phong shading parameters.

This module implements the material model used by the Whitted shader:

Components:
    phong: Diffuse color, specular exponent, four blend weights
        (diffuse, specular, reflect, refract) and refractive index

Each material provides:
    - A frozen host-side Material value, validated on construction
    - A registry slot in Taichi fields for device-side lookup
    - A PhongMaterial struct used by the shader at each hit

Presets for the reference scene are provided (ivory, glass, red rubber,
mirror).
"""

from .phong import (
    DEFAULT_ALBEDO,
    DEFAULT_REFRACTIVE_INDEX,
    DEFAULT_SPECULAR_EXPONENT,
    GLASS,
    IVORY,
    MAX_MATERIALS,
    MIRROR,
    RED_RUBBER,
    Material,
    PhongMaterial,
    add_material,
    clear_materials,
    get_material,
    get_material_count,
    make_diffuse_material,
)

__all__ = [
    "Material",
    "PhongMaterial",
    "IVORY",
    "GLASS",
    "RED_RUBBER",
    "MIRROR",
    "DEFAULT_ALBEDO",
    "DEFAULT_SPECULAR_EXPONENT",
    "DEFAULT_REFRACTIVE_INDEX",
    "MAX_MATERIALS",
    "add_material",
    "clear_materials",
    "get_material",
    "get_material_count",
    "make_diffuse_material",
]
