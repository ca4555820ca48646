"""Scene description and upload to device storage.

This module provides the immutable host-side scene model (spheres, point
lights, the checkerboard floor) and a SceneManager that loads a scene into
the Taichi fields used by the intersector and shader.

Materials are shared: spheres that reference equal materials share one
registry slot, and no material is modified after the scene is built.

Scenes can be read from and written to plain dictionaries (and JSON files)
with named material records referenced by the spheres:

    {
        "materials": {"ivory": {"diffuse_color": [0.4, 0.4, 0.3], ...}},
        "spheres": [{"center": [-3, 0, -16], "radius": 2, "material": "ivory"}],
        "lights": [{"position": [-20, 20, 20], "intensity": 1.5}],
        "floor": {"height": -4.0}
    }

A "floor" of null disables the floor; a missing "floor" uses the defaults.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.materials.phong import IVORY
    >>> from whitted.scene.manager import Light, Scene, SceneManager, Sphere
    >>> scene = Scene(
    ...     spheres=(Sphere(center=(-3.0, 0.0, -16.0), radius=2.0, material=IVORY),),
    ...     lights=(Light(position=(-20.0, 20.0, 20.0), intensity=1.5),),
    ... )
    >>> manager = SceneManager()
    >>> manager.load(scene)
"""

import json
import logging
import math
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from whitted.geometry.checkerboard import FloorConfig, disable_floor, setup_floor
from whitted.materials.phong import (
    GLASS,
    IVORY,
    MAX_MATERIALS,
    MIRROR,
    RED_RUBBER,
    Material,
    add_material,
    clear_materials,
    get_material_count,
)
from whitted.scene.intersection import (
    MAX_LIGHTS,
    MAX_SPHERES,
    add_light,
    add_sphere,
    clear_scene,
    get_light_count,
    get_sphere_count,
)

logger = logging.getLogger(__name__)

# Names used when writing the preset materials to a configuration
PRESET_MATERIAL_NAMES = {
    IVORY: "ivory",
    GLASS: "glass",
    RED_RUBBER: "red_rubber",
    MIRROR: "mirror",
}


# =============================================================================
# Scene Model
# =============================================================================


@dataclass(frozen=True)
class Sphere:
    """A sphere of the scene.

    Attributes:
        center: The center of the sphere.
        radius: The radius of the sphere (> 0).
        material: The shared material of the sphere.
    """

    center: tuple[float, float, float]
    radius: float
    material: Material

    def __post_init__(self) -> None:
        if not all(math.isfinite(c) for c in self.center):
            raise ValueError(f"Sphere center must be finite, got {self.center}")
        if not math.isfinite(self.radius) or self.radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive and finite, got {self.radius}")


@dataclass(frozen=True)
class Light:
    """A point light.

    Attributes:
        position: The light position.
        intensity: The light intensity (>= 0).
    """

    position: tuple[float, float, float]
    intensity: float

    def __post_init__(self) -> None:
        if not all(math.isfinite(c) for c in self.position):
            raise ValueError(f"Light position must be finite, got {self.position}")
        if not math.isfinite(self.intensity) or self.intensity < 0.0:
            raise ValueError(f"Light intensity must be non-negative and finite, got {self.intensity}")


@dataclass(frozen=True)
class Scene:
    """An immutable scene: spheres, point lights and the checkerboard floor.

    Attributes:
        spheres: The spheres, in intersection order.
        lights: The point lights.
        floor: The floor configuration (set enabled=False to remove it).
    """

    spheres: tuple[Sphere, ...] = ()
    lights: tuple[Light, ...] = ()
    floor: FloorConfig = field(default_factory=FloorConfig)

    @property
    def materials(self) -> tuple[Material, ...]:
        """Distinct materials referenced by the spheres, in first-use order."""
        return tuple(dict.fromkeys(s.material for s in self.spheres))


# =============================================================================
# Loaded Scene Tracking
# =============================================================================


@dataclass
class MaterialInfo:
    """Information about a registered material.

    Attributes:
        material_id: The registry index.
        material: The material value.
    """

    material_id: int
    material: Material


@dataclass
class SphereInfo:
    """Information about a sphere in device storage.

    Attributes:
        sphere_index: The index in the sphere storage arrays.
        center: The center of the sphere.
        radius: The radius of the sphere.
        material_id: The material ID assigned to the sphere.
    """

    sphere_index: int
    center: tuple[float, float, float]
    radius: float
    material_id: int


class SceneManager:
    """Loads scenes into the Taichi storage used for rendering.

    Attributes:
        materials: MaterialInfo for all registered materials.
        spheres: SphereInfo for all spheres in device storage.

    Example:
        >>> manager = SceneManager()
        >>> manager.load(create_reference_scene())
        >>> manager.get_material_count()
        4
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.materials: list[MaterialInfo] = []
        self.spheres: list[SphereInfo] = []
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        clear_scene()
        clear_materials()
        disable_floor()
        self.materials.clear()
        self.spheres.clear()

    def clear(self) -> None:
        """Clear the entire scene (spheres, lights, materials, floor)."""
        self._clear_all()

    def load(self, scene: Scene) -> None:
        """Replace the loaded scene.

        Args:
            scene: The scene to upload.

        Raises:
            RuntimeError: If the scene exceeds storage capacity.
        """
        self._clear_all()

        if len(scene.spheres) > MAX_SPHERES:
            raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
        if len(scene.lights) > MAX_LIGHTS:
            raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
        if len(scene.materials) > MAX_MATERIALS:
            raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

        material_ids: dict[Material, int] = {}
        for material in scene.materials:
            material_id = add_material(material)
            material_ids[material] = material_id
            self.materials.append(MaterialInfo(material_id=material_id, material=material))

        for sphere in scene.spheres:
            material_id = material_ids[sphere.material]
            sphere_index = add_sphere(sphere.center, sphere.radius, material_id)
            self.spheres.append(
                SphereInfo(
                    sphere_index=sphere_index,
                    center=sphere.center,
                    radius=sphere.radius,
                    material_id=material_id,
                )
            )

        for light in scene.lights:
            add_light(light.position, light.intensity)

        setup_floor(scene.floor)

        logger.debug(
            "Loaded scene: %d materials, %d spheres, %d lights, floor %s",
            len(self.materials),
            len(self.spheres),
            len(scene.lights),
            "on" if scene.floor.enabled else "off",
        )

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_material_count(self) -> int:
        """Get the number of registered materials."""
        return get_material_count()

    def get_sphere_count(self) -> int:
        """Get the number of spheres in device storage."""
        return get_sphere_count()

    def get_light_count(self) -> int:
        """Get the number of lights in device storage."""
        return get_light_count()

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Get information about a material by ID.

        Args:
            material_id: The registry index.

        Returns:
            MaterialInfo for the material, or None if not found.
        """
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None


# =============================================================================
# Scene Serialization
# =============================================================================


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        materials: Material records keyed by name.
        spheres: Sphere records referencing materials by name.
        lights: Light records.
        floor: Floor record, or None for no floor.
    """

    materials: dict[str, dict[str, Any]] = field(default_factory=dict)
    spheres: list[dict[str, Any]] = field(default_factory=list)
    lights: list[dict[str, Any]] = field(default_factory=list)
    floor: dict[str, Any] | None = field(default_factory=dict)


def _vec(values: Any, size: int, what: str) -> tuple[float, ...]:
    """Convert a list of numbers to a tuple of floats of the given size."""
    if not isinstance(values, (list, tuple)):
        raise ValueError(f"{what} must be a list of {size} numbers, got {values!r}")
    result = tuple(_scalar(v, what) for v in values)
    if len(result) != size:
        raise ValueError(f"{what} must have {size} components, got {len(result)}")
    return result


def _scalar(value: Any, what: str) -> float:
    """Convert a number to a float, rejecting booleans, strings and null."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{what} must be a number, got {value!r}")
    return float(value)


def _record(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"{what} must be an object, got {value!r}")
    return value


def _material_from_record(name: str, record: Any) -> Material:
    record = _record(record, f"Material {name!r}")
    return Material(
        diffuse_color=_vec(record.get("diffuse_color", [0.0, 0.0, 0.0]), 3, f"{name}.diffuse_color"),
        specular_exponent=_scalar(record.get("specular_exponent", 0.0), f"{name}.specular_exponent"),
        albedo=_vec(record.get("albedo", [1.0, 0.0, 0.0, 0.0]), 4, f"{name}.albedo"),
        refractive_index=_scalar(record.get("refractive_index", 1.0), f"{name}.refractive_index"),
    )


def scene_to_config(scene: Scene) -> SceneConfig:
    """Export a scene to a configuration object.

    Preset materials keep their preset names; other materials are named
    material_0, material_1, ... in first-use order.

    Args:
        scene: The scene to export.

    Returns:
        A SceneConfig describing the scene.
    """
    config = SceneConfig()

    names: dict[Material, str] = {}
    for material in scene.materials:
        name = PRESET_MATERIAL_NAMES.get(material, f"material_{len(names)}")
        names[material] = name
        config.materials[name] = {
            "diffuse_color": list(material.diffuse_color),
            "specular_exponent": material.specular_exponent,
            "albedo": list(material.albedo),
            "refractive_index": material.refractive_index,
        }

    for sphere in scene.spheres:
        config.spheres.append(
            {
                "center": list(sphere.center),
                "radius": sphere.radius,
                "material": names[sphere.material],
            }
        )

    for light in scene.lights:
        config.lights.append({"position": list(light.position), "intensity": light.intensity})

    if scene.floor.enabled:
        floor = asdict(scene.floor)
        floor.pop("enabled")
        floor["odd_color"] = list(scene.floor.odd_color)
        floor["even_color"] = list(scene.floor.even_color)
        config.floor = floor
    else:
        config.floor = None

    return config


def scene_from_config(config: SceneConfig) -> Scene:
    """Build a scene from a configuration object.

    Args:
        config: The scene configuration.

    Returns:
        The Scene.

    Raises:
        ValueError: If the configuration contains invalid data or a sphere
            references an unknown material.
    """
    materials = {
        name: _material_from_record(name, record)
        for name, record in _record(config.materials, "materials").items()
    }

    if not isinstance(config.spheres, list):
        raise ValueError(f"spheres must be a list, got {config.spheres!r}")
    if not isinstance(config.lights, list):
        raise ValueError(f"lights must be a list, got {config.lights!r}")

    spheres = []
    for i, record in enumerate(config.spheres):
        record = _record(record, f"Sphere {i}")
        name = record.get("material")
        if not isinstance(name, str) or name not in materials:
            raise ValueError(f"Sphere {i} references unknown material: {name!r}")
        if "radius" not in record:
            raise ValueError(f"Sphere {i} has no radius")
        spheres.append(
            Sphere(
                center=_vec(record.get("center", [0.0, 0.0, 0.0]), 3, f"sphere {i} center"),
                radius=_scalar(record["radius"], f"sphere {i} radius"),
                material=materials[name],
            )
        )

    lights = []
    for i, record in enumerate(config.lights):
        record = _record(record, f"Light {i}")
        if "position" not in record:
            raise ValueError(f"Light {i} has no position")
        lights.append(
            Light(
                position=_vec(record["position"], 3, f"light {i} position"),
                intensity=_scalar(record.get("intensity", 1.0), f"light {i} intensity"),
            )
        )

    if config.floor is None:
        floor = FloorConfig(enabled=False)
    else:
        record = dict(_record(config.floor, "floor"))
        for key in ("odd_color", "even_color"):
            if key in record:
                record[key] = _vec(record[key], 3, f"floor {key}")
        for key in ("height", "x_min", "x_max", "z_near", "z_far", "dimming"):
            if key in record:
                record[key] = _scalar(record[key], f"floor {key}")
        if "enabled" in record and not isinstance(record["enabled"], bool):
            raise ValueError(f"floor enabled must be true or false, got {record['enabled']!r}")
        try:
            floor = FloorConfig(**record)
        except TypeError as e:
            raise ValueError(f"Invalid floor configuration: {e}") from e

    return Scene(spheres=tuple(spheres), lights=tuple(lights), floor=floor)


def scene_to_dict(scene: Scene) -> dict[str, Any]:
    """Export a scene to a dictionary (for JSON serialization)."""
    config = scene_to_config(scene)
    return {
        "materials": config.materials,
        "spheres": config.spheres,
        "lights": config.lights,
        "floor": config.floor,
    }


def scene_from_dict(data: dict[str, Any]) -> Scene:
    """Build a scene from a dictionary.

    Args:
        data: Dictionary with 'materials', 'spheres', 'lights' and optionally
            'floor' keys.

    Raises:
        ValueError: If the dictionary does not describe a valid scene.
    """
    data = _record(data, "Scene")
    config = SceneConfig(
        materials=data.get("materials", {}),
        spheres=data.get("spheres", []),
        lights=data.get("lights", []),
        floor=data.get("floor", {}),
    )
    return scene_from_config(config)


def load_scene_file(path: str | Path) -> Scene:
    """Read a scene from a JSON file.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the file is not valid JSON or describes an invalid scene.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    return scene_from_dict(data)


def save_scene_file(scene: Scene, path: str | Path) -> None:
    """Write a scene to a JSON file."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(scene_to_dict(scene), f, indent=2)
