"""Scene module for scene description, storage and intersection.

This module handles scene representation and ray-scene queries:

Components:
    intersection: Sphere/light storage and nearest-hit queries (with floor)
    manager: Immutable scene model, device upload and JSON configuration
    presets: Built-in scenes (four-sphere reference scene, single sphere)

Scene data is organized for efficient device access:
    - Structure-of-Arrays layout for spheres and lights
    - Material registry indices per sphere
    - Floor parameters in scalar fields
"""

from .intersection import (
    MAX_DISTANCE,
    MAX_LIGHTS,
    MAX_SPHERES,
    SceneHit,
    SceneHitRecord,
    add_light,
    add_sphere,
    clear_scene,
    get_light_count,
    get_sphere_count,
    intersect,
    scene_intersect,
)
from .manager import (
    Light,
    MaterialInfo,
    Scene,
    SceneConfig,
    SceneManager,
    Sphere,
    SphereInfo,
    load_scene_file,
    save_scene_file,
    scene_from_config,
    scene_from_dict,
    scene_to_config,
    scene_to_dict,
)
from .presets import (
    PRESETS,
    create_reference_scene,
    create_single_sphere_scene,
    reference_camera,
)

__all__ = [
    # Intersection module
    "SceneHitRecord",
    "SceneHit",
    "scene_intersect",
    "intersect",
    "add_sphere",
    "add_light",
    "clear_scene",
    "get_sphere_count",
    "get_light_count",
    "MAX_DISTANCE",
    "MAX_SPHERES",
    "MAX_LIGHTS",
    # Manager module
    "Scene",
    "Sphere",
    "Light",
    "SceneManager",
    "MaterialInfo",
    "SphereInfo",
    "SceneConfig",
    "scene_to_config",
    "scene_from_config",
    "scene_to_dict",
    "scene_from_dict",
    "load_scene_file",
    "save_scene_file",
    # Presets module
    "PRESETS",
    "create_reference_scene",
    "create_single_sphere_scene",
    "reference_camera",
]
