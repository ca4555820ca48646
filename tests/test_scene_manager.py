"""Unit tests for the scene model, SceneManager and scene configuration.

Tests cover:
- Scene model validation (spheres, lights)
- Loading scenes into device storage with shared materials
- Scene serialization (to_config, from_config, JSON files)
- Configuration errors
"""

import json

import pytest


@pytest.fixture
def fresh_manager():
    """Create a fresh SceneManager for each test."""
    from whitted.scene.manager import SceneManager

    manager = SceneManager()
    yield manager
    manager.clear()


class TestSceneModel:
    """Tests for the immutable scene values."""

    def test_sphere_radius_must_be_positive(self):
        from whitted.materials.phong import IVORY
        from whitted.scene.manager import Sphere

        with pytest.raises(ValueError):
            Sphere(center=(0.0, 0.0, -5.0), radius=0.0, material=IVORY)

    def test_light_intensity_must_be_non_negative(self):
        from whitted.scene.manager import Light

        with pytest.raises(ValueError):
            Light(position=(0.0, 0.0, 0.0), intensity=-1.0)

    @pytest.mark.parametrize("radius", [float("nan"), float("inf")])
    def test_sphere_radius_must_be_finite(self, radius):
        from whitted.materials.phong import IVORY
        from whitted.scene.manager import Sphere

        with pytest.raises(ValueError):
            Sphere(center=(0.0, 0.0, -5.0), radius=radius, material=IVORY)

    def test_sphere_center_must_be_finite(self):
        from whitted.materials.phong import IVORY
        from whitted.scene.manager import Sphere

        with pytest.raises(ValueError):
            Sphere(center=(0.0, float("nan"), -5.0), radius=1.0, material=IVORY)

    @pytest.mark.parametrize("intensity", [float("nan"), float("inf")])
    def test_light_intensity_must_be_finite(self, intensity):
        from whitted.scene.manager import Light

        with pytest.raises(ValueError):
            Light(position=(0.0, 0.0, 0.0), intensity=intensity)

    def test_light_position_must_be_finite(self):
        from whitted.scene.manager import Light

        with pytest.raises(ValueError):
            Light(position=(float("inf"), 0.0, 0.0), intensity=1.0)

    def test_zero_intensity_light_is_allowed(self):
        from whitted.scene.manager import Light

        assert Light(position=(0.0, 0.0, 0.0), intensity=0.0).intensity == 0.0

    def test_materials_are_distinct_in_first_use_order(self):
        from whitted.materials.phong import GLASS, IVORY
        from whitted.scene.manager import Scene, Sphere

        scene = Scene(
            spheres=(
                Sphere(center=(0.0, 0.0, -5.0), radius=1.0, material=GLASS),
                Sphere(center=(2.0, 0.0, -5.0), radius=1.0, material=IVORY),
                Sphere(center=(4.0, 0.0, -5.0), radius=1.0, material=GLASS),
            )
        )
        assert scene.materials == (GLASS, IVORY)

    def test_scene_is_immutable(self):
        from dataclasses import FrozenInstanceError

        from whitted.scene.manager import Scene

        scene = Scene()
        with pytest.raises(FrozenInstanceError):
            scene.lights = ()


class TestSceneManagerLoad:
    """Tests for uploading scenes to device storage."""

    def test_load_reference_scene(self, fresh_manager):
        from whitted.geometry.checkerboard import is_floor_enabled
        from whitted.scene.presets import create_reference_scene

        fresh_manager.load(create_reference_scene())

        assert fresh_manager.get_material_count() == 4
        assert fresh_manager.get_sphere_count() == 4
        assert fresh_manager.get_light_count() == 3
        assert is_floor_enabled()

    def test_shared_materials_use_one_slot(self, fresh_manager):
        from whitted.materials.phong import IVORY
        from whitted.scene.manager import Scene, Sphere

        scene = Scene(
            spheres=(
                Sphere(center=(0.0, 0.0, -5.0), radius=1.0, material=IVORY),
                Sphere(center=(2.0, 0.0, -5.0), radius=1.0, material=IVORY),
            )
        )
        fresh_manager.load(scene)

        assert fresh_manager.get_material_count() == 1
        assert [s.material_id for s in fresh_manager.spheres] == [0, 0]

    def test_load_replaces_previous_scene(self, fresh_manager):
        from whitted.geometry.checkerboard import is_floor_enabled
        from whitted.scene.presets import create_reference_scene, create_single_sphere_scene

        fresh_manager.load(create_reference_scene())
        fresh_manager.load(create_single_sphere_scene())

        assert fresh_manager.get_sphere_count() == 1
        assert fresh_manager.get_light_count() == 0
        assert fresh_manager.get_material_count() == 1
        assert not is_floor_enabled()

    def test_get_material_info(self, fresh_manager):
        from whitted.materials.phong import GLASS
        from whitted.scene.presets import create_reference_scene

        fresh_manager.load(create_reference_scene())

        info = fresh_manager.get_material_info(1)
        assert info is not None
        assert info.material == GLASS
        assert fresh_manager.get_material_info(99) is None

    def test_too_many_lights_raises(self, fresh_manager):
        from whitted.scene.intersection import MAX_LIGHTS
        from whitted.scene.manager import Light, Scene

        lights = tuple(Light(position=(0.0, 0.0, 0.0), intensity=1.0) for _ in range(MAX_LIGHTS + 1))
        with pytest.raises(RuntimeError):
            fresh_manager.load(Scene(lights=lights))

    def test_clear(self, fresh_manager):
        from whitted.scene.presets import create_reference_scene

        fresh_manager.load(create_reference_scene())
        fresh_manager.clear()

        assert fresh_manager.get_sphere_count() == 0
        assert fresh_manager.get_material_count() == 0
        assert fresh_manager.spheres == []


class TestSceneConfig:
    """Tests for scene configuration import and export."""

    def test_reference_scene_round_trip(self):
        from whitted.scene.manager import scene_from_dict, scene_to_dict
        from whitted.scene.presets import create_reference_scene

        scene = create_reference_scene()
        assert scene_from_dict(scene_to_dict(scene)) == scene

    def test_preset_material_names(self):
        from whitted.scene.manager import scene_to_dict
        from whitted.scene.presets import create_reference_scene

        data = scene_to_dict(create_reference_scene())
        assert set(data["materials"]) == {"ivory", "glass", "red_rubber", "mirror"}
        assert data["spheres"][1]["material"] == "glass"

    def test_custom_material_names(self):
        from whitted.materials.phong import Material
        from whitted.scene.manager import Scene, Sphere, scene_to_dict

        material = Material(diffuse_color=(0.1, 0.2, 0.3))
        scene = Scene(spheres=(Sphere(center=(0.0, 0.0, -5.0), radius=1.0, material=material),))

        data = scene_to_dict(scene)
        assert list(data["materials"]) == ["material_0"]

    def test_disabled_floor_round_trip(self):
        from whitted.scene.manager import scene_from_dict, scene_to_dict
        from whitted.scene.presets import create_single_sphere_scene

        data = scene_to_dict(create_single_sphere_scene())
        assert data["floor"] is None
        assert not scene_from_dict(data).floor.enabled

    def test_missing_floor_uses_defaults(self):
        from whitted.geometry.checkerboard import FloorConfig
        from whitted.scene.manager import scene_from_dict

        scene = scene_from_dict({"materials": {}, "spheres": [], "lights": []})
        assert scene.floor == FloorConfig()

    def test_material_defaults(self):
        from whitted.scene.manager import scene_from_dict

        scene = scene_from_dict(
            {
                "materials": {"plain": {"diffuse_color": [0.5, 0.5, 0.5]}},
                "spheres": [{"center": [0, 0, -5], "radius": 1, "material": "plain"}],
            }
        )
        material = scene.spheres[0].material
        assert material.albedo == (1.0, 0.0, 0.0, 0.0)
        assert material.refractive_index == 1.0

    def test_unknown_material_raises(self):
        from whitted.scene.manager import scene_from_dict

        with pytest.raises(ValueError, match="unknown material"):
            scene_from_dict({"spheres": [{"center": [0, 0, -5], "radius": 1, "material": "gold"}]})

    def test_missing_radius_raises(self):
        from whitted.scene.manager import scene_from_dict

        with pytest.raises(ValueError):
            scene_from_dict(
                {
                    "materials": {"plain": {}},
                    "spheres": [{"center": [0, 0, -5], "material": "plain"}],
                }
            )

    def test_bad_vector_raises(self):
        from whitted.scene.manager import scene_from_dict

        with pytest.raises(ValueError):
            scene_from_dict({"lights": [{"position": [1, 2], "intensity": 1.0}]})

    def test_unknown_floor_key_raises(self):
        from whitted.scene.manager import scene_from_dict

        with pytest.raises(ValueError):
            scene_from_dict({"floor": {"tiles": 8}})

    def test_negative_albedo_in_config_raises(self):
        from whitted.scene.manager import scene_from_dict

        with pytest.raises(ValueError):
            scene_from_dict({"materials": {"bad": {"albedo": [1, -1, 0, 0]}}})

    @pytest.mark.parametrize(
        "data",
        [
            [],
            {"materials": []},
            {"materials": {"m": 5}},
            {"materials": {"m": {"specular_exponent": "shiny"}}},
            {"materials": {"m": {"diffuse_color": 0.5}}},
            {"spheres": {"center": [0, 0, -5]}},
            {"spheres": [[0, 0, -5, 1]]},
            {"materials": {"m": {}}, "spheres": [{"center": [0, 0, -5], "radius": None, "material": "m"}]},
            {"materials": {"m": {}}, "spheres": [{"center": [0, 0, -5], "radius": "2", "material": "m"}]},
            {"materials": {"m": {}}, "spheres": [{"center": "origin", "radius": 1, "material": "m"}]},
            {"materials": {"m": {}}, "spheres": [{"center": [0, 0, -5], "radius": 1, "material": ["m"]}]},
            {"lights": "none"},
            {"lights": [5]},
            {"lights": [{"position": [0, 0, 0], "intensity": None}]},
            {"lights": [{"position": [0, None, 0]}]},
            {"floor": [1, 2]},
            {"floor": {"height": "low"}},
            {"floor": {"enabled": "yes"}},
        ],
    )
    def test_malformed_records_raise_value_error(self, data):
        from whitted.scene.manager import scene_from_dict

        with pytest.raises(ValueError):
            scene_from_dict(data)

    def test_nan_radius_raises(self):
        from whitted.scene.manager import scene_from_dict

        with pytest.raises(ValueError):
            scene_from_dict(
                {
                    "materials": {"m": {}},
                    "spheres": [{"center": [0, 0, -5], "radius": float("nan"), "material": "m"}],
                }
            )


class TestSceneFiles:
    """Tests for JSON scene files."""

    def test_save_and_load(self, tmp_path):
        from whitted.scene.manager import load_scene_file, save_scene_file
        from whitted.scene.presets import create_reference_scene

        path = tmp_path / "scene.json"
        save_scene_file(create_reference_scene(), path)

        assert json.loads(path.read_text())["lights"][0]["intensity"] == 1.5
        assert load_scene_file(path) == create_reference_scene()

    def test_invalid_json_raises_value_error(self, tmp_path):
        from whitted.scene.manager import load_scene_file

        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(ValueError):
            load_scene_file(path)

    def test_nan_in_json_raises_value_error(self, tmp_path):
        from whitted.scene.manager import load_scene_file

        path = tmp_path / "nan.json"
        path.write_text('{"lights": [{"position": [0, 0, 0], "intensity": NaN}]}')

        with pytest.raises(ValueError):
            load_scene_file(path)

    def test_top_level_array_raises_value_error(self, tmp_path):
        from whitted.scene.manager import load_scene_file

        path = tmp_path / "array.json"
        path.write_text("[]")

        with pytest.raises(ValueError):
            load_scene_file(path)

    def test_missing_file_raises(self, tmp_path):
        from whitted.scene.manager import load_scene_file

        with pytest.raises(OSError):
            load_scene_file(tmp_path / "missing.json")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
