"""Tests for the built-in scenes."""

import pytest


class TestReferenceScene:
    """Test the four-sphere reference scene."""

    def test_spheres(self):
        from whitted.materials.phong import GLASS, IVORY, MIRROR, RED_RUBBER
        from whitted.scene.presets import create_reference_scene

        scene = create_reference_scene()

        assert [s.center for s in scene.spheres] == [
            (-3.0, 0.0, -16.0),
            (-1.0, -1.5, -12.0),
            (1.5, -0.5, -18.0),
            (7.0, 5.0, -18.0),
        ]
        assert [s.radius for s in scene.spheres] == [2.0, 2.0, 3.0, 4.0]
        assert [s.material for s in scene.spheres] == [IVORY, GLASS, RED_RUBBER, MIRROR]

    def test_lights(self):
        from whitted.scene.presets import create_reference_scene

        scene = create_reference_scene()

        assert [(light.position, light.intensity) for light in scene.lights] == [
            ((-20.0, 20.0, 20.0), 1.5),
            ((30.0, 50.0, -25.0), 1.8),
            ((30.0, 20.0, 30.0), 1.7),
        ]

    def test_floor_enabled(self):
        from whitted.geometry.checkerboard import FloorConfig
        from whitted.scene.presets import create_reference_scene

        assert create_reference_scene().floor == FloorConfig()

    def test_reference_camera(self):
        from whitted.scene.presets import reference_camera

        camera = reference_camera()
        assert (camera.width, camera.height, camera.fov) == (1024, 768, 1.0)
        assert camera.origin == (0.0, 0.0, 0.0)

    def test_matches_example_scene_file(self):
        from pathlib import Path

        from whitted.scene.manager import load_scene_file
        from whitted.scene.presets import create_reference_scene

        path = Path(__file__).parent.parent / "examples" / "scenes" / "reference.json"
        assert load_scene_file(path) == create_reference_scene()


class TestSingleSphereScene:
    """Test the single-sphere scene."""

    def test_contents(self):
        from whitted.materials.phong import IVORY
        from whitted.scene.presets import create_single_sphere_scene

        scene = create_single_sphere_scene()

        assert len(scene.spheres) == 1
        assert scene.spheres[0].center == (-3.0, 0.0, -16.0)
        assert scene.spheres[0].material == IVORY
        assert scene.lights == ()
        assert not scene.floor.enabled

    def test_registry(self):
        from whitted.scene.presets import PRESETS, create_reference_scene, create_single_sphere_scene

        assert set(PRESETS) == {"reference", "single_sphere"}
        assert PRESETS["reference"] is create_reference_scene
        assert PRESETS["single_sphere"] is create_single_sphere_scene


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
