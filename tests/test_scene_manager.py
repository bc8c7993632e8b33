"""Unit tests for the scene manager.

Tests cover:
- Material and object registration through the manager
- Material id validation
- Object and material info queries
- Light enumeration
- Configuration and dictionary round trips
"""

import json

import pytest


class TestSceneManagerBasics:
    """Tests for building scenes."""

    def test_new_manager_clears_registries(self):
        from src.raycaster.materials.surface import add_material, get_material_count
        from src.raycaster.scene.intersection import add_sphere, get_object_count
        from src.raycaster.scene.manager import SceneManager

        add_material(albedo=(0.5, 0.5, 0.5))
        add_sphere((0.0, 0.0, 0.0), 1.0)

        SceneManager()
        assert get_material_count() == 0
        assert get_object_count() == 0

    def test_add_material_and_objects(self):
        from src.raycaster.scene.manager import ObjectKind, SceneManager

        scene = SceneManager()
        red = scene.add_material(albedo=(0.7, 0.1, 0.1), specular=(0.9, 0.1, 0.1))
        white = scene.add_material(albedo=(0.9, 0.9, 0.9))
        black = scene.add_material(albedo=(0.2, 0.2, 0.2))

        sphere_id = scene.add_sphere((0.0, 2.0, 0.0), 2.0, red)
        plane_id = scene.add_tiled_plane((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), white, black)

        assert (sphere_id, plane_id) == (0, 1)
        assert scene.get_material_count() == 3
        assert scene.get_object_count() == 2
        assert scene.get_sphere_count() == 1
        assert scene.get_plane_count() == 1
        assert scene.get_object_info(plane_id).kind == ObjectKind.TILED_PLANE
        assert scene.get_object_info(plane_id).params["alt_material_id"] == black

    def test_add_sphere_with_new_material(self):
        from src.raycaster.scene.manager import SceneManager

        scene = SceneManager()
        object_id, material_id = scene.add_sphere_with_new_material(
            (0.0, 0.0, 0.0), 1.0, albedo=(1.0, 1.0, 1.0), emissive=(1.0, 1.0, 0.2)
        )
        assert (object_id, material_id) == (0, 0)
        info = scene.get_material_info(material_id)
        assert info.params["emissive"] == (1.0, 1.0, 0.2)

    def test_invalid_material_id(self):
        from src.raycaster.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError, match="Invalid material_id"):
            scene.add_sphere((0.0, 0.0, 0.0), 1.0, 0)

        mat = scene.add_material(albedo=(0.5, 0.5, 0.5))
        with pytest.raises(ValueError, match="Invalid material_id"):
            scene.add_tiled_plane((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), mat, mat + 1)
        assert scene.get_object_count() == 0

    def test_info_lookup_out_of_range(self):
        from src.raycaster.scene.manager import SceneManager

        scene = SceneManager()
        assert scene.get_material_info(0) is None
        assert scene.get_object_info(-1) is None

    def test_clear(self):
        from src.raycaster.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_sphere_with_new_material((0.0, 0.0, 0.0), 1.0, albedo=(0.5, 0.5, 0.5))
        scene.clear()
        assert scene.get_object_count() == 0
        assert scene.get_material_count() == 0
        assert scene.objects == []
        assert scene.materials == []

    def test_get_light_ids(self):
        from src.raycaster.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_sphere_with_new_material((0.0, 0.0, 0.0), 1.0, albedo=(0.5, 0.5, 0.5))
        _, lamp = scene.add_sphere_with_new_material(
            (0.0, 5.0, 0.0), 0.5, albedo=(1.0, 1.0, 1.0), emissive=(1.0, 1.0, 1.0)
        )
        dark = scene.add_material(albedo=(0.1, 0.1, 0.1))
        scene.add_tiled_plane((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), dark, lamp)

        assert scene.get_light_ids() == [1, 2]

    def test_capacity_information(self):
        from src.raycaster.materials.surface import MAX_MATERIALS
        from src.raycaster.scene.intersection import MAX_OBJECTS
        from src.raycaster.scene.manager import SceneManager

        assert SceneManager.get_max_objects() == MAX_OBJECTS
        assert SceneManager.get_max_materials() == MAX_MATERIALS


class TestSceneSerialization:
    """Tests for to_config/from_config and to_dict/from_dict."""

    def _build(self):
        from src.raycaster.scene.manager import SceneManager

        scene = SceneManager()
        white = scene.add_material(albedo=(0.9, 0.9, 0.9))
        black = scene.add_material(albedo=(0.2, 0.2, 0.2))
        scene.add_tiled_plane((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), white, black, tile_size=2.0)
        scene.add_sphere_with_new_material(
            (0.0, 2.0, 0.0), 2.0, albedo=(0.7, 0.1, 0.1), specular=(0.9, 0.1, 0.1), reflectance=0.5
        )
        return scene

    def test_to_dict_is_json_serializable(self):
        scene = self._build()
        data = json.loads(json.dumps(scene.to_dict()))

        assert [obj["type"] for obj in data["objects"]] == ["tiled_plane", "sphere"]
        assert data["objects"][0]["tile_size"] == 2.0
        assert data["materials"][2]["specular"] == [0.9, 0.1, 0.1]

    def test_round_trip_preserves_object_order(self):
        from src.raycaster.scene.manager import ObjectKind, SceneManager

        data = self._build().to_dict()

        restored = SceneManager()
        restored.from_dict(data)

        assert restored.get_object_count() == 2
        assert restored.get_material_count() == 3
        assert restored.get_object_info(0).kind == ObjectKind.TILED_PLANE
        assert restored.get_object_info(1).kind == ObjectKind.SPHERE
        assert restored.get_object_info(1).params["center"] == (0.0, 2.0, 0.0)
        assert restored.to_dict() == data

    def test_from_config_replaces_scene(self):
        from src.raycaster.scene.manager import SceneConfig, SceneManager

        scene = self._build()
        scene.from_config(
            SceneConfig(
                materials=[{"albedo": [0.5, 0.5, 0.5]}],
                objects=[{"type": "sphere", "center": [1, 2, 3], "radius": 0.5, "material_id": 0}],
            )
        )
        assert scene.get_object_count() == 1
        assert scene.get_material_count() == 1
        assert scene.get_plane_count() == 0

    def test_unknown_object_type(self):
        from src.raycaster.scene.manager import SceneConfig, SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError, match="Unknown object type"):
            scene.from_config(
                SceneConfig(materials=[{"albedo": [0.5, 0.5, 0.5]}], objects=[{"type": "cube"}])
            )

    def test_invalid_vector_length(self):
        from src.raycaster.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError, match="3 components"):
            scene.from_dict({"materials": [{"albedo": [0.5, 0.5]}], "objects": []})
