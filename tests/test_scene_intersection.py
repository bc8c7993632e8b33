"""Unit tests for scene object storage and the nearest-hit query.

Tests cover:
- Adding spheres and tiled planes, object ids and counts
- Validation and capacity errors
- find_first_intersector: nearest hit, miss, tie-break, zero direction
- Capability dispatch: normal, material (checkerboard), light direction
"""

import pytest
import taichi as ti


def _query(origin, direction):
    """Run find_first_intersector in a kernel and return (hit, t, object_id)."""
    from src.raycaster.scene.intersection import find_first_intersector, vec3

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())
    object_id = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel(o: vec3, d: vec3):
        rec = find_first_intersector(o, d)
        hit[None] = rec.hit
        t_val[None] = rec.t
        object_id[None] = rec.object_id

    test_kernel(vec3(*origin), vec3(*direction))
    return hit[None], t_val[None], object_id[None]


class TestSceneStorage:
    """Tests for the Python-side object API."""

    def test_object_ids_follow_insertion_order(self):
        from src.raycaster.scene.intersection import (
            add_sphere,
            add_tiled_plane,
            get_object_count,
            get_plane_count,
            get_sphere_count,
        )

        assert add_sphere((0.0, 0.0, 0.0), 1.0) == 0
        assert add_tiled_plane((0.0, 0.0, 0.0), (0.0, 1.0, 0.0)) == 1
        assert add_sphere((3.0, 0.0, 0.0), 1.0) == 2
        assert get_object_count() == 3
        assert get_sphere_count() == 2
        assert get_plane_count() == 1

    def test_clear_scene(self):
        from src.raycaster.scene.intersection import add_sphere, clear_scene, get_object_count

        add_sphere((0.0, 0.0, 0.0), 1.0)
        clear_scene()
        assert get_object_count() == 0
        assert add_sphere((0.0, 0.0, 0.0), 1.0) == 0

    @pytest.mark.parametrize("radius", [0.0, -1.0])
    def test_non_positive_radius(self, radius):
        from src.raycaster.scene.intersection import add_sphere

        with pytest.raises(ValueError, match="radius"):
            add_sphere((0.0, 0.0, 0.0), radius)

    def test_zero_plane_normal(self):
        from src.raycaster.scene.intersection import add_tiled_plane

        with pytest.raises(ValueError, match="normal"):
            add_tiled_plane((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))

    def test_non_positive_tile_size(self):
        from src.raycaster.scene.intersection import add_tiled_plane

        with pytest.raises(ValueError, match="Tile size"):
            add_tiled_plane((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), tile_size=0.0)

    def test_plane_normal_is_normalized(self):
        from src.raycaster.scene.intersection import add_tiled_plane, plane_normals

        add_tiled_plane((0.0, 0.0, 0.0), (0.0, 3.0, 4.0))
        n = plane_normals[0]
        assert n[1] == pytest.approx(0.6)
        assert n[2] == pytest.approx(0.8)

    def test_capacity_exceeded(self):
        from src.raycaster.scene.intersection import MAX_OBJECTS, add_sphere

        for i in range(MAX_OBJECTS):
            add_sphere((float(i), 0.0, 0.0), 0.1)
        with pytest.raises(RuntimeError, match="Maximum number of objects"):
            add_sphere((0.0, 0.0, 0.0), 0.1)


class TestFindFirstIntersector:
    """Tests for the nearest-hit scene query."""

    def test_empty_scene_misses(self):
        from src.raycaster.scene.intersection import T_MAX

        hit, t, object_id = _query((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 0
        assert object_id == -1
        assert t == pytest.approx(T_MAX, rel=1e-6)

    def test_nearest_of_two_spheres(self):
        from src.raycaster.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, -10.0), 1.0)
        near_id = add_sphere((0.0, 0.0, -5.0), 1.0)

        hit, t, object_id = _query((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 1
        assert object_id == near_id
        assert t == pytest.approx(4.0, abs=1e-4)

    def test_sphere_in_front_of_plane(self):
        from src.raycaster.scene.intersection import add_sphere, add_tiled_plane

        plane_id = add_tiled_plane((0.0, 0.0, 0.0), (0.0, 1.0, 0.0))
        sphere_id = add_sphere((0.0, 2.0, 0.0), 1.0)

        _, t, object_id = _query((0.0, 5.0, 0.0), (0.0, -1.0, 0.0))
        assert object_id == sphere_id
        assert t == pytest.approx(2.0, abs=1e-4)

        _, t, object_id = _query((5.0, 5.0, 0.0), (0.0, -1.0, 0.0))
        assert object_id == plane_id
        assert t == pytest.approx(5.0, abs=1e-4)

    def test_tie_keeps_earliest_object(self):
        """Two identical spheres: the one inserted first wins."""
        from src.raycaster.scene.intersection import add_sphere

        first = add_sphere((0.0, 0.0, -5.0), 1.0)
        add_sphere((0.0, 0.0, -5.0), 1.0)

        _, _, object_id = _query((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert object_id == first

    def test_tie_between_plane_and_sphere(self):
        """A sphere touching the plane from above at the hit point."""
        from src.raycaster.scene.intersection import add_sphere, add_tiled_plane

        plane_id = add_tiled_plane((0.0, 0.0, -5.0), (0.0, 0.0, 1.0))
        add_sphere((0.0, 0.0, -6.0), 1.0)

        _, _, object_id = _query((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert object_id == plane_id

    def test_zero_direction_misses(self):
        from src.raycaster.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, 0.0), 100.0)
        hit, _, object_id = _query((0.0, 0.0, 500.0), (0.0, 0.0, 0.0))
        assert hit == 0
        assert object_id == -1

    def test_origin_inside_sphere_sees_next_object(self):
        from src.raycaster.scene.intersection import add_sphere, add_tiled_plane

        add_sphere((0.0, 0.0, 0.0), 2.0)
        plane_id = add_tiled_plane((0.0, -5.0, 0.0), (0.0, 1.0, 0.0))

        _, t, object_id = _query((0.0, 0.0, 0.0), (0.0, -1.0, 0.0))
        assert object_id == plane_id
        assert t == pytest.approx(5.0, abs=1e-4)


class TestCapabilities:
    """Tests for per-object normal, material, and light direction."""

    def test_checkerboard_material_selection(self):
        from src.raycaster.materials.surface import add_material
        from src.raycaster.scene.intersection import add_tiled_plane, object_material, vec3

        white = add_material(albedo=(0.9, 0.9, 0.9))
        black = add_material(albedo=(0.2, 0.2, 0.2))
        plane_id = add_tiled_plane((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), white, black)

        result = ti.field(dtype=ti.f32, shape=4)

        @ti.kernel
        def test_kernel(object_id: ti.i32):
            result[0] = object_material(object_id, vec3(0.5, 0.0, 0.5)).albedo.x
            result[1] = object_material(object_id, vec3(1.5, 0.0, 0.5)).albedo.x
            result[2] = object_material(object_id, vec3(-0.5, 0.0, -0.5)).albedo.x
            result[3] = object_material(object_id, vec3(-0.5, 0.0, 0.5)).albedo.x

        test_kernel(plane_id)
        assert result[0] == pytest.approx(0.9)
        assert result[1] == pytest.approx(0.2)
        assert result[2] == pytest.approx(0.9)
        assert result[3] == pytest.approx(0.2)

    def test_sphere_material_and_normal(self):
        from src.raycaster.materials.surface import add_material
        from src.raycaster.scene.intersection import (
            add_sphere,
            object_material,
            object_normal,
            vec3,
        )

        add_material(albedo=(0.1, 0.1, 0.1))
        red = add_material(albedo=(0.7, 0.1, 0.1))
        sphere_id = add_sphere((0.0, 2.0, 0.0), 2.0, material_id=red)

        albedo = ti.field(dtype=ti.math.vec3, shape=())
        normal = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel(object_id: ti.i32):
            point = vec3(2.0, 2.0, 0.0)
            albedo[None] = object_material(object_id, point).albedo
            normal[None] = object_normal(object_id, point)

        test_kernel(sphere_id)
        assert albedo[None][0] == pytest.approx(0.7)
        assert list(normal[None].to_numpy()) == pytest.approx([1.0, 0.0, 0.0], abs=1e-6)

    def test_light_directions(self):
        from src.raycaster.scene.intersection import (
            add_sphere,
            add_tiled_plane,
            object_light_direction,
            vec3,
        )

        sphere_id = add_sphere((0.0, 10.0, 0.0), 1.0)
        plane_id = add_tiled_plane((0.0, 0.0, 0.0), (0.0, 1.0, 0.0))

        to_sphere = ti.field(dtype=ti.math.vec3, shape=())
        to_plane = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel(s: ti.i32, p: ti.i32):
            point = vec3(0.0, 4.0, 0.0)
            to_sphere[None] = object_light_direction(s, point)
            to_plane[None] = object_light_direction(p, point)

        test_kernel(sphere_id, plane_id)
        assert list(to_sphere[None].to_numpy()) == pytest.approx([0.0, 6.0, 0.0], abs=1e-6)
        assert list(to_plane[None].to_numpy()) == pytest.approx([0.0, -1.0, 0.0], abs=1e-6)
