"""Unit tests for the tiled plane primitive.

Tests cover:
- Ray-plane intersection (front, back, parallel, behind)
- Checkerboard tile indices and parity, including negative coordinates
- Light direction toward the plane from either side
"""

import pytest
import taichi as ti


def _hit(origin, direction, point=(0.0, 0.0, 0.0), normal=(0.0, 1.0, 0.0)):
    """Run hit_plane in a kernel and return (hit, t)."""
    from src.raycaster.geometry.plane import TiledPlane, hit_plane, vec3

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())

    @ti.kernel
    def test_kernel(o: vec3, d: vec3, p: vec3, n: vec3):
        record = hit_plane(o, d, TiledPlane(point=p, normal=n, tile_size=1.0))
        hit[None] = record.hit
        t_val[None] = record.t

    test_kernel(vec3(*origin), vec3(*direction), vec3(*point), vec3(*normal))
    return hit[None], t_val[None]


def _parity(px, py, pz, tile_size=1.0):
    """Tile parity of a point on the ground plane y=0."""
    from src.raycaster.geometry.plane import TiledPlane, plane_tile_parity, vec3

    result = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel(p: vec3, size: ti.f32):
        plane = TiledPlane(point=vec3(0.0, 0.0, 0.0), normal=vec3(0.0, 1.0, 0.0), tile_size=size)
        result[None] = plane_tile_parity(plane, p)

    test_kernel(vec3(px, py, pz), tile_size)
    return result[None]


class TestPlaneIntersection:
    """Tests for ray-plane intersection."""

    def test_straight_down(self):
        hit, t = _hit((0.0, 5.0, 0.0), (0.0, -1.0, 0.0))
        assert hit == 1
        assert t == pytest.approx(5.0, abs=1e-5)

    def test_oblique_ray_distance(self):
        """t is the distance along the normalized direction."""
        hit, t = _hit((0.0, 3.0, 0.0), (4.0, -3.0, 0.0))
        assert hit == 1
        assert t == pytest.approx(5.0, abs=1e-4)

    def test_hit_from_below(self):
        hit, t = _hit((0.0, -2.0, 0.0), (0.0, 1.0, 0.0))
        assert hit == 1
        assert t == pytest.approx(2.0, abs=1e-5)

    def test_parallel_ray_misses(self):
        hit, _ = _hit((0.0, 1.0, 0.0), (1.0, 0.0, 0.0))
        assert hit == 0

    def test_plane_behind_ray_misses(self):
        hit, _ = _hit((0.0, 1.0, 0.0), (0.0, 1.0, 0.0))
        assert hit == 0

    def test_origin_on_plane_misses(self):
        hit, _ = _hit((0.0, 0.0, 0.0), (0.0, -1.0, 0.0))
        assert hit == 0

    def test_zero_direction_misses(self):
        hit, _ = _hit((0.0, 1.0, 0.0), (0.0, 0.0, 0.0))
        assert hit == 0

    def test_offset_tilted_plane(self):
        """Plane x = 2 with normal (-1, 0, 0)."""
        hit, t = _hit((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), point=(2.0, 7.0, 7.0), normal=(-1.0, 0.0, 0.0))
        assert hit == 1
        assert t == pytest.approx(2.0, abs=1e-5)


class TestTileParity:
    """Tests for the checkerboard pattern."""

    def test_origin_tile_is_even(self):
        assert _parity(0.5, 0.0, 0.5) == 0

    def test_neighbors_alternate(self):
        assert _parity(1.5, 0.0, 0.5) == 1
        assert _parity(0.5, 0.0, 1.5) == 1
        assert _parity(1.5, 0.0, 1.5) == 0

    def test_negative_coordinates_floor(self):
        """(-0.5, -0.5) lies in tile (-1, -1), which is even."""
        assert _parity(-0.5, 0.0, -0.5) == 0
        assert _parity(-0.5, 0.0, 0.5) == 1
        assert _parity(0.5, 0.0, -0.5) == 1

    def test_tiles_square_across_origin(self):
        """Points just either side of an axis are in different tiles."""
        assert _parity(0.25, 0.0, 0.01) != _parity(0.25, 0.0, -0.01)
        assert _parity(0.01, 0.0, 0.25) != _parity(-0.01, 0.0, 0.25)

    def test_tile_size_scales_pattern(self):
        assert _parity(1.5, 0.0, 0.5, tile_size=2.0) == 0
        assert _parity(2.5, 0.0, 0.5, tile_size=2.0) == 1

    def test_tile_coords(self):
        from src.raycaster.geometry.plane import TiledPlane, plane_tile_coords, vec3

        result = ti.field(dtype=ti.i32, shape=2)

        @ti.kernel
        def test_kernel():
            plane = TiledPlane(point=vec3(0.0, 0.0, 0.0), normal=vec3(0.0, 1.0, 0.0), tile_size=1.0)
            i, j = plane_tile_coords(plane, vec3(-2.5, 0.0, 3.5))
            result[0] = i
            result[1] = j

        test_kernel()
        # Tangent axis is z, bitangent axis is x
        assert result[0] == 3
        assert result[1] == -3


class TestPlaneCapabilities:
    """Tests for plane normal, light direction, and make_plane."""

    def test_normal_is_constant(self):
        from src.raycaster.geometry.plane import TiledPlane, plane_normal, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            plane = TiledPlane(point=vec3(0.0, 0.0, 0.0), normal=vec3(0.0, 1.0, 0.0), tile_size=1.0)
            result[None] = plane_normal(plane, vec3(12.0, 0.0, -7.0))

        test_kernel()
        assert result[None][1] == pytest.approx(1.0)

    def test_light_direction_from_above_and_below(self):
        from src.raycaster.geometry.plane import TiledPlane, plane_light_direction, vec3

        above = ti.field(dtype=ti.math.vec3, shape=())
        below = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            plane = TiledPlane(point=vec3(0.0, 0.0, 0.0), normal=vec3(0.0, 1.0, 0.0), tile_size=1.0)
            above[None] = plane_light_direction(plane, vec3(1.0, 2.0, 3.0))
            below[None] = plane_light_direction(plane, vec3(1.0, -2.0, 3.0))

        test_kernel()
        assert above[None][1] == pytest.approx(-1.0)
        assert below[None][1] == pytest.approx(1.0)

    def test_make_plane_normalizes(self):
        from src.raycaster.geometry.plane import make_plane, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = make_plane(vec3(0.0, 0.0, 0.0), vec3(0.0, 5.0, 0.0), 1.0).normal

        test_kernel()
        assert result[None][1] == pytest.approx(1.0)
