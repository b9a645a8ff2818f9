"""Unit tests for sphere intersection.

Tests cover:
- Ray hitting sphere from outside (front face)
- Ray missing sphere
- Ray starting inside sphere (back face)
- Interval bounds on accepted roots
- Face normal orientation
"""

import math

import taichi as ti


def _as_tuple(v):
    return (float(v[0]), float(v[1]), float(v[2]))


def _run_hit(origin, direction, center, radius, t_min=0.001, t_max=1000.0):
    """Intersect one ray with one sphere and return the record as a dict."""
    from weekend_raytracer.geometry.sphere import Sphere, hit_sphere, vec3

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())
    point = ti.field(dtype=ti.math.vec3, shape=())
    normal = ti.field(dtype=ti.math.vec3, shape=())
    front_face = ti.field(dtype=ti.i32, shape=())
    material_id = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel(
        ox: ti.f32, oy: ti.f32, oz: ti.f32,
        dx: ti.f32, dy: ti.f32, dz: ti.f32,
        cx: ti.f32, cy: ti.f32, cz: ti.f32,
        r: ti.f32, lo: ti.f32, hi: ti.f32,
    ):
        sphere = Sphere(center=vec3(cx, cy, cz), radius=r)
        record = hit_sphere(vec3(ox, oy, oz), vec3(dx, dy, dz), sphere, lo, hi)
        hit[None] = record.hit
        t_val[None] = record.t
        point[None] = record.point
        normal[None] = record.normal
        front_face[None] = record.front_face
        material_id[None] = record.material_id

    test_kernel(*origin, *direction, *center, radius, t_min, t_max)
    return {
        "hit": hit[None],
        "t": t_val[None],
        "point": _as_tuple(point[None]),
        "normal": _as_tuple(normal[None]),
        "front_face": front_face[None],
        "material_id": material_id[None],
    }


class TestSphereBasics:
    """Tests for Sphere dataclass and basic operations."""

    def test_miss_record(self):
        from weekend_raytracer.geometry.sphere import make_miss_record

        hit = ti.field(dtype=ti.i32, shape=())
        material_id = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            record = make_miss_record()
            hit[None] = record.hit
            material_id[None] = record.material_id

        test_kernel()
        assert hit[None] == 0
        assert material_id[None] == -1


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    def test_direct_hit_from_outside(self):
        rec = _run_hit((0.0, 0.0, 5.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0)
        assert rec["hit"] == 1
        assert abs(rec["t"] - 4.0) < 1e-5
        assert abs(rec["point"][2] - 1.0) < 1e-5
        assert abs(rec["normal"][2] - 1.0) < 1e-5
        assert rec["front_face"] == 1

    def test_hit_point_lies_on_surface(self):
        center = (1.0, -2.0, -4.0)
        radius = 1.5
        rec = _run_hit((0.0, 0.0, 0.0), center, center, radius)
        assert rec["hit"] == 1
        dist = math.dist(rec["point"], center)
        assert abs(dist - radius) < 1e-4

    def test_unnormalized_direction(self):
        """t is measured in units of the direction vector."""
        rec = _run_hit((0.0, 0.0, 5.0), (0.0, 0.0, -2.0), (0.0, 0.0, 0.0), 1.0)
        assert rec["hit"] == 1
        assert abs(rec["t"] - 2.0) < 1e-5

    def test_miss(self):
        rec = _run_hit((0.0, 5.0, 5.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0)
        assert rec["hit"] == 0
        assert rec["material_id"] == -1

    def test_sphere_behind_ray(self):
        rec = _run_hit((0.0, 0.0, 5.0), (0.0, 0.0, 1.0), (0.0, 0.0, 0.0), 1.0)
        assert rec["hit"] == 0

    def test_inside_sphere_hits_back_face(self):
        rec = _run_hit((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0)
        assert rec["hit"] == 1
        assert abs(rec["t"] - 1.0) < 1e-5
        assert rec["front_face"] == 0
        # Normal is flipped to face back toward the ray origin
        assert abs(rec["normal"][2] - 1.0) < 1e-5

    def test_near_root_outside_interval_uses_far_root(self):
        rec = _run_hit(
            (0.0, 0.0, 5.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0, t_min=4.5
        )
        assert rec["hit"] == 1
        assert abs(rec["t"] - 6.0) < 1e-5
        assert rec["front_face"] == 0

    def test_roots_beyond_t_max_miss(self):
        rec = _run_hit(
            (0.0, 0.0, 5.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0, t_max=3.0
        )
        assert rec["hit"] == 0

    def test_bounds_are_exclusive(self):
        rec = _run_hit(
            (0.0, 0.0, 5.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0, t_min=4.0, t_max=6.0
        )
        assert rec["hit"] == 0

    def test_material_id_left_for_caller(self):
        rec = _run_hit((0.0, 0.0, 5.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0)
        assert rec["material_id"] == -1


class TestFaceNormal:
    """Tests for set_face_normal orientation."""

    def test_normal_always_opposes_ray(self):
        from weekend_raytracer.geometry.sphere import set_face_normal, vec3

        normals = ti.Vector.field(3, dtype=ti.f32, shape=2)
        faces = ti.field(dtype=ti.i32, shape=2)

        @ti.kernel
        def test_kernel():
            outward = vec3(0.0, 1.0, 0.0)
            n0, f0 = set_face_normal(vec3(0.0, -1.0, 0.0), outward)
            n1, f1 = set_face_normal(vec3(0.0, 1.0, 0.0), outward)
            normals[0] = n0
            faces[0] = f0
            normals[1] = n1
            faces[1] = f1

        test_kernel()
        assert faces[0] == 1
        assert abs(normals[0][1] - 1.0) < 1e-6
        assert faces[1] == 0
        assert abs(normals[1][1] + 1.0) < 1e-6
