"""Geometry module for the sphere primitive and hit records.

Components:
    sphere: Sphere primitive, HitRecord and ray-sphere intersection

Intersection routines are Taichi functions (@ti.func) so they inline into
the render kernel. Every primitive reports hits through the same HitRecord:

    record = hit_sphere(ray_origin, ray_direction, sphere, t_min, t_max)
"""

from .sphere import (
    HitRecord,
    Sphere,
    hit_sphere,
    make_miss_record,
    set_face_normal,
)

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "make_miss_record",
    "set_face_normal",
]
