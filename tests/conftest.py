"""Pytest configuration for raytracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Fields are allocated when the weekend_raytracer modules are first
    imported, so every test imports them inside the test body, after this
    fixture has run.
    """
    ti.init(arch=ti.cpu, random_seed=42, cpu_max_num_threads=1)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear spheres, materials and material tracking around each test."""
    from weekend_raytracer.materials.dielectric import clear_dielectric_materials
    from weekend_raytracer.materials.lambertian import clear_lambertian_materials
    from weekend_raytracer.materials.metal import clear_metal_materials
    from weekend_raytracer.scene.intersection import clear_scene
    from weekend_raytracer.scene.manager import _clear_material_tracking

    def _clear_all():
        clear_scene()
        clear_lambertian_materials()
        clear_metal_materials()
        clear_dielectric_materials()
        _clear_material_tracking()

    _clear_all()
    yield
    _clear_all()
