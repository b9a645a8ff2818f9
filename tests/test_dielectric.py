"""Unit tests for the dielectric material.

Tests cover:
- Refraction ratio selection by face
- Total internal reflection detection and handling
- Schlick reflectance probability
- White attenuation and unconditional scattering
- Material registry and IOR validation
"""

import math

import numpy as np
import pytest
import taichi as ti

N_SAMPLES = 4000


class TestRefractionRatio:
    """Tests for refraction_ratio."""

    def test_entering_and_leaving(self):
        from weekend_raytracer.materials.dielectric import refraction_ratio

        results = ti.field(dtype=ti.f32, shape=2)

        @ti.kernel
        def test_kernel():
            results[0] = refraction_ratio(1.5, 1)
            results[1] = refraction_ratio(1.5, 0)

        test_kernel()
        assert abs(results[0] - 1.0 / 1.5) < 1e-6
        assert abs(results[1] - 1.5) < 1e-6


class TestTotalInternalReflection:
    """Tests for cannot_refract and the reflect-only path."""

    def test_inside_beyond_critical_angle(self):
        from weekend_raytracer.materials.dielectric import cannot_refract, normalize, vec3

        result = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            incident = normalize(vec3(1.0, 0.3, 0.0))
            result[None] = cannot_refract(1.5, incident, vec3(0.0, -1.0, 0.0), 0)

        test_kernel()
        assert result[None] == 1

    def test_inside_below_critical_angle(self):
        from weekend_raytracer.materials.dielectric import cannot_refract, vec3

        result = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = cannot_refract(1.5, vec3(0.0, 1.0, 0.0), vec3(0.0, -1.0, 0.0), 0)

        test_kernel()
        assert result[None] == 0

    def test_never_from_outside(self):
        """Entering a denser medium always admits a refracted ray."""
        from weekend_raytracer.materials.dielectric import cannot_refract, normalize, vec3

        result = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            incident = normalize(vec3(1.0, -0.01, 0.0))
            result[None] = cannot_refract(1.5, incident, vec3(0.0, 1.0, 0.0), 1)

        test_kernel()
        assert result[None] == 0

    def test_tir_scatter_always_reflects(self):
        from weekend_raytracer.materials.dielectric import normalize, scatter_dielectric, vec3

        directions = ti.Vector.field(3, dtype=ti.f32, shape=N_SAMPLES)

        @ti.kernel
        def test_kernel():
            for i in range(N_SAMPLES):
                incident = normalize(vec3(1.0, 0.3, 0.0))
                d, _, _ = scatter_dielectric(1.5, incident, vec3(0.0, -1.0, 0.0), 0)
                directions[i] = d

        test_kernel()
        dirs = directions.to_numpy()
        expected = np.array([1.0, -0.3, 0.0]) / math.sqrt(1.09)
        np.testing.assert_allclose(dirs, np.tile(expected, (N_SAMPLES, 1)), atol=1e-5)


class TestScatter:
    """Tests for scatter_dielectric outcomes."""

    def test_near_normal_entry_mostly_refracts(self):
        from weekend_raytracer.materials.dielectric import scatter_dielectric, vec3

        directions = ti.Vector.field(3, dtype=ti.f32, shape=N_SAMPLES)

        @ti.kernel
        def test_kernel():
            for i in range(N_SAMPLES):
                d, _, _ = scatter_dielectric(
                    1.5, vec3(0.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0), 1
                )
                directions[i] = d

        test_kernel()
        dirs = directions.to_numpy()
        refracted = dirs[:, 1] < 0.0
        # Schlick reflectance at normal incidence is 0.04
        fraction = refracted.mean()
        assert 0.93 < fraction < 0.99
        np.testing.assert_allclose(dirs[refracted][:, 1], -1.0, atol=1e-5)
        np.testing.assert_allclose(dirs[~refracted][:, 1], 1.0, atol=1e-5)

    def test_attenuation_white_and_always_scatters(self):
        from weekend_raytracer.materials.dielectric import normalize, scatter_dielectric, vec3

        attenuations = ti.Vector.field(3, dtype=ti.f32, shape=N_SAMPLES)
        scattered = ti.field(dtype=ti.i32, shape=N_SAMPLES)

        @ti.kernel
        def test_kernel():
            for i in range(N_SAMPLES):
                _, a, s = scatter_dielectric(
                    1.5, normalize(vec3(1.0, -1.0, 0.5)), vec3(0.0, 1.0, 0.0), 1
                )
                attenuations[i] = a
                scattered[i] = s

        test_kernel()
        assert (scattered.to_numpy() == 1).all()
        np.testing.assert_allclose(attenuations.to_numpy(), 1.0)

    def test_scattered_direction_is_unit(self):
        from weekend_raytracer.materials.dielectric import normalize, scatter_dielectric, vec3

        directions = ti.Vector.field(3, dtype=ti.f32, shape=N_SAMPLES)

        @ti.kernel
        def test_kernel():
            for i in range(N_SAMPLES):
                d, _, _ = scatter_dielectric(
                    1.5, vec3(2.0, -1.0, 0.0), normalize(vec3(0.0, 1.0, 0.0)), 1
                )
                directions[i] = d

        test_kernel()
        lengths = np.linalg.norm(directions.to_numpy(), axis=1)
        np.testing.assert_allclose(lengths, 1.0, atol=1e-5)

    def test_ior_one_passes_straight_through(self):
        from weekend_raytracer.materials.dielectric import normalize, scatter_dielectric, vec3

        directions = ti.Vector.field(3, dtype=ti.f32, shape=N_SAMPLES)

        @ti.kernel
        def test_kernel():
            for i in range(N_SAMPLES):
                d, _, _ = scatter_dielectric(
                    1.0, normalize(vec3(1.0, -2.0, 0.0)), vec3(0.0, 1.0, 0.0), 1
                )
                directions[i] = d

        test_kernel()
        expected = np.array([1.0, -2.0, 0.0]) / math.sqrt(5.0)
        straight = np.all(np.abs(directions.to_numpy() - expected) < 1e-5, axis=1)
        # Schlick reflectance is ~1e-5 here, so nearly every sample refracts
        assert straight.mean() > 0.99


class TestFresnelReflectance:
    """Tests for fresnel_reflectance."""

    def test_normal_incidence(self):
        from weekend_raytracer.materials.dielectric import fresnel_reflectance, vec3

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = fresnel_reflectance(
                1.5, vec3(0.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0), 1
            )

        test_kernel()
        assert abs(result[None] - 0.04) < 1e-5

    def test_increases_toward_grazing(self):
        from weekend_raytracer.materials.dielectric import (
            fresnel_reflectance,
            normalize,
            vec3,
        )

        results = ti.field(dtype=ti.f32, shape=3)

        @ti.kernel
        def test_kernel():
            n = vec3(0.0, 1.0, 0.0)
            results[0] = fresnel_reflectance(1.5, normalize(vec3(0.2, -1.0, 0.0)), n, 1)
            results[1] = fresnel_reflectance(1.5, normalize(vec3(1.0, -1.0, 0.0)), n, 1)
            results[2] = fresnel_reflectance(1.5, normalize(vec3(5.0, -1.0, 0.0)), n, 1)

        test_kernel()
        assert results[0] < results[1] < results[2]


class TestMaterialRegistry:
    """Tests for dielectric material storage."""

    def test_default_ior_is_glass(self):
        from weekend_raytracer.materials.dielectric import (
            add_dielectric_material,
            dielectric_iors,
            get_dielectric_material_count,
        )

        idx = add_dielectric_material()
        assert get_dielectric_material_count() == 1
        assert dielectric_iors[idx] == pytest.approx(1.5)

    @pytest.mark.parametrize("ior", [0.0, -1.5])
    def test_non_positive_ior_rejected(self, ior):
        from weekend_raytracer.materials.dielectric import add_dielectric_material

        with pytest.raises(ValueError, match="must be positive"):
            add_dielectric_material(ior)

    def test_ior_below_one_allowed(self):
        from weekend_raytracer.materials.dielectric import add_dielectric_material

        assert add_dielectric_material(1.0 / 1.33) == 0

    def test_scatter_by_id(self):
        from weekend_raytracer.materials.dielectric import (
            add_dielectric_material,
            get_dielectric_ior,
            scatter_dielectric_by_id,
            vec3,
        )

        add_dielectric_material(1.33)
        idx = add_dielectric_material(2.4)
        ior = ti.field(dtype=ti.f32, shape=())
        did_scatter = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel(mat_idx: ti.i32):
            ior[None] = get_dielectric_ior(mat_idx)
            _, _, s = scatter_dielectric_by_id(
                mat_idx, vec3(0.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0), 1
            )
            did_scatter[None] = s

        test_kernel(idx)
        assert abs(ior[None] - 2.4) < 1e-6
        assert did_scatter[None] == 1
