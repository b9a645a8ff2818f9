"""Tests for RenderConfig and the RayTracer front end.

Tests cover:
- Configuration defaults and validation
- Scene and camera construction
- Frame allocation and end-to-end rendering of the random scene
"""

import logging

import numpy as np
import pytest


class TestRenderConfig:
    """Tests for the RenderConfig dataclass."""

    def test_defaults(self):
        from weekend_raytracer.core.renderer import RenderConfig

        config = RenderConfig()
        assert config.width == 1280
        assert config.height == 720
        assert config.samples_per_pixel == 100
        assert config.max_depth == 50
        assert config.seed is None
        assert config.frame_size == 1280 * 720 * 4

    def test_zero_depth_allowed(self):
        from weekend_raytracer.core.renderer import RenderConfig

        assert RenderConfig(max_depth=0).max_depth == 0

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"width": 0},
            {"height": -5},
            {"samples_per_pixel": 0},
            {"max_depth": -1},
        ],
    )
    def test_invalid_values_rejected(self, kwargs):
        from weekend_raytracer.core.renderer import RenderConfig

        with pytest.raises(ValueError):
            RenderConfig(**kwargs)


class TestRayTracer:
    """Tests for RayTracer construction and rendering."""

    def test_construction_builds_scene(self):
        from weekend_raytracer.camera.thin_lens import get_camera_info
        from weekend_raytracer.core.renderer import RayTracer
        from weekend_raytracer.scene.intersection import get_sphere_count

        tracer = RayTracer(16, 9, samples_per_pixel=1, max_depth=5, seed=11)

        assert tracer.width == 16
        assert tracer.height == 9
        assert tracer.samples_per_pixel == 1
        assert tracer.max_depth == 5
        assert tracer.scene.get_sphere_count() == get_sphere_count() > 4
        assert tracer.camera.aspect_ratio == pytest.approx(16 / 9)
        # setup_camera ran: origin is the default lookfrom
        assert get_camera_info()["origin"] == pytest.approx((13.0, 2.0, 3.0))

    def test_invalid_settings_rejected(self):
        from weekend_raytracer.core.renderer import RayTracer

        with pytest.raises(ValueError):
            RayTracer(0, 10)

    def test_from_config(self):
        from weekend_raytracer.core.renderer import RayTracer, RenderConfig

        config = RenderConfig(width=8, height=4, samples_per_pixel=2, max_depth=3, seed=5)
        tracer = RayTracer.from_config(config)

        assert tracer.config == config
        assert "width=8" in repr(tracer)

    def test_new_frame(self):
        from weekend_raytracer.core.renderer import RayTracer

        tracer = RayTracer(8, 4, samples_per_pixel=1, max_depth=1, seed=0)
        frame = tracer.new_frame()

        assert frame.shape == (8 * 4 * 4,)
        assert frame.dtype == np.uint8
        assert not frame.any()

    def test_render_random_scene(self, caplog):
        from weekend_raytracer.core.renderer import RayTracer

        tracer = RayTracer(16, 9, samples_per_pixel=2, max_depth=5, seed=42)
        with caplog.at_level(logging.INFO, logger="weekend_raytracer.core.renderer"):
            frame = tracer.render()

        pixels = frame.reshape(9, 16, 4)
        assert (pixels[..., 3] == 255).all()
        assert (pixels[..., :3] <= 254).all()
        # The ground and spheres make the image far from uniform
        assert pixels[..., :3].std() > 0.0
        assert "Frame rendered" in caplog.text

    def test_render_into_caller_buffer(self):
        from weekend_raytracer.core.renderer import RayTracer

        tracer = RayTracer(4, 2, samples_per_pixel=1, max_depth=2, seed=1)
        buffer = np.zeros((2, 4, 4), dtype=np.uint8)
        result = tracer.render(buffer)

        assert result is buffer
        assert (buffer[..., 3] == 255).all()

    def test_render_rejects_wrong_buffer(self):
        from weekend_raytracer.core.renderer import RayTracer

        tracer = RayTracer(4, 2, samples_per_pixel=1, max_depth=2, seed=1)
        with pytest.raises(ValueError):
            tracer.render(np.zeros(10, dtype=np.uint8))
