"""Ray tracer front end.

The RayTracer owns an image size and sample settings, builds the random
sphere field scene and camera on construction, and renders complete frames
into RGBA byte buffers.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, cpu_max_num_threads=1)
    >>> from weekend_raytracer.core.renderer import RayTracer
    >>>
    >>> tracer = RayTracer(320, 180, samples_per_pixel=10, seed=7)
    >>> frame = tracer.render()
    >>> frame.shape
    (230400,)
"""

import logging
import time
from dataclasses import asdict, dataclass

import numpy as np
import numpy.typing as npt

from weekend_raytracer.camera.thin_lens import ThinLensCamera, setup_camera
from weekend_raytracer.core.integrator import allocate_frame, render_frame
from weekend_raytracer.scene.manager import SceneManager
from weekend_raytracer.scene.random_scene import create_random_scene

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 1280
DEFAULT_HEIGHT = 720
DEFAULT_SAMPLES_PER_PIXEL = 100
DEFAULT_MAX_DEPTH = 50


@dataclass
class RenderConfig:
    """Settings for a single render.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        samples_per_pixel: Jittered samples averaged per pixel.
        max_depth: Maximum bounces per path.
        seed: Seed for the scene layout, or None for fresh entropy.
    """

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    samples_per_pixel: int = DEFAULT_SAMPLES_PER_PIXEL
    max_depth: int = DEFAULT_MAX_DEPTH
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image size must be positive, got {self.width}x{self.height}")
        if self.samples_per_pixel <= 0:
            raise ValueError(
                f"samples_per_pixel must be positive, got {self.samples_per_pixel}"
            )
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")

    @property
    def frame_size(self) -> int:
        """Bytes in one RGBA frame."""
        return self.width * self.height * 4


class RayTracer:
    """Renders the random sphere field scene.

    Constructing a RayTracer replaces whatever scene and camera were loaded
    before, since both live in module-level Taichi fields.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        samples_per_pixel: Jittered samples averaged per pixel.
        max_depth: Maximum bounces per path.
    """

    def __init__(
        self,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
        samples_per_pixel: int = DEFAULT_SAMPLES_PER_PIXEL,
        max_depth: int = DEFAULT_MAX_DEPTH,
        seed: int | None = None,
    ) -> None:
        """Build the scene and camera for the given image size.

        Raises:
            ValueError: If any setting is out of range.
        """
        self._config = RenderConfig(
            width=width,
            height=height,
            samples_per_pixel=samples_per_pixel,
            max_depth=max_depth,
            seed=seed,
        )
        self._scene, self._camera = create_random_scene(width, height, seed)
        setup_camera(self._camera)

    @classmethod
    def from_config(cls, config: RenderConfig) -> "RayTracer":
        return cls(**asdict(config))

    @property
    def config(self) -> RenderConfig:
        return self._config

    @property
    def width(self) -> int:
        return self._config.width

    @property
    def height(self) -> int:
        return self._config.height

    @property
    def samples_per_pixel(self) -> int:
        return self._config.samples_per_pixel

    @property
    def max_depth(self) -> int:
        return self._config.max_depth

    @property
    def scene(self) -> SceneManager:
        return self._scene

    @property
    def camera(self) -> ThinLensCamera:
        return self._camera

    def new_frame(self) -> npt.NDArray[np.uint8]:
        """Allocate a zeroed RGBA buffer sized for this tracer."""
        return allocate_frame(self.width, self.height)

    def render(self, frame: npt.NDArray[np.uint8] | None = None) -> npt.NDArray[np.uint8]:
        """Render one complete frame.

        Args:
            frame: Optional caller-owned buffer of width * height * 4 bytes.
                A new flat buffer is allocated when omitted.

        Returns:
            The filled frame buffer (the same object when one was passed).

        Raises:
            ValueError: If the buffer does not match the image size.
        """
        if frame is None:
            frame = self.new_frame()

        logger.info(
            "Rendering %dx%d at %d spp, max depth %d",
            self.width,
            self.height,
            self.samples_per_pixel,
            self.max_depth,
        )
        start = time.perf_counter()
        render_frame(frame, self.width, self.height, self.samples_per_pixel, self.max_depth)
        elapsed = time.perf_counter() - start
        logger.info("Frame rendered in %.2fs", elapsed)

        return frame

    def __repr__(self) -> str:
        return (
            f"RayTracer(width={self.width}, height={self.height}, "
            f"samples_per_pixel={self.samples_per_pixel}, max_depth={self.max_depth})"
        )
