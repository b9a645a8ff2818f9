"""Image export utilities for rendered frames.

Frames produced by the renderer are flat RGBA byte buffers with row 0 at
the top of the image and alpha fixed at 255. Gamma correction already
happened in the kernel, so export is a straight byte copy.

Supported formats:
    - PNG (8-bit sRGB via Pillow)

Example:
    >>> from weekend_raytracer.core.renderer import RayTracer
    >>> from weekend_raytracer.preview.export import save_png
    >>>
    >>> tracer = RayTracer(320, 180, samples_per_pixel=10)
    >>> frame = tracer.render()
    >>> save_png(frame, 320, 180, "output.png")
"""

import logging
from os import PathLike

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)


def frame_to_rgba(
    frame: npt.NDArray[np.uint8],
    width: int,
    height: int,
) -> npt.NDArray[np.uint8]:
    """View a frame buffer as an (H, W, 4) RGBA image.

    Raises:
        ValueError: If the buffer is not uint8 or does not hold
            width * height * 4 bytes.
    """
    if frame.dtype != np.uint8:
        raise ValueError(f"Frame buffer must be uint8, got {frame.dtype}")
    if frame.size != width * height * 4:
        raise ValueError(
            f"Frame buffer has {frame.size} bytes, expected {width * height * 4} "
            f"for {width}x{height} RGBA"
        )
    return frame.reshape(height, width, 4)


def frame_to_rgb(
    frame: npt.NDArray[np.uint8],
    width: int,
    height: int,
) -> npt.NDArray[np.uint8]:
    """View a frame buffer as an (H, W, 3) RGB image, dropping alpha."""
    return frame_to_rgba(frame, width, height)[..., :3]


def frame_to_image(
    frame: npt.NDArray[np.uint8],
    width: int,
    height: int,
) -> PILImage.Image:
    """Convert a frame buffer to an RGB Pillow image."""
    rgb = np.ascontiguousarray(frame_to_rgb(frame, width, height))
    return PILImage.fromarray(rgb)


def save_png(
    frame: npt.NDArray[np.uint8],
    width: int,
    height: int,
    filepath: str | PathLike[str],
) -> None:
    """Save a frame buffer as an 8-bit RGB PNG file.

    Args:
        frame: RGBA frame buffer of width * height * 4 bytes.
        width: Image width in pixels.
        height: Image height in pixels.
        filepath: Output file path (should end in .png).
    """
    frame_to_image(frame, width, height).save(filepath, format="PNG")
    logger.info("Saved %dx%d image to %s", width, height, filepath)
