"""Matplotlib-based preview display for rendered frames.

Example:
    >>> from weekend_raytracer.core.renderer import RayTracer
    >>> from weekend_raytracer.preview.display import show_frame
    >>>
    >>> tracer = RayTracer(320, 180, samples_per_pixel=10)
    >>> show_frame(tracer.render(), 320, 180)
"""

import numpy as np
import numpy.typing as npt

from weekend_raytracer.preview.export import frame_to_rgb

DEFAULT_TITLE = "Ray Tracing in One Weekend"


def show_frame(
    frame: npt.NDArray[np.uint8],
    width: int,
    height: int,
    *,
    title: str | None = None,
    dpi: float = 100.0,
    block: bool = True,
) -> None:
    """Display a rendered frame in a Matplotlib window.

    The figure is sized so that one image pixel maps to one screen pixel
    at the given dpi.

    Args:
        frame: RGBA frame buffer of width * height * 4 bytes.
        width: Image width in pixels.
        height: Image height in pixels.
        title: Window title (default DEFAULT_TITLE).
        dpi: Figure resolution in dots per inch.
        block: Whether to block execution until the window is closed.
    """
    import matplotlib.pyplot as plt

    rgb = frame_to_rgb(frame, width, height)

    fig = plt.figure(figsize=(width / dpi, height / dpi), dpi=dpi)
    ax = fig.add_axes((0.0, 0.0, 1.0, 1.0))
    ax.imshow(rgb, interpolation="nearest")
    ax.axis("off")

    if fig.canvas.manager is not None:
        fig.canvas.manager.set_window_title(title or DEFAULT_TITLE)

    plt.show(block=block)
