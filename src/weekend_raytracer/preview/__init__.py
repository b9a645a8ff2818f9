"""Preview module for output and visualization.

Components:
    display: Matplotlib window showing a rendered frame
    export: Frame buffer views and PNG export via Pillow

Frames are already gamma corrected by the renderer, so both paths only
reinterpret the RGBA bytes.

Example:
    >>> from weekend_raytracer.preview import save_png, show_frame
    >>> save_png(frame, 320, 180, "output.png")
    >>> show_frame(frame, 320, 180)
"""

from weekend_raytracer.preview.display import show_frame
from weekend_raytracer.preview.export import (
    frame_to_image,
    frame_to_rgb,
    frame_to_rgba,
    save_png,
)

__all__ = [
    "show_frame",
    "frame_to_rgb",
    "frame_to_rgba",
    "frame_to_image",
    "save_png",
]
