"""Recursive ray colour integrator and frame buffer writer.

This module implements the rendering kernel: for every pixel it averages
jittered camera samples, each traced through the scene by ray_color, then
gamma-corrects the average and writes it as RGBA bytes into a caller-owned
frame buffer.

ray_color follows a single scattered ray per bounce. The colour of a path is
the product of the attenuations of every scattering surface times the sky
colour where the path escapes; a path that is absorbed or runs out of depth
contributes black. The recursion
    ray_color(r, d) = attenuation * ray_color(scattered, d - 1)
is evaluated as a bounded loop carrying the running attenuation product.

The kernel loops are serialized, so a frame is rendered on one thread and
render_frame() returns only once every pixel is written.

Example:
    >>> import numpy as np
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from weekend_raytracer.core.integrator import render_frame
    >>> from weekend_raytracer.scene.random_scene import create_random_scene
    >>> from weekend_raytracer.camera.thin_lens import setup_camera
    >>>
    >>> scene, camera = create_random_scene(320, 180)
    >>> setup_camera(camera)
    >>> frame = np.zeros(320 * 180 * 4, dtype=np.uint8)
    >>> render_frame(frame, 320, 180, samples_per_pixel=10, max_depth=50)
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from weekend_raytracer.camera.thin_lens import get_ray_jittered
from weekend_raytracer.core.ray import Ray, make_ray, normalize
from weekend_raytracer.materials.dielectric import scatter_dielectric_by_id
from weekend_raytracer.materials.lambertian import scatter_lambertian_by_id
from weekend_raytracer.materials.metal import scatter_metal_by_id
from weekend_raytracer.scene.intersection import intersect_scene
from weekend_raytracer.scene.manager import (
    MaterialType,
    get_material_type,
    get_material_type_index,
)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Lower bound of the trace interval; keeps scattered rays from re-hitting
# the surface they leave at t ~ 0
T_MIN = 0.001
T_MAX = tm.inf

# Sky gradient endpoints: straight down is HORIZON_COLOR, straight up SKY_COLOR
HORIZON_COLOR = vec3(1.0, 1.0, 1.0)
SKY_COLOR = vec3(0.5, 0.7, 1.0)

# Channels are clamped below 1 so 255 * value truncates to at most 254
MAX_CHANNEL_VALUE = 0.999

BYTES_PER_PIXEL = 4


# =============================================================================
# Shading
# =============================================================================


@ti.func
def background_color(direction: vec3) -> vec3:
    """Sky colour seen along an escaping ray.

    Linearly blends white and sky blue by the vertical component of the
    normalized direction.
    """
    t = 0.5 * (normalize(direction).y + 1.0)
    return (1.0 - t) * HORIZON_COLOR + t * SKY_COLOR


@ti.func
def scatter_material(
    material_id: ti.i32,
    incident_direction: vec3,
    normal: vec3,
    front_face: ti.i32,
):
    """Dispatch to the appropriate material scattering function.

    Args:
        material_id: The unified material ID of the hit surface.
        incident_direction: The incoming ray direction.
        normal: The unit surface normal, facing the incoming ray.
        front_face: 1 if the outward side was hit, 0 otherwise.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter).
        Unknown material IDs absorb the ray.
    """
    mat_type = get_material_type(material_id)
    type_index = get_material_type_index(material_id)

    scattered_direction = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0

    if mat_type == int(MaterialType.LAMBERTIAN):
        scattered_direction, attenuation, did_scatter = scatter_lambertian_by_id(
            type_index, normal
        )

    elif mat_type == int(MaterialType.METAL):
        scattered_direction, attenuation, did_scatter = scatter_metal_by_id(
            type_index, incident_direction, normal
        )

    elif mat_type == int(MaterialType.DIELECTRIC):
        scattered_direction, attenuation, did_scatter = scatter_dielectric_by_id(
            type_index, incident_direction, normal, front_face
        )

    return scattered_direction, attenuation, did_scatter


@ti.func
def ray_color(ray: Ray, depth: ti.i32) -> vec3:
    """Colour carried back along a ray, following up to depth bounces.

    - depth <= 0: black.
    - Hit in (T_MIN, T_MAX): the material scatters and the result is its
      attenuation times the colour of the scattered ray with depth - 1,
      or black if the material absorbs the ray.
    - Miss: the background gradient.

    Args:
        ray: The ray to trace.
        depth: Maximum number of surface interactions.

    Returns:
        The RGB colour, unclamped and linear.
    """
    color = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    origin = ray.origin
    direction = ray.direction

    # Taichi funcs cannot recurse or return early, so the path is followed
    # iteratively with an active flag
    active = 1
    for _ in range(depth):
        if active == 1:
            rec = intersect_scene(origin, direction, T_MIN, T_MAX)

            if rec.hit == 0:
                color = throughput * background_color(direction)
                active = 0
            else:
                scattered_direction, attenuation, did_scatter = scatter_material(
                    rec.material_id, direction, rec.normal, rec.front_face
                )
                if did_scatter == 0:
                    active = 0
                else:
                    throughput *= attenuation
                    origin = rec.point
                    direction = scattered_direction

    return color


@ti.func
def gamma_correct(pixel_color: vec3, samples_per_pixel: ti.i32) -> vec3:
    """Average a summed pixel colour, apply gamma 2 and clamp to [0, 0.999]."""
    scale = 1.0 / ti.cast(samples_per_pixel, ti.f32)
    corrected = ti.sqrt(scale * pixel_color)
    return tm.clamp(corrected, 0.0, MAX_CHANNEL_VALUE)


@ti.func
def to_rgb8(pixel_color: vec3, samples_per_pixel: ti.i32) -> ti.types.vector(3, ti.i32):
    """Convert a summed pixel colour to 8-bit channel values (truncated)."""
    corrected = gamma_correct(pixel_color, samples_per_pixel)
    return ti.cast(255.0 * corrected, ti.i32)


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_kernel(
    frame: ti.types.ndarray(dtype=ti.u8, ndim=1),
    width: ti.i32,
    height: ti.i32,
    samples_per_pixel: ti.i32,
    max_depth: ti.i32,
):
    """Render every pixel into a flat RGBA byte buffer.

    Image rows are produced bottom to top (j = 0 is the bottom row); buffer
    row 0 holds the top of the picture, so image row j lands in buffer row
    height - 1 - j.
    """
    ti.loop_config(serialize=True)
    for j in range(height):
        row = height - 1 - j
        for i in range(width):
            pixel_color = vec3(0.0, 0.0, 0.0)
            for _ in range(samples_per_pixel):
                ray = get_ray_jittered(i, j, width, height)
                pixel_color += ray_color(ray, max_depth)

            rgb = to_rgb8(pixel_color, samples_per_pixel)
            pixel_index = (row * width + i) * BYTES_PER_PIXEL
            frame[pixel_index + 0] = ti.cast(rgb[0], ti.u8)
            frame[pixel_index + 1] = ti.cast(rgb[1], ti.u8)
            frame[pixel_index + 2] = ti.cast(rgb[2], ti.u8)
            frame[pixel_index + 3] = ti.cast(255, ti.u8)


@ti.kernel
def _trace_single_ray(origin: vec3, direction: vec3, depth: ti.i32) -> vec3:
    return ray_color(make_ray(origin, direction), depth)


# =============================================================================
# Public Rendering API
# =============================================================================


def frame_size(width: int, height: int) -> int:
    """Number of bytes in an RGBA frame of the given size."""
    return width * height * BYTES_PER_PIXEL


def allocate_frame(width: int, height: int) -> npt.NDArray[np.uint8]:
    """Allocate a zeroed flat RGBA frame buffer."""
    return np.zeros(frame_size(width, height), dtype=np.uint8)


def _flat_frame_view(
    frame: npt.NDArray[np.uint8], width: int, height: int
) -> npt.NDArray[np.uint8]:
    """Validate a caller-owned frame buffer and return a flat view of it.

    Raises:
        ValueError: If the buffer has the wrong dtype or size, or is not
            C-contiguous (a flat view would otherwise be a copy).
    """
    if not isinstance(frame, np.ndarray) or frame.dtype != np.uint8:
        raise ValueError("Frame buffer must be a numpy uint8 array")
    if frame.size != frame_size(width, height):
        raise ValueError(
            f"Frame buffer has {frame.size} bytes, expected "
            f"{frame_size(width, height)} for {width}x{height} RGBA"
        )
    if not frame.flags["C_CONTIGUOUS"]:
        raise ValueError("Frame buffer must be C-contiguous")
    return frame.reshape(-1)


def render_frame(
    frame: npt.NDArray[np.uint8],
    width: int,
    height: int,
    samples_per_pixel: int,
    max_depth: int,
) -> None:
    """Render the current scene through the current camera into frame.

    The scene and camera must already be set up. Every byte of the frame is
    overwritten; its previous contents are never read.

    Args:
        frame: Caller-owned uint8 buffer of width * height * 4 bytes, either
            flat or shaped (height, width, 4). Row 0 is the top of the image.
        width: Image width in pixels (> 0).
        height: Image height in pixels (> 0).
        samples_per_pixel: Jittered samples averaged per pixel (> 0).
        max_depth: Maximum bounces per path (>= 0).

    Raises:
        ValueError: If any argument is out of range or the buffer does not
            match the image size.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image size must be positive, got {width}x{height}")
    if samples_per_pixel <= 0:
        raise ValueError(f"samples_per_pixel must be positive, got {samples_per_pixel}")
    if max_depth < 0:
        raise ValueError(f"max_depth must be non-negative, got {max_depth}")

    flat = _flat_frame_view(frame, width, height)
    _render_kernel(flat, width, height, samples_per_pixel, max_depth)


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth: int,
) -> tuple[float, float, float]:
    """Trace a single ray through the current scene.

    This is a Python-callable function for testing and debugging. For
    rendering, use render_frame() which processes the whole image.

    Args:
        origin: Ray origin.
        direction: Ray direction (need not be normalized).
        depth: Maximum number of bounces.

    Returns:
        Tuple of (R, G, B) linear colour values.
    """
    color = _trace_single_ray(vec3(*origin), vec3(*direction), depth)
    return (float(color[0]), float(color[1]), float(color[2]))
