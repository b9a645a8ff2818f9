"""Random sphere field scene configuration.

This module provides the factory for the classic "one weekend" cover scene:

- A huge gray diffuse sphere acting as the ground
- A 22 x 22 grid of small (radius 0.2) spheres, each jittered inside its
  grid cell, with a randomly chosen diffuse, metal or glass material
- Three large (radius 1) spheres: glass in the middle, brown diffuse on
  the left and a polished metal on the right

Small spheres that would overlap the metal showcase sphere are skipped.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from weekend_raytracer.scene.random_scene import create_random_scene
    >>> from weekend_raytracer.camera.thin_lens import setup_camera
    >>>
    >>> scene, camera = create_random_scene(width=1280, height=720, seed=7)
    >>> setup_camera(camera)
"""

import logging

import numpy as np

from weekend_raytracer.camera.thin_lens import ThinLensCamera
from weekend_raytracer.scene.manager import MaterialType, SceneManager

logger = logging.getLogger(__name__)

# =============================================================================
# Scene Constants
# =============================================================================

GROUND_CENTER = (0.0, -1000.0, 0.0)
GROUND_RADIUS = 1000.0
GROUND_ALBEDO = (0.5, 0.5, 0.5)

# Grid of small spheres: a, b in range(-GRID_EXTENT, GRID_EXTENT)
GRID_EXTENT = 11
SMALL_RADIUS = 0.2
SMALL_HEIGHT = 0.2
JITTER = 0.9

# Small spheres closer than this to EXCLUSION_POINT are skipped
EXCLUSION_POINT = (4.0, 0.2, 0.0)
EXCLUSION_DISTANCE = 0.9

# Cumulative material probabilities
DIFFUSE_PROBABILITY = 0.8
METAL_PROBABILITY = 0.95

METAL_ALBEDO_RANGE = (0.5, 1.0)
METAL_FUZZ_RANGE = (0.0, 0.5)
GLASS_IOR = 1.5

LARGE_RADIUS = 1.0
GLASS_SPHERE_CENTER = (0.0, 1.0, 0.0)
DIFFUSE_SPHERE_CENTER = (-4.0, 1.0, 0.0)
DIFFUSE_SPHERE_ALBEDO = (0.4, 0.2, 0.1)
METAL_SPHERE_CENTER = (4.0, 1.0, 0.0)
METAL_SPHERE_ALBEDO = (0.7, 0.6, 0.5)
METAL_SPHERE_FUZZ = 0.0

# Camera
DEFAULT_LOOKFROM = (13.0, 2.0, 3.0)
DEFAULT_LOOKAT = (0.0, 0.0, 0.0)
DEFAULT_VUP = (0.0, 1.0, 0.0)
DEFAULT_VFOV = 20.0
DEFAULT_APERTURE = 0.1
DEFAULT_FOCUS_DIST = 10.0


def create_default_camera(width: int, height: int) -> ThinLensCamera:
    """Camera looking at the sphere field from the front right.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A ThinLensCamera with the default view and an aspect ratio of
        width / height.
    """
    return ThinLensCamera.from_image_size(
        width,
        height,
        lookfrom=DEFAULT_LOOKFROM,
        lookat=DEFAULT_LOOKAT,
        vup=DEFAULT_VUP,
        vfov=DEFAULT_VFOV,
        aperture=DEFAULT_APERTURE,
        focus_dist=DEFAULT_FOCUS_DIST,
    )


def _add_small_sphere(
    scene: SceneManager,
    rng: np.random.Generator,
    center: tuple[float, float, float],
    choose_mat: float,
) -> MaterialType:
    if choose_mat < DIFFUSE_PROBABILITY:
        albedo = rng.random(3) * rng.random(3)
        scene.add_lambertian_sphere(center, SMALL_RADIUS, tuple(float(c) for c in albedo))
        return MaterialType.LAMBERTIAN

    if choose_mat < METAL_PROBABILITY:
        albedo = rng.uniform(*METAL_ALBEDO_RANGE, size=3)
        fuzz = float(rng.uniform(*METAL_FUZZ_RANGE))
        scene.add_metal_sphere(center, SMALL_RADIUS, tuple(float(c) for c in albedo), fuzz)
        return MaterialType.METAL

    scene.add_dielectric_sphere(center, SMALL_RADIUS, GLASS_IOR)
    return MaterialType.DIELECTRIC


def populate_random_scene(
    scene: SceneManager,
    rng: np.random.Generator,
) -> dict[MaterialType, int]:
    """Fill an empty scene with the random sphere field.

    Args:
        scene: The scene to add spheres and materials to.
        rng: Random source for sphere placement and materials.

    Returns:
        Number of small spheres created per material type.
    """
    counts = {material_type: 0 for material_type in MaterialType}
    exclusion = np.array(EXCLUSION_POINT)

    scene.add_lambertian_sphere(GROUND_CENTER, GROUND_RADIUS, GROUND_ALBEDO)

    for a in range(-GRID_EXTENT, GRID_EXTENT):
        for b in range(-GRID_EXTENT, GRID_EXTENT):
            choose_mat = float(rng.random())
            center = np.array(
                [a + JITTER * rng.random(), SMALL_HEIGHT, b + JITTER * rng.random()]
            )

            if np.linalg.norm(center - exclusion) > EXCLUSION_DISTANCE:
                material_type = _add_small_sphere(
                    scene, rng, tuple(float(c) for c in center), choose_mat
                )
                counts[material_type] += 1

    scene.add_dielectric_sphere(GLASS_SPHERE_CENTER, LARGE_RADIUS, GLASS_IOR)
    scene.add_lambertian_sphere(DIFFUSE_SPHERE_CENTER, LARGE_RADIUS, DIFFUSE_SPHERE_ALBEDO)
    scene.add_metal_sphere(
        METAL_SPHERE_CENTER, LARGE_RADIUS, METAL_SPHERE_ALBEDO, METAL_SPHERE_FUZZ
    )

    return counts


def create_random_scene(
    width: int = 1280,
    height: int = 720,
    seed: int | None = None,
) -> tuple[SceneManager, ThinLensCamera]:
    """Create the random sphere field scene and its camera.

    Any previously loaded scene is cleared.

    Args:
        width: Image width in pixels, used for the camera aspect ratio.
        height: Image height in pixels, used for the camera aspect ratio.
        seed: Seed for the scene layout. None draws fresh entropy.

    Returns:
        A tuple of (SceneManager, ThinLensCamera). The camera still has to
        be passed to setup_camera() before rendering.
    """
    rng = np.random.default_rng(seed)
    scene = SceneManager()
    counts = populate_random_scene(scene, rng)

    logger.info(
        "Built random scene: %d spheres, %d materials "
        "(%d diffuse, %d metal, %d glass small spheres)",
        scene.get_sphere_count(),
        scene.get_material_count(),
        counts[MaterialType.LAMBERTIAN],
        counts[MaterialType.METAL],
        counts[MaterialType.DIELECTRIC],
    )

    return scene, create_default_camera(width, height)
