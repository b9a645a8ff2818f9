"""Scene module for scene management and ray-scene queries.

Components:
    intersection: Sphere storage and closest-hit scene queries
    manager: Unified scene manager coordinating spheres and shared materials
    random_scene: The random sphere field scene and its default camera

Scene data is organized for kernel access:
    - Structure-of-Arrays layout for sphere data
    - Contiguous material ID arrays
    - Material type table for tagged dispatch in the integrator
"""

from .intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
    intersect_scene,
)
from .manager import (
    MAX_MATERIALS,
    MaterialType,
    SceneManager,
    get_material_type,
    get_material_type_index,
    material_type_indices,
    material_types,
    num_materials,
)
from .random_scene import (
    create_default_camera,
    create_random_scene,
    populate_random_scene,
)

__all__ = [
    # Intersection module
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "intersect_scene",
    "MAX_SPHERES",
    # Manager module
    "SceneManager",
    "MaterialType",
    "MAX_MATERIALS",
    "get_material_type",
    "get_material_type_index",
    "material_types",
    "material_type_indices",
    "num_materials",
    # Random scene module
    "create_random_scene",
    "create_default_camera",
    "populate_random_scene",
]
