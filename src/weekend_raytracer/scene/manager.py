"""Scene construction and the material table used for dispatch.

Materials live in per-type registries (Lambertian, Metal, Dielectric).
This module assigns each registered material a scene-wide material ID and
records, in Taichi fields, which type it has and where it sits in its
type's registry. The integrator reads that table through
get_material_type() and get_material_type_index().

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from weekend_raytracer.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> mat_id = scene.add_lambertian_material(albedo=(0.8, 0.3, 0.3))
    >>> scene.add_sphere(center=(0, 0, -1), radius=0.5, material_id=mat_id)
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

from weekend_raytracer.materials.dielectric import (
    add_dielectric_material,
    clear_dielectric_materials,
)
from weekend_raytracer.materials.lambertian import (
    add_lambertian_material,
    clear_lambertian_materials,
)
from weekend_raytracer.materials.metal import (
    add_metal_material,
    clear_metal_materials,
)
from weekend_raytracer.scene.intersection import (
    add_sphere,
    clear_scene,
    get_sphere_count,
)

# Type alias for 3D vectors
vec3 = tm.vec3


class MaterialType(IntEnum):
    """Enumeration of supported material types.

    Used for material dispatch in the integrator to determine which
    scattering function to call.
    """

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2


# Maximum number of materials across all types
MAX_MATERIALS = 1536  # 512 per type * 3 types

# material_types[i] stores the MaterialType for material_id i
material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
# material_type_indices[i] stores the type-local index for material_id i
# (e.g., if material_id 5 is the 2nd metal material, material_type_indices[5] = 1)
material_type_indices = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def _clear_material_tracking() -> None:
    num_materials[None] = 0


@ti.func
def get_material_type(material_id: ti.i32) -> ti.i32:
    """Get the material type for a given material ID.

    Args:
        material_id: The unified material ID.

    Returns:
        The material type as an integer (see MaterialType enum).
        Returns -1 for invalid material IDs.
    """
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_types[material_id]
    return result


@ti.func
def get_material_type_index(material_id: ti.i32) -> ti.i32:
    """Get the type-local index for a given material ID.

    This is used to look up material properties in the type-specific
    material arrays (e.g., lambertian_albedos[type_index]).

    Returns:
        The index into the type-specific material array, or -1 for
        invalid material IDs.
    """
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_type_indices[material_id]
    return result


class SceneManager:
    """Builds the scene: shared materials plus the spheres that use them.

    Every material gets a scene-wide ID regardless of its type, so the
    integrator can look up the type and the type-local index from the ID
    stored on each sphere. A material ID can be used by any number of
    spheres.

    The Taichi fields backing the scene are module-level, so only one scene
    is live at a time and constructing a SceneManager clears the previous
    one.

    Example:
        >>> scene = SceneManager()
        >>> glass = scene.add_dielectric_material(ior=1.5)
        >>> scene.add_sphere((0, 1, 0), 1.0, glass)
        >>> scene.add_sphere((0, 1, 0), -0.9, glass)
    """

    def __init__(self) -> None:
        self.clear()

    def clear(self) -> None:
        """Remove every sphere and material."""
        clear_scene()
        clear_lambertian_materials()
        clear_metal_materials()
        clear_dielectric_materials()
        _clear_material_tracking()

    def _register(self, material_type: MaterialType, type_index: int) -> int:
        material_id = num_materials[None]
        if material_id >= MAX_MATERIALS:
            raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

        material_types[material_id] = int(material_type)
        material_type_indices[material_id] = type_index
        num_materials[None] = material_id + 1
        return material_id

    def add_lambertian_material(self, albedo: tuple[float, float, float]) -> int:
        """Register a diffuse material and return its material ID.

        Raises:
            ValueError: If any albedo component is outside [0, 1].
            RuntimeError: If a material capacity is exceeded.
        """
        return self._register(MaterialType.LAMBERTIAN, add_lambertian_material(albedo))

    def add_metal_material(
        self,
        albedo: tuple[float, float, float],
        fuzz: float = 0.0,
    ) -> int:
        """Register a metal material and return its material ID.

        Fuzz values above 1 are clamped to 1.

        Raises:
            ValueError: If any albedo component is outside [0, 1] or fuzz
                is negative.
            RuntimeError: If a material capacity is exceeded.
        """
        return self._register(MaterialType.METAL, add_metal_material(albedo, fuzz))

    def add_dielectric_material(self, ior: float = 1.5) -> int:
        """Register a glass-like material and return its material ID.

        Raises:
            ValueError: If the index of refraction is not positive.
            RuntimeError: If a material capacity is exceeded.
        """
        return self._register(MaterialType.DIELECTRIC, add_dielectric_material(ior))

    def get_material_count(self) -> int:
        return int(num_materials[None])

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material_id: int,
    ) -> int:
        """Add a sphere using an already registered material.

        Returns:
            The index of the sphere in scene order.

        Raises:
            ValueError: If material_id was not returned by this scene.
            RuntimeError: If the sphere capacity is exceeded.
        """
        if not 0 <= material_id < num_materials[None]:
            raise ValueError(f"Invalid material_id: {material_id}")
        return add_sphere(vec3(center[0], center[1], center[2]), radius, material_id)

    def add_lambertian_sphere(self, center, radius, albedo) -> tuple[int, int]:
        """Add a sphere with its own new diffuse material.

        Returns:
            Tuple of (sphere_index, material_id).
        """
        material_id = self.add_lambertian_material(albedo)
        return self.add_sphere(center, radius, material_id), material_id

    def add_metal_sphere(self, center, radius, albedo, fuzz=0.0) -> tuple[int, int]:
        material_id = self.add_metal_material(albedo, fuzz)
        return self.add_sphere(center, radius, material_id), material_id

    def add_dielectric_sphere(self, center, radius, ior=1.5) -> tuple[int, int]:
        material_id = self.add_dielectric_material(ior)
        return self.add_sphere(center, radius, material_id), material_id

    def get_sphere_count(self) -> int:
        return get_sphere_count()
