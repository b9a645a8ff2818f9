"""Taichi implementation of the "Ray Tracing in One Weekend" renderer.

This package renders the random sphere field scene on the CPU, with:
- Recursive path tracing of a single scattered ray per bounce
- Lambertian, metal and dielectric materials shared between spheres
- A thin-lens camera with depth of field
- Jittered supersampling and gamma 2 output into RGBA byte buffers

Subpackages:
    core: Ray and vector utilities, the integrator and the RayTracer front end
    geometry: Sphere primitive and hit records
    materials: Material models and their storage
    scene: Scene storage, management and the random scene factory
    camera: Thin-lens camera with ray generation
    preview: PNG export and Matplotlib display
"""

__version__ = "0.1.0"
