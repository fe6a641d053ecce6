"""CPU Monte Carlo path tracer for scenes of spheres.

Subpackages:
    core: Vectors, rays, sampling and optics helpers
    geometry: Hittable objects, spheres and the scene list
    materials: Lambertian, metal and dielectric scattering models
    camera: Thin-lens camera with depth of field and shutter time
    renderer: Color integrator, worker-pool renderer, progress and PNG output
"""

__version__ = "0.1.0"
