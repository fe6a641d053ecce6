from .material import Material
from .lambertian import Lambertian
from .metal import Metal
from .dielectric import Dielectric

__all__ = ["Material", "Lambertian", "Metal", "Dielectric"]
