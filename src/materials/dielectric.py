# src/materials/dielectric.py
import math
from typing import Tuple
from core.ray import Ray
from core.vector import Vector3
from core.utils import reflect, refract, schlick
from geometry.hittable import HitRecord
from materials.material import Material

class Dielectric(Material):
    """
    Clear dielectric (glass, water, ...) that either reflects or refracts,
    choosing between the two with Schlick's Fresnel approximation.
    """
    def __init__(self, ref_idx: float):
        if not ref_idx > 0:
            raise ValueError(f"Refractive index must be positive, got {ref_idx}")
        self.ref_idx = ref_idx

    def scatter(self, ray_in: Ray, rec: HitRecord, rng) -> Tuple[Ray, Vector3]:
        attenuation = Vector3(1.0, 1.0, 1.0)  # Glass doesn't absorb light

        unit_direction = ray_in.direction.normalize()
        d_dot_n = unit_direction.dot(rec.normal)

        # Determine if we're entering or exiting the material
        if d_dot_n > 0:
            outward_normal = -rec.normal
            ni_over_nt = self.ref_idx
        else:
            outward_normal = rec.normal
            ni_over_nt = 1.0 / self.ref_idx

        reflected = reflect(unit_direction, rec.normal)
        refracted = refract(unit_direction, outward_normal, ni_over_nt)

        # Total internal reflection
        if refracted is None:
            return Ray(rec.point, reflected), attenuation

        # Schlick wants the cosine on the outside of the interface.
        if d_dot_n > 0:
            cosine = math.sqrt(1.0 - self.ref_idx * self.ref_idx * (1.0 - d_dot_n * d_dot_n))
        else:
            cosine = -d_dot_n

        if rng.random() < schlick(cosine, self.ref_idx):
            return Ray(rec.point, reflected), attenuation
        return Ray(rec.point, refracted), attenuation

    def __repr__(self) -> str:
        return f"Dielectric({self.ref_idx})"
