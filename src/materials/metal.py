# materials/metal.py
from typing import Optional, Tuple
from core.ray import Ray
from core.vector import Vector3
from core.utils import reflect, random_in_unit_sphere
from geometry.hittable import HitRecord
from materials.material import Material

class Metal(Material):
    """
    Metal material with reflective properties. fuzz perturbs the mirror
    direction by a random offset of at most that length.
    """
    def __init__(self, albedo: Vector3, fuzz: float = 0.0):
        if fuzz < 0:
            raise ValueError(f"Metal fuzz must be non-negative, got {fuzz}")
        self.albedo = albedo
        self.fuzz = fuzz

    def scatter(self, ray_in: Ray, rec: HitRecord, rng) -> Optional[Tuple[Ray, Vector3]]:
        direction = reflect(ray_in.direction.normalize(), rec.normal)
        if self.fuzz > 0:
            direction = direction + random_in_unit_sphere(rng) * self.fuzz
        scattered = Ray(rec.point, direction)

        if scattered.direction.dot(rec.normal) > 0:
            return scattered, self.albedo

        return None  # Absorb the ray if it does not scatter forward

    def __repr__(self) -> str:
        return f"Metal({self.albedo!r}, fuzz={self.fuzz})"
