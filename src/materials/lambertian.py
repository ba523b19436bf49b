# materials/lambertian.py
from typing import Tuple
from core.ray import Ray
from core.vector import Vector3
from core.utils import random_in_unit_sphere
from geometry.hittable import HitRecord
from materials.material import Material

class Lambertian(Material):
    """
    Lambertian diffuse material.
    """

    def __init__(self, albedo: Vector3):
        self.albedo = albedo

    def scatter(self, ray_in: Ray, rec: HitRecord, rng) -> Tuple[Ray, Vector3]:
        """
        Scatter a ray according to a Lambertian reflection model.
        Returns (scattered_ray, attenuation); a diffuse surface never absorbs.
        """
        scatter_direction = rec.normal + random_in_unit_sphere(rng)

        # If scatter_direction is degenerate (very small), just use the normal.
        if scatter_direction.near_zero():
            scatter_direction = rec.normal

        scattered = Ray(rec.point, scatter_direction)
        return scattered, self.albedo

    def __repr__(self) -> str:
        return f"Lambertian({self.albedo!r})"
