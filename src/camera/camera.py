# camera/camera.py
import math
from core.vector import Vector3
from core.ray import Ray
from core.utils import random_in_unit_disk

class Camera:
    """
    Look-at camera. Maps normalized image-plane coordinates (s, t) in [0, 1]
    to world-space rays; (0, 0) is the lower left corner of the image.
    """
    def __init__(self, look_from: Vector3, look_at: Vector3, up: Vector3,
                 vfov: float, aspect_ratio: float,
                 aperture: float = 0.0, focus_dist: float = 1.0):
        if not 0 < vfov < 180:
            raise ValueError(f"Vertical field of view must be in (0, 180) degrees, got {vfov}")
        if not aspect_ratio > 0:
            raise ValueError(f"Aspect ratio must be positive, got {aspect_ratio}")
        if aperture < 0:
            raise ValueError(f"Aperture must be non-negative, got {aperture}")
        if not focus_dist > 0:
            raise ValueError(f"Focus distance must be positive, got {focus_dist}")

        view = look_from - look_at
        if view.near_zero():
            raise ValueError("Camera look_from and look_at must differ")
        right = up.cross(view)
        if right.near_zero():
            raise ValueError("Camera up vector must not be parallel to the view direction")

        self.look_from = look_from
        self.look_at = look_at
        self.vfov = vfov
        self.aspect_ratio = aspect_ratio
        self.aperture = aperture  # Lens aperture for depth of field
        self.focus_dist = focus_dist  # Distance to focus plane
        self.lens_radius = aperture / 2.0

        # Orthonormal basis; w points backwards, away from the scene
        self.w = view.normalize()
        self.u = right.normalize()
        self.v = self.w.cross(self.u)

        half_height = math.tan(math.radians(vfov) / 2)
        half_width = aspect_ratio * half_height

        self.origin = look_from
        self.lower_left_corner = (self.origin -
                                  self.u * (half_width * focus_dist) -
                                  self.v * (half_height * focus_dist) -
                                  self.w * focus_dist)
        self.horizontal = self.u * (2 * half_width * focus_dist)
        self.vertical = self.v * (2 * half_height * focus_dist)

    @classmethod
    def default(cls, aspect_ratio: float = 2.0) -> "Camera":
        """
        Camera at the origin looking down -Z with a 90 degree field of view.
        """
        return cls(Vector3(0, 0, 0), Vector3(0, 0, -1), Vector3(0, 1, 0),
                   90.0, aspect_ratio)

    def get_ray(self, s: float, t: float, rng=None) -> Ray:
        """Generates the ray through image-plane coordinates (s, t)."""
        if self.lens_radius <= 0:
            direction = (self.lower_left_corner +
                         self.horizontal * s +
                         self.vertical * t -
                         self.origin)
            return Ray(self.origin, direction)

        if rng is None:
            raise ValueError("A random source is required when the camera has an aperture")

        # Generate random point on lens
        rd = random_in_unit_disk(rng) * self.lens_radius
        offset = self.u * rd.x + self.v * rd.y

        ray_origin = self.origin + offset
        ray_direction = (self.lower_left_corner +
                         self.horizontal * s +
                         self.vertical * t -
                         ray_origin)
        return Ray(ray_origin, ray_direction)
