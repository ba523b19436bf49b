# geometry/hittable.py
from typing import Optional
from core.vector import Vector3
from core.ray import Ray

class HitRecord:
    """
    Records details of a ray-object intersection. Produced and consumed
    within a single hit query.
    """
    def __init__(self, t: float, point: Vector3, normal: Vector3, material):
        self.t = t              # Ray parameter at intersection
        self.point = point      # Intersection point
        self.normal = normal    # Unit surface normal, always pointing outward
        self.material = material

    def __repr__(self) -> str:
        return f"HitRecord(t={self.t}, point={self.point!r}, normal={self.normal!r})"

class Hittable:
    """
    Abstract class for objects that can be hit by a ray.
    """
    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """
        Returns the nearest intersection with t strictly inside (t_min, t_max),
        or None if there is none.
        """
        raise NotImplementedError("hit() must be implemented by subclasses.")
