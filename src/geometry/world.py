# src/geometry/world.py
from geometry.hittable import Hittable, HitRecord
from typing import Optional, List
from core.ray import Ray

class HittableList(Hittable):
    """
    A list of Hittable objects. The hit() method returns the closest hit.
    """
    def __init__(self, objects: Optional[List[Hittable]] = None):
        self.objects: List[Hittable] = list(objects) if objects else []

    def add(self, obj: Hittable):
        self.objects.append(obj)

    def clear(self):
        self.objects.clear()

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self):
        return iter(self.objects)

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        hit_record = None
        closest_so_far = t_max
        # Shrinking t_max keeps a farther object from replacing a closer one.
        for obj in self.objects:
            rec = obj.hit(ray, t_min, closest_so_far)
            if rec is not None:
                closest_so_far = rec.t
                hit_record = rec
        return hit_record
