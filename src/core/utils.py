# core/utils.py
import math
from typing import Optional
from core.vector import Vector3

# Every sampler takes the random source explicitly. Anything exposing
# random() and uniform(a, b) works; random.Random is what the renderer uses.

def random_in_unit_sphere(rng) -> Vector3:
    """
    Returns a random point inside a unit sphere (rejection sampling in the
    [-1, 1] cube).
    """
    while True:
        p = Vector3(rng.uniform(-1, 1),
                    rng.uniform(-1, 1),
                    rng.uniform(-1, 1))
        if p.dot(p) < 1.0:
            return p

def random_in_unit_disk(rng) -> Vector3:
    """
    Returns a random point inside the unit disk in the xy-plane.
    """
    while True:
        p = Vector3(rng.uniform(-1, 1),
                    rng.uniform(-1, 1),
                    0.0)
        if p.dot(p) < 1.0:
            return p

def reflect(v: Vector3, n: Vector3) -> Vector3:
    """
    Reflects vector v about the normal n.
    """
    return v.reflect(n)

def refract(v: Vector3, n: Vector3, ni_over_nt: float) -> Optional[Vector3]:
    """
    Refracts v through a surface with normal n (pointing to the incident
    side) using Snell's law. Returns None on total internal reflection.
    """
    uv = v.normalize()
    dt = uv.dot(n)
    discriminant = 1.0 - ni_over_nt * ni_over_nt * (1.0 - dt * dt)
    if discriminant <= 0:
        return None
    return (uv - n * dt) * ni_over_nt - n * math.sqrt(discriminant)

def schlick(cosine: float, ref_idx: float) -> float:
    """
    Schlick's approximation of the Fresnel reflectance.
    """
    r0 = (1.0 - ref_idx) / (1.0 + ref_idx)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * math.pow((1.0 - cosine), 5)
