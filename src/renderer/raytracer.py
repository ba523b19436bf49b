# renderer/raytracer.py
import math
import time
import numpy as np
from core.vector import Vector3
from core.ray import Ray
from geometry.hittable import Hittable
from renderer.tone_mapping import to_rgba8

# Offset that keeps a bounced ray from re-hitting the surface it left.
T_MIN = 1e-4

DEFAULT_SAMPLES = 100
MAX_BOUNCES = 50

WHITE = Vector3(1.0, 1.0, 1.0)
SKY_BLUE = Vector3(0.5, 0.7, 1.0)
BLACK = Vector3(0.0, 0.0, 0.0)


def sky_color(direction: Vector3) -> Vector3:
    """
    Background gradient: white at the horizon blending to sky blue straight up.
    """
    unit_direction = direction.normalize()
    t = 0.5 * (unit_direction.y + 1.0)
    return WHITE * (1.0 - t) + SKY_BLUE * t


def cast_ray(ray: Ray, world: Hittable, max_depth: int, rng) -> Vector3:
    """
    Follows a ray through at most max_depth scatter events and returns the
    linear radiance it carries back. Absorbed paths and paths that run out
    of bounces are black.
    """
    throughput = Vector3(1.0, 1.0, 1.0)
    for _ in range(max_depth):
        rec = world.hit(ray, T_MIN, math.inf)
        if rec is None:
            return throughput * sky_color(ray.direction)
        scatter_result = rec.material.scatter(ray, rec, rng)
        if scatter_result is None:
            return BLACK
        ray, attenuation = scatter_result
        throughput = throughput * attenuation
    return BLACK


class Renderer:
    """
    Brute-force per-pixel Monte Carlo sampler.
    """
    def __init__(self, width: int, height: int, samples_per_pixel: int = DEFAULT_SAMPLES,
                 max_depth: int = MAX_BOUNCES, verbose: bool = False):
        if width <= 0 or height <= 0:
            raise ValueError(f"Image size must be positive, got {width}x{height}")
        if samples_per_pixel <= 0:
            raise ValueError(f"samples_per_pixel must be positive, got {samples_per_pixel}")
        if max_depth <= 0:
            raise ValueError(f"max_depth must be positive, got {max_depth}")
        self.width = width
        self.height = height
        self.samples_per_pixel = samples_per_pixel
        self.max_depth = max_depth
        self.verbose = verbose

    def render_pixel(self, x: int, y: int, camera, world: Hittable, rng) -> Vector3:
        """
        Average of samples_per_pixel jittered rays through pixel (x, y),
        where y = 0 is the top row.
        """
        col = Vector3(0.0, 0.0, 0.0)
        row_from_bottom = self.height - 1 - y
        for _ in range(self.samples_per_pixel):
            s = (x + rng.random()) / self.width
            t = (row_from_bottom + rng.random()) / self.height
            ray = camera.get_ray(s, t, rng)
            col = col + cast_ray(ray, world, self.max_depth, rng)
        return col / self.samples_per_pixel

    def render_linear(self, camera, world: Hittable, rng) -> np.ndarray:
        """
        Renders the averaged linear radiance, shape (height, width, 3), top row first.
        """
        image = np.zeros((self.height, self.width, 3), dtype=np.float64)
        start = time.perf_counter()
        for y in range(self.height):
            for x in range(self.width):
                image[y, x] = tuple(self.render_pixel(x, y, camera, world, rng))
            if self.verbose:
                done = y + 1
                elapsed = time.perf_counter() - start
                eta = elapsed / done * (self.height - done)
                print(f"Row {done}/{self.height} | Elapsed: {elapsed:.1f}s | ETA: {eta:.1f}s    ", end='\r')
        if self.verbose:
            print()  # newline after progress
        return image

    def render(self, camera, world: Hittable, rng) -> np.ndarray:
        """
        Renders the scene into a (height, width, 4) uint8 RGBA buffer, gamma
        corrected and ready for an image sink.
        """
        return to_rgba8(self.render_linear(camera, world, rng))
