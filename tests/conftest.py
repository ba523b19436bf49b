"""Pytest configuration for raytracer tests.

Shared fixtures: a seeded random source, a scripted random source for tests
that need to force a particular branch, and small scenes.
"""

import random

import pytest

from core.vector import Vector3
from geometry.sphere import Sphere
from geometry.world import HittableList
from materials.lambertian import Lambertian


class ScriptedRandom:
    """Random source that replays fixed values.

    random() returns the scripted values in order (cycling), and uniform(a, b)
    maps the next value onto [a, b). Used to pin Monte Carlo branch choices.
    """

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def random(self):
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value

    def uniform(self, a, b):
        return a + (b - a) * self.random()


@pytest.fixture
def rng():
    """Seeded random source so results are reproducible."""
    return random.Random(42)


@pytest.fixture
def scripted_rng():
    """Factory for ScriptedRandom instances."""
    return ScriptedRandom


@pytest.fixture
def red_sphere_scene():
    """A diffuse red sphere resting on a large ground sphere."""
    world = HittableList()
    world.add(Sphere(Vector3(0.0, 0.0, -1.0), 0.5, Lambertian(Vector3(0.8, 0.3, 0.3))))
    world.add(Sphere(Vector3(0.0, -100.5, -1.0), 100.0, Lambertian(Vector3(0.8, 0.8, 0.0))))
    return world
