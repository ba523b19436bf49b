"""Tests for ray casting, the render loop and tone mapping.

Tests cover:
- Sky gradient endpoints
- cast_ray: miss, absorption, bounce budget exhaustion, attenuation
- Renderer: buffer shape/dtype, determinism under a fixed seed, scan order
- End-to-end render of the red sphere scene
- Gamma correction, clipping and quantization
"""

import random

import numpy as np
import pytest

from camera.camera import Camera
from core.ray import Ray
from core.vector import Vector3
from geometry.sphere import Sphere
from geometry.world import HittableList
from materials.material import Material
from materials.metal import Metal
from renderer.raytracer import Renderer, cast_ray, sky_color
from renderer.tone_mapping import gamma_correct, quantize, to_rgba8


class Absorbing(Material):
    """Material that absorbs every ray."""

    def scatter(self, ray_in, rec, rng):
        return None


class Trapping(Material):
    """Material that always bounces back toward the sphere center."""

    def scatter(self, ray_in, rec, rng):
        return Ray(rec.point, -rec.normal), Vector3(1.0, 1.0, 1.0)


class TestSkyColor:
    """Tests for the background gradient."""

    def test_straight_up_is_sky_blue(self):
        assert tuple(sky_color(Vector3(0.0, 3.0, 0.0))) == pytest.approx((0.5, 0.7, 1.0))

    def test_straight_down_is_white(self):
        assert tuple(sky_color(Vector3(0.0, -1.0, 0.0))) == pytest.approx((1.0, 1.0, 1.0))

    def test_horizon_is_halfway(self):
        assert tuple(sky_color(Vector3(1.0, 0.0, 0.0))) == pytest.approx((0.75, 0.85, 1.0))


class TestCastRay:
    """Tests for iterative path integration."""

    def test_miss_returns_sky(self, rng):
        ray = Ray(Vector3(0.0, 0.0, 0.0), Vector3(0.0, 1.0, 0.0))
        color = cast_ray(ray, HittableList(), 50, rng)
        assert tuple(color) == pytest.approx((0.5, 0.7, 1.0))

    def test_absorption_returns_black(self, rng):
        world = HittableList([Sphere(Vector3(0.0, 0.0, -2.0), 0.5, Absorbing())])
        ray = Ray(Vector3(0.0, 0.0, 0.0), Vector3(0.0, 0.0, -1.0))
        assert tuple(cast_ray(ray, world, 50, rng)) == (0.0, 0.0, 0.0)

    def test_single_bounce_is_attenuated_sky(self, rng):
        """A mirror facing the camera sends the ray back into the sky."""
        albedo = Vector3(0.9, 0.5, 0.1)
        world = HittableList([Sphere(Vector3(0.0, 0.0, -2.0), 0.5, Metal(albedo))])
        ray = Ray(Vector3(0.0, 0.0, 0.0), Vector3(0.0, 0.0, -1.0))

        color = cast_ray(ray, world, 50, rng)

        horizon = sky_color(Vector3(0.0, 0.0, 1.0))
        assert tuple(color) == pytest.approx(tuple(albedo * horizon))

    def test_bounce_budget_exhausted_returns_black(self, rng):
        """A ray trapped inside a sphere runs out of bounces."""
        world = HittableList([Sphere(Vector3(0.0, 0.0, 0.0), 5.0, Trapping())])
        ray = Ray(Vector3(0.0, 0.0, 0.0), Vector3(0.3, 0.2, -1.0))
        assert tuple(cast_ray(ray, world, 10, rng)) == (0.0, 0.0, 0.0)

    def test_budget_of_one_cannot_bounce(self, rng):
        world = HittableList([Sphere(Vector3(0.0, 0.0, -2.0), 0.5, Metal(Vector3(1.0, 1.0, 1.0)))])
        ray = Ray(Vector3(0.0, 0.0, 0.0), Vector3(0.0, 0.0, -1.0))
        assert tuple(cast_ray(ray, world, 1, rng)) == (0.0, 0.0, 0.0)
        assert tuple(cast_ray(ray, world, 2, rng)) != (0.0, 0.0, 0.0)

    def test_radiance_bounded_by_sky(self, rng, red_sphere_scene):
        for _ in range(50):
            direction = Vector3(rng.uniform(-1, 1), rng.uniform(-1, 1), -1.0)
            color = cast_ray(Ray(Vector3(0.0, 0.0, 0.0), direction), red_sphere_scene, 50, rng)
            assert 0.0 <= color.x <= 1.0
            assert 0.0 <= color.y <= 1.0
            assert 0.0 <= color.z <= 1.0


class TestRenderer:
    """Tests for the per-pixel sampling loop."""

    def test_buffer_shape_and_alpha(self, rng):
        renderer = Renderer(8, 4, samples_per_pixel=2, max_depth=5)
        pixels = renderer.render(Camera.default(2.0), HittableList(), rng)
        assert pixels.shape == (4, 8, 4)
        assert pixels.dtype == np.uint8
        assert np.all(pixels[:, :, 3] == 255)

    def test_top_row_looks_higher_into_the_sky(self, rng):
        """Row 0 is the top of the image, which looks further up into the sky."""
        renderer = Renderer(4, 6, samples_per_pixel=4, max_depth=5)
        pixels = renderer.render(Camera.default(4 / 6), HittableList(), rng)
        top_red = int(pixels[0, :, 0].mean())
        bottom_red = int(pixels[-1, :, 0].mean())
        assert top_red < bottom_red

    def test_same_seed_is_byte_identical(self, red_sphere_scene):
        renderer = Renderer(12, 6, samples_per_pixel=3, max_depth=10)
        camera = Camera.default(2.0)
        first = renderer.render(camera, red_sphere_scene, random.Random(1234))
        second = renderer.render(camera, red_sphere_scene, random.Random(1234))
        assert first.tobytes() == second.tobytes()

    def test_different_seeds_differ(self, red_sphere_scene):
        renderer = Renderer(12, 6, samples_per_pixel=3, max_depth=10)
        camera = Camera.default(2.0)
        first = renderer.render_linear(camera, red_sphere_scene, random.Random(1))
        second = renderer.render_linear(camera, red_sphere_scene, random.Random(2))
        assert not np.array_equal(first, second)

    def test_render_pixel_averages_samples(self, rng):
        renderer = Renderer(1, 1, samples_per_pixel=16, max_depth=5)
        color = renderer.render_pixel(0, 0, Camera.default(1.0), HittableList(), rng)
        # Every sample is somewhere on the sky gradient
        assert 0.5 <= color.x <= 1.0
        assert color.z == pytest.approx(1.0)

    def test_red_sphere_end_to_end(self, red_sphere_scene):
        """Center pixel of the classic scene shows the red sphere.

        The surface is lit by the sky and the yellow ground, so red dominates
        green and blue by a wide margin at any sample count.
        """
        renderer = Renderer(20, 10, samples_per_pixel=32, max_depth=50)
        pixels = renderer.render(Camera.default(2.0), red_sphere_scene, random.Random(2024))
        r, g, b, a = (int(c) for c in pixels[5, 10])
        assert a == 255
        assert r > g + 40
        assert r > b + 40
        assert 110 <= r <= 240

    def test_red_sphere_center_pixel_bytes(self, red_sphere_scene, scripted_rng):
        """Exact bytes of the sphere's center under a pinned random source.

        Every jitter is 0.5 and every unit-sphere sample is the origin, so the
        primary ray hits (0, 0, -0.5), bounces straight along the normal into
        the sky and returns albedo * (0.75, 0.85, 1.0) = (0.6, 0.255, 0.3).
        After sqrt and truncation that is (197, 128, 139).
        """
        renderer = Renderer(1, 1, samples_per_pixel=1, max_depth=50)
        pixels = renderer.render(Camera.default(2.0), red_sphere_scene, scripted_rng([0.5]))
        assert pixels.shape == (1, 1, 4)
        assert tuple(int(c) for c in pixels[0, 0]) == (197, 128, 139, 255)

    def test_sky_center_pixel_bytes(self, scripted_rng):
        """Straight ahead the sky is (0.75, 0.85, 1.0), stored as (220, 235, 255)."""
        renderer = Renderer(1, 1, samples_per_pixel=1)
        pixels = renderer.render(Camera.default(2.0), HittableList(), scripted_rng([0.5]))
        assert tuple(int(c) for c in pixels[0, 0]) == (220, 235, 255, 255)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"width": 0, "height": 10},
            {"width": 10, "height": -1},
            {"width": 10, "height": 10, "samples_per_pixel": 0},
            {"width": 10, "height": 10, "max_depth": 0},
        ],
    )
    def test_invalid_settings_rejected(self, kwargs):
        with pytest.raises(ValueError):
            Renderer(**kwargs)


class TestToneMapping:
    """Tests for gamma correction and quantization."""

    def test_gamma_two_is_square_root(self):
        linear = np.array([[[0.0, 0.25, 1.0]]])
        assert np.allclose(gamma_correct(linear), [[[0.0, 0.5, 1.0]]])

    def test_general_gamma(self):
        linear = np.array([[[0.125, 1.0, 0.0]]])
        assert np.allclose(gamma_correct(linear, gamma=3.0), [[[0.5, 1.0, 0.0]]])

    def test_quantize_clips_and_truncates(self):
        values = np.array([[[-0.5, 0.5, 1.5]]])
        assert quantize(values).tolist() == [[[0, 127, 255]]]

    def test_to_rgba8(self):
        linear = np.array([[[1.0, 0.25, 4.0], [0.0, 0.0, 0.0]]])
        pixels = to_rgba8(linear)
        assert pixels.shape == (1, 2, 4)
        assert pixels.dtype == np.uint8
        assert pixels.tolist() == [[[255, 127, 255, 255], [0, 0, 0, 255]]]

    def test_to_rgba8_rejects_bad_shape(self):
        with pytest.raises(ValueError):
            to_rgba8(np.zeros((2, 2, 4)))
