# geometry/scene_loader.py
import json
import os
from typing import Any, Dict, List, Mapping, Sequence, Tuple
from core.vector import Vector3
from geometry.sphere import Sphere
from geometry.world import HittableList
from materials import material_from_spec

def default_scene_descriptors() -> List[Dict[str, Any]]:
    """
    The built-in scene: a matte red sphere on a large yellowish ground sphere,
    flanked by a brushed metal sphere and a glass sphere.
    """
    return [
        {"center": [0.0, 0.0, -1.0], "radius": 0.5,
         "material": {"type": "diffuse", "albedo": [0.8, 0.3, 0.3]}},
        {"center": [0.0, -100.5, -1.0], "radius": 100.0,
         "material": {"type": "diffuse", "albedo": [0.8, 0.8, 0.0]}},
        {"center": [1.0, 0.0, -1.0], "radius": 0.5,
         "material": {"type": "metal", "albedo": [0.8, 0.6, 0.2], "fuzz": 0.3}},
        {"center": [-1.0, 0.0, -1.0], "radius": 0.5,
         "material": {"type": "glass", "refractive_index": 1.5}},
    ]

def sphere_from_descriptor(descriptor: Mapping[str, Any]) -> Sphere:
    """
    Build a Sphere from {"center": [x, y, z], "radius": r, "material": {...}}.
    """
    if not isinstance(descriptor, Mapping):
        raise ValueError(f"Sphere descriptor must be a mapping, got {descriptor!r}")
    missing = [key for key in ("center", "radius", "material") if key not in descriptor]
    if missing:
        raise ValueError(f"Sphere descriptor is missing: {', '.join(missing)}")
    try:
        center = Vector3.from_sequence(descriptor["center"])
        radius = float(descriptor["radius"])
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid sphere geometry in {descriptor!r}: {e}") from None
    return Sphere(center, radius, material_from_spec(descriptor["material"]))

def build_world(descriptors: Sequence[Mapping[str, Any]]) -> HittableList:
    """
    Build the scene from a list of sphere descriptors, keeping their order.
    """
    world = HittableList()
    for index, descriptor in enumerate(descriptors):
        try:
            world.add(sphere_from_descriptor(descriptor))
        except ValueError as e:
            raise ValueError(f"Sphere {index}: {e}") from None
    return world

def load_scene_file(path: str) -> Tuple[List[Dict[str, Any]], Dict[str, Any], Dict[str, Any]]:
    """
    Read a JSON scene file of the form
        {"render": {...}, "camera": {...}, "spheres": [...]}
    and return (sphere descriptors, render section, camera section).
    The render and camera sections are optional.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is not valid JSON or lacks a sphere list
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Scene file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Error parsing scene file {path}: {e}") from None

    if not isinstance(data, dict):
        raise ValueError(f"Scene file {path} must contain a JSON object")
    spheres = data.get("spheres")
    if not isinstance(spheres, list):
        raise ValueError(f"Scene file {path} must contain a 'spheres' list")
    unknown = sorted(set(data) - {"spheres", "render", "camera"})
    if unknown:
        raise ValueError(f"Unknown sections in scene file {path}: {', '.join(unknown)}")
    return spheres, data.get("render") or {}, data.get("camera") or {}
