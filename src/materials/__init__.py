# materials/__init__.py
from typing import Any, Mapping
from core.vector import Vector3
from materials.material import Material
from materials.lambertian import Lambertian
from materials.metal import Metal
from materials.dielectric import Dielectric

__all__ = ["Material", "Lambertian", "Metal", "Dielectric", "material_from_spec"]


def _albedo(spec: Mapping[str, Any]) -> Vector3:
    try:
        return Vector3.from_sequence(spec["albedo"])
    except KeyError:
        raise ValueError(f"Material {spec.get('type')!r} requires an 'albedo'") from None
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid albedo {spec['albedo']!r}: {e}") from None


def _number(spec: Mapping[str, Any], key: str, default=None) -> float:
    value = spec.get(key, default)
    if isinstance(value, bool):
        raise ValueError(f"Invalid {key} {value!r}: expected a number")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid {key} {value!r}: {e}") from None


def material_from_spec(spec: Mapping[str, Any]) -> Material:
    """
    Build a material from a tagged mapping, as found in scene files.

    Supported tags:
        {"type": "diffuse", "albedo": [r, g, b]}
        {"type": "metal", "albedo": [r, g, b], "fuzz": f}
        {"type": "glass", "refractive_index": n}

    Raises:
        ValueError: If the tag is unknown or a required field is missing.
    """
    if not isinstance(spec, Mapping):
        raise ValueError(f"Material spec must be a mapping, got {spec!r}")
    kind = spec.get("type")
    if kind == "diffuse":
        return Lambertian(_albedo(spec))
    if kind == "metal":
        return Metal(_albedo(spec), _number(spec, "fuzz", 0.0))
    if kind == "glass":
        if "refractive_index" not in spec:
            raise ValueError("Material 'glass' requires a 'refractive_index'")
        return Dielectric(_number(spec, "refractive_index"))
    raise ValueError(f"Unknown material type: {kind!r}")
