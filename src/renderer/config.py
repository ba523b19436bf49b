# renderer/config.py
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional, Tuple
from camera.camera import Camera
from core.vector import Vector3

Triple = Tuple[float, float, float]

RENDER_KEYS = ("image_width", "image_height", "samples_per_pixel", "max_bounce_depth", "seed")
CAMERA_KEYS = (
    "look_from",
    "look_at",
    "up",
    "vertical_fov_degrees",
    "aspect_ratio",
    "aperture",
    "focus_dist",
)

INT_FIELDS = ("image_width", "image_height", "samples_per_pixel", "max_bounce_depth", "seed")
FLOAT_FIELDS = ("vertical_fov_degrees", "aspect_ratio", "aperture", "focus_dist")
VECTOR_FIELDS = ("look_from", "look_at", "up")


def _as_int(name: str, value: Any) -> int:
    # bool is an int subclass; true/false in a scene file is a mistake
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    return value


def _as_float(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number, got {value!r}")
    return float(value)


def _as_triple(name: str, value: Any) -> Triple:
    if isinstance(value, (str, bytes)):
        raise ValueError(f"{name} must have three numeric components, got {value!r}")
    try:
        triple = tuple(_as_float(name, c) for c in value)
    except TypeError:
        raise ValueError(f"{name} must have three numeric components, got {value!r}") from None
    if len(triple) != 3:
        raise ValueError(f"{name} must have three components, got {value!r}")
    return triple


@dataclass(frozen=True)
class RenderConfig:
    """
    Everything a render needs: image size, sampling, bounce budget, camera
    placement and the random seed. Layered as defaults, then the scene file,
    then command-line flags.
    """
    image_width: int = 200
    image_height: int = 100
    samples_per_pixel: int = 100
    max_bounce_depth: int = 50
    look_from: Triple = (0.0, 0.0, 0.0)
    look_at: Triple = (0.0, 0.0, -1.0)
    up: Triple = (0.0, 1.0, 0.0)
    vertical_fov_degrees: float = 90.0
    aspect_ratio: Optional[float] = None  # None means width / height
    aperture: float = 0.0  # 0 gives a pinhole camera
    focus_dist: float = 1.0
    seed: Optional[int] = None  # None draws a fresh seed

    def __post_init__(self):
        # Frozen, so normalized values go in through object.__setattr__
        for name in INT_FIELDS:
            value = getattr(self, name)
            if name == "seed" and value is None:
                continue
            object.__setattr__(self, name, _as_int(name, value))
        for name in FLOAT_FIELDS:
            value = getattr(self, name)
            if name == "aspect_ratio" and value is None:
                continue
            object.__setattr__(self, name, _as_float(name, value))
        for name in VECTOR_FIELDS:
            object.__setattr__(self, name, _as_triple(name, getattr(self, name)))

        if self.image_width <= 0 or self.image_height <= 0:
            raise ValueError(
                f"Image size must be positive, got {self.image_width}x{self.image_height}"
            )
        if self.samples_per_pixel <= 0:
            raise ValueError(f"samples_per_pixel must be positive, got {self.samples_per_pixel}")
        if self.max_bounce_depth <= 0:
            raise ValueError(f"max_bounce_depth must be positive, got {self.max_bounce_depth}")
        if self.aspect_ratio is not None and self.aspect_ratio <= 0:
            raise ValueError(f"aspect_ratio must be positive, got {self.aspect_ratio}")

    @property
    def effective_aspect_ratio(self) -> float:
        if self.aspect_ratio is None:
            return self.image_width / self.image_height
        return self.aspect_ratio

    @classmethod
    def from_dict(cls, render: Optional[Mapping[str, Any]] = None,
                  camera: Optional[Mapping[str, Any]] = None) -> "RenderConfig":
        """
        Build a config from the "render" and "camera" sections of a scene file.
        Raises ValueError on unknown keys or values of the wrong type.
        """
        values = {}
        for section, allowed, label in ((render, RENDER_KEYS, "render"), (camera, CAMERA_KEYS, "camera")):
            if not section:
                continue
            if not isinstance(section, Mapping):
                raise ValueError(f"The {label} section must be an object, got {section!r}")
            unknown = sorted(set(section) - set(allowed))
            if unknown:
                raise ValueError(f"Unknown {label} settings: {', '.join(unknown)}")
            values.update(section)
        return cls(**values)

    def with_overrides(self, **overrides: Any) -> "RenderConfig":
        """
        Returns a copy with the non-None overrides applied.
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(unknown)}")
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def make_camera(self) -> Camera:
        return Camera(
            Vector3.from_sequence(self.look_from),
            Vector3.from_sequence(self.look_at),
            Vector3.from_sequence(self.up),
            self.vertical_fov_degrees,
            self.effective_aspect_ratio,
            aperture=self.aperture,
            focus_dist=self.focus_dist,
        )
