# renderer/tone_mapping.py
import numpy as np

def gamma_correct(linear, gamma=2.0):
    """
    Convert linear radiance to display values. gamma=2 is a plain square root.
    """
    linear = np.maximum(linear, 0.0)
    if gamma == 2.0:
        return np.sqrt(linear)
    return linear ** (1.0 / gamma)

def quantize(image):
    """
    Clip to [0, 1] and truncate to 8-bit.
    """
    return (np.clip(image, 0.0, 1.0) * 255.0).astype(np.uint8)

def to_rgba8(linear, gamma=2.0):
    """
    Turn an averaged linear (H, W, 3) radiance buffer into the (H, W, 4)
    uint8 RGBA buffer the image sinks consume. Alpha is always opaque.
    """
    linear = np.asarray(linear, dtype=np.float64)
    if linear.ndim != 3 or linear.shape[2] != 3:
        raise ValueError(f"Expected a (height, width, 3) buffer, got shape {linear.shape}")
    rgb = quantize(gamma_correct(linear, gamma))
    alpha = np.full(rgb.shape[:2] + (1,), 255, dtype=np.uint8)
    return np.concatenate([rgb, alpha], axis=2)
