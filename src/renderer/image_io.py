# renderer/image_io.py
import os
import struct
from typing import BinaryIO
import numpy as np
from PIL import Image

BMP_FILE_HEADER_SIZE = 14
BMP_INFO_HEADER_SIZE = 108  # BITMAPV4INFOHEADER
BMP_PIXEL_OFFSET = BMP_FILE_HEADER_SIZE + BMP_INFO_HEADER_SIZE

BI_BITFIELDS = 3
LCS_WINDOWS_COLOR_SPACE = 0x57696E20  # "Win "

RED_MASK = 0x00FF0000
GREEN_MASK = 0x0000FF00
BLUE_MASK = 0x000000FF
ALPHA_MASK = 0xFF000000


def check_pixels(pixels: np.ndarray) -> np.ndarray:
    """
    Validate an RGBA pixel buffer: uint8, shape (height, width, 4), top row first.
    """
    pixels = np.asarray(pixels)
    if pixels.dtype != np.uint8:
        raise ValueError(f"Pixel buffer must be uint8, got {pixels.dtype}")
    if pixels.ndim != 3 or pixels.shape[2] != 4:
        raise ValueError(f"Pixel buffer must have shape (height, width, 4), got {pixels.shape}")
    if pixels.shape[0] == 0 or pixels.shape[1] == 0:
        raise ValueError("Pixel buffer must not be empty")
    return pixels


def bitmap_headers(width: int, height: int) -> bytes:
    """
    The 14-byte file header followed by the 108-byte V4 info header.
    """
    image_size = width * height * 4
    file_header = struct.pack(
        "<2sIHHI",
        b"BM",
        BMP_PIXEL_OFFSET + image_size,
        0, 0,
        BMP_PIXEL_OFFSET,
    )
    info_header = struct.pack(
        "<IiiHHIIiiII",
        BMP_INFO_HEADER_SIZE,
        width,
        height,
        1,   # planes
        32,  # bits per pixel
        BI_BITFIELDS,
        image_size,
        0, 0,  # pixels per meter
        0, 0,  # palette colors used / important
    )
    info_header += struct.pack("<IIIII", RED_MASK, GREEN_MASK, BLUE_MASK, ALPHA_MASK,
                               LCS_WINDOWS_COLOR_SPACE)
    # CIEXYZ endpoints (36 bytes) and RGB gammas (12 bytes) are unused.
    info_header += bytes(48)
    return file_header + info_header


def write_bitmap(pixels: np.ndarray, sink: BinaryIO) -> None:
    """
    Write an RGBA buffer as an uncompressed 32-bit BMP to a binary file object.
    Rows are stored bottom-to-top, each pixel as B, G, R, A.
    """
    pixels = check_pixels(pixels)
    height, width = pixels.shape[:2]
    sink.write(bitmap_headers(width, height))
    bgra = pixels[::-1, :, [2, 1, 0, 3]]
    sink.write(np.ascontiguousarray(bgra).tobytes())


def save_bitmap(pixels: np.ndarray, filepath: str) -> None:
    with open(filepath, "wb") as f:
        write_bitmap(pixels, f)


def save_png(pixels: np.ndarray, filepath: str) -> None:
    """
    Save an RGBA buffer as a PNG file using Pillow.
    """
    pixels = check_pixels(pixels)
    Image.fromarray(np.ascontiguousarray(pixels)).save(filepath, format="PNG")


SAVERS = {
    ".png": save_png,
    ".bmp": save_bitmap,
}


def save_image(pixels: np.ndarray, filepath: str) -> None:
    """
    Save the buffer in the format given by the file extension.

    Raises:
        ValueError: If the extension is not .png or .bmp
        OSError: If the file cannot be written
    """
    ext = os.path.splitext(str(filepath))[1].lower()
    saver = SAVERS.get(ext)
    if saver is None:
        raise ValueError(f"Unsupported image format {ext!r}; use one of {sorted(SAVERS)}")
    saver(pixels, filepath)
