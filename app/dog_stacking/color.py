"""Colour vectors and the mapping between 8-bit pixels and normalized floats.

Pixels are processed as normalized RGB triples in [0, 1]. Every conversion back
to 8-bit goes through `to_pixel` / `to_byte_image`, which clamp before scaling,
so out-of-range intermediate values saturate instead of wrapping around.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from app.dog_stacking.errors import InvalidParameterError


@dataclass(frozen=True)
class ColorVector:
    """An RGB sample as three floats."""

    r: float = 0.0
    g: float = 0.0
    b: float = 0.0

    def __add__(self, other: ColorVector) -> ColorVector:
        return ColorVector(self.r + other.r, self.g + other.g, self.b + other.b)

    def __sub__(self, other: ColorVector) -> ColorVector:
        return ColorVector(self.r - other.r, self.g - other.g, self.b - other.b)

    def __mul__(self, scale: float) -> ColorVector:
        return ColorVector(self.r * scale, self.g * scale, self.b * scale)

    __rmul__ = __mul__

    def __truediv__(self, scale: float) -> ColorVector:
        return ColorVector(self.r / scale, self.g / scale, self.b / scale)

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.r, self.g, self.b)


def _clamp(value: float, lo: float = 0.0, hi: float = 1.0) -> float:
    if value < lo:
        return lo
    if value > hi:
        return hi
    return value


def to_vector(pixel: Sequence[int]) -> ColorVector:
    """Map the first three channels of an 8-bit pixel to [0, 1]."""
    return ColorVector(float(pixel[0]) / 255.0, float(pixel[1]) / 255.0, float(pixel[2]) / 255.0)


def to_pixel(vector: ColorVector) -> tuple[int, int, int]:
    """Clamp a colour vector to [0, 1] and map it to an 8-bit RGB pixel.

    There is no alpha channel: output images are 3-channel RGB and therefore
    fully opaque.
    """
    return tuple(int(round(_clamp(c) * 255.0)) for c in vector.as_tuple())  # type: ignore[return-value]


def check_image(image: np.ndarray, name: str = "image") -> np.ndarray:
    """Validate an (H, W, C>=3) uint8 image and return a view of its RGB channels."""
    if not isinstance(image, np.ndarray):
        raise InvalidParameterError(f"`{name}` must be a numpy array, got {type(image).__name__}.")
    if image.ndim != 3 or image.shape[2] < 3:
        raise InvalidParameterError(f"`{name}` must have shape (H, W, C>=3), got {image.shape}.")
    if image.shape[0] == 0 or image.shape[1] == 0:
        raise InvalidParameterError(f"`{name}` must not be empty, got {image.shape}.")
    if image.dtype != np.uint8:
        raise InvalidParameterError(f"`{name}` must be uint8, got {image.dtype}.")
    return image[:, :, :3]


def to_float_image(image: np.ndarray) -> np.ndarray:
    """Map an (H, W, C>=3) uint8 image to an (H, W, 3) float32 array in [0, 1]."""
    rgb = check_image(image)
    return rgb.astype(np.float32) / np.float32(255.0)


def to_byte_image(array: np.ndarray) -> np.ndarray:
    """Clamp an (H, W, 3) float array to [0, 1] and map it to uint8."""
    clipped = np.clip(np.asarray(array, dtype=np.float32), 0.0, 1.0)
    return np.rint(clipped * np.float32(255.0)).astype(np.uint8)
