"""Gaussian blur (the convolution stage of the DoG pipeline).

For every output pixel (x, y) the blur accumulates

    sum_{i, j in [-r, r)} color(x + i, y + j) * w(i, j)

where `w` is the precomputed kernel table and `r` the kernel radius.

Boundary policies:
    - "zero" (default): neighbours outside the image are skipped and the kernel
      is not renormalized, so pixels near the border come out darker than the
      interior. Both blurs of a DoG darken similarly, so the subtraction cancels
      most of it.
    - "renormalize": the accumulated colour is divided by the sum of the
      in-bounds weights, so flat regions stay flat right up to the border.

Backends:
    - "opencv": `cv2.filter2D` with a constant (zero) border.
    - "reference": a plain per-pixel Python loop over `ColorVector`s. Slow; meant
      for small images and for checking the OpenCV path.
"""

from __future__ import annotations

import logging

import cv2
import numpy as np

from app.dog_stacking.color import ColorVector, check_image, to_byte_image, to_float_image, to_pixel, to_vector
from app.dog_stacking.errors import InvalidParameterError
from app.dog_stacking.kernel import DEFAULT_RADIUS_FACTOR, gaussian_kernel_table, kernel_radius

logger = logging.getLogger(__name__)

BOUNDARIES = ("zero", "renormalize")
BACKENDS = ("opencv", "reference")


def check_mode(value: str, choices: tuple[str, ...], name: str) -> str:
    if value not in choices:
        raise InvalidParameterError(f"`{name}` must be one of {list(choices)}, got {value!r}.")
    return value


def _filter(src: np.ndarray, table: np.ndarray, radius: int) -> np.ndarray:
    # anchor (r, r) maps kernel column c to neighbour offset c - r, i.e. [-r, r)
    return cv2.filter2D(
        src,
        cv2.CV_32F,
        table.astype(np.float32),
        anchor=(radius, radius),
        borderType=cv2.BORDER_CONSTANT,
    )


def _convolve_opencv(image: np.ndarray, table: np.ndarray, radius: int, renormalize: bool) -> np.ndarray:
    src = to_float_image(image)
    acc = _filter(src, table, radius)
    if renormalize:
        coverage = _filter(np.ones(src.shape[:2], dtype=np.float32), table, radius)
        acc = acc / coverage[:, :, np.newaxis]
    return to_byte_image(acc)


def _convolve_reference(image: np.ndarray, table: np.ndarray, radius: int, renormalize: bool) -> np.ndarray:
    rgb = check_image(image)
    height, width = rgb.shape[:2]
    vectors = [[to_vector(pixel) for pixel in row] for row in rgb]
    weights = table.tolist()

    result = np.empty((height, width, 3), dtype=np.uint8)
    for y in range(height):
        for x in range(width):
            color = ColorVector()
            total = 0.0
            for j in range(-radius, radius):
                if y + j < 0 or y + j >= height:
                    continue
                row = vectors[y + j]
                weight_row = weights[j + radius]
                for i in range(-radius, radius):
                    if x + i < 0 or x + i >= width:
                        continue
                    weight = weight_row[i + radius]
                    color = color + row[x + i] * weight
                    total += weight
            if renormalize:
                color = color / total
            result[y, x] = to_pixel(color)
    return result


def convolve_image(
    image: np.ndarray,
    table: np.ndarray,
    *,
    boundary: str = "zero",
    backend: str = "opencv",
) -> np.ndarray:
    """Correlate an image with a square (2r, 2r) weight table and map back to uint8.

    Args:
        image: (H, W, C>=3) uint8 image; only the first three channels are read.
        table: Weights for offsets [-r, r) as built by `app.dog_stacking.kernel`.
        boundary: "zero" or "renormalize".
        backend: "opencv" or "reference".

    Returns:
        A new (H, W, 3) uint8 image.
    """
    check_image(image)
    check_mode(boundary, BOUNDARIES, "boundary")
    check_mode(backend, BACKENDS, "backend")
    if table.ndim != 2 or table.shape[0] != table.shape[1] or table.shape[0] % 2 != 0:
        raise InvalidParameterError(f"Kernel table must be square with even side, got {table.shape}.")
    with np.errstate(over="ignore", invalid="ignore"):
        finite = np.all(np.isfinite(table.astype(np.float32)))
    if not finite:
        raise InvalidParameterError("Kernel weights overflow single precision; sigma is too small.")
    radius = table.shape[0] // 2

    renormalize = boundary == "renormalize"
    if backend == "reference":
        return _convolve_reference(image, table, radius, renormalize)
    return _convolve_opencv(image, table, radius, renormalize)


def gaussian_blur(
    image: np.ndarray,
    sigma: float,
    *,
    radius_factor: float = DEFAULT_RADIUS_FACTOR,
    boundary: str = "zero",
    backend: str = "opencv",
) -> np.ndarray:
    """Blur an image with a Gaussian of standard deviation `sigma`.

    Returns:
        A new (H, W, 3) uint8 image with the same height and width as `image`.

    Raises:
        InvalidParameterError: On sigma/radius_factor <= 0, an unknown boundary or
            backend, or a malformed image.
    """
    check_image(image)
    radius = kernel_radius(sigma, radius_factor)
    table = gaussian_kernel_table(sigma, radius)
    logger.debug("Blurring %s image: sigma=%.4g radius=%d boundary=%s", image.shape, sigma, radius, boundary)
    return convolve_image(image, table, boundary=boundary, backend=backend)
