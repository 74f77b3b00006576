"""Difference of Gaussians: the band-pass stage of the pipeline.

    DoG(image, sigma, k) = blur(image, k * sigma) - blur(image, sigma)

with the subtraction done per channel on normalized floats and clamped back to
[0, 255]. With k < 1 the first blur is the finer one, so the response keeps the
detail between the two scales (edges and blobs); with k > 1 it is the inverse.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from app.dog_stacking.blur import BACKENDS, BOUNDARIES, check_mode, convolve_image, gaussian_blur
from app.dog_stacking.color import check_image, to_byte_image, to_float_image
from app.dog_stacking.errors import DimensionMismatchError, InvalidParameterError
from app.dog_stacking.kernel import DEFAULT_RADIUS_FACTOR, check_positive, dog_kernel_table, kernel_radius

logger = logging.getLogger(__name__)

METHODS = ("two_pass", "single_pass")


def difference(image_a: np.ndarray, image_b: np.ndarray) -> np.ndarray:
    """Per-channel `image_a - image_b`, clamped to [0, 255].

    Raises:
        DimensionMismatchError: If the two images differ in height or width.
    """
    check_image(image_a, "image_a")
    check_image(image_b, "image_b")
    if image_a.shape[:2] != image_b.shape[:2]:
        raise DimensionMismatchError(
            f"Cannot subtract images of different sizes: {image_a.shape[:2]} vs {image_b.shape[:2]}."
        )
    return to_byte_image(to_float_image(image_a) - to_float_image(image_b))


@dataclass(frozen=True)
class DoGStages:
    """A DoG response together with the blurs it was built from.

    The blurs are None for the single-pass method, which never forms them.
    """

    dog: np.ndarray
    blur_sigma: Optional[np.ndarray] = None
    blur_k_sigma: Optional[np.ndarray] = None


def dog_stages(
    image: np.ndarray,
    sigma: float,
    k: float,
    *,
    radius_factor: float = DEFAULT_RADIUS_FACTOR,
    boundary: str = "zero",
    method: str = "two_pass",
    backend: str = "opencv",
) -> DoGStages:
    """Same as `difference_of_gaussians`, but also returns the intermediate blurs."""
    sigma = check_positive(sigma, "sigma")
    k = check_positive(k, "k")
    check_positive(radius_factor, "radius_factor")
    check_mode(method, METHODS, "method")
    check_mode(boundary, BOUNDARIES, "boundary")
    check_mode(backend, BACKENDS, "backend")
    check_image(image)

    if method == "single_pass":
        if boundary != "zero":
            raise InvalidParameterError("The single-pass method only supports the 'zero' boundary.")
        radius = max(kernel_radius(sigma, radius_factor), kernel_radius(k * sigma, radius_factor))
        logger.debug("Single-pass DoG: sigma=%.4g k=%.4g radius=%d", sigma, k, radius)
        dog = convolve_image(image, dog_kernel_table(sigma, k, radius), boundary=boundary, backend=backend)
        return DoGStages(dog=dog)

    options = dict(radius_factor=radius_factor, boundary=boundary, backend=backend)
    scaled = gaussian_blur(image, k * sigma, **options)
    base = gaussian_blur(image, sigma, **options)
    return DoGStages(dog=difference(scaled, base), blur_sigma=base, blur_k_sigma=scaled)


def difference_of_gaussians(
    image: np.ndarray,
    sigma: float,
    k: float,
    *,
    radius_factor: float = DEFAULT_RADIUS_FACTOR,
    boundary: str = "zero",
    method: str = "two_pass",
    backend: str = "opencv",
) -> np.ndarray:
    """Compute the DoG response of an image.

    Args:
        image: (H, W, C>=3) uint8 image.
        sigma: Standard deviation of the second blur (> 0).
        k: Scale of the first blur relative to `sigma` (> 0).
        radius_factor: Window half-extent in units of sigma.
        boundary: "zero" (edge darkening, default) or "renormalize".
        method: "two_pass" blurs at each scale with its own window and subtracts
            the two byte images. "single_pass" convolves once with the
            difference-of-weights kernel over the larger of the two windows and
            skips the intermediate rounding; it supports only the "zero" boundary.
        backend: "opencv" or "reference".

    Returns:
        A new (H, W, 3) uint8 image of the same height and width.

    Raises:
        InvalidParameterError: On invalid parameters (checked before any work).
    """
    return dog_stages(
        image,
        sigma,
        k,
        radius_factor=radius_factor,
        boundary=boundary,
        method=method,
        backend=backend,
    ).dog
