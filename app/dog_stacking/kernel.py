"""Gaussian kernel evaluation and the window (radius) policy.

The kernel is the isotropic 2D Gaussian density

    w(dx, dy) = exp(-(dx^2 + dy^2) / (2 sigma^2)) / (2 pi sigma^2)

sampled on the integer window dx, dy in [-radius, radius). Tables are built
once per sigma and reused for every pixel.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from app.dog_stacking.errors import InvalidParameterError

logger = logging.getLogger(__name__)

DEFAULT_RADIUS_FACTOR = 3.0


def check_positive(value: float, name: str) -> float:
    """Return `value` as a float, raising if it is not a finite number > 0."""
    try:
        value = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(f"`{name}` must be a number, got {value!r}.") from exc
    if not math.isfinite(value) or value <= 0.0:
        raise InvalidParameterError(f"`{name}` must be a finite number > 0, got {value}.")
    return value


def gaussian_weight(dx, dy, sigma: float):
    """Evaluate the 2D Gaussian density at integer offset(s) (dx, dy).

    Args:
        dx: Horizontal offset(s); a scalar or a numpy array.
        dy: Vertical offset(s), broadcastable against `dx`.
        sigma: Standard deviation (> 0).

    Returns:
        A float for scalar offsets, otherwise an array of weights.

    Raises:
        InvalidParameterError: If `sigma` is not a finite number > 0, or so small that
            the weights overflow.
    """
    sigma = check_positive(sigma, "sigma")
    two_sigma_sq = 2.0 * sigma * sigma
    dist_sq = np.square(dx, dtype=np.float64) + np.square(dy, dtype=np.float64)
    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        weight = np.exp(-dist_sq / two_sigma_sq) / (math.pi * two_sigma_sq)
    if two_sigma_sq == 0.0 or not np.all(np.isfinite(weight)):
        raise InvalidParameterError(f"`sigma` is too small to evaluate the Gaussian, got {sigma}.")
    if np.ndim(weight) == 0:
        return float(weight)
    return weight


def kernel_radius(sigma: float, radius_factor: float = DEFAULT_RADIUS_FACTOR) -> int:
    """Half-extent of the sampling window for a Gaussian of std `sigma`.

    The window covers `ceil(radius_factor * sigma)` pixels on each side (at least
    one), i.e. +-3 sigma by default, which holds ~99% of the Gaussian's mass
    along each axis.
    """
    sigma = check_positive(sigma, "sigma")
    radius_factor = check_positive(radius_factor, "radius_factor")
    return max(1, int(math.ceil(radius_factor * sigma)))


def _offset_grid(radius: int) -> tuple[np.ndarray, np.ndarray]:
    if int(radius) < 1:
        raise InvalidParameterError(f"`radius` must be >= 1, got {radius}.")
    offsets = np.arange(-int(radius), int(radius), dtype=np.float64)
    # dy varies along rows, dx along columns
    return np.meshgrid(offsets, offsets, indexing="xy")


def gaussian_kernel_table(sigma: float, radius: int) -> np.ndarray:
    """Weights for offsets in [-radius, radius), shape (2*radius, 2*radius).

    `table[j + radius, i + radius]` is the weight of the neighbour at (x + i, y + j).
    """
    dx, dy = _offset_grid(radius)
    table = gaussian_weight(dx, dy, sigma)
    logger.debug("Gaussian kernel sigma=%.4g radius=%d sum=%.6f", sigma, radius, float(table.sum()))
    return table


def dog_kernel_table(sigma: float, k: float, radius: int) -> np.ndarray:
    """Difference-of-weights table `w(k * sigma) - w(sigma)` over one shared window."""
    sigma = check_positive(sigma, "sigma")
    k = check_positive(k, "k")
    return gaussian_kernel_table(k * sigma, radius) - gaussian_kernel_table(sigma, radius)
