"""Point markers drawn on top of output images."""

from __future__ import annotations

import numpy as np

from app.dog_stacking.color import check_image
from app.dog_stacking.errors import InvalidParameterError

MARKER_COLOR = (255, 0, 255)


def draw_point(
    image: np.ndarray,
    x: int,
    y: int,
    radius: int,
    color: tuple[int, int, int] = MARKER_COLOR,
) -> np.ndarray:
    """Return a copy of `image` with a filled disc centred on (x, y).

    The disc covers offsets (i, j) in [-radius, radius) with i^2 + j^2 <= radius^2
    and is clipped to the image bounds; a centre outside the image is allowed.
    """
    rgb = check_image(image)
    if radius < 0:
        raise InvalidParameterError(f"`radius` must be >= 0, got {radius}.")

    result = rgb.copy()
    h, w = result.shape[:2]

    offsets = np.arange(-radius, radius)
    dx, dy = np.meshgrid(offsets, offsets, indexing="xy")
    inside = dx * dx + dy * dy <= radius * radius
    xs = x + dx[inside]
    ys = y + dy[inside]
    in_bounds = (xs >= 0) & (xs < w) & (ys >= 0) & (ys < h)

    result[ys[in_bounds], xs[in_bounds]] = np.asarray(color, dtype=np.uint8)
    return result
