"""Vertical composition of processed images into one canvas."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from app.dog_stacking.color import check_image
from app.dog_stacking.errors import InvalidParameterError


def stack_vertically(
    images: Sequence[np.ndarray],
    background: tuple[int, int, int] = (0, 0, 0),
) -> np.ndarray:
    """Place images top-to-bottom, left-aligned, on a single canvas.

    The canvas is max(widths) wide and sum(heights) tall. Where an image is
    narrower than the canvas, the remaining area keeps the `background` colour
    (black by default).

    Args:
        images: (H_i, W_i, C>=3) uint8 images, in output order.
        background: RGB fill colour for uncovered canvas.

    Returns:
        An (sum H_i, max W_i, 3) uint8 image.
    """
    if len(images) == 0:
        raise InvalidParameterError("Nothing to stack: no images given.")

    rgb_images = [check_image(image, f"images[{i}]") for i, image in enumerate(images)]
    width = max(image.shape[1] for image in rgb_images)
    height = sum(image.shape[0] for image in rgb_images)

    canvas = np.empty((height, width, 3), dtype=np.uint8)
    canvas[:, :] = np.asarray(background, dtype=np.uint8)

    y = 0
    for image in rgb_images:
        h, w = image.shape[:2]
        canvas[y:y + h, :w] = image
        y += h

    return canvas
