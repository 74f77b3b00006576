"""Reading and writing raster images (RGB uint8 in memory, OpenCV on disk)."""

from __future__ import annotations

from pathlib import Path

import cv2
import numpy as np

from app.dog_stacking.color import check_image
from app.dog_stacking.errors import ImageDecodeError, ImageEncodeError


def read_image(path: str | Path) -> np.ndarray:
    """Read an image file as an (H, W, 3) uint8 RGB array.

    Raises:
        FileNotFoundError: If `path` does not exist.
        ImageDecodeError: If the file cannot be decoded.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"No such image file: {path}")

    bgr = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if bgr is None:
        raise ImageDecodeError(f"Failed to decode image: {path}")
    return cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB)


def write_image(path: str | Path, image: np.ndarray) -> Path:
    """Encode an RGB image to `path`; the format follows the file extension.

    Raises:
        ImageEncodeError: If OpenCV cannot encode or write the file.
    """
    path = Path(path)
    rgb = check_image(image)
    path.parent.mkdir(parents=True, exist_ok=True)

    bgr = cv2.cvtColor(np.ascontiguousarray(rgb), cv2.COLOR_RGB2BGR)
    try:
        ok = cv2.imwrite(str(path), bgr)
    except cv2.error as exc:
        raise ImageEncodeError(f"Failed to save image `{path}`: {exc}") from exc
    if not ok:
        raise ImageEncodeError(f"Failed to save image `{path}`.")
    return path
