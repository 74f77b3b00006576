import numpy as np
import pytest

from app.dog_stacking.errors import ImageDecodeError, ImageEncodeError
from app.dog_stacking.image_io import read_image, write_image


def test_png_round_trip_keeps_rgb_order(tmp_path):
    image = np.zeros((3, 5, 3), dtype=np.uint8)
    image[:, :, 0] = 255
    image[1, 2] = (10, 20, 30)

    path = write_image(tmp_path / "nested" / "red.png", image)
    loaded = read_image(path)

    assert path.exists()
    np.testing.assert_array_equal(loaded, image)


def test_read_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_image(tmp_path / "missing.png")


def test_read_corrupt_file(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"definitely not a png")
    with pytest.raises(ImageDecodeError):
        read_image(path)


def test_write_unknown_extension(tmp_path):
    with pytest.raises(ImageEncodeError):
        write_image(tmp_path / "out.not-an-image-format", np.zeros((2, 2, 3), dtype=np.uint8))
