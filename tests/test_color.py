import numpy as np
import pytest

from app.dog_stacking.color import (
    ColorVector,
    check_image,
    to_byte_image,
    to_float_image,
    to_pixel,
    to_vector,
)
from app.dog_stacking.errors import InvalidParameterError


def test_color_vector_arithmetic():
    a = ColorVector(0.5, 0.25, 1.0)
    b = ColorVector(0.25, 0.25, 0.5)

    assert a + b == ColorVector(0.75, 0.5, 1.5)
    assert a - b == ColorVector(0.25, 0.0, 0.5)
    assert a * 2.0 == ColorVector(1.0, 0.5, 2.0)
    assert 2.0 * a == a * 2.0
    assert a / 2.0 == ColorVector(0.25, 0.125, 0.5)
    assert ColorVector().as_tuple() == (0.0, 0.0, 0.0)


def test_to_vector_uses_first_three_channels():
    vector = to_vector((255, 0, 51, 7))
    assert vector.as_tuple() == pytest.approx((1.0, 0.0, 0.2))


def test_to_pixel_clamps_out_of_range_values():
    assert to_pixel(ColorVector(-0.5, 1.5, 0.2)) == (0, 255, 51)
    assert to_pixel(ColorVector(-3.0, 0.0, 7.0)) == (0, 0, 255)


def test_pixel_round_trip_is_exact():
    for value in range(256):
        pixel = (value, 255 - value, value // 2)
        assert to_pixel(to_vector(pixel)) == pixel


def test_image_round_trip_is_exact():
    image = np.tile(np.arange(256, dtype=np.uint8)[np.newaxis, :, np.newaxis], (4, 1, 3))

    floats = to_float_image(image)
    assert floats.dtype == np.float32
    assert floats.min() == 0.0 and floats.max() == 1.0
    np.testing.assert_array_equal(to_byte_image(floats), image)


def test_to_byte_image_clamps_instead_of_wrapping():
    values = np.array([[[-1.0, 0.5, 2.0]]], dtype=np.float32)
    np.testing.assert_array_equal(to_byte_image(values), [[[0, 128, 255]]])


def test_to_float_image_drops_alpha():
    rgba = np.full((2, 3, 4), 255, dtype=np.uint8)
    assert to_float_image(rgba).shape == (2, 3, 3)


@pytest.mark.parametrize(
    "image",
    [
        [[0, 0, 0]],
        np.zeros((4, 4), dtype=np.uint8),
        np.zeros((4, 4, 2), dtype=np.uint8),
        np.zeros((0, 4, 3), dtype=np.uint8),
        np.zeros((4, 4, 3), dtype=np.float32),
    ],
)
def test_check_image_rejects_malformed_input(image):
    with pytest.raises(InvalidParameterError):
        check_image(image)


def test_rgba_input_comes_out_as_opaque_rgb():
    rgba = np.zeros((2, 2, 4), dtype=np.uint8)
    rgba[..., :3] = (10, 20, 30)
    assert len(to_pixel(to_vector(rgba[0, 0]))) == 3
    assert to_byte_image(to_float_image(rgba)).shape == (2, 2, 3)
