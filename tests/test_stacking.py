import numpy as np
import pytest

from app.dog_stacking.errors import InvalidParameterError
from app.dog_stacking.stacking import stack_vertically


def _solid(h, w, color, channels=3):
    image = np.empty((h, w, channels), dtype=np.uint8)
    image[:, :] = color
    return image


def test_stack_layout_and_black_background():
    top = _solid(3, 4, (255, 0, 0))
    bottom = _solid(2, 2, (0, 255, 0))

    canvas = stack_vertically([top, bottom])

    assert canvas.shape == (5, 4, 3)
    np.testing.assert_array_equal(canvas[:3], top)
    np.testing.assert_array_equal(canvas[3:, :2], bottom)
    np.testing.assert_array_equal(canvas[3:, 2:], 0)


def test_stack_keeps_input_order():
    images = [_solid(1, 1, (value, value, value)) for value in (10, 20, 30)]
    canvas = stack_vertically(images)
    assert canvas[:, 0, 0].tolist() == [10, 20, 30]


def test_stack_custom_background():
    canvas = stack_vertically([_solid(1, 3, (1, 2, 3)), _solid(1, 1, (4, 5, 6))], background=(9, 9, 9))
    np.testing.assert_array_equal(canvas[1, 1:], 9)


def test_stack_single_image_is_a_copy():
    image = _solid(2, 2, (7, 8, 9))
    canvas = stack_vertically([image])

    np.testing.assert_array_equal(canvas, image)
    canvas[0, 0] = 0
    assert image[0, 0].tolist() == [7, 8, 9]


def test_stack_accepts_rgba_inputs():
    canvas = stack_vertically([_solid(2, 2, (1, 2, 3, 4), channels=4)])
    assert canvas.shape == (2, 2, 3)


def test_stack_rejects_empty_input():
    with pytest.raises(InvalidParameterError):
        stack_vertically([])
