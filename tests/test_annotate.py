import numpy as np
import pytest

from app.dog_stacking.annotate import MARKER_COLOR, draw_point
from app.dog_stacking.errors import InvalidParameterError


def test_draw_point_fills_disc_on_a_copy():
    image = np.zeros((10, 10, 3), dtype=np.uint8)
    marked = draw_point(image, 5, 5, 2)

    assert image.max() == 0
    assert tuple(marked[5, 5]) == MARKER_COLOR
    assert tuple(marked[5, 3]) == MARKER_COLOR  # offset -2 is inside [-r, r)
    assert marked[5, 7].max() == 0  # offset +2 is outside [-r, r)
    assert marked[3, 3].max() == 0  # outside the disc
    assert marked[4, 4].tolist() == list(MARKER_COLOR)


def test_draw_point_is_clipped_at_borders():
    image = np.zeros((4, 4, 3), dtype=np.uint8)
    marked = draw_point(image, 0, 0, 3, color=(1, 2, 3))

    assert marked[0, 0].tolist() == [1, 2, 3]
    assert marked.shape == (4, 4, 3)


def test_draw_point_outside_image_changes_nothing():
    image = np.zeros((4, 4, 3), dtype=np.uint8)
    np.testing.assert_array_equal(draw_point(image, 50, -50, 3), image)


def test_draw_point_zero_radius_changes_nothing():
    image = np.zeros((4, 4, 3), dtype=np.uint8)
    np.testing.assert_array_equal(draw_point(image, 2, 2, 0), image)


def test_draw_point_rejects_negative_radius():
    with pytest.raises(InvalidParameterError):
        draw_point(np.zeros((4, 4, 3), dtype=np.uint8), 1, 1, -1)
