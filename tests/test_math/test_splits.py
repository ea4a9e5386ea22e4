"""Tests for time-series splitting."""

import numpy as np
import pytest

from pyshrinkit.math.splits import split_halves, split_odd_even


def test_split_halves_even_length():
    series = np.arange(8.0).reshape(8, 1)
    first, second = split_halves(series)
    np.testing.assert_array_equal(first.ravel(), [0, 1, 2, 3])
    np.testing.assert_array_equal(second.ravel(), [4, 5, 6, 7])


def test_split_halves_drops_odd_trailing_timepoint():
    series = np.arange(9.0).reshape(9, 1)
    first, second = split_halves(series)
    assert first.shape == second.shape == (4, 1)
    np.testing.assert_array_equal(second.ravel(), [4, 5, 6, 7])


def test_split_odd_even():
    series = np.arange(7.0).reshape(7, 1)
    odd, even = split_odd_even(series)
    np.testing.assert_array_equal(odd.ravel(), [0, 2, 4])
    np.testing.assert_array_equal(even.ravel(), [1, 3, 5])


def test_splits_keep_regions():
    series = np.zeros((10, 3))
    for piece in (*split_halves(series), *split_odd_even(series)):
        assert piece.shape == (5, 3)


@pytest.mark.parametrize("split", [split_halves, split_odd_even])
def test_too_short(split):
    with pytest.raises(ValueError):
        split(np.zeros((3, 2)))
