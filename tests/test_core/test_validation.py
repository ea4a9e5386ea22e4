"""Tests for replicate input validation."""

import numpy as np
import pytest

from pyshrinkit.core.validation import validate_replicates
from pyshrinkit.errors import (
    AmbiguousSubjectAxisError,
    EmptyInputError,
    InsufficientSubjectsError,
    InvalidTypeError,
    NonFiniteInputError,
    ShapeMismatchError,
    ShrinkageInputError,
)


def _four(arr):
    return arr, arr.copy(), arr.copy(), arr.copy()


def test_flattens_leading_axes():
    """(p1, p2, n) inputs become (p1*p2, n) with shape recorded."""
    x = np.arange(24, dtype=float).reshape(2, 3, 4)
    valid = validate_replicates(*_four(x))
    assert valid.x1.shape == (6, 4)
    assert valid.parameter_shape == (2, 3)
    assert valid.num_subjects == 4
    assert valid.num_parameters == 6
    np.testing.assert_array_equal(valid.x1[5], x[1, 2])


def test_integer_input_is_accepted_as_float():
    x = np.arange(6).reshape(2, 3)
    valid = validate_replicates(*_four(x))
    assert valid.x1.dtype == np.float64


def test_does_not_mutate_inputs():
    x = np.arange(6, dtype=float).reshape(2, 3)
    original = x.copy()
    valid = validate_replicates(*_four(x))
    valid.x1[:] = -1
    np.testing.assert_array_equal(x, original)


def test_empty_input():
    x = np.ones((2, 3))
    with pytest.raises(EmptyInputError):
        validate_replicates(x, x, np.empty((0, 3)), x)


def test_empty_checked_before_shape():
    x = np.ones((2, 3))
    with pytest.raises(EmptyInputError):
        validate_replicates(x, np.empty((0,)), x, x)


@pytest.mark.parametrize("bad", [
    np.array([["a", "b"], ["c", "d"]]),
    np.array([[True, False], [False, True]]),
    np.array([[1 + 1j, 2], [3, 4]]),
    np.array([[1, None], [2, 3]], dtype=object),
])
def test_invalid_type(bad):
    x = np.ones((2, 2))
    with pytest.raises(InvalidTypeError):
        validate_replicates(x, bad, x, x)


def test_invalid_type_is_type_error():
    x = np.ones((2, 2))
    with pytest.raises(TypeError):
        validate_replicates(x, x, x, np.array([["a", "b"], ["c", "d"]]))


def test_shape_mismatch():
    with pytest.raises(ShapeMismatchError, match="Xeven"):
        validate_replicates(np.ones((2, 3)), np.ones((2, 3)),
                            np.ones((2, 3)), np.ones((3, 2)))


def test_one_dimensional_requires_confirmation():
    x = np.array([1.0, 2.0, 3.0])
    with pytest.raises(AmbiguousSubjectAxisError) as excinfo:
        validate_replicates(*_four(x))
    assert excinfo.value.num_candidates == 3
    assert "3" in str(excinfo.value)


def test_one_dimensional_confirmed():
    x = np.array([1.0, 2.0, 3.0])
    valid = validate_replicates(*_four(x), confirm_subject_axis=True)
    assert valid.x1.shape == (1, 3)
    assert valid.parameter_shape == ()
    assert valid.num_subjects == 3


def test_single_subject():
    with pytest.raises(InsufficientSubjectsError):
        validate_replicates(*_four(np.ones((4, 1))))


def test_single_subject_one_dimensional_confirmed():
    with pytest.raises(InsufficientSubjectsError):
        validate_replicates(*_four(np.array([1.0])), confirm_subject_axis=True)


def test_scalar_inputs():
    with pytest.raises(InsufficientSubjectsError):
        validate_replicates(*_four(np.array(1.0)))


def test_errors_share_base_class():
    with pytest.raises(ShrinkageInputError):
        validate_replicates(np.ones((2, 3)), np.ones((2, 3)),
                            np.ones((2, 3)), np.ones((2, 4)))
    with pytest.raises(ValueError):
        validate_replicates(*_four(np.ones((2, 1))))


@pytest.mark.parametrize("bad", [np.nan, np.inf, -np.inf])
def test_non_finite_values_rejected(bad):
    x = np.ones((3, 10))
    x_even = x.copy()
    x_even[2, 4] = bad
    with pytest.raises(NonFiniteInputError, match="Xeven contains 1"):
        validate_replicates(x, x.copy(), x.copy(), x_even)


def test_non_finite_error_is_shrinkage_input_error():
    x = np.ones((3, 10))
    x[0, 0] = np.nan
    with pytest.raises(ShrinkageInputError):
        validate_replicates(*_four(x))
    with pytest.raises(ValueError):
        validate_replicates(*_four(x))
