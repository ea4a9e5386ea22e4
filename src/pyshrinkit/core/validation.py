"""Input validation and subject-axis resolution."""

from dataclasses import dataclass

import numpy as np

from pyshrinkit.errors import (
    AmbiguousSubjectAxisError,
    EmptyInputError,
    InsufficientSubjectsError,
    InvalidTypeError,
    NonFiniteInputError,
    ShapeMismatchError,
)

_NAMES = ("X1", "X2", "Xodd", "Xeven")


@dataclass(frozen=True)
class ValidatedInput:
    """Replicate arrays flattened to (P, n).

    Attributes:
        x1, x2, x_odd, x_even: (P, n) float64 views/copies of the inputs.
        parameter_shape: Leading shape (p1, ..., pk) to restore on output.
        num_subjects: Size of the subject axis.
    """

    x1: np.ndarray
    x2: np.ndarray
    x_odd: np.ndarray
    x_even: np.ndarray
    parameter_shape: tuple[int, ...]
    num_subjects: int

    @property
    def num_parameters(self) -> int:
        return self.x1.shape[0]


def _is_numeric(arr: np.ndarray) -> bool:
    return arr.dtype.kind in "iuf"


def validate_replicates(
    x1,
    x2,
    x_odd,
    x_even,
    confirm_subject_axis: bool = False,
) -> ValidatedInput:
    """Check the four replicate arrays and resolve the subject axis.

    Args:
        x1, x2: Half-length split estimates, shape (p1, ..., pk, n).
        x_odd, x_even: Odd/even split estimates, same shape.
        confirm_subject_axis: Treat the sole axis of 1-D inputs as subjects.

    Returns:
        ValidatedInput with arrays reshaped to (P, n).

    Raises:
        EmptyInputError, InvalidTypeError, NonFiniteInputError,
        ShapeMismatchError, AmbiguousSubjectAxisError,
        InsufficientSubjectsError.
    """
    arrays = [np.asarray(a) for a in (x1, x2, x_odd, x_even)]

    for name, arr in zip(_NAMES, arrays):
        if arr.size == 0:
            raise EmptyInputError(f"{name} is empty")

    for name, arr in zip(_NAMES, arrays):
        if not _is_numeric(arr):
            raise InvalidTypeError(
                f"{name} must be a real numeric array, got dtype {arr.dtype}")

    for name, arr in zip(_NAMES, arrays):
        if not np.all(np.isfinite(arr)):
            raise NonFiniteInputError(
                f"{name} contains {int(np.sum(~np.isfinite(arr)))} NaN or infinite values")

    shape = arrays[0].shape
    for name, arr in zip(_NAMES[1:], arrays[1:]):
        if arr.shape != shape:
            raise ShapeMismatchError(
                f"{name} has shape {arr.shape}, expected {shape} (shape of X1)")

    if len(shape) == 0:
        raise InsufficientSubjectsError("Inputs are scalars; no subject axis")
    if len(shape) == 1 and not confirm_subject_axis:
        raise AmbiguousSubjectAxisError(shape[0])

    n = shape[-1]
    if n <= 1:
        raise InsufficientSubjectsError(
            f"Subject axis has size {n}; at least 2 subjects are required")

    parameter_shape = shape[:-1]
    flat = [arr.astype(np.float64).reshape(-1, n) for arr in arrays]
    return ValidatedInput(
        x1=flat[0],
        x2=flat[1],
        x_odd=flat[2],
        x_even=flat[3],
        parameter_shape=parameter_shape,
        num_subjects=n,
    )
