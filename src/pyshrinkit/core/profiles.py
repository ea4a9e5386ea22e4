"""Connectivity profiles and split-half replicate construction."""

from collections.abc import Callable, Sequence

import numpy as np

from pyshrinkit.math.splits import split_halves, split_odd_even
from pyshrinkit.math.transforms import fisher_z, pearson_corr, upper_triangle
from pyshrinkit.types import ReplicateSet


def connectivity_profile(
    series: np.ndarray,
    upper: bool = True,
    fisher: bool = True,
) -> np.ndarray:
    """Compute the region-by-region connectivity of one time series.

    Args:
        series: (T, N) time series.
        upper: Keep only the strict upper triangle.
        fisher: Apply the Fisher Z-transform.

    Returns:
        (N*(N-1)/2,) vector if upper, else (N, N) matrix.
    """
    r = pearson_corr(series)
    if upper:
        r = upper_triangle(r)
    if fisher:
        r = fisher_z(r)
    return r


def subject_replicates(
    series: np.ndarray,
    fun: Callable[[np.ndarray], np.ndarray] = connectivity_profile,
) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """Apply fun to the four splits of one subject's time series.

    Returns:
        (x1, x2, x_odd, x_even) estimates.
    """
    first, second = split_halves(series)
    odd, even = split_odd_even(series)
    return fun(first), fun(second), fun(odd), fun(even)


def stack_replicates(
    per_subject: Sequence[tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]],
) -> ReplicateSet:
    """Stack per-subject replicate tuples along a trailing subject axis."""
    if len(per_subject) == 0:
        raise ValueError("No subjects to stack")
    parts = [
        np.stack([np.asarray(rep[i], dtype=np.float64) for rep in per_subject], axis=-1)
        for i in range(4)
    ]
    return ReplicateSet(x1=parts[0], x2=parts[1], x_odd=parts[2], x_even=parts[3])
