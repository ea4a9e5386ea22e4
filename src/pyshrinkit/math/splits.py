"""Split a time series into independent halves.

Both schemes return two pieces of equal length so that the noise scaling
used by the variance decomposition holds.
"""

import numpy as np

MIN_TIMEPOINTS = 4


def _check_length(series: np.ndarray) -> np.ndarray:
    series = np.asarray(series)
    if series.ndim == 0 or series.shape[0] < MIN_TIMEPOINTS:
        raise ValueError(
            f"Need at least {MIN_TIMEPOINTS} timepoints to split, "
            f"got shape {series.shape}")
    return series


def split_halves(series: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """First and second half along the time axis (axis 0).

    An odd trailing timepoint is dropped.
    """
    series = _check_length(series)
    half = series.shape[0] // 2
    return series[:half], series[half:2 * half]


def split_odd_even(series: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Odd- and even-indexed timepoints (1-based), trimmed to equal length."""
    series = _check_length(series)
    half = series.shape[0] // 2
    return series[0:2 * half:2], series[1:2 * half:2]
