"""Test-retest evaluation of raw versus shrinkage estimates.

Compares both estimates from one visit against an independent estimate
from a second visit. Negative changes mean shrinkage reduced the error.
"""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class ReliabilityReport:
    """Error of raw and shrinkage estimates against a retest visit.

    Attributes:
        mse_raw: (n,) MSE of the raw estimate per subject.
        mse_shrink: (n,) MSE of the shrinkage estimate per subject.
        mean_relative_change: Mean over subjects of
            (mse_shrink - mse_raw) / mse_raw.
        percent_change: (p1, ..., pk) percent change in squared error
            per parameter, averaged across subjects.
        var_within_true: (p1, ..., pk) within-subject variance measured
            against the retest visit, or None if not computed.
    """

    mse_raw: np.ndarray
    mse_shrink: np.ndarray
    mean_relative_change: float
    percent_change: np.ndarray
    var_within_true: np.ndarray | None = None


def _check_shapes(estimate: np.ndarray, reference: np.ndarray) -> None:
    if estimate.shape != reference.shape:
        raise ValueError(
            f"Shape mismatch: estimate {estimate.shape} vs reference {reference.shape}")


def _relative_change(new: np.ndarray, old: np.ndarray) -> np.ndarray:
    out = np.zeros_like(old, dtype=np.float64)
    np.divide(new - old, old, out=out, where=old > 0)
    return out


def mse_by_subject(estimate: np.ndarray, reference: np.ndarray) -> np.ndarray:
    """Mean squared error per subject (trailing axis) over all parameters."""
    estimate = np.asarray(estimate, dtype=np.float64)
    reference = np.asarray(reference, dtype=np.float64)
    _check_shapes(estimate, reference)
    n = estimate.shape[-1]
    return ((estimate - reference) ** 2).reshape(-1, n).mean(axis=0)


def squared_error_by_parameter(estimate: np.ndarray, reference: np.ndarray) -> np.ndarray:
    """Squared error per parameter, averaged across subjects."""
    estimate = np.asarray(estimate, dtype=np.float64)
    reference = np.asarray(reference, dtype=np.float64)
    _check_shapes(estimate, reference)
    return ((estimate - reference) ** 2).mean(axis=-1)


def evaluate_reliability(
    raw: np.ndarray,
    shrunk: np.ndarray,
    retest: np.ndarray,
    var_within_true: np.ndarray | None = None,
) -> ReliabilityReport:
    """Compare raw and shrinkage estimates against retest estimates.

    Args:
        raw: (p1, ..., pk, n) raw subject-level estimates.
        shrunk: Shrinkage estimates, same shape.
        retest: Estimates from an independent visit, same shape.
        var_within_true: Optional retest-based within-subject variance to
            carry in the report (see within_subject_variance).

    Returns:
        ReliabilityReport. Zero raw error yields a change of 0.
    """
    mse_raw = mse_by_subject(raw, retest)
    mse_shrink = mse_by_subject(shrunk, retest)
    sq_raw = squared_error_by_parameter(raw, retest)
    sq_shrink = squared_error_by_parameter(shrunk, retest)
    return ReliabilityReport(
        mse_raw=mse_raw,
        mse_shrink=mse_shrink,
        mean_relative_change=float(np.mean(_relative_change(mse_shrink, mse_raw))),
        percent_change=100 * _relative_change(sq_shrink, sq_raw),
        var_within_true=var_within_true,
    )


def within_subject_variance(visit1: np.ndarray, visit2: np.ndarray) -> np.ndarray:
    """Within-subject variance from two independent visits.

    Half the across-subject variance of the visit difference.
    """
    visit1 = np.asarray(visit1, dtype=np.float64)
    visit2 = np.asarray(visit2, dtype=np.float64)
    _check_shapes(visit1, visit2)
    return np.var(visit2 - visit1, axis=-1, ddof=1) / 2
