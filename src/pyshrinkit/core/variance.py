"""Decomposition of total variance into noise, intrasession and between-subject parts.

All functions here work on parameter-major arrays shaped (P, n), with
subjects on the trailing axis. Variances are unbiased (ddof=1) across
subjects.

The noise estimator assumes the two half-length splits have equal
duration. For unequal splits the factor of 4 below does not hold.
"""

import logging

import numpy as np

from pyshrinkit.types import VarianceComponents

logger = logging.getLogger(__name__)


def across_subject_var(x: np.ndarray) -> np.ndarray:
    """Unbiased variance over the trailing (subject) axis.

    Rows that are exactly constant get a variance of exactly 0; np.var
    alone leaves a rounding residue from the subtracted mean.
    """
    var = np.var(x, axis=-1, ddof=1)
    var[np.ptp(x, axis=-1) == 0] = 0.0
    return var


def sampling_variance(
    x_odd: np.ndarray,
    x_even: np.ndarray,
    average_across_parameters: bool = True,
) -> np.ndarray | float:
    """Noise variance from the odd/even split.

    The difference of two independent replicates carries no signal, so
    var(Xodd - Xeven) / 4 isolates the noise of a single subject-level
    estimate.

    Returns:
        (P,) per-parameter noise variance, or its mean as a float when
        average_across_parameters is True.
    """
    var_u = across_subject_var(x_odd - x_even) / 4
    if average_across_parameters:
        return float(np.mean(var_u))
    return var_u


def shrinkage_weight(var_within: np.ndarray, var_tot: np.ndarray) -> np.ndarray:
    """Compute lambda = var_within / var_tot, clipped to [0, 1].

    Parameters with zero total variance get lambda = 0.
    """
    lam = np.zeros_like(var_tot, dtype=np.float64)
    np.divide(var_within, var_tot, out=lam, where=var_tot > 0)
    return np.clip(lam, 0.0, 1.0)


def estimate_variance_components(
    x1: np.ndarray,
    x2: np.ndarray,
    x_odd: np.ndarray,
    x_even: np.ndarray,
    average_across_parameters: bool = True,
) -> VarianceComponents:
    """Estimate variance components and the shrinkage weight per parameter.

    Args:
        x1, x2: (P, n) half-length split estimates.
        x_odd, x_even: (P, n) odd/even split estimates.
        average_across_parameters: Pool the noise variance into a scalar.

    Returns:
        VarianceComponents with (P,) arrays (var_u is a float if pooled).
    """
    x = (x1 + x2) / 2

    var_u = sampling_variance(x_odd, x_even, average_across_parameters)

    # var(X2 - X1) mixes noise and intrasession signal change
    var_sr = across_subject_var(x2 - x1)
    var_w = (var_sr - 4 * var_u) / 4

    var_within = np.maximum(var_w + var_u, 0.0)
    var_tot = across_subject_var(x)
    var_x = np.maximum(var_tot - var_within, 0.0)
    lam = shrinkage_weight(var_within, var_tot)

    logger.debug(
        "Variance components over %d parameters: mean var_u=%.4g, "
        "mean var_within=%.4g, mean var_x=%.4g, mean lambda=%.3f",
        x.shape[0], np.mean(var_u), np.mean(var_within),
        np.mean(var_x), np.mean(lam),
    )

    return VarianceComponents(
        var_u=var_u,
        var_w=np.maximum(var_w, 0.0),
        var_within=var_within,
        var_tot=var_tot,
        var_x=var_x,
        lam=lam,
    )
