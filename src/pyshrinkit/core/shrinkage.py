"""Shrinkage of subject-level estimates toward the group mean.

Runs validation, variance decomposition and the final convex combination
in sequence. Inputs of any shape (p1, ..., pk, n) are flattened to (P, n)
internally and reshaped back on return.
"""

import logging

import numpy as np

from pyshrinkit.core.validation import validate_replicates
from pyshrinkit.core.variance import estimate_variance_components
from pyshrinkit.types import ShrinkageOptions, ShrinkageResult, VarianceComponents

logger = logging.getLogger(__name__)


def combine(x: np.ndarray, lam: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Blend each subject's estimate with the group mean.

    Args:
        x: (P, n) subject-level estimates.
        lam: (P,) degree of shrinkage per parameter.

    Returns:
        x_shrink: (P, n) lam * x_bar + (1 - lam) * x.
        x_bar: (P,) group mean.
    """
    x_bar = x.mean(axis=-1)
    lam_b = lam[:, np.newaxis]
    x_shrink = lam_b * x_bar[:, np.newaxis] + (1 - lam_b) * x
    return x_shrink, x_bar


def _restore(components: VarianceComponents, shape: tuple[int, ...]) -> VarianceComponents:
    var_u = components.var_u
    if isinstance(var_u, np.ndarray):
        var_u = var_u.reshape(shape)
    return VarianceComponents(
        var_u=var_u,
        var_w=components.var_w.reshape(shape),
        var_within=components.var_within.reshape(shape),
        var_tot=components.var_tot.reshape(shape),
        var_x=components.var_x.reshape(shape),
        lam=components.lam.reshape(shape),
    )


def shrinkage_estimate(
    x1,
    x2,
    x_odd,
    x_even,
    options: ShrinkageOptions | None = None,
) -> ShrinkageResult:
    """Compute shrinkage estimates for every subject and parameter.

    Args:
        x1, x2: Half-length split estimates, shape (p1, ..., pk, n).
        x_odd, x_even: Odd/even split estimates, same shape.
        options: ShrinkageOptions; defaults pool the noise variance and
            reject 1-D inputs.

    Returns:
        ShrinkageResult with x_shrink shaped like the inputs and variance
        components shaped (p1, ..., pk).
    """
    if options is None:
        options = ShrinkageOptions()

    valid = validate_replicates(
        x1, x2, x_odd, x_even,
        confirm_subject_axis=options.confirm_subject_axis,
    )
    logger.debug("Shrinking %d parameters across %d subjects",
                 valid.num_parameters, valid.num_subjects)

    components = estimate_variance_components(
        valid.x1, valid.x2, valid.x_odd, valid.x_even,
        average_across_parameters=options.average_across_parameters,
    )

    x = (valid.x1 + valid.x2) / 2
    x_shrink, x_bar = combine(x, components.lam)

    shape = valid.parameter_shape
    return ShrinkageResult(
        x_shrink=x_shrink.reshape(shape + (valid.num_subjects,)),
        x_bar=x_bar.reshape(shape),
        components=_restore(components, shape),
    )


def shrink_it(
    x1,
    x2,
    x_odd,
    x_even,
    average_across_parameters: bool = True,
    confirm_subject_axis: bool = False,
) -> tuple:
    """Shrinkage estimate as a plain tuple.

    Returns:
        (X_shrink, lambda, varU, varW, varX)
    """
    options = ShrinkageOptions(
        average_across_parameters=average_across_parameters,
        confirm_subject_axis=confirm_subject_axis,
    )
    return shrinkage_estimate(x1, x2, x_odd, x_even, options).as_tuple()
