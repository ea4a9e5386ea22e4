"""Data types for the shrinkage estimator."""

from dataclasses import dataclass
from enum import Enum

import numpy as np
from numpy.typing import NDArray


class FileFormat(Enum):
    """Supported file formats for saving/loading arrays."""

    MAT_V5 = "mat_v5"
    MAT_V73 = "mat_v73"
    NPZ = "npz"
    AUTO = "auto"


@dataclass(frozen=True)
class ShrinkageOptions:
    """Configuration for a single shrinkage estimate.

    Attributes:
        average_across_parameters: Pool the sampling variance into one scalar
            (mean over parameters). Appropriate when noise variance depends
            only on scan length, not on the parameter.
        confirm_subject_axis: Required for 1-D inputs, confirming that the
            sole axis indexes subjects.
    """

    average_across_parameters: bool = True
    confirm_subject_axis: bool = False


@dataclass
class ReplicateSet:
    """Split-half estimates for a group of subjects.

    All four arrays are shaped (p1, ..., pk, n) with subjects on the
    trailing axis.

    Attributes:
        x1: First half-length estimate.
        x2: Second half-length estimate.
        x_odd: Estimate from odd-indexed timepoints.
        x_even: Estimate from even-indexed timepoints.
    """

    x1: NDArray[np.floating]
    x2: NDArray[np.floating]
    x_odd: NDArray[np.floating]
    x_even: NDArray[np.floating]

    @property
    def num_subjects(self) -> int:
        return self.x1.shape[-1]

    @property
    def parameter_shape(self) -> tuple[int, ...]:
        return self.x1.shape[:-1]

    @property
    def subject_estimate(self) -> NDArray[np.floating]:
        """Subject-level estimate (X1 + X2) / 2."""
        return (np.asarray(self.x1) + np.asarray(self.x2)) / 2

    def as_tuple(self) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        return self.x1, self.x2, self.x_odd, self.x_even


@dataclass(frozen=True)
class VarianceComponents:
    """Per-parameter variance decomposition.

    Arrays are shaped (p1, ..., pk). ``var_u`` is a float when the sampling
    variance was averaged across parameters.

    Attributes:
        var_u: Sampling (noise) variance.
        var_w: Intrasession signal variance.
        var_within: Total within-subject variance, var_w + var_u.
        var_tot: Variance of the subject-level estimates across subjects.
        var_x: Between-subject variance.
        lam: Degree of shrinkage in [0, 1].
    """

    var_u: NDArray[np.floating] | float
    var_w: NDArray[np.floating]
    var_within: NDArray[np.floating]
    var_tot: NDArray[np.floating]
    var_x: NDArray[np.floating]
    lam: NDArray[np.floating]


@dataclass(frozen=True)
class ShrinkageResult:
    """Shrinkage estimates and the variance components behind them.

    Attributes:
        x_shrink: (p1, ..., pk, n) shrinkage estimate per subject.
        x_bar: (p1, ..., pk) group mean of the subject-level estimates.
        components: Variance decomposition used to derive lambda.
    """

    x_shrink: NDArray[np.floating]
    x_bar: NDArray[np.floating]
    components: VarianceComponents

    @property
    def lam(self) -> NDArray[np.floating]:
        return self.components.lam

    def as_tuple(self) -> tuple:
        """Return (X_shrink, lambda, varU, varW, varX)."""
        c = self.components
        return self.x_shrink, c.lam, c.var_u, c.var_w, c.var_x


@dataclass
class DataBundle:
    """Container for one subject's time series.

    Attributes:
        series: The time series array (T x N) where T=timepoints, N=regions.
    """

    series: NDArray[np.floating]

    @property
    def num_timepoints(self) -> int:
        return self.series.shape[0]

    @property
    def num_regions(self) -> int:
        return self.series.shape[1]
