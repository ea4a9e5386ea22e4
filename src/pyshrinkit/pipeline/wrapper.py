"""Shrinkage pipeline from subject time series to saved estimates.

Reads each subject's time series, builds split-half connectivity
replicates, runs the shrinkage estimator and optionally evaluates the
result against a retest visit.
"""

import logging
from pathlib import Path

import numpy as np

from pyshrinkit.core.profiles import connectivity_profile, stack_replicates, subject_replicates
from pyshrinkit.core.reliability import (
    ReliabilityReport,
    evaluate_reliability,
    within_subject_variance,
)
from pyshrinkit.core.shrinkage import shrinkage_estimate
from pyshrinkit.io.mat_interop import save_mat, save_replicates, save_shrinkage
from pyshrinkit.io.readers import read_timeseries
from pyshrinkit.io.subject_lists import parse_sub_list
from pyshrinkit.math.transforms import from_upper_triangle, inverse_fisher_z
from pyshrinkit.types import FileFormat, ReplicateSet, ShrinkageOptions, ShrinkageResult

logger = logging.getLogger(__name__)

_EXTENSIONS = {
    FileFormat.MAT_V5: ".mat",
    FileFormat.MAT_V73: ".mat",
    FileFormat.NPZ: ".npz",
    FileFormat.AUTO: ".mat",
}


def load_visit(
    path: str | Path,
    visit_start: int | None = None,
    visit_stop: int | None = None,
) -> np.ndarray:
    """Read a time series and keep rows visit_start:visit_stop."""
    series = read_timeseries(path).series
    window = series[visit_start:visit_stop]
    if window.shape[0] == 0:
        raise ValueError(
            f"Visit window [{visit_start}:{visit_stop}] is empty for {path} "
            f"({series.shape[0]} timepoints)")
    return window


def _save_reliability(
    path: Path,
    report: ReliabilityReport,
    fmt: FileFormat,
    square_maps: bool,
) -> None:
    save_dict = {
        "MSE_raw": report.mse_raw,
        "MSE_shrink": report.mse_shrink,
        "mean_relative_change": np.asarray(report.mean_relative_change),
        "sqerr_change": report.percent_change,
        "var_within_true": report.var_within_true,
    }
    if square_maps:
        save_dict["sqerr_change_mat"] = from_upper_triangle(report.percent_change)
        save_dict["var_within_true_mat"] = from_upper_triangle(report.var_within_true)
    save_mat(path, save_dict, fmt=fmt)


def evaluate_retest(
    replicates: ReplicateSet,
    result: ShrinkageResult,
    retest: np.ndarray,
    fisher: bool = True,
) -> ReliabilityReport:
    """Evaluate raw and shrinkage estimates against a retest visit.

    The within-subject variance is measured on the scale the shrinkage was
    estimated on. Errors are measured on the correlation scale, so Fisher Z
    values are mapped back with inverse_fisher_z first.
    """
    var_within_true = within_subject_variance(replicates.subject_estimate, retest)
    if fisher:
        raw = (inverse_fisher_z(replicates.x1) + inverse_fisher_z(replicates.x2)) / 2
        shrunk = inverse_fisher_z(result.x_shrink)
        retest = inverse_fisher_z(retest)
    else:
        raw = replicates.subject_estimate
        shrunk = result.x_shrink
    return evaluate_reliability(raw, shrunk, retest, var_within_true=var_within_true)


def run_wrapper(
    sub_list: str | Path,
    output_dir: str | Path,
    visit_start: int | None = None,
    visit_stop: int | None = None,
    retest_start: int | None = None,
    retest_stop: int | None = None,
    upper: bool = True,
    fisher: bool = True,
    average_across_parameters: bool = True,
    fmt: FileFormat = FileFormat.MAT_V5,
    save_replicate_arrays: bool = False,
) -> ShrinkageResult:
    """Run the full shrinkage pipeline.

    The retest visit of a subject is read from its `retest` file, or, when
    a retest window is given and no retest file is listed, from rows
    retest_start:retest_stop of its main time series.

    Args:
        sub_list: CSV with subject_id, timeseries[, retest] columns.
        output_dir: Directory for shrinkage (and reliability) outputs.
        visit_start, visit_stop: Row window of each time series to use.
        retest_start, retest_stop: Row window of the retest visit.
        upper: Keep only the upper triangle of each connectivity matrix.
        fisher: Fisher Z-transform the correlations.
        average_across_parameters: Pool the noise variance across parameters.
        fmt: Output file format.
        save_replicate_arrays: Also save X1, X2, Xodd, Xeven.

    Returns:
        ShrinkageResult for the group.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    ext = _EXTENSIONS[fmt]
    out_fmt = FileFormat.MAT_V5 if fmt == FileFormat.AUTO else fmt

    def profile(series: np.ndarray) -> np.ndarray:
        return connectivity_profile(series, upper=upper, fisher=fisher)

    subjects = parse_sub_list(sub_list)
    logger.info("Loaded %d subjects from %s", len(subjects), sub_list)
    if len(subjects) < 2:
        raise ValueError(f"Need at least 2 subjects, found {len(subjects)} in {sub_list}")

    retest_window = retest_start is not None or retest_stop is not None
    with_retest = retest_window or all(s.retest is not None for s in subjects)
    total_steps = 4 if with_retest else 3

    logger.info("Step 1/%d: Building split-half replicates", total_steps)
    per_subject = []
    for entry in subjects:
        series = load_visit(entry.timeseries, visit_start, visit_stop)
        logger.info("  %s: %d timepoints, %d regions",
                    entry.subject_id, series.shape[0], series.shape[1])
        per_subject.append(subject_replicates(series, fun=profile))
    replicates = stack_replicates(per_subject)
    if save_replicate_arrays:
        save_replicates(output_dir / f"replicates{ext}", replicates, fmt=out_fmt)

    logger.info("Step 2/%d: Estimating variance components and shrinkage",
                total_steps)
    options = ShrinkageOptions(average_across_parameters=average_across_parameters)
    result = shrinkage_estimate(*replicates.as_tuple(), options=options)
    logger.info("  mean lambda = %.3f over %d parameters",
                float(np.mean(result.lam)), result.lam.size)

    logger.info("Step 3/%d: Saving shrinkage estimates", total_steps)
    save_shrinkage(output_dir / f"shrinkage{ext}", result, fmt=out_fmt,
                   square_maps=upper)

    if with_retest:
        logger.info("Step 4/%d: Evaluating against retest visit", total_steps)
        retest = np.stack([
            profile(load_visit(s.retest or s.timeseries, retest_start, retest_stop))
            for s in subjects
        ], axis=-1)
        report = evaluate_retest(replicates, result, retest, fisher=fisher)
        logger.info("  mean relative MSE change = %.2f%%",
                    100 * report.mean_relative_change)
        _save_reliability(output_dir / f"reliability{ext}", report, out_fmt,
                          square_maps=upper)
    elif any(s.retest is not None for s in subjects):
        logger.warning("Retest files listed for only some subjects; "
                       "skipping reliability evaluation")

    logger.info("Shrinkage pipeline complete")
    return result
