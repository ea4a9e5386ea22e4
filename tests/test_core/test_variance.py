"""Tests for variance decomposition."""

import numpy as np
import pytest

from pyshrinkit.core.variance import (
    across_subject_var,
    estimate_variance_components,
    sampling_variance,
    shrinkage_weight,
)


def test_across_subject_var_is_unbiased():
    x = np.array([[1.0, 2.0, 3.0]])
    np.testing.assert_allclose(across_subject_var(x), [1.0])


def test_sampling_variance_per_parameter():
    x_odd = np.array([[1.0, 2.0, 3.0], [0.0, 0.0, 0.0]])
    x_even = np.zeros((2, 3))
    var_u = sampling_variance(x_odd, x_even, average_across_parameters=False)
    np.testing.assert_allclose(var_u, [0.25, 0.0])


def test_sampling_variance_averaged_is_scalar():
    x_odd = np.array([[1.0, 2.0, 3.0], [0.0, 0.0, 0.0]])
    x_even = np.zeros((2, 3))
    var_u = sampling_variance(x_odd, x_even)
    assert isinstance(var_u, float)
    assert var_u == pytest.approx(0.125)


def test_shrinkage_weight_zero_total_variance():
    lam = shrinkage_weight(np.array([0.0, 0.5, 0.2]), np.array([0.0, 0.0, 0.4]))
    np.testing.assert_allclose(lam, [0.0, 0.0, 0.5])


def test_shrinkage_weight_clipped_to_one():
    lam = shrinkage_weight(np.array([2.0]), np.array([1.0]))
    np.testing.assert_array_equal(lam, [1.0])


def test_shrinkage_weight_no_divide_warning():
    with np.errstate(all="raise"):
        lam = shrinkage_weight(np.array([0.0]), np.array([0.0]))
    assert lam[0] == 0.0


def test_known_decomposition():
    """Hand-computed components for a single parameter."""
    x1 = np.array([[0.0, 2.0, 4.0]])
    x2 = np.array([[2.0, 2.0, 2.0]])
    x_odd = np.array([[1.0, 2.0, 3.0]])
    x_even = np.array([[1.0, 2.0, 3.0]])
    c = estimate_variance_components(x1, x2, x_odd, x_even,
                                     average_across_parameters=False)
    # X = [1, 2, 3]; X2 - X1 = [2, 0, -2] -> var 4
    np.testing.assert_allclose(c.var_u, [0.0])
    np.testing.assert_allclose(c.var_w, [1.0])
    np.testing.assert_allclose(c.var_within, [1.0])
    np.testing.assert_allclose(c.var_tot, [1.0])
    np.testing.assert_allclose(c.var_x, [0.0])
    np.testing.assert_allclose(c.lam, [1.0])


def test_negative_intrasession_variance_is_clipped():
    """Noise larger than the half-split difference gives a negative raw var_w."""
    x1 = np.array([[1.0, 2.0, 3.0]])
    x2 = x1.copy()
    x_odd = np.array([[0.0, 1.0, 2.0]])
    x_even = np.array([[2.0, 1.0, 0.0]])
    c = estimate_variance_components(x1, x2, x_odd, x_even,
                                     average_across_parameters=False)
    # var_u = var([-2, 0, 2]) / 4 = 1; var_w raw = (0 - 4) / 4 = -1
    np.testing.assert_allclose(c.var_u, [1.0])
    np.testing.assert_array_equal(c.var_w, [0.0])
    np.testing.assert_array_equal(c.var_within, [0.0])
    np.testing.assert_allclose(c.var_x, [1.0])
    np.testing.assert_array_equal(c.lam, [0.0])


def test_components_non_negative(synthetic_replicates):
    flat = [x.reshape(-1, x.shape[-1]) for x in synthetic_replicates]
    for average in (True, False):
        c = estimate_variance_components(*flat, average_across_parameters=average)
        for arr in (c.var_u, c.var_w, c.var_within, c.var_tot, c.var_x):
            assert np.all(np.asarray(arr) >= 0)
        assert np.all((c.lam >= 0) & (c.lam <= 1))


def test_does_not_mutate_inputs(synthetic_replicates):
    flat = [x.reshape(-1, x.shape[-1]).copy() for x in synthetic_replicates]
    before = [x.copy() for x in flat]
    estimate_variance_components(*flat)
    for a, b in zip(flat, before):
        np.testing.assert_array_equal(a, b)


def test_recovers_simulated_variances(rng):
    """Large samples should approximately recover the generating variances."""
    n, p = 4000, 3
    truth = rng.normal(0.0, 0.5, size=(p, n))
    noise_sd = 0.2
    reps = [truth + rng.normal(0.0, noise_sd, size=(p, n)) for _ in range(4)]
    c = estimate_variance_components(*reps, average_across_parameters=False)
    # Each split carries noise variance 0.04; X averages two splits.
    np.testing.assert_allclose(c.var_x, 0.25, rtol=0.1)
    np.testing.assert_allclose(c.var_within, 0.02, atol=0.01)


def test_across_subject_var_exact_zero_for_constant_rows():
    x = np.full((2, 20), 0.7)
    x[1] = np.linspace(0.0, 1.0, 20)
    var = across_subject_var(x)
    assert var[0] == 0.0
    assert var[1] > 0
