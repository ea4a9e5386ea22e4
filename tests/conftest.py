"""Shared fixtures for pyshrinkit tests."""

import numpy as np
import pytest


@pytest.fixture
def rng():
    """Reproducible random number generator."""
    return np.random.default_rng(42)


@pytest.fixture
def num_subjects():
    """Default number of subjects for tests."""
    return 20


@pytest.fixture
def synthetic_replicates(rng, num_subjects):
    """Split-half replicates for a (4, 3) parameter grid.

    Each subject has a true value drawn with between-subject sd 0.3; every
    split adds independent noise with sd 0.1.
    """
    shape = (4, 3, num_subjects)
    truth = rng.normal(0.0, 0.3, size=shape)

    def draw():
        return truth + rng.normal(0.0, 0.1, size=shape)

    return draw(), draw(), draw(), draw()


@pytest.fixture
def synthetic_series(rng):
    """Synthetic time series (T=120 timepoints, N=6 regions)."""
    return rng.standard_normal((120, 6)).astype(np.float64)


@pytest.fixture
def make_series(rng):
    """Factory for correlated synthetic time series."""

    def _make(n_timepoints=120, n_regions=5):
        shared = rng.standard_normal((n_timepoints, 1))
        loadings = rng.uniform(0.2, 0.8, size=(1, n_regions))
        return shared @ loadings + rng.standard_normal((n_timepoints, n_regions))

    return _make
