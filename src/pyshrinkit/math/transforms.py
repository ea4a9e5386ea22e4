"""Correlation, Fisher transform and upper-triangle utilities."""

import numpy as np


def pearson_corr(X: np.ndarray, Y: np.ndarray | None = None) -> np.ndarray:
    """Compute Pearson correlation between columns of X and Y.

    Args:
        X: (T, M) array.
        Y: (T, N) array. Defaults to X.

    Returns:
        (M, N) correlation matrix. Constant columns correlate as 0. When Y
        is omitted the diagonal is exactly 1 for non-constant columns.
    """
    X = np.asarray(X, dtype=np.float64)
    same = Y is None
    Y = X if same else np.asarray(Y, dtype=np.float64)
    X_centered = X - X.mean(axis=0, keepdims=True)
    Y_centered = Y - Y.mean(axis=0, keepdims=True)
    X_std = np.sqrt((X_centered**2).sum(axis=0, keepdims=True))
    Y_std = np.sqrt((Y_centered**2).sum(axis=0, keepdims=True))
    nonconstant = X_std.ravel() > 0
    X_std[X_std == 0] = 1.0
    Y_std[Y_std == 0] = 1.0
    corr = (X_centered / X_std).T @ (Y_centered / Y_std)
    if same:
        np.fill_diagonal(corr, nonconstant.astype(np.float64))
    return corr


def fisher_z(r: np.ndarray) -> np.ndarray:
    """Fisher Z-transform with clipping to avoid infinities at +/- 1."""
    eps = np.finfo(np.float64).eps
    r = np.asarray(r, dtype=np.float64)
    return np.arctanh(np.clip(r, -1 + eps, 1 - eps))


def inverse_fisher_z(z: np.ndarray) -> np.ndarray:
    """Map Fisher Z values back to correlations."""
    return np.tanh(np.asarray(z, dtype=np.float64))


def upper_triangle(mat: np.ndarray) -> np.ndarray:
    """Extract the strict upper triangle of a square matrix, row by row.

    Args:
        mat: (V, V) matrix, or (V, V, ...) stack with extra trailing axes.

    Returns:
        (V*(V-1)/2,) vector, or (V*(V-1)/2, ...) for stacks.
    """
    mat = np.asarray(mat)
    if mat.ndim < 2 or mat.shape[0] != mat.shape[1]:
        raise ValueError(f"Expected square matrix, got shape {mat.shape}")
    rows, cols = np.triu_indices(mat.shape[0], k=1)
    return mat[rows, cols]


def from_upper_triangle(vec: np.ndarray, diag: float = 0.0) -> np.ndarray:
    """Rebuild a symmetric matrix from its strict upper triangle.

    Args:
        vec: (V*(V-1)/2,) vector as produced by upper_triangle.
        diag: Value placed on the diagonal.

    Returns:
        (V, V) symmetric matrix.
    """
    vec = np.asarray(vec, dtype=np.float64).ravel()
    m = vec.size
    v = int(round((1 + np.sqrt(1 + 8 * m)) / 2))
    if v * (v - 1) // 2 != m:
        raise ValueError(f"Length {m} is not a triangular number")
    mat = np.full((v, v), diag, dtype=np.float64)
    rows, cols = np.triu_indices(v, k=1)
    mat[rows, cols] = vec
    mat[cols, rows] = vec
    return mat
