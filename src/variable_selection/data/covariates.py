"""
Synthetic covariate generation.

Covariates are drawn from a multivariate normal distribution whose
covariance is built from three ingredients:

- a binary association pattern P marking which pairs of covariates are related,
- a vector of per-variable standard deviations s,
- a scalar association strength a.

The covariance is Sigma = D (I + a P) D with D = diag(s), so variables i and j
have correlation a whenever P[i, j] == 1 and are uncorrelated otherwise.
"""

import numpy as np
import pandas as pd
from typing import List, Optional, Sequence

from .validation import validate_pattern, is_positive_semidefinite, smallest_eigenvalue


def default_names(n_features: int) -> List[str]:
    """Column names `x1, ..., xp`."""
    return [f"x{i + 1}" for i in range(n_features)]


def independent_pattern(n_features: int) -> np.ndarray:
    """Pattern with no associations."""
    return np.zeros((n_features, n_features), dtype=int)


def exchangeable_pattern(n_features: int) -> np.ndarray:
    """Pattern in which every pair of covariates is associated."""
    return np.ones((n_features, n_features), dtype=int) - np.eye(n_features, dtype=int)


def chain_pattern(n_features: int) -> np.ndarray:
    """Pattern in which each covariate is associated with its neighbours."""
    pattern = np.zeros((n_features, n_features), dtype=int)
    idx = np.arange(n_features - 1)
    pattern[idx, idx + 1] = 1
    pattern[idx + 1, idx] = 1
    return pattern


def block_pattern(block_sizes: Sequence[int]) -> np.ndarray:
    """
    Block-diagonal pattern: covariates are associated within, but not between, blocks.

    Args:
        block_sizes: Number of covariates in each block, e.g. `[3, 3, 4]`.
            Blocks of size 1 are unassociated covariates.

    Returns:
        pattern: Binary matrix of shape (sum(block_sizes), sum(block_sizes))
    """
    if any(size < 1 for size in block_sizes):
        raise ValueError(f"Block sizes must be positive, got {list(block_sizes)}")

    n_features = int(sum(block_sizes))
    pattern = np.zeros((n_features, n_features), dtype=int)
    start = 0
    for size in block_sizes:
        pattern[start:start + size, start:start + size] = 1
        start += size
    np.fill_diagonal(pattern, 0)
    return pattern


def build_covariance(
    pattern: np.ndarray, scales: Sequence[float], association: float
) -> np.ndarray:
    """
    Build a structured covariance matrix.

    Sigma = D (I + association * pattern) D, with D = diag(scales).

    The result is not guaranteed to be positive semi-definite; whether it is
    depends on the pattern and the association strength (see
    `max_association`).

    Args:
        pattern: Binary, symmetric association pattern of shape (p, p) with zero diagonal
        scales: Per-variable standard deviations of shape (p,)
        association: Correlation between associated covariates

    Returns:
        cov: Covariance matrix of shape (p, p)
    """
    is_valid, errors = validate_pattern(pattern)
    if not is_valid:
        raise ValueError("Invalid pattern: " + "; ".join(errors))

    pattern = np.asarray(pattern, dtype=float)
    scales = np.asarray(scales, dtype=float)
    n_features = pattern.shape[0]

    if scales.shape != (n_features,):
        raise ValueError(
            f"Expected {n_features} scales to match the pattern, got shape {scales.shape}."
        )
    if np.any(scales <= 0):
        raise ValueError(f"Scales must be positive, got {scales.tolist()}.")

    corr = np.eye(n_features) + association * pattern
    return corr * np.outer(scales, scales)


def generate_covariates(
    n_samples: int,
    pattern: np.ndarray,
    scales: Sequence[float],
    association: float,
    mean: Optional[Sequence[float]] = None,
    seed: int = 0,
    names: Optional[List[str]] = None,
) -> pd.DataFrame:
    """
    Draw correlated covariates from a multivariate normal distribution.

    Args:
        n_samples: Number of rows to draw
        pattern: Binary association pattern of shape (p, p)
        scales: Per-variable standard deviations of shape (p,)
        association: Correlation between associated covariates
        mean: Mean vector of shape (p,). Default: zeros.
        seed: Seed for the pseudo-random number generator. Default: 0.
        names: Column names. Default: `x1, ..., xp`.

    Returns:
        `pandas.DataFrame` with shape (n_samples, p)

    Example:
        >>> X = generate_covariates(100, block_pattern([2, 3]), np.ones(5), 0.8, seed=1)
    """
    if n_samples < 1:
        raise ValueError(f"n_samples must be at least 1, got {n_samples}.")

    cov = build_covariance(pattern, scales, association)
    n_features = cov.shape[0]

    # Scales do not affect definiteness, so check the unscaled matrix.
    corr = np.eye(n_features) + association * np.asarray(pattern, dtype=float)
    if not is_positive_semidefinite(corr):
        raise ValueError(
            f"Covariance matrix is not positive semi-definite "
            f"(smallest eigenvalue of I + aP is {smallest_eigenvalue(corr):.4g}). "
            f"Reduce the association strength {association} for this pattern."
        )

    mean = np.zeros(n_features) if mean is None else np.asarray(mean, dtype=float)
    if mean.shape != (n_features,):
        raise ValueError(f"Expected mean of shape ({n_features},), got {mean.shape}.")

    if names is None:
        names = default_names(n_features)
    elif len(names) != n_features:
        raise ValueError(f"Expected {n_features} names, got {len(names)}.")

    rng = np.random.default_rng(seed)
    samples = rng.multivariate_normal(mean, cov, size=n_samples, method="eigh")

    return pd.DataFrame(samples, columns=list(names))
