"""
Simulation of regression datasets with a known sparse truth.
"""

import numpy as np
import pandas as pd
from typing import List, NamedTuple, Optional, Sequence

from .covariates import build_covariance, default_names, generate_covariates


class SimulatedDataset(NamedTuple):
    """Covariates, response, true coefficients and the covariance used to draw X."""
    X: pd.DataFrame
    y: pd.Series
    coefficients: pd.Series
    covariance: np.ndarray


def sparse_coefficients(
    n_features: int,
    n_nonzero: int,
    effect_size: float = 1.0,
    names: Optional[List[str]] = None,
) -> pd.Series:
    """
    Create a sparse coefficient vector.

    The first `n_nonzero` coefficients equal `effect_size`, the rest are zero.

    Args:
        n_features: Total number of covariates
        n_nonzero: Number of covariates with a nonzero effect
        effect_size: Value of the nonzero coefficients. Default: 1.0.
        names: Covariate names. Default: `x1, ..., xp`.

    Returns:
        `pandas.Series` indexed by covariate name
    """
    if not 0 <= n_nonzero <= n_features:
        raise ValueError(
            f"n_nonzero must lie in [0, {n_features}], got {n_nonzero}."
        )
    names = default_names(n_features) if names is None else list(names)
    values = np.zeros(n_features)
    values[:n_nonzero] = effect_size
    return pd.Series(values, index=names, name="coefficient")


def true_support(coefficients: pd.Series) -> List[str]:
    """Names of covariates with a nonzero coefficient."""
    return list(coefficients.index[coefficients.values != 0])


def generate_response(
    X: pd.DataFrame,
    coefficients: Sequence[float],
    noise_sd: float = 1.0,
    intercept: float = 0.0,
    seed=0,
) -> pd.Series:
    """
    Generate a linear response y = intercept + X beta + noise.

    Args:
        X: Covariates of shape (n_samples, n_features)
        coefficients: True coefficients of shape (n_features,)
        noise_sd: Standard deviation of the Gaussian noise. Default: 1.0.
        intercept: Intercept term. Default: 0.0.
        seed: Seed for the noise generator. Default: 0.

    Returns:
        `pandas.Series` named 'y' aligned with the rows of X
    """
    coefficients = np.asarray(coefficients, dtype=float)
    if coefficients.shape != (X.shape[1],):
        raise ValueError(
            f"Expected {X.shape[1]} coefficients, got shape {coefficients.shape}."
        )
    if noise_sd < 0:
        raise ValueError(f"noise_sd must be non-negative, got {noise_sd}.")

    rng = np.random.default_rng(seed)
    noise = rng.normal(0.0, noise_sd, size=len(X))
    values = intercept + np.asarray(X, dtype=float) @ coefficients + noise
    index = X.index if isinstance(X, pd.DataFrame) else None
    return pd.Series(values, index=index, name="y")


def simulate_dataset(
    n_samples: int,
    pattern: np.ndarray,
    scales: Sequence[float],
    association: float,
    coefficients: pd.Series,
    noise_sd: float = 1.0,
    intercept: float = 0.0,
    seed: int = 0,
) -> SimulatedDataset:
    """
    Simulate covariates and a linear response from a fixed seed.

    Covariates and noise are drawn from independent streams spawned from
    `seed`, so changing the noise level leaves X unchanged.

    Args:
        n_samples: Number of observations
        pattern: Binary association pattern of shape (p, p)
        scales: Per-variable standard deviations of shape (p,)
        association: Correlation between associated covariates
        coefficients: True coefficients, indexed by covariate name
        noise_sd: Standard deviation of the response noise. Default: 1.0.
        intercept: Intercept term. Default: 0.0.
        seed: Master seed. Default: 0.

    Returns:
        SimulatedDataset(X, y, coefficients, covariance)
    """
    x_seed, y_seed = np.random.SeedSequence(seed).spawn(2)
    names = list(coefficients.index)
    X = generate_covariates(
        n_samples, pattern, scales, association, seed=x_seed, names=names
    )
    y = generate_response(
        X, coefficients.values, noise_sd=noise_sd, intercept=intercept, seed=y_seed
    )
    cov = build_covariance(pattern, scales, association)
    return SimulatedDataset(X=X, y=y, coefficients=coefficients, covariance=cov)
