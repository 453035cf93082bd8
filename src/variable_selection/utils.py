"""Helpers for handling design matrices."""

import numpy as np
import pandas as pd
from typing import Optional, Tuple

from .data.covariates import default_names


def as_frame(X, names: Optional[list] = None) -> pd.DataFrame:
    """
    Return covariates as a `pandas.DataFrame`.

    Arrays get the column names `x1, ..., xp` unless `names` is given.
    """
    if isinstance(X, pd.DataFrame):
        return X
    X = np.asarray(X, dtype=float)
    if X.ndim == 1:
        X = X.reshape(-1, 1)
    if names is None:
        names = default_names(X.shape[1])
    return pd.DataFrame(X, columns=list(names))


def check_design(X: pd.DataFrame, y) -> Tuple[np.ndarray, np.ndarray]:
    """
    Validate a design matrix and response and return them as float arrays.

    Args:
        X: Covariates of shape (n_samples, n_features)
        y: Response of shape (n_samples,)

    Returns:
        X_values, y_values
    """
    X_values = np.asarray(X, dtype=float)
    y_values = np.asarray(y, dtype=float).ravel()

    if len(X_values) != len(y_values):
        raise ValueError(
            f"Dimensions in X ({len(X_values)}) and y ({len(y_values)}) do not match."
        )
    for name, arr in [("X", X_values), ("y", y_values)]:
        if not np.all(np.isfinite(arr)):
            n_bad = int((~np.isfinite(arr)).sum())
            raise ValueError(
                f"{name} contains {n_bad} non-finite values (NaN/Inf). "
                f"Clean the data before fitting."
            )
    return X_values, y_values


def add_intercept(
    df: pd.DataFrame, column_name="intercept", inplace=False
) -> pd.DataFrame:
    """
    Add a column of ones to a dataframe

    Args:
        df: `pandas.DataFrame`
        column_name: Name of new column (default: 'intercept')
        inplace: If True, modifies dataframe in place. If False, returns a copy.

    Returns:
        DataFrame with intercept column added
    """
    if column_name in df.columns:
        raise ValueError(f"Column '{column_name}' already exists.")
    if not inplace:
        df = df.copy()
    df.insert(0, column_name, np.ones(len(df)))
    return df


def standardize(X: pd.DataFrame) -> Tuple[pd.DataFrame, pd.Series, pd.Series]:
    """
    Centre and scale every column to unit standard deviation.

    Args:
        X: `pandas.DataFrame` of covariates

    Returns:
        X_std: Standardized covariates
        center: Column means
        scale: Column standard deviations (ddof=0)
    """
    center = X.mean()
    scale = X.std(ddof=0)
    constant = scale.index[np.isclose(scale.values, 0.0)]
    if len(constant) > 0:
        raise ValueError(f"Cannot standardize constant column(s): {list(constant)}")
    return (X - center) / scale, center, scale


def train_test_split(
    X: pd.DataFrame,
    y: pd.Series,
    test_size: float = 0.3,
    seed: int = 0,
) -> Tuple[pd.DataFrame, pd.DataFrame, pd.Series, pd.Series]:
    """
    Split a dataset into random training and test sets.

    Args:
        X: `pandas.DataFrame` of covariates
        y: `pandas.Series` response aligned with X
        test_size: Fraction of rows in the test set. Default: 0.3.
        seed: Seed for the row permutation. Default: 0.

    Returns:
        X_train, X_test, y_train, y_test
    """
    if not 0.0 < test_size < 1.0:
        raise ValueError(f"test_size must lie in (0, 1), got {test_size}.")
    if len(X) != len(y):
        raise ValueError(
            f"Dimensions in X ({len(X)}) and y ({len(y)}) do not match."
        )

    n_test = int(round(len(X) * test_size))
    if n_test == 0 or n_test == len(X):
        raise ValueError(
            f"test_size={test_size} leaves an empty split for {len(X)} rows."
        )

    rng = np.random.default_rng(seed)
    order = rng.permutation(len(X))
    test_idx, train_idx = np.sort(order[:n_test]), np.sort(order[n_test:])

    return (
        X.iloc[train_idx].copy(),
        X.iloc[test_idx].copy(),
        y.iloc[train_idx].copy(),
        y.iloc[test_idx].copy(),
    )
