"""Collinearity diagnostics for design matrices."""

import numpy as np
import pandas as pd
import statsmodels.api as sm
from statsmodels.stats.outliers_influence import variance_inflation_factor

from .utils import as_frame, standardize


def variance_inflation_factors(X) -> pd.Series:
    """
    Variance inflation factor (VIF) of each covariate.

    VIF_j = 1 / (1 - R_j^2), where R_j^2 comes from regressing covariate j
    on all the others (with an intercept). Values above ~10 signal strong
    collinearity.

    Args:
        X: Covariates of shape (n_samples, n_features)

    Returns:
        `pandas.Series` indexed by covariate name
    """
    X = as_frame(X)
    design = sm.add_constant(X.values.astype(float), has_constant="add")
    # Column 0 is the constant
    vifs = [variance_inflation_factor(design, j + 1) for j in range(X.shape[1])]
    return pd.Series(vifs, index=X.columns, name="vif")


def condition_number(X) -> float:
    """
    Condition number of the standardized design matrix.

    Ratio of the largest to smallest singular value. Large values (above ~30)
    indicate that small changes in the data can produce large changes in
    least-squares coefficients.
    """
    X_std, _, _ = standardize(as_frame(X).astype(float))
    singular_values = np.linalg.svd(X_std.values, compute_uv=False)
    if np.isclose(singular_values[-1], 0.0):
        return np.inf
    return float(singular_values[0] / singular_values[-1])


def correlation_table(X, threshold: float = 0.0) -> pd.DataFrame:
    """
    Pairwise correlations in long form.

    Args:
        X: Covariates of shape (n_samples, n_features)
        threshold: Only keep pairs with |r| >= threshold. Default: 0.0.

    Returns:
        `pandas.DataFrame` with columns 'feature_1', 'feature_2', 'correlation',
        sorted by decreasing absolute correlation
    """
    X = as_frame(X)
    corr = X.corr()
    names = list(corr.columns)
    rows = []
    for i in range(len(names)):
        for j in range(i + 1, len(names)):
            r = corr.iloc[i, j]
            if abs(r) >= threshold:
                rows.append((names[i], names[j], r))

    table = pd.DataFrame(rows, columns=["feature_1", "feature_2", "correlation"])
    order = table["correlation"].abs().sort_values(ascending=False).index
    return table.loc[order].reset_index(drop=True)
