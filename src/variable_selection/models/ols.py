"""Ordinary least squares with significance-based selection."""

import pandas as pd
import statsmodels.api as sm
from typing import Optional

from .base import VariableSelector
from ..utils import add_intercept, as_frame, check_design


class OLSSelector(VariableSelector):
    """
    Ordinary least squares (OLS) regression with an intercept.

    Covariates are selected when the p-value of their t-statistic falls
    below `alpha` (or `alpha / n_features` with a Bonferroni correction).
    Under strong collinearity the standard errors inflate and true effects
    are often missed.

    Attributes:
        alpha: Significance level
        correction: None or 'bonferroni'
        results_: Fitted `statsmodels` results object
    """

    name = "ols"

    def __init__(self, alpha: float = 0.05, correction: Optional[str] = None):
        super().__init__()
        if not 0.0 < alpha < 1.0:
            raise ValueError(f"alpha must lie in (0, 1), got {alpha}.")
        if correction not in (None, "bonferroni"):
            raise ValueError(
                f"Unknown correction: {correction!r}. Use None or 'bonferroni'."
            )
        self.alpha = alpha
        self.correction = correction

    def fit(self, X, y) -> "OLSSelector":
        X = as_frame(X)
        X_values, y_values = check_design(X, y)
        n_samples, n_features = X_values.shape
        if n_samples <= n_features + 1:
            raise ValueError(
                f"OLS needs more observations ({n_samples}) than parameters ({n_features + 1})."
            )

        design = add_intercept(pd.DataFrame(X_values, columns=list(X.columns)), column_name="const")
        self.results_ = sm.OLS(y_values, design).fit()

        self.feature_names_ = list(X.columns)
        self.intercept_ = float(self.results_.params.iloc[0])
        self.coef_ = self.results_.params.values[1:]
        self.std_err_ = self.results_.bse.values[1:]
        self.t_values_ = self.results_.tvalues.values[1:]
        self.p_values_ = self.results_.pvalues.values[1:]

        threshold = self.alpha / n_features if self.correction == "bonferroni" else self.alpha
        self.selected_ = self.p_values_ < threshold
        self._fitted = True
        return self

    def summary(self) -> pd.DataFrame:
        self._check_fitted("summary")
        return pd.DataFrame(
            {
                "coef": self.coef_,
                "std_err": self.std_err_,
                "t": self.t_values_,
                "p_value": self.p_values_,
                "selected": self.selected_,
            },
            index=pd.Index(self.feature_names_, name="feature"),
        )

    def __repr__(self):
        return f"OLSSelector(alpha={self.alpha}, correction={self.correction!r})"
