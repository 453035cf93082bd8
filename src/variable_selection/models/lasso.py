"""Lasso with a cross-validated penalty."""

import numpy as np
import pandas as pd
from sklearn.linear_model import Lasso, LassoCV, lasso_path
from sklearn.model_selection import KFold

from .base import VariableSelector
from ..utils import as_frame, check_design, standardize


class LassoSelector(VariableSelector):
    """
    L1-regularized linear regression.

    Covariates are standardized before fitting so the penalty treats them
    equally; coefficients are reported on both the standardized and the
    original scale. The penalty is chosen by K-fold cross-validation:

    - rule='min': penalty with the lowest mean CV error
    - rule='1se': largest penalty whose mean CV error lies within one
      standard error of the minimum (sparser, more stable selection)

    Attributes:
        alpha_: Chosen penalty
        alphas_: Penalty grid searched by cross-validation (descending)
        cv_error_: Mean CV error along the grid
        cv_se_: Standard error of the CV error along the grid
    """

    name = "lasso"

    def __init__(self, cv: int = 5, rule: str = "min", seed: int = 0, max_iter: int = 10000):
        super().__init__()
        if rule not in ("min", "1se"):
            raise ValueError(f"Unknown rule: {rule!r}. Use 'min' or '1se'.")
        if cv < 2:
            raise ValueError(f"cv must be at least 2, got {cv}.")
        self.cv = cv
        self.rule = rule
        self.seed = seed
        self.max_iter = max_iter

    def fit(self, X, y) -> "LassoSelector":
        X = as_frame(X)
        check_design(X, y)
        X_std, center, scale = standardize(X.astype(float))
        y_values = np.asarray(y, dtype=float).ravel()

        folds = KFold(n_splits=self.cv, shuffle=True, random_state=self.seed)
        lasso_cv = LassoCV(cv=folds, max_iter=self.max_iter, random_state=self.seed)
        lasso_cv.fit(X_std.values, y_values)

        self.alphas_ = lasso_cv.alphas_
        self.cv_error_ = lasso_cv.mse_path_.mean(axis=1)
        self.cv_se_ = lasso_cv.mse_path_.std(axis=1, ddof=1) / np.sqrt(self.cv)

        if self.rule == "min":
            self.alpha_ = float(lasso_cv.alpha_)
            coef_std = lasso_cv.coef_
            intercept_std = float(lasso_cv.intercept_)
        else:
            i_min = int(np.argmin(self.cv_error_))
            within = self.cv_error_ <= self.cv_error_[i_min] + self.cv_se_[i_min]
            self.alpha_ = float(np.max(self.alphas_[within]))
            lasso = Lasso(alpha=self.alpha_, max_iter=self.max_iter, random_state=self.seed)
            lasso.fit(X_std.values, y_values)
            coef_std = lasso.coef_
            intercept_std = float(lasso.intercept_)

        # Map back to the original covariate scale
        self.feature_names_ = list(X.columns)
        self.coef_std_ = np.asarray(coef_std)
        self.coef_ = self.coef_std_ / scale.values
        self.intercept_ = intercept_std - float(np.sum(self.coef_ * center.values))
        self.selected_ = self.coef_std_ != 0

        self._X_std = X_std
        self._y = y_values
        self._fitted = True
        return self

    def regularization_path(self) -> pd.DataFrame:
        """
        Standardized coefficients along the cross-validation penalty grid.

        Returns:
            `pandas.DataFrame` indexed by penalty (descending) with one column per covariate
        """
        self._check_fitted("regularization_path")
        alphas, coefs, _ = lasso_path(
            self._X_std.values, self._y - self._y.mean(), alphas=self.alphas_,
            max_iter=self.max_iter,
        )
        return pd.DataFrame(
            coefs.T,
            index=pd.Index(alphas, name="alpha"),
            columns=self.feature_names_,
        )

    def summary(self) -> pd.DataFrame:
        self._check_fitted("summary")
        return pd.DataFrame(
            {
                "coef": self.coef_,
                "coef_std": self.coef_std_,
                "selected": self.selected_,
            },
            index=pd.Index(self.feature_names_, name="feature"),
        )

    def __repr__(self):
        return f"LassoSelector(cv={self.cv}, rule={self.rule!r}, seed={self.seed})"
