"""Base interface for variable-selection models."""

from abc import ABC, abstractmethod
import numpy as np
import pandas as pd
from typing import List, Tuple

from ..utils import as_frame


class VariableSelector(ABC):
    """
    Base class for variable-selection models.

    Subclasses implement `fit` and `summary`. `fit` must set:
        feature_names_: List of covariate names
        coef_: Coefficients on the original covariate scale, shape (n_features,)
        intercept_: Intercept on the original covariate scale
        selected_: Boolean array marking the selected covariates
    """

    name = "base"

    def __init__(self):
        self._fitted = False

    @abstractmethod
    def fit(self, X: pd.DataFrame, y: pd.Series) -> "VariableSelector":
        """
        Fit the model and select covariates.

        Args:
            X: Covariates. `pandas.DataFrame` or array of shape (n_samples, n_features).
               Arrays get the column names `x1, ..., xp`.
            y: Response of shape (n_samples,)

        Returns:
            self: The fitted model
        """
        pass

    @abstractmethod
    def summary(self) -> pd.DataFrame:
        """
        Per-covariate table of estimates, indexed by covariate name.

        Always includes a boolean `selected` column.
        """
        pass

    def _check_fitted(self, method: str):
        if not self._fitted:
            raise ValueError(
                f"Model must be fitted before calling {method}(). Call fit() first."
            )

    def predict(self, X) -> np.ndarray:
        """
        Generate predictions using the fitted coefficients.

        Args:
            X: Covariates with the same columns used in fit()

        Returns:
            predictions: Predicted values of shape (n_samples,)
        """
        self._check_fitted("predict")
        X = as_frame(X, names=self.feature_names_)
        missing = [c for c in self.feature_names_ if c not in X.columns]
        if missing:
            raise ValueError(f"X is missing covariates {missing}.")
        return X[self.feature_names_].values @ self.coef_ + self.intercept_

    def get_params(self) -> Tuple[np.ndarray, float]:
        """
        Get the fitted parameters on the original covariate scale.

        Returns:
            coef_: Regression coefficients (numpy array)
            intercept_: Intercept term (float)
        """
        self._check_fitted("get_params")
        return self.coef_, self.intercept_

    def selected_features(self) -> List[str]:
        """Names of the selected covariates, in column order."""
        self._check_fitted("selected_features")
        return [name for name, keep in zip(self.feature_names_, self.selected_) if keep]

    def __repr__(self):
        return f"{type(self).__name__}()"
