"""Principal-components regression."""

import numpy as np
import pandas as pd
from sklearn.decomposition import PCA
from sklearn.linear_model import LinearRegression
from sklearn.model_selection import KFold, cross_val_score
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler
from typing import Optional

from .base import VariableSelector
from ..utils import as_frame, check_design


def make_pcr_pipeline(n_components: int) -> Pipeline:
    """StandardScaler -> PCA -> LinearRegression."""
    return Pipeline([
        ("scale", StandardScaler()),
        ("pca", PCA(n_components=n_components)),
        ("regression", LinearRegression(fit_intercept=True)),
    ])


class PCRSelector(VariableSelector):
    """
    Principal-components regression (PCR).

    The response is regressed on the leading principal components of the
    standardized covariates. The component coefficients are mapped back to
    one coefficient per covariate. PCR does not zero out covariates, so a
    covariate counts as selected when its standardized coefficient is at
    least `threshold` times the largest one in absolute value.

    Attributes:
        n_components_: Number of components used
        cv_error_: Mean CV error by number of components (only when chosen by CV)
        pipeline_: Fitted scikit-learn pipeline
    """

    name = "pcr"

    def __init__(
        self,
        n_components: Optional[int] = None,
        cv: int = 5,
        threshold: float = 0.1,
        seed: int = 0,
    ):
        super().__init__()
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"threshold must lie in [0, 1], got {threshold}.")
        self.n_components = n_components
        self.cv = cv
        self.threshold = threshold
        self.seed = seed

    def _choose_n_components(self, X_values: np.ndarray, y_values: np.ndarray) -> int:
        folds = KFold(n_splits=self.cv, shuffle=True, random_state=self.seed)
        n_train_min = len(X_values) - int(np.ceil(len(X_values) / self.cv))
        max_components = min(X_values.shape[1], n_train_min)

        errors = {}
        for k in range(1, max_components + 1):
            scores = cross_val_score(
                make_pcr_pipeline(k), X_values, y_values,
                cv=folds, scoring="neg_mean_squared_error",
            )
            errors[k] = -scores.mean()

        self.cv_error_ = pd.Series(errors, name="cv_mse")
        self.cv_error_.index.name = "n_components"
        return int(self.cv_error_.idxmin())

    def fit(self, X, y) -> "PCRSelector":
        X = as_frame(X)
        X_values, y_values = check_design(X, y)
        n_features = X_values.shape[1]

        if self.n_components is None:
            n_components = self._choose_n_components(X_values, y_values)
        else:
            if not 1 <= self.n_components <= n_features:
                raise ValueError(
                    f"n_components must lie in [1, {n_features}], got {self.n_components}."
                )
            n_components = self.n_components

        self.pipeline_ = make_pcr_pipeline(n_components).fit(X_values, y_values)
        self.n_components_ = n_components

        scaler = self.pipeline_.named_steps["scale"]
        pca = self.pipeline_.named_steps["pca"]
        regression = self.pipeline_.named_steps["regression"]

        # Map component coefficients back to covariates
        self.coef_std_ = pca.components_.T @ regression.coef_
        self.coef_ = self.coef_std_ / scaler.scale_
        self.intercept_ = float(
            regression.intercept_
            - self.coef_std_ @ pca.mean_
            - np.sum(self.coef_ * scaler.mean_)
        )

        self.feature_names_ = list(X.columns)
        largest = np.max(np.abs(self.coef_std_))
        if largest > 0:
            self.selected_ = np.abs(self.coef_std_) >= self.threshold * largest
        else:
            self.selected_ = np.zeros(n_features, dtype=bool)
        self._fitted = True
        return self

    def explained_variance(self) -> pd.Series:
        """Explained-variance ratio of each retained component."""
        self._check_fitted("explained_variance")
        ratios = self.pipeline_.named_steps["pca"].explained_variance_ratio_
        return pd.Series(
            ratios,
            index=[f"PC{k + 1}" for k in range(len(ratios))],
            name="explained_variance_ratio",
        )

    def loadings(self) -> pd.DataFrame:
        """Component loadings, one row per covariate and one column per component."""
        self._check_fitted("loadings")
        components = self.pipeline_.named_steps["pca"].components_
        return pd.DataFrame(
            components.T,
            index=pd.Index(self.feature_names_, name="feature"),
            columns=[f"PC{k + 1}" for k in range(components.shape[0])],
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
        return (
            f"PCRSelector(n_components={self.n_components}, cv={self.cv}, "
            f"threshold={self.threshold})"
        )
