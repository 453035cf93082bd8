"""
Projection-predictive variable selection for Gaussian linear models.

A fitted reference model (here the horseshoe regression) supplies posterior
draws of the linear predictor mu and the noise scale sigma. Each draw is
projected onto a submodel by least squares, and the submodel is scored by
the KL divergence between the reference and projected predictive
distributions (Piironen, Paasiniemi & Vehtari, 2020):

    KL_s = 0.5 * log(sigma_perp_s^2 / sigma_s^2),
    sigma_perp_s^2 = sigma_s^2 + mean_i (mu_si - z_i^T w_s)^2

Submodels always contain an intercept; covariates are added greedily in
the order that reduces the KL divergence most.
"""

import warnings
import numpy as np
import pandas as pd
from typing import List, NamedTuple, Optional, Tuple

from .models.base import VariableSelector
from .models.horseshoe import HorseshoeSelector
from .utils import as_frame, check_design


class SearchPath(NamedTuple):
    """Result of a forward search."""
    selected: List[int]   # covariate indices in the order they were added
    kl_path: List[float]  # KL divergence after each addition
    kl_null: float        # KL divergence of the intercept-only submodel


def _design(X: np.ndarray, columns: List[int]) -> np.ndarray:
    return np.hstack([np.ones((X.shape[0], 1)), X[:, columns]])


def project_onto_submodel(
    mu_draws: np.ndarray, sigma_draws: np.ndarray, Z: np.ndarray
) -> Tuple[np.ndarray, float]:
    """
    Project reference posterior draws onto a submodel.

    Parameters
    ----------
    mu_draws : ndarray (S, N)
        Reference model linear predictor draws.
    sigma_draws : ndarray (S,)
        Reference model noise scale draws.
    Z : ndarray (N, d)
        Design matrix of the submodel (including any intercept column).

    Returns
    -------
    W : ndarray (S, d)
        Projected coefficients, one row per draw.
    kl : float
        Mean KL divergence from the reference to the projected submodel.
    """
    mu_draws = np.atleast_2d(np.asarray(mu_draws, dtype=float))
    sigma_draws = np.asarray(sigma_draws, dtype=float).ravel()
    if mu_draws.shape[0] != sigma_draws.shape[0]:
        raise ValueError(
            f"Number of mu draws ({mu_draws.shape[0]}) and sigma draws "
            f"({sigma_draws.shape[0]}) do not match."
        )
    if mu_draws.shape[1] != Z.shape[0]:
        raise ValueError(
            f"mu draws have {mu_draws.shape[1]} observations, Z has {Z.shape[0]} rows."
        )

    # One least-squares solve for all draws at once
    W, _, _, _ = np.linalg.lstsq(Z, mu_draws.T, rcond=None)
    residual = mu_draws - (Z @ W).T
    discrepancy = np.mean(residual**2, axis=1)
    kl = 0.5 * np.log1p(discrepancy / sigma_draws**2)
    return W.T, float(np.mean(kl))


def forward_search(
    mu_draws: np.ndarray,
    sigma_draws: np.ndarray,
    X,
    max_size: Optional[int] = None,
    names: Optional[List[str]] = None,
    verbose: bool = False,
) -> SearchPath:
    """
    Projection predictive forward search.

    Parameters
    ----------
    mu_draws : ndarray (S, N)
        Reference model linear predictor draws on the rows of X.
    sigma_draws : ndarray (S,)
        Reference model noise scale draws.
    X : array (N, J)
        Candidate covariates.
    max_size : int, optional
        Maximum number of covariates to select. Defaults to all of them.
    names : list of str, optional
        Covariate names used in progress messages.
    verbose : bool
        If True, print each step.

    Returns
    -------
    SearchPath
    """
    X = np.asarray(X, dtype=float)
    J = X.shape[1]
    if max_size is None:
        max_size = J
    if max_size < 0:
        raise ValueError(f"max_size must be non-negative, got {max_size}.")
    if max_size > J:
        warnings.warn(f"max_size={max_size} > J={J}; capping at J={J}")
        max_size = J

    _, kl_null = project_onto_submodel(mu_draws, sigma_draws, _design(X, []))
    if verbose:
        print(f"  null model: KL={kl_null:.6f}")

    selected = []
    remaining = list(range(J))
    kl_path = []

    for step in range(max_size):
        best_kl = np.inf
        best_j = None
        for j in remaining:
            _, kl = project_onto_submodel(mu_draws, sigma_draws, _design(X, selected + [j]))
            if kl < best_kl:
                best_kl = kl
                best_j = j
        selected.append(best_j)
        remaining.remove(best_j)
        kl_path.append(best_kl)
        if verbose:
            label = names[best_j] if names is not None else f"X[{best_j}]"
            print(f"  step {step + 1}: selected {label}, KL={best_kl:.6f}")

    return SearchPath(selected=selected, kl_path=kl_path, kl_null=kl_null)


def suggest_size(path: SearchPath, threshold: float = 0.05) -> int:
    """
    Smallest submodel size whose KL divergence is at most `threshold * kl_null`.

    Falls back to the full search length when no submodel reaches the threshold.
    """
    if not 0.0 <= threshold <= 1.0:
        raise ValueError(f"threshold must lie in [0, 1], got {threshold}.")
    if path.kl_null <= threshold * path.kl_null:
        return 0
    for size, kl in enumerate(path.kl_path, start=1):
        if kl <= threshold * path.kl_null:
            return size
    return len(path.selected)


def projected_coefficients(
    mu_draws: np.ndarray,
    sigma_draws: np.ndarray,
    X,
    selected: List[int],
    names: Optional[List[str]] = None,
) -> pd.DataFrame:
    """
    Posterior summary of the coefficients of a projected submodel.

    Returns:
        `pandas.DataFrame` with columns 'mean' and 'sd', indexed by
        'intercept' followed by the selected covariates
    """
    X = np.asarray(X, dtype=float)
    W, _ = project_onto_submodel(mu_draws, sigma_draws, _design(X, list(selected)))
    if names is None:
        names = [f"X[{j}]" for j in range(X.shape[1])]
    index = ["intercept"] + [names[j] for j in selected]
    return pd.DataFrame(
        {"mean": W.mean(axis=0), "sd": W.std(axis=0)},
        index=pd.Index(index, name="feature"),
    )


class ProjPredSelector(VariableSelector):
    """
    Variable selection by projecting a horseshoe reference model onto submodels.

    Attributes:
        reference: Reference `HorseshoeSelector` (fitted in fit() if needed)
        path_: Forward search path
        size_: Suggested submodel size
        projection_: Projected coefficients of the suggested submodel
    """

    name = "projpred"

    def __init__(
        self,
        reference: Optional[HorseshoeSelector] = None,
        max_size: Optional[int] = None,
        threshold: float = 0.05,
        verbose: bool = False,
    ):
        super().__init__()
        self.reference = reference if reference is not None else HorseshoeSelector()
        self.max_size = max_size
        self.threshold = threshold
        self.verbose = verbose

    def fit(self, X, y) -> "ProjPredSelector":
        X = as_frame(X)
        check_design(X, y)
        if not self.reference._fitted:
            print("Fitting horseshoe reference model...") if self.verbose else None
            self.reference.fit(X, y)
        elif list(X.columns) != self.reference.feature_names_:
            raise ValueError("Reference model was fitted on different covariates.")

        X_values = X.values.astype(float)
        mu_draws = self.reference.linear_predictor_draws(X)
        sigma_draws = self.reference.posterior_samples()["sigma"]
        self.feature_names_ = list(X.columns)

        print("Running projection predictive forward search...") if self.verbose else None
        self.path_ = forward_search(
            mu_draws, sigma_draws, X_values,
            max_size=self.max_size, names=self.feature_names_, verbose=self.verbose,
        )
        self.size_ = suggest_size(self.path_, threshold=self.threshold)
        chosen = self.path_.selected[:self.size_]

        self.projection_ = projected_coefficients(
            mu_draws, sigma_draws, X_values, chosen, names=self.feature_names_
        )
        self.coef_ = np.zeros(len(self.feature_names_))
        for j in chosen:
            self.coef_[j] = self.projection_.loc[self.feature_names_[j], "mean"]
        self.intercept_ = float(self.projection_.loc["intercept", "mean"])
        self.selected_ = np.zeros(len(self.feature_names_), dtype=bool)
        self.selected_[chosen] = True
        self._fitted = True
        return self

    def search_table(self) -> pd.DataFrame:
        """KL divergence after each step of the forward search."""
        self._check_fitted("search_table")
        sizes = range(len(self.path_.selected) + 1)
        return pd.DataFrame(
            {
                "added": [None] + [self.feature_names_[j] for j in self.path_.selected],
                "kl": [self.path_.kl_null] + list(self.path_.kl_path),
            },
            index=pd.Index(sizes, name="size"),
        )

    def summary(self) -> pd.DataFrame:
        self._check_fitted("summary")
        order = {j: rank for rank, j in enumerate(self.path_.selected, start=1)}
        return pd.DataFrame(
            {
                "coef": self.coef_,
                "search_rank": [order.get(j, np.nan) for j in range(len(self.feature_names_))],
                "selected": self.selected_,
            },
            index=pd.Index(self.feature_names_, name="feature"),
        )

    def __repr__(self):
        return (
            f"ProjPredSelector(reference={self.reference!r}, max_size={self.max_size}, "
            f"threshold={self.threshold})"
        )
