"""Bayesian linear regression with a regularized horseshoe prior."""

import warnings
import numpy as np
import pandas as pd
import jax
import jax.numpy as jnp
import numpyro as npyr
import numpyro.distributions as dist
from numpyro.diagnostics import summary as mcmc_summary
from numpyro.infer import MCMC, NUTS
from typing import Dict, Optional

from .base import VariableSelector
from ..config import DEFAULT_MCMC
from ..utils import as_frame, check_design, standardize


def hslinear(X=None, y=None, scale_global=None, slab_scale=None, slab_df=None):
    """NumPyro model for linear regression with a regularized horseshoe prior.

    Covariates and response are expected to be standardized. The global
    scale is expressed relative to the noise scale sigma, following
    Piironen & Vehtari (2017).

    Parameters
    ----------
    X : ndarray (N, J)
        Standardized design matrix.
    y : ndarray (N,) or None
        Standardized response. None when sampling from the predictive.
    scale_global : float
        Prior guess for the global shrinkage scale tau0.
    slab_scale : float
        Scale of the regularizing slab on large coefficients.
    slab_df : float
        Degrees of freedom for the slab inverse-gamma prior.
    """
    nu_local = 1.
    nu_global = 1.
    N, J = X.shape

    intercept = npyr.sample("intercept", dist.Normal(0, 10.0))
    sigma = npyr.sample("sigma", dist.HalfNormal(1.0))

    aux1_global = npyr.sample("aux1_global", dist.HalfNormal(1.0))
    aux2_global = npyr.sample("aux2_global", dist.InverseGamma(0.5 * nu_global, 0.5 * nu_global))
    tau = npyr.deterministic("tau", aux1_global * jnp.sqrt(aux2_global) * scale_global * sigma)
    caux = npyr.sample("caux", dist.InverseGamma(0.5 * slab_df, 0.5 * slab_df))
    c = npyr.deterministic("c", slab_scale * jnp.sqrt(caux))
    with npyr.plate("J covariates", J):
        z = npyr.sample("z", dist.Normal(0, 1.0))
        aux1_local = npyr.sample("aux1_local", dist.HalfNormal(1.0))
        aux2_local = npyr.sample("aux2_local", dist.InverseGamma(0.5 * nu_local, 0.5 * nu_local))
        lambda_raw = aux1_local * jnp.sqrt(aux2_local)
        lambda_tilde = npyr.deterministic(
            "lambda_tilde",
            jnp.sqrt(c**2 * jnp.square(lambda_raw) / (c**2 + tau**2 * jnp.square(lambda_raw))),
        )
        beta = npyr.deterministic("beta", z * lambda_tilde * tau)
    mu = npyr.deterministic("mu", intercept + jnp.dot(X, beta))
    with npyr.plate("N observations", N):
        npyr.sample("y", dist.Normal(mu, sigma), obs=y)


def default_scale_global(n_samples: int, n_features: int, expected_nonzero: int) -> float:
    """Global scale tau0 = p0 / (p - p0) / sqrt(n) for a prior guess of p0 nonzero effects."""
    if not 0 < expected_nonzero < n_features:
        raise ValueError(
            f"expected_nonzero must lie in (0, {n_features}), got {expected_nonzero}."
        )
    return expected_nonzero / (n_features - expected_nonzero) / np.sqrt(n_samples)


class HorseshoeSelector(VariableSelector):
    """
    Bayesian linear regression with a regularized horseshoe prior, sampled with NUTS.

    A covariate is selected when the central credible interval of its
    coefficient excludes zero. The fitted model also serves as the
    reference model for projection-predictive selection.

    Attributes:
        mcmc_: Fitted `numpyro.infer.MCMC` object
        scale_global_: Global scale tau0 used for the fit
        n_divergent_: Number of divergent transitions after warmup
    """

    name = "horseshoe"

    def __init__(
        self,
        scale_global: Optional[float] = None,
        slab_scale: float = 2.0,
        slab_df: float = 4.0,
        expected_nonzero: Optional[int] = None,
        num_warmup: int = DEFAULT_MCMC['num_warmup'],
        num_samples: int = DEFAULT_MCMC['num_samples'],
        num_chains: int = DEFAULT_MCMC['num_chains'],
        target_accept_prob: float = DEFAULT_MCMC['target_accept_prob'],
        max_tree_depth: int = DEFAULT_MCMC['max_tree_depth'],
        credible_level: float = 0.9,
        seed: int = 0,
        verbose: bool = False,
    ):
        super().__init__()
        if not 0.0 < credible_level < 1.0:
            raise ValueError(f"credible_level must lie in (0, 1), got {credible_level}.")
        self.scale_global = scale_global
        self.slab_scale = slab_scale
        self.slab_df = slab_df
        self.expected_nonzero = expected_nonzero
        self.num_warmup = num_warmup
        self.num_samples = num_samples
        self.num_chains = num_chains
        self.target_accept_prob = target_accept_prob
        self.max_tree_depth = max_tree_depth
        self.credible_level = credible_level
        self.seed = seed
        self.verbose = verbose

    def fit(self, X, y) -> "HorseshoeSelector":
        X = as_frame(X)
        X_values, y_values = check_design(X, y)
        n_samples, n_features = X_values.shape
        if n_features < 2:
            raise ValueError(f"Horseshoe regression needs at least 2 covariates, got {n_features}.")

        X_std, self._x_center, self._x_scale = standardize(X.astype(float))
        self._y_center = float(y_values.mean())
        self._y_scale = float(y_values.std())
        if np.isclose(self._y_scale, 0.0):
            raise ValueError("Response is constant; nothing to explain.")
        y_std = (y_values - self._y_center) / self._y_scale

        if self.scale_global is None:
            p0 = self.expected_nonzero if self.expected_nonzero is not None else max(1, n_features // 4)
            self.scale_global_ = default_scale_global(n_samples, n_features, p0)
        else:
            self.scale_global_ = self.scale_global

        kernel = NUTS(
            hslinear,
            target_accept_prob=self.target_accept_prob,
            max_tree_depth=self.max_tree_depth,
        )
        self.mcmc_ = MCMC(
            kernel,
            num_warmup=self.num_warmup,
            num_samples=self.num_samples,
            num_chains=self.num_chains,
            progress_bar=self.verbose,
        )
        self.mcmc_.run(
            jax.random.PRNGKey(self.seed),
            X=jnp.asarray(X_std.values), y=jnp.asarray(y_std),
            scale_global=self.scale_global_, slab_scale=self.slab_scale, slab_df=self.slab_df,
            extra_fields=("diverging",),
        )
        if self.verbose:
            self.mcmc_.print_summary(exclude_deterministic=False)

        self.n_divergent_ = int(np.sum(self.mcmc_.get_extra_fields()["diverging"]))
        if self.n_divergent_ > 0:
            warnings.warn(
                f"{self.n_divergent_} divergent transitions after warmup; "
                f"consider raising target_accept_prob ({self.target_accept_prob})."
            )

        self.feature_names_ = list(X.columns)
        self._X_train = X_values
        self._n_train = n_samples
        self._fitted = True

        draws = self.posterior_samples()
        self.coef_ = draws["beta"].mean(axis=0)
        self.intercept_ = float(draws["intercept"].mean())
        lower, upper = self._credible_interval(draws["beta"])
        self.selected_ = (lower > 0) | (upper < 0)
        return self

    def _credible_interval(self, beta_draws: np.ndarray):
        tail = 0.5 * (1.0 - self.credible_level)
        return np.quantile(beta_draws, tail, axis=0), np.quantile(beta_draws, 1.0 - tail, axis=0)

    def posterior_samples(self) -> Dict[str, np.ndarray]:
        """
        Posterior draws on the original covariate and response scales.

        Returns:
            Dictionary with keys 'beta' (S, p), 'intercept' (S,), 'sigma' (S,),
            'tau' (S,) and 'kappa' (S, p). Chains are concatenated.
        """
        self._check_fitted("posterior_samples")
        samples = self.mcmc_.get_samples()
        beta_std = np.asarray(samples["beta"])
        sigma_std = np.asarray(samples["sigma"])
        tau = np.asarray(samples["tau"])
        lambda_tilde = np.asarray(samples["lambda_tilde"])

        beta = beta_std * self._y_scale / self._x_scale.values
        intercept = (
            self._y_center
            + np.asarray(samples["intercept"]) * self._y_scale
            - beta @ self._x_center.values
        )
        # Shrinkage factor: 0 means no shrinkage, 1 means full shrinkage to zero
        kappa = 1.0 / (
            1.0 + self._n_train * (tau[:, None] * lambda_tilde) ** 2 / sigma_std[:, None] ** 2
        )
        return {
            "beta": beta,
            "intercept": intercept,
            "sigma": sigma_std * self._y_scale,
            "tau": tau,
            "kappa": kappa,
        }

    def linear_predictor_draws(self, X=None) -> np.ndarray:
        """
        Posterior draws of the linear predictor mu = intercept + X beta.

        Args:
            X: Covariates. Default: the training covariates.

        Returns:
            Array of shape (S, n_samples)
        """
        self._check_fitted("linear_predictor_draws")
        if X is None:
            X_values = self._X_train
        else:
            X_values = as_frame(X, names=self.feature_names_)[self.feature_names_].values
        draws = self.posterior_samples()
        return draws["intercept"][:, None] + draws["beta"] @ X_values.T

    def effective_nonzero(self) -> float:
        """Posterior mean of the effective number of nonzero coefficients, sum(1 - kappa)."""
        self._check_fitted("effective_nonzero")
        return float(np.mean(np.sum(1.0 - self.posterior_samples()["kappa"], axis=1)))

    def diagnostics(self) -> pd.DataFrame:
        """Split R-hat and effective sample size for each coefficient."""
        self._check_fitted("diagnostics")
        grouped = self.mcmc_.get_samples(group_by_chain=True)
        stats = mcmc_summary({"beta": np.asarray(grouped["beta"])}, group_by_chain=True)["beta"]
        return pd.DataFrame(
            {"n_eff": np.asarray(stats["n_eff"]), "r_hat": np.asarray(stats["r_hat"])},
            index=pd.Index(self.feature_names_, name="feature"),
        )

    def summary(self) -> pd.DataFrame:
        self._check_fitted("summary")
        draws = self.posterior_samples()
        lower, upper = self._credible_interval(draws["beta"])
        return pd.DataFrame(
            {
                "mean": draws["beta"].mean(axis=0),
                "sd": draws["beta"].std(axis=0),
                "lower": lower,
                "upper": upper,
                "kappa": draws["kappa"].mean(axis=0),
                "selected": self.selected_,
            },
            index=pd.Index(self.feature_names_, name="feature"),
        )

    def __repr__(self):
        return (
            f"HorseshoeSelector(scale_global={self.scale_global}, slab_scale={self.slab_scale}, "
            f"slab_df={self.slab_df}, num_samples={self.num_samples}, num_chains={self.num_chains})"
        )
