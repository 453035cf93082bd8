"""
Comparison of variable-selection methods on simulated data.

This module orchestrates simulating a dataset, fitting each selector and
tabulating prediction and selection performance.
"""

import numpy as np
import pandas as pd
from typing import Dict, Optional, Sequence, Tuple

from .config import DEFAULT_MCMC, DEFAULT_SIMULATION, merge_config
from .data.covariates import block_pattern
from .data.simulation import SimulatedDataset, simulate_dataset, sparse_coefficients
from .data.simulation import true_support as support_of
from .evaluation import r2_score, rmse, selection_metrics
from .models import HorseshoeSelector, LassoSelector, OLSSelector, PCRSelector, VariableSelector
from .projpred import ProjPredSelector
from .utils import as_frame, train_test_split


def default_selectors(seed: int = 0, mcmc: Optional[dict] = None) -> Dict[str, VariableSelector]:
    """
    One selector per technique, keyed by method name.

    The projection-predictive selector reuses the horseshoe fit as its
    reference model, so the horseshoe must be fitted first (dict order).

    Args:
        seed: Seed shared by all selectors. Default: 0.
        mcmc: Overrides for `DEFAULT_MCMC`

    Returns:
        Dictionary of unfitted selectors
    """
    mcmc = merge_config(DEFAULT_MCMC, mcmc)
    horseshoe = HorseshoeSelector(seed=seed, **mcmc)
    return {
        "ols": OLSSelector(alpha=0.05),
        "lasso": LassoSelector(rule="min", seed=seed),
        "lasso_1se": LassoSelector(rule="1se", seed=seed),
        "pcr": PCRSelector(seed=seed),
        "horseshoe": horseshoe,
        "projpred": ProjPredSelector(reference=horseshoe),
    }


def compare_methods(
    X_train: pd.DataFrame,
    y_train: pd.Series,
    selectors: Dict[str, VariableSelector],
    X_test: Optional[pd.DataFrame] = None,
    y_test: Optional[pd.Series] = None,
    true_support: Optional[Sequence[str]] = None,
    verbose: bool = False,
) -> pd.DataFrame:
    """
    Fit each selector and tabulate its performance.

    Args:
        X_train: Training covariates
        y_train: Training response
        selectors: Dictionary of selectors keyed by method name
        X_test: Test covariates. If None, metrics are computed on the training data.
        y_test: Test response
        true_support: Names of covariates with a true effect (optional)
        verbose: If True, print progress messages

    Returns:
        `pandas.DataFrame` with one row per method
    """
    if (X_test is None) != (y_test is None):
        raise ValueError("Provide both X_test and y_test, or neither.")
    X_train = as_frame(X_train)
    if X_test is not None:
        X_test = as_frame(X_test, names=list(X_train.columns))
    X_eval, y_eval = (X_train, y_train) if X_test is None else (X_test, y_test)
    y_eval = np.asarray(y_eval, dtype=float).ravel()

    rows = []
    for name, selector in selectors.items():
        print(f"Fitting {name}...") if verbose else None
        selector.fit(X_train, y_train)
        y_pred = selector.predict(X_eval)
        chosen = selector.selected_features()

        row = {
            "method": name,
            "n_selected": len(chosen),
            "selected": ", ".join(chosen),
            "rmse": rmse(y_eval, y_pred),
            "r2": r2_score(y_eval, y_pred),
        }
        if true_support is not None:
            row.update(selection_metrics(chosen, true_support, list(X_train.columns)))
        rows.append(row)

        print(f"  selected {len(chosen)} covariates: {row['selected']}") if verbose else None

    return pd.DataFrame(rows).set_index("method")


def simulate_from_config(config: Optional[dict] = None) -> SimulatedDataset:
    """Simulate a block-correlated dataset from simulation parameters."""
    params = merge_config(DEFAULT_SIMULATION, config)
    pattern = block_pattern(params['block_sizes'])
    n_features = pattern.shape[0]
    coefficients = sparse_coefficients(n_features, params['n_nonzero'], params['effect_size'])
    return simulate_dataset(
        n_samples=params['n_samples'],
        pattern=pattern,
        scales=np.full(n_features, params['scale']),
        association=params['association'],
        coefficients=coefficients,
        noise_sd=params['noise_sd'],
        intercept=params['intercept'],
        seed=params['seed'],
    )


def run_simulation(
    config: Optional[dict] = None,
    selectors: Optional[Dict[str, VariableSelector]] = None,
    verbose: bool = False,
) -> Tuple[pd.DataFrame, SimulatedDataset]:
    """
    Simulate a dataset, split it and compare selectors on it.

    Args:
        config: Overrides for `DEFAULT_SIMULATION`
        selectors: Selectors to compare. Default: `default_selectors(seed)`.
        verbose: If True, print progress messages

    Returns:
        results: Comparison table from `compare_methods`
        dataset: The simulated dataset
    """
    params = merge_config(DEFAULT_SIMULATION, config)

    print("\n=== Simulating Dataset ===") if verbose else None
    dataset = simulate_from_config(params)
    X_train, X_test, y_train, y_test = train_test_split(
        dataset.X, dataset.y, test_size=params['test_size'], seed=params['seed']
    )
    if verbose:
        print(f"  {len(X_train)} training rows, {len(X_test)} test rows, "
              f"{dataset.X.shape[1]} covariates")

    if selectors is None:
        selectors = default_selectors(seed=params['seed'])

    print("\n=== Comparing Methods ===") if verbose else None
    results = compare_methods(
        X_train, y_train, selectors,
        X_test=X_test, y_test=y_test,
        true_support=support_of(dataset.coefficients),
        verbose=verbose,
    )
    return results, dataset
