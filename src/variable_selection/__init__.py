"""Variable-selection techniques on synthetic collinear data."""

__version__ = "0.1.0"

from .data import (
    build_covariance,
    generate_covariates,
    simulate_dataset,
    sparse_coefficients,
    true_support,
)

from .models import (
    OLSSelector,
    LassoSelector,
    PCRSelector,
    HorseshoeSelector,
)

from .projpred import ProjPredSelector, forward_search, suggest_size

from .diagnostics import (
    variance_inflation_factors,
    condition_number,
    correlation_table,
)

from .evaluation import (
    rmse,
    mae,
    r2_score,
    selection_metrics,
)

from .experiments import compare_methods, run_simulation

__all__ = [
    # Data generation
    "build_covariance",
    "generate_covariates",
    "simulate_dataset",
    "sparse_coefficients",
    "true_support",

    # Selectors
    "OLSSelector",
    "LassoSelector",
    "PCRSelector",
    "HorseshoeSelector",
    "ProjPredSelector",

    # Projection predictive search
    "forward_search",
    "suggest_size",

    # Diagnostics
    "variance_inflation_factors",
    "condition_number",
    "correlation_table",

    # Evaluation metrics
    "rmse",
    "mae",
    "r2_score",
    "selection_metrics",

    # Experiments
    "compare_methods",
    "run_simulation",
]
