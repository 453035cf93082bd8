"""Synthetic data generation."""

from .covariates import (
    build_covariance,
    generate_covariates,
    independent_pattern,
    exchangeable_pattern,
    chain_pattern,
    block_pattern,
)
from .simulation import (
    SimulatedDataset,
    generate_response,
    simulate_dataset,
    sparse_coefficients,
    true_support,
)
from .validation import (
    validate_pattern,
    is_positive_semidefinite,
    max_association,
)

__all__ = [
    "build_covariance",
    "generate_covariates",
    "independent_pattern",
    "exchangeable_pattern",
    "chain_pattern",
    "block_pattern",
    "SimulatedDataset",
    "generate_response",
    "simulate_dataset",
    "sparse_coefficients",
    "true_support",
    "validate_pattern",
    "is_positive_semidefinite",
    "max_association",
]
