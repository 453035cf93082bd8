"""Default parameters for simulations and MCMC fits."""

from typing import Optional


# Simulation parameters
DEFAULT_SIMULATION = {
    'n_samples': 200,          # total sample size (train + test)
    'block_sizes': [3, 3, 3, 3, 3],  # association pattern: 5 blocks of 3 covariates
    'scale': 1.0,              # standard deviation of every covariate
    'association': 0.8,        # correlation between covariates in the same block
    'n_nonzero': 3,            # number of covariates with a true effect
    'effect_size': 1.0,
    'noise_sd': 1.0,
    'intercept': 0.0,
    'test_size': 0.3,          # fraction of rows held out for evaluation
    'seed': 42,
}

# MCMC parameters for the horseshoe reference model
DEFAULT_MCMC = {
    'num_warmup': 1000,
    'num_samples': 1000,
    'num_chains': 2,
    'target_accept_prob': 0.95,
    'max_tree_depth': 10,
}


def merge_config(defaults: dict, overrides: Optional[dict] = None) -> dict:
    """
    Return a copy of `defaults` updated with `overrides`.

    Args:
        defaults: Default parameters
        overrides: Parameters to replace. Keys must exist in `defaults`.

    Returns:
        Merged parameter dictionary
    """
    merged = dict(defaults)
    if overrides is None:
        return merged

    unknown = sorted(set(overrides) - set(defaults))
    if unknown:
        raise ValueError(
            f"Unknown parameter(s) {unknown}. Available: {sorted(defaults)}"
        )
    merged.update(overrides)
    return merged
