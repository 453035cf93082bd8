"""
Validation functions for association patterns and covariance matrices.

This module provides functions to check that a pattern describes a valid
set of pairwise associations and that a covariance matrix built from it can
be sampled from.
"""

import numpy as np
from typing import Tuple, List


def validate_pattern(pattern: np.ndarray) -> Tuple[bool, List[str]]:
    """
    Validate that an association pattern is a binary adjacency matrix.

    Checks:
    1. Pattern is a square 2D matrix
    2. All entries are 0 or 1
    3. Pattern is symmetric
    4. Diagonal is zero (a variable is not associated with itself)

    Args:
        pattern: Candidate pattern matrix of shape (p, p)

    Returns:
        Tuple of (is_valid, list_of_error_messages)
    """
    pattern = np.asarray(pattern)
    errors = []

    if pattern.ndim != 2 or pattern.shape[0] != pattern.shape[1]:
        errors.append(f"Pattern must be a square matrix, got shape {pattern.shape}")
        return False, errors

    if not np.all(np.isin(pattern, [0, 1])):
        n_bad = int(np.sum(~np.isin(pattern, [0, 1])))
        errors.append(f"Pattern must be binary, found {n_bad} entries not in {{0, 1}}")

    if not np.array_equal(pattern, pattern.T):
        errors.append("Pattern must be symmetric")

    diagonal = np.diag(pattern)
    if np.any(diagonal != 0):
        errors.append(
            f"Pattern diagonal must be zero, found {int(np.count_nonzero(diagonal))} nonzero entries"
        )

    is_valid = len(errors) == 0
    return is_valid, errors


def smallest_eigenvalue(cov: np.ndarray) -> float:
    """Smallest eigenvalue of a symmetric matrix."""
    return float(np.linalg.eigvalsh(np.asarray(cov, dtype=float))[0])


def is_positive_semidefinite(cov: np.ndarray, tol: float = 1e-10) -> bool:
    """
    Check whether a symmetric matrix is positive semi-definite.

    Args:
        cov: Symmetric matrix of shape (p, p)
        tol: Tolerance for negative eigenvalues caused by rounding, relative to
            the largest absolute eigenvalue (or 1 if that is smaller). Default: 1e-10.

    Returns:
        True if no eigenvalue is more negative than the scaled tolerance
    """
    cov = np.asarray(cov, dtype=float)
    if not np.allclose(cov, cov.T):
        return False
    eigenvalues = np.linalg.eigvalsh(cov)
    return eigenvalues[0] >= -tol * max(1.0, np.abs(eigenvalues).max())


def max_association(pattern: np.ndarray) -> float:
    """
    Largest association strength for which `I + a * pattern` stays positive semi-definite.

    The eigenvalues of `I + a * P` are `1 + a * lambda_i(P)`, so the bound is
    `-1 / lambda_min(P)`. Patterns without negative eigenvalues (e.g. no
    associations at all) admit any non-negative strength.

    Args:
        pattern: Binary association pattern of shape (p, p)

    Returns:
        Upper bound on the association strength (may be `inf`)
    """
    is_valid, errors = validate_pattern(pattern)
    if not is_valid:
        raise ValueError("Invalid pattern: " + "; ".join(errors))

    lambda_min = smallest_eigenvalue(pattern)
    if lambda_min >= 0:
        return np.inf
    return -1.0 / lambda_min
