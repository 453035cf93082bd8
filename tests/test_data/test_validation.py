"""
Unit tests for pattern and covariance validation.
"""

import pytest
import numpy as np

from variable_selection.data.covariates import (
    block_pattern,
    chain_pattern,
    exchangeable_pattern,
    independent_pattern,
)
from variable_selection.data.validation import (
    validate_pattern,
    is_positive_semidefinite,
    max_association,
)


class TestValidatePattern:
    """Tests for `validate_pattern`."""

    def test_valid(self):
        is_valid, errors = validate_pattern(block_pattern([2, 3]))
        assert is_valid
        assert errors == []

    def test_not_square(self):
        is_valid, errors = validate_pattern(np.zeros((2, 3)))
        assert not is_valid
        assert "square" in errors[0]

    def test_collects_all_errors(self):
        pattern = np.array([[1, 2], [0, 0]])
        is_valid, errors = validate_pattern(pattern)
        assert not is_valid
        assert len(errors) == 3
        assert any("binary" in e for e in errors)
        assert any("symmetric" in e for e in errors)
        assert any("diagonal" in e for e in errors)


class TestIsPositiveSemidefinite:
    """Tests for `is_positive_semidefinite`."""

    def test_identity(self):
        assert is_positive_semidefinite(np.eye(3))

    def test_singular(self):
        assert is_positive_semidefinite(np.ones((2, 2)))

    def test_negative_eigenvalue(self):
        assert not is_positive_semidefinite(np.array([[1.0, 2.0], [2.0, 1.0]]))

    def test_not_symmetric(self):
        assert not is_positive_semidefinite(np.array([[1.0, 0.5], [0.0, 1.0]]))

    def test_tolerance_scales_with_magnitude(self):
        scales = np.full(3, 1e4)
        cov = np.diag(scales) @ (np.eye(3) - 0.5 * exchangeable_pattern(3)) @ np.diag(scales)
        assert is_positive_semidefinite(cov)
        assert not is_positive_semidefinite(1e8 * np.array([[1.0, 2.0], [2.0, 1.0]]))


class TestMaxAssociation:
    """Tests for `max_association`."""

    def test_independent(self):
        assert max_association(independent_pattern(3)) == np.inf

    def test_exchangeable(self):
        assert max_association(exchangeable_pattern(4)) == pytest.approx(1.0)

    def test_chain(self):
        # Eigenvalues of the 3-chain are -sqrt(2), 0, sqrt(2)
        assert max_association(chain_pattern(3)) == pytest.approx(1 / np.sqrt(2))

    def test_bound_is_tight(self):
        pattern = chain_pattern(5)
        bound = max_association(pattern)
        assert is_positive_semidefinite(np.eye(5) + 0.99 * bound * pattern)
        assert not is_positive_semidefinite(np.eye(5) + 1.01 * bound * pattern)

    def test_invalid_pattern(self):
        with pytest.raises(ValueError, match="Invalid pattern"):
            max_association(np.eye(2))
