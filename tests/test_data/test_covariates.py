"""
Unit tests for synthetic covariate generation.
"""

import pytest
import numpy as np
import pandas as pd

from variable_selection.data.covariates import (
    build_covariance,
    generate_covariates,
    independent_pattern,
    exchangeable_pattern,
    chain_pattern,
    block_pattern,
)


class TestPatterns:
    """Tests for the pattern helpers."""

    def test_independent(self):
        pattern = independent_pattern(3)
        np.testing.assert_array_equal(pattern, np.zeros((3, 3)))

    def test_exchangeable(self):
        pattern = exchangeable_pattern(3)
        expected = np.array([[0, 1, 1], [1, 0, 1], [1, 1, 0]])
        np.testing.assert_array_equal(pattern, expected)

    def test_chain(self):
        pattern = chain_pattern(4)
        expected = np.array([
            [0, 1, 0, 0],
            [1, 0, 1, 0],
            [0, 1, 0, 1],
            [0, 0, 1, 0],
        ])
        np.testing.assert_array_equal(pattern, expected)

    def test_block(self):
        pattern = block_pattern([2, 1, 2])
        expected = np.array([
            [0, 1, 0, 0, 0],
            [1, 0, 0, 0, 0],
            [0, 0, 0, 0, 0],
            [0, 0, 0, 0, 1],
            [0, 0, 0, 1, 0],
        ])
        np.testing.assert_array_equal(pattern, expected)

    def test_block_rejects_empty_block(self):
        with pytest.raises(ValueError, match="Block sizes"):
            block_pattern([2, 0])


class TestBuildCovariance:
    """Tests for `build_covariance`."""

    def test_structure(self):
        scales = np.array([1.0, 2.0, 3.0])
        cov = build_covariance(block_pattern([2, 1]), scales, association=0.5)
        expected = np.array([
            [1.0, 0.5 * 1.0 * 2.0, 0.0],
            [0.5 * 2.0 * 1.0, 4.0, 0.0],
            [0.0, 0.0, 9.0],
        ])
        np.testing.assert_allclose(cov, expected)

    def test_zero_association_is_diagonal(self):
        scales = np.array([0.5, 1.5])
        cov = build_covariance(exchangeable_pattern(2), scales, association=0.0)
        np.testing.assert_allclose(cov, np.diag(scales**2))

    def test_does_not_enforce_psd(self):
        # Correlation -0.9 between every pair of 3 variables is not a valid covariance
        cov = build_covariance(exchangeable_pattern(3), np.ones(3), association=-0.9)
        assert np.linalg.eigvalsh(cov)[0] < 0

    def test_invalid_pattern(self):
        pattern = np.array([[0, 1], [0, 0]])
        with pytest.raises(ValueError, match="symmetric"):
            build_covariance(pattern, np.ones(2), 0.5)

    def test_wrong_number_of_scales(self):
        with pytest.raises(ValueError, match="scales"):
            build_covariance(chain_pattern(3), np.ones(2), 0.5)

    def test_non_positive_scales(self):
        with pytest.raises(ValueError, match="positive"):
            build_covariance(chain_pattern(2), np.array([1.0, 0.0]), 0.5)


class TestGenerateCovariates:
    """Tests for `generate_covariates`."""

    def test_shape_and_names(self):
        X = generate_covariates(10, chain_pattern(3), np.ones(3), 0.3)
        assert isinstance(X, pd.DataFrame)
        assert X.shape == (10, 3)
        assert list(X.columns) == ["x1", "x2", "x3"]

    def test_custom_names(self):
        X = generate_covariates(5, chain_pattern(2), np.ones(2), 0.3, names=["a", "b"])
        assert list(X.columns) == ["a", "b"]

    def test_same_seed_reproduces(self):
        X1 = generate_covariates(20, block_pattern([2, 2]), np.ones(4), 0.7, seed=5)
        X2 = generate_covariates(20, block_pattern([2, 2]), np.ones(4), 0.7, seed=5)
        pd.testing.assert_frame_equal(X1, X2)

    def test_different_seed_differs(self):
        X1 = generate_covariates(20, block_pattern([2, 2]), np.ones(4), 0.7, seed=5)
        X2 = generate_covariates(20, block_pattern([2, 2]), np.ones(4), 0.7, seed=6)
        assert not np.allclose(X1.values, X2.values)

    def test_sample_moments(self):
        """Large samples recover the requested scales and correlations."""
        scales = np.array([1.0, 2.0, 0.5])
        mean = np.array([1.0, -1.0, 0.0])
        X = generate_covariates(
            20000, block_pattern([2, 1]), scales, 0.8, mean=mean, seed=1
        )
        np.testing.assert_allclose(X.mean().values, mean, atol=0.05)
        np.testing.assert_allclose(X.std().values, scales, rtol=0.03)
        corr = X.corr().values
        assert corr[0, 1] == pytest.approx(0.8, abs=0.02)
        assert corr[0, 2] == pytest.approx(0.0, abs=0.03)

    def test_not_positive_semidefinite(self):
        with pytest.raises(ValueError, match="positive semi-definite"):
            generate_covariates(10, exchangeable_pattern(3), np.ones(3), -0.9)

    def test_large_scales_at_boundary(self):
        # I - 0.5P is singular but PSD for the 3-exchangeable pattern
        X = generate_covariates(5, exchangeable_pattern(3), np.full(3, 1e4), -0.5)
        assert X.shape == (5, 3)
        assert np.all(np.isfinite(X.values))

    def test_invalid_n_samples(self):
        with pytest.raises(ValueError, match="n_samples"):
            generate_covariates(0, chain_pattern(2), np.ones(2), 0.5)

    def test_wrong_mean_shape(self):
        with pytest.raises(ValueError, match="mean"):
            generate_covariates(5, chain_pattern(2), np.ones(2), 0.5, mean=[0.0])

    def test_wrong_number_of_names(self):
        with pytest.raises(ValueError, match="names"):
            generate_covariates(5, chain_pattern(2), np.ones(2), 0.5, names=["a"])
