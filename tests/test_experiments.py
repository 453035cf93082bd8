"""
Integration tests for method comparison.
"""

import pytest
import numpy as np
import pandas as pd

from variable_selection.config import DEFAULT_SIMULATION, merge_config
from variable_selection.experiments import (
    compare_methods,
    default_selectors,
    run_simulation,
    simulate_from_config,
)
from variable_selection.models import HorseshoeSelector, LassoSelector, OLSSelector, PCRSelector
from variable_selection.projpred import ProjPredSelector
from variable_selection.utils import train_test_split


def fast_selectors():
    return {
        "ols": OLSSelector(),
        "lasso": LassoSelector(seed=0),
        "pcr": PCRSelector(seed=0),
    }


class TestMergeConfig:
    def test_override(self):
        config = merge_config(DEFAULT_SIMULATION, {"seed": 1})
        assert config["seed"] == 1
        assert DEFAULT_SIMULATION["seed"] == 42

    def test_unknown_key(self):
        with pytest.raises(ValueError, match="Unknown parameter"):
            merge_config(DEFAULT_SIMULATION, {"n_obs": 10})


class TestDefaultSelectors:
    def test_keys(self):
        selectors = default_selectors(seed=1, mcmc={"num_samples": 50})
        assert list(selectors) == ["ols", "lasso", "lasso_1se", "pcr", "horseshoe", "projpred"]
        assert isinstance(selectors["horseshoe"], HorseshoeSelector)
        assert selectors["horseshoe"].num_samples == 50

    def test_projpred_shares_reference(self):
        selectors = default_selectors()
        assert isinstance(selectors["projpred"], ProjPredSelector)
        assert selectors["projpred"].reference is selectors["horseshoe"]


class TestSimulateFromConfig:
    def test_defaults(self):
        dataset = simulate_from_config()
        n_features = sum(DEFAULT_SIMULATION["block_sizes"])
        assert dataset.X.shape == (DEFAULT_SIMULATION["n_samples"], n_features)
        assert int((dataset.coefficients != 0).sum()) == DEFAULT_SIMULATION["n_nonzero"]

    def test_reproducible(self):
        a = simulate_from_config({"seed": 3})
        b = simulate_from_config({"seed": 3})
        pd.testing.assert_frame_equal(a.X, b.X)
        pd.testing.assert_series_equal(a.y, b.y)


class TestCompareMethods:
    def setup_method(self):
        self.dataset = simulate_from_config({"n_samples": 150, "association": 0.5, "seed": 0})
        self.X_train, self.X_test, self.y_train, self.y_test = train_test_split(
            self.dataset.X, self.dataset.y, test_size=0.3, seed=0
        )

    def test_result_table(self):
        results = compare_methods(
            self.X_train, self.y_train, fast_selectors(),
            X_test=self.X_test, y_test=self.y_test,
            true_support=["x1", "x2", "x3"],
        )
        assert list(results.index) == ["ols", "lasso", "pcr"]
        for column in ["n_selected", "selected", "rmse", "r2", "tpr", "fdr", "f1"]:
            assert column in results.columns
        assert np.all(results["rmse"] > 0)
        assert results.loc["lasso", "tpr"] == 1.0

    def test_without_truth_or_test_data(self):
        results = compare_methods(self.X_train, self.y_train, fast_selectors())
        assert "tpr" not in results.columns
        ols = OLSSelector().fit(self.X_train, self.y_train)
        residual = self.y_train.values - ols.predict(self.X_train)
        assert results.loc["ols", "rmse"] == pytest.approx(np.sqrt(np.mean(residual**2)))

    def test_array_input(self):
        """Arrays are accepted and get default column names."""
        results = compare_methods(
            self.X_train.values, self.y_train.values, fast_selectors(),
            X_test=self.X_test.values, y_test=self.y_test.values,
            true_support=["x1", "x2", "x3"],
        )
        expected = compare_methods(
            self.X_train, self.y_train, fast_selectors(),
            X_test=self.X_test, y_test=self.y_test,
            true_support=["x1", "x2", "x3"],
        )
        np.testing.assert_allclose(results["rmse"].values, expected["rmse"].values)
        assert list(results["selected"]) == list(expected["selected"])

    def test_test_data_must_be_paired(self):
        with pytest.raises(ValueError, match="both"):
            compare_methods(self.X_train, self.y_train, fast_selectors(), X_test=self.X_test)

    def test_verbose(self, capsys):
        compare_methods(self.X_train, self.y_train, {"ols": OLSSelector()}, verbose=True)
        assert "Fitting ols..." in capsys.readouterr().out


class TestRunSimulation:
    def test_run(self):
        results, dataset = run_simulation(
            {"n_samples": 120, "seed": 5}, selectors=fast_selectors()
        )
        assert list(results.index) == ["ols", "lasso", "pcr"]
        assert len(dataset.X) == 120
        assert results["n_selected"].between(0, dataset.X.shape[1]).all()


class TestTrainTestSplit:
    def test_split(self):
        dataset = simulate_from_config({"n_samples": 100})
        X_train, X_test, y_train, y_test = train_test_split(dataset.X, dataset.y, test_size=0.25, seed=1)
        assert len(X_test) == 25
        assert len(X_train) == 75
        assert set(X_train.index).isdisjoint(X_test.index)
        pd.testing.assert_index_equal(X_train.index, y_train.index)

    def test_invalid_test_size(self):
        dataset = simulate_from_config({"n_samples": 10})
        with pytest.raises(ValueError, match="test_size"):
            train_test_split(dataset.X, dataset.y, test_size=1.0)
