"""Evaluation metrics for predictions and variable selection."""

import numpy as np
from typing import Dict, Sequence


def rmse(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """
    Calculate the root mean square error (RMSE).

    Args:
        y_true: True values
        y_pred: Predicted values

    Returns:
        rmse: Root mean square error
    """
    y_true, y_pred = np.asarray(y_true), np.asarray(y_pred)
    return float(np.sqrt(np.mean((y_pred - y_true)**2)))


def mae(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """
    Calculate mean absolute error (MAE).

    Args:
        y_true: True values
        y_pred: Predicted values

    Returns:
        mae: Mean absolute error
    """
    y_true, y_pred = np.asarray(y_true), np.asarray(y_pred)
    return float(np.mean(np.abs(y_pred - y_true)))


def r2_score(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """
    Coefficient of determination of a set of predictions.

    Args:
        y_true: True values
        y_pred: Predicted values
    """
    y_true, y_pred = np.asarray(y_true), np.asarray(y_pred)
    sum_e = np.sum((y_true - y_pred)**2)
    sum_s = np.sum((y_true - np.mean(y_true))**2)
    return float(1.0 - sum_e / sum_s)


def selection_metrics(
    selected: Sequence[str],
    true_support: Sequence[str],
    all_features: Sequence[str],
) -> Dict[str, float]:
    """
    Compare a set of selected covariates to the true support.

    Args:
        selected: Names of selected covariates
        true_support: Names of covariates with a nonzero true effect
        all_features: Names of all candidate covariates

    Returns:
        Dictionary with counts 'tp', 'fp', 'fn', 'tn' and rates
        'tpr' (recall), 'fdr' (false discovery rate) and 'f1'.
        By convention fdr is 0 when nothing is selected and tpr is 1
        when the true support is empty.
    """
    selected, truth, universe = set(selected), set(true_support), set(all_features)
    unknown = (selected | truth) - universe
    if unknown:
        raise ValueError(f"Unknown covariates {sorted(unknown)}.")

    tp = len(selected & truth)
    fp = len(selected - truth)
    fn = len(truth - selected)
    tn = len(universe - selected - truth)

    tpr = tp / (tp + fn) if (tp + fn) > 0 else 1.0
    fdr = fp / (tp + fp) if (tp + fp) > 0 else 0.0
    precision = 1.0 - fdr
    f1 = 2 * precision * tpr / (precision + tpr) if (precision + tpr) > 0 else 0.0

    return {"tp": tp, "fp": fp, "fn": fn, "tn": tn, "tpr": tpr, "fdr": fdr, "f1": f1}
