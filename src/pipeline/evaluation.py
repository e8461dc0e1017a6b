# -*- coding: utf-8 -*-
"""
Evaluation of fitted models on held-out rows.

Regression models are scored with RMSE and R-squared; classifiers with a
confusion matrix, sensitivity/specificity at one or many thresholds, and the
ROC curve with its AUC.
"""

import numpy as np
import pandas as pd
from typing import List, Optional
from sklearn.metrics import confusion_matrix, mean_squared_error, r2_score, roc_auc_score, roc_curve


def regression_metrics(y_true, y_pred):
    """RMSE and R-squared of numeric predictions."""
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)
    return {
        'rmse': float(np.sqrt(mean_squared_error(y_true, y_pred))),
        'r2': float(r2_score(y_true, y_pred)),
    }


def _predicted_labels(y_prob, threshold):
    return (np.asarray(y_prob, dtype=float) > threshold).astype(int)


def confusion_table(y_true, y_prob, threshold: float = 0.5) -> pd.DataFrame:
    """2x2 confusion matrix; rows are actual classes, columns predicted classes."""
    y_hat = _predicted_labels(y_prob, threshold)
    cm = confusion_matrix(np.asarray(y_true).astype(int), y_hat, labels=[0, 1])
    return pd.DataFrame(cm, index=['actual_0', 'actual_1'], columns=['predicted_0', 'predicted_1'])


def binary_metrics_at_threshold(y_true, y_prob, threshold: float = 0.5):
    """
    Confusion counts and rates when P(positive) > threshold is called positive.

    Sensitivity and specificity are NaN when their class is absent.
    """
    y_true = np.asarray(y_true).astype(int)
    y_hat = _predicted_labels(y_prob, threshold)
    tn, fp, fn, tp = confusion_matrix(y_true, y_hat, labels=[0, 1]).ravel()
    n = tn + fp + fn + tp
    return {
        'threshold': float(threshold),
        'TP': int(tp),
        'FP': int(fp),
        'TN': int(tn),
        'FN': int(fn),
        'accuracy': float((tp + tn) / n) if n else np.nan,
        'sensitivity': float(tp / (tp + fn)) if (tp + fn) else np.nan,
        'specificity': float(tn / (tn + fp)) if (tn + fp) else np.nan,
    }


def threshold_sweep(y_true, y_prob, step: float = 0.01,
                    thresholds: Optional[List[float]] = None) -> pd.DataFrame:
    """
    Metrics over a grid of thresholds from 0 to 1.

    As the threshold rises fewer rows are called positive, so sensitivity
    never increases and specificity never decreases along the grid.
    """
    if thresholds is None:
        if not 0 < step <= 1:
            raise ValueError("step must be in (0, 1]")
        n_steps = int(round(1.0 / step))
        thresholds = np.round(np.linspace(0.0, 1.0, n_steps + 1), 10)
    rows = [binary_metrics_at_threshold(y_true, y_prob, t) for t in sorted(thresholds)]
    return pd.DataFrame(rows)


def roc_analysis(y_true, y_prob):
    """
    ROC curve and area under it.

    Returns:
        dict: 'curve' (DataFrame with fpr, tpr, threshold) and 'auc'.
              fpr is 1 - specificity, tpr is sensitivity.
    """
    y_true = np.asarray(y_true).astype(int)
    fpr, tpr, thr = roc_curve(y_true, y_prob)
    curve = pd.DataFrame({'fpr': fpr, 'tpr': tpr, 'threshold': thr})
    return {'curve': curve, 'auc': float(roc_auc_score(y_true, y_prob))}


def class_counts(y) -> pd.Series:
    """Number of rows per class, sorted by class label."""
    return pd.Series(np.asarray(y)).value_counts().sort_index()


def describe_by_group(df: pd.DataFrame, columns: List[str], group: str) -> pd.DataFrame:
    """Mean and standard deviation of each column, overall and per group."""
    overall = df[columns].agg(['mean', 'std']).T
    overall.columns = [f"overall_{stat}" for stat in overall.columns]
    tables = [overall]
    for level, part in df.groupby(group, observed=True):
        stats = part[columns].agg(['mean', 'std']).T
        stats.columns = [f"{level}_{stat}" for stat in stats.columns]
        tables.append(stats)
    table = pd.concat(tables, axis=1)
    table.index.name = 'variable'
    return table
