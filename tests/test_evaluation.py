"""
Tests for regression and classifier evaluation helpers.

Run with: pytest tests/test_evaluation.py -v
"""

import numpy as np
import pandas as pd
import pytest

from src.pipeline.evaluation import (
    binary_metrics_at_threshold, class_counts, confusion_table,
    describe_by_group, regression_metrics, roc_analysis, threshold_sweep
)


@pytest.fixture
def scored():
    """Labels and probabilities with a known confusion matrix at 0.5."""
    y_true = np.array([0, 0, 0, 0, 1, 1, 1, 1, 1, 0])
    y_prob = np.array([0.1, 0.2, 0.7, 0.4, 0.9, 0.8, 0.3, 0.6, 0.55, 0.5])
    return y_true, y_prob


class TestRegressionMetrics:

    def test_perfect_prediction(self):
        y = np.array([1.0, 2.0, 3.0, 4.0])
        metrics = regression_metrics(y, y)
        assert metrics['rmse'] == pytest.approx(0.0)
        assert metrics['r2'] == pytest.approx(1.0)

    def test_constant_offset(self):
        y = np.array([1.0, 2.0, 3.0, 4.0])
        assert regression_metrics(y, y + 2.0)['rmse'] == pytest.approx(2.0)


class TestConfusion:
    """Tests for counts at a single threshold."""

    def test_counts(self, scored):
        y_true, y_prob = scored
        m = binary_metrics_at_threshold(y_true, y_prob, 0.5)
        # 0.5 itself is not above the threshold
        assert (m['TP'], m['FP'], m['TN'], m['FN']) == (4, 1, 4, 1)
        assert m['accuracy'] == pytest.approx(0.8)
        assert m['sensitivity'] == pytest.approx(0.8)
        assert m['specificity'] == pytest.approx(0.8)

    def test_table_matches_counts(self, scored):
        table = confusion_table(*scored, threshold=0.5)
        assert table.loc['actual_1', 'predicted_1'] == 4
        assert table.loc['actual_0', 'predicted_1'] == 1
        assert table.to_numpy().sum() == 10

    def test_absent_class_gives_nan(self):
        m = binary_metrics_at_threshold([0, 0, 0], [0.2, 0.7, 0.1], 0.5)
        assert np.isnan(m['sensitivity'])
        assert m['specificity'] == pytest.approx(2 / 3)


class TestThresholdSweep:
    """Tests for the 0..1 threshold grid."""

    def test_grid(self, scored):
        sweep = threshold_sweep(*scored, step=0.01)
        assert len(sweep) == 101
        assert sweep['threshold'].iloc[0] == 0.0
        assert sweep['threshold'].iloc[-1] == 1.0

    def test_monotone(self, scored):
        sweep = threshold_sweep(*scored, step=0.05)
        assert (np.diff(sweep['sensitivity']) <= 1e-12).all()
        assert (np.diff(sweep['specificity']) >= -1e-12).all()

    def test_endpoints(self, scored):
        sweep = threshold_sweep(*scored, step=0.1)
        assert sweep['sensitivity'].iloc[0] == 1.0
        assert sweep['specificity'].iloc[-1] == 1.0

    def test_bad_step(self, scored):
        with pytest.raises(ValueError):
            threshold_sweep(*scored, step=0.0)

    def test_explicit_thresholds(self, scored):
        sweep = threshold_sweep(*scored, thresholds=[0.7, 0.3])
        assert sweep['threshold'].tolist() == [0.3, 0.7]


class TestRoc:

    def test_perfect_separation(self):
        result = roc_analysis([0, 0, 1, 1], [0.1, 0.2, 0.8, 0.9])
        assert result['auc'] == pytest.approx(1.0)
        assert list(result['curve'].columns) == ['fpr', 'tpr', 'threshold']

    def test_reversed_scores(self):
        assert roc_analysis([0, 0, 1, 1], [0.9, 0.8, 0.2, 0.1])['auc'] == pytest.approx(0.0)


class TestDescriptives:

    def test_class_counts(self):
        counts = class_counts([1, 0, 0, 1, 0])
        assert counts.loc[0] == 3
        assert counts.loc[1] == 2

    def test_describe_by_group(self):
        df = pd.DataFrame({'x': [1.0, 3.0, 5.0, 7.0], 'g': ['a', 'a', 'b', 'b']})
        table = describe_by_group(df, ['x'], 'g')
        assert table.loc['x', 'overall_mean'] == pytest.approx(4.0)
        assert table.loc['x', 'a_mean'] == pytest.approx(2.0)
        assert table.loc['x', 'b_mean'] == pytest.approx(6.0)
        assert table.index.name == 'variable'
