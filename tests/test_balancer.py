"""
Tests for MWMOTE / SMOTE class balancing.

Run with: pytest tests/test_balancer.py -v
"""

import numpy as np
import pandas as pd
import pytest

from src.pipeline.balancer import ClassBalancer


@pytest.fixture
def imbalanced():
    """120 majority rows and 40 minority rows with non-contiguous labels."""
    rng = np.random.default_rng(11)
    X = pd.DataFrame(
        np.vstack([rng.normal(0.0, 1.0, size=(120, 3)), rng.normal(1.5, 1.0, size=(40, 3))]),
        columns=['f1', 'f2', 'f3'],
        index=np.arange(160) * 3 + 7,
    )
    y = pd.Series([0] * 120 + [1] * 40, index=X.index, name='diagnosis')
    return X, y


@pytest.mark.parametrize('method', ['mwmote', 'smote'])
class TestFitResample:
    """Behaviour shared by both oversampling methods."""

    def test_equal_counts(self, imbalanced, method):
        X, y = imbalanced
        balancer = ClassBalancer(method=method, random_state=1103)
        X_bal, y_bal = balancer.fit_resample(X, y)
        counts = y_bal.value_counts()
        assert counts[0] == counts[1] == 120
        assert len(X_bal) == len(y_bal) == 240
        assert balancer.n_synthetic_ == 80

    def test_originals_first_and_unchanged(self, imbalanced, method):
        X, y = imbalanced
        X_bal, y_bal = ClassBalancer(method=method, random_state=1103).fit_resample(X, y)
        pd.testing.assert_frame_equal(X_bal.iloc[:160], X)
        pd.testing.assert_series_equal(y_bal.iloc[:160], y)

    def test_synthetic_labels_follow_max(self, imbalanced, method):
        X, y = imbalanced
        X_bal, y_bal = ClassBalancer(method=method, random_state=1103).fit_resample(X, y)
        start = X.index.max() + 1
        assert X_bal.index[160:].tolist() == list(range(start, start + 80))
        assert (y_bal.iloc[160:] == 1).all()
        assert X_bal.index.is_unique

    def test_synthetic_inside_minority_range(self, imbalanced, method):
        """Interpolated rows cannot leave the minority bounding box."""
        X, y = imbalanced
        X_bal, _ = ClassBalancer(method=method, random_state=1103).fit_resample(X, y)
        minority = X[y == 1]
        synthetic = X_bal.iloc[160:]
        assert (synthetic.min() >= minority.min() - 1e-9).all()
        assert (synthetic.max() <= minority.max() + 1e-9).all()

    def test_reproducible(self, imbalanced, method):
        X, y = imbalanced
        first, _ = ClassBalancer(method=method, random_state=5).fit_resample(X, y)
        second, _ = ClassBalancer(method=method, random_state=5).fit_resample(X, y)
        pd.testing.assert_frame_equal(first, second)


class TestEdgeCases:

    def test_already_balanced_returns_copy(self):
        X = pd.DataFrame({'f': [0.0, 1.0, 2.0, 3.0]})
        y = pd.Series([0, 1, 0, 1])
        balancer = ClassBalancer()
        X_bal, y_bal = balancer.fit_resample(X, y)
        assert len(X_bal) == 4
        assert balancer.n_synthetic_ == 0
        assert X_bal is not X

    def test_single_class_raises(self):
        X = pd.DataFrame({'f': [0.0, 1.0, 2.0]})
        with pytest.raises(ValueError):
            ClassBalancer().fit_resample(X, pd.Series([1, 1, 1]))

    def test_single_minority_row_raises(self):
        X = pd.DataFrame({'f': [0.0, 1.0, 2.0, 3.0]})
        with pytest.raises(ValueError):
            ClassBalancer().fit_resample(X, pd.Series([0, 0, 0, 1]))

    def test_unknown_method_raises(self):
        with pytest.raises(ValueError):
            ClassBalancer(method='adasyn')

    def test_string_row_labels_reset(self):
        rng = np.random.default_rng(2)
        X = pd.DataFrame(rng.normal(size=(12, 2)), columns=['a', 'b'],
                         index=[f"r{i}" for i in range(12)])
        y = pd.Series([0] * 8 + [1] * 4, index=X.index)
        X_bal, y_bal = ClassBalancer(k1=3, random_state=0).fit_resample(X, y)
        assert len(X_bal) == 16
        assert X_bal.index.tolist() == list(range(16))
