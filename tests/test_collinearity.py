"""
Tests for the greedy correlation filter.

Run with: pytest tests/test_collinearity.py -v
"""

import numpy as np
import pandas as pd

from src.pipeline.collinearity import (
    correlation_matrix, drop_correlated_features, find_correlated_features
)


def _hub_table(n=500, seed=0):
    """Three independent columns plus a hub built from two of them."""
    rng = np.random.default_rng(seed)
    df = pd.DataFrame({
        'a': rng.normal(size=n),
        'b': rng.normal(size=n),
        'c': rng.normal(size=n),
    })
    df['h'] = df['a'] + df['b'] + rng.normal(scale=0.1, size=n)
    return df


class TestFindCorrelatedFeatures:
    """Tests for choosing which columns to remove."""

    def test_hub_removed_first(self):
        """The column correlated with two others goes, and nothing else."""
        corr = correlation_matrix(_hub_table())
        assert find_correlated_features(corr, cutoff=0.60) == ['h']

    def test_near_duplicate_pair_loses_one(self):
        rng = np.random.default_rng(1)
        x = rng.normal(size=200)
        df = pd.DataFrame({'x': x, 'x2': x + rng.normal(scale=0.01, size=200),
                           'z': rng.normal(size=200)})
        removed = find_correlated_features(correlation_matrix(df), cutoff=0.60)
        assert len(removed) == 1
        assert removed[0] in ('x', 'x2')

    def test_uncorrelated_keeps_all(self):
        rng = np.random.default_rng(2)
        df = pd.DataFrame(rng.normal(size=(300, 4)), columns=list('pqrs'))
        assert find_correlated_features(correlation_matrix(df), cutoff=0.60) == []

    def test_negative_correlation_counts(self):
        rng = np.random.default_rng(3)
        x = rng.normal(size=200)
        df = pd.DataFrame({'x': x, 'neg': -x + rng.normal(scale=0.05, size=200)})
        assert len(find_correlated_features(correlation_matrix(df), cutoff=0.60)) == 1


class TestDropCorrelatedFeatures:
    """Tests for the table-level filter."""

    def test_no_remaining_pair_above_cutoff(self, tumour_df):
        features = ['radius_mean', 'perimeter_mean', 'area_mean',
                    'texture_mean', 'smoothness_mean', 'symmetry_mean']
        reduced, dropped = drop_correlated_features(tumour_df[features], cutoff=0.60)
        corr = reduced.corr().abs().to_numpy()
        np.fill_diagonal(corr, 0.0)
        assert (corr <= 0.60).all()
        assert len(dropped) == 2
        assert set(reduced.columns) | set(dropped) == set(features)

    def test_non_numeric_columns_kept(self):
        df = _hub_table()
        df['label'] = 'x'
        reduced, dropped = drop_correlated_features(df, cutoff=0.60)
        assert dropped == ['h']
        assert 'label' in reduced.columns
