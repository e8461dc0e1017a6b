# -*- coding: utf-8 -*-
"""
Multicollinearity resolver.

Removes the smallest practical set of numeric predictors so that no remaining
pair has an absolute Pearson correlation above a cutoff. Removal is greedy:
among the columns involved in an offending pair, the one with the highest mean
absolute correlation to the other remaining columns goes first.
"""

import numpy as np
import pandas as pd
from typing import List, Optional, Tuple


def correlation_matrix(df: pd.DataFrame, columns: Optional[List[str]] = None) -> pd.DataFrame:
    """Pearson correlation matrix of the numeric columns (or the given ones)."""
    if columns is None:
        columns = df.select_dtypes(include=[np.number]).columns.tolist()
    return df[columns].corr()


def find_correlated_features(corr: pd.DataFrame, cutoff: float = 0.60) -> List[str]:
    """
    Columns to remove so that no remaining |r| exceeds `cutoff`.

    Parameters:
        corr (DataFrame): Square correlation matrix.
        cutoff (float): Absolute correlation above which a pair is a problem.

    Returns:
        list: Removed column names, in removal order.
    """
    abs_corr = corr.abs().copy()
    np.fill_diagonal(abs_corr.values, 0.0)

    removed = []
    remaining = list(abs_corr.columns)
    while len(remaining) > 1:
        sub = abs_corr.loc[remaining, remaining]
        offending = sub.columns[(sub > cutoff).any(axis=0)]
        if len(offending) == 0:
            break
        mean_corr = sub.sum(axis=0) / (len(remaining) - 1)
        # ties resolved by column order
        worst = mean_corr[offending].idxmax()
        removed.append(worst)
        remaining.remove(worst)
    return removed


def drop_correlated_features(df: pd.DataFrame, columns: Optional[List[str]] = None,
                             cutoff: float = 0.60) -> Tuple[pd.DataFrame, List[str]]:
    """
    Drop highly correlated predictors from a table.

    Returns:
        tuple: (reduced DataFrame, list of dropped columns)
    """
    corr = correlation_matrix(df, columns)
    dropped = find_correlated_features(corr, cutoff)
    kept = [col for col in corr.columns if col not in dropped]
    print(f"  Correlation cutoff {cutoff:.2f}: dropped {len(dropped)} of {len(corr.columns)} columns, kept {len(kept)}")
    return df.drop(columns=dropped), dropped
