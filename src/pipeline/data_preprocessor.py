# -*- coding: utf-8 -*-
"""
Data Preprocessor Module for the Statistical Modeling Case Studies
==================================================================

This module handles loading and preparing the observation tables used by
both case studies. It performs the following key operations:

1. Data Loading: Reads a comma-separated file with a header row
2. Cleaning: Normalizes column names, drops empty/ID columns and incomplete rows
3. Recoding: Maps raw 0/1 flags to labeled two-level categories
4. Outcome Encoding: Maps a two-valued diagnosis column to 0/1
5. Train/Test Split: Fixed-seed 75/25 random partition of the row labels
6. Centering: Subtracts TRAINING means from training and test columns
7. Standardizing: Zero mean / unit variance over the full table

Data Flow:
----------
    Blood pressure: CSV -> Clean -> Recode -> Split -> Center
    Cancer:         CSV -> Clean -> Encode outcome -> Standardize -> Split

Row labels of the loaded table are kept through every step so that
diagnostics computed later can be aligned back to the original rows.
"""

# =============================================================================
# IMPORTS
# =============================================================================
import os
import pandas as pd
import numpy as np
from typing import Optional, List, Tuple

from sklearn.model_selection import train_test_split
from sklearn.preprocessing import StandardScaler


# =============================================================================
# DATA PREPROCESSOR CLASS
# =============================================================================
class DataPreprocessor:
    """
    Loads an observation table and applies the recoding, partitioning and
    scaling steps of a case study.

    Attributes
    ----------
    training_means : dict
        Column name -> mean computed on the training subset by
        center_on_training_mean(). Reused to center the test subset.

    scaler : StandardScaler or None
        Scaler fitted by standardize() on the full table.

    scaled_columns : list
        Columns transformed by standardize().

    Example Usage
    -------------
    >>> from src.pipeline.data_preprocessor import DataPreprocessor
    >>> from src.utils.paths import data_path
    >>>
    >>> preprocessor = DataPreprocessor()
    >>> df = preprocessor.load_data(data_path('framingham.csv'))
    >>> df = preprocessor.recode_binary(df, 'male', ('Female', 'Male'))
    >>> train, test = preprocessor.train_test_partition(df, seed=2023)
    >>> train, test = preprocessor.center_on_training_mean(train, test, ['age'])
    """

    def __init__(self):
        self.training_means = {}
        self.scaler = None
        self.scaled_columns = []


    def load_data(self, path, drop_columns: Optional[List[str]] = None) -> pd.DataFrame:
        """
        Read a delimited file into a DataFrame and tidy its columns.

        Parameters
        ----------
        path : str or Path
            Comma-separated file with a header row
        drop_columns : list, optional
            Identifier columns to remove (e.g. a patient id)

        Returns
        -------
        DataFrame
            Table with normalized column names; columns that are entirely
            empty are removed.

        Notes
        -----
        Column names are stripped and inner spaces replaced by underscores
        so that every column can be used directly as a model-formula term
        (e.g. 'concave points_mean' -> 'concave_points_mean').
        """
        if not os.path.exists(path):
            raise FileNotFoundError(f"Data file not found: {path}")

        print(f"Loading {os.path.basename(str(path))}...")
        df = pd.read_csv(path)
        df.columns = [str(col).strip().replace(' ', '_') for col in df.columns]

        # A trailing delimiter leaves an all-empty 'Unnamed' column
        empty_cols = [col for col in df.columns if df[col].isna().all()]
        if empty_cols:
            df = df.drop(columns=empty_cols)

        if drop_columns:
            df = df.drop(columns=[col for col in drop_columns if col in df.columns])

        print(f"  Data shape: {df.shape}")
        return df


    def drop_incomplete_rows(self, df: pd.DataFrame, columns: List[str]) -> pd.DataFrame:
        """
        Remove rows with a missing value in any of the analysis columns.

        Parameters
        ----------
        df : DataFrame
            Observation table
        columns : list
            Columns used by the analysis; other columns may stay incomplete

        Returns
        -------
        DataFrame
            Complete-case table (original row labels kept)
        """
        self._check_columns(df, columns)
        complete = df.dropna(subset=columns).copy()
        n_removed = len(df) - len(complete)
        if n_removed > 0:
            print(f"  Removed {n_removed:,} incomplete rows ({n_removed/len(df)*100:.1f}%)")
        return complete


    def recode_binary(self, df: pd.DataFrame, column: str,
                      labels: Tuple[str, str]) -> pd.DataFrame:
        """
        Replace a 0/1 flag with a labeled two-level category.

        Parameters
        ----------
        df : DataFrame
            Observation table (modified in place and returned)
        column : str
            Column holding raw codes 0 and 1
        labels : tuple of (str, str)
            Label for code 0 and label for code 1. The first label becomes
            the reference level of the model dummies.

        Returns
        -------
        DataFrame
            Same table, same row count, with `column` as a category
        """
        self._check_columns(df, [column])
        codes = df[column]
        invalid = codes.dropna()[~codes.dropna().isin([0, 1])]
        if len(invalid) > 0:
            raise ValueError(
                f"Column '{column}' must contain only 0/1 codes, found {sorted(invalid.unique())[:5]}"
            )

        n_rows = len(df)
        mapped = codes.map({0: labels[0], 1: labels[1]})
        df[column] = pd.Categorical(mapped, categories=list(labels))
        assert len(df) == n_rows
        return df


    def encode_outcome(self, df: pd.DataFrame, column: str, positive) -> pd.DataFrame:
        """
        Encode a two-valued outcome column as 0/1 integers (1 = positive).

        Parameters
        ----------
        df : DataFrame
            Observation table (modified in place and returned)
        column : str
            Outcome column, e.g. 'diagnosis' with values 'M' / 'B'
        positive : scalar
            Value treated as the positive class

        Returns
        -------
        DataFrame
            Table with an integer 0/1 outcome
        """
        self._check_columns(df, [column])
        values = df[column].dropna().unique()
        if len(values) != 2 or positive not in values:
            raise ValueError(
                f"Outcome '{column}' must have exactly two values including '{positive}', "
                f"found {list(values)}"
            )
        df[column] = (df[column] == positive).astype(int)
        return df


    def train_test_partition(self, df: pd.DataFrame, train_fraction: float = 0.75,
                             seed: int = 42) -> Tuple[pd.DataFrame, pd.DataFrame]:
        """
        Split the rows into disjoint training and testing subsets.

        A fixed-size uniform random sample of row labels (no replacement)
        forms the training subset; the remaining rows form the test subset.
        The same seed always yields the same rows.

        Parameters
        ----------
        df : DataFrame
            Observation table
        train_fraction : float, default=0.75
            Share of rows drawn into the training subset
        seed : int
            Random seed for the draw

        Returns
        -------
        tuple of (DataFrame, DataFrame)
            - train: sampled rows, original row labels
            - test: remaining rows, original row labels
        """
        train_idx, test_idx = train_test_split(
            df.index.to_numpy(), train_size=train_fraction,
            random_state=seed, shuffle=True
        )
        train = df.loc[train_idx]
        test = df.loc[test_idx]

        # Row-count invariants: exhaustive and disjoint
        assert len(train) + len(test) == len(df), "train + test rows must equal total rows"
        assert len(train.index.intersection(test.index)) == 0, "train and test rows must be disjoint"

        print(f"  Train rows: {len(train):,} | Test rows: {len(test):,} (seed={seed})")
        return train, test


    def center_on_training_mean(self, train: pd.DataFrame, test: pd.DataFrame,
                                columns: List[str], suffix: str = '_c'
                                ) -> Tuple[pd.DataFrame, pd.DataFrame]:
        """
        Mean-center numeric columns using training statistics only.

        Parameters
        ----------
        train, test : DataFrame
            Training and test subsets
        columns : list
            Numeric columns to center
        suffix : str, default='_c'
            Suffix of the new centered columns

        Returns
        -------
        tuple of (DataFrame, DataFrame)
            Copies of train and test with `<col><suffix>` added

        Notes
        -----
        Using the test subset's own mean would leak information about the
        held-out rows into the predictors.
        """
        self._check_columns(train, columns)
        self._check_columns(test, columns)
        train = train.copy()
        test = test.copy()
        for col in columns:
            mean = train[col].mean()
            self.training_means[col] = mean
            train[f"{col}{suffix}"] = train[col] - mean
            test[f"{col}{suffix}"] = test[col] - mean
        return train, test


    def standardize(self, df: pd.DataFrame, columns: Optional[List[str]] = None,
                    exclude: Optional[List[str]] = None) -> pd.DataFrame:
        """
        Scale numeric columns to zero mean and unit variance.

        Statistics come from the full table, before any split. This is a
        teaching simplification: the held-out rows influence the scaling.

        Parameters
        ----------
        df : DataFrame
            Observation table
        columns : list, optional
            Columns to scale; defaults to every numeric column
        exclude : list, optional
            Columns never scaled (typically the outcome)

        Returns
        -------
        DataFrame
            Copy of the table with scaled columns
        """
        exclude = exclude or []
        if columns is None:
            columns = df.select_dtypes(include=[np.number]).columns.tolist()
        columns = [col for col in columns if col not in exclude]
        self._check_columns(df, columns)

        print(f"  Standardizing {len(columns)} numeric columns on the full table...")
        print("  [WARN] Scaling statistics include test rows (leakage risk)")

        df = df.copy()
        self.scaler = StandardScaler()
        df[columns] = self.scaler.fit_transform(df[columns].astype(float))
        self.scaled_columns = columns
        return df


    @staticmethod
    def _check_columns(df: pd.DataFrame, columns: List[str]):
        missing = [col for col in columns if col not in df.columns]
        if missing:
            raise ValueError(f"Unknown columns: {missing}")
