# -*- coding: utf-8 -*-
"""
Logistic Model Fitter

This module provides LogisticModelFitter, a binomial logistic regression
fit by maximum likelihood with statsmodels. It exposes a classifier-style
interface (fit, predict_proba, predict) so the evaluation helpers can treat
it like any other probabilistic classifier, plus the inferential output a
statistics course needs (odds ratios with confidence intervals).

Classes:
    LogisticModelFitter: Logit model of a 0/1 outcome on the given predictors.
"""

import numpy as np
import pandas as pd
from typing import List
import statsmodels.formula.api as smf


class LogisticModelFitter:
    """
    Logistic regression for a 0/1 outcome.

    The log-odds of the positive class are modeled as a linear combination
    of the predictors. Coefficients are estimated by maximum likelihood on
    the (optionally class-balanced) training rows only.

    Attributes:
        outcome (str): 0/1 outcome column (1 = positive class).
        predictors (list): Predictor columns.
        name (str): Label used in printed output.
        max_iter (int): Iteration limit for the Newton solver.
        result_ (BinaryResultsWrapper): Fitted model, set by fit().

    Example:
        >>> fitter = LogisticModelFitter('diagnosis', ['radius_mean', 'texture_mean'])
        >>> fitter.fit(balanced_train)
        >>> fitter.odds_ratios()
        >>> probabilities = fitter.predict_proba(test)
    """

    def __init__(self, outcome: str, predictors: List[str], name: str = 'logit',
                 max_iter: int = 100):
        if not predictors:
            raise ValueError("At least one predictor is required")
        self.outcome = outcome
        self.predictors = list(predictors)
        self.name = name
        self.max_iter = max_iter
        self.result_ = None

    @property
    def formula(self) -> str:
        return f"{self.outcome} ~ " + " + ".join(self.predictors)

    def fit(self, train: pd.DataFrame):
        """
        Fit the logit model and return self.

        Parameters:
            train (DataFrame): Training rows with a 0/1 outcome column.

        Returns:
            self: The fitted model.
        """
        missing = [col for col in [self.outcome] + self.predictors if col not in train.columns]
        if missing:
            raise ValueError(f"Unknown columns: {missing}")
        values = set(pd.unique(train[self.outcome].dropna()))
        if not values <= {0, 1} or len(values) < 2:
            raise ValueError(f"Outcome '{self.outcome}' must contain both 0 and 1, found {sorted(values)}")

        self.result_ = smf.logit(self.formula, data=train).fit(disp=False, maxiter=self.max_iter)

        if not self.result_.mle_retvals.get('converged', True):
            print(f"  [WARN] {self.name}: maximum likelihood did not converge "
                  f"in {self.max_iter} iterations; estimates may be unreliable")
        print(f"  [OK] {self.name}: {len(self.predictors)} predictors, n={int(self.result_.nobs)}, "
              f"pseudo R2={self.result_.prsquared:.4f}, AIC={self.result_.aic:.2f}")
        return self

    def _check_fitted(self):
        if self.result_ is None:
            raise RuntimeError(f"Model '{self.name}' has not been fitted yet")

    @property
    def aic(self) -> float:
        self._check_fitted()
        return float(self.result_.aic)

    @property
    def converged(self) -> bool:
        self._check_fitted()
        return bool(self.result_.mle_retvals.get('converged', True))

    def coefficients(self, alpha: float = 0.05) -> pd.DataFrame:
        """Log-odds estimates with standard errors, z statistics and p-values."""
        self._check_fitted()
        ci = self.result_.conf_int(alpha=alpha)
        return pd.DataFrame({
            'estimate': self.result_.params,
            'std_error': self.result_.bse,
            'z_value': self.result_.tvalues,
            'p_value': self.result_.pvalues,
            'ci_lower': ci[0],
            'ci_upper': ci[1],
        })

    def odds_ratios(self, alpha: float = 0.05) -> pd.DataFrame:
        """
        Odds ratios exp(beta) with exponentiated confidence limits.

        An odds ratio above 1 means the odds of the positive class rise
        with the predictor (per unit, or per standard deviation when the
        predictors were standardized).
        """
        self._check_fitted()
        ci = self.result_.conf_int(alpha=alpha)
        return pd.DataFrame({
            'odds_ratio': np.exp(self.result_.params),
            'ci_lower': np.exp(ci[0]),
            'ci_upper': np.exp(ci[1]),
            'p_value': self.result_.pvalues,
        })

    def predict_proba(self, df: pd.DataFrame) -> pd.Series:
        """Predicted probability of the positive class for each row."""
        self._check_fitted()
        return self.result_.predict(df)

    def predict(self, df: pd.DataFrame, threshold: float = 0.5) -> pd.Series:
        """Class labels: 1 where the predicted probability exceeds `threshold`."""
        return (self.predict_proba(df) > threshold).astype(int)

    def summary_text(self) -> str:
        self._check_fitted()
        return self.result_.summary().as_text()
