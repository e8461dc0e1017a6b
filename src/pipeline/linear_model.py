# -*- coding: utf-8 -*-
"""
Linear Model Fitter & Diagnostics

This module provides the LinearModelFitter class that handles:
- Ordinary least squares fitting of `outcome ~ predictors` on training rows
- Coefficient tables with standard errors and confidence intervals
- Variance Inflation Factors (collinearity)
- Cook's distance (influential observations) and refitting without them
- Evaluation on held-out rows (RMSE, R-squared)
- AIC comparison of models fit on the same rows

Models are specified with statsmodels formulas, so labeled categorical
columns enter the model as treatment-coded dummies automatically.
"""

import pandas as pd
from typing import List
import statsmodels.formula.api as smf
from statsmodels.stats.outliers_influence import variance_inflation_factor

from src.utils.config import VIF_THRESHOLD
from .evaluation import regression_metrics


class LinearModelFitter:
    """
    OLS model for a numeric outcome.

    The fitted statsmodels result is stored in `result_` and never modified
    after fit(); refitting always produces a new LinearModelFitter.

    Attributes:
        outcome (str): Outcome column.
        predictors (list): Predictor columns (numeric or categorical).
        name (str): Label used in printed output and comparison tables.
        result_ (RegressionResultsWrapper): Fitted model, set by fit().

    Example:
        >>> fitter = LinearModelFitter('sysBP', ['age_c', 'BMI_c', 'male'])
        >>> fitter.fit(train)
        >>> fitter.vif()
        >>> filtered = fitter.refit_without_influential(train)
        >>> filtered.evaluate(test)
    """

    def __init__(self, outcome: str, predictors: List[str], name: str = 'model'):
        if not predictors:
            raise ValueError("At least one predictor is required")
        self.outcome = outcome
        self.predictors = list(predictors)
        self.name = name
        self.result_ = None

    @property
    def formula(self) -> str:
        return f"{self.outcome} ~ " + " + ".join(self.predictors)

    def fit(self, train: pd.DataFrame):
        """Fit OLS on the training subset and return self."""
        missing = [col for col in [self.outcome] + self.predictors if col not in train.columns]
        if missing:
            raise ValueError(f"Unknown columns: {missing}")

        self.result_ = smf.ols(self.formula, data=train).fit()
        print(f"  [OK] {self.name}: {self.formula}")
        print(f"       n={self.n_obs}, R2={self.result_.rsquared:.4f}, "
              f"adj. R2={self.result_.rsquared_adj:.4f}, AIC={self.aic:.2f}")
        return self

    def _check_fitted(self):
        if self.result_ is None:
            raise RuntimeError(f"Model '{self.name}' has not been fitted yet")

    @property
    def n_obs(self) -> int:
        self._check_fitted()
        return int(self.result_.nobs)

    @property
    def aic(self) -> float:
        self._check_fitted()
        return float(self.result_.aic)

    @property
    def bic(self) -> float:
        self._check_fitted()
        return float(self.result_.bic)

    def coefficients(self, alpha: float = 0.05) -> pd.DataFrame:
        """Estimates, standard errors, t statistics, p-values and CIs."""
        self._check_fitted()
        ci = self.result_.conf_int(alpha=alpha)
        return pd.DataFrame({
            'estimate': self.result_.params,
            'std_error': self.result_.bse,
            't_value': self.result_.tvalues,
            'p_value': self.result_.pvalues,
            'ci_lower': ci[0],
            'ci_upper': ci[1],
        })

    def fitted_values(self) -> pd.Series:
        self._check_fitted()
        return self.result_.fittedvalues

    def residuals(self) -> pd.Series:
        self._check_fitted()
        return self.result_.resid

    def vif(self) -> pd.DataFrame:
        """
        Variance Inflation Factor of every design column except the intercept.

        Returns:
            DataFrame: Columns 'term', 'vif' and 'concerning' (VIF > 5).
        """
        self._check_fitted()
        exog = self.result_.model.exog
        names = self.result_.model.exog_names
        rows = []
        for i, term in enumerate(names):
            if term == 'Intercept':
                continue
            value = variance_inflation_factor(exog, i)
            rows.append({'term': term, 'vif': value, 'concerning': value > VIF_THRESHOLD})
        return pd.DataFrame(rows, columns=['term', 'vif', 'concerning'])

    def cooks_distance(self) -> pd.DataFrame:
        """
        Influence diagnostics per training row.

        Returns:
            DataFrame indexed by training row label with 'residual',
            'leverage', 'student_resid' and 'cooks_distance'.
        """
        self._check_fitted()
        influence = self.result_.get_influence()
        return pd.DataFrame({
            'residual': self.result_.resid.to_numpy(),
            'leverage': influence.hat_matrix_diag,
            'student_resid': influence.resid_studentized_external,
            'cooks_distance': influence.cooks_distance[0],
        }, index=self.result_.resid.index)

    def cooks_threshold(self) -> float:
        """Cut-off 4 / (n - k - 1), k = number of non-intercept design columns."""
        self._check_fitted()
        n = self.n_obs
        k = int(self.result_.df_model)
        if n - k - 1 <= 0:
            raise ValueError(f"Too few observations ({n}) for {k} predictors")
        return 4.0 / (n - k - 1)

    def influential_rows(self) -> pd.Index:
        """Training row labels whose Cook's distance exceeds the cut-off."""
        table = self.cooks_distance()
        return table.index[table['cooks_distance'] > self.cooks_threshold()]

    def refit_without_influential(self, train: pd.DataFrame) -> "LinearModelFitter":
        """
        Fit the same model again without the influential training rows.

        Parameters:
            train (DataFrame): The training subset this model was fit on.

        Returns:
            LinearModelFitter: New fitted model named '<name>_filtered'.
        """
        influential = self.influential_rows()
        filtered = train.drop(index=influential)
        print(f"  Cook's distance > {self.cooks_threshold():.4f}: "
              f"removing {len(influential)} of {len(train)} training rows")

        refit = LinearModelFitter(self.outcome, self.predictors, name=f"{self.name}_filtered")
        refit.fit(filtered)
        assert refit.n_obs <= self.n_obs
        return refit

    def predict(self, df: pd.DataFrame) -> pd.Series:
        self._check_fitted()
        return self.result_.predict(df)

    def evaluate(self, test: pd.DataFrame) -> dict:
        """
        Score the model on held-out rows.

        Returns:
            dict: 'rmse', 'r2', 'n' and 'predictions' (DataFrame with
                  actual and predicted values per test row).
        """
        predicted = self.predict(test)
        actual = test.loc[predicted.index, self.outcome]
        metrics = regression_metrics(actual.to_numpy(), predicted.to_numpy())
        print(f"  [OK] {self.name} on test rows: RMSE={metrics['rmse']:.3f}, R2={metrics['r2']:.4f}")
        metrics['n'] = len(predicted)
        metrics['predictions'] = pd.DataFrame({'actual': actual, 'predicted': predicted})
        return metrics

    def summary_text(self) -> str:
        self._check_fitted()
        return self.result_.summary().as_text()


def compare_aic(fitters: List[LinearModelFitter]) -> pd.DataFrame:
    """
    Rank fitted models by AIC (lower is better).

    AIC values are only comparable when every model was fit on the same
    observations, so models with different row counts are rejected.
    """
    if not fitters:
        raise ValueError("No models to compare")
    n_obs = {fitter.n_obs for fitter in fitters}
    if len(n_obs) > 1:
        raise ValueError(
            f"AIC comparison requires identical data; models were fit on {sorted(n_obs)} rows"
        )
    table = pd.DataFrame([{
        'model': fitter.name,
        'n_params': len(fitter.result_.params),
        'n_obs': fitter.n_obs,
        'aic': fitter.aic,
        'bic': fitter.bic,
    } for fitter in fitters])
    table = table.sort_values('aic').reset_index(drop=True)
    table['delta_aic'] = table['aic'] - table['aic'].iloc[0]
    return table
