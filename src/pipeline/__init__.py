# -*- coding: utf-8 -*-
"""
Statistical Modeling Case Studies Package

This package provides two introductory modeling workflows:
- Linear regression of systolic blood pressure on a cohort table
- Logistic regression of a malignant/benign cancer diagnosis

Main Components:
    BloodPressureCaseStudy: Orchestrates case study 1
    CancerDiagnosisCaseStudy: Orchestrates case study 2
    DataPreprocessor: Loading, recoding, splitting, centering, standardizing
    LinearModelFitter: OLS fit with VIF, Cook's distance and AIC comparison
    LogisticModelFitter: Logit fit with odds ratios and predicted probabilities
    ClassBalancer: MWMOTE / SMOTE oversampling of the training minority class

Analysis & Visualization:
    drop_correlated_features: Greedy removal of highly correlated predictors
    threshold_sweep, roc_analysis: Classifier evaluation on held-out rows
"""

from .case_studies import BloodPressureCaseStudy, CancerDiagnosisCaseStudy
from .data_preprocessor import DataPreprocessor
from .linear_model import LinearModelFitter, compare_aic
from .logistic_model import LogisticModelFitter
from .balancer import ClassBalancer
from .collinearity import drop_correlated_features, find_correlated_features
from .evaluation import (
    regression_metrics, confusion_table, binary_metrics_at_threshold,
    threshold_sweep, roc_analysis
)

__all__ = [
    'BloodPressureCaseStudy',
    'CancerDiagnosisCaseStudy',
    'DataPreprocessor',
    'LinearModelFitter',
    'compare_aic',
    'LogisticModelFitter',
    'ClassBalancer',
    'drop_correlated_features',
    'find_correlated_features',
    'regression_metrics',
    'confusion_table',
    'binary_metrics_at_threshold',
    'threshold_sweep',
    'roc_analysis'
]
