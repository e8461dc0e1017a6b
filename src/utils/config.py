# -*- coding: utf-8 -*-
"""
Case-study settings.

Each case study is described by a plain dictionary: which file to read, which
column is the outcome, how raw codes are labelled and which predictors enter
each model. Values that change between runs (input file names, plot display)
can be overridden through environment variables.
"""

import os

# Collinearity / influence conventions shared by both case studies
VIF_THRESHOLD = 5.0
CORRELATION_CUTOFF = 0.60
TRAIN_FRACTION = 0.75

BLOOD_PRESSURE = {
    'name': 'blood_pressure',
    'file': 'framingham.csv',
    'outcome': 'sysBP',
    # raw 0/1 code -> (label for 0, label for 1)
    'binary_labels': {
        'male': ('Female', 'Male'),
        'currentSmoker': ('Non-smoker', 'Smoker'),
        'diabetes': ('No diabetes', 'Diabetes'),
        'BPMeds': ('No BP meds', 'BP meds'),
    },
    'center': ['age', 'BMI', 'totChol', 'heartRate'],
    'models': {
        'full': ['age_c', 'BMI_c', 'totChol_c', 'heartRate_c',
                 'male', 'currentSmoker', 'diabetes', 'BPMeds'],
        'reduced': ['age_c', 'BMI_c', 'male', 'diabetes', 'BPMeds'],
    },
    'scatter': ['age', 'BMI', 'totChol', 'heartRate'],
    'seed': 2023,
    'train_fraction': TRAIN_FRACTION,
}

CANCER = {
    'name': 'cancer',
    'file': 'breast_cancer.csv',
    'outcome': 'diagnosis',
    'positive': 'M',
    'labels': ('Benign', 'Malignant'),
    'drop': ['id'],
    'correlation_cutoff': CORRELATION_CUTOFF,
    'seed': 1103,
    'train_fraction': TRAIN_FRACTION,
    'balance_method': 'mwmote',
    'threshold': 0.5,
    'threshold_step': 0.01,
}


def data_file(config: dict) -> str:
    """Input file name for a case study, honouring BP_DATA_FILE / CANCER_DATA_FILE."""
    env_var = 'BP_DATA_FILE' if config['name'] == 'blood_pressure' else 'CANCER_DATA_FILE'
    return os.getenv(env_var, config['file'])


def show_plots() -> bool:
    """Whether figures should be displayed as well as saved (SHOW_PLOTS=1)."""
    return os.getenv('SHOW_PLOTS', '0').strip().lower() in ('1', 'y', 'yes', 'true')
