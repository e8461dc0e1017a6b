"""
Shared fixtures: synthetic cohort and tumour tables shaped like the real
case-study inputs, and an isolated artifact directory per test.
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

RANDOM_STATE = 42


@pytest.fixture(autouse=True)
def isolated_artifacts(tmp_path, monkeypatch):
    """Write figures and reports into a temporary directory."""
    artifact_dir = tmp_path / "artifact"
    monkeypatch.setenv("ARTIFACT_DIR", str(artifact_dir))
    monkeypatch.setenv("SHOW_PLOTS", "0")
    return artifact_dir


@pytest.fixture
def cohort_df():
    """Cohort table with raw 0/1 flags and a systolic blood pressure outcome."""
    rng = np.random.default_rng(RANDOM_STATE)
    n = 400
    df = pd.DataFrame(
        {
            "male": rng.integers(0, 2, n),
            "age": rng.normal(50, 8, n).round(),
            "currentSmoker": rng.integers(0, 2, n),
            "BPMeds": rng.binomial(1, 0.1, n).astype(float),
            "diabetes": rng.binomial(1, 0.15, n),
            "totChol": rng.normal(235, 40, n).round(),
            "BMI": rng.normal(26, 4, n),
            "heartRate": rng.normal(75, 12, n).round(),
        }
    )
    df["sysBP"] = (
        80
        + 0.8 * df["age"]
        + 1.0 * df["BMI"]
        + 0.02 * df["totChol"]
        + 3 * df["male"]
        + 10 * df["BPMeds"]
        + 8 * df["diabetes"]
        + rng.normal(0, 12, n)
    )
    df.loc[[3, 17, 250], "totChol"] = np.nan
    return df


@pytest.fixture
def cohort_csv(cohort_df, tmp_path):
    path = tmp_path / "framingham.csv"
    cohort_df.to_csv(path, index=False)
    return path


@pytest.fixture
def tumour_df():
    """
    Tumour measurements with an imbalanced M/B diagnosis.

    perimeter and area are near-copies of radius so the correlation filter
    has something to remove; one column name contains a space and the file
    ends with an empty column, as the public breast cancer file does.
    """
    rng = np.random.default_rng(RANDOM_STATE)
    n = 300
    malignant = rng.random(n) < 0.35
    shift = malignant.astype(float)
    radius = rng.normal(12.5, 2.0, n) + 2.5 * shift
    df = pd.DataFrame(
        {
            "id": np.arange(100000, 100000 + n),
            "diagnosis": np.where(malignant, "M", "B"),
            "radius_mean": radius,
            "perimeter_mean": 6.3 * radius + rng.normal(0, 1.0, n),
            "area_mean": np.pi * radius**2 + rng.normal(0, 5.0, n),
            "texture_mean": rng.normal(18, 4, n) + 2.0 * shift,
            "smoothness_mean": rng.normal(0.095, 0.014, n) + 0.006 * shift,
            "concave points_mean": rng.normal(0.05, 0.02, n) + 0.015 * shift,
            "symmetry_mean": rng.normal(0.18, 0.027, n),
        }
    )
    df["Unnamed: 32"] = np.nan
    return df


@pytest.fixture
def tumour_csv(tumour_df, tmp_path):
    path = tmp_path / "breast_cancer.csv"
    tumour_df.to_csv(path, index=False)
    return path
