"""
End-to-end runs of both case studies on the synthetic fixture files.

Run with: pytest tests/test_case_studies.py -v
Skip with: pytest -m "not slow"
"""

import numpy as np
import pandas as pd
import pytest

import run
from src.pipeline.case_studies import BloodPressureCaseStudy, CancerDiagnosisCaseStudy


@pytest.mark.slow
class TestBloodPressureCaseStudy:
    """Linear regression workflow on the cohort file."""

    @pytest.fixture
    def results(self, cohort_csv):
        return BloodPressureCaseStudy().run(cohort_csv)

    def test_partition(self, results):
        train, test = results['train'], results['test']
        assert len(train) + len(test) == len(results['data']) == 397
        assert len(train.index.intersection(test.index)) == 0

    def test_centered_on_training_mean(self, results):
        for col in ['age_c', 'BMI_c', 'totChol_c', 'heartRate_c']:
            assert abs(results['train'][col].mean()) < 1e-9

    def test_flags_labelled(self, results):
        assert list(results['data']['male'].cat.categories) == ['Female', 'Male']

    def test_diagnostics(self, results):
        diagnostics = results['diagnostics']
        assert set(results['models']) == {'full', 'reduced'}
        assert diagnostics['aic']['aic'].is_monotonic_increasing
        assert diagnostics['best'].name == diagnostics['aic']['model'].iloc[0]
        assert diagnostics['filtered'].n_obs <= diagnostics['best'].n_obs
        assert 'Intercept' not in diagnostics['vif']['term'].tolist()

    def test_metrics(self, results):
        metrics = results['metrics']
        assert len(metrics) == 3
        assert metrics['rmse'].is_monotonic_increasing
        assert (metrics['n_test'] == len(results['test'])).all()

    def test_artifacts_written(self, results, isolated_artifacts):
        figures = isolated_artifacts / 'figures'
        reports = isolated_artifacts / 'reports'
        assert (figures / 'blood_pressure_01_histograms.png').exists()
        assert len(list(figures.glob('blood_pressure_0[5-7]_*.png'))) == 3
        assert (reports / 'blood_pressure_aic.csv').exists()
        assert (reports / 'blood_pressure_test_metrics.csv').exists()
        assert (reports / 'blood_pressure_full_summary.txt').exists()


@pytest.mark.slow
class TestCancerDiagnosisCaseStudy:
    """Logistic regression workflow on the tumour file."""

    @pytest.fixture
    def results(self, tumour_csv):
        return CancerDiagnosisCaseStudy().run(tumour_csv)

    def test_standardized(self, results):
        data = results['data']
        assert 'id' not in data.columns
        assert set(data['diagnosis'].unique()) == {0, 1}
        assert abs(data['radius_mean'].mean()) < 1e-9
        assert data['radius_mean'].var(ddof=0) == pytest.approx(1.0)

    def test_collinear_features_dropped(self, results):
        assert len(results['dropped']) == 2
        assert set(results['dropped']) < {'radius_mean', 'perimeter_mean', 'area_mean'}
        assert 'concave_points_mean' in results['features']

    def test_split_sizes(self, results):
        assert len(results['train']) == 225
        assert len(results['test']) == 75

    def test_balanced_training_only(self, results):
        balanced = results['balanced_train']
        counts = balanced['diagnosis'].value_counts()
        assert counts[0] == counts[1]
        assert len(balanced) > len(results['train'])
        # test rows come straight from the standardized table
        pd.testing.assert_frame_equal(results['test'], results['data'].loc[results['test'].index])

    def test_evaluation(self, results):
        evaluation = results['evaluation']
        assert 0.0 <= evaluation['roc']['auc'] <= 1.0
        assert evaluation['roc']['auc'] > 0.5
        assert evaluation['confusion_matrix'].to_numpy().sum() == 75
        assert len(evaluation['sweep']) == 101
        assert np.all(np.diff(evaluation['sweep']['sensitivity']) <= 1e-12)

    def test_reproducible(self, results, tumour_csv):
        again = CancerDiagnosisCaseStudy().run(tumour_csv)
        pd.testing.assert_frame_equal(again['balanced_train'], results['balanced_train'])
        assert again['evaluation']['roc']['auc'] == results['evaluation']['roc']['auc']


class TestRunEntryPoint:
    """Tests for the command-line entry point."""

    def test_unknown_case_study(self, monkeypatch):
        monkeypatch.setenv('CASE_STUDY', 'nope')
        assert run.main() == 1

    def test_missing_data_returns_error(self, tmp_path, monkeypatch):
        monkeypatch.setenv('CASE_STUDY', 'bp')
        monkeypatch.setenv('DATA_DIR', str(tmp_path / 'empty'))
        assert run.main() == 1

    @pytest.mark.slow
    def test_blood_pressure_from_env(self, cohort_csv, monkeypatch):
        monkeypatch.setenv('CASE_STUDY', 'bp')
        monkeypatch.setenv('DATA_DIR', str(cohort_csv.parent))
        assert run.main() == 0
