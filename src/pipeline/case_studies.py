# -*- coding: utf-8 -*-
import pandas as pd
from typing import Optional
from .data_preprocessor import DataPreprocessor
from .collinearity import drop_correlated_features
from .linear_model import LinearModelFitter, compare_aic
from .logistic_model import LogisticModelFitter
from .balancer import ClassBalancer
from .evaluation import (
    binary_metrics_at_threshold, class_counts, confusion_table,
    describe_by_group, roc_analysis, threshold_sweep
)
from .visualize import (
    plot_boxplots, plot_class_balance, plot_confusion_matrix, plot_cooks_distance,
    plot_correlation_heatmap, plot_feature_boxplots, plot_histograms,
    plot_residual_diagnostics, plot_roc_curve, plot_scatter, plot_threshold_sweep
)
from src.utils import config as settings
from src.utils.paths import data_path, report_path


def _banner(title):
    print("\n" + "="*60)
    print(title)
    print("="*60)


def _save_table(df, filename, index=True):
    path = report_path(filename)
    df.to_csv(path, index=index)
    print(f"  [SAVED] {path.name}")
    return path


def _save_text(text, filename):
    path = report_path(filename)
    path.write_text(text, encoding='utf-8')
    print(f"  [SAVED] {path.name}")
    return path


class BloodPressureCaseStudy:
    """
    Case study 1: linear regression of systolic blood pressure.

    Steps: load -> recode flags -> describe -> split 75/25 -> center on
    training means -> fit candidate OLS models -> VIF / Cook's distance ->
    refit without influential rows -> AIC comparison -> test-set RMSE / R2.
    """

    def __init__(self, config: Optional[dict] = None):
        self.config = config or settings.BLOOD_PRESSURE
        self.prefix = self.config['name']
        self.preprocessor = DataPreprocessor()

    def load(self, data_file):
        """Load the cohort table, keep complete cases and label the 0/1 flags."""
        _banner("STEP 1: LOAD AND RECODE")
        cfg = self.config
        analysis_cols = [cfg['outcome']] + list(cfg['binary_labels']) + cfg['center']
        df = self.preprocessor.load_data(data_file, drop_columns=cfg.get('drop'))
        df = self.preprocessor.drop_incomplete_rows(df, analysis_cols)

        n_rows = len(df)
        for col, labels in cfg['binary_labels'].items():
            df = self.preprocessor.recode_binary(df, col, labels)
        assert len(df) == n_rows
        print(f"  [OK] Recoded {len(cfg['binary_labels'])} binary flags; {n_rows:,} rows")
        return df

    def describe(self, df):
        """Descriptive plots and a summary table of the numeric columns."""
        _banner("STEP 2: DESCRIPTIVE ANALYSIS")
        cfg = self.config
        numeric = [cfg['outcome']] + cfg['center']
        plot_histograms(df, numeric, f"{self.prefix}_01_histograms.png")
        plot_boxplots(df, cfg['outcome'], list(cfg['binary_labels']), f"{self.prefix}_02_boxplots.png")
        plot_correlation_heatmap(df, numeric, f"{self.prefix}_03_correlation.png")
        plot_scatter(df, cfg['scatter'], cfg['outcome'], f"{self.prefix}_04_scatter.png")

        group = next(iter(cfg['binary_labels']))
        table = describe_by_group(df, numeric, group)
        print(table.round(2).to_string())
        _save_table(table, f"{self.prefix}_descriptives.csv")
        return table

    def split(self, df):
        """75/25 split, then center numeric predictors on the training means."""
        _banner("STEP 3: TRAIN/TEST SPLIT AND CENTERING")
        cfg = self.config
        train, test = self.preprocessor.train_test_partition(
            df, train_fraction=cfg['train_fraction'], seed=cfg['seed']
        )
        train, test = self.preprocessor.center_on_training_mean(train, test, cfg['center'])
        for col, mean in self.preprocessor.training_means.items():
            print(f"  {col:12} training mean = {mean:.3f}")
        return train, test

    def fit_models(self, train):
        """Fit every candidate model listed in the configuration."""
        _banner("STEP 4: FIT LINEAR MODELS")
        fitters = {}
        for name, predictors in self.config['models'].items():
            fitters[name] = LinearModelFitter(self.config['outcome'], predictors, name=name).fit(train)
            _save_table(fitters[name].coefficients(), f"{self.prefix}_{name}_coefficients.csv")
            _save_text(fitters[name].summary_text(), f"{self.prefix}_{name}_summary.txt")
        return fitters

    def diagnose(self, fitters, train):
        """
        Collinearity and influence diagnostics.

        The model with the lowest AIC is checked for influential rows and
        refit without them.
        """
        _banner("STEP 5: DIAGNOSTICS")
        vif_tables = []
        for name, fitter in fitters.items():
            vif = fitter.vif().assign(model=name)
            vif_tables.append(vif)
            print(f"\n  VIF ({name}):")
            print(vif[['term', 'vif', 'concerning']].round(3).to_string(index=False))
            flagged = vif.loc[vif['concerning'], 'term'].tolist()
            if flagged:
                print(f"  [WARN] VIF > {settings.VIF_THRESHOLD:g}: {', '.join(flagged)}")
        vif_all = pd.concat(vif_tables, ignore_index=True)
        _save_table(vif_all, f"{self.prefix}_vif.csv", index=False)

        aic_table = compare_aic(list(fitters.values()))
        print("\n  AIC comparison (same training rows):")
        print(aic_table.round(2).to_string(index=False))
        _save_table(aic_table, f"{self.prefix}_aic.csv", index=False)

        best = fitters[aic_table.iloc[0]['model']]
        print(f"\n  [BEST] Lowest AIC: {best.name}")

        cooks = best.cooks_distance()
        threshold = best.cooks_threshold()
        plot_residual_diagnostics(best.fitted_values(), best.residuals(),
                                  f"{self.prefix}_05_residuals_{best.name}.png",
                                  title=f"Residual Diagnostics ({best.name})")
        plot_cooks_distance(cooks['cooks_distance'], threshold, f"{self.prefix}_06_cooks_{best.name}.png")
        _save_table(cooks, f"{self.prefix}_{best.name}_influence.csv")

        filtered = best.refit_without_influential(train)
        plot_residual_diagnostics(filtered.fitted_values(), filtered.residuals(),
                                  f"{self.prefix}_07_residuals_{filtered.name}.png",
                                  title=f"Residual Diagnostics ({filtered.name})")
        _save_table(filtered.coefficients(), f"{self.prefix}_{filtered.name}_coefficients.csv")

        return {
            'vif': vif_all,
            'aic': aic_table,
            'best': best,
            'cooks': cooks,
            'cooks_threshold': threshold,
            'filtered': filtered,
        }

    def evaluate(self, fitters, test):
        """RMSE and R2 of every fitted model on the held-out rows."""
        _banner("STEP 6: EVALUATION ON TEST ROWS")
        rows = []
        for fitter in fitters:
            scores = fitter.evaluate(test)
            rows.append({
                'model': fitter.name,
                'n_train': fitter.n_obs,
                'n_test': scores['n'],
                'rmse': scores['rmse'],
                'r2': scores['r2'],
                'aic': fitter.aic,
            })
        metrics = pd.DataFrame(rows).sort_values('rmse').reset_index(drop=True)
        _save_table(metrics, f"{self.prefix}_test_metrics.csv", index=False)
        return metrics

    def run(self, data_file=None):
        """
        Execute the complete case study and return its results.

        Args:
            data_file: Path to the cohort CSV; defaults to the configured
                       file inside the data directory.
        """
        _banner("CASE STUDY 1: LINEAR REGRESSION OF SYSTOLIC BLOOD PRESSURE")
        if data_file is None:
            data_file = data_path(settings.data_file(self.config))

        df = self.load(data_file)
        descriptives = self.describe(df)
        train, test = self.split(df)
        fitters = self.fit_models(train)
        diagnostics = self.diagnose(fitters, train)
        metrics = self.evaluate(list(fitters.values()) + [diagnostics['filtered']], test)

        _banner("FINAL RESULTS")
        print(metrics.round(4).to_string(index=False))
        best = metrics.iloc[0]
        print(f"\n[STAR] BEST TEST RMSE: {best['model']} (RMSE={best['rmse']:.3f}, R2={best['r2']:.4f})")

        return {
            'data': df,
            'descriptives': descriptives,
            'train': train,
            'test': test,
            'models': fitters,
            'diagnostics': diagnostics,
            'metrics': metrics,
        }


class CancerDiagnosisCaseStudy:
    """
    Case study 2: logistic regression of malignant vs benign diagnosis.

    Steps: load -> encode outcome -> standardize -> describe -> drop
    correlated features -> split 75/25 -> oversample the training minority
    class -> fit logit -> odds ratios -> confusion matrix, threshold sweep
    and ROC/AUC on the test rows.
    """

    def __init__(self, config: Optional[dict] = None):
        self.config = config or settings.CANCER
        self.prefix = self.config['name']
        self.preprocessor = DataPreprocessor()

    def load(self, data_file):
        """Load the tumour table and encode the diagnosis as 0/1."""
        _banner("STEP 1: LOAD AND ENCODE")
        cfg = self.config
        df = self.preprocessor.load_data(data_file, drop_columns=cfg.get('drop'))
        df = self.preprocessor.drop_incomplete_rows(df, df.columns.tolist())
        df = self.preprocessor.encode_outcome(df, cfg['outcome'], cfg['positive'])
        counts = class_counts(df[cfg['outcome']])
        print(f"  [OK] Outcome counts: {counts.to_dict()} (1 = {cfg['positive']})")
        return df

    def feature_columns(self, df):
        return [col for col in df.select_dtypes(include='number').columns if col != self.config['outcome']]

    def standardize(self, df):
        _banner("STEP 2: STANDARDIZE FEATURES")
        return self.preprocessor.standardize(df, self.feature_columns(df), exclude=[self.config['outcome']])

    def describe(self, df, features):
        """Descriptive plots of the standardized features by diagnosis."""
        _banner("STEP 3: DESCRIPTIVE ANALYSIS")
        outcome = self.config['outcome']
        plot_histograms(df, features, f"{self.prefix}_01_histograms.png")
        plot_feature_boxplots(df, features, outcome, f"{self.prefix}_02_boxplots.png")
        plot_correlation_heatmap(df, features, f"{self.prefix}_03_correlation.png",
                                 title='Correlation Heatmap (all features)')
        table = describe_by_group(df, features, outcome)
        _save_table(table, f"{self.prefix}_descriptives.csv")
        return table

    def resolve_collinearity(self, df, features):
        """Drop features until no pair exceeds the correlation cutoff."""
        _banner("STEP 4: MULTICOLLINEARITY")
        cutoff = self.config['correlation_cutoff']
        _, dropped = drop_correlated_features(df, features, cutoff=cutoff)
        kept = [col for col in features if col not in dropped]
        print(f"  Dropped: {', '.join(dropped) if dropped else 'none'}")
        print(f"  Kept: {', '.join(kept)}")
        plot_correlation_heatmap(df, kept, f"{self.prefix}_04_correlation_reduced.png",
                                 title=f"Correlation Heatmap (|r| <= {cutoff:.2f})")
        return kept, dropped

    def split(self, df):
        _banner("STEP 5: TRAIN/TEST SPLIT")
        cfg = self.config
        return self.preprocessor.train_test_partition(
            df, train_fraction=cfg['train_fraction'], seed=cfg['seed']
        )

    def balance(self, train, test, features):
        """
        Oversample the minority class of the TRAINING rows only.

        Returns the balanced training table; the test rows are checked to be
        unchanged.
        """
        _banner("STEP 6: CLASS BALANCING")
        cfg = self.config
        outcome = cfg['outcome']
        before = class_counts(train[outcome])
        test_before = class_counts(test[outcome])

        balancer = ClassBalancer(method=cfg['balance_method'], random_state=cfg['seed'])
        X_bal, y_bal = balancer.fit_resample(train[features], train[outcome])
        balanced = X_bal.copy()
        balanced[outcome] = y_bal.astype(int)

        after = class_counts(balanced[outcome])
        assert after.nunique() == 1, "balanced class counts must be equal"
        assert class_counts(test[outcome]).equals(test_before), "test rows must not be resampled"

        plot_class_balance(before, after, f"{self.prefix}_05_class_balance.png", labels=cfg['labels'])
        return balanced

    def fit_model(self, train, features):
        _banner("STEP 7: FIT LOGISTIC MODEL")
        fitter = LogisticModelFitter(self.config['outcome'], features, name='logit').fit(train)
        odds = fitter.odds_ratios()
        print(odds.round(3).to_string())
        _save_table(odds, f"{self.prefix}_odds_ratios.csv")
        _save_text(fitter.summary_text(), f"{self.prefix}_logit_summary.txt")
        return fitter

    def evaluate(self, fitter, test):
        """Confusion matrix at the configured threshold, threshold sweep and ROC/AUC."""
        _banner("STEP 8: EVALUATION ON TEST ROWS")
        cfg = self.config
        y_true = test[cfg['outcome']].to_numpy()
        y_prob = fitter.predict_proba(test).to_numpy()

        threshold = cfg['threshold']
        cm = confusion_table(y_true, y_prob, threshold)
        metrics = binary_metrics_at_threshold(y_true, y_prob, threshold)
        sweep = threshold_sweep(y_true, y_prob, step=cfg['threshold_step'])
        roc = roc_analysis(y_true, y_prob)

        print(cm.to_string())
        print(f"\n  Accuracy:    {metrics['accuracy']:.4f}")
        print(f"  Sensitivity: {metrics['sensitivity']:.4f}")
        print(f"  Specificity: {metrics['specificity']:.4f}")
        print(f"  AUC:         {roc['auc']:.4f}")

        plot_confusion_matrix(cm, f"{self.prefix}_06_confusion_matrix.png", threshold=threshold,
                              labels=cfg['labels'])
        plot_threshold_sweep(sweep, f"{self.prefix}_07_threshold_sweep.png")
        plot_roc_curve(roc['curve'], roc['auc'], f"{self.prefix}_08_roc_curve.png")

        predictions = pd.DataFrame({'actual': y_true, 'probability': y_prob}, index=test.index)
        _save_table(predictions, f"{self.prefix}_test_predictions.csv")
        _save_table(sweep, f"{self.prefix}_threshold_sweep.csv", index=False)
        _save_table(pd.DataFrame([{**metrics, 'auc': roc['auc']}]), f"{self.prefix}_test_metrics.csv", index=False)

        return {
            'confusion_matrix': cm,
            'metrics': metrics,
            'sweep': sweep,
            'roc': roc,
            'predictions': predictions,
        }

    def run(self, data_file=None):
        """
        Execute the complete case study and return its results.

        Args:
            data_file: Path to the tumour CSV; defaults to the configured
                       file inside the data directory.
        """
        _banner("CASE STUDY 2: LOGISTIC REGRESSION OF CANCER DIAGNOSIS")
        if data_file is None:
            data_file = data_path(settings.data_file(self.config))

        df = self.load(data_file)
        df = self.standardize(df)
        features = self.feature_columns(df)
        descriptives = self.describe(df, features)
        kept, dropped = self.resolve_collinearity(df, features)
        train, test = self.split(df)
        balanced = self.balance(train, test, kept)
        fitter = self.fit_model(balanced, kept)
        evaluation = self.evaluate(fitter, test)

        _banner("FINAL RESULTS")
        print(f"  Features used: {len(kept)} of {len(features)}")
        print(f"  Training rows: {len(train):,} ({len(balanced) - len(train):,} synthetic added)")
        print(f"  Test rows: {len(test):,}")
        print(f"\n[STAR] TEST AUC: {evaluation['roc']['auc']:.4f}")

        return {
            'data': df,
            'descriptives': descriptives,
            'features': kept,
            'dropped': dropped,
            'train': train,
            'balanced_train': balanced,
            'test': test,
            'model': fitter,
            'evaluation': evaluation,
        }
