# -*- coding: utf-8 -*-
"""
Statistical Modeling Case Studies - Main Entry Point

This script runs one or both introductory modeling workflows:
1. Linear regression of systolic blood pressure (cohort data)
   - recoding, centering, VIF, Cook's distance, AIC, RMSE / R2
2. Logistic regression of cancer diagnosis (tumour measurements)
   - standardizing, correlation filter, MWMOTE balancing, odds ratios,
     confusion matrix, threshold sweep, ROC / AUC

Usage:
    python run.py                    # Both case studies

    # Non-interactive options with environment variables:
    set CASE_STUDY=bp                # bp, cancer or all (default)
    set DATA_DIR=path/to/data        # where the CSV files live
    set BP_DATA_FILE=framingham.csv
    set CANCER_DATA_FILE=breast_cancer.csv
    set SHOW_PLOTS=1                 # display figures as well as saving them
    python run.py

Outputs:
    artifact/figures/*.png           : Descriptive and diagnostic plots
    artifact/reports/*.csv, *.txt    : Coefficient tables, VIF, AIC, metrics
"""

import os
from src.pipeline.case_studies import BloodPressureCaseStudy, CancerDiagnosisCaseStudy
from src.utils.paths import ensure_dirs


def main():
    """Run the selected case studies."""

    case_study = os.getenv('CASE_STUDY', 'all').strip().lower()
    if case_study not in ('bp', 'cancer', 'all'):
        print(f"[ERROR] Unknown CASE_STUDY '{case_study}' (expected bp, cancer or all)")
        return 1

    print("=" * 80)
    print("INTRODUCTORY STATISTICAL MODELING CASE STUDIES")
    print("=" * 80)

    try:
        ensure_dirs()
        if case_study in ('bp', 'all'):
            BloodPressureCaseStudy().run()
        if case_study in ('cancer', 'all'):
            CancerDiagnosisCaseStudy().run()

        print("\n" + "=" * 80)
        print("[OK] CASE STUDIES COMPLETED SUCCESSFULLY!")
        print("=" * 80)
        print("\nGenerated files:")
        print("  - artifact/figures/  : Histograms, boxplots, heatmaps, diagnostics, ROC curves")
        print("  - artifact/reports/  : Coefficients, VIF, AIC, odds ratios, test metrics")

    except Exception as e:
        print(f"\n[ERROR] Case study failed: {str(e)}")
        import traceback
        traceback.print_exc()
        return 1

    return 0


if __name__ == "__main__":
    exit(main())
