# -*- coding: utf-8 -*-
import math
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns
import statsmodels.api as sm
from src.utils.paths import fig_path
from src.utils.config import show_plots


def _finish(fig, filename):
    """Save, optionally display, and close a figure; return the saved path."""
    path = fig_path(filename)
    fig.tight_layout()
    fig.savefig(path, dpi=100, bbox_inches='tight')
    if show_plots():
        plt.show()
    plt.close(fig)
    print(f"  [INFO] Figure saved to '{path.name}'")
    return path


def _grid(n_panels, n_cols=4, panel_size=3.5):
    if n_panels < 1:
        raise ValueError("Nothing to plot")
    n_cols = min(n_cols, n_panels)
    n_rows = math.ceil(n_panels / n_cols)
    fig, axes = plt.subplots(n_rows, n_cols, figsize=(panel_size * n_cols, panel_size * n_rows),
                             squeeze=False)
    # Hide unused panels
    for ax in axes.flat[n_panels:]:
        ax.set_visible(False)
    return fig, axes.flat


def plot_histograms(df, columns, filename, bins=30):
    """Histogram of every listed numeric column"""
    fig, axes = _grid(len(columns))
    for ax, col in zip(axes, columns):
        ax.hist(df[col].dropna(), bins=bins, color='steelblue', edgecolor='white')
        ax.set_title(col)
        ax.set_ylabel('Count')
        ax.grid(axis='y', alpha=0.3)
    return _finish(fig, filename)


def plot_boxplots(df, value_col, by_columns, filename):
    """Boxplots of one numeric column split by each categorical column"""
    fig, axes = _grid(len(by_columns))
    for ax, col in zip(axes, by_columns):
        sns.boxplot(data=df, x=col, y=value_col, ax=ax, color='lightsteelblue')
        ax.set_title(f"{value_col} by {col}")
        ax.set_xlabel('')
    return _finish(fig, filename)


def plot_feature_boxplots(df, columns, group, filename):
    """Boxplots of many numeric columns split by one grouping column"""
    fig, axes = _grid(len(columns))
    for ax, col in zip(axes, columns):
        sns.boxplot(data=df, x=group, y=col, ax=ax, color='lightsteelblue')
        ax.set_title(col)
        ax.set_xlabel(group)
        ax.set_ylabel('')
    return _finish(fig, filename)


def plot_correlation_heatmap(df, columns, filename, title='Correlation Heatmap'):
    """Lower-triangle heatmap of pairwise Pearson correlations"""
    corr = df[columns].corr()
    size = max(6, 0.5 * len(columns))
    fig, ax = plt.subplots(figsize=(size + 2, size))
    mask = np.triu(np.ones_like(corr, dtype=bool), k=1)
    sns.heatmap(corr, mask=mask, annot=len(columns) <= 15, fmt='.2f', cmap='RdBu_r',
                center=0, vmin=-1, vmax=1, square=True, linewidths=0.5, ax=ax,
                cbar_kws={'shrink': 0.8})
    ax.set_title(title)
    return _finish(fig, filename)


def plot_scatter(df, x_columns, y_col, filename, hue=None):
    """Scatter plot of the outcome against each predictor with a least-squares line"""
    fig, axes = _grid(len(x_columns))
    for ax, col in zip(axes, x_columns):
        sns.scatterplot(data=df, x=col, y=y_col, hue=hue, ax=ax, s=12, alpha=0.5, legend=False)
        sns.regplot(data=df, x=col, y=y_col, ax=ax, scatter=False, color='darkred')
        ax.set_title(f"{y_col} vs {col}")
    return _finish(fig, filename)


def plot_residual_diagnostics(fitted, residuals, filename, title='Residual Diagnostics'):
    """Residuals vs fitted values and a normal Q-Q plot"""
    fig, axes = plt.subplots(1, 2, figsize=(12, 5))

    ax1 = axes[0]
    ax1.scatter(fitted, residuals, s=10, alpha=0.5)
    ax1.axhline(0, color='darkred', linestyle='--')
    ax1.set_xlabel('Fitted values')
    ax1.set_ylabel('Residuals')
    ax1.set_title('Residuals vs Fitted')
    ax1.grid(alpha=0.3)

    ax2 = axes[1]
    sm.qqplot(np.asarray(residuals), line='s', ax=ax2, markersize=3, alpha=0.5)
    ax2.set_title('Normal Q-Q')

    fig.suptitle(title)
    return _finish(fig, filename)


def plot_cooks_distance(cooks, threshold, filename):
    """Cook's distance per training row with the exclusion threshold"""
    cooks = pd.Series(cooks)
    fig, ax = plt.subplots(figsize=(12, 4))
    positions = np.arange(len(cooks))
    above = cooks.to_numpy() > threshold
    ax.vlines(positions, 0, cooks.to_numpy(), colors=np.where(above, 'darkred', 'steelblue').tolist(), lw=1)
    ax.axhline(threshold, color='orange', linestyle='--', label=f"4/(n-k-1) = {threshold:.4f}")
    ax.set_xlabel('Training row')
    ax.set_ylabel("Cook's distance")
    ax.set_title(f"Cook's Distance ({above.sum()} rows above threshold)")
    ax.legend()
    ax.grid(axis='y', alpha=0.3)
    return _finish(fig, filename)


def plot_class_balance(before, after, filename, labels=None):
    """Class counts before and after oversampling"""
    before = pd.Series(before).sort_index()
    after = pd.Series(after).reindex(before.index).fillna(0)
    x = np.arange(len(before))
    width = 0.35

    fig, ax = plt.subplots(figsize=(6, 4))
    ax.bar(x - width/2, before.values, width, label='Before', color='orange')
    ax.bar(x + width/2, after.values, width, label='After', color='blue')
    ax.set_xticks(x)
    ax.set_xticklabels(labels if labels is not None else [str(v) for v in before.index])
    ax.set_ylabel('Rows')
    ax.set_title('Training Class Counts')
    ax.legend()
    ax.grid(axis='y', alpha=0.3)
    return _finish(fig, filename)


def plot_confusion_matrix(table, filename, threshold=0.5, labels=('0', '1')):
    """Annotated 2x2 confusion matrix"""
    fig, ax = plt.subplots(figsize=(5, 4))
    sns.heatmap(np.asarray(table), annot=True, fmt='d', cmap='Blues', ax=ax,
                xticklabels=[f"Predicted {lab}" for lab in labels],
                yticklabels=[f"Actual {lab}" for lab in labels])
    ax.set_title(f"Confusion Matrix (threshold={threshold:.2f})")
    return _finish(fig, filename)


def plot_roc_curve(curve, auc_value, filename):
    """ROC curve: sensitivity vs 1 - specificity"""
    fig, ax = plt.subplots(figsize=(6, 6))
    ax.plot(curve['fpr'], curve['tpr'], color='darkorange', lw=2, label=f"ROC (AUC = {auc_value:.3f})")
    ax.plot([0, 1], [0, 1], color='navy', lw=1, linestyle='--', label='Random (AUC = 0.5)')
    ax.set_xlim([0.0, 1.0])
    ax.set_ylim([0.0, 1.05])
    ax.set_xlabel('1 - Specificity')
    ax.set_ylabel('Sensitivity')
    ax.set_title('ROC Curve')
    ax.legend(loc='lower right')
    ax.grid(alpha=0.3)
    return _finish(fig, filename)


def plot_threshold_sweep(sweep, filename):
    """Sensitivity and specificity across the threshold grid"""
    fig, ax = plt.subplots(figsize=(8, 5))
    ax.plot(sweep['threshold'], sweep['sensitivity'], label='Sensitivity', color='darkred')
    ax.plot(sweep['threshold'], sweep['specificity'], label='Specificity', color='steelblue')
    ax.plot(sweep['threshold'], sweep['accuracy'], label='Accuracy', color='gray', linestyle='--')
    ax.set_xlabel('Threshold')
    ax.set_ylabel('Rate')
    ax.set_title('Threshold Sweep')
    ax.set_xlim([0.0, 1.0])
    ax.set_ylim([0.0, 1.05])
    ax.legend()
    ax.grid(alpha=0.3)
    return _finish(fig, filename)
