"""
Statistical operations for formulation datasets.

This subpackage wraps NumPy least squares and SciPy reference distributions
behind column-name interfaces. All functions take a DataFrame first and never
modify it.

Modules:
    models:
        Sequential analysis of variance and ordinary least-squares
        regression summaries.

    ttests:
        Welch two-sample t-tests and one-sample confidence intervals.

    descriptive:
        Per-column summary statistics, category counts and batch
        variability.
"""

from .descriptive import (
    batch_std,
    batch_variability,
    category_counts,
    summary_statistics,
)
from .models import AnovaTable, RegressionSummary, anova_analysis, regression_analysis
from .ttests import (
    ConfidenceInterval,
    TTestResult,
    compare_means,
    confidence_intervals,
    hypothesis_testing,
)

__all__ = [
    "AnovaTable",
    "RegressionSummary",
    "anova_analysis",
    "regression_analysis",
    "ConfidenceInterval",
    "TTestResult",
    "compare_means",
    "confidence_intervals",
    "hypothesis_testing",
    "batch_std",
    "batch_variability",
    "category_counts",
    "summary_statistics",
]
