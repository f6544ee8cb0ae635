"""
A Python package for exploratory analysis of pharmaceutical formulation data.

Wraps standard statistical tests and charts behind column-name interfaces
that operate on one in-memory formulation table.

Modules:
    - data: Validates column references, generates and loads datasets.
    - stats: ANOVA, regression, t-tests, confidence intervals and summaries.
    - plotting: Scatter, histogram, box and control charts.
    - toolkit: Name-based registry over every operation.
    - workflow: End-to-end analysis with CSV and figure export.
"""

__version__ = "1.0.0"

from .data import (
    generate_formulation_data,
    load_formulation_data,
    validate_formulation_data,
)
from .errors import (
    DegenerateModelError,
    FormulationError,
    GroupCardinalityError,
    InsufficientDataError,
    InvalidCategoryError,
    MissingColumnError,
    NonNumericColumnError,
    UnknownOperationError,
)
from .plotting import (
    boxplot,
    compare_distributions,
    control_chart,
    histogram,
    scatterplot,
)
from .schema import COLUMNS, DEFAULTS, AnalysisDefaults, FormulationColumns
from .stats import (
    anova_analysis,
    batch_variability,
    compare_means,
    confidence_intervals,
    hypothesis_testing,
    regression_analysis,
    summary_statistics,
)
from .toolkit import OPERATIONS, run_operation

__all__ = [
    # Data
    "generate_formulation_data",
    "load_formulation_data",
    "validate_formulation_data",
    "COLUMNS",
    "DEFAULTS",
    "AnalysisDefaults",
    "FormulationColumns",
    # Statistics
    "anova_analysis",
    "regression_analysis",
    "hypothesis_testing",
    "summary_statistics",
    "confidence_intervals",
    "compare_means",
    "batch_variability",
    # Plotting
    "scatterplot",
    "histogram",
    "boxplot",
    "compare_distributions",
    "control_chart",
    # Registry
    "OPERATIONS",
    "run_operation",
    # Errors
    "FormulationError",
    "MissingColumnError",
    "NonNumericColumnError",
    "GroupCardinalityError",
    "InsufficientDataError",
    "DegenerateModelError",
    "InvalidCategoryError",
    "UnknownOperationError",
]
