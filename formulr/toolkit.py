"""Registry mapping operation names to formulation analysis functions.

``run_operation("compare_means", data, group_var=..., response_var=...)`` is
equivalent to calling :func:`formulr.stats.compare_means` directly; the
registry exists so reporting layers can drive the toolkit by name.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict

import pandas as pd

from .errors import UnknownOperationError
from .plotting.charts import (
    boxplot,
    compare_distributions,
    control_chart,
    histogram,
    scatterplot,
)
from .stats.descriptive import batch_variability, summary_statistics
from .stats.models import anova_analysis, regression_analysis
from .stats.ttests import compare_means, confidence_intervals, hypothesis_testing

logger = logging.getLogger(__name__)

OPERATIONS: Dict[str, Callable[..., Any]] = {
    "anova_analysis": anova_analysis,
    "regression_analysis": regression_analysis,
    "hypothesis_testing": hypothesis_testing,
    "scatterplot": scatterplot,
    "histogram": histogram,
    "boxplot": boxplot,
    "summary_statistics": summary_statistics,
    "confidence_intervals": confidence_intervals,
    "compare_means": compare_means,
    "compare_distributions": compare_distributions,
    "control_chart": control_chart,
    "batch_variability": batch_variability,
}

CHART_OPERATIONS = frozenset(
    {"scatterplot", "histogram", "boxplot", "compare_distributions", "control_chart"}
)


def get_operation(name: str) -> Callable[..., Any]:
    """Look up one operation by name."""
    try:
        return OPERATIONS[name]
    except KeyError:
        raise UnknownOperationError(name, OPERATIONS) from None


def run_operation(name: str, data: pd.DataFrame, **params: Any) -> Any:
    """Run a named operation on ``data`` with keyword parameters.

    Raises:
        UnknownOperationError: If ``name`` is not registered.
        FormulationError: Whatever the operation itself raises.
    """
    func = get_operation(name)
    logger.debug("Running %s on %d rows with %s", name, len(data), params)
    return func(data, **params)
