"""Descriptive summaries and quality-control dispersion measures."""

from __future__ import annotations

import pandas as pd
from pandas.api.types import is_bool_dtype, is_numeric_dtype

from ..data import numeric_column, require_columns

SUMMARY_ROWS: tuple[str, ...] = (
    "count",
    "missing",
    "unique",
    "mode",
    "mode_freq",
    "mean",
    "std",
    "min",
    "q1",
    "median",
    "q3",
    "max",
)

# pandas ``describe`` row labels renamed to the reporting labels above.
_DESCRIBE_LABELS = {
    "top": "mode",
    "freq": "mode_freq",
    "25%": "q1",
    "50%": "median",
    "75%": "q3",
}


def _level_count_rows(data: pd.DataFrame) -> pd.DataFrame:
    """One ``count[<label>]`` row per level of every categorical column."""
    rows: dict[str, dict[str, int]] = {}
    for column in data.columns:
        series = data[column]
        if is_numeric_dtype(series) and not is_bool_dtype(series):
            continue
        for label, n in category_counts(data, column).items():
            rows.setdefault(f"count[{label}]", {})[column] = int(n)
    return pd.DataFrame.from_dict(rows, orient="index")


def summary_statistics(data: pd.DataFrame) -> pd.DataFrame:
    """Describe every column of a formulation dataset.

    Numeric columns report count, mean, standard deviation, minimum,
    quartiles (``q1``, ``median``, ``q3``) and maximum. Categorical columns
    report count, number of distinct labels, the most frequent label
    (``mode``), its frequency (``mode_freq``) and one ``count[<label>]`` row
    per level. Every column also reports its number of missing values;
    ``count`` excludes them.

    Args:
        data (pandas.DataFrame): Formulation dataset.

    Returns:
        pandas.DataFrame: One column per dataset column. Rows follow
        :data:`SUMMARY_ROWS` order, then the per-level count rows.
        Statistics that do not apply to a column are ``NaN``.
    """
    if data.shape[1] == 0:
        return pd.DataFrame(index=list(SUMMARY_ROWS))

    described = data.describe(include="all").rename(index=_DESCRIBE_LABELS)
    described.loc["missing"] = data.isna().sum()
    rows = [row for row in SUMMARY_ROWS if row in described.index]
    summary = described.loc[rows, list(data.columns)]

    levels = _level_count_rows(data)
    if levels.empty:
        return summary
    return pd.concat([summary, levels.reindex(columns=summary.columns)])


def category_counts(data: pd.DataFrame, column: str) -> pd.Series:
    """Count observations per label of a categorical column, sorted by label."""
    require_columns(data, [column], purpose="category counts")
    counts = data[column].value_counts(dropna=True)
    return counts.sort_index(key=lambda idx: idx.astype(str))


def batch_std(data: pd.DataFrame, parameter: str) -> float:
    """Return the sample standard deviation (``ddof=1``) of one column.

    Raises:
        MissingColumnError: If ``parameter`` is absent.
        NonNumericColumnError: If ``parameter`` is not numeric.
        InsufficientDataError: If fewer than two values are available.
    """
    values = numeric_column(data, parameter, min_obs=2, purpose="batch variability")
    return float(values.std(ddof=1))


def batch_variability(data: pd.DataFrame, parameter: str) -> str:
    """Report batch-to-batch variability of a quality attribute.

    Returns:
        str: ``"Batch-to-batch variability in <parameter> : <sd>"`` where
        ``<sd>`` is the sample standard deviation.
    """
    variability = batch_std(data, parameter)
    return f"Batch-to-batch variability in {parameter} : {variability}"
