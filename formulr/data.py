"""Load, generate and validate formulation datasets.

The accessors in this module are the single place where column names are
resolved against a DataFrame. Statistics and plotting functions call them
before touching any data so that a bad name fails fast with a structured
error rather than a bare ``KeyError`` from pandas.
"""

from __future__ import annotations

import warnings
from pathlib import Path
from typing import Iterable, Sequence

import numpy as np
import pandas as pd
from pandas.api.types import is_bool_dtype, is_numeric_dtype

from .errors import (
    GroupCardinalityError,
    InsufficientDataError,
    InvalidCategoryError,
    MissingColumnError,
    NonNumericColumnError,
)
from .schema import CATEGORY_LEVELS, COLUMNS, EXCIPIENT_BOUNDS, FormulationColumns


def require_columns(
    data: pd.DataFrame, columns: Iterable[str], purpose: str = ""
) -> None:
    """Raise :class:`MissingColumnError` for the first absent column."""
    for column in columns:
        if column not in data.columns:
            raise MissingColumnError(column, data.columns, purpose=purpose)


def numeric_column(
    data: pd.DataFrame,
    column: str,
    *,
    min_obs: int = 0,
    purpose: str = "",
) -> pd.Series:
    """Return a numeric column with missing values removed.

    Args:
        data (pandas.DataFrame): Formulation dataset.
        column (str): Column to extract.
        min_obs (int, optional): Minimum number of non-missing observations.
            Defaults to ``0`` (no check).
        purpose (str, optional): Short label used in error messages.

    Returns:
        pandas.Series: Float series without missing values. The original
        frame is not modified.

    Raises:
        MissingColumnError: If ``column`` is absent.
        NonNumericColumnError: If ``column`` is not numeric.
        InsufficientDataError: If fewer than ``min_obs`` values remain.
    """
    require_columns(data, [column], purpose=purpose)
    series = data[column]
    if not is_numeric_dtype(series) or is_bool_dtype(series):
        raise NonNumericColumnError(column, series.dtype)
    values = series.dropna().astype(float)
    if len(values) < min_obs:
        raise InsufficientDataError(column, len(values), required=min_obs)
    return values


def two_level_groups(
    data: pd.DataFrame,
    group: str,
    response: str,
    *,
    min_obs: int = 2,
) -> tuple[tuple[object, object], tuple[np.ndarray, np.ndarray]]:
    """Split a numeric response into exactly two groups.

    Rows with a missing response or group label are dropped with a
    ``RuntimeWarning``. Levels are returned in sorted order so that
    differences are always ``level[0] - level[1]``.

    Raises:
        MissingColumnError: If either column is absent.
        NonNumericColumnError: If ``response`` is not numeric.
        GroupCardinalityError: If ``group`` does not have exactly two levels.
        InsufficientDataError: If a group has fewer than ``min_obs`` values.
    """
    require_columns(data, [response, group], purpose="two-sample comparison")
    numeric_column(data, response)
    complete = data[[group, response]].dropna()
    dropped = len(data) - len(complete)
    if dropped:
        warnings.warn(
            f"Dropped {dropped} rows with missing '{response}' or '{group}'.",
            RuntimeWarning,
            stacklevel=3,
        )

    labels = complete[group].to_numpy()
    y = complete[response].to_numpy(dtype=float)
    levels = sorted(pd.unique(labels), key=str)
    if len(levels) != 2:
        raise GroupCardinalityError(group, levels, expected=2)

    samples = []
    for level in levels:
        sample = y[labels == level]
        if len(sample) < min_obs:
            raise InsufficientDataError(
                response, len(sample), required=min_obs, detail=f"{group}={level}"
            )
        samples.append(sample)
    return (levels[0], levels[1]), (samples[0], samples[1])


def generate_formulation_data(
    n_rows: int = 100,
    seed: int | None = None,
    columns: FormulationColumns = COLUMNS,
) -> pd.DataFrame:
    """Generate a synthetic formulation dataset.

    Distributions follow the demonstration table: uniform excipient
    concentration, normally distributed continuous attributes and uniformly
    sampled categorical labels.

    Args:
        n_rows (int, optional): Number of observations. Defaults to ``100``.
        seed (int, optional): Seed for :func:`numpy.random.default_rng`.
        columns (FormulationColumns, optional): Column naming scheme.

    Returns:
        pandas.DataFrame: Table with the ten formulation columns.

    Raises:
        InsufficientDataError: If ``n_rows`` is less than one.
    """
    n = int(n_rows)
    if n < 1:
        raise InsufficientDataError(columns.time, n, required=1)

    rng = np.random.default_rng(seed)
    return pd.DataFrame(
        {
            columns.time: np.arange(1, n + 1, dtype=int),
            columns.excipient_concentration: rng.uniform(0.0, 1.0, n),
            columns.drug_release: rng.normal(50.0, 10.0, n),
            columns.particle_size: rng.normal(100.0, 20.0, n),
            columns.formulation_type: rng.choice(
                CATEGORY_LEVELS[COLUMNS.formulation_type], size=n
            ),
            columns.viscosity: rng.normal(10.0, 2.0, n),
            columns.stability_index: rng.normal(95.0, 5.0, n),
            columns.storage_condition: rng.choice(
                CATEGORY_LEVELS[COLUMNS.storage_condition], size=n
            ),
            columns.ph: rng.normal(7.0, 0.5, n),
            columns.drug_content: rng.normal(95.0, 2.0, n),
        }
    )


def validate_formulation_data(
    data: pd.DataFrame,
    columns: FormulationColumns = COLUMNS,
    category_levels: dict[str, Sequence[str]] | None = None,
) -> pd.DataFrame:
    """Check a dataset against the formulation schema and return it unchanged.

    Raises:
        MissingColumnError: If any schema column is absent.
        NonNumericColumnError: If a numeric schema column is not numeric.
        InvalidCategoryError: If a categorical column holds unknown labels.
        ValueError: If excipient concentration falls outside [0, 1].
    """
    require_columns(data, columns.all(), purpose="formulation dataset")

    levels_map = CATEGORY_LEVELS if category_levels is None else category_levels
    for column, allowed in levels_map.items():
        if column not in data.columns:
            continue
        observed = data[column].dropna().unique()
        allowed_set = set(allowed)
        unexpected = sorted((v for v in observed if v not in allowed_set), key=str)
        if unexpected:
            raise InvalidCategoryError(column, unexpected, allowed)

    for column in columns.all():
        if column in levels_map:
            continue
        numeric_column(data, column)

    lo, hi = EXCIPIENT_BOUNDS
    conc = data[columns.excipient_concentration].dropna()
    out_of_range = conc[(conc < lo) | (conc > hi)]
    if not out_of_range.empty:
        raise ValueError(
            f"Column '{columns.excipient_concentration}' must lie in [{lo}, {hi}]; "
            f"found {len(out_of_range)} values outside the range."
        )
    return data


def load_formulation_data(
    filepath: str | Path, columns: FormulationColumns = COLUMNS
) -> pd.DataFrame:
    """
    Load a formulation dataset from a CSV file and validate it.

    Args:
        filepath (str or Path): Path to the CSV file.

    Returns:
        pd.DataFrame: Loaded DataFrame.
    """
    data = pd.read_csv(filepath)
    return validate_formulation_data(data, columns=columns)
