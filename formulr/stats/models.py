"""Linear-model summaries: sequential ANOVA and ordinary least squares.

Both operations build a treatment-coded design matrix from named columns,
solve it with :func:`numpy.linalg.lstsq`, and take reference distributions
from :mod:`scipy.stats`. Numeric terms contribute one column each;
categorical terms contribute one indicator per non-reference level, with the
first sorted level as reference.
"""

from __future__ import annotations

import math
import warnings
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np
import pandas as pd
from pandas.api.types import is_bool_dtype, is_numeric_dtype
from scipy import stats as scipy_stats

from ..data import numeric_column, require_columns
from ..errors import DegenerateModelError, InsufficientDataError
from ..schema import DEFAULTS

ANOVA_COLUMNS: tuple[str, ...] = ("Df", "Sum Sq", "Mean Sq", "F value", "Pr(>F)")
COEF_COLUMNS: tuple[str, ...] = ("Estimate", "Std. Error", "t value", "Pr(>|t|)")
RESIDUAL_LABELS: tuple[str, ...] = ("Min", "1Q", "Median", "3Q", "Max")


@dataclass(frozen=True)
class DesignBlock:
    """Columns of the design matrix contributed by one model term."""

    term: str
    names: tuple[str, ...]
    matrix: np.ndarray


@dataclass(frozen=True, eq=False)
class AnovaTable:
    """Sequential analysis-of-variance table.

    ``table`` is indexed by term name plus a final ``"Residuals"`` row and
    carries the columns in :data:`ANOVA_COLUMNS`.
    """

    response: str
    terms: tuple[str, ...]
    table: pd.DataFrame
    n_obs: int

    def f_statistic(self, term: str | None = None) -> float:
        return float(self.table.loc[term or self.terms[0], "F value"])

    def p_value(self, term: str | None = None) -> float:
        return float(self.table.loc[term or self.terms[0], "Pr(>F)"])

    @property
    def residual_df(self) -> int:
        return int(self.table.loc["Residuals", "Df"])

    def __str__(self) -> str:
        return self.table.to_string()


@dataclass(frozen=True, eq=False)
class RegressionSummary:
    """Ordinary least-squares fit summary."""

    response: str
    predictors: tuple[str, ...]
    coefficients: pd.DataFrame
    r_squared: float
    adj_r_squared: float
    sigma: float
    df_model: int
    df_resid: int
    f_statistic: float
    f_pvalue: float
    residual_quantiles: pd.Series
    n_obs: int
    fitted: np.ndarray = field(repr=False)
    residuals: np.ndarray = field(repr=False)

    @property
    def params(self) -> pd.Series:
        return self.coefficients["Estimate"]

    def __str__(self) -> str:
        lines = [
            f"Response: {self.response}",
            "Residuals:",
            self.residual_quantiles.to_string(),
            "",
            "Coefficients:",
            self.coefficients.to_string(),
            "",
            f"Residual standard error: {self.sigma:.4g} on {self.df_resid} degrees of freedom",
            f"Multiple R-squared: {self.r_squared:.4g}, "
            f"Adjusted R-squared: {self.adj_r_squared:.4g}",
            f"F-statistic: {self.f_statistic:.4g} on {self.df_model} and "
            f"{self.df_resid} DF, p-value: {self.f_pvalue:.4g}",
        ]
        return "\n".join(lines)


def _complete_rows(data: pd.DataFrame, columns: Sequence[str]) -> pd.DataFrame:
    """Drop rows with missing values in any model column."""
    frame = data.loc[:, list(columns)]
    complete = frame.dropna()
    dropped = len(frame) - len(complete)
    if dropped:
        warnings.warn(
            f"Dropped {dropped} rows with missing values in {list(columns)}.",
            RuntimeWarning,
            stacklevel=3,
        )
    return complete


def _term_block(frame: pd.DataFrame, term: str) -> DesignBlock:
    """Encode one term, rejecting constant factors."""
    series = frame[term]
    if is_numeric_dtype(series) and not is_bool_dtype(series):
        values = series.to_numpy(dtype=float)
        if len(values) == 0 or np.ptp(values) == 0:
            raise DegenerateModelError(f"Factor '{term}' is constant; no variation to model.")
        return DesignBlock(term=term, names=(term,), matrix=values.reshape(-1, 1))

    dummies = pd.get_dummies(
        series.astype(str), prefix=term, prefix_sep="", drop_first=True, dtype=float
    )
    if dummies.shape[1] == 0:
        raise DegenerateModelError(f"Factor '{term}' has a single level; no variation to model.")
    return DesignBlock(
        term=term,
        names=tuple(str(name) for name in dummies.columns),
        matrix=dummies.to_numpy(dtype=float),
    )


def _prepare(
    data: pd.DataFrame, response: str, terms: Sequence[str], purpose: str
) -> tuple[np.ndarray, list[DesignBlock]]:
    terms = list(terms)
    if not terms:
        raise ValueError(f"{purpose} needs at least one explanatory column.")
    require_columns(data, [response, *terms], purpose=purpose)
    numeric_column(data, response, purpose=purpose)

    frame = _complete_rows(data, [response, *terms])
    y = frame[response].to_numpy(dtype=float)
    blocks = [_term_block(frame, term) for term in terms]
    return y, blocks


def _residual_ss(design: np.ndarray, y: np.ndarray) -> tuple[float, int]:
    beta, *_ = np.linalg.lstsq(design, y, rcond=None)
    resid = y - design @ beta
    return float(np.sum(np.square(resid))), int(np.linalg.matrix_rank(design))


def anova_analysis(
    data: pd.DataFrame,
    response: str = DEFAULTS.response,
    factors: Sequence[str] = DEFAULTS.factors,
) -> AnovaTable:
    """Fit a linear model and partition its variance term by term.

    Sums of squares are sequential (type I): each term is credited with the
    reduction in residual sum of squares obtained when it is added after the
    terms listed before it.

    Args:
        data (pandas.DataFrame): Formulation dataset.
        response (str, optional): Numeric response column. Defaults to
            ``"Drug_Release"``.
        factors (Sequence[str], optional): Explanatory columns in fitting
            order. Defaults to ``("Excipient_Concentration",)``.

    Returns:
        AnovaTable: Degrees of freedom, sums of squares, mean squares, F
        statistics and p-values per term plus the residual row.

    Raises:
        MissingColumnError: If the response or a factor column is absent.
        DegenerateModelError: If a factor is constant or fully aliased with
            earlier terms.
        InsufficientDataError: If no residual degrees of freedom remain.
    """
    if isinstance(factors, str):
        factors = (factors,)
    y, blocks = _prepare(data, response, factors, purpose="analysis of variance")
    n = len(y)

    design = np.ones((n, 1))
    rss_prev, rank_prev = _residual_ss(design, y)
    rows: list[tuple[str, int, float]] = []
    for block in blocks:
        design = np.hstack([design, block.matrix])
        rss, rank = _residual_ss(design, y)
        df_term = rank - rank_prev
        if df_term <= 0:
            raise DegenerateModelError(
                f"Factor '{block.term}' is aliased with earlier terms; "
                "it adds no degrees of freedom."
            )
        rows.append((block.term, df_term, max(rss_prev - rss, 0.0)))
        rss_prev, rank_prev = rss, rank

    df_resid = n - rank_prev
    if df_resid <= 0:
        raise InsufficientDataError(
            response, n, required=rank_prev + 1, detail="no residual degrees of freedom"
        )
    ms_resid = rss_prev / df_resid

    records = []
    for term, df_term, ss in rows:
        ms = ss / df_term
        if ms_resid > 0:
            f_value = ms / ms_resid
            p_value = float(scipy_stats.f.sf(f_value, df_term, df_resid))
        else:
            f_value = math.nan
            p_value = math.nan
        records.append((term, df_term, ss, ms, f_value, p_value))
    records.append(("Residuals", df_resid, rss_prev, ms_resid, math.nan, math.nan))

    table = pd.DataFrame.from_records(
        [rec[1:] for rec in records],
        index=[rec[0] for rec in records],
        columns=list(ANOVA_COLUMNS),
    )
    table["Df"] = table["Df"].astype(int)
    return AnovaTable(
        response=response,
        terms=tuple(block.term for block in blocks),
        table=table,
        n_obs=n,
    )


def regression_analysis(
    data: pd.DataFrame,
    response: str = DEFAULTS.response,
    predictors: Sequence[str] = DEFAULTS.predictors,
) -> RegressionSummary:
    """Fit an ordinary least-squares regression with intercept.

    Args:
        data (pandas.DataFrame): Formulation dataset.
        response (str, optional): Numeric response column. Defaults to
            ``"Drug_Release"``.
        predictors (Sequence[str], optional): One or more predictor columns.
            Defaults to ``("Excipient_Concentration", "Particle_Size")``.

    Returns:
        RegressionSummary: Coefficient table (estimate, standard error, t
        value, two-sided p-value), R-squared, adjusted R-squared, residual
        standard error, overall F test and residual quantiles.

    Raises:
        MissingColumnError: If the response or a predictor is absent.
        DegenerateModelError: If the design matrix is rank-deficient.
        InsufficientDataError: If observations do not exceed parameters.
    """
    if isinstance(predictors, str):
        predictors = (predictors,)
    y, blocks = _prepare(data, response, predictors, purpose="linear regression")
    n = len(y)

    names = ["(Intercept)"] + [name for block in blocks for name in block.names]
    design = np.hstack([np.ones((n, 1))] + [block.matrix for block in blocks])
    p = design.shape[1]

    if n <= p:
        raise InsufficientDataError(
            response, n, required=p + 1, detail=f"{p} model parameters"
        )
    if int(np.linalg.matrix_rank(design)) < p:
        raise DegenerateModelError(
            f"Design matrix for predictors {list(predictors)} is rank-deficient."
        )

    beta, *_ = np.linalg.lstsq(design, y, rcond=None)
    fitted = design @ beta
    resid = y - fitted
    df_resid = n - p
    df_model = p - 1

    ss_res = float(np.sum(np.square(resid)))
    ss_tot = float(np.sum(np.square(y - np.mean(y))))
    sigma2 = ss_res / df_resid
    sigma = math.sqrt(sigma2)

    cov = sigma2 * np.linalg.inv(design.T @ design)
    se = np.sqrt(np.diag(cov))
    with np.errstate(divide="ignore", invalid="ignore"):
        t_values = beta / se
    p_values = 2.0 * scipy_stats.t.sf(np.abs(t_values), df_resid)

    if ss_tot > 0:
        r2 = 1.0 - ss_res / ss_tot
        adj_r2 = 1.0 - (1.0 - r2) * (n - 1) / df_resid
    else:
        r2 = math.nan
        adj_r2 = math.nan

    if sigma2 > 0:
        f_stat = ((ss_tot - ss_res) / df_model) / sigma2
        f_p = float(scipy_stats.f.sf(f_stat, df_model, df_resid))
    else:
        f_stat = math.nan
        f_p = math.nan

    coefficients = pd.DataFrame(
        {
            COEF_COLUMNS[0]: beta,
            COEF_COLUMNS[1]: se,
            COEF_COLUMNS[2]: t_values,
            COEF_COLUMNS[3]: p_values,
        },
        index=names,
    )
    quantiles = pd.Series(
        np.quantile(resid, [0.0, 0.25, 0.5, 0.75, 1.0]),
        index=list(RESIDUAL_LABELS),
        name="residuals",
    )

    return RegressionSummary(
        response=response,
        predictors=tuple(predictors),
        coefficients=coefficients,
        r_squared=float(r2),
        adj_r_squared=float(adj_r2),
        sigma=float(sigma),
        df_model=int(df_model),
        df_resid=int(df_resid),
        f_statistic=float(f_stat),
        f_pvalue=f_p,
        residual_quantiles=quantiles,
        n_obs=int(n),
        fitted=np.asarray(fitted, dtype=float),
        residuals=np.asarray(resid, dtype=float),
    )
