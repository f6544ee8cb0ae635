"""Student t-based comparisons and confidence intervals.

Two-sample tests use Welch's unequal-variance form, matching the usual
default for exploratory comparisons of formulation groups.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd
from scipy import stats as scipy_stats

from ..data import numeric_column, two_level_groups
from ..errors import DegenerateModelError
from ..schema import DEFAULTS

WELCH_METHOD = "Welch Two Sample t-test"
ONE_SAMPLE_METHOD = "One Sample t-test"


@dataclass(frozen=True)
class TTestResult:
    """Container for a two-sample t-test.

    Attributes:
        statistic: t statistic for ``mean(groups[0]) - mean(groups[1])``.
        df: Welch-Satterthwaite degrees of freedom.
        p_value: Two-sided p-value.
        conf_int: Confidence interval for the mean difference.
        estimate: Group means keyed by group label.
        groups: Group labels in sorted order.
        response: Response column name.
        group_column: Grouping column name.
    """

    statistic: float
    df: float
    p_value: float
    conf_int: tuple[float, float]
    conf_level: float
    estimate: dict
    groups: tuple
    n_obs: tuple[int, int]
    response: str
    group_column: str
    method: str = WELCH_METHOD
    alternative: str = "two-sided"

    @property
    def mean_difference(self) -> float:
        first, second = self.groups
        return float(self.estimate[first] - self.estimate[second])

    def as_dict(self) -> dict:
        """Flatten the result into one reporting row."""
        return {
            "test": self.method,
            "response": self.response,
            "group": self.group_column,
            "levels": " vs ".join(str(g) for g in self.groups),
            "t_stat": self.statistic,
            "df": self.df,
            "pvalue": self.p_value,
            "mean_difference": self.mean_difference,
            "ci_low": self.conf_int[0],
            "ci_high": self.conf_int[1],
            "conf_level": self.conf_level,
        }


@dataclass(frozen=True)
class ConfidenceInterval:
    """t-based confidence interval for one column mean."""

    lower: float
    upper: float
    estimate: float
    conf_level: float
    n: int
    column: str

    def as_tuple(self) -> tuple[float, float]:
        return (self.lower, self.upper)


def _check_conf_level(conf_level: float) -> float:
    level = float(conf_level)
    if not 0.0 < level < 1.0:
        raise ValueError(f"conf_level must be in (0, 1), got {conf_level}.")
    return level


def compare_means(
    data: pd.DataFrame,
    group_var: str,
    response_var: str,
    conf_level: float = DEFAULTS.conf_level,
) -> TTestResult:
    """Compare the mean of ``response_var`` between two groups.

    Args:
        data (pandas.DataFrame): Formulation dataset.
        group_var (str): Grouping column with exactly two levels.
        response_var (str): Numeric response column.
        conf_level (float, optional): Confidence level for the interval on
            the mean difference. Defaults to ``0.95``.

    Returns:
        TTestResult: Welch t statistic, degrees of freedom, two-sided
        p-value, confidence interval and group means.

    Raises:
        MissingColumnError: If either column is absent.
        GroupCardinalityError: If ``group_var`` does not have two levels.
        InsufficientDataError: If either group has fewer than two values.
        DegenerateModelError: If the response is constant within both
            groups, leaving the t statistic undefined.
    """
    level = _check_conf_level(conf_level)
    groups, (first, second) = two_level_groups(data, group_var, response_var)
    if np.ptp(first) == 0 and np.ptp(second) == 0:
        raise DegenerateModelError(
            f"Column '{response_var}' is constant within both '{group_var}' "
            "groups; the t statistic is undefined."
        )

    result = scipy_stats.ttest_ind(first, second, equal_var=False)
    ci = result.confidence_interval(confidence_level=level)

    return TTestResult(
        statistic=float(result.statistic),
        df=float(result.df),
        p_value=float(result.pvalue),
        conf_int=(float(ci.low), float(ci.high)),
        conf_level=level,
        estimate={groups[0]: float(np.mean(first)), groups[1]: float(np.mean(second))},
        groups=groups,
        n_obs=(len(first), len(second)),
        response=response_var,
        group_column=group_var,
    )


def hypothesis_testing(
    data: pd.DataFrame,
    response: str = DEFAULTS.response,
    group: str = DEFAULTS.group,
    conf_level: float = DEFAULTS.conf_level,
) -> TTestResult:
    """Test for a difference in mean response between formulation groups.

    Defaults compare ``Drug_Release`` across ``Formulation_Type``.
    """
    return compare_means(data, group_var=group, response_var=response, conf_level=conf_level)


def confidence_intervals(
    data: pd.DataFrame,
    column: str = DEFAULTS.ci_column,
    conf_level: float = DEFAULTS.conf_level,
) -> ConfidenceInterval:
    """Compute a one-sample t confidence interval for a column mean.

    Raises:
        MissingColumnError: If ``column`` is absent.
        NonNumericColumnError: If ``column`` is not numeric.
        InsufficientDataError: If fewer than two values are available.
    """
    level = _check_conf_level(conf_level)
    values = numeric_column(data, column, min_obs=2, purpose="confidence interval")
    sample = values.to_numpy(dtype=float)
    mean = float(np.mean(sample))

    if np.ptp(sample) == 0:
        lower = upper = mean
    else:
        result = scipy_stats.ttest_1samp(sample, popmean=0.0)
        ci = result.confidence_interval(confidence_level=level)
        lower, upper = float(ci.low), float(ci.high)

    return ConfidenceInterval(
        lower=lower,
        upper=upper,
        estimate=mean,
        conf_level=level,
        n=int(len(sample)),
        column=column,
    )
