import numpy as np
import pandas as pd
import pandas.testing as pdt
import pytest
from scipy import stats as scipy_stats

from formulr.errors import (
    DegenerateModelError,
    InsufficientDataError,
    MissingColumnError,
)
from formulr.schema import COLUMNS
from formulr.stats.models import (
    ANOVA_COLUMNS,
    RESIDUAL_LABELS,
    anova_analysis,
    regression_analysis,
)


def _linear_frame(n: int = 40, noise: float = 0.01, seed: int = 3) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    x1 = rng.uniform(0.0, 1.0, n)
    x2 = rng.normal(100.0, 20.0, n)
    y = 2.0 + 3.0 * x1 - 0.5 * x2 + rng.normal(0.0, noise, n)
    return pd.DataFrame({"x1": x1, "x2": x2, "y": y})


def test_anova_single_numeric_factor_matches_simple_regression(formulation_data):
    table = anova_analysis(formulation_data)

    assert list(table.table.columns) == list(ANOVA_COLUMNS)
    assert list(table.table.index) == [COLUMNS.excipient_concentration, "Residuals"]
    assert table.table.loc[COLUMNS.excipient_concentration, "Df"] == 1
    assert table.residual_df == len(formulation_data) - 2

    x = formulation_data[COLUMNS.excipient_concentration].to_numpy()
    y = formulation_data[COLUMNS.drug_release].to_numpy()
    reference = scipy_stats.linregress(x, y)
    assert np.isclose(table.p_value(), reference.pvalue)
    assert 0.0 <= table.p_value() <= 1.0

    total_ss = float(np.sum((y - y.mean()) ** 2))
    assert np.isclose(table.table["Sum Sq"].sum(), total_ss)


def test_anova_categorical_factor_matches_one_way_anova(formulation_data):
    table = anova_analysis(
        formulation_data,
        response=COLUMNS.drug_content,
        factors=[COLUMNS.storage_condition],
    )
    groups = [
        grp[COLUMNS.drug_content].to_numpy()
        for _, grp in formulation_data.groupby(COLUMNS.storage_condition)
    ]
    reference = scipy_stats.f_oneway(*groups)

    term = COLUMNS.storage_condition
    assert table.table.loc[term, "Df"] == len(groups) - 1
    assert np.isclose(table.f_statistic(term), reference.statistic)
    assert np.isclose(table.p_value(term), reference.pvalue)


def test_anova_sequential_terms_partition_total_ss(formulation_data):
    table = anova_analysis(
        formulation_data,
        factors=(COLUMNS.excipient_concentration, COLUMNS.formulation_type),
    )
    y = formulation_data[COLUMNS.drug_release].to_numpy()
    assert table.terms == (COLUMNS.excipient_concentration, COLUMNS.formulation_type)
    assert np.isclose(table.table["Sum Sq"].sum(), float(np.sum((y - y.mean()) ** 2)))
    assert table.residual_df == len(y) - 3


def test_anova_constant_factor_raises():
    df = pd.DataFrame({"Excipient_Concentration": [0.5] * 6, "Drug_Release": np.arange(6.0)})
    with pytest.raises(DegenerateModelError):
        anova_analysis(df)


def test_anova_missing_factor_raises(formulation_data):
    df = formulation_data.drop(columns=[COLUMNS.excipient_concentration])
    with pytest.raises(MissingColumnError) as excinfo:
        anova_analysis(df)
    assert excinfo.value.column == COLUMNS.excipient_concentration


def test_anova_without_residual_df_raises():
    df = pd.DataFrame({"Excipient_Concentration": [0.1, 0.9], "Drug_Release": [1.0, 2.0]})
    with pytest.raises(InsufficientDataError):
        anova_analysis(df)


def test_regression_recovers_known_coefficients():
    df = _linear_frame()
    fit = regression_analysis(df, response="y", predictors=["x1", "x2"])

    assert list(fit.coefficients.index) == ["(Intercept)", "x1", "x2"]
    assert np.allclose(fit.params.to_numpy(), [2.0, 3.0, -0.5], atol=0.05)
    assert fit.r_squared > 0.999
    assert fit.adj_r_squared <= fit.r_squared
    assert fit.df_model == 2
    assert fit.df_resid == len(df) - 3
    assert fit.f_pvalue < 1e-6
    assert list(fit.residual_quantiles.index) == list(RESIDUAL_LABELS)
    assert np.isclose(float(np.sum(fit.residuals)), 0.0, atol=1e-8)


def test_regression_single_predictor_matches_linregress(formulation_data):
    fit = regression_analysis(
        formulation_data, predictors=COLUMNS.excipient_concentration
    )
    reference = scipy_stats.linregress(
        formulation_data[COLUMNS.excipient_concentration],
        formulation_data[COLUMNS.drug_release],
    )
    slope = fit.coefficients.loc[COLUMNS.excipient_concentration]
    assert np.isclose(slope["Estimate"], reference.slope)
    assert np.isclose(slope["Std. Error"], reference.stderr)
    assert np.isclose(slope["Pr(>|t|)"], reference.pvalue)
    assert np.isclose(fit.r_squared, reference.rvalue**2)


def test_regression_default_predictors(formulation_data):
    fit = regression_analysis(formulation_data)
    assert fit.response == COLUMNS.drug_release
    assert fit.predictors == (COLUMNS.excipient_concentration, COLUMNS.particle_size)
    assert fit.n_obs == len(formulation_data)
    assert ((fit.coefficients["Pr(>|t|)"] >= 0) & (fit.coefficients["Pr(>|t|)"] <= 1)).all()
    assert "Residual standard error" in str(fit)


def test_regression_rank_deficient_design_raises():
    df = _linear_frame()
    df["x3"] = 2.0 * df["x1"]
    with pytest.raises(DegenerateModelError):
        regression_analysis(df, response="y", predictors=["x1", "x3"])


def test_regression_too_few_rows_raises():
    df = _linear_frame(n=3)
    with pytest.raises(InsufficientDataError):
        regression_analysis(df, response="y", predictors=["x1", "x2"])


def test_models_are_idempotent_and_do_not_mutate(formulation_data):
    snapshot = formulation_data.copy(deep=True)
    first = anova_analysis(formulation_data)
    second = anova_analysis(formulation_data)
    pdt.assert_frame_equal(first.table, second.table)

    fit_a = regression_analysis(formulation_data)
    fit_b = regression_analysis(formulation_data)
    pdt.assert_frame_equal(fit_a.coefficients, fit_b.coefficients)
    pdt.assert_frame_equal(formulation_data, snapshot)
