import pytest
from matplotlib.figure import Figure

from formulr.errors import FormulationError, MissingColumnError, UnknownOperationError
from formulr.schema import COLUMNS
from formulr.stats.ttests import TTestResult, compare_means
from formulr.toolkit import CHART_OPERATIONS, OPERATIONS, get_operation, run_operation

EXPECTED_OPERATIONS = {
    "anova_analysis",
    "regression_analysis",
    "hypothesis_testing",
    "scatterplot",
    "histogram",
    "boxplot",
    "summary_statistics",
    "confidence_intervals",
    "compare_means",
    "compare_distributions",
    "control_chart",
    "batch_variability",
}


def test_registry_lists_every_operation():
    assert set(OPERATIONS) == EXPECTED_OPERATIONS
    assert CHART_OPERATIONS <= set(OPERATIONS)
    assert get_operation("compare_means") is compare_means


def test_run_operation_matches_direct_call(formulation_data):
    via_registry = run_operation(
        "compare_means",
        formulation_data,
        group_var=COLUMNS.formulation_type,
        response_var=COLUMNS.stability_index,
    )
    direct = compare_means(
        formulation_data, COLUMNS.formulation_type, COLUMNS.stability_index
    )
    assert isinstance(via_registry, TTestResult)
    assert via_registry == direct


def test_run_operation_returns_figures_for_charts(formulation_data):
    fig = run_operation("control_chart", formulation_data, parameter=COLUMNS.ph)
    assert isinstance(fig, Figure)


def test_run_operation_propagates_operation_errors(formulation_data):
    with pytest.raises(MissingColumnError):
        run_operation("control_chart", formulation_data, parameter="Osmolality")


def test_unknown_operation_error():
    with pytest.raises(UnknownOperationError) as excinfo:
        get_operation("kruskal_wallis")
    err = excinfo.value
    assert isinstance(err, FormulationError)
    assert isinstance(err, KeyError)
    assert err.name == "kruskal_wallis"
    assert "compare_means" in str(err)
