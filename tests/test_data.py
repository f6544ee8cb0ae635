import numpy as np
import pandas as pd
import pandas.testing as pdt
import pytest

from formulr.data import (
    generate_formulation_data,
    load_formulation_data,
    numeric_column,
    require_columns,
    two_level_groups,
    validate_formulation_data,
)
from formulr.errors import (
    FormulationError,
    GroupCardinalityError,
    InsufficientDataError,
    InvalidCategoryError,
    MissingColumnError,
    NonNumericColumnError,
)
from formulr.schema import COLUMNS, FORMULATION_TYPES, STORAGE_CONDITIONS


def test_generated_dataset_matches_schema(formulation_data):
    df = formulation_data
    assert list(df.columns) == list(COLUMNS.all())
    assert len(df) == 100
    assert df[COLUMNS.time].to_list() == list(range(1, 101))
    assert df[COLUMNS.excipient_concentration].between(0.0, 1.0).all()
    assert set(df[COLUMNS.formulation_type]) <= set(FORMULATION_TYPES)
    assert set(df[COLUMNS.storage_condition]) <= set(STORAGE_CONDITIONS)
    assert validate_formulation_data(df) is df


def test_generation_is_reproducible_with_seed():
    a = generate_formulation_data(n_rows=25, seed=7)
    b = generate_formulation_data(n_rows=25, seed=7)
    pdt.assert_frame_equal(a, b)


def test_generation_rejects_empty_table():
    with pytest.raises(InsufficientDataError):
        generate_formulation_data(n_rows=0)


def test_require_columns_reports_missing_key():
    df = pd.DataFrame({"a": [1, 2]})
    with pytest.raises(MissingColumnError) as excinfo:
        require_columns(df, ["a", "b"], purpose="testing")
    err = excinfo.value
    assert err.column == "b"
    assert err.available == ["a"]
    assert "'b'" in str(err) and "testing" in str(err)
    assert isinstance(err, FormulationError)
    assert isinstance(err, ValueError)


def test_numeric_column_drops_missing_and_checks_type():
    df = pd.DataFrame({"x": [1.0, np.nan, 3.0], "label": ["a", "b", "c"]})
    values = numeric_column(df, "x")
    assert values.to_list() == [1.0, 3.0]
    assert df["x"].isna().sum() == 1

    with pytest.raises(NonNumericColumnError):
        numeric_column(df, "label")
    with pytest.raises(InsufficientDataError) as excinfo:
        numeric_column(df, "x", min_obs=3)
    assert excinfo.value.n == 2
    assert excinfo.value.required == 3


def test_two_level_groups_sorted_levels():
    df = pd.DataFrame({"g": ["b", "a", "b", "a"], "y": [4.0, 1.0, 6.0, 3.0]})
    levels, (first, second) = two_level_groups(df, "g", "y")
    assert levels == ("a", "b")
    assert first.tolist() == [1.0, 3.0]
    assert second.tolist() == [4.0, 6.0]


def test_two_level_groups_rejects_three_levels():
    df = pd.DataFrame({"g": ["a", "b", "c"] * 2, "y": np.arange(6, dtype=float)})
    with pytest.raises(GroupCardinalityError) as excinfo:
        two_level_groups(df, "g", "y")
    assert excinfo.value.levels == ["a", "b", "c"]
    assert excinfo.value.expected == 2


def test_two_level_groups_warns_on_dropped_rows():
    df = pd.DataFrame(
        {
            "g": ["a", "a", "b", "b", None, "b"],
            "y": [1.0, 2.0, 3.0, np.nan, 5.0, 4.0],
        }
    )
    with pytest.warns(RuntimeWarning, match="Dropped 2 rows"):
        levels, (_, second) = two_level_groups(df, "g", "y")
    assert levels == ("a", "b")
    assert second.tolist() == [3.0, 4.0]


def test_validate_rejects_unknown_category(formulation_data):
    df = formulation_data.copy()
    df.loc[0, COLUMNS.storage_condition] = "Frozen"
    with pytest.raises(InvalidCategoryError) as excinfo:
        validate_formulation_data(df)
    assert excinfo.value.unexpected == ["Frozen"]


def test_validate_rejects_out_of_range_concentration(formulation_data):
    df = formulation_data.copy()
    df.loc[3, COLUMNS.excipient_concentration] = 1.5
    with pytest.raises(ValueError, match="Excipient_Concentration"):
        validate_formulation_data(df)


def test_validate_rejects_missing_column(formulation_data):
    df = formulation_data.drop(columns=[COLUMNS.viscosity])
    with pytest.raises(MissingColumnError) as excinfo:
        validate_formulation_data(df)
    assert excinfo.value.column == COLUMNS.viscosity


def test_load_formulation_data_from_csv(tmp_path, formulation_data):
    path = tmp_path / "formulation.csv"
    formulation_data.to_csv(path, index=False)
    loaded = load_formulation_data(path)
    assert list(loaded.columns) == list(COLUMNS.all())
    assert len(loaded) == len(formulation_data)
    assert np.allclose(
        loaded[COLUMNS.drug_release], formulation_data[COLUMNS.drug_release]
    )
