"""Define standardized column names and analysis defaults for formulation data."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FormulationColumns:
    """Container for standardized formulation-dataset column labels.

    These names match the synthetic formulation table used throughout the
    toolkit. Every operation still accepts arbitrary column names, so a
    dataset with a different schema only needs matching keyword arguments.

    Attributes:
        time: Integer observation index used as the control-chart x-axis.
        excipient_concentration: Excipient fraction, bounded to [0, 1].
        drug_release: Percentage of drug released (the default response).
        particle_size: Mean particle size.
        formulation_type: Two-level categorical formulation label.
        viscosity: Formulation viscosity.
        stability_index: Stability score.
        storage_condition: Three-level categorical storage label.
        ph: Measured pH.
        drug_content: Assayed drug content.
    """

    time: str = "Time"
    excipient_concentration: str = "Excipient_Concentration"
    drug_release: str = "Drug_Release"
    particle_size: str = "Particle_Size"
    formulation_type: str = "Formulation_Type"
    viscosity: str = "Viscosity"
    stability_index: str = "Stability_Index"
    storage_condition: str = "Storage_Condition"
    ph: str = "pH"
    drug_content: str = "Drug_Content"

    def all(self) -> tuple[str, ...]:
        """Return every column name in canonical table order."""
        return (
            self.time,
            self.excipient_concentration,
            self.drug_release,
            self.particle_size,
            self.formulation_type,
            self.viscosity,
            self.stability_index,
            self.storage_condition,
            self.ph,
            self.drug_content,
        )


COLUMNS = FormulationColumns()

FORMULATION_TYPES: tuple[str, ...] = ("Type A", "Type B")
STORAGE_CONDITIONS: tuple[str, ...] = ("Room", "Cold", "Warm")

CATEGORY_LEVELS: dict[str, tuple[str, ...]] = {
    COLUMNS.formulation_type: FORMULATION_TYPES,
    COLUMNS.storage_condition: STORAGE_CONDITIONS,
}

EXCIPIENT_BOUNDS: tuple[float, float] = (0.0, 1.0)


@dataclass(frozen=True)
class AnalysisDefaults:
    """Keyword defaults for operations that target fixed columns.

    Attributes:
        response: Response column for ANOVA, regression and the
            hypothesis test.
        factors: Explanatory terms for ANOVA, fitted sequentially.
        predictors: Predictor columns for the linear regression.
        group: Two-level grouping column for the hypothesis test.
        ci_column: Column whose mean gets a confidence interval.
        conf_level: Confidence level for t-based intervals.
        bins: Histogram bin count.
    """

    response: str = COLUMNS.drug_release
    factors: tuple[str, ...] = (COLUMNS.excipient_concentration,)
    predictors: tuple[str, ...] = (
        COLUMNS.excipient_concentration,
        COLUMNS.particle_size,
    )
    group: str = COLUMNS.formulation_type
    ci_column: str = COLUMNS.drug_release
    conf_level: float = 0.95
    bins: int = 20


DEFAULTS = AnalysisDefaults()
