"""Run the complete exploratory formulation analysis and export its outputs.

The workflow calls every toolkit operation on one dataset with the
demonstration column choices, writes tables as CSV and charts as PNG, and
returns all in-memory results.
"""

from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path
from typing import Any

import matplotlib.pyplot as plt
import pandas as pd

from .data import generate_formulation_data, load_formulation_data
from .plotting.style import save_figure
from .schema import COLUMNS
from .toolkit import CHART_OPERATIONS, run_operation

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = Path("output")

WORKFLOW_STEPS: tuple[tuple[str, dict[str, Any]], ...] = (
    ("anova_analysis", {}),
    ("regression_analysis", {}),
    ("hypothesis_testing", {}),
    (
        "scatterplot",
        {"x": COLUMNS.excipient_concentration, "y": COLUMNS.drug_release},
    ),
    ("histogram", {"x": COLUMNS.particle_size, "bins": 20}),
    ("boxplot", {"x": COLUMNS.formulation_type, "y": COLUMNS.viscosity}),
    ("summary_statistics", {}),
    ("confidence_intervals", {}),
    (
        "compare_means",
        {"group_var": COLUMNS.formulation_type, "response_var": COLUMNS.stability_index},
    ),
    (
        "compare_distributions",
        {"group_var": COLUMNS.storage_condition, "response_var": COLUMNS.drug_content},
    ),
    ("control_chart", {"parameter": COLUMNS.ph}),
    ("batch_variability", {"parameter": COLUMNS.drug_content}),
)


def _tests_table(results: dict[str, Any]) -> pd.DataFrame:
    """Collect t-test and interval results into one reporting table."""
    rows = [
        results["hypothesis_testing"].as_dict(),
        results["compare_means"].as_dict(),
    ]
    ci = results["confidence_intervals"]
    rows.append(
        {
            "test": "One Sample t-test",
            "response": ci.column,
            "estimate": ci.estimate,
            "ci_low": ci.lower,
            "ci_high": ci.upper,
            "conf_level": ci.conf_level,
        }
    )
    return pd.DataFrame(rows)


def write_tables(results: dict[str, Any], output_dir: Path) -> dict[str, Path]:
    """Write tabular workflow results as CSV files."""
    output_dir.mkdir(parents=True, exist_ok=True)
    paths = {
        "anova": output_dir / "anova.csv",
        "regression": output_dir / "regression_coefficients.csv",
        "summary_statistics": output_dir / "summary_statistics.csv",
        "tests": output_dir / "tests.csv",
        "batch_variability": output_dir / "batch_variability.txt",
    }
    results["anova_analysis"].table.to_csv(paths["anova"], index_label="term")
    results["regression_analysis"].coefficients.to_csv(
        paths["regression"], index_label="term"
    )
    results["summary_statistics"].to_csv(
        paths["summary_statistics"], index_label="statistic"
    )
    _tests_table(results).to_csv(paths["tests"], index=False)
    paths["batch_variability"].write_text(results["batch_variability"] + "\n")
    return paths


def run_formulation_workflow(
    data: pd.DataFrame, output_dir: str | Path = DEFAULT_OUTPUT_DIR
) -> dict[str, Any]:
    """Run every toolkit operation and export tables and figures.

    Args:
        data (pandas.DataFrame): Formulation dataset with the standard
            columns.
        output_dir (str or Path, optional): Destination directory. Defaults
            to ``"output"``.

    Returns:
        dict: ``"results"`` maps operation name to its in-memory result
        (figures are closed after saving), ``"tables"`` and ``"figures"``
        map names to written paths.
    """
    outdir = Path(output_dir)
    outdir.mkdir(parents=True, exist_ok=True)
    logger.info("Running formulation workflow on %d rows", len(data))

    results: dict[str, Any] = {}
    figures: dict[str, Path] = {}
    for name, params in WORKFLOW_STEPS:
        step_start = time.time()
        result = run_operation(name, data, **params)
        if name in CHART_OPERATIONS:
            figures[name] = save_figure(result, outdir / name)
            plt.close(result)
        results[name] = result
        logger.info("%s completed in %.2f seconds", name, time.time() - step_start)

    tables = write_tables(results, outdir)
    for path in [*tables.values(), *figures.values()]:
        logger.info("  - %s", path)

    return {"results": results, "tables": tables, "figures": figures}


def _build_arg_parser() -> argparse.ArgumentParser:
    """Build command-line parser for module execution."""
    parser = argparse.ArgumentParser(
        description="Exploratory statistics and charts for formulation data."
    )
    parser.add_argument(
        "--input",
        default=None,
        help="Path to a formulation CSV. A synthetic dataset is used when omitted.",
    )
    parser.add_argument(
        "--rows",
        type=int,
        default=100,
        help="Rows in the synthetic dataset (default: 100).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for the synthetic dataset.",
    )
    parser.add_argument(
        "--outdir",
        default=str(DEFAULT_OUTPUT_DIR),
        help=f"Output directory (default: {DEFAULT_OUTPUT_DIR}).",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint for running the formulation workflow."""
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    if args.input:
        logger.info("Loading formulation data from %s", args.input)
        data = load_formulation_data(args.input)
    else:
        logger.info(
            "Generating synthetic formulation data (rows=%d, seed=%s)",
            args.rows,
            args.seed,
        )
        data = generate_formulation_data(n_rows=args.rows, seed=args.seed)

    run_formulation_workflow(data, output_dir=args.outdir)
    print(f"Wrote formulation analysis outputs to {args.outdir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
