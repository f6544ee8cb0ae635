"""Pytest configuration for repository-relative imports and shared data."""

import os
import sys

import matplotlib

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import pytest  # noqa: E402

from formulr.data import generate_formulation_data  # noqa: E402


@pytest.fixture
def formulation_data():
    """Seeded 100-row synthetic formulation table."""
    return generate_formulation_data(n_rows=100, seed=20240501)


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    plt.close("all")
