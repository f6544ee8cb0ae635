"""Exception taxonomy for formulation analysis operations.

Every error subclasses :class:`FormulationError`, itself a ``ValueError``, so
callers that only care about bad input can catch one type.
"""

from __future__ import annotations

from typing import Iterable, Sequence


class FormulationError(ValueError):
    """Base class for all toolkit errors."""


class MissingColumnError(FormulationError):
    """Raised when a requested column is absent from the dataset."""

    def __init__(self, column: str, available: Iterable[str], purpose: str = ""):
        self.column = column
        self.available = [str(col) for col in available]
        self.purpose = purpose
        where = f" for {purpose}" if purpose else ""
        super().__init__(
            f"Column '{column}' not found{where}. "
            f"Available columns: {self.available}"
        )


class NonNumericColumnError(FormulationError):
    """Raised when a numeric operation targets a non-numeric column."""

    def __init__(self, column: str, dtype: object):
        self.column = column
        self.dtype = dtype
        super().__init__(f"Column '{column}' must be numeric, got dtype {dtype}.")


class GroupCardinalityError(FormulationError):
    """Raised when a grouping column has the wrong number of levels."""

    def __init__(self, column: str, levels: Sequence[object], expected: int = 2):
        self.column = column
        self.levels = list(levels)
        self.expected = int(expected)
        super().__init__(
            f"Grouping column '{column}' must have exactly {expected} levels; "
            f"found {len(self.levels)}: {self.levels}"
        )


class InsufficientDataError(FormulationError):
    """Raised when fewer observations are available than a statistic needs."""

    def __init__(self, column: str, n: int, required: int = 2, detail: str = ""):
        self.column = column
        self.n = int(n)
        self.required = int(required)
        suffix = f" ({detail})" if detail else ""
        super().__init__(
            f"Column '{column}' has {n} usable observations; "
            f"at least {required} required{suffix}."
        )


class DegenerateModelError(FormulationError):
    """Raised when a model design matrix is rank-deficient or a factor is constant."""


class InvalidCategoryError(FormulationError):
    """Raised when categorical values fall outside the expected label set."""

    def __init__(self, column: str, unexpected: Sequence[object], allowed: Sequence[str]):
        self.column = column
        self.unexpected = list(unexpected)
        self.allowed = list(allowed)
        super().__init__(
            f"Column '{column}' has unexpected labels {self.unexpected}; "
            f"allowed: {self.allowed}"
        )


class UnknownOperationError(FormulationError, KeyError):
    """Raised when the operation registry has no entry for a name."""

    def __init__(self, name: str, known: Iterable[str]):
        self.name = name
        self.known = sorted(known)
        message = f"Unknown operation '{name}'. Known operations: {self.known}"
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message
