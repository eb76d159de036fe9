"""Engine error types.

Every error aborts the current computation. None of them is caught and
recovered from inside the engine.
"""

from __future__ import annotations


class DimensionMismatchError(ValueError):
    """Raised when vector/matrix lengths disagree between stages."""

    def __init__(
        self, what: str, expected: int | tuple[int, ...], actual: int | tuple[int, ...],
    ) -> None:
        self.what = what
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"dimension mismatch: {what} expected {expected}, got {actual}."
        )


class PopulationDivisionError(ZeroDivisionError):
    """Raised when a demographic group has zero population."""

    def __init__(self, group_label: str, year: int) -> None:
        self.group_label = group_label
        self.year = year
        super().__init__(
            f"population of group '{group_label}' in {year} is zero; "
            "adjustment ratio is undefined."
        )


class ProviderError(RuntimeError):
    """Raised when an external data provider fails.

    The provider's own exception is chained as ``__cause__``.
    """

    def __init__(
        self,
        stage: str,
        year: int,
        group_label: str | None = None,
        detail: str = "",
    ) -> None:
        self.stage = stage
        self.year = year
        self.group_label = group_label
        context = f"stage={stage}, year={year}"
        if group_label is not None:
            context += f", group={group_label}"
        message = f"provider failure ({context})"
        if detail:
            message += f": {detail}"
        super().__init__(message)
