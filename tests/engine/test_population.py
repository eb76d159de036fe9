"""Tests for population adjustment of the emissions matrix.

Covers: ratio identity, in-place scaling, zero/negative population
rejection with the matrix left unmodified, dimension checks.
"""

import numpy as np
import pytest

from popexposure.engine.errors import (
    DimensionMismatchError,
    PopulationDivisionError,
    ProviderError,
)
from popexposure.engine.population import PopulationAdjuster, adjustment_ratios
from popexposure.models.demographics import Decile
from popexposure.providers.base import PopulationProvider

YEAR = 2015


class _Counts(PopulationProvider):
    """Population provider that only knows group counts."""

    def __init__(self, counts: dict) -> None:
        self._counts = counts

    def group_names(self, year: int) -> list[str]:
        return []

    def population_grid(self, year, group_name):  # noqa: ANN001, ANN201
        raise KeyError(group_name)

    def population_count(self, group, year):  # noqa: ANN001, ANN201
        return self._counts[group]


# ===================================================================
# adjustment_ratios
# ===================================================================


class TestAdjustmentRatios:
    """ratio_g = total_pop / pop_g."""

    def test_ratios(self) -> None:
        ratios = adjustment_ratios([100, 300], ["a", "b"], YEAR)
        np.testing.assert_array_almost_equal(ratios, [4.0, 4.0 / 3.0])

    def test_equal_groups_have_ratio_n(self) -> None:
        ratios = adjustment_ratios([50, 50, 50, 50], list("abcd"), YEAR)
        np.testing.assert_array_almost_equal(ratios, [4.0] * 4)

    def test_zero_raises(self) -> None:
        with pytest.raises(PopulationDivisionError) as exc_info:
            adjustment_ratios([100, 0], ["a", "b"], YEAR)
        assert exc_info.value.group_label == "b"
        assert isinstance(exc_info.value, ZeroDivisionError)

    def test_negative_raises(self) -> None:
        with pytest.raises(ValueError, match="negative"):
            adjustment_ratios([100, -1], ["a", "b"], YEAR)


# ===================================================================
# adjust
# ===================================================================


class TestAdjust:
    """In-place row scaling."""

    def test_two_group_scenario(self) -> None:
        matrix = np.array([[10.0, 20.0], [30.0, 20.0]])
        provider = _Counts({Decile.D1: 100, Decile.D2: 300})

        result = PopulationAdjuster().adjust(
            matrix, [Decile.D1, Decile.D2], provider, YEAR,
        )

        assert result is None
        np.testing.assert_allclose(
            matrix, [[40.0, 80.0], [40.0, 80.0 / 3.0]], rtol=1e-12,
        )

    def test_ratio_identity(self) -> None:
        """Equal original rows: adjusted ratio = inverse population ratio."""
        matrix = np.array([[3.0, 7.0, 11.0], [3.0, 7.0, 11.0]])
        provider = _Counts({Decile.D1: 1_234, Decile.D2: 98_765})

        PopulationAdjuster().adjust(matrix, [Decile.D1, Decile.D2], provider, YEAR)

        np.testing.assert_allclose(
            matrix[0] / matrix[1], np.full(3, 98_765 / 1_234), rtol=1e-9,
        )

    def test_zero_population_leaves_matrix_unmodified(self) -> None:
        matrix = np.array([[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]])
        before = matrix.copy()
        provider = _Counts({Decile.D1: 10, Decile.D2: 20, Decile.D3: 0})

        with pytest.raises(PopulationDivisionError):
            PopulationAdjuster().adjust(
                matrix, [Decile.D1, Decile.D2, Decile.D3], provider, YEAR,
            )
        np.testing.assert_array_equal(matrix, before)

    def test_fractional_population_rejected(self) -> None:
        matrix = np.array([[1.0, 2.0], [3.0, 4.0]])
        before = matrix.copy()
        provider = _Counts({Decile.D1: 100.9, Decile.D2: 300.0})

        with pytest.raises(ValueError, match="decile_1.*whole number"):
            PopulationAdjuster().adjust(matrix, [Decile.D1, Decile.D2], provider, YEAR)
        np.testing.assert_array_equal(matrix, before)

    def test_integral_float_population_accepted(self) -> None:
        matrix = np.array([[1.0], [1.0]])
        provider = _Counts({Decile.D1: 100.0, Decile.D2: 300.0})

        PopulationAdjuster().adjust(matrix, [Decile.D1, Decile.D2], provider, YEAR)

        np.testing.assert_allclose(matrix, [[4.0], [4.0 / 3.0]], rtol=1e-12)

    def test_provider_failure_leaves_matrix_unmodified(self) -> None:
        matrix = np.array([[1.0, 2.0], [3.0, 4.0]])
        before = matrix.copy()
        provider = _Counts({Decile.D1: 10})

        with pytest.raises(ProviderError) as exc_info:
            PopulationAdjuster().adjust(matrix, [Decile.D1, Decile.D2], provider, YEAR)
        assert exc_info.value.stage == "population_count"
        assert exc_info.value.group_label == "decile_2"
        np.testing.assert_array_equal(matrix, before)

    def test_row_count_mismatch(self) -> None:
        matrix = np.ones((3, 2))
        provider = _Counts({Decile.D1: 1, Decile.D2: 1})
        with pytest.raises(DimensionMismatchError):
            PopulationAdjuster().adjust(matrix, [Decile.D1, Decile.D2], provider, YEAR)

    def test_year_passed_to_provider(self) -> None:
        seen: list[int] = []

        class _Recording(_Counts):
            def population_count(self, group, year):  # noqa: ANN001, ANN201
                seen.append(year)
                return 10

        matrix = np.ones((1, 1))
        PopulationAdjuster().adjust(matrix, [Decile.D5], _Recording({}), 2009)
        assert seen == [2009]
