"""Population adjustment of the demographic × sector emissions matrix.

Raw attributed emissions favour numerically larger groups. Each group's row
is scaled by total_pop / group_pop, giving emissions per capita expressed at
the scale of the whole reference population.
"""

import logging
from collections.abc import Sequence

import numpy as np

from popexposure.engine.errors import (
    DimensionMismatchError,
    PopulationDivisionError,
    ProviderError,
)
from popexposure.models.demographics import DemographicGroup
from popexposure.providers.base import PopulationProvider

logger = logging.getLogger(__name__)


def adjustment_ratios(
    population_counts: Sequence[int],
    group_labels: Sequence[str],
    year: int,
) -> np.ndarray:
    """Per-group ratio total_pop / group_pop.

    Raises:
        ValueError: If any count is negative.
        PopulationDivisionError: If any count is zero.
    """
    counts = np.asarray(population_counts, dtype=np.float64)
    for label, count in zip(group_labels, counts, strict=True):
        if count < 0:
            raise ValueError(
                f"population of group '{label}' in {year} is negative ({count:g})."
            )
        if count == 0:
            raise PopulationDivisionError(label, year)
    return counts.sum() / counts


class PopulationAdjuster:
    """Rescales matrix rows by relative demographic group size."""

    def population_counts(
        self,
        *,
        groups: Sequence[DemographicGroup],
        population_provider: PopulationProvider,
        year: int,
    ) -> list[int]:
        """Query the total population of every group for ``year``.

        Raises:
            ProviderError: If a query fails.
            ValueError: If a count is not a whole number.
        """
        counts: list[int] = []
        for group in groups:
            try:
                count = population_provider.population_count(group, year)
            except Exception as exc:
                raise ProviderError(
                    "population_count", year, group.label, detail=str(exc),
                ) from exc
            if count != int(count):
                raise ValueError(
                    f"population of group '{group.label}' in {year} "
                    f"is not a whole number ({count!r})."
                )
            counts.append(int(count))
        return counts

    def adjust(
        self,
        matrix: np.ndarray,
        groups: Sequence[DemographicGroup],
        population_provider: PopulationProvider,
        year: int,
    ) -> None:
        """Scale each row of ``matrix`` in place by total_pop / group_pop.

        All counts are fetched and validated before the first write, so
        on any failure ``matrix`` is left exactly as it was.

        Raises:
            DimensionMismatchError: If matrix rows != len(groups).
            PopulationDivisionError: If any group population is zero.
            ValueError: If any group population is negative or fractional.
            ProviderError: If a population count query fails.
        """
        if matrix.ndim != 2 or matrix.shape[0] != len(groups):
            raise DimensionMismatchError(
                "emissions matrix rows (#groups)",
                len(groups),
                matrix.shape[0] if matrix.ndim >= 1 else 0,
            )

        counts = self.population_counts(
            groups=groups, population_provider=population_provider, year=year,
        )
        ratios = adjustment_ratios(counts, [g.label for g in groups], year)

        matrix *= ratios[:, np.newaxis]

        for group, count, ratio in zip(groups, counts, ratios, strict=True):
            logger.debug(
                "Group %s: population %d, adjustment ratio %.6f",
                group.label, count, ratio,
            )
