"""Demographic × sector emissions attribution.

Cell (g, s) = consumption_by_scc[g][s] · emissions_by_scc[s], an
element-wise product. Consumption share within a sector is taken as the
emissions share within that sector.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from popexposure.engine.errors import DimensionMismatchError, ProviderError
from popexposure.engine.sector_aggregation import SectorAggregator
from popexposure.models.demographics import DemographicGroup, validate_group_set
from popexposure.models.reference import ReferenceData
from popexposure.providers.base import ConsumptionProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DemandEmissionsResult:
    """Emissions matrix (groups × SCC) with its row and column labels."""

    matrix: np.ndarray
    scc_codes: list[str]
    groups: list[DemographicGroup]

    def row_totals(self) -> dict[str, float]:
        """Total attributed emissions per group, keyed by group label."""
        totals = self.matrix.sum(axis=1)
        return {group.label: float(totals[i]) for i, group in enumerate(self.groups)}


class DemandEmissionsMatrixBuilder:
    """Builds the demographic × sector emissions matrix."""

    def __init__(self, aggregator: SectorAggregator | None = None) -> None:
        self._aggregator = aggregator or SectorAggregator()

    def consumption_by_scc(
        self,
        *,
        group: DemographicGroup,
        year: int,
        consumption_provider: ConsumptionProvider,
        reference: ReferenceData,
    ) -> np.ndarray:
        """Fetch one group's industry consumption and aggregate it to SCC.

        Raises:
            ProviderError: If the consumption provider fails.
            DimensionMismatchError: If the returned vector does not cover
                every industry in ``reference``.
        """
        try:
            industry_consumption = consumption_provider.consumption(group, year)
        except Exception as exc:
            raise ProviderError(
                "consumption", year, group.label, detail=str(exc),
            ) from exc

        return self._aggregator.aggregate(
            values=industry_consumption,
            industry_to_scc=reference.industry_to_scc,
            n_sectors=reference.n_sectors,
        )

    def build(
        self,
        *,
        emissions_by_scc: np.ndarray,
        groups: Sequence[DemographicGroup],
        consumption_provider: ConsumptionProvider,
        year: int,
        reference: ReferenceData,
    ) -> DemandEmissionsResult:
        """Attribute per-sector emissions to each demographic group.

        Args:
            emissions_by_scc: Total emissions per SCC.
            groups: Non-empty aggregation set (row order of the result).
            consumption_provider: Source of per-group industry consumption.
            year: Data year for consumption queries.
            reference: Industry/SCC reference tables.

        Returns:
            DemandEmissionsResult with a len(groups) × len(scc_codes) matrix.

        Raises:
            ValueError: If ``groups`` is not a valid aggregation set.
            DimensionMismatchError: If aggregated consumption and
                ``emissions_by_scc`` disagree on the number of sectors.
            ProviderError: If any consumption query fails. No partial
                matrix is returned.
        """
        group_list = validate_group_set(groups)
        emissions_by_scc = np.asarray(emissions_by_scc, dtype=np.float64)
        if emissions_by_scc.ndim != 1:
            raise DimensionMismatchError(
                "emissions by SCC ndim", 1, emissions_by_scc.ndim,
            )

        n_sectors = len(emissions_by_scc)
        matrix = np.zeros((len(group_list), n_sectors), dtype=np.float64)

        for row, group in enumerate(group_list):
            consumption = self.consumption_by_scc(
                group=group,
                year=year,
                consumption_provider=consumption_provider,
                reference=reference,
            )
            if len(consumption) != n_sectors:
                raise DimensionMismatchError(
                    f"consumption by SCC for group '{group.label}'",
                    n_sectors,
                    len(consumption),
                )
            matrix[row, :] = consumption * emissions_by_scc
            logger.debug(
                "Group %s: attributed emissions %.4g", group.label, matrix[row].sum(),
            )

        return DemandEmissionsResult(
            matrix=matrix,
            scc_codes=list(reference.scc_codes),
            groups=group_list,
        )
