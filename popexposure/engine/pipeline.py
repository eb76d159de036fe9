"""Exposure pipeline: the single caller-facing operation.

Given a year, location scope, pollutant and demographic groups, produces:
1. the population-adjusted demographic × SCC emissions matrix, and
2. population-weighted exposure per gridded population group.

All-or-nothing: any provider or dimension failure aborts the run; no
partial result is returned.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

import numpy as np
import structlog

from popexposure.config.settings import get_settings
from popexposure.engine.demand_emissions import (
    DemandEmissionsMatrixBuilder,
    DemandEmissionsResult,
)
from popexposure.engine.errors import ProviderError
from popexposure.engine.exposure import (
    ExposureCalculator,
    ExposureObserver,
    ExposureResult,
)
from popexposure.engine.population import PopulationAdjuster
from popexposure.engine.sector_aggregation import SectorAggregator
from popexposure.models.common import (
    FinalDemandType,
    Location,
    Pollutant,
    new_uuid7,
    utc_now,
)
from popexposure.models.demographics import DemographicGroup, validate_group_set
from popexposure.models.reference import ReferenceData
from popexposure.providers.base import ProviderBundle

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


@dataclass
class PipelineRequest:
    """Input for one pipeline run."""

    year: int
    location: Location
    pollutant: Pollutant
    groups: Sequence[DemographicGroup]
    final_demand_type: FinalDemandType = FinalDemandType.ALL_DEMAND


@dataclass(frozen=True)
class PipelineResult:
    """Everything one run produced, with provenance."""

    run_id: UUID
    year: int
    location: Location
    pollutant: Pollutant
    demand_emissions: DemandEmissionsResult
    group_emission_totals: dict[str, float]
    exposure: ExposureResult
    reference_checksum: str
    created_at: datetime = field(default_factory=utc_now)


class ExposurePipeline:
    """Runs the full aggregation pipeline against a set of providers."""

    def __init__(
        self,
        *,
        reference: ReferenceData,
        providers: ProviderBundle,
        supported_years: Sequence[int] | None = None,
    ) -> None:
        self._reference = reference
        self._providers = providers
        if supported_years is None:
            supported_years = get_settings().SUPPORTED_YEARS
        self._supported_years = frozenset(supported_years)
        self._aggregator = SectorAggregator()
        self._builder = DemandEmissionsMatrixBuilder(self._aggregator)
        self._adjuster = PopulationAdjuster()
        self._calculator = ExposureCalculator()

    @property
    def reference(self) -> ReferenceData:
        return self._reference

    def run(
        self,
        request: PipelineRequest,
        *,
        observer: ExposureObserver | None = None,
    ) -> PipelineResult:
        """Execute one run.

        Raises:
            ValueError: If the year is unsupported or the group set is
                invalid. Raised before any provider is queried.
            DimensionMismatchError: If stage outputs disagree in size.
            PopulationDivisionError: If a group has zero population.
            ProviderError: If any provider query fails.
        """
        if request.year not in self._supported_years:
            raise ValueError(
                f"Year {request.year} is not supported. "
                f"Supported years: {sorted(self._supported_years)}"
            )
        groups = validate_group_set(request.groups)
        run_id = new_uuid7()
        year = request.year

        with structlog.contextvars.bound_contextvars(
            run_id=str(run_id),
            year=year,
            location=request.location.value,
            pollutant=request.pollutant.value,
        ):
            demand = self._query(
                "final_demand",
                year,
                lambda: self._providers.demand.final_demand(
                    request.final_demand_type, year, request.location,
                ),
            )
            logger.info("final_demand_loaded", industries=len(demand))

            emissions = self._query(
                "emissions",
                year,
                lambda: self._providers.emissions.emissions(
                    demand, year, request.location,
                ),
            )
            emissions_by_scc = self._aggregator.collapse_grid(
                emissions=emissions, n_sectors=self._reference.n_sectors,
            )
            logger.info(
                "emissions_collapsed",
                grid_cells=int(np.shape(emissions)[0]),
                sectors=len(emissions_by_scc),
            )

            demand_emissions = self._builder.build(
                emissions_by_scc=emissions_by_scc,
                groups=groups,
                consumption_provider=self._providers.consumption,
                year=year,
                reference=self._reference,
            )
            self._adjuster.adjust(
                demand_emissions.matrix, groups, self._providers.population, year,
            )
            group_totals = demand_emissions.row_totals()
            for label, total in group_totals.items():
                logger.info("group_emissions_adjusted", group=label, total=total)

            exposure = self._exposure(request, demand, observer)
            for name, value in exposure.exposure.items():
                logger.info("group_exposure", population=name, exposure=value)

        return PipelineResult(
            run_id=run_id,
            year=year,
            location=request.location,
            pollutant=request.pollutant,
            demand_emissions=demand_emissions,
            group_emission_totals=group_totals,
            exposure=exposure,
            reference_checksum=self._reference.checksum,
        )

    def _exposure(
        self,
        request: PipelineRequest,
        demand: np.ndarray,
        observer: ExposureObserver | None,
    ) -> ExposureResult:
        year = request.year
        population = self._providers.population
        concentration = self._query(
            "concentration",
            year,
            lambda: self._providers.concentration.concentrations(
                demand, request.pollutant, year, request.location,
            ),
        )
        names = self._query(
            "population", year, lambda: population.group_names(year),
        )

        grids: dict[str, np.ndarray] = {}
        for name in names:
            grids[name] = self._query(
                "population",
                year,
                lambda name=name: population.population_grid(year, name),
                group_label=name,
            )

        return self._calculator.compute_exposure(
            concentration=concentration,
            population_by_group=grids,
            observer=observer,
        )

    @staticmethod
    def _query(
        stage: str,
        year: int,
        call: Callable[[], Any],
        group_label: str | None = None,
    ) -> Any:
        try:
            return call()
        except ProviderError:
            raise
        except Exception as exc:
            raise ProviderError(stage, year, group_label, detail=str(exc)) from exc
