"""In-memory provider backed by precomputed arrays.

Serves curated datasets (see ``popexposure.data.dataset_loader``) and test
fixtures. Emissions and concentrations are stored as already computed for
the dataset's own final demand; the demand vector passed in is only checked
for length.
"""

from dataclasses import dataclass, field

import numpy as np

from popexposure.models.common import FinalDemandType, Location, Pollutant
from popexposure.models.demographics import DemographicGroup
from popexposure.providers.base import (
    ConcentrationProvider,
    ConsumptionProvider,
    EmissionsProvider,
    FinalDemandProvider,
    PopulationProvider,
    ProviderBundle,
)


@dataclass(frozen=True)
class StaticDataset:
    """Precomputed provider answers, keyed by query arguments."""

    final_demand: dict[tuple[int, Location, FinalDemandType], np.ndarray] = field(
        default_factory=dict,
    )
    consumption: dict[tuple[int, DemographicGroup], np.ndarray] = field(
        default_factory=dict,
    )
    emissions: dict[tuple[int, Location], np.ndarray] = field(default_factory=dict)
    concentrations: dict[tuple[int, Location, Pollutant], np.ndarray] = field(
        default_factory=dict,
    )
    population_grids: dict[int, dict[str, np.ndarray]] = field(default_factory=dict)
    population_counts: dict[tuple[int, DemographicGroup], int] = field(
        default_factory=dict,
    )


class StaticDataProvider(
    FinalDemandProvider,
    ConsumptionProvider,
    EmissionsProvider,
    ConcentrationProvider,
    PopulationProvider,
):
    """Answers every provider role from a :class:`StaticDataset`.

    Missing entries raise ``KeyError`` naming the query.
    """

    def __init__(self, dataset: StaticDataset) -> None:
        self._data = dataset

    def bundle(self) -> ProviderBundle:
        """This provider in every role."""
        return ProviderBundle(
            demand=self,
            consumption=self,
            emissions=self,
            concentration=self,
            population=self,
        )

    # -----------------------------------------------------------------
    # Demand and consumption
    # -----------------------------------------------------------------

    def final_demand(
        self,
        demand_type: FinalDemandType,
        year: int,
        location: Location,
    ) -> np.ndarray:
        key = (year, location, demand_type)
        if key not in self._data.final_demand:
            raise KeyError(f"No final demand for {demand_type}/{location} in {year}.")
        return self._data.final_demand[key].copy()

    def consumption(self, group: DemographicGroup, year: int) -> np.ndarray:
        key = (year, group)
        if key not in self._data.consumption:
            raise KeyError(f"No consumption for group '{group.label}' in {year}.")
        return self._data.consumption[key].copy()

    # -----------------------------------------------------------------
    # Spatial model
    # -----------------------------------------------------------------

    def emissions(
        self,
        demand: np.ndarray,
        year: int,
        location: Location,
    ) -> np.ndarray:
        key = (year, location)
        if key not in self._data.emissions:
            raise KeyError(f"No emissions for {location} in {year}.")
        self._check_demand(demand, year, location)
        return self._data.emissions[key].copy()

    def concentrations(
        self,
        demand: np.ndarray,
        pollutant: Pollutant,
        year: int,
        location: Location,
    ) -> np.ndarray:
        key = (year, location, pollutant)
        if key not in self._data.concentrations:
            raise KeyError(f"No {pollutant} concentrations for {location} in {year}.")
        self._check_demand(demand, year, location)
        return self._data.concentrations[key].copy()

    # -----------------------------------------------------------------
    # Population
    # -----------------------------------------------------------------

    def group_names(self, year: int) -> list[str]:
        if year not in self._data.population_grids:
            raise KeyError(f"No population grids in {year}.")
        return list(self._data.population_grids[year])

    def population_grid(self, year: int, group_name: str) -> np.ndarray:
        grids = self._data.population_grids.get(year, {})
        if group_name not in grids:
            raise KeyError(f"No population grid '{group_name}' in {year}.")
        return grids[group_name].copy()

    def population_count(self, group: DemographicGroup, year: int) -> int:
        key = (year, group)
        if key not in self._data.population_counts:
            raise KeyError(f"No population count for group '{group.label}' in {year}.")
        return self._data.population_counts[key]

    def _check_demand(self, demand: np.ndarray, year: int, location: Location) -> None:
        expected = [
            len(vec) for (y, loc, _), vec in self._data.final_demand.items()
            if y == year and loc == location
        ]
        if expected and len(demand) != expected[0]:
            raise ValueError(
                f"Demand vector has {len(demand)} industries, dataset has {expected[0]}."
            )
