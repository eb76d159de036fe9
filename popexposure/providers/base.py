"""Provider abstract interfaces: synchronous request/response queries.

Each provider answers one kind of question about a given year. The engine
never retries or times out a provider call; failures surface immediately.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np

from popexposure.models.common import FinalDemandType, Location, Pollutant
from popexposure.models.demographics import DemographicGroup


class FinalDemandProvider(ABC):
    """Final demand vector from the input-output model."""

    @abstractmethod
    def final_demand(
        self,
        demand_type: FinalDemandType,
        year: int,
        location: Location,
    ) -> np.ndarray:
        """Industry-indexed final demand for ``year`` and ``location``."""
        ...


class ConsumptionProvider(ABC):
    """Demographic consumption from the consumer expenditure model."""

    @abstractmethod
    def consumption(self, group: DemographicGroup, year: int) -> np.ndarray:
        """Total demand by industry attributable to ``group`` in ``year``."""
        ...


class EmissionsProvider(ABC):
    """Spatial emissions attributable to a demand vector."""

    @abstractmethod
    def emissions(
        self,
        demand: np.ndarray,
        year: int,
        location: Location,
    ) -> np.ndarray:
        """Emissions matrix indexed by (grid cell, SCC)."""
        ...


class ConcentrationProvider(ABC):
    """Ambient concentrations attributable to a demand vector."""

    @abstractmethod
    def concentrations(
        self,
        demand: np.ndarray,
        pollutant: Pollutant,
        year: int,
        location: Location,
    ) -> np.ndarray:
        """Concentration vector indexed by grid cell."""
        ...


class PopulationProvider(ABC):
    """Gridded and total population counts."""

    @abstractmethod
    def group_names(self, year: int) -> list[str]:
        """Names of the gridded population groups available in ``year``."""
        ...

    @abstractmethod
    def population_grid(self, year: int, group_name: str) -> np.ndarray:
        """People per grid cell for one named population group."""
        ...

    @abstractmethod
    def population_count(self, group: DemographicGroup, year: int) -> int:
        """Total population count of a demographic group."""
        ...


@dataclass(frozen=True)
class ProviderBundle:
    """All providers one pipeline run needs."""

    demand: FinalDemandProvider
    consumption: ConsumptionProvider
    emissions: EmissionsProvider
    concentration: ConcentrationProvider
    population: PopulationProvider
