"""Population-weighted exposure per population group.

exposure[g] = Σ_cells population[g][c] · concentration[c], in
person·concentration units. Sums are correctly rounded (math.fsum) so the
result does not depend on summation order.
"""

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

import numpy as np

from popexposure.engine.errors import DimensionMismatchError

logger = logging.getLogger(__name__)


class ExposureObserver(Protocol):
    """Receives the per-cell diagnostic stream of an exposure computation."""

    def on_cell(self, grid_index: int, concentration: float) -> None: ...

    def on_group_cell(
        self,
        grid_index: int,
        group: str,
        population: float,
        exposure: float,
    ) -> None: ...


class LoggingExposureObserver:
    """Writes every grid cell and group contribution to the log at DEBUG."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def on_cell(self, grid_index: int, concentration: float) -> None:
        self._log.debug("[Grid %d] [Concentration=%.2f]", grid_index, concentration)

    def on_group_cell(
        self,
        grid_index: int,
        group: str,
        population: float,
        exposure: float,
    ) -> None:
        self._log.debug(
            "[Grid %d] [Population %s] %.2f ppl --> %.2f exposure",
            grid_index, group, population, exposure,
        )


@dataclass(frozen=True)
class ExposureResult:
    """Exposure and population totals keyed by population group name."""

    exposure: dict[str, float]
    population_totals: dict[str, float]

    def per_capita(self) -> dict[str, float]:
        """Mean concentration experienced per person, by group.

        Groups with no population are left out.
        """
        result: dict[str, float] = {}
        for group, total_exposure in self.exposure.items():
            population = self.population_totals[group]
            if population == 0:
                logger.warning("Group %s has zero population; no per-capita exposure", group)
                continue
            result[group] = total_exposure / population
        return result


class ExposureCalculator:
    """Combines a concentration grid with gridded population by group."""

    def compute_exposure(
        self,
        *,
        concentration: np.ndarray,
        population_by_group: Mapping[str, np.ndarray],
        observer: ExposureObserver | None = None,
    ) -> ExposureResult:
        """Compute total exposure and total population per group.

        Args:
            concentration: Concentration per grid cell.
            population_by_group: Group name → people per grid cell.
            observer: Optional receiver of per-cell diagnostics.

        Returns:
            ExposureResult keyed by the names in ``population_by_group``,
            in the same order.

        Raises:
            DimensionMismatchError: If any population grid length differs
                from the concentration length.
        """
        concentration = np.asarray(concentration, dtype=np.float64)
        if concentration.ndim != 1:
            raise DimensionMismatchError("concentration ndim", 1, concentration.ndim)
        n_cells = len(concentration)

        grids: dict[str, np.ndarray] = {}
        for group, grid in population_by_group.items():
            grid = np.asarray(grid, dtype=np.float64)
            if grid.shape != (n_cells,):
                raise DimensionMismatchError(
                    f"population grid for '{group}'",
                    (n_cells,),
                    grid.shape,
                )
            grids[group] = grid

        exposure = {
            group: math.fsum(grid * concentration) for group, grid in grids.items()
        }
        population_totals = {group: math.fsum(grid) for group, grid in grids.items()}

        if observer is not None:
            self._notify(observer, concentration, grids)

        return ExposureResult(exposure=exposure, population_totals=population_totals)

    @staticmethod
    def _notify(
        observer: ExposureObserver,
        concentration: np.ndarray,
        grids: dict[str, np.ndarray],
    ) -> None:
        for grid_index, amount in enumerate(concentration):
            observer.on_cell(grid_index, float(amount))
            for group, grid in grids.items():
                people = float(grid[grid_index])
                observer.on_group_cell(grid_index, group, people, people * float(amount))
